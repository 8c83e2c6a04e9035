# File: app/services/base_service.py

from typing import TypeVar, Generic, Optional, Type, Dict, Any
from contextlib import contextmanager
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
import logging
from datetime import datetime, timezone

from app.core.exceptions import DocNotesException, DatabaseException
from app.repositories.base_repository import BaseRepository

T = TypeVar("T")
logger = logging.getLogger(__name__)


class BaseService(Generic[T]):
    """
    Base service for all DocNotes services.

    Provides common functionality including:
    - Transaction management
    - Error handling and standardization
    - Operation logging
    """

    def __init__(
            self,
            session: Session,
            repository_class: Optional[Type[BaseRepository]] = None,
            repository: Optional[BaseRepository] = None,
    ):
        """
        Initialize service with dependencies.

        Args:
            session: Database session for persistence operations
            repository_class: Repository class to instantiate (optional if repository is provided)
            repository: Repository instance (optional if repository_class is provided)
        """
        self.session = session

        # Allow either repository instance or class to be provided
        if repository is not None:
            self.repository = repository
        elif repository_class is not None:
            self.repository = repository_class(session)
        else:
            # Subclasses may initialize repository directly
            self.repository = None

    @contextmanager
    def transaction(self):
        """
        Provide a transactional scope around operations.

        Yields:
            None

        Raises:
            Exception: Any exception that occurs during transaction execution,
                transformed into a domain exception where one applies
        """
        try:
            yield
            self.session.commit()
        except DocNotesException:
            self.session.rollback()
            raise
        except Exception as e:
            self.session.rollback()
            logger.error(f"Transaction failed: {str(e)}", exc_info=True)

            transformed = self._transform_error(e)
            if transformed:
                raise transformed from e
            raise

    def _log_operation(
            self,
            operation: str,
            entity_type: str,
            entity_id: Any = None,
            user_id: Optional[str] = None,
            details: Dict[str, Any] = None,
    ) -> None:
        """
        Log an operation for auditing purposes.

        Args:
            operation: Operation name (create, update, delete, etc.)
            entity_type: Type of entity being operated on
            entity_id: Optional entity ID
            user_id: Caller performing the operation
            details: Optional operation details
        """
        log_data = {
            "operation": operation,
            "entity_type": entity_type,
            "entity_id": entity_id,
            "user_id": user_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "details": details,
        }

        logger.info(f"{operation.upper()} {entity_type} {entity_id} by {user_id}", extra=log_data)

    def _transform_error(self, error: Exception) -> Optional[DocNotesException]:
        """
        Transform generic exceptions to specific domain exceptions.

        Override this method in service subclasses to handle
        specific error cases.

        Args:
            error: The original exception

        Returns:
            Transformed domain exception, or None to re-raise original
        """
        if isinstance(error, SQLAlchemyError):
            return DatabaseException("A database error occurred")
        return None
