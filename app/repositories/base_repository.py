# File: app/repositories/base_repository.py

from typing import Generic, TypeVar, Dict, Any, Optional, List, Type
from sqlalchemy.orm import Session
from sqlalchemy import select

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base repository class providing common data access for all entities using
    modern SQLAlchemy select() syntax.

    Repositories never commit; the calling service owns the transaction.

    Attributes:
        session (Session): The SQLAlchemy session for database operations
        model (Type[T]): The SQLAlchemy model class this repository manages
    """

    def __init__(self, session: Session, model: Optional[Type[T]] = None):
        """
        Initialize the repository with a database session and the specific model.

        Args:
            session (Session): SQLAlchemy database session
            model (Type[T]): The SQLAlchemy model class this repository manages.
                             Subclasses set it when not passed here.
        """
        self.session = session
        self.model = model

    def _get_model(self) -> Type[T]:
        """Ensures the model is set before use."""
        if self.model is None:
            raise TypeError(f"Repository model is not set for {self.__class__.__name__}")
        return self.model

    def get_by_id(self, id: str) -> Optional[T]:
        """
        Retrieve an entity by its primary key ID.

        Args:
            id (str): The primary key ID of the entity

        Returns:
            Optional[T]: The entity if found, None otherwise
        """
        model_class = self._get_model()
        stmt = select(model_class).where(getattr(model_class, "id") == id)
        return self.session.execute(stmt).scalar_one_or_none()

    def exists(self, id: str) -> bool:
        """Check whether an entity with the given ID exists."""
        model_class = self._get_model()
        stmt = select(getattr(model_class, "id")).where(getattr(model_class, "id") == id)
        return self.session.execute(stmt).first() is not None

    def list(self) -> List[T]:
        """
        Retrieve all entities in the repository's ordering.

        Returns:
            List[T]: List of entities
        """
        stmt = self._apply_ordering(select(self._get_model()))
        return list(self.session.execute(stmt).scalars().all())

    def _apply_ordering(self, stmt):
        """Hook for subclasses to impose a stable ordering."""
        return stmt

    def create(self, data: Dict[str, Any]) -> T:
        """
        Create a new entity and flush it so generated values are populated.

        Args:
            data (Dict[str, Any]): Dictionary containing entity field values

        Returns:
            T: The created entity
        """
        model_class = self._get_model()
        # Ensure only columns present in the model are passed to constructor
        model_columns = {c.name for c in model_class.__table__.columns}
        filtered_data = {k: v for k, v in data.items() if k in model_columns}

        entity = model_class(**filtered_data)
        self.session.add(entity)
        self.session.flush()
        return entity

