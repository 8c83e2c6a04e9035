# app/api/deps.py
"""
FastAPI dependencies for DocNotes.

Provides dependency functions for database sessions, caller identity,
role gating and service injection for API routes. Long-lived resources
(database, blob store, caller resolver) are created by the application
factory and read from ``app.state``.
"""

import logging
from typing import Callable, Generator, Optional, Protocol

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.exceptions import PermissionDeniedException, ValidationException
from app.core.permissions import Caller, Role, parse_role
from app.services.annotation_service import AnnotationService
from app.services.blob_store import BlobStore
from app.services.document_service import DocumentService

logger = logging.getLogger(__name__)


# --- Application resources ---
def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    Get a database session for the duration of one request.

    Yields:
        SQLAlchemy Session for database operations
    """
    yield from request.app.state.database.get_session()


def get_blob_store(request: Request) -> BlobStore:
    return request.app.state.blob_store


# --- Caller identity ---
class CallerResolver(Protocol):
    """Turns the identity a request asserts into a Caller."""

    def resolve(self, user_id: Optional[str], role: Optional[str]) -> Caller: ...


class HeaderCallerResolver:
    """
    Trusts the ``X-User-Id`` and ``X-User-Role`` headers as sent.

    Nothing is verified. With ``ENFORCE_KNOWN_USERS`` the pair must match an
    entry of the demo user directory.
    """

    def __init__(self, settings: Settings):
        self.enforce_known_users = settings.ENFORCE_KNOWN_USERS
        self.known_users = {user.id: user.role for user in settings.DEMO_USERS}

    def resolve(self, user_id: Optional[str], role: Optional[str]) -> Caller:
        """
        Build the Caller for a request.

        Raises:
            ValidationException: If a header is missing or the role is unknown
            PermissionDeniedException: If unknown users are rejected and this is one
        """
        errors = {}
        user_id = (user_id or "").strip()
        if not user_id:
            errors["x-user-id"] = ["Header is required"]
        parsed_role = parse_role(role)
        if parsed_role is None:
            allowed = ", ".join(r.value for r in Role)
            errors["x-user-role"] = [f"Header is required and must be one of: {allowed}"]
        if errors:
            raise ValidationException("Missing or invalid identity headers", errors)

        if self.enforce_known_users and self.known_users.get(user_id) != parsed_role:
            logger.warning(f"Rejected unknown caller {user_id} with role {parsed_role.value}")
            raise PermissionDeniedException("Unknown user", {"user_id": user_id})

        return Caller(id=user_id, role=parsed_role)


def get_caller_resolver(request: Request) -> CallerResolver:
    return request.app.state.caller_resolver


def get_current_caller(
    x_user_id: Optional[str] = Header(None, description="Caller user id"),
    x_user_role: Optional[str] = Header(None, description="Caller role: admin, default or readonly"),
    resolver: CallerResolver = Depends(get_caller_resolver),
) -> Caller:
    """Resolve the caller from the identity headers."""
    return resolver.resolve(x_user_id, x_user_role)


def require_roles(*roles: Role) -> Callable[..., Caller]:
    """
    Dependency factory restricting a route to the given roles.

    Runs before the request body is validated, so a disallowed role is
    rejected whatever the payload.
    """
    allowed = set(roles)

    def dependency(caller: Caller = Depends(get_current_caller)) -> Caller:
        if caller.role not in allowed:
            logger.warning(f"Role {caller.role.value} of {caller.id} not allowed here")
            raise PermissionDeniedException(
                f"Role '{caller.role.value}' is not allowed to perform this action"
            )
        return caller

    return dependency


# --- Services ---
def get_annotation_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AnnotationService:
    return AnnotationService(db, default_visible_to=settings.DEFAULT_VISIBLE_TO)


def get_document_service(
    db: Session = Depends(get_db),
    blob_store: BlobStore = Depends(get_blob_store),
    settings: Settings = Depends(get_settings),
) -> DocumentService:
    return DocumentService(
        db,
        blob_store,
        max_upload_bytes=settings.max_upload_bytes,
        chunk_size=settings.BLOB_CHUNK_SIZE,
    )
