# File: app/services/annotation_service.py
"""
Annotation service for DocNotes.

This module provides service methods for managing annotations,
implementing the business logic for creating, retrieving, updating,
and deleting annotations under the access policy in
``app.core.permissions``.
"""
import logging
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from app.core.exceptions import EntityNotFoundException, PermissionDeniedException
from app.core.permissions import Caller, can_create, is_visible
from app.db.models.base import utcnow
from app.repositories.annotation_repository import AnnotationRepository
from app.repositories.document_repository import DocumentRepository
from app.schemas.annotation import AnnotationCreate, AnnotationRead, AnnotationUpdate
from app.services.base_service import BaseService

logger = logging.getLogger(__name__)

DEFAULT_VISIBLE_TO = ("A1", "D1", "D2")


class AnnotationService(BaseService):
    """
    Service for annotation operations.

    Annotations are comments, highlights and drawings placed on a page of a
    document. Reads are filtered per caller; edits and deletes are limited to
    the author and admins.
    """

    def __init__(self, db: Session, default_visible_to: Optional[Sequence[str]] = None):
        """
        Initialize the annotation service.

        Args:
            db: Database session
            default_visible_to: Visibility list used when a create omits one
        """
        super().__init__(session=db, repository_class=AnnotationRepository)
        self.document_repository = DocumentRepository(db)
        self.default_visible_to = list(default_visible_to or DEFAULT_VISIBLE_TO)

    def create_annotation(self, annotation_in: AnnotationCreate, caller: Caller) -> AnnotationRead:
        """
        Create a new annotation.

        Args:
            annotation_in: Validated annotation data
            caller: The requesting caller, recorded as the author

        Returns:
            Created annotation

        Raises:
            PermissionDeniedException: If the caller is read-only
            EntityNotFoundException: If the document does not exist
        """
        if not can_create(caller):
            logger.warning(f"Annotation create denied for read-only caller {caller.id}")
            raise PermissionDeniedException("Read-only users cannot create annotations")

        if not self.document_repository.exists(annotation_in.document_id):
            raise EntityNotFoundException("Document", annotation_in.document_id)

        now = utcnow()
        with self.transaction():
            annotation = self.repository.create(
                {
                    "document_id": annotation_in.document_id,
                    "created_by": caller.id,
                    "type": annotation_in.type.value,
                    "content": annotation_in.content,
                    "position": annotation_in.position.model_dump(by_alias=True),
                    "visible_to": annotation_in.visible_to or list(self.default_visible_to),
                    "created_at": now,
                    "updated_at": now,
                }
            )
            annotation_id = annotation.id

        self._log_operation(
            "create", "Annotation", annotation_id, caller.id,
            {"document_id": annotation_in.document_id, "type": annotation_in.type.value},
        )
        return AnnotationRead.model_validate(annotation)

    def list_annotations(self, document_id: str, caller: Caller) -> List[AnnotationRead]:
        """
        List the annotations of a document visible to the caller.

        Returns:
            Annotations newest first
        """
        annotations = self.repository.list_visible(document_id, caller)
        logger.debug(f"{len(annotations)} annotations of {document_id} visible to {caller.id}")
        return [AnnotationRead.model_validate(a) for a in annotations]

    def get_annotation(self, annotation_id: str, caller: Caller) -> AnnotationRead:
        """
        Get a specific annotation by ID.

        Raises:
            EntityNotFoundException: If annotation not found
            PermissionDeniedException: If the caller may not see it
        """
        annotation = self.repository.get_by_id(annotation_id)
        if not annotation:
            raise EntityNotFoundException("Annotation", annotation_id)
        if not is_visible(annotation, caller):
            logger.warning(f"Read of annotation {annotation_id} denied for {caller.id}")
            raise PermissionDeniedException("You do not have access to this annotation")
        return AnnotationRead.model_validate(annotation)

    def update_annotation(
        self, annotation_id: str, annotation_in: AnnotationUpdate, caller: Caller
    ) -> AnnotationRead:
        """
        Update the content and/or visibility of an annotation.

        Fields left out of the request (or sent as null) keep their value.

        Args:
            annotation_id: ID of the annotation to update
            annotation_in: Fields to change
            caller: The requesting caller

        Returns:
            Updated annotation

        Raises:
            EntityNotFoundException: If annotation not found
            PermissionDeniedException: If the caller is neither author nor admin
        """
        changes = annotation_in.model_dump(exclude_unset=True)
        content = changes.get("content")
        visible_to = changes.get("visible_to")

        with self.transaction():
            updated = self.repository.update_if_permitted(annotation_id, caller, content=content)
            if not updated:
                self._raise_missing_or_denied(annotation_id, caller, "edit")
            if visible_to is not None:
                self.repository.replace_visibility(annotation_id, visible_to)

        self._log_operation("update", "Annotation", annotation_id, caller.id, {"fields": sorted(
            key for key, value in changes.items() if value is not None
        )})

        annotation = self.repository.get_by_id(annotation_id)
        return AnnotationRead.model_validate(annotation)

    def delete_annotation(self, annotation_id: str, caller: Caller) -> str:
        """
        Delete an annotation permanently.

        Returns:
            Confirmation message

        Raises:
            EntityNotFoundException: If annotation not found
            PermissionDeniedException: If the caller is neither author nor admin
        """
        with self.transaction():
            deleted = self.repository.delete_if_permitted(annotation_id, caller)
            if not deleted:
                self._raise_missing_or_denied(annotation_id, caller, "delete")

        self._log_operation("delete", "Annotation", annotation_id, caller.id)
        return "Annotation deleted"

    def _raise_missing_or_denied(self, annotation_id: str, caller: Caller, action: str) -> None:
        """Explain why a conditional write touched no rows."""
        if self.repository.exists(annotation_id):
            logger.warning(f"{action.capitalize()} of annotation {annotation_id} denied for {caller.id}")
            raise PermissionDeniedException(f"Only the author or an admin can {action} this annotation")
        raise EntityNotFoundException("Annotation", annotation_id)
