# File: app/repositories/annotation_repository.py
"""
Annotation repository for DocNotes.

This module provides database access methods for annotation data. The
visibility and ownership filters here are the SQL form of the predicates in
``app.core.permissions``; keep the two in step.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, exists, insert, or_, select, update
from sqlalchemy.orm import Session

from app.core.permissions import Caller
from app.db.models.annotation import Annotation, AnnotationVisibility
from app.db.models.base import utcnow
from app.repositories.base_repository import BaseRepository

logger = logging.getLogger(__name__)


class AnnotationRepository(BaseRepository[Annotation]):
    """
    Repository for annotation operations.

    Edits and deletes are issued as single conditional statements so that
    the ownership check and the write happen atomically. They return the
    number of affected rows; zero means the row is missing or the caller is
    not allowed to touch it.
    """

    def __init__(self, session: Session):
        """
        Initialize the AnnotationRepository.

        Args:
            session: SQLAlchemy database session
        """
        super().__init__(session, Annotation)

    def _apply_ordering(self, stmt):
        return stmt.order_by(Annotation.created_at.desc(), Annotation.id.desc())

    def create(self, data: Dict[str, Any]) -> Annotation:
        """
        Create a new annotation together with its visibility entries.

        Args:
            data: Column values plus ``visible_to`` (ordered list of user ids)

        Returns:
            Created annotation object
        """
        visible_to = data.pop("visible_to", [])
        annotation = Annotation(**data)
        annotation.visibility_entries = [
            AnnotationVisibility(principal=principal, ordinal=index)
            for index, principal in enumerate(visible_to)
        ]
        self.session.add(annotation)
        self.session.flush()
        logger.debug(f"Flushed annotation {annotation.id} with {len(visible_to)} visibility entries")
        return annotation

    def list_visible(self, document_id: str, caller: Caller) -> List[Annotation]:
        """
        List the annotations of a document that the caller may read.

        Args:
            document_id: Document whose annotations to list
            caller: The requesting caller

        Returns:
            Annotations newest first, ties broken by id descending
        """
        listed = exists().where(
            AnnotationVisibility.annotation_id == Annotation.id,
            AnnotationVisibility.principal == caller.id,
        )
        if caller.is_readonly:
            visible = listed
        else:
            visible = or_(listed, Annotation.created_by == caller.id)

        stmt = select(Annotation).where(Annotation.document_id == document_id, visible)
        stmt = self._apply_ordering(stmt)
        return list(self.session.execute(stmt).scalars().all())

    def _owned_by(self, stmt, caller: Caller):
        """Restrict a statement to rows the caller may mutate."""
        if caller.is_admin:
            return stmt
        return stmt.where(Annotation.created_by == caller.id)

    def update_if_permitted(
        self, annotation_id: str, caller: Caller, content: Optional[str] = None
    ) -> int:
        """
        Touch ``updated_at`` (and set ``content`` when given) if the caller
        is the author or an admin.

        Returns:
            Number of rows updated (0 or 1)
        """
        values: Dict[str, Any] = {"updated_at": utcnow()}
        if content is not None:
            values["content"] = content

        stmt = update(Annotation).where(Annotation.id == annotation_id)
        stmt = self._owned_by(stmt, caller).values(**values)
        result = self.session.execute(stmt.execution_options(synchronize_session=False))
        return result.rowcount

    def replace_visibility(self, annotation_id: str, visible_to: List[str]) -> None:
        """Swap the visibility list of an annotation for a new one."""
        self.session.execute(
            delete(AnnotationVisibility).where(AnnotationVisibility.annotation_id == annotation_id)
        )
        self.session.execute(
            insert(AnnotationVisibility),
            [
                {"annotation_id": annotation_id, "principal": principal, "ordinal": index}
                for index, principal in enumerate(visible_to)
            ],
        )

    def delete_if_permitted(self, annotation_id: str, caller: Caller) -> int:
        """
        Delete an annotation if the caller is the author or an admin.

        Returns:
            Number of rows deleted (0 or 1)
        """
        stmt = self._owned_by(delete(Annotation).where(Annotation.id == annotation_id), caller)
        result = self.session.execute(stmt.execution_options(synchronize_session=False))
        if result.rowcount:
            # Backends without ON DELETE CASCADE still lose the child rows
            self.session.execute(
                delete(AnnotationVisibility).where(
                    AnnotationVisibility.annotation_id == annotation_id
                )
            )
        return result.rowcount
