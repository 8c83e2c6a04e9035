# File: app/db/models/annotation.py
"""
Annotation database models for DocNotes.

This module defines the SQLAlchemy ORM models for annotations and their
visibility lists.
"""

from typing import List

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    ForeignKey,
    Index,
    JSON,
)
from sqlalchemy.orm import relationship

from app.db.models.base import Base, TimestampMixin, generate_id


class Annotation(Base, TimestampMixin):
    """
    A comment, highlight or drawing placed on one page of a document.

    ``position`` holds the type-specific payload as JSON; its shape is
    validated by the API schemas before it reaches the database.
    """

    __tablename__ = "annotations"

    id = Column(String(36), primary_key=True, default=generate_id)
    # No cascade: annotations of a removed document are left in place
    document_id = Column(String(36), ForeignKey("documents.id"), nullable=False)
    created_by = Column(String(100), nullable=False)
    type = Column(String(20), nullable=False)
    content = Column(Text, nullable=False, default="")
    position = Column(JSON, nullable=False)

    # Relationships
    document = relationship("Document", back_populates="annotations")
    visibility_entries = relationship(
        "AnnotationVisibility",
        back_populates="annotation",
        order_by="AnnotationVisibility.ordinal",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )

    __table_args__ = (
        Index("ix_annotations_document_id", "document_id"),
        Index("ix_annotations_created_by", "created_by"),
    )

    @property
    def visible_to(self) -> List[str]:
        """User ids allowed to read this annotation, in the order given."""
        return [entry.principal for entry in self.visibility_entries]

    def __repr__(self):
        """String representation of the annotation."""
        return f"Annotation(id={self.id}, type={self.type}, document_id={self.document_id})"


class AnnotationVisibility(Base):
    """One entry of an annotation's ``visible_to`` list."""

    __tablename__ = "annotation_visibility"

    annotation_id = Column(
        String(36),
        ForeignKey("annotations.id", ondelete="CASCADE"),
        primary_key=True,
    )
    principal = Column(String(100), primary_key=True)
    ordinal = Column(Integer, nullable=False, default=0)

    annotation = relationship("Annotation", back_populates="visibility_entries")

    __table_args__ = (
        Index("ix_annotation_visibility_principal", "principal"),
    )

    def __repr__(self):
        return f"AnnotationVisibility(annotation_id={self.annotation_id}, principal={self.principal})"
