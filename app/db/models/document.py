# File: app/db/models/document.py
"""
Document database model for DocNotes.

A document is the metadata record of an uploaded file. The bytes themselves
live in the blob store and are referenced through ``blob_ref``.
"""

from sqlalchemy import Column, DateTime, Index, Integer, String
from sqlalchemy.orm import relationship

from app.db.models.base import Base, generate_id, utcnow


class Document(Base):
    """
    Metadata for an uploaded document.

    Records are immutable once created; there is no update or delete path.
    """

    __tablename__ = "documents"

    id = Column(String(36), primary_key=True, default=generate_id)
    filename = Column(String(255), nullable=False)
    uploaded_by = Column(String(100), nullable=False)
    upload_date = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    size = Column(Integer, nullable=False, default=0)
    mime_type = Column(String(100), nullable=False, default="application/pdf")
    blob_ref = Column(String(64), nullable=False, unique=True)
    checksum = Column(String(64), nullable=True)  # sha256 of the stored bytes

    annotations = relationship("Annotation", back_populates="document")

    __table_args__ = (
        Index("ix_documents_filename", "filename"),
        Index("ix_documents_uploaded_by", "uploaded_by"),
    )

    def __repr__(self):
        return f"Document(id={self.id}, filename={self.filename})"
