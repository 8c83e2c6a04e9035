# File: app/repositories/document_repository.py
"""
Document repository for DocNotes.

Data access for document metadata records.
"""

import logging

from sqlalchemy.orm import Session

from app.db.models.document import Document
from app.repositories.base_repository import BaseRepository

logger = logging.getLogger(__name__)


class DocumentRepository(BaseRepository[Document]):
    """Repository for document metadata. Listings are newest upload first."""

    def __init__(self, session: Session):
        super().__init__(session, Document)

    def _apply_ordering(self, stmt):
        return stmt.order_by(Document.upload_date.desc(), Document.id.desc())
