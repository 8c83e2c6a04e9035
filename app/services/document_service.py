# File: app/services/document_service.py
"""
Document service for DocNotes.

Uploads write the bytes to the blob store first and the metadata row second.
When the metadata write fails the blob just written is removed again, so a
failed upload never leaves an unreferenced blob behind.
"""

import logging
import mimetypes
import os
from dataclasses import dataclass
from typing import BinaryIO, Iterator, List, Optional, Union

from sqlalchemy.orm import Session

from app.core.exceptions import (
    EntityNotFoundException,
    PayloadTooLargeException,
    PermissionDeniedException,
    StorageException,
    ValidationException,
)
from app.core.permissions import Caller, can_upload
from app.db.models.base import utcnow
from app.repositories.document_repository import DocumentRepository
from app.schemas.document import DocumentRead
from app.services.base_service import BaseService
from app.services.blob_store import BlobStore, DEFAULT_CHUNK_SIZE
from app.utils.byte_range import parse_range_header

logger = logging.getLogger(__name__)

FALLBACK_MIME_TYPE = "application/pdf"


@dataclass
class FileUpload:
    """One file of a multipart upload."""

    filename: str
    data: Union[bytes, BinaryIO]
    size: int
    content_type: Optional[str] = None


@dataclass
class DocumentContent:
    """Bytes of a document ready to be streamed, possibly a partial range."""

    document: DocumentRead
    stream: Iterator[bytes]
    start: int
    end: int
    total_size: int
    partial: bool = False

    @property
    def length(self) -> int:
        return self.end - self.start + 1 if self.total_size else 0


def resolve_mime_type(filename: str, content_type: Optional[str]) -> str:
    """Declared type, else a guess from the filename, else PDF."""
    if content_type:
        return content_type
    guessed, _ = mimetypes.guess_type(filename)
    return guessed or FALLBACK_MIME_TYPE


class DocumentService(BaseService):
    """
    Service for document upload and retrieval.
    """

    def __init__(
        self,
        db: Session,
        blob_store: BlobStore,
        max_upload_bytes: Optional[int] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        """
        Initialize the document service.

        Args:
            db: Database session
            blob_store: Store holding the document bytes
            max_upload_bytes: Per-file size limit, None for unlimited
            chunk_size: Size of streamed chunks
        """
        super().__init__(session=db, repository_class=DocumentRepository)
        self.blob_store = blob_store
        self.max_upload_bytes = max_upload_bytes
        self.chunk_size = chunk_size

    def upload_documents(self, files: List[FileUpload], caller: Caller) -> List[DocumentRead]:
        """
        Store uploaded files and create their metadata records.

        Files are handled one after another in request order. Files completed
        before a failure stay stored.

        Args:
            files: Uploaded files
            caller: The requesting caller

        Returns:
            Metadata of the stored documents, in request order

        Raises:
            PermissionDeniedException: If the caller is not an admin
            ValidationException: If no files were supplied
            PayloadTooLargeException: If a file exceeds the size limit
            StorageException: If storing a file or its metadata fails
        """
        if not can_upload(caller):
            logger.warning(f"Upload denied for {caller.id} with role {caller.role.value}")
            raise PermissionDeniedException("Only admins can upload documents")

        if not files:
            raise ValidationException("No files uploaded", {"files": ["At least one file is required"]})

        if self.max_upload_bytes is not None:
            for upload in files:
                if upload.size > self.max_upload_bytes:
                    raise PayloadTooLargeException(upload.filename, self.max_upload_bytes)

        documents = []
        for upload in files:
            documents.append(self._store_one(upload, caller))
        return documents

    def _store_one(self, upload: FileUpload, caller: Caller) -> DocumentRead:
        filename = os.path.basename(upload.filename or "") or "untitled.pdf"
        mime_type = resolve_mime_type(filename, upload.content_type)

        info = self.blob_store.put(
            upload.data,
            metadata={"filename": filename, "content_type": mime_type, "uploaded_by": caller.id},
        )

        try:
            with self.transaction():
                document = self.repository.create(
                    {
                        "filename": filename,
                        "uploaded_by": caller.id,
                        "upload_date": utcnow(),
                        "size": info.size,
                        "mime_type": mime_type,
                        "blob_ref": info.id,
                        "checksum": info.checksum,
                    }
                )
        except Exception as e:
            logger.error(f"Metadata write failed for {filename}; removing blob {info.id}", exc_info=True)
            try:
                self.blob_store.delete(info.id)
            except StorageException:
                logger.error(f"Compensating delete of blob {info.id} failed", exc_info=True)
            raise StorageException("Failed to save document") from e

        self._log_operation("create", "Document", document.id, caller.id, {"filename": filename, "size": info.size})
        return DocumentRead.model_validate(document)

    def list_documents(self) -> List[DocumentRead]:
        """All documents, newest upload first."""
        return [DocumentRead.model_validate(d) for d in self.repository.list()]

    def get_document(self, document_id: str) -> DocumentRead:
        """
        Get the metadata of one document.

        Raises:
            EntityNotFoundException: If the document does not exist
        """
        document = self.repository.get_by_id(document_id)
        if not document:
            raise EntityNotFoundException("Document", document_id)
        return DocumentRead.model_validate(document)

    def get_document_content(self, document_id: str, range_header: Optional[str] = None) -> DocumentContent:
        """
        Open the bytes of a document for streaming.

        Args:
            document_id: ID of the document
            range_header: Raw HTTP Range header, if any

        Returns:
            DocumentContent with a chunk iterator

        Raises:
            EntityNotFoundException: If the document or its blob is missing
            RangeNotSatisfiableException: If the range lies outside the content
        """
        document = self.get_document(document_id)
        total_size = self.blob_store.size(document.blob_ref)

        byte_range = parse_range_header(range_header, total_size)
        if byte_range is None:
            start, end, partial = 0, total_size - 1, False
        else:
            (start, end), partial = byte_range, True

        if total_size == 0:
            stream: Iterator[bytes] = iter(())
        else:
            stream = self.blob_store.get(document.blob_ref, start, end, self.chunk_size)

        return DocumentContent(
            document=document,
            stream=stream,
            start=start,
            end=end,
            total_size=total_size,
            partial=partial,
        )
