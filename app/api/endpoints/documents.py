# File: app/api/endpoints/documents.py
"""
Documents API endpoints for DocNotes.

Admins upload PDF files; anyone can list documents, read their metadata and
fetch their bytes. Fetching needs no identity headers because PDF renderers
load the URL directly. Byte-range requests are honoured so viewers can load
large documents incrementally.
"""

import logging
import os
from typing import List, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Header, Path, UploadFile, status
from fastapi.responses import StreamingResponse

from app.api.deps import get_document_service, require_roles
from app.core.permissions import Caller, Role
from app.schemas.document import DocumentEnvelope, DocumentListResponse
from app.services.document_service import DocumentService, FileUpload
from app.utils.byte_range import content_range

router = APIRouter()
logger = logging.getLogger(__name__)


def _upload_size(upload: UploadFile) -> int:
    """Size of an uploaded file, measured on the spooled file if unknown."""
    if upload.size is not None:
        return upload.size
    upload.file.seek(0, os.SEEK_END)
    size = upload.file.tell()
    upload.file.seek(0)
    return size


@router.post("/upload", response_model=DocumentListResponse)
def upload_documents(
    *,
    caller: Caller = Depends(require_roles(Role.ADMIN)),
    service: DocumentService = Depends(get_document_service),
    files: Optional[List[UploadFile]] = File(None, description="PDF files to upload"),
) -> DocumentListResponse:
    """
    Upload one or more documents.

    Files are stored in request order. If one fails, files stored before it
    remain available.
    """
    uploads = [
        FileUpload(
            filename=upload.filename or "",
            data=upload.file,
            size=_upload_size(upload),
            content_type=upload.content_type,
        )
        for upload in files or []
    ]
    documents = service.upload_documents(uploads, caller)
    logger.info(f"{caller.id} uploaded {len(documents)} document(s)")
    return DocumentListResponse(documents=documents)


@router.get("", response_model=DocumentListResponse)
def list_documents(
    *,
    service: DocumentService = Depends(get_document_service),
) -> DocumentListResponse:
    """List all documents, newest upload first."""
    return DocumentListResponse(documents=service.list_documents())


@router.get("/{document_id}/info", response_model=DocumentEnvelope)
def get_document_info(
    *,
    document_id: str = Path(..., description="The ID of the document"),
    service: DocumentService = Depends(get_document_service),
) -> DocumentEnvelope:
    """Get the metadata of a document."""
    return DocumentEnvelope(document=service.get_document(document_id))


@router.get(
    "/{document_id}",
    response_class=StreamingResponse,
    responses={
        status.HTTP_206_PARTIAL_CONTENT: {"description": "Requested byte range"},
        416: {"description": "Range outside the document"},
    },
)
def get_document_content(
    *,
    document_id: str = Path(..., description="The ID of the document"),
    range_header: Optional[str] = Header(None, alias="Range", description="Single byte range"),
    service: DocumentService = Depends(get_document_service),
) -> StreamingResponse:
    """
    Stream the bytes of a document.

    Returns 206 with a Content-Range header when a satisfiable Range header
    is sent.
    """
    content = service.get_document_content(document_id, range_header)

    headers = {
        "Accept-Ranges": "bytes",
        "Content-Length": str(content.length),
        "Content-Disposition": f"inline; filename*=UTF-8''{quote(content.document.filename)}",
    }
    status_code = status.HTTP_200_OK
    if content.partial:
        status_code = status.HTTP_206_PARTIAL_CONTENT
        headers["Content-Range"] = content_range(content.start, content.end, content.total_size)

    return StreamingResponse(
        content.stream,
        status_code=status_code,
        media_type=content.document.mime_type,
        headers=headers,
    )
