# File: app/schemas/document.py
"""
Document schema definitions for DocNotes.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, field_validator

from app.schemas.common import CamelModel, ensure_utc


class DocumentRead(CamelModel):
    """Metadata of an uploaded document."""

    id: str
    filename: str
    uploaded_by: str
    upload_date: datetime
    size: int = Field(..., ge=0, description="Size in bytes")
    mime_type: str
    blob_ref: str
    checksum: Optional[str] = None

    @field_validator("upload_date")
    @classmethod
    def attach_timezone(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class DocumentEnvelope(CamelModel):
    document: DocumentRead


class DocumentListResponse(CamelModel):
    documents: List[DocumentRead]
