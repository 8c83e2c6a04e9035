# File: app/schemas/__init__.py
"""
Schemas package for the DocNotes API.

This module exports Pydantic models used for request validation,
response serialization, and data transfer throughout the application.
"""

from app.schemas.common import CamelModel, MessageResponse
from app.schemas.annotation import (
    AnnotationCreate,
    AnnotationEnvelope,
    AnnotationListResponse,
    AnnotationRead,
    AnnotationType,
    AnnotationUpdate,
    BoundingBox,
    CommentPosition,
    DrawingPosition,
    HighlightPosition,
    Point,
    Position,
)
from app.schemas.document import DocumentEnvelope, DocumentListResponse, DocumentRead
from app.schemas.user import UserListResponse, UserRead

__all__ = [
    "CamelModel", "MessageResponse",
    # Annotations
    "AnnotationCreate", "AnnotationUpdate", "AnnotationRead", "AnnotationType",
    "AnnotationEnvelope", "AnnotationListResponse",
    "Position", "CommentPosition", "HighlightPosition", "DrawingPosition",
    "BoundingBox", "Point",
    # Documents
    "DocumentRead", "DocumentEnvelope", "DocumentListResponse",
    # Users
    "UserRead", "UserListResponse",
]
