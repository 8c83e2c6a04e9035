# File: app/api/endpoints/annotations.py
"""
Annotations API endpoints for DocNotes.

Annotations are comments, highlights and freehand drawings placed on a page
of a document. Every read is filtered to what the caller may see:

- Creating requires the admin or default role
- Listing and reading return only annotations visible to the caller
- Editing and deleting are limited to the author and admins

The caller is identified by the ``X-User-Id`` and ``X-User-Role`` headers.
"""

from fastapi import APIRouter, Depends, Path

from app.api.deps import get_annotation_service, get_current_caller, require_roles
from app.core.permissions import Caller, Role
from app.schemas.annotation import (
    AnnotationCreate,
    AnnotationEnvelope,
    AnnotationListResponse,
    AnnotationUpdate,
)
from app.schemas.common import MessageResponse
from app.services.annotation_service import AnnotationService

router = APIRouter()


@router.post("", response_model=AnnotationEnvelope)
def create_annotation(
        *,
        caller: Caller = Depends(require_roles(Role.ADMIN, Role.DEFAULT)),
        annotation_in: AnnotationCreate,
        service: AnnotationService = Depends(get_annotation_service),
) -> AnnotationEnvelope:
    """
    Create a new annotation.

    The caller becomes the author. Without ``visibleTo`` the configured
    default visibility list is used.
    """
    return AnnotationEnvelope(annotation=service.create_annotation(annotation_in, caller))


@router.get("/single/{annotation_id}", response_model=AnnotationEnvelope)
def get_annotation(
        *,
        annotation_id: str = Path(..., description="The ID of the annotation"),
        caller: Caller = Depends(get_current_caller),
        service: AnnotationService = Depends(get_annotation_service),
) -> AnnotationEnvelope:
    """Get a specific annotation, if the caller may see it."""
    return AnnotationEnvelope(annotation=service.get_annotation(annotation_id, caller))


@router.get("/{document_id}", response_model=AnnotationListResponse)
def list_annotations(
        *,
        document_id: str = Path(..., description="The ID of the document"),
        caller: Caller = Depends(get_current_caller),
        service: AnnotationService = Depends(get_annotation_service),
) -> AnnotationListResponse:
    """List the annotations of a document visible to the caller, newest first."""
    return AnnotationListResponse(annotations=service.list_annotations(document_id, caller))


@router.put("/{annotation_id}", response_model=AnnotationEnvelope)
def update_annotation(
        *,
        annotation_id: str = Path(..., description="The ID of the annotation"),
        annotation_in: AnnotationUpdate,
        caller: Caller = Depends(get_current_caller),
        service: AnnotationService = Depends(get_annotation_service),
) -> AnnotationEnvelope:
    """
    Update an annotation's content and/or visibility list.

    Fields that are omitted or null keep their current value.
    """
    return AnnotationEnvelope(
        annotation=service.update_annotation(annotation_id, annotation_in, caller)
    )


@router.delete("/{annotation_id}", response_model=MessageResponse)
def delete_annotation(
        *,
        annotation_id: str = Path(..., description="The ID of the annotation"),
        caller: Caller = Depends(get_current_caller),
        service: AnnotationService = Depends(get_annotation_service),
) -> MessageResponse:
    """Delete an annotation permanently."""
    return MessageResponse(message=service.delete_annotation(annotation_id, caller))
