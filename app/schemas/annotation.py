# File: app/schemas/annotation.py
"""
Annotation schema definitions for DocNotes.

This module defines Pydantic models for annotation data validation,
serialization, and documentation. The ``position`` payload is a union of
three shapes; which one is allowed depends on the annotation ``type``.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Dict, List, Optional, Type, Union

from pydantic import ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from app.schemas.common import CamelModel, ensure_utc

# Coordinates are fractions of the rendered page size
Fraction = Annotated[float, Field(ge=0.0, le=1.0)]
PageNumber = Annotated[int, Field(ge=1, description="1-based page number")]


class AnnotationType(str, Enum):
    """Kinds of annotation markup."""

    COMMENT = "comment"
    HIGHLIGHT = "highlight"
    DRAWING = "drawing"


class PositionModel(CamelModel):
    """Base for position payloads; unknown fields are rejected."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        extra="forbid",
    )


class Point(PositionModel):
    x: Fraction
    y: Fraction


class BoundingBox(PositionModel):
    left: Fraction
    top: Fraction
    width: Fraction
    height: Fraction


class CommentPosition(PositionModel):
    """Anchor point of a comment marker."""

    page: PageNumber
    x: Fraction
    y: Fraction


class HighlightPosition(PositionModel):
    """Rectangles covering the highlighted text, in reading order."""

    page: PageNumber
    bounding_boxes: List[BoundingBox] = Field(..., min_length=1)


class DrawingPosition(PositionModel):
    """Freehand strokes, each an ordered list of points."""

    page: PageNumber
    strokes: List[List[Point]] = Field(..., min_length=1)

    @field_validator("strokes")
    @classmethod
    def validate_strokes(cls, v: List[List[Point]]) -> List[List[Point]]:
        if any(len(stroke) == 0 for stroke in v):
            raise ValueError("Each stroke must contain at least one point")
        return v


Position = Union[CommentPosition, HighlightPosition, DrawingPosition]

POSITION_MODELS: Dict[AnnotationType, Type[PositionModel]] = {
    AnnotationType.COMMENT: CommentPosition,
    AnnotationType.HIGHLIGHT: HighlightPosition,
    AnnotationType.DRAWING: DrawingPosition,
}


def normalize_visible_to(v: Optional[List[str]]) -> Optional[List[str]]:
    """Strip entries and drop duplicates, keeping the first occurrence."""
    if v is None:
        return None
    result: List[str] = []
    for entry in v:
        token = entry.strip()
        if not token:
            raise ValueError("visibleTo entries must not be blank")
        if token not in result:
            result.append(token)
    if not result:
        raise ValueError("visibleTo must contain at least one user id")
    return result


class AnnotationCreate(CamelModel):
    """Schema for creating a new annotation."""

    document_id: str = Field(..., min_length=1, description="Document being annotated")
    type: AnnotationType
    content: str = Field("", description="Comment text or highlighted text")
    position: Position
    visible_to: Optional[List[str]] = Field(
        None, description="User ids allowed to read the annotation"
    )

    @field_validator("visible_to")
    @classmethod
    def validate_visible_to(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return normalize_visible_to(v)

    @model_validator(mode="after")
    def check_position_matches_type(self) -> "AnnotationCreate":
        expected = POSITION_MODELS[self.type]
        if not isinstance(self.position, expected):
            raise ValueError(
                f"position does not match annotation type '{self.type.value}'"
            )
        return self


class AnnotationUpdate(CamelModel):
    """
    Schema for updating an annotation.

    Only ``content`` and ``visibleTo`` can change. Fields that are absent or
    null keep their stored value; an empty string clears the content.
    """

    content: Optional[str] = Field(None, description="Updated annotation content")
    visible_to: Optional[List[str]] = Field(None, description="Updated visibility list")

    @field_validator("visible_to")
    @classmethod
    def validate_visible_to(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return normalize_visible_to(v)


class AnnotationRead(CamelModel):
    """Schema for annotation responses."""

    id: str
    document_id: str
    created_by: str
    type: AnnotationType
    content: str
    position: Position
    visible_to: List[str]
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def attach_timezone(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class AnnotationEnvelope(CamelModel):
    annotation: AnnotationRead


class AnnotationListResponse(CamelModel):
    annotations: List[AnnotationRead]
