# tests/test_schemas.py
import pytest
from pydantic import ValidationError

from app.schemas.annotation import (
    AnnotationCreate,
    AnnotationType,
    AnnotationUpdate,
    CommentPosition,
    DrawingPosition,
    HighlightPosition,
)

COMMENT_POSITION = {"page": 1, "x": 0.25, "y": 0.5}
HIGHLIGHT_POSITION = {
    "page": 2,
    "boundingBoxes": [{"left": 0.1, "top": 0.2, "width": 0.3, "height": 0.05}],
}
DRAWING_POSITION = {"page": 3, "strokes": [[{"x": 0.1, "y": 0.1}, {"x": 0.2, "y": 0.25}]]}


def test_comment_position_selected_for_comment():
    annotation = AnnotationCreate(
        documentId="doc-1", type="comment", content="Check this", position=COMMENT_POSITION
    )
    assert annotation.type is AnnotationType.COMMENT
    assert isinstance(annotation.position, CommentPosition)
    assert annotation.visible_to is None


def test_highlight_and_drawing_positions():
    highlight = AnnotationCreate(documentId="doc-1", type="highlight", position=HIGHLIGHT_POSITION)
    drawing = AnnotationCreate(documentId="doc-1", type="drawing", position=DRAWING_POSITION)
    assert isinstance(highlight.position, HighlightPosition)
    assert highlight.position.bounding_boxes[0].width == 0.3
    assert isinstance(drawing.position, DrawingPosition)
    assert len(drawing.position.strokes[0]) == 2


def test_snake_case_input_is_accepted():
    annotation = AnnotationCreate(
        document_id="doc-1",
        type="highlight",
        position={"page": 1, "bounding_boxes": [{"left": 0, "top": 0, "width": 1, "height": 1}]},
        visible_to=["D1"],
    )
    assert annotation.visible_to == ["D1"]


def test_position_must_match_type():
    with pytest.raises(ValidationError):
        AnnotationCreate(documentId="doc-1", type="comment", position=HIGHLIGHT_POSITION)
    with pytest.raises(ValidationError):
        AnnotationCreate(documentId="doc-1", type="drawing", position=COMMENT_POSITION)


def test_unknown_position_fields_rejected():
    with pytest.raises(ValidationError):
        AnnotationCreate(
            documentId="doc-1",
            type="comment",
            position={**COMMENT_POSITION, "strokes": []},
        )


@pytest.mark.parametrize(
    "position",
    [
        {"page": 1, "x": 1.5, "y": 0.5},
        {"page": 1, "x": 0.5, "y": -0.1},
        {"page": 0, "x": 0.5, "y": 0.5},
    ],
)
def test_comment_coordinates_validated(position):
    with pytest.raises(ValidationError):
        AnnotationCreate(documentId="doc-1", type="comment", position=position)


def test_empty_geometry_rejected():
    with pytest.raises(ValidationError):
        AnnotationCreate(documentId="doc-1", type="highlight", position={"page": 1, "boundingBoxes": []})
    with pytest.raises(ValidationError):
        AnnotationCreate(documentId="doc-1", type="drawing", position={"page": 1, "strokes": [[]]})


def test_visible_to_normalized():
    annotation = AnnotationCreate(
        documentId="doc-1",
        type="comment",
        position=COMMENT_POSITION,
        visibleTo=[" D1", "D2", "D1"],
    )
    assert annotation.visible_to == ["D1", "D2"]


@pytest.mark.parametrize("visible_to", [[], ["  "]])
def test_visible_to_cannot_be_empty(visible_to):
    with pytest.raises(ValidationError):
        AnnotationCreate(
            documentId="doc-1", type="comment", position=COMMENT_POSITION, visibleTo=visible_to
        )
    with pytest.raises(ValidationError):
        AnnotationUpdate(visibleTo=visible_to)


def test_update_tracks_supplied_fields():
    update = AnnotationUpdate.model_validate({"content": ""})
    assert update.model_dump(exclude_unset=True) == {"content": ""}
    assert AnnotationUpdate.model_validate({}).model_dump(exclude_unset=True) == {}


def test_unknown_type_rejected():
    with pytest.raises(ValidationError):
        AnnotationCreate(documentId="doc-1", type="sticker", position=COMMENT_POSITION)
