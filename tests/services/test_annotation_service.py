# tests/services/test_annotation_service.py
import pytest

from app.core.exceptions import EntityNotFoundException, PermissionDeniedException
from app.repositories.document_repository import DocumentRepository
from app.schemas.annotation import AnnotationCreate, AnnotationUpdate
from app.services.annotation_service import AnnotationService

from tests.conftest import ADMIN, DEFAULT_1, DEFAULT_2, READONLY


@pytest.fixture()
def document_id(db_session):
    document = DocumentRepository(db_session).create(
        {"filename": "handbook.pdf", "uploaded_by": "A1", "size": 10, "blob_ref": "ab" * 16}
    )
    db_session.commit()
    return document.id


@pytest.fixture()
def service(db_session):
    return AnnotationService(db_session, default_visible_to=["A1", "D1", "D2"])


def comment(document_id, **overrides):
    data = {
        "documentId": document_id,
        "type": "comment",
        "content": "Looks wrong",
        "position": {"page": 1, "x": 0.4, "y": 0.6},
    }
    data.update(overrides)
    return AnnotationCreate.model_validate(data)


def test_create_stamps_author_and_default_visibility(service, document_id):
    annotation = service.create_annotation(comment(document_id), DEFAULT_1)

    assert annotation.created_by == "D1"
    assert annotation.visible_to == ["A1", "D1", "D2"]
    assert annotation.created_at == annotation.updated_at
    assert annotation.position.x == 0.4


def test_readonly_cannot_create(service, document_id):
    with pytest.raises(PermissionDeniedException):
        service.create_annotation(comment(document_id), READONLY)


def test_create_requires_existing_document(service):
    with pytest.raises(EntityNotFoundException):
        service.create_annotation(comment("missing-document"), ADMIN)


def test_private_annotation_filtered_from_others(service, document_id):
    private = service.create_annotation(comment(document_id, visibleTo=["D1"]), DEFAULT_1)

    assert [a.id for a in service.list_annotations(document_id, DEFAULT_1)] == [private.id]
    assert service.list_annotations(document_id, DEFAULT_2) == []
    assert service.list_annotations(document_id, ADMIN) == []
    with pytest.raises(PermissionDeniedException):
        service.get_annotation(private.id, DEFAULT_2)


def test_readonly_sees_only_listed(service, document_id):
    listed = service.create_annotation(comment(document_id, visibleTo=["R1", "D1"]), DEFAULT_1)
    service.create_annotation(comment(document_id), DEFAULT_1)

    visible = service.list_annotations(document_id, READONLY)
    assert [a.id for a in visible] == [listed.id]


def test_list_is_newest_first_and_stable(service, document_id):
    created = [service.create_annotation(comment(document_id, content=str(i)), ADMIN) for i in range(3)]

    first = service.list_annotations(document_id, ADMIN)
    second = service.list_annotations(document_id, ADMIN)
    assert [a.id for a in first] == [a.id for a in reversed(created)]
    assert [a.model_dump() for a in first] == [a.model_dump() for a in second]


def test_edit_content_only_keeps_other_fields(service, document_id):
    original = service.create_annotation(comment(document_id, visibleTo=["D1", "D2"]), DEFAULT_1)

    updated = service.update_annotation(
        original.id, AnnotationUpdate.model_validate({"content": "Fixed"}), DEFAULT_1
    )

    assert updated.content == "Fixed"
    assert updated.visible_to == original.visible_to
    assert updated.type == original.type
    assert updated.position == original.position
    assert updated.created_by == original.created_by
    assert updated.created_at == original.created_at
    assert updated.updated_at > original.updated_at


def test_edit_empty_string_clears_and_null_keeps(service, document_id):
    original = service.create_annotation(comment(document_id), DEFAULT_1)

    kept = service.update_annotation(
        original.id, AnnotationUpdate.model_validate({"content": None}), DEFAULT_1
    )
    assert kept.content == "Looks wrong"

    cleared = service.update_annotation(
        original.id, AnnotationUpdate.model_validate({"content": ""}), DEFAULT_1
    )
    assert cleared.content == ""


def test_edit_visibility(service, document_id):
    original = service.create_annotation(comment(document_id), DEFAULT_1)

    updated = service.update_annotation(
        original.id, AnnotationUpdate.model_validate({"visibleTo": ["D1", "R1"]}), ADMIN
    )

    assert updated.visible_to == ["D1", "R1"]
    assert updated.content == "Looks wrong"
    assert [a.id for a in service.list_annotations(document_id, READONLY)] == [original.id]


def test_edit_by_non_owner_denied(service, document_id):
    original = service.create_annotation(comment(document_id), DEFAULT_1)

    with pytest.raises(PermissionDeniedException):
        service.update_annotation(original.id, AnnotationUpdate(content="Hijack"), DEFAULT_2)
    assert service.get_annotation(original.id, DEFAULT_1).content == "Looks wrong"


def test_edit_missing_annotation(service):
    with pytest.raises(EntityNotFoundException):
        service.update_annotation("missing", AnnotationUpdate(content="x"), ADMIN)


def test_delete(service, document_id):
    annotation = service.create_annotation(comment(document_id), DEFAULT_1)

    with pytest.raises(PermissionDeniedException):
        service.delete_annotation(annotation.id, DEFAULT_2)

    assert service.delete_annotation(annotation.id, ADMIN) == "Annotation deleted"
    with pytest.raises(EntityNotFoundException):
        service.get_annotation(annotation.id, DEFAULT_1)
    assert service.list_annotations(document_id, DEFAULT_1) == []
    with pytest.raises(EntityNotFoundException):
        service.delete_annotation(annotation.id, ADMIN)
