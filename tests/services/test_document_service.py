# tests/services/test_document_service.py
import pytest
from sqlalchemy.exc import OperationalError

from app.core.exceptions import (
    EntityNotFoundException,
    PayloadTooLargeException,
    PermissionDeniedException,
    StorageException,
    ValidationException,
)
from app.services.document_service import DocumentService, FileUpload, resolve_mime_type

from tests.conftest import ADMIN, DEFAULT_1, PDF_BYTES


@pytest.fixture()
def service(db_session, blob_store):
    return DocumentService(db_session, blob_store, max_upload_bytes=1024, chunk_size=16)


def upload(name="a.pdf", data=PDF_BYTES, content_type="application/pdf"):
    return FileUpload(filename=name, data=data, size=len(data), content_type=content_type)


def stored_blobs(blob_store):
    return list(blob_store.base_path.rglob("*.blob"))


def test_upload_and_fetch_round_trip(service):
    [document] = service.upload_documents([upload()], ADMIN)

    assert document.uploaded_by == "A1"
    assert document.size == len(PDF_BYTES)
    assert document.mime_type == "application/pdf"

    content = service.get_document_content(document.id)
    assert not content.partial
    assert b"".join(content.stream) == PDF_BYTES


def test_upload_keeps_request_order(service):
    documents = service.upload_documents([upload("first.pdf"), upload("second.pdf")], ADMIN)
    assert [d.filename for d in documents] == ["first.pdf", "second.pdf"]
    assert [d.filename for d in service.list_documents()][0] == "second.pdf"


def test_upload_requires_admin(service, blob_store):
    with pytest.raises(PermissionDeniedException):
        service.upload_documents([upload()], DEFAULT_1)
    assert stored_blobs(blob_store) == []


def test_upload_requires_files(service):
    with pytest.raises(ValidationException):
        service.upload_documents([], ADMIN)


def test_oversized_file_rejected_before_writing(service, blob_store):
    big = b"x" * 2048
    with pytest.raises(PayloadTooLargeException):
        service.upload_documents([upload(), upload("big.pdf", big)], ADMIN)
    assert stored_blobs(blob_store) == []


def test_failed_metadata_write_removes_blob(service, blob_store, monkeypatch):
    def failing_create(data):
        raise OperationalError("INSERT", {}, Exception("disk full"))

    monkeypatch.setattr(service.repository, "create", failing_create)

    with pytest.raises(StorageException):
        service.upload_documents([upload()], ADMIN)
    assert stored_blobs(blob_store) == []


def test_range_fetch(service):
    [document] = service.upload_documents([upload()], ADMIN)

    content = service.get_document_content(document.id, "bytes=5-14")
    assert content.partial
    assert (content.start, content.end, content.total_size) == (5, 14, len(PDF_BYTES))
    assert b"".join(content.stream) == PDF_BYTES[5:15]


def test_missing_document_and_blob(service, blob_store):
    with pytest.raises(EntityNotFoundException):
        service.get_document("missing")

    [document] = service.upload_documents([upload()], ADMIN)
    blob_store.delete(document.blob_ref)
    with pytest.raises(EntityNotFoundException):
        service.get_document_content(document.id)


def test_resolve_mime_type():
    assert resolve_mime_type("a.pdf", "application/x-custom") == "application/x-custom"
    assert resolve_mime_type("notes.txt", None) == "text/plain"
    assert resolve_mime_type("no_extension", None) == "application/pdf"
