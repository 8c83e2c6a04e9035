# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.core.permissions import Caller, Role
from app.db.session import Database
from app.main import create_app
from app.services.blob_store import LocalBlobStore

ADMIN = Caller(id="A1", role=Role.ADMIN)
DEFAULT_1 = Caller(id="D1", role=Role.DEFAULT)
DEFAULT_2 = Caller(id="D2", role=Role.DEFAULT)
READONLY = Caller(id="R1", role=Role.READONLY)

PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\ntrailer\n<< /Root 1 0 R >>\n%%EOF\n"


def headers_for(caller: Caller) -> dict:
    return {"X-User-Id": caller.id, "X-User-Role": caller.role.value}


@pytest.fixture()
def test_settings(tmp_path) -> Settings:
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'test_docnotes.db'}",
        BLOB_STORAGE_PATH=str(tmp_path / "blobs"),
        BLOB_CHUNK_SIZE=1024,
        MAX_UPLOAD_SIZE_MB=1,
        BACKEND_CORS_ORIGINS=["http://localhost:3000"],
        _env_file=None,
    )


@pytest.fixture()
def database(test_settings):
    db = Database(test_settings.DATABASE_URL)
    db.init()
    yield db
    db.dispose()


@pytest.fixture()
def db_session(database):
    session = database.SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def blob_store(test_settings):
    store = LocalBlobStore(test_settings.BLOB_STORAGE_PATH)
    store.initialize()
    return store


@pytest.fixture()
def app(test_settings):
    return create_app(test_settings)


@pytest.fixture()
def client(app):
    """Get a TestClient instance that reads/writes to the test database."""
    with TestClient(app) as client:
        yield client


@pytest.fixture()
def uploaded_document(client):
    response = client.post(
        "/api/documents/upload",
        headers=headers_for(ADMIN),
        files=[("files", ("report.pdf", PDF_BYTES, "application/pdf"))],
    )
    assert response.status_code == 200
    return response.json()["documents"][0]
