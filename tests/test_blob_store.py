# tests/test_blob_store.py
import hashlib
import io

import pytest

from app.core.exceptions import BlobNotFoundException
from app.services.blob_store import LocalBlobStore


def test_put_and_get_round_trip(blob_store):
    data = b"0123456789" * 500
    info = blob_store.put(data, {"filename": "a.pdf"})

    assert info.size == len(data)
    assert info.checksum == hashlib.sha256(data).hexdigest()
    assert blob_store.exists(info.id)
    assert b"".join(blob_store.get(info.id, chunk_size=1024)) == data
    assert blob_store.get_metadata(info.id)["filename"] == "a.pdf"


def test_put_from_file_object(blob_store):
    data = b"x" * 200_000
    info = blob_store.put(io.BytesIO(data))
    assert blob_store.size(info.id) == len(data)


def test_get_range(blob_store):
    info = blob_store.put(b"abcdefghij")
    assert b"".join(blob_store.get(info.id, start=2, end=5, chunk_size=2)) == b"cdef"


def test_blobs_are_sharded(blob_store):
    info = blob_store.put(b"data")
    path = blob_store.base_path / info.id[:2] / info.id[2:4] / f"{info.id}.blob"
    assert path.is_file()


def test_missing_blob_raises_before_streaming(blob_store):
    with pytest.raises(BlobNotFoundException):
        blob_store.get("0" * 32)
    with pytest.raises(BlobNotFoundException):
        blob_store.get("../../etc/passwd")


def test_delete(blob_store):
    info = blob_store.put(b"bytes")
    assert blob_store.delete(info.id) is True
    assert not blob_store.exists(info.id)
    assert blob_store.delete(info.id) is False


def test_initialize_creates_directory(tmp_path):
    store = LocalBlobStore(tmp_path / "nested" / "blobs")
    store.initialize()
    assert (tmp_path / "nested" / "blobs").is_dir()
