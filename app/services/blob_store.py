# File: app/services/blob_store.py
"""
Blob storage for uploaded document bytes.

The blob store is opaque binary storage keyed by an identifier it generates.
``LocalBlobStore`` keeps blobs on the filesystem in a sharded directory tree
with a JSON sidecar holding the metadata supplied at write time.
"""

import hashlib
import json
import logging
import os
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, BinaryIO, Dict, Iterator, Optional, Union

from app.core.exceptions import BlobNotFoundException, FileStorageException

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024


@dataclass
class BlobInfo:
    """Result of a successful write."""

    id: str
    size: int
    checksum: str
    metadata: Dict[str, Any] = field(default_factory=dict)


class BlobStore(ABC):
    """Interface of the binary store behind documents."""

    @abstractmethod
    def put(self, data: Union[bytes, BinaryIO], metadata: Optional[Dict[str, Any]] = None) -> BlobInfo:
        """Store bytes and return the generated blob id with size and checksum."""

    @abstractmethod
    def get(
        self,
        blob_id: str,
        start: int = 0,
        end: Optional[int] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> Iterator[bytes]:
        """
        Stream the bytes of a blob, optionally restricted to ``start..end``
        (inclusive). Raises BlobNotFoundException before yielding anything
        when the blob is missing.
        """

    @abstractmethod
    def size(self, blob_id: str) -> int:
        """Size of a stored blob in bytes."""

    @abstractmethod
    def exists(self, blob_id: str) -> bool:
        """Whether a blob is stored under this id."""

    @abstractmethod
    def delete(self, blob_id: str) -> bool:
        """Remove a blob. Returns False if nothing was stored under the id."""

    def initialize(self) -> None:
        """Prepare the backing storage. Called once at application startup."""


class LocalBlobStore(BlobStore):
    """
    Filesystem blob store.

    Blobs live at ``<base>/<id[0:2]>/<id[2:4]>/<id>.blob`` next to a
    ``<id>.json`` metadata sidecar.
    """

    def __init__(self, base_path: Union[str, Path]):
        """
        Args:
            base_path: Root directory for blob storage
        """
        self.base_path = Path(base_path)

    def initialize(self) -> None:
        os.makedirs(self.base_path, exist_ok=True)
        logger.info(f"Blob storage ready at {self.base_path}")

    def _get_storage_path(self, blob_id: str) -> Path:
        """
        Generate the storage path for a blob.

        Raises:
            BlobNotFoundException: If the id cannot be a blob id
        """
        # Ids are generated here; anything else cannot name a stored blob
        if not blob_id or not all(c in "0123456789abcdef" for c in blob_id):
            raise BlobNotFoundException(blob_id)
        dir1, dir2 = blob_id[:2], blob_id[2:4]
        return self.base_path / dir1 / dir2 / f"{blob_id}.blob"

    def _metadata_path(self, blob_id: str) -> Path:
        return self._get_storage_path(blob_id).with_suffix(".json")

    def put(self, data: Union[bytes, BinaryIO], metadata: Optional[Dict[str, Any]] = None) -> BlobInfo:
        """
        Store a blob and its metadata.

        Args:
            data: Binary content or a readable file-like object
            metadata: Extra values to record in the sidecar

        Returns:
            BlobInfo for the stored blob

        Raises:
            FileStorageException: If writing fails
        """
        blob_id = uuid.uuid4().hex
        storage_path = self._get_storage_path(blob_id)
        temp_path = storage_path.with_suffix(".part")
        hasher = hashlib.sha256()
        size = 0

        try:
            os.makedirs(storage_path.parent, exist_ok=True)
            with open(temp_path, "wb") as f:
                if isinstance(data, (bytes, bytearray)):
                    f.write(data)
                    hasher.update(data)
                    size = len(data)
                else:
                    while True:
                        chunk = data.read(DEFAULT_CHUNK_SIZE)
                        if not chunk:
                            break
                        f.write(chunk)
                        hasher.update(chunk)
                        size += len(chunk)
            os.replace(temp_path, storage_path)

            info = BlobInfo(
                id=blob_id,
                size=size,
                checksum=hasher.hexdigest(),
                metadata=dict(metadata or {}),
            )
            sidecar = {
                **info.metadata,
                "size": info.size,
                "checksum": info.checksum,
                "stored_at": datetime.now(timezone.utc).isoformat(),
            }
            with open(self._metadata_path(blob_id), "w", encoding="utf-8") as f:
                json.dump(sidecar, f)
        except OSError as e:
            logger.error(f"Failed to store blob {blob_id}: {str(e)}", exc_info=True)
            for path in (temp_path, storage_path, self._metadata_path(blob_id)):
                if path.exists():
                    path.unlink()
            raise FileStorageException(
                "Failed to store file", blob_id=blob_id, operation="put"
            ) from e

        logger.debug(f"Stored blob {blob_id} ({size} bytes)")
        return info

    def get(
        self,
        blob_id: str,
        start: int = 0,
        end: Optional[int] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> Iterator[bytes]:
        storage_path = self._get_storage_path(blob_id)
        if not storage_path.is_file():
            raise BlobNotFoundException(blob_id)
        if end is None:
            end = storage_path.stat().st_size - 1
        return self._read_chunks(storage_path, start, end, chunk_size)

    @staticmethod
    def _read_chunks(path: Path, start: int, end: int, chunk_size: int) -> Iterator[bytes]:
        remaining = end - start + 1
        with open(path, "rb") as f:
            f.seek(start)
            while remaining > 0:
                chunk = f.read(min(chunk_size, remaining))
                if not chunk:
                    break
                remaining -= len(chunk)
                yield chunk

    def size(self, blob_id: str) -> int:
        storage_path = self._get_storage_path(blob_id)
        if not storage_path.is_file():
            raise BlobNotFoundException(blob_id)
        return storage_path.stat().st_size

    def exists(self, blob_id: str) -> bool:
        try:
            return self._get_storage_path(blob_id).is_file()
        except BlobNotFoundException:
            return False

    def get_metadata(self, blob_id: str) -> Dict[str, Any]:
        """Read the sidecar written by ``put``."""
        path = self._metadata_path(blob_id)
        if not path.is_file():
            raise BlobNotFoundException(blob_id)
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def delete(self, blob_id: str) -> bool:
        """
        Delete a blob and its sidecar.

        Raises:
            FileStorageException: If the files exist but cannot be removed
        """
        if not self.exists(blob_id):
            return False
        try:
            self._get_storage_path(blob_id).unlink()
            metadata_path = self._metadata_path(blob_id)
            if metadata_path.exists():
                metadata_path.unlink()
        except OSError as e:
            logger.error(f"Failed to delete blob {blob_id}: {str(e)}", exc_info=True)
            raise FileStorageException(
                "Failed to delete file", blob_id=blob_id, operation="delete"
            ) from e
        logger.info(f"Deleted blob {blob_id}")
        return True
