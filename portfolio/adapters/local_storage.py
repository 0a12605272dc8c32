"""
Local Filesystem Storage Adapter.

Implements StoragePort on a directory tree for development and
single-server deployments.

Key behaviors:
- A key maps to ``{base_path}/{key}``; keys resolving outside the root are rejected
- Keys once written cannot be overwritten
"""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path

from portfolio.core.ports.storage import (
    KeyExistsError,
    KeyNotFoundError,
    StorageError,
    StoredObject,
)

logger = logging.getLogger(__name__)


class LocalFileStorage:
    """Local filesystem implementation of StoragePort."""

    def __init__(self, base_path: str | Path, *, create_dirs: bool = True) -> None:
        self.base_path = Path(base_path).resolve()
        if create_dirs:
            self.base_path.mkdir(parents=True, exist_ok=True)

    def _key_to_path(self, key: str) -> Path:
        path = (self.base_path / key.lstrip("/")).resolve()
        if path == self.base_path or self.base_path not in path.parents:
            raise StorageError(f"Invalid storage key: {key}")
        return path

    def put(self, key: str, data: bytes, content_type: str) -> StoredObject:
        path = self._key_to_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            # "xb" refuses to replace an existing file
            with open(path, "xb") as f:
                f.write(data)
        except FileExistsError as e:
            raise KeyExistsError(key) from e

        return StoredObject(
            key=key,
            size_bytes=len(data),
            content_type=content_type,
            sha256=hashlib.sha256(data).hexdigest(),
        )

    def get(self, key: str) -> bytes:
        path = self._key_to_path(key)
        if not path.is_file():
            raise KeyNotFoundError(key)
        return path.read_bytes()

    def exists(self, key: str) -> bool:
        try:
            return self._key_to_path(key).is_file()
        except StorageError:
            return False

    def delete(self, key: str) -> bool:
        path = self._key_to_path(key)
        if not path.is_file():
            return False
        path.unlink()
        logger.debug("Deleted stored object %s", key)
        return True
