"""
Storage Port - blob storage for uploaded media.

Keys are relative, slash-separated paths ("uploads/1700000000000_logo.png").
Objects are written once; a second put under the same key fails.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class StoredObject:
    """Metadata about a stored object."""

    key: str
    size_bytes: int
    content_type: str
    sha256: str


class StoragePort(Protocol):
    """Blob storage interface."""

    def put(self, key: str, data: bytes, content_type: str) -> StoredObject:
        """
        Store bytes under ``key``.

        Raises:
            KeyExistsError: If the key already holds an object
            StorageError: If the key escapes the storage root
        """
        ...

    def get(self, key: str) -> bytes:
        """
        Read the bytes stored under ``key``.

        Raises:
            KeyNotFoundError: If nothing is stored under the key
        """
        ...

    def exists(self, key: str) -> bool: ...

    def delete(self, key: str) -> bool:
        """Remove the object; False when nothing was stored."""
        ...


class StorageError(Exception):
    """Base class for storage errors."""


class KeyExistsError(StorageError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Key already exists: {key}")


class KeyNotFoundError(StorageError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Key not found: {key}")
