"""
Media component ports.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from portfolio.components.media.models import MediaQuery
from portfolio.core.ports.storage import StoragePort
from portfolio.domain.entities import MediaFile


class MediaRepoPort(Protocol):
    def insert(self, media: MediaFile) -> MediaFile: ...

    def get_by_id(self, media_id: str) -> MediaFile | None: ...

    def get_by_key(self, key: str) -> MediaFile | None: ...

    def delete(self, media_id: str) -> bool: ...

    def list(self, query: MediaQuery) -> tuple[list[MediaFile], int]: ...

    def count_by_category(self) -> dict[str, int]:
        """Row counts keyed by category; absent categories are omitted."""
        ...


class TimePort(Protocol):
    def now_utc(self) -> datetime: ...


__all__ = ["MediaRepoPort", "StoragePort", "TimePort"]
