"""
Content component port definitions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from portfolio.components.content.models import ContentQuery
from portfolio.domain.entities import ContentDocument


class ContentRepoPort(Protocol):
    """
    Persistence for one content kind.

    ``insert`` and ``update`` raise DuplicateKeyError on a slug collision;
    ``update`` raises StaleWriteError when the stored version moved on.
    """

    def get_by_id(self, doc_id: str) -> ContentDocument | None: ...

    def get_by_slug(self, slug: str) -> ContentDocument | None: ...

    def insert(self, doc: ContentDocument) -> ContentDocument: ...

    def update(self, doc: ContentDocument, expected_version: int) -> ContentDocument:
        """CAS write of the editable fields; counters keep their stored value.

        Returns the stored document after the write.
        """
        ...

    def delete(self, doc_id: str) -> bool: ...

    def increment_views(self, doc_id: str) -> None:
        """Atomic counter update; no version bump."""
        ...

    def list(self, query: ContentQuery) -> tuple[list[ContentDocument], int]:
        """Returns (items on the requested page, total matching rows)."""
        ...


class TimePort(Protocol):
    """Port for time operations."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...
