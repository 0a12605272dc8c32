"""
Contact component ports.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from portfolio.components.contact.models import ContactQuery
from portfolio.domain.entities import ContactMessage


class ContactRepoPort(Protocol):
    def get_by_id(self, contact_id: str) -> ContactMessage | None: ...

    def insert(self, contact: ContactMessage) -> ContactMessage: ...

    def update(self, contact: ContactMessage, expected_version: int) -> ContactMessage:
        """Raises StaleWriteError when the stored version differs."""
        ...

    def delete(self, contact_id: str) -> bool: ...

    def list(self, query: ContactQuery) -> tuple[list[ContactMessage], int]: ...


class TimePort(Protocol):
    def now_utc(self) -> datetime: ...
