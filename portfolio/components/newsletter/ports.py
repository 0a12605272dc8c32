"""
Newsletter component ports.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from portfolio.components.newsletter.models import SubscriberFilter, SubscriberQuery
from portfolio.domain.entities import Subscriber


class SubscriberRepoPort(Protocol):
    """
    Newsletter subscriber repository interface.

    ``insert`` raises DuplicateKeyError for an existing email;
    ``update`` raises StaleWriteError when the version check fails.
    """

    def get_by_id(self, subscriber_id: str) -> Subscriber | None: ...

    def get_by_email(self, email: str) -> Subscriber | None:
        """Case-insensitive lookup."""
        ...

    def insert(self, subscriber: Subscriber) -> Subscriber: ...

    def update(self, subscriber: Subscriber, expected_version: int) -> Subscriber: ...

    def delete(self, subscriber_id: str) -> bool: ...

    def list(self, query: SubscriberQuery) -> tuple[list[Subscriber], int]: ...

    def list_all(self, filters: SubscriberFilter) -> list[Subscriber]:
        """Every matching subscriber, newest first (CSV export)."""
        ...

    def count_by_status(self) -> dict[str, int]: ...

    def count_subscribed_since(self, since: datetime) -> int: ...


class TimePort(Protocol):
    def now_utc(self) -> datetime: ...
