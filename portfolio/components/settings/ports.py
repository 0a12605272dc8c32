"""
Settings component ports.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from portfolio.domain.entities import SiteSettings


class SettingsRepoPort(Protocol):
    """Repository for the single settings row."""

    def get(self) -> SiteSettings | None:
        """Current settings, or None before the first write."""
        ...

    def insert(self, settings: SiteSettings) -> SiteSettings:
        """
        Create the settings row.

        Raises:
            DuplicateKeyError: If the row already exists
        """
        ...

    def update(self, settings: SiteSettings, expected_version: int) -> SiteSettings:
        """
        CAS write of the whole row.

        Raises:
            StaleWriteError: If the stored version differs
        """
        ...


class TimePort(Protocol):
    def now_utc(self) -> datetime: ...
