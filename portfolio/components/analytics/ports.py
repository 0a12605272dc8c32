"""
Analytics component ports.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Protocol

from portfolio.components.analytics.models import DailyStat, SummaryQuery
from portfolio.domain.entities import AnalyticsEvent

GroupColumn = Literal["path", "referrer", "device", "browser", "os"]


class AnalyticsSinkPort(Protocol):
    """Append-only event sink. The core never reads events back."""

    def record(self, event: AnalyticsEvent) -> None: ...


class AnalyticsQueryPort(Protocol):
    """Read side used by the admin summary."""

    def count_events(self, query: SummaryQuery) -> int: ...

    def count_sessions(self, query: SummaryQuery) -> int:
        """Distinct non-null session ids in the window."""
        ...

    def top_values(
        self, query: SummaryQuery, column: GroupColumn, limit: int = 10
    ) -> list[tuple[str, int]]:
        """Most frequent non-empty values of ``column``."""
        ...

    def daily_stats(self, query: SummaryQuery) -> list[DailyStat]: ...


class TimePort(Protocol):
    def now_utc(self) -> datetime: ...
