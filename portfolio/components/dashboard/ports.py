"""
Dashboard component ports.
"""

from __future__ import annotations

from typing import Literal, Protocol

from portfolio.components.dashboard.models import RecentRecord

Entity = Literal["blogs", "projects", "contacts", "testimonials", "subscribers"]


class DashboardRepoPort(Protocol):
    """Read-only aggregate queries across the admin-managed tables."""

    def status_counts(self, entity: Entity) -> dict[str, int]: ...

    def column_total(self, entity: Literal["blogs", "projects"], column: str) -> int:
        """Sum of an integer counter column (views, likes)."""
        ...

    def recent(self, entity: Entity, limit: int) -> list[RecentRecord]:
        """Newest rows first."""
        ...

    def page_view_stats(self) -> tuple[int, int]:
        """(page_view events, distinct visitor IPs)."""
        ...
