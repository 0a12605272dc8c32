from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class VisibilityFilter:
    """
    Query-level form of the visibility policy.

    ``statuses=None`` means no restriction (admin). Otherwise a row is
    visible iff its status is in ``statuses`` and its published_at is set
    and not later than ``published_before``.
    """

    statuses: frozenset[str] | None = None
    published_before: datetime | None = None

    @property
    def unrestricted(self) -> bool:
        return self.statuses is None


UNRESTRICTED = VisibilityFilter()
