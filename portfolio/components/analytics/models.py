"""
Analytics component models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from portfolio.domain.entities import AnalyticsEvent, AnalyticsEventType

Period = Literal["7d", "30d", "90d", "1y"]

PERIOD_DAYS: dict[str, int] = {"7d": 7, "30d": 30, "90d": 90, "1y": 365}


@dataclass(frozen=True)
class UserAgentInfo:
    device: str = "unknown"
    browser: str = "unknown"
    os: str = "unknown"
    is_bot: bool = False


# --- Input Models ---


class TrackEventSchema(BaseModel):
    """Body accepted by the public tracking endpoint."""

    model_config = ConfigDict(extra="ignore")

    event_type: AnalyticsEventType
    path: str = Field(min_length=1, max_length=500)
    referrer: str | None = Field(default=None, max_length=1000)
    session_id: str | None = Field(default=None, max_length=100)
    metadata: dict[str, Any] = Field(default_factory=dict)


@dataclass(frozen=True)
class RequestMeta:
    """Request attributes captured alongside an event."""

    ip_address: str | None = None
    user_agent: str | None = None
    referrer: str | None = None


@dataclass(frozen=True)
class TrackEventInput:
    data: dict[str, Any]
    meta: RequestMeta = field(default_factory=RequestMeta)


@dataclass(frozen=True)
class SummaryInput:
    period: Period = "30d"
    event_type: AnalyticsEventType | None = None
    path: str | None = None
    start: datetime | None = None
    end: datetime | None = None


@dataclass(frozen=True)
class SummaryQuery:
    """Resolved time window and filters handed to the query port."""

    start: datetime
    end: datetime
    event_type: str | None = None
    path: str | None = None


# --- Output Models ---


@dataclass(frozen=True)
class TrackEventOutput:
    event: AnalyticsEvent
    success: bool = True


@dataclass(frozen=True)
class DailyStat:
    date: str
    total_events: int
    page_views: int
    unique_visitors: int


@dataclass(frozen=True)
class AnalyticsSummary:
    period: str
    start: datetime
    end: datetime
    total_events: int
    unique_visitors: int
    page_views: int
    top_pages: list[tuple[str, int]] = field(default_factory=list)
    top_referrers: list[tuple[str, int]] = field(default_factory=list)
    device_stats: list[tuple[str, int]] = field(default_factory=list)
    browser_stats: list[tuple[str, int]] = field(default_factory=list)
    daily_stats: list[DailyStat] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "overview": {
                "total_events": self.total_events,
                "unique_visitors": self.unique_visitors,
                "page_views": self.page_views,
            },
            "top_pages": [{"path": p, "views": n} for p, n in self.top_pages],
            "top_referrers": [{"referrer": r, "visits": n} for r, n in self.top_referrers],
            "device_stats": [{"device": d, "count": n} for d, n in self.device_stats],
            "browser_stats": [{"browser": b, "count": n} for b, n in self.browser_stats],
            "daily_stats": [
                {
                    "date": d.date,
                    "total_events": d.total_events,
                    "page_views": d.page_views,
                    "unique_visitors": d.unique_visitors,
                }
                for d in self.daily_stats
            ],
            "period": self.period,
            "date_range": {"start": self.start.isoformat(), "end": self.end.isoformat()},
        }
