"""
Analytics endpoints.

- POST /api/analytics - record a client-side event (public)
- GET /api/analytics - summary for a period (admin)
"""

from datetime import datetime
from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status

from portfolio.api.deps import Container, Meta, require_admin
from portfolio.api.responses import envelope
from portfolio.components.analytics import (
    SummaryInput,
    TrackEventInput,
    run_summary,
    run_track,
)
from portfolio.components.analytics.models import Period
from portfolio.domain.entities import AnalyticsEventType

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
def track_event(
    container: Container,
    meta: Meta,
    body: dict[str, Any] = Body(...),
) -> dict[str, Any]:
    out = run_track(
        TrackEventInput(data=body, meta=meta),
        sink=container.analytics,
        time=container.clock,
    )
    return envelope({"id": out.event.id}, "Event tracked")


@router.get("", dependencies=[Depends(require_admin)])
def analytics_summary(
    container: Container,
    period: Period = Query("30d"),
    event_type: AnalyticsEventType | None = Query(None),
    path: str | None = Query(None),
    start_date: datetime | None = Query(None),
    end_date: datetime | None = Query(None),
) -> dict[str, Any]:
    summary = run_summary(
        SummaryInput(
            period=period,
            event_type=event_type,
            path=path,
            start=start_date,
            end=end_date,
        ),
        repo=container.analytics,
        time=container.clock,
    )
    return envelope(summary.to_dict())
