"""
Analytics component.

Records append-only events (as side effects or from the public tracking
endpoint) and builds the admin summary.

Key behaviors:
- User agents are classified into device/browser/os without external lookups
- Recording is wrapped as a side-effect task so sink failures stay isolated
- Summary windows default to the last 30 days
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

from portfolio.components.analytics.models import (
    PERIOD_DAYS,
    AnalyticsSummary,
    RequestMeta,
    SummaryInput,
    SummaryQuery,
    TrackEventInput,
    TrackEventOutput,
    TrackEventSchema,
    UserAgentInfo,
)
from portfolio.components.analytics.ports import (
    AnalyticsQueryPort,
    AnalyticsSinkPort,
    TimePort,
)
from portfolio.components.dispatch.models import SideEffectTask
from portfolio.domain.entities import AnalyticsEvent, AnalyticsEventType
from portfolio.domain.errors import ValidationError
from portfolio.domain.validation import parse_model

logger = logging.getLogger(__name__)

# --- User agent classification ---

BOT_PATTERNS: tuple[str, ...] = (
    "bot",
    "crawler",
    "spider",
    "curl",
    "wget",
    "python-requests",
    "httpx",
    "facebookexternalhit",
)

# Order matters: Edge and Opera UAs also contain "chrome/", Chrome contains "safari/".
BROWSER_PATTERNS: tuple[tuple[str, str], ...] = (
    ("edg/", "Edge"),
    ("opr/", "Opera"),
    ("firefox/", "Firefox"),
    ("chrome/", "Chrome"),
    ("safari/", "Safari"),
    ("msie", "Internet Explorer"),
    ("trident/", "Internet Explorer"),
)

OS_PATTERNS: tuple[tuple[str, str], ...] = (
    ("windows", "Windows"),
    ("iphone", "iOS"),
    ("ipad", "iOS"),
    ("android", "Android"),
    ("mac os x", "macOS"),
    ("cros", "ChromeOS"),
    ("linux", "Linux"),
)


def parse_user_agent(user_agent: str | None) -> UserAgentInfo:
    """Classify a user agent string into device, browser and OS."""
    if not user_agent:
        return UserAgentInfo()

    ua = user_agent.lower()

    if any(p in ua for p in BOT_PATTERNS):
        return UserAgentInfo(device="bot", browser="bot", os="unknown", is_bot=True)

    browser = next((name for p, name in BROWSER_PATTERNS if p in ua), "unknown")
    os_name = next((name for p, name in OS_PATTERNS if p in ua), "unknown")

    if "ipad" in ua or "tablet" in ua:
        device = "tablet"
    elif "mobi" in ua or "iphone" in ua or "android" in ua:
        device = "mobile"
    else:
        device = "desktop"

    return UserAgentInfo(device=device, browser=browser, os=os_name)


def build_event(
    event_type: AnalyticsEventType,
    path: str,
    meta: RequestMeta,
    *,
    now: datetime,
    session_id: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> AnalyticsEvent:
    ua = parse_user_agent(meta.user_agent)
    return AnalyticsEvent(
        event_type=event_type,
        path=path,
        referrer=meta.referrer or None,
        user_agent=meta.user_agent,
        ip_address=meta.ip_address,
        device=ua.device,
        browser=ua.browser,
        os=ua.os,
        session_id=session_id,
        metadata=metadata or {},
        timestamp=now,
    )


def record_event_task(sink: AnalyticsSinkPort, event: AnalyticsEvent) -> SideEffectTask:
    """Wrap ``sink.record(event)`` as a named side-effect task."""
    return SideEffectTask(
        name=f"analytics.{event.event_type}",
        fn=lambda: sink.record(event),
    )


# --- Component Entry Points ---


def run_track(
    inp: TrackEventInput,
    *,
    sink: AnalyticsSinkPort,
    time: TimePort,
) -> TrackEventOutput:
    """Validate and record an event from the public tracking endpoint."""
    data = parse_model(TrackEventSchema, inp.data)
    meta = RequestMeta(
        ip_address=inp.meta.ip_address,
        user_agent=inp.meta.user_agent,
        referrer=data.referrer or inp.meta.referrer,
    )
    event = build_event(
        data.event_type,
        data.path,
        meta,
        now=time.now_utc(),
        session_id=data.session_id,
        metadata=data.metadata,
    )
    sink.record(event)
    logger.info("Tracked %s event for %s", event.event_type, event.path)
    return TrackEventOutput(event=event)


def resolve_window(inp: SummaryInput, now: datetime) -> tuple[datetime, datetime]:
    if inp.start is not None and inp.end is not None:
        start = inp.start if inp.start.tzinfo else inp.start.replace(tzinfo=UTC)
        end = inp.end if inp.end.tzinfo else inp.end.replace(tzinfo=UTC)
        if start > end:
            raise ValidationError("start_date", "start_date must be before end_date")
        return start, end
    days = PERIOD_DAYS.get(inp.period, 30)
    return now - timedelta(days=days), now


def run_summary(
    inp: SummaryInput,
    *,
    repo: AnalyticsQueryPort,
    time: TimePort,
) -> AnalyticsSummary:
    start, end = resolve_window(inp, time.now_utc())
    query = SummaryQuery(start=start, end=end, event_type=inp.event_type, path=inp.path)
    page_query = SummaryQuery(start=start, end=end, event_type="page_view", path=inp.path)

    return AnalyticsSummary(
        period=inp.period,
        start=start,
        end=end,
        total_events=repo.count_events(query),
        unique_visitors=repo.count_sessions(query),
        page_views=repo.count_events(page_query),
        top_pages=repo.top_values(page_query, "path"),
        top_referrers=repo.top_values(query, "referrer"),
        device_stats=repo.top_values(query, "device"),
        browser_stats=repo.top_values(query, "browser"),
        daily_stats=repo.daily_stats(query),
    )
