"""
Analytics component.

Event recording and admin summary.
"""

from portfolio.components.analytics.component import (
    build_event,
    parse_user_agent,
    record_event_task,
    resolve_window,
    run_summary,
    run_track,
)
from portfolio.components.analytics.models import (
    AnalyticsSummary,
    DailyStat,
    RequestMeta,
    SummaryInput,
    SummaryQuery,
    TrackEventInput,
    TrackEventOutput,
    TrackEventSchema,
    UserAgentInfo,
)
from portfolio.components.analytics.ports import AnalyticsQueryPort, AnalyticsSinkPort

__all__ = [
    "run_track",
    "run_summary",
    "build_event",
    "parse_user_agent",
    "record_event_task",
    "resolve_window",
    "AnalyticsSummary",
    "DailyStat",
    "RequestMeta",
    "SummaryInput",
    "SummaryQuery",
    "TrackEventInput",
    "TrackEventOutput",
    "TrackEventSchema",
    "UserAgentInfo",
    "AnalyticsSinkPort",
    "AnalyticsQueryPort",
]
