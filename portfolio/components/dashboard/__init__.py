"""
Dashboard component.

Admin dashboard counters and recent activity.
"""

from portfolio.components.dashboard.component import collect_stats, recent_activity, run
from portfolio.components.dashboard.models import (
    ActivityItem,
    DashboardOutput,
    DashboardStats,
    RecentRecord,
)
from portfolio.components.dashboard.ports import DashboardRepoPort

__all__ = [
    "run",
    "collect_stats",
    "recent_activity",
    "ActivityItem",
    "DashboardOutput",
    "DashboardStats",
    "RecentRecord",
    "DashboardRepoPort",
]
