"""
Dashboard component - admin counters and a recent-activity feed.

Counts cover every row regardless of visibility; the endpoint is admin-only.
"""

from __future__ import annotations

import logging
import time

from portfolio.components.dashboard.models import (
    ActivityItem,
    BlogStats,
    ContactStats,
    DashboardOutput,
    DashboardStats,
    ProjectStats,
    SubscriberCounts,
    TestimonialStats,
    TrafficStats,
)
from portfolio.components.dashboard.ports import DashboardRepoPort

logger = logging.getLogger(__name__)

RECENT_PER_KIND = 3
ACTIVITY_LIMIT = 10
PREVIEW_LENGTH = 100


def collect_stats(repo: DashboardRepoPort) -> DashboardStats:
    blogs = repo.status_counts("blogs")
    projects = repo.status_counts("projects")
    contacts = repo.status_counts("contacts")
    testimonials = repo.status_counts("testimonials")
    subscribers = repo.status_counts("subscribers")
    page_views, visitors = repo.page_view_stats()

    return DashboardStats(
        blogs=BlogStats(
            total=sum(blogs.values()),
            published=blogs.get("published", 0),
            drafts=blogs.get("draft", 0),
            total_views=repo.column_total("blogs", "views"),
            total_likes=repo.column_total("blogs", "likes"),
        ),
        projects=ProjectStats(
            total=sum(projects.values()),
            completed=projects.get("completed", 0),
            in_progress=projects.get("in-progress", 0),
            total_views=repo.column_total("projects", "views"),
        ),
        contacts=ContactStats(
            total=sum(contacts.values()),
            unread=contacts.get("new", 0),
            replied=contacts.get("replied", 0),
        ),
        testimonials=TestimonialStats(
            total=sum(testimonials.values()),
            pending=testimonials.get("pending", 0),
            approved=testimonials.get("approved", 0),
        ),
        subscribers=SubscriberCounts(
            total=sum(subscribers.values()),
            active=subscribers.get("active", 0),
        ),
        analytics=TrafficStats(total_page_views=page_views, unique_visitors=visitors),
    )


def _preview(text: str) -> str:
    if len(text) <= PREVIEW_LENGTH:
        return text
    return text[:PREVIEW_LENGTH] + "..."


def recent_activity(repo: DashboardRepoPort, limit: int = ACTIVITY_LIMIT) -> list[ActivityItem]:
    """Newest items across blogs, projects, contacts and testimonials."""
    items: list[ActivityItem] = []
    for rec in repo.recent("blogs", RECENT_PER_KIND):
        items.append(
            ActivityItem(
                id=rec.id,
                type="blog",
                title=f"Blog: {rec.title}",
                description=f"Status: {rec.status}",
                timestamp=rec.created_at,
                status=rec.status,
            )
        )
    for rec in repo.recent("projects", RECENT_PER_KIND):
        items.append(
            ActivityItem(
                id=rec.id,
                type="project",
                title=f"Project: {rec.title}",
                description=f"Status: {rec.status}",
                timestamp=rec.created_at,
                status=rec.status,
            )
        )
    for rec in repo.recent("contacts", RECENT_PER_KIND):
        items.append(
            ActivityItem(
                id=rec.id,
                type="contact",
                title=f"Message from {rec.title}",
                description=rec.detail,
                timestamp=rec.created_at,
                status=rec.status,
            )
        )
    for rec in repo.recent("testimonials", RECENT_PER_KIND):
        items.append(
            ActivityItem(
                id=rec.id,
                type="testimonial",
                title=f"Testimonial from {rec.title}",
                description=_preview(rec.detail),
                timestamp=rec.created_at,
                status=rec.status,
            )
        )

    items.sort(key=lambda item: item.timestamp, reverse=True)
    return items[:limit]


def run(*, repo: DashboardRepoPort) -> DashboardOutput:
    start = time.monotonic()
    output = DashboardOutput(stats=collect_stats(repo), recent_activity=recent_activity(repo))
    elapsed_ms = int((time.monotonic() - start) * 1000)
    if elapsed_ms > 2000:
        logger.warning("Dashboard load took %dms", elapsed_ms)
    else:
        logger.debug("Dashboard loaded in %dms", elapsed_ms)
    return output
