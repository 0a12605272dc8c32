"""
Dashboard component models.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Literal

ActivityType = Literal["blog", "project", "contact", "testimonial"]


@dataclass(frozen=True)
class RecentRecord:
    """Minimal projection of a recently created row."""

    id: str
    status: str
    created_at: datetime
    title: str  # title, or sender name for contacts/testimonials
    detail: str = ""  # contact subject or testimonial content


@dataclass(frozen=True)
class BlogStats:
    total: int = 0
    published: int = 0
    drafts: int = 0
    total_views: int = 0
    total_likes: int = 0


@dataclass(frozen=True)
class ProjectStats:
    total: int = 0
    completed: int = 0
    in_progress: int = 0
    total_views: int = 0


@dataclass(frozen=True)
class ContactStats:
    total: int = 0
    unread: int = 0
    replied: int = 0


@dataclass(frozen=True)
class TestimonialStats:
    total: int = 0
    pending: int = 0
    approved: int = 0


@dataclass(frozen=True)
class SubscriberCounts:
    total: int = 0
    active: int = 0


@dataclass(frozen=True)
class TrafficStats:
    total_page_views: int = 0
    unique_visitors: int = 0


@dataclass(frozen=True)
class DashboardStats:
    blogs: BlogStats = field(default_factory=BlogStats)
    projects: ProjectStats = field(default_factory=ProjectStats)
    contacts: ContactStats = field(default_factory=ContactStats)
    testimonials: TestimonialStats = field(default_factory=TestimonialStats)
    subscribers: SubscriberCounts = field(default_factory=SubscriberCounts)
    analytics: TrafficStats = field(default_factory=TrafficStats)


@dataclass(frozen=True)
class ActivityItem:
    id: str
    type: ActivityType
    title: str
    description: str
    timestamp: datetime
    status: str


@dataclass(frozen=True)
class DashboardOutput:
    stats: DashboardStats
    recent_activity: list[ActivityItem]
    success: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "stats": asdict(self.stats),
            "recent_activity": [
                {**asdict(item), "timestamp": item.timestamp.isoformat()}
                for item in self.recent_activity
            ],
        }
