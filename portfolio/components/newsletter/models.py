"""
Newsletter component models.

Subscriber status state machine:
- active → unsubscribed (sets unsubscribed_at)
- unsubscribed → active (clears unsubscribed_at, resets subscribed_at)
- active | unsubscribed → bounced (timestamps untouched)
- bounced → anything requires an admin override
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from portfolio.components.analytics.models import RequestMeta
from portfolio.components.dispatch.models import DispatchReport
from portfolio.domain.entities import (
    Principal,
    Subscriber,
    SubscriberSource,
    SubscriberStatus,
)
from portfolio.domain.pagination import Page, PageRequest

# --- State Machine ---

VALID_TRANSITIONS: dict[str, set[str]] = {
    "active": {"unsubscribed", "bounced"},
    "unsubscribed": {"active", "bounced"},
    "bounced": set(),  # Admin override only
}


def can_transition(
    from_status: SubscriberStatus,
    to_status: SubscriberStatus,
    *,
    admin_override: bool = False,
) -> bool:
    """Check a status change against the state machine."""
    if from_status == to_status:
        return True
    if from_status == "bounced":
        return admin_override
    return to_status in VALID_TRANSITIONS.get(from_status, set())


# --- Schemas ---


class PreferencesSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    blog_updates: bool | None = None
    project_updates: bool | None = None
    newsletter: bool | None = None


class SubscribeSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: str = Field(min_length=1, max_length=254)
    name: str | None = Field(default=None, max_length=100)
    source: SubscriberSource = "website"
    preferences: PreferencesSchema | None = None


class SubscriberUpdateSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str | None = Field(default=None, max_length=100)
    source: SubscriberSource | None = None
    status: SubscriberStatus | None = None
    preferences: PreferencesSchema | None = None


# --- Input Models ---


@dataclass(frozen=True)
class ValidateEmailOutput:
    is_valid: bool
    normalized_email: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class SubscribeInput:
    data: dict[str, Any]
    principal: Principal = field(default_factory=Principal.anonymous)
    meta: RequestMeta = field(default_factory=RequestMeta)


@dataclass(frozen=True)
class UnsubscribeInput:
    """Public unsubscribe; one of ``subscriber_id`` or ``email`` is required."""

    subscriber_id: str | None = None
    email: str | None = None


@dataclass(frozen=True)
class SubscriberFilter:
    status: SubscriberStatus | None = None
    source: SubscriberSource | None = None
    search: str | None = None


@dataclass(frozen=True)
class ListSubscribersInput:
    filters: SubscriberFilter = field(default_factory=SubscriberFilter)
    page: int | None = None
    limit: int | None = None
    sort: str | None = None
    order: str | None = None


@dataclass(frozen=True)
class SubscriberQuery:
    filters: SubscriberFilter
    page: PageRequest


@dataclass(frozen=True)
class UpdateSubscriberInput:
    subscriber_id: str
    patch: dict[str, Any]
    principal: Principal
    expected_version: int | None = None


@dataclass(frozen=True)
class DeleteSubscriberInput:
    subscriber_id: str


# --- Output Models ---


@dataclass(frozen=True)
class SubscribeOutput:
    subscriber: Subscriber
    created: bool = False
    reactivated: bool = False
    dispatch: DispatchReport = field(default_factory=DispatchReport)
    success: bool = True


@dataclass(frozen=True)
class UnsubscribeOutput:
    subscriber: Subscriber
    already_unsubscribed: bool = False  # Idempotent success
    success: bool = True


@dataclass(frozen=True)
class SubscriberOutput:
    subscriber: Subscriber
    success: bool = True


@dataclass(frozen=True)
class SubscriberListOutput:
    page: Page[Subscriber]
    success: bool = True


@dataclass(frozen=True)
class SubscriberStats:
    total: int
    active: int
    unsubscribed: int
    bounced: int
    recent: int  # Subscribed within the last 30 days

    def to_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "active": self.active,
            "unsubscribed": self.unsubscribed,
            "bounced": self.bounced,
            "recent": self.recent,
        }
