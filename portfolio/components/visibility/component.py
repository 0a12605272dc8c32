"""
Visibility policy.

Decides whether a principal may see a content document or testimonial.
The same rule is available as a single-document predicate and as a query
filter so that list totals never count hidden rows.
"""

from __future__ import annotations

from datetime import datetime

from portfolio.components.visibility.models import UNRESTRICTED, VisibilityFilter
from portfolio.domain.entities import (
    PUBLISHED_STATUSES,
    ContentDocument,
    ContentKind,
    Principal,
    Testimonial,
)


def is_visible(doc: ContentDocument, principal: Principal, now: datetime) -> bool:
    """Admins see everything; everyone else sees published documents whose time has come."""
    if principal.is_admin:
        return True
    if doc.status not in PUBLISHED_STATUSES[doc.kind]:
        return False
    return doc.published_at is not None and doc.published_at <= now


def visibility_filter(
    kind: ContentKind,
    principal: Principal,
    now: datetime,
) -> VisibilityFilter:
    if principal.is_admin:
        return UNRESTRICTED
    return VisibilityFilter(statuses=PUBLISHED_STATUSES[kind], published_before=now)


def is_testimonial_visible(testimonial: Testimonial, principal: Principal) -> bool:
    return principal.is_admin or testimonial.status == "approved"


def testimonial_status_filter(principal: Principal) -> frozenset[str] | None:
    """Statuses a principal may list; ``None`` means all."""
    return None if principal.is_admin else frozenset({"approved"})
