"""
Newsletter component - subscriber state machine and subscription flows.

Key behaviors:
- Subscribe creates an active subscriber, or reactivates an unsubscribed one
- A new or reactivated subscriber gets a welcome email and an analytics
  event, both dispatched as side effects
- Unsubscribe is idempotent (first transition wins, timestamp kept)
- Bounced subscribers can only be moved by an admin override

Invariant: ``unsubscribed_at`` is set exactly when status is unsubscribed,
except that a transition into bounced never touches timestamps.
"""

from __future__ import annotations

import csv
import io
import logging
import re
from datetime import datetime, timedelta

from portfolio.components.analytics.component import build_event, record_event_task
from portfolio.components.analytics.ports import AnalyticsSinkPort
from portfolio.components.dispatch.models import DispatchReport, SideEffectTask
from portfolio.components.dispatch.ports import DispatcherPort
from portfolio.components.newsletter.models import (
    DeleteSubscriberInput,
    ListSubscribersInput,
    SubscribeInput,
    SubscribeOutput,
    SubscriberFilter,
    SubscriberListOutput,
    SubscriberOutput,
    SubscriberQuery,
    SubscriberStats,
    SubscriberUpdateSchema,
    SubscribeSchema,
    UnsubscribeInput,
    UnsubscribeOutput,
    UpdateSubscriberInput,
    ValidateEmailOutput,
    can_transition,
)
from portfolio.components.newsletter.ports import SubscriberRepoPort, TimePort
from portfolio.core.ports.email import EmailPort
from portfolio.core.services.notifications import SiteInfo, welcome_email_task
from portfolio.domain.entities import Subscriber, SubscriberPreferences, SubscriberStatus
from portfolio.domain.errors import (
    ConflictError,
    DuplicateKeyError,
    InvalidTransitionError,
    NotFoundError,
    StaleWriteError,
    ValidationError,
)
from portfolio.domain.pagination import Page, normalize_page_request
from portfolio.domain.validation import parse_model

logger = logging.getLogger(__name__)

# --- Email Validation Regex (RFC 5322 simplified) ---

EMAIL_REGEX = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@"
    r"[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)+$"
)

SUBSCRIBER_SORT_FIELDS = ["created_at", "subscribed_at", "email", "name", "status"]

CSV_COLUMNS = ["email", "name", "status", "source", "subscribed_at", "unsubscribed_at"]

RECENT_WINDOW = timedelta(days=30)


# --- Pure Functions (Functional Core) ---


def validate_email(email: str | None) -> ValidateEmailOutput:
    """Normalize (strip, lowercase) and check format."""
    normalized = email.strip().lower() if email else ""

    if not normalized:
        return ValidateEmailOutput(is_valid=False, error="Email address is required")

    if len(normalized) > 254:
        return ValidateEmailOutput(is_valid=False, error="Email address is too long")

    if not EMAIL_REGEX.match(normalized):
        return ValidateEmailOutput(is_valid=False, error="Please provide a valid email")

    return ValidateEmailOutput(is_valid=True, normalized_email=normalized)


def transition(
    subscriber: Subscriber,
    to_status: SubscriberStatus,
    now: datetime,
    *,
    admin_override: bool = False,
) -> Subscriber:
    """
    Move a subscriber to ``to_status`` and apply the timestamp effects.

    A same-status transition is a no-op and returns the subscriber unchanged.

    Raises:
        InvalidTransitionError: the state machine forbids the change.
    """
    from_status = subscriber.status
    if from_status == to_status:
        return subscriber

    if not can_transition(from_status, to_status, admin_override=admin_override):
        raise InvalidTransitionError(from_status, to_status)

    update: dict[str, object] = {"status": to_status}
    if to_status == "unsubscribed":
        update["unsubscribed_at"] = subscriber.unsubscribed_at or now
    elif to_status == "active":
        update["unsubscribed_at"] = None
        update["subscribed_at"] = now

    return subscriber.model_copy(update=update)


def _save(repo: SubscriberRepoPort, subscriber: Subscriber, now: datetime) -> Subscriber:
    """Compare-and-swap on the stored version."""
    expected = subscriber.version
    bumped = subscriber.model_copy(update={"updated_at": now, "version": expected + 1})
    try:
        return repo.update(bumped, expected_version=expected)
    except StaleWriteError as e:
        raise ConflictError("Subscriber was modified by another request (stale write)") from e


def _require_email(email: str | None) -> str:
    result = validate_email(email)
    if not result.is_valid or result.normalized_email is None:
        raise ValidationError("email", result.error or "Invalid email")
    return result.normalized_email


def subscription_tasks(
    subscriber: Subscriber,
    inp: SubscribeInput,
    now: datetime,
    *,
    email: EmailPort | None,
    analytics: AnalyticsSinkPort | None,
    site: SiteInfo,
) -> list[SideEffectTask]:
    tasks: list[SideEffectTask] = []
    if email is not None:
        tasks.append(welcome_email_task(email, subscriber, site))
    if analytics is not None:
        event = build_event(
            "newsletter_subscription",
            "/newsletter",
            inp.meta,
            now=now,
            metadata={"subscriber_id": subscriber.id, "source": subscriber.source},
        )
        tasks.append(record_event_task(analytics, event))
    return tasks


# --- Component Entry Points ---


def run_subscribe(
    inp: SubscribeInput,
    *,
    repo: SubscriberRepoPort,
    time: TimePort,
    dispatcher: DispatcherPort | None = None,
    email: EmailPort | None = None,
    analytics: AnalyticsSinkPort | None = None,
    site: SiteInfo | None = None,
    allowed_sources: list[str] | None = None,
) -> SubscribeOutput:
    """
    Subscribe an email address.

    Raises:
        ValidationError: bad email, name or source.
        ConflictError: the address is already active.
        InvalidTransitionError: the address bounced and the caller is not admin.
    """
    address = _require_email(inp.data.get("email"))
    schema = parse_model(SubscribeSchema, {**inp.data, "email": address})
    if allowed_sources is not None and schema.source not in allowed_sources:
        raise ValidationError("source", f"source: '{schema.source}' is not an allowed source")

    now = time.now_utc()
    prefs = schema.preferences.model_dump(exclude_none=True) if schema.preferences else {}
    existing = repo.get_by_email(address)

    created = False
    reactivated = False
    if existing is None:
        subscriber = Subscriber(
            email=address,
            name=schema.name,
            source=schema.source,
            preferences=SubscriberPreferences(**prefs),
            subscribed_at=now,
            created_at=now,
            updated_at=now,
        )
        try:
            subscriber = repo.insert(subscriber)
        except DuplicateKeyError as e:
            raise ConflictError("Email is already subscribed to the newsletter") from e
        created = True
        logger.info("New newsletter subscriber %s (source=%s)", subscriber.id, subscriber.source)
    elif existing.status == "active":
        raise ConflictError("Email is already subscribed to the newsletter")
    else:
        moved = transition(existing, "active", now, admin_override=inp.principal.is_admin)
        merged_prefs = {**existing.preferences.model_dump(), **prefs}
        moved = moved.model_copy(
            update={
                "preferences": SubscriberPreferences(**merged_prefs),
                "name": schema.name or existing.name,
            }
        )
        subscriber = _save(repo, moved, now)
        reactivated = True
        logger.info("Reactivated newsletter subscriber %s (was %s)", subscriber.id, existing.status)

    report = DispatchReport()
    if dispatcher is not None:
        tasks = subscription_tasks(
            subscriber, inp, now, email=email, analytics=analytics, site=site or SiteInfo()
        )
        report = dispatcher.dispatch(tasks)

    return SubscribeOutput(
        subscriber=subscriber, created=created, reactivated=reactivated, dispatch=report
    )


def run_unsubscribe(
    inp: UnsubscribeInput,
    *,
    repo: SubscriberRepoPort,
    time: TimePort,
) -> UnsubscribeOutput:
    """
    Unsubscribe by subscriber id or email.

    Unsubscribing twice succeeds and keeps the first ``unsubscribed_at``.
    """
    if inp.subscriber_id:
        subscriber = repo.get_by_id(inp.subscriber_id.strip().lower())
    elif inp.email:
        subscriber = repo.get_by_email(inp.email.strip().lower())
    else:
        raise ValidationError("email", "Either subscriber ID or email is required")

    if subscriber is None:
        raise NotFoundError("Subscriber not found")

    if subscriber.status == "unsubscribed":
        return UnsubscribeOutput(subscriber=subscriber, already_unsubscribed=True)

    now = time.now_utc()
    saved = _save(repo, transition(subscriber, "unsubscribed", now), now)
    logger.info("Subscriber %s unsubscribed", saved.id)
    return UnsubscribeOutput(subscriber=saved)


def run_list(
    inp: ListSubscribersInput,
    *,
    repo: SubscriberRepoPort,
    default_limit: int = 10,
    max_limit: int = 100,
) -> SubscriberListOutput:
    page_req = normalize_page_request(
        inp.page,
        inp.limit,
        inp.sort,
        inp.order,
        allowed_sorts=SUBSCRIBER_SORT_FIELDS,
        default_limit=default_limit,
        max_limit=max_limit,
    )
    items, total = repo.list(SubscriberQuery(filters=inp.filters, page=page_req))
    return SubscriberListOutput(
        page=Page(items=items, total=total, page=page_req.page, limit=page_req.limit)
    )


def run_get(subscriber_id: str, *, repo: SubscriberRepoPort) -> SubscriberOutput:
    subscriber = repo.get_by_id(subscriber_id.strip().lower())
    if subscriber is None:
        raise NotFoundError("Subscriber not found")
    return SubscriberOutput(subscriber=subscriber)


def run_update(
    inp: UpdateSubscriberInput,
    *,
    repo: SubscriberRepoPort,
    time: TimePort,
) -> SubscriberOutput:
    """
    Admin update of name, source, preferences and status.

    Status changes go through the state machine; admins may move a
    bounced subscriber.
    """
    existing = repo.get_by_id(inp.subscriber_id.strip().lower())
    if existing is None:
        raise NotFoundError("Subscriber not found")

    if inp.expected_version is not None and inp.expected_version != existing.version:
        raise ConflictError("Subscriber was modified by another request (stale write)")

    patch = parse_model(SubscriberUpdateSchema, inp.patch)
    now = time.now_utc()

    subscriber = existing
    if patch.status is not None:
        subscriber = transition(
            subscriber, patch.status, now, admin_override=inp.principal.is_admin
        )

    update: dict[str, object] = {}
    if patch.name is not None:
        update["name"] = patch.name
    if patch.source is not None:
        update["source"] = patch.source
    if patch.preferences is not None:
        merged = {
            **existing.preferences.model_dump(),
            **patch.preferences.model_dump(exclude_none=True),
        }
        update["preferences"] = SubscriberPreferences(**merged)
    if update:
        subscriber = subscriber.model_copy(update=update)

    saved = _save(repo, subscriber, now)
    if existing.status != saved.status:
        logger.info("Subscriber %s status %s -> %s", saved.id, existing.status, saved.status)
    return SubscriberOutput(subscriber=saved)


def run_delete(inp: DeleteSubscriberInput, *, repo: SubscriberRepoPort) -> None:
    if not repo.delete(inp.subscriber_id.strip().lower()):
        raise NotFoundError("Subscriber not found")
    logger.info("Deleted subscriber %s", inp.subscriber_id)


def run_stats(*, repo: SubscriberRepoPort, time: TimePort) -> SubscriberStats:
    counts = repo.count_by_status()
    return SubscriberStats(
        total=sum(counts.values()),
        active=counts.get("active", 0),
        unsubscribed=counts.get("unsubscribed", 0),
        bounced=counts.get("bounced", 0),
        recent=repo.count_subscribed_since(time.now_utc() - RECENT_WINDOW),
    )


def export_csv(filters: SubscriberFilter, *, repo: SubscriberRepoPort) -> str:
    """Render matching subscribers as CSV with a header row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(CSV_COLUMNS)
    for sub in repo.list_all(filters):
        writer.writerow(
            [
                sub.email,
                sub.name or "",
                sub.status,
                sub.source,
                sub.subscribed_at.isoformat(),
                sub.unsubscribed_at.isoformat() if sub.unsubscribed_at else "",
            ]
        )
    return buffer.getvalue()


def run(
    inp: SubscribeInput
    | UnsubscribeInput
    | ListSubscribersInput
    | UpdateSubscriberInput
    | DeleteSubscriberInput,
    *,
    repo: SubscriberRepoPort,
    time: TimePort,
    dispatcher: DispatcherPort | None = None,
    email: EmailPort | None = None,
    analytics: AnalyticsSinkPort | None = None,
    site: SiteInfo | None = None,
) -> SubscribeOutput | UnsubscribeOutput | SubscriberListOutput | SubscriberOutput | None:
    """
    Main component entry point.

    Args:
        inp: Input command
        repo: Subscriber repository port
        time: Time port
        dispatcher: Side-effect dispatcher for subscribe (Optional)
        email: Email port for welcome emails (Optional)
        analytics: Analytics sink (Optional)
        site: Site name and URL used in emails (Optional)
    """
    if isinstance(inp, SubscribeInput):
        return run_subscribe(
            inp,
            repo=repo,
            time=time,
            dispatcher=dispatcher,
            email=email,
            analytics=analytics,
            site=site,
        )
    elif isinstance(inp, UnsubscribeInput):
        return run_unsubscribe(inp, repo=repo, time=time)
    elif isinstance(inp, ListSubscribersInput):
        return run_list(inp, repo=repo)
    elif isinstance(inp, UpdateSubscriberInput):
        return run_update(inp, repo=repo, time=time)
    elif isinstance(inp, DeleteSubscriberInput):
        run_delete(inp, repo=repo)
        return None
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
