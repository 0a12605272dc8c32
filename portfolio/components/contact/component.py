"""
Contact component - contact form intake and admin triage.

A public submission is stored as a ``new`` message. The owner notification,
the sender confirmation and the contact_form analytics event are dispatched
as side effects and never fail the submission.
"""

from __future__ import annotations

import logging

from portfolio.components.analytics.component import build_event, record_event_task
from portfolio.components.analytics.ports import AnalyticsSinkPort
from portfolio.components.contact.models import (
    ContactCreateSchema,
    ContactListOutput,
    ContactOutput,
    ContactQuery,
    ContactUpdateSchema,
    DeleteContactInput,
    ListContactsInput,
    SubmitContactInput,
    SubmitContactOutput,
    UpdateContactInput,
)
from portfolio.components.contact.ports import ContactRepoPort, TimePort
from portfolio.components.dispatch.models import DispatchReport, SideEffectTask
from portfolio.components.dispatch.ports import DispatcherPort
from portfolio.core.ports.email import EmailPort
from portfolio.core.services.notifications import SiteInfo, contact_tasks
from portfolio.domain.entities import ContactMessage
from portfolio.domain.errors import ConflictError, NotFoundError, StaleWriteError, ValidationError
from portfolio.domain.pagination import Page, normalize_page_request
from portfolio.domain.validation import parse_model

logger = logging.getLogger(__name__)

CONTACT_SORT_FIELDS = ["created_at", "updated_at", "status", "priority", "name", "email", "subject"]

# Cannot be cleared by an update
REQUIRED_FIELDS = frozenset({"name", "email", "subject", "message", "status", "priority", "source"})


def _get_or_raise(repo: ContactRepoPort, contact_id: str) -> ContactMessage:
    contact = repo.get_by_id(contact_id.strip().lower())
    if contact is None:
        raise NotFoundError("Contact message not found")
    return contact


def submission_tasks(
    contact: ContactMessage,
    inp: SubmitContactInput,
    time: TimePort,
    *,
    email: EmailPort | None,
    analytics: AnalyticsSinkPort | None,
    site: SiteInfo,
) -> list[SideEffectTask]:
    tasks: list[SideEffectTask] = []
    if email is not None:
        tasks.extend(contact_tasks(email, contact, site))
    if analytics is not None:
        event = build_event(
            "contact_form",
            "/contact",
            inp.meta,
            now=time.now_utc(),
            metadata={
                "contact_id": contact.id,
                "subject": contact.subject,
                "priority": contact.priority,
            },
        )
        tasks.append(record_event_task(analytics, event))
    return tasks


# --- Component Entry Points ---


def run_submit(
    inp: SubmitContactInput,
    *,
    repo: ContactRepoPort,
    time: TimePort,
    dispatcher: DispatcherPort | None = None,
    email: EmailPort | None = None,
    analytics: AnalyticsSinkPort | None = None,
    site: SiteInfo | None = None,
) -> SubmitContactOutput:
    data = parse_model(ContactCreateSchema, inp.data)
    now = time.now_utc()

    contact = ContactMessage(
        **data.model_dump(),
        source="website",
        ip_address=inp.meta.ip_address,
        user_agent=inp.meta.user_agent,
        created_at=now,
        updated_at=now,
    )
    saved = repo.insert(contact)
    logger.info("Contact message %s received", saved.id)

    report = DispatchReport()
    if dispatcher is not None:
        report = dispatcher.dispatch(
            submission_tasks(
                saved, inp, time, email=email, analytics=analytics, site=site or SiteInfo()
            )
        )
    return SubmitContactOutput(contact=saved, dispatch=report)


def run_list(
    inp: ListContactsInput,
    *,
    repo: ContactRepoPort,
    default_limit: int = 10,
    max_limit: int = 100,
) -> ContactListOutput:
    page_req = normalize_page_request(
        inp.page,
        inp.limit,
        inp.sort,
        inp.order,
        allowed_sorts=CONTACT_SORT_FIELDS,
        default_limit=default_limit,
        max_limit=max_limit,
    )
    items, total = repo.list(ContactQuery(filters=inp.filters, page=page_req))
    return ContactListOutput(
        page=Page(items=items, total=total, page=page_req.page, limit=page_req.limit)
    )


def run_get(contact_id: str, *, repo: ContactRepoPort) -> ContactOutput:
    return ContactOutput(contact=_get_or_raise(repo, contact_id))


def run_update(
    inp: UpdateContactInput,
    *,
    repo: ContactRepoPort,
    time: TimePort,
) -> ContactOutput:
    existing = _get_or_raise(repo, inp.contact_id)

    if inp.expected_version is not None and inp.expected_version != existing.version:
        raise ConflictError("Contact message was modified by another request (stale write)")

    for key, value in inp.patch.items():
        if value is None and key in REQUIRED_FIELDS:
            raise ValidationError(key, f"{key}: Field cannot be null")

    patch = parse_model(ContactUpdateSchema, inp.patch).model_dump(exclude_unset=True)
    now = time.now_utc()
    updated = existing.model_copy(
        update={**patch, "updated_at": now, "version": existing.version + 1}
    )

    try:
        saved = repo.update(updated, expected_version=existing.version)
    except StaleWriteError as e:
        raise ConflictError("Contact message was modified by another request (stale write)") from e

    logger.info("Contact message %s updated (fields=%s)", saved.id, sorted(patch))
    return ContactOutput(contact=saved)


def run_delete(inp: DeleteContactInput, *, repo: ContactRepoPort) -> None:
    if not repo.delete(inp.contact_id.strip().lower()):
        raise NotFoundError("Contact message not found")
    logger.info("Deleted contact message %s", inp.contact_id)


def run(
    inp: SubmitContactInput | ListContactsInput | UpdateContactInput | DeleteContactInput,
    *,
    repo: ContactRepoPort,
    time: TimePort,
    dispatcher: DispatcherPort | None = None,
    email: EmailPort | None = None,
    analytics: AnalyticsSinkPort | None = None,
    site: SiteInfo | None = None,
) -> SubmitContactOutput | ContactListOutput | ContactOutput | None:
    """Main component entry point."""
    if isinstance(inp, SubmitContactInput):
        return run_submit(
            inp,
            repo=repo,
            time=time,
            dispatcher=dispatcher,
            email=email,
            analytics=analytics,
            site=site,
        )
    elif isinstance(inp, ListContactsInput):
        return run_list(inp, repo=repo)
    elif isinstance(inp, UpdateContactInput):
        return run_update(inp, repo=repo, time=time)
    elif isinstance(inp, DeleteContactInput):
        run_delete(inp, repo=repo)
        return None
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
