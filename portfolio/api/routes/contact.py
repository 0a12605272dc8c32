"""
Contact form endpoints.

Submitting is public; reading and triaging messages is admin-only.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status

from portfolio.api.deps import Container, Meta, require_admin
from portfolio.api.responses import dump, envelope, page_envelope
from portfolio.components.contact import (
    ContactFilter,
    DeleteContactInput,
    ListContactsInput,
    SubmitContactInput,
    UpdateContactInput,
    run_delete,
    run_get,
    run_list,
    run_submit,
    run_update,
)
from portfolio.domain.entities import ContactPriority, ContactSource, ContactStatus

router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED)
def submit_contact(
    container: Container,
    meta: Meta,
    body: dict[str, Any] = Body(...),
) -> dict[str, Any]:
    out = run_submit(
        SubmitContactInput(data=body, meta=meta),
        repo=container.contacts,
        time=container.clock,
        dispatcher=container.dispatcher,
        email=container.email,
        analytics=container.analytics,
        site=container.site,
    )
    contact = out.contact
    return envelope(
        {
            "id": contact.id,
            "name": contact.name,
            "email": contact.email,
            "subject": contact.subject,
            "created_at": contact.created_at.isoformat(),
        },
        "Thank you for your message! I'll get back to you soon.",
    )


@router.get("", dependencies=[Depends(require_admin)])
def list_contacts(
    container: Container,
    page: int | None = Query(None),
    limit: int | None = Query(None),
    sort: str | None = Query(None),
    order: str | None = Query(None),
    status_filter: ContactStatus | None = Query(None, alias="status"),
    priority: ContactPriority | None = Query(None),
    source: ContactSource | None = Query(None),
    search: str | None = Query(None, max_length=100),
) -> dict[str, Any]:
    out = run_list(
        ListContactsInput(
            filters=ContactFilter(
                status=status_filter, priority=priority, source=source, search=search
            ),
            page=page,
            limit=limit,
            sort=sort,
            order=order,
        ),
        repo=container.contacts,
        default_limit=container.rules.pagination.default_limit,
        max_limit=container.rules.pagination.max_limit,
    )
    return page_envelope(out.page, [dump(c) for c in out.page.items])


@router.get("/{contact_id}", dependencies=[Depends(require_admin)])
def get_contact(contact_id: str, container: Container) -> dict[str, Any]:
    return envelope(dump(run_get(contact_id, repo=container.contacts).contact))


@router.put("/{contact_id}", dependencies=[Depends(require_admin)])
def update_contact(
    contact_id: str,
    container: Container,
    body: dict[str, Any] = Body(...),
    expected_version: int | None = Query(None),
) -> dict[str, Any]:
    out = run_update(
        UpdateContactInput(contact_id=contact_id, patch=body, expected_version=expected_version),
        repo=container.contacts,
        time=container.clock,
    )
    return envelope(dump(out.contact), "Contact message updated")


@router.delete("/{contact_id}", dependencies=[Depends(require_admin)])
def delete_contact(contact_id: str, container: Container) -> dict[str, Any]:
    run_delete(DeleteContactInput(contact_id=contact_id), repo=container.contacts)
    return envelope(None, "Contact message deleted")
