"""
Admin newsletter subscriber endpoints.

Endpoints:
- GET /api/admin/newsletter/subscribers - List subscribers
- GET /api/admin/newsletter/subscribers/export/csv - Export CSV
- GET/PUT/DELETE /api/admin/newsletter/subscribers/{id} - Manage one subscriber
- GET /api/admin/newsletter/stats - Status counts
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import Response

from portfolio.api.deps import AdminPrincipal, Container, require_admin
from portfolio.api.responses import dump, envelope, page_envelope
from portfolio.components.newsletter import (
    DeleteSubscriberInput,
    ListSubscribersInput,
    SubscriberFilter,
    UpdateSubscriberInput,
    export_csv,
    run_delete,
    run_get,
    run_list,
    run_stats,
    run_update,
)
from portfolio.domain.entities import SubscriberSource, SubscriberStatus

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/subscribers")
def list_subscribers(
    container: Container,
    page: int | None = Query(None),
    limit: int | None = Query(None),
    sort: str | None = Query(None),
    order: str | None = Query(None),
    status: SubscriberStatus | None = Query(None),
    source: SubscriberSource | None = Query(None),
    search: str | None = Query(None, max_length=100),
) -> dict[str, Any]:
    out = run_list(
        ListSubscribersInput(
            filters=SubscriberFilter(status=status, source=source, search=search),
            page=page,
            limit=limit,
            sort=sort,
            order=order,
        ),
        repo=container.subscribers,
        default_limit=container.rules.pagination.default_limit,
        max_limit=container.rules.pagination.max_limit,
    )
    return page_envelope(out.page, [dump(s) for s in out.page.items])


@router.get("/subscribers/export/csv")
def export_subscribers(
    container: Container,
    status: SubscriberStatus | None = Query(None),
    source: SubscriberSource | None = Query(None),
) -> Response:
    body = export_csv(SubscriberFilter(status=status, source=source), repo=container.subscribers)
    return Response(
        content=body,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="newsletter-subscribers.csv"'},
    )


@router.get("/subscribers/{subscriber_id}")
def get_subscriber(subscriber_id: str, container: Container) -> dict[str, Any]:
    out = run_get(subscriber_id, repo=container.subscribers)
    return envelope(dump(out.subscriber))


@router.put("/subscribers/{subscriber_id}")
def update_subscriber(
    subscriber_id: str,
    container: Container,
    principal: AdminPrincipal,
    body: dict[str, Any] = Body(...),
    expected_version: int | None = Query(None),
) -> dict[str, Any]:
    out = run_update(
        UpdateSubscriberInput(
            subscriber_id=subscriber_id,
            patch=body,
            principal=principal,
            expected_version=expected_version,
        ),
        repo=container.subscribers,
        time=container.clock,
    )
    return envelope(dump(out.subscriber), "Subscriber updated")


@router.delete("/subscribers/{subscriber_id}")
def delete_subscriber(subscriber_id: str, container: Container) -> dict[str, Any]:
    run_delete(DeleteSubscriberInput(subscriber_id=subscriber_id), repo=container.subscribers)
    return envelope(None, "Subscriber deleted")


@router.get("/stats")
def subscriber_stats(container: Container) -> dict[str, Any]:
    stats = run_stats(repo=container.subscribers, time=container.clock)
    return envelope(stats.to_dict())
