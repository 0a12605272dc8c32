"""
Public newsletter endpoints.

- POST /api/newsletter - subscribe (or reactivate)
- GET|POST /api/newsletter/unsubscribe - unsubscribe by id or email
"""

from typing import Any

from fastapi import APIRouter, Body, Query, status
from fastapi.responses import JSONResponse

from portfolio.api.deps import Container, CurrentPrincipal, Meta
from portfolio.api.responses import envelope
from portfolio.components.newsletter import (
    SubscribeInput,
    UnsubscribeInput,
    run_subscribe,
    run_unsubscribe,
)
from portfolio.domain.entities import Subscriber

router = APIRouter()


def subscriber_public(subscriber: Subscriber) -> dict[str, Any]:
    return {
        "id": subscriber.id,
        "email": subscriber.email,
        "name": subscriber.name,
        "status": subscriber.status,
        "preferences": subscriber.preferences.model_dump(),
        "subscribed_at": subscriber.subscribed_at.isoformat(),
        "unsubscribed_at": (
            subscriber.unsubscribed_at.isoformat() if subscriber.unsubscribed_at else None
        ),
    }


@router.post("")
def subscribe(
    container: Container,
    principal: CurrentPrincipal,
    meta: Meta,
    body: dict[str, Any] = Body(...),
) -> JSONResponse:
    out = run_subscribe(
        SubscribeInput(data=body, principal=principal, meta=meta),
        repo=container.subscribers,
        time=container.clock,
        dispatcher=container.dispatcher,
        email=container.email,
        analytics=container.analytics,
        site=container.site,
        allowed_sources=container.rules.newsletter.allowed_sources,
    )
    if out.reactivated:
        message = "Welcome back! Your subscription has been reactivated"
    else:
        message = "Successfully subscribed to the newsletter"
    return JSONResponse(
        status_code=status.HTTP_201_CREATED if out.created else status.HTTP_200_OK,
        content=envelope(subscriber_public(out.subscriber), message),
    )


def _unsubscribe(container: Container, subscriber_id: str | None, email: str | None) -> dict[str, Any]:
    out = run_unsubscribe(
        UnsubscribeInput(subscriber_id=subscriber_id, email=email),
        repo=container.subscribers,
        time=container.clock,
    )
    message = (
        "You are already unsubscribed"
        if out.already_unsubscribed
        else "Successfully unsubscribed from the newsletter"
    )
    # Anyone may unsubscribe an address, so the reply echoes only what was sent in
    return envelope({"email": email, "status": out.subscriber.status}, message)


@router.get("/unsubscribe")
def unsubscribe_link(
    container: Container,
    id: str | None = Query(None),
    email: str | None = Query(None),
) -> dict[str, Any]:
    """Target of the link in newsletter emails."""
    return _unsubscribe(container, id, email)


@router.post("/unsubscribe")
def unsubscribe(container: Container, body: dict[str, Any] = Body(...)) -> dict[str, Any]:
    return _unsubscribe(container, body.get("id"), body.get("email"))
