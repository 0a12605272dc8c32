"""
Response envelope helpers.

Every endpoint answers ``{"success", "message", "data", "pagination"?}``.
"""

from typing import Any

from pydantic import BaseModel

from portfolio.domain.pagination import Page


def envelope(
    data: Any = None,
    message: str = "OK",
    *,
    pagination: dict[str, Any] | None = None,
) -> dict[str, Any]:
    body: dict[str, Any] = {"success": True, "message": message, "data": data}
    if pagination is not None:
        body["pagination"] = pagination
    return body


def page_envelope(page: Page[Any], items: list[Any], message: str = "OK") -> dict[str, Any]:
    return envelope(items, message, pagination=page.meta())


def error_body(message: str, error: str | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"success": False, "message": message}
    if error:
        body["error"] = error
    return body


def dump(model: BaseModel, *, exclude: set[str] | None = None) -> dict[str, Any]:
    """JSON-safe dict of an entity."""
    data: dict[str, Any] = model.model_dump(mode="json", exclude=exclude)
    return data
