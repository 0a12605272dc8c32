"""
Blog post endpoints.

Public reads honor the visibility policy; writes require an admin.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status

from portfolio.api.deps import Container, CurrentPrincipal, Meta, require_admin
from portfolio.api.routes import content
from portfolio.components.content import ContentFilter

router = APIRouter()


@router.get("")
def list_blogs(
    container: Container,
    principal: CurrentPrincipal,
    page: int | None = Query(None),
    limit: int | None = Query(None),
    sort: str | None = Query(None),
    order: str | None = Query(None),
    search: str | None = Query(None, max_length=100),
    category: str | None = Query(None),
    tag: str | None = Query(None),
    status_filter: str | None = Query(None, alias="status"),
) -> dict[str, Any]:
    filters = ContentFilter(search=search, category=category, tag=tag, status=status_filter)
    return content.list_documents(
        container, "blog", principal, filters, page, limit, sort, order
    )


@router.get("/{id_or_slug}")
def get_blog(
    id_or_slug: str,
    container: Container,
    principal: CurrentPrincipal,
    meta: Meta,
) -> dict[str, Any]:
    return content.get_document(container, "blog", id_or_slug, principal, meta)


@router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)])
def create_blog(container: Container, body: dict[str, Any] = Body(...)) -> dict[str, Any]:
    return content.create_document(container, "blog", body)


@router.put("/{content_id}", dependencies=[Depends(require_admin)])
def update_blog(
    content_id: str,
    container: Container,
    body: dict[str, Any] = Body(...),
    expected_version: int | None = Query(None),
) -> dict[str, Any]:
    return content.update_document(container, "blog", content_id, body, expected_version)


@router.delete("/{content_id}", dependencies=[Depends(require_admin)])
def delete_blog(content_id: str, container: Container) -> dict[str, Any]:
    return content.delete_document(container, "blog", content_id)
