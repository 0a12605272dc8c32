"""
Project endpoints.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status

from portfolio.api.deps import Container, CurrentPrincipal, Meta, require_admin
from portfolio.api.routes import content
from portfolio.components.content import ContentFilter

router = APIRouter()


@router.get("")
def list_projects(
    container: Container,
    principal: CurrentPrincipal,
    page: int | None = Query(None),
    limit: int | None = Query(None),
    sort: str | None = Query(None),
    order: str | None = Query(None),
    search: str | None = Query(None, max_length=100),
    category: str | None = Query(None),
    technology: str | None = Query(None),
    featured: bool | None = Query(None),
    status_filter: str | None = Query(None, alias="status"),
) -> dict[str, Any]:
    filters = ContentFilter(
        search=search,
        category=category,
        technology=technology,
        featured=featured,
        status=status_filter,
    )
    return content.list_documents(
        container, "project", principal, filters, page, limit, sort, order
    )


@router.get("/{id_or_slug}")
def get_project(
    id_or_slug: str,
    container: Container,
    principal: CurrentPrincipal,
    meta: Meta,
) -> dict[str, Any]:
    return content.get_document(container, "project", id_or_slug, principal, meta)


@router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_admin)])
def create_project(container: Container, body: dict[str, Any] = Body(...)) -> dict[str, Any]:
    return content.create_document(container, "project", body)


@router.put("/{content_id}", dependencies=[Depends(require_admin)])
def update_project(
    content_id: str,
    container: Container,
    body: dict[str, Any] = Body(...),
    expected_version: int | None = Query(None),
) -> dict[str, Any]:
    return content.update_document(container, "project", content_id, body, expected_version)


@router.delete("/{content_id}", dependencies=[Depends(require_admin)])
def delete_project(content_id: str, container: Container) -> dict[str, Any]:
    return content.delete_document(container, "project", content_id)
