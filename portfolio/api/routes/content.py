"""
Shared handlers behind the blog and project routers.

Both kinds run through the same content component; the routers only differ
in their filter parameters and in how list items are serialized.
"""

from typing import Any

from portfolio.api.deps import AppContainer
from portfolio.api.responses import dump, envelope, page_envelope
from portfolio.components.analytics.models import RequestMeta
from portfolio.components.content import (
    ContentFilter,
    CreateContentInput,
    DeleteContentInput,
    GetContentInput,
    ListContentInput,
    UpdateContentInput,
    run_create,
    run_delete,
    run_get,
    run_list,
    run_update,
)
from portfolio.domain.entities import ContentDocument, ContentKind, Principal

# Omitted from list responses to keep them small
LIST_EXCLUDES: dict[str, set[str]] = {"blog": {"content"}, "project": set()}

LABELS: dict[str, str] = {"blog": "Blog post", "project": "Project"}


def serialize(doc: ContentDocument, *, list_view: bool = False) -> dict[str, Any]:
    exclude = LIST_EXCLUDES[doc.kind] if list_view else None
    data = dump(doc, exclude=exclude)
    data["url"] = doc.url
    return data


def list_documents(
    container: AppContainer,
    kind: ContentKind,
    principal: Principal,
    filters: ContentFilter,
    page: int | None,
    limit: int | None,
    sort: str | None,
    order: str | None,
) -> dict[str, Any]:
    out = run_list(
        ListContentInput(
            kind=kind,
            principal=principal,
            filters=filters,
            page=page,
            limit=limit,
            sort=sort,
            order=order,
        ),
        repo=container.content_repo(kind),
        time=container.clock,
        allowed_sorts=container.sort_fields(kind),
        default_limit=container.rules.pagination.default_limit,
        max_limit=container.rules.pagination.max_limit,
    )
    items = [serialize(d, list_view=True) for d in out.page.items]
    return page_envelope(out.page, items)


def get_document(
    container: AppContainer,
    kind: ContentKind,
    id_or_slug: str,
    principal: Principal,
    meta: RequestMeta,
) -> dict[str, Any]:
    out = run_get(
        GetContentInput(kind=kind, id_or_slug=id_or_slug, principal=principal, meta=meta),
        repo=container.content_repo(kind),
        time=container.clock,
        dispatcher=container.dispatcher,
        analytics=container.analytics,
    )
    return envelope(serialize(out.document))


def create_document(
    container: AppContainer, kind: ContentKind, fields: dict[str, Any]
) -> dict[str, Any]:
    out = run_create(
        CreateContentInput(kind=kind, fields=fields),
        repo=container.content_repo(kind),
        time=container.clock,
        settings=container.derivation,
    )
    return envelope(serialize(out.document), f"{LABELS[kind]} created")


def update_document(
    container: AppContainer,
    kind: ContentKind,
    content_id: str,
    patch: dict[str, Any],
    expected_version: int | None,
) -> dict[str, Any]:
    out = run_update(
        UpdateContentInput(
            kind=kind,
            content_id=content_id,
            patch=patch,
            expected_version=expected_version,
        ),
        repo=container.content_repo(kind),
        time=container.clock,
        settings=container.derivation,
    )
    return envelope(serialize(out.document), f"{LABELS[kind]} updated")


def delete_document(container: AppContainer, kind: ContentKind, content_id: str) -> dict[str, Any]:
    run_delete(
        DeleteContentInput(kind=kind, content_id=content_id),
        repo=container.content_repo(kind),
    )
    return envelope(None, f"{LABELS[kind]} deleted")
