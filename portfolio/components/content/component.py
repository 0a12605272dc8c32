"""
Content component - blog post and project repository operations.

Manages the document lifecycle for both content kinds:
- create/update validate source fields, then compute derived fields
  (slug, read time, SEO defaults, published_at) before persisting
- find_one resolves an id or slug and applies the visibility policy
- list pushes the visibility filter into the query so totals match
- public fetches count a view and record analytics as side effects

Slug uniqueness is enforced by storage; a collision is a ConflictError,
never a validation failure. Updates are compare-and-swap on ``version``.
"""

from __future__ import annotations

import logging
import re
from functools import partial
from typing import Any

from portfolio.components.analytics.component import build_event, record_event_task
from portfolio.components.analytics.ports import AnalyticsSinkPort
from portfolio.components.content.models import (
    CREATE_SCHEMAS,
    DEFAULT_SORT_FIELDS,
    REQUIRED_FIELDS,
    UPDATE_SCHEMAS,
    ContentListOutput,
    ContentOutput,
    ContentQuery,
    CreateContentInput,
    DeleteContentInput,
    GetContentInput,
    GetContentOutput,
    ListContentInput,
    UpdateContentInput,
)
from portfolio.components.content.ports import ContentRepoPort, TimePort
from portfolio.components.dispatch.models import DispatchReport, SideEffectTask
from portfolio.components.dispatch.ports import DispatcherPort
from portfolio.components.visibility.component import is_visible, visibility_filter
from portfolio.domain.derived import DerivationSettings, apply_derived_fields
from portfolio.domain.entities import BlogPost, ContentDocument, ContentKind, Project, Seo
from portfolio.domain.errors import (
    ConflictError,
    DuplicateKeyError,
    NotFoundError,
    StaleWriteError,
    ValidationError,
)
from portfolio.domain.pagination import Page, normalize_page_request
from portfolio.domain.validation import parse_model

logger = logging.getLogger(__name__)

ID_REGEX = re.compile(r"^[0-9a-f]{32}$", re.IGNORECASE)

ENTITY_TYPES: dict[str, type[BlogPost] | type[Project]] = {
    "blog": BlogPost,
    "project": Project,
}

KIND_LABELS: dict[str, str] = {"blog": "Blog post", "project": "Project"}


# --- Helpers ---


def _not_found(kind: ContentKind) -> NotFoundError:
    return NotFoundError(f"{KIND_LABELS[kind]} not found")


def _slug_conflict(kind: ContentKind, slug: str) -> ConflictError:
    return ConflictError(f"A {kind} with slug '{slug}' already exists")


def _build_document(kind: ContentKind, data: dict[str, Any]) -> ContentDocument:
    seo_data = data.pop("seo", None) or {}
    entity_cls = ENTITY_TYPES[kind]
    return entity_cls(**data, seo=Seo(**seo_data))


def _merge_patch(existing: ContentDocument, patch: dict[str, Any]) -> ContentDocument:
    merged = existing.model_dump()
    for key, value in patch.items():
        if key == "seo":
            merged["seo"] = {**merged["seo"], **(value or {})}
        else:
            merged[key] = value
    return type(existing).model_validate(merged)


def resolve_document(repo: ContentRepoPort, id_or_slug: str) -> ContentDocument | None:
    """Look up by id when the key looks like one, otherwise by slug."""
    key = id_or_slug.strip()
    if ID_REGEX.match(key):
        return repo.get_by_id(key.lower())
    return repo.get_by_slug(key.lower())


def view_tasks(
    doc: ContentDocument,
    repo: ContentRepoPort,
    analytics: AnalyticsSinkPort | None,
    inp: GetContentInput,
    time: TimePort,
) -> list[SideEffectTask]:
    tasks = [SideEffectTask(f"{doc.kind}.increment_views", partial(repo.increment_views, doc.id))]
    if analytics is not None:
        event = build_event(
            "blog_view" if doc.kind == "blog" else "project_view",
            doc.url,
            inp.meta,
            now=time.now_utc(),
            metadata={"content_id": doc.id, "slug": doc.slug},
        )
        tasks.append(record_event_task(analytics, event))
    return tasks


# --- Component Entry Points ---


def run_create(
    inp: CreateContentInput,
    *,
    repo: ContentRepoPort,
    time: TimePort,
    settings: DerivationSettings | None = None,
) -> ContentOutput:
    """
    Create a document from caller-supplied source fields.

    Raises:
        ValidationError: a field violates its constraint, or the title
            yields an empty slug.
        ConflictError: the derived slug is already taken.
    """
    data = parse_model(CREATE_SCHEMAS[inp.kind], inp.fields).model_dump()
    now = time.now_utc()

    doc = _build_document(inp.kind, data)
    doc = apply_derived_fields(doc, None, now, settings)
    doc = doc.model_copy(update={"created_at": now, "updated_at": now, "version": 0})

    try:
        saved = repo.insert(doc)
    except DuplicateKeyError as e:
        raise _slug_conflict(inp.kind, doc.slug) from e

    logger.info("Created %s %s (slug=%s, status=%s)", inp.kind, saved.id, saved.slug, saved.status)
    return ContentOutput(document=saved)


def run_update(
    inp: UpdateContentInput,
    *,
    repo: ContentRepoPort,
    time: TimePort,
    settings: DerivationSettings | None = None,
) -> ContentOutput:
    """
    Apply a partial update.

    Derived fields are recomputed only where their source changed.
    When ``expected_version`` is given it must match the stored version.
    """
    existing = repo.get_by_id(inp.content_id.lower())
    if existing is None:
        raise _not_found(inp.kind)

    if inp.expected_version is not None and inp.expected_version != existing.version:
        raise ConflictError("Document was modified by another request (stale write)")

    for key, value in inp.patch.items():
        if value is None and key in REQUIRED_FIELDS[inp.kind]:
            raise ValidationError(key, f"{key}: Field cannot be null")

    patch = parse_model(UPDATE_SCHEMAS[inp.kind], inp.patch).model_dump(exclude_unset=True)
    merged = _merge_patch(existing, patch)

    if isinstance(merged, Project) and merged.end_date is not None:
        if merged.end_date <= merged.start_date:
            raise ValidationError("end_date", "end_date must be after start_date")

    now = time.now_utc()
    doc = apply_derived_fields(merged, existing, now, settings)
    doc = doc.model_copy(update={"updated_at": now, "version": existing.version + 1})

    try:
        saved = repo.update(doc, expected_version=existing.version)
    except DuplicateKeyError as e:
        raise _slug_conflict(inp.kind, doc.slug) from e
    except StaleWriteError as e:
        raise ConflictError("Document was modified by another request (stale write)") from e

    if existing.status != saved.status:
        logger.info(
            "%s %s status %s -> %s", inp.kind, saved.id, existing.status, saved.status
        )
    return ContentOutput(document=saved)


def run_get(
    inp: GetContentInput,
    *,
    repo: ContentRepoPort,
    time: TimePort,
    dispatcher: DispatcherPort | None = None,
    analytics: AnalyticsSinkPort | None = None,
) -> GetContentOutput:
    """
    Find one document visible to the principal.

    Hidden and missing documents are indistinguishable (NotFoundError).
    Non-admin fetches dispatch a view increment and a view event.
    """
    doc = resolve_document(repo, inp.id_or_slug)
    if doc is None or not is_visible(doc, inp.principal, time.now_utc()):
        raise _not_found(inp.kind)

    report = DispatchReport()
    if inp.count_view and dispatcher is not None and not inp.principal.is_admin:
        report = dispatcher.dispatch(view_tasks(doc, repo, analytics, inp, time))

    return GetContentOutput(document=doc, dispatch=report)


def run_list(
    inp: ListContentInput,
    *,
    repo: ContentRepoPort,
    time: TimePort,
    allowed_sorts: list[str] | None = None,
    default_limit: int = 10,
    max_limit: int = 100,
) -> ContentListOutput:
    page_req = normalize_page_request(
        inp.page,
        inp.limit,
        inp.sort,
        inp.order,
        allowed_sorts=allowed_sorts or DEFAULT_SORT_FIELDS[inp.kind],
        default_limit=default_limit,
        max_limit=max_limit,
    )
    query = ContentQuery(
        filters=inp.filters,
        visibility=visibility_filter(inp.kind, inp.principal, time.now_utc()),
        page=page_req,
    )
    items, total = repo.list(query)
    return ContentListOutput(
        page=Page(items=items, total=total, page=page_req.page, limit=page_req.limit)
    )


def run_delete(inp: DeleteContentInput, *, repo: ContentRepoPort) -> None:
    if not repo.delete(inp.content_id.lower()):
        raise _not_found(inp.kind)
    logger.info("Deleted %s %s", inp.kind, inp.content_id)


def run_increment_views(content_id: str, *, repo: ContentRepoPort) -> None:
    repo.increment_views(content_id)


def run(
    inp: CreateContentInput
    | UpdateContentInput
    | GetContentInput
    | ListContentInput
    | DeleteContentInput,
    *,
    repo: ContentRepoPort,
    time: TimePort,
    settings: DerivationSettings | None = None,
    dispatcher: DispatcherPort | None = None,
    analytics: AnalyticsSinkPort | None = None,
) -> ContentOutput | GetContentOutput | ContentListOutput | None:
    """
    Main component entry point.

    Args:
        inp: Input command
        repo: Repository port for the input's content kind
        time: Time port
        settings: Derived-field settings (Optional)
        dispatcher: Side-effect dispatcher for public fetches (Optional)
        analytics: Analytics sink for view events (Optional)
    """
    if isinstance(inp, CreateContentInput):
        return run_create(inp, repo=repo, time=time, settings=settings)
    elif isinstance(inp, UpdateContentInput):
        return run_update(inp, repo=repo, time=time, settings=settings)
    elif isinstance(inp, GetContentInput):
        return run_get(inp, repo=repo, time=time, dispatcher=dispatcher, analytics=analytics)
    elif isinstance(inp, ListContentInput):
        return run_list(inp, repo=repo, time=time)
    elif isinstance(inp, DeleteContentInput):
        run_delete(inp, repo=repo)
        return None
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
