"""
Testimonials component - submission, moderation and visibility-aware reads.
"""

from __future__ import annotations

import logging

from portfolio.components.testimonials.models import (
    DeleteTestimonialInput,
    GetTestimonialInput,
    ListTestimonialsInput,
    SubmitTestimonialInput,
    TestimonialAdminSchema,
    TestimonialCreateSchema,
    TestimonialListOutput,
    TestimonialOutput,
    TestimonialQuery,
    TestimonialUpdateSchema,
    UpdateTestimonialInput,
)
from portfolio.components.testimonials.ports import TestimonialRepoPort, TimePort
from portfolio.components.visibility.component import (
    is_testimonial_visible,
    testimonial_status_filter,
)
from portfolio.domain.entities import Testimonial
from portfolio.domain.errors import ConflictError, NotFoundError, StaleWriteError, ValidationError
from portfolio.domain.pagination import Page, normalize_page_request
from portfolio.domain.validation import parse_model

logger = logging.getLogger(__name__)

TESTIMONIAL_SORT_FIELDS = ["created_at", "updated_at", "rating", "order", "name"]

REQUIRED_FIELDS = frozenset({"name", "email", "content", "rating", "status", "featured", "order"})


def run_submit(
    inp: SubmitTestimonialInput,
    *,
    repo: TestimonialRepoPort,
    time: TimePort,
) -> TestimonialOutput:
    schema = TestimonialAdminSchema if inp.principal.is_admin else TestimonialCreateSchema
    data = parse_model(schema, inp.data).model_dump()
    now = time.now_utc()

    testimonial = repo.insert(Testimonial(**data, created_at=now, updated_at=now))
    logger.info("Testimonial %s submitted (status=%s)", testimonial.id, testimonial.status)
    return TestimonialOutput(testimonial=testimonial)


def run_list(
    inp: ListTestimonialsInput,
    *,
    repo: TestimonialRepoPort,
    default_limit: int = 10,
    max_limit: int = 100,
) -> TestimonialListOutput:
    page_req = normalize_page_request(
        inp.page,
        inp.limit,
        inp.sort,
        inp.order,
        allowed_sorts=TESTIMONIAL_SORT_FIELDS,
        default_limit=default_limit,
        max_limit=max_limit,
    )
    query = TestimonialQuery(
        filters=inp.filters,
        visible_statuses=testimonial_status_filter(inp.principal),
        page=page_req,
    )
    items, total = repo.list(query)
    return TestimonialListOutput(
        page=Page(items=items, total=total, page=page_req.page, limit=page_req.limit)
    )


def run_get(inp: GetTestimonialInput, *, repo: TestimonialRepoPort) -> TestimonialOutput:
    testimonial = repo.get_by_id(inp.testimonial_id.strip().lower())
    if testimonial is None or not is_testimonial_visible(testimonial, inp.principal):
        raise NotFoundError("Testimonial not found")
    return TestimonialOutput(testimonial=testimonial)


def run_update(
    inp: UpdateTestimonialInput,
    *,
    repo: TestimonialRepoPort,
    time: TimePort,
) -> TestimonialOutput:
    existing = repo.get_by_id(inp.testimonial_id.strip().lower())
    if existing is None:
        raise NotFoundError("Testimonial not found")

    if inp.expected_version is not None and inp.expected_version != existing.version:
        raise ConflictError("Testimonial was modified by another request (stale write)")

    for key, value in inp.patch.items():
        if value is None and key in REQUIRED_FIELDS:
            raise ValidationError(key, f"{key}: Field cannot be null")

    patch = parse_model(TestimonialUpdateSchema, inp.patch).model_dump(exclude_unset=True)
    updated = existing.model_copy(
        update={**patch, "updated_at": time.now_utc(), "version": existing.version + 1}
    )
    try:
        saved = repo.update(updated, expected_version=existing.version)
    except StaleWriteError as e:
        raise ConflictError("Testimonial was modified by another request (stale write)") from e

    if existing.status != saved.status:
        logger.info("Testimonial %s %s -> %s", saved.id, existing.status, saved.status)
    return TestimonialOutput(testimonial=saved)


def run_delete(inp: DeleteTestimonialInput, *, repo: TestimonialRepoPort) -> None:
    if not repo.delete(inp.testimonial_id.strip().lower()):
        raise NotFoundError("Testimonial not found")
    logger.info("Deleted testimonial %s", inp.testimonial_id)


def run(
    inp: SubmitTestimonialInput
    | ListTestimonialsInput
    | GetTestimonialInput
    | UpdateTestimonialInput
    | DeleteTestimonialInput,
    *,
    repo: TestimonialRepoPort,
    time: TimePort,
) -> TestimonialOutput | TestimonialListOutput | None:
    """Main component entry point."""
    if isinstance(inp, SubmitTestimonialInput):
        return run_submit(inp, repo=repo, time=time)
    elif isinstance(inp, ListTestimonialsInput):
        return run_list(inp, repo=repo)
    elif isinstance(inp, GetTestimonialInput):
        return run_get(inp, repo=repo)
    elif isinstance(inp, UpdateTestimonialInput):
        return run_update(inp, repo=repo, time=time)
    elif isinstance(inp, DeleteTestimonialInput):
        run_delete(inp, repo=repo)
        return None
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
