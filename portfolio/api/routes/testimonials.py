"""
Testimonial endpoints.

Anyone may submit a testimonial; it stays pending until an admin approves
it. Public listings only include approved testimonials.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status

from portfolio.api.deps import Container, CurrentPrincipal, require_admin
from portfolio.api.responses import dump, envelope, page_envelope
from portfolio.components import testimonials as tm
from portfolio.domain.entities import Principal, Testimonial, TestimonialStatus

router = APIRouter()


def serialize(testimonial: Testimonial, principal: Principal) -> dict[str, Any]:
    # Email addresses are never shown publicly
    data = dump(testimonial, exclude=None if principal.is_admin else {"email"})
    data["full_title"] = testimonial.full_title
    return data


@router.get("")
def list_testimonials(
    container: Container,
    principal: CurrentPrincipal,
    page: int | None = Query(None),
    limit: int | None = Query(None),
    sort: str | None = Query(None),
    order: str | None = Query(None),
    status_filter: TestimonialStatus | None = Query(None, alias="status"),
    featured: bool | None = Query(None),
    search: str | None = Query(None, max_length=100),
) -> dict[str, Any]:
    out = tm.run_list(
        tm.ListTestimonialsInput(
            principal=principal,
            filters=tm.TestimonialFilter(status=status_filter, featured=featured, search=search),
            page=page,
            limit=limit,
            sort=sort,
            order=order,
        ),
        repo=container.testimonials,
        default_limit=container.rules.pagination.default_limit,
        max_limit=container.rules.pagination.max_limit,
    )
    return page_envelope(out.page, [serialize(t, principal) for t in out.page.items])


@router.post("", status_code=status.HTTP_201_CREATED)
def submit_testimonial(
    container: Container,
    principal: CurrentPrincipal,
    body: dict[str, Any] = Body(...),
) -> dict[str, Any]:
    out = tm.run_submit(
        tm.SubmitTestimonialInput(data=body, principal=principal),
        repo=container.testimonials,
        time=container.clock,
    )
    message = (
        "Testimonial created"
        if principal.is_admin
        else "Thank you! Your testimonial will appear once it has been reviewed."
    )
    return envelope(serialize(out.testimonial, principal), message)


@router.get("/{testimonial_id}")
def get_testimonial(
    testimonial_id: str, container: Container, principal: CurrentPrincipal
) -> dict[str, Any]:
    out = tm.run_get(
        tm.GetTestimonialInput(testimonial_id=testimonial_id, principal=principal),
        repo=container.testimonials,
    )
    return envelope(serialize(out.testimonial, principal))


@router.put("/{testimonial_id}")
def update_testimonial(
    testimonial_id: str,
    container: Container,
    principal: Principal = Depends(require_admin),
    body: dict[str, Any] = Body(...),
    expected_version: int | None = Query(None),
) -> dict[str, Any]:
    out = tm.run_update(
        tm.UpdateTestimonialInput(
            testimonial_id=testimonial_id, patch=body, expected_version=expected_version
        ),
        repo=container.testimonials,
        time=container.clock,
    )
    return envelope(serialize(out.testimonial, principal), "Testimonial updated")


@router.delete("/{testimonial_id}", dependencies=[Depends(require_admin)])
def delete_testimonial(testimonial_id: str, container: Container) -> dict[str, Any]:
    tm.run_delete(tm.DeleteTestimonialInput(testimonial_id=testimonial_id), repo=container.testimonials)
    return envelope(None, "Testimonial deleted")
