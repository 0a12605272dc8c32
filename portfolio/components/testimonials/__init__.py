"""
Testimonials component.

Public submission (pending), admin moderation, and approved-only public
listing.
"""

from portfolio.components.testimonials.component import (
    TESTIMONIAL_SORT_FIELDS,
    run,
    run_delete,
    run_get,
    run_list,
    run_submit,
    run_update,
)
from portfolio.components.testimonials.models import (
    DeleteTestimonialInput,
    GetTestimonialInput,
    ListTestimonialsInput,
    SubmitTestimonialInput,
    TestimonialAdminSchema,
    TestimonialCreateSchema,
    TestimonialFilter,
    TestimonialListOutput,
    TestimonialOutput,
    TestimonialQuery,
    TestimonialUpdateSchema,
    UpdateTestimonialInput,
)
from portfolio.components.testimonials.ports import TestimonialRepoPort

__all__ = [
    "run",
    "run_submit",
    "run_list",
    "run_get",
    "run_update",
    "run_delete",
    "TESTIMONIAL_SORT_FIELDS",
    "TestimonialCreateSchema",
    "TestimonialAdminSchema",
    "TestimonialUpdateSchema",
    "SubmitTestimonialInput",
    "ListTestimonialsInput",
    "GetTestimonialInput",
    "UpdateTestimonialInput",
    "DeleteTestimonialInput",
    "TestimonialFilter",
    "TestimonialQuery",
    "TestimonialOutput",
    "TestimonialListOutput",
    "TestimonialRepoPort",
]
