"""
Testimonials component ports.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from portfolio.components.testimonials.models import TestimonialQuery
from portfolio.domain.entities import Testimonial


class TestimonialRepoPort(Protocol):
    def get_by_id(self, testimonial_id: str) -> Testimonial | None: ...

    def insert(self, testimonial: Testimonial) -> Testimonial: ...

    def update(self, testimonial: Testimonial, expected_version: int) -> Testimonial: ...

    def delete(self, testimonial_id: str) -> bool: ...

    def list(self, query: TestimonialQuery) -> tuple[list[Testimonial], int]: ...


class TimePort(Protocol):
    def now_utc(self) -> datetime: ...
