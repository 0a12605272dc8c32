"""
Testimonials component models.

Moderation states: pending → approved | rejected. Only approved
testimonials are visible to non-admin principals.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator

from portfolio.components.content.models import UrlStr
from portfolio.components.newsletter.component import validate_email
from portfolio.domain.entities import Principal, Testimonial, TestimonialStatus
from portfolio.domain.pagination import Page, PageRequest

NameStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=100)]
ContentStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=20, max_length=1000)]
LinkedinUrlStr = Annotated[
    str, StringConstraints(strip_whitespace=True, pattern=r"^https://www\.linkedin\.com/\S*$")
]
ProjectIdStr = Annotated[str, StringConstraints(to_lower=True, pattern=r"^[0-9a-f]{32}$")]


class TestimonialCreateSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: NameStr
    email: str
    company: str | None = Field(default=None, max_length=100)
    position: str | None = Field(default=None, max_length=100)
    avatar: UrlStr | None = None
    content: ContentStr
    rating: int = Field(ge=1, le=5)
    project_id: ProjectIdStr | None = None
    linkedin_url: LinkedinUrlStr | None = None

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        if not validate_email(value).is_valid:
            raise ValueError("Please provide a valid email address")
        return value.strip()

    @field_validator("company", "position", "avatar", "project_id", "linkedin_url", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class TestimonialAdminSchema(TestimonialCreateSchema):
    """Fields only an admin may set."""

    status: TestimonialStatus = "pending"
    featured: bool = False
    order: int = Field(default=0, ge=0)


class TestimonialUpdateSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: NameStr | None = None
    email: str | None = None
    company: str | None = Field(default=None, max_length=100)
    position: str | None = Field(default=None, max_length=100)
    avatar: UrlStr | None = None
    content: ContentStr | None = None
    rating: int | None = Field(default=None, ge=1, le=5)
    project_id: ProjectIdStr | None = None
    linkedin_url: LinkedinUrlStr | None = None
    status: TestimonialStatus | None = None
    featured: bool | None = None
    order: int | None = Field(default=None, ge=0)

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str | None) -> str | None:
        if value is not None and not validate_email(value).is_valid:
            raise ValueError("Please provide a valid email address")
        return value.strip() if value else value

    @field_validator("company", "position", "avatar", "project_id", "linkedin_url", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


# --- Input Models ---


@dataclass(frozen=True)
class SubmitTestimonialInput:
    """Admins may set status/featured/order; everyone else submits as pending."""

    data: dict[str, Any]
    principal: Principal = field(default_factory=Principal.anonymous)


@dataclass(frozen=True)
class TestimonialFilter:
    status: TestimonialStatus | None = None
    featured: bool | None = None
    search: str | None = None


@dataclass(frozen=True)
class ListTestimonialsInput:
    principal: Principal = field(default_factory=Principal.anonymous)
    filters: TestimonialFilter = field(default_factory=TestimonialFilter)
    page: int | None = None
    limit: int | None = None
    sort: str | None = None
    order: str | None = None


@dataclass(frozen=True)
class TestimonialQuery:
    filters: TestimonialFilter
    visible_statuses: frozenset[str] | None  # None = all
    page: PageRequest


@dataclass(frozen=True)
class GetTestimonialInput:
    testimonial_id: str
    principal: Principal = field(default_factory=Principal.anonymous)


@dataclass(frozen=True)
class UpdateTestimonialInput:
    testimonial_id: str
    patch: dict[str, Any]
    expected_version: int | None = None


@dataclass(frozen=True)
class DeleteTestimonialInput:
    testimonial_id: str


# --- Output Models ---


@dataclass(frozen=True)
class TestimonialOutput:
    testimonial: Testimonial
    success: bool = True


@dataclass(frozen=True)
class TestimonialListOutput:
    page: Page[Testimonial]
    success: bool = True
