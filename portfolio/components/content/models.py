"""
Content component input/output models.

Write payloads are validated against the pydantic schemas below before any
derived field is computed; the first failing field is reported.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    model_validator,
)

from portfolio.components.analytics.models import RequestMeta
from portfolio.components.dispatch.models import DispatchReport
from portfolio.components.visibility.models import VisibilityFilter
from portfolio.domain.entities import (
    BlogStatus,
    ContentDocument,
    ContentKind,
    Principal,
    ProjectStatus,
)
from portfolio.domain.pagination import Page, PageRequest

# --- Field constraints ---

TitleStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=5, max_length=200)]
CategoryStr = Annotated[
    str, StringConstraints(strip_whitespace=True, to_lower=True, min_length=2, max_length=50)
]
TagStr = Annotated[
    str, StringConstraints(strip_whitespace=True, to_lower=True, min_length=2, max_length=30)
]
TechnologyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=30)]
UrlStr = Annotated[str, StringConstraints(strip_whitespace=True, pattern=r"^https?://\S+$")]
GithubUrlStr = Annotated[
    str, StringConstraints(strip_whitespace=True, pattern=r"^https://github\.com/\S+$")
]


class SeoSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    meta_title: str | None = Field(default=None, max_length=60)
    meta_description: str | None = Field(default=None, max_length=160)
    keywords: list[str] = Field(default_factory=list, max_length=10)


class BlogCreateSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: TitleStr
    content: str = Field(min_length=100)
    excerpt: str = Field(min_length=50, max_length=500)
    featured_image: UrlStr | None = None
    tags: list[TagStr] = Field(default_factory=list, max_length=10)
    category: CategoryStr
    status: BlogStatus = "draft"
    author: str = Field(default="Admin", min_length=2, max_length=100)
    seo: SeoSchema | None = None


class BlogUpdateSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: TitleStr | None = None
    content: str | None = Field(default=None, min_length=100)
    excerpt: str | None = Field(default=None, min_length=50, max_length=500)
    featured_image: UrlStr | None = None
    tags: list[TagStr] | None = Field(default=None, max_length=10)
    category: CategoryStr | None = None
    status: BlogStatus | None = None
    author: str | None = Field(default=None, min_length=2, max_length=100)
    seo: SeoSchema | None = None


class ProjectCreateSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: TitleStr
    description: str = Field(min_length=100)
    short_description: str = Field(min_length=50, max_length=300)
    featured_image: UrlStr | None = None
    images: list[UrlStr] = Field(default_factory=list, max_length=10)
    technologies: list[TechnologyStr] = Field(min_length=1, max_length=20)
    category: CategoryStr
    status: ProjectStatus = "planning"
    github_url: GithubUrlStr | None = None
    live_url: UrlStr | None = None
    demo_url: UrlStr | None = None
    start_date: date
    end_date: date | None = None
    featured: bool = False
    order: int = Field(default=0, ge=0)
    seo: SeoSchema | None = None

    @model_validator(mode="after")
    def check_dates(self) -> ProjectCreateSchema:
        if self.end_date is not None and self.end_date <= self.start_date:
            raise ValueError("end_date must be after start_date")
        return self


class ProjectUpdateSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: TitleStr | None = None
    description: str | None = Field(default=None, min_length=100)
    short_description: str | None = Field(default=None, min_length=50, max_length=300)
    featured_image: UrlStr | None = None
    images: list[UrlStr] | None = Field(default=None, max_length=10)
    technologies: list[TechnologyStr] | None = Field(default=None, min_length=1, max_length=20)
    category: CategoryStr | None = None
    status: ProjectStatus | None = None
    github_url: GithubUrlStr | None = None
    live_url: UrlStr | None = None
    demo_url: UrlStr | None = None
    start_date: date | None = None
    end_date: date | None = None
    featured: bool | None = None
    order: int | None = Field(default=None, ge=0)
    seo: SeoSchema | None = None


CREATE_SCHEMAS: dict[str, type[BaseModel]] = {
    "blog": BlogCreateSchema,
    "project": ProjectCreateSchema,
}

UPDATE_SCHEMAS: dict[str, type[BaseModel]] = {
    "blog": BlogUpdateSchema,
    "project": ProjectUpdateSchema,
}

# Fields that a patch may not clear by sending null.
REQUIRED_FIELDS: dict[str, frozenset[str]] = {
    "blog": frozenset({"title", "content", "excerpt", "category", "status", "author"}),
    "project": frozenset(
        {
            "title",
            "description",
            "short_description",
            "technologies",
            "category",
            "status",
            "start_date",
            "featured",
            "order",
        }
    ),
}

DEFAULT_SORT_FIELDS: dict[str, list[str]] = {
    "blog": ["created_at", "updated_at", "published_at", "title", "views", "likes"],
    "project": ["created_at", "updated_at", "start_date", "title", "order", "views"],
}


# --- Input Models ---


@dataclass(frozen=True)
class CreateContentInput:
    kind: ContentKind
    fields: dict[str, Any]


@dataclass(frozen=True)
class UpdateContentInput:
    kind: ContentKind
    content_id: str
    patch: dict[str, Any]
    expected_version: int | None = None


@dataclass(frozen=True)
class GetContentInput:
    """Fetch by id or slug. Public fetches count a view as a side effect."""

    kind: ContentKind
    id_or_slug: str
    principal: Principal = field(default_factory=Principal.anonymous)
    count_view: bool = True
    meta: RequestMeta = field(default_factory=RequestMeta)


@dataclass(frozen=True)
class ContentFilter:
    search: str | None = None
    category: str | None = None
    tag: str | None = None
    technology: str | None = None
    status: str | None = None
    featured: bool | None = None


@dataclass(frozen=True)
class ListContentInput:
    kind: ContentKind
    principal: Principal = field(default_factory=Principal.anonymous)
    filters: ContentFilter = field(default_factory=ContentFilter)
    page: int | None = None
    limit: int | None = None
    sort: str | None = None
    order: str | None = None


@dataclass(frozen=True)
class DeleteContentInput:
    kind: ContentKind
    content_id: str


@dataclass(frozen=True)
class ContentQuery:
    """Repository-level list query: filters, visibility and paging already resolved."""

    filters: ContentFilter
    visibility: VisibilityFilter
    page: PageRequest


# --- Output Models ---


@dataclass(frozen=True)
class ContentOutput:
    document: ContentDocument
    success: bool = True


@dataclass(frozen=True)
class GetContentOutput:
    document: ContentDocument
    dispatch: DispatchReport = field(default_factory=DispatchReport)
    success: bool = True


@dataclass(frozen=True)
class ContentListOutput:
    page: Page[ContentDocument]
    success: bool = True
