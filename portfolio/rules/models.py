from pydantic import BaseModel, Field


class ProjectRules(BaseModel):
    slug: str
    rules_version: str


class SeoRules(BaseModel):
    meta_title_max: int = 60
    meta_description_max: int = 160
    keywords_max: int = 10


class ContentRules(BaseModel):
    words_per_minute: int = Field(default=200, gt=0)
    seo: SeoRules = Field(default_factory=SeoRules)
    blog_sort_fields: list[str]
    project_sort_fields: list[str]


class PaginationRules(BaseModel):
    default_limit: int = Field(default=10, ge=1)
    max_limit: int = Field(default=100, ge=1)


class DispatchRules(BaseModel):
    budget_seconds: float = Field(default=2.0, gt=0)
    max_workers: int = Field(default=4, ge=1)


class NewsletterRules(BaseModel):
    allowed_sources: list[str]
    default_source: str = "website"


class MediaRules(BaseModel):
    max_size_bytes: int = Field(default=10 * 1024 * 1024, gt=0)
    image_types: list[str]
    document_types: list[str]
    default_folder: str = "uploads"


class AuthRules(BaseModel):
    token_ttl_minutes: int = Field(default=60 * 24, gt=0)
    cookie_secure: bool = False


class OpsRules(BaseModel):
    required_env: list[str] = Field(default_factory=list)


class Rules(BaseModel):
    project: ProjectRules
    content: ContentRules
    pagination: PaginationRules = Field(default_factory=PaginationRules)
    dispatch: DispatchRules = Field(default_factory=DispatchRules)
    newsletter: NewsletterRules
    media: MediaRules
    auth: AuthRules = Field(default_factory=AuthRules)
    ops: OpsRules = Field(default_factory=OpsRules)
