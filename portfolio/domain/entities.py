from datetime import UTC, date, datetime
from typing import Any, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

# --- Enums / Literals ---
RoleType = Literal["admin", "user"]
ContentKind = Literal["blog", "project"]
BlogStatus = Literal["draft", "published", "archived"]
ProjectStatus = Literal["planning", "in-progress", "completed", "archived"]
SubscriberStatus = Literal["active", "unsubscribed", "bounced"]
SubscriberSource = Literal["website", "blog", "social", "referral"]
ContactStatus = Literal["new", "read", "replied", "archived"]
ContactPriority = Literal["low", "medium", "high"]
ContactSource = Literal["website", "linkedin", "email", "referral", "other"]
TestimonialStatus = Literal["pending", "approved", "rejected"]
MediaCategory = Literal["image", "document", "other"]
AnalyticsEventType = Literal[
    "page_view",
    "blog_view",
    "project_view",
    "contact_form",
    "newsletter_subscription",
    "download",
    "click",
]


def new_id() -> str:
    """32-char lowercase hex identifier."""
    return uuid4().hex


def utcnow() -> datetime:
    return datetime.now(UTC)


# --- Users & Principals ---

class User(BaseModel):
    id: str = Field(default_factory=new_id)
    email: str
    name: str
    password_hash: str
    role: RoleType = "user"
    is_active: bool = True
    last_login: datetime | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Principal(BaseModel):
    """The actor behind a request, authenticated or not."""

    model_config = ConfigDict(frozen=True)

    authenticated: bool = False
    role: RoleType = "user"
    active: bool = False
    user_id: str | None = None
    email: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.authenticated and self.active and self.role == "admin"

    @classmethod
    def anonymous(cls) -> "Principal":
        return cls()

    @classmethod
    def for_user(cls, user: User) -> "Principal":
        return cls(
            authenticated=True,
            role=user.role,
            active=user.is_active,
            user_id=user.id,
            email=user.email,
        )


# --- Content ---

class Seo(BaseModel):
    meta_title: str | None = None
    meta_description: str | None = None
    keywords: list[str] = Field(default_factory=list)


class BlogPost(BaseModel):
    id: str = Field(default_factory=new_id)
    kind: Literal["blog"] = "blog"
    title: str
    slug: str = ""
    content: str
    excerpt: str
    featured_image: str | None = None
    tags: list[str] = Field(default_factory=list)
    category: str
    status: BlogStatus = "draft"
    author: str = "Admin"
    published_at: datetime | None = None
    read_time: int = 0
    views: int = 0
    likes: int = 0
    seo: Seo = Field(default_factory=Seo)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    version: int = 0

    @property
    def url(self) -> str:
        return f"/blog/{self.slug}"


class Project(BaseModel):
    id: str = Field(default_factory=new_id)
    kind: Literal["project"] = "project"
    title: str
    slug: str = ""
    description: str
    short_description: str
    featured_image: str | None = None
    images: list[str] = Field(default_factory=list)
    technologies: list[str] = Field(default_factory=list)
    category: str
    status: ProjectStatus = "planning"
    github_url: str | None = None
    live_url: str | None = None
    demo_url: str | None = None
    start_date: date
    end_date: date | None = None
    featured: bool = False
    order: int = 0
    published_at: datetime | None = None
    views: int = 0
    seo: Seo = Field(default_factory=Seo)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    version: int = 0

    @property
    def url(self) -> str:
        return f"/projects/{self.slug}"


ContentDocument = BlogPost | Project

# Statuses under which a document may be shown publicly once published_at has passed.
PUBLISHED_STATUSES: dict[str, frozenset[str]] = {
    "blog": frozenset({"published"}),
    "project": frozenset({"planning", "in-progress", "completed"}),
}


# --- Newsletter ---

class SubscriberPreferences(BaseModel):
    blog_updates: bool = True
    project_updates: bool = True
    newsletter: bool = True


class Subscriber(BaseModel):
    id: str = Field(default_factory=new_id)
    email: str
    name: str | None = None
    status: SubscriberStatus = "active"
    source: SubscriberSource = "website"
    preferences: SubscriberPreferences = Field(default_factory=SubscriberPreferences)
    subscribed_at: datetime = Field(default_factory=utcnow)
    unsubscribed_at: datetime | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    version: int = 0

    @property
    def display_name(self) -> str:
        return self.name or self.email.split("@")[0]


# --- Analytics ---

class AnalyticsEvent(BaseModel):
    """Append-only analytics record."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    event_type: AnalyticsEventType
    path: str
    referrer: str | None = None
    user_agent: str | None = None
    ip_address: str | None = None
    device: str | None = None
    browser: str | None = None
    os: str | None = None
    session_id: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=utcnow)


# --- Contact & Testimonials ---

class ContactMessage(BaseModel):
    id: str = Field(default_factory=new_id)
    name: str
    email: str
    subject: str
    message: str
    phone: str | None = None
    company: str | None = None
    status: ContactStatus = "new"
    priority: ContactPriority = "medium"
    source: ContactSource = "website"
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    version: int = 0


class Testimonial(BaseModel):
    id: str = Field(default_factory=new_id)
    name: str
    email: str
    company: str | None = None
    position: str | None = None
    avatar: str | None = None
    content: str
    rating: int
    status: TestimonialStatus = "pending"
    featured: bool = False
    order: int = 0
    project_id: str | None = None
    linkedin_url: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    version: int = 0

    @property
    def full_title(self) -> str:
        if self.position and self.company:
            return f"{self.position} at {self.company}"
        return self.position or self.company or ""


# --- Site settings ---

class SocialLinks(BaseModel):
    github: str | None = None
    linkedin: str | None = None
    twitter: str | None = None
    instagram: str | None = None
    youtube: str | None = None
    website: str | None = None


class SiteSeo(BaseModel):
    meta_title: str | None = None
    meta_description: str | None = None
    keywords: list[str] = Field(default_factory=list)
    og_image: str | None = None


class SiteAnalytics(BaseModel):
    google_analytics_id: str = ""
    google_tag_manager_id: str = ""
    facebook_pixel_id: str = ""


class EmailSettings(BaseModel):
    from_name: str = "Portfolio"
    from_email: str | None = None
    reply_to_email: str | None = None


class FeatureFlags(BaseModel):
    blog_enabled: bool = True
    projects_enabled: bool = True
    testimonials_enabled: bool = True
    contact_form_enabled: bool = True
    newsletter_enabled: bool = True
    comments_enabled: bool = False


class Maintenance(BaseModel):
    enabled: bool = False
    message: str = "Site is under maintenance. Please check back later."
    allowed_ips: list[str] = Field(default_factory=list)


class Theme(BaseModel):
    primary_color: str = "#3b82f6"
    secondary_color: str = "#64748b"
    dark_mode: bool = False


class SiteSettings(BaseModel):
    """Singleton row of site-wide configuration edited from the admin."""

    site_name: str
    site_description: str
    site_url: str
    site_logo: str | None = None
    favicon: str | None = None
    contact_email: str
    contact_phone: str | None = None
    contact_address: str | None = None
    social_media: SocialLinks = Field(default_factory=SocialLinks)
    seo: SiteSeo = Field(default_factory=SiteSeo)
    analytics: SiteAnalytics = Field(default_factory=SiteAnalytics)
    email: EmailSettings = Field(default_factory=EmailSettings)
    features: FeatureFlags = Field(default_factory=FeatureFlags)
    maintenance: Maintenance = Field(default_factory=Maintenance)
    theme: Theme = Field(default_factory=Theme)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    version: int = 0

    @property
    def full_site_title(self) -> str:
        return self.seo.meta_title or self.site_name

    @property
    def full_site_description(self) -> str:
        return self.seo.meta_description or self.site_description


# --- Media ---

class MediaFile(BaseModel):
    """Metadata of an uploaded file; the bytes live in storage under ``key``."""

    id: str = Field(default_factory=new_id)
    key: str
    filename: str
    content_type: str
    size_bytes: int
    category: MediaCategory
    folder: str = "uploads"
    description: str = ""
    sha256: str
    uploaded_by: str | None = None
    created_at: datetime = Field(default_factory=utcnow)

    @property
    def url(self) -> str:
        return f"/api/media/files/{self.key}"
