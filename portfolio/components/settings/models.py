"""
Settings component input/output models.

Updates are partial at two levels: top-level fields and the fields inside
each section (social_media, seo, analytics, email, features, maintenance,
theme). Blank optional strings clear the stored value.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    IPvAnyAddress,
    StringConstraints,
    field_validator,
)

from portfolio.components.content.models import UrlStr
from portfolio.components.newsletter.component import validate_email
from portfolio.domain.entities import SiteSettings


def _profile_url(pattern: str) -> Any:
    return Annotated[str, StringConstraints(strip_whitespace=True, pattern=pattern)]


GithubProfileStr = _profile_url(r"^https://github\.com/\S*$")
LinkedinProfileStr = _profile_url(r"^https://www\.linkedin\.com/\S*$")
TwitterProfileStr = _profile_url(r"^https://(twitter\.com|x\.com)/\S*$")
InstagramProfileStr = _profile_url(r"^https://www\.instagram\.com/\S*$")
YoutubeChannelStr = _profile_url(r"^https://www\.youtube\.com/\S*$")
HexColorStr = Annotated[str, StringConstraints(pattern=r"^#[0-9A-Fa-f]{6}$")]
KeywordStr = Annotated[
    str, StringConstraints(strip_whitespace=True, to_lower=True, min_length=2, max_length=30)
]
SiteNameStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=100)]
SiteDescriptionStr = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=10, max_length=500)
]


def blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def check_email(value: str | None) -> str | None:
    if value is None:
        return None
    if not validate_email(value).is_valid:
        raise ValueError("Please provide a valid email address")
    return value.strip().lower()


class SocialLinksSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    github: GithubProfileStr | None = None
    linkedin: LinkedinProfileStr | None = None
    twitter: TwitterProfileStr | None = None
    instagram: InstagramProfileStr | None = None
    youtube: YoutubeChannelStr | None = None
    website: UrlStr | None = None

    @field_validator("*", mode="before")
    @classmethod
    def clear_blank(cls, value: Any) -> Any:
        return blank_to_none(value)


class SiteSeoSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    meta_title: str | None = Field(default=None, max_length=60)
    meta_description: str | None = Field(default=None, max_length=160)
    keywords: list[KeywordStr] | None = Field(default=None, max_length=20)
    og_image: UrlStr | None = None

    @field_validator("meta_title", "meta_description", "og_image", mode="before")
    @classmethod
    def clear_blank(cls, value: Any) -> Any:
        return blank_to_none(value)


class SiteAnalyticsSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    google_analytics_id: str | None = None
    google_tag_manager_id: str | None = None
    facebook_pixel_id: str | None = None


class EmailSettingsSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    from_name: str | None = Field(default=None, max_length=100)
    from_email: str | None = None
    reply_to_email: str | None = None

    @field_validator("from_email", "reply_to_email", mode="before")
    @classmethod
    def clear_blank(cls, value: Any) -> Any:
        return blank_to_none(value)

    @field_validator("from_email", "reply_to_email")
    @classmethod
    def check_addresses(cls, value: str | None) -> str | None:
        return check_email(value)


class FeatureFlagsSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    blog_enabled: bool | None = None
    projects_enabled: bool | None = None
    testimonials_enabled: bool | None = None
    contact_form_enabled: bool | None = None
    newsletter_enabled: bool | None = None
    comments_enabled: bool | None = None


class MaintenanceSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    enabled: bool | None = None
    message: str | None = Field(default=None, max_length=500)
    allowed_ips: list[IPvAnyAddress] | None = None


class ThemeSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    primary_color: HexColorStr | None = None
    secondary_color: HexColorStr | None = None
    dark_mode: bool | None = None


class SettingsUpdateSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    site_name: SiteNameStr | None = None
    site_description: SiteDescriptionStr | None = None
    site_url: UrlStr | None = None
    site_logo: UrlStr | None = None
    favicon: UrlStr | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    contact_address: str | None = None
    social_media: SocialLinksSchema | None = None
    seo: SiteSeoSchema | None = None
    analytics: SiteAnalyticsSchema | None = None
    email: EmailSettingsSchema | None = None
    features: FeatureFlagsSchema | None = None
    maintenance: MaintenanceSchema | None = None
    theme: ThemeSchema | None = None

    @field_validator("site_logo", "favicon", "contact_phone", "contact_address", mode="before")
    @classmethod
    def clear_blank(cls, value: Any) -> Any:
        return blank_to_none(value)

    @field_validator("contact_email")
    @classmethod
    def check_contact_email(cls, value: str | None) -> str | None:
        return check_email(value)


# --- Input Models ---


@dataclass(frozen=True)
class SettingsDefaults:
    """Deployment values the first settings row is seeded from."""

    site_name: str = "Portfolio Website"
    site_description: str = "Professional portfolio showcasing skills and projects"
    site_url: str = "http://localhost:3000"
    contact_email: str = "admin@example.com"
    from_name: str = "Portfolio"
    from_email: str | None = None
    google_analytics_id: str = ""
    keywords: tuple[str, ...] = ("portfolio", "developer", "web development")


@dataclass(frozen=True)
class GetSettingsInput:
    """Input for reading settings (created from defaults when absent)."""

    pass


@dataclass(frozen=True)
class UpdateSettingsInput:
    patch: dict[str, Any]
    expected_version: int | None = None


@dataclass(frozen=True)
class ResetSettingsInput:
    """Input for resetting settings to defaults."""

    pass


# --- Output Models ---


@dataclass(frozen=True)
class SettingsOutput:
    settings: SiteSettings
    created: bool = False
    success: bool = True
