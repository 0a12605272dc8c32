"""
Media component models.

Uploads are grouped into image, document and other by content type.
Stored keys look like ``{folder}/{epoch_ms}_{sanitized_filename}``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from portfolio.domain.entities import MediaCategory, MediaFile, Principal
from portfolio.domain.pagination import Page, PageRequest
from portfolio.rules.models import MediaRules


@dataclass(frozen=True)
class MediaLimits:
    max_size_bytes: int
    image_types: frozenset[str]
    document_types: frozenset[str]
    default_folder: str = "uploads"

    @property
    def allowed_types(self) -> frozenset[str]:
        return self.image_types | self.document_types

    @classmethod
    def from_rules(cls, rules: MediaRules) -> MediaLimits:
        return cls(
            max_size_bytes=rules.max_size_bytes,
            image_types=frozenset(t.lower() for t in rules.image_types),
            document_types=frozenset(t.lower() for t in rules.document_types),
            default_folder=rules.default_folder,
        )


# --- Input Models ---


@dataclass(frozen=True)
class UploadMediaInput:
    filename: str
    content_type: str
    data: bytes
    folder: str | None = None
    description: str = ""
    principal: Principal = field(default_factory=Principal.anonymous)


@dataclass(frozen=True)
class MediaFilter:
    category: MediaCategory | None = None
    folder: str | None = None


@dataclass(frozen=True)
class ListMediaInput:
    filters: MediaFilter = field(default_factory=MediaFilter)
    page: int | None = None
    limit: int | None = None
    sort: str | None = None
    order: str | None = None


@dataclass(frozen=True)
class MediaQuery:
    filters: MediaFilter
    page: PageRequest


@dataclass(frozen=True)
class OpenMediaInput:
    """Read a stored file by its key."""

    key: str


@dataclass(frozen=True)
class DeleteMediaInput:
    media_id: str


# --- Output Models ---


@dataclass(frozen=True)
class MediaStats:
    total: int = 0
    images: int = 0
    documents: int = 0
    others: int = 0


@dataclass(frozen=True)
class MediaOutput:
    media: MediaFile
    success: bool = True


@dataclass(frozen=True)
class MediaListOutput:
    page: Page[MediaFile]
    stats: MediaStats
    success: bool = True


@dataclass(frozen=True)
class MediaContentOutput:
    media: MediaFile
    data: bytes
