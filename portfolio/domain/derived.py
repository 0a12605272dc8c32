"""
Derived-field computation for content documents.

Pure functions applied by the content component before every write.
A derived value is recomputed only when its source field changed; an SEO
value that still equals the previous derived default is treated as derived
and follows its source, while any other caller-supplied value is kept.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime

from portfolio.domain.entities import (
    PUBLISHED_STATUSES,
    BlogPost,
    ContentDocument,
    Project,
    Seo,
)
from portfolio.domain.errors import ValidationError
from portfolio.domain.slugs import slugify


@dataclass(frozen=True)
class DerivationSettings:
    words_per_minute: int = 200
    meta_title_max: int = 60
    meta_description_max: int = 160


def compute_read_time(content: str, words_per_minute: int = 200) -> int:
    """Minutes to read, rounded up, never less than one."""
    words = len(content.split())
    return max(1, math.ceil(words / words_per_minute))


def default_meta_title(doc: ContentDocument, settings: DerivationSettings) -> str:
    return doc.title[: settings.meta_title_max]


def default_meta_description(doc: ContentDocument, settings: DerivationSettings) -> str:
    source = doc.excerpt if isinstance(doc, BlogPost) else doc.short_description
    return source[: settings.meta_description_max]


def default_keywords(doc: ContentDocument) -> list[str]:
    if isinstance(doc, Project):
        keywords = [t.lower() for t in doc.technologies]
        if doc.category and doc.category not in keywords:
            keywords.append(doc.category)
        return keywords
    return []


def _follow_default(
    current: object,
    previous_value: object,
    previous_default: object,
    new_default: object,
) -> object:
    """Pick the value of a defaultable field after a write."""
    if not current:
        return new_default
    if previous_value is not None and current == previous_value == previous_default:
        return new_default
    return current


def derive_seo(
    doc: ContentDocument,
    previous: ContentDocument | None,
    settings: DerivationSettings,
) -> Seo:
    prev_seo = previous.seo if previous is not None else None

    meta_title = _follow_default(
        doc.seo.meta_title,
        prev_seo.meta_title if prev_seo else None,
        default_meta_title(previous, settings) if previous else None,
        default_meta_title(doc, settings),
    )
    meta_description = _follow_default(
        doc.seo.meta_description,
        prev_seo.meta_description if prev_seo else None,
        default_meta_description(previous, settings) if previous else None,
        default_meta_description(doc, settings),
    )

    keywords = list(doc.seo.keywords)
    if isinstance(doc, Project):
        keywords = list(
            _follow_default(  # type: ignore[arg-type]
                doc.seo.keywords,
                prev_seo.keywords if prev_seo else None,
                default_keywords(previous) if previous else None,
                default_keywords(doc),
            )
        )

    return Seo(
        meta_title=str(meta_title),
        meta_description=str(meta_description),
        keywords=keywords,
    )


def stamp_published_at(doc: ContentDocument, now: datetime) -> datetime | None:
    """
    Return the published_at value after a write.

    Stamps ``now`` the first time the document enters its kind's published
    status set; an existing value is never moved or cleared.
    """
    if doc.published_at is not None:
        return doc.published_at
    if doc.status in PUBLISHED_STATUSES[doc.kind]:
        return now
    return None


def apply_derived_fields(
    doc: ContentDocument,
    previous: ContentDocument | None,
    now: datetime,
    settings: DerivationSettings | None = None,
) -> ContentDocument:
    """
    Compute slug, read time, SEO defaults and published_at for a document.

    ``previous`` is the stored version for updates, ``None`` on create.
    Raises ValidationError when the title yields an empty slug.
    """
    cfg = settings or DerivationSettings()
    updates: dict[str, object] = {}

    if previous is None or doc.title != previous.title or not doc.slug:
        slug = slugify(doc.title)
        if not slug:
            raise ValidationError("title", "Title must contain at least one letter or digit")
        updates["slug"] = slug

    if isinstance(doc, BlogPost):
        if previous is None or doc.content != previous.content or doc.read_time < 1:
            updates["read_time"] = compute_read_time(doc.content, cfg.words_per_minute)

    updates["seo"] = derive_seo(doc, previous, cfg)
    updates["published_at"] = stamp_published_at(doc, now)

    return doc.model_copy(update=updates)
