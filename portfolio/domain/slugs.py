"""
Slug normalization.

Titles are transliterated to ASCII, lowercased and stripped of punctuation;
whitespace and hyphen runs collapse to a single "-".
"""

from __future__ import annotations

import re
import unicodedata

SLUG_REGEX = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

_STRIP_CHARS = re.compile(r"[*+~.()'\"!:@]")
_NON_SLUG_CHARS = re.compile(r"[^a-z0-9\s-]")
_SEPARATOR_RUNS = re.compile(r"[\s-]+")


def slugify(text: str) -> str:
    """
    Derive a URL-safe slug from free text.

    Returns an empty string when nothing slug-worthy survives; callers
    decide whether that is an error.
    """
    ascii_text = (
        unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    )
    slug = ascii_text.lower()
    slug = _STRIP_CHARS.sub("", slug)
    slug = _NON_SLUG_CHARS.sub("", slug)
    slug = _SEPARATOR_RUNS.sub("-", slug)
    return slug.strip("-")


def is_valid_slug(slug: str) -> bool:
    return bool(SLUG_REGEX.match(slug))
