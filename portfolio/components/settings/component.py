"""
Settings component - singleton site configuration.

Reads always succeed: a missing row is seeded from the deployment defaults.
Updates merge section by section and validate the merged result before
it is written.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from portfolio.components.settings.models import (
    GetSettingsInput,
    ResetSettingsInput,
    SettingsDefaults,
    SettingsOutput,
    SettingsUpdateSchema,
    UpdateSettingsInput,
)
from portfolio.components.settings.ports import SettingsRepoPort, TimePort
from portfolio.domain.entities import (
    EmailSettings,
    SiteAnalytics,
    SiteSeo,
    SiteSettings,
)
from portfolio.domain.errors import (
    ConflictError,
    DuplicateKeyError,
    StaleWriteError,
    ValidationError,
)
from portfolio.domain.validation import parse_model

logger = logging.getLogger(__name__)

SECTIONS = frozenset(
    {"social_media", "seo", "analytics", "email", "features", "maintenance", "theme"}
)

REQUIRED_FIELDS = frozenset({"site_name", "site_description", "site_url", "contact_email"})


def default_settings(defaults: SettingsDefaults, now: datetime) -> SiteSettings:
    return SiteSettings(
        site_name=defaults.site_name,
        site_description=defaults.site_description,
        site_url=defaults.site_url,
        contact_email=defaults.contact_email,
        seo=SiteSeo(
            meta_title=defaults.site_name,
            meta_description=defaults.site_description,
            keywords=list(defaults.keywords),
        ),
        analytics=SiteAnalytics(google_analytics_id=defaults.google_analytics_id),
        email=EmailSettings(
            from_name=defaults.from_name,
            from_email=defaults.from_email or defaults.contact_email,
            reply_to_email=defaults.contact_email,
        ),
        created_at=now,
        updated_at=now,
    )


def merge_sections(current: dict[str, Any], patch: dict[str, Any]) -> dict[str, Any]:
    """Apply ``patch`` to ``current``; section dicts merge key by key."""
    merged = dict(current)
    for key, value in patch.items():
        if key in SECTIONS and isinstance(value, dict):
            merged[key] = {**(current.get(key) or {}), **value}
        else:
            merged[key] = value
    return merged


def _load_or_seed(
    repo: SettingsRepoPort, time: TimePort, defaults: SettingsDefaults
) -> tuple[SiteSettings, bool]:
    existing = repo.get()
    if existing is not None:
        return existing, False
    try:
        created = repo.insert(default_settings(defaults, time.now_utc()))
    except DuplicateKeyError:
        # Another request seeded the row first
        existing = repo.get()
        if existing is None:
            raise
        return existing, False
    logger.info("Created default site settings")
    return created, True


def run_get(
    inp: GetSettingsInput,
    *,
    repo: SettingsRepoPort,
    time: TimePort,
    defaults: SettingsDefaults,
) -> SettingsOutput:
    settings, created = _load_or_seed(repo, time, defaults)
    return SettingsOutput(settings=settings, created=created)


def run_update(
    inp: UpdateSettingsInput,
    *,
    repo: SettingsRepoPort,
    time: TimePort,
    defaults: SettingsDefaults,
) -> SettingsOutput:
    current, _ = _load_or_seed(repo, time, defaults)

    if inp.expected_version is not None and inp.expected_version != current.version:
        raise ConflictError("Settings were modified by another request (stale write)")

    for key, value in inp.patch.items():
        if value is None and key in REQUIRED_FIELDS:
            raise ValidationError(key, f"{key}: Field cannot be null")

    patch = parse_model(SettingsUpdateSchema, inp.patch).model_dump(
        mode="json", exclude_unset=True
    )
    merged = merge_sections(current.model_dump(mode="json"), patch)
    merged.update(
        created_at=current.created_at,
        updated_at=time.now_utc(),
        version=current.version + 1,
    )
    updated = parse_model(SiteSettings, merged)

    try:
        saved = repo.update(updated, expected_version=current.version)
    except StaleWriteError as e:
        raise ConflictError("Settings were modified by another request (stale write)") from e

    logger.info("Site settings updated (%s)", ", ".join(sorted(patch)) or "no changes")
    return SettingsOutput(settings=saved)


def run_reset(
    inp: ResetSettingsInput,
    *,
    repo: SettingsRepoPort,
    time: TimePort,
    defaults: SettingsDefaults,
) -> SettingsOutput:
    current, created = _load_or_seed(repo, time, defaults)
    if created:
        return SettingsOutput(settings=current, created=True)

    fresh = default_settings(defaults, time.now_utc()).model_copy(
        update={"created_at": current.created_at, "version": current.version + 1}
    )
    try:
        saved = repo.update(fresh, expected_version=current.version)
    except StaleWriteError as e:
        raise ConflictError("Settings were modified by another request (stale write)") from e

    logger.info("Site settings reset to defaults")
    return SettingsOutput(settings=saved)


def run(
    inp: GetSettingsInput | UpdateSettingsInput | ResetSettingsInput,
    *,
    repo: SettingsRepoPort,
    time: TimePort,
    defaults: SettingsDefaults,
) -> SettingsOutput:
    """Main component entry point."""
    if isinstance(inp, GetSettingsInput):
        return run_get(inp, repo=repo, time=time, defaults=defaults)
    elif isinstance(inp, UpdateSettingsInput):
        return run_update(inp, repo=repo, time=time, defaults=defaults)
    elif isinstance(inp, ResetSettingsInput):
        return run_reset(inp, repo=repo, time=time, defaults=defaults)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
