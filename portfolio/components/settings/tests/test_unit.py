"""
Settings component unit tests.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from portfolio.components.settings import (
    GetSettingsInput,
    ResetSettingsInput,
    SettingsDefaults,
    UpdateSettingsInput,
    merge_sections,
    run,
    run_get,
    run_reset,
    run_update,
)
from portfolio.domain.errors import (
    ConflictError,
    DuplicateKeyError,
    StaleWriteError,
    ValidationError,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)

DEFAULTS = SettingsDefaults(
    site_name="Jane Doe",
    site_url="https://jane.dev",
    contact_email="jane@jane.dev",
)


class MockSettingsRepo:
    def __init__(self) -> None:
        self.row = None
        self.inserts = 0

    def get(self):
        return self.row

    def insert(self, settings):
        if self.row is not None:
            raise DuplicateKeyError("id")
        self.inserts += 1
        self.row = settings
        return settings

    def update(self, settings, expected_version: int):
        if self.row is None or self.row.version != expected_version:
            raise StaleWriteError("site_settings", expected_version)
        self.row = settings
        return settings


class SeededByOtherRequestRepo(MockSettingsRepo):
    """Reports no row on the first read, then loses the insert race."""

    def __init__(self, existing) -> None:
        super().__init__()
        self.existing = existing
        self.reads = 0

    def get(self):
        self.reads += 1
        return None if self.reads == 1 else self.existing

    def insert(self, settings):
        raise DuplicateKeyError("id")


class MockTime:
    def __init__(self) -> None:
        self.now = NOW

    def now_utc(self) -> datetime:
        return self.now


@pytest.fixture
def repo() -> MockSettingsRepo:
    return MockSettingsRepo()


@pytest.fixture
def clock() -> MockTime:
    return MockTime()


def update(repo, clock, patch, expected_version=None):
    inp = UpdateSettingsInput(patch=patch, expected_version=expected_version)
    return run_update(inp, repo=repo, time=clock, defaults=DEFAULTS).settings


class TestGet:
    def test_first_read_seeds_defaults(self, repo, clock) -> None:
        out = run_get(GetSettingsInput(), repo=repo, time=clock, defaults=DEFAULTS)

        assert out.created is True
        assert out.settings.site_name == "Jane Doe"
        assert out.settings.seo.meta_title == "Jane Doe"
        assert out.settings.email.from_email == "jane@jane.dev"
        assert out.settings.features.comments_enabled is False
        assert repo.row is out.settings

    def test_second_read_returns_stored_row(self, repo, clock) -> None:
        run_get(GetSettingsInput(), repo=repo, time=clock, defaults=DEFAULTS)
        out = run_get(GetSettingsInput(), repo=repo, time=clock, defaults=DEFAULTS)
        assert out.created is False
        assert repo.inserts == 1

    def test_lost_seed_race_rereads(self, clock) -> None:
        seeded = MockSettingsRepo()
        existing = run_get(GetSettingsInput(), repo=seeded, time=clock, defaults=DEFAULTS)
        racing = SeededByOtherRequestRepo(existing.settings)

        out = run_get(GetSettingsInput(), repo=racing, time=clock, defaults=DEFAULTS)
        assert out.created is False
        assert out.settings is existing.settings


class TestUpdate:
    def test_sections_merge_key_by_key(self, repo, clock) -> None:
        update(repo, clock, {"theme": {"primary_color": "#112233"}})
        settings = update(repo, clock, {"theme": {"dark_mode": True}})

        assert settings.theme.primary_color == "#112233"
        assert settings.theme.dark_mode is True
        assert settings.theme.secondary_color == "#64748b"
        assert settings.version == 2

    def test_top_level_fields_and_timestamps(self, repo, clock) -> None:
        created = run_get(GetSettingsInput(), repo=repo, time=clock, defaults=DEFAULTS).settings
        clock.now = NOW + timedelta(hours=1)

        settings = update(repo, clock, {"site_name": "  Jane D.  ", "contact_phone": ""})
        assert settings.site_name == "Jane D."
        assert settings.contact_phone is None
        assert settings.created_at == created.created_at
        assert settings.updated_at == NOW + timedelta(hours=1)

    def test_social_links_must_match_network(self, repo, clock) -> None:
        settings = update(repo, clock, {"social_media": {"github": "https://github.com/jane"}})
        assert settings.social_media.github == "https://github.com/jane"

        with pytest.raises(ValidationError) as exc:
            update(repo, clock, {"social_media": {"github": "https://gitlab.com/jane"}})
        assert exc.value.field == "social_media.github"

    def test_blank_social_link_clears_it(self, repo, clock) -> None:
        update(repo, clock, {"social_media": {"website": "https://jane.dev"}})
        settings = update(repo, clock, {"social_media": {"website": ""}})
        assert settings.social_media.website is None

    @pytest.mark.parametrize(
        ("patch", "field"),
        [
            ({"site_name": "J"}, "site_name"),
            ({"site_description": "short"}, "site_description"),
            ({"contact_email": "not-an-email"}, "contact_email"),
            ({"theme": {"primary_color": "blue"}}, "theme.primary_color"),
            ({"email": {"reply_to_email": "nope"}}, "email.reply_to_email"),
            ({"maintenance": {"allowed_ips": ["300.1.1.1"]}}, "maintenance.allowed_ips.0"),
            ({"site_name": None}, "site_name"),
        ],
    )
    def test_invalid_patch_rejected(self, repo, clock, patch, field) -> None:
        with pytest.raises(ValidationError) as exc:
            update(repo, clock, patch)
        assert exc.value.field == field
        assert repo.row is None or repo.row.version == 0

    def test_null_section_rejected(self, repo, clock) -> None:
        with pytest.raises(ValidationError) as exc:
            update(repo, clock, {"theme": None})
        assert exc.value.field == "theme"

    def test_allowed_ips_stored_as_text(self, repo, clock) -> None:
        patch = {"maintenance": {"enabled": True, "allowed_ips": ["10.0.0.1"]}}
        settings = update(repo, clock, patch)
        assert settings.maintenance.allowed_ips == ["10.0.0.1"]
        assert settings.maintenance.message.startswith("Site is under maintenance")

    def test_stale_version_conflicts(self, repo, clock) -> None:
        update(repo, clock, {"site_name": "Jane"})
        with pytest.raises(ConflictError):
            update(repo, clock, {"site_name": "Janet"}, expected_version=0)


class TestReset:
    def test_reset_restores_defaults_and_keeps_created_at(self, repo, clock) -> None:
        first = update(repo, clock, {"site_name": "Other", "features": {"blog_enabled": False}})
        clock.now = NOW + timedelta(days=1)

        out = run(ResetSettingsInput(), repo=repo, time=clock, defaults=DEFAULTS)
        assert out.settings.site_name == "Jane Doe"
        assert out.settings.features.blog_enabled is True
        assert out.settings.created_at == first.created_at
        assert out.settings.version == first.version + 1

    def test_reset_without_row_seeds(self, repo, clock) -> None:
        out = run_reset(ResetSettingsInput(), repo=repo, time=clock, defaults=DEFAULTS)
        assert out.created is True
        assert out.settings.version == 0


def test_merge_sections_replaces_scalars_and_lists() -> None:
    current = {"site_name": "A", "seo": {"keywords": ["a"], "meta_title": "A"}}
    merged = merge_sections(current, {"site_name": "B", "seo": {"keywords": ["b", "c"]}})
    assert merged == {"site_name": "B", "seo": {"keywords": ["b", "c"], "meta_title": "A"}}
    assert current["seo"] == {"keywords": ["a"], "meta_title": "A"}
