"""
Unit tests for derived content fields: slug, read time, SEO defaults and
published_at stamping.
"""

from datetime import UTC, date, datetime, timedelta

import pytest

from portfolio.domain.derived import (
    DerivationSettings,
    apply_derived_fields,
    compute_read_time,
    stamp_published_at,
)
from portfolio.domain.entities import BlogPost, Project, Seo
from portfolio.domain.errors import ValidationError

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
LATER = NOW + timedelta(hours=3)


def blog(**kw) -> BlogPost:
    defaults = dict(
        title="Writing Fast Python",
        content="word " * 450,
        excerpt="A short tour of profiling and the usual hot spots in Python code.",
        category="engineering",
    )
    defaults.update(kw)
    return BlogPost(**defaults)


def project(**kw) -> Project:
    defaults = dict(
        title="Portfolio Site",
        description="d" * 120,
        short_description="A personal site with a blog and a project gallery.",
        technologies=["Python", "FastAPI"],
        category="web",
        start_date=date(2025, 1, 1),
    )
    defaults.update(kw)
    return Project(**defaults)


class TestReadTime:
    @pytest.mark.parametrize(
        "words,minutes",
        [(0, 1), (1, 1), (200, 1), (201, 2), (1000, 5), (1001, 6)],
    )
    def test_rounds_up_with_floor_of_one(self, words, minutes):
        assert compute_read_time("w " * words) == minutes

    def test_custom_words_per_minute(self):
        assert compute_read_time("w " * 300, words_per_minute=100) == 3


class TestApplyDerivedFields:
    def test_create_blog(self):
        doc = apply_derived_fields(blog(), None, NOW)

        assert doc.slug == "writing-fast-python"
        assert doc.read_time == 3
        assert doc.seo.meta_title == "Writing Fast Python"
        assert doc.seo.meta_description == doc.excerpt
        assert doc.published_at is None

    def test_meta_defaults_are_truncated(self):
        settings = DerivationSettings(meta_title_max=10, meta_description_max=20)
        doc = apply_derived_fields(blog(), None, NOW, settings)

        assert doc.seo.meta_title == "Writing Fa"
        assert len(doc.seo.meta_description) == 20

    def test_empty_slug_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            apply_derived_fields(blog(title="!!! ???"), None, NOW)
        assert exc.value.field == "title"

    def test_title_change_reslugs_and_moves_default_meta_title(self):
        first = apply_derived_fields(blog(), None, NOW)
        edited = first.model_copy(update={"title": "Writing Faster Python"})

        doc = apply_derived_fields(edited, first, LATER)

        assert doc.slug == "writing-faster-python"
        assert doc.seo.meta_title == "Writing Faster Python"

    def test_custom_meta_title_survives_title_change(self):
        first = apply_derived_fields(blog(seo=Seo(meta_title="Custom")), None, NOW)
        edited = first.model_copy(update={"title": "A Different Title"})

        doc = apply_derived_fields(edited, first, LATER)

        assert doc.seo.meta_title == "Custom"

    def test_unchanged_content_keeps_read_time(self):
        first = apply_derived_fields(blog(), None, NOW)
        edited = first.model_copy(update={"excerpt": "x" * 60})

        assert apply_derived_fields(edited, first, LATER).read_time == first.read_time

    def test_project_keywords_follow_technologies(self):
        first = apply_derived_fields(project(), None, NOW)
        assert first.seo.keywords == ["python", "fastapi", "web"]
        assert first.seo.meta_description == first.short_description

        edited = first.model_copy(update={"technologies": ["Go"]})
        assert apply_derived_fields(edited, first, LATER).seo.keywords == ["go", "web"]

    def test_custom_project_keywords_are_kept(self):
        first = apply_derived_fields(project(seo=Seo(keywords=["portfolio"])), None, NOW)
        edited = first.model_copy(update={"technologies": ["Go"]})

        assert apply_derived_fields(edited, first, LATER).seo.keywords == ["portfolio"]


class TestPublishedAt:
    def test_stamped_on_first_publish_only(self):
        draft = apply_derived_fields(blog(), None, NOW)
        published = apply_derived_fields(
            draft.model_copy(update={"status": "published"}), draft, NOW
        )
        assert published.published_at == NOW

        archived = apply_derived_fields(
            published.model_copy(update={"status": "archived"}), published, LATER
        )
        assert archived.published_at == NOW

        republished = apply_derived_fields(
            archived.model_copy(update={"status": "published"}), archived, LATER
        )
        assert republished.published_at == NOW

    @pytest.mark.parametrize("status", ["planning", "in-progress", "completed"])
    def test_project_published_statuses(self, status):
        assert stamp_published_at(project(status=status), NOW) == NOW

    def test_archived_project_is_not_stamped(self):
        assert stamp_published_at(project(status="archived"), NOW) is None
