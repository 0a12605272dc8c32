"""
Testimonials component unit tests.

Names starting with "Test" are reached through the package module so
pytest does not try to collect them.
"""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

import portfolio.components.testimonials as tm
from portfolio.domain import entities
from portfolio.domain.entities import Principal
from portfolio.domain.errors import ConflictError, NotFoundError, StaleWriteError, ValidationError

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)

ADMIN = Principal(authenticated=True, role="admin", active=True, user_id="u1")

VALID = {
    "name": "Grace Hopper",
    "email": "grace@example.com",
    "company": "Navy",
    "position": "Rear Admiral",
    "content": "Delivered a fantastic compiler on time and under budget.",
    "rating": 5,
}


class MockTestimonialRepo:
    def __init__(self) -> None:
        self.items: dict[str, entities.Testimonial] = {}

    def get_by_id(self, testimonial_id: str):
        return self.items.get(testimonial_id)

    def insert(self, testimonial):
        self.items[testimonial.id] = testimonial
        return testimonial

    def update(self, testimonial, expected_version: int):
        current = self.items.get(testimonial.id)
        if current is None or current.version != expected_version:
            raise StaleWriteError(testimonial.id, expected_version)
        self.items[testimonial.id] = testimonial
        return testimonial

    def delete(self, testimonial_id: str) -> bool:
        return self.items.pop(testimonial_id, None) is not None

    def list(self, query):
        items = list(self.items.values())
        if query.visible_statuses is not None:
            items = [t for t in items if t.status in query.visible_statuses]
        if query.filters.status:
            items = [t for t in items if t.status == query.filters.status]
        if query.filters.featured is not None:
            items = [t for t in items if t.featured == query.filters.featured]
        start = query.page.offset
        return items[start : start + query.page.limit], len(items)


class MockTime:
    def now_utc(self) -> datetime:
        return NOW


@pytest.fixture
def repo() -> MockTestimonialRepo:
    return MockTestimonialRepo()


@pytest.fixture
def clock() -> MockTime:
    return MockTime()


def submit(repo, clock, data=None, principal=None):
    inp = tm.SubmitTestimonialInput(data=data or VALID, principal=principal or Principal.anonymous())
    return tm.run_submit(inp, repo=repo, time=clock).testimonial


class TestSubmit:
    def test_public_submission_is_pending(self, repo, clock) -> None:
        testimonial = submit(repo, clock, {**VALID, "status": "approved", "featured": True})
        assert testimonial.status == "pending"
        assert testimonial.featured is False
        assert testimonial.full_title == "Rear Admiral at Navy"

    def test_admin_may_set_status(self, repo, clock) -> None:
        testimonial = submit(repo, clock, {**VALID, "status": "approved"}, principal=ADMIN)
        assert testimonial.status == "approved"

    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("rating", 6),
            ("rating", 0),
            ("content", "Too short"),
            ("linkedin_url", "https://example.com/me"),
            ("project_id", "not-a-project"),
            ("email", "nope"),
        ],
    )
    def test_invalid_fields_rejected(self, repo, clock, field, value) -> None:
        with pytest.raises(ValidationError) as exc:
            submit(repo, clock, {**VALID, field: value})
        assert exc.value.field == field

    def test_blank_optionals_become_none(self, repo, clock) -> None:
        testimonial = submit(repo, clock, {**VALID, "company": "", "linkedin_url": ""})
        assert testimonial.company is None
        assert testimonial.linkedin_url is None


class TestVisibility:
    def test_anonymous_sees_only_approved(self, repo, clock) -> None:
        submit(repo, clock)
        submit(repo, clock, {**VALID, "status": "approved"}, principal=ADMIN)
        submit(repo, clock, {**VALID, "status": "rejected"}, principal=ADMIN)

        public = tm.run_list(tm.ListTestimonialsInput(), repo=repo)
        assert public.page.total == 1
        assert public.page.items[0].status == "approved"

        admin = tm.run_list(tm.ListTestimonialsInput(principal=ADMIN), repo=repo)
        assert admin.page.total == 3

    def test_anonymous_status_filter_cannot_widen(self, repo, clock) -> None:
        submit(repo, clock)
        result = tm.run_list(
            tm.ListTestimonialsInput(filters=tm.TestimonialFilter(status="pending")), repo=repo
        )
        assert result.page.total == 0

    def test_get_pending_hidden_from_public(self, repo, clock) -> None:
        testimonial = submit(repo, clock)
        with pytest.raises(NotFoundError):
            tm.run_get(tm.GetTestimonialInput(testimonial_id=testimonial.id), repo=repo)
        found = tm.run_get(
            tm.GetTestimonialInput(testimonial_id=testimonial.id, principal=ADMIN), repo=repo
        )
        assert found.testimonial.id == testimonial.id


class TestModeration:
    def test_approve(self, repo, clock) -> None:
        testimonial = submit(repo, clock)
        result = tm.run(
            tm.UpdateTestimonialInput(
                testimonial_id=testimonial.id, patch={"status": "approved", "featured": True}
            ),
            repo=repo,
            time=clock,
        )
        assert result.testimonial.status == "approved"
        assert result.testimonial.featured is True
        assert result.testimonial.version == 1

    def test_stale_version_conflicts(self, repo, clock) -> None:
        testimonial = submit(repo, clock)
        with pytest.raises(ConflictError):
            tm.run(
                tm.UpdateTestimonialInput(
                    testimonial_id=testimonial.id, patch={"order": 2}, expected_version=3
                ),
                repo=repo,
                time=clock,
            )

    def test_null_rating_rejected(self, repo, clock) -> None:
        testimonial = submit(repo, clock)
        with pytest.raises(ValidationError):
            tm.run(
                tm.UpdateTestimonialInput(testimonial_id=testimonial.id, patch={"rating": None}),
                repo=repo,
                time=clock,
            )

    def test_delete_missing(self, repo, clock) -> None:
        with pytest.raises(NotFoundError):
            tm.run(tm.DeleteTestimonialInput(testimonial_id="f" * 32), repo=repo, time=clock)
