"""
Contact component unit tests.
"""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from portfolio.adapters.dev_email import DevEmailAdapter
from portfolio.components.analytics.models import RequestMeta
from portfolio.components.contact import (
    ContactFilter,
    ContactQuery,
    DeleteContactInput,
    ListContactsInput,
    SubmitContactInput,
    UpdateContactInput,
    run,
    run_get,
    run_submit,
)
from portfolio.components.dispatch import InlineDispatcher
from portfolio.core.services.notifications import SiteInfo
from portfolio.domain.entities import AnalyticsEvent, ContactMessage
from portfolio.domain.errors import (
    ConflictError,
    NotFoundError,
    StaleWriteError,
    ValidationError,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)

VALID = {
    "name": "Ada Lovelace",
    "email": "ada@example.com",
    "subject": "Project enquiry",
    "message": "I would like to talk about a project with you soon.",
}


class MockContactRepo:
    def __init__(self) -> None:
        self.contacts: dict[str, ContactMessage] = {}

    def get_by_id(self, contact_id: str) -> ContactMessage | None:
        return self.contacts.get(contact_id)

    def insert(self, contact: ContactMessage) -> ContactMessage:
        self.contacts[contact.id] = contact
        return contact

    def update(self, contact: ContactMessage, expected_version: int) -> ContactMessage:
        current = self.contacts.get(contact.id)
        if current is None or current.version != expected_version:
            raise StaleWriteError(contact.id, expected_version)
        self.contacts[contact.id] = contact
        return contact

    def delete(self, contact_id: str) -> bool:
        return self.contacts.pop(contact_id, None) is not None

    def list(self, query: ContactQuery) -> tuple[list[ContactMessage], int]:
        items = list(self.contacts.values())
        if query.filters.status:
            items = [c for c in items if c.status == query.filters.status]
        if query.filters.priority:
            items = [c for c in items if c.priority == query.filters.priority]
        start = query.page.offset
        return items[start : start + query.page.limit], len(items)


class MockTime:
    def now_utc(self) -> datetime:
        return NOW


class MockAnalyticsSink:
    def __init__(self) -> None:
        self.events: list[AnalyticsEvent] = []

    def record(self, event: AnalyticsEvent) -> None:
        self.events.append(event)


@pytest.fixture
def repo() -> MockContactRepo:
    return MockContactRepo()


@pytest.fixture
def clock() -> MockTime:
    return MockTime()


class TestSubmit:
    def test_stores_new_message(self, repo, clock) -> None:
        meta = RequestMeta(ip_address="203.0.113.9", user_agent="Mozilla/5.0 Firefox/120.0")
        result = run_submit(SubmitContactInput(data=VALID, meta=meta), repo=repo, time=clock)

        contact = result.contact
        assert contact.status == "new"
        assert contact.priority == "medium"
        assert contact.source == "website"
        assert contact.ip_address == "203.0.113.9"
        assert contact.created_at == NOW
        assert repo.get_by_id(contact.id) == contact

    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("name", "A"),
            ("email", "not-an-email"),
            ("subject", "Hey"),
            ("message", "too short"),
            ("phone", "call me maybe"),
        ],
    )
    def test_invalid_fields_rejected(self, repo, clock, field: str, value: str) -> None:
        with pytest.raises(ValidationError) as exc:
            run_submit(SubmitContactInput(data={**VALID, field: value}), repo=repo, time=clock)
        assert exc.value.field == field

    def test_blank_optional_fields_become_none(self, repo, clock) -> None:
        result = run_submit(
            SubmitContactInput(data={**VALID, "phone": "", "company": ""}),
            repo=repo,
            time=clock,
        )
        assert result.contact.phone is None
        assert result.contact.company is None

    def test_dispatches_emails_and_analytics(self, repo, clock) -> None:
        email = DevEmailAdapter()
        sink = MockAnalyticsSink()
        result = run_submit(
            SubmitContactInput(data=VALID),
            repo=repo,
            time=clock,
            dispatcher=InlineDispatcher(),
            email=email,
            analytics=sink,
            site=SiteInfo(admin_email="owner@example.com"),
        )

        assert set(result.dispatch.succeeded) == {
            "email.contact_notification",
            "email.contact_confirmation",
            "analytics.contact_form",
        }
        assert len(email.get_emails_to("owner@example.com")) == 1
        assert len(email.get_emails_to("ada@example.com")) == 1
        assert sink.events[0].metadata["contact_id"] == result.contact.id

    def test_no_owner_notification_without_admin_email(self, repo, clock) -> None:
        email = DevEmailAdapter()
        result = run_submit(
            SubmitContactInput(data=VALID),
            repo=repo,
            time=clock,
            dispatcher=InlineDispatcher(),
            email=email,
        )
        assert result.dispatch.succeeded == ("email.contact_confirmation",)

    def test_failing_email_does_not_fail_submission(self, repo, clock) -> None:
        class BrokenEmail:
            def send_email(self, *args, **kwargs):
                raise ConnectionError("smtp down")

        result = run_submit(
            SubmitContactInput(data=VALID),
            repo=repo,
            time=clock,
            dispatcher=InlineDispatcher(),
            email=BrokenEmail(),
        )
        assert result.success is True
        assert result.dispatch.failed == ("email.contact_confirmation",)


class TestTriage:
    def test_update_status_and_priority(self, repo, clock) -> None:
        contact = run_submit(SubmitContactInput(data=VALID), repo=repo, time=clock).contact
        result = run(
            UpdateContactInput(contact_id=contact.id, patch={"status": "read", "priority": "high"}),
            repo=repo,
            time=clock,
        )
        assert result.contact.status == "read"
        assert result.contact.priority == "high"
        assert result.contact.version == contact.version + 1

    def test_bad_status_rejected(self, repo, clock) -> None:
        contact = run_submit(SubmitContactInput(data=VALID), repo=repo, time=clock).contact
        with pytest.raises(ValidationError):
            run(
                UpdateContactInput(contact_id=contact.id, patch={"status": "spam"}),
                repo=repo,
                time=clock,
            )

    def test_null_required_field_rejected(self, repo, clock) -> None:
        contact = run_submit(SubmitContactInput(data=VALID), repo=repo, time=clock).contact
        with pytest.raises(ValidationError) as exc:
            run(
                UpdateContactInput(contact_id=contact.id, patch={"subject": None}),
                repo=repo,
                time=clock,
            )
        assert exc.value.field == "subject"

    def test_stale_version_conflicts(self, repo, clock) -> None:
        contact = run_submit(SubmitContactInput(data=VALID), repo=repo, time=clock).contact
        with pytest.raises(ConflictError):
            run(
                UpdateContactInput(contact_id=contact.id, patch={"status": "read"}, expected_version=7),
                repo=repo,
                time=clock,
            )

    def test_get_missing(self, repo) -> None:
        with pytest.raises(NotFoundError):
            run_get("0" * 32, repo=repo)

    def test_list_filters(self, repo, clock) -> None:
        first = run_submit(SubmitContactInput(data=VALID), repo=repo, time=clock).contact
        run_submit(SubmitContactInput(data=VALID), repo=repo, time=clock)
        run(UpdateContactInput(contact_id=first.id, patch={"status": "replied"}), repo=repo, time=clock)

        result = run(
            ListContactsInput(filters=ContactFilter(status="new")),
            repo=repo,
            time=clock,
        )
        assert result.page.total == 1

    def test_delete(self, repo, clock) -> None:
        contact = run_submit(SubmitContactInput(data=VALID), repo=repo, time=clock).contact
        run(DeleteContactInput(contact_id=contact.id), repo=repo, time=clock)
        assert repo.get_by_id(contact.id) is None
        with pytest.raises(NotFoundError):
            run(DeleteContactInput(contact_id=contact.id), repo=repo, time=clock)
