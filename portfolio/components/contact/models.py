"""
Contact component models.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator

from portfolio.components.analytics.models import RequestMeta
from portfolio.components.dispatch.models import DispatchReport
from portfolio.components.newsletter.component import validate_email
from portfolio.domain.entities import (
    ContactMessage,
    ContactPriority,
    ContactSource,
    ContactStatus,
)
from portfolio.domain.pagination import Page, PageRequest

PHONE_RE = re.compile(r"^[\+]?[1-9][\d\s\-\(\)]{0,15}$")

NameStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=100)]
SubjectStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=5, max_length=200)]
MessageStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=20, max_length=2000)]


def _check_email(value: str) -> str:
    if not validate_email(value).is_valid:
        raise ValueError("Please provide a valid email address")
    return value.strip()


def _blank_to_none(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value.strip()


def _check_phone(value: str | None) -> str | None:
    value = _blank_to_none(value)
    if value is not None and not PHONE_RE.match(value):
        raise ValueError("Please provide a valid phone number")
    return value


# --- Schemas ---


class ContactCreateSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: NameStr
    email: str
    subject: SubjectStr
    message: MessageStr
    phone: str | None = Field(default=None, max_length=20)
    company: str | None = Field(default=None, max_length=100)

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        return _check_email(value)

    @field_validator("phone")
    @classmethod
    def check_phone(cls, value: str | None) -> str | None:
        return _check_phone(value)

    @field_validator("company")
    @classmethod
    def check_company(cls, value: str | None) -> str | None:
        value = _blank_to_none(value)
        if value is not None and len(value) < 2:
            raise ValueError("Company must be at least 2 characters long")
        return value


class ContactUpdateSchema(BaseModel):
    """Admin triage; every field optional."""

    model_config = ConfigDict(extra="ignore")

    status: ContactStatus | None = None
    priority: ContactPriority | None = None
    source: ContactSource | None = None
    name: NameStr | None = None
    email: str | None = None
    subject: SubjectStr | None = None
    message: MessageStr | None = None
    phone: str | None = Field(default=None, max_length=20)
    company: str | None = Field(default=None, max_length=100)

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str | None) -> str | None:
        return None if value is None else _check_email(value)

    @field_validator("phone")
    @classmethod
    def check_phone(cls, value: str | None) -> str | None:
        return _check_phone(value)


# --- Input Models ---


@dataclass(frozen=True)
class SubmitContactInput:
    data: dict[str, Any]
    meta: RequestMeta = field(default_factory=RequestMeta)


@dataclass(frozen=True)
class ContactFilter:
    status: ContactStatus | None = None
    priority: ContactPriority | None = None
    source: ContactSource | None = None
    search: str | None = None


@dataclass(frozen=True)
class ListContactsInput:
    filters: ContactFilter = field(default_factory=ContactFilter)
    page: int | None = None
    limit: int | None = None
    sort: str | None = None
    order: str | None = None


@dataclass(frozen=True)
class ContactQuery:
    filters: ContactFilter
    page: PageRequest


@dataclass(frozen=True)
class UpdateContactInput:
    contact_id: str
    patch: dict[str, Any]
    expected_version: int | None = None


@dataclass(frozen=True)
class DeleteContactInput:
    contact_id: str


# --- Output Models ---


@dataclass(frozen=True)
class SubmitContactOutput:
    contact: ContactMessage
    dispatch: DispatchReport = field(default_factory=DispatchReport)
    success: bool = True


@dataclass(frozen=True)
class ContactOutput:
    contact: ContactMessage
    success: bool = True


@dataclass(frozen=True)
class ContactListOutput:
    page: Page[ContactMessage]
    success: bool = True
