from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Generic, Literal, TypeVar

from portfolio.domain.errors import ValidationError

T = TypeVar("T")

SortOrder = Literal["asc", "desc"]


@dataclass(frozen=True)
class PageRequest:
    """Normalized page/limit/sort/order for a list query."""

    page: int = 1
    limit: int = 10
    sort: str = "created_at"
    order: SortOrder = "desc"

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def normalize_page_request(
    page: int | None,
    limit: int | None,
    sort: str | None,
    order: str | None,
    *,
    allowed_sorts: list[str],
    default_sort: str = "created_at",
    default_limit: int = 10,
    max_limit: int = 100,
) -> PageRequest:
    """
    Clamp paging values into range and check the sort key against an allow-list.

    Raises ValidationError for an unknown sort field or order.
    """
    page_value = max(1, page or 1)
    limit_value = default_limit if limit is None else min(max(1, limit), max_limit)

    sort_value = sort or default_sort
    if sort_value not in allowed_sorts:
        raise ValidationError("sort", f"Cannot sort by '{sort_value}'")

    order_value = (order or "desc").lower()
    if order_value not in ("asc", "desc"):
        raise ValidationError("order", "Order must be 'asc' or 'desc'")

    return PageRequest(
        page=page_value,
        limit=limit_value,
        sort=sort_value,
        order=order_value,  # type: ignore[arg-type]
    )


@dataclass(frozen=True)
class Page(Generic[T]):
    items: list[T] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 10

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev_page(self) -> bool:
        return self.page > 1

    @property
    def next_page(self) -> int | None:
        return self.page + 1 if self.has_next_page else None

    @property
    def prev_page(self) -> int | None:
        return self.page - 1 if self.has_prev_page else None

    def meta(self) -> dict[str, int | bool | None]:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "total_pages": self.total_pages,
            "has_next_page": self.has_next_page,
            "has_prev_page": self.has_prev_page,
            "next_page": self.next_page,
            "prev_page": self.prev_page,
        }
