import pytest

from portfolio.domain.errors import ValidationError
from portfolio.domain.pagination import Page, normalize_page_request

SORTS = ["created_at", "title", "views"]


class TestNormalizePageRequest:
    def test_defaults(self):
        req = normalize_page_request(None, None, None, None, allowed_sorts=SORTS)
        assert (req.page, req.limit, req.sort, req.order) == (1, 10, "created_at", "desc")
        assert req.offset == 0

    @pytest.mark.parametrize(
        "page,limit,expected",
        [(0, 0, (1, 1)), (-3, 500, (1, 100)), (3, 25, (3, 25))],
    )
    def test_clamping(self, page, limit, expected):
        req = normalize_page_request(page, limit, None, None, allowed_sorts=SORTS)
        assert (req.page, req.limit) == expected

    def test_offset(self):
        req = normalize_page_request(3, 20, None, None, allowed_sorts=SORTS)
        assert req.offset == 40

    def test_order_is_case_insensitive(self):
        req = normalize_page_request(None, None, "title", "ASC", allowed_sorts=SORTS)
        assert req.order == "asc"

    def test_unknown_sort(self):
        with pytest.raises(ValidationError) as exc:
            normalize_page_request(None, None, "password_hash", None, allowed_sorts=SORTS)
        assert exc.value.field == "sort"

    def test_unknown_order(self):
        with pytest.raises(ValidationError) as exc:
            normalize_page_request(None, None, None, "sideways", allowed_sorts=SORTS)
        assert exc.value.field == "order"


class TestPage:
    def test_meta_middle_page(self):
        page = Page(items=[1, 2], total=5, page=2, limit=2)
        assert page.meta() == {
            "page": 2,
            "limit": 2,
            "total": 5,
            "total_pages": 3,
            "has_next_page": True,
            "has_prev_page": True,
            "next_page": 3,
            "prev_page": 1,
        }

    def test_empty(self):
        page: Page[int] = Page(items=[], total=0, page=1, limit=10)
        assert page.total_pages == 0
        assert page.next_page is None
        assert page.prev_page is None

    def test_past_the_end(self):
        page: Page[int] = Page(items=[], total=3, page=5, limit=2)
        assert page.has_next_page is False
        assert page.prev_page == 4
