# =============================================================================
# tests/test_query.py - In-Memory Search, Sort and Pagination Tests
# =============================================================================

import pytest

from core.models import Article, Listing
from core.services.query import (
    ARTICLE_SORT_KEYS,
    page_window,
    paginate,
    search,
    sort_records,
)


def _listing(name, price=100, views=0, created_at=None, location="Kumasi", description=""):
    return Listing(
        id=name.lower(),
        name=name,
        price=price,
        views=views,
        created_at=created_at,
        location=location,
        description=description,
    )


@pytest.fixture
def listings():
    return [
        _listing("Bravo", price=300, views=5, created_at="2024-01-02T00:00:00Z"),
        _listing("alpha", price=100, views=9, created_at="2024-01-03T00:00:00Z", location="Accra"),
        _listing("Charlie", price=200, views=1, created_at=None, description="Near the CAMPUS gate"),
    ]


class TestSearch:
    """Tests for case-insensitive substring search."""

    def test_blank_text_matches_all(self, listings):
        assert search(listings, "  ", ("name",)) == listings
        assert search(listings, None, ("name",)) == listings

    def test_matches_any_field(self, listings):
        result = search(listings, "accra", ("name", "location"))
        assert [l.name for l in result] == ["alpha"]

    def test_case_insensitive(self, listings):
        result = search(listings, "campus", ("description",))
        assert [l.name for l in result] == ["Charlie"]

    def test_list_fields_match_any_element(self):
        articles = [
            Article(id="1", title="One", tags=["Study", "campus"]),
            Article(id="2", title="Two", tags=["food"]),
        ]
        assert [a.id for a in search(articles, "stud", ("title", "tags"))] == ["1"]


class TestSortRecords:
    """Tests for sorting with allowed keys."""

    def test_sort_by_price_ascending(self, listings):
        result = sort_records(listings, "price", "asc")
        assert [l.price for l in result] == [100, 200, 300]

    def test_text_sort_ignores_case(self, listings):
        result = sort_records(listings, "name", "asc")
        assert [l.name for l in result] == ["alpha", "Bravo", "Charlie"]

    def test_missing_timestamps_sort_last_descending(self, listings):
        result = sort_records(listings, "created_at", "desc")
        assert [l.name for l in result] == ["alpha", "Bravo", "Charlie"]

    def test_unknown_key_falls_back_to_default(self, listings):
        assert sort_records(listings, "owner_name", "desc") == sort_records(listings, "created_at", "desc")

    def test_article_keys(self):
        articles = [Article(id="1", title="b", views=1), Article(id="2", title="a", views=3)]
        result = sort_records(articles, "views", "desc", ARTICLE_SORT_KEYS)
        assert [a.id for a in result] == ["2", "1"]


class TestPaginate:
    """Tests for page slicing and metadata."""

    def test_middle_page(self):
        items, info = paginate(list(range(45)), page=2, limit=20)
        assert items == list(range(20, 40))
        assert info.total == 45
        assert info.total_pages == 3
        assert info.has_next is True
        assert info.has_prev is True

    def test_last_page(self):
        items, info = paginate(list(range(45)), page=3, limit=20)
        assert items == list(range(40, 45))
        assert info.has_next is False

    def test_page_past_the_end_is_empty(self):
        items, info = paginate([1, 2, 3], page=5, limit=2)
        assert items == []
        assert info.total_pages == 2
        assert info.has_prev is True

    def test_empty(self):
        items, info = paginate([], page=1, limit=20)
        assert items == []
        assert info.total_pages == 0
        assert info.has_next is False
        assert info.has_prev is False


class TestPageWindow:
    """Tests for the pagination bar helper."""

    @pytest.mark.parametrize(
        "page,total,expected",
        [
            (1, 0, []),
            (1, 1, [1]),
            (1, 3, [1, 2, 3]),
            (5, 10, [1, None, 4, 5, 6, None, 10]),
            (1, 10, [1, 2, None, 10]),
            (10, 10, [1, None, 9, 10]),
        ],
    )
    def test_windows(self, page, total, expected):
        assert page_window(page, total) == expected
