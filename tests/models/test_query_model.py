"""
Tests for the listing options.
"""

import pytest

from app.models.query_model import DEFAULT_PAGE_SIZE, MAX_OFFSET, BookOrder, GetBooksOptions


class TestGetBooksOptions:

    def test_defaults(self):
        options = GetBooksOptions()

        assert options.page == 1
        assert options.limit == DEFAULT_PAGE_SIZE == 10
        assert options.order_by is BookOrder.TITLE
        assert options.desc is False
        assert options.offset == 0

    @pytest.mark.parametrize("page,offset", [(1, 0), (2, 10), (7, 60)])
    def test_offset_from_page(self, page, offset):
        assert GetBooksOptions(page=page).offset == offset

    @pytest.mark.parametrize("page", [2**62, 10**18, 10**30])
    def test_offset_stays_within_bigint(self, page):
        options = GetBooksOptions(page=page)

        assert options.offset == MAX_OFFSET == 2**63 - 1

    @pytest.mark.parametrize("page", [0, -1, -100])
    def test_non_positive_page_is_first_page(self, page):
        options = GetBooksOptions(page=page)

        assert options.page == 1
        assert options.offset == 0

    @pytest.mark.parametrize("value", ["", "price", "id; DROP TABLE book", None])
    def test_unknown_order_falls_back_to_title(self, value):
        assert GetBooksOptions(order_by=value).order_by is BookOrder.TITLE

    def test_order_is_case_insensitive(self):
        assert GetBooksOptions(order_by="Author").order_by is BookOrder.AUTHOR

    def test_genres_from_comma_separated_string(self):
        options = GetBooksOptions(genres=" horror, ,scifi ,")

        assert options.genres == ["horror", "scifi"]

    def test_empty_genre_string_means_no_filter(self):
        assert GetBooksOptions(genres="").genres == []


class TestBookOrder:

    def test_tie_breaks(self):
        assert BookOrder.TITLE.tie_break is BookOrder.AUTHOR
        assert BookOrder.AUTHOR.tie_break is BookOrder.TITLE
