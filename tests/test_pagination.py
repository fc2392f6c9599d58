"""
Tests for page/per_page to limit/offset conversion.
"""

from berry.pagination import PaginationParameters, pagination_from_query


class TestFromPage:

    def test_defaults(self):
        params = PaginationParameters.from_page()
        assert params == PaginationParameters(limit=20, offset=0)

    def test_second_page(self):
        params = PaginationParameters.from_page(2, 10)
        assert params.limit == 10
        assert params.offset == 10

    def test_page_zero_is_first_page(self):
        assert PaginationParameters.from_page(0, 10) == PaginationParameters.from_page(1, 10)

    def test_negative_page_is_first_page(self):
        assert PaginationParameters.from_page(-3, 10).offset == 0

    def test_per_page_capped(self):
        params = PaginationParameters.from_page(3, 150)
        assert params.limit == 100
        assert params.offset == 200

    def test_negative_per_page_is_zero(self):
        params = PaginationParameters.from_page(2, -5)
        assert params.limit == 0
        assert params.offset == 0

    def test_zero_per_page_is_empty_page(self):
        params = PaginationParameters.from_page(1, 0)
        assert params == PaginationParameters(limit=0, offset=0)

    def test_only_page_given(self):
        assert PaginationParameters.from_page(3).offset == 40


class TestFromQuery:

    def test_no_values_means_no_pagination(self):
        assert pagination_from_query(None, None) is None

    def test_only_per_page(self):
        assert pagination_from_query(None, 5) == PaginationParameters(limit=5, offset=0)

    def test_only_page(self):
        assert pagination_from_query(2, None) == PaginationParameters(limit=20, offset=20)
