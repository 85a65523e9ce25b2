# tests/test_paginator.py

"""Tests for result pagination."""

import unittest

from src.filters.paginator import paginate_results


class TestPaginateResults(unittest.TestCase):
    """paginate_results slicing and metadata."""

    def setUp(self) -> None:
        self.items = [f"p{i}" for i in range(1, 31)]

    def test_last_partial_page(self) -> None:
        result = paginate_results(self.items, page=3, per_page=12)
        self.assertEqual(len(result.products), 6)
        self.assertEqual(result.products[0], "p25")
        assert result.pagination is not None
        self.assertEqual(result.pagination.total_pages, 3)
        self.assertEqual(result.pagination.total_products, 30)
        self.assertFalse(result.pagination.has_next)
        self.assertTrue(result.pagination.has_prev)

    def test_first_page_flags(self) -> None:
        result = paginate_results(self.items, page=1, per_page=12)
        assert result.pagination is not None
        self.assertEqual(result.products, self.items[:12])
        self.assertTrue(result.pagination.has_next)
        self.assertFalse(result.pagination.has_prev)

    def test_pages_concatenate_to_input(self) -> None:
        pages = [
            paginate_results(self.items, page=n, per_page=7).products
            for n in range(1, 6)
        ]
        self.assertEqual(sum(pages, []), self.items)

    def test_default_page_size(self) -> None:
        result = paginate_results(self.items)
        assert result.pagination is not None
        self.assertEqual(result.pagination.per_page, 12)
        self.assertEqual(len(result.products), 12)

    def test_empty_input(self) -> None:
        result = paginate_results([], page=1, per_page=12)
        assert result.pagination is not None
        self.assertEqual(result.products, [])
        self.assertEqual(result.pagination.total_pages, 0)
        self.assertFalse(result.pagination.has_next)
        self.assertFalse(result.pagination.has_prev)

    def test_page_past_end_is_empty(self) -> None:
        result = paginate_results(self.items, page=9, per_page=12)
        assert result.pagination is not None
        self.assertEqual(result.products, [])
        self.assertEqual(result.pagination.current_page, 9)
        self.assertFalse(result.pagination.has_next)

    def test_page_below_one_is_empty(self) -> None:
        result = paginate_results(self.items, page=0, per_page=12)
        self.assertEqual(result.products, [])

    def test_invalid_page_size_raises(self) -> None:
        with self.assertRaises(ValueError):
            paginate_results(self.items, page=1, per_page=0)


if __name__ == "__main__":
    unittest.main()
