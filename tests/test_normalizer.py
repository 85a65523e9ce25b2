# tests/test_normalizer.py

"""Tests for product / restaurant name normalisation."""

import unittest

from src.filters.normalizer import (
    normalize_product_name,
    normalize_restaurant_name,
)


class TestNormalizeProductName(unittest.TestCase):
    """normalize_product_name behaviour."""

    def test_lowercases_and_trims(self) -> None:
        self.assertEqual(
            normalize_product_name("  Pizza Margherita "),
            "pizza margherita",
        )

    def test_collapses_internal_whitespace(self) -> None:
        """'  Big   Burger' and 'big burger' compare equal."""
        self.assertEqual(
            normalize_product_name("  Big   Burger"),
            normalize_product_name("big burger"),
        )

    def test_tabs_and_newlines_collapse(self) -> None:
        self.assertEqual(
            normalize_product_name("Döner\t\nDürüm"), "döner dürüm"
        )

    def test_empty_and_none(self) -> None:
        self.assertEqual(normalize_product_name(""), "")
        self.assertEqual(normalize_product_name(None), "")
        self.assertEqual(normalize_product_name("   "), "")


class TestNormalizeRestaurantName(unittest.TestCase):
    """normalize_restaurant_name behaviour."""

    def test_lowercases_and_trims(self) -> None:
        self.assertEqual(
            normalize_restaurant_name("  Burger KING "), "burger king"
        )

    def test_keeps_internal_whitespace(self) -> None:
        """Only trimming and case folding; runs are not collapsed."""
        self.assertEqual(
            normalize_restaurant_name("Pizza  Hut"), "pizza  hut"
        )

    def test_empty_and_none(self) -> None:
        self.assertEqual(normalize_restaurant_name(""), "")
        self.assertEqual(normalize_restaurant_name(None), "")


if __name__ == "__main__":
    unittest.main()
