# tests/test_restaurant_collector.py

"""Tests for the restaurant facet list."""

import unittest

from src.filters.restaurant_collector import get_all_restaurants
from src.models.product import Product


class TestGetAllRestaurants(unittest.TestCase):
    """get_all_restaurants behaviour."""

    def test_distinct_sorted(self) -> None:
        products = [
            Product(product_name="Ayran", restaurant_name="Pizza Hut"),
            Product(product_name="Cola", restaurant_name="Burger King"),
            Product(product_name="Cola", restaurant_name="Pizza Hut"),
        ]
        self.assertEqual(
            get_all_restaurants(products), ["Burger King", "Pizza Hut"]
        )

    def test_skips_empty_names(self) -> None:
        products = [
            Product(product_name="Ayran", restaurant_name=""),
            Product(product_name="Cola", restaurant_name="Dürümcü"),
        ]
        self.assertEqual(get_all_restaurants(products), ["Dürümcü"])

    def test_keeps_original_casing(self) -> None:
        products = [
            Product(restaurant_name="burger king"),
            Product(restaurant_name="Burger King"),
        ]
        self.assertEqual(
            get_all_restaurants(products), ["Burger King", "burger king"]
        )

    def test_restaurant_level_rows_included(self) -> None:
        """Rows without a product name still contribute a facet."""
        products = [Product(product_name="", restaurant_name="Köfteci")]
        self.assertEqual(get_all_restaurants(products), ["Köfteci"])

    def test_empty_input(self) -> None:
        self.assertEqual(get_all_restaurants([]), [])


if __name__ == "__main__":
    unittest.main()
