# tests/test_tgoyemek_scraper.py

"""Tests for the tgoyemek adapter."""

import json
import unittest
from typing import Any
from unittest.mock import MagicMock, patch

from src.filters.grouping import ProductGrouper
from src.filters.product_filter import ProductFilter, SearchFilters
from src.scrapers.tgoyemek_scraper import TgoyemekScraper

SUGGESTIONS: dict[str, Any] = {
    "suggestions": [
        {"type": "TEXT", "items": [{"title": "lahmacun"}]},
        {
            "type": "RESTAURANT",
            "items": [
                {
                    "restaurantId": 101,
                    "title": "Halil Usta",
                    "imageUrl": "https://cdn.tgo/halil.jpg",
                    "rating": 4.6,
                    "averageDeliveryInterval": "25-35dk",
                    "status": "OPEN",
                },
                {
                    "restaurantId": 102,
                    "title": "Kapalı Kebap",
                    "status": "CLOSED",
                },
            ],
        },
    ]
}

MENU: dict[str, Any] = {
    "restaurant": {
        "info": {
            "name": "Halil Usta Lahmacun",
            "score": {"overall": 4.7},
            "deliveryInfo": {"eta": "20-30dk"},
            "status": "OPEN",
        },
        "sections": [
            {
                "slug": "lahmacunlar",
                "products": [
                    {
                        "name": "Fındık Lahmacun",
                        "price": {"salePrice": 95.0},
                        "imageUrl": "https://cdn.tgo/findik.jpg",
                    },
                    {
                        "name": "Ayran",
                        "price": {"salePrice": 20.0},
                    },
                ],
            }
        ],
    }
}


def _response(payload: dict[str, Any]) -> MagicMock:
    resp = MagicMock()
    resp.status_code = 200
    resp.text = json.dumps(payload)
    return resp


@patch("src.scrapers.base_scraper.curl_requests.Session")
class TestTgoyemekSearch(unittest.TestCase):
    """TgoyemekScraper.search with mocked HTTP."""

    def test_returns_matching_menu_items(
        self, mock_session_cls: MagicMock,
    ) -> None:
        scraper = TgoyemekScraper()
        scraper.session.request.side_effect = [
            _response(SUGGESTIONS),
            _response(MENU),
        ]

        products = scraper.search("lahmacun")

        self.assertEqual(len(products), 1)
        product = products[0]
        self.assertEqual(product.product_name, "Fındık Lahmacun")
        self.assertEqual(product.product_price, 95.0)
        self.assertEqual(product.restaurant_name, "Halil Usta Lahmacun")
        self.assertEqual(product.restaurant_rating, 4.7)
        self.assertEqual(product.eta_minutes, 20)
        self.assertEqual(product.source, "tgoyemek")
        self.assertEqual(
            product.product_url,
            "https://tgoyemek.com/restoranlar/101#lahmacunlar",
        )

    def test_only_open_restaurants_fetched(
        self, mock_session_cls: MagicMock,
    ) -> None:
        scraper = TgoyemekScraper()
        scraper.session.request.side_effect = [
            _response(SUGGESTIONS),
            _response(MENU),
        ]

        scraper.search("lahmacun")

        self.assertEqual(scraper.session.request.call_count, 2)
        menu_url = scraper.session.request.call_args_list[1].args[1]
        self.assertTrue(menu_url.endswith("/restaurants/101"))

    def test_default_coordinates_used(
        self, mock_session_cls: MagicMock,
    ) -> None:
        scraper = TgoyemekScraper()
        scraper.session.request.return_value = _response(
            {"suggestions": []}
        )

        scraper.search("pide")

        params = scraper.session.request.call_args.kwargs["params"]
        self.assertEqual(params["text"], "pide")
        self.assertEqual(params["latitude"], TgoyemekScraper.DEFAULT_LAT)
        self.assertEqual(
            params["longitude"], TgoyemekScraper.DEFAULT_LON
        )

    def test_failed_menu_skipped(
        self, mock_session_cls: MagicMock,
    ) -> None:
        scraper = TgoyemekScraper()
        bad = MagicMock()
        bad.status_code = 200
        bad.text = "{not json"
        scraper.session.request.side_effect = [
            _response(SUGGESTIONS),
            bad,
        ]

        self.assertEqual(scraper.search("lahmacun"), [])

    def test_menus_fetched_concurrently_in_order(
        self, mock_session_cls: MagicMock,
    ) -> None:
        second = {
            "restaurantId": 103,
            "title": "Lahmacun Evi",
            "status": "OPEN",
        }
        suggestions = json.loads(json.dumps(SUGGESTIONS))
        suggestions["suggestions"][1]["items"].append(second)
        other_menu = json.loads(json.dumps(MENU))
        other_menu["restaurant"]["info"]["name"] = "Lahmacun Evi"

        def route(method: str, url: str, **kwargs: Any) -> MagicMock:
            if url.endswith("/restaurants/101"):
                return _response(MENU)
            if url.endswith("/restaurants/103"):
                return _response(other_menu)
            return _response(suggestions)

        mock_session_cls.return_value.request.side_effect = route
        scraper = TgoyemekScraper()

        products = scraper.search("lahmacun")

        self.assertEqual(
            [p.restaurant_name for p in products],
            ["Halil Usta Lahmacun", "Lahmacun Evi"],
        )
        # One adapter session plus one per menu worker
        self.assertEqual(mock_session_cls.call_count, 3)
        self.assertEqual(mock_session_cls.return_value.close.call_count, 2)

    def test_http_failure_returns_empty(
        self, mock_session_cls: MagicMock,
    ) -> None:
        scraper = TgoyemekScraper()
        failed = MagicMock()
        failed.status_code = 500
        scraper.session.request.return_value = failed

        self.assertEqual(scraper.search("lahmacun"), [])


@patch("src.scrapers.base_scraper.curl_requests.Session")
class TestTgoyemekHelpers(unittest.TestCase):
    """Parsing helpers."""

    def test_open_restaurants_respects_limit(
        self, mock_session_cls: MagicMock,
    ) -> None:
        items = [
            {"restaurantId": i, "title": f"R{i}", "status": "OPEN"}
            for i in range(10)
        ]
        picked = TgoyemekScraper._open_restaurants(
            {"suggestions": [{"type": "RESTAURANT", "items": items}]}, 3
        )
        self.assertEqual([r["id"] for r in picked], [0, 1, 2])
        self.assertEqual(picked[0]["eta"], "30dk")

    def test_auth_header_from_token(
        self, mock_session_cls: MagicMock,
    ) -> None:
        scraper = TgoyemekScraper()
        scraper.settings.TGOYEMEK_AUTH_TOKEN = "abc"
        try:
            headers = scraper._headers()
        finally:
            del scraper.settings.TGOYEMEK_AUTH_TOKEN
        self.assertEqual(headers["Authorization"], "Bearer abc")

    def test_inactive_items_skipped_when_closed(
        self, mock_session_cls: MagicMock,
    ) -> None:
        scraper = TgoyemekScraper()
        menu = {
            "restaurant": {
                "info": {"status": "CLOSED"},
                "sections": [{
                    "slug": "s",
                    "products": [
                        {"name": "Pide", "active": False},
                        {"name": "Kıymalı Pide", "price": {}},
                    ],
                }],
            }
        }
        restaurant = {
            "id": 7, "name": "Pideci", "image": "",
            "rating": "N/A", "eta": "30dk",
        }
        products = scraper._parse_menu(menu, restaurant, "pide")
        self.assertEqual(
            [p.product_name for p in products], ["Kıymalı Pide"]
        )
        self.assertIsNone(products[0].product_price)
        self.assertEqual(products[0].restaurant_name, "Pideci")

    def test_sale_price_coerced_to_float(
        self, mock_session_cls: MagicMock,
    ) -> None:
        scraper = TgoyemekScraper()
        menu = {
            "restaurant": {
                "info": {"name": "Pideci"},
                "sections": [{
                    "slug": "s",
                    "products": [
                        {"name": "Kaşarlı Pide",
                         "price": {"salePrice": "120.50"}},
                        {"name": "Kıymalı Pide",
                         "price": {"salePrice": 99.0}},
                        {"name": "Karışık Pide",
                         "price": {"salePrice": -5}},
                        {"name": "Sucuklu Pide",
                         "price": {"salePrice": "yok"}},
                    ],
                }],
            }
        }
        restaurant = {
            "id": 7, "name": "Pideci", "image": "",
            "rating": "N/A", "eta": "30dk",
        }
        products = scraper._parse_menu(menu, restaurant, "pide")

        self.assertEqual(
            [p.product_price for p in products], [120.5, 99.0, None, None]
        )
        kept = ProductFilter.apply_filters(
            products, SearchFilters(price_max=100)
        )
        self.assertEqual(
            [p.product_name for p in kept],
            ["Kıymalı Pide", "Karışık Pide", "Sucuklu Pide"],
        )
        groups = ProductGrouper.group_by_similarity(products)
        self.assertEqual(len(groups), 4)


if __name__ == "__main__":
    unittest.main()
