# src/scrapers/tgoyemek_scraper.py

"""Adapter for tgoyemek.com (Trendyol Go food delivery, Turkey)."""

import json
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from src.models.product import Product, as_price
from src.scrapers.base_scraper import BasePlatformScraper


class TgoyemekScraper(BasePlatformScraper):
    """Product-level search against the tgoyemek discovery API.

    The suggestions endpoint only returns restaurants, so each open
    restaurant's menu is fetched and filtered locally by query words.
    """

    SEARCH_API = (
        "https://api.tgoapis.com/"
        "web-discovery-apidiscovery-santral/suggestions"
    )
    RESTAURANT_API = (
        "https://api.tgoapis.com/"
        "web-restaurant-apirestaurant-santral/restaurants"
    )
    BASE_RESTAURANT_URL = "https://tgoyemek.com/restoranlar"

    DEFAULT_LAT = 41.07087
    DEFAULT_LON = 28.996586

    def __init__(self) -> None:
        super().__init__("tgoyemek")

    def _get_homepage(self) -> str:
        return "https://tgoyemek.com/"

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {
            **self.settings.DEFAULT_HEADERS,
            "Origin": "https://tgoyemek.com",
            "Referer": self._get_homepage(),
        }
        token = self.settings.TGOYEMEK_AUTH_TOKEN
        if token:
            headers["Authorization"] = (
                token if token.startswith("Bearer ") else f"Bearer {token}"
            )
        return headers

    @staticmethod
    def _open_restaurants(
        data: dict[str, Any], limit: int,
    ) -> list[dict[str, Any]]:
        """Pick up to *limit* open restaurants from suggestion groups."""
        restaurants: list[dict[str, Any]] = []
        for group in data.get("suggestions") or []:
            if group.get("type") == "TEXT":
                continue
            for item in group.get("items") or []:
                if len(restaurants) >= limit:
                    return restaurants
                if item.get("status") != "OPEN":
                    continue
                restaurants.append({
                    "id": item.get("restaurantId"),
                    "name": item.get("title") or "",
                    "image": item.get("imageUrl") or "",
                    "rating": item.get("rating") or "N/A",
                    "eta": item.get("averageDeliveryInterval") or "30dk",
                })
        return restaurants

    def _parse_menu(
        self,
        data: dict[str, Any],
        restaurant: dict[str, Any],
        query: str,
    ) -> list[Product]:
        """Turn a restaurant payload into Products matching *query*."""
        body: dict[str, Any] = data.get("restaurant") or {}
        if not body:
            return []

        info: dict[str, Any] = body.get("info") or {}
        score: dict[str, Any] = info.get("score") or {}
        delivery: dict[str, Any] = info.get("deliveryInfo") or {}
        restaurant_name = info.get("name") or restaurant["name"]
        restaurant_image = info.get("imageUrl") or restaurant["image"]
        rating = score.get("overall") or restaurant["rating"]
        eta = delivery.get("eta") or restaurant["eta"]
        closed = info.get("status") == "CLOSED"

        query_words = query.lower().split()
        products: list[Product] = []
        for section in body.get("sections") or []:
            slug = section.get("slug") or ""
            for item in section.get("products") or []:
                if closed and item.get("active") is False:
                    continue
                name = str(item.get("name") or "")
                lowered = name.lower()
                if not any(word in lowered for word in query_words):
                    continue
                price_info: dict[str, Any] = item.get("price") or {}
                products.append(
                    Product(
                        product_name=name,
                        product_price=as_price(price_info.get("salePrice")),
                        product_image=str(item.get("imageUrl") or ""),
                        product_url=(
                            f"{self.BASE_RESTAURANT_URL}/"
                            f"{restaurant['id']}#{slug}"
                        ),
                        restaurant_name=str(restaurant_name),
                        restaurant_image=str(restaurant_image),
                        restaurant_rating=rating,
                        restaurant_eta=str(eta),
                        eta_minutes=self.parse_eta_minutes(eta),
                        source="tgoyemek",
                    )
                )
        return products

    def _fetch_menu(
        self,
        restaurant: dict[str, Any],
        query: str,
        lat: float,
        lon: float,
    ) -> list[Product]:
        """Fetch one restaurant's menu; failures yield no products.

        Runs on a pool worker, so it uses a session of its own.
        """
        session = self._new_session()
        try:
            resp = self._fetch_get(
                f"{self.RESTAURANT_API}/{restaurant['id']}",
                self._headers(),
                params={"latitude": lat, "longitude": lon},
                timeout=self.settings.MENU_REQUEST_TIMEOUT,
                session=session,
            )
            if not resp:
                return []
            return self._parse_menu(
                json.loads(resp.text), restaurant, query
            )
        except Exception as exc:
            self.logger.error(
                "[tgoyemek] Failed to fetch menu for %s: %s",
                restaurant.get("id"),
                exc,
                exc_info=True,
            )
            return []
        finally:
            session.close()

    def search(
        self,
        query: str,
        lat: float | None = None,
        lon: float | None = None,
    ) -> list[Product]:
        """Search tgoyemek restaurants and return matching menu items."""
        lat, lon = self._coords(lat, lon)
        self.logger.info(
            "[tgoyemek] Searching '%s' at (%s, %s)", query, lat, lon
        )
        try:
            resp = self._fetch_get(
                self.SEARCH_API,
                self._headers(),
                params={"text": query, "latitude": lat, "longitude": lon},
            )
            if not resp:
                self.logger.warning(
                    "[tgoyemek] Failed to fetch suggestions"
                )
                return []

            restaurants = self._open_restaurants(
                json.loads(resp.text), self.settings.MAX_RESTAURANTS
            )
            self.logger.info(
                "[tgoyemek] %d open restaurants, fetching menus",
                len(restaurants),
            )

            products: list[Product] = []
            if restaurants:
                with ThreadPoolExecutor(
                    max_workers=len(restaurants)
                ) as pool:
                    menus = pool.map(
                        lambda r: self._fetch_menu(r, query, lat, lon),
                        restaurants,
                    )
                    for menu in menus:
                        products.extend(menu)

            self.logger.info(
                "[tgoyemek] Returning %d products from %d restaurants",
                len(products),
                len(restaurants),
            )
            return products
        except Exception as exc:
            self.logger.error(
                "[tgoyemek] Search failed: %s", exc, exc_info=True
            )
            return []
