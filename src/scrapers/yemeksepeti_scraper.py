# src/scrapers/yemeksepeti_scraper.py

"""Adapter for yemeksepeti.com via its persisted GraphQL search."""

import json
import random
import secrets
import time
from typing import Any

from src.models.product import DEFAULT_ETA_MINUTES, Product
from src.scrapers.base_scraper import BasePlatformScraper


class YemeksepetiScraper(BasePlatformScraper):
    """Restaurant-level search against the Delivery Hero GraphQL API.

    The search page lists vendors, not dishes, so every result carries an
    empty ``product_name``: it populates the restaurant facet list but
    never forms a comparison group.
    """

    GRAPHQL_API = "https://tr.fd-api.com/graphql"
    PERSISTED_QUERY_HASH = (
        "93b9ca670837160efbb882589196c597acdd3be370a2c520b799a52728a38495"
    )
    CLIENT_VERSION = "VENDOR-LIST-MICROFRONTEND.26.07.0026"
    BASE_RESTAURANT_URL = "https://www.yemeksepeti.com/restaurant"

    DEFAULT_LAT = 41.076703
    DEFAULT_LON = 29.010804

    def __init__(self) -> None:
        super().__init__("yemeksepeti")

    def _get_homepage(self) -> str:
        return "https://www.yemeksepeti.com/"

    @staticmethod
    def _perseus_id() -> str:
        """Client/session id in the shape the web client sends."""
        return (
            f"{int(time.time() * 1000)}."
            f"{random.randrange(10**18)}."
            f"{secrets.token_hex(5)}"
        )

    def _headers(self, lat: float, lon: float) -> dict[str, str]:
        perseus_id = self._perseus_id()
        return {
            **self.settings.DEFAULT_HEADERS,
            "Content-Type": "application/json",
            "apollographql-client-name": "web",
            "apollographql-client-version": self.CLIENT_VERSION,
            "customer-latitude": str(lat),
            "customer-longitude": str(lon),
            "display-context": "SEARCH",
            "locale": "tr_TR",
            "platform": "web",
            "x-fp-api-key": "volo",
            "perseus-client-id": perseus_id,
            "perseus-session-id": perseus_id,
        }

    def _payload(
        self, query: str, lat: float, lon: float,
    ) -> dict[str, Any]:
        return {
            "extensions": {
                "persistedQuery": {
                    "sha256Hash": self.PERSISTED_QUERY_HASH,
                    "version": 1,
                },
            },
            "variables": {
                "searchResultsParams": {
                    "query": query,
                    "latitude": lat,
                    "longitude": lon,
                    "locale": "tr_TR",
                    "languageId": 2,
                    "expeditionType": "DELIVERY",
                    "customerType": "B2C",
                    "verticalTypes": ["RESTAURANTS"],
                },
                "skipQueryCorrection": True,
            },
        }

    @classmethod
    def _parse_vendor(cls, vendor: dict[str, Any]) -> Product:
        """Parse one open vendor into a restaurant-level Product."""
        estimations: dict[str, Any] = vendor.get("timeEstimations") or {}
        delivery: dict[str, Any] = estimations.get("delivery") or {}
        duration: dict[str, Any] = delivery.get("duration") or {}
        lower = duration.get("lowerLimitInMinutes")
        upper = duration.get("upperLimitInMinutes")
        eta_minutes = lower or upper or DEFAULT_ETA_MINUTES
        eta_label = (
            f"{lower}-{upper} mins"
            if lower and upper
            else f"{eta_minutes} mins"
        )

        images: dict[str, Any] = vendor.get("images") or {}
        rating: dict[str, Any] = vendor.get("vendorRating") or {}
        return Product(
            product_name="",
            product_price=None,
            restaurant_name=str(vendor.get("name") or ""),
            restaurant_image=str(
                images.get("listing") or images.get("logo") or ""
            ),
            restaurant_rating=rating.get("value") or "N/A",
            restaurant_eta=eta_label,
            eta_minutes=int(eta_minutes),
            source="Yemeksepeti",
            restaurant_url=(
                f"{cls.BASE_RESTAURANT_URL}/{vendor.get('urlKey') or ''}"
            ),
        )

    def search(
        self,
        query: str,
        lat: float | None = None,
        lon: float | None = None,
    ) -> list[Product]:
        """Search Yemeksepeti and return open restaurants."""
        lat, lon = self._coords(lat, lon)
        self.logger.info(
            "[yemeksepeti] Searching '%s' at (%s, %s)", query, lat, lon
        )
        try:
            resp = self._fetch_post(
                self.GRAPHQL_API,
                self._headers(lat, lon),
                self._payload(query, lat, lon),
            )
            if not resp:
                self.logger.warning(
                    "[yemeksepeti] Failed to fetch search results"
                )
                return []

            data: dict[str, Any] = json.loads(resp.text)
            page: dict[str, Any] = (
                (data.get("data") or {}).get("searchPage") or {}
            )
            components: list[dict[str, Any]] = (
                page.get("components") or []
            )

            restaurants: list[Product] = []
            for component in components:
                vendor: dict[str, Any] = component.get("vendorData") or {}
                availability: dict[str, Any] = (
                    vendor.get("availability") or {}
                )
                if not vendor or availability.get("status") != "OPEN":
                    continue
                restaurants.append(self._parse_vendor(vendor))

            self.logger.info(
                "[yemeksepeti] Returning %d of %d restaurants",
                len(restaurants),
                len(components),
            )
            return restaurants
        except Exception as exc:
            self.logger.error(
                "[yemeksepeti] Search failed: %s", exc, exc_info=True
            )
            return []
