# src/filters/product_filter.py

"""Pre-grouping product filtering by user-supplied constraints."""

import logging
from dataclasses import dataclass

from src.models.product import Product

logger = logging.getLogger("food_finder.filters")


@dataclass
class SearchFilters:
    """User constraints applied before grouping.  ``None`` = no constraint."""

    price_min: float | None = None
    price_max: float | None = None
    time_min: int | None = None
    time_max: int | None = None
    restaurant_filter: str = ""
    platforms: list[str] | None = None


class ProductFilter:
    """Filter raw platform products; every constraint must hold (AND)."""

    @staticmethod
    def _platform_ok(
        product: Product, allowed: frozenset[str],
    ) -> bool:
        return not allowed or product.source.lower() in allowed

    @staticmethod
    def _price_ok(product: Product, filters: SearchFilters) -> bool:
        price = product.product_price
        # Unknown prices are never hidden by a price bound
        if price is None:
            return True
        if filters.price_min is not None and price < filters.price_min:
            return False
        if filters.price_max is not None and price > filters.price_max:
            return False
        return True

    @staticmethod
    def _time_ok(product: Product, filters: SearchFilters) -> bool:
        eta = product.eta_minutes
        if eta is None:
            return True
        if filters.time_min is not None and eta < filters.time_min:
            return False
        if filters.time_max is not None and eta > filters.time_max:
            return False
        return True

    @staticmethod
    def _restaurant_ok(product: Product, needle: str) -> bool:
        if not needle:
            return True
        return needle in (product.restaurant_name or "").lower()

    @staticmethod
    def apply_filters(
        products: list[Product],
        filters: SearchFilters | None = None,
    ) -> list[Product]:
        """Return the products that satisfy every given constraint.

        The input list is not modified.
        """
        if filters is None:
            return list(products)

        allowed = frozenset(
            p.lower() for p in (filters.platforms or [])
        )
        needle = (filters.restaurant_filter or "").strip().lower()

        kept = [
            product
            for product in products
            if ProductFilter._platform_ok(product, allowed)
            and ProductFilter._price_ok(product, filters)
            and ProductFilter._time_ok(product, filters)
            and ProductFilter._restaurant_ok(product, needle)
        ]

        excluded = len(products) - len(kept)
        if excluded:
            logger.info(
                "Filters excluded %d of %d products",
                excluded,
                len(products),
            )

        return kept


def apply_filters(
    products: list[Product],
    filters: SearchFilters | None = None,
) -> list[Product]:
    """Module-level alias for :meth:`ProductFilter.apply_filters`."""
    return ProductFilter.apply_filters(products, filters)
