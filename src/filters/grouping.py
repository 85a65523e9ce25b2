# src/filters/grouping.py

"""Cross-platform product grouping and ranking."""

import logging
from typing import Any, Callable

from src.config.settings import Settings
from src.filters.normalizer import (
    normalize_product_name,
    normalize_restaurant_name,
)
from src.models.comparison import ComparisonGroup, Variant
from src.models.product import Product

logger = logging.getLogger("food_finder.filters")

SORT_PRICE = "price"
SORT_DISTANCE = "distance"


class ProductGrouper:
    """Merge equivalent offers into ranked comparison groups.

    Two products are the same offer when both their normalised
    restaurant name and normalised product name match.  ``source`` is
    carried on each variant but is not part of the identity.
    """

    @staticmethod
    def _bucket(
        products: list[Product],
    ) -> dict[str, dict[str, list[Product]]]:
        """Bucket products by restaurant, then by product name.

        Items with an empty key at either level are dropped.  Insertion
        order is first-seen order at both levels.
        """
        restaurants: dict[str, dict[str, list[Product]]] = {}
        for product in products:
            restaurant_key = normalize_restaurant_name(
                product.restaurant_name
            )
            if not restaurant_key:
                continue
            name_key = normalize_product_name(product.product_name)
            if not name_key:
                continue
            by_name = restaurants.setdefault(restaurant_key, {})
            by_name.setdefault(name_key, []).append(product)
        return restaurants

    @staticmethod
    def _build_group(members: list[Product]) -> ComparisonGroup:
        """Build one group from products sharing an identity key."""
        variants = [
            Variant(
                source=p.source,
                price=p.product_price,
                product_url=p.product_url,
                product_image=p.product_image,
                restaurant_rating=p.restaurant_rating,
                restaurant_eta=p.restaurant_eta,
                eta_minutes=p.eta_minutes,
            )
            for p in members
        ]
        # Stable: equal prices keep member order, unknown prices last
        variants.sort(
            key=lambda v: (v.price is None, v.price or 0.0)
        )

        lowest_price = next(
            (v.price for v in variants if v.price is not None), None
        )
        if lowest_price is not None:
            for variant in variants:
                if variant.price == lowest_price:
                    variant.is_lowest = True

        # max() keeps the first of equally long names
        representative = max(
            (p.product_name for p in members), key=len
        )
        first = members[0]
        return ComparisonGroup(
            product_name=representative,
            restaurant_name=first.restaurant_name,
            restaurant_image=first.restaurant_image,
            product_image=variants[0].product_image,
            variants=variants,
            lowest_price=lowest_price,
        )

    @staticmethod
    def _sort_key(
        sort_by: str,
    ) -> Callable[[ComparisonGroup], tuple[Any, ...]]:
        """Return the ranking key for *sort_by*.

        Multi-platform groups always come first; the secondary key
        depends on the requested sort and is omitted for unknown values.
        """
        if sort_by == SORT_PRICE:
            return lambda g: (
                -g.platform_count,
                g.lowest_price is None,
                g.lowest_price or 0.0,
            )
        if sort_by == SORT_DISTANCE:
            unknown = Settings.UNKNOWN_ETA_SORT_VALUE

            def by_eta(g: ComparisonGroup) -> tuple[Any, ...]:
                eta = g.variants[0].eta_minutes if g.variants else None
                return (
                    -g.platform_count,
                    unknown if eta is None else eta,
                )

            return by_eta
        return lambda g: (-g.platform_count,)

    @staticmethod
    def group_by_similarity(
        products: list[Product],
        sort_by: str = SORT_PRICE,
    ) -> list[ComparisonGroup]:
        """Group products across platforms and rank the groups.

        Returns an empty list for empty input.
        """
        if not products:
            return []

        groups = [
            ProductGrouper._build_group(members)
            for by_name in ProductGrouper._bucket(products).values()
            for members in by_name.values()
        ]
        groups.sort(key=ProductGrouper._sort_key(sort_by))

        compared = sum(1 for g in groups if g.has_comparison)
        logger.info(
            "Grouped %d products into %d groups "
            "(%d on multiple platforms, sort=%s)",
            len(products),
            len(groups),
            compared,
            sort_by,
        )
        return groups


def group_products_by_similarity(
    products: list[Product],
    sort_by: str = SORT_PRICE,
) -> list[ComparisonGroup]:
    """Module-level alias for :meth:`ProductGrouper.group_by_similarity`."""
    return ProductGrouper.group_by_similarity(products, sort_by)
