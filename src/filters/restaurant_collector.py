# src/filters/restaurant_collector.py

"""Restaurant facet collection."""

from src.models.product import Product


def get_all_restaurants(products: list[Product]) -> list[str]:
    """Distinct non-empty restaurant names, original casing, sorted.

    Call this on the unfiltered product list so the facet options do
    not shrink with the active filter selection.
    """
    return sorted(
        {p.restaurant_name for p in products if p.restaurant_name}
    )
