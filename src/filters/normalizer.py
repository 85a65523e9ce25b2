# src/filters/normalizer.py

"""Name canonicalisation used as the cross-platform identity key."""


def normalize_product_name(name: str | None) -> str:
    """Lowercase, trim and collapse whitespace runs to a single space.

    ``"  Big   Burger"`` and ``"big burger"`` map to the same key.
    """
    if not name:
        return ""
    return " ".join(name.lower().split())


def normalize_restaurant_name(name: str | None) -> str:
    """Lowercase and trim only; internal spacing is left untouched."""
    if not name:
        return ""
    return name.lower().strip()
