# src/models/product.py

"""Product data model for inter-module data flow."""

from dataclasses import asdict, dataclass
from typing import Any

DEFAULT_ETA_MINUTES = 30


def as_price(value: Any) -> float | None:
    """Coerce a raw price to float, keeping unknown prices as ``None``."""
    if value is None or value == "":
        return None
    try:
        price = float(value)
    except (TypeError, ValueError):
        return None
    return price if price >= 0 else None


def _as_minutes(value: Any) -> int | None:
    """Coerce a raw ETA to whole minutes, ``None`` when unparseable."""
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass
class Product:
    """A single menu item offered by one platform for one restaurant.

    Restaurant-level platforms (Yemeksepeti) emit a Product with an
    empty ``product_name``; such rows feed the restaurant facet list but
    never a comparison group.
    """

    product_name: str = ""
    product_price: float | None = None
    product_image: str = ""
    product_url: str = ""
    restaurant_name: str = ""
    restaurant_image: str = ""
    restaurant_rating: str | float | None = None
    restaurant_eta: str = ""
    eta_minutes: int | None = DEFAULT_ETA_MINUTES
    source: str = ""
    restaurant_url: str = ""

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Product":
        """Build a Product from a loosely shaped adapter payload.

        Absent optional fields fall back to their defaults; only the
        grouping stage cares about missing names.
        """
        eta = (
            _as_minutes(raw["eta_minutes"])
            if "eta_minutes" in raw
            else DEFAULT_ETA_MINUTES
        )
        return cls(
            product_name=str(raw.get("product_name") or ""),
            product_price=as_price(raw.get("product_price")),
            product_image=str(raw.get("product_image") or ""),
            product_url=str(raw.get("product_url") or ""),
            restaurant_name=str(raw.get("restaurant_name") or ""),
            restaurant_image=str(raw.get("restaurant_image") or ""),
            restaurant_rating=raw.get("restaurant_rating"),
            restaurant_eta=str(raw.get("restaurant_eta") or ""),
            eta_minutes=eta,
            source=str(raw.get("source") or ""),
            restaurant_url=str(raw.get("restaurant_url") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the wire field names."""
        return asdict(self)
