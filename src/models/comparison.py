# src/models/comparison.py

"""Derived comparison-engine records: variants, groups and pages."""

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass
class Variant:
    """One platform's offer inside a comparison group."""

    source: str
    price: float | None
    product_url: str = ""
    product_image: str = ""
    restaurant_rating: str | float | None = None
    restaurant_eta: str = ""
    eta_minutes: int | None = None
    is_lowest: bool = False


@dataclass
class ComparisonGroup:
    """The same product at the same restaurant across platforms."""

    product_name: str
    restaurant_name: str
    restaurant_image: str = ""
    product_image: str = ""
    variants: list[Variant] = field(
        default_factory=lambda: list[Variant]()
    )
    lowest_price: float | None = None

    @property
    def platform_count(self) -> int:
        return len(self.variants)

    @property
    def has_comparison(self) -> bool:
        return self.platform_count > 1

    def to_dict(self) -> dict[str, Any]:
        """Serialise with the derived counters included."""
        data = asdict(self)
        data["platform_count"] = self.platform_count
        data["has_comparison"] = self.has_comparison
        return data


@dataclass
class Pagination:
    """Page metadata reported alongside a result slice."""

    current_page: int
    per_page: int
    total_products: int
    total_pages: int
    has_next: bool
    has_prev: bool
