# src/filters/paginator.py

"""Fixed-size pagination over a ranked result list."""

import math
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from src.config.settings import Settings
from src.models.comparison import Pagination

T = TypeVar("T")


@dataclass
class PaginatedResult(Generic[T]):
    """One page of items plus its pagination metadata."""

    products: list[T] = field(default_factory=list)
    pagination: Pagination | None = None


def paginate_results(
    items: list[T],
    page: int = 1,
    per_page: int = Settings.RESULTS_PER_PAGE,
) -> PaginatedResult[T]:
    """Slice *items* into the 1-based *page* of size *per_page*.

    An out-of-range page returns an empty slice rather than failing.
    """
    if per_page < 1:
        msg = f"per_page must be >= 1, got {per_page}"
        raise ValueError(msg)

    total = len(items)
    total_pages = math.ceil(total / per_page)

    if page < 1:
        page_items: list[T] = []
    else:
        start = (page - 1) * per_page
        page_items = items[start:start + per_page]

    return PaginatedResult(
        products=page_items,
        pagination=Pagination(
            current_page=page,
            per_page=per_page,
            total_products=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        ),
    )
