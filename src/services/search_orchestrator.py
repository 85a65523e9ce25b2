# src/services/search_orchestrator.py

"""Orchestrates multi-platform food searches through the comparison engine."""

import asyncio
import importlib
import logging
from dataclasses import asdict, dataclass, field, replace
from typing import Any

from src.config.settings import Settings
from src.filters.grouping import ProductGrouper
from src.filters.paginator import paginate_results
from src.filters.product_filter import ProductFilter, SearchFilters
from src.filters.restaurant_collector import get_all_restaurants
from src.models.comparison import ComparisonGroup, Pagination
from src.models.product import Product

logger = logging.getLogger("food_finder.orchestrator")


@dataclass
class SearchRequest:
    """Parameters of one search call."""

    term: str
    lat: float | None = None
    lon: float | None = None
    sort: str = Settings.DEFAULT_SORT
    page: int = 1
    per_page: int = Settings.RESULTS_PER_PAGE
    filters: SearchFilters = field(default_factory=SearchFilters)
    platforms: list[str] | None = None
    region: str | None = None
    group_by_restaurant: bool = False


@dataclass
class SearchResponse:
    """Container for a completed, grouped and paginated search."""

    query: str
    grouped: bool = False
    products: list[ComparisonGroup] = field(
        default_factory=lambda: list[ComparisonGroup]()
    )
    pagination: Pagination | None = None
    all_restaurants: list[str] = field(
        default_factory=lambda: list[str]()
    )
    total_before_filter: int = 0
    total_after_filter: int = 0
    errors: list[str] = field(
        default_factory=lambda: list[str]()
    )

    def to_dict(self) -> dict[str, Any]:
        """The JSON body returned by the search endpoint."""
        return {
            "grouped": self.grouped,
            "products": [g.to_dict() for g in self.products],
            "pagination": (
                asdict(self.pagination) if self.pagination else None
            ),
            "all_restaurants": self.all_restaurants,
        }


def load_scraper_class(dotted_path: str) -> type[Any]:
    """Dynamically import a scraper class from its dotted module path."""
    module_path, class_name = dotted_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls: type[Any] = getattr(module, class_name)
    return cls


def resolve_sources(
    platforms: list[str] | None = None,
    region: str | None = None,
) -> list[dict[str, str]]:
    """Select registered sources by platform ids or region.

    Explicit *platforms* win over *region*; with neither, every source
    is used.  Unknown ids are ignored with a warning.
    """
    available = Settings.AVAILABLE_SOURCES
    if platforms:
        wanted = [p.strip().lower() for p in platforms if p.strip()]
        by_id = {s["id"]: s for s in available}
        unknown = [p for p in wanted if p not in by_id]
        if unknown:
            logger.warning(
                "Ignoring unknown platform(s): %s", ", ".join(unknown)
            )
        return [by_id[p] for p in dict.fromkeys(wanted) if p in by_id]
    if region:
        selected = [
            s for s in available
            if s.get("region", "").lower() == region.strip().lower()
        ]
        if not selected:
            logger.warning("No sources registered for region '%s'", region)
        return selected
    return list(available)


class SearchOrchestrator:
    """Coordinates platform fan-out and the comparison pipeline.

    Holds no per-search state, so one instance can serve concurrent
    requests.
    """

    def __init__(self) -> None:
        self.settings = Settings()

    # ── Private helpers ──────────────────────────────────

    async def _run_scrapers(
        self,
        query: str,
        sources: list[dict[str, str]],
        lat: float | None,
        lon: float | None,
    ) -> tuple[list[Product], list[str]]:
        """Dispatch scrapers concurrently and wait for all of them.

        Returns the raw product list and a list of error messages.
        """
        async def run_one(scraper_path: str) -> list[Product]:
            scraper_cls = load_scraper_class(scraper_path)
            scraper = scraper_cls()
            products: list[Product] = await asyncio.to_thread(
                scraper.search, query, lat, lon
            )
            return products

        batches = await asyncio.gather(
            *(run_one(src["scraper"]) for src in sources),
            return_exceptions=True,
        )

        products: list[Product] = []
        errors: list[str] = []
        for src, batch in zip(sources, batches):
            if isinstance(batch, BaseException):
                errors.append(f"{src['id']}: {batch}")
                logger.error(
                    "Scraper %s failed for query '%s': %s",
                    src["id"],
                    query,
                    batch,
                    exc_info=batch,
                )
            else:
                logger.debug(
                    "Scraper %s returned %d products",
                    src["id"],
                    len(batch),
                )
                products.extend(batch)

        return products, errors

    # ── Public API ───────────────────────────────────────

    async def fetch_products(
        self,
        query: str,
        sources: list[dict[str, str]],
        lat: float | None = None,
        lon: float | None = None,
    ) -> list[Product]:
        """Raw, ungrouped products from *sources* (errors are logged)."""
        products, _errors = await self._run_scrapers(
            query, sources, lat, lon
        )
        return products

    def compare(
        self,
        products: list[Product],
        request: SearchRequest,
        source_ids: list[str] | None = None,
    ) -> SearchResponse:
        """Run the synchronous comparison pipeline over raw products.

        Restaurants are collected before filtering so the facet list
        reflects everything the platforms returned.
        """
        response = SearchResponse(
            query=request.term,
            grouped=request.group_by_restaurant,
            total_before_filter=len(products),
        )
        response.all_restaurants = get_all_restaurants(products)

        filters = request.filters
        if source_ids is not None and not filters.platforms:
            filters = replace(filters, platforms=source_ids)
        filtered = ProductFilter.apply_filters(products, filters)
        response.total_after_filter = len(filtered)

        groups = ProductGrouper.group_by_similarity(filtered, request.sort)
        page = paginate_results(groups, request.page, request.per_page)
        response.products = page.products
        response.pagination = page.pagination
        return response

    async def search(self, request: SearchRequest) -> SearchResponse:
        """Fetch from the selected platforms and build the result page."""
        sources = resolve_sources(request.platforms, request.region)
        source_ids = [s["id"] for s in sources]
        logger.info(
            "Search '%s' on %s (sort=%s, page=%d)",
            request.term,
            ", ".join(source_ids) or "no sources",
            request.sort,
            request.page,
        )

        products, errors = await self._run_scrapers(
            request.term, sources, request.lat, request.lon
        )
        response = self.compare(products, request, source_ids)
        response.errors = errors

        logger.info(
            "Search '%s': %d raw, %d after filters, %d groups total",
            request.term,
            response.total_before_filter,
            response.total_after_filter,
            response.pagination.total_products
            if response.pagination else 0,
        )
        return response
