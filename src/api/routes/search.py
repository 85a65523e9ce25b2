# src/api/routes/search.py

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from src.api.dependencies import get_orchestrator
from src.api.schemas import SearchBody
from src.config.settings import Settings
from src.filters.product_filter import SearchFilters
from src.services.search_orchestrator import SearchOrchestrator, SearchRequest

logger = logging.getLogger("food_finder.api.search")
router = APIRouter()


@router.post("/search")
async def search(
    body: SearchBody,
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    """Search every selected platform and return one comparison page."""
    term = (body.term or "").strip()
    if not term:
        raise HTTPException(status_code=400, detail="Search term is required")

    request = SearchRequest(
        term=term,
        lat=body.lat,
        lon=body.lon,
        sort=body.sort,
        page=body.page,
        per_page=Settings.RESULTS_PER_PAGE,
        filters=SearchFilters(
            price_min=body.price_min,
            price_max=body.price_max,
            time_min=body.time_min,
            time_max=body.time_max,
            restaurant_filter=body.restaurant_filter,
        ),
        platforms=body.platforms,
        region=body.region,
        group_by_restaurant=body.group_by_restaurant,
    )
    response = await orchestrator.search(request)
    if response.errors:
        logger.warning(
            "Search '%s' completed with adapter errors: %s",
            term,
            "; ".join(response.errors),
        )
    return response.to_dict()
