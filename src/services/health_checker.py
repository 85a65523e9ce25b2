# src/services/health_checker.py

"""Platform reachability probes for ``main.py --health``."""

import asyncio
import logging
import time
from dataclasses import dataclass

from src.config.settings import Settings
from src.services.search_orchestrator import load_scraper_class

logger = logging.getLogger("food_finder.health")

_HEALTH_TIMEOUT = 10  # seconds per source
_SLOW_MS = 5000


@dataclass
class HealthResult:
    """Result of a single source health check."""

    source_id: str
    status: str  # "ok", "slow", "down"
    latency_ms: float
    message: str


def probe_source(source: dict[str, str]) -> HealthResult:
    """GET the platform homepage through the adapter's own session."""
    source_id = source["id"]

    try:
        scraper = load_scraper_class(source["scraper"])()
    except Exception as exc:
        return HealthResult(
            source_id=source_id,
            status="down",
            latency_ms=0.0,
            message=f"Failed to load adapter: {exc}",
        )

    start = time.monotonic()
    try:
        resp = scraper.session.get(
            scraper._get_homepage(),
            headers=scraper.settings.DEFAULT_HEADERS,
            timeout=_HEALTH_TIMEOUT,
        )
    except Exception as exc:
        return HealthResult(
            source_id=source_id,
            status="down",
            latency_ms=(time.monotonic() - start) * 1000,
            message=str(exc)[:80],
        )

    elapsed_ms = (time.monotonic() - start) * 1000
    if resp.status_code >= 400:
        status, message = "down", f"HTTP {resp.status_code}"
    elif elapsed_ms > _SLOW_MS:
        status, message = "slow", "High latency"
    else:
        status, message = "ok", ""
    return HealthResult(
        source_id=source_id,
        status=status,
        latency_ms=elapsed_ms,
        message=message,
    )


class HealthChecker:
    """Runs concurrent health probes against registered sources."""

    def __init__(self, sources: list[dict[str, str]] | None = None) -> None:
        self.sources = (
            Settings.AVAILABLE_SOURCES if sources is None else sources
        )

    async def check_all(self) -> list[HealthResult]:
        results: list[HealthResult] = list(
            await asyncio.gather(
                *(asyncio.to_thread(probe_source, s) for s in self.sources)
            )
        )
        for r in results:
            logger.info(
                "Health check %s: %s (%.0fms) %s",
                r.source_id,
                r.status,
                r.latency_ms,
                r.message,
            )
        return results
