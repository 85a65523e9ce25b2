# src/scrapers/base_scraper.py

"""Abstract base class for all delivery-platform adapters."""

import logging
import re
import time
from abc import ABC, abstractmethod
from typing import Any

from curl_cffi import requests as curl_requests

from src.config.settings import Settings
from src.models.product import DEFAULT_ETA_MINUTES, Product


class BasePlatformScraper(ABC):
    """Shared HTTP plumbing for platform adapters.

    Subclasses implement :meth:`search`, which must never raise: any
    failure is logged and reported as an empty product list.
    """

    DEFAULT_LAT: float = 0.0
    DEFAULT_LON: float = 0.0

    # Cloudflare challenge page markers
    _CF_CHALLENGE_MARKERS: list[str] = [
        "challenges.cloudflare.com",
        "cdn-cgi/challenge-platform",
        "just a moment",
        "cf-turnstile",
    ]

    def __init__(self, source_name: str) -> None:
        self.source_name = source_name
        self.logger = logging.getLogger(
            f"food_finder.{source_name}"
        )
        self.settings = Settings()
        self.session = self._new_session()
        self._current_delay: float = self.settings.REQUEST_DELAY
        self._consecutive_failures: int = 0
        self._circuit_open: bool = False
        self._circuit_opened_at: float = 0.0
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT

    def _new_session(self) -> curl_requests.Session:
        """Open a browser-impersonating session for this platform."""
        return curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )

    def _coords(
        self, lat: float | None, lon: float | None,
    ) -> tuple[float, float]:
        """Fill missing coordinates with the platform's home location."""
        return (
            self.DEFAULT_LAT if lat is None else lat,
            self.DEFAULT_LON if lon is None else lon,
        )

    def _validate_response(
        self, resp: curl_requests.Response,
    ) -> bool:
        """Reject challenge pages served in place of the JSON API."""
        text = resp.text
        if text.lstrip().startswith(("{", "[")):
            return True
        lower = text.lower()
        for marker in self._CF_CHALLENGE_MARKERS:
            if marker in lower:
                self.logger.warning(
                    "[%s] Cloudflare challenge detected "
                    "(marker: '%s')",
                    self.source_name,
                    marker,
                )
                return False
        self.logger.warning(
            "[%s] Non-JSON response body (%d bytes)",
            self.source_name,
            len(text),
        )
        return False

    def _check_circuit(self) -> bool:
        """Return True if the circuit breaker blocks this request.

        After CIRCUIT_BREAKER_COOLDOWN seconds the breaker enters
        a half-open state, allowing a single probe request through.
        """
        if not self._circuit_open:
            return False
        elapsed = time.time() - self._circuit_opened_at
        if elapsed >= self.settings.CIRCUIT_BREAKER_COOLDOWN:
            self.logger.info(
                "[%s] Circuit breaker half-open after %.0fs",
                self.source_name,
                elapsed,
            )
            self._circuit_open = False
            return False
        return True

    def _record_success(self) -> None:
        """Reset failure counters after a successful fetch."""
        self._consecutive_failures = 0
        self._circuit_open = False
        self._circuit_opened_at = 0.0
        self._current_delay = self.settings.REQUEST_DELAY

    def _record_failure(self) -> None:
        """Track failure and open circuit breaker if needed."""
        self._consecutive_failures += 1
        if (
            self._consecutive_failures
            >= self.settings.CIRCUIT_BREAKER_THRESHOLD
        ):
            self._circuit_open = True
            self._circuit_opened_at = time.time()
            self.logger.error(
                "[%s] Circuit breaker opened after %d "
                "consecutive failures",
                self.source_name,
                self._consecutive_failures,
            )

    def _escalate_delay(self) -> None:
        """Double the current delay up to the configured max."""
        max_delay = (
            self.settings.REQUEST_DELAY
            * self.settings.MAX_DELAY_MULTIPLIER
        )
        self._current_delay = min(self._current_delay * 2, max_delay)
        self.logger.warning(
            "[%s] Rate-limited, delay escalated to %.1fs",
            self.source_name,
            self._current_delay,
        )

    def _request(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        *,
        params: dict[str, Any] | None = None,
        payload: dict[str, Any] | None = None,
        timeout: int | None = None,
        session: curl_requests.Session | None = None,
    ) -> curl_requests.Response | None:
        """Send a request with retries, adaptive delay and circuit breaker.

        *session* overrides the adapter's own session for callers that
        fan out across threads.  Returns ``None`` once all attempts are
        exhausted.
        """
        session = session or self.session
        if self._check_circuit():
            return None
        for attempt in range(self.settings.MAX_RETRIES):
            try:
                resp = session.request(
                    method,
                    url,
                    headers=headers,
                    params=params,
                    json=payload,
                    timeout=timeout or self._request_timeout,
                )
                if resp.status_code == 200:
                    if not self._validate_response(resp):
                        self._escalate_delay()
                        time.sleep(self._current_delay)
                        continue
                    self._record_success()
                    return resp
                self.logger.warning(
                    "[%s] HTTP %d on attempt %d",
                    self.source_name,
                    resp.status_code,
                    attempt + 1,
                )
                if resp.status_code in (429, 403):
                    self._escalate_delay()
                    time.sleep(self._current_delay)
            except Exception as exc:
                self.logger.warning(
                    "[%s] Request error on attempt %d: %s",
                    self.source_name,
                    attempt + 1,
                    exc,
                    exc_info=True,
                )
                time.sleep(self._current_delay * (attempt + 1))
        self._record_failure()
        return None

    def _fetch_get(
        self,
        url: str,
        headers: dict[str, str],
        params: dict[str, Any] | None = None,
        timeout: int | None = None,
        session: curl_requests.Session | None = None,
    ) -> curl_requests.Response | None:
        """GET with the shared resilience policy."""
        return self._request(
            "GET", url, headers,
            params=params, timeout=timeout, session=session,
        )

    def _fetch_post(
        self,
        url: str,
        headers: dict[str, str],
        payload: dict[str, Any],
    ) -> curl_requests.Response | None:
        """POST a JSON body with the shared resilience policy."""
        return self._request("POST", url, headers, payload=payload)

    @staticmethod
    def parse_eta_minutes(text: Any) -> int:
        """Leading integer of an ETA label like ``'30-40dk'``.

        Falls back to the platform default of 30 minutes.
        """
        match = re.match(r"\s*(\d+)", str(text or ""))
        if not match:
            return DEFAULT_ETA_MINUTES
        return int(match.group(1)) or DEFAULT_ETA_MINUTES

    @abstractmethod
    def _get_homepage(self) -> str:
        """Return the platform homepage, used for Referer and probes."""
        ...

    @abstractmethod
    def search(
        self,
        query: str,
        lat: float | None = None,
        lon: float | None = None,
    ) -> list[Product]:
        """Search the platform and return matching products."""
        ...
