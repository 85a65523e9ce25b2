# src/config/settings.py

"""Central configuration for the food_finder service."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the food_finder service."""

    # --- Scraping ---
    REQUEST_DELAY: float = 0.5          # Base backoff between retries
    REQUEST_TIMEOUT: int = 15           # Seconds before a request times out
    MENU_REQUEST_TIMEOUT: int = 10      # Per-restaurant menu fetch
    MAX_RETRIES: int = 2                # Retry count on transient failures
    MAX_RESTAURANTS: int = 5            # Menus fetched per tgoyemek search

    # --- Resilience ---
    CIRCUIT_BREAKER_THRESHOLD: int = 3  # Consecutive failures to trip
    CIRCUIT_BREAKER_COOLDOWN: float = 60.0
    MAX_DELAY_MULTIPLIER: int = 8       # Cap for adaptive backoff

    # --- Comparison engine ---
    RESULTS_PER_PAGE: int = 12
    DEFAULT_ETA_MINUTES: int = 30       # Platforms report 30 when unknown
    UNKNOWN_ETA_SORT_VALUE: int = 999
    DEFAULT_SORT: str = "price"

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json",
        "Accept-Language": "en-US,en;q=0.9",
        "User-Agent": (
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
            "AppleWebKit/537.36"
        ),
    }

    # --- Platform credentials ---
    TGOYEMEK_AUTH_TOKEN: str = os.getenv("TGOYEMEK_AUTH_TOKEN", "")

    # --- AI providers ---
    CHAT_PROVIDER: str = os.getenv("CHAT_PROVIDER", "groq")
    TTS_PROVIDER: str = os.getenv("TTS_PROVIDER", "elevenlabs")
    TRANSCRIPTION_PROVIDER: str = os.getenv(
        "TRANSCRIPTION_PROVIDER", "openai"
    )
    GROQ_API_KEY: str = os.getenv("GROQ_API_KEY", "")
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    ELEVENLABS_API_KEY: str = os.getenv("ELEVENLABS_API_KEY", "")
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    PROVIDER_TIMEOUT: int = 15
    GROQ_CHAT_MODEL: str = "llama-3.3-70b-versatile"
    OPENAI_CHAT_MODEL: str = "gpt-4o-mini"
    FAST_CHAT_MODEL: str = "llama-3.1-8b-instant"  # keyword extraction
    CHAT_MAX_TOKENS: int = 150

    # --- Conversations ---
    SESSION_TTL: float = 3600.0         # Idle seconds before eviction
    HISTORY_LIMIT: int = 20             # Messages kept per session
    CONTEXT_MESSAGES: int = 10          # History sent to the model

    # --- HTTP server ---
    API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
    API_PORT: int = int(os.getenv("PORT", "3000"))

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    LOGS_DIR: Path = BASE_DIR / "logs"

    # --- Sources (platform adapter registry) ---
    AVAILABLE_SOURCES: list[dict[str, str]] = [
        {
            "id": "tgoyemek",
            "label": "Trendyol Go Yemek",
            "scraper": "src.scrapers.tgoyemek_scraper.TgoyemekScraper",
            "region": "tr",
        },
        {
            "id": "yemeksepeti",
            "label": "Yemeksepeti",
            "scraper": (
                "src.scrapers.yemeksepeti_scraper.YemeksepetiScraper"
            ),
            "region": "tr",
        },
    ]
