# tests/test_settings.py

"""Tests for the Settings configuration class."""

import importlib
import unittest
from pathlib import Path

from src.config.settings import Settings


class TestSettings(unittest.TestCase):
    """Verify Settings constants and source registry."""

    def test_request_delay_is_positive_float(self) -> None:
        """REQUEST_DELAY must be a positive number."""
        self.assertIsInstance(Settings.REQUEST_DELAY, float)
        self.assertGreater(Settings.REQUEST_DELAY, 0)

    def test_request_timeout_is_positive_int(self) -> None:
        self.assertIsInstance(Settings.REQUEST_TIMEOUT, int)
        self.assertGreater(Settings.REQUEST_TIMEOUT, 0)

    def test_max_retries_is_positive(self) -> None:
        self.assertGreaterEqual(Settings.MAX_RETRIES, 1)

    def test_circuit_breaker_threshold_positive(self) -> None:
        self.assertGreaterEqual(Settings.CIRCUIT_BREAKER_THRESHOLD, 1)
        self.assertGreater(Settings.CIRCUIT_BREAKER_COOLDOWN, 0)

    def test_comparison_defaults(self) -> None:
        self.assertEqual(Settings.RESULTS_PER_PAGE, 12)
        self.assertEqual(Settings.DEFAULT_ETA_MINUTES, 30)
        self.assertEqual(Settings.UNKNOWN_ETA_SORT_VALUE, 999)
        self.assertEqual(Settings.DEFAULT_SORT, "price")

    def test_conversation_limits(self) -> None:
        self.assertGreater(Settings.SESSION_TTL, 0)
        self.assertLessEqual(
            Settings.CONTEXT_MESSAGES, Settings.HISTORY_LIMIT
        )

    def test_logs_dir_is_path(self) -> None:
        self.assertIsInstance(Settings.LOGS_DIR, Path)
        self.assertEqual(Settings.LOGS_DIR.name, "logs")

    def test_available_sources_registry(self) -> None:
        """Every source has the keys the orchestrator relies on."""
        ids = [s["id"] for s in Settings.AVAILABLE_SOURCES]
        self.assertEqual(ids, ["tgoyemek", "yemeksepeti"])
        for source in Settings.AVAILABLE_SOURCES:
            with self.subTest(source=source["id"]):
                self.assertEqual(
                    set(source), {"id", "label", "scraper", "region"}
                )
                self.assertTrue(source["scraper"].startswith("src."))

    def test_scraper_paths_importable(self) -> None:
        for source in Settings.AVAILABLE_SOURCES:
            module_path, class_name = source["scraper"].rsplit(".", 1)
            with self.subTest(source=source["id"]):
                module = importlib.import_module(module_path)
                self.assertTrue(hasattr(module, class_name))


if __name__ == "__main__":
    unittest.main()
