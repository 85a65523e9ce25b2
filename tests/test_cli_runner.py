# tests/test_cli_runner.py

"""Tests for the headless CLI runner."""

import asyncio
import io
import json
import unittest
from unittest.mock import AsyncMock, MagicMock, patch

from src.cli.runner import cli_search, parse_sources, run_health_check
from src.models.comparison import ComparisonGroup, Pagination, Variant
from src.services.health_checker import HealthResult
from src.services.search_orchestrator import SearchRequest, SearchResponse


def _response(with_products: bool = True) -> SearchResponse:
    products = []
    if with_products:
        products = [
            ComparisonGroup(
                product_name="Lahmacun",
                restaurant_name="Halil Usta",
                variants=[
                    Variant(
                        source="tgoyemek",
                        price=95.0,
                        restaurant_eta="20-30dk",
                        is_lowest=True,
                    ),
                    Variant(source="yemeksepeti", price=110.0),
                ],
                lowest_price=95.0,
            )
        ]
    return SearchResponse(
        query="lahmacun",
        products=products,
        pagination=Pagination(1, 12, len(products), 1, False, False),
        all_restaurants=["Halil Usta"],
        total_before_filter=2,
        total_after_filter=2,
        errors=["yemeksepeti: timeout"],
    )


class TestParseSources(unittest.TestCase):
    """parse_sources validation."""

    def test_none_means_all(self) -> None:
        self.assertIsNone(parse_sources(None))

    def test_normalises_ids(self) -> None:
        self.assertEqual(
            parse_sources(" TGOYEMEK, yemeksepeti ,"),
            ["tgoyemek", "yemeksepeti"],
        )

    def test_unknown_exits(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            parse_sources("tgoyemek,getir")
        self.assertEqual(ctx.exception.code, 1)


@patch("src.cli.runner.SearchOrchestrator")
class TestCliSearch(unittest.TestCase):
    """cli_search output and exit codes."""

    def _run(
        self, mock_cls: MagicMock, response: SearchResponse, fmt: str,
    ) -> tuple[int, str]:
        mock_cls.return_value.search = AsyncMock(return_value=response)
        with patch("sys.stdout", new_callable=io.StringIO) as out:
            code = asyncio.run(
                cli_search(SearchRequest(term="lahmacun"), fmt)
            )
        return code, out.getvalue()

    def test_json_output(self, mock_cls: MagicMock) -> None:
        code, out = self._run(mock_cls, _response(), "json")
        self.assertEqual(code, 0)
        data = json.loads(out)
        self.assertEqual(data["all_restaurants"], ["Halil Usta"])
        self.assertEqual(data["products"][0]["lowest_price"], 95.0)

    def test_table_output(self, mock_cls: MagicMock) -> None:
        code, out = self._run(mock_cls, _response(), "table")
        self.assertEqual(code, 0)
        self.assertIn("Lahmacun", out)
        self.assertIn("Halil Usta", out)

    def test_no_products_exit_code(self, mock_cls: MagicMock) -> None:
        code, out = self._run(mock_cls, _response(False), "json")
        self.assertEqual(code, 1)
        self.assertEqual(out, "")


class TestRunHealthCheck(unittest.TestCase):
    """run_health_check exit codes."""

    @patch("src.services.health_checker.HealthChecker.check_all")
    def test_all_ok(self, mock_check: AsyncMock) -> None:
        mock_check.return_value = [
            HealthResult("tgoyemek", "ok", 120.0, ""),
            HealthResult("yemeksepeti", "slow", 6200.0, "High latency"),
        ]
        with patch("sys.stdout", new_callable=io.StringIO):
            self.assertEqual(asyncio.run(run_health_check()), 0)

    @patch("src.services.health_checker.HealthChecker.check_all")
    def test_any_down(self, mock_check: AsyncMock) -> None:
        mock_check.return_value = [
            HealthResult("tgoyemek", "down", 0.0, "HTTP 503"),
        ]
        with patch("sys.stdout", new_callable=io.StringIO):
            self.assertEqual(asyncio.run(run_health_check()), 1)


if __name__ == "__main__":
    unittest.main()
