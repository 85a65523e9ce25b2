# main.py

"""Entry point for food_finder (TUI, headless CLI or HTTP server)."""

import argparse
import asyncio
import logging
import sys

from src.config.logging_config import setup_logging
from src.config.settings import Settings

logger = logging.getLogger("food_finder.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    valid_ids = ", ".join(s["id"] for s in Settings.AVAILABLE_SOURCES)

    parser = argparse.ArgumentParser(
        prog="food_finder",
        description="Cross-platform food delivery price comparison.",
        epilog=f"Available sources: {valid_ids}",
    )
    parser.add_argument(
        "query",
        nargs="?",
        default=None,
        help="Search term. Omit to launch the interactive TUI.",
    )
    parser.add_argument(
        "-s",
        "--sources",
        default=None,
        help="Comma-separated source IDs (default: all).",
    )
    parser.add_argument(
        "--region",
        default=None,
        help="Query every source registered for a region (e.g. tr).",
    )
    parser.add_argument(
        "--sort",
        default=Settings.DEFAULT_SORT,
        help="'price' (default), 'distance', or anything else for "
        "platform count only.",
    )
    parser.add_argument("-p", "--page", type=int, default=1)
    parser.add_argument("--lat", type=float, default=None)
    parser.add_argument("--lon", type=float, default=None)
    parser.add_argument("--price-min", type=float, default=None)
    parser.add_argument("--price-max", type=float, default=None)
    parser.add_argument(
        "--time-min", type=int, default=None, help="Minimum ETA (minutes)."
    )
    parser.add_argument(
        "--time-max", type=int, default=None, help="Maximum ETA (minutes)."
    )
    parser.add_argument(
        "-r",
        "--restaurant",
        default="",
        help="Case-insensitive restaurant name substring.",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        default=False,
        help="Run the HTTP API server.",
    )
    parser.add_argument(
        "--host", default=Settings.API_HOST, help="API bind address."
    )
    parser.add_argument(
        "--port", type=int, default=Settings.API_PORT, help="API port."
    )
    parser.add_argument(
        "--health",
        action="store_true",
        default=False,
        help="Run a connectivity health check on all sources.",
    )
    return parser


def _run_tui() -> None:
    """Launch the interactive Textual TUI."""
    from src.ui.app import FoodFinderApp

    try:
        FoodFinderApp().run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("food_finder TUI shutting down")


def _run_cli(args: argparse.Namespace) -> None:
    """Run headless CLI search and exit."""
    from src.cli.runner import cli_search, parse_sources
    from src.filters.product_filter import SearchFilters
    from src.services.search_orchestrator import SearchRequest

    request = SearchRequest(
        term=args.query,
        lat=args.lat,
        lon=args.lon,
        sort=args.sort,
        page=args.page,
        filters=SearchFilters(
            price_min=args.price_min,
            price_max=args.price_max,
            time_min=args.time_min,
            time_max=args.time_max,
            restaurant_filter=args.restaurant,
        ),
        platforms=parse_sources(args.sources),
        region=args.region,
    )
    exit_code = asyncio.run(cli_search(request, args.output_format))
    sys.exit(exit_code)


def _run_server(args: argparse.Namespace) -> None:
    """Serve the HTTP API with uvicorn."""
    import uvicorn

    logger.info("Serving HTTP API on %s:%d", args.host, args.port)
    uvicorn.run(
        "src.api.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
    )


def _run_health_check() -> None:
    """Run platform connectivity health check."""
    from src.cli.runner import run_health_check

    exit_code = asyncio.run(run_health_check())
    sys.exit(exit_code)


def main() -> None:
    """Route to TUI (no args), HTTP server, health check or CLI search."""
    log_file = setup_logging()
    logger.info("food_finder starting, log file: %s", log_file)

    parser = _build_parser()
    args = parser.parse_args()

    if args.serve:
        _run_server(args)
    elif args.health:
        _run_health_check()
    elif args.query is None:
        _run_tui()
    else:
        _run_cli(args)


if __name__ == "__main__":
    main()
