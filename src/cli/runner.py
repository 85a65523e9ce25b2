# src/cli/runner.py

"""Headless CLI search runner built on the async orchestrator."""

import json
import logging
import sys

from rich.console import Console
from rich.table import Table

from src.config.settings import Settings
from src.models.comparison import ComparisonGroup
from src.services.search_orchestrator import (
    SearchOrchestrator,
    SearchRequest,
    SearchResponse,
)

logger = logging.getLogger("food_finder.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def parse_sources(source_csv: str | None) -> list[str] | None:
    """Validate a comma-separated list of platform ids.

    Returns ``None`` (every platform) when *source_csv* is ``None``.
    Raises ``SystemExit`` on unknown ids.
    """
    if source_csv is None:
        return None

    available = {s["id"] for s in Settings.AVAILABLE_SOURCES}
    requested = [
        s.strip().lower() for s in source_csv.split(",") if s.strip()
    ]
    unknown = [r for r in requested if r not in available]
    if unknown:
        _err.print(
            f"[red]Unknown source(s): {', '.join(unknown)}[/red]"
        )
        _err.print(f"[dim]Available: {', '.join(sorted(available))}[/dim]")
        raise SystemExit(1)
    return requested


def _format_price(price: float | None) -> str:
    return f"{price:,.2f}" if price is not None else "N/A"


def _print_table(response: SearchResponse) -> None:
    """Render one page of comparison groups to stdout."""
    pagination = response.pagination
    title = "Comparison Results"
    if pagination is not None:
        title += (
            f" (page {pagination.current_page}/{pagination.total_pages},"
            f" {pagination.total_products} products)"
        )
    table = Table(title=title, show_lines=True, title_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("Product", max_width=40)
    table.add_column("Restaurant", max_width=30)
    table.add_column("Lowest", justify="right", style="green")
    table.add_column("Offers")
    table.add_column("ETA", justify="right")

    offset = 0
    if pagination is not None:
        offset = (pagination.current_page - 1) * pagination.per_page

    for idx, group in enumerate(response.products, offset + 1):
        table.add_row(
            str(idx),
            group.product_name[:40] or "—",
            group.restaurant_name[:30],
            _format_price(group.lowest_price),
            _offers_cell(group),
            _eta_cell(group),
        )

    Console().print(table)


def _eta_cell(group: ComparisonGroup) -> str:
    if not group.variants:
        return "—"
    return group.variants[0].restaurant_eta or "—"


def _offers_cell(group: ComparisonGroup) -> str:
    lines = []
    for v in group.variants:
        line = f"{v.source}: {_format_price(v.price)}"
        if v.is_lowest and group.has_comparison:
            line = f"[bold green]{line} ★[/bold green]"
        lines.append(line)
    return "\n".join(lines)


async def cli_search(
    request: SearchRequest,
    output_format: str = "table",
) -> int:
    """Run a headless search and return an exit code (0=ok, 1=fail)."""
    orchestrator = SearchOrchestrator()

    _err.print(
        f"[bold]Searching:[/bold] {request.term}  "
        f"[dim]sort={request.sort} page={request.page}[/dim]"
    )

    response = await orchestrator.search(request)

    for error_msg in response.errors:
        _err.print(f"[red]Error: {error_msg}[/red]")

    if not response.products:
        _err.print("[yellow]No products found.[/yellow]")
        return 1

    compared = sum(1 for g in response.products if g.has_comparison)
    _err.print(
        f"[green]✓ {response.total_after_filter} products"
        f" of {response.total_before_filter}"
        f" ({compared} on this page offered by several platforms)"
        "[/green]"
    )

    if output_format == "table":
        _print_table(response)
    else:
        json.dump(
            response.to_dict(),
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")

    return 0


async def run_health_check() -> int:
    """Run connectivity health check on all sources."""
    from src.services.health_checker import HealthChecker

    _err.print("[bold]Running platform health check...[/bold]")
    checker = HealthChecker()
    results = await checker.check_all()

    table = Table(
        title="Platform Health Check",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Source", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Latency", justify="right")
    table.add_column("Notes", style="dim")

    any_down = False
    for r in results:
        if r.status == "ok":
            status = "[green]✅ OK[/green]"
        elif r.status == "slow":
            status = "[yellow]⚠️  SLOW[/yellow]"
        else:
            status = "[red]❌ DOWN[/red]"
            any_down = True

        latency = f"{r.latency_ms:.0f}ms" if r.latency_ms > 0 else "—"
        table.add_row(r.source_id, status, latency, r.message)

    Console().print(table)
    return 1 if any_down else 0
