# src/ui/app.py

"""Terminal UI for browsing cross-platform food comparisons."""

import logging
import webbrowser
from typing import cast

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import (
    Button,
    Checkbox,
    DataTable,
    Footer,
    Header,
    Input,
    Static,
)

from src.config.settings import Settings
from src.filters.grouping import SORT_DISTANCE, SORT_PRICE
from src.models.comparison import ComparisonGroup
from src.models.product import Product
from src.services.search_orchestrator import (
    SearchOrchestrator,
    SearchRequest,
    SearchResponse,
)

logger = logging.getLogger("food_finder.ui")


class FoodFinderApp(App[object]):
    """Search once, then re-sort and page locally without refetching."""

    CSS = """
    #search_bar { height: auto; }
    #search_input { width: 1fr; }
    #source_toggles { height: auto; }
    #status { height: 1; margin: 0 1; }
    #results_table { height: 1fr; }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("p", "sort_price", "Price Sort"),
        Binding("d", "sort_distance", "ETA Sort"),
        Binding("n", "next_page", "Next Page"),
        Binding("b", "prev_page", "Prev Page"),
    ]

    def __init__(self, orchestrator: SearchOrchestrator | None = None) -> None:
        super().__init__()
        self.settings = Settings()
        self.orchestrator = orchestrator or SearchOrchestrator()
        self.products: list[Product] = []
        self.source_ids: list[str] = []
        self.request: SearchRequest | None = None
        self.response: SearchResponse | None = None

    def compose(self) -> ComposeResult:
        """Build the widget tree for the TUI."""
        source_checkboxes = [
            Checkbox(src["label"], value=True, id=f"check_{src['id']}")
            for src in self.settings.AVAILABLE_SOURCES
        ]

        yield Header()
        yield Container(
            Static("🍔 Food Finder", id="title"),
            Horizontal(
                Input(placeholder="Search food...", id="search_input"),
                Button("Search", variant="primary", id="search_btn"),
                id="search_bar",
            ),
            Horizontal(*source_checkboxes, id="source_toggles"),
            Static("Ready", id="status"),
            cast(
                DataTable[str | Text],
                DataTable(
                    id="results_table",
                    zebra_stripes=True,
                    cursor_type="row",
                ),
            ),
            id="main_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        self._table().add_columns(
            "Product", "Restaurant", "Lowest", "Offers", "ETA"
        )

    def _table(self) -> DataTable[str | Text]:
        return cast(
            DataTable[str | Text],
            self.query_one("#results_table", DataTable),
        )

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "search_btn":
            await self.perform_search()

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "search_input":
            await self.perform_search()

    def selected_sources(self) -> list[dict[str, str]]:
        return [
            src
            for src in self.settings.AVAILABLE_SOURCES
            if self.query_one(f"#check_{src['id']}", Checkbox).value
        ]

    async def perform_search(self) -> None:
        """Fetch from the checked platforms and show page one."""
        query = self.query_one("#search_input", Input).value.strip()
        if not query:
            self.notify("Please enter a search term", severity="warning")
            return

        sources = self.selected_sources()
        if not sources:
            self.notify("Select at least one source!", severity="error")
            return

        self.source_ids = [s["id"] for s in sources]
        self.request = SearchRequest(
            term=query, platforms=list(self.source_ids)
        )
        self._table().clear()
        status = self.query_one("#status", Static)
        status.update(f"🔍 Searching '{query}'...")

        self.products = await self.orchestrator.fetch_products(
            query, sources
        )
        self.refresh_results()

        if self.response is None or not self.response.products:
            status.update("❌ No products found")

    def refresh_results(self) -> None:
        """Re-run the comparison pipeline on the fetched products."""
        if self.request is None:
            return
        self.response = self.orchestrator.compare(
            self.products, self.request, self.source_ids
        )
        self.populate_table()

        pagination = self.response.pagination
        if pagination is not None and pagination.total_products:
            self.query_one("#status", Static).update(
                f"✅ {pagination.total_products} products, page "
                f"{pagination.current_page}/{pagination.total_pages} "
                f"(sort: {self.request.sort})"
            )

    def populate_table(self) -> None:
        table = self._table()
        table.clear()
        if self.response is None:
            return
        for group in self.response.products:
            table.add_row(
                group.product_name[:50],
                group.restaurant_name[:30],
                Text(
                    _price(group.lowest_price),
                    style="bold green" if group.has_comparison else "",
                ),
                ", ".join(
                    f"{v.source} {_price(v.price)}" for v in group.variants
                ),
                group.variants[0].restaurant_eta if group.variants else "",
            )

    def current_groups(self) -> list[ComparisonGroup]:
        return self.response.products if self.response else []

    def on_data_table_row_selected(
        self, event: DataTable.RowSelected
    ) -> None:
        """Open the cheapest offer of the selected product."""
        groups = self.current_groups()
        if 0 <= event.cursor_row < len(groups):
            variants = groups[event.cursor_row].variants
            if variants and variants[0].product_url:
                webbrowser.open(variants[0].product_url)

    def _resort(self, sort_by: str) -> None:
        if self.request is None:
            return
        self.request.sort = sort_by
        self.request.page = 1
        self.refresh_results()

    def action_sort_price(self) -> None:
        self._resort(SORT_PRICE)

    def action_sort_distance(self) -> None:
        self._resort(SORT_DISTANCE)

    def action_next_page(self) -> None:
        if (
            self.request is None
            or self.response is None
            or self.response.pagination is None
            or not self.response.pagination.has_next
        ):
            return
        self.request.page += 1
        self.refresh_results()

    def action_prev_page(self) -> None:
        if self.request is None or self.request.page <= 1:
            return
        self.request.page -= 1
        self.refresh_results()


def _price(price: float | None) -> str:
    return f"{price:,.2f}" if price is not None else "N/A"
