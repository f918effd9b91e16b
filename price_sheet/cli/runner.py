# price_sheet/cli/runner.py

"""Headless CLI runner: scrape, filter, sort, write."""

import json
import logging
import sys

from rich.console import Console
from rich.table import Table

from price_sheet.config.settings import Settings
from price_sheet.filters.price_sorter import parse_price
from price_sheet.models.product import Product
from price_sheet.services.report_pipeline import (
    ReportPipeline,
    ReportResult,
)
from price_sheet.storage.credentials import CredentialProvider
from price_sheet.storage.sheet_writer import SheetWriter

logger = logging.getLogger("price_sheet.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def resolve_sources(
    source_csv: str | None,
) -> list[dict[str, str]]:
    """Map a comma-separated list of source IDs to their config dicts.

    Returns all sources when *source_csv* is ``None``.
    Raises ``SystemExit`` on unknown IDs.
    """
    available = {
        s["id"]: s for s in Settings.AVAILABLE_SOURCES
    }
    if source_csv is None:
        return Settings.AVAILABLE_SOURCES

    requested = [
        s.strip() for s in source_csv.split(",") if s.strip()
    ]
    unknown = [r for r in requested if r not in available]
    if unknown:
        valid = ", ".join(sorted(available))
        _err.print(
            f"[red]Unknown source(s): {', '.join(unknown)}[/red]"
        )
        _err.print(f"[dim]Available: {valid}[/dim]")
        raise SystemExit(1)

    return [available[r] for r in requested]


def _products_to_dicts(products: list[Product]) -> list[dict[str, str]]:
    """Serialise a product list to plain dicts for JSON output."""
    return [
        {
            "title": p.title,
            "price": p.price,
            "rating": p.rating,
            "link": p.link,
        }
        for p in products
    ]


def _print_table(products: list[Product]) -> None:
    """Render a Rich table of products to stdout."""
    table = Table(
        title="Report Preview",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    for header in Settings.HEADER_ROW:
        table.add_column(header)

    for idx, p in enumerate(products, 1):
        price = (
            p.price
            if parse_price(p.price) is not None
            else f"[yellow]{p.price}[/yellow]"
        )
        table.add_row(str(idx), p.title[:60], price, p.rating, p.link)

    Console().print(table)


def _print_summary(result: ReportResult) -> None:
    """Report counts and scraper errors on stderr."""
    for error_msg in result.errors:
        _err.print(f"[red]Error: {error_msg}[/red]")
    detail = (
        f" ({result.excluded_count} below rating threshold)"
        if result.excluded_count
        else ""
    )
    _err.print(
        f"[green]✓ {len(result.products)} products"
        f" of {result.total_before_filter}{detail}[/green]"
    )


async def cli_report(
    query: str | None,
    source_csv: str | None,
    min_rating: float | None,
    sheet_id: str | None,
    range_name: str | None,
    dry_run: bool,
    output_format: str,
) -> int:
    """Run one report and return an exit code (0=ok, 1=fail)."""
    sources = resolve_sources(source_csv)
    pipeline = ReportPipeline(
        sources=sources, query=query, min_rating=min_rating
    )

    source_labels = ", ".join(s["label"] for s in sources)
    _err.print(
        f"[bold]Searching:[/bold] {pipeline.query}  "
        f"[dim]sources={source_labels}[/dim]"
    )

    if dry_run:
        result = await pipeline.build_report()
        _print_summary(result)
        if output_format == "table":
            _print_table(result.products)
        else:
            json.dump(
                _products_to_dicts(result.products),
                sys.stdout,
                ensure_ascii=False,
                indent=2,
            )
            sys.stdout.write("\n")
        return 0 if result.products else 1

    writer = SheetWriter(
        CredentialProvider(),
        spreadsheet_id=sheet_id,
        range_name=range_name,
    )
    result, write_result = await pipeline.run(writer)
    _print_summary(result)

    if not write_result.success:
        _err.print(
            f"[red]Sheet update failed: {write_result.error}[/red]"
        )
        return 1

    _err.print(
        f"[green]{write_result.updated_cells} cells updated.[/green]"
    )
    if not result.products:
        _err.print(
            "[yellow]No product met the rating threshold; "
            "only the header row was written.[/yellow]"
        )
    return 0


_HEALTH_STYLES = {
    "ok": "[green]OK[/green]",
    "slow": "[yellow]SLOW[/yellow]",
    "empty": "[red]EMPTY[/red]",
    "down": "[red]DOWN[/red]",
}


async def run_health_check(
    query: str | None = None, source_csv: str | None = None,
) -> int:
    """Check each source's search page and print a summary table.

    Returns 1 when any source is down or shows no product cards.
    """
    from price_sheet.services.health_checker import HealthChecker

    sources = resolve_sources(source_csv)
    _err.print("[bold]Checking source search pages...[/bold]")
    results = await HealthChecker(sources, query).check_all()

    table = Table(
        title="Source Health Check",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Source", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Cards", justify="right")
    table.add_column("Latency", justify="right")
    table.add_column("Notes", style="dim")

    for r in results:
        table.add_row(
            r.source_id,
            _HEALTH_STYLES.get(r.status, r.status),
            str(r.card_count),
            f"{r.latency_ms:.0f}ms" if r.latency_ms > 0 else "-",
            r.message,
        )

    Console().print(table)
    return 1 if any(r.failed for r in results) else 0
