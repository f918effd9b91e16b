# main.py

"""Entry point for the price_sheet report (headless CLI)."""

import argparse
import asyncio
import logging
import sys

from price_sheet.config.logging_config import setup_logging
from price_sheet.config.settings import Settings

logger = logging.getLogger("price_sheet.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    valid_ids = ", ".join(s["id"] for s in Settings.AVAILABLE_SOURCES)

    parser = argparse.ArgumentParser(
        prog="price_sheet",
        description=(
            "Scrape search results, keep well-rated products and write "
            "them, cheapest first, to a Google Sheet."
        ),
        epilog=f"Available sources: {valid_ids}",
    )
    parser.add_argument(
        "query",
        nargs="?",
        default=None,
        help=f"Search query (default: {Settings.SEARCH_QUERY}).",
    )
    parser.add_argument(
        "-s",
        "--sources",
        default=None,
        help="Comma-separated source IDs (default: all).",
    )
    parser.add_argument(
        "-r",
        "--min-rating",
        type=float,
        default=None,
        dest="min_rating",
        help=f"Minimum rating to keep (default: {Settings.MIN_RATING}).",
    )
    parser.add_argument(
        "--sheet-id",
        default=None,
        dest="sheet_id",
        help="Destination spreadsheet id (default: $GOOGLE_SHEET_ID).",
    )
    parser.add_argument(
        "--range",
        default=None,
        dest="range_name",
        help=f"Destination A1 range (default: {Settings.SHEET_RANGE}).",
    )
    parser.add_argument(
        "-n",
        "--dry-run",
        action="store_true",
        default=False,
        dest="dry_run",
        help="Print the report instead of writing the sheet.",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Dry-run output format (default: json).",
    )
    parser.add_argument(
        "--health",
        action="store_true",
        default=False,
        help="Check each source's search page for product cards.",
    )
    return parser


def _run_report(args: argparse.Namespace) -> None:
    """Run the scrape-and-write report and exit."""
    from price_sheet.cli.runner import cli_report

    try:
        exit_code = asyncio.run(
            cli_report(
                query=args.query,
                source_csv=args.sources,
                min_rating=args.min_rating,
                sheet_id=args.sheet_id,
                range_name=args.range_name,
                dry_run=args.dry_run,
                output_format=args.output_format,
            )
        )
    except Exception:
        logger.critical("Fatal error during report run", exc_info=True)
        raise
    finally:
        logger.info("price_sheet shutting down")
    sys.exit(exit_code)


def _run_health_check(args: argparse.Namespace) -> None:
    """Check each source's search page and exit."""
    from price_sheet.cli.runner import run_health_check

    exit_code = asyncio.run(
        run_health_check(query=args.query, source_csv=args.sources)
    )
    sys.exit(exit_code)


def main() -> None:
    """Route to the health check or the report run."""
    log_file = setup_logging()
    logger.info("price_sheet starting, log file: %s", log_file)

    parser = _build_parser()
    args = parser.parse_args()

    if args.health:
        _run_health_check(args)
    else:
        _run_report(args)


if __name__ == "__main__":
    main()
