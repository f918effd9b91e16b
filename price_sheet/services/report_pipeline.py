# price_sheet/services/report_pipeline.py

"""Runs the scrapers, then filters and sorts their merged output."""

import asyncio
import importlib
import logging
from dataclasses import dataclass, field
from typing import Any

from price_sheet.config.settings import Settings
from price_sheet.filters.price_sorter import PriceSorter
from price_sheet.filters.rating_filter import RatingFilter
from price_sheet.models.product import Product
from price_sheet.storage.sheet_writer import SheetWriter, WriteResult

logger = logging.getLogger("price_sheet.pipeline")


@dataclass
class ReportResult:
    """Filtered, price-ordered products from one run."""

    products: list[Product] = field(
        default_factory=lambda: list[Product]()
    )
    total_before_filter: int = 0
    excluded_count: int = 0
    errors: list[str] = field(
        default_factory=lambda: list[str]()
    )


def _load_scraper_class(dotted_path: str) -> type[Any]:
    """Dynamically import a scraper class from its dotted module path."""
    module_path, class_name = dotted_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls: type[Any] = getattr(module, class_name)
    return cls


def build_report(
    batches: list[list[Product]],
    min_rating: float = Settings.MIN_RATING,
) -> ReportResult:
    """Concatenate per-source batches, filter by rating, sort by price."""
    merged: list[Product] = [p for batch in batches for p in batch]
    result = ReportResult(total_before_filter=len(merged))
    kept, result.excluded_count = RatingFilter.filter_by_rating(
        merged, min_rating
    )
    result.products = PriceSorter.sort_by_price(kept)
    return result


class ReportPipeline:
    """Coordinates scraping, filtering, sorting and the sheet write."""

    def __init__(
        self,
        sources: list[dict[str, str]] | None = None,
        query: str | None = None,
        min_rating: float | None = None,
    ) -> None:
        self.settings = Settings()
        self.sources = (
            sources
            if sources is not None
            else self.settings.AVAILABLE_SOURCES
        )
        self.query = query or self.settings.SEARCH_QUERY
        self.min_rating = (
            min_rating
            if min_rating is not None
            else self.settings.MIN_RATING
        )

    async def collect(self) -> tuple[list[list[Product]], list[str]]:
        """Run every scraper concurrently.

        Returns one batch per source (in registry order) and a list of
        error messages for scrapers that raised.
        """
        async def run_one(src: dict[str, str]) -> list[Product]:
            scraper_cls = _load_scraper_class(src["scraper"])
            scraper = scraper_cls(self.query)
            products: list[Product] = await scraper.search()
            logger.info(
                "%s returned %d products", src["id"], len(products)
            )
            return products

        outcomes = await asyncio.gather(
            *(run_one(src) for src in self.sources),
            return_exceptions=True,
        )

        batches: list[list[Product]] = []
        errors: list[str] = []
        for src, outcome in zip(self.sources, outcomes):
            if isinstance(outcome, BaseException):
                errors.append(f"{src['id']}: {outcome}")
                logger.error(
                    "Scraper %s failed: %s",
                    src["id"],
                    outcome,
                    exc_info=outcome,
                )
                batches.append([])
            else:
                batches.append(outcome)

        return batches, errors

    async def build_report(self) -> ReportResult:
        """Scrape all sources and return the filtered, sorted report."""
        batches, errors = await self.collect()
        result = build_report(batches, self.min_rating)
        result.errors.extend(errors)
        logger.info(
            "Report: %d of %d products kept (min rating %.1f)",
            len(result.products),
            result.total_before_filter,
            self.min_rating,
        )
        return result

    async def run(
        self, writer: SheetWriter,
    ) -> tuple[ReportResult, WriteResult]:
        """Build the report and write it to the sheet."""
        result = await self.build_report()
        write_result: WriteResult = await asyncio.to_thread(
            writer.write, result.products
        )
        return result, write_result
