# price_sheet/services/health_checker.py

"""Pre-flight check that each source still serves parsable results.

A full report launches Chromium per source; this check instead issues one
browser-impersonating GET against the same search URL and runs the
source's card selector over the raw HTML. Both search pages are rendered
server side, so a zero card count means a bot wall or selector drift
rather than a slow page.
"""

import asyncio
import logging
import time
from dataclasses import dataclass

from curl_cffi import requests as curl_requests

from price_sheet.config.settings import Settings
from price_sheet.scrapers.base_scraper import BaseScraper
from price_sheet.services.report_pipeline import _load_scraper_class

logger = logging.getLogger("price_sheet.health")

SLOW_MS = 5000

# Statuses that make `--health` exit non-zero.
FAILING_STATUSES = frozenset({"down", "empty"})


@dataclass
class HealthResult:
    """Outcome of checking one source's search page."""

    source_id: str
    status: str  # "ok", "slow", "empty", "down"
    latency_ms: float = 0.0
    card_count: int = 0
    message: str = ""

    @property
    def failed(self) -> bool:
        return self.status in FAILING_STATUSES


def classify(
    status_code: int, card_count: int, latency_ms: float,
) -> tuple[str, str]:
    """Status and note for a completed search-page request."""
    if status_code != 200:
        return "down", f"HTTP {status_code}"
    if card_count == 0:
        return "empty", "No product cards matched"
    if latency_ms > SLOW_MS:
        return "slow", "High latency"
    return "ok", ""


def check_source(
    source: dict[str, str], query: str | None = None,
) -> HealthResult:
    """Fetch one source's search page and count its product cards."""
    source_id = source["id"]
    try:
        scraper: BaseScraper = _load_scraper_class(source["scraper"])(query)
        url = scraper.get_search_url()
    except Exception as exc:
        return HealthResult(
            source_id, "down", message=f"Failed to load scraper: {exc}"
        )

    start = time.monotonic()
    try:
        with curl_requests.Session(
            impersonate=Settings.IMPERSONATE_BROWSER
        ) as session:
            resp = session.get(
                url,
                headers=Settings.DEFAULT_HEADERS,
                timeout=Settings.HEALTH_TIMEOUT,
            )
    except Exception as exc:
        return HealthResult(
            source_id,
            "down",
            latency_ms=(time.monotonic() - start) * 1000,
            message=str(exc)[:80],
        )
    latency_ms = (time.monotonic() - start) * 1000

    cards = (
        len(scraper.parse_items(resp.text, url))
        if resp.status_code == 200
        else 0
    )
    status, message = classify(resp.status_code, cards, latency_ms)
    return HealthResult(source_id, status, latency_ms, cards, message)


class HealthChecker:
    """Checks every configured source concurrently."""

    def __init__(
        self,
        sources: list[dict[str, str]] | None = None,
        query: str | None = None,
    ) -> None:
        self.sources = (
            sources if sources is not None else Settings.AVAILABLE_SOURCES
        )
        self.query = query

    async def check_all(self) -> list[HealthResult]:
        """One result per source, in registry order."""
        results: list[HealthResult] = list(
            await asyncio.gather(
                *(
                    asyncio.to_thread(check_source, src, self.query)
                    for src in self.sources
                )
            )
        )
        for r in results:
            log = logger.warning if r.failed else logger.info
            log(
                "Health %s: %s, %d cards (%.0fms) %s",
                r.source_id,
                r.status,
                r.card_count,
                r.latency_ms,
                r.message,
            )
        return results
