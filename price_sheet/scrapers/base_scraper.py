# price_sheet/scrapers/base_scraper.py

"""Abstract base class for the search-result page scrapers.

Pages are rendered by a headless Chromium (Playwright) and the resulting
HTML is queried with BeautifulSoup. Each subclass only supplies its search
URL and any per-field clean-up; selectors come from
``selectors.json``.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag
from playwright.async_api import async_playwright

from price_sheet.config.settings import Settings
from price_sheet.models.product import (
    NO_LINK,
    NO_PRICE,
    NO_RATING,
    NO_TITLE,
    Product,
)


class BaseScraper(ABC):
    """Abstract base class for all search-result scrapers."""

    def __init__(self, source_name: str) -> None:
        self.source_name = source_name
        self.logger = logging.getLogger(
            f"price_sheet.{source_name}"
        )
        self.settings = Settings()
        self.selectors: dict[str, str] = self._load_selectors()
        self._navigation_timeout: int = (
            self.settings.NAVIGATION_TIMEOUT_MS
        )

    def _load_selectors(self) -> dict[str, str]:
        """Load CSS selectors for this source from selectors.json."""
        with open(self.settings.SELECTORS_PATH, encoding="utf-8") as f:
            all_selectors: dict[str, Any] = json.load(f)
        result: dict[str, str] = all_selectors.get(
            self.source_name, {}
        )
        return result

    # ── Field lookups (never raise) ──────────────────────

    def _select(self, item: Tag, field: str) -> Tag | None:
        """Return the first element matching the field's selector."""
        selector = self.selectors.get(field, "")
        if not selector:
            return None
        try:
            return item.select_one(selector)
        except Exception as exc:
            self.logger.debug(
                "[%s] Selector '%s' failed: %s",
                self.source_name,
                selector,
                exc,
            )
            return None

    def _select_text(self, item: Tag, field: str) -> str | None:
        """Text of the field's element, or ``None`` when absent.

        Nested inline nodes are joined as rendered ('1,500<span>円</span>'
        reads '1,500円'); only the outer whitespace is trimmed.
        """
        el = self._select(item, field)
        if el is None:
            return None
        return el.get_text().strip()

    def _select_href(
        self, item: Tag, field: str, base_url: str,
    ) -> str | None:
        """Absolute ``href`` of the field's element, or ``None``."""
        el = self._select(item, field)
        if el is None:
            return None
        href = el.get("href")
        if not href or not isinstance(href, str):
            return None
        return urljoin(base_url, href)

    def _clean_rating(self, text: str) -> str:
        """Hook for sources whose rating text needs trimming."""
        return text

    # ── Extraction ───────────────────────────────────────

    def extract(
        self, item: Tag, base_url: str | None = None,
    ) -> Product:
        """Map one product card to a Product, using sentinels for gaps."""
        base = base_url or self.get_search_url()
        title = self._select_text(item, "title")
        price = self._select_text(item, "price")
        rating = self._select_text(item, "rating")
        link = self._select_href(item, "link", base)

        return Product(
            title=title if title is not None else NO_TITLE,
            price=price if price is not None else NO_PRICE,
            rating=(
                self._clean_rating(rating)
                if rating is not None
                else NO_RATING
            ),
            link=link if link is not None else NO_LINK,
        )

    def parse_items(
        self, html: str, base_url: str | None = None,
    ) -> list[Product]:
        """Extract every product card on a rendered results page."""
        soup = BeautifulSoup(html, "lxml")
        selector = self.selectors.get("product_card", "")
        if not selector:
            self.logger.warning(
                "[%s] No product_card selector configured",
                self.source_name,
            )
            return []
        cards = soup.select(selector)
        self.logger.info(
            "[%s] Found %d product cards",
            self.source_name,
            len(cards),
        )
        return [self.extract(card, base_url) for card in cards]

    # ── Browser ──────────────────────────────────────────

    async def _fetch_html(self, url: str) -> tuple[str, str] | None:
        """Render *url* in a fresh headless browser.

        Returns the page HTML and the final page URL, or ``None`` when
        navigation fails. The browser is always closed.
        """
        try:
            async with async_playwright() as pw:
                browser = await pw.chromium.launch(
                    headless=self.settings.HEADLESS,
                )
                try:
                    page = await browser.new_page()
                    await page.goto(
                        url, timeout=self._navigation_timeout,
                    )
                    html = await page.content()
                    return html, page.url
                finally:
                    await browser.close()
        except Exception as exc:
            self.logger.error(
                "[%s] Navigation to %s failed: %s",
                self.source_name,
                url,
                exc,
                exc_info=True,
            )
            return None

    async def search(self) -> list[Product]:
        """Render the search page and extract its products."""
        url = self.get_search_url()
        self.logger.info("[%s] Fetching %s", self.source_name, url)
        fetched = await self._fetch_html(url)
        if fetched is None:
            return []
        html, final_url = fetched
        try:
            return self.parse_items(html, final_url)
        except Exception as exc:
            self.logger.error(
                "[%s] Parsing failed: %s",
                self.source_name,
                exc,
                exc_info=True,
            )
            return []

    @abstractmethod
    def get_search_url(self) -> str:
        """Return the search-results URL for the configured query."""
        ...
