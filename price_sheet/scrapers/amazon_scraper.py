# price_sheet/scrapers/amazon_scraper.py

"""Scraper for amazon.co.jp search results."""

from urllib.parse import quote_plus

from price_sheet.scrapers.base_scraper import BaseScraper


class AmazonScraper(BaseScraper):
    """Scraper for amazon.co.jp."""

    def __init__(self, query: str | None = None) -> None:
        super().__init__("amazon")
        self.query = query or self.settings.SEARCH_QUERY

    def get_search_url(self) -> str:
        """Return the ``/s?k=`` search URL for the query."""
        return f"https://www.amazon.co.jp/s?k={quote_plus(self.query)}"

    def _clean_rating(self, text: str) -> str:
        """Keep the leading token of e.g. '4.5 out of 5 stars'."""
        return text.split(" ")[0]
