# price_sheet/scrapers/rakuten_scraper.py

"""Scraper for Rakuten Ichiba search results."""

from urllib.parse import quote

from price_sheet.scrapers.base_scraper import BaseScraper


class RakutenScraper(BaseScraper):
    """Scraper for search.rakuten.co.jp."""

    def __init__(self, query: str | None = None) -> None:
        super().__init__("rakuten")
        self.query = query or self.settings.SEARCH_QUERY

    def get_search_url(self) -> str:
        """Rakuten puts the keyword in the path."""
        return (
            "https://search.rakuten.co.jp/search/mall/"
            f"{quote(self.query)}/"
        )
