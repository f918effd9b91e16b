# price_sheet/config/settings.py

"""Central configuration for the price_sheet report."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import find_dotenv, load_dotenv

load_dotenv(find_dotenv(usecwd=True))


def _work_dir() -> Path:
    """Directory holding credentials, token and logs.

    ``PRICE_SHEET_HOME`` wins; otherwise the directory the tool is run from.
    """
    return Path(os.getenv("PRICE_SHEET_HOME") or Path.cwd()).resolve()


class Settings:
    """Central configuration for the price_sheet report."""

    # --- Scraping ---
    SEARCH_QUERY: str = os.getenv(
        "SEARCH_QUERY", "モルジュ テントサウナ"
    )
    HEADLESS: bool = os.getenv("HEADLESS", "1") != "0"
    NAVIGATION_TIMEOUT_MS: int = 30000  # Playwright page.goto timeout
    HEALTH_TIMEOUT: int = 10            # Seconds per health-check request

    # --- Filtering ---
    MIN_RATING: float = 4.0             # Inclusive rating threshold

    # --- Google Sheets ---
    GOOGLE_SHEET_ID: str = os.getenv("GOOGLE_SHEET_ID", "")
    SHEET_RANGE: str = "Sheet1!A1"
    SHEETS_SCOPES: list[str] = [
        "https://www.googleapis.com/auth/spreadsheets",
    ]
    HEADER_ROW: list[str] = ["Title", "Price", "Rating", "Link"]

    # --- Browser Impersonation (health check) ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": (
            "text/html,application/xhtml+xml,"
            "application/xml;q=0.9,image/avif,"
            "image/webp,image/apng,*/*;q=0.8"
        ),
        "Accept-Language": "ja-JP,ja;q=0.9,en-US;q=0.8",
    }

    # --- Logging ---
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "WARNING").upper()
    LOG_RETENTION: int = int(os.getenv("LOG_RETENTION", "20"))

    # --- Paths ---
    SELECTORS_PATH: Path = Path(__file__).resolve().parent / "selectors.json"
    WORK_DIR: Path = _work_dir()
    CREDENTIALS_PATH: Path = WORK_DIR / "credentials.json"
    TOKEN_PATH: Path = WORK_DIR / "token.json"
    LOGS_DIR: Path = WORK_DIR / "logs"

    # --- Sources (registry; concatenation follows this order) ---
    AVAILABLE_SOURCES: list[dict[str, str]] = [
        {
            "id": "rakuten",
            "label": "Rakuten",
            "scraper": "price_sheet.scrapers.rakuten_scraper.RakutenScraper",
        },
        {
            "id": "amazon",
            "label": "Amazon",
            "scraper": "price_sheet.scrapers.amazon_scraper.AmazonScraper",
        },
    ]
