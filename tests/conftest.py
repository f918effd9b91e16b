# tests/conftest.py

"""Shared pytest fixtures for all tests."""

from collections.abc import Generator
from unittest.mock import MagicMock, patch

import pytest


@pytest.fixture(autouse=True)
def block_browser() -> Generator[MagicMock, None, None]:
    """Fail loudly if a test reaches a real Playwright launch."""
    with patch(
        "price_sheet.scrapers.base_scraper.async_playwright",
        side_effect=RuntimeError("real browser launch in tests"),
    ) as mock_pw:
        yield mock_pw
