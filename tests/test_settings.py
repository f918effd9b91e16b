# tests/test_settings.py

"""Tests for the Settings configuration class."""

import importlib
import json
import os
import unittest
from pathlib import Path
from unittest.mock import patch

from price_sheet.config import settings as settings_module
from price_sheet.config.settings import Settings


class TestSettings(unittest.TestCase):
    """Verify Settings constants and source registry."""

    def test_min_rating_is_four(self) -> None:
        """The default rating threshold is 4.0."""
        self.assertEqual(Settings.MIN_RATING, 4.0)

    def test_navigation_timeout_positive(self) -> None:
        """NAVIGATION_TIMEOUT_MS must be a positive integer."""
        self.assertIsInstance(Settings.NAVIGATION_TIMEOUT_MS, int)
        self.assertGreater(Settings.NAVIGATION_TIMEOUT_MS, 0)

    def test_header_row(self) -> None:
        """The sheet header is Title, Price, Rating, Link."""
        self.assertEqual(
            Settings.HEADER_ROW, ["Title", "Price", "Rating", "Link"]
        )

    def test_sheet_range(self) -> None:
        """Writes start at Sheet1!A1."""
        self.assertEqual(Settings.SHEET_RANGE, "Sheet1!A1")

    def test_scopes_include_spreadsheets(self) -> None:
        """The OAuth scope grants spreadsheet access."""
        self.assertIn(
            "https://www.googleapis.com/auth/spreadsheets",
            Settings.SHEETS_SCOPES,
        )

    def test_sources_in_merge_order(self) -> None:
        """Rakuten is registered before Amazon."""
        self.assertEqual(
            [s["id"] for s in Settings.AVAILABLE_SOURCES],
            ["rakuten", "amazon"],
        )

    def test_each_source_has_required_keys(self) -> None:
        """Every source must have id, label, and scraper keys."""
        for src in Settings.AVAILABLE_SOURCES:
            with self.subTest(src=src.get("id", "?")):
                self.assertIn("id", src)
                self.assertIn("label", src)
                self.assertIn("scraper", src)

    def test_scraper_paths_importable(self) -> None:
        """Every registered scraper path resolves to a class."""
        for src in Settings.AVAILABLE_SOURCES:
            with self.subTest(src=src["id"]):
                module_path, class_name = src["scraper"].rsplit(".", 1)
                module = importlib.import_module(module_path)
                self.assertTrue(hasattr(module, class_name))

    def test_path_constants_are_paths(self) -> None:
        """Path-typed settings are Path instances."""
        for value in (
            Settings.WORK_DIR,
            Settings.SELECTORS_PATH,
            Settings.CREDENTIALS_PATH,
            Settings.TOKEN_PATH,
            Settings.LOGS_DIR,
        ):
            self.assertIsInstance(value, Path)

    def test_selectors_cover_every_source(self) -> None:
        """selectors.json has all five selectors for each source."""
        with open(Settings.SELECTORS_PATH, encoding="utf-8") as f:
            selectors = json.load(f)
        for src in Settings.AVAILABLE_SOURCES:
            with self.subTest(src=src["id"]):
                self.assertEqual(
                    set(selectors[src["id"]]),
                    {"product_card", "title", "price", "rating", "link"},
                )

    def test_default_query_not_empty(self) -> None:
        """There is always a query to search for."""
        self.assertTrue(Settings.SEARCH_QUERY)

    def test_default_log_level_is_warning(self) -> None:
        """The console only shows warnings unless LOG_LEVEL says otherwise."""
        if "LOG_LEVEL" not in os.environ:
            self.assertEqual(Settings.LOG_LEVEL, "WARNING")
        self.assertGreater(Settings.LOG_RETENTION, 0)


class TestSettingsPaths(unittest.TestCase):
    """Where configuration and run artefacts live on disk."""

    def test_selectors_ship_beside_settings(self) -> None:
        """selectors.json is read from the installed package."""
        self.assertEqual(
            Settings.SELECTORS_PATH,
            Path(settings_module.__file__).resolve().parent
            / "selectors.json",
        )
        self.assertTrue(Settings.SELECTORS_PATH.is_file())

    def test_work_dir_defaults_to_cwd(self) -> None:
        """Without PRICE_SHEET_HOME the current directory is used."""
        with patch.dict(os.environ, {"PRICE_SHEET_HOME": ""}):
            self.assertEqual(
                settings_module._work_dir(), Path.cwd().resolve()
            )

    def test_work_dir_from_env(self) -> None:
        """PRICE_SHEET_HOME overrides the working directory."""
        with patch.dict(os.environ, {"PRICE_SHEET_HOME": "/srv/report"}):
            self.assertEqual(
                settings_module._work_dir(), Path("/srv/report").resolve()
            )

    def test_user_files_not_inside_package(self) -> None:
        """Credentials, token and logs sit under WORK_DIR, not the package."""
        package_dir = Settings.SELECTORS_PATH.parent.parent
        for path in (
            Settings.CREDENTIALS_PATH,
            Settings.TOKEN_PATH,
            Settings.LOGS_DIR,
        ):
            with self.subTest(path=path.name):
                self.assertEqual(path.parent, Settings.WORK_DIR)
                self.assertFalse(path.is_relative_to(package_dir))


if __name__ == "__main__":
    unittest.main()
