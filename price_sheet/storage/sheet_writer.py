# price_sheet/storage/sheet_writer.py

"""Writes the sorted report into a Google Sheet."""

import logging
from dataclasses import dataclass
from typing import Any

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from price_sheet.config.settings import Settings
from price_sheet.models.product import Product
from price_sheet.storage.credentials import CredentialProvider

logger = logging.getLogger("price_sheet.storage")


@dataclass
class WriteResult:
    """Outcome of a single sheet update."""

    success: bool
    updated_cells: int = 0
    error: str = ""


class SheetWriter:
    """Overwrites a sheet range with a header row plus one row per product."""

    def __init__(
        self,
        credential_provider: CredentialProvider,
        spreadsheet_id: str | None = None,
        range_name: str | None = None,
    ) -> None:
        self.credential_provider = credential_provider
        self.spreadsheet_id = (
            spreadsheet_id
            if spreadsheet_id is not None
            else Settings.GOOGLE_SHEET_ID
        )
        self.range_name = range_name or Settings.SHEET_RANGE

    @staticmethod
    def build_values(products: list[Product]) -> list[list[str]]:
        """Header row followed by each product's raw fields."""
        return [
            list(Settings.HEADER_ROW),
            *(p.to_row() for p in products),
        ]

    def _build_service(self) -> Any:
        """Create a Sheets v4 client; credential failures propagate."""
        creds = self.credential_provider.get_credentials()
        return build(
            "sheets", "v4", credentials=creds, cache_discovery=False
        )

    def write(self, products: list[Product]) -> WriteResult:
        """Send one ``values.update`` request. Never retries."""
        if not self.spreadsheet_id:
            msg = "No spreadsheet id configured (GOOGLE_SHEET_ID)"
            logger.error(msg)
            return WriteResult(success=False, error=msg)

        service = self._build_service()
        values = self.build_values(products)

        try:
            response: dict[str, Any] = (
                service.spreadsheets()
                .values()
                .update(
                    spreadsheetId=self.spreadsheet_id,
                    range=self.range_name,
                    valueInputOption="RAW",
                    body={"values": values},
                )
                .execute()
            )
        except HttpError as exc:
            logger.error(
                "Sheet update rejected (HTTP %s): %s",
                exc.resp.status,
                exc,
                exc_info=True,
            )
            return WriteResult(success=False, error=str(exc))
        except Exception as exc:
            logger.error(
                "Sheet update failed: %s", exc, exc_info=True
            )
            return WriteResult(success=False, error=str(exc))

        updated = int(response.get("updatedCells", 0))
        logger.info(
            "%d cells updated in %s", updated, self.range_name
        )
        return WriteResult(success=True, updated_cells=updated)
