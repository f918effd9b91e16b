# price_sheet/filters/price_sorter.py

"""Ascending price ordering for scraped products."""

import logging
import re

from price_sheet.models.product import Product

logger = logging.getLogger("price_sheet.filters")

_NON_DIGITS = re.compile(r"[^0-9]")


def parse_price(text: str | None) -> int | None:
    """Strip everything but ASCII digits and parse the rest.

    '¥1,500' -> 1500. Returns ``None`` when no digits remain
    (e.g. the 'No Price' sentinel) or when the digit run is longer than
    the interpreter will convert.
    """
    if not text:
        return None
    digits = _NON_DIGITS.sub("", text)
    if not digits:
        return None
    try:
        return int(digits, 10)
    except ValueError:
        logger.debug("Price with %d digits not parsed", len(digits))
        return None


def _sort_key(product: Product) -> float:
    """Unparseable prices sort last."""
    price = parse_price(product.price)
    return float("inf") if price is None else price


class PriceSorter:
    """Order products by numeric price."""

    @staticmethod
    def sort_by_price(products: list[Product]) -> list[Product]:
        """Return a new list sorted cheapest first."""
        unpriced = sum(
            1 for p in products if parse_price(p.price) is None
        )
        if unpriced:
            logger.info(
                "%d products without a parseable price sorted last",
                unpriced,
            )
        return sorted(products, key=_sort_key)
