# price_sheet/filters/rating_filter.py

"""Post-scrape filtering by review rating."""

import logging
import re

from price_sheet.models.product import Product

logger = logging.getLogger("price_sheet.filters")

# Leading numeric prefix, e.g. "4.5", " -1", ".5", "4.5stars"
_NUMERIC_PREFIX = re.compile(r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+))")


def parse_rating(text: str | None) -> float:
    """Parse the leading number of a rating string.

    Anything without a numeric prefix (including ``None``) is ``0.0``.
    """
    if not text:
        return 0.0
    match = _NUMERIC_PREFIX.match(text)
    if not match:
        return 0.0
    return float(match.group(1))


class RatingFilter:
    """Keep products whose rating meets a minimum."""

    @staticmethod
    def filter_by_rating(
        products: list[Product],
        threshold: float = 4.0,
    ) -> tuple[list[Product], int]:
        """Drop products rated below *threshold*, preserving order.

        Returns the kept products and the count of excluded products.
        """
        kept: list[Product] = []
        excluded = 0
        for product in products:
            if parse_rating(product.rating) >= threshold:
                kept.append(product)
            else:
                logger.debug(
                    "Dropped '%s' (rating=%r < %.1f)",
                    product.title,
                    product.rating,
                    threshold,
                )
                excluded += 1

        if excluded:
            logger.info(
                "Rating filter dropped %d of %d products",
                excluded,
                len(products),
            )

        return kept, excluded
