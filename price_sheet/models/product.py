# price_sheet/models/product.py

"""Product record passed from the scrapers to the sheet writer."""

from dataclasses import dataclass

NO_TITLE = "No Title"
NO_PRICE = "No Price"
NO_RATING = "0"
NO_LINK = "No Link"


@dataclass(frozen=True)
class Product:
    """A single search-result listing, as scraped.

    All fields keep the source's raw text. Numeric views of ``price`` and
    ``rating`` are derived by the filters and never stored here.
    """

    title: str = NO_TITLE
    price: str = NO_PRICE
    rating: str = NO_RATING
    link: str = NO_LINK

    def to_row(self) -> list[str]:
        """Return the sheet row ``[title, price, rating, link]``."""
        return [self.title, self.price, self.rating, self.link]
