"""Catalog entry type definition."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class CatalogEntry:
    """A digital product sold by the store.

    Prices are kept in minor currency units (cents) to match Stripe.
    """

    product_id: str
    name: str
    price_cents: int
    download_url: str

    @property
    def price_display(self) -> Decimal:
        """Price in major units, e.g. Decimal('25.00')."""
        return (Decimal(self.price_cents) / 100).quantize(Decimal("0.01"))
