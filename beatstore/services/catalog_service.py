"""Static product catalog."""

from beatstore.models.product import CatalogEntry


CATALOG: dict[str, CatalogEntry] = {
    entry.product_id: entry
    for entry in (
        CatalogEntry(
            product_id="drumkit-essential",
            name="DRUMKIT ESSENTIAL",
            price_cents=2500,
            download_url="https://drive.google.com/tu-enlace-drumkit",
        ),
        CatalogEntry(
            product_id="vocal-template",
            name="VOCAL CHAIN TEMPLATE",
            price_cents=1700,
            download_url="https://drive.google.com/tu-enlace-vocal",
        ),
        CatalogEntry(
            product_id="plantillas-fl",
            name="PLANTILLAS FL STUDIO",
            price_cents=2900,
            download_url="https://drive.google.com/tu-enlace-plantillas",
        ),
        CatalogEntry(
            product_id="cumbia-420",
            name="CUMBIA 420 - DRUMKIT",
            price_cents=1800,
            download_url="https://drive.google.com/tu-enlace-cumbia",
        ),
        CatalogEntry(
            product_id="reggaeton-hits",
            name="REGGAETON HITS - DRUMKIT",
            price_cents=2000,
            download_url="https://drive.google.com/tu-enlace-reggaeton",
        ),
        CatalogEntry(
            product_id="trap-essentials",
            name="TRAP ESSENTIALS - PACK",
            price_cents=2200,
            download_url="https://drive.google.com/tu-enlace-trap",
        ),
        CatalogEntry(
            product_id="synthwave-pop",
            name="SYNTHWAVE & POP - PACK",
            price_cents=2500,
            download_url="https://drive.google.com/tu-enlace-synthwave",
        ),
        CatalogEntry(
            product_id="bundle-generos",
            name="BUNDLE DE GÉNEROS",
            price_cents=6500,
            download_url="https://drive.google.com/tu-enlace-bundle-generos",
        ),
        CatalogEntry(
            product_id="bundle-completo",
            name="BUNDLE COMPLETO",
            price_cents=9900,
            download_url="https://drive.google.com/tu-enlace-bundle-completo",
        ),
    )
}


class CatalogService:
    """Read-only access to the product catalog."""

    def __init__(self, catalog: dict[str, CatalogEntry] | None = None) -> None:
        self.catalog = CATALOG if catalog is None else catalog

    def get_product(self, product_id: str | None) -> CatalogEntry | None:
        """Return the catalog entry for product_id, or None."""
        if not product_id:
            return None
        return self.catalog.get(product_id)

    def list_products(self) -> list[CatalogEntry]:
        return list(self.catalog.values())
