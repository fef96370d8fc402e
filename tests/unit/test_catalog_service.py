"""Unit tests for CatalogService."""

from decimal import Decimal

from beatstore.models.product import CatalogEntry
from beatstore.services.catalog_service import CATALOG, CatalogService


class TestCatalog:
    """Tests for the static catalog."""

    def test_has_all_products(self) -> None:
        """Test that the nine products are listed with positive prices."""
        assert len(CATALOG) == 9
        assert all(entry.price_cents > 0 for entry in CATALOG.values())

    def test_keys_match_product_ids(self) -> None:
        """Test that catalog keys are the entries' own ids."""
        assert all(key == entry.product_id for key, entry in CATALOG.items())

    def test_price_display(self) -> None:
        """Test conversion from minor to major units."""
        assert CATALOG["bundle-completo"].price_display == Decimal("99.00")
        assert CATALOG["vocal-template"].price_display == Decimal("17.00")


class TestCatalogService:
    """Tests for CatalogService lookups."""

    def test_get_product(self) -> None:
        """Test lookup of a known product."""
        product = CatalogService().get_product("trap-essentials")

        assert product is not None
        assert product.name == "TRAP ESSENTIALS - PACK"
        assert product.price_cents == 2200

    def test_unknown_and_empty_ids(self) -> None:
        """Test that unknown or empty ids return None."""
        service = CatalogService()

        assert service.get_product("nope") is None
        assert service.get_product("") is None
        assert service.get_product(None) is None

    def test_custom_catalog(self) -> None:
        """Test that a catalog can be injected."""
        entry = CatalogEntry("demo", "DEMO", 100, "https://example.com/demo")
        service = CatalogService({"demo": entry})

        assert service.get_product("demo") is entry
        assert service.get_product("drumkit-essential") is None
        assert service.list_products() == [entry]
