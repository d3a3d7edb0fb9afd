"""Unit tests for catalog provider and repository."""
import pytest
from datetime import date

from app.services.catalog.base import ProductType
from app.services.catalog.repository import CatalogRepository
from app.services.catalog.in_memory_catalog import InMemoryCatalogProvider


class TestCatalogService:
    """Test catalog repository and provider."""

    @pytest.mark.asyncio
    async def test_load_catalog_from_yaml(self, test_catalog_repository):
        """Test loading catalog from YAML file."""
        catalog = await test_catalog_repository.get_catalog()

        assert len(catalog.products) == 5
        assert catalog.products[0].name == "시금치나물"
        assert catalog.products[0].price == 4000
        assert catalog.products[3].product_type == ProductType.SPECIAL
        assert catalog.products[3].target_date == date(2026, 1, 30)

    @pytest.mark.asyncio
    async def test_get_products_is_a_copy(self, test_catalog_repository):
        """Test the product list can be changed without touching the catalog."""
        products = await test_catalog_repository.get_products()
        products.clear()

        assert len(await test_catalog_repository.get_products()) == 5

    @pytest.mark.asyncio
    async def test_get_product_by_name_case_insensitive(self, test_catalog_repository):
        """Test lookup by exact name ignores case."""
        product = await test_catalog_repository.get_product_by_name("SPINACH NAMUL")

        assert product is not None
        assert product.id == "p-003"
        assert await test_catalog_repository.get_product_by_name("kimchi") is None

    @pytest.mark.asyncio
    async def test_get_index(self, test_catalog_repository):
        """Test the repository builds a matching index."""
        index = await test_catalog_repository.get_index()

        assert len(index) == 5
        assert index.match("시금치나물 2팩").id == "p-001"

    @pytest.mark.asyncio
    async def test_catalog_is_cached(self, test_catalog_repository):
        """Test the YAML file is read once per provider."""
        first = await test_catalog_repository.get_catalog()
        second = await test_catalog_repository.get_catalog()

        assert first is second

    @pytest.mark.asyncio
    async def test_missing_file_uses_sample(self, tmp_path):
        """Test a missing catalog file falls back to the built-in sample."""
        provider = InMemoryCatalogProvider(catalog_file=str(tmp_path / "missing.yaml"))
        catalog = await CatalogRepository(provider).get_catalog()

        assert [p.name for p in catalog.products] == ["시금치나물", "모듬전", "D zone"]

    @pytest.mark.asyncio
    async def test_bundled_catalog_loads(self):
        """Test the packaged catalog file parses."""
        catalog = await InMemoryCatalogProvider().get_catalog()

        assert len(catalog.products) > 0
        assert all(p.target_date is not None for p in catalog.products if p.is_date_bound)
