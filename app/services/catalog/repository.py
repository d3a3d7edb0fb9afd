"""Catalog repository."""
from typing import List, Optional
from app.services.catalog.base import Catalog, CatalogProduct, CatalogProvider
from app.services.catalog.index import CatalogIndex


class CatalogRepository:
    """Repository for read-only catalog operations."""

    def __init__(self, provider: CatalogProvider):
        self.provider = provider

    async def get_catalog(self) -> Catalog:
        """Get the full catalog."""
        return await self.provider.get_catalog()

    async def get_products(self) -> List[CatalogProduct]:
        """Get all products as a list snapshot."""
        catalog = await self.provider.get_catalog()
        return list(catalog.products)

    async def get_product_by_name(self, name: str) -> Optional[CatalogProduct]:
        """Get product by name."""
        return await self.provider.get_product_by_name(name)

    async def get_index(self) -> CatalogIndex:
        """Get a longest-name-first index over the catalog."""
        return CatalogIndex(await self.get_products())
