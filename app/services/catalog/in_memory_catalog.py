"""In-memory catalog provider."""
import logging
import yaml
from pathlib import Path
from typing import Optional
from app.services.catalog.base import Catalog, CatalogProduct, CatalogProvider, ProductType

logger = logging.getLogger(__name__)


class InMemoryCatalogProvider(CatalogProvider):
    """In-memory catalog provider using YAML configuration."""

    def __init__(self, catalog_file: Optional[str] = None):
        """Initialize with optional catalog file path."""
        if catalog_file is None:
            catalog_file = Path(__file__).parent / "data" / "catalog.yaml"
        self.catalog_file = Path(catalog_file)
        self._catalog: Optional[Catalog] = None

    async def _load_catalog(self) -> Catalog:
        """Load catalog from YAML file."""
        if self._catalog is None:
            if not self.catalog_file.exists():
                logger.warning(
                    f"[CATALOG] {self.catalog_file} not found, using built-in sample catalog"
                )
                # Default catalog if file doesn't exist
                self._catalog = Catalog(
                    products=[
                        CatalogProduct(id="p-001", name="시금치나물", price=4000),
                        CatalogProduct(id="p-002", name="모듬전", price=14900),
                        CatalogProduct(
                            id="p-003",
                            name="D zone",
                            price=6600,
                            product_type=ProductType.REGULAR,
                        ),
                    ]
                )
            else:
                with open(self.catalog_file, "r", encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
                    products = [
                        CatalogProduct(**product) for product in data.get("products", [])
                    ]
                    self._catalog = Catalog(products=products)
                logger.info(
                    f"[CATALOG] Loaded {len(self._catalog.products)} products from {self.catalog_file}"
                )
        return self._catalog

    async def get_catalog(self) -> Catalog:
        """Get the full catalog."""
        return await self._load_catalog()

    async def get_product_by_name(self, name: str) -> Optional[CatalogProduct]:
        """Get a product by name."""
        catalog = await self._load_catalog()
        name_lower = name.lower().strip()
        for product in catalog.products:
            if product.name.lower() == name_lower:
                return product
        return None
