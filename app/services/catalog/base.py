"""Catalog provider interface."""
from abc import ABC, abstractmethod
from datetime import date
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict


class ProductType(str, Enum):
    """Product types in the product master."""

    REGULAR = "REGULAR"
    DAILY = "DAILY"  # Daily menu, sold on one date only
    SPECIAL = "SPECIAL"  # Special of the day
    LUNCHBOX = "LUNCHBOX"

    def __str__(self) -> str:
        """Return the string value of the type."""
        return self.value


DATE_BOUND_TYPES = (ProductType.DAILY, ProductType.SPECIAL)


class CatalogProduct(BaseModel):
    """Read-only product record."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    price: int = 0
    product_type: ProductType = ProductType.REGULAR
    target_date: Optional[date] = None

    @property
    def is_date_bound(self) -> bool:
        """Whether the product only matches orders on its target date."""
        return self.product_type in DATE_BOUND_TYPES


class Catalog(BaseModel):
    """Catalog snapshot."""

    products: List[CatalogProduct] = []


class CatalogProvider(ABC):
    """Abstract base class for catalog providers."""

    @abstractmethod
    async def get_catalog(self) -> Catalog:
        """Get the full catalog."""
        pass

    @abstractmethod
    async def get_product_by_name(self, name: str) -> Optional[CatalogProduct]:
        """Get a product by its exact name."""
        pass
