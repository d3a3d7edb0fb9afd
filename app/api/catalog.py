"""Catalog API endpoints."""
import logging
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, ConfigDict

from app.core.dependencies import get_catalog_repository
from app.services.catalog.repository import CatalogRepository


router = APIRouter()
logger = logging.getLogger(__name__)


class CatalogProductResponse(BaseModel):
    """Catalog product response model."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    price: int
    product_type: str
    target_date: Optional[date] = None


class CatalogResponse(BaseModel):
    """Catalog response model."""

    products: List[CatalogProductResponse]


@router.get("/api/catalog", response_model=CatalogResponse)
async def get_catalog(
    request: Request,
    catalog_repository: CatalogRepository = Depends(get_catalog_repository),
):
    """Get the product catalog used to resolve order items."""
    logger.info(
        f"[CATALOG] Request received - Client: {request.client.host if request.client else 'unknown'}"
    )

    try:
        products = await catalog_repository.get_products()
        logger.info(f"[CATALOG] Catalog loaded - {len(products)} products")
        return CatalogResponse(
            products=[
                CatalogProductResponse(
                    id=product.id,
                    name=product.name,
                    price=product.price,
                    product_type=str(product.product_type),
                    target_date=product.target_date,
                )
                for product in products
            ]
        )

    except Exception as e:
        logger.error(
            f"[CATALOG] Error fetching catalog - Error: {type(e).__name__}: {str(e)}",
            exc_info=True
        )
        raise HTTPException(status_code=500, detail=f"Error fetching catalog: {str(e)}")
