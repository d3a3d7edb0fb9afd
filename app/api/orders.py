"""Order text parsing API endpoints."""
import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from app.core.dependencies import get_catalog_repository, get_order_text_parser
from app.services.catalog.repository import CatalogRepository
from app.services.ordering.models import ParsedOrder
from app.services.ordering.parser import OrderTextParser


router = APIRouter()
logger = logging.getLogger(__name__)


class ParseOrderRequest(BaseModel):
    """Parse request body."""

    text: str


@router.post("/api/orders/parse", response_model=ParsedOrder)
async def parse_order(
    request: Request,
    body: ParseOrderRequest,
    catalog_repository: CatalogRepository = Depends(get_catalog_repository),
    parser: OrderTextParser = Depends(get_order_text_parser),
):
    """Parse pasted order text into a structured order."""
    logger.info(
        f"[ORDERS PARSE] Request received - {len(body.text)} chars, "
        f"Client: {request.client.host if request.client else 'unknown'}"
    )

    if not body.text.strip():
        logger.warning("[ORDERS PARSE] Rejected empty order text")
        raise HTTPException(status_code=400, detail="Order text is required")

    try:
        index = await catalog_repository.get_index()
        order = parser.parse(body.text, index)
        logger.info(
            f"[ORDERS PARSE] Parsed order - {len(order.items)} items, "
            f"derived total: {order.derived_total}, vendor total: {order.vendor_total}, "
            f"warnings: {len(order.warnings)}"
        )
        return order

    except Exception as e:
        logger.error(
            f"[ORDERS PARSE] Error parsing order text - Error: {type(e).__name__}: {str(e)}",
            exc_info=True
        )
        raise HTTPException(status_code=500, detail=f"Error parsing order text: {str(e)}")
