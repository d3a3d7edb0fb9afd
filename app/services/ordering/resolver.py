"""Candidate deduplication and catalog resolution."""
import datetime
import logging
from typing import Dict, List, Optional, Sequence

from app.services.catalog.index import CatalogIndex, normalize_name
from app.services.ordering.constants import ZONE_WORDS
from app.services.ordering.items import discount_rule
from app.services.ordering.models import ItemCandidate, OrderItem

logger = logging.getLogger(__name__)


def deduplicate(candidates: Sequence[ItemCandidate]) -> List[ItemCandidate]:
    """
    Collapse candidates that share a normalized name.

    A priced candidate replaces an unpriced one in its group; otherwise the
    first seen wins. Groups keep first-seen order.
    """
    groups: Dict[str, ItemCandidate] = {}
    for candidate in candidates:
        key = normalize_name(candidate.name)
        kept = groups.get(key)
        if kept is None:
            groups[key] = candidate
        elif kept.price == 0 and candidate.price != 0:
            logger.debug(
                f"[RESOLVE] {candidate.name!r} from line {candidate.line_index} "
                f"replaces unpriced duplicate from line {kept.line_index}"
            )
            groups[key] = candidate
    return list(groups.values())


def parse_order_date(value: Optional[str]) -> Optional[datetime.date]:
    """ISO order date, or None when missing or malformed."""
    if not value:
        return None
    try:
        return datetime.date.fromisoformat(value)
    except ValueError:
        return None


def resolve(
    candidates: Sequence[ItemCandidate],
    index: CatalogIndex,
    order_date: Optional[str],
) -> List[OrderItem]:
    """
    Deduplicate candidates and attach catalog names and prices.

    Daily and special products only match on their own target date, and never
    when the order has no date. Discounts, priced or not, are kept as they are.
    """
    scoped = index.for_date(parse_order_date(order_date))
    items: List[OrderItem] = []
    for candidate in deduplicate(candidates):
        item = OrderItem(name=candidate.name, quantity=candidate.quantity, price=candidate.price)
        if candidate.price >= 0 and candidate.rule != discount_rule.__name__:
            product = scoped.match(candidate.name)
            if product is not None:
                logger.debug(f"[RESOLVE] {candidate.name!r} -> {product.name!r} ({product.id})")
                item = OrderItem(
                    name=product.name,
                    quantity=candidate.quantity,
                    price=product.price,
                    product_id=product.id,
                )
            else:
                logger.debug(f"[RESOLVE] {candidate.name!r} not in catalog")
        items.append(item)
    return items


def find_delivery_zone(items: Sequence[OrderItem]) -> Optional[str]:
    """Name of the first delivery-tier item, if any."""
    for item in items:
        lowered = item.name.lower()
        if any(word in lowered for word in ZONE_WORDS):
            return item.name
    return None
