"""Order text parsing service."""
import logging
from typing import Iterable, List, Optional, Sequence

from app.services.catalog.base import CatalogProduct
from app.services.catalog.index import CatalogIndex
from app.services.ordering.amounts import reconcile
from app.services.ordering.classifier import classify, detect_layout
from app.services.ordering.constants import CHANNEL_KEYWORDS
from app.services.ordering.fields import extractors_for
from app.services.ordering.items import ItemExtractor, default_rules
from app.services.ordering.lines import split_lines
from app.services.ordering.models import (
    Channel,
    FieldValues,
    FulfillmentKind,
    ParsedOrder,
    RawLine,
)
from app.services.ordering.resolver import find_delivery_zone, parse_order_date, resolve
from app.services.ordering.validator import OrderValidator

logger = logging.getLogger(__name__)


def detect_channel(raw_text: str) -> Channel:
    """Source channel named in the text."""
    for channel, keywords in CHANNEL_KEYWORDS:
        if any(keyword in raw_text for keyword in keywords):
            return Channel(channel)
    return Channel.TEXT


class OrderTextParser:
    """
    Turns pasted reservation text or an email body into a ParsedOrder.

    Stateless between calls: each parse builds its own claims and
    accumulators, so one instance can serve concurrent callers.
    """

    def __init__(self, status_words: Optional[Sequence[str]] = None):
        self.status_words = status_words
        self.validator = OrderValidator()

    def parse(
        self, raw_text: Optional[str], catalog: Iterable[CatalogProduct]
    ) -> ParsedOrder:
        """
        Parse order text against a read-only catalog snapshot.

        Args:
            raw_text: Copy-pasted confirmation screen or email body
            catalog: Products to resolve item names against

        Returns:
            ParsedOrder; missing fields stay unset, items may be empty
        """
        raw_text = raw_text or ""
        lines = split_lines(raw_text)
        index = catalog if isinstance(catalog, CatalogIndex) else CatalogIndex(catalog)

        layout = detect_layout(lines)
        classified = classify(lines, layout)
        claimed = classified.claimed
        logger.debug(f"[PARSE] {len(lines)} lines, {layout} layout, {len(index)} catalog products")

        values = FieldValues()
        for extractor in extractors_for(layout):
            values, claimed = extractor.extract(lines, classified.tags, claimed, values)

        # Catalog names are matched against the products sold on the order date
        scoped = index.for_date(parse_order_date(values.scheduled_date))
        item_extractor = ItemExtractor(rules=default_rules(self.status_words, catalog=scoped))
        candidates, claimed = item_extractor.extract(lines, claimed, classified.tags)
        candidates.extend(
            item_extractor.extract_from_summary(
                values.payment_amount_text, values.payment_amount_line
            )
        )

        items = resolve(candidates, index, values.scheduled_date)
        amounts = reconcile(items, values.delivery_fee, values.payment_amount_text)
        delivery_zone = find_delivery_zone(items)

        fulfillment_kind = values.fulfillment_kind
        if fulfillment_kind is None:
            fulfillment_kind = FulfillmentKind.DELIVERY if delivery_zone else FulfillmentKind.PICKUP

        order = ParsedOrder(
            customer_name=values.customer_name,
            contact=values.contact,
            fulfillment_kind=fulfillment_kind,
            address=values.address,
            scheduled_date=values.scheduled_date,
            scheduled_time=values.scheduled_time,
            visitor=values.visitor,
            request_note=values.request_note,
            payment_status=values.payment_status,
            reservation_number=values.reservation_number,
            channel=detect_channel(raw_text),
            delivery_zone=delivery_zone,
            delivery_fee=amounts.delivery_fee,
            discount_value=amounts.discount_value,
            items=items,
            derived_total=amounts.derived_total,
            vendor_total=amounts.vendor_total,
            memo=_leftover_memo(lines, claimed),
            claimed_lines=dict(sorted(claimed.owners.items())),
        )
        order.warnings = self.validator.review(order)

        logger.debug(
            f"[PARSE] Parsed {len(order.items)} items, derived total {order.derived_total}, "
            f"vendor total {order.vendor_total}, {len(order.warnings)} warnings"
        )
        return order


def _leftover_memo(lines: Sequence[RawLine], claimed) -> Optional[str]:
    """Lines no rule claimed, kept for the reviewer."""
    leftover: List[str] = [line.text for line in lines if line.index not in claimed]
    return "\n".join(leftover) or None


_default_parser = OrderTextParser()


def parse(raw_text: Optional[str], catalog: Iterable[CatalogProduct]) -> ParsedOrder:
    """Parse order text with the default rules."""
    return _default_parser.parse(raw_text, catalog)
