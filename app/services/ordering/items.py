"""Item line recognition."""
import logging
import re
from typing import Callable, List, Optional, Sequence, Tuple
from pydantic import BaseModel

from app.services.catalog.index import CatalogIndex, normalize_name
from app.services.ordering.constants import (
    COUPON_KEYWORDS,
    DEFAULT_STATUS_WORDS,
    DISCOUNT_KEYWORDS,
    MAX_BARE_QUANTITY,
    MAX_QUANTITY,
    PRODUCT_LABELS,
)
from app.services.ordering.lines import (
    find_amount,
    find_price,
    match_anchor,
    parse_price_line,
    to_int,
)
from app.services.ordering.models import ClaimedSet, ItemCandidate, RawLine, SectionTag

logger = logging.getLogger(__name__)

_ZONE = re.compile(r"^([0-9A-Za-z]{1,3})\s*(zone|구역)(?![A-Za-z])(.*)$", re.IGNORECASE)
# Greedy name so the quantity is the last "(digits)" group: "핫바 (2p)(1)4,900원"
_PARENTHESIZED = re.compile(r"^(.+)\((\d+)\)\s*([^()]*)$")
_BARE_QUANTITY = re.compile(r"^(.+?)\s+(\d+)\s*(?:개|팩|박스|ea|box)?$", re.IGNORECASE)
_NAME_SAFE = re.compile(r"^[\w\s()\[\]&/'.,+*-]+$")
_LETTER = re.compile(r"[^\W\d_]")
_WON_TOKEN = re.compile(r"-?\d{1,3}(?:,\d{3})+\s*원|-?\d+\s*원")
_DIGIT = re.compile(r"\d")
# Menu-section line with a trailing price: "Kimchi 5,000원"
_MENU_PRICED = re.compile(r"^(.+?)\s+(-?\d{1,3}(?:,\d{3})+|-?\d+)\s*원$")


class RuleMatch(BaseModel):
    """What a line rule recognized on one line."""

    name: str
    quantity: int = 1
    price: int = 0
    consumed_next: bool = False  # Price came from the following line


LineRule = Callable[[str, Optional[str]], Optional[RuleMatch]]


def _price_with_lookahead(rest: str, next_text: Optional[str]) -> Tuple[int, bool]:
    """Price on the same line, else a price-only next line."""
    price = find_price(rest)
    if price is not None:
        return price, False
    if next_text is not None:
        price = parse_price_line(next_text)
        if price is not None:
            return price, True
    return 0, False


def zone_rule(text: str, next_text: Optional[str]) -> Optional[RuleMatch]:
    """Delivery tier token such as "D zone" or "A구역"; always quantity 1."""
    match = _ZONE.match(text)
    if not match:
        return None
    name = text[:match.end(2)].strip()
    price, consumed_next = _price_with_lookahead(match.group(3), next_text)
    return RuleMatch(name=name, quantity=1, price=price, consumed_next=consumed_next)


def parenthesized_quantity_rule(text: str, next_text: Optional[str]) -> Optional[RuleMatch]:
    """Name "(" quantity ")" with an optional trailing price: "Kimchi(2)5,000원"."""
    match = _PARENTHESIZED.match(text)
    if not match:
        return None
    name = match.group(1).strip()
    quantity = int(match.group(2))
    if not name or quantity >= MAX_QUANTITY:
        return None
    price, consumed_next = _price_with_lookahead(match.group(3), next_text)
    return RuleMatch(name=name, quantity=quantity, price=price, consumed_next=consumed_next)


def discount_rule(text: str, next_text: Optional[str]) -> Optional[RuleMatch]:
    """Coupon or discount line; the amount is always a reduction."""
    lowered = text.lower()
    if not any(keyword in lowered for keyword in DISCOUNT_KEYWORDS):
        return None
    if any(keyword in lowered for keyword in COUPON_KEYWORDS):
        name = "쿠폰할인" if "쿠폰" in text else "coupon discount"
    else:
        name = "할인" if "할인" in text else "discount"

    consumed_next = False
    amount = find_price(text)
    if amount is None:
        amount = find_amount(text)
    if amount is None and next_text is not None:
        amount = parse_price_line(next_text)
        consumed_next = amount is not None
    price = -abs(amount) if amount else 0
    return RuleMatch(name=name, quantity=1, price=price, consumed_next=consumed_next)


def labeled_product_rule(text: str, next_text: Optional[str]) -> Optional[RuleMatch]:
    """Product-labeled line such as "상품명: 모듬전"; price is left to the catalog."""
    name = match_anchor(text, PRODUCT_LABELS)
    if not name:
        return None
    return RuleMatch(name=name, quantity=1, price=0)


def make_bare_quantity_rule(status_words: Sequence[str]) -> LineRule:
    """Build the "name 2" rule with its deny list of status words."""
    denied = [word.lower() for word in status_words]

    def bare_quantity_rule(text: str, next_text: Optional[str]) -> Optional[RuleMatch]:
        match = _BARE_QUANTITY.match(text)
        if not match:
            return None
        name = match.group(1).strip()
        quantity = int(match.group(2))
        if quantity >= MAX_BARE_QUANTITY:
            return None
        if not _NAME_SAFE.match(name) or not _LETTER.search(name):
            return None
        lowered = name.lower()
        if any(word in lowered for word in denied):
            return None
        price, consumed_next = _price_with_lookahead("", next_text)
        return RuleMatch(name=name, quantity=quantity, price=price, consumed_next=consumed_next)

    return bare_quantity_rule


def make_catalog_rule(index: CatalogIndex) -> LineRule:
    """
    Build the rule for a line that names a catalog product without a quantity.

    "모듬전" or "모듬전 14,900원" read as one of that product. A line with any
    other number ("모듬전 150") is left alone.
    """

    def catalog_rule(text: str, next_text: Optional[str]) -> Optional[RuleMatch]:
        product = index.find_in_text(text)
        if product is None:
            return None
        rest = normalize_name(text).replace(normalize_name(product.name), "", 1)
        if _DIGIT.search(_WON_TOKEN.sub("", rest)):
            return None
        price, consumed_next = _price_with_lookahead(text, next_text)
        return RuleMatch(name=product.name, quantity=1, price=price, consumed_next=consumed_next)

    return catalog_rule


def menu_line_rule(text: str, next_text: Optional[str]) -> Optional[RuleMatch]:
    """
    Any other line of a menu section, read as one item.

    The price is a trailing "N원" or a price-only next line.
    """
    if parse_price_line(text) is not None:
        return None
    match = _MENU_PRICED.match(text)
    if match:
        name = match.group(1).strip()
        price, consumed_next = to_int(match.group(2)), False
    else:
        name = text.strip()
        price, consumed_next = _price_with_lookahead("", next_text)
    if not _NAME_SAFE.match(name) or not _LETTER.search(name):
        return None
    return RuleMatch(name=name, quantity=1, price=price, consumed_next=consumed_next)


def default_rules(
    status_words: Optional[Sequence[str]] = None, catalog: Optional[CatalogIndex] = None
) -> List[LineRule]:
    """
    Line rules in priority order; the first match wins.

    With a catalog, lines naming a product are matched last.
    """
    rules = [
        zone_rule,
        parenthesized_quantity_rule,
        discount_rule,
        labeled_product_rule,
        make_bare_quantity_rule(DEFAULT_STATUS_WORDS if status_words is None else status_words),
    ]
    if catalog is not None:
        rules.append(make_catalog_rule(catalog))
    return rules


class ItemExtractor:
    """Applies line rules to every unclaimed line."""

    summary_rule = "payment_summary"

    def __init__(self, rules: Optional[List[LineRule]] = None):
        self.rules = rules if rules is not None else default_rules()

    def extract(
        self,
        lines: Sequence[RawLine],
        claimed: ClaimedSet,
        tags: Optional[Sequence[SectionTag]] = None,
    ) -> Tuple[List[ItemCandidate], ClaimedSet]:
        """
        Recognize item candidates on unclaimed lines.

        A match claims its own line, and the next line too when the price was
        read from it. With section tags, a menu-section line no rule matched
        still becomes an item.
        """
        candidates: List[ItemCandidate] = []
        for position, line in enumerate(lines):
            if line.index in claimed:
                continue
            following = None
            if position + 1 < len(lines) and lines[position + 1].index not in claimed:
                following = lines[position + 1]
            next_text = following.text if following is not None else None

            rules = list(self.rules)
            if tags is not None and tags[position] == SectionTag.MENU:
                rules.append(menu_line_rule)

            for rule in rules:
                match = rule(line.text, next_text)
                if match is None:
                    continue
                rule_name = getattr(rule, "__name__", type(rule).__name__)
                used = [line.index]
                if match.consumed_next and following is not None:
                    used.append(following.index)
                claimed = claimed.claim(used, rule_name)
                candidates.append(
                    ItemCandidate(
                        name=match.name,
                        quantity=match.quantity,
                        price=match.price,
                        line_index=line.index,
                        rule=rule_name,
                    )
                )
                logger.debug(
                    f"[ITEMS] {rule_name} on line {line.index}: "
                    f"{match.name!r} x{match.quantity} @ {match.price}"
                )
                break

        return candidates, claimed

    def extract_from_summary(self, text: Optional[str], line_index: Optional[int]) -> List[ItemCandidate]:
        """
        Items spelled out in an itemized payment amount.

        "D zone(1)6,600원 + 모듬전(1)14,900원 = 21,500원" yields two candidates.
        Parts that do not read as name(quantity)price are ignored.
        """
        if not text or line_index is None or "(" not in text:
            return []
        body = text.split("=")[0]
        candidates: List[ItemCandidate] = []
        for part in body.split("+"):
            match = parenthesized_quantity_rule(part.strip(), None)
            if match is None or match.price == 0:
                continue
            candidates.append(
                ItemCandidate(
                    name=match.name,
                    quantity=match.quantity,
                    price=match.price,
                    line_index=line_index,
                    rule=self.summary_rule,
                )
            )
        logger.debug(f"[ITEMS] {len(candidates)} items from payment summary line {line_index}")
        return candidates
