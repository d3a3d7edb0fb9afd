"""Order models."""
from enum import Enum
from typing import Dict, Iterable, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class SectionTag(str, Enum):
    """Coarse section a raw line belongs to."""

    NONE = "none"  # Before any section header, or loose layout
    HEADER = "header"  # Section anchors and known noise, always discarded
    CUSTOMER = "customer"
    MENU = "menu"
    PAYMENT = "payment"
    DONE = "done"  # Staff memo / history trailer

    def __str__(self) -> str:
        return self.value


class Layout(str, Enum):
    """Upstream text layout family."""

    TEMPLATE = "template"  # Reservation platform screen/email with section headers
    LOOSE = "loose"  # Free-form message with inline labels

    def __str__(self) -> str:
        return self.value


class FulfillmentKind(str, Enum):
    """How the order leaves the kitchen."""

    PICKUP = "PICKUP"
    DELIVERY = "DELIVERY"

    def __str__(self) -> str:
        return self.value


class Channel(str, Enum):
    """Where the order text came from."""

    NAVER = "NAVER"
    BAND = "BAND"
    TEXT = "TEXT"

    def __str__(self) -> str:
        return self.value


class RawLine(BaseModel):
    """A trimmed, non-empty input line and its position."""

    model_config = ConfigDict(frozen=True)

    index: int
    text: str


class ClaimedSet(BaseModel):
    """
    Line indices already consumed by an extraction rule.

    Immutable: ``claim`` and ``merge`` return new sets. The first rule to claim
    an index owns it for the rest of the parse.
    """

    model_config = ConfigDict(frozen=True)

    owners: Dict[int, str] = {}

    def __contains__(self, index: object) -> bool:
        return index in self.owners

    def __len__(self) -> int:
        return len(self.owners)

    def claim(self, indices: Iterable[int], rule: str) -> "ClaimedSet":
        """Return a new set with ``indices`` claimed by ``rule``."""
        owners = dict(self.owners)
        for index in indices:
            owners.setdefault(index, rule)
        return ClaimedSet(owners=owners)

    def merge(self, other: "ClaimedSet") -> "ClaimedSet":
        """Combine two sets; on conflict the owner in ``self`` wins."""
        owners = dict(other.owners)
        owners.update(self.owners)
        return ClaimedSet(owners=dict(sorted(owners.items())))

    def owner(self, index: int) -> Optional[str]:
        """Rule that claimed ``index``, if any."""
        return self.owners.get(index)


class ItemCandidate(BaseModel):
    """Raw item as recognized on a line, before dedup and catalog lookup."""

    name: str
    quantity: int = 1
    price: int = 0
    line_index: int
    rule: str


class OrderItem(BaseModel):
    """Structured order item."""

    name: str
    quantity: int = Field(default=1, ge=0, lt=1000)
    price: int = 0  # Whole won; negative only for discounts
    product_id: Optional[str] = None  # Set when resolved against the catalog


class FieldValues(BaseModel):
    """Field values collected by the field extractors."""

    customer_name: Optional[str] = None
    contact: Optional[str] = None
    fulfillment_kind: Optional[FulfillmentKind] = None
    address: Optional[str] = None
    scheduled_date: Optional[str] = None  # YYYY-MM-DD
    scheduled_time: Optional[str] = None  # HH:MM
    visitor: Optional[str] = None
    request_note: Optional[str] = None
    payment_status: Optional[str] = None
    reservation_number: Optional[str] = None
    payment_amount_text: Optional[str] = None
    payment_amount_line: Optional[int] = None
    delivery_fee: int = 0


class ParsedOrder(BaseModel):
    """Parsed order structure."""

    customer_name: Optional[str] = None
    contact: Optional[str] = None
    fulfillment_kind: FulfillmentKind = FulfillmentKind.PICKUP
    address: Optional[str] = None
    scheduled_date: Optional[str] = None
    scheduled_time: Optional[str] = None
    visitor: Optional[str] = None
    request_note: Optional[str] = None
    payment_status: Optional[str] = None
    reservation_number: Optional[str] = None
    channel: Channel = Channel.TEXT
    delivery_zone: Optional[str] = None
    delivery_fee: int = 0
    discount_value: int = 0  # Magnitude; discount items carry the negative price
    items: List[OrderItem] = []
    derived_total: int = 0
    vendor_total: Optional[int] = None
    memo: Optional[str] = None  # Lines no rule claimed
    warnings: List[str] = []
    claimed_lines: Dict[int, str] = {}
