"""Derived and vendor-stated totals."""
from typing import Optional, Sequence
from pydantic import BaseModel

from app.services.ordering.lines import find_amount
from app.services.ordering.models import OrderItem


class Amounts(BaseModel):
    """Reconciled money fields of an order."""

    delivery_fee: int = 0
    discount_value: int = 0
    derived_total: int = 0
    vendor_total: Optional[int] = None


def parse_vendor_total(text: Optional[str]) -> Optional[int]:
    """
    Total printed by the platform.

    An itemized amount ("A(1)1,000원 + B(1)2,000원 = 3,000원") is read after
    the "=" sign.
    """
    if not text:
        return None
    if "=" in text:
        text = text.split("=")[-1]
    return find_amount(text)


def reconcile(
    items: Sequence[OrderItem],
    delivery_fee: int = 0,
    payment_amount_text: Optional[str] = None,
) -> Amounts:
    """
    Compute the derived total and read the vendor total.

    Discount items carry negative prices; their magnitude becomes the
    discount value and they are left out of the item sum so nothing is
    subtracted twice.
    """
    item_sum = sum(item.price * item.quantity for item in items if item.price >= 0)
    discount_value = -sum(item.price * item.quantity for item in items if item.price < 0)
    return Amounts(
        delivery_fee=delivery_fee,
        discount_value=discount_value,
        derived_total=item_sum + delivery_fee - discount_value,
        vendor_total=parse_vendor_total(payment_amount_text),
    )
