"""Review signals for parsed orders."""
from typing import List
from app.services.ordering.models import ParsedOrder


class OrderValidator:
    """Flags parsed orders that need a human look. Never raises."""

    def review(self, order: ParsedOrder) -> List[str]:
        """
        Collect warnings for an order.

        Returns:
            Warning messages, empty when nothing needs review
        """
        warnings = []

        # Platform total disagrees with what the items add up to
        if order.vendor_total is not None and order.vendor_total != order.derived_total:
            warnings.append(
                f"Derived total {order.derived_total:,}원 differs from vendor total "
                f"{order.vendor_total:,}원"
            )

        for item in order.items:
            if item.price == 0 and item.product_id is None:
                warnings.append(f"Item '{item.name}' is not in the catalog and needs manual pricing")

        return warnings
