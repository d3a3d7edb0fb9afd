"""Longest-name-first view over the product catalog."""
import re
from datetime import date
from typing import Iterable, List, Optional, Tuple
from app.services.catalog.base import CatalogProduct

_WHITESPACE = re.compile(r"\s+")


def normalize_name(text: str) -> str:
    """Remove all whitespace and case fold, for loose name comparison."""
    return _WHITESPACE.sub("", text).casefold()


class CatalogIndex:
    """
    Immutable index over a catalog snapshot.

    Products are ordered by normalized name length, longest first, so that
    "아이스 아메리카노" wins over "아메리카노" when both would match.
    Ties keep catalog order.
    """

    def __init__(self, products: Iterable[CatalogProduct]):
        entries = [(normalize_name(p.name), p) for p in products]
        entries = [entry for entry in entries if entry[0]]
        entries.sort(key=lambda entry: len(entry[0]), reverse=True)
        self._entries: Tuple[Tuple[str, CatalogProduct], ...] = tuple(entries)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def products(self) -> List[CatalogProduct]:
        """Products in match order."""
        return [product for _, product in self._entries]

    def for_date(self, order_date: Optional[date]) -> "CatalogIndex":
        """
        Date-scoped view of the index.

        Daily and special products are kept only when their target date equals
        the order date. Without an order date they are dropped entirely.
        """
        return CatalogIndex(
            product
            for _, product in self._entries
            if not product.is_date_bound
            or (order_date is not None and product.target_date == order_date)
        )

    def match(self, name: str) -> Optional[CatalogProduct]:
        """
        Find the product for a free-text name.

        Containment is checked both ways so abbreviated ("시금치") and padded
        ("시금치나물 2팩") names resolve.
        """
        candidate = normalize_name(name)
        if not candidate:
            return None
        for product_name, product in self._entries:
            if product_name in candidate or candidate in product_name:
                return product
        return None

    def find_in_text(self, text: str) -> Optional[CatalogProduct]:
        """First product, longest name first, whose name appears in ``text``."""
        haystack = normalize_name(text)
        if not haystack:
            return None
        for product_name, product in self._entries:
            if product_name in haystack:
                return product
        return None

