"""Raw line splitting and amount tokens."""
import re
from typing import Optional, Sequence, Tuple
from app.services.ordering.models import RawLine

_BULLET = re.compile(r"^[*•]\s*")

# "6,600원", "6600 원", "-2,000원"
_PRICE_WITH_UNIT = re.compile(r"(-?)\s*(\d{1,3}(?:,\d{3})+|\d+)\s*원")
# A line holding only a price: "6,600원", "6,600", "-2,000원"
_PRICE_ONLY_LINE = re.compile(r"^(-?)\s*(\d{1,3}(?:,\d{3})+|\d+)\s*(원?)$")
# Percentages ("10%") are rates, never amounts
_AMOUNT = re.compile(r"(?:\d{1,3}(?:,\d{3})+|\d+)(?![\d,.]*\s*%)")
_LEADING_SEPARATORS = re.compile(r"^[\s:：]+")


def split_lines(raw_text: Optional[str]) -> Tuple[RawLine, ...]:
    """Split text into trimmed, non-empty lines with a leading bullet removed."""
    if not raw_text:
        return ()
    lines = []
    for line in raw_text.splitlines():
        text = _BULLET.sub("", line.strip()).strip()
        if text:
            lines.append(RawLine(index=len(lines), text=text))
    return tuple(lines)


def to_int(amount: str) -> int:
    """Parse a thousands-separated integer such as "12,500"."""
    return int(amount.replace(",", ""))


def find_price(text: str) -> Optional[int]:
    """First amount carrying the won unit in ``text``, sign preserved."""
    match = _PRICE_WITH_UNIT.search(text)
    if not match:
        return None
    value = to_int(match.group(2))
    return -value if match.group(1) else value


def parse_price_line(text: str) -> Optional[int]:
    """
    Price of a line that holds nothing but a price.

    A bare number only counts when it is thousands-grouped, so a stray "2"
    on the next line is not read as a price.
    """
    match = _PRICE_ONLY_LINE.match(text.strip())
    if not match:
        return None
    sign, digits, unit = match.groups()
    if not unit and "," not in digits:
        return None
    value = to_int(digits)
    return -value if sign else value


def find_amount(text: str) -> Optional[int]:
    """First integer in ``text``, with or without a unit, skipping percentages."""
    match = _AMOUNT.search(text)
    return to_int(match.group(0)) if match else None


def match_anchor(text: str, anchors: Sequence[str]) -> Optional[str]:
    """
    Remainder of ``text`` after the longest matching prefix anchor.

    The anchor must end at a separator or the end of the line. Returns None
    when no anchor matches and "" when the anchor stands alone.
    """
    lowered = text.lower()
    for anchor in sorted(anchors, key=len, reverse=True):
        if not lowered.startswith(anchor.lower()):
            continue
        rest = text[len(anchor):]
        if rest and not _LEADING_SEPARATORS.match(rest):
            continue
        return _LEADING_SEPARATORS.sub("", rest).strip()
    return None
