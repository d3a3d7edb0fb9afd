"""Field extraction for the template and loose layouts."""
import datetime
import logging
import re
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Sequence, Tuple

from app.services.ordering.classifier import section_anchor
from app.services.ordering.constants import (
    ADDRESS_ANCHORS,
    ADDRESS_DISCLAIMERS,
    CONTACT_ANCHORS,
    DELIVERY_VALUES,
    FULFILLMENT_ANCHORS,
    LABEL_WORDS,
    LOOSE_ADDRESS_PATTERN,
    LOOSE_AMOUNT_PATTERN,
    LOOSE_DELIVERY_HINTS,
    LOOSE_FEE_PATTERN,
    LOOSE_NAME_PATTERN,
    LOOSE_REQUEST_PATTERN,
    LOOSE_SCHEDULE_PATTERN,
    LOOSE_STATUS_PATTERN,
    LOOSE_VISITOR_PATTERN,
    NAME_ANCHORS,
    PAYMENT_AMOUNT_ANCHORS,
    PAYMENT_STATUS_ANCHORS,
    PHONE_PATTERN,
    PICKUP_VALUES,
    PRODUCT_LABELS,
    REQUEST_ANCHORS,
    RESERVATION_NUMBER_ANCHORS,
    SCHEDULE_ANCHORS,
    VISITOR_ANCHORS,
)
from app.services.ordering.lines import find_amount, match_anchor
from app.services.ordering.models import (
    ClaimedSet,
    FieldValues,
    FulfillmentKind,
    Layout,
    RawLine,
    SectionTag,
)

logger = logging.getLogger(__name__)

_LABEL_PUNCTUATION = re.compile(r"[:：\[\]()]")
_WHITESPACE = re.compile(r"\s+")
_DIGIT = re.compile(r"\d")
_DATE = re.compile(r"(\d{4})\s*[.\-/년]\s*(\d{1,2})\s*[.\-/월]\s*(\d{1,2})")
_MERIDIEM_TIME = re.compile(r"(오전|오후|AM|PM)\s*(\d{1,2})\s*:\s*(\d{2})", re.IGNORECASE)
_TIME_MERIDIEM = re.compile(r"(?<!\d)(\d{1,2})\s*:\s*(\d{2})\s*(AM|PM)\b", re.IGNORECASE)
_PLAIN_TIME = re.compile(r"(?<!\d)(\d{1,2}):(\d{2})(?!\d)")
_RESERVATION_NUMBER = re.compile(r"[0-9A-Za-z-]+")

ADDRESS_BLOCK_LIMIT = 3

ALL_FIELD_ANCHORS = (
    NAME_ANCHORS
    + CONTACT_ANCHORS
    + FULFILLMENT_ANCHORS
    + ADDRESS_ANCHORS
    + SCHEDULE_ANCHORS
    + VISITOR_ANCHORS
    + REQUEST_ANCHORS
    + PAYMENT_STATUS_ANCHORS
    + RESERVATION_NUMBER_ANCHORS
    + PAYMENT_AMOUNT_ANCHORS
)


def normalize_date(text: str) -> Optional[str]:
    """Turn "2026. 1. 30." style dates into "2026-01-30"."""
    match = _DATE.search(text)
    if not match:
        return None
    year, month, day = (int(part) for part in match.groups())
    try:
        return datetime.date(year, month, day).isoformat()
    except ValueError:
        return None


def normalize_time(text: str) -> Optional[str]:
    """
    Turn "오후 7:00" / "PM 7:00" / "7:00 PM" / "19:00" into 24-hour "HH:MM".

    12 AM is 00:MM, 12 PM stays 12:MM, other PM hours add 12.
    """
    meridiem = None
    match = _MERIDIEM_TIME.search(text)
    if match:
        meridiem, hour, minute = match.group(1), int(match.group(2)), int(match.group(3))
    else:
        match = _TIME_MERIDIEM.search(text)
        if match:
            hour, minute, meridiem = int(match.group(1)), int(match.group(2)), match.group(3)
        else:
            match = _PLAIN_TIME.search(text)
            if not match:
                return None
            hour, minute = int(match.group(1)), int(match.group(2))

    if meridiem is not None:
        if hour < 1 or hour > 12:
            return None
        is_pm = meridiem.upper() in ("PM", "오후")
        if is_pm and hour < 12:
            hour += 12
        elif not is_pm and hour == 12:
            hour = 0

    if hour > 23 or minute > 59:
        return None
    return f"{hour:02d}:{minute:02d}"


def find_phone(text: str) -> Optional[str]:
    """Mobile number anywhere in the text; the pattern alone is unambiguous."""
    match = PHONE_PATTERN.search(text)
    return match.group(0) if match else None


def fulfillment_from(text: str) -> Optional[FulfillmentKind]:
    """Fulfillment kind named by a value line."""
    lowered = text.strip().lower()
    if any(value in lowered for value in DELIVERY_VALUES):
        return FulfillmentKind.DELIVERY
    if any(value in lowered for value in PICKUP_VALUES):
        return FulfillmentKind.PICKUP
    return None


def is_anchor_line(text: str) -> bool:
    """Whether a line is itself a field label or section header."""
    return (
        match_anchor(text, ALL_FIELD_ANCHORS) is not None
        or section_anchor(text) != SectionTag.NONE
    )


def is_disclaimer(text: str) -> bool:
    return any(disclaimer in text for disclaimer in ADDRESS_DISCLAIMERS)


def is_label_word(text: str) -> bool:
    lowered = text.lower()
    return any(word in lowered for word in LABEL_WORDS)


def is_valid_name(text: str) -> bool:
    """Plausible person name: short, digit-free, not a label."""
    return 2 <= len(text) <= 20 and not _DIGIT.search(text) and not is_label_word(text)


def is_valid_address(text: str) -> bool:
    return len(text) > 5 and not is_label_word(text)


def _next_unclaimed(
    lines: Sequence[RawLine], position: int, claimed: ClaimedSet
) -> Optional[RawLine]:
    """Line right after ``position`` if it exists and is unclaimed."""
    if position + 1 < len(lines) and lines[position + 1].index not in claimed:
        return lines[position + 1]
    return None


class FieldExtractor(ABC):
    """Abstract base class for layout-specific field extractors."""

    @abstractmethod
    def extract(
        self,
        lines: Sequence[RawLine],
        tags: Sequence[SectionTag],
        claimed: ClaimedSet,
        values: FieldValues,
    ) -> Tuple[FieldValues, ClaimedSet]:
        """Fill unset fields from unclaimed lines; return values and claims."""
        pass


class TemplateFieldExtractor(FieldExtractor):
    """Per-field prefix anchors for the reservation platform template."""

    rule = "template_fields"

    def extract(
        self,
        lines: Sequence[RawLine],
        tags: Sequence[SectionTag],
        claimed: ClaimedSet,
        values: FieldValues,
    ) -> Tuple[FieldValues, ClaimedSet]:
        values = values.model_copy()

        if values.reservation_number is None:
            number, claimed, _ = self._extract_field(
                lines, claimed, RESERVATION_NUMBER_ANCHORS, "reservation_number", _reservation_number
            )
            values.reservation_number = number

        if values.customer_name is None:
            values.customer_name, claimed, _ = self._extract_field(
                lines, claimed, NAME_ANCHORS, "customer_name", _non_empty
            )

        if values.contact is None:
            values.contact, claimed, _ = self._extract_field(
                lines, claimed, CONTACT_ANCHORS, "contact", find_phone
            )

        if values.fulfillment_kind is None:
            kind, claimed, position = self._extract_field(
                lines, claimed, FULFILLMENT_ANCHORS, "fulfillment_kind", fulfillment_from
            )
            values.fulfillment_kind = kind
            if kind == FulfillmentKind.DELIVERY and values.address is None:
                values.address, claimed = self._extract_address(lines, position, claimed)

        if values.scheduled_date is None and values.scheduled_time is None:
            schedule, claimed, _ = self._extract_field(
                lines, claimed, SCHEDULE_ANCHORS, "schedule", _schedule
            )
            if schedule is not None:
                values.scheduled_date = normalize_date(schedule)
                values.scheduled_time = normalize_time(schedule)

        if values.visitor is None:
            values.visitor, claimed, _ = self._extract_field(
                lines, claimed, VISITOR_ANCHORS, "visitor", _non_empty
            )

        if values.request_note is None:
            values.request_note, claimed, _ = self._extract_field(
                lines, claimed, REQUEST_ANCHORS, "request_note", _non_empty
            )

        if values.payment_status is None:
            values.payment_status, claimed, _ = self._extract_field(
                lines, claimed, PAYMENT_STATUS_ANCHORS, "payment_status", _non_empty
            )

        if values.payment_amount_text is None:
            amount, claimed, position = self._extract_field(
                lines, claimed, PAYMENT_AMOUNT_ANCHORS, "payment_amount", _amount_text
            )
            if amount is not None:
                values.payment_amount_text = amount
                values.payment_amount_line = lines[position].index

        return values, claimed

    def _extract_field(
        self,
        lines: Sequence[RawLine],
        claimed: ClaimedSet,
        anchors: Sequence[str],
        field: str,
        accept: Callable[[str], object],
    ) -> Tuple[Optional[object], ClaimedSet, Optional[int]]:
        """
        Find the first unclaimed line starting with one of ``anchors``.

        The value is the text after the anchor, or failing that the next
        unclaimed line when it is not another label. ``accept`` normalizes a
        candidate value and returns None to reject it. Returns the value, the
        updated claims and the position of the anchor line.
        """
        for position, line in enumerate(lines):
            if line.index in claimed:
                continue
            remainder = match_anchor(line.text, anchors)
            if remainder is None:
                continue

            if remainder:
                value = accept(remainder)
                if value is not None:
                    logger.debug(f"[FIELDS] {field} inline on line {line.index}: {value!r}")
                    return value, claimed.claim([line.index], self.rule), position

            following = _next_unclaimed(lines, position, claimed)
            if following is not None and not is_anchor_line(following.text):
                value = accept(following.text)
                if value is not None:
                    logger.debug(f"[FIELDS] {field} on line {following.index}: {value!r}")
                    return value, claimed.claim([line.index, following.index], self.rule), position

            # A label with no usable value is still a label, never an item
            return None, claimed.claim([line.index], self.rule), position
        return None, claimed, None

    def _extract_address(
        self, lines: Sequence[RawLine], start: Optional[int], claimed: ClaimedSet
    ) -> Tuple[Optional[str], ClaimedSet]:
        """
        Address block after the delivery choice.

        The block runs from the address anchor to the disclaimer sentence that
        the template always prints after it. Without a disclaimer within reach
        only the first line is taken.
        """
        if start is None:
            return None, claimed
        for position in range(start, len(lines)):
            line = lines[position]
            if line.index in claimed:
                continue
            remainder = match_anchor(line.text, ADDRESS_ANCHORS)
            if remainder is None:
                continue

            block: List[RawLine] = []
            disclaimer: Optional[RawLine] = None
            for following in lines[position + 1:position + 1 + ADDRESS_BLOCK_LIMIT]:
                if following.index in claimed or is_anchor_line(following.text):
                    break
                if is_disclaimer(following.text):
                    disclaimer = following
                    break
                block.append(following)

            if disclaimer is None:
                block = [] if remainder else block[:1]
            parts = ([remainder] if remainder else []) + [b.text for b in block]
            used = [line.index] + [b.index for b in block]
            if disclaimer is not None:
                used.append(disclaimer.index)

            address = " ".join(parts) or None
            logger.debug(f"[FIELDS] address from lines {used}: {address!r}")
            return address, claimed.claim(used, self.rule)
        return None, claimed


class LooseFieldExtractor(FieldExtractor):
    """Anchors anywhere in a line, with validity filters on the values."""

    rule = "loose_fields"

    def extract(
        self,
        lines: Sequence[RawLine],
        tags: Sequence[SectionTag],
        claimed: ClaimedSet,
        values: FieldValues,
    ) -> Tuple[FieldValues, ClaimedSet]:
        values = values.model_copy()

        for position, line in enumerate(lines):
            if line.index in claimed or tags[position] == SectionTag.MENU:
                continue
            # "product name: ..." belongs to the item rules
            if match_anchor(line.text, PRODUCT_LABELS) is not None:
                continue
            text = line.text
            used: List[int] = []

            phone = find_phone(text)
            if phone and values.contact is None:
                values.contact = phone
                used.append(line.index)

            if values.fulfillment_kind is None:
                lowered = text.lower()
                if lowered in DELIVERY_VALUES:
                    values.fulfillment_kind = FulfillmentKind.DELIVERY
                    used.append(line.index)
                elif lowered in PICKUP_VALUES:
                    values.fulfillment_kind = FulfillmentKind.PICKUP
                    used.append(line.index)
                elif any(hint in text for hint in LOOSE_DELIVERY_HINTS):
                    values.fulfillment_kind = FulfillmentKind.DELIVERY

            if LOOSE_AMOUNT_PATTERN.search(text):
                if values.payment_amount_text is None:
                    remainder = _strip_label(LOOSE_AMOUNT_PATTERN, text)
                    if find_amount(remainder) is not None:
                        values.payment_amount_text = remainder
                        values.payment_amount_line = line.index
                        used.append(line.index)
            elif LOOSE_FEE_PATTERN.search(text):
                fee = find_amount(_strip_label(LOOSE_FEE_PATTERN, text))
                if fee is not None:
                    values.delivery_fee = fee
                    used.append(line.index)
            elif LOOSE_STATUS_PATTERN.search(text):
                if values.payment_status is None:
                    status = _strip_label(LOOSE_STATUS_PATTERN, text)
                    if status:
                        values.payment_status = status
                        used.append(line.index)
            elif LOOSE_NAME_PATTERN.search(text):
                if values.customer_name is None:
                    used.extend(self._take_name(lines, position, claimed, values))
            elif LOOSE_ADDRESS_PATTERN.search(text):
                if values.address is None:
                    address = _strip_label(LOOSE_ADDRESS_PATTERN, text)
                    if is_valid_address(address):
                        values.address = address
                        used.append(line.index)
            elif LOOSE_VISITOR_PATTERN.search(text):
                if values.visitor is None:
                    visitor = _strip_label(LOOSE_VISITOR_PATTERN, text)
                    if len(visitor) > 1:
                        values.visitor = visitor
                        used.append(line.index)
            elif LOOSE_SCHEDULE_PATTERN.search(text) and _schedule(text):
                if values.scheduled_date is None and values.scheduled_time is None:
                    values.scheduled_date = normalize_date(text)
                    values.scheduled_time = normalize_time(text)
                    used.append(line.index)
            elif LOOSE_REQUEST_PATTERN.search(text):
                if values.request_note is None:
                    note = _strip_label(LOOSE_REQUEST_PATTERN, text)
                    if len(note) > 2:
                        values.request_note = note
                        used.append(line.index)

            if used:
                claimed = claimed.claim(used, self.rule)

        return values, claimed

    def _take_name(
        self,
        lines: Sequence[RawLine],
        position: int,
        claimed: ClaimedSet,
        values: FieldValues,
    ) -> List[int]:
        """Name on the label line, or on the next line when the label stands alone."""
        line = lines[position]
        name = _strip_label(LOOSE_NAME_PATTERN, PHONE_PATTERN.sub("", line.text))
        if is_valid_name(name):
            values.customer_name = name
            return [line.index]
        following = _next_unclaimed(lines, position, claimed)
        if following is not None:
            name = _WHITESPACE.sub(" ", following.text).strip()
            if is_valid_name(name):
                values.customer_name = name
                return [line.index, following.index]
        return []


def _strip_label(pattern: "re.Pattern[str]", text: str) -> str:
    """Text with the label words and label punctuation removed."""
    stripped = _LABEL_PUNCTUATION.sub(" ", pattern.sub(" ", text))
    return _WHITESPACE.sub(" ", stripped).strip()


def _non_empty(text: str) -> Optional[str]:
    text = text.strip()
    return text or None


def _schedule(text: str) -> Optional[str]:
    if normalize_date(text) or normalize_time(text):
        return text.strip()
    return None


def _amount_text(text: str) -> Optional[str]:
    return text.strip() if find_amount(text) is not None else None


def _reservation_number(text: str) -> Optional[str]:
    match = _RESERVATION_NUMBER.match(text.strip())
    return match.group(0) if match else None


def extractors_for(layout: Layout) -> List[FieldExtractor]:
    """Field extractors to run, in order, for a layout."""
    if layout == Layout.TEMPLATE:
        return [TemplateFieldExtractor(), LooseFieldExtractor()]
    return [LooseFieldExtractor()]
