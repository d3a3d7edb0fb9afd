"""Line classification: layout detection and section tagging."""
import logging
import re
from typing import List, Sequence, Tuple
from pydantic import BaseModel

from app.services.ordering.constants import (
    CUSTOMER_SECTION_ANCHORS,
    DONE_SECTION_ANCHORS,
    DONE_SUBSTRINGS,
    HEADER_NOISE_WORDS,
    MENU_SECTION_ANCHORS,
    NOISE_SUBSTRINGS,
    PAYMENT_SECTION_ANCHORS,
    TEMPLATE_MARKERS,
)
from app.services.ordering.models import ClaimedSet, Layout, RawLine, SectionTag

logger = logging.getLogger(__name__)

_HEADER_STRIP = re.compile(r"[0-9\-.:\s]")

_SECTION_ANCHORS = [
    (SectionTag.MENU, MENU_SECTION_ANCHORS),
    (SectionTag.CUSTOMER, CUSTOMER_SECTION_ANCHORS),
    (SectionTag.PAYMENT, PAYMENT_SECTION_ANCHORS),
    (SectionTag.DONE, DONE_SECTION_ANCHORS),
]


class ClassifiedLines(BaseModel):
    """Per-line section tags plus the header lines claimed while tagging."""

    layout: Layout
    tags: Tuple[SectionTag, ...] = ()
    claimed: ClaimedSet = ClaimedSet()


def detect_layout(lines: Sequence[RawLine]) -> Layout:
    """Template layout when any line carries a template marker."""
    for line in lines:
        lowered = line.text.lower()
        if any(marker.lower() in lowered for marker in TEMPLATE_MARKERS):
            return Layout.TEMPLATE
    return Layout.LOOSE


def section_anchor(text: str) -> SectionTag:
    """Section a header line opens, or NONE if it is not a section header."""
    lowered = text.lower()
    for tag, anchors in _SECTION_ANCHORS:
        for anchor in anchors:
            anchor = anchor.lower()
            if lowered == anchor or lowered.startswith(anchor + "\t"):
                return tag
    if any(word in text for word in DONE_SUBSTRINGS):
        return SectionTag.DONE
    return SectionTag.NONE


def is_header_noise(text: str, header_words: bool = True) -> bool:
    """
    Known header rows and boilerplate that never carry order data.

    Bare header words ("상품", "확정") are only noise inside the platform
    template; a loose message may use them as item names.
    """
    if text.startswith("<"):
        return True
    if any(noise in text for noise in NOISE_SUBSTRINGS):
        return True
    if any(marker.lower() in text.lower() for marker in TEMPLATE_MARKERS):
        return True
    return header_words and _HEADER_STRIP.sub("", text) in HEADER_NOISE_WORDS


def classify(lines: Sequence[RawLine], layout: Layout) -> ClassifiedLines:
    """
    Tag every line with its section.

    State machine: Init -> Header -> (Customer|Menu|Payment)* -> Done.
    Section anchors and header noise are claimed as ``header``. Everything
    after a Done anchor (staff memo, history log) is claimed as ``trailer``.
    """
    state = SectionTag.NONE
    tags: List[SectionTag] = []
    header_indices: List[int] = []
    trailer_indices: List[int] = []

    for line in lines:
        if state == SectionTag.DONE:
            tags.append(SectionTag.DONE)
            trailer_indices.append(line.index)
            continue

        opened = section_anchor(line.text)
        if opened != SectionTag.NONE:
            logger.debug(f"[CLASSIFY] Line {line.index} opens section {opened}: {line.text!r}")
            state = opened
            tags.append(SectionTag.HEADER)
            header_indices.append(line.index)
            if opened == SectionTag.DONE:
                tags[-1] = SectionTag.DONE
            continue

        if is_header_noise(line.text, header_words=layout == Layout.TEMPLATE):
            tags.append(SectionTag.HEADER)
            header_indices.append(line.index)
            continue

        tags.append(state if layout == Layout.TEMPLATE else SectionTag.NONE)

    claimed = ClaimedSet().claim(header_indices, "header").claim(trailer_indices, "trailer")
    logger.debug(
        f"[CLASSIFY] {layout} layout - {len(header_indices)} header lines, "
        f"{len(trailer_indices)} trailer lines"
    )
    return ClassifiedLines(layout=layout, tags=tuple(tags), claimed=claimed)
