"""
Segmentation of concatenated source text into type sections.

A type section starts at a ``// @type <Name>`` line and runs until the next
start sentinel. An explicit ``// @endType`` line ends it early; any text
after the end sentinel, and any text before the first start sentinel, forms
an anonymous section that holds global declarations.
"""

import logging
import re
from dataclasses import dataclass
from typing import List

from extraction.config import DEFAULT_SETTINGS, ExtractionSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TypeSection:
    """A region of source attributed to one type name, or to none."""

    type_name: str
    body_text: str

    @property
    def is_anonymous(self) -> bool:
        return not self.type_name


def _start_pattern(sentinel: str) -> "re.Pattern[str]":
    # The sentinel must be followed by whitespace so "@typedef" stays inline.
    return re.compile(re.escape(sentinel) + r"(?=[ \t])")


def _end_pattern(sentinel: str) -> "re.Pattern[str]":
    return re.compile(re.escape(sentinel) + r"[^\n]*(?:\n|$)", re.IGNORECASE)


def _typed_section(chunk: str) -> TypeSection:
    """Split a chunk that followed a start sentinel into name and body."""
    text = chunk.strip()
    newline = text.find("\n")
    if newline == -1:
        return TypeSection(type_name=text, body_text="")
    return TypeSection(type_name=text[:newline].strip(), body_text=text[newline + 1:])


def split_sections(
    source: str,
    settings: ExtractionSettings = DEFAULT_SETTINGS,
) -> List[TypeSection]:
    """Split raw source text into type sections.

    Malformed nesting (an end sentinel without a start, repeated end
    sentinels) is handled positionally and never raises.

    Args:
        source: Concatenated source text.
        settings: Sentinel configuration.

    Returns:
        Non-empty sections in source order.
    """
    start_re = _start_pattern(settings.section_start)
    end_re = _end_pattern(settings.section_end)

    chunks = start_re.split(source)
    sections: List[TypeSection] = []

    # Text before the first start sentinel belongs to no type.
    preamble = chunks[0]
    for part in end_re.split(preamble):
        sections.append(TypeSection(type_name="", body_text=part))

    for chunk in chunks[1:]:
        parts = end_re.split(chunk)
        sections.append(_typed_section(parts[0]))
        for remainder in parts[1:]:
            sections.append(TypeSection(type_name="", body_text=remainder))

    non_empty = [s for s in sections if s.body_text.strip()]
    dropped = len(sections) - len(non_empty)
    if dropped:
        logger.debug("Dropped %d empty sections", dropped)

    logger.debug(
        "Split source into %d sections (%d anonymous)",
        len(non_empty),
        sum(1 for s in non_empty if s.is_anonymous),
    )
    return non_empty
