"""
Accessor lookahead for properties.

Private-prefixed backing fields are conventionally followed by a getter
and/or setter for the prefix-stripped public name::

    _frame: undefined, // <BMRect>

    get frame() {
        return this._frame;
    },

    set frame(frame) {
        this._frame = frame;
    },

The resolver inspects the lines that follow a declaration (skipping blank
lines) and reports which accessors exist.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from extraction.config import PRIVATE_PREFIX
from extraction.scope import index_of_closing_scope

logger = logging.getLogger(__name__)


class PropertyAccess(str, Enum):
    """Result tag of the accessor lookahead."""

    PRIVATE_ONLY = "private"
    READ_ONLY = "readonly"
    WRITE_ONLY = "writeonly"
    READ_WRITE = "readwrite"


@dataclass(frozen=True)
class AccessResolution:
    """Public name and access derived for a property."""

    name: str
    access: PropertyAccess

    @property
    def is_private(self) -> bool:
        return self.access is PropertyAccess.PRIVATE_ONLY

    @property
    def read(self) -> bool:
        return self.access is not PropertyAccess.WRITE_ONLY

    @property
    def write(self) -> bool:
        return self.access is not PropertyAccess.READ_ONLY

    @property
    def qualifier(self) -> str:
        """Outline qualifier, e.g. ``"private "`` or ``"readonly "``."""
        if self.access is PropertyAccess.READ_WRITE:
            return ""
        return self.access.value + " "


def _accessor_pattern(keyword: str, name: str) -> "re.Pattern[str]":
    return re.compile(rf"^(?:static\s+)?{keyword}\s+{re.escape(name)}\s*\(")


def next_nonblank_line(text: str, position: int) -> Optional[Tuple[str, int, int]]:
    """Find the first non-blank line starting at or after ``position``.

    ``position`` should be the start of a line (or the newline ending the
    previous one).

    Returns:
        Tuple of (stripped line, line start, line end), or None at end of text.
    """
    cursor = position
    length = len(text)
    while cursor < length:
        end = text.find("\n", cursor)
        if end == -1:
            end = length
        line = text[cursor:end].strip()
        if line:
            return line, cursor, end
        cursor = end + 1
    return None


def _setter_follows(text: str, getter_start: int, name: str) -> bool:
    """Check whether a setter for ``name`` directly follows the getter at ``getter_start``."""
    getter_end = index_of_closing_scope(text, getter_start, 0)
    if getter_end == -1:
        logger.debug("Getter for '%s' never closes; treating it as read-only", name)
        return False

    line_end = text.find("\n", getter_end)
    if line_end == -1:
        return False

    following = next_nonblank_line(text, line_end + 1)
    return following is not None and bool(_accessor_pattern("set", name).match(following[0]))


def resolve_backing_field(
    field_name: str,
    following_text: str,
    private_prefix: str = PRIVATE_PREFIX,
) -> AccessResolution:
    """Resolve the visibility of a property declared with the private prefix.

    Args:
        field_name: Declared (prefixed) property name.
        following_text: Source text starting on the line after the declaration.
        private_prefix: The private-marker prefix.

    Returns:
        The prefix-stripped public name with its access when accessors follow,
        otherwise the original name tagged ``PRIVATE_ONLY``.
    """
    if not field_name.startswith(private_prefix):
        return AccessResolution(field_name, PropertyAccess.READ_WRITE)

    public_name = field_name[len(private_prefix):]
    first = next_nonblank_line(following_text, 0)
    if first is None or not public_name:
        return AccessResolution(field_name, PropertyAccess.PRIVATE_ONLY)

    line, line_start, _ = first
    if _accessor_pattern("get", public_name).match(line):
        if _setter_follows(following_text, line_start, public_name):
            return AccessResolution(public_name, PropertyAccess.READ_WRITE)
        return AccessResolution(public_name, PropertyAccess.READ_ONLY)

    if _accessor_pattern("set", public_name).match(line):
        return AccessResolution(public_name, PropertyAccess.WRITE_ONLY)

    return AccessResolution(field_name, PropertyAccess.PRIVATE_ONLY)


def resolve_getter(name: str, declaration_line: str, following_text: str) -> AccessResolution:
    """Resolve a getter-first property: read-only unless a setter follows the getter body.

    Args:
        name: Getter name.
        declaration_line: The getter's own line, e.g. ``get r() { // <Number>``.
        following_text: Source text starting on the line after the getter line.
    """
    text = declaration_line + "\n" + following_text
    if _setter_follows(text, 0, name):
        return AccessResolution(name, PropertyAccess.READ_WRITE)
    return AccessResolution(name, PropertyAccess.READ_ONLY)
