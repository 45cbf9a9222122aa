"""
Parsing of documentation-block description lines.

Recognised lines:

- ``@param name <Type, nullable> description``
- ``@return <Type> description``
- ``{`` / ``}`` on their own, bracketing options-bag parameters
- anything else, kept verbatim as documentation text

Types are read from a balanced ``<...>`` span so that generic annotations
such as ``<Dictionary<Set<String>>>`` survive intact.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from extraction.config import (
    ANY_TYPE,
    ARGUMENTS_OBJECT_CLOSE,
    ARGUMENTS_OBJECT_OPEN,
    NULL_RESETTABLE_SUFFIX,
    NULLABLE_SUFFIX,
    PARAM_MARKER,
    RETURN_MARKER,
)
from extraction.models import CallableMember, Member, Nullability, Param, ReturnValue

logger = logging.getLogger(__name__)


class UnbalancedAnnotationError(ValueError):
    """Raised when a ``<...>`` type annotation never closes."""


@dataclass
class DocBlock:
    """Structured content of one documentation block."""

    doc: str
    arguments: List[Param] = field(default_factory=list)
    arguments_object: List[Param] = field(default_factory=list)
    returns: Optional[ReturnValue] = None


def split_nullability(type_string: str) -> Tuple[str, Nullability]:
    """Strip a trailing ``, nullable`` / ``, nullResettable`` modifier.

    Returns:
        Tuple of (type without modifier, nullability).
    """
    if type_string.endswith(NULLABLE_SUFFIX):
        return type_string[: -len(NULLABLE_SUFFIX)], Nullability.NULLABLE
    if type_string.endswith(NULL_RESETTABLE_SUFFIX):
        return type_string[: -len(NULL_RESETTABLE_SUFFIX)], Nullability.NULL_RESETTABLE
    return type_string, Nullability.NONE


def balanced_angle_span(line: str, start: int) -> Tuple[str, int]:
    """Read the ``<...>`` span opening at ``start``.

    Args:
        line: Line to scan.
        start: Index of the opening ``<``.

    Returns:
        Tuple of (text between the outer brackets, index of the closing ``>``).

    Raises:
        UnbalancedAnnotationError: If ``start`` is not a ``<`` or the span
            runs past the end of the line.
    """
    if start < 0 or start >= len(line) or line[start] != "<":
        raise UnbalancedAnnotationError(f"No annotation opens at offset {start}: {line!r}")

    depth = 0
    for index in range(start, len(line)):
        char = line[index]
        if char == "<":
            depth += 1
        elif char == ">":
            depth -= 1
            if depth == 0:
                return line[start + 1:index], index

    raise UnbalancedAnnotationError(f"Unterminated type annotation: {line!r}")


def _annotated_remainder(line: str, start: int) -> Tuple[str, str]:
    """Return (type, description) for the annotation opening at ``start``."""
    try:
        type_string, end = balanced_angle_span(line, start)
    except UnbalancedAnnotationError as e:
        logger.warning("%s; keeping the rest of the line as its type", e)
        return line[start + 1:].strip(), ""
    return type_string, line[end + 1:].strip()


def parse_param_line(line: str) -> Tuple[str, Optional[str], str]:
    """Split a ``@param`` line into name, raw type and description.

    The raw type is None when the line carries no ``<...>`` annotation.
    """
    text = line[line.index(PARAM_MARKER) + len(PARAM_MARKER):]
    bracket = text.find("<")
    if bracket == -1:
        words = text.split(None, 1)
        name = words[0] if words else ""
        description = words[1].strip() if len(words) > 1 else ""
        return name, None, description

    name = text[:bracket].strip()
    type_string, description = _annotated_remainder(text, bracket)
    return name, type_string, description


def parse_return_line(line: str) -> Tuple[Optional[str], str]:
    """Split a ``@return`` line into raw type and description."""
    text = line[line.index(RETURN_MARKER) + len(RETURN_MARKER):]
    bracket = text.find("<")
    if bracket == -1:
        return None, text.strip()
    return _annotated_remainder(text, bracket)


def normalize_description_line(raw: str) -> str:
    """Remove the comment gutter (indentation, ``*`` and one space) from a line."""
    text = raw.lstrip()
    if text.startswith("*"):
        text = text[1:]
        if text[:1] in (" ", "\t"):
            text = text[1:]
    return text.rstrip()


def parse_doc_block(description: str) -> DocBlock:
    """Parse the description of a documentation block.

    Args:
        description: Text between ``/**`` and ``*/``, gutter included.

    Returns:
        The parsed block; ``doc`` is the re-flowed ``/** ... */`` text.

    Example:
        >>> block = parse_doc_block(" * Moves.\\n * @param x <Number>  The x.\\n")
        >>> [(p.name, p.data_type) for p in block.arguments]
        [('x', 'Number')]
    """
    lines = [normalize_description_line(raw) for raw in description.split("\n")]
    # The closing "*/" line leaves an empty tail behind.
    while lines and not lines[-1]:
        lines.pop()

    block = DocBlock(doc="")
    doc_lines = ["/**"]
    in_arguments_object = False

    for index, line in enumerate(lines):
        stripped = line.strip()

        if PARAM_MARKER in line:
            name, raw_type, text = parse_param_line(line)
            doc_lines.append(f" * {PARAM_MARKER} {name} {text}".rstrip())

            next_line = lines[index + 1].strip() if index + 1 < len(lines) else ""
            if raw_type is None and next_line == ARGUMENTS_OBJECT_OPEN:
                # Names the options bag itself.
                continue

            data_type, nullability = split_nullability(raw_type if raw_type is not None else ANY_TYPE)
            param = Param(
                name=name,
                data_type=data_type,
                nullable=nullability is Nullability.NULLABLE,
                description=text,
            )
            if in_arguments_object:
                block.arguments_object.append(param)
            else:
                block.arguments.append(param)

        elif RETURN_MARKER in line:
            raw_type, text = parse_return_line(line)
            doc_lines.append(f" * {RETURN_MARKER} {text}".rstrip())
            data_type, nullability = split_nullability(raw_type if raw_type is not None else ANY_TYPE)
            block.returns = ReturnValue(
                data_type=data_type,
                nullable=nullability is Nullability.NULLABLE,
                description=text,
            )

        elif stripped == ARGUMENTS_OBJECT_OPEN:
            in_arguments_object = True

        elif stripped == ARGUMENTS_OBJECT_CLOSE:
            in_arguments_object = False

        else:
            doc_lines.append(f" * {line}".rstrip())

    doc_lines.append(" */")
    block.doc = "\n".join(doc_lines)
    return block


def apply_doc_block(member: Member, block: DocBlock) -> None:
    """Attach a parsed documentation block to a classified member.

    Parameters and return values only apply to callables; for other members
    they are kept in the documentation text alone.
    """
    member.doc = block.doc
    if not isinstance(member, CallableMember):
        if block.arguments or block.arguments_object or block.returns:
            logger.debug("Ignoring parameter annotations on non-callable '%s'", member.name)
        return

    member.arguments.extend(block.arguments)
    member.arguments_object.extend(block.arguments_object)
    if block.returns is not None:
        member.returns = block.returns
