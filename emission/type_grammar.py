"""
Translation of documentation type strings into declaration-file types.

Documentation annotations spell types the way the sources describe them
(``Number``, ``[String]``, ``Object<string, BMView>``,
``Void ^ (Boolean, nullable Error)``); ``translate`` rewrites them into the
declaration-file grammar. Array and function-pointer forms recurse, so
arbitrarily nested annotations translate correctly.
"""

import logging
import re
from typing import List, Optional

from emission.config import (
    ANY,
    BLOCK_POINTERS,
    CLASS_EXTENDS,
    DICTIONARY_GENERIC,
    ERASED_TYPES,
    HTML_ESCAPES,
    NULL_RESETTABLE_WORD,
    NULL_UNION,
    NULLABLE_WORD,
    OPTIONAL_MARKER,
    PRIMITIVE_REWRITES,
    TYPEOF,
    UNION_SEPARATOR,
    UNION_WORD,
    VOID,
)
from extraction.doc_fields import split_nullability
from extraction.models import Nullability

logger = logging.getLogger(__name__)

_PRIMITIVE_PATTERNS = tuple(
    (re.compile(rf"\b{re.escape(boxed)}\b"), primitive)
    for boxed, primitive in PRIMITIVE_REWRITES
)
_KEYED_OBJECT_PATTERN = re.compile(r"\bObject<string,\s*")
_BARE_OBJECT_PATTERN = re.compile(r"\bObject\b")

_OPENERS = "<([{"
_CLOSERS = ">)]}"


def split_top_level(text: str, separator: str = ",") -> List[str]:
    """Split ``text`` on ``separator`` outside any bracket pair.

    Example:
        >>> split_top_level("Dictionary<Number, String>, Boolean")
        ['Dictionary<Number, String>', ' Boolean']
    """
    parts = []
    depth = 0
    start = 0
    for index, char in enumerate(text):
        if char in _OPENERS:
            depth += 1
        elif char in _CLOSERS:
            depth = max(depth - 1, 0)
        elif char == separator and depth == 0:
            parts.append(text[start:index])
            start = index + 1
    parts.append(text[start:])
    return parts


def _rewrite_names(text: str) -> str:
    text = text.replace(UNION_WORD, UNION_SEPARATOR)
    for pattern, primitive in _PRIMITIVE_PATTERNS:
        text = pattern.sub(primitive, text)
    for escaped, char in HTML_ESCAPES.items():
        text = text.replace(escaped, char)
    text = _KEYED_OBJECT_PATTERN.sub(DICTIONARY_GENERIC, text)
    text = _BARE_OBJECT_PATTERN.sub(ANY, text)
    return text.replace(CLASS_EXTENDS, TYPEOF)


def _translate_block(text: str, pointer: str, nullable: bool) -> str:
    """Rewrite ``Ret ^ (A, B)`` as ``(($0: A, $1: B) => Ret)``."""
    index = text.index(pointer)
    return_type = text[:index].strip()
    arguments = text[index + len(pointer):].strip()
    if arguments.startswith("(") and arguments.endswith(")"):
        arguments = arguments[1:-1]

    rendered = ""
    if arguments.strip():
        rendered = ", ".join(
            f"${position}: {translate(argument.strip())}"
            for position, argument in enumerate(split_top_level(arguments))
        )

    returns = translate(return_type) if return_type else VOID
    return f"(({rendered}) => {returns})" + (OPTIONAL_MARKER if nullable else "")


def translate(type_string: Optional[str], nullable: bool = False) -> str:
    """Translate a documentation type string.

    Args:
        type_string: Annotation text; None means "nothing documented".
        nullable: Whether the caller already knows the value is nullable.

    Returns:
        The declaration-file type; nullable types end with ``?``.

    Example:
        >>> translate("[Number]", nullable=True)
        'number[]?'
        >>> translate("Object<string, BMView>")
        'Dictionary<BMView>'
    """
    if type_string is None:
        return VOID

    text, nullability = split_nullability(type_string.strip())
    nullable = nullable or nullability is Nullability.NULLABLE

    text = text.strip() or ANY
    if text in ERASED_TYPES:
        text = ANY

    text = _rewrite_names(text)

    if text.startswith(NULLABLE_WORD):
        text = text[len(NULLABLE_WORD):].strip()
        nullable = True
    elif text.startswith(NULL_RESETTABLE_WORD):
        text = text[len(NULL_RESETTABLE_WORD):].strip()

    if text.startswith("[") and text.endswith("]"):
        inner = translate(text[1:-1])
        return inner + "[]" + (OPTIONAL_MARKER if nullable else "")

    for pointer in BLOCK_POINTERS:
        if pointer in text:
            return _translate_block(text, pointer, nullable)

    if text.startswith(DICTIONARY_GENERIC) and not text.endswith(">"):
        logger.warning("Unterminated dictionary type: %s (from %r)", text, type_string)

    return text + (OPTIONAL_MARKER if nullable else "")


def expand_optional(type_string: str) -> str:
    """Expand every optional marker of a translated type into a null union."""
    return type_string.replace(OPTIONAL_MARKER, NULL_UNION)
