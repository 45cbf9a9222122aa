"""
Configuration constants for declaration-file emission.

Defines the visibility prefixes, union spellings and type-name rewrites
applied while rendering the symbol table as typed declarations.
"""

from typing import Dict, Tuple

# ---------------------------------------------------------------------------
# Top-level visibility
# ---------------------------------------------------------------------------
DECLARE_PREFIX: str = "declare "
EXPORT_PREFIX: str = "export "

# Member indentation inside class and interface bodies
DEFAULT_INDENT: str = "\t"

# ---------------------------------------------------------------------------
# Optional markers
# ---------------------------------------------------------------------------
OPTIONAL_MARKER: str = "?"
NULL_UNION: str = " | null | undefined"

# Leading word modifiers inside a type string
NULLABLE_WORD: str = "nullable "
NULL_RESETTABLE_WORD: str = "nullResettable "

# ---------------------------------------------------------------------------
# Type grammar
# ---------------------------------------------------------------------------
ANY: str = "any"
VOID: str = "void"

# Type strings that carry no usable information
ERASED_TYPES: Tuple[str, ...] = ("enum", "Multiple Types")

UNION_WORD: str = " or "
UNION_SEPARATOR: str = " | "

# Boxed primitive spellings and their declaration-file names, applied in order
PRIMITIVE_REWRITES: Tuple[Tuple[str, str], ...] = (
    ("AnyObject", "any"),
    ("Number", "number"),
    ("String", "string"),
    ("Boolean", "boolean"),
    ("Void", "void"),
)

HTML_ESCAPES: Dict[str, str] = {
    "&gt;": ">",
    "&lt;": "<",
}

DICTIONARY_GENERIC: str = "Dictionary<"
CLASS_EXTENDS: str = "Class extends"
TYPEOF: str = "typeof"

# Function pointer markers, the parenthesized form checked first
BLOCK_POINTERS: Tuple[str, ...] = ("(^)", "^")

# ---------------------------------------------------------------------------
# Members
# ---------------------------------------------------------------------------
REST_PARAMETER: str = "..."
REST_ARGUMENT_NAME: str = "...args"
INDEX_SIGNATURE: str = "[prop: string]"
CONSTRUCTOR_NAME: str = "constructor"
PROMISE_TYPE: str = "Promise"
