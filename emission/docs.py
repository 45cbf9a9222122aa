"""Rewriting of HTML fragments in documentation comments."""

import re

_REPLACEMENTS = (
    (re.compile(r"</?code>"), "`"),
    (re.compile(r"</?b>"), "__"),
    (re.compile(r"</?ul>"), "\n *"),
    (re.compile(r"<li>(.*)</li>"), r" * \1"),
    (re.compile(r"<li>(.*)"), r" * \1"),
    (re.compile(r"(.*)</li>"), r"\1"),
)


def render_documentation(doc: str) -> str:
    """Convert the HTML markup used in source documentation to plain doc comments.

    Example:
        >>> render_documentation(" * Returns <code>YES</code>.")
        ' * Returns `YES`.'
    """
    if not doc:
        return ""
    for pattern, replacement in _REPLACEMENTS:
        doc = pattern.sub(replacement, doc)
    return doc


def indent_documentation(doc: str, indent: str) -> str:
    """Indent every line of a rendered documentation block."""
    return indent + doc.replace("\n", "\n" + indent)
