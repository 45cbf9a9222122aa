"""
Balanced-brace scanning over raw source text.
"""

OPEN_SCOPE: str = "{"
CLOSE_SCOPE: str = "}"


def index_of_closing_scope(text: str, from_index: int = 0, open_scopes: int = 0) -> int:
    """Find the brace that closes the outermost open scope.

    Scans forward from ``from_index`` counting ``{`` and ``}``. The counter
    starts at ``open_scopes`` and is checked after every brace, so with
    ``open_scopes=0`` the first opening brace starts the scope being closed.

    Args:
        text: Text to scan.
        from_index: Offset of the first character to inspect.
        open_scopes: Number of scopes already open at ``from_index``.

    Returns:
        Index of the closing brace, or -1 if the scope never closes.

    Example:
        >>> index_of_closing_scope("a { b { c } d } e")
        14
        >>> index_of_closing_scope("x } y", open_scopes=1)
        2
    """
    count = open_scopes
    for index in range(max(from_index, 0), len(text)):
        char = text[index]
        if char == OPEN_SCOPE:
            count += 1
        elif char == CLOSE_SCOPE:
            count -= 1
        else:
            continue

        if count == 0:
            return index

    return -1
