"""Split a line into words, honouring single and double quotes."""

from __future__ import annotations

_SPACE = frozenset(" \t\n\v\f\r")
_QUOTES = frozenset("'\"")


def string_to_matrix(text: str) -> list[str]:
    """Split ``text`` on unquoted whitespace, removing the enclosing quotes.

    Inside a quoted section whitespace and the other kind of quote are kept
    literally. An empty quoted section still yields a (possibly empty) word.
    """
    words: list[str] = []
    current: list[str] | None = None
    quote: str | None = None

    for char in text:
        if char in _QUOTES:
            if quote is None:
                quote = char
                if current is None:
                    current = []
            elif char == quote:
                quote = None
            else:
                current.append(char)
        elif char in _SPACE:
            if quote is None:
                if current is not None:
                    words.append("".join(current))
                    current = None
            else:
                current.append(char)
        else:
            if current is None:
                current = []
            current.append(char)

    if current is not None:
        words.append("".join(current))
    return words