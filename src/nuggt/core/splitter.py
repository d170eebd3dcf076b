"""
Delimiter-safe scanning for Nuggt DSL text.

Property values may contain arbitrary punctuation as long as they are
quoted, so every structural decision (where a list splits, where a
parenthesized group ends) goes through one scanner that knows the two
quoting forms:

    "plain text, with commas"
    "<text with , : ( ) [ ] { } and even "inner" quotes>"

The composite form is opened by a ``<`` directly after an opening quote
and stays active until the next ``>"``. An unterminated quote simply runs
to the end of the input, which keeps the scanner total.
"""

from __future__ import annotations

from collections.abc import Iterator

OPENERS = "([{"
CLOSERS = ")]}"


def scan(text: str) -> Iterator[tuple[int, str, bool]]:
    """
    Walk ``text`` yielding ``(index, char, structural)`` triples.

    ``structural`` is False for every character inside a quoted region,
    including the quote characters themselves.
    """
    in_quote = False
    in_composite = False
    quote_open = -1

    for i, char in enumerate(text):
        prev = text[i - 1] if i > 0 else ""

        if in_composite:
            yield i, char, False
            if char == '"' and prev == ">":
                in_composite = False
            continue

        if in_quote:
            if char == "<" and i == quote_open + 1:
                in_quote = False
                in_composite = True
            elif char == '"' and prev != "\\":
                in_quote = False
            yield i, char, False
            continue

        if char == '"' and prev != "\\":
            in_quote = True
            quote_open = i
            yield i, char, False
            continue

        yield i, char, True


def split_safe(text: str, delimiter: str = ",") -> list[str]:
    """
    Split on top-level occurrences of ``delimiter``.

    Delimiters nested inside ``()``, ``[]``, ``{}`` or a quoted region are
    kept. Fragments are trimmed and empty trailing fragments dropped.

    Examples:
        >>> split_safe('a: 1, b: (x, y), c: "p, q"')
        ['a: 1', 'b: (x, y)', 'c: "p, q"']
        >>> split_safe("a, b, ")
        ['a', 'b']
    """
    parts: list[str] = []
    current: list[str] = []
    depth = 0

    for _, char, structural in scan(text):
        if structural:
            if char == delimiter and depth == 0:
                parts.append("".join(current).strip())
                current = []
                continue
            if char in OPENERS:
                depth += 1
            elif char in CLOSERS:
                depth -= 1
        current.append(char)

    parts.append("".join(current).strip())
    while parts and not parts[-1]:
        parts.pop()
    return parts


def find_group_end(text: str, start: int = 0) -> int | None:
    """
    Return the index of the bracket closing the group opened at ``start``.

    Returns None when ``text[start]`` is not an opener or the group never
    closes.
    """
    if start >= len(text) or text[start] not in OPENERS:
        return None

    depth = 0
    for i, char, structural in scan(text):
        if i < start or not structural:
            continue
        if char in OPENERS:
            depth += 1
        elif char in CLOSERS:
            depth -= 1
            if depth == 0:
                return i
    return None
