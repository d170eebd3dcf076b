"""
Property list parsing and quoting.

A property list is the inside of ``( ... )`` in an element line:

    title: "Hi, there", content: X, highlight: "<Why: I did this>"

Values are unquoted on the way in and re-quoted on the way out, so the
two functions ``unquote`` and ``requote`` are inverses for any value that
needs quoting.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

from nuggt.core.splitter import split_safe

_COMPOSITE_QUOTED = re.compile(r'^"<(.*)>"$', re.DOTALL)
_PLAIN_QUOTED = re.compile(r'^"(.*)"$', re.DOTALL)

# Characters that would be read as structure if emitted bare
_NEEDS_QUOTING = re.compile(r"[,:()\[\]{}\n]")

ESCAPED_NEWLINE = "\\n"


def unquote(value: str) -> str:
    """
    Strip one level of quoting and expand escaped newlines.

    ``"<X>"`` becomes ``X``, otherwise ``"X"`` becomes ``X``; anything else
    is kept. Literal ``\\n`` sequences then become real newlines.
    """
    match = _COMPOSITE_QUOTED.match(value) or _PLAIN_QUOTED.match(value)
    if match:
        value = match.group(1)
    return value.replace(ESCAPED_NEWLINE, "\n")


def requote(value: str) -> str:
    """Quote a value with the composite form if it would not survive bare."""
    if _NEEDS_QUOTING.search(value):
        escaped = value.replace("\n", ESCAPED_NEWLINE)
        return f'"<{escaped}>"'
    return value


def parse_props(text: str) -> dict[str, str]:
    """
    Parse the inside of a parenthesized property list.

    Fragments without a colon or with an empty key are ignored. When a key
    repeats, the last value wins.

    Examples:
        >>> parse_props('title: "Hi, there", content: X')
        {'title': 'Hi, there', 'content': 'X'}
    """
    props: dict[str, str] = {}
    for part in split_safe(text, ","):
        key, sep, value = part.partition(":")
        if not sep:
            continue
        key = key.strip()
        if key:
            props[key] = unquote(value.strip())
    return props


def format_props(props: Mapping[str, str]) -> str:
    """Inverse of ``parse_props``."""
    return ", ".join(f"{key}: {requote(value)}" for key, value in props.items())
