"""
Element classification for single DSL lines.

Two grammars are recognised, tried in order:

    kind: [ (key: value, ...), prompt: <action text> ]   # actionable
    kind: [ (key: value, ...), identifier ]               # input-collecting
    kind: (key: value, ...)                               # plain

Anything else is not an element and the caller treats it as prose.
"""

from __future__ import annotations

import re

from nuggt.core.ir import ActionBinding, Binding, Element, InputBinding
from nuggt.core.props import parse_props
from nuggt.core.splitter import find_group_end

_KIND_PREFIX = re.compile(r"^([A-Za-z0-9-]+):\s*")
_PROMPT_SUFFIX = re.compile(r"^prompt:", re.IGNORECASE)


def classify_element(text: str, element_id: str = "") -> Element | None:
    """
    Recognise one trimmed line (or grid cell fragment) as an Element.

    Args:
        text: Candidate line
        element_id: Render key given to the element

    Returns:
        The Element, or None if the text matches neither grammar
    """
    trimmed = text.strip()
    match = _KIND_PREFIX.match(trimmed)
    if match is None:
        return None

    kind = match.group(1).lower()
    rest = trimmed[match.end() :]

    if rest.startswith("["):
        bound = _split_bound(rest)
        if bound is None:
            return None
        prop_text, binding = bound
    elif rest.startswith("("):
        end = find_group_end(rest)
        if end != len(rest) - 1:
            return None
        prop_text, binding = rest[1:end], None
    else:
        return None

    props = parse_props(prop_text)
    rationale = props.pop("highlight", None)

    return Element(
        id=element_id,
        kind=kind,
        properties=props,
        binding=binding,
        rationale=rationale,
    )


def looks_like_element(text: str) -> bool:
    """True if the text starts like an element line, matched or not."""
    match = _KIND_PREFIX.match(text.strip())
    return match is not None and text.strip()[match.end() :][:1] in ("(", "[")


def _split_bound(rest: str) -> tuple[str, Binding | None] | None:
    """Split ``[ (PROPS), SUFFIX ]`` into the property text and its binding."""
    if not rest.endswith("]"):
        return None
    inner = rest[1:-1].strip()

    end = find_group_end(inner)
    if end is None or not inner.startswith("("):
        return None

    after = inner[end + 1 :].lstrip()
    if not after.startswith(","):
        return None
    suffix = after[1:].strip()

    binding: Binding | None = None
    prompt = _PROMPT_SUFFIX.match(suffix)
    if prompt:
        binding = ActionBinding(trigger=suffix[prompt.end() :].strip())
    elif suffix:
        binding = InputBinding(identifier=suffix)

    return inner[1:end], binding
