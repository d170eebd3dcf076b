"""
Action trigger resolution.

An action trigger is free text that may reference input bindings with
``<name>`` placeholders, e.g. ``Send a reminder to <emailId>``. When the
action fires, each placeholder is replaced by the value captured under
that binding, or by the bare name if nothing was captured (it then refers
to a static id rather than a user input).
"""

from __future__ import annotations

import re
from collections.abc import Mapping

from pydantic import BaseModel, Field

_PLACEHOLDER = re.compile(r"<([^>]+)>")


class ResolvedAction(BaseModel):
    """
    A fired action ready to be submitted.

    Attributes:
        prompt: Trigger text with placeholders substituted
        raw_prompt: Trigger text as written in the DSL
        input_values: Bindings whose captured values were substituted
    """

    model_config = {"frozen": True}

    prompt: str
    raw_prompt: str
    input_values: dict[str, str] = Field(default_factory=dict)


def resolve_action(trigger: str | None, values: Mapping[str, str]) -> ResolvedAction | None:
    """
    Substitute captured input values into an action trigger.

    Args:
        trigger: The element's action trigger
        values: Captured input values keyed by input binding

    Returns:
        ResolvedAction, or None for an empty trigger

    Examples:
        >>> resolve_action("Email <to> about <topic>", {"to": "a@b.c"}).prompt
        'Email a@b.c about topic'
    """
    if not trigger:
        return None

    used: dict[str, str] = {}

    def substitute(match: re.Match[str]) -> str:
        name = match.group(1).strip()
        if name in values:
            used[name] = values[name]
            return values[name]
        return name

    prompt = _PLACEHOLDER.sub(substitute, trigger)
    return ResolvedAction(prompt=prompt, raw_prompt=trigger, input_values=used)
