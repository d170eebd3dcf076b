"""
Compiler configuration.

Defaults reproduce the built-in behaviour; a project may override them in
``nuggt.toml``:

    [compiler]
    group_kinds = { accordion = "accordion-group" }

    [kinds]
    display = ["card", "alert", "callout"]
    action = ["button"]

``group_kinds`` maps a member kind to the container kind that consecutive
freestanding members merge into. Each ``[kinds]`` entry replaces the
default set for that category.
"""

from __future__ import annotations

import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from nuggt.core.errors import make_config_error
from nuggt.core.kinds import DEFAULT_KIND_CATEGORIES, KindCategory

CONFIG_FILENAME = "nuggt.toml"

DEFAULT_GROUP_KINDS = {"accordion": "accordion-group"}


@dataclass(frozen=True)
class CompilerConfig:
    """Settings shared by the parser and the serializer."""

    group_kinds: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_GROUP_KINDS))
    categories: dict[KindCategory, frozenset[str]] = field(
        default_factory=lambda: dict(DEFAULT_KIND_CATEGORIES)
    )

    def container_kind(self, member_kind: str) -> str | None:
        """Container a freestanding member kind groups into, if any."""
        return self.group_kinds.get(member_kind)

    def member_kind(self, container_kind: str) -> str | None:
        """Member kind a container serializes its items as."""
        for member, container in self.group_kinds.items():
            if container == container_kind:
                return member
        return None


DEFAULT_CONFIG = CompilerConfig()

_TOML_POSITION = re.compile(r"\(at line (\d+), column (\d+)\)")


def load_config(path: Path) -> CompilerConfig:
    """
    Load a compiler configuration from a TOML file.

    Args:
        path: Path to nuggt.toml

    Returns:
        CompilerConfig with overrides applied over the defaults

    Raises:
        ConfigError: If the file is missing, is not valid TOML, or holds
            wrongly typed values. The error carries the line of the
            offending value and a snippet when they can be found.
    """
    if not path.exists():
        raise make_config_error(f"Config file not found: {path}", path)

    source = path.read_text(encoding="utf-8")
    try:
        data = tomllib.loads(source)
    except tomllib.TOMLDecodeError as e:
        line = column = None
        position = _TOML_POSITION.search(str(e))
        if position:
            line, column = int(position.group(1)), int(position.group(2))
        raise make_config_error(
            f"Invalid TOML: {e}", path, line=line, column=column, source=source
        ) from e

    compiler = data.get("compiler", {})
    kinds = data.get("kinds", {})
    if not isinstance(compiler, dict):
        raise make_config_error("[compiler] must be a table", path, key="compiler", source=source)
    if not isinstance(kinds, dict):
        raise make_config_error("[kinds] must be a table", path, key="kinds", source=source)

    group_kinds = dict(DEFAULT_GROUP_KINDS)
    if "group_kinds" in compiler:
        group_kinds = _string_table(
            compiler["group_kinds"], path, "compiler.group_kinds", source
        )

    categories = dict(DEFAULT_KIND_CATEGORIES)
    for name, values in kinds.items():
        try:
            category = KindCategory(name)
        except ValueError as e:
            allowed = ", ".join(c.value for c in KindCategory)
            raise make_config_error(
                f"Unknown kind category '{name}' (expected one of: {allowed})",
                path,
                key=f"kinds.{name}",
                source=source,
            ) from e
        categories[category] = frozenset(_string_list(values, path, f"kinds.{name}", source))

    return CompilerConfig(group_kinds=group_kinds, categories=categories)


def find_config(start: Path | None = None) -> CompilerConfig:
    """Load ``nuggt.toml`` from ``start`` (default: cwd) if present, else defaults."""
    candidate = (start or Path.cwd()) / CONFIG_FILENAME
    if candidate.is_file():
        return load_config(candidate)
    return DEFAULT_CONFIG


def _string_table(value: Any, path: Path, key: str, source: str) -> dict[str, str]:
    if not isinstance(value, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in value.items()
    ):
        raise make_config_error(
            f"{key} must be a table of strings", path, key=key, source=source
        )
    return {k.lower(): v.lower() for k, v in value.items()}


def _string_list(value: Any, path: Path, key: str, source: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise make_config_error(f"{key} must be a list of strings", path, key=key, source=source)
    return [v.lower() for v in value]
