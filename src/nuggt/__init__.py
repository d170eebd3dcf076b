"""
Nuggt - layout-aware markup for generated UIs.

Compiles Nuggt DSL text into a document of grid layouts and back.
"""

from __future__ import annotations

import re
from importlib.metadata import version as _metadata_version
from pathlib import Path as _Path

from .core import (
    Document,
    Element,
    Layout,
    parse_document,
    parse_with_warnings,
    serialize_document,
)
from .core.errors import ConfigError, NuggtError


def _get_version() -> str:
    """Get version from pyproject.toml (editable) or importlib.metadata (installed)."""
    # In editable mode, read directly from pyproject.toml for live updates
    pyproject = _Path(__file__).parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        content = pyproject.read_text()
        if match := re.search(r'^version\s*=\s*["\']([^"\']+)["\']', content, re.MULTILINE):
            return match.group(1)

    try:
        return _metadata_version("nuggt-dsl")
    except Exception:
        return "0.0.0"


__version__ = _get_version()

__all__ = [
    "__version__",
    "Document",
    "Element",
    "Layout",
    "parse_document",
    "parse_with_warnings",
    "serialize_document",
    "NuggtError",
    "ConfigError",
]
