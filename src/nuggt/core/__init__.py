"""
Nuggt DSL compiler core.

Parsing: ``parse_document`` / ``parse_with_warnings`` (assembler.py), built
on the splitter, property parser, element classifier and grid resolver.
Serialization: ``serialize_document`` (serializer.py).
"""

from nuggt.core.assembler import ParseResult, parse_document, parse_with_warnings
from nuggt.core.classifier import classify_element
from nuggt.core.config import DEFAULT_CONFIG, CompilerConfig, find_config, load_config
from nuggt.core.errors import ConfigError, NuggtError
from nuggt.core.grid import build_layout
from nuggt.core.ir import (
    ActionBinding,
    Cell,
    CellKind,
    Document,
    Element,
    GroupItem,
    InputBinding,
    Layout,
)
from nuggt.core.serializer import serialize_document, serialize_element, serialize_layout

__all__ = [
    # Parsing
    "parse_document",
    "parse_with_warnings",
    "ParseResult",
    "classify_element",
    "build_layout",
    # Serialization
    "serialize_document",
    "serialize_element",
    "serialize_layout",
    # Model
    "ActionBinding",
    "InputBinding",
    "GroupItem",
    "Element",
    "CellKind",
    "Cell",
    "Layout",
    "Document",
    # Configuration
    "CompilerConfig",
    "DEFAULT_CONFIG",
    "load_config",
    "find_config",
    # Errors
    "NuggtError",
    "ConfigError",
]
