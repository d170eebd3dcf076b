"""
Error types for the Nuggt DSL toolkit.

The compiler itself is total over its input: malformed DSL degrades to
markdown prose instead of raising. These exceptions cover the surfaces
around it (configuration files, command line input).
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class NuggtError(Exception):
    """Base exception for all Nuggt errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class ConfigError(NuggtError):
    """
    Raised when a compiler configuration file cannot be used.

    Examples:
    - Missing nuggt.toml
    - Invalid TOML syntax
    - Wrongly typed values (e.g. group_kinds that is not a table of strings)
    - Unknown kind category names
    """

    pass


@dataclass
class ErrorContext:
    """
    Context information for an error, including source location.

    Attributes:
        file: Path to the file the error refers to
        line: Optional line number (1-indexed)
        column: Optional column number (1-indexed)
        snippet: Optional source snippet around the error
        key: Optional dotted configuration key (e.g. "compiler.group_kinds")
    """

    file: Path
    line: int | None = None
    column: int | None = None
    snippet: str | None = None
    key: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "nuggt.toml:3:1 at compiler.group_kinds"
        """
        location = str(self.file)
        if self.line is not None:
            location += f":{self.line}"
            if self.column is not None:
                location += f":{self.column}"
        if self.key:
            location += f" at {self.key}"

        if self.snippet and self.line is not None:
            return f"{location}\n{self._format_snippet()}"
        return location

    def _format_snippet(self) -> str:
        """Format snippet lines with line numbers and an error marker."""
        if not self.snippet or self.line is None:
            return ""

        formatted = []
        # Snippet is assumed to start two lines above the error line
        start_line = max(1, self.line - 2)

        for i, text in enumerate(self.snippet.split("\n")):
            line_num = start_line + i
            prefix = f"{line_num:4d} | "
            formatted.append(prefix + text)
            if line_num == self.line and self.column is not None:
                formatted.append(" " * (len(prefix) + self.column - 1) + "^^^")

        return "\n".join(formatted)


def make_config_error(
    message: str,
    file: Path,
    key: str | None = None,
    line: int | None = None,
    column: int | None = None,
    source: str | None = None,
) -> ConfigError:
    """
    Helper to create a ConfigError with file context.

    When the file text is given, the line of ``key`` is looked up if no
    line is known, and the lines leading up to the error become the snippet.

    Args:
        message: Error description
        file: Configuration file path
        key: Optional dotted key of the offending value
        line: Optional line number
        column: Optional column number
        source: Optional text of the configuration file

    Returns:
        ConfigError with context attached
    """
    snippet = None
    if source is not None:
        if line is None and key is not None:
            line = locate_key(source, key)
        if line is not None:
            lines = source.splitlines()
            snippet = "\n".join(lines[max(0, line - 3) : line]) or None

    context = ErrorContext(file=file, line=line, column=column, snippet=snippet, key=key)
    return ConfigError(message, context)


def locate_key(source: str, key: str) -> int | None:
    """
    Find the 1-indexed line assigning the last part of a dotted key.

    Examples:
        >>> locate_key("[kinds]\\ndisplay = 3", "kinds.display")
        2
    """
    name = re.escape(key.rsplit(".", 1)[-1])
    assignment = re.compile(rf"^\s*[\"']?{name}[\"']?\s*=")
    for number, text in enumerate(source.splitlines(), start=1):
        if assignment.match(text):
            return number
    return None
