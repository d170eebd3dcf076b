"""
Document assembly: DSL text to Document.

Lines are scanned top to bottom with three mutually exclusive
accumulators:

- a markdown run (consecutive lines that are not elements),
- a grid run (consecutive ``[N]: { ... }`` lines with the same N),
- a group run (consecutive freestanding elements of a groupable kind,
  e.g. ``accordion``), which becomes one container element.

Every other element becomes its own 1x1 layout. Parsing never raises:
text that matches no grammar degrades to prose.
"""

from __future__ import annotations

import logging
import re

from pydantic import BaseModel, Field

from nuggt.core.classifier import classify_element, looks_like_element
from nuggt.core.config import DEFAULT_CONFIG, CompilerConfig
from nuggt.core.grid import build_layout, parse_count
from nuggt.core.ir import Document, Element, GroupItem, Layout

logger = logging.getLogger(__name__)

_GRID_ROW = re.compile(r"^\[(\d+)\]:\s*\{(.*)\}$")


class ParseResult(BaseModel):
    """
    Parsed document plus notes about silent fallbacks.

    Attributes:
        document: The parsed document
        warnings: Human-readable notes (unmatched continuations, truncated
            cells, dropped columns, element-like lines read as prose)
    """

    model_config = {"frozen": True}

    document: Document
    warnings: list[str] = Field(default_factory=list)


class _Assembler:
    """Accumulator state for one parse call."""

    def __init__(self, config: CompilerConfig, warnings: list[str]):
        self.config = config
        self.warnings = warnings
        self.blocks: list[Layout] = []

        self.markdown_lines: list[str] = []
        self.markdown_start = 0

        self.grid_columns: int | None = None
        self.grid_rows: list[str] = []
        self.grid_start = 0

        self.group_member: str | None = None
        self.group_items: list[GroupItem] = []
        self.group_start = 0

    def feed(self, index: int, line: str, line_number: int) -> None:
        grid = _GRID_ROW.match(line)
        columns = parse_count(grid.group(1), self.warnings) if grid else 0
        if grid and columns > 0:
            self._feed_grid_row(index, columns, grid.group(2))
            return

        self.flush_grid()
        element = classify_element(line, f"el-{index}")

        if element is None:
            if looks_like_element(line):
                self._note(f"line {line_number}: element syntax not recognised, kept as text")
            self.flush_group()
            if not self.markdown_lines:
                self.markdown_start = index
            self.markdown_lines.append(line)
            return

        if self.config.container_kind(element.kind) is not None:
            if self.group_member != element.kind:
                self.flush_all()
                self.group_member = element.kind
                self.group_start = index
            self.group_items.append(
                GroupItem(
                    id=f"item-{index}",
                    trigger=element.properties.get("trigger", ""),
                    content=element.properties.get("content", ""),
                )
            )
            self._note_dropped(element, line_number)
            return

        self.flush_all()
        self.blocks.append(Layout.single(element, id=f"block-{index}", cell_id=f"cell-{index}"))

    def _feed_grid_row(self, index: int, columns: int, interior: str) -> None:
        if self.grid_columns == columns:
            self.grid_rows.append(interior)
            return
        self.flush_all()
        self.grid_columns = columns
        self.grid_rows = [interior]
        self.grid_start = index

    def flush_markdown(self) -> None:
        if not self.markdown_lines:
            return
        start = self.markdown_start
        element = Element.markdown("\n".join(self.markdown_lines), id=f"md-{start}")
        self.blocks.append(
            Layout.single(element, id=f"block-md-{start}", cell_id=f"cell-md-{start}")
        )
        self.markdown_lines = []

    def flush_grid(self) -> None:
        if self.grid_columns is None:
            return
        layout = build_layout(
            self.grid_columns,
            self.grid_rows,
            layout_id=f"grid-{self.grid_start}",
            warnings=self.warnings,
        )
        self.blocks.append(layout)
        self.grid_columns = None
        self.grid_rows = []

    def flush_group(self) -> None:
        if self.group_member is None:
            return
        start = self.group_start
        container = Element(
            id=f"group-{start}",
            kind=self.config.container_kind(self.group_member) or self.group_member,
            group_items=self.group_items,
        )
        self.blocks.append(
            Layout.single(container, id=f"block-group-{start}", cell_id=f"cell-group-{start}")
        )
        self.group_member = None
        self.group_items = []

    def flush_all(self) -> None:
        self.flush_markdown()
        self.flush_grid()
        self.flush_group()

    def _note_dropped(self, element: Element, line_number: int) -> None:
        dropped = sorted(set(element.properties) - {"trigger", "content"})
        if element.rationale is not None:
            dropped.append("highlight")
        if element.binding is not None:
            dropped.append(element.binding.mode)
        if dropped:
            self._note(
                f"line {line_number}: grouped {element.kind} keeps only trigger and content, "
                f"dropped {', '.join(dropped)}"
            )

    def _note(self, message: str) -> None:
        logger.debug(message)
        self.warnings.append(message)


def parse_with_warnings(text: str, config: CompilerConfig | None = None) -> ParseResult:
    """
    Parse DSL text, also reporting the fallbacks applied along the way.

    Args:
        text: Raw DSL text (newline separated)
        config: Compiler configuration (default: built-in behaviour)

    Returns:
        ParseResult with the document and any warnings
    """
    warnings: list[str] = []
    assembler = _Assembler(config or DEFAULT_CONFIG, warnings)

    # Ids count non-blank lines; warnings cite source line numbers
    index = 0
    for line_number, raw in enumerate(text.split("\n"), start=1):
        line = raw.strip()
        if not line:
            continue
        assembler.feed(index, line, line_number)
        index += 1
    assembler.flush_all()

    logger.debug("Parsed %d block(s) with %d warning(s)", len(assembler.blocks), len(warnings))
    return ParseResult(document=Document(blocks=assembler.blocks), warnings=warnings)


def parse_document(text: str, config: CompilerConfig | None = None) -> Document:
    """Parse DSL text into a Document. Never raises for malformed input."""
    return parse_with_warnings(text, config).document
