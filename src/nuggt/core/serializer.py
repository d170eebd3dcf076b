"""
Document to DSL text.

Used to hand a language model a textual snapshot of what is on screen
before asking it for edits. The output parses back to the same document
structure. A container element is written as one member line per item,
so the grouping is rebuilt by the parser rather than stored.

Not reproduced exactly: rows with cells truncated past the last column,
action triggers holding a newline (written as a literal ``\\n``), and grid
cells of hand-built documents holding a top-level comma.
"""

from __future__ import annotations

from dataclasses import dataclass

from nuggt.core.classifier import classify_element
from nuggt.core.config import DEFAULT_CONFIG, CompilerConfig
from nuggt.core.grid import CONTINUE, SPACE, RowItem, parse_row_items, resolve_spans
from nuggt.core.ir import (
    ActionBinding,
    Cell,
    CellKind,
    Document,
    Element,
    InputBinding,
    Layout,
)
from nuggt.core.props import ESCAPED_NEWLINE, format_props


def serialize_element(element: Element, config: CompilerConfig | None = None) -> str:
    """
    Serialize one element to classifier-grammar text.

    Markdown elements come back as their raw body; containers as one
    member line per group item. The rationale is written back as the
    ``highlight`` property.
    """
    config = config or DEFAULT_CONFIG

    if element.is_container:
        member = config.member_kind(element.kind) or element.kind
        return "\n".join(
            f"{member}: ({format_props({'trigger': item.trigger, 'content': item.content})})"
            for item in element.group_items
        )

    if element.markdown_body is not None:
        return element.markdown_body

    props = dict(element.properties)
    if element.rationale is not None:
        props["highlight"] = element.rationale
    prop_text = format_props(props)

    if isinstance(element.binding, ActionBinding):
        trigger = element.binding.trigger.replace("\n", ESCAPED_NEWLINE)
        return f"{element.kind}: [ ({prop_text}), prompt: {trigger} ]"
    if isinstance(element.binding, InputBinding):
        return f"{element.kind}: [ ({prop_text}), {element.binding.identifier} ]"
    return f"{element.kind}: ({prop_text})"


@dataclass
class _Entry:
    """One cell fragment of a row being written."""

    kind: CellKind
    span: int
    body: str = ""


class _RowWriter:
    """
    Lays cells back into physical rows.

    A running cursor starts a new row whenever the next cell would not
    fit. Columns covered by a cell spanning down from an earlier row are
    written as ``continue`` markers so the merge is rebuilt on parse.
    """

    def __init__(self, column_count: int):
        self.column_count = column_count
        self.rows: list[list[_Entry]] = []
        self.current: list[_Entry] = []
        self.cursor = 0
        # row -> [(first column, end column)] covered from an earlier row
        self.covered: dict[int, list[tuple[int, int]]] = {}

    @property
    def row(self) -> int:
        return len(self.rows)

    def add(self, cell: Cell, body: str) -> None:
        self._emit_covered()
        if self.cursor > 0 and self.cursor + cell.column_span > self.column_count:
            self.close_row()
            self._emit_covered()

        last_column = min(self.cursor + cell.column_span, self.column_count)
        if last_column > self.cursor:
            for r in range(self.row + 1, self.row + cell.row_span):
                self.covered.setdefault(r, []).append((self.cursor, last_column))

        self.current.append(_Entry(cell.kind, cell.column_span, body))
        self.cursor += cell.column_span

    def close_row(self) -> None:
        self._emit_covered(fill_gaps=True)
        self.rows.append(self.current)
        self.current = []
        self.cursor = 0

    def finish(self) -> list[list[_Entry]]:
        if self.current:
            self.close_row()
        while any(r >= self.row for r in self.covered):
            self.close_row()
        return self.rows

    def _emit_covered(self, fill_gaps: bool = False) -> None:
        for start, end in sorted(self.covered.get(self.row, [])):
            if end <= self.cursor:
                continue
            if start > self.cursor:
                if not fill_gaps:
                    return
                self.current.append(_Entry(CellKind.EMPTY, start - self.cursor))
                self.cursor = start
            self.current.append(_Entry(CellKind.CONTINUATION, end - self.cursor))
            self.cursor = end


def _format_row(entries: list[_Entry], column_count: int) -> str:
    """Write one ``[N]: { ... }`` line, leaving 1-spans bare when that reparses identically."""
    items = [
        RowItem(
            raw=_raw(entry),
            explicit_span=(
                None if entry.kind == CellKind.CONTENT and entry.span == 1 else entry.span
            ),
        )
        for entry in entries
    ]
    bare_ok = resolve_spans(items, column_count) == [entry.span for entry in entries]

    fragments = []
    for entry in entries:
        raw = _raw(entry)
        if entry.kind == CellKind.EMPTY and entry.span == 1:
            fragments.append(SPACE)
        elif entry.kind == CellKind.CONTENT and entry.span == 1 and bare_ok:
            fragments.append(raw)
        else:
            fragments.append(f"[{entry.span}]: {raw}")
    return f"[{column_count}]: {{ {', '.join(fragments)} }}"


def _raw(entry: _Entry) -> str:
    if entry.kind == CellKind.EMPTY:
        return SPACE
    if entry.kind == CellKind.CONTINUATION:
        return CONTINUE
    return entry.body


def serialize_layout(layout: Layout, config: CompilerConfig | None = None) -> str:
    """
    Serialize one layout block.

    The 1x1 wrapping of a freestanding element is written as the bare
    element; any other layout as one ``[N]: { ... }`` line per row. A lone
    member of a groupable kind keeps its row, or the parser would group it.
    """
    config = config or DEFAULT_CONFIG
    content = layout.cells[0].content if layout.is_single else None
    if content is not None and not _groups_on_parse(content, config):
        return serialize_element(content, config)
    return _grid_lines(layout, config)


def _groups_on_parse(element: Element, config: CompilerConfig) -> bool:
    return not element.is_container and config.container_kind(element.kind) is not None


def _grid_lines(layout: Layout, config: CompilerConfig) -> str:
    writer = _RowWriter(layout.column_count)
    for cell in layout.cells:
        body = serialize_element(cell.content, config) if cell.content is not None else ""
        writer.add(cell, body)

    rows = writer.finish() or [[]]
    return "\n".join(_format_row(entries, layout.column_count) for entries in rows)


# Block boundary tags: prose, an element line, or the column count of a grid row
_PROSE = "prose"
_ELEMENT = "element"


@dataclass
class _Rendering:
    """One way of writing a block, with what its first and last lines are."""

    text: str
    head: str | int
    tail: str | int


def _renderings(layout: Layout, config: CompilerConfig) -> list[_Rendering]:
    content = layout.cells[0].content if layout.is_single else None
    if content is None or _groups_on_parse(content, config):
        rows = _grid_lines(layout, config)
        return [_Rendering(rows, layout.column_count, layout.column_count)]

    text = serialize_element(content, config)
    if not content.is_markdown:
        return [_Rendering(text, _ELEMENT, _ELEMENT)]

    options = [_Rendering(text, _PROSE, _PROSE)]
    if _fits_cell(text):
        options.append(_Rendering(_grid_lines(layout, config), 1, 1))
    return options


def _fits_cell(body: str) -> bool:
    """True if prose written as a grid cell reads back as the same prose."""
    return (
        "\n" not in body
        and parse_row_items(body) == [RowItem(raw=body)]
        and RowItem(raw=body).kind == CellKind.CONTENT
        and classify_element(body) is None
    )


def _clashes(before: _Rendering, after: _Rendering) -> bool:
    """Adjacent prose, or adjacent rows of equal width, merge on parse."""
    return before.tail == after.head and before.tail != _ELEMENT


def _choose(options: list[list[_Rendering]]) -> list[_Rendering]:
    """Pick one rendering per block, minimising clashes; bare forms win ties."""
    costs = [0] * len(options[0])
    pointers: list[list[int]] = []

    for previous, current in zip(options, options[1:]):
        step_costs: list[int] = []
        step_pointers: list[int] = []
        for option in current:
            scores = [costs[k] + _clashes(before, option) for k, before in enumerate(previous)]
            best = scores.index(min(scores))
            step_costs.append(scores[best])
            step_pointers.append(best)
        costs = step_costs
        pointers.append(step_pointers)

    pick = costs.index(min(costs))
    picks = [pick]
    for step in reversed(pointers):
        pick = step[pick]
        picks.append(pick)
    picks.reverse()
    return [block_options[k] for block_options, k in zip(options, picks, strict=True)]


def serialize_document(document: Document, config: CompilerConfig | None = None) -> str:
    """
    Serialize a whole document, one block after another.

    Two prose blocks in a row would read back as one, so where a grid cell
    of prose sits next to another prose block it keeps its ``[1]: { ... }``
    row.
    """
    if not document.blocks:
        return ""
    config = config or DEFAULT_CONFIG
    options = [_renderings(block, config) for block in document.blocks]
    return "\n".join(rendering.text for rendering in _choose(options))
