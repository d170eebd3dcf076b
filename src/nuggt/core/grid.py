"""
Grid row layout resolution.

Consecutive ``[N]: { ... }`` lines sharing a column count form one layout.
Resolution runs in three passes:

1. Span resolution per row: explicit ``[S]:`` spans are kept, the
   remaining columns are shared among span-less cells. A single span-less
   cell at either end of the row takes all of them; otherwise each gets
   ``remaining // K`` and the remainder is dropped.
2. Placement: cells are laid left to right along each row. Columns past N
   are truncated, never wrapped.
3. Continuation resolution: a ``continue`` cell merges into the content
   cell directly above it when their spans match, growing that cell's
   row span. Unmatched continuations vanish.

Each row is kept as a list of column intervals pointing into a cell arena,
so a merge repoints an interval at the same arena entry instead of
aliasing objects. Work is proportional to the number of cells, never to
the declared column count.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from nuggt.core.classifier import classify_element
from nuggt.core.ir import Cell, CellKind, Element, Layout
from nuggt.core.splitter import split_safe

logger = logging.getLogger(__name__)

_SPAN_PREFIX = re.compile(r"^\[(\d+)\]:\s*(.*)$", re.DOTALL)

SPACE = "space"
CONTINUE = "continue"

# Column counts and spans saturate here
MAX_COUNT = 1_000_000_000


@dataclass
class RowItem:
    """One comma-separated fragment of a grid row."""

    raw: str
    explicit_span: int | None = None

    @property
    def kind(self) -> CellKind:
        if self.raw == SPACE:
            return CellKind.EMPTY
        if self.raw == CONTINUE:
            return CellKind.CONTINUATION
        return CellKind.CONTENT


@dataclass
class _Slot:
    """Arena entry; mutable while merges are resolved."""

    kind: CellKind
    column_span: int
    row: int
    position: int
    content: Element | None = None
    row_span: int = 1
    absorbed: bool = False
    column: int | None = None  # None once truncated past the last column


@dataclass
class _Interval:
    """Columns ``start`` to ``end - 1`` of one row, owned by an arena entry."""

    start: int
    end: int
    index: int


def parse_count(digits: str, warnings: list[str] | None = None) -> int:
    """
    Convert a bracketed digit run to an int, saturating at ``MAX_COUNT``.

    Examples:
        >>> parse_count("007")
        7
        >>> parse_count("9" * 5000) == MAX_COUNT
        True
    """
    significant = digits.lstrip("0") or "0"
    if len(significant) > len(str(MAX_COUNT)) or int(significant) > MAX_COUNT:
        _note(warnings, f"{len(significant)}-digit count saturated at {MAX_COUNT}")
        return MAX_COUNT
    return int(significant)


def parse_row_items(row_text: str, warnings: list[str] | None = None) -> list[RowItem]:
    """
    Split one row interior into fragments.

    A bare ``space`` is an empty cell of span 1; every other fragment
    without an ``[S]:`` prefix has an undefined span.
    """
    items: list[RowItem] = []
    for fragment in split_safe(row_text, ","):
        match = _SPAN_PREFIX.match(fragment)
        if match:
            span = parse_count(match.group(1), warnings)
            items.append(RowItem(raw=match.group(2).strip(), explicit_span=span))
        elif fragment == SPACE:
            items.append(RowItem(raw=fragment, explicit_span=1))
        else:
            items.append(RowItem(raw=fragment))
    return items


def resolve_spans(
    items: list[RowItem], column_count: int, warnings: list[str] | None = None
) -> list[int]:
    """
    Compute the column span of every item in a row.

    Args:
        items: Parsed row fragments
        column_count: Declared column count of the layout
        warnings: Optional list collecting notes about dropped columns

    Returns:
        One span per item, each at least 1

    Examples:
        >>> resolve_spans([RowItem("a", 2), RowItem("b")], 3)
        [2, 1]
        >>> resolve_spans([RowItem("a"), RowItem("b"), RowItem("c")], 4)
        [1, 1, 1]
    """
    used = sum(item.explicit_span for item in items if item.explicit_span is not None)
    remaining = column_count - used
    undefined = [i for i, item in enumerate(items) if item.explicit_span is None]

    spans: list[int] = []
    for i, item in enumerate(items):
        if item.explicit_span is not None:
            span = item.explicit_span
        elif len(undefined) == 1 and i in (0, len(items) - 1):
            span = remaining
        else:
            span = remaining // len(undefined)
        spans.append(max(span, 1))

    if len(undefined) > 1 and remaining > 0 and remaining % len(undefined):
        _note(
            warnings,
            f"{remaining % len(undefined)} column(s) left unassigned: "
            f"{remaining} shared among {len(undefined)} cells",
        )
    return spans


def build_layout(
    column_count: int,
    rows: list[str],
    layout_id: str = "grid",
    warnings: list[str] | None = None,
) -> Layout:
    """
    Resolve grid row interiors into a finished Layout.

    Args:
        column_count: Declared column count shared by every row
        rows: Row interiors (the text between the braces), top to bottom
        layout_id: Render key of the layout; cell and element keys derive from it
        warnings: Optional list collecting notes about silent fallbacks

    Returns:
        Layout whose cells are row-major, with absorbed continuations removed
    """
    arena: list[_Slot] = []
    row_slots: list[list[int]] = []

    for r, row_text in enumerate(rows):
        items = parse_row_items(row_text, warnings)
        spans = resolve_spans(items, column_count, warnings)
        indices: list[int] = []
        for i, (item, span) in enumerate(zip(items, spans, strict=True)):
            content = None
            if item.kind == CellKind.CONTENT:
                element_id = f"{layout_id}-el-{r}-{i}"
                content = classify_element(item.raw, element_id) or Element.markdown(
                    item.raw, element_id
                )
            arena.append(
                _Slot(kind=item.kind, column_span=span, row=r, position=i, content=content)
            )
            indices.append(len(arena) - 1)
        row_slots.append(indices)

    placed = _place(arena, row_slots, column_count, warnings)
    _merge_continuations(arena, row_slots, placed, warnings)

    cells = [
        Cell(
            id=f"{layout_id}-cell-{slot.row}-{slot.position}",
            kind=slot.kind,
            column_span=slot.column_span,
            row_span=slot.row_span,
            content=slot.content,
        )
        for slot in arena
        if slot.kind != CellKind.CONTINUATION
    ]
    return Layout(id=layout_id, column_count=column_count, cells=cells)


def _place(
    arena: list[_Slot],
    row_slots: list[list[int]],
    column_count: int,
    warnings: list[str] | None,
) -> list[list[_Interval]]:
    """Lay each row's cells left to right, truncating at the last column."""
    rows: list[list[_Interval]] = []

    for r, indices in enumerate(row_slots):
        intervals: list[_Interval] = []
        col = 0
        for index in indices:
            slot = arena[index]
            if col < column_count:
                slot.column = col
                intervals.append(
                    _Interval(col, min(col + slot.column_span, column_count), index)
                )
            if col + slot.column_span > column_count:
                _note(
                    warnings,
                    f"row {r + 1}: cell {slot.position + 1} overflows "
                    f"{column_count} columns and was truncated",
                )
            col += slot.column_span
        rows.append(intervals)

    return rows


def _covering(intervals: list[_Interval], column: int) -> _Interval | None:
    for interval in intervals:
        if interval.start <= column < interval.end:
            return interval
    return None


def _merge_continuations(
    arena: list[_Slot],
    row_slots: list[list[int]],
    rows: list[list[_Interval]],
    warnings: list[str] | None,
) -> None:
    """Absorb each continuation into the matching cell directly above it."""
    for r, indices in enumerate(row_slots):
        for index in indices:
            slot = arena[index]
            if slot.kind != CellKind.CONTINUATION:
                continue

            above = None
            if r > 0 and slot.column is not None:
                above = _covering(rows[r - 1], slot.column)
            target = arena[above.index] if above is not None else None
            if (
                target is None
                or target.kind != CellKind.CONTENT
                or target.absorbed
                or target.column_span != slot.column_span
            ):
                column = "past the last column" if slot.column is None else slot.column + 1
                _note(
                    warnings,
                    f"row {r + 1}: continue at column {column} has no matching cell above",
                )
                continue

            target.row_span += 1
            slot.absorbed = True
            own = _covering(rows[r], slot.column)
            if own is not None:
                own.index = above.index


def _note(warnings: list[str] | None, message: str) -> None:
    logger.debug(message)
    if warnings is not None:
        warnings.append(message)
