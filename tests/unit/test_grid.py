"""Tests for grid span resolution, placement and continuation merging."""

import pytest

from nuggt.core.grid import (
    MAX_COUNT,
    RowItem,
    build_layout,
    parse_count,
    parse_row_items,
    resolve_spans,
)
from nuggt.core.ir import CellKind


def _spans(layout):
    return [cell.column_span for cell in layout.cells]


def _kinds(layout):
    return [cell.content.kind if cell.content else cell.kind.value for cell in layout.cells]


class TestParseRowItems:
    def test_fragment_kinds_and_spans(self) -> None:
        items = parse_row_items("[2]: space, space, continue, card: (a: 1, b: 2)")

        assert [item.raw for item in items] == ["space", "space", "continue", "card: (a: 1, b: 2)"]
        assert [item.explicit_span for item in items] == [2, 1, None, None]
        assert [item.kind for item in items] == [
            CellKind.EMPTY,
            CellKind.EMPTY,
            CellKind.CONTINUATION,
            CellKind.CONTENT,
        ]

    def test_explicit_span_prefix_is_stripped(self) -> None:
        items = parse_row_items("[3]:   button: [(label: Go), prompt: x]")
        assert items == [RowItem(raw="button: [(label: Go), prompt: x]", explicit_span=3)]


class TestResolveSpans:
    """Sharing leftover columns among span-less cells."""

    def test_single_undefined_at_end_takes_remaining(self) -> None:
        items = [RowItem("a", 3), RowItem("b")]
        assert resolve_spans(items, 4) == [3, 1]

    def test_single_undefined_at_start_takes_remaining(self) -> None:
        items = [RowItem("a"), RowItem("b", 1)]
        assert resolve_spans(items, 4) == [3, 1]

    def test_single_undefined_in_middle_gets_floor_share(self) -> None:
        items = [RowItem("a", 1), RowItem("b"), RowItem("c", 1)]
        assert resolve_spans(items, 5) == [1, 3, 1]

    def test_even_share(self) -> None:
        items = [RowItem("a"), RowItem("b")]
        assert resolve_spans(items, 2) == [1, 1]

    def test_remainder_is_dropped_and_reported(self) -> None:
        warnings: list[str] = []
        items = [RowItem("a"), RowItem("b"), RowItem("c")]

        assert resolve_spans(items, 4, warnings) == [1, 1, 1]
        assert len(warnings) == 1
        assert "1 column(s) left unassigned" in warnings[0]

    def test_spans_never_drop_below_one(self) -> None:
        items = [RowItem("a", 3), RowItem("b"), RowItem("c")]
        assert resolve_spans(items, 3) == [3, 1, 1]

    def test_explicit_zero_is_clamped(self) -> None:
        assert resolve_spans([RowItem("a", 0), RowItem("b", 2)], 3) == [1, 2]

    def test_no_warning_without_remainder(self) -> None:
        warnings: list[str] = []
        resolve_spans([RowItem("a"), RowItem("b")], 4, warnings)
        assert warnings == []


class TestBuildLayout:
    """End-to-end grid resolution."""

    def test_two_equal_columns(self) -> None:
        layout = build_layout(2, ["card: (a: 1), card: (a: 2)"])

        assert layout.column_count == 2
        assert _spans(layout) == [1, 1]
        assert [cell.kind for cell in layout.cells] == [CellKind.CONTENT, CellKind.CONTENT]
        assert [cell.content.properties["a"] for cell in layout.cells] == ["1", "2"]

    def test_row_span_from_continue(self) -> None:
        layout = build_layout(
            3,
            [
                "[2]: card: (a:1), [1]: button: (label: Go)",
                "[2]: continue, [1]: alert: (title: Hi)",
            ],
        )

        assert _kinds(layout) == ["card", "button", "alert"]
        card, button, alert = layout.cells
        assert (card.column_span, card.row_span) == (2, 2)
        assert (button.column_span, button.row_span) == (1, 1)
        assert (alert.column_span, alert.row_span) == (1, 1)

    def test_continue_chain_grows_row_span(self) -> None:
        layout = build_layout(2, ["[2]: card: (a: 1)", "[2]: continue", "[2]: continue"])

        assert len(layout.cells) == 1
        assert layout.cells[0].row_span == 3

    def test_span_mismatch_drops_continue(self) -> None:
        warnings: list[str] = []
        layout = build_layout(2, ["card: (a: 1), card: (a: 2)", "[2]: continue"], warnings=warnings)

        assert len(layout.cells) == 2
        assert all(cell.row_span == 1 for cell in layout.cells)
        assert any("no matching cell above" in w for w in warnings)

    def test_continue_in_first_row_is_dropped(self) -> None:
        warnings: list[str] = []
        layout = build_layout(2, ["continue, card: (a: 1)"], warnings=warnings)

        assert _kinds(layout) == ["card"]
        assert len(warnings) == 1

    def test_continue_below_space_is_dropped(self) -> None:
        layout = build_layout(2, ["space, space", "continue, continue"])

        assert [cell.kind for cell in layout.cells] == [CellKind.EMPTY, CellKind.EMPTY]
        assert all(cell.row_span == 1 for cell in layout.cells)

    def test_continuations_never_reach_output(self) -> None:
        layout = build_layout(
            3,
            [
                "a: (x: 1), b: (x: 2), c: (x: 3)",
                "continue, continue, continue",
                "continue, x: (y: 1)",
            ],
        )
        assert all(cell.kind != CellKind.CONTINUATION for cell in layout.cells)

    def test_space_cells_are_kept(self) -> None:
        layout = build_layout(3, ["space, card: (a: 1)"])

        assert [cell.kind for cell in layout.cells] == [CellKind.EMPTY, CellKind.CONTENT]
        assert _spans(layout) == [1, 2]
        assert layout.cells[0].content is None

    def test_wide_space(self) -> None:
        layout = build_layout(3, ["[2]: space, card: (a: 1)"])
        assert _spans(layout) == [2, 1]

    def test_unrecognised_fragment_becomes_markdown(self) -> None:
        layout = build_layout(2, ["Hello there, card: (a: 1)"])

        first = layout.cells[0].content
        assert first.is_markdown
        assert first.markdown_body == "Hello there"

    def test_overflowing_cell_is_truncated_not_wrapped(self) -> None:
        warnings: list[str] = []
        layout = build_layout(2, ["[2]: card: (a: 1), text: (b: 2)"], warnings=warnings)

        assert _kinds(layout) == ["card", "text"]
        assert any("truncated" in w for w in warnings)

    def test_empty_row(self) -> None:
        layout = build_layout(2, [""])
        assert layout.cells == []
        assert layout.column_count == 2

    def test_render_keys_derive_from_layout_id(self) -> None:
        layout = build_layout(2, ["card: (a: 1), card: (a: 2)"], layout_id="grid-5")

        assert layout.id == "grid-5"
        assert [cell.id for cell in layout.cells] == ["grid-5-cell-0-0", "grid-5-cell-0-1"]
        assert layout.cells[1].content.id == "grid-5-el-0-1"

    def test_grid_cells_are_not_grouped(self) -> None:
        layout = build_layout(
            2, ["accordion: (trigger: A, content: 1), accordion: (trigger: B, content: 2)"]
        )
        assert _kinds(layout) == ["accordion", "accordion"]

    @pytest.mark.parametrize(
        "row",
        [
            "a: (x: 1), b: (x: 2), c: (x: 3)",
            "[1]: a: (x: 1), space, [2]: b: (x: 2)",
            "space, [2]: a: (x: 1), b: (x: 2)",
        ],
    )
    def test_spans_fit_the_declared_columns(self, row: str) -> None:
        layout = build_layout(4, [row])
        assert sum(_spans(layout)) <= layout.column_count


class TestLargeCounts:
    """Column counts and spans are bounded, and placement cost follows the cells."""

    def test_leading_zeros(self) -> None:
        assert parse_count("0003") == 3
        assert parse_count("000") == 0

    def test_count_at_the_limit_is_kept(self) -> None:
        warnings: list[str] = []
        assert parse_count(str(MAX_COUNT), warnings) == MAX_COUNT
        assert warnings == []

    def test_long_digit_run_saturates(self) -> None:
        warnings: list[str] = []
        assert parse_count("9" * 5000, warnings) == MAX_COUNT
        assert warnings == [f"5000-digit count saturated at {MAX_COUNT}"]

    def test_huge_explicit_span_is_truncated(self) -> None:
        warnings: list[str] = []
        layout = build_layout(2, ["[99999999999]: card: (a: 1)"], warnings=warnings)

        assert _kinds(layout) == ["card"]
        assert layout.cells[0].column_span == MAX_COUNT
        assert any("saturated" in w for w in warnings)
        assert any("truncated" in w for w in warnings)

    def test_huge_column_count(self) -> None:
        layout = build_layout(999_999_999, ["space", "card: (a: 1), [5]: continue"])

        assert _kinds(layout) == ["empty", "card"]
        assert layout.cells[1].column_span == 999_999_994

    def test_huge_spans_still_merge(self) -> None:
        layout = build_layout(
            MAX_COUNT, [f"[{MAX_COUNT}]: card: (a: 1)", f"[{MAX_COUNT}]: continue"]
        )

        assert len(layout.cells) == 1
        assert layout.cells[0].row_span == 2

    def test_continue_past_last_column_is_dropped(self) -> None:
        warnings: list[str] = []
        layout = build_layout(
            2, ["card: (a: 1), text: (b: 2)", "[2]: card: (c: 3), continue"], warnings=warnings
        )

        assert all(cell.row_span == 1 for cell in layout.cells)
        assert any("past the last column" in w for w in warnings)
