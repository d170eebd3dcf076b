"""
Kind categories for renderers and canvas selection.

The compiler never rejects a kind; these tables only tell a renderer how
a known kind behaves. Unknown kinds belong to no category.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum

from nuggt.core.ir import Document, Element, Layout


class KindCategory(str, Enum):
    """Behavioural family of an element kind."""

    DISPLAY = "display"  # Static content (cards, alerts, tables)
    VISUAL = "visual"  # Charts
    INPUT = "input"  # Collects a value under an input binding
    ACTION = "action"  # Submits an action trigger


DEFAULT_KIND_CATEGORIES: dict[KindCategory, frozenset[str]] = {
    KindCategory.DISPLAY: frozenset(
        {"card", "alert", "accordion", "accordion-group", "text", "table", "image"}
    ),
    KindCategory.VISUAL: frozenset({"line-chart", "bar-chart", "pie-chart"}),
    KindCategory.INPUT: frozenset(
        {"input", "calendar", "range-calendar", "date-picker", "time-picker"}
    ),
    KindCategory.ACTION: frozenset({"button", "alert-dialog"}),
}

KindTable = Mapping[KindCategory, frozenset[str]]


def category_of(
    kind: str, categories: KindTable | None = None
) -> KindCategory | None:
    """Return the category a kind belongs to, if any."""
    table = DEFAULT_KIND_CATEGORIES if categories is None else categories
    for category, kinds in table.items():
        if kind in kinds:
            return category
    return None


def is_canvasable(element: Element, categories: KindTable | None = None) -> bool:
    return category_of(element.kind, categories) in (KindCategory.DISPLAY, KindCategory.VISUAL)


def is_interactive(element: Element, categories: KindTable | None = None) -> bool:
    return category_of(element.kind, categories) in (KindCategory.INPUT, KindCategory.ACTION)


def is_markdown_layout(layout: Layout) -> bool:
    """True for a 1x1 layout wrapping a prose element."""
    if len(layout.cells) != 1:
        return False
    content = layout.cells[0].content
    return content is not None and content.is_markdown


def split_markdown(document: Document) -> tuple[list[Layout], list[Layout]]:
    """
    Separate UI blocks from prose blocks, keeping order within each.

    Returns:
        tuple of (ui_blocks, markdown_blocks)
    """
    ui: list[Layout] = []
    markdown: list[Layout] = []
    for block in document.blocks:
        (markdown if is_markdown_layout(block) else ui).append(block)
    return ui, markdown


def split_interactive(
    blocks: Iterable[Layout], categories: KindTable | None = None
) -> tuple[list[Layout], list[Layout]]:
    """
    Separate canvasable blocks from interactive ones.

    A block is canvasable when every content cell is a display or visual
    kind. Otherwise it is interactive if any cell is an input or action
    kind. Mixed blocks (e.g. unknown kinds next to display kinds) default
    to canvasable.

    Returns:
        tuple of (canvasable, interactive)
    """
    canvasable: list[Layout] = []
    interactive: list[Layout] = []

    for block in blocks:
        elements = list(block.elements())
        if all(is_canvasable(el, categories) for el in elements):
            canvasable.append(block)
        elif any(is_interactive(el, categories) for el in elements):
            interactive.append(block)
        else:
            canvasable.append(block)

    return canvasable, interactive
