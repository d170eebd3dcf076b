"""
Cloning blocks onto a longer-lived canvas.

Parsed documents carry positional render keys (``el-3``, ``grid-0``), so
blocks from two parse calls would collide once merged. Cloning re-prefixes
every key; the source blocks are left untouched.
"""

from __future__ import annotations

from collections.abc import Iterable

from nuggt.core.ir import Element, Layout


def _prefixed(prefix: str, key: str) -> str:
    return f"{prefix}-{key}"


def clone_element(element: Element, prefix: str) -> Element:
    """Copy an element with its own key and its group item keys prefixed."""
    return element.model_copy(
        update={
            "id": _prefixed(prefix, element.id),
            "properties": dict(element.properties),
            "group_items": [
                item.model_copy(update={"id": _prefixed(prefix, item.id)})
                for item in element.group_items
            ],
        }
    )


def clone_layout(layout: Layout, prefix: str) -> Layout:
    """Copy a layout, re-prefixing the layout, cell and element keys."""
    cells = [
        cell.model_copy(
            update={
                "id": _prefixed(prefix, cell.id),
                "content": clone_element(cell.content, prefix) if cell.content else None,
            }
        )
        for cell in layout.cells
    ]
    return layout.model_copy(update={"id": _prefixed(prefix, layout.id), "cells": cells})


def clone_blocks(blocks: Iterable[Layout], prefix: str) -> list[Layout]:
    return [clone_layout(block, prefix) for block in blocks]
