"""
Document model for the Nuggt DSL.

A parsed DSL text is a ``Document``: an ordered list of ``Layout`` blocks.
Every block is a grid of ``Cell`` slots sharing a declared column count,
and every content cell carries one ``Element``. Freestanding elements and
markdown runs are wrapped in 1x1 layouts so consumers never special-case
"bare" nodes.

Identifiers are render keys only. They are derived from source position
and take no part in the structure of the document (see
``Document.without_ids``).
"""

from __future__ import annotations

from collections.abc import Iterator
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, model_validator

MARKDOWN_KIND = "markdown"


class ActionBinding(BaseModel):
    """Free-text action submitted when an actionable element fires."""

    model_config = {"frozen": True}

    mode: Literal["action"] = "action"
    trigger: str


class InputBinding(BaseModel):
    """Identifier an input element publishes its captured value under."""

    model_config = {"frozen": True}

    mode: Literal["input"] = "input"
    identifier: str


Binding = Annotated[ActionBinding | InputBinding, Field(discriminator="mode")]


class GroupItem(BaseModel):
    """One merged sibling inside a container element."""

    model_config = {"frozen": True}

    id: str = ""
    trigger: str = ""
    content: str = ""


class Element(BaseModel):
    """
    Typed leaf node of a document.

    ``kind`` is open-ended: unknown kinds are carried through untouched so
    they round-trip losslessly. The action/input binding is a single tagged
    field, so an element can never hold both.

    Attributes:
        id: Render key
        kind: Lower-cased kind tag (e.g. "card", "button", "markdown")
        properties: Opaque string property bag
        binding: Action trigger or input binding, if any
        markdown_body: Raw prose when the node is prose rather than a tagged element
        rationale: Explanation extracted from the ``highlight`` property
        group_items: Merged siblings, only for container elements
    """

    model_config = {"frozen": True}

    id: str = ""
    kind: str
    properties: dict[str, str] = Field(default_factory=dict)
    binding: Binding | None = None
    markdown_body: str | None = None
    rationale: str | None = None
    group_items: list[GroupItem] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_highlight_extracted(self) -> Element:
        """The highlight property always lives in ``rationale``."""
        if "highlight" in self.properties:
            raise ValueError("highlight must be stored as rationale, not as a property")
        return self

    @classmethod
    def markdown(cls, body: str, id: str = "") -> Element:
        """Build a prose element."""
        return cls(id=id, kind=MARKDOWN_KIND, markdown_body=body)

    @property
    def action_trigger(self) -> str | None:
        if isinstance(self.binding, ActionBinding):
            return self.binding.trigger
        return None

    @property
    def input_binding(self) -> str | None:
        if isinstance(self.binding, InputBinding):
            return self.binding.identifier
        return None

    @property
    def is_markdown(self) -> bool:
        return self.markdown_body is not None

    @property
    def is_container(self) -> bool:
        return bool(self.group_items)


class CellKind(str, Enum):
    """What occupies a layout slot."""

    CONTENT = "content"
    EMPTY = "empty"  # Occupies columns, renders nothing
    CONTINUATION = "continuation"  # Resolved away during layout


class Cell(BaseModel):
    """
    One slot in a layout.

    Attributes:
        id: Render key
        kind: Content, empty or continuation
        column_span: Number of columns covered
        row_span: Number of rows covered after vertical merges
        content: The element shown, present only for content cells
    """

    model_config = {"frozen": True}

    id: str = ""
    kind: CellKind
    column_span: int = Field(default=1, ge=1)
    row_span: int = Field(default=1, ge=1)
    content: Element | None = None

    @model_validator(mode="after")
    def validate_content(self) -> Cell:
        """Content is present exactly on content cells."""
        if self.kind == CellKind.CONTENT and self.content is None:
            raise ValueError("content cell requires an element")
        if self.kind != CellKind.CONTENT and self.content is not None:
            raise ValueError(f"{self.kind.value} cell cannot carry an element")
        return self


class Layout(BaseModel):
    """
    One grid block of a document.

    Cells are listed row-major after merge resolution; a cell spanning
    several rows appears once, at its top row.
    """

    model_config = {"frozen": True}

    id: str = ""
    column_count: int = Field(ge=1)
    cells: list[Cell] = Field(default_factory=list)

    @classmethod
    def single(cls, element: Element, id: str = "", cell_id: str = "") -> Layout:
        """Wrap a freestanding element in a 1x1 layout."""
        cell = Cell(id=cell_id, kind=CellKind.CONTENT, content=element)
        return cls(id=id, column_count=1, cells=[cell])

    @property
    def is_single(self) -> bool:
        """True for the 1x1 wrapping of a freestanding element."""
        return (
            self.column_count == 1
            and len(self.cells) == 1
            and self.cells[0].kind == CellKind.CONTENT
            and self.cells[0].row_span == 1
        )

    def elements(self) -> Iterator[Element]:
        for cell in self.cells:
            if cell.content is not None:
                yield cell.content


class Document(BaseModel):
    """Ordered sequence of layout blocks produced by one parse call."""

    model_config = {"frozen": True}

    blocks: list[Layout] = Field(default_factory=list)

    def elements(self) -> Iterator[Element]:
        for block in self.blocks:
            yield from block.elements()

    def without_ids(self) -> dict[str, Any]:
        """Structural dump with every render key removed."""
        return self.model_dump(mode="json", exclude=_RENDER_KEYS)


_ELEMENT_KEYS: dict[str, Any] = {"id": True, "group_items": {"__all__": {"id": True}}}
_RENDER_KEYS: dict[str, Any] = {
    "blocks": {
        "__all__": {
            "id": True,
            "cells": {"__all__": {"id": True, "content": _ELEMENT_KEYS}},
        }
    }
}
