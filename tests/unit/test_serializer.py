"""Tests for Document to DSL text serialization."""

import pytest

from nuggt.core.assembler import parse_document
from nuggt.core.config import CompilerConfig
from nuggt.core.ir import (
    ActionBinding,
    Document,
    Element,
    GroupItem,
    InputBinding,
    Layout,
)
from nuggt.core.serializer import serialize_document, serialize_element, serialize_layout


class TestSerializeElement:
    def test_plain_element_quotes_structural_values(self) -> None:
        element = Element(kind="card", properties={"title": "Hi, there", "content": "X"})
        assert serialize_element(element) == 'card: (title: "<Hi, there>", content: X)'

    def test_rationale_written_back_as_highlight(self) -> None:
        element = Element(kind="card", properties={"a": "1"}, rationale="Why: x")
        assert serialize_element(element) == 'card: (a: 1, highlight: "<Why: x>")'

    def test_action_binding(self) -> None:
        element = Element(
            kind="button",
            properties={"label": "Go"},
            binding=ActionBinding(trigger="Submit <emailId>"),
        )
        assert serialize_element(element) == "button: [ (label: Go), prompt: Submit <emailId> ]"

    def test_action_trigger_is_written_raw(self) -> None:
        element = Element(kind="button", binding=ActionBinding(trigger="Save, then close"))
        assert serialize_element(element) == "button: [ (), prompt: Save, then close ]"

    def test_action_trigger_newline_is_escaped(self) -> None:
        element = Element(kind="button", binding=ActionBinding(trigger="Save\nthen close"))
        assert serialize_element(element) == "button: [ (), prompt: Save\\nthen close ]"

    def test_input_binding(self) -> None:
        element = Element(
            kind="input",
            properties={"placeholder": "Email"},
            binding=InputBinding(identifier="emailId"),
        )
        assert serialize_element(element) == "input: [ (placeholder: Email), emailId ]"

    def test_markdown_is_written_raw(self) -> None:
        assert serialize_element(Element.markdown("Hello\nWorld")) == "Hello\nWorld"

    def test_container_is_written_as_member_lines(self) -> None:
        container = Element(
            kind="accordion-group",
            group_items=[
                GroupItem(trigger="Q1", content="A, 1"),
                GroupItem(trigger="Q2", content="A2"),
            ],
        )
        assert serialize_element(container) == (
            'accordion: (trigger: Q1, content: "<A, 1>")\n'
            "accordion: (trigger: Q2, content: A2)"
        )

    def test_container_uses_configured_member_kind(self) -> None:
        config = CompilerConfig(group_kinds={"tab": "tab-group"})
        container = Element(kind="tab-group", group_items=[GroupItem(trigger="A", content="1")])
        assert serialize_element(container, config) == "tab: (trigger: A, content: 1)"


class TestSerializeLayout:
    def test_single_layout_is_bare_element(self) -> None:
        layout = Layout.single(Element(kind="card", properties={"a": "1"}))
        assert serialize_layout(layout) == "card: (a: 1)"

    def test_equal_columns(self) -> None:
        doc = parse_document("[2]: { card: (a: 1), card: (a: 2) }")
        assert serialize_layout(doc.blocks[0]) == "[2]: { card: (a: 1), card: (a: 2) }"

    def test_row_span_written_as_continue(self) -> None:
        doc = parse_document(
            "[3]: { [2]: card: (a:1), [1]: button: (label: Go) }\n"
            "[3]: { [2]: continue, [1]: alert: (title: Hi) }"
        )
        assert serialize_layout(doc.blocks[0]) == (
            "[3]: { [2]: card: (a: 1), button: (label: Go) }\n"
            "[3]: { [2]: continue, alert: (title: Hi) }"
        )

    def test_lone_narrow_cell_keeps_explicit_span(self) -> None:
        doc = parse_document("[3]: { [1]: card: (a: 1) }")
        assert serialize_layout(doc.blocks[0]) == "[3]: { [1]: card: (a: 1) }"

    def test_spaces(self) -> None:
        doc = parse_document("[3]: { space, card: (a: 1), space }")
        assert serialize_layout(doc.blocks[0]) == "[3]: { space, card: (a: 1), space }"

    def test_wide_space(self) -> None:
        doc = parse_document("[3]: { [2]: space, card: (a: 1) }")
        assert serialize_layout(doc.blocks[0]) == "[3]: { [2]: space, card: (a: 1) }"

    def test_trailing_row_of_continuations(self) -> None:
        doc = parse_document("[2]: { card: (a: 1), text: (b: 2) }\n[2]: { continue, continue }")
        assert serialize_layout(doc.blocks[0]) == (
            "[2]: { card: (a: 1), text: (b: 2) }\n[2]: { [1]: continue, [1]: continue }"
        )

    def test_lone_group_member_keeps_its_row(self) -> None:
        doc = parse_document("[1]: { accordion: (trigger: A, content: B) }")
        assert serialize_layout(doc.blocks[0]) == "[1]: { accordion: (trigger: A, content: B) }"

    def test_empty_layout_keeps_its_column_count(self) -> None:
        doc = parse_document("[2]: { continue }")
        assert serialize_layout(doc.blocks[0]) == "[2]: {  }"


class TestSerializeDocument:
    def test_prose_cell_next_to_prose_keeps_its_row(self) -> None:
        doc = parse_document("[1]: { Hello }\nWorld")
        assert serialize_document(doc) == "[1]: { Hello }\nWorld"

    def test_lone_prose_cell_is_written_bare(self) -> None:
        doc = parse_document("[1]: { Hello }\ncard: (a: 1)")
        assert serialize_document(doc) == "Hello\ncard: (a: 1)"

    def test_prose_between_one_column_grids_stays_bare(self) -> None:
        doc = parse_document("[1]: { card: (a: 1) }\nNote\n[1]: { card: (a: 2) }")
        assert len(doc.blocks) == 3
        assert serialize_document(doc).splitlines()[1] == "Note"


ROUND_TRIP_SOURCES = [
    'card: (title: "Hi, there", content: X, highlight: "<Why: I did this>")',
    "[2]: { card: (a: 1), card: (a: 2) }",
    "[3]: { [2]: card: (a:1), [1]: button: (label: Go) }\n"
    "[3]: { [2]: continue, [1]: alert: (title: Hi) }",
    "Some plain text\nMore text",
    "button: [(label: Go), prompt: Submit <emailId>]",
    "input: [(placeholder: Your email), emailId]",
    '# Title\ncard: (title: Hello)\n[3]: { space, [2]: text: (body: "<a, b>") }\nFooter',
    "[4]: { [2]: card: (a: 1), space, button: [(label: Go), prompt: Run <x>] }\n"
    '[4]: { [2]: continue, [2]: alert: (title: "<Heads up: read>") }',
    "accordion: (trigger: Q1, content: A1)\naccordion: (trigger: Q2, content: A2)",
    'text: (body: "<Line 1\\nLine 2>")',
    "[4]: { a: (x: 1), b: (x: 2), c: (x: 3) }",
    "[1]: { Hello }\nWorld",
    "Intro\n[1]: { Hi }",
    "[1]: { Hello }\nWorld\ncard: (a: 1)",
    "[1]: { accordion: (trigger: A, content: B) }",
    'button: [(label: Go), prompt: "Say hi"]',
    "button: [(label: Go), prompt: Save, then close]",
    "[2]: { continue }",
    "[2]: { [99999999999]: card: (a: 1) }",
]


class TestRoundTrip:
    """Serialized text parses back to the same structure."""

    @pytest.mark.parametrize("source", ROUND_TRIP_SOURCES)
    def test_structure_survives(self, source: str) -> None:
        document = parse_document(source)
        reparsed = parse_document(serialize_document(document))
        assert reparsed.without_ids() == document.without_ids()

    @pytest.mark.parametrize("source", ROUND_TRIP_SOURCES)
    def test_formatting_is_idempotent(self, source: str) -> None:
        once = serialize_document(parse_document(source))
        assert serialize_document(parse_document(once)) == once

    def test_empty_document(self) -> None:
        assert serialize_document(Document()) == ""

    def test_dashboard(self, dashboard_source: str) -> None:
        document = parse_document(dashboard_source)
        text = serialize_document(document)

        assert text.splitlines()[0] == "# Dashboard"
        assert parse_document(text).without_ids() == document.without_ids()
