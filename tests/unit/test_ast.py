#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Unit tests for AST nodes, visitors and transformers."""

import pytest

from marksage.ast import (
    Code,
    Document,
    Emphasis,
    Heading,
    LineBreak,
    List,
    ListItem,
    NodeTransformer,
    NodeVisitor,
    Paragraph,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    TextCollector,
    extract_nodes,
    extract_text,
    get_node_children,
    replace_node_children,
    transform_document,
)


def _checklist() -> Document:
    return Document(
        children=[
            Heading(level=1, content=[Text("Tasks")]),
            List(
                ordered=False,
                items=[
                    ListItem(children=[Paragraph(content=[Text("one")])], task_status="checked"),
                    ListItem(
                        children=[
                            Paragraph(content=[Text("two")]),
                            List(ordered=False, items=[ListItem(children=[Paragraph(content=[Text("three")])])]),
                        ],
                        task_status="unchecked",
                    ),
                ],
            ),
        ]
    )


@pytest.mark.unit
class TestNodes:
    """Test node construction and child access."""

    def test_heading_level_bounds(self) -> None:
        """Heading levels outside 1-6 are rejected."""
        with pytest.raises(ValueError):
            Heading(level=0)
        with pytest.raises(ValueError):
            Heading(level=7)
        assert Heading(level=6).level == 6

    def test_list_item_task_flag(self) -> None:
        """Only items with a checkbox are tasks."""
        assert ListItem(task_status="checked").is_task
        assert ListItem(task_status="unchecked").is_task
        assert not ListItem().is_task

    def test_get_children_of_containers(self) -> None:
        """Block, inline, list and table containers expose their children."""
        doc = _checklist()
        assert len(get_node_children(doc)) == 2
        assert get_node_children(doc.children[0]) == [Text("Tasks")]
        assert len(get_node_children(doc.children[1])) == 2

        header = TableRow(cells=[TableCell(content=[Text("h")])], is_header=True)
        row = TableRow(cells=[TableCell(content=[Text("c")])])
        table = Table(rows=[row], header=header, alignments=[None])
        assert get_node_children(table) == [header, row]

    def test_leaf_has_no_children(self) -> None:
        """Leaf nodes report no children."""
        assert get_node_children(Text("x")) == []
        assert get_node_children(Code("x")) == []

    def test_replace_children_returns_copy(self) -> None:
        """Replacing children leaves the original node alone."""
        para = Paragraph(content=[Text("a")])
        new_para = replace_node_children(para, [Text("b")])
        assert para.content == [Text("a")]
        assert new_para.content == [Text("b")]

    def test_replace_list_children_rejects_non_items(self) -> None:
        """A list can only hold list items."""
        with pytest.raises(ValueError, match="ListItem"):
            replace_node_children(List(ordered=False), [Paragraph(content=[Text("x")])])

    def test_replace_table_children_splits_header(self) -> None:
        """The header row is recognised by its flag."""
        header = TableRow(cells=[], is_header=True)
        body = TableRow(cells=[])
        table = replace_node_children(Table(alignments=[]), [header, body])
        assert table.header is header
        assert table.rows == [body]


@pytest.mark.unit
class TestVisitors:
    """Test the visitor base class and text extraction."""

    def test_generic_visit_reaches_every_item(self) -> None:
        """Unhandled nodes still have their children visited."""

        class ItemCounter(NodeVisitor):
            def __init__(self) -> None:
                self.count = 0

            def visit_list_item(self, node, *args):
                self.count += 1
                return self.generic_visit(node, *args)

        counter = ItemCounter()
        _checklist().accept(counter)
        assert counter.count == 3

    def test_extra_arguments_are_forwarded(self) -> None:
        """Arguments given to accept reach the visit method."""

        class Recorder(NodeVisitor):
            def __init__(self) -> None:
                self.seen = []

            def visit_text(self, node, *args):
                self.seen.append((node.content, args))

        recorder = Recorder()
        Paragraph(content=[Text("a"), Strong(content=[Text("b")])]).accept(recorder, "ctx")
        assert recorder.seen == [("a", ("ctx",)), ("b", ("ctx",))]

    def test_extract_text_flattens_formatting(self) -> None:
        """Formatting is ignored and code content kept."""
        nodes = [Text("Arch"), Emphasis(content=[Text("iv")]), Code("ed")]
        assert extract_text(nodes) == "Archived"

    def test_extract_text_line_breaks(self) -> None:
        """Soft breaks read as spaces, hard breaks as newlines."""
        para = Paragraph(content=[Text("a"), LineBreak(soft=True), Text("b"), LineBreak(), Text("c")])
        assert extract_text(para) == "a b\nc"

    def test_text_collector_accumulates_across_nodes(self) -> None:
        """One collector can read several subtrees in turn."""
        collector = TextCollector()
        Heading(level=1, content=[Text("Title")]).accept(collector)
        Paragraph(content=[Code("x"), Text(" = 1")]).accept(collector)
        assert collector.parts == ["Title", "x", " = 1"]


@pytest.mark.unit
class TestTransformers:
    """Test copying transformers."""

    def test_identity_transform_copies_tree(self) -> None:
        """The base transformer rebuilds an equal tree."""
        doc = _checklist()
        result = transform_document(doc, NodeTransformer())
        assert result == doc
        assert result is not doc
        assert result.children[1] is not doc.children[1]

    def test_transform_replaces_text(self) -> None:
        """Only the overridden node kind changes."""

        class Shout(NodeTransformer):
            def visit_text(self, node, *args):
                return Text(node.content.upper())

        doc = _checklist()
        result = transform_document(doc, Shout())
        assert extract_text(result.children[0]) == "TASKS"
        assert extract_text(doc.children[0]) == "Tasks"
        assert result.children[1].items[0].task_status == "checked"

    def test_returning_none_drops_node(self) -> None:
        """Visit methods can remove nodes from their parent."""

        class DropHeadings(NodeTransformer):
            def visit_heading(self, node, *args):
                return None

        result = transform_document(_checklist(), DropHeadings())
        assert not extract_nodes(result, Heading)

    def test_root_must_stay_a_document(self) -> None:
        """Replacing the root with another node kind is an error."""

        class Replace(NodeTransformer):
            def visit_document(self, node, *args):
                return Paragraph(content=[])

        with pytest.raises(TypeError):
            transform_document(_checklist(), Replace())

    def test_extract_nodes_in_document_order(self) -> None:
        """Nodes are collected pre-order."""
        texts = extract_nodes(_checklist(), Text)
        assert [t.content for t in texts] == ["Tasks", "one", "two", "three"]
