#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marksage/ast/visitors.py
"""Visitor pattern implementation for AST traversal.

Every ``visit_*`` method of :class:`NodeVisitor` falls back to
:meth:`NodeVisitor.generic_visit`, so a subclass only implements the node
kinds it cares about. Extra positional arguments given to ``Node.accept``
arrive after the node.

"""

from __future__ import annotations

from typing import Any

from marksage.ast.nodes import (
    BlockQuote,
    Code,
    CodeBlock,
    Definition,
    Document,
    Emphasis,
    FootnoteDefinition,
    FootnoteReference,
    Heading,
    HTMLBlock,
    HTMLInline,
    Image,
    ImageReference,
    LineBreak,
    Link,
    LinkReference,
    List,
    ListItem,
    MathBlock,
    MathInline,
    Node,
    Paragraph,
    Strikethrough,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
    get_node_children,
)


class NodeVisitor:
    """Base class for AST node visitors.

    Subclasses override the visit_* methods for the node types they want to
    process. Unhandled node types are routed to :meth:`generic_visit`, which
    by default visits the node's children and returns None.

    Examples
    --------
    Simple visitor that counts list items:

        >>> class ItemCounter(NodeVisitor):
        ...     def __init__(self):
        ...         self.count = 0
        ...     def visit_list_item(self, node, *args):
        ...         self.count += 1
        ...         self.generic_visit(node)

    """

    def visit_document(self, node: Document, *args: Any) -> Any:
        """Visit a Document node."""
        return self.generic_visit(node, *args)

    def visit_heading(self, node: Heading, *args: Any) -> Any:
        """Visit a Heading node."""
        return self.generic_visit(node, *args)

    def visit_paragraph(self, node: Paragraph, *args: Any) -> Any:
        """Visit a Paragraph node."""
        return self.generic_visit(node, *args)

    def visit_code_block(self, node: CodeBlock, *args: Any) -> Any:
        """Visit a CodeBlock node."""
        return self.generic_visit(node, *args)

    def visit_block_quote(self, node: BlockQuote, *args: Any) -> Any:
        """Visit a BlockQuote node."""
        return self.generic_visit(node, *args)

    def visit_list(self, node: List, *args: Any) -> Any:
        """Visit a List node."""
        return self.generic_visit(node, *args)

    def visit_list_item(self, node: ListItem, *args: Any) -> Any:
        """Visit a ListItem node."""
        return self.generic_visit(node, *args)

    def visit_table(self, node: Table, *args: Any) -> Any:
        """Visit a Table node."""
        return self.generic_visit(node, *args)

    def visit_table_row(self, node: TableRow, *args: Any) -> Any:
        """Visit a TableRow node."""
        return self.generic_visit(node, *args)

    def visit_table_cell(self, node: TableCell, *args: Any) -> Any:
        """Visit a TableCell node."""
        return self.generic_visit(node, *args)

    def visit_thematic_break(self, node: ThematicBreak, *args: Any) -> Any:
        """Visit a ThematicBreak node."""
        return self.generic_visit(node, *args)

    def visit_html_block(self, node: HTMLBlock, *args: Any) -> Any:
        """Visit an HTMLBlock node."""
        return self.generic_visit(node, *args)

    def visit_definition(self, node: Definition, *args: Any) -> Any:
        """Visit a Definition node."""
        return self.generic_visit(node, *args)

    def visit_footnote_definition(self, node: FootnoteDefinition, *args: Any) -> Any:
        """Visit a FootnoteDefinition node."""
        return self.generic_visit(node, *args)

    def visit_math_block(self, node: MathBlock, *args: Any) -> Any:
        """Visit a MathBlock node."""
        return self.generic_visit(node, *args)

    def visit_text(self, node: Text, *args: Any) -> Any:
        """Visit a Text node."""
        return self.generic_visit(node, *args)

    def visit_emphasis(self, node: Emphasis, *args: Any) -> Any:
        """Visit an Emphasis node."""
        return self.generic_visit(node, *args)

    def visit_strong(self, node: Strong, *args: Any) -> Any:
        """Visit a Strong node."""
        return self.generic_visit(node, *args)

    def visit_strikethrough(self, node: Strikethrough, *args: Any) -> Any:
        """Visit a Strikethrough node."""
        return self.generic_visit(node, *args)

    def visit_code(self, node: Code, *args: Any) -> Any:
        """Visit a Code node."""
        return self.generic_visit(node, *args)

    def visit_link(self, node: Link, *args: Any) -> Any:
        """Visit a Link node."""
        return self.generic_visit(node, *args)

    def visit_link_reference(self, node: LinkReference, *args: Any) -> Any:
        """Visit a LinkReference node."""
        return self.generic_visit(node, *args)

    def visit_image(self, node: Image, *args: Any) -> Any:
        """Visit an Image node."""
        return self.generic_visit(node, *args)

    def visit_image_reference(self, node: ImageReference, *args: Any) -> Any:
        """Visit an ImageReference node."""
        return self.generic_visit(node, *args)

    def visit_line_break(self, node: LineBreak, *args: Any) -> Any:
        """Visit a LineBreak node."""
        return self.generic_visit(node, *args)

    def visit_html_inline(self, node: HTMLInline, *args: Any) -> Any:
        """Visit an HTMLInline node."""
        return self.generic_visit(node, *args)

    def visit_footnote_reference(self, node: FootnoteReference, *args: Any) -> Any:
        """Visit a FootnoteReference node."""
        return self.generic_visit(node, *args)

    def visit_math_inline(self, node: MathInline, *args: Any) -> Any:
        """Visit a MathInline node."""
        return self.generic_visit(node, *args)

    def generic_visit(self, node: Node, *args: Any) -> Any:
        """Fallback visitor for unhandled node types.

        The default implementation visits every child of the node (with the
        same extra arguments) and returns None.

        Parameters
        ----------
        node : Node
            The node to visit
        *args : Any
            Extra arguments passed along from ``accept``

        Returns
        -------
        Any
            Result of processing (default: None)

        """
        for child in get_node_children(node):
            child.accept(self, *args)
        return None


class TextCollector(NodeVisitor):
    """Visitor that gathers the literal text of a subtree.

    Text, inline code and inline math contribute their content; soft line
    breaks contribute a space. Everything else only contributes through its
    children.

    """

    def __init__(self) -> None:
        """Initialize an empty collector."""
        self.parts: list[str] = []

    def visit_text(self, node: Text, *args: Any) -> None:
        """Collect text content."""
        self.parts.append(node.content)

    def visit_code(self, node: Code, *args: Any) -> None:
        """Collect inline code content."""
        self.parts.append(node.content)

    def visit_math_inline(self, node: MathInline, *args: Any) -> None:
        """Collect inline math content."""
        self.parts.append(node.content)

    def visit_line_break(self, node: LineBreak, *args: Any) -> None:
        """Collect a line break as whitespace."""
        self.parts.append(" " if node.soft else "\n")


def extract_text(node: Node | list[Node]) -> str:
    """Extract the plain text of a node or node list.

    Parameters
    ----------
    node : Node or list of Node
        Subtree (or sibling list) to read

    Returns
    -------
    str
        Concatenated text content

    Examples
    --------
    >>> extract_text(Heading(level=2, content=[Text("Arch"), Strong(content=[Text("ived")])]))
    'Archived'

    """
    collector = TextCollector()
    nodes = node if isinstance(node, list) else [node]
    for item in nodes:
        item.accept(collector)
    return "".join(collector.parts)
