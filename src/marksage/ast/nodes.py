#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marksage/ast/nodes.py
"""AST node classes for vault document representation.

This module defines the node hierarchy used to represent a parsed markdown
note. Each node represents a structural or inline element of the document.

Node Hierarchy
--------------
All nodes inherit from the base Node class and support the visitor pattern.
``accept`` forwards any extra positional arguments to the visitor, which is
how the markdown renderer threads its rendering context through the tree.

Block-level nodes represent structural document elements:
    - Document, Heading, Paragraph, CodeBlock, BlockQuote
    - List, ListItem, Table, TableRow, TableCell
    - ThematicBreak, HTMLBlock, Definition
    - FootnoteDefinition, MathBlock

Inline nodes represent text formatting:
    - Text, Emphasis, Strong, Strikethrough, Code
    - Link, LinkReference, Image, ImageReference, LineBreak
    - HTMLInline, FootnoteReference, MathInline

Nodes are plain data. Transforms never mutate a tree in place; they build
a new one, so no two documents ever share a subtree.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Any, Literal, Optional

from marksage.constants import TableAlignment

TaskStatus = Literal["checked", "unchecked"]


class Node(ABC):
    """Base class for all AST nodes.

    All document nodes inherit from this base class and support the visitor
    pattern for traversal and rendering.

    """

    @abstractmethod
    def accept(self, visitor: Any, *args: Any) -> Any:
        """Accept a visitor for processing this node.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_* methods
        *args : Any
            Extra arguments forwarded to the visit method

        Returns
        -------
        Any
            Result from the visitor's processing

        """


# ============================================================================
# Block-level Nodes
# ============================================================================


@dataclass
class Document(Node):
    """Root document node containing all other nodes.

    Parameters
    ----------
    children : list of Node, default = empty list
        Block-level nodes in the document

    """

    children: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any, *args: Any) -> Any:
        """Accept a visitor for processing this document."""
        return visitor.visit_document(self, *args)


@dataclass
class Heading(Node):
    """ATX heading node.

    Parameters
    ----------
    level : int
        Heading level (1-6)
    content : list of Node, default = empty list
        Inline content of the heading

    """

    level: int
    content: list[Node] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate the heading level."""
        if not 1 <= self.level <= 6:
            raise ValueError(f"Heading level must be between 1 and 6, got {self.level}")

    def accept(self, visitor: Any, *args: Any) -> Any:
        """Accept a visitor for processing this heading."""
        return visitor.visit_heading(self, *args)


@dataclass
class Paragraph(Node):
    """Paragraph node containing inline content."""

    content: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any, *args: Any) -> Any:
        """Accept a visitor for processing this paragraph."""
        return visitor.visit_paragraph(self, *args)


@dataclass
class CodeBlock(Node):
    """Fenced or indented code block.

    Parameters
    ----------
    content : str
        Literal code, without the final newline
    language : str or None, default = None
        Info string language tag

    """

    content: str
    language: Optional[str] = None

    def accept(self, visitor: Any, *args: Any) -> Any:
        """Accept a visitor for processing this code block."""
        return visitor.visit_code_block(self, *args)


@dataclass
class BlockQuote(Node):
    """Block quote containing block-level children."""

    children: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any, *args: Any) -> Any:
        """Accept a visitor for processing this block quote."""
        return visitor.visit_block_quote(self, *args)


@dataclass
class List(Node):
    """List node (ordered or unordered).

    Parameters
    ----------
    ordered : bool
        True for ordered lists, False for unordered
    items : list of ListItem, default = empty list
        List items; a list never holds anything but ListItem nodes
    start : int, default = 1
        Starting number for ordered lists

    """

    ordered: bool
    items: list[ListItem] = field(default_factory=list)
    start: int = 1

    def accept(self, visitor: Any, *args: Any) -> Any:
        """Accept a visitor for processing this list."""
        return visitor.visit_list(self, *args)


@dataclass
class ListItem(Node):
    """List item node containing block content.

    Parameters
    ----------
    children : list of Node, default = empty list
        Block-level nodes in the list item (paragraphs, nested lists, ...)
    task_status : {'checked', 'unchecked'} or None, default = None
        Checkbox state; None marks a plain item without a checkbox

    """

    children: list[Node] = field(default_factory=list)
    task_status: Optional[TaskStatus] = None

    @property
    def is_task(self) -> bool:
        """Whether this item carries a checkbox."""
        return self.task_status is not None

    def accept(self, visitor: Any, *args: Any) -> Any:
        """Accept a visitor for processing this list item."""
        return visitor.visit_list_item(self, *args)


@dataclass
class Table(Node):
    """GFM table node.

    Parameters
    ----------
    rows : list of TableRow, default = empty list
        Body rows (excluding header); rows may be shorter than the header
    header : TableRow or None, default = None
        Header row
    alignments : list, default = empty list
        Column alignments ('left', 'center', 'right', or None)

    """

    rows: list[TableRow] = field(default_factory=list)
    header: Optional[TableRow] = None
    alignments: list[Optional[TableAlignment]] = field(default_factory=list)

    def accept(self, visitor: Any, *args: Any) -> Any:
        """Accept a visitor for processing this table."""
        return visitor.visit_table(self, *args)


@dataclass
class TableRow(Node):
    """Table row node containing cells."""

    cells: list[TableCell] = field(default_factory=list)
    is_header: bool = False

    def accept(self, visitor: Any, *args: Any) -> Any:
        """Accept a visitor for processing this table row."""
        return visitor.visit_table_row(self, *args)


@dataclass
class TableCell(Node):
    """Table cell node containing inline content."""

    content: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any, *args: Any) -> Any:
        """Accept a visitor for processing this table cell."""
        return visitor.visit_table_cell(self, *args)


@dataclass
class ThematicBreak(Node):
    """Thematic break (horizontal rule)."""

    def accept(self, visitor: Any, *args: Any) -> Any:
        """Accept a visitor for processing this thematic break."""
        return visitor.visit_thematic_break(self, *args)


@dataclass
class HTMLBlock(Node):
    """Raw HTML block, kept verbatim."""

    content: str

    def accept(self, visitor: Any, *args: Any) -> Any:
        """Accept a visitor for processing this HTML block."""
        return visitor.visit_html_block(self, *args)


@dataclass
class Definition(Node):
    """Link reference definition (``[id]: url "title"``).

    Parameters
    ----------
    identifier : str
        Reference label as written in the source
    url : str
        Destination url
    title : str or None, default = None
        Optional link title

    """

    identifier: str
    url: str
    title: Optional[str] = None

    def accept(self, visitor: Any, *args: Any) -> Any:
        """Accept a visitor for processing this definition."""
        return visitor.visit_definition(self, *args)


@dataclass
class FootnoteDefinition(Node):
    """Footnote definition with block-level children.

    Parameters
    ----------
    identifier : str
        Footnote label (without the ``^``)
    children : list of Node, default = empty list
        Blocks making up the footnote body

    """

    identifier: str
    children: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any, *args: Any) -> Any:
        """Accept a visitor for processing this footnote definition."""
        return visitor.visit_footnote_definition(self, *args)


@dataclass
class MathBlock(Node):
    """Display math block (``$$ ... $$``)."""

    content: str

    def accept(self, visitor: Any, *args: Any) -> Any:
        """Accept a visitor for processing this math block."""
        return visitor.visit_math_block(self, *args)


# ============================================================================
# Inline Nodes
# ============================================================================


@dataclass
class Text(Node):
    """Plain text run."""

    content: str

    def accept(self, visitor: Any, *args: Any) -> Any:
        """Accept a visitor for processing this text node."""
        return visitor.visit_text(self, *args)


@dataclass
class Emphasis(Node):
    """Emphasis (italic) inline node."""

    content: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any, *args: Any) -> Any:
        """Accept a visitor for processing this emphasis node."""
        return visitor.visit_emphasis(self, *args)


@dataclass
class Strong(Node):
    """Strong (bold) inline node."""

    content: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any, *args: Any) -> Any:
        """Accept a visitor for processing this strong node."""
        return visitor.visit_strong(self, *args)


@dataclass
class Strikethrough(Node):
    """Strikethrough (GFM delete) inline node."""

    content: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any, *args: Any) -> Any:
        """Accept a visitor for processing this strikethrough node."""
        return visitor.visit_strikethrough(self, *args)


@dataclass
class Code(Node):
    """Inline code span."""

    content: str

    def accept(self, visitor: Any, *args: Any) -> Any:
        """Accept a visitor for processing this code span."""
        return visitor.visit_code(self, *args)


@dataclass
class Link(Node):
    """Inline link or autolink.

    Parameters
    ----------
    url : str
        Link destination
    content : list of Node, default = empty list
        Link text
    title : str or None, default = None
        Optional link title

    """

    url: str
    content: list[Node] = field(default_factory=list)
    title: Optional[str] = None

    def accept(self, visitor: Any, *args: Any) -> Any:
        """Accept a visitor for processing this link."""
        return visitor.visit_link(self, *args)


@dataclass
class LinkReference(Node):
    """Reference-style link (``[text][id]``) resolved through a Definition."""

    identifier: str
    content: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any, *args: Any) -> Any:
        """Accept a visitor for processing this link reference."""
        return visitor.visit_link_reference(self, *args)


@dataclass
class Image(Node):
    """Inline image."""

    url: str
    alt_text: str = ""
    title: Optional[str] = None

    def accept(self, visitor: Any, *args: Any) -> Any:
        """Accept a visitor for processing this image."""
        return visitor.visit_image(self, *args)


@dataclass
class ImageReference(Node):
    """Reference-style image (``![alt][id]``)."""

    identifier: str
    alt_text: str = ""

    def accept(self, visitor: Any, *args: Any) -> Any:
        """Accept a visitor for processing this image reference."""
        return visitor.visit_image_reference(self, *args)


@dataclass
class LineBreak(Node):
    """Line break inside a paragraph.

    Parameters
    ----------
    soft : bool, default = False
        True for a plain newline inside a paragraph, False for a hard break

    """

    soft: bool = False

    def accept(self, visitor: Any, *args: Any) -> Any:
        """Accept a visitor for processing this line break."""
        return visitor.visit_line_break(self, *args)


@dataclass
class HTMLInline(Node):
    """Raw inline HTML, kept verbatim."""

    content: str

    def accept(self, visitor: Any, *args: Any) -> Any:
        """Accept a visitor for processing this inline HTML."""
        return visitor.visit_html_inline(self, *args)


@dataclass
class FootnoteReference(Node):
    """Footnote reference (``[^id]``)."""

    identifier: str

    def accept(self, visitor: Any, *args: Any) -> Any:
        """Accept a visitor for processing this footnote reference."""
        return visitor.visit_footnote_reference(self, *args)


@dataclass
class MathInline(Node):
    """Inline math (``$...$``)."""

    content: str

    def accept(self, visitor: Any, *args: Any) -> Any:
        """Accept a visitor for processing this inline math node."""
        return visitor.visit_math_inline(self, *args)


BLOCK_CONTAINERS = (Document, BlockQuote, ListItem, FootnoteDefinition)
INLINE_CONTAINERS = (Heading, Paragraph, Emphasis, Strong, Strikethrough, Link, LinkReference, TableCell)


def get_node_children(node: Node) -> list[Node]:
    """Get all child nodes from a node.

    Parameters
    ----------
    node : Node
        The node to get children from

    Returns
    -------
    list of Node
        List of child nodes (empty list if node has no children)

    Examples
    --------
    >>> heading = Heading(level=1, content=[Text("Hello"), Strong(content=[Text("world")])])
    >>> len(get_node_children(heading))
    2

    """
    if isinstance(node, BLOCK_CONTAINERS):
        return list(node.children)

    if isinstance(node, INLINE_CONTAINERS):
        return list(node.content)

    if isinstance(node, List):
        return list(node.items)

    if isinstance(node, Table):
        children: list[Node] = []
        if node.header:
            children.append(node.header)
        children.extend(node.rows)
        return children

    if isinstance(node, TableRow):
        return list(node.cells)

    return []


def replace_node_children(node: Node, new_children: list[Node]) -> Node:
    """Create a copy of a node with replaced children.

    Parameters
    ----------
    node : Node
        The node to copy
    new_children : list of Node
        New children to use in the copy

    Returns
    -------
    Node
        New node with replaced children; leaf nodes are returned unchanged

    Raises
    ------
    ValueError
        If a List would receive something other than ListItem nodes, or a
        Table something other than TableRow nodes

    """
    if isinstance(node, BLOCK_CONTAINERS):
        return replace(node, children=new_children)

    if isinstance(node, INLINE_CONTAINERS):
        return replace(node, content=new_children)

    if isinstance(node, List):
        for child in new_children:
            if not isinstance(child, ListItem):
                raise ValueError(f"List children must be ListItem instances, got {type(child).__name__}")
        return replace(node, items=new_children)  # type: ignore[arg-type]

    if isinstance(node, Table):
        header_row: TableRow | None = None
        body_rows: list[TableRow] = []
        for child in new_children:
            if not isinstance(child, TableRow):
                raise ValueError(f"Table children must be TableRow instances, got {type(child).__name__}")
            if child.is_header and header_row is None:
                header_row = child
            else:
                body_rows.append(child)
        return replace(node, header=header_row, rows=body_rows)

    if isinstance(node, TableRow):
        return replace(node, cells=new_children)  # type: ignore[arg-type]

    return node
