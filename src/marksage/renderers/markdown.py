#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marksage/renderers/markdown.py
"""Markdown rendering from AST.

This module provides the MarkdownRenderer class which prints AST nodes back
to canonical markdown. Output is stable: parsing the rendered text and
rendering it again yields the same text.

Rendering is a pure function of a node and a :class:`RenderContext`. The
context travels down the tree as an argument to every ``visit_*`` call and
is never stored on the renderer, so one renderer can be shared freely.

"""

from __future__ import annotations

import logging
import re
import unicodedata
from dataclasses import dataclass, replace
from typing import Optional

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
)
from marksage.ast.visitors import NodeVisitor
from marksage.constants import (
    BULLET_MARKER,
    CODE_FENCE_CHAR,
    CODE_FENCE_MIN,
    LIST_INDENT_WIDTH,
    MIN_DELIMITER_WIDTH,
    THEMATIC_BREAK,
    TableAlignment,
)
from marksage.exceptions import UnsupportedNodeError

logger = logging.getLogger(__name__)

# pipe preceded by an even number of backslashes
_UNESCAPED_PIPE = re.compile(r"(?<!\\)((?:\\\\)*)\|")


@dataclass(frozen=True)
class RenderContext:
    """Serialization state handed from a node to its children.

    Parameters
    ----------
    list_index : int or None, default = None
        Ordinal for the next ordered-list marker; None renders a bullet
    list_indent : int or None, default = None
        Nesting depth of the enclosing list; None outside any list
    in_table_cell : bool, default = False
        Whether text is being rendered inside a table cell

    """

    list_index: Optional[int] = None
    list_indent: Optional[int] = None
    in_table_cell: bool = False


def display_width(text: str) -> int:
    """Return the number of terminal columns a string occupies.

    Wide and fullwidth East Asian characters count as two columns;
    combining marks and format characters count as zero.

    Parameters
    ----------
    text : str
        Text to measure

    Returns
    -------
    int
        Display width

    Examples
    --------
    >>> display_width("abc")
    3
    >>> display_width("日本")
    4

    """
    width = 0
    for char in text:
        if unicodedata.combining(char) or unicodedata.category(char) == "Cf":
            continue
        width += 2 if unicodedata.east_asian_width(char) in ("W", "F") else 1
    return width


def longest_run(text: str, char: str = CODE_FENCE_CHAR) -> int:
    """Length of the longest run of consecutive ``char`` in text."""
    longest = 0
    count = 0
    for c in text:
        if c == char:
            count += 1
            longest = max(longest, count)
        else:
            count = 0
    return longest


def _indent_lines(text: str, indent: str) -> str:
    """Prefix every non-empty line of text with indent."""
    return "".join(indent + line if line.strip("\n") else line for line in text.splitlines(keepends=True))


def _ensure_newline(text: str) -> str:
    return text if text.endswith("\n") else text + "\n"


class MarkdownRenderer(NodeVisitor):
    """Render AST nodes to markdown text.

    Each ``visit_*`` method returns the markdown for its node. Block nodes
    return text ending in a newline; inline nodes return text without one.
    Node kinds with no rendering rule raise :class:`UnsupportedNodeError`
    rather than being dropped.

    Examples
    --------
        >>> from marksage.ast import Document, Heading, Text
        >>> doc = Document(children=[Heading(level=1, content=[Text(content="Title")])])
        >>> MarkdownRenderer().render_to_string(doc)
        '# Title\\n'

    """

    def render_to_string(self, document: Node) -> str:
        """Render a document (or any node) to markdown.

        Parameters
        ----------
        document : Node
            Root of the tree to render, usually a Document

        Returns
        -------
        str
            Markdown text

        Raises
        ------
        UnsupportedNodeError
            If the tree contains a node kind the renderer does not cover

        """
        return document.accept(self, RenderContext())

    def generic_visit(self, node: Node, context: RenderContext | None = None) -> str:
        """Refuse to render node kinds without a rendering rule."""
        raise UnsupportedNodeError(node)

    def _render_inline(self, nodes: list[Node], context: RenderContext) -> str:
        return "".join(node.accept(self, context) for node in nodes)

    def _render_blocks(self, nodes: list[Node], context: RenderContext) -> str:
        """Render sibling blocks separated by a blank line."""
        return "\n".join(_ensure_newline(node.accept(self, context)) for node in nodes)

    # ------------------------------------------------------------------
    # Block nodes
    # ------------------------------------------------------------------

    def visit_document(self, node: Document, context: RenderContext | None = None) -> str:
        """Render a Document node.

        Top-level blocks are separated by one blank line. Raw HTML blocks may
        lack a final newline, so one is added to every block before joining.

        """
        return self._render_blocks(node.children, context or RenderContext())

    def visit_heading(self, node: Heading, context: RenderContext | None = None) -> str:
        """Render a Heading node as an ATX heading."""
        return "#" * node.level + " " + self._render_inline(node.content, context or RenderContext()) + "\n"

    def visit_paragraph(self, node: Paragraph, context: RenderContext | None = None) -> str:
        """Render a Paragraph node."""
        return self._render_inline(node.content, context or RenderContext()) + "\n"

    def visit_code_block(self, node: CodeBlock, context: RenderContext | None = None) -> str:
        """Render a CodeBlock node as a fenced block.

        The fence is at least three backticks and always longer than any
        backtick run inside the code.

        """
        fence = CODE_FENCE_CHAR * max(CODE_FENCE_MIN, longest_run(node.content) + 1)
        language = node.language or ""
        if not node.content:
            return f"{fence}{language}\n{fence}\n"
        return f"{fence}{language}\n{node.content}\n{fence}\n"

    def visit_block_quote(self, node: BlockQuote, context: RenderContext | None = None) -> str:
        """Render a BlockQuote node, prefixing every line with ``>``."""
        inner = self._render_blocks(node.children, RenderContext())
        lines = inner.splitlines() or [""]
        return "".join(f"> {line}\n" if line else ">\n" for line in lines)

    def visit_list(self, node: List, context: RenderContext | None = None) -> str:
        """Render a List node.

        The nesting depth grows by one for the items. Ordered lists number
        their items from ``start`` upwards.

        """
        context = context or RenderContext()
        depth = 0 if context.list_indent is None else context.list_indent + 1
        parts: list[str] = []
        for offset, item in enumerate(node.items):
            index = node.start + offset if node.ordered else None
            item_context = replace(context, list_index=index, list_indent=depth)
            parts.append(item.accept(self, item_context))
        return "".join(parts)

    def visit_list_item(self, node: ListItem, context: RenderContext | None = None) -> str:
        """Render a ListItem node.

        The marker line carries the first child. Nested lists follow directly
        and indent themselves; any other block continues the item after a
        blank line, indented to the item's content column.

        """
        context = context or RenderContext()
        depth = context.list_indent or 0
        indent = " " * (LIST_INDENT_WIDTH * depth)
        continuation = " " * (LIST_INDENT_WIDTH * (depth + 1))

        marker = BULLET_MARKER if context.list_index is None else f"{context.list_index}."
        if node.task_status == "checked":
            marker += " [x]"
        elif node.task_status == "unchecked":
            marker += " [ ]"

        # Nested content does not inherit the ordinal
        child_context = replace(context, list_index=None)

        children = node.children
        if not children:
            return f"{indent}{marker}\n"

        out: list[str] = []
        first = children[0]
        if isinstance(first, List):
            out.append(f"{indent}{marker}\n")
            out.append(first.accept(self, child_context))
        else:
            first_text = _ensure_newline(first.accept(self, RenderContext()))
            head, _, rest = first_text.partition("\n")
            out.append(f"{indent}{marker} {head}\n")
            out.append(_indent_lines(rest, continuation))

        for child in children[1:]:
            if isinstance(child, List):
                out.append(child.accept(self, child_context))
            else:
                block = _ensure_newline(child.accept(self, RenderContext()))
                out.append("\n" + _indent_lines(block, continuation))

        return "".join(out)

    def visit_table(self, node: Table, context: RenderContext | None = None) -> str:
        """Render a Table node with padded, aligned columns.

        Column widths are measured in display columns. Short rows are filled
        with blank cells. Rows longer than the header widen the table with
        unaligned columns, so no cell is lost.

        """
        cell_context = RenderContext(in_table_cell=True)
        rows = ([node.header] if node.header else []) + list(node.rows)
        alignments = list(node.alignments)
        num_cols = max([len(alignments)] + [len(row.cells) for row in rows])
        if num_cols == 0:
            logger.debug("Rendering table without columns as nothing")
            return ""
        alignments += [None] * (num_cols - len(alignments))

        rendered: list[list[str]] = []
        for row in rows:
            cells = [cell.accept(self, cell_context) for cell in row.cells]
            cells += [""] * (num_cols - len(cells))
            rendered.append(cells)

        widths = [MIN_DELIMITER_WIDTH[alignment] for alignment in alignments]
        for cells in rendered:
            for col, cell in enumerate(cells):
                widths[col] = max(widths[col], display_width(cell))

        delimiter = "| " + " | ".join(self._delimiter_cell(a, w) for a, w in zip(alignments, widths)) + " |\n"

        lines: list[str] = []
        for row_index, cells in enumerate(rendered):
            padded = [self._pad_cell(cell, alignments[col], widths[col]) for col, cell in enumerate(cells)]
            lines.append("| " + " | ".join(padded) + " |\n")
            if row_index == 0:
                lines.append(delimiter)
        if not rendered:
            lines.append(delimiter)
        return "".join(lines)

    @staticmethod
    def _delimiter_cell(alignment: Optional[TableAlignment], width: int) -> str:
        if alignment == "left":
            return ":" + "-" * (width - 1)
        if alignment == "center":
            return ":" + "-" * (width - 2) + ":"
        if alignment == "right":
            return "-" * (width - 1) + ":"
        return "-" * width

    @staticmethod
    def _pad_cell(text: str, alignment: Optional[TableAlignment], width: int) -> str:
        padding = width - display_width(text)
        if alignment == "right":
            return " " * padding + text
        if alignment == "center":
            before = padding // 2
            return " " * before + text + " " * (padding - before)
        return text + " " * padding

    def visit_table_cell(self, node: TableCell, context: RenderContext | None = None) -> str:
        """Render the inline content of a TableCell node."""
        return self._render_inline(node.content, context or RenderContext(in_table_cell=True))

    def visit_table_row(self, node: TableRow, context: RenderContext | None = None) -> str:
        """Render a TableRow outside of a table as an unpadded row."""
        cell_context = RenderContext(in_table_cell=True)
        return "| " + " | ".join(cell.accept(self, cell_context) for cell in node.cells) + " |\n"

    def visit_thematic_break(self, node: ThematicBreak, context: RenderContext | None = None) -> str:
        """Render a ThematicBreak node."""
        return THEMATIC_BREAK + "\n"

    def visit_html_block(self, node: HTMLBlock, context: RenderContext | None = None) -> str:
        """Render an HTMLBlock node verbatim."""
        return node.content

    def visit_definition(self, node: Definition, context: RenderContext | None = None) -> str:
        """Render a link reference Definition node."""
        text = f"[{node.identifier}]: {node.url}"
        if node.title:
            text += ' "' + node.title.replace('"', '\\"') + '"'
        return text + "\n"

    def visit_footnote_definition(self, node: FootnoteDefinition, context: RenderContext | None = None) -> str:
        """Render a FootnoteDefinition node.

        The first block follows the label; later blocks are indented by four
        spaces and separated by blank lines.

        """
        if not node.children:
            return f"[^{node.identifier}]:\n"
        blocks = [_ensure_newline(child.accept(self, RenderContext())) for child in node.children]
        head = blocks[0]
        first_line, _, rest = head.partition("\n")
        out = f"[^{node.identifier}]: {first_line}\n" + _indent_lines(rest, " " * LIST_INDENT_WIDTH)
        for block in blocks[1:]:
            out += "\n" + _indent_lines(block, " " * LIST_INDENT_WIDTH)
        return out

    def visit_math_block(self, node: MathBlock, context: RenderContext | None = None) -> str:
        """Render a MathBlock node."""
        return f"$$\n{node.content}\n$$\n"

    # ------------------------------------------------------------------
    # Inline nodes
    # ------------------------------------------------------------------

    def visit_text(self, node: Text, context: RenderContext | None = None) -> str:
        """Render a Text node.

        Text holds inline source as written, backslash escapes included.
        Inside table cells, pipes that are not already escaped get a
        backslash.

        """
        if context is not None and context.in_table_cell:
            return _UNESCAPED_PIPE.sub(r"\1\\|", node.content)
        return node.content

    def visit_emphasis(self, node: Emphasis, context: RenderContext | None = None) -> str:
        """Render an Emphasis node."""
        return "*" + self._render_inline(node.content, context or RenderContext()) + "*"

    def visit_strong(self, node: Strong, context: RenderContext | None = None) -> str:
        """Render a Strong node."""
        return "**" + self._render_inline(node.content, context or RenderContext()) + "**"

    def visit_strikethrough(self, node: Strikethrough, context: RenderContext | None = None) -> str:
        """Render a Strikethrough node."""
        return "~~" + self._render_inline(node.content, context or RenderContext()) + "~~"

    def visit_code(self, node: Code, context: RenderContext | None = None) -> str:
        """Render a Code node.

        The fence is one backtick longer than the longest backtick run in the
        content. Content that starts or ends with a backtick, or is wrapped
        in spaces, gets one padding space on each side.

        """
        content = node.content
        fence = CODE_FENCE_CHAR * (longest_run(content) + 1)
        needs_padding = content.startswith("`") or content.endswith("`")
        if content.strip() and content.startswith(" ") and content.endswith(" "):
            needs_padding = True
        if needs_padding:
            content = f" {content} "
        return f"{fence}{content}{fence}"

    def visit_link(self, node: Link, context: RenderContext | None = None) -> str:
        """Render a Link node, using autolink form where the text is the url."""
        text = self._render_inline(node.content, context or RenderContext())
        if node.title:
            title = node.title.replace('"', '\\"')
            return f'[{text}]({node.url} "{title}")'
        if text and (text == node.url or node.url == f"mailto:{text}"):
            return f"<{text}>"
        return f"[{text}]({node.url})"

    def visit_link_reference(self, node: LinkReference, context: RenderContext | None = None) -> str:
        """Render a reference-style link."""
        return f"[{self._render_inline(node.content, context or RenderContext())}][{node.identifier}]"

    def visit_image(self, node: Image, context: RenderContext | None = None) -> str:
        """Render an Image node."""
        if node.title:
            title = node.title.replace('"', '\\"')
            return f'![{node.alt_text}]({node.url} "{title}")'
        return f"![{node.alt_text}]({node.url})"

    def visit_image_reference(self, node: ImageReference, context: RenderContext | None = None) -> str:
        """Render a reference-style image."""
        return f"![{node.alt_text}][{node.identifier}]"

    def visit_line_break(self, node: LineBreak, context: RenderContext | None = None) -> str:
        """Render a LineBreak node; hard breaks end in a backslash."""
        return "\n" if node.soft else "\\\n"

    def visit_html_inline(self, node: HTMLInline, context: RenderContext | None = None) -> str:
        """Render an HTMLInline node verbatim."""
        return node.content

    def visit_footnote_reference(self, node: FootnoteReference, context: RenderContext | None = None) -> str:
        """Render a FootnoteReference node."""
        return f"[^{node.identifier}]"

    def visit_math_inline(self, node: MathInline, context: RenderContext | None = None) -> str:
        """Render a MathInline node."""
        return f"${node.content}$"


def render_markdown(document: Node) -> str:
    """Render a tree to markdown with a default renderer.

    Parameters
    ----------
    document : Node
        Root of the tree to render

    Returns
    -------
    str
        Markdown text

    """
    return MarkdownRenderer().render_to_string(document)
