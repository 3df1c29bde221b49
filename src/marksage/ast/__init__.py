#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marksage/ast/__init__.py
"""Abstract Syntax Tree (AST) module for vault notes.

The AST separates parsing from serialization: notes are parsed into these
nodes, rewritten by transforms, and printed back to canonical markdown.

- nodes: AST node classes representing document structure
- visitors: Visitor pattern implementation for AST traversal
- transforms: Copying transformers and traversal helpers

Examples
--------
    >>> from marksage.ast import Document, Heading, Text
    >>> from marksage.renderers.markdown import MarkdownRenderer
    >>> doc = Document(children=[Heading(level=1, content=[Text(content="Title")])])
    >>> MarkdownRenderer().render_to_string(doc)
    '# Title\\n'

"""

from __future__ import annotations

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
    TaskStatus,
    Text,
    ThematicBreak,
    get_node_children,
    replace_node_children,
)
from marksage.ast.transforms import NodeTransformer, extract_nodes, transform_document
from marksage.ast.visitors import NodeVisitor, TextCollector, extract_text

__all__ = [
    # Nodes
    "Node",
    "Document",
    "Heading",
    "Paragraph",
    "CodeBlock",
    "BlockQuote",
    "List",
    "ListItem",
    "TaskStatus",
    "Table",
    "TableRow",
    "TableCell",
    "ThematicBreak",
    "HTMLBlock",
    "Definition",
    "FootnoteDefinition",
    "MathBlock",
    "Text",
    "Emphasis",
    "Strong",
    "Strikethrough",
    "Code",
    "Link",
    "LinkReference",
    "Image",
    "ImageReference",
    "LineBreak",
    "HTMLInline",
    "FootnoteReference",
    "MathInline",
    "get_node_children",
    "replace_node_children",
    # Visitors and transforms
    "NodeVisitor",
    "TextCollector",
    "extract_text",
    "NodeTransformer",
    "transform_document",
    "extract_nodes",
]
