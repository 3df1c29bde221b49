#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marksage/ast/transforms.py
"""AST transformation utilities.

Transformers build a new tree instead of editing the one they are given.
The input document stays valid and untouched, which lets callers compare
the before and after trees (or throw the result away) freely.

Examples
--------
Upper-case every text run:

    >>> class Shout(NodeTransformer):
    ...     def visit_text(self, node, *args):
    ...         return Text(content=node.content.upper())
    >>> loud = Shout().transform(doc)

"""

from __future__ import annotations

import copy
from typing import Any, Type

from marksage.ast.nodes import Document, Node, get_node_children, replace_node_children
from marksage.ast.visitors import NodeVisitor


class NodeTransformer(NodeVisitor):
    """Base class for transforming AST nodes.

    Subclasses override visit_* methods that return a replacement node, or
    None to drop the node from its parent. Every node not handled by a
    subclass is copied with its children transformed recursively.

    """

    def transform(self, node: Node) -> Node | None:
        """Transform an AST node.

        Parameters
        ----------
        node : Node
            Node to transform

        Returns
        -------
        Node or None
            Transformed node or None to remove

        """
        return node.accept(self)

    def _transform_children(self, children: list[Node]) -> list[Node]:
        result = []
        for child in children:
            transformed = self.transform(child)
            if transformed is not None:
                result.append(transformed)
        return result

    def generic_visit(self, node: Node, *args: Any) -> Node:
        """Copy a node, transforming its children.

        Parameters
        ----------
        node : Node
            Node to copy

        Returns
        -------
        Node
            New node; leaves are shallow copies

        """
        children = get_node_children(node)
        if not children:
            return copy.copy(node)
        return replace_node_children(node, self._transform_children(children))


def transform_document(doc: Document, transformer: NodeTransformer) -> Document:
    """Apply a transformer to a whole document.

    Parameters
    ----------
    doc : Document
        Document to transform
    transformer : NodeTransformer
        Transformer to apply

    Returns
    -------
    Document
        Transformed document

    Raises
    ------
    TypeError
        If the transformer does not return a Document for the root

    """
    result = transformer.transform(doc)
    if not isinstance(result, Document):
        raise TypeError(f"Transformer must return a Document for the root, got {type(result).__name__}")
    return result


def extract_nodes(doc: Node, node_type: Type[Node]) -> list[Node]:
    """Collect every node of a given type, in document order.

    Parameters
    ----------
    doc : Node
        Root of the subtree to search
    node_type : type
        Node class to collect

    Returns
    -------
    list of Node
        Matching nodes (pre-order)

    """
    found: list[Node] = []
    stack = [doc]
    while stack:
        node = stack.pop()
        if isinstance(node, node_type):
            found.append(node)
        stack.extend(reversed(get_node_children(node)))
    return found
