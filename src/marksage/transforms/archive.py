#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marksage/transforms/archive.py
"""Move completed checklist items under an ``## Archived`` heading.

A todo note keeps open work at the top and finished work in an archive
section. This module decides which top-level list items are finished
(:func:`assess`) and rebuilds the document with those items relocated
(:func:`archive_document`).

Classification is tri-state. Unchecked items keep their whole subtree in
place. Checked items are archived unless some descendant is unchecked.
Plain items (no checkbox) take the verdict of their children, and are
ambiguous when they hold no tasks at all. When combining verdicts,
KEEP_IT wins over ARCHIVE_IT, which wins over AMBIGUOUS.

Examples
--------
    >>> from marksage.parsers.markdown import markdown_to_ast
    >>> from marksage.renderers.markdown import render_markdown
    >>> doc = markdown_to_ast("- [x] done\\n- [ ] open\\n")
    >>> print(render_markdown(archive_document(doc)), end="")
    - [ ] open
    <BLANKLINE>
    ## Archived
    <BLANKLINE>
    - [x] done

"""

from __future__ import annotations

import copy
import logging
from dataclasses import replace
from enum import Enum
from typing import Any, Iterable, Optional

from marksage.ast.nodes import Document, Heading, List, ListItem, Node, Text
from marksage.ast.transforms import NodeTransformer
from marksage.ast.visitors import extract_text
from marksage.constants import ARCHIVED_HEADING_LEVEL, ARCHIVED_HEADING_TEXT
from marksage.exceptions import ArchiveError

logger = logging.getLogger(__name__)


class Assessment(Enum):
    """Archival verdict for a list item or list."""

    ARCHIVE_IT = "archive_it"
    KEEP_IT = "keep_it"
    AMBIGUOUS = "ambiguous"

    def bias(self, other: Assessment) -> Assessment:
        """Combine two verdicts; KEEP_IT dominates, then ARCHIVE_IT.

        Examples
        --------
        >>> Assessment.AMBIGUOUS.bias(Assessment.ARCHIVE_IT)
        <Assessment.ARCHIVE_IT: 'archive_it'>
        >>> Assessment.ARCHIVE_IT.bias(Assessment.KEEP_IT)
        <Assessment.KEEP_IT: 'keep_it'>

        """
        if Assessment.KEEP_IT in (self, other):
            return Assessment.KEEP_IT
        if Assessment.ARCHIVE_IT in (self, other):
            return Assessment.ARCHIVE_IT
        return Assessment.AMBIGUOUS

    @property
    def definitive(self) -> bool:
        """True only for a definite ARCHIVE_IT."""
        return self is Assessment.ARCHIVE_IT


def fold_assessments(assessments: Iterable[Assessment]) -> Assessment:
    """Reduce verdicts in order, stopping at the first KEEP_IT.

    Parameters
    ----------
    assessments : iterable of Assessment
        Verdicts to combine; consumed lazily

    Returns
    -------
    Assessment
        AMBIGUOUS for an empty sequence, otherwise the dominant verdict

    """
    result = Assessment.AMBIGUOUS
    for assessment in assessments:
        result = result.bias(assessment)
        if result is Assessment.KEEP_IT:
            return result
    return result


def assess(node: Node) -> Assessment:
    """Classify a node for archival.

    Parameters
    ----------
    node : Node
        List item, list, or any other block

    Returns
    -------
    Assessment
        Verdict for the node; anything other than a list or list item is
        AMBIGUOUS

    """
    if isinstance(node, ListItem):
        if node.task_status == "unchecked":
            return Assessment.KEEP_IT
        children = fold_assessments(assess(child) for child in node.children)
        if node.task_status == "checked":
            return children.bias(Assessment.ARCHIVE_IT)
        return children

    if isinstance(node, List):
        return fold_assessments(assess(item) for item in node.items)

    return Assessment.AMBIGUOUS


def is_archived_heading(node: Node) -> bool:
    """Whether a node is the ``## Archived`` section heading."""
    return (
        isinstance(node, Heading)
        and node.level == ARCHIVED_HEADING_LEVEL
        and extract_text(node.content) == ARCHIVED_HEADING_TEXT
    )


def _partition(items: list[ListItem]) -> tuple[list[ListItem], list[ListItem]]:
    qualifying: list[ListItem] = []
    remaining: list[ListItem] = []
    for item in items:
        (qualifying if assess(item).definitive else remaining).append(item)
    return qualifying, remaining


def archive_document(doc: Document) -> Optional[Document]:
    """Relocate finished top-level list items under the Archived heading.

    Only lists that are direct children of the document and come before the
    Archived heading are searched. Qualifying items move with their whole
    subtree, in document order, to the front of the list right after the
    heading. Lists left empty are removed. When the document has no Archived
    heading, one is inserted after the last top-level list.

    Parameters
    ----------
    doc : Document
        Document to rewrite; it is not modified

    Returns
    -------
    Document or None
        A new document, or None when no item qualifies

    Raises
    ------
    ArchiveError
        If the rewrite reaches an inconsistent state

    """
    children = copy.deepcopy(doc.children)

    heading_index = next((i for i, node in enumerate(children) if is_archived_heading(node)), None)
    if heading_index is None:
        last_list = max((i for i, node in enumerate(children) if isinstance(node, List)), default=None)
        heading_index = len(children) if last_list is None else last_list + 1
        heading = Heading(level=ARCHIVED_HEADING_LEVEL, content=[Text(content=ARCHIVED_HEADING_TEXT)])
        children.insert(heading_index, heading)

    before = children[:heading_index]
    heading_node = children[heading_index]
    after = children[heading_index + 1 :]

    kept: list[Node] = []
    archived: list[ListItem] = []
    source_list: Optional[List] = None
    for node in before:
        if not isinstance(node, List):
            kept.append(node)
            continue
        qualifying, remaining = _partition(node.items)
        if qualifying and source_list is None:
            source_list = node
        archived.extend(qualifying)
        if remaining or not qualifying:
            kept.append(replace(node, items=remaining))

    if not archived:
        return None

    if source_list is None:
        raise ArchiveError("Archived items were collected without a source list")

    if after and isinstance(after[0], List):
        target = after[0]
        after = [replace(target, items=archived + target.items)] + after[1:]
    else:
        after = [List(ordered=source_list.ordered, items=archived, start=source_list.start)] + after

    logger.debug("Archiving %d list item(s)", len(archived))
    return Document(children=kept + [heading_node] + after)


class ArchiveTransform(NodeTransformer):
    """Transformer wrapper around :func:`archive_document`.

    The transform always returns a document; ``changed`` tells whether any
    item was archived by the last call.

    Examples
    --------
        >>> transform = ArchiveTransform()
        >>> new_doc = transform.transform(doc)
        >>> transform.changed
        True

    """

    def __init__(self) -> None:
        """Initialize the transform."""
        self.changed = False

    def visit_document(self, node: Document, *args: Any) -> Document:
        """Archive finished items of the document."""
        result = archive_document(node)
        self.changed = result is not None
        return result if result is not None else copy.deepcopy(node)
