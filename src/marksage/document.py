#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marksage/document.py
"""A vault note: opaque frontmatter plus a parsed markdown body."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from marksage.ast.nodes import Document
from marksage.constants import FRONTMATTER_DELIMITER
from marksage.parsers.markdown import MarkdownToAstConverter, split_frontmatter
from marksage.renderers.markdown import MarkdownRenderer


@dataclass
class MarkdownDocument:
    """Parsed form of one note file.

    The frontmatter is kept as raw text and written back unchanged; only the
    body is parsed.

    Parameters
    ----------
    body : Document
        Parsed markdown body
    frontmatter : str or None, default = None
        Raw frontmatter between the ``---`` delimiters, without a trailing
        newline; None when the note has no frontmatter

    Examples
    --------
    >>> note = MarkdownDocument.parse("---\\ntitle: x\\n---\\n\\n# Hi\\n")
    >>> note.frontmatter
    'title: x'
    >>> note.render()
    '---\\ntitle: x\\n---\\n\\n# Hi\\n'

    """

    body: Document = field(default_factory=Document)
    frontmatter: Optional[str] = None

    @classmethod
    def parse(cls, text: str) -> MarkdownDocument:
        """Split off the frontmatter and parse the body.

        Parameters
        ----------
        text : str
            Full note text

        Returns
        -------
        MarkdownDocument
            Parsed note

        Raises
        ------
        ParsingError
            If the markdown parser fails internally

        """
        frontmatter, body = split_frontmatter(text)
        return cls(body=MarkdownToAstConverter().parse(body), frontmatter=frontmatter)

    def render(self) -> str:
        """Serialize the note back to markdown text.

        Returns
        -------
        str
            Frontmatter block (if any) followed by a blank line and the body

        """
        body = MarkdownRenderer().render_to_string(self.body)
        if self.frontmatter is None:
            return body

        fence = FRONTMATTER_DELIMITER + "\n"
        header = fence + (self.frontmatter + "\n" if self.frontmatter else "") + fence
        return header + "\n" + body if body else header

    def with_body(self, body: Document) -> MarkdownDocument:
        """Return a copy of this note with a new body and the same frontmatter."""
        return MarkdownDocument(body=body, frontmatter=self.frontmatter)
