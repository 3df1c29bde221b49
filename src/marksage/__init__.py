"""marksage - maintenance tools for a vault of markdown notes.

marksage parses notes into a small document tree, rewrites that tree and
serializes it back to canonical markdown. On top of this it provides three
vault-wide operations:

- **archive**: move completed checklist items of ``#todo`` notes under an
  ``## Archived`` heading
- **format**: rewrite every note in canonical form, replacing ``--``
  between words with an em dash
- **notify-conflicts**: push a notification listing sync-conflict copies

Examples
--------
Round-trip a note through the document tree:

    >>> from marksage import MarkdownDocument
    >>> note = MarkdownDocument.parse("* one\\n* two\\n")
    >>> print(note.render(), end="")
    - one
    - two

Archive finished items:

    >>> from marksage import archive_text
    >>> print(archive_text("- [x] done\\n"), end="")
    ## Archived
    <BLANKLINE>
    - [x] done

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marksage/__init__.py

from importlib.metadata import PackageNotFoundError, version

from marksage.commands import archive_text, format_text
from marksage.document import MarkdownDocument
from marksage.exceptions import MarksageError
from marksage.parsers.markdown import markdown_to_ast
from marksage.renderers.markdown import render_markdown

try:
    __version__ = version("marksage")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "__version__",
    "MarkdownDocument",
    "MarksageError",
    "archive_text",
    "format_text",
    "markdown_to_ast",
    "render_markdown",
]
