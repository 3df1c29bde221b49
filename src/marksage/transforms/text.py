#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marksage/transforms/text.py
"""Typographic clean-up of prose text."""

from __future__ import annotations

import re
from typing import Any, Pattern

from marksage.ast.nodes import Text
from marksage.ast.transforms import NodeTransformer

EM_DASH = "—"

# "--" between two letters or digits (any script), e.g. "well--known"
DOUBLE_HYPHEN_PATTERN = re.compile(r"(?<=[^\W_])--(?=[^\W_])")


class TextNormalizer(NodeTransformer):
    """Replace patterns in Text nodes, leaving code, math and HTML alone.

    Only ``Text`` node values change; the tree shape is preserved. With the
    default rule a double hyphen between word characters becomes an em dash.
    The rule is idempotent since its output no longer matches.

    Parameters
    ----------
    pattern : Pattern[str], default = DOUBLE_HYPHEN_PATTERN
        Compiled pattern to search for
    replacement : str, default = EM_DASH
        Replacement string

    Examples
    --------
    >>> doc = Document(children=[Paragraph(content=[Text("well--known")])])
    >>> TextNormalizer().transform(doc).children[0].content[0].content
    'well—known'

    """

    def __init__(self, pattern: Pattern[str] = DOUBLE_HYPHEN_PATTERN, replacement: str = EM_DASH):
        """Initialize with the substitution rule."""
        self.pattern = pattern
        self.replacement = replacement

    def visit_text(self, node: Text, *args: Any) -> Text:
        """Apply the substitution to the text content."""
        return Text(content=self.pattern.sub(self.replacement, node.content))
