#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Unit tests for the text normalizer."""

import re

import pytest

from marksage.ast import Code, CodeBlock, Document, Paragraph, Text, transform_document
from marksage.document import MarkdownDocument
from marksage.transforms.text import EM_DASH, TextNormalizer


def _normalize(text: str) -> str:
    note = MarkdownDocument.parse(text)
    return note.with_body(transform_document(note.body, TextNormalizer())).render()


@pytest.mark.unit
class TestTextNormalizer:
    """Test em dash substitution."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("A well--known fact.\n", f"A well{EM_DASH}known fact.\n"),
            ("1--2 and a--b--c\n", f"1{EM_DASH}2 and a{EM_DASH}b{EM_DASH}c\n"),
            ("Zürich--Genève\n", f"Zürich{EM_DASH}Genève\n"),
        ],
    )
    def test_double_hyphen_between_words(self, text: str, expected: str) -> None:
        """A double hyphen joining two words becomes an em dash."""
        assert _normalize(text) == expected

    @pytest.mark.parametrize(
        "text",
        [
            "spaced -- out\n",
            "trailing--\n",
            "a-- b\n",
            "a---b\n",
        ],
    )
    def test_other_hyphens_unchanged(self, text: str) -> None:
        """Hyphens not between word characters are left alone."""
        assert _normalize(text) == text

    def test_code_is_untouched(self) -> None:
        """Inline code and code blocks keep their hyphens."""
        text = "Run `ls --all--x` now.\n\n```sh\nfoo--bar\n```\n"
        assert _normalize(text) == text

    def test_heading_and_list_text(self) -> None:
        """Text anywhere in the tree is normalized."""
        text = "# pre--war\n\n- [ ] re--check\n"
        assert _normalize(text) == f"# pre{EM_DASH}war\n\n- [ ] re{EM_DASH}check\n"

    def test_frontmatter_is_untouched(self) -> None:
        """Only the body is normalized."""
        text = "---\ntitle: a--b\n---\n\nc--d\n"
        assert _normalize(text) == f"---\ntitle: a--b\n---\n\nc{EM_DASH}d\n"

    def test_idempotent(self) -> None:
        """Normalizing twice gives the same result as once."""
        once = _normalize("x--y--z\n")
        assert _normalize(once) == once

    def test_tree_shape_preserved(self) -> None:
        """Only text values change."""
        doc = Document(children=[Paragraph(content=[Text("a--b"), Code("c--d")]), CodeBlock(content="e--f")])
        result = transform_document(doc, TextNormalizer())
        assert result == Document(
            children=[Paragraph(content=[Text(f"a{EM_DASH}b"), Code("c--d")]), CodeBlock(content="e--f")]
        )

    def test_custom_rule(self) -> None:
        """Any pattern and replacement can be supplied."""
        normalizer = TextNormalizer(pattern=re.compile(r"\.\.\."), replacement="…")
        doc = Document(children=[Paragraph(content=[Text("wait...")])])
        result = transform_document(doc, normalizer)
        assert result.children[0].content == [Text("wait…")]
