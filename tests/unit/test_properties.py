#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Property-based tests for rendering stability and archival."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from marksage.commands import archive_text, format_text
from marksage.document import MarkdownDocument

words = st.text(alphabet="abcdefghijklmnopqrstuvwxyz", min_size=1, max_size=8)
phrases = st.lists(words, min_size=1, max_size=4).map(" ".join)
checkbox = st.sampled_from(["[x] ", "[ ] ", ""])


@st.composite
def checklists(draw, depth: int = 0) -> str:
    """Draw a nested bullet list in canonical form."""
    indent = "    " * depth
    lines = []
    for _ in range(draw(st.integers(min_value=1, max_value=4))):
        lines.append(f"{indent}- {draw(checkbox)}{draw(phrases)}\n")
        if depth < 2 and draw(st.booleans()):
            lines.append(draw(checklists(depth + 1)))
    return "".join(lines)


@st.composite
def notes(draw) -> str:
    """Draw a note of headings, paragraphs and checklists."""
    blocks = []
    for _ in range(draw(st.integers(min_value=1, max_value=5))):
        kind = draw(st.sampled_from(["heading", "paragraph", "list"]))
        if kind == "heading":
            blocks.append(f"{'#' * draw(st.integers(min_value=1, max_value=6))} {draw(phrases)}\n")
        elif kind == "paragraph":
            blocks.append(f"{draw(phrases)}\n")
        else:
            blocks.append(draw(checklists()))
    return "\n".join(blocks)


@pytest.mark.unit
class TestProperties:
    """Invariants over generated notes."""

    @given(notes())
    def test_rendering_is_stable(self, text: str) -> None:
        """Rendered output renders to itself."""
        once = MarkdownDocument.parse(text).render()
        assert MarkdownDocument.parse(once).render() == once

    @given(notes())
    def test_format_is_idempotent(self, text: str) -> None:
        """Formatting formatted text changes nothing."""
        formatted = format_text(text) or text
        assert format_text(formatted) is None

    @given(notes())
    def test_archive_is_idempotent(self, text: str) -> None:
        """A second archive pass finds nothing to move."""
        archived = archive_text(text)
        if archived is not None:
            assert archive_text(archived) is None

    @given(notes())
    def test_archive_keeps_every_item(self, text: str) -> None:
        """Archiving moves items without losing or duplicating any."""
        archived = archive_text(text)
        if archived is None:
            return

        def items(note: str) -> list[str]:
            return sorted(line.strip() for line in note.splitlines() if line.lstrip().startswith("- "))

        assert items(archived) == items(text)
