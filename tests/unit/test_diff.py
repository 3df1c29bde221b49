#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Unit tests for dry-run diff previews."""

import io

import pytest

from marksage.diff import UnifiedDiffRenderer, unified_diff


@pytest.mark.unit
class TestUnifiedDiff:
    """Test diff computation."""

    def test_equal_texts(self) -> None:
        """Identical texts give no diff."""
        assert unified_diff("same\n", "same\n", "note.md") == []

    def test_headers_and_hunk(self) -> None:
        """The diff names the file and shows the changed lines."""
        lines = unified_diff("a\nb\n", "a\nc\n", "note.md")
        assert lines == ["--- a/note.md", "+++ b/note.md", "@@ -1,2 +1,2 @@", " a", "-b", "+c"]

    def test_default_headers(self) -> None:
        """Without a path the sides are called before and after."""
        lines = unified_diff("a\n", "b\n")
        assert lines[:2] == ["--- before", "+++ after"]

    def test_context_lines(self) -> None:
        """The amount of context can be reduced."""
        old = "1\n2\n3\n4\n5\n"
        new = "1\n2\nX\n4\n5\n"
        assert unified_diff(old, new, context_lines=0)[2:] == ["@@ -3 +3 @@", "-3", "+X"]


@pytest.mark.unit
class TestUnifiedDiffRenderer:
    """Test diff rendering."""

    def test_plain_rendering(self) -> None:
        """Without color the lines pass through."""
        renderer = UnifiedDiffRenderer(use_color=False)
        assert renderer.render_to_string("a\n", "b\n", "n.md") == "--- a/n.md\n+++ b/n.md\n@@ -1 +1 @@\n-a\n+b\n"

    def test_colored_rendering(self) -> None:
        """Each line kind gets its color."""
        renderer = UnifiedDiffRenderer(use_color=True)
        lines = list(renderer.render(["--- a/x", "+++ b/x", "@@ -1 +1 @@", " same", "-old", "+new"]))
        assert lines[0] == "\033[1m--- a/x\033[0m"
        assert lines[2] == "\033[36m@@ -1 +1 @@\033[0m"
        assert lines[3] == " same"
        assert lines[4] == "\033[31m-old\033[0m"
        assert lines[5] == "\033[32m+new\033[0m"

    def test_color_detection(self) -> None:
        """Colors are off for streams that are not terminals."""
        assert not UnifiedDiffRenderer(stream=io.StringIO()).use_color

    def test_no_changes_renders_nothing(self) -> None:
        """Equal texts render an empty preview."""
        assert UnifiedDiffRenderer(use_color=False).render_to_string("x\n", "x\n") == ""
