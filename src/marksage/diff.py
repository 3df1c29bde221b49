#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marksage/diff.py
"""Unified diff previews for dry runs.

Dry runs never touch the vault; instead each planned rewrite is shown as a
unified diff between the current file and the text that would be written.

"""

from __future__ import annotations

import difflib
import sys
from typing import IO, Iterable, Iterator, Optional

DEFAULT_CONTEXT_LINES = 3

# ANSI escape codes
_RED = "\033[31m"
_GREEN = "\033[32m"
_CYAN = "\033[36m"
_BOLD = "\033[1m"
_RESET = "\033[0m"


def unified_diff(old: str, new: str, path: str = "", context_lines: int = DEFAULT_CONTEXT_LINES) -> list[str]:
    """Compute a unified diff between two versions of a note.

    Parameters
    ----------
    old : str
        Current file content
    new : str
        Proposed file content
    path : str, default = ""
        File name shown in the ``---``/``+++`` headers
    context_lines : int, default = 3
        Unchanged lines shown around each change

    Returns
    -------
    list of str
        Diff lines without trailing newlines; empty when the texts are equal

    Examples
    --------
    >>> unified_diff("a\\nb\\n", "a\\nc\\n", "note.md")[2:]
    ['@@ -1,2 +1,2 @@', ' a', '-b', '+c']

    """
    return list(
        difflib.unified_diff(
            old.splitlines(),
            new.splitlines(),
            fromfile=f"a/{path}" if path else "before",
            tofile=f"b/{path}" if path else "after",
            n=context_lines,
            lineterm="",
        )
    )


class UnifiedDiffRenderer:
    """Render unified diff lines, optionally with ANSI colors.

    Deletions are red, additions green, hunk headers cyan and file headers
    bold. Context lines are left as they are.

    Parameters
    ----------
    use_color : bool or None, default = None
        Force colors on or off; None enables them when ``stream`` is a tty
    stream : IO[str] or None, default = None
        Stream the output is meant for, used to detect a terminal

    """

    def __init__(self, use_color: Optional[bool] = None, stream: Optional[IO[str]] = None):
        """Initialize the renderer."""
        if use_color is None:
            target = stream if stream is not None else sys.stdout
            use_color = bool(getattr(target, "isatty", lambda: False)())
        self.use_color = use_color

    def render(self, diff_lines: Iterable[str]) -> Iterator[str]:
        """Yield the diff lines, colored when enabled."""
        if not self.use_color:
            yield from diff_lines
            return

        for line in diff_lines:
            if line.startswith(("---", "+++")):
                yield f"{_BOLD}{line}{_RESET}"
            elif line.startswith("@@"):
                yield f"{_CYAN}{line}{_RESET}"
            elif line.startswith("+"):
                yield f"{_GREEN}{line}{_RESET}"
            elif line.startswith("-"):
                yield f"{_RED}{line}{_RESET}"
            else:
                yield line

    def render_to_string(self, old: str, new: str, path: str = "") -> str:
        """Diff two texts and return the rendered preview."""
        lines = self.render(unified_diff(old, new, path))
        return "".join(line + "\n" for line in lines)
