#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marksage/commands.py
"""The archive and format operations over a whole vault.

Each operation runs in two phases. Planning reads and rewrites notes in
memory and yields a :class:`PlannedChange` for every file whose text would
change, and for every file that could not be read or rewritten. Applying
writes those changes (or previews them on a dry run) in a thread pool and
reports each file on its own, so one failed note never stops the others.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional

from marksage.ast.transforms import transform_document
from marksage.constants import EXIT_ERROR, EXIT_SUCCESS
from marksage.diff import UnifiedDiffRenderer
from marksage.document import MarkdownDocument
from marksage.exceptions import FileError, MarksageError
from marksage.transforms.archive import archive_document
from marksage.transforms.text import TextNormalizer
from marksage.vault import NoteFile, atomic_overwrite, iter_markdown_files, iter_tagged_markdown_files

logger = logging.getLogger(__name__)


def archive_text(text: str) -> Optional[str]:
    """Archive the finished todos of one note.

    Parameters
    ----------
    text : str
        Full note text, frontmatter included

    Returns
    -------
    str or None
        The rewritten note, or None when no item qualifies

    Examples
    --------
    >>> print(archive_text("- [x] done\\n- [ ] open\\n"), end="")
    - [ ] open
    <BLANKLINE>
    ## Archived
    <BLANKLINE>
    - [x] done

    """
    note = MarkdownDocument.parse(text)
    archived = archive_document(note.body)
    if archived is None:
        return None
    return note.with_body(archived).render()


def format_text(text: str) -> Optional[str]:
    """Normalize one note: canonical markdown plus typographic fixes.

    Returns the new text, or None when it equals the input.
    """
    note = MarkdownDocument.parse(text)
    body = transform_document(note.body, TextNormalizer())
    rendered = note.with_body(body).render()
    return None if rendered == text else rendered


@dataclass(frozen=True)
class PlannedChange:
    """New content for one file.

    A change that carries an ``error`` records a note that could not be
    read or rewritten. It is reported like any other change but never
    written.

    Parameters
    ----------
    path : Path
        File to rewrite
    old : str
        Current content
    new : str
        Content to write
    error : MarksageError or None, default = None
        Read or rewrite failure found while planning

    """

    path: Path
    old: str
    new: str
    error: Optional[MarksageError] = None


@dataclass(frozen=True)
class ChangeResult:
    """Outcome of applying one :class:`PlannedChange`.

    Parameters
    ----------
    change : PlannedChange
        The change that was applied
    error : MarksageError or None, default = None
        Planning or write failure, if any
    preview : str or None, default = None
        Rendered diff on a dry run

    """

    change: PlannedChange
    error: Optional[MarksageError] = None
    preview: Optional[str] = None

    @property
    def exit_code(self) -> int:
        """0 on success, 1 on failure."""
        return EXIT_ERROR if self.error is not None else EXIT_SUCCESS


def _plan_changes(notes: Iterable[NoteFile], rewrite: Callable[[str], Optional[str]]) -> Iterator[PlannedChange]:
    """Rewrite each note, turning per-note failures into failed changes."""
    for note in notes:
        if note.error is not None:
            yield PlannedChange(path=note.path, old="", new="", error=note.error)
            continue
        try:
            new = rewrite(note.content)
        except MarksageError as e:
            logger.debug("Could not rewrite %s", note.path, exc_info=True)
            yield PlannedChange(path=note.path, old=note.content, new=note.content, error=e)
            continue
        if new is not None:
            yield PlannedChange(path=note.path, old=note.content, new=new)


def plan_archive(vault: Path, tag: str) -> Iterator[PlannedChange]:
    """Yield the archive rewrite of every note tagged ``#tag``.

    Notes that cannot be read, or whose rewrite fails, are yielded as
    changes carrying the error.
    """
    return _plan_changes(iter_tagged_markdown_files(vault, tag, include_unreadable=True), archive_text)


def plan_format(vault: Path) -> Iterator[PlannedChange]:
    """Yield the formatting rewrite of every note that would change, plus failed notes."""
    return _plan_changes(iter_markdown_files(vault, include_unreadable=True), format_text)


def describe_result(result: ChangeResult, verb: str, vault: Optional[Path] = None) -> str:
    """Build the console message for one applied change.

    Parameters
    ----------
    result : ChangeResult
        Outcome to describe
    verb : str
        Past-tense action shown before the path, e.g. "Archived"
    vault : Path, optional
        Paths are shown relative to this directory when given

    Returns
    -------
    str
        One or more lines of text

    """
    path = result.change.path
    if vault is not None:
        try:
            path = path.relative_to(vault)
        except ValueError:
            pass

    lines = [f"{verb} {path}"]
    if result.error is not None:
        lines.append(f"Failed to apply changes: {result.error.message}")
    elif result.preview is not None:
        lines.append("  dry run, would make the following changes:")
        lines.append(result.preview.rstrip("\n"))
    return "\n".join(lines)


def apply_change(
    change: PlannedChange, dry_run: bool = False, diff_renderer: Optional[UnifiedDiffRenderer] = None
) -> ChangeResult:
    """Write one change, or render its diff on a dry run.

    Changes that failed during planning are reported as failed and never
    written.
    """
    if change.error is not None:
        return ChangeResult(change=change, error=change.error)

    if dry_run:
        renderer = diff_renderer or UnifiedDiffRenderer(use_color=False)
        preview = renderer.render_to_string(change.old, change.new, change.path.name)
        return ChangeResult(change=change, preview=preview)

    try:
        atomic_overwrite(change.path, change.new)
    except FileError as e:
        logger.debug("Write failed for %s", change.path, exc_info=True)
        return ChangeResult(change=change, error=e)
    return ChangeResult(change=change)


def apply_changes(
    changes: Iterable[PlannedChange],
    dry_run: bool = False,
    jobs: Optional[int] = None,
    on_result: Optional[Callable[[ChangeResult], None]] = None,
    diff_renderer: Optional[UnifiedDiffRenderer] = None,
) -> int:
    """Apply changes in parallel and report each outcome.

    Parameters
    ----------
    changes : iterable of PlannedChange
        Changes to apply
    dry_run : bool, default = False
        Render diffs instead of writing
    jobs : int, optional
        Worker thread count; None uses the executor default
    on_result : callable, optional
        Called with each :class:`ChangeResult`, in the order of ``changes``
    diff_renderer : UnifiedDiffRenderer, optional
        Renderer for dry-run previews

    Returns
    -------
    int
        The worst exit code over all files; 0 when there were none

    """
    exit_code = EXIT_SUCCESS
    with ThreadPoolExecutor(max_workers=jobs) as executor:
        results = executor.map(lambda change: apply_change(change, dry_run, diff_renderer), changes)
        for result in results:
            if on_result is not None:
                on_result(result)
            exit_code = max(exit_code, result.exit_code)
    return exit_code
