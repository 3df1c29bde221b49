#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marksage/vault.py
"""Vault file discovery and safe file replacement.

A vault is a directory tree of markdown notes. Hidden entries (names
starting with ``.``, such as ``.obsidian`` or ``.git``) are never visited
when collecting notes, and sync-conflict copies left behind by file
synchronization tools are skipped so they are not rewritten.

"""

from __future__ import annotations

import logging
import os
import re
import tempfile
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Iterator, Optional, Pattern

from marksage.constants import MARKDOWN_EXTENSIONS, SYNC_CONFLICT_MARKER
from marksage.exceptions import FileError, OutputWriteError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NoteFile:
    """A markdown file read from the vault.

    Parameters
    ----------
    path : Path
        Location of the file
    content : str
        Full text of the file; empty when it could not be read
    error : FileError or None, default = None
        Read failure, if any

    """

    path: Path
    content: str
    error: Optional[FileError] = None

    @classmethod
    def at_path(cls, path: Path) -> NoteFile:
        """Read a note from disk.

        Raises
        ------
        FileError
            If the file cannot be read or is not valid UTF-8

        """
        try:
            return cls(path=path, content=path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as e:
            raise FileError(f"Could not read {path}: {e}", file_path=path, original_error=e) from e


def is_sync_conflict(path: Path | str) -> bool:
    """Whether a file name marks a sync-conflict copy."""
    return SYNC_CONFLICT_MARKER in Path(path).name


def _is_hidden(name: str) -> bool:
    return name.startswith(".")


def iter_markdown_paths(vault: Path) -> Iterator[Path]:
    """Yield paths of the markdown notes in a vault, in sorted order.

    Parameters
    ----------
    vault : Path
        Root directory of the vault

    Yields
    ------
    Path
        Each ``*.md`` file that is not hidden, not inside a hidden directory
        and not a sync-conflict copy

    """
    for dirpath, dirnames, filenames in os.walk(vault):
        dirnames[:] = sorted(d for d in dirnames if not _is_hidden(d))
        for filename in sorted(filenames):
            if _is_hidden(filename) or is_sync_conflict(filename):
                continue
            if Path(filename).suffix.lower() in MARKDOWN_EXTENSIONS:
                yield Path(dirpath) / filename


def iter_markdown_files(vault: Path, include_unreadable: bool = False) -> Iterator[NoteFile]:
    """Yield every note in the vault with its content.

    Parameters
    ----------
    vault : Path
        Root directory of the vault
    include_unreadable : bool, default = False
        Yield notes that cannot be read, with their ``error`` set, instead
        of logging and skipping them

    Yields
    ------
    NoteFile
        Path and content of each note

    """
    for path in iter_markdown_paths(vault):
        try:
            note = NoteFile.at_path(path)
        except FileError as e:
            if not include_unreadable:
                logger.warning("Skipping unreadable note: %s", e.message)
                continue
            note = NoteFile(path=path, content="", error=e)
        yield note


@lru_cache(maxsize=None)
def markdown_contains_tag(tag: str) -> Pattern[str]:
    r"""Compile a pattern that matches notes tagged with ``#tag``.

    The tag must appear in the leading tag block of the note: after the
    optional frontmatter and blank lines, among other ``#tags`` separated by
    whitespace. Subtags such as ``#todo/work`` count as the tag; longer tags
    such as ``#todos`` do not. Use ``pattern.match`` on the full note text.

    Parameters
    ----------
    tag : str
        Tag name without the leading ``#``

    Returns
    -------
    Pattern[str]
        Compiled pattern, cached per tag

    Examples
    --------
    >>> bool(markdown_contains_tag("todo").match("#todo #other\n- [ ] test\n"))
    True
    >>> bool(markdown_contains_tag("todo").match("- [ ] #todo test\n"))
    False

    """
    return re.compile(
        r"""
        (?:                         # optional frontmatter
            \n*
            ---\n
            (?:(?!\n---\n).)*?      # frontmatter content
            \n?---\n
        )?
        \n*                         # blank lines
        (?:\#[\w\-/]+\s+)*          # other tags
        \#"""
        + re.escape(tag)
        + r"""(?![\w\-])""",
        re.DOTALL | re.VERBOSE,
    )


def iter_tagged_markdown_files(vault: Path, tag: str, include_unreadable: bool = False) -> Iterator[NoteFile]:
    """Yield the notes whose leading tag block contains ``#tag``.

    With ``include_unreadable``, notes that cannot be read are yielded too,
    since their tags are unknown.
    """
    pattern = markdown_contains_tag(tag)
    for note in iter_markdown_files(vault, include_unreadable=include_unreadable):
        if note.error is not None or pattern.match(note.content):
            yield note


def find_sync_conflicts(vault: Path) -> list[str]:
    """List sync-conflict copies anywhere in the vault.

    Parameters
    ----------
    vault : Path
        Root directory of the vault

    Returns
    -------
    list of str
        Paths relative to the vault, sorted

    """
    conflicts: list[str] = []
    for dirpath, _dirnames, filenames in os.walk(vault):
        for filename in filenames:
            if is_sync_conflict(filename):
                conflicts.append((Path(dirpath) / filename).relative_to(vault).as_posix())
    return sorted(conflicts)


def atomic_overwrite(path: Path, content: str) -> None:
    """Replace a file's content without ever leaving it half-written.

    The new content goes to a uniquely named temporary file in the same
    directory, which is then renamed over the target.

    Parameters
    ----------
    path : Path
        File to replace
    content : str
        New file content

    Raises
    ------
    OutputWriteError
        If the temporary file cannot be written or renamed

    """
    path = Path(path)
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    except OSError as e:
        raise OutputWriteError(f"Could not write {path}: {e}", file_path=path, original_error=e) from e

    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as tmp:
            tmp.write(content)
        if path.exists():
            os.chmod(tmp_name, path.stat().st_mode & 0o7777)
        os.replace(tmp_name, path)
    except OSError as e:
        try:
            os.unlink(tmp_name)
        except OSError:
            logger.debug("Temporary file %s already gone", tmp_name)
        raise OutputWriteError(f"Could not write {path}: {e}", file_path=path, original_error=e) from e
