#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marksage/cli/progress.py
"""Console reporting for the CLI, in rich or plain text.

Success messages go to stdout and failures to stderr so the output of a
run can be piped while errors stay visible.
"""

from __future__ import annotations

import sys
from typing import IO, Any, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

_LEVEL_STYLES = {"success": "green", "error": "red", "warning": "yellow", "info": ""}


class ProgressContext:
    """Progress bar and per-item messages for one command run.

    Parameters
    ----------
    use_rich : bool
        Render a rich progress bar and colored messages
    total : int or None
        Number of items, when known up front
    description : str
        Label for the progress bar

    Examples
    --------
    >>> with ProgressContext(use_rich=False, total=None, description="Archiving") as progress:
    ...     progress.log("Archived todo.md", level="success")
    ...     progress.update()

    """

    def __init__(
        self,
        use_rich: bool,
        total: Optional[int],
        description: str,
        stdout: Optional[IO[str]] = None,
        stderr: Optional[IO[str]] = None,
    ):
        """Initialize progress context."""
        self.use_rich = use_rich
        self.total = total
        self.description = description
        self.stdout = stdout
        self.stderr = stderr

        self._progress: Any = None
        self._task_id: Any = None
        self._console: Optional[Console] = None
        self._error_console: Optional[Console] = None
        self.completed = 0

    def __enter__(self) -> ProgressContext:
        """Start the progress bar when rich output is enabled."""
        if self.use_rich:
            from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

            self._console = Console(file=self.stdout)
            self._error_console = Console(file=self.stderr, stderr=self.stderr is None)
            self._progress = Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                TaskProgressColumn(),
                console=self._console,
                transient=True,
            )
            self._progress.__enter__()
            self._task_id = self._progress.add_task(f"[cyan]{self.description}...", total=self.total)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Stop the progress bar."""
        if self._progress is not None:
            self._progress.__exit__(exc_type, exc_val, exc_tb)
            self._progress = None

    def update(self, advance: int = 1) -> None:
        """Advance the progress bar."""
        self.completed += advance
        if self._progress is not None:
            self._progress.update(self._task_id, advance=advance)

    def log(self, message: str, level: str = "info") -> None:
        """Print a message for one item.

        Parameters
        ----------
        message : str
            Message text; may contain ANSI colors from diff previews
        level : str, default = "info"
            One of "info", "success", "warning" or "error"

        """
        if self.use_rich and self._console is not None and self._error_console is not None:
            console = self._error_console if level == "error" else self._console
            console.print(Text.from_ansi(message, style=_LEVEL_STYLES.get(level, "")))
            return

        if level == "error":
            print(message, file=self.stderr or sys.stderr)
        else:
            print(message, file=self.stdout or sys.stdout)


class SummaryRenderer:
    """Render the end-of-run summary in rich or plain text.

    Parameters
    ----------
    use_rich : bool
        Render a rich table instead of plain lines

    """

    def __init__(self, use_rich: bool, stream: Optional[IO[str]] = None):
        """Initialize summary renderer."""
        self.use_rich = use_rich
        self.stream = stream

    def render_change_summary(self, changed: int, failed: int, verb: str, dry_run: bool = False) -> None:
        """Print how many files were changed and how many failed.

        Parameters
        ----------
        changed : int
            Files written (or previewed on a dry run)
        failed : int
            Files that could not be written
        verb : str
            Action name shown in the title, e.g. "Archived"
        dry_run : bool, default = False
            Whether the run only previewed changes

        """
        title = f"{verb} summary" + (" (dry run)" if dry_run else "")
        if self.use_rich:
            table = Table(title=title)
            table.add_column("Status", style="cyan", no_wrap=True)
            table.add_column("Files", style="magenta")
            table.add_row("+ Would change" if dry_run else "+ Changed", str(changed))
            table.add_row("- Failed", str(failed))
            Console(file=self.stream, stderr=self.stream is None).print(table)
        else:
            stream = self.stream or sys.stderr
            print(f"{title}: {changed} changed, {failed} failed", file=stream)


__all__ = ["ProgressContext", "SummaryRenderer"]
