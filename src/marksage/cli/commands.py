#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marksage/cli/commands.py
"""Subcommand handlers for the marksage CLI.

Each handler receives validated options and returns a process exit code.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable

from marksage.cli.progress import ProgressContext, SummaryRenderer
from marksage.commands import ChangeResult, PlannedChange, apply_changes, describe_result, plan_archive, plan_format
from marksage.constants import EXIT_VALIDATION_ERROR
from marksage.diff import UnifiedDiffRenderer
from marksage.notify import notify_conflicts
from marksage.options import MarksageOptions

logger = logging.getLogger(__name__)


def _run_changes(options: MarksageOptions, changes: Iterable[PlannedChange], verb: str, description: str) -> int:
    """Apply planned changes with console reporting."""
    vault = Path(options.vault_path or ".")
    counts = {"changed": 0, "failed": 0}

    with ProgressContext(use_rich=options.rich, total=None, description=description) as progress:

        def report(result: ChangeResult) -> None:
            progress.update()
            if result.error is not None:
                counts["failed"] += 1
                progress.log(describe_result(result, verb, vault), level="error")
            else:
                counts["changed"] += 1
                progress.log(describe_result(result, verb, vault), level="success")

        exit_code = apply_changes(
            changes,
            dry_run=options.dry_run,
            jobs=options.jobs,
            on_result=report,
            diff_renderer=UnifiedDiffRenderer(use_color=True if options.rich else None),
        )

    if options.rich:
        SummaryRenderer(use_rich=True).render_change_summary(
            counts["changed"], counts["failed"], verb, dry_run=options.dry_run
        )
    logger.debug("%s %d file(s), %d failed", verb, counts["changed"], counts["failed"])
    return exit_code


def handle_archive_command(options: MarksageOptions) -> int:
    """Move completed todos of tagged notes under their Archived heading."""
    vault = Path(options.vault_path or ".")
    logger.info("Archiving completed todos in notes tagged #%s", options.tag)
    return _run_changes(options, plan_archive(vault, options.tag), "Archived", "Archiving")


def handle_format_command(options: MarksageOptions) -> int:
    """Rewrite every note in canonical markdown form."""
    vault = Path(options.vault_path or ".")
    logger.info("Formatting notes in %s", vault)
    return _run_changes(options, plan_format(vault), "Formatted", "Formatting")


def handle_notify_conflicts_command(options: MarksageOptions) -> int:
    """Send a push notification listing the vault's sync conflicts."""
    if not options.topic:
        logger.error("notify-conflicts requires --topic")
        return EXIT_VALIDATION_ERROR
    return notify_conflicts(
        Path(options.vault_path or "."),
        topic=options.topic,
        ntfy_url=options.ntfy_url,
        timeout=options.timeout,
    )


COMMAND_HANDLERS: dict[str, Callable[[MarksageOptions], int]] = {
    "archive": handle_archive_command,
    "format": handle_format_command,
    "notify-conflicts": handle_notify_conflicts_command,
}


__all__ = [
    "COMMAND_HANDLERS",
    "handle_archive_command",
    "handle_format_command",
    "handle_notify_conflicts_command",
]
