#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marksage/options.py
"""Run options for the marksage commands.

Options are immutable. Values from configuration files, the environment and
the command line are layered with :meth:`MarksageOptions.create_updated`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Optional

from marksage.constants import DEFAULT_NOTIFY_TIMEOUT, DEFAULT_NTFY_URL, DEFAULT_TODO_TAG
from marksage.exceptions import ValidationError
from marksage.logging_utils import LOG_LEVELS


@dataclass(frozen=True)
class MarksageOptions:
    """Settings shared by every marksage command.

    Parameters
    ----------
    vault_path : str or None, default = None
        Root directory of the vault to operate on
    dry_run : bool, default = False
        Show the changes as diffs instead of writing them
    log_level : str, default = "INFO"
        Logging level name
    log_file : str or None, default = None
        Also write log records to this file
    rich : bool, default = False
        Colored console output through rich
    jobs : int or None, default = None
        Worker threads used to write files; None lets the executor decide
    tag : str, default = "todo"
        Tag marking notes whose checklists are archived
    ntfy_url : str, default = "https://ntfy.sh"
        ntfy server used by ``notify-conflicts``
    topic : str or None, default = None
        ntfy topic used by ``notify-conflicts``
    timeout : float, default = 10.0
        Notification request timeout in seconds

    """

    vault_path: Optional[str] = field(
        default=None,
        metadata={"help": "Path to the vault to operate on"},
    )
    dry_run: bool = field(
        default=False,
        metadata={"help": "Print what would be done without actually doing it"},
    )
    log_level: str = field(
        default="INFO",
        metadata={"help": "Logging level", "choices": list(LOG_LEVELS)},
    )
    log_file: Optional[str] = field(
        default=None,
        metadata={"help": "Write log messages to this file as well"},
    )
    rich: bool = field(
        default=False,
        metadata={"help": "Use rich for colored console output"},
    )
    jobs: Optional[int] = field(
        default=None,
        metadata={"help": "Number of files written in parallel"},
    )
    tag: str = field(
        default=DEFAULT_TODO_TAG,
        metadata={"help": "Tag (without '#') marking notes whose completed todos are archived"},
    )
    ntfy_url: str = field(
        default=DEFAULT_NTFY_URL,
        metadata={"help": "The ntfy server to send the notification to"},
    )
    topic: Optional[str] = field(
        default=None,
        metadata={"help": "The topic to send the notification to"},
    )
    timeout: float = field(
        default=DEFAULT_NOTIFY_TIMEOUT,
        metadata={"help": "Notification request timeout in seconds"},
    )

    def __post_init__(self) -> None:
        """Validate option values."""
        if self.log_level.upper() not in LOG_LEVELS:
            raise ValidationError(
                f"log_level must be one of {', '.join(LOG_LEVELS)}, got {self.log_level!r}",
                parameter_name="log_level",
                parameter_value=self.log_level,
            )
        if self.jobs is not None and self.jobs < 1:
            raise ValidationError(
                f"jobs must be a positive integer, got {self.jobs}",
                parameter_name="jobs",
                parameter_value=self.jobs,
            )
        if self.timeout <= 0:
            raise ValidationError(
                f"timeout must be positive, got {self.timeout}",
                parameter_name="timeout",
                parameter_value=self.timeout,
            )
        if not self.tag or self.tag.startswith("#"):
            raise ValidationError(
                f"tag must be a non-empty name without '#', got {self.tag!r}",
                parameter_name="tag",
                parameter_value=self.tag,
            )

    @classmethod
    def field_names(cls) -> list[str]:
        """Names of all option fields."""
        return [f.name for f in fields(cls)]

    def create_updated(self, **kwargs: Any) -> MarksageOptions:
        """Return a copy with the given fields replaced.

        Unknown field names raise ValidationError instead of TypeError so
        bad configuration keys are reported like other option errors.
        """
        unknown = sorted(set(kwargs) - set(self.field_names()))
        if unknown:
            raise ValidationError(
                f"Unknown option(s): {', '.join(unknown)}",
                parameter_name=unknown[0],
                parameter_value=kwargs[unknown[0]],
            )
        return replace(self, **kwargs)
