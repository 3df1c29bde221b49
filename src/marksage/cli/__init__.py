#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marksage/cli/__init__.py
"""Command-line interface for marksage.

Examples
--------
Archive finished todos in notes tagged ``#todo``::

    $ marksage --vault-path ~/notes archive

Preview formatting changes as diffs::

    $ marksage --vault-path ~/notes --dry-run format

Report sync conflicts through ntfy::

    $ marksage --vault-path ~/notes notify-conflicts --topic my-vault

Use environment variables for defaults::

    $ export MARKSAGE_VAULT_PATH=~/notes
    $ export MARKSAGE_RICH=true
    $ marksage archive

"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from marksage.cli.builder import create_parser
from marksage.cli.commands import COMMAND_HANDLERS
from marksage.config import load_options
from marksage.constants import EXIT_VALIDATION_ERROR
from marksage.exceptions import ValidationError
from marksage.logging_utils import configure_logging
from marksage.options import MarksageOptions

logger = logging.getLogger(__name__)

__all__ = ["main", "create_parser", "resolve_options"]


def resolve_options(parsed_args: argparse.Namespace) -> MarksageOptions:
    """Merge parsed flags with configuration files and the environment.

    Parameters
    ----------
    parsed_args : argparse.Namespace
        Parsed command-line arguments

    Returns
    -------
    MarksageOptions
        Options for the run

    Raises
    ------
    ValidationError
        If the configuration is invalid, or the vault path is missing or does
        not exist

    """
    cli_values = {name: getattr(parsed_args, name, None) for name in MarksageOptions.field_names()}
    options = load_options(cli_values, config_path=parsed_args.config)

    if not options.vault_path:
        raise ValidationError("--vault-path is required", parameter_name="vault_path")

    vault = Path(options.vault_path).expanduser()
    if not vault.exists():
        raise ValidationError(
            f"Path not found: {vault}",
            parameter_name="vault_path",
            parameter_value=options.vault_path,
        )
    return options.create_updated(vault_path=str(vault))


def main(args: list[str] | None = None) -> int:
    """Run the marksage CLI and return the process exit code."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    try:
        options = resolve_options(parsed_args)
    except ValidationError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    log_level = "DEBUG" if parsed_args.trace else options.log_level
    configure_logging(log_level, log_file=options.log_file, trace_mode=parsed_args.trace)
    logger.debug("Running %s on %s", parsed_args.command, options.vault_path)

    return COMMAND_HANDLERS[parsed_args.command](options)


if __name__ == "__main__":
    sys.exit(main())
