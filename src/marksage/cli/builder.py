#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marksage/cli/builder.py
"""Argument parser construction for the marksage CLI.

Help text for shared flags comes from the field metadata of
:class:`~marksage.options.MarksageOptions`. Every flag defaults to None so
that unset flags do not override configuration files or the environment.
"""

from __future__ import annotations

import argparse
from dataclasses import fields
from importlib.metadata import PackageNotFoundError, version

from marksage.constants import EXIT_VALIDATION_ERROR
from marksage.logging_utils import LOG_LEVELS
from marksage.options import MarksageOptions

__all__ = ["EXIT_VALIDATION_ERROR", "create_parser", "get_version", "positive_int"]

_EPILOG = """\
examples:
  marksage --vault-path ~/notes archive
  marksage --vault-path ~/notes --dry-run format
  marksage --vault-path ~/notes notify-conflicts --topic my-vault

configuration:
  .marksage.toml/.yaml/.yml/.json or [tool.marksage] in pyproject.toml,
  searched upward from the vault; MARKSAGE_<OPTION> environment variables
  override files, and command line flags override both.
"""


def get_version() -> str:
    """Get the installed version of marksage."""
    try:
        return version("marksage")
    except PackageNotFoundError:
        return "unknown"


def positive_int(value: str) -> int:
    """Argparse type accepting integers greater than zero."""
    try:
        number = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"{value} is not a valid integer") from e
    if number <= 0:
        raise argparse.ArgumentTypeError(f"{value} is not a positive integer")
    return number


def _help(name: str) -> str:
    option = next(f for f in fields(MarksageOptions) if f.name == name)
    return option.metadata.get("help", "")


def create_parser() -> argparse.ArgumentParser:
    """Create the top-level parser with its subcommands."""
    parser = argparse.ArgumentParser(
        prog="marksage",
        description="Maintain a vault of markdown notes: archive finished todos, "
        "normalize formatting and report sync conflicts.",
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", "-V", action="version", version=f"marksage {get_version()}")

    parser.add_argument("--vault-path", "-v", dest="vault_path", metavar="PATH", help=_help("vault_path"))
    parser.add_argument("--dry-run", "-d", dest="dry_run", action="store_true", default=None, help=_help("dry_run"))
    parser.add_argument("--config", metavar="FILE", help="Configuration file to use instead of searching for one")

    output = parser.add_argument_group("output")
    output.add_argument("--rich", action="store_true", default=None, help=_help("rich"))
    output.add_argument(
        "--log-level",
        dest="log_level",
        type=str.upper,
        choices=LOG_LEVELS,
        help=_help("log_level") + " (default: INFO)",
    )
    output.add_argument("--log-file", dest="log_file", metavar="FILE", help=_help("log_file"))
    output.add_argument(
        "--trace", action="store_true", help="Debug logging with timestamps and logger names, including HTTP"
    )

    parser.add_argument("--jobs", "-j", type=positive_int, metavar="N", help=_help("jobs"))

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    archive = subparsers.add_parser("archive", help="Archive todos that have been entirely completed")
    archive.add_argument("--tag", help=_help("tag") + " (default: todo)")

    subparsers.add_parser("format", help="Apply basic formatting to all markdown files in the vault")

    notify = subparsers.add_parser(
        "notify-conflicts", help="Use ntfy to send a push notification about sync conflicts"
    )
    notify.add_argument("--ntfy-url", "-n", dest="ntfy_url", metavar="URL", help=_help("ntfy_url"))
    notify.add_argument("--topic", "-t", help=_help("topic"))
    notify.add_argument("--timeout", type=float, metavar="SECONDS", help=_help("timeout"))

    return parser
