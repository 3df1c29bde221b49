#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the marksage library.

This module defines specialized exception classes for the error conditions
that can occur while parsing, transforming, rendering and writing vault
documents.

Exception Hierarchy
-------------------
- MarksageError (base exception)

  - ValidationError (parameter/option validation)

  - FileError (file access and I/O)
    - OutputWriteError (file write failures)

  - ParsingError (markdown parsing failures)

  - RenderingError (markdown generation failures)
    - UnsupportedNodeError (node kind the serializer does not cover)

  - TransformError (AST transformation failures)
    - ArchiveError (archive rewrite invariant violations)

  - NotificationError (push notification delivery failures)

Parse, render and transform errors signal internal faults. The vault
commands still report them against the note they occurred in, like file
errors, and carry on with the remaining notes.

"""

from __future__ import annotations

from pathlib import Path
from typing import Any


class MarksageError(Exception):
    """Base exception class for all marksage-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(MarksageError):
    """Exception raised for invalid input parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class FileError(MarksageError):
    """Exception raised when a vault file cannot be read or written.

    Parameters
    ----------
    message : str
        Description of the file error
    file_path : str or Path, optional
        Path of the file involved
    original_error : Exception, optional
        The underlying OSError

    """

    def __init__(
        self,
        message: str,
        file_path: str | Path | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the file error with the offending path."""
        super().__init__(message, original_error=original_error)
        self.file_path = file_path


class OutputWriteError(FileError):
    """Exception raised when replacing a file with new content fails."""


class ParsingError(MarksageError):
    """Exception raised when markdown text cannot be turned into an AST.

    The accepted grammar is total over arbitrary input, so this always
    indicates a configuration or internal fault.

    Parameters
    ----------
    message : str
        Description of the parsing failure
    parsing_stage : str, optional
        Stage at which parsing failed (e.g. "tokenizing", "ast_building")
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parsing_stage: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the parsing error with stage information."""
        super().__init__(message, original_error=original_error)
        self.parsing_stage = parsing_stage


class RenderingError(MarksageError):
    """Exception raised when an AST cannot be rendered to markdown."""


class UnsupportedNodeError(RenderingError):
    """Exception raised when the serializer meets a node kind it does not cover.

    Parameters
    ----------
    node : Any
        The node that could not be rendered

    """

    def __init__(self, node: Any):
        """Initialize with the unrenderable node."""
        super().__init__(f"Cannot render node of type {type(node).__name__}")
        self.node = node


class TransformError(MarksageError):
    """Exception raised when an AST transformation fails.

    Parameters
    ----------
    message : str
        Description of the transformation failure
    transform_name : str, optional
        Name of the transform that failed
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        transform_name: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the transform error with the transform name."""
        super().__init__(message, original_error=original_error)
        self.transform_name = transform_name


class ArchiveError(TransformError):
    """Exception raised when the archive rewrite reaches an impossible state.

    This signals a disagreement between the classifier and the rewriter.
    The note is left untouched and reported as failed.

    """

    def __init__(self, message: str):
        """Initialize the archive error."""
        super().__init__(message, transform_name="archive")


class NotificationError(MarksageError):
    """Exception raised when a push notification cannot be delivered.

    Parameters
    ----------
    message : str
        Description of the delivery failure
    url : str, optional
        Notification endpoint that was contacted
    original_error : Exception, optional
        The underlying HTTP error

    """

    def __init__(self, message: str, url: str | None = None, original_error: Exception | None = None):
        """Initialize the notification error with the endpoint url."""
        super().__init__(message, original_error=original_error)
        self.url = url


__all__ = [
    "MarksageError",
    "ValidationError",
    "FileError",
    "OutputWriteError",
    "ParsingError",
    "RenderingError",
    "UnsupportedNodeError",
    "TransformError",
    "ArchiveError",
    "NotificationError",
]
