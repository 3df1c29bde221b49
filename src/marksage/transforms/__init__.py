#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marksage/transforms/__init__.py
"""Document transforms: checklist archival and text normalization."""

from marksage.transforms.archive import (
    ArchiveTransform,
    Assessment,
    archive_document,
    assess,
    fold_assessments,
    is_archived_heading,
)
from marksage.transforms.text import DOUBLE_HYPHEN_PATTERN, EM_DASH, TextNormalizer

__all__ = [
    "ArchiveTransform",
    "Assessment",
    "archive_document",
    "assess",
    "fold_assessments",
    "is_archived_heading",
    "TextNormalizer",
    "DOUBLE_HYPHEN_PATTERN",
    "EM_DASH",
]
