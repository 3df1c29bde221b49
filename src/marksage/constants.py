#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marksage/constants.py
"""Constants shared across marksage modules."""

from __future__ import annotations

from typing import Literal

# =========================================================================
# Archive section
# =========================================================================

ARCHIVED_HEADING_TEXT = "Archived"
ARCHIVED_HEADING_LEVEL = 2

# =========================================================================
# Markdown serialization
# =========================================================================

LIST_INDENT_WIDTH = 4
BULLET_MARKER = "-"
CODE_FENCE_CHAR = "`"
CODE_FENCE_MIN = 3
FRONTMATTER_DELIMITER = "---"
THEMATIC_BREAK = "---"

TableAlignment = Literal["left", "center", "right"]

# Minimum rendered width of a delimiter cell for each alignment
MIN_DELIMITER_WIDTH: dict[TableAlignment | None, int] = {
    "left": 2,
    "center": 3,
    "right": 2,
    None: 1,
}

# Plugins enabled on the mistune parser (GFM superset with footnotes and math)
MISTUNE_PLUGINS = ("strikethrough", "table", "footnotes", "task_lists", "math")

# =========================================================================
# Vault traversal
# =========================================================================

MARKDOWN_EXTENSIONS = (".md",)
SYNC_CONFLICT_MARKER = ".sync-conflict-"
DEFAULT_TODO_TAG = "todo"

# =========================================================================
# Notifications
# =========================================================================

DEFAULT_NTFY_URL = "https://ntfy.sh"
DEFAULT_NOTIFY_TIMEOUT = 10.0

# =========================================================================
# CLI exit codes
# =========================================================================

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_VALIDATION_ERROR = 2

# =========================================================================
# Configuration
# =========================================================================

ENV_PREFIX = "MARKSAGE_"
CONFIG_FILENAMES = (".marksage.toml", ".marksage.yaml", ".marksage.yml", ".marksage.json")
