#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marksage/parsers/__init__.py
"""Parsers turning raw note text into the marksage AST."""

from marksage.parsers.markdown import MarkdownToAstConverter, markdown_to_ast, split_frontmatter

__all__ = ["MarkdownToAstConverter", "markdown_to_ast", "split_frontmatter"]
