#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marksage/renderers/__init__.py
"""Renderers turning the marksage AST back into text."""

from marksage.renderers.markdown import MarkdownRenderer, RenderContext, display_width, render_markdown

__all__ = ["MarkdownRenderer", "RenderContext", "display_width", "render_markdown"]
