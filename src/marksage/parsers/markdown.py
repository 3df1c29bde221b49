#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/marksage/parsers/markdown.py
"""Markdown to AST parser.

This module converts vault notes into the marksage AST using mistune's
token stream. The grammar is CommonMark plus the GFM extensions (tables,
task lists, strikethrough), footnotes and math. An optional frontmatter
block at the top of the file is split off first and kept verbatim.

"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

import mistune
from mistune.plugins import import_plugin
from mistune.plugins.footnotes import parse_footnote_item

from marksage.ast import (
    BlockQuote,
    Code,
    CodeBlock,
    Definition,
    Document,
    Emphasis,
    FootnoteDefinition,
    FootnoteReference,
    Heading,
    HTMLBlock,
    HTMLInline,
    Image,
    ImageReference,
    LineBreak,
    Link,
    LinkReference,
    List,
    ListItem,
    MathBlock,
    MathInline,
    Node,
    Paragraph,
    Strikethrough,
    Strong,
    Table,
    TableCell,
    TableRow,
    TaskStatus,
    Text,
    ThematicBreak,
)
from marksage.constants import FRONTMATTER_DELIMITER, MISTUNE_PLUGINS
from marksage.exceptions import ParsingError

logger = logging.getLogger(__name__)

# [label]: url "title" as written in the source
_DEFINITION_PATTERN = re.compile(
    r"""^\ {0,3}\[(?P<label>(?:[^\\\[\]]|\\.)+)\]:[ \t]*\n?[ \t]*
    (?P<url><[^<>\n]*>|\S+)
    (?:\s+(?P<title>"(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*'|\((?:[^()\\]|\\.)*\)))?
    \s*$""",
    re.VERBOSE | re.DOTALL,
)

_FOOTNOTE_LABEL_PATTERN = re.compile(r"\[\^((?:[^\\\[\]\s]|\\.){1,500})\]")


class _DefinitionKeepingBlockParser(mistune.BlockParser):
    """Block parser that leaves a token behind for link reference definitions.

    mistune resolves definitions into ``state.env`` and drops them from the
    token stream; the serializer needs them back in document order.

    """

    def parse_ref_link(self, m: re.Match[str], state: Any) -> Optional[int]:
        last = state.last_token()
        continues_paragraph = bool(last and last["type"] == "paragraph")
        end_pos = super().parse_ref_link(m, state)
        if end_pos and not continues_paragraph:
            state.append_token({"type": "ref_definition", "raw": state.src[m.start() : end_pos]})
        return end_pos


class _EscapeKeepingInlineParser(mistune.InlineParser):
    """Inline parser that keeps backslash escapes in text as written.

    mistune resolves ``\\#`` to ``#`` in text tokens, which would turn an
    escaped character back into syntax when the note is written out.

    """

    def parse_escape(self, m: re.Match[str], state: Any) -> int:
        self.process_text(m.group(0), state, parse_emphasis=False)
        return m.end()


def split_frontmatter(text: str) -> tuple[Optional[str], str]:
    """Split an optional frontmatter block off the top of a note.

    Frontmatter starts with a ``---`` line at the very start of the text and
    ends at the next line that is exactly ``---``.

    Parameters
    ----------
    text : str
        Full note text

    Returns
    -------
    tuple of (str or None, str)
        Frontmatter content (without delimiters or trailing newline) and the
        remaining body. The frontmatter is None when the note has none.

    Examples
    --------
    >>> split_frontmatter("---\\ntags: [a]\\n---\\n\\n# Hi\\n")
    ('tags: [a]', '\\n# Hi\\n')

    """
    opener = FRONTMATTER_DELIMITER + "\n"
    if not text.startswith(opener):
        return None, text

    lines = text[len(opener) :].split("\n")
    for index, line in enumerate(lines):
        if line == FRONTMATTER_DELIMITER:
            frontmatter = "\n".join(lines[:index])
            body = "\n".join(lines[index + 1 :])
            return frontmatter, body

    return None, text


def _footnote_labels(text: str) -> dict[str, str]:
    """Map mistune's case-folded footnote keys back to the labels as written."""
    labels: dict[str, str] = {}
    for match in _FOOTNOTE_LABEL_PATTERN.finditer(text):
        labels.setdefault(mistune.unikey(match.group(1)), match.group(1))
    return labels


class MarkdownToAstConverter:
    """Convert markdown text to an AST Document.

    A converter instance owns its mistune parser and can be reused for any
    number of notes; no state is carried between ``parse`` calls.

    Parameters
    ----------
    plugins : tuple of str, default = MISTUNE_PLUGINS
        mistune plugins to enable

    Examples
    --------
    >>> doc = MarkdownToAstConverter().parse("- [x] done\\n")
    >>> doc.children[0].items[0].task_status
    'checked'

    """

    def __init__(self, plugins: tuple[str, ...] = MISTUNE_PLUGINS):
        """Initialize the converter and build the mistune parser."""
        self.plugins = plugins
        self._footnote_labels: dict[str, str] = {}
        try:
            self._markdown = mistune.Markdown(
                renderer=None,
                block=_DefinitionKeepingBlockParser(),
                inline=_EscapeKeepingInlineParser(),
                plugins=[import_plugin(name) for name in plugins],  # type: ignore[arg-type]
            )
        except (ImportError, AttributeError, ValueError) as e:
            raise ParsingError(
                f"Could not configure markdown parser: {e}", parsing_stage="setup", original_error=e
            ) from e

    def parse(self, markdown_content: str) -> Document:
        """Parse markdown text (without frontmatter) into an AST Document.

        Parameters
        ----------
        markdown_content : str
            Markdown body to parse

        Returns
        -------
        Document
            AST document node

        Raises
        ------
        ParsingError
            If mistune fails on the input

        """
        # Reset per-document state so nothing leaks across parse calls
        self._footnote_labels = _footnote_labels(markdown_content)

        try:
            tokens, state = self._markdown.parse(markdown_content)
            if not isinstance(tokens, list):
                raise ParsingError("mistune returned rendered output instead of tokens", parsing_stage="tokenizing")
            tokens = tokens + self._unreferenced_footnotes(state)
        except ParsingError:
            raise
        except Exception as e:
            raise ParsingError(f"Failed to tokenize markdown: {e}", parsing_stage="tokenizing", original_error=e) from e

        try:
            children = self._process_tokens(tokens)
        except (KeyError, TypeError, ValueError) as e:
            raise ParsingError(f"Failed to build AST: {e}", parsing_stage="ast_building", original_error=e) from e

        logger.debug("Parsed %d top-level blocks", len(children))
        return Document(children=children)

    def _unreferenced_footnotes(self, state: mistune.BlockState) -> list[dict[str, Any]]:
        """Tokenize footnote definitions that no reference points at.

        The footnotes plugin only emits definitions that are referenced
        somewhere; the rest would silently vanish from the note.

        """
        definitions = state.env.get("ref_footnotes") or {}
        referenced = set(state.env.get("footnotes") or [])
        orphans = [key for key in definitions if key not in referenced]
        if not orphans:
            return []

        start = len(referenced) + 1
        items = [
            parse_footnote_item(self._markdown.block, key, index, state) for index, key in enumerate(orphans, start)
        ]
        footer = mistune.BlockState(parent=state)
        footer.tokens = [{"type": "footnotes", "children": items}]
        rendered = self._markdown.render_state(footer)
        return rendered if isinstance(rendered, list) else []

    def _footnote_label(self, key: str) -> str:
        return self._footnote_labels.get(key, key)

    # ------------------------------------------------------------------
    # Block tokens
    # ------------------------------------------------------------------

    def _process_tokens(self, tokens: list[dict[str, Any]]) -> list[Node]:
        nodes: list[Node] = []
        for token in tokens:
            node = self._process_token(token)
            if node is None:
                continue
            if isinstance(node, list):
                nodes.extend(node)
            else:
                nodes.append(node)
        return nodes

    def _process_token(self, token: dict[str, Any]) -> Node | list[Node] | None:
        """Process a single mistune block token into an AST node.

        Parameters
        ----------
        token : dict
            Mistune token dictionary with 'type' and other fields

        Returns
        -------
        Node, list of Node, or None
            Resulting AST node(s); None for tokens with no document content

        Raises
        ------
        ParsingError
            For token types with no AST counterpart

        """
        token_type = token.get("type", "")

        if token_type == "blank_line":
            return None
        elif token_type == "heading":
            return Heading(level=token["attrs"]["level"], content=self._children_inline(token))
        elif token_type in ("paragraph", "block_text"):
            # block_text is what mistune emits for tight list items
            return Paragraph(content=self._children_inline(token))
        elif token_type == "block_code":
            return self._process_code_block(token)
        elif token_type == "block_quote":
            return BlockQuote(children=self._process_tokens(token.get("children", [])))
        elif token_type == "list":
            return self._process_list(token)
        elif token_type == "table":
            return self._process_table(token)
        elif token_type == "thematic_break":
            return ThematicBreak()
        elif token_type == "block_html":
            return HTMLBlock(content=token.get("raw", "").rstrip("\n"))
        elif token_type == "block_math":
            return MathBlock(content=token.get("raw", ""))
        elif token_type == "ref_definition":
            return self._process_definition(token)
        elif token_type == "footnotes":
            return self._process_tokens(token.get("children", []))
        elif token_type == "footnote_item":
            return FootnoteDefinition(
                identifier=self._footnote_label(token["attrs"]["key"]),
                children=self._process_tokens(token.get("children", []))
            )

        raise ParsingError(f"Unknown markdown token type {token_type!r}", parsing_stage="ast_building")

    def _process_code_block(self, token: dict[str, Any]) -> CodeBlock:
        code = token.get("raw", "")
        # fenced code keeps the newline before the closing fence
        if code.endswith("\n"):
            code = code[:-1]
        info = (token.get("attrs") or {}).get("info") or None
        return CodeBlock(content=code, language=info)

    def _process_list(self, token: dict[str, Any]) -> List:
        attrs = token.get("attrs", {})
        items = [
            self._process_list_item(child)
            for child in token.get("children", [])
            if child.get("type") in ("list_item", "task_list_item")
        ]
        return List(ordered=bool(attrs.get("ordered", False)), items=items, start=attrs.get("start", 1))

    def _process_list_item(self, token: dict[str, Any]) -> ListItem:
        task_status: Optional[TaskStatus] = None
        if token.get("type") == "task_list_item":
            task_status = "checked" if token["attrs"]["checked"] else "unchecked"
        return ListItem(children=self._process_tokens(token.get("children", [])), task_status=task_status)

    def _process_table(self, token: dict[str, Any]) -> Table:
        header: Optional[TableRow] = None
        rows: list[TableRow] = []
        alignments: list[Any] = []

        for part in token.get("children", []):
            part_type = part.get("type")
            if part_type == "table_head":
                cells = []
                for cell_token in part.get("children", []):
                    alignments.append(cell_token.get("attrs", {}).get("align"))
                    cells.append(TableCell(content=self._children_inline(cell_token)))
                header = TableRow(cells=cells, is_header=True)
            elif part_type == "table_body":
                for row_token in part.get("children", []):
                    cells = [TableCell(content=self._children_inline(cell)) for cell in row_token.get("children", [])]
                    rows.append(TableRow(cells=cells))

        return Table(rows=rows, header=header, alignments=alignments)

    def _process_definition(self, token: dict[str, Any]) -> Node:
        raw = token.get("raw", "")
        match = _DEFINITION_PATTERN.match(raw.strip("\n"))
        if match is None:
            # Not expected, mistune accepted it as a definition
            logger.debug("Keeping unrecognized reference definition verbatim: %r", raw)
            return HTMLBlock(content=raw.strip("\n"))

        url = match.group("url")
        if url.startswith("<") and url.endswith(">"):
            url = url[1:-1]
        title = match.group("title")
        if title is not None:
            title = title[1:-1]
        return Definition(identifier=match.group("label"), url=url, title=title)

    # ------------------------------------------------------------------
    # Inline tokens
    # ------------------------------------------------------------------

    def _children_inline(self, token: dict[str, Any]) -> list[Node]:
        return self._process_inline_tokens(token.get("children", []))

    def _process_inline_tokens(self, tokens: list[dict[str, Any]]) -> list[Node]:
        """Process inline tokens, merging adjacent text runs.

        Parameters
        ----------
        tokens : list of dict
            Inline token dictionaries

        Returns
        -------
        list of Node
            Inline AST nodes

        """
        nodes: list[Node] = []
        for token in tokens:
            node = self._process_inline_token(token)
            if isinstance(node, Text) and nodes and isinstance(nodes[-1], Text):
                nodes[-1] = Text(content=nodes[-1].content + node.content)
            else:
                nodes.append(node)
        return nodes

    def _process_inline_token(self, token: dict[str, Any]) -> Node:
        token_type = token.get("type", "")

        handler_map: dict[str, Any] = {
            "text": self._handle_text_token,
            "strong": self._handle_strong_token,
            "emphasis": self._handle_emphasis_token,
            "strikethrough": self._handle_strikethrough_token,
            "codespan": self._handle_codespan_token,
            "link": self._handle_link_token,
            "image": self._handle_image_token,
            "linebreak": self._handle_linebreak_token,
            "softbreak": self._handle_softbreak_token,
            "inline_html": self._handle_inline_html_token,
            "inline_math": self._handle_inline_math_token,
            # $$...$$ inside a paragraph
            "block_math": self._handle_inline_math_token,
            "footnote_ref": self._handle_footnote_ref_token,
        }

        handler = handler_map.get(token_type)
        if handler:
            return handler(token)

        raise ParsingError(f"Unknown inline token type {token_type!r}", parsing_stage="ast_building")

    def _handle_text_token(self, token: dict[str, Any]) -> Text:
        return Text(content=token.get("raw", ""))

    def _handle_strong_token(self, token: dict[str, Any]) -> Strong:
        return Strong(content=self._children_inline(token))

    def _handle_emphasis_token(self, token: dict[str, Any]) -> Emphasis:
        return Emphasis(content=self._children_inline(token))

    def _handle_strikethrough_token(self, token: dict[str, Any]) -> Strikethrough:
        return Strikethrough(content=self._children_inline(token))

    def _handle_codespan_token(self, token: dict[str, Any]) -> Code:
        return Code(content=token.get("raw", ""))

    def _handle_link_token(self, token: dict[str, Any]) -> Node:
        """Handle link token, keeping reference-style links as references."""
        content = self._children_inline(token)
        label = token.get("label")
        if label:
            return LinkReference(identifier=label, content=content)
        attrs = token.get("attrs") or {}
        return Link(url=attrs.get("url", ""), content=content, title=attrs.get("title"))

    def _handle_image_token(self, token: dict[str, Any]) -> Node:
        """Handle image token. Alt text is in the children, not attrs."""
        alt_parts = []
        for child in token.get("children", []):
            if child.get("type") in ("text", "codespan"):
                alt_parts.append(child.get("raw", ""))
        alt_text = "".join(alt_parts)

        label = token.get("label")
        if label:
            return ImageReference(identifier=label, alt_text=alt_text)
        attrs = token.get("attrs") or {}
        return Image(url=attrs.get("url", ""), alt_text=alt_text, title=attrs.get("title"))

    def _handle_linebreak_token(self, token: dict[str, Any]) -> LineBreak:
        return LineBreak(soft=False)

    def _handle_softbreak_token(self, token: dict[str, Any]) -> LineBreak:
        return LineBreak(soft=True)

    def _handle_inline_html_token(self, token: dict[str, Any]) -> HTMLInline:
        return HTMLInline(content=token.get("raw", ""))

    def _handle_inline_math_token(self, token: dict[str, Any]) -> MathInline:
        return MathInline(content=token.get("raw", ""))

    def _handle_footnote_ref_token(self, token: dict[str, Any]) -> FootnoteReference:
        return FootnoteReference(identifier=self._footnote_label(token.get("raw", "")))


def markdown_to_ast(markdown_content: str) -> Document:
    """Parse a markdown body into an AST Document.

    Parameters
    ----------
    markdown_content : str
        Markdown text without frontmatter

    Returns
    -------
    Document
        AST document node

    Examples
    --------
    >>> doc = markdown_to_ast("# Title\\n")
    >>> doc.children[0].level
    1

    """
    return MarkdownToAstConverter().parse(markdown_content)
