#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blockmark/markdown/parser.py
"""Markdown text to Markdown AST parsing.

Markdown is tokenized with mistune (CommonMark plus the enabled GFM
plugins) and the token stream is converted to :mod:`blockmark.markdown.ast`
nodes.

"""

from __future__ import annotations

import logging
from typing import Any, Optional

import mistune
from mistune.util import unescape as unescape_entities

from blockmark.exceptions import MarkupParseError
from blockmark.markdown.ast import (
    BlockQuote,
    Code,
    CodeBlock,
    Document,
    Emphasis,
    Heading,
    HTMLBlock,
    HTMLInline,
    Image,
    LineBreak,
    Link,
    List,
    ListItem,
    Node,
    Paragraph,
    Strikethrough,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
)
from blockmark.options.markdown import MarkdownOptions

logger = logging.getLogger(__name__)

# mistune plugin name per codec extension
_PLUGINS = {
    "strikethrough": "strikethrough",
    "tables": "table",
    "autolinks": "url",
}


class MarkdownParser:
    """Convert Markdown text to a Markdown AST.

    Parameters
    ----------
    options : MarkdownOptions or None, default None
        Enabled extensions

    Examples
    --------
        >>> doc = MarkdownParser().parse("# Title")
        >>> doc.children[0].level
        1

    """

    def __init__(self, options: Optional[MarkdownOptions] = None):
        self.options = options or MarkdownOptions()

    def parse(self, markdown_content: str) -> Document:
        """Parse Markdown text.

        Raises
        ------
        MarkupParseError
            If mistune fails on the input.

        """
        plugins = [plugin for extension, plugin in _PLUGINS.items() if extension in self.options.extensions]
        markdown = mistune.create_markdown(plugins=plugins, renderer=None)
        try:
            tokens, _state = markdown.parse(markdown_content)
        except Exception as e:
            # mistune surfaces assorted internal errors on pathological input
            raise MarkupParseError(f"Could not parse Markdown: {e}", fragment=markdown_content, original_error=e) from e

        children = self._process_tokens(tokens) if isinstance(tokens, list) else []
        return Document(children=children)

    # ------------------------------------------------------------------
    # Block tokens
    # ------------------------------------------------------------------

    def _process_tokens(self, tokens: list[dict[str, Any]]) -> list[Node]:
        nodes: list[Node] = []
        for token in tokens:
            node = self._process_token(token)
            if node is not None:
                nodes.append(node)
        return nodes

    def _process_token(self, token: dict[str, Any]) -> Optional[Node]:
        token_type = token.get("type", "")
        if token_type == "heading":
            level = token.get("attrs", {}).get("level", 1)
            return Heading(level=max(1, min(6, int(level))), content=self._inline(token))
        elif token_type in ("paragraph", "block_text"):
            return Paragraph(content=self._inline(token))
        elif token_type == "block_code":
            info = token.get("attrs", {}).get("info") or None
            return CodeBlock(content=token.get("raw", ""), language=info)
        elif token_type == "block_quote":
            return BlockQuote(children=self._process_tokens(token.get("children", [])))
        elif token_type == "list":
            return self._process_list(token)
        elif token_type == "table":
            return self._process_table(token)
        elif token_type == "thematic_break":
            return ThematicBreak()
        elif token_type == "block_html":
            return HTMLBlock(content=token.get("raw", ""))
        elif token_type != "blank_line":
            logger.debug("Ignoring unsupported Markdown token '%s'", token_type)
        return None

    def _process_list(self, token: dict[str, Any]) -> List:
        attrs = token.get("attrs", {})
        items = [
            ListItem(children=self._process_tokens(child.get("children", [])))
            for child in token.get("children", [])
            if child.get("type") == "list_item"
        ]
        return List(
            ordered=bool(attrs.get("ordered", False)),
            items=items,
            start=int(attrs.get("start", 1)),
            tight=bool(token.get("tight", attrs.get("tight", True))),
        )

    def _process_table(self, token: dict[str, Any]) -> Table:
        header: Optional[TableRow] = None
        rows: list[TableRow] = []
        for section in token.get("children", []):
            if section.get("type") == "table_head":
                header = TableRow(cells=self._cells(section.get("children", [])), is_header=True)
            elif section.get("type") == "table_body":
                for row in section.get("children", []):
                    rows.append(TableRow(cells=self._cells(row.get("children", []))))
        return Table(header=header, rows=rows)

    def _cells(self, tokens: list[dict[str, Any]]) -> list[TableCell]:
        return [TableCell(content=self._inline(cell)) for cell in tokens if cell.get("type") == "table_cell"]

    # ------------------------------------------------------------------
    # Inline tokens
    # ------------------------------------------------------------------

    def _inline(self, token: dict[str, Any]) -> list[Node]:
        return self._process_inline_tokens(token.get("children", []))

    def _process_inline_tokens(self, tokens: list[dict[str, Any]]) -> list[Node]:
        nodes: list[Node] = []
        for token in tokens:
            node = self._process_inline_token(token)
            if node is not None:
                nodes.append(node)
        return nodes

    def _process_inline_token(self, token: dict[str, Any]) -> Optional[Node]:
        token_type = token.get("type", "")
        attrs = token.get("attrs", {})
        if token_type == "text":
            # CommonMark decodes entity references in text
            return Text(content=unescape_entities(token.get("raw", "")))
        elif token_type == "strong":
            return Strong(content=self._inline(token))
        elif token_type == "emphasis":
            return Emphasis(content=self._inline(token))
        elif token_type == "strikethrough":
            return Strikethrough(content=self._inline(token))
        elif token_type == "codespan":
            return Code(content=token.get("raw", ""))
        elif token_type == "link":
            return Link(url=attrs.get("url", ""), content=self._inline(token), title=attrs.get("title"))
        elif token_type == "image":
            return Image(url=attrs.get("url", ""), alt_text=self._plain_text(token), title=attrs.get("title"))
        elif token_type == "linebreak":
            return LineBreak()
        elif token_type == "softbreak":
            return LineBreak(soft=True)
        elif token_type == "inline_html":
            return HTMLInline(content=token.get("raw", ""))
        logger.debug("Ignoring unsupported inline Markdown token '%s'", token_type)
        return None

    def _plain_text(self, token: dict[str, Any]) -> str:
        parts: list[str] = []
        for child in token.get("children", []):
            if "raw" in child:
                parts.append(unescape_entities(child["raw"]))
            else:
                parts.append(self._plain_text(child))
        return "".join(parts)
