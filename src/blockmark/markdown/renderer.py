#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blockmark/markdown/renderer.py
"""Markdown rendering from the Markdown AST.

The renderer writes canonical Markdown so that rendering a parsed document
again yields the same text:

- every block is followed by a blank line,
- ATX headings, ``-`` bullets (configurable), ``*``/``**`` emphasis,
- tight lists unless an item holds more than one paragraph, nested content
  indented by the width of the parent marker,
- minimal GFM tables (``| a | b |`` with a ``| --- |`` delimiter row),
- hard line breaks as a trailing backslash.

"""

from __future__ import annotations

import logging
import re
from typing import Optional

from blockmark.constants import DEFAULT_CODE_FENCE
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
from blockmark.markdown.visitors import NodeVisitor
from blockmark.options.markdown import MarkdownOptions

logger = logging.getLogger(__name__)

# Same pattern the autolink extension recognizes
_BARE_URL = re.compile(r"""^https?://[^\s<]+[^<.,:;"')\]\s]$""")
_ABSOLUTE_URI = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]{1,31}:[^\s<>]*$")
_ENTITY = re.compile(r"&(#[0-9]{1,7}|#[xX][0-9a-fA-F]{1,6}|[A-Za-z][A-Za-z0-9]{1,31});")

_LINE_START_HEADING = re.compile(r"^#{1,6}(\s|$)")
_LINE_START_BULLET = re.compile(r"^[-+](\s|$)")
_LINE_START_ORDERED = re.compile(r"^(\d{1,9})([.)])(\s|$)")
_LINE_START_RULE = re.compile(r"^(-{2,}|={1,})\s*$")


class MarkdownRenderer(NodeVisitor):
    """Render Markdown AST nodes to Markdown text.

    Parameters
    ----------
    options : MarkdownOptions or None, default None
        Markdown formatting options

    Examples
    --------
        >>> doc = Document(children=[Heading(level=2, content=[Text(content="Hi")])])
        >>> MarkdownRenderer().render_to_string(doc)
        '## Hi\\n\\n'

    """

    def __init__(self, options: Optional[MarkdownOptions] = None):
        self.options = options or MarkdownOptions()
        self._output: list[str] = []
        self._at_line_start: bool = True
        self._in_table_cell: bool = False
        self._list_marker_stack: list[str] = []
        self._tight_stack: list[bool] = []

    def render_to_string(self, document: Document) -> str:
        """Render a document to Markdown text.

        Returns
        -------
        str
            Markdown text; each block is followed by a blank line, an empty
            document renders as an empty string

        """
        self._output = []
        self._list_marker_stack = []
        self._tight_stack = []
        document.accept(self)
        result = "".join(self._output)
        self._output.clear()
        return result

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _render_block(self, node: Node) -> str:
        saved_output = self._output
        self._output = []
        node.accept(self)
        rendered = "".join(self._output)
        self._output = saved_output
        return rendered

    def _render_inline(self, nodes: list[Node], at_line_start: bool = True) -> str:
        saved_output = self._output
        saved_line_start = self._at_line_start
        self._output = []
        self._at_line_start = at_line_start
        for node in nodes:
            node.accept(self)
        rendered = "".join(self._output)
        self._output = saved_output
        self._at_line_start = saved_line_start
        return rendered

    def _escape_markdown(self, text: str) -> str:
        """Escape characters that would otherwise be read as Markdown syntax.

        Backslash, backtick, asterisk, brackets and ``<`` are always escaped;
        underscores only at word boundaries; ``~`` when strikethrough is
        enabled; ``|`` inside table cells; ``&`` only where it would start an
        entity reference.
        """
        if not self.options.escape_special:
            return text

        escaped_chars: list[str] = []
        for i, char in enumerate(text):
            if char in "\\`*[]<":
                escaped_chars.append("\\" + char)
            elif char == "_":
                prev_alnum = i > 0 and text[i - 1].isalnum()
                next_alnum = i < len(text) - 1 and text[i + 1].isalnum()
                escaped_chars.append(char if prev_alnum and next_alnum else "\\_")
            elif char == "~" and self.options.strikethrough:
                escaped_chars.append("\\~")
            elif char == "|" and self._in_table_cell:
                escaped_chars.append("\\|")
            elif char == "&" and _ENTITY.match(text, i):
                escaped_chars.append("\\&")
            else:
                escaped_chars.append(char)
        return "".join(escaped_chars)

    def _escape_line_start(self, text: str) -> str:
        """Escape text that would open a block construct at the start of a line."""
        if not self.options.escape_special or not text:
            return text
        if _LINE_START_HEADING.match(text) or text[0] == ">" or _LINE_START_BULLET.match(text):
            return "\\" + text
        if _LINE_START_RULE.match(text):
            return "\\" + text
        ordered = _LINE_START_ORDERED.match(text)
        if ordered:
            return f"{ordered.group(1)}\\{text[len(ordered.group(1)):]}"
        return text

    def _wrap(self, delimiter: str, content: list[Node]) -> None:
        inner = self._render_inline(content, at_line_start=False)
        if inner:
            self._output.append(f"{delimiter}{inner}{delimiter}")
            self._at_line_start = False

    @staticmethod
    def _link_destination(url: str) -> str:
        if not url or re.search(r"[\s()<>]", url):
            return "<" + url.replace("<", "%3C").replace(">", "%3E") + ">"
        return url

    @staticmethod
    def _link_title(title: Optional[str]) -> str:
        if not title:
            return ""
        return ' "' + title.replace("\\", "\\\\").replace('"', '\\"') + '"'

    # ------------------------------------------------------------------
    # Block nodes
    # ------------------------------------------------------------------

    def visit_document(self, node: Document) -> None:
        for child in node.children:
            rendered = self._render_block(child)
            if rendered.strip():
                self._output.append(rendered.rstrip("\n"))
                self._output.append("\n\n")

    def visit_heading(self, node: Heading) -> None:
        content = self._render_inline(node.content, at_line_start=False)
        if content.endswith("#"):
            # a trailing run of '#' would be read as a closing sequence
            content = content[:-1] + "\\#"
        self._output.append(f"{'#' * node.level} {content}".rstrip())

    def visit_paragraph(self, node: Paragraph) -> None:
        self._output.append(self._render_inline(node.content))

    def visit_code_block(self, node: CodeBlock) -> None:
        fence = DEFAULT_CODE_FENCE
        longest = max((len(run) for run in re.findall(r"`+", node.content)), default=0)
        if longest >= len(fence):
            fence = "`" * (longest + 1)
        content = node.content if node.content.endswith("\n") or not node.content else node.content + "\n"
        self._output.append(f"{fence}{node.language or ''}\n{content}{fence}")

    def visit_block_quote(self, node: BlockQuote) -> None:
        parts = [self._render_block(child) for child in node.children]
        quoted = "\n\n".join(part for part in parts if part)
        lines = quoted.split("\n")
        self._output.append("\n".join(f"> {line}" if line else ">" for line in lines))

    def visit_list(self, node: List) -> None:
        tight = all(all(isinstance(child, List) for child in item.children[1:]) for item in node.items)
        self._tight_stack.append(tight)
        rendered_items: list[str] = []
        for i, item in enumerate(node.items):
            if node.ordered:
                marker = f"{node.start + i}. "
            else:
                marker = f"{self.options.bullet_symbol} "
            self._list_marker_stack.append(marker)
            rendered_items.append(self._render_block(item))
            self._list_marker_stack.pop()
        self._tight_stack.pop()
        self._output.append(("\n" if tight else "\n\n").join(rendered_items))

    def visit_list_item(self, node: ListItem) -> None:
        marker = self._list_marker_stack[-1] if self._list_marker_stack else f"{self.options.bullet_symbol} "
        tight = self._tight_stack[-1] if self._tight_stack else True
        parts = [self._render_block(child) for child in node.children]
        body = ("\n" if tight else "\n\n").join(part for part in parts if part)
        if not body:
            self._output.append(marker.rstrip())
            return
        indent = " " * len(marker)
        lines = body.split("\n")
        indented = [lines[0]] + [indent + line if line else line for line in lines[1:]]
        self._output.append(marker + "\n".join(indented))

    def visit_table(self, node: Table) -> None:
        rows = ([node.header] if node.header is not None else []) + list(node.rows)
        width = max((len(row.cells) for row in rows), default=0)
        if width == 0:
            return
        lines: list[str] = []
        for row in rows:
            padded = TableRow(cells=row.cells + [TableCell() for _ in range(width - len(row.cells))], is_header=row.is_header)
            lines.append(self._render_block(padded))
        lines.insert(1, "| " + " | ".join(["---"] * width) + " |")
        self._output.append("\n".join(lines))

    def visit_table_row(self, node: TableRow) -> None:
        cells = [self._render_block(cell) for cell in node.cells]
        self._output.append("| " + " | ".join(cells) + " |")

    def visit_table_cell(self, node: TableCell) -> None:
        saved = self._in_table_cell
        self._in_table_cell = True
        self._output.append(self._render_inline(node.content, at_line_start=False))
        self._in_table_cell = saved

    def visit_thematic_break(self, node: ThematicBreak) -> None:
        self._output.append("---")

    def visit_html_block(self, node: HTMLBlock) -> None:
        self._output.append(node.content.strip("\n"))

    # ------------------------------------------------------------------
    # Inline nodes
    # ------------------------------------------------------------------

    def visit_text(self, node: Text) -> None:
        text = self._escape_markdown(node.content)
        if self._at_line_start:
            text = self._escape_line_start(text)
        if text:
            self._output.append(text)
            self._at_line_start = False

    def visit_emphasis(self, node: Emphasis) -> None:
        self._wrap(self.options.emphasis_symbol, node.content)

    def visit_strong(self, node: Strong) -> None:
        self._wrap(self.options.emphasis_symbol * 2, node.content)

    def visit_strikethrough(self, node: Strikethrough) -> None:
        if self.options.strikethrough:
            self._wrap("~~", node.content)
        else:
            for child in node.content:
                child.accept(self)

    def visit_code(self, node: Code) -> None:
        content = node.content.replace("\n", " ")
        longest = max((len(run) for run in re.findall(r"`+", content)), default=0)
        fence = "`" * (longest + 1)
        if content.startswith("`") or content.endswith("`") or (
            content.startswith(" ") and content.endswith(" ") and content.strip()
        ):
            content = f" {content} "
        self._output.append(f"{fence}{content}{fence}")
        self._at_line_start = False

    def visit_link(self, node: Link) -> None:
        text = self._render_inline(node.content, at_line_start=False)
        plain = "".join(child.content for child in node.content if isinstance(child, Text))
        is_plain = len(node.content) == 1 and isinstance(node.content[0], Text)
        if is_plain and plain == node.url:
            if self.options.autolinks and _BARE_URL.match(node.url):
                self._output.append(node.url)
                self._at_line_start = False
                return
            if _ABSOLUTE_URI.match(node.url):
                self._output.append(f"<{node.url}>")
                self._at_line_start = False
                return
        self._output.append(f"[{text}]({self._link_destination(node.url)}{self._link_title(node.title)})")
        self._at_line_start = False

    def visit_image(self, node: Image) -> None:
        alt = self._escape_markdown(node.alt_text)
        self._output.append(f"![{alt}]({self._link_destination(node.url)}{self._link_title(node.title)})")
        self._at_line_start = False

    def visit_line_break(self, node: LineBreak) -> None:
        if self._in_table_cell:
            self._output.append("<br>" if not node.soft else " ")
            return
        self._output.append("\n" if node.soft else "\\\n")
        self._at_line_start = True

    def visit_html_inline(self, node: HTMLInline) -> None:
        self._output.append(node.content)
        self._at_line_start = False
