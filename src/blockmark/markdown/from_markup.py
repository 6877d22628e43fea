#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blockmark/markdown/from_markup.py
"""Markup tree to Markdown AST conversion.

Conversion is driven by a per-tag handler table. A handler receives the
converter and an element and returns a Markdown AST node, a list of nodes, or
None. Callers override or extend the built-in table through
``MarkdownOptions.handlers``; the table is per call, never global.

Elements without a handler emit their inner content: block-level elements
become paragraphs (or their block children), inline elements contribute their
inline content. ``span`` elements and, with tables disabled, ``table``
elements pass through as raw HTML so their structure survives in Markdown.

"""

from __future__ import annotations

import html
import logging
from typing import Any, Mapping, Optional, Sequence, Union

from blockmark.constants import ATTR_BLOCK_TYPE
from blockmark.markdown.ast import (
    BLOCK_NODE_TYPES,
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
from blockmark.markup.nodes import Element, Fragment, MarkupNode, MarkupRaw, MarkupText, has_block_descendant, to_html
from blockmark.options.markdown import MarkdownOptions, MarkupHandler

logger = logging.getLogger(__name__)

HandlerResult = Union[Node, Sequence[Node], None]


def _start_tag(element: Element) -> str:
    attrs = "".join(f' {name}="{html.escape(value, quote=True)}"' for name, value in element.attrs.items())
    return f"<{element.tag}{attrs}>"


# ----------------------------------------------------------------------------
# Built-in handlers
# ----------------------------------------------------------------------------


def handle_heading(converter: MarkupToMarkdown, element: Element) -> HandlerResult:
    return Heading(level=int(element.tag[1]), content=converter.phrasing(element.children))


def handle_paragraph(converter: MarkupToMarkdown, element: Element) -> HandlerResult:
    if has_block_descendant(element):
        return converter.flow(element.children)
    return Paragraph(content=converter.phrasing(element.children))


def handle_list(converter: MarkupToMarkdown, element: Element) -> HandlerResult:
    items: list[ListItem] = []
    for child in element.children:
        if isinstance(child, Element) and child.tag == "li":
            items.append(ListItem(children=converter.flow(child.children)))
        elif isinstance(child, Element) and child.tag in ("ul", "ol") and items:
            # nested list placed directly in the parent list belongs to the previous item
            nested = handle_list(converter, child)
            items[-1].children.append(nested)  # type: ignore[arg-type]
    try:
        start = int(element.get("start", "1") or "1")
    except ValueError:
        start = 1
    tight = all(all(isinstance(node, List) for node in item.children[1:]) for item in items)
    return List(ordered=element.tag == "ol", items=items, start=start, tight=tight)


def handle_table(converter: MarkupToMarkdown, element: Element) -> HandlerResult:
    if not converter.options.tables:
        return HTMLBlock(content=to_html(element))
    rows: list[TableRow] = []
    for row in element.find_all("tr"):
        cells = [TableCell(content=converter.phrasing(cell.children)) for cell in row.elements() if cell.tag in ("td", "th")]
        if cells:
            rows.append(TableRow(cells=cells))
    if not rows:
        return None
    width = max(len(row.cells) for row in rows)
    for row in rows:
        row.cells.extend(TableCell() for _ in range(width - len(row.cells)))
    header = rows[0]
    header.is_header = True
    return Table(header=header, rows=rows[1:])


def handle_preformatted(converter: MarkupToMarkdown, element: Element) -> HandlerResult:
    language: Optional[str] = None
    for child in element.elements():
        if child.tag == "code":
            for css_class in (child.get("class", "") or "").split():
                if css_class.startswith("language-"):
                    language = css_class[len("language-") :]
    return CodeBlock(content=element.text_content(), language=language)


def handle_blockquote(converter: MarkupToMarkdown, element: Element) -> HandlerResult:
    return BlockQuote(children=converter.flow(element.children))


def handle_thematic_break(converter: MarkupToMarkdown, element: Element) -> HandlerResult:
    return ThematicBreak()


def handle_strong(converter: MarkupToMarkdown, element: Element) -> HandlerResult:
    return Strong(content=converter.phrasing(element.children))


def handle_emphasis(converter: MarkupToMarkdown, element: Element) -> HandlerResult:
    return Emphasis(content=converter.phrasing(element.children))


def handle_strikethrough(converter: MarkupToMarkdown, element: Element) -> HandlerResult:
    content = converter.phrasing(element.children)
    if not converter.options.strikethrough:
        return content
    return Strikethrough(content=content)


def handle_code(converter: MarkupToMarkdown, element: Element) -> HandlerResult:
    return Code(content=element.text_content().replace("\n", " "))


def handle_link(converter: MarkupToMarkdown, element: Element) -> HandlerResult:
    content = converter.phrasing(element.children)
    href = element.get("href")
    if href is None:
        return content
    return Link(url=href, content=content, title=element.get("title"))


def handle_image(converter: MarkupToMarkdown, element: Element) -> HandlerResult:
    return Image(url=element.get("src", "") or "", alt_text=element.get("alt", "") or "", title=element.get("title"))


def handle_line_break(converter: MarkupToMarkdown, element: Element) -> HandlerResult:
    return LineBreak()


def handle_raw_inline(converter: MarkupToMarkdown, element: Element) -> HandlerResult:
    """Pass the element's tags through as inline HTML around its converted content."""
    return [HTMLInline(content=_start_tag(element)), *converter.phrasing(element.children), HTMLInline(content=f"</{element.tag}>")]


DEFAULT_HANDLERS: dict[str, MarkupHandler] = {
    "h1": handle_heading,
    "h2": handle_heading,
    "h3": handle_heading,
    "h4": handle_heading,
    "h5": handle_heading,
    "h6": handle_heading,
    "p": handle_paragraph,
    "ul": handle_list,
    "ol": handle_list,
    "table": handle_table,
    "pre": handle_preformatted,
    "blockquote": handle_blockquote,
    "hr": handle_thematic_break,
    "strong": handle_strong,
    "b": handle_strong,
    "em": handle_emphasis,
    "i": handle_emphasis,
    "s": handle_strikethrough,
    "del": handle_strikethrough,
    "strike": handle_strikethrough,
    "code": handle_code,
    "kbd": handle_code,
    "samp": handle_code,
    "a": handle_link,
    "img": handle_image,
    "br": handle_line_break,
    "span": handle_raw_inline,
}


class MarkupToMarkdown:
    """Convert a markup tree to a Markdown AST.

    Parameters
    ----------
    options : MarkdownOptions or None, default None
        Enabled extensions and handler overrides
    handlers : Mapping[str, MarkupHandler] or None, default None
        Base handler table (the built-in table when None)

    """

    def __init__(self, options: Optional[MarkdownOptions] = None, handlers: Optional[Mapping[str, MarkupHandler]] = None):
        self.options = options or MarkdownOptions()
        self.handlers: dict[str, MarkupHandler] = {**(handlers or DEFAULT_HANDLERS), **self.options.handlers}

    def convert(self, fragment: Fragment) -> Document:
        return Document(children=self.flow(fragment.children))

    def _dispatch(self, element: Element) -> list[Node]:
        handler = self.handlers.get(element.tag)
        if handler is not None:
            result: Any = handler(self, element)
        elif element.is_block or element.get(ATTR_BLOCK_TYPE) is not None:
            # block containers without a handler: their blocks, or one paragraph
            if has_block_descendant(element):
                result = self.flow(element.children)
            else:
                result = Paragraph(content=self.phrasing(element.children))
        else:
            result = self.phrasing(element.children)
        if result is None:
            return []
        if isinstance(result, (list, tuple)):
            return list(result)
        return [result]

    def flow(self, nodes: Sequence[MarkupNode]) -> list[Node]:
        """Convert flow content; loose inline content is wrapped in paragraphs."""
        blocks: list[Node] = []
        buffer: list[Node] = []

        def flush() -> None:
            if any(not isinstance(node, Text) or node.content.strip() for node in buffer):
                blocks.append(Paragraph(content=list(buffer)))
            buffer.clear()

        for node in nodes:
            if isinstance(node, MarkupText):
                buffer.append(Text(content=node.value))
            elif isinstance(node, MarkupRaw):
                buffer.append(HTMLInline(content=node.value))
            else:
                for result in self._dispatch(node):
                    if isinstance(result, BLOCK_NODE_TYPES):
                        flush()
                        blocks.append(result)
                    else:
                        buffer.append(result)
        flush()
        return blocks

    def phrasing(self, nodes: Sequence[MarkupNode]) -> list[Node]:
        """Convert phrasing content; block results contribute their inline content."""
        inline: list[Node] = []
        for node in nodes:
            if isinstance(node, MarkupText):
                inline.append(Text(content=node.value))
            elif isinstance(node, MarkupRaw):
                inline.append(HTMLInline(content=node.value))
            else:
                for result in self._dispatch(node):
                    if isinstance(result, (Paragraph, Heading)):
                        if inline:
                            inline.append(Text(content=" "))
                        inline.extend(result.content)
                    elif isinstance(result, BLOCK_NODE_TYPES):
                        logger.debug("Dropping %s inside inline content", type(result).__name__)
                    else:
                        inline.append(result)
        return inline
