#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blockmark/markdown/to_markup.py
"""Markdown AST to markup tree conversion.

Produces the conventional HTML vocabulary (``h1``-``h6``, ``p``, ``ul``/``ol``,
``pre > code``, ``table``...) that the semantic projector's external mapping
reads back into blocks. Raw HTML from the Markdown source is kept verbatim.

"""

from __future__ import annotations

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
from blockmark.markup.nodes import Element, Fragment, MarkupNode, MarkupRaw, MarkupText


class MarkdownToMarkup(NodeVisitor):
    """Build a markup tree from a Markdown AST.

    Every ``visit_*`` method returns a list of markup nodes.

    Examples
    --------
        >>> from blockmark.markdown.parser import MarkdownParser
        >>> fragment = MarkdownToMarkup().build(MarkdownParser().parse("*hi*"))
        >>> fragment.children[0].tag
        'p'

    """

    def build(self, document: Document) -> Fragment:
        return Fragment(children=document.accept(self))

    def _all(self, nodes: list[Node]) -> list[MarkupNode]:
        result: list[MarkupNode] = []
        for node in nodes:
            result.extend(node.accept(self))
        return result

    def visit_document(self, node: Document) -> list[MarkupNode]:
        return self._all(node.children)

    def visit_heading(self, node: Heading) -> list[MarkupNode]:
        return [Element(f"h{node.level}", children=self._all(node.content))]

    def visit_paragraph(self, node: Paragraph) -> list[MarkupNode]:
        return [Element("p", children=self._all(node.content))]

    def visit_code_block(self, node: CodeBlock) -> list[MarkupNode]:
        attrs = {"class": f"language-{node.language.split()[0]}"} if node.language and node.language.strip() else {}
        # the final newline belongs to the fence, not to the code
        content = node.content[:-1] if node.content.endswith("\n") else node.content
        return [Element("pre", children=[Element("code", attrs=attrs, children=[MarkupText(content)])])]

    def visit_block_quote(self, node: BlockQuote) -> list[MarkupNode]:
        return [Element("blockquote", children=self._all(node.children))]

    def visit_list(self, node: List) -> list[MarkupNode]:
        attrs: dict[str, str] = {}
        if node.ordered and node.start != 1:
            attrs["start"] = str(node.start)
        return [Element("ol" if node.ordered else "ul", attrs=attrs, children=self._all(node.items))]  # type: ignore[arg-type]

    def visit_list_item(self, node: ListItem) -> list[MarkupNode]:
        return [Element("li", children=self._all(node.children))]

    def visit_table(self, node: Table) -> list[MarkupNode]:
        rows = ([node.header] if node.header is not None else []) + list(node.rows)
        return [Element("table", children=[Element("tbody", children=self._all(rows))])]  # type: ignore[arg-type]

    def visit_table_row(self, node: TableRow) -> list[MarkupNode]:
        tag = "th" if node.is_header else "td"
        return [Element("tr", children=[Element(tag, children=self._all(cell.content)) for cell in node.cells])]

    def visit_table_cell(self, node: TableCell) -> list[MarkupNode]:
        return [Element("td", children=self._all(node.content))]

    def visit_thematic_break(self, node: ThematicBreak) -> list[MarkupNode]:
        return [Element("hr")]

    def visit_html_block(self, node: HTMLBlock) -> list[MarkupNode]:
        return [MarkupRaw(node.content)]

    def visit_text(self, node: Text) -> list[MarkupNode]:
        return [MarkupText(node.content)]

    def visit_emphasis(self, node: Emphasis) -> list[MarkupNode]:
        return [Element("em", children=self._all(node.content))]

    def visit_strong(self, node: Strong) -> list[MarkupNode]:
        return [Element("strong", children=self._all(node.content))]

    def visit_strikethrough(self, node: Strikethrough) -> list[MarkupNode]:
        return [Element("del", children=self._all(node.content))]

    def visit_code(self, node: Code) -> list[MarkupNode]:
        return [Element("code", children=[MarkupText(node.content)])]

    def visit_link(self, node: Link) -> list[MarkupNode]:
        attrs = {"href": node.url}
        if node.title:
            attrs["title"] = node.title
        return [Element("a", attrs=attrs, children=self._all(node.content))]

    def visit_image(self, node: Image) -> list[MarkupNode]:
        attrs = {"src": node.url, "alt": node.alt_text}
        if node.title:
            attrs["title"] = node.title
        return [Element("img", attrs=attrs)]

    def visit_line_break(self, node: LineBreak) -> list[MarkupNode]:
        if node.soft:
            return [MarkupText("\n")]
        return [Element("br")]

    def visit_html_inline(self, node: HTMLInline) -> list[MarkupNode]:
        return [MarkupRaw(node.content)]
