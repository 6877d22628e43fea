#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blockmark/markdown/transforms.py
"""Tree transforms applied around the markup to Markdown conversion.

Markup-side transforms run on the parsed markup tree before conversion:

- :func:`unwrap_elements` removes wrapper elements with no Markdown syntax
  (underline), keeping their content,
- :func:`normalize_line_breaks` collapses source whitespace outside ``pre``
  and drops ``br`` elements at the edges of blocks.

The Markdown-side :class:`InlineFormattingConsolidator` runs on the converted
Markdown AST: it merges adjacent formatting nodes of the same type, merges
adjacent text, moves whitespace outside formatting delimiters and trims the
edges of every block.

All transforms build new trees and leave their input untouched.

"""

from __future__ import annotations

import re
from dataclasses import replace
from typing import Iterable, Union

from blockmark.markdown.ast import (
    BlockQuote,
    Document,
    Emphasis,
    Heading,
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
)
from blockmark.markup.nodes import Element, Fragment, MarkupNode, MarkupText

_WHITESPACE_RUN = re.compile(r"[ \t\n\r\f]+")

UNDERLINE_TAGS = frozenset({"u", "ins"})

# Elements whose whitespace is significant
_PREFORMATTED = frozenset({"pre", "code", "kbd", "samp"})

_MERGEABLE = (Strong, Emphasis, Strikethrough)


# ============================================================================
# Markup transforms
# ============================================================================


def _unwrap(nodes: Iterable[MarkupNode], tags: frozenset[str]) -> list[MarkupNode]:
    result: list[MarkupNode] = []
    for node in nodes:
        if isinstance(node, Element):
            children = _unwrap(node.children, tags)
            if node.tag in tags:
                result.extend(children)
            else:
                result.append(Element(tag=node.tag, attrs=dict(node.attrs), children=children))
        else:
            result.append(node)
    return result


def unwrap_elements(fragment: Fragment, tags: frozenset[str] = UNDERLINE_TAGS) -> Fragment:
    """Replace elements with the given tags by their children."""
    return Fragment(children=_unwrap(fragment.children, tags))


def _is_br(node: MarkupNode) -> bool:
    return isinstance(node, Element) and node.tag == "br"


def _strip_edge_breaks(children: list[MarkupNode]) -> list[MarkupNode]:
    def blank(node: MarkupNode) -> bool:
        return _is_br(node) or (isinstance(node, MarkupText) and not node.value.strip())

    start, end = 0, len(children)
    while start < end and blank(children[start]):
        start += 1
    while end > start and blank(children[end - 1]):
        end -= 1
    return children[start:end]


def _normalize(nodes: Iterable[MarkupNode], preformatted: bool) -> list[MarkupNode]:
    result: list[MarkupNode] = []
    for node in nodes:
        if isinstance(node, MarkupText):
            result.append(node if preformatted else MarkupText(_WHITESPACE_RUN.sub(" ", node.value)))
        elif isinstance(node, Element):
            inner = preformatted or node.tag in _PREFORMATTED
            children = _normalize(node.children, inner)
            if node.is_block and not inner:
                children = _strip_edge_breaks(children)
            result.append(Element(tag=node.tag, attrs=dict(node.attrs), children=children))
        else:
            result.append(node)
    return result


def normalize_line_breaks(fragment: Fragment) -> Fragment:
    """Collapse whitespace runs and drop line breaks at block edges.

    Literal newlines in markup text are layout whitespace; only ``br``
    elements are line breaks. A ``br`` at the start or end of a block would
    render as a dangling hard break, so it is removed.
    """
    return Fragment(children=_strip_edge_breaks(_normalize(fragment.children, False)))


# ============================================================================
# Markdown AST transforms
# ============================================================================


InlineParent = Union[Strong, Emphasis, Strikethrough, Link]


class InlineFormattingConsolidator:
    """Consolidate fragmented inline formatting in a Markdown AST.

    1. Swaps single-child nesting to match a neighbour
       (``Strong(Emphasis(b))`` next to an ``Emphasis`` becomes
       ``Emphasis(Strong(b))``)
    2. Merges adjacent same-type formatting nodes (Strong+Strong, ...)
    3. Moves leading/trailing whitespace outside formatting nodes
    4. Removes formatting nodes left empty
    5. Merges adjacent Text nodes

    Examples
    --------
    >>> # **a** followed directly by **b** renders as **ab** after consolidation
    >>> fixed_doc = InlineFormattingConsolidator().transform(doc)

    """

    def transform(self, document: Document) -> Document:
        return Document(children=[self._block(child) for child in document.children])

    def _block(self, node: Node) -> Node:
        if isinstance(node, Heading):
            return Heading(level=node.level, content=self._trim(self.consolidate(node.content)))
        if isinstance(node, Paragraph):
            return Paragraph(content=self._trim(self.consolidate(node.content)))
        if isinstance(node, BlockQuote):
            return BlockQuote(children=[self._block(child) for child in node.children])
        if isinstance(node, List):
            items = [ListItem(children=[self._block(child) for child in item.children]) for item in node.items]
            return replace(node, items=items)
        if isinstance(node, Table):
            header = self._row(node.header) if node.header is not None else None
            return Table(header=header, rows=[self._row(row) for row in node.rows])
        return node

    def _row(self, row: TableRow) -> TableRow:
        cells = [TableCell(content=self._trim(self.consolidate(cell.content))) for cell in row.cells]
        return TableRow(cells=cells, is_header=row.is_header)

    def consolidate(self, nodes: list[Node]) -> list[Node]:
        """Consolidate one list of inline nodes (recursively).

        Same-type neighbours are merged before any whitespace is moved, so
        ``**a *b* c**`` split into three strong runs becomes one again.
        """
        result: list[Node] = []
        for node in self._merge_formatting(self._align_nesting(nodes)):
            if isinstance(node, (*_MERGEABLE, Link)):
                node = replace(node, content=self.consolidate(node.content))
            for piece in self._extract_whitespace(node):
                self._append(result, piece)
        return result

    def _align_nesting(self, nodes: list[Node]) -> list[Node]:
        """Swap ``Outer(Inner(x))`` to ``Inner(Outer(x))`` when a neighbour is an ``Inner``."""
        aligned = list(nodes)
        for index, node in enumerate(aligned):
            if not isinstance(node, _MERGEABLE) or len(node.content) != 1:
                continue
            inner = node.content[0]
            if not isinstance(inner, _MERGEABLE) or type(inner) is type(node):
                continue
            neighbours = aligned[max(index - 1, 0) : index] + aligned[index + 1 : index + 2]
            if any(type(n) is type(node) for n in neighbours):
                continue
            if any(type(n) is type(inner) for n in neighbours):
                aligned[index] = replace(inner, content=[replace(node, content=list(inner.content))])
        return aligned

    def _merge_formatting(self, nodes: list[Node]) -> list[Node]:
        # unstyled text between two nodes keeps them apart: it is not part of either run
        merged: list[Node] = []
        for node in nodes:
            if isinstance(node, _MERGEABLE) and merged and type(merged[-1]) is type(node):
                merged[-1] = replace(node, content=[*merged[-1].content, *node.content])  # type: ignore[union-attr]
                continue
            merged.append(node)
        return merged

    def _extract_whitespace(self, node: Node) -> list[Node]:
        if not isinstance(node, _MERGEABLE):
            return [node]
        content = list(node.content)
        if not content:
            return []
        leading = trailing = ""
        if isinstance(content[0], Text):
            stripped = content[0].content.lstrip(" ")
            leading = content[0].content[: len(content[0].content) - len(stripped)]
            content[0] = Text(content=stripped)
        if isinstance(content[-1], Text):
            stripped = content[-1].content.rstrip(" ")
            trailing = content[-1].content[len(stripped) :]
            content[-1] = Text(content=stripped)
        content = [child for child in content if not (isinstance(child, Text) and not child.content)]
        pieces: list[Node] = []
        if leading:
            pieces.append(Text(content=leading))
        if content:
            pieces.append(replace(node, content=content))
        if trailing:
            pieces.append(Text(content=trailing))
        return pieces

    def _append(self, result: list[Node], node: Node) -> None:
        previous = result[-1] if result else None
        if isinstance(node, Text):
            if not node.content:
                return
            if isinstance(previous, Text):
                result[-1] = Text(content=previous.content + node.content)
                return
        elif isinstance(node, _MERGEABLE) and type(previous) is type(node):
            merged = self.consolidate([*previous.content, *node.content])  # type: ignore[union-attr]
            result[-1] = replace(node, content=merged)
            return
        result.append(node)

    def _trim(self, nodes: list[Node]) -> list[Node]:
        """Strip whitespace and line breaks at the edges of a block."""
        nodes = list(nodes)
        while nodes and isinstance(nodes[0], LineBreak):
            nodes.pop(0)
        while nodes and isinstance(nodes[-1], LineBreak):
            nodes.pop()
        if nodes and isinstance(nodes[0], Text):
            nodes[0] = Text(content=nodes[0].content.lstrip(" "))
        if nodes and isinstance(nodes[-1], Text):
            nodes[-1] = Text(content=nodes[-1].content.rstrip(" "))
        return [node for node in nodes if not (isinstance(node, Text) and not node.content)]


def merge_adjacent_formatting(document: Document) -> Document:
    """Run :class:`InlineFormattingConsolidator` over ``document``."""
    return InlineFormattingConsolidator().transform(document)
