#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blockmark/markdown/visitors.py
"""Visitor base class for Markdown AST traversal.

The renderer (AST to Markdown text) and the markup builder (AST to markup
tree) are both visitors, keeping each algorithm separate from the nodes.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

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
    Paragraph,
    Strikethrough,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
)


class NodeVisitor(ABC):
    """Abstract base class for Markdown AST visitors.

    Subclasses implement one ``visit_*`` method per node type.
    """

    @abstractmethod
    def visit_document(self, node: Document) -> Any:
        pass

    @abstractmethod
    def visit_heading(self, node: Heading) -> Any:
        pass

    @abstractmethod
    def visit_paragraph(self, node: Paragraph) -> Any:
        pass

    @abstractmethod
    def visit_code_block(self, node: CodeBlock) -> Any:
        pass

    @abstractmethod
    def visit_block_quote(self, node: BlockQuote) -> Any:
        pass

    @abstractmethod
    def visit_list(self, node: List) -> Any:
        pass

    @abstractmethod
    def visit_list_item(self, node: ListItem) -> Any:
        pass

    @abstractmethod
    def visit_table(self, node: Table) -> Any:
        pass

    @abstractmethod
    def visit_table_row(self, node: TableRow) -> Any:
        pass

    @abstractmethod
    def visit_table_cell(self, node: TableCell) -> Any:
        pass

    @abstractmethod
    def visit_thematic_break(self, node: ThematicBreak) -> Any:
        pass

    @abstractmethod
    def visit_html_block(self, node: HTMLBlock) -> Any:
        pass

    @abstractmethod
    def visit_text(self, node: Text) -> Any:
        pass

    @abstractmethod
    def visit_emphasis(self, node: Emphasis) -> Any:
        pass

    @abstractmethod
    def visit_strong(self, node: Strong) -> Any:
        pass

    @abstractmethod
    def visit_strikethrough(self, node: Strikethrough) -> Any:
        pass

    @abstractmethod
    def visit_code(self, node: Code) -> Any:
        pass

    @abstractmethod
    def visit_link(self, node: Link) -> Any:
        pass

    @abstractmethod
    def visit_image(self, node: Image) -> Any:
        pass

    @abstractmethod
    def visit_line_break(self, node: LineBreak) -> Any:
        pass

    @abstractmethod
    def visit_html_inline(self, node: HTMLInline) -> Any:
        pass
