#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Markdown codec: markup <-> Markdown through a Markdown AST.

- ast / visitors: Markdown AST node classes and the visitor base
- parser: Markdown text to AST (mistune)
- renderer: AST to canonical Markdown text
- from_markup / to_markup: markup tree <-> AST
- transforms: markup clean-up and formatting consolidation
- codec: the two pipeline entry points

"""

from blockmark.markdown.codec import markdown_to_markup, markup_to_markdown, markup_to_markdown_ast
from blockmark.markdown.from_markup import DEFAULT_HANDLERS, MarkupToMarkdown
from blockmark.markdown.parser import MarkdownParser
from blockmark.markdown.renderer import MarkdownRenderer
from blockmark.markdown.to_markup import MarkdownToMarkup
from blockmark.markdown.transforms import InlineFormattingConsolidator, merge_adjacent_formatting

__all__ = [
    "DEFAULT_HANDLERS",
    "InlineFormattingConsolidator",
    "MarkdownParser",
    "MarkdownRenderer",
    "MarkdownToMarkup",
    "MarkupToMarkdown",
    "markdown_to_markup",
    "markup_to_markdown",
    "markup_to_markdown_ast",
    "merge_adjacent_formatting",
]
