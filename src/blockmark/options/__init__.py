#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Option dataclasses for blockmark renderers, parsers and the Markdown codec."""

from blockmark.options.base import BaseOptions, CloneFrozenMixin
from blockmark.options.html import BlockRenderer, HtmlParserOptions, HtmlRendererOptions, StyleRenderer
from blockmark.options.markdown import MarkdownOptions, MarkupHandler

__all__ = [
    "BaseOptions",
    "BlockRenderer",
    "CloneFrozenMixin",
    "HtmlParserOptions",
    "HtmlRendererOptions",
    "MarkdownOptions",
    "MarkupHandler",
    "StyleRenderer",
]
