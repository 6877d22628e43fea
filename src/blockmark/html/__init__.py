#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Semantic projector: block tree to markup and back.

Two rendering modes are provided:

- :class:`InternalHTMLRenderer` - fully reversible markup carrying block ids,
  types and props as data attributes,
- :class:`ExternalHTMLRenderer` - clean, portable semantic markup.

:func:`html_to_blocks` parses either mode back into blocks.
"""

from blockmark.html.external import ExternalHTMLRenderer
from blockmark.html.inline import InlineRenderer
from blockmark.html.internal import InternalHTMLRenderer
from blockmark.html.parser import HtmlToBlocksParser, html_to_blocks
from blockmark.html.styles import StyleMatcher, default_style_renderer, wrap_styles

__all__ = [
    "ExternalHTMLRenderer",
    "HtmlToBlocksParser",
    "InlineRenderer",
    "InternalHTMLRenderer",
    "StyleMatcher",
    "default_style_renderer",
    "html_to_blocks",
    "wrap_styles",
]
