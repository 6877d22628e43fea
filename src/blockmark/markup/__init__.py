#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Generic markup tree: nodes, HTML parsing and serialization."""

from blockmark.markup.nodes import (
    Element,
    Fragment,
    MarkupNode,
    MarkupParent,
    MarkupRaw,
    MarkupText,
    has_block_descendant,
    text_content,
    to_html,
)
from blockmark.markup.parser import element_from_markup, parse_markup

__all__ = [
    "Element",
    "Fragment",
    "MarkupNode",
    "MarkupParent",
    "MarkupRaw",
    "MarkupText",
    "element_from_markup",
    "has_block_descendant",
    "parse_markup",
    "text_content",
    "to_html",
]
