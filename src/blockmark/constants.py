#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for the blockmark library.

This module centralizes the hardcoded values used across blockmark: type
aliases, native node type names, markup data attributes and Markdown codec
defaults.

Constants are organized by category:
1. Type Definitions - Literal types and type aliases
2. Native Tree - node type names used by the editing engine tree
3. Markup - data attributes and element classification
4. Markdown - codec defaults and extension names
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

TypeKind = Literal["block", "inlineContent", "style"]
ContentKind = Literal["none", "inline", "nestedBlocks", "table"]
InlineContentKind = Literal["styled", "none"]
StyleValueType = Literal["boolean", "string"]
ListTag = Literal["ul", "ol"]
RenderMode = Literal["internal", "external"]
UnknownBlockPolicy = Literal["paragraph", "drop"]
MarkdownExtension = Literal["tables", "strikethrough", "autolinks"]
EmphasisSymbol = Literal["*", "_"]
BulletSymbol = Literal["-", "*", "+"]

TYPE_KINDS: tuple[TypeKind, ...] = ("block", "inlineContent", "style")
CONTENT_KINDS: tuple[ContentKind, ...] = ("none", "inline", "nestedBlocks", "table")

# =============================================================================
# Native Tree
# =============================================================================

NATIVE_DOC = "doc"
NATIVE_BLOCK_GROUP = "blockGroup"
NATIVE_BLOCK_CONTAINER = "blockContainer"
NATIVE_TEXT = "text"
NATIVE_TABLE_ROW = "tableRow"
NATIVE_TABLE_CELL = "tableCell"
NATIVE_HARD_BREAK = "hardBreak"

# Mark attribute holding the value of string-valued styles
STYLE_VALUE_ATTR = "stringValue"

# =============================================================================
# Markup
# =============================================================================

ATTR_NODE_TYPE = "data-node-type"
ATTR_BLOCK_ID = "data-block-id"
ATTR_BLOCK_TYPE = "data-block-type"
ATTR_PROP_PREFIX = "data-prop-"
ATTR_STYLE_TYPE = "data-style-type"
ATTR_STYLE_VALUE = "data-value"
ATTR_INLINE_TYPE = "data-inline-type"

# Editor-native content nodes: div[data-content-type] with one data-<prop> per prop
ATTR_CONTENT_TYPE = "data-content-type"
ATTR_CONTENT_PROP_PREFIX = "data-"

NODE_TYPE_BLOCK_GROUP = "blockGroup"
NODE_TYPE_BLOCK_CONTAINER = "blockContainer"
NODE_TYPE_INLINE_CONTENT = "inlineContent"

# Elements rendered without a closing tag
VOID_ELEMENTS = frozenset({"br", "hr", "img", "input", "meta", "link", "col", "area", "base", "wbr", "source"})

# Elements that never contribute content
SKIPPED_ELEMENTS = frozenset({"script", "style", "template", "noscript", "head", "title", "meta", "link"})

# Block-level elements used for flow/phrasing classification
BLOCK_ELEMENTS = frozenset(
    {
        "address",
        "article",
        "aside",
        "blockquote",
        "body",
        "dd",
        "details",
        "div",
        "dl",
        "dt",
        "fieldset",
        "figcaption",
        "figure",
        "footer",
        "form",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "header",
        "hr",
        "html",
        "li",
        "main",
        "nav",
        "ol",
        "p",
        "pre",
        "section",
        "summary",
        "table",
        "tbody",
        "td",
        "tfoot",
        "th",
        "thead",
        "tr",
        "ul",
    }
)

DEFAULT_HTML_PARSER = "html.parser"
DEFAULT_UNKNOWN_BLOCK_POLICY: UnknownBlockPolicy = "paragraph"
DEFAULT_COLLAPSE_WHITESPACE = True

# =============================================================================
# Markdown
# =============================================================================

MARKDOWN_EXTENSIONS: frozenset[str] = frozenset({"tables", "strikethrough", "autolinks"})
DEFAULT_MARKDOWN_EXTENSIONS: frozenset[str] = MARKDOWN_EXTENSIONS
DEFAULT_BULLET_SYMBOL: BulletSymbol = "-"
DEFAULT_EMPHASIS_SYMBOL: EmphasisSymbol = "*"
DEFAULT_ESCAPE_SPECIAL = True
DEFAULT_CODE_FENCE = "```"
