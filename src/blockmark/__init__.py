#  Copyright (c) 2025 Tom Villani, Ph.D.
"""blockmark - conversion core for block-structured rich-text documents.

blockmark moves a document between three representations:

- the block tree (:class:`Block` records with typed props, inline content
  and nested children),
- the native node tree of the text-editing engine,
- interchange text: a semantic HTML subset and Markdown.

The block, inline content and style vocabulary is supplied by the caller as a
:class:`SchemaRegistry`; :func:`default_schema` provides the built-in one.

Examples
--------
Export blocks to Markdown:

    >>> from blockmark import blocks_to_markdown, build_block, default_schema
    >>> schema = default_schema()
    >>> blocks_to_markdown([build_block(schema, "heading", "Hi", props={"level": 2})], schema)
    '## Hi\\n\\n'

Import Markdown:

    >>> blocks = markdown_to_blocks("# Title\\n\\nbody text", schema)
    >>> [block.type for block in blocks]
    ['heading', 'paragraph']

"""

import logging

from blockmark.api import (
    blocks_to_full_html,
    blocks_to_html,
    blocks_to_markdown,
    html_to_blocks,
    markdown_to_blocks,
    nodes_to_html,
    nodes_to_markdown,
)
from blockmark.exceptions import (
    BlockmarkError,
    ConversionError,
    DuplicateTypeError,
    InvalidPropValue,
    MarkupParseError,
    SchemaError,
    SchemaFrozenError,
    SchemaMismatch,
    UnresolvedReferenceError,
    UnsupportedConversion,
)
from blockmark.model import (
    Block,
    CustomInlineContent,
    Link,
    StyledText,
    TableContent,
    TableRow,
    build_block,
    normalize_block,
)
from blockmark.nodes import block_to_node, blocks_to_doc, doc_to_blocks, node_to_block
from blockmark.options import HtmlParserOptions, HtmlRendererOptions, MarkdownOptions
from blockmark.schema import (
    BlockTypeSpec,
    InlineContentTypeSpec,
    PropSpec,
    SchemaRegistry,
    StyleTypeSpec,
    default_schema,
)
from blockmark.serialization import block_from_dict, block_to_dict, blocks_from_json, blocks_to_json

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Facade
    "blocks_to_full_html",
    "blocks_to_html",
    "blocks_to_markdown",
    "html_to_blocks",
    "markdown_to_blocks",
    "nodes_to_html",
    "nodes_to_markdown",
    # Model
    "Block",
    "CustomInlineContent",
    "Link",
    "StyledText",
    "TableContent",
    "TableRow",
    "build_block",
    "normalize_block",
    # Native tree adapter
    "block_to_node",
    "blocks_to_doc",
    "doc_to_blocks",
    "node_to_block",
    # Schema
    "BlockTypeSpec",
    "InlineContentTypeSpec",
    "PropSpec",
    "SchemaRegistry",
    "StyleTypeSpec",
    "default_schema",
    # Options
    "HtmlParserOptions",
    "HtmlRendererOptions",
    "MarkdownOptions",
    # Serialization
    "block_from_dict",
    "block_to_dict",
    "blocks_from_json",
    "blocks_to_json",
    # Exceptions
    "BlockmarkError",
    "ConversionError",
    "DuplicateTypeError",
    "InvalidPropValue",
    "MarkupParseError",
    "SchemaError",
    "SchemaFrozenError",
    "SchemaMismatch",
    "UnresolvedReferenceError",
    "UnsupportedConversion",
]
