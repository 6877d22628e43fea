#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Public export/import entry points for blockmark.

Every function is a pure function of its inputs, the schema and the options:
it builds its own renderer/parser objects, never mutates its arguments and
keeps no state between calls.

Exports go through the external markup mode; ``blocks_to_full_html`` is the
lossless internal mode. Markdown conversions are lossy for block and style
types without a Markdown representation: custom blocks degrade to paragraphs
with their visible text, props other than the heading level are dropped,
underline is dropped and custom styles survive as inline HTML spans.

"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from blockmark.html.external import ExternalHTMLRenderer
from blockmark.html.internal import InternalHTMLRenderer
from blockmark.html.parser import HtmlToBlocksParser
from blockmark.markdown.codec import markdown_to_markup, markup_to_markdown
from blockmark.markup.nodes import to_html
from blockmark.model import Block
from blockmark.nodes.adapter import doc_to_blocks
from blockmark.nodes.native import NativeNodeLike
from blockmark.options.html import HtmlParserOptions, HtmlRendererOptions
from blockmark.options.markdown import MarkdownOptions
from blockmark.schema.registry import SchemaRegistry

logger = logging.getLogger(__name__)


def _markdown_options(options: Optional[MarkdownOptions], kwargs: dict[str, Any]) -> MarkdownOptions:
    # keyword arguments override fields of the given options
    options = options or MarkdownOptions()
    if kwargs:
        options = options.create_updated(**kwargs)
    return options


def _combined_schema(
    block_schema: SchemaRegistry,
    inline_content_schema: Optional[SchemaRegistry],
    style_schema: Optional[SchemaRegistry],
) -> SchemaRegistry:
    if inline_content_schema is None and style_schema is None:
        return block_schema
    return SchemaRegistry.from_specs(
        blocks=block_schema.blocks.values(),
        inline_content=(inline_content_schema or block_schema).inline_content.values(),
        styles=(style_schema or block_schema).styles.values(),
    )


def blocks_to_html(
    blocks: Iterable[Block],
    schema: SchemaRegistry,
    *,
    renderer_options: Optional[HtmlRendererOptions] = None,
) -> str:
    """Render blocks to clean, portable (external) HTML.

    Parameters
    ----------
    blocks : Iterable[Block]
        Top-level blocks
    schema : SchemaRegistry
        Active schema
    renderer_options : HtmlRendererOptions, optional
        Style and block renderer overrides

    Returns
    -------
    str
        Semantic HTML; blocks without a mapping degrade to ``div`` containers

    """
    return ExternalHTMLRenderer(schema, renderer_options).render_to_string(blocks)


def blocks_to_full_html(
    blocks: Iterable[Block],
    schema: SchemaRegistry,
    *,
    renderer_options: Optional[HtmlRendererOptions] = None,
) -> str:
    """Render blocks to lossless (internal) HTML carrying ids, types and props."""
    return InternalHTMLRenderer(schema, renderer_options).render_to_string(blocks)


def blocks_to_markdown(
    blocks: Iterable[Block],
    schema: SchemaRegistry,
    *,
    options: Optional[MarkdownOptions] = None,
    renderer_options: Optional[HtmlRendererOptions] = None,
    **kwargs: Any,
) -> str:
    """Export blocks to Markdown.

    Parameters
    ----------
    blocks : Iterable[Block]
        Top-level blocks
    schema : SchemaRegistry
        Active schema
    options : MarkdownOptions, optional
        Extensions, handlers and formatting symbols
    renderer_options : HtmlRendererOptions, optional
        Overrides for the intermediate external HTML rendering
    kwargs : Any
        Individual ``MarkdownOptions`` fields, overriding ``options``

    Returns
    -------
    str
        Canonical Markdown; each block is followed by a blank line

    Examples
    --------
        >>> schema = default_schema()
        >>> blocks_to_markdown([build_block(schema, "heading", "Hi", props={"level": 2})], schema)
        '## Hi\\n\\n'

    """
    markdown_options = _markdown_options(options, kwargs)
    fragment = ExternalHTMLRenderer(schema, renderer_options).render(blocks)
    return markup_to_markdown(to_html(fragment), markdown_options)


def markdown_to_blocks(
    markdown: str,
    block_schema: SchemaRegistry,
    inline_content_schema: Optional[SchemaRegistry] = None,
    style_schema: Optional[SchemaRegistry] = None,
    *,
    options: Optional[MarkdownOptions] = None,
    parser_options: Optional[HtmlParserOptions] = None,
    **kwargs: Any,
) -> list[Block]:
    """Import Markdown text as blocks.

    Parameters
    ----------
    markdown : str
        Markdown source
    block_schema : SchemaRegistry
        Registry supplying the block types (and the inline content and style
        types unless given separately)
    inline_content_schema : SchemaRegistry, optional
        Registry supplying the inline content types
    style_schema : SchemaRegistry, optional
        Registry supplying the style types
    options : MarkdownOptions, optional
        Enabled extensions
    parser_options : HtmlParserOptions, optional
        Options for the markup to blocks step
    kwargs : Any
        Individual ``MarkdownOptions`` fields, overriding ``options``

    Returns
    -------
    list[Block]
        Normalized blocks with fresh ids

    Raises
    ------
    UnresolvedReferenceError
        If the combined registries reference an undeclared type.

    """
    schema = _combined_schema(block_schema, inline_content_schema, style_schema)
    fragment = markdown_to_markup(markdown, _markdown_options(options, kwargs))
    return HtmlToBlocksParser(schema, parser_options).parse(to_html(fragment))


def html_to_blocks(
    html: str,
    schema: SchemaRegistry,
    *,
    parser_options: Optional[HtmlParserOptions] = None,
) -> list[Block]:
    """Parse internal or external HTML into blocks.

    Internal markup is rebuilt exactly; external markup is mapped through the
    schema. Malformed markup never raises.
    """
    return HtmlToBlocksParser(schema, parser_options).parse(html)


def nodes_to_html(
    doc: NativeNodeLike,
    schema: SchemaRegistry,
    *,
    renderer_options: Optional[HtmlRendererOptions] = None,
) -> str:
    """Render a native ``doc`` (or ``blockGroup``) node to external HTML.

    Raises
    ------
    SchemaMismatch
        If the native tree holds a node type the schema does not know.

    """
    return blocks_to_html(doc_to_blocks(doc, schema), schema, renderer_options=renderer_options)


def nodes_to_markdown(
    doc: NativeNodeLike,
    schema: SchemaRegistry,
    *,
    options: Optional[MarkdownOptions] = None,
    renderer_options: Optional[HtmlRendererOptions] = None,
    **kwargs: Any,
) -> str:
    """Export a native ``doc`` (or ``blockGroup``) node to Markdown."""
    blocks = doc_to_blocks(doc, schema)
    return blocks_to_markdown(blocks, schema, options=options, renderer_options=renderer_options, **kwargs)
