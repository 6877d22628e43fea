#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blockmark/html/internal.py
"""Internal (fully reversible) markup rendering.

Every block becomes a ``blockContainer`` element carrying its id, type and
props as data attributes::

    <div data-node-type="blockGroup">
      <div data-node-type="blockContainer" data-block-id="..." data-block-type="heading" data-prop-level="2">
        <div data-node-type="inlineContent">...</div>
        <div data-node-type="blockGroup">...children...</div>
      </div>
    </div>

Styles are wrapper elements with ``data-style-type`` (and ``data-value``),
links are ``a[data-inline-type=link]``. The matching parser in
:mod:`blockmark.html.parser` rebuilds the block tree exactly.

"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from blockmark.constants import (
    ATTR_BLOCK_ID,
    ATTR_BLOCK_TYPE,
    ATTR_NODE_TYPE,
    NODE_TYPE_BLOCK_CONTAINER,
    NODE_TYPE_BLOCK_GROUP,
    NODE_TYPE_INLINE_CONTENT,
)
from blockmark.exceptions import SchemaMismatch
from blockmark.html.inline import InlineRenderer, prop_attrs
from blockmark.markup.nodes import Element, MarkupNode, to_html
from blockmark.model import Block, TableContent
from blockmark.options.html import HtmlRendererOptions
from blockmark.schema.props import normalize_props
from blockmark.schema.registry import SchemaRegistry

logger = logging.getLogger(__name__)


class InternalHTMLRenderer:
    """Render a block tree to internal markup.

    Parameters
    ----------
    schema : SchemaRegistry
        Active schema
    options : HtmlRendererOptions or None, default None
        Rendering options (style renderer overrides)

    """

    def __init__(self, schema: SchemaRegistry, options: Optional[HtmlRendererOptions] = None):
        self.schema = schema
        self.options = options or HtmlRendererOptions()
        self._inline = InlineRenderer(schema, "internal", self.options.style_renderers)

    def render_to_string(self, blocks: Iterable[Block]) -> str:
        return to_html(self.render(blocks))

    def render(self, blocks: Iterable[Block]) -> Element:
        """Render top-level blocks wrapped in a ``blockGroup`` element."""
        return self._group(blocks)

    def _group(self, blocks: Iterable[Block]) -> Element:
        return Element(
            tag="div",
            attrs={ATTR_NODE_TYPE: NODE_TYPE_BLOCK_GROUP},
            children=[self._container(block) for block in blocks],
        )

    def _container(self, block: Block) -> Element:
        attrs = {
            ATTR_NODE_TYPE: NODE_TYPE_BLOCK_CONTAINER,
            ATTR_BLOCK_ID: block.id,
            ATTR_BLOCK_TYPE: block.type,
        }
        children: list[MarkupNode] = []
        try:
            spec = self.schema.resolve_block(block.type)
        except SchemaMismatch:
            # unknown types keep their raw props; the parser applies its unknown-block policy
            logger.info("Block type '%s' is not in the schema; rendering it without normalization", block.type)
            attrs.update(prop_attrs(block.props))
            if block.content is not None:
                children.append(self._inline_content(block))
        else:
            attrs.update(prop_attrs(normalize_props(spec.prop_schema, block.props, block.type), spec.prop_schema))
            if spec.content != "none":
                children.append(self._inline_content(block))

        if block.children:
            children.append(self._group(block.children))
        return Element(tag="div", attrs=attrs, children=children)

    def _inline_content(self, block: Block) -> Element:
        if isinstance(block.content, TableContent):
            content: list[MarkupNode] = [self._inline.table(block.content)]
        else:
            content = self._inline.render(block.content)
        return Element(tag="div", attrs={ATTR_NODE_TYPE: NODE_TYPE_INLINE_CONTENT}, children=content)
