#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blockmark/html/external.py
"""External (portable) markup rendering.

Blocks map to semantic elements through their type descriptors:

- ``external_tag`` names the element, with ``{prop}`` placeholders filled from
  the block's props (``h{level}``),
- ``external_attrs`` renders props as plain attributes (image ``src``/``alt``),
- ``list_tag`` groups consecutive list items of the same kind under one
  ``ul``/``ol``; nested list items are rendered inside the parent ``li``,
- table content renders as ``table/tbody/tr/td``.

Block types with no mapping degrade to a ``div[data-block-type]`` holding the
block's inline content. Children of non-list blocks follow the block's element
in a plain ``div`` so nesting depth is kept as element depth.

"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from blockmark.constants import ATTR_BLOCK_TYPE, VOID_ELEMENTS
from blockmark.exceptions import SchemaMismatch, UnsupportedConversion
from blockmark.html.inline import InlineRenderer, prop_attrs
from blockmark.markup.nodes import Element, MarkupNode, to_html
from blockmark.model import Block, TableContent
from blockmark.options.html import HtmlRendererOptions
from blockmark.schema.props import normalize_props
from blockmark.schema.registry import SchemaRegistry
from blockmark.schema.specs import BlockTypeSpec

logger = logging.getLogger(__name__)


class ExternalHTMLRenderer:
    """Render a block tree to clean, portable markup.

    Parameters
    ----------
    schema : SchemaRegistry
        Active schema
    options : HtmlRendererOptions or None, default None
        Style and block renderer overrides

    Examples
    --------
        >>> schema = default_schema()
        >>> renderer = ExternalHTMLRenderer(schema)
        >>> renderer.render_to_string([build_block(schema, "heading", "Hi", props={"level": 2})])
        '<h2>Hi</h2>'

    """

    def __init__(self, schema: SchemaRegistry, options: Optional[HtmlRendererOptions] = None):
        self.schema = schema
        self.options = options or HtmlRendererOptions()
        self.inline = InlineRenderer(schema, "external", self.options.style_renderers)

    def render_to_string(self, blocks: Iterable[Block]) -> str:
        return to_html(self.render(blocks))

    def render(self, blocks: Iterable[Block]) -> list[MarkupNode]:
        """Render a sequence of sibling blocks.

        Runs of consecutive list items sharing a list tag are grouped into one
        list element.
        """
        nodes: list[MarkupNode] = []
        current_list: Optional[Element] = None
        for block in blocks:
            list_tag = self._list_tag(block)
            if list_tag is None:
                current_list = None
                nodes.extend(self.render_block(block))
                continue
            if current_list is None or current_list.tag != list_tag:
                current_list = Element(tag=list_tag)
                nodes.append(current_list)
            current_list.children.append(self._list_item(block))
        return nodes

    def _spec(self, block: Block) -> Optional[BlockTypeSpec]:
        try:
            return self.schema.resolve_block(block.type)
        except SchemaMismatch:
            return None

    def _list_tag(self, block: Block) -> Optional[str]:
        if block.type in self.options.block_renderers:
            return None
        spec = self._spec(block)
        return spec.list_tag if spec is not None else None

    def _props(self, block: Block, spec: BlockTypeSpec) -> dict:
        return normalize_props(spec.prop_schema, block.props, block.type)

    def _list_item(self, block: Block) -> Element:
        item = Element(tag="li", children=self.inline.render(block.content))  # type: ignore[arg-type]
        item.children.extend(self.render(block.children))
        return item

    def render_block(self, block: Block) -> list[MarkupNode]:
        """Render one non-list block (and its children).

        Never raises: blocks without a mapping produce the generic fallback
        container.
        """
        renderer = self.options.block_renderers.get(block.type)
        if renderer is not None:
            return list(renderer(block, self))
        try:
            return self._render_mapped(block)
        except (SchemaMismatch, UnsupportedConversion) as e:
            logger.info("%s; using generic container", e.message)
            return [self._fallback(block)]

    def _render_mapped(self, block: Block) -> list[MarkupNode]:
        spec = self._spec(block)
        if spec is None:
            raise SchemaMismatch(block.type, "block")
        props = self._props(block, spec)

        element: Element
        if spec.content == "table":
            content = block.content if isinstance(block.content, TableContent) else TableContent()
            element = self.inline.table(content)
        else:
            tag = spec.external_tag_for(props)
            if not tag:
                raise UnsupportedConversion(block.type, "external markup")
            element = Element(tag=tag)
            for prop_name, attr_name in spec.external_attrs.items():
                value = props.get(prop_name)
                if value not in (None, ""):
                    element.attrs[attr_name] = str(value)
            if spec.content == "inline" and tag not in VOID_ELEMENTS:
                element.children = self.inline.render(block.content)  # type: ignore[arg-type]

        nodes: list[MarkupNode] = [element]
        if block.children:
            nodes.append(Element(tag="div", children=self.render(block.children)))
        return nodes

    def _fallback(self, block: Block) -> Element:
        spec = self._spec(block)
        attrs = {ATTR_BLOCK_TYPE: block.type}
        if spec is not None:
            defaults = normalize_props(spec.prop_schema, {}, block.type)
            changed = {name: value for name, value in self._props(block, spec).items() if value != defaults[name]}
            attrs.update(prop_attrs(changed, spec.prop_schema))
        else:
            attrs.update(prop_attrs(block.props))

        children: Sequence[MarkupNode]
        if isinstance(block.content, TableContent):
            children = [self.inline.table(block.content)]
        else:
            children = self.inline.render(block.content)
        element = Element(tag="div", attrs=attrs, children=list(children))
        if block.children:
            element.children.append(Element(tag="div", children=self.render(block.children)))
        return element
