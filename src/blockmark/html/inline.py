#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blockmark/html/inline.py
"""Inline content and table rendering shared by both markup modes."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence, Union

from blockmark.constants import ATTR_INLINE_TYPE, ATTR_PROP_PREFIX, RenderMode
from blockmark.exceptions import SchemaMismatch
from blockmark.html.styles import wrap_styles
from blockmark.markup.nodes import Element, MarkupNode
from blockmark.model import CustomInlineContent, InlineContent, Link, StyledText, TableContent
from blockmark.options.html import StyleRenderer
from blockmark.schema.props import PropSchema, kebab_case
from blockmark.schema.registry import SchemaRegistry

logger = logging.getLogger(__name__)


def prop_attrs(props: Mapping[str, Any], prop_schema: Optional[PropSchema] = None) -> dict[str, str]:
    """Render props as ``data-prop-<kebab-name>`` attributes.

    With a ``prop_schema`` values are serialized through their descriptors,
    otherwise they are stringified as-is.
    """
    attrs: dict[str, str] = {}
    for name, value in props.items():
        spec = prop_schema.get(name) if prop_schema is not None else None
        if spec is not None:
            attrs[ATTR_PROP_PREFIX + kebab_case(name)] = spec.to_markup(value)
        elif isinstance(value, bool):
            attrs[ATTR_PROP_PREFIX + kebab_case(name)] = "true" if value else "false"
        else:
            attrs[ATTR_PROP_PREFIX + kebab_case(name)] = str(value)
    return attrs


def props_from_attrs(
    attrs: Mapping[str, str], prop_schema: PropSchema, prefix: str = ATTR_PROP_PREFIX
) -> dict[str, str]:
    """Collect raw prop strings for the declared props present in ``attrs``.

    ``prefix`` is ``data-prop-`` for blockmark markup and ``data-`` for the
    editor's own content nodes (``data-level``).
    """
    raw: dict[str, str] = {}
    for name in prop_schema:
        value = attrs.get(prefix + kebab_case(name))
        if value is not None:
            raw[name] = value
    return raw


class InlineRenderer:
    """Render inline content to markup nodes.

    Parameters
    ----------
    schema : SchemaRegistry
        Active schema
    mode : {"internal", "external"}
        Rendering mode
    style_renderers : Mapping[str, StyleRenderer] or None
        Per-style overrides

    """

    def __init__(
        self,
        schema: SchemaRegistry,
        mode: RenderMode,
        style_renderers: Optional[Mapping[str, StyleRenderer]] = None,
    ):
        self.schema = schema
        self.mode = mode
        self.style_renderers = style_renderers or {}

    def runs(self, runs: Sequence[StyledText]) -> list[MarkupNode]:
        nodes: list[MarkupNode] = []
        for run in runs:
            nodes.extend(wrap_styles(run.text, run.styles, self.schema, self.mode, self.style_renderers))
        return nodes

    def render(self, content: Optional[Union[str, Sequence[Union[str, InlineContent]]]]) -> list[MarkupNode]:
        """Render a list of inline content items.

        Plain strings (as the whole content or as items) render as unstyled
        text.

        Raises
        ------
        TypeError
            If an item is not inline content.

        """
        if isinstance(content, str):
            content = [content]
        nodes: list[MarkupNode] = []
        for item in content or []:
            if isinstance(item, str):
                item = StyledText(text=item)
            if isinstance(item, StyledText):
                nodes.extend(self.runs([item]))
            elif isinstance(item, Link):
                attrs = {"href": item.href}
                if self.mode == "internal":
                    attrs = {ATTR_INLINE_TYPE: "link", **attrs}
                nodes.append(Element(tag="a", attrs=attrs, children=self.runs(item.content)))
            elif isinstance(item, CustomInlineContent):
                nodes.append(self._custom(item))
            else:
                raise TypeError(f"Unsupported inline content item: {item!r}")
        return nodes

    def _custom(self, item: CustomInlineContent) -> Element:
        try:
            prop_schema: Optional[PropSchema] = self.schema.resolve_inline(item.type).prop_schema
        except SchemaMismatch:
            logger.debug("Rendering undeclared inline content type '%s' without prop schema", item.type)
            prop_schema = None
        attrs = {ATTR_INLINE_TYPE: item.type, **prop_attrs(item.props, prop_schema)}
        return Element(tag="span", attrs=attrs, children=self.runs(item.content))

    def table(self, content: TableContent) -> Element:
        """Render table content as ``table > tbody > tr > td``."""
        rows = [
            Element(tag="tr", children=[Element(tag="td", children=self.render(cell)) for cell in row.cells])
            for row in content.rows
        ]
        return Element(tag="table", children=[Element(tag="tbody", children=rows)])
