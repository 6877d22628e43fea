#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blockmark/html/styles.py
"""Style (mark) rendering and recognition.

Built-in styles render as their canonical tag (the first entry of
``StyleTypeSpec.tags``); styles without tags render as a ``span`` carrying
``data-style-type`` and, for string styles, ``data-value``. In internal mode
every wrapper carries the data attributes so the style type survives any tag
aliasing.

"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from blockmark.constants import ATTR_STYLE_TYPE, ATTR_STYLE_VALUE, RenderMode
from blockmark.exceptions import SchemaMismatch
from blockmark.markup.nodes import Element, MarkupNode, MarkupText
from blockmark.model import StyleValue
from blockmark.options.html import StyleRenderer
from blockmark.schema.registry import SchemaRegistry
from blockmark.schema.specs import StyleTypeSpec

logger = logging.getLogger(__name__)


def default_style_renderer(value: Any, spec: StyleTypeSpec, mode: RenderMode) -> Element:
    """Render the wrapper element for one style.

    Parameters
    ----------
    value : bool or str
        Style value
    spec : StyleTypeSpec
        Descriptor of the style
    mode : {"internal", "external"}
        Rendering mode

    Returns
    -------
    Element
        Empty wrapper element; the caller appends the styled content

    """
    tag = spec.tags[0] if spec.tags else "span"
    attrs: dict[str, str] = {}
    if mode == "internal" or not spec.tags:
        attrs[ATTR_STYLE_TYPE] = spec.name
        if spec.value_type == "string":
            attrs[ATTR_STYLE_VALUE] = str(value)
    if mode == "external" and spec.css_property:
        attrs["style"] = f"{spec.css_property}: {value};"
    return Element(tag=tag, attrs=attrs)


def text_nodes(text: str) -> list[MarkupNode]:
    """Split text on newlines, rendering each newline as a ``br`` element."""
    nodes: list[MarkupNode] = []
    for index, line in enumerate(text.split("\n")):
        if index:
            nodes.append(Element(tag="br"))
        if line:
            nodes.append(MarkupText(line))
    return nodes


def wrap_styles(
    text: str,
    styles: Mapping[str, StyleValue],
    schema: SchemaRegistry,
    mode: RenderMode,
    renderers: Optional[Mapping[str, StyleRenderer]] = None,
) -> list[MarkupNode]:
    """Render a styled run as nested wrapper elements.

    Styles are applied in ascending name order, the first one outermost.
    Styles missing from the schema and styles switched off (``False`` or an
    empty string) are skipped.

    """
    nodes = text_nodes(text)
    for name in sorted(styles, reverse=True):
        if not styles[name]:
            continue
        try:
            spec = schema.resolve_style(name)
        except SchemaMismatch:
            logger.debug("Skipping undeclared style '%s' while rendering", name)
            continue
        renderer = (renderers or {}).get(name, default_style_renderer)
        wrapper = renderer(styles[name], spec, mode)
        wrapper.children = nodes
        nodes = [wrapper]
    return nodes


class StyleMatcher:
    """Recognize style wrapper elements in parsed markup.

    ``data-style-type`` wins over everything else. Next come the editor's own
    attributes declared as ``data_attr`` (``span[data-background-color]``),
    then any tag listed in a style's ``tags``.
    """

    def __init__(self, schema: SchemaRegistry):
        self.schema = schema
        self._by_tag: dict[str, StyleTypeSpec] = {}
        self._by_attr: dict[str, StyleTypeSpec] = {}
        for spec in schema.styles.values():
            for tag in spec.tags:
                self._by_tag.setdefault(tag, spec)
            if spec.data_attr:
                self._by_attr.setdefault(spec.data_attr, spec)

    def match(self, element: Element) -> Optional[tuple[str, StyleValue]]:
        """Return ``(style name, value)`` for a wrapper element, or None."""
        name = element.get(ATTR_STYLE_TYPE)
        if name is not None:
            if not self.schema.has(name, "style"):
                logger.debug("Dropping undeclared style '%s' from markup", name)
                return None
            spec = self.schema.resolve_style(name)
            if spec.value_type == "string":
                value = element.get(ATTR_STYLE_VALUE)
                return (name, value) if value else None
            return name, True
        for attr, spec in self._by_attr.items():
            value = element.get(attr)
            if value is not None:
                if spec.value_type == "boolean":
                    return spec.name, True
                return (spec.name, value) if value else None
        spec = self._by_tag.get(element.tag)
        if spec is None or spec.value_type != "boolean":
            return None
        return spec.name, True
