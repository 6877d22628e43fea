#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blockmark/markup/nodes.py
"""Generic markup tree.

The markup tree is the neutral intermediate between the semantic projector
and the Markdown codec: elements with a tag name, string attributes and
children, plus text and raw (pre-serialized) markup leaves. It carries no
knowledge of blocks or Markdown.

"""

from __future__ import annotations

import html
from dataclasses import dataclass, field
from typing import Iterator, Optional, Union

from blockmark.constants import BLOCK_ELEMENTS, VOID_ELEMENTS


@dataclass
class MarkupText:
    """A text leaf (unescaped)."""

    value: str


@dataclass
class MarkupRaw:
    """Pre-serialized markup emitted verbatim."""

    value: str


@dataclass
class Element:
    """An element with a tag name, attributes and children.

    Parameters
    ----------
    tag : str
        Lowercase tag name
    attrs : dict, default = empty dict
        Attribute name → string value
    children : list, default = empty list
        Child elements, text and raw leaves

    """

    tag: str
    attrs: dict[str, str] = field(default_factory=dict)
    children: list[MarkupNode] = field(default_factory=list)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.attrs.get(name, default)

    @property
    def is_block(self) -> bool:
        return self.tag in BLOCK_ELEMENTS

    def elements(self) -> Iterator[Element]:
        """Yield direct child elements."""
        for child in self.children:
            if isinstance(child, Element):
                yield child

    def find_all(self, tag: str) -> Iterator[Element]:
        """Yield descendant elements with the given tag depth-first."""
        for child in self.elements():
            if child.tag == tag:
                yield child
            yield from child.find_all(tag)

    def text_content(self) -> str:
        return text_content(self.children)


@dataclass
class Fragment:
    """Root of a parsed markup fragment."""

    children: list[MarkupNode] = field(default_factory=list)

    def elements(self) -> Iterator[Element]:
        for child in self.children:
            if isinstance(child, Element):
                yield child

    def text_content(self) -> str:
        return text_content(self.children)


MarkupNode = Union[Element, MarkupText, MarkupRaw]
MarkupParent = Union[Element, Fragment]


def text_content(nodes: list[MarkupNode]) -> str:
    """Concatenate the text of ``nodes``; ``br`` elements count as newlines."""
    parts: list[str] = []
    for node in nodes:
        if isinstance(node, MarkupText):
            parts.append(node.value)
        elif isinstance(node, Element):
            parts.append("\n" if node.tag == "br" else text_content(node.children))
    return "".join(parts)


def has_block_descendant(node: MarkupParent) -> bool:
    """Whether any descendant element is block-level."""
    for child in node.elements():
        if child.is_block or has_block_descendant(child):
            return True
    return False


def _render_attrs(attrs: dict[str, str]) -> str:
    return "".join(f' {name}="{html.escape(str(value), quote=True)}"' for name, value in attrs.items())


def to_html(node: Union[MarkupNode, Fragment, list[MarkupNode]]) -> str:
    """Serialize markup nodes to an HTML string.

    Text is escaped, raw leaves are emitted verbatim and void elements are
    written without a closing tag.

    """
    if isinstance(node, list):
        return "".join(to_html(child) for child in node)
    if isinstance(node, Fragment):
        return to_html(node.children)
    if isinstance(node, MarkupText):
        return html.escape(node.value, quote=False)
    if isinstance(node, MarkupRaw):
        return node.value
    opening = f"<{node.tag}{_render_attrs(node.attrs)}>"
    if node.tag in VOID_ELEMENTS:
        return opening
    return f"{opening}{to_html(node.children)}</{node.tag}>"
