#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blockmark/schema/specs.py
"""Type descriptors for blocks, inline content and styles.

The descriptors are plain frozen dataclasses. They carry data only; the
behaviour that reads them (native tree conversion, markup rendering and
parsing) lives in free functions and renderer classes that take the schema as
an explicit argument.

Cross references between types (``allowed_children``, ``cell_content``) are
stored by name and checked when the owning registry is linked, which allows
mutually referencing groups of types to be registered in any order.

"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from blockmark.constants import CONTENT_KINDS, ContentKind, InlineContentKind, ListTag, StyleValueType
from blockmark.schema.props import PropSpec

_PLACEHOLDER = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")


def _frozen(mapping: Mapping[str, PropSpec] | None) -> Mapping[str, PropSpec]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class BlockTypeSpec:
    """Descriptor of a block type.

    Parameters
    ----------
    name : str
        Block type name (e.g. "paragraph")
    prop_schema : Mapping[str, PropSpec]
        Declared props
    content : {"none", "inline", "nestedBlocks", "table"}, default "inline"
        Shape of the block's own content
    container : bool, default True
        Whether the block may hold child blocks
    allowed_children : tuple of str or None, default None
        Block type names accepted as children (None accepts any)
    cell_content : tuple of str, default ("text", "link")
        Inline content types accepted in table cells (table blocks only)
    external_tag : str or None, default None
        Semantic tag for external markup. May contain ``{prop}`` placeholders
        filled from the block's props (e.g. ``"h{level}"``).
    external_attrs : Mapping[str, str]
        Props rendered as plain attributes of the external element
        (prop name → attribute name)
    list_tag : {"ul", "ol"} or None, default None
        Marks the type as a list item grouped under this list element

    """

    name: str
    prop_schema: Mapping[str, PropSpec] = field(default_factory=dict)
    content: ContentKind = "inline"
    container: bool = True
    allowed_children: Optional[tuple[str, ...]] = None
    cell_content: tuple[str, ...] = ("text", "link")
    external_tag: Optional[str] = None
    external_attrs: Mapping[str, str] = field(default_factory=dict)
    list_tag: Optional[ListTag] = None

    def __post_init__(self) -> None:
        """Validate the descriptor and freeze its mappings.

        Raises
        ------
        ValueError
            If a field holds an unsupported value.

        """
        if not self.name:
            raise ValueError("Block type name must not be empty")
        if self.content not in CONTENT_KINDS:
            raise ValueError(f"content must be one of {CONTENT_KINDS}, got {self.content!r}")
        if self.content == "nestedBlocks" and not self.container:
            raise ValueError(f"Block type '{self.name}' holds nested blocks but is not a container")
        if self.list_tag not in (None, "ul", "ol"):
            raise ValueError(f"list_tag must be 'ul', 'ol' or None, got {self.list_tag!r}")
        for attr_prop in self.external_attrs:
            if attr_prop not in self.prop_schema:
                raise ValueError(f"external_attrs references undeclared prop '{attr_prop}'")
        object.__setattr__(self, "prop_schema", _frozen(self.prop_schema))
        object.__setattr__(self, "external_attrs", MappingProxyType(dict(self.external_attrs)))

    def external_tag_for(self, props: Mapping[str, object]) -> Optional[str]:
        """Resolve ``external_tag`` placeholders against ``props``."""
        if self.external_tag is None:
            return None
        return _PLACEHOLDER.sub(lambda m: str(props.get(m.group(1), "")), self.external_tag)

    def external_tag_pattern(self) -> Optional[re.Pattern[str]]:
        """Regular expression matching tags produced by ``external_tag``.

        Placeholders become named groups: digits for numeric props, letters
        otherwise.

        """
        if self.external_tag is None:
            return None
        parts: list[str] = []
        position = 0
        for match in _PLACEHOLDER.finditer(self.external_tag):
            parts.append(re.escape(self.external_tag[position : match.start()]))
            prop = self.prop_schema.get(match.group(1))
            numeric = prop is not None and prop.value_type in (int, float)
            parts.append(f"(?P<{match.group(1)}>{'[0-9]+' if numeric else '[a-z]+'})")
            position = match.end()
        parts.append(re.escape(self.external_tag[position:]))
        return re.compile("^" + "".join(parts) + "$")


@dataclass(frozen=True)
class InlineContentTypeSpec:
    """Descriptor of an inline content type (plain text, hyperlink, ...)."""

    name: str
    prop_schema: Mapping[str, PropSpec] = field(default_factory=dict)
    content: InlineContentKind = "styled"

    def __post_init__(self) -> None:
        if self.content not in ("styled", "none"):
            raise ValueError(f"content must be 'styled' or 'none', got {self.content!r}")
        object.__setattr__(self, "prop_schema", _frozen(self.prop_schema))


@dataclass(frozen=True)
class StyleTypeSpec:
    """Descriptor of a style (mark).

    Parameters
    ----------
    name : str
        Style type name (e.g. "bold")
    value_type : {"boolean", "string"}, default "boolean"
        Boolean styles carry ``True``; string styles carry a string value
    tags : tuple of str, default ()
        Canonical markup tags; the first is used when rendering, all are
        recognized when parsing. Empty means the style renders as a generic
        ``span`` carrying data attributes.
    css_property : str, optional
        For string styles, the CSS property set inline in external markup
        (``color`` renders ``style="color: red;"``)
    data_attr : str, optional
        Attribute that also identifies the style when parsing, its value
        being the style value (e.g. ``data-text-color``)

    """

    name: str
    value_type: StyleValueType = "boolean"
    tags: tuple[str, ...] = ()
    css_property: Optional[str] = None
    data_attr: Optional[str] = None

    def __post_init__(self) -> None:
        if self.value_type not in ("boolean", "string"):
            raise ValueError(f"value_type must be 'boolean' or 'string', got {self.value_type!r}")
        if self.css_property is not None and self.value_type != "string":
            raise ValueError(f"Style '{self.name}' sets css_property but is not a string style")
