#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Schema registry and type descriptors.

- props: typed property descriptors (:class:`PropSpec`)
- specs: block, inline content and style descriptors
- registry: the two-phase :class:`SchemaRegistry`
- defaults: the built-in vocabulary and :func:`default_schema`

"""

from blockmark.schema.defaults import (
    DEFAULT_BLOCK_SPECS,
    DEFAULT_INLINE_CONTENT_SPECS,
    DEFAULT_PROPS,
    DEFAULT_STYLE_SPECS,
    default_schema,
)
from blockmark.schema.props import PropSchema, PropSpec, kebab_case, normalize_props
from blockmark.schema.registry import SchemaRegistry, TypeSpec, spec_kind
from blockmark.schema.specs import BlockTypeSpec, InlineContentTypeSpec, StyleTypeSpec

__all__ = [
    "BlockTypeSpec",
    "DEFAULT_BLOCK_SPECS",
    "DEFAULT_INLINE_CONTENT_SPECS",
    "DEFAULT_PROPS",
    "DEFAULT_STYLE_SPECS",
    "InlineContentTypeSpec",
    "PropSchema",
    "PropSpec",
    "SchemaRegistry",
    "StyleTypeSpec",
    "TypeSpec",
    "default_schema",
    "kebab_case",
    "normalize_props",
    "spec_kind",
]
