#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blockmark/schema/defaults.py
"""Built-in block, inline content and style types.

The default vocabulary mirrors a typical block editor: paragraphs, headings,
bullet and numbered list items, images and tables; plain text and links;
bold, italic, underline, strike, code and the two colour styles.

"""

from __future__ import annotations

from blockmark.schema.props import PropSpec
from blockmark.schema.registry import SchemaRegistry
from blockmark.schema.specs import BlockTypeSpec, InlineContentTypeSpec, StyleTypeSpec

DEFAULT_PROPS: dict[str, PropSpec] = {
    "backgroundColor": PropSpec(default="default"),
    "textColor": PropSpec(default="default"),
    "textAlignment": PropSpec(default="left", values=("left", "center", "right", "justify")),
}

HEADING_LEVELS = (1, 2, 3, 4, 5, 6)

PARAGRAPH = BlockTypeSpec(name="paragraph", prop_schema=DEFAULT_PROPS, external_tag="p")

HEADING = BlockTypeSpec(
    name="heading",
    prop_schema={**DEFAULT_PROPS, "level": PropSpec(default=1, values=HEADING_LEVELS)},
    external_tag="h{level}",
)

BULLET_LIST_ITEM = BlockTypeSpec(name="bulletListItem", prop_schema=DEFAULT_PROPS, list_tag="ul")

NUMBERED_LIST_ITEM = BlockTypeSpec(name="numberedListItem", prop_schema=DEFAULT_PROPS, list_tag="ol")

IMAGE = BlockTypeSpec(
    name="image",
    prop_schema={
        "textAlignment": DEFAULT_PROPS["textAlignment"],
        "backgroundColor": DEFAULT_PROPS["backgroundColor"],
        "url": PropSpec(default=""),
        "caption": PropSpec(default=""),
        "previewWidth": PropSpec(default=512, validator=lambda width: width > 0),
    },
    content="none",
    external_tag="img",
    external_attrs={"url": "src", "caption": "alt"},
)

TABLE = BlockTypeSpec(
    name="table",
    prop_schema={"backgroundColor": DEFAULT_PROPS["backgroundColor"], "textColor": DEFAULT_PROPS["textColor"]},
    content="table",
    cell_content=("text", "link"),
)

DEFAULT_BLOCK_SPECS: tuple[BlockTypeSpec, ...] = (PARAGRAPH, HEADING, BULLET_LIST_ITEM, NUMBERED_LIST_ITEM, IMAGE, TABLE)

DEFAULT_INLINE_CONTENT_SPECS: tuple[InlineContentTypeSpec, ...] = (
    InlineContentTypeSpec(name="text"),
    InlineContentTypeSpec(name="link", prop_schema={"href": PropSpec(default="")}),
)

DEFAULT_STYLE_SPECS: tuple[StyleTypeSpec, ...] = (
    StyleTypeSpec(name="bold", tags=("strong", "b")),
    StyleTypeSpec(name="italic", tags=("em", "i")),
    StyleTypeSpec(name="underline", tags=("u", "ins")),
    StyleTypeSpec(name="strike", tags=("s", "del", "strike")),
    StyleTypeSpec(name="code", tags=("code", "kbd", "samp")),
    StyleTypeSpec(name="textColor", value_type="string", css_property="color", data_attr="data-text-color"),
    StyleTypeSpec(
        name="backgroundColor",
        value_type="string",
        css_property="background-color",
        data_attr="data-background-color",
    ),
)


def default_schema() -> SchemaRegistry:
    """Build a linked registry holding the built-in types.

    Returns
    -------
    SchemaRegistry
        A new registry; callers may ``extend`` it with custom types.

    """
    return SchemaRegistry.from_specs(
        blocks=DEFAULT_BLOCK_SPECS,
        inline_content=DEFAULT_INLINE_CONTENT_SPECS,
        styles=DEFAULT_STYLE_SPECS,
    )
