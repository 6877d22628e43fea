#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blockmark/nodes/adapter.py
"""Bidirectional mapping between the block tree and the native tree.

Both directions are driven by the schema:

- :func:`block_to_node` serializes props through each :class:`PropSpec`,
  emits one mark per style in ascending style-name order (a trailing ``link``
  mark for hyperlinks) and nests children in a ``blockGroup`` node.
- :func:`node_to_block` parses attributes back through the prop specs (missing
  or out-of-domain values become the default) and merges adjacent text nodes
  carrying identical marks.

Unknown node, block, inline content or style types raise
:class:`~blockmark.exceptions.SchemaMismatch`; this module never substitutes a
fallback, leaving that decision to the caller.

"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Sequence

from blockmark.constants import (
    NATIVE_BLOCK_CONTAINER,
    NATIVE_BLOCK_GROUP,
    NATIVE_DOC,
    NATIVE_HARD_BREAK,
    NATIVE_TABLE_CELL,
    NATIVE_TABLE_ROW,
    NATIVE_TEXT,
    STYLE_VALUE_ATTR,
)
from blockmark.exceptions import SchemaMismatch
from blockmark.model import (
    Block,
    BlockContent,
    CustomInlineContent,
    IdFactory,
    InlineContent,
    Link,
    StyledText,
    Styles,
    TableContent,
    TableRow,
    check_children,
    merge_inline_content,
    new_block_id,
)
from blockmark.nodes.native import NativeMark, NativeNode, NativeNodeLike
from blockmark.schema.registry import SchemaRegistry

logger = logging.getLogger(__name__)

LINK_MARK = "link"


# ============================================================================
# Block tree -> native tree
# ============================================================================


def style_marks(styles: Styles, schema: SchemaRegistry) -> list[NativeMark]:
    """Build marks for a style set, sorted by style type name.

    Raises
    ------
    SchemaMismatch
        If a style is not declared in the schema.

    """
    marks: list[NativeMark] = []
    for name in sorted(styles):
        spec = schema.resolve_style(name)
        value = styles[name]
        if not value:
            continue
        if spec.value_type == "string":
            marks.append(NativeMark(type=name, attrs={STYLE_VALUE_ATTR: str(value)}))
        else:
            marks.append(NativeMark(type=name))
    return marks


def _runs_to_nodes(runs: Iterable[StyledText], schema: SchemaRegistry, extra: Sequence[NativeMark] = ()) -> list[NativeNode]:
    nodes: list[NativeNode] = []
    for run in runs:
        if not run.text:
            continue
        nodes.append(NativeNode.text_node(run.text, [*style_marks(run.styles, schema), *extra]))
    return nodes


def inline_content_to_nodes(content: Iterable[InlineContent], schema: SchemaRegistry) -> list[NativeNode]:
    """Convert inline content into native text and inline nodes."""
    nodes: list[NativeNode] = []
    for item in content:
        if isinstance(item, StyledText):
            nodes.extend(_runs_to_nodes([item], schema))
        elif isinstance(item, Link):
            schema.resolve_inline(LINK_MARK)
            nodes.extend(_runs_to_nodes(item.content, schema, [NativeMark(type=LINK_MARK, attrs={"href": item.href})]))
        else:
            spec = schema.resolve_inline(item.type)
            attrs = {name: prop.to_attr(item.props.get(name, prop.default)) for name, prop in spec.prop_schema.items()}
            children = _runs_to_nodes(item.content, schema) if spec.content == "styled" else []
            nodes.append(NativeNode(type=item.type, attrs=attrs, content=children))
    return nodes


def _table_to_nodes(content: TableContent, schema: SchemaRegistry) -> list[NativeNode]:
    return [
        NativeNode(
            type=NATIVE_TABLE_ROW,
            content=[NativeNode(type=NATIVE_TABLE_CELL, content=inline_content_to_nodes(cell, schema)) for cell in row.cells],
        )
        for row in content.rows
    ]


def block_to_node(block: Block, schema: SchemaRegistry) -> NativeNode:
    """Convert a block and its descendants into a ``blockContainer`` node.

    Parameters
    ----------
    block : Block
        Block to convert
    schema : SchemaRegistry
        Linked schema resolving the block's types

    Returns
    -------
    NativeNode
        ``blockContainer`` node holding the content node and, when the block
        has children, a nested ``blockGroup``

    Raises
    ------
    SchemaMismatch
        If a block, inline content or style type is not registered, or a
        block holds children its type does not accept.

    """
    spec = schema.resolve_block(block.type)

    for name in block.props:
        if name not in spec.prop_schema:
            logger.debug("Block %s: dropping undeclared prop '%s'", block.id, name)
    attrs = {name: prop.to_attr(block.props.get(name, prop.default)) for name, prop in spec.prop_schema.items()}

    inner: list[NativeNode] = []
    if spec.content == "inline":
        inner = inline_content_to_nodes(block.content or [], schema)  # type: ignore[arg-type]
    elif spec.content == "table":
        table = block.content if isinstance(block.content, TableContent) else TableContent()
        inner = _table_to_nodes(table, schema)

    check_children(block, schema)
    container_content = [NativeNode(type=block.type, attrs=attrs, content=inner)]
    if block.children:
        container_content.append(
            NativeNode(type=NATIVE_BLOCK_GROUP, content=[block_to_node(child, schema) for child in block.children])
        )
    return NativeNode(type=NATIVE_BLOCK_CONTAINER, attrs={"id": block.id}, content=container_content)


def blocks_to_doc(blocks: Iterable[Block], schema: SchemaRegistry) -> NativeNode:
    """Wrap a block forest into a ``doc`` node."""
    group = NativeNode(type=NATIVE_BLOCK_GROUP, content=[block_to_node(block, schema) for block in blocks])
    return NativeNode(type=NATIVE_DOC, content=[group])


# ============================================================================
# Native tree -> block tree
# ============================================================================


def _marks_to_styles(marks: Sequence[Any], schema: SchemaRegistry) -> tuple[Styles, Optional[str]]:
    styles: Styles = {}
    href: Optional[str] = None
    for mark in marks:
        if mark.type == LINK_MARK and not schema.has(LINK_MARK, "style"):
            href = str((mark.attrs or {}).get("href", ""))
            continue
        spec = schema.resolve_style(mark.type)
        if spec.value_type == "string":
            styles[mark.type] = str((mark.attrs or {}).get(STYLE_VALUE_ATTR, ""))
        else:
            styles[mark.type] = True
    return dict(sorted(styles.items())), href


def nodes_to_inline_content(nodes: Iterable[NativeNodeLike], schema: SchemaRegistry) -> list[InlineContent]:
    """Convert native inline nodes to inline content, merging equal neighbours.

    Raises
    ------
    SchemaMismatch
        If a node, mark or inline content type is not registered.

    """
    content: list[InlineContent] = []
    for node in nodes:
        if node.type in (NATIVE_TEXT, NATIVE_HARD_BREAK):
            text = "\n" if node.type == NATIVE_HARD_BREAK else (node.text or "")
            styles, href = _marks_to_styles(node.marks or [], schema)
            run = StyledText(text=text, styles=styles)
            content.append(Link(href=href, content=[run]) if href is not None else run)
            continue
        spec = schema.resolve_inline(node.type)
        props = {name: prop.from_attr((node.attrs or {}).get(name), name) for name, prop in spec.prop_schema.items()}
        runs = nodes_to_inline_content(node.content, schema) if spec.content == "styled" else []
        content.append(
            CustomInlineContent(type=node.type, props=props, content=[r for r in runs if isinstance(r, StyledText)])
        )
    return merge_inline_content(content)


def _nodes_to_table(rows: Iterable[NativeNodeLike], schema: SchemaRegistry) -> TableContent:
    table = TableContent()
    for row in rows:
        if row.type != NATIVE_TABLE_ROW:
            raise SchemaMismatch(row.type, "block", f"Expected a '{NATIVE_TABLE_ROW}' node, got '{row.type}'")
        cells: list[list[InlineContent]] = []
        for cell in row.content:
            if cell.type != NATIVE_TABLE_CELL:
                raise SchemaMismatch(cell.type, "block", f"Expected a '{NATIVE_TABLE_CELL}' node, got '{cell.type}'")
            cells.append(nodes_to_inline_content(cell.content, schema))
        table.rows.append(TableRow(cells=cells))
    return table


def node_to_block(node: NativeNodeLike, schema: SchemaRegistry, id_factory: Optional[IdFactory] = None) -> Block:
    """Convert a ``blockContainer`` node back into a block.

    Parameters
    ----------
    node : NativeNodeLike
        ``blockContainer`` node
    schema : SchemaRegistry
        Linked schema resolving the node's types
    id_factory : callable, optional
        Generates ids for containers without an ``id`` attribute

    Returns
    -------
    Block
        The reconstructed block, props filled from the schema

    Raises
    ------
    SchemaMismatch
        If the node structure or any type cannot be classified.

    """
    if node.type != NATIVE_BLOCK_CONTAINER:
        raise SchemaMismatch(node.type, "block", f"Expected a '{NATIVE_BLOCK_CONTAINER}' node, got '{node.type}'")
    if not node.content:
        raise SchemaMismatch(NATIVE_BLOCK_CONTAINER, "block", "blockContainer node has no content node")

    content_node = node.content[0]
    spec = schema.resolve_block(content_node.type)
    attrs = content_node.attrs or {}
    props = {name: prop.from_attr(attrs.get(name), name) for name, prop in spec.prop_schema.items()}

    content: BlockContent = None
    if spec.content == "inline":
        content = nodes_to_inline_content(content_node.content, schema)
    elif spec.content == "table":
        content = _nodes_to_table(content_node.content, schema)

    children: list[Block] = []
    for extra in node.content[1:]:
        if extra.type != NATIVE_BLOCK_GROUP:
            raise SchemaMismatch(extra.type, "block", f"Unexpected '{extra.type}' node inside a blockContainer")
        children.extend(node_to_block(child, schema, id_factory) for child in extra.content)

    block_id = (node.attrs or {}).get("id") or (id_factory or new_block_id)()
    return Block(type=spec.name, id=str(block_id), props=props, content=content, children=children)


def doc_to_blocks(doc: NativeNodeLike, schema: SchemaRegistry, id_factory: Optional[IdFactory] = None) -> list[Block]:
    """Convert a ``doc`` (or a bare ``blockGroup``) node into a block forest."""
    group = doc
    if doc.type == NATIVE_DOC:
        if not doc.content:
            return []
        group = doc.content[0]
    if group.type != NATIVE_BLOCK_GROUP:
        raise SchemaMismatch(group.type, "block", f"Expected a '{NATIVE_BLOCK_GROUP}' node, got '{group.type}'")
    return [node_to_block(child, schema, id_factory) for child in group.content]
