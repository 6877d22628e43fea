#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Native tree representation and the block tree adapter."""

from blockmark.nodes.adapter import (
    LINK_MARK,
    block_to_node,
    blocks_to_doc,
    doc_to_blocks,
    inline_content_to_nodes,
    node_to_block,
    nodes_to_inline_content,
    style_marks,
)
from blockmark.nodes.native import NativeMark, NativeMarkLike, NativeNode, NativeNodeLike

__all__ = [
    "LINK_MARK",
    "NativeMark",
    "NativeMarkLike",
    "NativeNode",
    "NativeNodeLike",
    "block_to_node",
    "blocks_to_doc",
    "doc_to_blocks",
    "inline_content_to_nodes",
    "node_to_block",
    "nodes_to_inline_content",
    "style_marks",
]
