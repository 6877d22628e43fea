#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blockmark/serialization.py
"""JSON serialization of the block tree.

Blocks are converted to plain dictionaries in the shape commonly used by
block editors::

    {
        "id": "...",
        "type": "heading",
        "props": {"level": 2, ...},
        "content": [{"type": "text", "text": "Hi", "styles": {"bold": true}}],
        "children": []
    }

Links serialize as ``{"type": "link", "href": ..., "content": [...]}``,
custom inline content as ``{"type": <name>, "props": ..., "content": [...]}``
and tables as ``{"type": "tableContent", "rows": [{"cells": [[...], ...]}]}``.

"""

from __future__ import annotations

import json
from typing import Any, Iterable, Optional

from blockmark.exceptions import MarkupParseError
from blockmark.model import (
    Block,
    BlockContent,
    CustomInlineContent,
    IdFactory,
    InlineContent,
    Link,
    StyledText,
    TableContent,
    TableRow,
    new_block_id,
)


def _styled_text_to_dict(run: StyledText) -> dict[str, Any]:
    return {"type": "text", "text": run.text, "styles": dict(run.styles)}


def inline_content_to_dict(item: InlineContent) -> dict[str, Any]:
    """Serialize one inline content item."""
    if isinstance(item, StyledText):
        return _styled_text_to_dict(item)
    if isinstance(item, Link):
        return {"type": "link", "href": item.href, "content": [_styled_text_to_dict(run) for run in item.content]}
    return {
        "type": item.type,
        "props": dict(item.props),
        "content": [_styled_text_to_dict(run) for run in item.content],
    }


def _content_to_json(content: BlockContent) -> Any:
    if content is None:
        return None
    if isinstance(content, TableContent):
        return {
            "type": "tableContent",
            "rows": [{"cells": [[inline_content_to_dict(i) for i in cell] for cell in row.cells]} for row in content.rows],
        }
    return [inline_content_to_dict(item) for item in content]


def block_to_dict(block: Block) -> dict[str, Any]:
    """Serialize a block (and its descendants) to a dictionary."""
    return {
        "id": block.id,
        "type": block.type,
        "props": dict(block.props),
        "content": _content_to_json(block.content),
        "children": [block_to_dict(child) for child in block.children],
    }


def _styled_text_from_dict(data: Any) -> StyledText:
    if isinstance(data, str):
        return StyledText(text=data)
    return StyledText(text=str(data.get("text", "")), styles=dict(data.get("styles") or {}))


def inline_content_from_dict(data: Any) -> InlineContent:
    """Deserialize one inline content item (a bare string is plain text)."""
    if isinstance(data, str):
        return StyledText(text=data)
    if not isinstance(data, dict):
        raise MarkupParseError(f"Inline content must be an object or string, got {type(data).__name__}")
    item_type = data.get("type", "text")
    if item_type == "text":
        return _styled_text_from_dict(data)
    runs = data.get("content") or []
    if isinstance(runs, str):
        runs = [runs]
    content = [_styled_text_from_dict(run) for run in runs]
    if item_type == "link":
        return Link(href=str(data.get("href", "")), content=content)
    return CustomInlineContent(type=str(item_type), props=dict(data.get("props") or {}), content=content)


def _content_from_json(data: Any) -> BlockContent:
    if data is None:
        return None
    if isinstance(data, str):
        return [StyledText(text=data)]
    if isinstance(data, dict):
        if data.get("type") != "tableContent":
            raise MarkupParseError(f"Unsupported block content object of type {data.get('type')!r}")
        rows = [
            TableRow(cells=[[inline_content_from_dict(item) for item in cell] for cell in row.get("cells", [])])
            for row in data.get("rows", [])
        ]
        return TableContent(rows=rows)
    return [inline_content_from_dict(item) for item in data]


def block_from_dict(data: dict[str, Any], id_factory: Optional[IdFactory] = None) -> Block:
    """Deserialize a block dictionary.

    Missing ids are generated with ``id_factory`` (random ids by default).
    The result is not normalized; pass it through
    :func:`blockmark.model.normalize_block` to fill prop defaults.

    Raises
    ------
    MarkupParseError
        If the dictionary does not describe a block.

    """
    if not isinstance(data, dict) or "type" not in data:
        raise MarkupParseError("Block objects must be dictionaries with a 'type' key", fragment=repr(data)[:200])
    make_id = id_factory or new_block_id
    return Block(
        type=str(data["type"]),
        id=str(data.get("id") or make_id()),
        props=dict(data.get("props") or {}),
        content=_content_from_json(data.get("content")),
        children=[block_from_dict(child, id_factory) for child in data.get("children") or []],
    )


def blocks_to_json(blocks: Iterable[Block], indent: Optional[int] = 2) -> str:
    """Serialize a block forest to a JSON string."""
    return json.dumps([block_to_dict(block) for block in blocks], indent=indent, ensure_ascii=False)


def blocks_from_json(text: str, id_factory: Optional[IdFactory] = None) -> list[Block]:
    """Deserialize a JSON array of blocks (a single object is accepted too).

    Raises
    ------
    MarkupParseError
        If the text is not valid JSON or does not describe blocks.

    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MarkupParseError(f"Invalid block JSON: {e}", fragment=text[:200], original_error=e) from e
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        raise MarkupParseError("Block JSON must be an array of block objects", fragment=text[:200])
    return [block_from_dict(item, id_factory) for item in data]
