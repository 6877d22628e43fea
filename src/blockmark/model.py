#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blockmark/model.py
"""Block tree model.

A document is an ordered list of :class:`Block` records. Each block has a
type resolved through the schema, typed props, its own content (inline
content, a table, or nothing) and, for container types, child blocks.

Inline content is a list of:

- :class:`StyledText` - a run of text with a set of styles,
- :class:`Link` - a hyperlink wrapping styled runs,
- :class:`CustomInlineContent` - any other caller-declared inline type.

Tables store rows of cells, each cell being a list of inline content.

The model is plain data. Schema-aware helpers (:func:`build_block`,
:func:`normalize_block`) return new objects and never mutate their input.

"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Iterable, Iterator, Mapping, Optional, Sequence, Union

from blockmark.exceptions import SchemaMismatch
from blockmark.schema.props import normalize_props

if TYPE_CHECKING:
    from blockmark.schema.registry import SchemaRegistry

logger = logging.getLogger(__name__)

StyleValue = Union[bool, str]
Styles = dict[str, StyleValue]


def new_block_id() -> str:
    """Generate a unique block id."""
    return uuid.uuid4().hex


IdFactory = Callable[[], str]


@dataclass
class StyledText:
    """A run of text carrying a set of styles.

    Parameters
    ----------
    text : str
        The run's text; ``"\\n"`` denotes a hard line break
    styles : dict, default = empty dict
        Style type name → value (``True`` for boolean styles)

    """

    text: str
    styles: Styles = field(default_factory=dict)

    type = "text"


@dataclass
class Link:
    """Hyperlink inline content wrapping styled runs."""

    href: str
    content: list[StyledText] = field(default_factory=list)

    type = "link"


@dataclass
class CustomInlineContent:
    """Caller-declared inline content type (e.g. a mention)."""

    type: str
    props: dict[str, Any] = field(default_factory=dict)
    content: list[StyledText] = field(default_factory=list)


InlineContent = Union[StyledText, Link, CustomInlineContent]


@dataclass
class TableRow:
    """A table row: one list of inline content per cell."""

    cells: list[list[InlineContent]] = field(default_factory=list)


@dataclass
class TableContent:
    """Content of a table block."""

    rows: list[TableRow] = field(default_factory=list)

    type = "tableContent"


BlockContent = Union[list[InlineContent], TableContent, None]


@dataclass
class Block:
    """A typed, property-bearing node of the document forest.

    Parameters
    ----------
    type : str
        Block type name, resolvable in the active schema
    id : str
        Unique id within the document
    props : dict, default = empty dict
        Prop name → value
    content : list of InlineContent, TableContent or None
        The block's own content, shaped by its type's content kind
    children : list of Block, default = empty list
        Nested blocks (container types only)

    """

    type: str
    id: str = field(default_factory=new_block_id)
    props: dict[str, Any] = field(default_factory=dict)
    content: BlockContent = None
    children: list[Block] = field(default_factory=list)

    def walk(self) -> Iterator[Block]:
        """Yield this block and its descendants depth-first."""
        yield self
        for child in self.children:
            yield from child.walk()


def iter_blocks(blocks: Iterable[Block]) -> Iterator[Block]:
    """Yield every block of a forest depth-first."""
    for block in blocks:
        yield from block.walk()


def inline_text(content: Optional[Sequence[InlineContent]]) -> str:
    """Return the visible text of inline content."""
    parts: list[str] = []
    for item in content or []:
        if isinstance(item, StyledText):
            parts.append(item.text)
        else:
            parts.append("".join(run.text for run in item.content))
    return "".join(parts)


def block_text(block: Block) -> str:
    """Return the visible text of a block's own content (tables joined by spaces)."""
    if isinstance(block.content, TableContent):
        cells = [inline_text(cell) for row in block.content.rows for cell in row.cells]
        return " ".join(cell for cell in cells if cell)
    return inline_text(block.content)


def merge_styled_runs(runs: Iterable[StyledText]) -> list[StyledText]:
    """Collapse adjacent runs with identical styles and drop empty runs."""
    merged: list[StyledText] = []
    for run in runs:
        if not run.text:
            continue
        if merged and merged[-1].styles == run.styles:
            merged[-1] = StyledText(text=merged[-1].text + run.text, styles=dict(run.styles))
        else:
            merged.append(StyledText(text=run.text, styles=dict(run.styles)))
    return merged


def merge_inline_content(content: Iterable[InlineContent]) -> list[InlineContent]:
    """Collapse adjacent runs and adjacent links to the same target."""
    merged: list[InlineContent] = []
    for item in content:
        previous = merged[-1] if merged else None
        if isinstance(item, StyledText):
            if not item.text:
                continue
            if isinstance(previous, StyledText) and previous.styles == item.styles:
                merged[-1] = StyledText(text=previous.text + item.text, styles=dict(item.styles))
                continue
            merged.append(StyledText(text=item.text, styles=dict(item.styles)))
        elif isinstance(item, Link):
            runs = merge_styled_runs(item.content)
            if not runs:
                continue
            if isinstance(previous, Link) and previous.href == item.href:
                merged[-1] = Link(href=item.href, content=merge_styled_runs([*previous.content, *runs]))
                continue
            merged.append(Link(href=item.href, content=runs))
        else:
            merged.append(item)
    return merged


# ============================================================================
# Schema-aware helpers
# ============================================================================


def _normalize_styles(styles: Mapping[str, Any], schema: SchemaRegistry) -> Styles:
    normalized: Styles = {}
    for name, value in styles.items():
        if not schema.has(name, "style"):
            logger.debug("Dropping undeclared style '%s'", name)
            continue
        spec = schema.resolve_style(name)
        if spec.value_type == "boolean":
            if value:
                normalized[name] = True
        elif value not in (None, "", False):
            normalized[name] = str(value)
    return dict(sorted(normalized.items()))


def _normalize_inline(content: Any, schema: SchemaRegistry) -> list[InlineContent]:
    if content is None:
        return []
    if isinstance(content, str):
        content = [StyledText(text=content)]
    normalized: list[InlineContent] = []
    for item in content:
        if isinstance(item, str):
            item = StyledText(text=item)
        if isinstance(item, StyledText):
            normalized.append(StyledText(text=item.text, styles=_normalize_styles(item.styles, schema)))
        elif isinstance(item, Link):
            runs = [StyledText(text=run.text, styles=_normalize_styles(run.styles, schema)) for run in item.content]
            normalized.append(Link(href=item.href, content=runs))
        elif isinstance(item, CustomInlineContent):
            spec = schema.resolve_inline(item.type)
            runs = [StyledText(text=run.text, styles=_normalize_styles(run.styles, schema)) for run in item.content]
            normalized.append(
                CustomInlineContent(
                    type=item.type,
                    props=normalize_props(spec.prop_schema, item.props, item.type),
                    content=runs if spec.content == "styled" else [],
                )
            )
        else:
            raise TypeError(f"Unsupported inline content item: {item!r}")
    return merge_inline_content(normalized)


def _normalize_table(content: Any, schema: SchemaRegistry) -> TableContent:
    if content is None:
        return TableContent()
    if isinstance(content, TableContent):
        rows = content.rows
    else:
        rows = [row if isinstance(row, TableRow) else TableRow(cells=list(row)) for row in content]
    return TableContent(rows=[TableRow(cells=[_normalize_inline(cell, schema) for cell in row.cells]) for row in rows])


def check_children(block: Block, schema: SchemaRegistry) -> None:
    """Check that the block's type accepts each of its direct children.

    Raises
    ------
    SchemaMismatch
        If the block is not a container but holds children, or a child's type
        is missing from the block type's ``allowed_children``.

    """
    spec = schema.resolve_block(block.type)
    if block.children and not spec.container:
        raise SchemaMismatch(block.type, "block", f"Block type '{block.type}' does not accept children")
    if spec.allowed_children is None:
        return
    for child in block.children:
        if child.type not in spec.allowed_children:
            raise SchemaMismatch(
                child.type,
                "block",
                f"Block type '{block.type}' does not accept '{child.type}' children "
                f"(allowed: {', '.join(spec.allowed_children) or 'none'})",
            )


def normalize_block(block: Block, schema: SchemaRegistry) -> Block:
    """Return a copy of ``block`` conforming to ``schema``.

    Props are filled with defaults and invalid values replaced, undeclared
    styles are dropped, adjacent runs with identical styles are merged and
    children are normalized recursively.

    Raises
    ------
    SchemaMismatch
        If the block type (or a nested one) is not registered, or a block
        holds children its type does not accept.

    """
    spec = schema.resolve_block(block.type)
    check_children(block, schema)

    content: BlockContent
    if spec.content == "inline":
        content = _normalize_inline(block.content, schema)
    elif spec.content == "table":
        content = _normalize_table(block.content, schema)
    else:
        content = None

    return Block(
        type=block.type,
        id=block.id,
        props=normalize_props(spec.prop_schema, block.props, block.type),
        content=content,
        children=[normalize_block(child, schema) for child in block.children],
    )


def build_block(
    schema: SchemaRegistry,
    type: str,
    content: Any = None,
    props: Optional[Mapping[str, Any]] = None,
    children: Optional[Sequence[Block]] = None,
    id: Optional[str] = None,
) -> Block:
    """Create a normalized block.

    ``content`` may be a string, a list of strings and inline content items,
    a :class:`TableContent`, or a list of rows (each a list of cells).

    Examples
    --------
        >>> schema = default_schema()
        >>> heading = build_block(schema, "heading", "Hi", props={"level": 2})
        >>> heading.props["level"]
        2

    """
    block = Block(
        type=type,
        id=id or new_block_id(),
        props=dict(props or {}),
        content=content,
        children=list(children or []),
    )
    return normalize_block(block, schema)
