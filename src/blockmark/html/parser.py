#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blockmark/html/parser.py
"""Markup to block tree parsing.

The parser accepts both markup modes, even mixed in one document:

- internal markup (``data-node-type`` containers) is rebuilt exactly: ids,
  types, props, styles and whitespace are taken from the data attributes;
- external markup is mapped back through the schema: ``external_tag``
  patterns (``h{level}`` matches ``h1`` .. ``h6``), ``list_tag`` for list
  items, table content for ``table`` elements, ``external_attrs`` for images.
  Style tags map back to styles and unknown containers are flattened.

Parsing never raises to the caller. Unknown block types in internal markup
are resolved by the ``unknown_block_policy`` option, undeclared styles are
dropped and unparseable fragments become literal text.

"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional, Sequence

from blockmark.constants import (
    ATTR_BLOCK_ID,
    ATTR_BLOCK_TYPE,
    ATTR_CONTENT_PROP_PREFIX,
    ATTR_CONTENT_TYPE,
    ATTR_INLINE_TYPE,
    ATTR_NODE_TYPE,
    NODE_TYPE_BLOCK_CONTAINER,
    NODE_TYPE_BLOCK_GROUP,
    NODE_TYPE_INLINE_CONTENT,
)
from blockmark.exceptions import MarkupParseError, SchemaMismatch
from blockmark.html.inline import props_from_attrs
from blockmark.html.styles import StyleMatcher
from blockmark.markup.nodes import Element, MarkupNode, MarkupRaw, MarkupText, text_content, to_html
from blockmark.markup.parser import parse_markup
from blockmark.model import (
    Block,
    CustomInlineContent,
    InlineContent,
    Link,
    StyledText,
    TableContent,
    TableRow,
    new_block_id,
    normalize_block,
)
from blockmark.options.html import HtmlParserOptions
from blockmark.schema.registry import SchemaRegistry
from blockmark.schema.specs import BlockTypeSpec

logger = logging.getLogger(__name__)

_WHITESPACE_RUN = re.compile(r"[ \t\n\r\f]+")

_LIST_TAGS = ("ul", "ol")

_CELL_TAGS = ("td", "th")


def _flatten_runs(items: Sequence[InlineContent]) -> list[StyledText]:
    runs: list[StyledText] = []
    for item in items:
        if isinstance(item, StyledText):
            runs.append(item)
        else:
            runs.extend(item.content)
    return runs


def _collapse_whitespace(items: list[InlineContent]) -> list[InlineContent]:
    """Trim whitespace at line edges across run boundaries.

    Whitespace runs inside text are already single spaces; this removes the
    spaces a browser would not display: leading, trailing, doubled across runs
    and next to hard breaks.
    """
    runs = _flatten_runs(items)
    previous: Optional[StyledText] = None
    at_space = True
    for run in runs:
        if run.text == "\n":
            if previous is not None:
                previous.text = previous.text.rstrip(" ")
            at_space = True
            continue
        if at_space:
            run.text = run.text.lstrip(" ")
        if run.text:
            at_space = run.text.endswith(" ")
            previous = run
    for run in reversed(runs):
        if run.text == "\n":
            break
        run.text = run.text.rstrip(" ")
        if run.text:
            break
    return items


class HtmlToBlocksParser:
    """Parse internal or external markup into a block tree.

    Parameters
    ----------
    schema : SchemaRegistry
        Active schema
    options : HtmlParserOptions or None, default None
        Parser configuration

    Examples
    --------
        >>> parser = HtmlToBlocksParser(default_schema())
        >>> [block.type for block in parser.parse("<h2>Hi</h2><p>text</p>")]
        ['heading', 'paragraph']

    """

    # Dispatch table mapping element names to processing methods
    _ELEMENT_HANDLERS = {
        "p": "_process_paragraph",
        "ul": "_process_list",
        "ol": "_process_list",
        "table": "_process_table",
        "img": "_process_image",
        "pre": "_process_preformatted",
        "hr": "_process_thematic_break",
    }

    def __init__(self, schema: SchemaRegistry, options: Optional[HtmlParserOptions] = None):
        self.schema = schema
        self.options = options or HtmlParserOptions()
        self._styles = StyleMatcher(schema)
        self._tag_patterns = [
            (pattern, spec)
            for spec in schema.blocks.values()
            if (pattern := spec.external_tag_pattern()) is not None
        ]

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def parse(self, markup: str) -> list[Block]:
        """Parse a markup string into normalized blocks.

        Parameters
        ----------
        markup : str
            HTML fragment or document, in either mode

        Returns
        -------
        list[Block]
            Top-level blocks

        """
        try:
            fragment = parse_markup(markup, self.options.html_parser)
        except MarkupParseError as e:
            logger.warning("%s; keeping the input as literal text", e.message)
            return [normalize_block(block, self.schema) for block in self._literal_paragraph(markup)]
        blocks = self._process_flow(fragment.children)
        logger.debug("Parsed markup into %d top-level blocks", len(blocks))
        return [normalize_block(block, self.schema) for block in blocks]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _new_id(self, block_id: Optional[str] = None) -> str:
        if block_id:
            return block_id
        factory = self.options.id_factory or new_block_id
        return factory()

    def _spec_where(self, **criteria: Any) -> Optional[BlockTypeSpec]:
        for spec in self.schema.blocks.values():
            if all(getattr(spec, name) == value for name, value in criteria.items()):
                return spec
        return None

    def _match_tag(self, tag: str) -> Optional[tuple[BlockTypeSpec, dict[str, str]]]:
        for pattern, spec in self._tag_patterns:
            match = pattern.match(tag)
            if match is not None:
                return spec, match.groupdict()
        return None

    def _is_block(self, element: Element) -> bool:
        if element.is_block or element.tag in self._ELEMENT_HANDLERS:
            return True
        if any(element.get(attr) is not None for attr in (ATTR_NODE_TYPE, ATTR_BLOCK_TYPE, ATTR_CONTENT_TYPE)):
            return True
        if element.tag in ("a", "span", "br") or self._styles.match(element) is not None:
            return False
        return self._match_tag(element.tag) is not None

    @staticmethod
    def _has_visible(nodes: Sequence[MarkupNode]) -> bool:
        return bool(text_content(list(nodes)).strip())

    def _make_block(
        self,
        spec: BlockTypeSpec,
        props: dict[str, Any],
        content: Any,
        children: Optional[list[Block]] = None,
        block_id: Optional[str] = None,
    ) -> list[Block]:
        children = children or []
        nested: list[Block] = []
        hoisted: list[Block] = []
        for child in children:
            if spec.container and (spec.allowed_children is None or child.type in spec.allowed_children):
                nested.append(child)
            else:
                hoisted.append(child)
        if hoisted:
            logger.debug("Moving %d child block(s) out of '%s' as following siblings", len(hoisted), spec.name)
        block = Block(type=spec.name, id=self._new_id(block_id), props=props, content=content, children=nested)
        # children the block cannot hold follow it as siblings
        return [block, *hoisted]

    def _paragraph(self, content: list[InlineContent], children: Optional[list[Block]] = None) -> list[Block]:
        if not self.schema.has("paragraph"):
            logger.debug("Schema has no paragraph type; dropping loose inline content")
            return list(children or [])
        return self._make_block(self.schema.resolve_block("paragraph"), {}, content, children)

    def _literal_paragraph(self, text: str) -> list[Block]:
        if not text.strip():
            return []
        return self._paragraph([StyledText(text=text)])

    # ------------------------------------------------------------------
    # Flow content
    # ------------------------------------------------------------------

    def _process_flow(self, nodes: Sequence[MarkupNode]) -> list[Block]:
        """Process sibling nodes, wrapping loose inline runs in paragraphs."""
        blocks: list[Block] = []
        buffer: list[MarkupNode] = []

        def flush() -> None:
            if self._has_visible(buffer):
                blocks.extend(self._paragraph(self._inline(buffer)))
            buffer.clear()

        for node in nodes:
            if isinstance(node, Element) and self._is_block(node):
                flush()
                blocks.extend(self._process_element(node))
            else:
                buffer.append(node)
        flush()
        return blocks

    def _process_element(self, element: Element) -> list[Block]:
        node_type = element.get(ATTR_NODE_TYPE)
        if node_type == NODE_TYPE_BLOCK_GROUP:
            return self._process_flow(element.children)
        if node_type == NODE_TYPE_BLOCK_CONTAINER:
            return self._process_container(element)
        if node_type == NODE_TYPE_INLINE_CONTENT:
            return self._paragraph(self._inline(element.children, preserve=True))

        try:
            block_type = element.get(ATTR_BLOCK_TYPE)
            if block_type is not None:
                return self._process_typed_container(element, block_type)
            content_type = element.get(ATTR_CONTENT_TYPE)
            if content_type is not None:
                return self._process_content_node(element, content_type)
            handler_name = self._ELEMENT_HANDLERS.get(element.tag)
            if handler_name:
                handler = getattr(self, handler_name)
                return handler(element)
            matched = self._match_tag(element.tag)
            if matched is not None:
                return self._process_mapped(element, *matched)
        except MarkupParseError as e:
            logger.info("%s; keeping the element text", e.message)
            return self._literal_paragraph(element.text_content())

        # unknown containers (div, section, blockquote, body, ...) are flattened
        return self._process_flow(element.children)

    # ------------------------------------------------------------------
    # Internal markup
    # ------------------------------------------------------------------

    def _process_container(self, element: Element) -> list[Block]:
        content_element: Optional[Element] = None
        group_element: Optional[Element] = None
        for child in element.elements():
            node_type = child.get(ATTR_NODE_TYPE)
            if node_type == NODE_TYPE_INLINE_CONTENT and content_element is None:
                content_element = child
            elif node_type == NODE_TYPE_BLOCK_GROUP and group_element is None:
                group_element = child

        children = self._process_flow(group_element.children) if group_element is not None else []
        block_type = element.get(ATTR_BLOCK_TYPE, "") or ""
        block_id = element.get(ATTR_BLOCK_ID)
        try:
            spec = self.schema.resolve_block(block_type)
        except SchemaMismatch as e:
            return self._unknown_block(e, content_element, children, block_id)

        content = self._content_for(spec, content_element, preserve=True)
        props: dict[str, Any] = dict(props_from_attrs(element.attrs, spec.prop_schema))
        return self._make_block(spec, props, content, children, block_id)

    def _unknown_block(
        self,
        error: SchemaMismatch,
        content_element: Optional[Element],
        children: list[Block],
        block_id: Optional[str],
    ) -> list[Block]:
        if self.options.unknown_block_policy == "drop":
            logger.info("%s; dropping the block", error.message)
            return []
        logger.info("%s; substituting a paragraph", error.message)
        nodes = content_element.children if content_element is not None else []
        if not self.schema.has("paragraph"):
            return children
        spec = self.schema.resolve_block("paragraph")
        return self._make_block(spec, {}, self._inline(nodes, preserve=True), children, block_id)

    def _content_for(self, spec: BlockTypeSpec, element: Optional[Element], preserve: bool = False) -> Any:
        if spec.content == "inline":
            return self._inline(element.children, preserve) if element is not None else []
        if spec.content == "table":
            if element is None:
                return TableContent()
            table = element if element.tag == "table" else next(element.find_all("table"), None)
            return self._table_content(table) if table is not None else TableContent()
        return None

    # ------------------------------------------------------------------
    # External markup
    # ------------------------------------------------------------------

    def _process_typed_container(self, element: Element, block_type: str) -> list[Block]:
        """Handle ``div[data-block-type]`` fallback containers."""
        if not self.schema.has(block_type):
            if self.options.unknown_block_policy == "drop":
                logger.info("Dropping container of unknown block type '%s'", block_type)
                return []
            return self._process_flow(element.children)

        spec = self.schema.resolve_block(block_type)
        phrasing: list[MarkupNode] = []
        children: list[Block] = []
        table: Optional[Element] = None
        for child in element.children:
            if isinstance(child, Element) and child.tag == "table" and spec.content == "table" and table is None:
                table = child
            elif isinstance(child, Element) and self._is_block(child):
                children.extend(self._process_element(child))
            else:
                phrasing.append(child)

        content: Any
        if spec.content == "inline":
            content = self._inline(phrasing)
        elif spec.content == "table":
            content = self._table_content(table) if table is not None else TableContent()
        else:
            content = None
        props: dict[str, Any] = dict(props_from_attrs(element.attrs, spec.prop_schema))
        return self._make_block(spec, props, content, children)

    def _process_content_node(self, element: Element, block_type: str) -> list[Block]:
        """Handle the editor's ``div[data-content-type]`` nodes.

        Props come from ``data-<kebab-name>`` attributes; all text inside is
        the block's inline content, whatever wrapper (``h2``, ``p``) holds it.
        """
        if not self.schema.has(block_type):
            if self.options.unknown_block_policy == "drop":
                logger.info("Dropping content node of unknown block type '%s'", block_type)
                return []
            return self._process_flow(element.children)
        spec = self.schema.resolve_block(block_type)
        props: dict[str, Any] = dict(props_from_attrs(element.attrs, spec.prop_schema, ATTR_CONTENT_PROP_PREFIX))
        return self._make_block(spec, props, self._content_for(spec, element))

    def _process_mapped(self, element: Element, spec: BlockTypeSpec, groups: dict[str, str]) -> list[Block]:
        """Build a block from an element matched by a type's ``external_tag``."""
        props: dict[str, Any] = dict(props_from_attrs(element.attrs, spec.prop_schema))
        props.update(groups)
        for prop_name, attr_name in spec.external_attrs.items():
            value = element.get(attr_name)
            if value is not None:
                props[prop_name] = value
        return self._make_block(spec, props, self._content_for(spec, element))

    def _process_paragraph(self, element: Element) -> list[Block]:
        images = [child for child in element.elements() if child.tag == "img"]
        if images and not text_content(element.children).strip():
            blocks: list[Block] = []
            for image in images:
                blocks.extend(self._process_image(image))
            return blocks
        matched = self._match_tag(element.tag)
        if matched is not None:
            return self._process_mapped(element, *matched)
        return self._paragraph(self._inline(element.children))

    def _process_list(self, element: Element) -> list[Block]:
        spec = self._spec_where(list_tag=element.tag)
        if spec is None:
            logger.debug("Schema has no '%s' list item type; flattening the list", element.tag)
            return self._process_flow([node for item in element.elements() for node in item.children])

        blocks: list[Block] = []
        for child in element.children:
            if isinstance(child, MarkupText):
                if child.value.strip():
                    blocks.extend(self._literal_paragraph(child.value.strip()))
                continue
            if not isinstance(child, Element):
                continue
            if child.tag == "li":
                blocks.extend(self._process_list_item(child, spec))
            elif child.tag in _LIST_TAGS and blocks and self.schema.resolve_block(blocks[-1].type).container:
                # <ul><li>a</li><ul>...</ul></ul>: the nested list belongs to the previous item
                blocks[-1].children.extend(self._process_list(child))
            else:
                blocks.extend(self._process_element(child))
        return blocks

    def _process_list_item(self, element: Element, spec: BlockTypeSpec) -> list[Block]:
        phrasing: list[MarkupNode] = []
        children: list[Block] = []
        for child in element.children:
            if isinstance(child, Element) and self._is_block(child):
                if child.tag == "p" and not children and not self._has_visible(phrasing):
                    # loose list items wrap their text in a paragraph
                    phrasing.extend(child.children)
                elif child.tag in _LIST_TAGS:
                    children.extend(self._process_list(child))
                else:
                    children.extend(self._process_element(child))
            else:
                phrasing.append(child)
        props: dict[str, Any] = dict(props_from_attrs(element.attrs, spec.prop_schema))
        return self._make_block(spec, props, self._inline(phrasing), children)

    def _table_content(self, table: Element) -> TableContent:
        rows: list[list[list[InlineContent]]] = []
        for row in table.find_all("tr"):
            rows.append([self._inline(cell.children) for cell in row.elements() if cell.tag in _CELL_TAGS])
        rows = [row for row in rows if row]
        if not rows:
            raise MarkupParseError("Table has no rows", fragment=to_html(table))
        width = max(len(row) for row in rows)
        return TableContent(rows=[TableRow(cells=row + [[] for _ in range(width - len(row))]) for row in rows])

    def _process_table(self, element: Element) -> list[Block]:
        spec = self._spec_where(content="table")
        if spec is None:
            logger.debug("Schema has no table type; flattening table cells")
            return self._process_flow([node for cell in element.find_all("td") for node in cell.children])
        props: dict[str, Any] = dict(props_from_attrs(element.attrs, spec.prop_schema))
        return self._make_block(spec, props, self._table_content(element))

    def _process_image(self, element: Element) -> list[Block]:
        spec = self._spec_where(external_tag="img")
        if spec is None:
            logger.debug("Schema has no image type; keeping the alt text")
            return self._literal_paragraph(element.get("alt", "") or "")
        return self._process_mapped(element, spec, {})

    def _process_preformatted(self, element: Element) -> list[Block]:
        text = element.text_content()
        if text.endswith("\n"):
            text = text[:-1]
        if not text.strip():
            return []
        styles = {"code": True} if self.schema.has("code", "style") else {}
        return self._paragraph([StyledText(text=text, styles=styles)])

    def _process_thematic_break(self, element: Element) -> list[Block]:
        return []

    # ------------------------------------------------------------------
    # Inline content
    # ------------------------------------------------------------------

    def _inline(self, nodes: Sequence[MarkupNode], preserve: bool = False) -> list[InlineContent]:
        """Convert phrasing nodes to inline content.

        Unless ``preserve`` is set (internal markup) or whitespace collapsing
        is disabled, whitespace is collapsed the way browsers display it.
        """
        collapse = self.options.collapse_whitespace and not preserve
        items: list[InlineContent] = []
        self._collect(nodes, {}, items, collapse)
        if collapse:
            items = _collapse_whitespace(items)
        return items

    def _collect(self, nodes: Sequence[MarkupNode], styles: dict[str, Any], out: list[InlineContent], collapse: bool) -> None:
        for node in nodes:
            if isinstance(node, (MarkupText, MarkupRaw)):
                text = _WHITESPACE_RUN.sub(" ", node.value) if collapse else node.value
                if text:
                    out.append(StyledText(text=text, styles=dict(styles)))
                continue
            if node.tag == "br":
                out.append(StyledText(text="\n", styles=dict(styles)))
                continue
            if node.tag == "img":
                continue

            inline_type = node.get(ATTR_INLINE_TYPE)
            if node.tag == "a" and (node.get("href") is not None or inline_type == "link"):
                runs: list[InlineContent] = []
                self._collect(node.children, styles, runs, collapse)
                out.append(Link(href=node.get("href", "") or "", content=_flatten_runs(runs)))
                continue
            if inline_type is not None and inline_type != "link" and self.schema.has(inline_type, "inlineContent"):
                spec = self.schema.resolve_inline(inline_type)
                runs = []
                self._collect(node.children, styles, runs, collapse)
                out.append(
                    CustomInlineContent(
                        type=inline_type,
                        props=dict(props_from_attrs(node.attrs, spec.prop_schema)),
                        content=_flatten_runs(runs),
                    )
                )
                continue

            matched = self._styles.match(node)
            child_styles = {**styles, matched[0]: matched[1]} if matched is not None else styles
            self._collect(node.children, child_styles, out, collapse)


def html_to_blocks(html: str, schema: SchemaRegistry, options: Optional[HtmlParserOptions] = None) -> list[Block]:
    """Parse internal or external markup into blocks.

    Parameters
    ----------
    html : str
        Markup to parse
    schema : SchemaRegistry
        Active schema
    options : HtmlParserOptions or None, default None
        Parser configuration

    Returns
    -------
    list[Block]
        Normalized top-level blocks

    """
    return HtmlToBlocksParser(schema, options).parse(html)
