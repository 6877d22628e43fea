#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blockmark/markup/parser.py
"""HTML string to markup tree parsing.

Parsing uses BeautifulSoup, which tolerates malformed input (unclosed tags,
stray closing tags, bad nesting) the way browsers do. Comments, doctypes and
processing instructions are discarded; CDATA sections become text.

"""

from __future__ import annotations

import logging
from typing import Any

from blockmark.constants import DEFAULT_HTML_PARSER, SKIPPED_ELEMENTS
from blockmark.exceptions import MarkupParseError
from blockmark.markup.nodes import Element, Fragment, MarkupNode, MarkupText

logger = logging.getLogger(__name__)


def _attr_value(value: Any) -> str:
    # BeautifulSoup returns multi-valued attributes (class, rel) as lists
    if isinstance(value, (list, tuple)):
        return " ".join(str(v) for v in value)
    return str(value)


def _convert_children(parent: Any) -> list[MarkupNode]:
    from bs4.element import CData, Declaration, Doctype, NavigableString, ProcessingInstruction, Tag
    from bs4.element import Comment as BsComment

    children: list[MarkupNode] = []
    for child in parent.children:
        if isinstance(child, Tag):
            if child.name in SKIPPED_ELEMENTS:
                continue
            attrs = {str(name).lower(): _attr_value(value) for name, value in child.attrs.items()}
            children.append(Element(tag=child.name.lower(), attrs=attrs, children=_convert_children(child)))
        elif isinstance(child, (BsComment, Doctype, Declaration, ProcessingInstruction)):
            continue
        elif isinstance(child, (CData, NavigableString)):
            text = str(child)
            if text:
                if children and isinstance(children[-1], MarkupText):
                    children[-1] = MarkupText(children[-1].value + text)
                else:
                    children.append(MarkupText(text))
    return children


def parse_markup(markup: str, parser: str = DEFAULT_HTML_PARSER) -> Fragment:
    """Parse an HTML string (fragment or full document) into a markup tree.

    Parameters
    ----------
    markup : str
        HTML input
    parser : str, default "html.parser"
        BeautifulSoup tree builder name

    Returns
    -------
    Fragment
        Root of the parsed tree

    Raises
    ------
    MarkupParseError
        If the tree builder fails on the input.

    """
    from bs4 import BeautifulSoup

    if not markup:
        return Fragment()
    try:
        soup = BeautifulSoup(markup, parser)
    except Exception as e:
        # BeautifulSoup builders raise assorted errors (AssertionError, ParserRejectedMarkup, ...)
        raise MarkupParseError(f"Could not parse markup: {e}", fragment=markup, original_error=e) from e
    fragment = Fragment(children=_convert_children(soup))
    logger.debug("Parsed %d characters of markup into %d top-level nodes", len(markup), len(fragment.children))
    return fragment


def element_from_markup(markup: str) -> Element:
    """Parse markup expected to hold a single root element.

    Raises
    ------
    MarkupParseError
        If the markup does not contain exactly one root element.

    """
    roots = list(parse_markup(markup).elements())
    if len(roots) != 1:
        raise MarkupParseError(f"Expected one root element, found {len(roots)}", fragment=markup)
    return roots[0]
