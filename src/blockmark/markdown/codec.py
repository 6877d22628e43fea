#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blockmark/markdown/codec.py
"""Markup <-> Markdown codec.

Export path::

    markup --parse_markup--> markup tree --transforms--> MarkupToMarkdown
        --> Markdown AST --merge_adjacent_formatting--> MarkdownRenderer --> text

Import path::

    text --MarkdownParser--> Markdown AST --MarkdownToMarkup--> markup tree

Neither direction raises on malformed input: a fragment that cannot be parsed
degrades to its literal text.

"""

from __future__ import annotations

import logging
from typing import Optional, Union

from blockmark.exceptions import MarkupParseError
from blockmark.markdown.ast import Document, Paragraph, Text
from blockmark.markdown.from_markup import MarkupToMarkdown
from blockmark.markdown.parser import MarkdownParser
from blockmark.markdown.renderer import MarkdownRenderer
from blockmark.markdown.to_markup import MarkdownToMarkup
from blockmark.markdown.transforms import merge_adjacent_formatting, normalize_line_breaks, unwrap_elements
from blockmark.markup.nodes import Element, Fragment, MarkupText
from blockmark.markup.parser import parse_markup
from blockmark.options.markdown import MarkdownOptions

logger = logging.getLogger(__name__)


def markup_to_markdown_ast(markup: Union[str, Fragment], options: Optional[MarkdownOptions] = None) -> Document:
    """Convert markup to a consolidated Markdown AST.

    Parameters
    ----------
    markup : str or Fragment
        HTML string or an already parsed markup tree
    options : MarkdownOptions or None, default None
        Enabled extensions and handler overrides

    Returns
    -------
    Document
        Markdown AST with adjacent formatting merged

    """
    options = options or MarkdownOptions()
    if isinstance(markup, str):
        try:
            fragment = parse_markup(markup)
        except MarkupParseError as e:
            logger.warning("Exporting unparseable markup as literal text: %s", e.message)
            return Document(children=[Paragraph(content=[Text(content=markup)])])
    else:
        fragment = markup

    fragment = normalize_line_breaks(unwrap_elements(fragment))
    document = MarkupToMarkdown(options).convert(fragment)
    return merge_adjacent_formatting(document)


def markup_to_markdown(markup: Union[str, Fragment], options: Optional[MarkdownOptions] = None) -> str:
    """Convert markup to Markdown text.

    Examples
    --------
        >>> markup_to_markdown("<h2>Hi</h2><p><strong>a</strong> b</p>")
        '## Hi\\n\\n**a** b\\n\\n'

    """
    options = options or MarkdownOptions()
    document = markup_to_markdown_ast(markup, options)
    return MarkdownRenderer(options).render_to_string(document)


def markdown_to_markup(markdown: str, options: Optional[MarkdownOptions] = None) -> Fragment:
    """Convert Markdown text to a markup tree.

    Returns
    -------
    Fragment
        Markup tree using the conventional HTML vocabulary; raw HTML in the
        source is kept as raw leaves

    """
    options = options or MarkdownOptions()
    try:
        document = MarkdownParser(options).parse(markdown)
    except MarkupParseError as e:
        logger.warning("Importing unparseable Markdown as literal text: %s", e.message)
        return Fragment(children=[Element("p", children=[MarkupText(markdown)])])
    return MarkdownToMarkup().build(document)
