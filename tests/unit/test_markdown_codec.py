#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the markup <-> Markdown codec."""
import pytest

from blockmark.markdown import (
    MarkdownParser,
    MarkdownToMarkup,
    markdown_to_markup,
    markup_to_markdown,
    markup_to_markdown_ast,
)
from blockmark.markdown.ast import Strong
from blockmark.markup import Element, Fragment, MarkupText, to_html
from blockmark.options import MarkdownOptions


@pytest.mark.unit
class TestMarkupToMarkdown:
    """Test the export direction."""

    def test_heading_and_strong(self) -> None:
        """Test basic export."""
        assert markup_to_markdown("<h2>Hi</h2><p><strong>a</strong> b</p>") == "## Hi\n\n**a** b\n\n"

    def test_fragment_input(self) -> None:
        """Test that an already parsed tree is accepted."""
        fragment = Fragment(children=[Element("p", children=[MarkupText("x")])])

        assert markup_to_markdown(fragment) == "x\n\n"

    def test_nested_list(self) -> None:
        """Test list nesting."""
        assert markup_to_markdown("<ul><li>a<ul><li>b</li></ul></li><li>c</li></ul>") == "- a\n  - b\n- c\n\n"

    def test_ordered_list_start(self) -> None:
        """Test the start attribute."""
        assert markup_to_markdown('<ol start="2"><li>a</li></ol>') == "2. a\n\n"

    def test_underline_unwrapped(self) -> None:
        """Test that underline has no Markdown syntax and keeps its text."""
        assert markup_to_markdown("<p>a <u>b</u></p>") == "a b\n\n"

    def test_span_passthrough(self) -> None:
        """Test that spans survive as inline HTML."""
        markup = '<p><span data-style-type="textColor" data-value="red">x</span></p>'

        assert markup_to_markdown(markup) == '<span data-style-type="textColor" data-value="red">x</span>\n\n'

    def test_table(self) -> None:
        """Test GFM table export."""
        markup = "<table><tr><th>A</th><th>B</th></tr><tr><td>1</td></tr></table>"

        assert markup_to_markdown(markup) == "| A | B |\n| --- | --- |\n| 1 |  |\n\n"

    def test_table_without_extension(self) -> None:
        """Test that tables pass through as HTML when the extension is off."""
        markup = "<table><tr><td>a</td></tr></table>"

        assert markup_to_markdown(markup, MarkdownOptions(extensions=frozenset())) == markup + "\n\n"

    def test_code_block(self) -> None:
        """Test preformatted code with a language class."""
        markup = '<pre><code class="language-py">x = 1\n  y</code></pre>'

        assert markup_to_markdown(markup) == "```py\nx = 1\n  y\n```\n\n"

    def test_block_quote_and_image(self) -> None:
        """Test quotes and loose images."""
        markup = '<blockquote><p>q</p></blockquote><img src="a.png" alt="x">'

        assert markup_to_markdown(markup) == "> q\n\n![x](a.png)\n\n"

    def test_line_break(self) -> None:
        """Test that br becomes a hard break and source newlines do not."""
        assert markup_to_markdown("<p>a<br>b\nc</p>") == "a\\\nb c\n\n"

    def test_fragmented_formatting_merged(self) -> None:
        """Test that adjacent formatting is consolidated."""
        assert markup_to_markdown("<p><strong>a</strong><strong>b</strong> c</p>") == "**ab** c\n\n"

    def test_custom_handler(self) -> None:
        """Test per-call handler overrides."""
        options = MarkdownOptions(handlers={"mark": lambda converter, el: Strong(content=converter.phrasing(el.children))})

        assert markup_to_markdown("<p><mark>x</mark></p>", options) == "**x**\n\n"
        assert markup_to_markdown("<p><mark>x</mark></p>") == "x\n\n"

    def test_fallback_container(self) -> None:
        """Test that generic block containers export their text."""
        assert markup_to_markdown('<div data-block-type="alert">Careful</div>') == "Careful\n\n"

    def test_ast_entry_point(self) -> None:
        """Test the AST-returning variant."""
        doc = markup_to_markdown_ast("<p><b>x</b></p>")

        assert isinstance(doc.children[0].content[0], Strong)

    def test_empty(self) -> None:
        """Test empty markup."""
        assert markup_to_markdown("") == ""


@pytest.mark.unit
class TestMarkdownToMarkup:
    """Test the import direction."""

    def test_heading_and_emphasis(self) -> None:
        """Test conventional element vocabulary."""
        assert to_html(markdown_to_markup("# T\n\n*e*")) == "<h1>T</h1><p><em>e</em></p>"

    def test_hard_break(self) -> None:
        """Test that hard breaks become br elements."""
        assert to_html(markdown_to_markup("a  \nb")) == "<p>a<br>b</p>"

    def test_code_block(self) -> None:
        """Test fenced code without its final newline."""
        assert to_html(markdown_to_markup("```py\nx\n```")) == '<pre><code class="language-py">x</code></pre>'

    def test_table(self) -> None:
        """Test that the header row uses th cells."""
        html = to_html(markdown_to_markup("| a |\n| --- |\n| 1 |"))

        assert html == "<table><tbody><tr><th>a</th></tr><tr><td>1</td></tr></tbody></table>"

    def test_link_and_image(self) -> None:
        """Test link and image attributes."""
        html = to_html(markdown_to_markup('[t](https://x.org "T") ![a](b.png)'))

        assert html == '<p><a href="https://x.org" title="T">t</a> <img src="b.png" alt="a"></p>'

    def test_builder_is_reusable(self) -> None:
        """Test that the markup builder keeps no state between documents."""
        builder = MarkdownToMarkup()
        first = builder.build(MarkdownParser().parse("a"))
        second = builder.build(MarkdownParser().parse("b"))

        assert to_html(first) == "<p>a</p>"
        assert to_html(second) == "<p>b</p>"


@pytest.mark.unit
class TestFixedPoint:
    """Test that canonical Markdown survives import then export."""

    @pytest.mark.parametrize(
        "markdown",
        [
            "# Title\n\n**bold** and *italic*\n\n",
            "- a\n  - b\n- c\n\n",
            "1. one\n2. two\n\n",
            "| a | b |\n| --- | --- |\n| 1 | 2 |\n\n",
            "[site](https://x.org) and https://y.org\n\n",
            "a\\\nb\n\n",
            "> quoted\n\n",
            "```py\nx = 1\n```\n\n",
            "~~gone~~ `code`\n\n",
        ],
    )
    def test_round_trip(self, markdown) -> None:
        """Test that Markdown -> markup -> Markdown is the identity on canonical input."""
        assert markup_to_markdown(to_html(markdown_to_markup(markdown))) == markdown
