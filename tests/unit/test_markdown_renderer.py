#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for canonical Markdown rendering from the Markdown AST."""
import pytest

from blockmark.markdown import MarkdownRenderer
from blockmark.markdown.ast import (
    BlockQuote,
    Code,
    CodeBlock,
    Document,
    Emphasis,
    Heading,
    HTMLBlock,
    HTMLInline,
    Image,
    LineBreak,
    Link,
    List,
    ListItem,
    Paragraph,
    Strikethrough,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
)
from blockmark.options import MarkdownOptions


def render(*blocks, **option_kwargs) -> str:
    return MarkdownRenderer(MarkdownOptions(**option_kwargs)).render_to_string(Document(children=list(blocks)))


def para(*inline) -> Paragraph:
    return Paragraph(content=list(inline))


def item(*texts) -> ListItem:
    return ListItem(children=[para(Text(content=text)) for text in texts])


@pytest.mark.unit
class TestBlocks:
    """Test block-level output."""

    def test_empty_document(self) -> None:
        """Test that an empty document renders as an empty string."""
        assert render() == ""

    def test_heading(self) -> None:
        """Test ATX headings."""
        assert render(Heading(level=2, content=[Text(content="Hi")])) == "## Hi\n\n"

    def test_heading_trailing_hash(self) -> None:
        """Test that a trailing hash is escaped."""
        assert render(Heading(level=1, content=[Text(content="C#")])) == "# C\\#\n\n"

    def test_heading_level_validated(self) -> None:
        """Test that heading levels outside 1-6 are rejected."""
        with pytest.raises(ValueError):
            Heading(level=7)

    def test_paragraphs_separated_by_blank_line(self) -> None:
        """Test block separation."""
        assert render(para(Text(content="a")), para(Text(content="b"))) == "a\n\nb\n\n"

    def test_empty_paragraph_skipped(self) -> None:
        """Test that blocks rendering to nothing are omitted."""
        assert render(para(), para(Text(content="a"))) == "a\n\n"

    def test_code_block(self) -> None:
        """Test fenced code with an info string."""
        assert render(CodeBlock(content="print(1)\n", language="python")) == "```python\nprint(1)\n```\n\n"

    def test_code_block_fence_grows(self) -> None:
        """Test that the fence is longer than any backtick run inside."""
        assert render(CodeBlock(content="a ``` b")) == "````\na ``` b\n````\n\n"

    def test_block_quote(self) -> None:
        """Test quoted paragraphs."""
        quote = BlockQuote(children=[para(Text(content="a")), para(Text(content="b"))])

        assert render(quote) == "> a\n>\n> b\n\n"

    def test_thematic_break_and_html(self) -> None:
        """Test rules and raw HTML blocks."""
        assert render(ThematicBreak(), HTMLBlock(content="<div>x</div>\n")) == "---\n\n<div>x</div>\n\n"


@pytest.mark.unit
class TestLists:
    """Test list output."""

    def test_tight_bullet_list(self) -> None:
        """Test the default bullet marker."""
        assert render(List(ordered=False, items=[item("a"), item("b")])) == "- a\n- b\n\n"

    def test_bullet_symbol_option(self) -> None:
        """Test a configured bullet marker."""
        assert render(List(ordered=False, items=[item("a")]), bullet_symbol="*") == "* a\n\n"

    def test_ordered_start(self) -> None:
        """Test numbering from a start value."""
        assert render(List(ordered=True, start=3, items=[item("a"), item("b")])) == "3. a\n4. b\n\n"

    def test_nested_list_indent(self) -> None:
        """Test that nested lists are indented by the marker width."""
        inner = List(ordered=False, items=[item("b")])
        outer = List(ordered=False, items=[ListItem(children=[para(Text(content="a")), inner])])

        assert render(outer) == "- a\n  - b\n\n"

    def test_nested_under_ordered(self) -> None:
        """Test indentation under a wider ordered marker."""
        inner = List(ordered=False, items=[item("b")])
        outer = List(ordered=True, start=10, items=[ListItem(children=[para(Text(content="a")), inner])])

        assert render(outer) == "10. a\n    - b\n\n"

    def test_loose_list(self) -> None:
        """Test that an item holding two paragraphs makes the list loose."""
        assert render(List(ordered=False, items=[item("a", "b"), item("c")])) == "- a\n\n  b\n\n- c\n\n"


@pytest.mark.unit
class TestTables:
    """Test GFM table output."""

    def test_table_with_padding(self) -> None:
        """Test the delimiter row and padding of short rows."""
        header = TableRow(cells=[TableCell(content=[Text(content="a")]), TableCell(content=[Text(content="b")])], is_header=True)
        row = TableRow(cells=[TableCell(content=[Text(content="1")])])

        assert render(Table(header=header, rows=[row])) == "| a | b |\n| --- | --- |\n| 1 |  |\n\n"

    def test_cell_escaping(self) -> None:
        """Test pipes and line breaks inside cells."""
        cell = TableCell(content=[Text(content="x|y"), LineBreak(), Text(content="z")])

        assert render(Table(header=TableRow(cells=[cell], is_header=True))) == "| x\\|y<br>z |\n| --- |\n\n"

    def test_empty_table(self) -> None:
        """Test that a table without cells renders nothing."""
        assert render(Table()) == ""


@pytest.mark.unit
class TestInline:
    """Test inline output and escaping."""

    def test_emphasis(self) -> None:
        """Test strong and emphasis delimiters."""
        content = para(Strong(content=[Text(content="a")]), Text(content=" "), Emphasis(content=[Text(content="b")]))

        assert render(content) == "**a** *b*\n\n"
        assert render(content, emphasis_symbol="_") == "__a__ _b_\n\n"

    def test_special_characters_escaped(self) -> None:
        """Test escaping of Markdown syntax in text."""
        assert render(para(Text(content="1*2 [x] a_b _c `d` <e>"))) == "1\\*2 \\[x\\] a_b \\_c \\`d\\` \\<e>\n\n"

    def test_entity_like_ampersand(self) -> None:
        """Test that only entity-shaped ampersands are escaped."""
        assert render(para(Text(content="AT&T &amp;"))) == "AT&T \\&amp;\n\n"

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("# not a heading", "\\# not a heading"),
            ("- not a list", "\\- not a list"),
            ("+ not a list", "\\+ not a list"),
            ("> not a quote", "\\> not a quote"),
            ("1. not a list", "1\\. not a list"),
            ("---", "\\---"),
            ("#hashtag", "#hashtag"),
        ],
    )
    def test_line_start_escaped(self, text, expected) -> None:
        """Test escaping of block syntax at the start of a line."""
        assert render(para(Text(content=text))) == expected + "\n\n"

    def test_escaping_disabled(self) -> None:
        """Test that escaping can be turned off."""
        assert render(para(Text(content="*a* # b")), escape_special=False) == "*a* # b\n\n"

    def test_line_breaks(self) -> None:
        """Test hard and soft breaks."""
        content = para(Text(content="a"), LineBreak(), Text(content="- b"), LineBreak(soft=True), Text(content="c"))

        assert render(content) == "a\\\n\\- b\nc\n\n"

    def test_strikethrough(self) -> None:
        """Test strikethrough with and without the extension."""
        content = para(Strikethrough(content=[Text(content="x")]), Text(content=" ~"))

        assert render(content) == "~~x~~ \\~\n\n"
        assert render(content, extensions=frozenset()) == "x ~\n\n"

    @pytest.mark.parametrize(
        "content,expected",
        [
            ("code", "`code`"),
            ("a`b", "``a`b``"),
            ("`x", "`` `x ``"),
        ],
    )
    def test_code_spans(self, content, expected) -> None:
        """Test code span fences and padding."""
        assert render(para(Code(content=content))) == expected + "\n\n"

    def test_links(self) -> None:
        """Test inline links with titles and awkward destinations."""
        content = para(
            Link(url="https://x.org", content=[Text(content="site")], title='say "hi"'),
            Text(content=" "),
            Link(url="a b", content=[Text(content="t")]),
            Text(content=" "),
            Link(url="", content=[Text(content="e")]),
        )

        assert render(content) == '[site](https://x.org "say \\"hi\\"") [t](<a b>) [e](<>)\n\n'

    def test_bare_url_links(self) -> None:
        """Test links whose text equals the target."""
        link = Link(url="https://x.org", content=[Text(content="https://x.org")])

        assert render(para(link)) == "https://x.org\n\n"
        assert render(para(link), extensions=frozenset({"tables"})) == "<https://x.org>\n\n"

    def test_image(self) -> None:
        """Test image syntax."""
        assert render(para(Image(url="a.png", alt_text="a [b]"))) == "![a \\[b\\]](a.png)\n\n"

    def test_inline_html_verbatim(self) -> None:
        """Test that inline HTML is not escaped."""
        content = para(HTMLInline(content="<span>"), Text(content="x"), HTMLInline(content="</span>"))

        assert render(content) == "<span>x</span>\n\n"
