#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for markup and Markdown AST transforms."""
import pytest

from blockmark.markdown import InlineFormattingConsolidator, merge_adjacent_formatting
from blockmark.markdown.ast import Document, Emphasis, LineBreak, Link, Paragraph, Strong, Table, TableCell, TableRow, Text
from blockmark.markdown.transforms import normalize_line_breaks, unwrap_elements
from blockmark.markup import Element, Fragment, MarkupText, parse_markup


@pytest.mark.unit
class TestConsolidator:
    """Test inline formatting consolidation."""

    def test_adjacent_strong_merged(self) -> None:
        """Test that neighbouring nodes of the same type merge."""
        nodes = [Strong(content=[Text(content="a")]), Strong(content=[Text(content="b")])]

        assert InlineFormattingConsolidator().consolidate(nodes) == [Strong(content=[Text(content="ab")])]

    def test_runs_merged_before_whitespace_moves(self) -> None:
        """Test that a strong split around nested emphasis becomes one node."""
        nodes = [
            Strong(content=[Text(content="a ")]),
            Strong(content=[Emphasis(content=[Text(content="b")])]),
            Strong(content=[Text(content=" c")]),
        ]

        result = InlineFormattingConsolidator().consolidate(nodes)

        assert result == [
            Strong(content=[Text(content="a "), Emphasis(content=[Text(content="b")]), Text(content=" c")])
        ]

    def test_nesting_aligned_with_neighbours(self) -> None:
        """Test that bold-outermost nesting is swapped to join surrounding emphasis."""
        nodes = [
            Emphasis(content=[Text(content="a ")]),
            Strong(content=[Emphasis(content=[Text(content="b")])]),
            Emphasis(content=[Text(content=" c")]),
        ]

        result = InlineFormattingConsolidator().consolidate(nodes)

        assert result == [
            Emphasis(content=[Text(content="a "), Strong(content=[Text(content="b")]), Text(content=" c")])
        ]

    def test_unstyled_space_keeps_nodes_apart(self) -> None:
        """Test that plain text between two strongs is not absorbed."""
        nodes = [Strong(content=[Text(content="a")]), Text(content=" "), Strong(content=[Text(content="b")])]

        assert InlineFormattingConsolidator().consolidate(nodes) == nodes

    def test_different_types_kept(self) -> None:
        """Test that different formatting types stay separate."""
        nodes = [Strong(content=[Text(content="a")]), Emphasis(content=[Text(content="b")])]

        assert InlineFormattingConsolidator().consolidate(nodes) == nodes

    def test_whitespace_moved_outside(self) -> None:
        """Test that edge whitespace leaves the delimiters."""
        nodes = [Text(content="x"), Strong(content=[Text(content=" a ")]), Text(content="y")]

        result = InlineFormattingConsolidator().consolidate(nodes)

        assert result == [Text(content="x "), Strong(content=[Text(content="a")]), Text(content=" y")]

    def test_whitespace_only_formatting_removed(self) -> None:
        """Test that formatting around only whitespace disappears."""
        doc = Document(children=[Paragraph(content=[Text(content="a"), Strong(content=[Text(content=" ")])])])

        assert merge_adjacent_formatting(doc).children[0].content == [Text(content="a")]

    def test_nested_content_consolidated(self) -> None:
        """Test consolidation inside links."""
        link = Link(url="u", content=[Emphasis(content=[Text(content="a")]), Emphasis(content=[Text(content="b")])])

        result = InlineFormattingConsolidator().consolidate([link])

        assert result[0].content == [Emphasis(content=[Text(content="ab")])]

    def test_block_edges_trimmed(self) -> None:
        """Test that breaks and spaces at block edges are removed."""
        doc = Document(children=[Paragraph(content=[LineBreak(), Text(content=" a "), LineBreak()])])

        assert merge_adjacent_formatting(doc).children[0].content == [Text(content="a")]

    def test_table_cells(self) -> None:
        """Test that table cells are consolidated."""
        cell = TableCell(content=[Strong(content=[Text(content="a")]), Strong(content=[Text(content="b ")])])
        doc = Document(children=[Table(header=TableRow(cells=[cell], is_header=True))])

        header = merge_adjacent_formatting(doc).children[0].header

        assert header.is_header
        assert header.cells[0].content == [Strong(content=[Text(content="ab")])]

    def test_input_untouched(self) -> None:
        """Test that the transform builds a new tree."""
        strong = Strong(content=[Text(content=" a")])
        doc = Document(children=[Paragraph(content=[strong])])

        merge_adjacent_formatting(doc)

        assert strong.content == [Text(content=" a")]


@pytest.mark.unit
class TestMarkupTransforms:
    """Test transforms applied to the markup tree."""

    def test_unwrap_underline(self) -> None:
        """Test that underline wrappers are replaced by their content."""
        fragment = Fragment(children=[Element("p", children=[Element("u", children=[MarkupText("x")])])])

        result = unwrap_elements(fragment)

        assert result.children[0].children == [MarkupText("x")]
        assert fragment.children[0].children[0].tag == "u"

    def test_whitespace_collapsed_outside_pre(self) -> None:
        """Test layout whitespace handling."""
        fragment = parse_markup("<p>a\n   b</p><pre>x\n  y</pre>")

        result = normalize_line_breaks(fragment)

        assert result.children[0].children == [MarkupText("a b")]
        assert result.children[1].children == [MarkupText("x\n  y")]

    def test_edge_breaks_dropped(self) -> None:
        """Test that br elements at block edges are removed."""
        fragment = parse_markup("<p><br>a<br>b<br></p>")

        paragraph = normalize_line_breaks(fragment).children[0]

        assert [getattr(node, "tag", None) for node in paragraph.children] == [None, "br", None]
