#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for markup to block tree parsing."""
import pytest

from blockmark.html import ExternalHTMLRenderer, HtmlToBlocksParser, InternalHTMLRenderer, html_to_blocks
from blockmark.model import Block, CustomInlineContent, Link, StyledText, TableContent, build_block
from blockmark.options import HtmlParserOptions
from blockmark.schema import BlockTypeSpec


@pytest.mark.unit
class TestInternalRoundTrip:
    """Test that internal markup rebuilds the block tree exactly."""

    def test_mixed_document(self, schema) -> None:
        """Test a document touching every default block type."""
        blocks = [
            build_block(schema, "heading", "Title", props={"level": 3, "textAlignment": "center"}),
            build_block(
                schema,
                "paragraph",
                [
                    StyledText("  two  spaces "),
                    StyledText("bold+italic", {"bold": True, "italic": True}),
                    StyledText("red\nline", {"textColor": "red"}),
                    Link(href="https://x.org", content=[StyledText("link", {"underline": True})]),
                ],
            ),
            build_block(
                schema,
                "bulletListItem",
                "item",
                children=[build_block(schema, "numberedListItem", "nested", props={"backgroundColor": "blue"})],
            ),
            build_block(schema, "image", props={"url": "a.png", "caption": "cap", "previewWidth": 300}),
            build_block(schema, "table", [["a", "b"], ["1", "2"]]),
            build_block(schema, "paragraph"),
        ]

        html = InternalHTMLRenderer(schema).render_to_string(blocks)

        assert html_to_blocks(html, schema) == blocks

    def test_custom_types(self, custom_schema) -> None:
        """Test caller-defined blocks, inline content and styles."""
        blocks = [
            build_block(
                custom_schema,
                "alert",
                [
                    CustomInlineContent(type="mention", props={"user": "ada"}, content=[StyledText("@ada")]),
                    StyledText(" marked", {"highlight": "yellow"}),
                ],
                props={"kind": "error"},
            )
        ]

        html = InternalHTMLRenderer(custom_schema).render_to_string(blocks)

        assert html_to_blocks(html, custom_schema) == blocks

    def test_unknown_type_becomes_paragraph(self, schema) -> None:
        """Test the default unknown block policy."""
        html = InternalHTMLRenderer(schema).render_to_string([Block(type="callout", id="c1", content=[StyledText("hi")])])

        blocks = html_to_blocks(html, schema)

        assert len(blocks) == 1
        assert blocks[0].type == "paragraph"
        assert blocks[0].id == "c1"
        assert blocks[0].content == [StyledText("hi")]

    def test_unknown_type_dropped(self, schema) -> None:
        """Test the drop policy."""
        html = InternalHTMLRenderer(schema).render_to_string(
            [Block(type="callout", id="c1", content=[StyledText("hi")]), build_block(schema, "paragraph", "kept")]
        )

        blocks = html_to_blocks(html, schema, HtmlParserOptions(unknown_block_policy="drop"))

        assert [block.content for block in blocks] == [[StyledText("kept")]]

    def test_undeclared_style_dropped(self, schema) -> None:
        """Test that data-style-type values outside the schema are ignored."""
        blocks = html_to_blocks('<p>a<span data-style-type="sparkle">b</span></p>', schema)

        assert blocks[0].content == [StyledText("ab")]


@pytest.mark.unit
class TestExternalParsing:
    """Test mapping of semantic markup back to blocks."""

    def test_heading_and_paragraph(self, schema) -> None:
        """Test basic block tags."""
        blocks = html_to_blocks("<h2>Hi</h2><p>text</p>", schema)

        assert [block.type for block in blocks] == ["heading", "paragraph"]
        assert blocks[0].props["level"] == 2
        assert blocks[1].content == [StyledText("text")]

    def test_out_of_range_heading(self, schema) -> None:
        """Test that h7 maps to a heading with the default level."""
        blocks = html_to_blocks("<h7>deep</h7>", schema)

        assert blocks[0].type == "heading"
        assert blocks[0].props["level"] == 1

    def test_nested_lists(self, schema) -> None:
        """Test that nested lists become child blocks."""
        blocks = html_to_blocks("<ul><li>a<ol><li>b</li></ol></li><li><p>c</p></li></ul>", schema)

        assert [block.type for block in blocks] == ["bulletListItem", "bulletListItem"]
        assert blocks[0].children[0].type == "numberedListItem"
        assert blocks[0].children[0].content == [StyledText("b")]
        assert blocks[1].content == [StyledText("c")]

    def test_list_sibling_nesting(self, schema) -> None:
        """Test a nested list written as a sibling of the previous item."""
        blocks = html_to_blocks("<ul><li>a</li><ul><li>b</li></ul></ul>", schema)

        assert len(blocks) == 1
        assert blocks[0].children[0].content == [StyledText("b")]

    def test_table_rows_padded(self, schema) -> None:
        """Test that header cells are read and short rows are padded."""
        blocks = html_to_blocks("<table><tr><th>A</th><th>B</th></tr><tr><td>1</td></tr></table>", schema)

        table = blocks[0].content
        assert isinstance(table, TableContent)
        assert table.rows[0].cells == [[StyledText("A")], [StyledText("B")]]
        assert table.rows[1].cells == [[StyledText("1")], []]

    def test_image_in_paragraph(self, schema) -> None:
        """Test that a paragraph holding only an image becomes an image block."""
        blocks = html_to_blocks('<p><img src="a.png" alt="x"></p>', schema)

        assert blocks[0].type == "image"
        assert blocks[0].props["url"] == "a.png"
        assert blocks[0].props["caption"] == "x"

    def test_preformatted(self, schema) -> None:
        """Test that code blocks become code-styled paragraphs."""
        blocks = html_to_blocks("<pre><code>x = 1\n</code></pre>", schema)

        assert blocks[0].type == "paragraph"
        assert blocks[0].content == [StyledText("x = 1", {"code": True})]

    def test_thematic_break_dropped(self, schema) -> None:
        """Test that hr elements produce no block."""
        blocks = html_to_blocks("<p>a</p><hr><p>b</p>", schema)

        assert [block.content for block in blocks] == [[StyledText("a")], [StyledText("b")]]

    def test_whitespace_collapsed(self, schema) -> None:
        """Test browser-like whitespace handling."""
        blocks = html_to_blocks("<p>  hello \n  <b> world </b>  </p>", schema)

        assert blocks[0].content == [StyledText("hello "), StyledText("world", {"bold": True})]

    def test_whitespace_kept_when_disabled(self, schema) -> None:
        """Test that collapsing can be turned off."""
        blocks = html_to_blocks("<p>a  b</p>", schema, HtmlParserOptions(collapse_whitespace=False))

        assert blocks[0].content == [StyledText("a  b")]

    def test_containers_flattened(self, schema) -> None:
        """Test that unknown containers contribute their children."""
        blocks = html_to_blocks("<div><p>a</p><section>loose <em>text</em></section></div>", schema)

        assert [block.type for block in blocks] == ["paragraph", "paragraph"]
        assert blocks[1].content == [StyledText("loose "), StyledText("text", {"italic": True})]

    def test_style_tag_aliases(self, schema) -> None:
        """Test that every listed tag maps to its style."""
        blocks = html_to_blocks("<p><b>1</b><i>2</i><del>3</del><kbd>4</kbd></p>", schema)

        assert blocks[0].content == [
            StyledText("1", {"bold": True}),
            StyledText("2", {"italic": True}),
            StyledText("3", {"strike": True}),
            StyledText("4", {"code": True}),
        ]

    def test_links(self, schema) -> None:
        """Test anchor elements."""
        blocks = html_to_blocks('<p>see <a href="https://x.org">the <b>site</b></a></p>', schema)

        assert blocks[0].content == [
            StyledText("see "),
            Link(href="https://x.org", content=[StyledText("the "), StyledText("site", {"bold": True})]),
        ]

    def test_fallback_container(self, custom_schema) -> None:
        """Test that generic containers round trip through external markup."""
        block = build_block(custom_schema, "alert", "Careful", props={"kind": "warning"})
        html = ExternalHTMLRenderer(custom_schema).render_to_string([block])

        parsed = html_to_blocks(html, custom_schema)

        assert parsed[0].type == "alert"
        assert parsed[0].props == block.props
        assert parsed[0].content == block.content

    def test_id_factory(self, schema, id_factory) -> None:
        """Test that generated ids come from the configured factory."""
        parser = HtmlToBlocksParser(schema, HtmlParserOptions(id_factory=id_factory))

        blocks = parser.parse("<p>a</p><p>b</p>")

        assert [block.id for block in blocks] == ["id-1", "id-2"]

    def test_empty_input(self, schema) -> None:
        """Test that empty markup yields no blocks."""
        assert html_to_blocks("", schema) == []
        assert html_to_blocks("   ", schema) == []

    def test_editor_colour_attributes(self, schema) -> None:
        """Test that data-text-color and data-background-color spans map to colour styles."""
        blocks = html_to_blocks(
            '<p><span data-background-color="blue">x</span><span data-text-color="red">y</span></p>', schema
        )

        assert blocks[0].content == [
            StyledText("x", {"backgroundColor": "blue"}),
            StyledText("y", {"textColor": "red"}),
        ]

    def test_colour_styles_external_round_trip(self, schema) -> None:
        """Test that colour styles survive external markup carrying inline CSS."""
        block = build_block(schema, "paragraph", [StyledText("x", {"textColor": "red", "backgroundColor": "blue"})])
        html = ExternalHTMLRenderer(schema).render_to_string([block])

        parsed = html_to_blocks(html, schema)

        assert parsed[0].content == block.content

    def test_editor_content_node(self, schema) -> None:
        """Test div[data-content-type] nodes with data-<prop> attributes."""
        blocks = html_to_blocks('<div data-content-type="heading" data-level="2"><h2>Hi</h2></div>', schema)

        assert len(blocks) == 1
        assert blocks[0].type == "heading"
        assert blocks[0].props["level"] == 2
        assert blocks[0].content == [StyledText("Hi")]

    def test_editor_content_node_unknown_type(self, schema) -> None:
        """Test that content nodes of unknown types contribute their children."""
        blocks = html_to_blocks('<div data-content-type="checkListItem"><p>x</p></div>', schema)

        assert [block.type for block in blocks] == ["paragraph"]
        assert blocks[0].content == [StyledText("x")]


@pytest.mark.unit
class TestAllowedChildren:
    """Test that children a block type does not accept become siblings."""

    @pytest.fixture
    def box_schema(self, schema):
        return schema.extend(blocks=[BlockTypeSpec(name="box", allowed_children=("paragraph",))])

    def test_internal_markup(self, box_schema) -> None:
        """Test hoisting from internal markup, keeping ids."""
        html = (
            '<div data-node-type="blockGroup">'
            '<div data-node-type="blockContainer" data-block-id="b" data-block-type="box">'
            '<div data-node-type="inlineContent">x</div>'
            '<div data-node-type="blockGroup">'
            '<div data-node-type="blockContainer" data-block-id="h" data-block-type="heading" data-prop-level="2">'
            '<div data-node-type="inlineContent">H</div></div>'
            '<div data-node-type="blockContainer" data-block-id="p" data-block-type="paragraph">'
            '<div data-node-type="inlineContent">P</div></div>'
            "</div></div></div>"
        )

        blocks = html_to_blocks(html, box_schema)

        assert [(block.type, block.id) for block in blocks] == [("box", "b"), ("heading", "h")]
        assert [(child.type, child.id) for child in blocks[0].children] == [("paragraph", "p")]

    def test_external_markup(self, box_schema) -> None:
        """Test hoisting from a generic external container."""
        blocks = html_to_blocks('<div data-block-type="box">x<h2>H</h2><p>P</p></div>', box_schema)

        assert [block.type for block in blocks] == ["box", "heading"]
        assert [child.type for child in blocks[0].children] == ["paragraph"]
        assert blocks[0].content == [StyledText("x")]
