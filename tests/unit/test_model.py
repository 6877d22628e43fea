#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for the block tree model and its schema-aware helpers."""
import pytest

from blockmark.exceptions import SchemaMismatch
from blockmark.model import (
    Block,
    CustomInlineContent,
    Link,
    StyledText,
    TableContent,
    TableRow,
    block_text,
    build_block,
    inline_text,
    iter_blocks,
    merge_inline_content,
    merge_styled_runs,
    normalize_block,
)
from blockmark.schema import BlockTypeSpec


@pytest.mark.unit
class TestBuildBlock:
    """Test block construction through the schema."""

    def test_string_content(self, schema) -> None:
        """Test that a plain string becomes one unstyled run."""
        block = build_block(schema, "paragraph", "Hello")

        assert block.content == [StyledText(text="Hello")]
        assert block.props == {"backgroundColor": "default", "textColor": "default", "textAlignment": "left"}

    def test_props_defaulted_and_validated(self, schema) -> None:
        """Test that out-of-domain props fall back to defaults."""
        block = build_block(schema, "heading", "Hi", props={"level": 9, "textAlignment": "center"})

        assert block.props["level"] == 1
        assert block.props["textAlignment"] == "center"

    def test_unknown_type(self, schema) -> None:
        """Test that an unknown block type raises."""
        with pytest.raises(SchemaMismatch):
            build_block(schema, "callout", "x")

    def test_explicit_id(self, schema) -> None:
        """Test that a given id is kept."""
        assert build_block(schema, "paragraph", "x", id="abc").id == "abc"

    def test_generated_ids_are_unique(self, schema) -> None:
        """Test that generated ids differ."""
        assert build_block(schema, "paragraph").id != build_block(schema, "paragraph").id

    def test_content_none_type(self, schema) -> None:
        """Test that blocks without content get None."""
        block = build_block(schema, "image", "ignored", props={"url": "a.png"})

        assert block.content is None
        assert block.props["url"] == "a.png"

    def test_table_from_rows(self, schema) -> None:
        """Test building table content from nested lists."""
        block = build_block(schema, "table", [["a", "b"], ["1", "2"]])

        assert isinstance(block.content, TableContent)
        assert block.content.rows[1].cells[0] == [StyledText(text="1")]


@pytest.mark.unit
class TestNormalizeBlock:
    """Test normalization of styles, runs and children."""

    def test_undeclared_styles_dropped(self, schema) -> None:
        """Test that styles missing from the schema are removed."""
        block = Block(type="paragraph", content=[StyledText(text="x", styles={"bold": True, "sparkle": True})])

        normalized = normalize_block(block, schema)

        assert normalized.content == [StyledText(text="x", styles={"bold": True})]

    def test_string_style_value(self, schema) -> None:
        """Test that string styles keep their value and empty values are dropped."""
        block = Block(
            type="paragraph",
            content=[StyledText(text="a", styles={"textColor": "red"}), StyledText(text="b", styles={"textColor": ""})],
        )

        normalized = normalize_block(block, schema)

        assert normalized.content == [StyledText(text="a", styles={"textColor": "red"}), StyledText(text="b")]

    def test_adjacent_runs_merged(self, schema) -> None:
        """Test that neighbouring runs with identical styles collapse."""
        block = Block(
            type="paragraph",
            content=[
                StyledText(text="a", styles={"bold": True}),
                StyledText(text="b", styles={"bold": True}),
                StyledText(text=""),
                StyledText(text="c"),
            ],
        )

        normalized = normalize_block(block, schema)

        assert normalized.content == [StyledText(text="ab", styles={"bold": True}), StyledText(text="c")]

    def test_input_not_mutated(self, schema) -> None:
        """Test that normalization returns new objects."""
        block = Block(type="heading", props={"level": 12}, content=["x"])

        normalized = normalize_block(block, schema)

        assert block.props == {"level": 12}
        assert normalized is not block
        assert normalized.props["level"] == 1

    def test_children_normalized(self, schema) -> None:
        """Test that children are normalized recursively."""
        block = Block(type="bulletListItem", content=["a"], children=[Block(type="bulletListItem", content=["b"])])

        normalized = normalize_block(block, schema)

        assert normalized.children[0].props["textAlignment"] == "left"

    def test_non_container_with_children(self, schema) -> None:
        """Test that children on a non-container type raise."""
        schema = schema.extend(blocks=[BlockTypeSpec(name="leaf", container=False)])
        block = Block(type="leaf", children=[Block(type="paragraph")])

        with pytest.raises(SchemaMismatch):
            normalize_block(block, schema)

    def test_disallowed_child_type(self, schema) -> None:
        """Test that a child type outside allowed_children raises."""
        schema = schema.extend(blocks=[BlockTypeSpec(name="box", allowed_children=("paragraph",))])

        with pytest.raises(SchemaMismatch, match="does not accept 'heading' children"):
            build_block(schema, "box", "x", children=[Block(type="heading", content=["H"])])

    def test_allowed_child_type(self, schema) -> None:
        """Test that children listed in allowed_children are kept."""
        schema = schema.extend(blocks=[BlockTypeSpec(name="box", allowed_children=("paragraph",))])

        block = build_block(schema, "box", "x", children=[Block(type="paragraph", content=["p"])])

        assert [child.type for child in block.children] == ["paragraph"]

    def test_custom_inline_content(self, custom_schema) -> None:
        """Test that custom inline content props are normalized."""
        block = Block(
            type="paragraph",
            content=[CustomInlineContent(type="mention", props={"user": "ada", "x": 1}, content=[StyledText("@ada")])],
        )

        normalized = normalize_block(block, custom_schema)

        assert normalized.content == [
            CustomInlineContent(type="mention", props={"user": "ada"}, content=[StyledText("@ada")])
        ]


@pytest.mark.unit
class TestInlineHelpers:
    """Test text extraction and merging helpers."""

    def test_inline_text(self) -> None:
        """Test visible text of mixed inline content."""
        content = [StyledText("Go to "), Link(href="https://x.org", content=[StyledText("site")])]

        assert inline_text(content) == "Go to site"

    def test_block_text_table(self) -> None:
        """Test visible text of a table block."""
        block = Block(
            type="table",
            content=TableContent(rows=[TableRow(cells=[[StyledText("a")], []]), TableRow(cells=[[StyledText("b")]])]),
        )

        assert block_text(block) == "a b"

    def test_merge_styled_runs_drops_empty(self) -> None:
        """Test that empty runs disappear."""
        assert merge_styled_runs([StyledText(""), StyledText("a"), StyledText("b")]) == [StyledText("ab")]

    def test_merge_links_with_same_target(self) -> None:
        """Test that adjacent links to the same href merge."""
        content = [
            Link(href="u", content=[StyledText("a")]),
            Link(href="u", content=[StyledText("b", {"bold": True})]),
            Link(href="v", content=[StyledText("c")]),
        ]

        merged = merge_inline_content(content)

        assert len(merged) == 2
        assert merged[0].content == [StyledText("a"), StyledText("b", {"bold": True})]

    def test_iter_blocks_depth_first(self) -> None:
        """Test forest traversal order."""
        blocks = [
            Block(type="p", id="1", children=[Block(type="p", id="2", children=[Block(type="p", id="3")])]),
            Block(type="p", id="4"),
        ]

        assert [block.id for block in iter_blocks(blocks)] == ["1", "2", "3", "4"]
