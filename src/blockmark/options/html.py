#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for markup rendering and parsing."""
# src/blockmark/options/html.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional

from blockmark.constants import (
    DEFAULT_COLLAPSE_WHITESPACE,
    DEFAULT_HTML_PARSER,
    DEFAULT_UNKNOWN_BLOCK_POLICY,
    UnknownBlockPolicy,
)
from blockmark.options.base import BaseOptions

if TYPE_CHECKING:
    from blockmark.markup.nodes import Element, MarkupNode
    from blockmark.model import Block
    from blockmark.schema.specs import StyleTypeSpec

# (value, spec, mode) -> wrapper element; the renderer appends the styled content to its children
StyleRenderer = Callable[[Any, "StyleTypeSpec", str], "Element"]

# (block, renderer) -> markup nodes for the block (external mode only)
BlockRenderer = Callable[["Block", Any], "list[MarkupNode]"]


@dataclass(frozen=True)
class HtmlRendererOptions(BaseOptions):
    """Configuration options for block tree to markup rendering.

    Parameters
    ----------
    style_renderers : Mapping[str, StyleRenderer], default empty
        Per-style-type renderers overriding the built-in tag mapping
    block_renderers : Mapping[str, BlockRenderer], default empty
        Per-block-type renderers used in external mode before the schema's
        declared mapping

    """

    style_renderers: Mapping[str, StyleRenderer] = field(
        default_factory=dict,
        metadata={"help": "Per-style-type renderers overriding the built-in tag mapping", "exclude_from_cli": True},
    )
    block_renderers: Mapping[str, BlockRenderer] = field(
        default_factory=dict,
        metadata={"help": "Per-block-type renderers for external markup", "exclude_from_cli": True},
    )


@dataclass(frozen=True)
class HtmlParserOptions(BaseOptions):
    """Configuration options for markup to block tree parsing.

    Parameters
    ----------
    unknown_block_policy : {"paragraph", "drop"}, default "paragraph"
        What to do with blocks whose type is not in the schema: substitute a
        paragraph holding their visible text, or drop them
    id_factory : callable or None, default None
        Generates ids for blocks without one (random ids when None)
    collapse_whitespace : bool, default True
        Collapse whitespace runs in external markup as browsers do
    html_parser : str, default "html.parser"
        BeautifulSoup tree builder

    """

    unknown_block_policy: UnknownBlockPolicy = field(
        default=DEFAULT_UNKNOWN_BLOCK_POLICY,
        metadata={"help": "Handling of unknown block types", "choices": ["paragraph", "drop"]},
    )
    id_factory: Optional[Callable[[], str]] = field(
        default=None,
        metadata={"help": "Id generator for imported blocks", "exclude_from_cli": True},
    )
    collapse_whitespace: bool = field(
        default=DEFAULT_COLLAPSE_WHITESPACE,
        metadata={"help": "Collapse whitespace runs in external markup", "cli_name": "no-collapse-whitespace"},
    )
    html_parser: str = field(
        default=DEFAULT_HTML_PARSER,
        metadata={"help": "BeautifulSoup tree builder", "choices": ["html.parser", "lxml", "html5lib"]},
    )

    def __post_init__(self) -> None:
        """Validate the unknown block policy.

        Raises
        ------
        ValueError
            If the policy is not supported.

        """
        super().__post_init__()
        if self.unknown_block_policy not in ("paragraph", "drop"):
            raise ValueError(f"unknown_block_policy must be 'paragraph' or 'drop', got {self.unknown_block_policy!r}")
