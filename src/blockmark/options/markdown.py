#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for the Markdown codec.

The set of enabled extensions and the per-tag handler table are plain option
values passed to each call; the codec keeps no global state.
"""
# src/blockmark/options/markdown.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Mapping

from blockmark.constants import (
    DEFAULT_BULLET_SYMBOL,
    DEFAULT_EMPHASIS_SYMBOL,
    DEFAULT_ESCAPE_SPECIAL,
    DEFAULT_MARKDOWN_EXTENSIONS,
    MARKDOWN_EXTENSIONS,
    BulletSymbol,
    EmphasisSymbol,
)
from blockmark.options.base import BaseOptions

if TYPE_CHECKING:
    from blockmark.markup.nodes import Element

# (converter, element) -> Markdown AST node(s) or None
MarkupHandler = Callable[[Any, "Element"], Any]


@dataclass(frozen=True)
class MarkdownOptions(BaseOptions):
    """Configuration options for Markdown export and import.

    Parameters
    ----------
    extensions : frozenset of str, default {"tables", "strikethrough", "autolinks"}
        Enabled GFM extensions. Disabled extensions are neither parsed nor
        emitted (tables pass through as raw HTML, strikethrough renders as
        plain text, links always use the ``[text](url)`` form).
    handlers : Mapping[str, MarkupHandler], default empty
        Per-tag handlers converting markup elements to Markdown AST nodes;
        they take precedence over the built-in handlers.
    bullet_symbol : {"-", "*", "+"}, default "-"
        Bullet list marker
    emphasis_symbol : {"*", "_"}, default "*"
        Emphasis delimiter (strong uses it doubled)
    escape_special : bool, default True
        Escape Markdown syntax characters in text

    """

    extensions: frozenset[str] = field(
        default=DEFAULT_MARKDOWN_EXTENSIONS,
        metadata={"help": "Enabled Markdown extensions", "choices": sorted(MARKDOWN_EXTENSIONS)},
    )
    handlers: Mapping[str, MarkupHandler] = field(
        default_factory=dict,
        metadata={"help": "Per-tag markup to Markdown handlers", "exclude_from_cli": True},
    )
    bullet_symbol: BulletSymbol = field(
        default=DEFAULT_BULLET_SYMBOL,
        metadata={"help": "Bullet list marker", "choices": ["-", "*", "+"]},
    )
    emphasis_symbol: EmphasisSymbol = field(
        default=DEFAULT_EMPHASIS_SYMBOL,
        metadata={"help": "Emphasis delimiter", "choices": ["*", "_"]},
    )
    escape_special: bool = field(
        default=DEFAULT_ESCAPE_SPECIAL,
        metadata={"help": "Escape Markdown syntax characters in text", "cli_name": "no-escape-special"},
    )

    def __post_init__(self) -> None:
        """Validate the extension set and symbols.

        Raises
        ------
        ValueError
            If an unknown extension or symbol is given.

        """
        super().__post_init__()
        if not isinstance(self.extensions, frozenset):
            object.__setattr__(self, "extensions", frozenset(self.extensions))
        unknown = self.extensions - MARKDOWN_EXTENSIONS
        if unknown:
            raise ValueError(f"Unknown Markdown extensions: {sorted(unknown)}; expected {sorted(MARKDOWN_EXTENSIONS)}")
        if self.bullet_symbol not in ("-", "*", "+"):
            raise ValueError(f"bullet_symbol must be '-', '*' or '+', got {self.bullet_symbol!r}")
        if self.emphasis_symbol not in ("*", "_"):
            raise ValueError(f"emphasis_symbol must be '*' or '_', got {self.emphasis_symbol!r}")

    @property
    def tables(self) -> bool:
        return "tables" in self.extensions

    @property
    def strikethrough(self) -> bool:
        return "strikethrough" in self.extensions

    @property
    def autolinks(self) -> bool:
        return "autolinks" in self.extensions
