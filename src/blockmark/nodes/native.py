#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blockmark/nodes/native.py
"""Native tree representation of the text-editing engine.

The adapter only reads native nodes through the small surface described by
:class:`NativeNodeLike` (type name, attribute map, mark list, children, text),
so a host engine can hand over its own node objects. :class:`NativeNode` and
:class:`NativeMark` are the concrete, engine-independent implementation
produced by :func:`blockmark.nodes.adapter.block_to_node`.

Tree shape::

    doc
    └── blockGroup
        └── blockContainer {id}
            ├── <blockType> {props...}      content node
            │   └── text / inline nodes / tableRow → tableCell → text
            └── blockGroup                  optional, nested blocks

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, Sequence, runtime_checkable

from blockmark.constants import NATIVE_TEXT


@runtime_checkable
class NativeMarkLike(Protocol):
    """Read-only view of a mark."""

    @property
    def type(self) -> str: ...

    @property
    def attrs(self) -> Any: ...


@runtime_checkable
class NativeNodeLike(Protocol):
    """Read-only view of a native node."""

    @property
    def type(self) -> str: ...

    @property
    def attrs(self) -> Any: ...

    @property
    def marks(self) -> Sequence[Any]: ...

    @property
    def content(self) -> Sequence[Any]: ...

    @property
    def text(self) -> Optional[str]: ...


@dataclass(frozen=True)
class NativeMark:
    """A mark applied to a text node."""

    type: str
    attrs: dict[str, Any] = field(default_factory=dict)


@dataclass
class NativeNode:
    """A node of the native tree.

    Parameters
    ----------
    type : str
        Node type name
    attrs : dict, default = empty dict
        Node attributes
    content : list of NativeNode, default = empty list
        Child nodes
    marks : list of NativeMark, default = empty list
        Marks (text nodes only)
    text : str or None, default = None
        Text of a text node

    """

    type: str
    attrs: dict[str, Any] = field(default_factory=dict)
    content: list[NativeNode] = field(default_factory=list)
    marks: list[NativeMark] = field(default_factory=list)
    text: Optional[str] = None

    @classmethod
    def text_node(cls, text: str, marks: Optional[list[NativeMark]] = None) -> NativeNode:
        return cls(type=NATIVE_TEXT, text=text, marks=list(marks or []))

    @property
    def is_text(self) -> bool:
        return self.type == NATIVE_TEXT

    @property
    def text_content(self) -> str:
        """Concatenated text of all descendant text nodes."""
        if self.is_text:
            return self.text or ""
        return "".join(child.text_content for child in self.content)
