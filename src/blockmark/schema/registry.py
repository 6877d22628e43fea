#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blockmark/schema/registry.py
"""Two-phase schema registry.

Types are registered in two phases so that groups of types may reference each
other regardless of registration order:

1. ``declare`` every type name (per kind),
2. ``define`` the descriptors, which may reference any declared name,

after which ``link`` checks every reference and freezes the registry. A linked
registry is read-only; ``extend`` builds a new linked registry instead of
mutating the existing one.

Examples
--------
    >>> registry = SchemaRegistry()
    >>> registry.declare("block", "paragraph")
    >>> registry.define(BlockTypeSpec(name="paragraph"))
    >>> registry.link().resolve("paragraph", "block").name
    'paragraph'

"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Iterable, Mapping, Union, cast

from blockmark.constants import TYPE_KINDS, TypeKind
from blockmark.exceptions import (
    DuplicateTypeError,
    SchemaError,
    SchemaFrozenError,
    SchemaMismatch,
    UnresolvedReferenceError,
)
from blockmark.schema.specs import BlockTypeSpec, InlineContentTypeSpec, StyleTypeSpec

logger = logging.getLogger(__name__)

TypeSpec = Union[BlockTypeSpec, InlineContentTypeSpec, StyleTypeSpec]

_SPEC_KINDS: dict[type, TypeKind] = {
    BlockTypeSpec: "block",
    InlineContentTypeSpec: "inlineContent",
    StyleTypeSpec: "style",
}


def spec_kind(spec: TypeSpec) -> TypeKind:
    """Return the kind a descriptor registers under."""
    try:
        return _SPEC_KINDS[type(spec)]
    except KeyError as e:
        raise SchemaError(f"Unsupported spec class {type(spec).__name__}") from e


class SchemaRegistry:
    """Registry of block, inline content and style types."""

    def __init__(self) -> None:
        self._declared: dict[str, list[str]] = {kind: [] for kind in TYPE_KINDS}
        self._specs: dict[str, dict[str, TypeSpec]] = {kind: {} for kind in TYPE_KINDS}
        self._linked = False

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def _check_kind(self, kind: str) -> None:
        if kind not in TYPE_KINDS:
            raise SchemaError(f"Unknown type kind '{kind}'; expected one of {TYPE_KINDS}", kind=kind)

    def _check_open(self, action: str, type_name: str, kind: str) -> None:
        if self._linked:
            raise SchemaFrozenError(
                f"Cannot {action} {kind} type '{type_name}': the registry is already linked",
                type_name=type_name,
                kind=kind,
            )

    def declare(self, kind: TypeKind, name: str) -> None:
        """Declare a type name (phase one).

        Raises
        ------
        DuplicateTypeError
            If the name is already declared for this kind.
        SchemaFrozenError
            If the registry is linked.

        """
        self._check_kind(kind)
        self._check_open("declare", name, kind)
        if name in self._declared[kind]:
            raise DuplicateTypeError(name, kind)
        self._declared[kind].append(name)

    def define(self, spec: TypeSpec) -> None:
        """Attach a descriptor to a declared name (phase two).

        Raises
        ------
        UnresolvedReferenceError
            If the name was never declared.
        DuplicateTypeError
            If the name already has a descriptor.
        SchemaFrozenError
            If the registry is linked.

        """
        kind = spec_kind(spec)
        self._check_open("define", spec.name, kind)
        if spec.name not in self._declared[kind]:
            raise UnresolvedReferenceError(
                f"{kind} type '{spec.name}' must be declared before it is defined", spec.name, kind
            )
        if spec.name in self._specs[kind]:
            raise DuplicateTypeError(spec.name, kind)
        self._specs[kind][spec.name] = spec

    def link(self) -> SchemaRegistry:
        """Check all definitions and references, then freeze the registry.

        Returns
        -------
        SchemaRegistry
            ``self``, for chaining

        Raises
        ------
        UnresolvedReferenceError
            If a declared type has no descriptor, or a descriptor references an
            undeclared type.

        """
        if self._linked:
            return self

        for kind in TYPE_KINDS:
            for name in self._declared[kind]:
                if name not in self._specs[kind]:
                    raise UnresolvedReferenceError(f"{kind} type '{name}' was declared but never defined", name, kind)

        for spec in self.blocks.values():
            for child in spec.allowed_children or ():
                self._check_reference(child, "block", spec.name)
            if spec.content == "table":
                for cell_type in spec.cell_content:
                    self._check_reference(cell_type, "inlineContent", spec.name)

        self._linked = True
        logger.debug(
            "Linked schema with %d block, %d inline content and %d style types",
            len(self._specs["block"]),
            len(self._specs["inlineContent"]),
            len(self._specs["style"]),
        )
        return self

    def _check_reference(self, name: str, kind: TypeKind, referenced_by: str) -> None:
        if name not in self._declared[kind]:
            raise UnresolvedReferenceError(
                f"Block type '{referenced_by}' references undeclared {kind} type '{name}'",
                name,
                kind,
                referenced_by=referenced_by,
            )

    @property
    def linked(self) -> bool:
        """Whether the registry has been linked (and is read-only)."""
        return self._linked

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_specs(
        cls,
        blocks: Iterable[BlockTypeSpec] = (),
        inline_content: Iterable[InlineContentTypeSpec] = (),
        styles: Iterable[StyleTypeSpec] = (),
    ) -> SchemaRegistry:
        """Build and link a registry from descriptors in one call."""
        specs: list[TypeSpec] = [*blocks, *inline_content, *styles]
        registry = cls()
        for spec in specs:
            registry.declare(spec_kind(spec), spec.name)
        for spec in specs:
            registry.define(spec)
        return registry.link()

    def extend(
        self,
        blocks: Iterable[BlockTypeSpec] = (),
        inline_content: Iterable[InlineContentTypeSpec] = (),
        styles: Iterable[StyleTypeSpec] = (),
    ) -> SchemaRegistry:
        """Return a new linked registry holding these specs plus the given ones.

        Raises
        ------
        DuplicateTypeError
            If a new spec reuses an existing name.

        """
        return SchemaRegistry.from_specs(
            blocks=[*self.blocks.values(), *blocks],  # type: ignore[list-item]
            inline_content=[*self.inline_content.values(), *inline_content],  # type: ignore[list-item]
            styles=[*self.styles.values(), *styles],  # type: ignore[list-item]
        )

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def resolve(self, name: str, kind: TypeKind = "block") -> TypeSpec:
        """Return the descriptor registered for ``name``.

        Raises
        ------
        SchemaError
            If the registry has not been linked yet.
        SchemaMismatch
            If no such type is registered.

        """
        self._check_kind(kind)
        if not self._linked:
            raise SchemaError("The registry must be linked before types can be resolved", type_name=name, kind=kind)
        try:
            return self._specs[kind][name]
        except KeyError:
            raise SchemaMismatch(name, kind) from None

    def resolve_block(self, name: str) -> BlockTypeSpec:
        """Typed shortcut for ``resolve(name, "block")``."""
        return cast(BlockTypeSpec, self.resolve(name, "block"))

    def resolve_style(self, name: str) -> StyleTypeSpec:
        """Typed shortcut for ``resolve(name, "style")``."""
        return cast(StyleTypeSpec, self.resolve(name, "style"))

    def resolve_inline(self, name: str) -> InlineContentTypeSpec:
        """Typed shortcut for ``resolve(name, "inlineContent")``."""
        return cast(InlineContentTypeSpec, self.resolve(name, "inlineContent"))

    def has(self, name: str, kind: TypeKind = "block") -> bool:
        return name in self._specs.get(kind, {})

    @property
    def blocks(self) -> Mapping[str, BlockTypeSpec]:
        return MappingProxyType(self._specs["block"])  # type: ignore[arg-type]

    @property
    def inline_content(self) -> Mapping[str, InlineContentTypeSpec]:
        return MappingProxyType(self._specs["inlineContent"])  # type: ignore[arg-type]

    @property
    def styles(self) -> Mapping[str, StyleTypeSpec]:
        return MappingProxyType(self._specs["style"])  # type: ignore[arg-type]

    def __repr__(self) -> str:
        state = "linked" if self._linked else "open"
        return (
            f"SchemaRegistry({state}, blocks={list(self._specs['block'])}, "
            f"inline_content={list(self._specs['inlineContent'])}, styles={list(self._specs['style'])})"
        )
