#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the blockmark library.

This module defines the exception classes raised while building schemas and
converting documents. Only schema-construction errors are meant to reach the
caller; the conversion errors are raised internally and absorbed at the
documented recovery points (fallback container, fallback paragraph, default
prop value).

Exception Hierarchy
-------------------
- BlockmarkError (base exception)

  - SchemaError (schema construction, fatal)
    - DuplicateTypeError (type name declared twice)
    - UnresolvedReferenceError (declared-but-undefined type, unknown reference)
    - SchemaFrozenError (registration after linking)

  - ConversionError (runtime conversion, recoverable)
    - SchemaMismatch (type without a registered spec)
    - InvalidPropValue (prop value outside its declared domain)
    - MarkupParseError (malformed markup or Markdown)
    - UnsupportedConversion (type without a projection in the target format)

"""

from __future__ import annotations

from typing import Any


class BlockmarkError(Exception):
    """Base exception class for all blockmark-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class SchemaError(BlockmarkError):
    """Exception raised when a schema cannot be constructed.

    Parameters
    ----------
    message : str
        Description of the schema error
    type_name : str, optional
        Name of the type involved
    kind : str, optional
        Type kind ("block", "inlineContent" or "style")
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        type_name: str | None = None,
        kind: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the schema error with type details."""
        super().__init__(message, original_error=original_error)
        self.type_name = type_name
        self.kind = kind


class DuplicateTypeError(SchemaError):
    """Exception raised when a type name is declared twice within one kind."""

    def __init__(self, type_name: str, kind: str):
        """Initialize the duplicate type error."""
        super().__init__(f"{kind} type '{type_name}' is already declared", type_name=type_name, kind=kind)


class UnresolvedReferenceError(SchemaError):
    """Exception raised when linking finds a missing definition or reference.

    Parameters
    ----------
    message : str
        Description of the unresolved reference
    type_name : str
        Name of the type that could not be resolved
    kind : str
        Kind the name was expected in
    referenced_by : str, optional
        Name of the type holding the dangling reference

    """

    def __init__(self, message: str, type_name: str, kind: str, referenced_by: str | None = None):
        """Initialize the unresolved reference error."""
        super().__init__(message, type_name=type_name, kind=kind)
        self.referenced_by = referenced_by


class SchemaFrozenError(SchemaError):
    """Exception raised when declaring or defining types after linking."""


class ConversionError(BlockmarkError):
    """Base exception for recoverable conversion failures."""


class SchemaMismatch(ConversionError):
    """Exception raised when a type has no registered spec.

    Parameters
    ----------
    type_name : str
        The unresolved type name
    kind : str
        Kind the name was looked up in
    message : str, optional
        Custom error message

    """

    def __init__(self, type_name: str, kind: str, message: str | None = None):
        """Initialize the schema mismatch error."""
        if message is None:
            message = f"No {kind} type named '{type_name}' is registered in the schema"
        super().__init__(message)
        self.type_name = type_name
        self.kind = kind


class InvalidPropValue(ConversionError):
    """Exception raised when a prop value falls outside its declared domain.

    Parameters
    ----------
    prop_name : str
        Name of the prop (may be empty when unknown)
    value : Any
        The rejected value
    message : str, optional
        Custom error message

    """

    def __init__(self, prop_name: str, value: Any, message: str | None = None):
        """Initialize the invalid prop value error."""
        if message is None:
            message = f"Value {value!r} is outside the domain of prop '{prop_name}'"
        super().__init__(message)
        self.prop_name = prop_name
        self.value = value


class MarkupParseError(ConversionError):
    """Exception raised for malformed markup or Markdown input.

    Parameters
    ----------
    message : str
        Description of the parse failure
    fragment : str, optional
        The offending input fragment, kept so callers can fall back to literal text
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, fragment: str = "", original_error: Exception | None = None):
        """Initialize the markup parse error."""
        super().__init__(message, original_error=original_error)
        self.fragment = fragment


class UnsupportedConversion(ConversionError):
    """Exception raised when a type has no projection in the target format.

    Parameters
    ----------
    type_name : str
        Name of the block or style type
    target : str
        Name of the target format (e.g. "external HTML")

    """

    def __init__(self, type_name: str, target: str):
        """Initialize the unsupported conversion error."""
        super().__init__(f"Type '{type_name}' has no {target} mapping")
        self.type_name = type_name
        self.target = target
