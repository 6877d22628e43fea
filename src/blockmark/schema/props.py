#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blockmark/schema/props.py
"""Typed property descriptors.

A :class:`PropSpec` declares the domain of one property of a block or inline
content type: its default, and either an enumerated value set or a validator.
The descriptor also knows how to move values across the two boundaries the
converters use:

- native tree attributes (``to_attr`` / ``from_attr``), passthrough unless a
  custom serializer/parser is declared;
- markup data attributes (``to_markup`` / ``from_markup``), always strings.

Parsing never raises. Values outside the domain raise
:class:`~blockmark.exceptions.InvalidPropValue` inside :meth:`PropSpec.validate`
and are replaced by the default in :meth:`PropSpec.coerce`.

"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from blockmark.exceptions import InvalidPropValue

logger = logging.getLogger(__name__)

PropValue = Any

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def kebab_case(name: str) -> str:
    """Convert a camelCase prop name to the kebab-case used in data attributes.

    >>> kebab_case("textColor")
    'text-color'

    """
    return _CAMEL_BOUNDARY.sub(r"-\1", name).lower()


@dataclass(frozen=True)
class PropSpec:
    """Declared domain of a single property.

    Parameters
    ----------
    default : bool, int, float or str
        Value used when the prop is missing or invalid. Its Python type is the
        prop's value type.
    values : tuple or None, default None
        Enumerated set of allowed values
    validator : callable or None, default None
        Predicate accepting a (type-converted) value
    serializer : callable or None, default None
        Custom conversion to a native tree attribute value
    parser : callable or None, default None
        Custom conversion from a native tree attribute value

    """

    default: PropValue
    values: Optional[tuple[PropValue, ...]] = None
    validator: Optional[Callable[[PropValue], bool]] = None
    serializer: Optional[Callable[[PropValue], Any]] = None
    parser: Optional[Callable[[Any], PropValue]] = None

    def __post_init__(self) -> None:
        """Check that the default lies in its own domain.

        Raises
        ------
        ValueError
            If the default is not an allowed value.

        """
        if not isinstance(self.default, (bool, int, float, str)):
            raise ValueError(f"Prop defaults must be bool, int, float or str, got {type(self.default).__name__}")
        if self.values is not None and self.default not in self.values:
            raise ValueError(f"Default {self.default!r} is not one of the allowed values {self.values!r}")

    @property
    def value_type(self) -> type:
        """Python type of the prop's values, taken from the default."""
        return type(self.default)

    def validate(self, value: PropValue, name: str = "") -> PropValue:
        """Return ``value`` if it lies in the domain.

        Raises
        ------
        InvalidPropValue
            If the value has the wrong type, is not an enumerated value or
            fails the validator.

        """
        expected = self.value_type
        if expected is float and isinstance(value, int) and not isinstance(value, bool):
            value = float(value)
        if type(value) is not expected:
            raise InvalidPropValue(name, value, f"Prop '{name}' expects {expected.__name__}, got {value!r}")
        if self.values is not None and value not in self.values:
            raise InvalidPropValue(name, value)
        if self.validator is not None and not self.validator(value):
            raise InvalidPropValue(name, value)
        return value

    def convert(self, raw: Any) -> PropValue:
        """Convert a raw (often string) value to the prop's value type.

        Raises
        ------
        InvalidPropValue
            If the raw value cannot be converted.

        """
        expected = self.value_type
        if raw is None:
            raise InvalidPropValue("", raw, "Missing prop value")
        if isinstance(raw, expected) and not (expected is not bool and isinstance(raw, bool)):
            return raw
        text = str(raw).strip()
        try:
            if expected is bool:
                lowered = text.lower()
                if lowered in ("true", "1", ""):
                    return True
                if lowered in ("false", "0"):
                    return False
                raise ValueError(text)
            if expected is int:
                return int(text)
            if expected is float:
                return float(text)
        except ValueError as e:
            raise InvalidPropValue("", raw, f"Cannot convert {raw!r} to {expected.__name__}") from e
        return text

    def coerce(self, raw: Any, name: str = "") -> PropValue:
        """Convert and validate ``raw``, falling back to the default.

        Parameters
        ----------
        raw : Any
            Raw value (native attribute, markup string or user input)
        name : str, default ""
            Prop name used in log messages

        Returns
        -------
        bool, int, float or str
            A value inside the prop's domain

        """
        if raw is None:
            return self.default
        try:
            return self.validate(self.convert(raw), name)
        except InvalidPropValue as e:
            logger.debug("Prop '%s': %s; using default %r", name, e.message, self.default)
            return self.default

    def to_attr(self, value: PropValue) -> Any:
        """Serialize a value into a native tree attribute."""
        return self.serializer(value) if self.serializer is not None else value

    def from_attr(self, raw: Any, name: str = "") -> PropValue:
        """Parse a native tree attribute, falling back to the default."""
        if raw is not None and self.parser is not None:
            try:
                raw = self.parser(raw)
            except (TypeError, ValueError) as e:
                logger.debug("Prop '%s': parser rejected %r (%s); using default", name, raw, e)
                return self.default
        return self.coerce(raw, name)

    def to_markup(self, value: PropValue) -> str:
        """Serialize a value into a markup data attribute string."""
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    def from_markup(self, raw: Optional[str], name: str = "") -> PropValue:
        """Parse a markup attribute string, falling back to the default."""
        return self.coerce(raw, name)


PropSchema = Mapping[str, PropSpec]


def normalize_props(prop_schema: PropSchema, props: Mapping[str, Any] | None, type_name: str = "") -> dict[str, Any]:
    """Fill defaults and replace invalid values according to ``prop_schema``.

    Props not declared in the schema are dropped.

    Parameters
    ----------
    prop_schema : Mapping[str, PropSpec]
        Declared props of the type
    props : Mapping[str, Any] or None
        Props supplied by the caller
    type_name : str, default ""
        Type name used in log messages

    Returns
    -------
    dict[str, Any]
        Props holding exactly the declared names

    """
    props = props or {}
    for name in props:
        if name not in prop_schema:
            logger.debug("Dropping undeclared prop '%s' on type '%s'", name, type_name)
    return {name: spec.coerce(props.get(name), name) for name, spec in prop_schema.items()}
