#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Pytest configuration and shared fixtures for the blockmark test suite.

This module provides the schemas and id factories shared by the unit and
integration tests.
"""

from typing import Callable

import pytest

from blockmark.schema import (
    BlockTypeSpec,
    InlineContentTypeSpec,
    PropSpec,
    SchemaRegistry,
    StyleTypeSpec,
    default_schema,
)
from blockmark.schema.defaults import DEFAULT_PROPS


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")


@pytest.fixture
def schema() -> SchemaRegistry:
    """Provide the built-in schema.

    Returns
    -------
    SchemaRegistry
        A freshly linked default registry

    """
    return default_schema()


@pytest.fixture
def custom_schema(schema: SchemaRegistry) -> SchemaRegistry:
    """Provide the built-in schema extended with caller-defined types.

    Adds an ``alert`` block (prop ``kind``, no external mapping), a
    ``mention`` inline content type and a ``highlight`` string style.

    """
    return schema.extend(
        blocks=[
            BlockTypeSpec(
                name="alert",
                prop_schema={**DEFAULT_PROPS, "kind": PropSpec(default="info", values=("info", "warning", "error"))},
            ),
        ],
        inline_content=[
            InlineContentTypeSpec(name="mention", prop_schema={"user": PropSpec(default="")}),
        ],
        styles=[StyleTypeSpec(name="highlight", value_type="string")],
    )


@pytest.fixture
def id_factory() -> Callable[[], str]:
    """Provide a deterministic id factory yielding ``id-1``, ``id-2``, ..."""
    counter = {"next": 0}

    def make_id() -> str:
        counter["next"] += 1
        return f"id-{counter['next']}"

    return make_id
