"""Root pytest configuration and fixtures.

This module provides:
- Environment setup (loads .env)
- Isolation of IRTREE_* settings so every test starts from the defaults
- Shared registry and sample tree fixtures
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any

import pytest
from dotenv import load_dotenv

from irtree.config import EnvVar

if TYPE_CHECKING:
    from irtree.ir import IRNode
    from irtree.schema import SchemaRegistry

# Load environment variables from .env file
load_dotenv()


# =============================================================================
# Environment Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def default_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear IRTREE_* variables; tests opt back in with monkeypatch.setenv."""
    for var in EnvVar:
        if var.value.name in os.environ:
            monkeypatch.delenv(var.value.name)


# =============================================================================
# Common Test Fixtures
# =============================================================================


@pytest.fixture
def registry() -> SchemaRegistry:
    """Fresh default registry (Row, Stack, Button)."""
    from irtree.schema import create_default_registry

    return create_default_registry()


@pytest.fixture
def sample_tree_wire() -> dict[str, Any]:
    """A small valid toolbar layout in wire form.

    Returns:
        page(Stack) -> [toolbar(Row) -> [save, cancel {icon: [cancel-icon]}],
        body(Stack)]
    """
    return {
        "id": "page",
        "type": "Stack",
        "properties": {"gap": "lg"},
        "children": [
            {
                "id": "toolbar",
                "type": "Row",
                "properties": {"alignItems": "center"},
                "children": [
                    {
                        "id": "save",
                        "type": "Button",
                        "properties": {"label": "Save"},
                        "children": [],
                        "slots": {},
                    },
                    {
                        "id": "cancel",
                        "type": "Button",
                        "properties": {"variant": "secondary", "label": "Cancel"},
                        "children": [],
                        "slots": {
                            "icon": [
                                {
                                    "id": "cancel-icon",
                                    "type": "Button",
                                    "properties": {"ariaLabel": "close"},
                                }
                            ]
                        },
                    },
                ],
            },
            {"id": "body", "type": "Stack", "properties": {}, "children": []},
        ],
    }


@pytest.fixture
def sample_tree(sample_tree_wire: dict[str, Any]) -> IRNode:
    """The sample layout as an IRNode tree."""
    from irtree.ir import IRNode

    return IRNode.from_wire(sample_tree_wire)
