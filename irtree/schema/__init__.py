"""Schema module - component type definitions and the schema registry.

This module provides:
- Type definitions with slots, child ceilings and default properties
- The SchemaRegistry answering containment and slot-legality queries
- A factory for the default component set

Example usage:
    >>> from irtree.schema import create_default_registry
    >>> registry = create_default_registry()
    >>> registry.is_slot_allowed("Row", "anything")
    True
"""

from .lib import (
    DEFAULT_TYPE_DEFINITIONS,
    MAIN_SLOT,
    DefaultType,
    Layout,
    SchemaRegistry,
    TypeDefinition,
    create_default_registry,
    define_type,
)

__all__ = [
    # Enums
    "Layout",
    "DefaultType",
    # Definitions
    "MAIN_SLOT",
    "TypeDefinition",
    "DEFAULT_TYPE_DEFINITIONS",
    "define_type",
    # Registry
    "SchemaRegistry",
    "create_default_registry",
]
