"""irtree: editable component trees with schema-driven validation."""

from irtree.ir import IRDocument, IRNode, TreeContractError, export_json_schema
from irtree.mutation import (
    MoveMode,
    NodeOptions,
    SlotPosition,
    add_child,
    add_to_slot,
    clone_node,
    create_document,
    create_node,
    find_by_id,
    find_parent,
    get_depth,
    get_path,
    move,
    remove,
    update_properties,
)
from irtree.schema import SchemaRegistry, TypeDefinition, create_default_registry
from irtree.validation import IRValidator, ValidationResult, is_valid, validate_tree

__all__ = [
    # IR
    "IRNode",
    "IRDocument",
    "TreeContractError",
    "export_json_schema",
    # Schema
    "SchemaRegistry",
    "TypeDefinition",
    "create_default_registry",
    # Validation
    "IRValidator",
    "ValidationResult",
    "validate_tree",
    "is_valid",
    # Mutation
    "MoveMode",
    "NodeOptions",
    "SlotPosition",
    "create_node",
    "create_document",
    "clone_node",
    "find_by_id",
    "find_parent",
    "get_path",
    "get_depth",
    "add_child",
    "add_to_slot",
    "remove",
    "move",
    "update_properties",
]
