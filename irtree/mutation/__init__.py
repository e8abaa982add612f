"""Node creation, tree searches and in-place structural edits."""

from irtree.mutation.lib import (
    MoveMode,
    NodeOptions,
    PathSegment,
    SlotPosition,
    TreeEntry,
    UniqueIdReport,
    add_child,
    add_to_slot,
    clone_node,
    create_document,
    create_node,
    find_by_id,
    find_parent,
    generate_id,
    get_all_ids,
    get_depth,
    get_path,
    move,
    remove,
    update_properties,
    validate_unique_ids,
    walk,
)

__all__ = [
    # Types
    "MoveMode",
    "NodeOptions",
    "SlotPosition",
    "PathSegment",
    "TreeEntry",
    "UniqueIdReport",
    # Creation
    "generate_id",
    "create_node",
    "create_document",
    "clone_node",
    # Searches
    "walk",
    "find_by_id",
    "find_parent",
    "get_path",
    "get_depth",
    "get_all_ids",
    "validate_unique_ids",
    # Edits
    "add_child",
    "add_to_slot",
    "remove",
    "move",
    "update_properties",
]
