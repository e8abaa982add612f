"""Node factory, tree searches and structural edits.

Every operation works in place on a shared `IRNode` tree and fails soft:
lookups return None (or -1 for depth) and edits return False when their target
is missing. Edits never consult the schema, so a tree may be transiently
invalid between steps of a multi-step edit; run the validator when legality
matters.

Search order is the same everywhere: pre-order, a node's default-slot children
before its named slots, slot names in insertion order. If the tree holds
duplicate ids, the first node in that order wins, which is deterministic but
not necessarily the node the caller meant.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Literal, NamedTuple
from uuid import uuid4

from irtree.config import get_id_prefix, get_move_mode
from irtree.ir import IRDocument, IRNode, TreeContractError
from irtree.schema import DefaultType, SchemaRegistry, create_default_registry

logger = logging.getLogger(__name__)

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


class MoveMode(str, Enum):
    """How `move` orders its steps.

    - FAITHFUL: remove the original, then look up the destination. A missing
      destination loses the node.
    - TRANSACTIONAL: check the destination first; on failure nothing changes.
    """

    FAITHFUL = "faithful"
    TRANSACTIONAL = "transactional"


@dataclass
class NodeOptions:
    """Options for `create_node`.

    Attributes:
        auto_generate_ids: Use `generate_id`. When False a plain
            ``{type}-{milliseconds}`` id without a random part is used.
        id_prefix: Prefix for generated ids; configured prefix if None.
        node_id: Explicit id; takes precedence over both schemes.
    """

    auto_generate_ids: bool = True
    id_prefix: str | None = None
    node_id: str | None = None


@dataclass
class SlotPosition:
    """Destination inside a new parent for `move`.

    ``kind="slot"`` with a ``slot_name`` targets that named slot; anything
    else targets the default slot.
    """

    kind: Literal["children", "slot"] = "children"
    slot_name: str | None = None
    index: int | None = None


class PathSegment(NamedTuple):
    """One step from a parent to a child."""

    container: Literal["children", "slots"]
    slot_name: str | None
    index: int


class TreeEntry(NamedTuple):
    """A node visited by `walk`, with its location."""

    node: IRNode
    parent: IRNode | None
    slot_name: str | None
    index: int
    depth: int


@dataclass
class UniqueIdReport:
    """Result of `validate_unique_ids`."""

    is_valid: bool
    duplicates: set[str]


def _require_node(root: Any, name: str = "root") -> None:
    if not isinstance(root, IRNode):
        raise TreeContractError(f"{name} must be an IRNode, got {type(root).__name__}")


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def _now_ms() -> int:
    return int(time.time() * 1000)


# =============================================================================
# Creation
# =============================================================================


def generate_id(type_name: str, prefix: str | None = None) -> str:
    """Generate a probabilistically unique node id.

    Format: ``{prefix}-{type}-{base36 milliseconds}-{random}``.

    Args:
        type_name: Component type; lower-cased into the id.
        prefix: Leading segment. Defaults to the configured id prefix.

    Returns:
        str: The new id.

    Example:
        >>> generate_id("Button")
        'component-button-m1x9k2a0-3f9c1d2e'
    """
    return (
        f"{get_id_prefix(prefix)}-{type_name.lower()}-"
        f"{_to_base36(_now_ms())}-{uuid4().hex[:8]}"
    )


def create_node(
    type_name: str,
    properties: dict[str, Any] | None = None,
    options: NodeOptions | None = None,
    registry: SchemaRegistry | None = None,
) -> IRNode:
    """Create a node seeded for its type.

    The registry is read only to seed the node: default properties are
    overlaid by ``properties``, container-capable types get ``children=[]``,
    and types with a slot other than ``"main"`` also get ``slots={}``.

    Args:
        type_name: Component type name.
        properties: Caller properties, applied over the type defaults.
        options: Id generation options.
        registry: Schema used for seeding. A fresh default registry if omitted.

    Returns:
        IRNode: The new, unattached node.
    """
    options = options or NodeOptions()
    registry = registry if registry is not None else create_default_registry()

    if options.node_id is not None:
        node_id = options.node_id
    elif options.auto_generate_ids:
        node_id = generate_id(type_name, options.id_prefix)
    else:
        node_id = f"{type_name.lower()}-{_now_ms()}"

    node = IRNode(
        id=node_id,
        type=type_name,
        properties={**registry.default_properties(type_name), **(properties or {})},
    )

    definition = registry.get_type(type_name)
    if definition is not None and definition.can_have_children:
        node.children = []
        if definition.has_named_slots:
            node.slots = {}

    return node


def create_document(
    root: IRNode | None = None,
    registry: SchemaRegistry | None = None,
) -> IRDocument:
    """Wrap a root in a document; defaults to a fresh vertical container."""
    if root is None:
        root = create_node(DefaultType.STACK.value, registry=registry)
    return IRDocument(root=root)


def clone_node(node: IRNode) -> IRNode:
    """Deep structural duplicate of a subtree, sharing nothing with it."""
    _require_node(node, "node")
    return node.clone()


# =============================================================================
# Searches
# =============================================================================


def walk(root: IRNode) -> Iterator[TreeEntry]:
    """Iterate the tree in pre-order without recursion.

    Yields the root first (parent None, index -1), then every descendant.
    Mutating the tree while iterating is not supported.
    """
    _require_node(root)
    stack: list[TreeEntry] = [TreeEntry(root, None, None, -1, 0)]
    while stack:
        entry = stack.pop()
        yield entry
        node = entry.node
        # Push in reverse so the first child is visited first.
        below = [
            TreeEntry(child, node, slot_name, index, entry.depth + 1)
            for slot_name, index, child in node.iter_direct_children()
        ]
        stack.extend(reversed(below))


def find_by_id(root: IRNode, node_id: str) -> IRNode | None:
    """Find the first node with ``node_id`` in search order."""
    for entry in walk(root):
        if entry.node.id == node_id:
            return entry.node
    return None


def _locate(root: IRNode, node_id: str) -> TreeEntry | None:
    for entry in walk(root):
        if entry.node.id == node_id:
            return entry
    return None


def _locate_attached(root: IRNode, node_id: str) -> TreeEntry | None:
    """First match that lives in a container, i.e. skipping the root."""
    for entry in walk(root):
        if entry.parent is not None and entry.node.id == node_id:
            return entry
    return None


def find_parent(root: IRNode, node_id: str) -> IRNode | None:
    """Return the direct structural parent of ``node_id``.

    None if the id is the root's or is not in the tree.
    """
    entry = _locate(root, node_id)
    return entry.parent if entry is not None else None


def get_path(root: IRNode, node_id: str) -> list[PathSegment]:
    """Segments leading from the root to ``node_id``.

    Empty when the id is the root's or is absent; use `find_by_id` to tell
    those apart.
    """
    _require_node(root)
    # Parent links are only known during the walk, so record each node's
    # segment as it is visited and rebuild the chain from the target upward.
    came_from: dict[int, tuple[IRNode, PathSegment]] = {}
    for entry in walk(root):
        if entry.parent is not None:
            container = "children" if entry.slot_name is None else "slots"
            came_from[id(entry.node)] = (
                entry.parent,
                PathSegment(container, entry.slot_name, entry.index),
            )
        if entry.node.id == node_id:
            segments: list[PathSegment] = []
            current = entry.node
            while id(current) in came_from:
                current, segment = came_from[id(current)]
                segments.append(segment)
            segments.reverse()
            return segments
    return []


def get_depth(root: IRNode, node_id: str) -> int:
    """Depth of ``node_id`` (root is 0). Returns -1 when the id is absent."""
    entry = _locate(root, node_id)
    return entry.depth if entry is not None else -1


def get_all_ids(root: IRNode) -> list[str]:
    """Every id in the tree, in search order, duplicates included."""
    return [entry.node.id for entry in walk(root)]


def validate_unique_ids(root: IRNode) -> UniqueIdReport:
    """Report ids that occur more than once in the tree."""
    seen: set[str] = set()
    duplicates: set[str] = set()
    for node_id in get_all_ids(root):
        if node_id in seen:
            duplicates.add(node_id)
        else:
            seen.add(node_id)
    return UniqueIdReport(is_valid=not duplicates, duplicates=duplicates)


# =============================================================================
# Edits
# =============================================================================


def _insert(items: list[IRNode], child: IRNode, index: int | None) -> None:
    if index is not None and 0 <= index <= len(items):
        items.insert(index, child)
    else:
        items.append(child)


def add_child(parent: IRNode | None, child: IRNode, index: int | None = None) -> bool:
    """Insert ``child`` into the parent's default slot.

    Inserts at ``index`` when it lies within ``[0, len]``, otherwise appends.
    No schema check is made.

    Returns:
        bool: False only when ``parent`` is None.
    """
    if parent is None:
        return False
    _require_node(parent, "parent")
    _require_node(child, "child")
    if parent.children is None:
        parent.children = []
    _insert(parent.children, child, index)
    return True


def add_to_slot(
    parent: IRNode | None,
    slot_name: str,
    child: IRNode,
    index: int | None = None,
) -> bool:
    """Insert ``child`` into a named slot, creating the slot if needed.

    Same index rules as `add_child`. No schema check is made.
    """
    if parent is None:
        return False
    _require_node(parent, "parent")
    _require_node(child, "child")
    if parent.slots is None:
        parent.slots = {}
    _insert(parent.slots.setdefault(slot_name, []), child, index)
    return True


def _detach(entry: TreeEntry) -> None:
    parent = entry.parent
    if entry.slot_name is None:
        del parent.children[entry.index]
        return
    members = parent.slots[entry.slot_name]
    del members[entry.index]
    if not members:
        del parent.slots[entry.slot_name]


def remove(root: IRNode, node_id: str) -> bool:
    """Remove the first attached node with ``node_id``.

    A named slot emptied by the removal is deleted from ``slots``. The root
    itself is never removed.

    Returns:
        bool: False if no attached node has the id.
    """
    entry = _locate_attached(root, node_id)
    if entry is None:
        return False
    _detach(entry)
    logger.debug(f"Removed node '{node_id}'")
    return True


def _place(parent: IRNode, node: IRNode, position: SlotPosition | None) -> bool:
    if position is not None and position.kind == "slot" and position.slot_name:
        return add_to_slot(parent, position.slot_name, node, position.index)
    return add_child(parent, node, position.index if position else None)


def move(
    root: IRNode,
    node_id: str,
    new_parent_id: str,
    position: SlotPosition | None = None,
    mode: MoveMode | str | None = None,
) -> bool:
    """Relocate a node by duplicating its subtree and discarding the original.

    The moved node keeps its id. In FAITHFUL mode the steps are: find the
    node, duplicate it, remove the original, find the new parent, insert.
    This is not transactional: when the new parent cannot be found after the
    removal (absent, or inside the moved subtree) the node is gone from the
    tree and False is returned. TRANSACTIONAL mode resolves the destination
    first and leaves the tree untouched on any failure.

    Args:
        root: Tree root.
        node_id: Id of the node to move.
        new_parent_id: Id of the destination parent.
        position: Default slot or named slot, and insertion index.
        mode: Step ordering. Defaults to the configured move mode.

    Returns:
        bool: True if the node was attached at its destination.
    """
    _require_node(root)
    mode = MoveMode(mode if mode is not None else get_move_mode())

    entry = _locate_attached(root, node_id)
    if entry is None:
        return False

    if mode is MoveMode.TRANSACTIONAL:
        return _move_transactional(root, entry, node_id, new_parent_id, position)

    duplicate = clone_node(entry.node)
    _detach(entry)
    logger.debug(f"Removed node '{node_id}' for move")

    new_parent = find_by_id(root, new_parent_id)
    if new_parent is None:
        logger.warning(
            f"Move of '{node_id}' lost the node: destination '{new_parent_id}' "
            f"not found after removal"
        )
        return False

    return _place(new_parent, duplicate, position)


def _move_transactional(
    root: IRNode,
    entry: TreeEntry,
    node_id: str,
    new_parent_id: str,
    position: SlotPosition | None,
) -> bool:
    new_parent = find_by_id(root, new_parent_id)
    if new_parent is None:
        logger.debug(f"Move of '{node_id}' rejected: no node '{new_parent_id}'")
        return False

    # The removal below takes entry.node; the destination must survive it.
    if any(e.node is new_parent for e in walk(entry.node)):
        logger.debug(
            f"Move of '{node_id}' rejected: '{new_parent_id}' is inside the moved subtree"
        )
        return False

    duplicate = clone_node(entry.node)
    _detach(entry)
    return _place(new_parent, duplicate, position)


def update_properties(root: IRNode, node_id: str, patch: dict[str, Any]) -> bool:
    """Shallow-merge ``patch`` into a node's properties.

    Returns:
        bool: False if the id is not in the tree.
    """
    node = find_by_id(root, node_id)
    if node is None:
        return False
    node.properties = {**node.properties, **patch}
    return True


__all__ = [
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
