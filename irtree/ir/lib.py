"""Core IR models for the editable component tree.

This module defines the Intermediate Representation (IR) node that the visual
editor mutates and the renderer reads. A node carries its identity, a type tag
naming a registered component kind, free-form properties, an ordered default
slot (``children``) and optional named slots.

The models carry no structural behaviour. Searches and edits live in
``irtree.mutation``; schema checks live in ``irtree.validation``.
"""

import copy
from datetime import UTC, datetime
from typing import Any, Iterator

from pydantic import AliasChoices, BaseModel, Field

IR_VERSION = "1.0.0"


class TreeContractError(TypeError):
    """Raised when a caller hands the engine something that is not a tree."""


class IRNode(BaseModel):
    """Recursive node definition for the component tree.

    Attributes:
        id: Identifier, unique across the whole tree for a well-formed tree.
        type: Component type tag; open-ended, resolved through a registry.
        properties: Type-specific values (layout hints, variant, content).
        children: Default slot. ``None`` for types that cannot contain.
        slots: Named slots for structured composition (icon, content, ...).

    Example:
        >>> node = IRNode(
        ...     id="save",
        ...     type="Button",
        ...     properties={"variant": "primary"},
        ...     children=[],
        ...     slots={},
        ... )
    """

    id: str = Field(..., description="Unique identifier for the node")
    type: str = Field(..., description="Registered component type name")
    properties: dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("properties", "props"),
        description="Type-specific property values",
    )
    children: list["IRNode"] | None = Field(
        default=None,
        description="Default slot: ordered child nodes",
    )
    slots: dict[str, list["IRNode"]] | None = Field(
        default=None,
        description="Named slots mapping slot name to ordered child nodes",
    )

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> "IRNode":
        """Build a node tree from its plain-data wire form.

        Accepts ``props`` as a legacy spelling of ``properties``.

        Raises:
            pydantic.ValidationError: If the data does not describe a node.
        """
        return cls.model_validate(data)

    def to_wire(self) -> dict[str, Any]:
        """Convert the subtree to plain nested data.

        Absent containers are omitted, empty ones are kept, so a round trip
        preserves the difference between "cannot contain" and "contains
        nothing yet". Built level by level without recursion, so any depth
        converts.
        """
        wire = _wire_head(self)
        stack: list[tuple[IRNode, dict[str, Any]]] = [(self, wire)]
        while stack:
            node, data = stack.pop()
            if node.children is not None:
                data["children"] = []
                for child in node.children:
                    child_data = _wire_head(child)
                    data["children"].append(child_data)
                    stack.append((child, child_data))
            if node.slots is not None:
                data["slots"] = {}
                for name, members in node.slots.items():
                    data["slots"][name] = []
                    for member in members:
                        member_data = _wire_head(member)
                        data["slots"][name].append(member_data)
                        stack.append((member, member_data))
        return wire

    def clone(self) -> "IRNode":
        """Deep structural duplicate of the subtree.

        Ids are kept; properties are deep-copied, so the duplicate shares no
        mutable state with the original. Works at any depth.
        """
        duplicate = _node_head(self)
        stack: list[tuple[IRNode, IRNode]] = [(self, duplicate)]
        while stack:
            source, target = stack.pop()
            if source.children is not None:
                target.children = []
                for child in source.children:
                    child_copy = _node_head(child)
                    target.children.append(child_copy)
                    stack.append((child, child_copy))
            if source.slots is not None:
                target.slots = {}
                for name, members in source.slots.items():
                    target.slots[name] = []
                    for member in members:
                        member_copy = _node_head(member)
                        target.slots[name].append(member_copy)
                        stack.append((member, member_copy))
        return duplicate

    def iter_direct_children(self) -> Iterator[tuple[str | None, int, "IRNode"]]:
        """Yield ``(slot_name, index, child)`` for every direct child.

        Default-slot children come first with ``slot_name`` None, then named
        slots in insertion order.
        """
        for index, child in enumerate(self.children or ()):
            yield None, index, child
        for name, members in (self.slots or {}).items():
            for index, member in enumerate(members):
                yield name, index, member


def _wire_head(node: IRNode) -> dict[str, Any]:
    return {"id": node.id, "type": node.type, "properties": dict(node.properties)}


def _node_head(node: IRNode) -> IRNode:
    """Copy of a node without its containers."""
    return IRNode(id=node.id, type=node.type, properties=copy.deepcopy(node.properties))


class DocumentMeta(BaseModel):
    """Bookkeeping for a persisted tree. The version is informational only."""

    version: str = Field(default=IR_VERSION)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class IRDocument(BaseModel):
    """A root node together with its metadata envelope."""

    meta: DocumentMeta = Field(default_factory=DocumentMeta)
    root: IRNode

    def touch(self) -> None:
        """Mark the document as modified now."""
        self.meta.updated_at = datetime.now(UTC)

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> "IRDocument":
        return cls.model_validate(data)

    def to_wire(self) -> dict[str, Any]:
        return {
            "meta": self.meta.model_dump(mode="json"),
            "root": self.root.to_wire(),
        }


def export_json_schema() -> dict:
    """Export the IRNode JSON Schema.

    Returns:
        dict: JSON Schema representation of IRNode.

    Example:
        >>> schema = export_json_schema()
        >>> schema["$defs"]["IRNode"]["title"]
        'IRNode'
    """
    return IRNode.model_json_schema()


__all__ = [
    "IR_VERSION",
    "TreeContractError",
    "IRNode",
    "DocumentMeta",
    "IRDocument",
    "export_json_schema",
]
