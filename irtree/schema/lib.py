"""Authoritative Schema Module for component type definitions.

This module is the single source of schema knowledge for the tree engine. It
provides:
- Type definitions (slots, child ceilings, containment, default properties)
- A registry answering containment and slot-legality queries
- The default component set (Row, Stack, Button)

Registries are plain instances. There is no process-wide default schema;
callers build one with `create_default_registry()` and pass it where needed.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping

logger = logging.getLogger(__name__)

MAIN_SLOT = "main"


class Layout(str, Enum):
    """Presentational flow hint for a component's children.

    Not enforced structurally:
    - HORIZONTAL: Children flow left-to-right (flex-row)
    - VERTICAL: Children flow top-to-bottom (flex-col)
    - NONE: No flow of its own (interactive elements)
    """

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    NONE = "none"


class DefaultType(str, Enum):
    """Component types shipped with the default registry."""

    ROW = "Row"
    STACK = "Stack"
    BUTTON = "Button"


@dataclass(frozen=True)
class TypeDefinition:
    """Schema metadata for one component type.

    Attributes:
        type: Type name as it appears in ``IRNode.type``.
        layout: Presentational flow hint.
        allowed_slots: Ordered slot names. Listing ``"main"`` admits any name.
        max_children: Default-slot ceiling. ``None`` means unbounded.
        can_have_children: Whether the type may contain other nodes at all.
        default_properties: Seed values for newly created nodes.
        forbidden_child_types: Types this one must never contain.
        description: Human-readable summary.
    """

    type: str
    layout: Layout = Layout.NONE
    allowed_slots: tuple[str, ...] = ()
    max_children: int | None = None
    can_have_children: bool = False
    default_properties: Mapping[str, Any] = field(default_factory=dict)
    forbidden_child_types: tuple[str, ...] = ()
    description: str = ""

    def __post_init__(self) -> None:
        # Stored as immutable forms; definitions are shared between registries.
        object.__setattr__(self, "allowed_slots", tuple(self.allowed_slots))
        object.__setattr__(
            self, "forbidden_child_types", tuple(self.forbidden_child_types)
        )
        object.__setattr__(
            self,
            "default_properties",
            MappingProxyType(dict(self.default_properties)),
        )
        object.__setattr__(self, "layout", Layout(self.layout))

    @property
    def has_named_slots(self) -> bool:
        """True when the type declares a slot other than ``"main"``."""
        return any(name != MAIN_SLOT for name in self.allowed_slots)

    def to_dict(self) -> dict[str, Any]:
        """Convert the definition to plain data for export."""
        return {
            "type": self.type,
            "layout": self.layout.value,
            "allowed_slots": list(self.allowed_slots),
            "max_children": self.max_children,
            "can_have_children": self.can_have_children,
            "default_properties": dict(self.default_properties),
            "forbidden_child_types": list(self.forbidden_child_types),
            "description": self.description,
        }


DEFAULT_TYPE_DEFINITIONS: tuple[TypeDefinition, ...] = (
    TypeDefinition(
        type=DefaultType.ROW.value,
        layout=Layout.HORIZONTAL,
        allowed_slots=(MAIN_SLOT,),
        max_children=None,
        can_have_children=True,
        default_properties={
            "gap": "md",
            "alignItems": "center",
            "justifyContent": "start",
        },
        description="Horizontal layout container",
    ),
    TypeDefinition(
        type=DefaultType.STACK.value,
        layout=Layout.VERTICAL,
        allowed_slots=(MAIN_SLOT,),
        max_children=None,
        can_have_children=True,
        default_properties={
            "gap": "md",
            "alignItems": "start",
            "justifyContent": "start",
        },
        description="Vertical layout container",
    ),
    TypeDefinition(
        type=DefaultType.BUTTON.value,
        layout=Layout.NONE,
        allowed_slots=(MAIN_SLOT, "icon", "content"),
        max_children=None,
        can_have_children=True,
        default_properties={
            "variant": "primary",
            "size": "md",
            "disabled": False,
        },
        forbidden_child_types=(DefaultType.ROW.value, DefaultType.STACK.value),
        description="Interactive element with icon and content slots",
    ),
)


class SchemaRegistry:
    """Open mapping from type name to its definition.

    Answers every structural question the validator asks. Registration order is
    preserved in listings.

    Example:
        >>> registry = create_default_registry()
        >>> registry.can_contain("Row", "Button")
        True
        >>> registry.can_contain("Button", "Row")
        False
    """

    def __init__(self, definitions: Iterable[TypeDefinition] = ()) -> None:
        self._types: dict[str, TypeDefinition] = {}
        for definition in definitions:
            self.register_type(definition)

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._types

    def __len__(self) -> int:
        return len(self._types)

    def __repr__(self) -> str:
        return f"SchemaRegistry(types={list(self._types)!r})"

    # --- registration -----------------------------------------------------

    def register_type(self, definition: TypeDefinition) -> None:
        """Add or replace a type definition."""
        if definition.type in self._types:
            logger.debug(f"Replacing type definition '{definition.type}'")
        else:
            logger.debug(f"Registering type definition '{definition.type}'")
        self._types[definition.type] = definition

    def unregister_type(self, type_name: str) -> bool:
        """Remove a type definition. Returns False if it was not registered."""
        if type_name not in self._types:
            return False
        del self._types[type_name]
        logger.debug(f"Unregistered type definition '{type_name}'")
        return True

    def with_types(self, *definitions: TypeDefinition) -> "SchemaRegistry":
        """Return a new registry with extra definitions; this one is untouched."""
        return SchemaRegistry([*self._types.values(), *definitions])

    # --- lookups ----------------------------------------------------------

    def get_type(self, type_name: str) -> TypeDefinition | None:
        return self._types.get(type_name)

    def has_type(self, type_name: str) -> bool:
        return type_name in self._types

    def can_have_children(self, type_name: str) -> bool:
        definition = self.get_type(type_name)
        return definition.can_have_children if definition else False

    def allowed_slots(self, type_name: str) -> tuple[str, ...]:
        definition = self.get_type(type_name)
        return definition.allowed_slots if definition else ()

    def is_slot_allowed(self, type_name: str, slot_name: str) -> bool:
        """Check a named slot against the type's allowed slots.

        A type that lists ``"main"`` accepts any slot name.
        """
        allowed = self.allowed_slots(type_name)
        return slot_name in allowed or MAIN_SLOT in allowed

    def max_children(self, type_name: str) -> int | None:
        definition = self.get_type(type_name)
        return definition.max_children if definition else None

    def default_properties(self, type_name: str) -> dict[str, Any]:
        """Fresh copy of the type's default properties (empty if unknown)."""
        definition = self.get_type(type_name)
        return dict(definition.default_properties) if definition else {}

    def layout(self, type_name: str) -> Layout | None:
        definition = self.get_type(type_name)
        return definition.layout if definition else None

    def can_contain(self, parent_type: str, child_type: str) -> bool:
        """Decide whether ``child_type`` may be placed inside ``parent_type``.

        Only type-level rules are applied; the parent's current child count is
        the validator's concern.

        Args:
            parent_type: Type name of the would-be parent.
            child_type: Type name of the would-be child.

        Returns:
            False if either type is unregistered, the parent cannot contain,
            the parent's ceiling is zero or below, or the pair is forbidden.
        """
        parent = self.get_type(parent_type)
        child = self.get_type(child_type)
        if parent is None or child is None:
            return False

        if not parent.can_have_children:
            return False

        if parent.max_children is not None and parent.max_children <= 0:
            return False

        if child_type in parent.forbidden_child_types:
            return False

        return True

    # --- listings ---------------------------------------------------------

    def list_types(self) -> list[str]:
        return list(self._types)

    def container_types(self) -> list[str]:
        return [name for name in self._types if self.can_have_children(name)]

    def leaf_types(self) -> list[str]:
        return [name for name in self._types if not self.can_have_children(name)]

    def to_dict(self) -> dict[str, Any]:
        """Export every definition, keyed by type name."""
        return {name: definition.to_dict() for name, definition in self._types.items()}


def create_default_registry() -> SchemaRegistry:
    """Build a new registry holding the default component set.

    Each call returns an independent instance, so registering extra types on
    one registry never leaks into another.
    """
    return SchemaRegistry(DEFAULT_TYPE_DEFINITIONS)


def define_type(type_name: str, **overrides: Any) -> TypeDefinition:
    """Shorthand for building a definition, optionally from a default one.

    If ``type_name`` matches a default type, its definition is used as the
    base and ``overrides`` replace individual fields.
    """
    for definition in DEFAULT_TYPE_DEFINITIONS:
        if definition.type == type_name:
            return replace(definition, **overrides)
    return TypeDefinition(type=type_name, **overrides)


__all__ = [
    "MAIN_SLOT",
    "Layout",
    "DefaultType",
    "TypeDefinition",
    "DEFAULT_TYPE_DEFINITIONS",
    "SchemaRegistry",
    "create_default_registry",
    "define_type",
]
