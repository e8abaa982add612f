"""Tree validation against a schema registry.

The validator walks a whole tree and collects every structural error and
advisory warning it finds. It never stops at the first problem and never
raises for a malformed tree; the only exception is `TreeContractError` when
the argument is not a tree at all.

Both `IRNode` trees and their plain wire form (nested dicts) are accepted, so
data can be checked before it is parsed into models.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterable, Iterator, Mapping, NamedTuple

from irtree.config import get_property_checks_enabled, get_wide_node_threshold
from irtree.ir import IRNode, TreeContractError
from irtree.schema import DefaultType, SchemaRegistry, create_default_registry

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    """Structural error categories. Any error makes a tree invalid."""

    INVALID_TYPE = "invalid-type"
    MISSING_REQUIRED_FIELD = "missing-required-field"
    INVALID_NESTING = "invalid-nesting"
    INVALID_SLOT = "invalid-slot"


class WarningKind(str, Enum):
    """Advisory categories. Warnings never affect validity."""

    DEPRECATED_VALUE = "deprecated-value"
    PERFORMANCE_CONCERN = "performance-concern"
    ACCESSIBILITY_ISSUE = "accessibility-issue"


@dataclass
class ValidationError:
    """Represents a structural error in a tree.

    Attributes:
        node_id: ID of the node the error is tagged to ("unknown" if absent).
        message: Human-readable error description.
        error_type: Error category.
        path: Location in the tree, e.g. ``root.children[0].slots.icon[1]``.
    """

    node_id: str
    message: str
    error_type: ErrorKind
    path: str = "root"


@dataclass
class ValidationWarning:
    """Represents an advisory finding in a tree."""

    node_id: str
    message: str
    warning_type: WarningKind
    path: str = "root"


@dataclass
class ValidationResult:
    """Outcome of a validation pass."""

    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationWarning] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def errors_of(self, kind: ErrorKind) -> list[ValidationError]:
        return [e for e in self.errors if e.error_type == kind]

    def warnings_of(self, kind: WarningKind) -> list[ValidationWarning]:
        return [w for w in self.warnings if w.warning_type == kind]

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "errors": [
                {
                    "node_id": e.node_id,
                    "message": e.message,
                    "type": e.error_type.value,
                    "path": e.path,
                }
                for e in self.errors
            ],
            "warnings": [
                {
                    "node_id": w.node_id,
                    "message": w.message,
                    "type": w.warning_type.value,
                    "path": w.path,
                }
                for w in self.warnings
            ],
        }


# A property check receives a node in wire form and yields (kind, message).
PropertyCheck = Callable[[Mapping[str, Any]], Iterable[tuple[WarningKind, str]]]

ALIGN_ITEMS_VALUES = ("start", "center", "end", "stretch")
JUSTIFY_CONTENT_VALUES = (
    "start",
    "center",
    "end",
    "space-between",
    "space-around",
    "space-evenly",
)
GAP_TOKENS = ("sm", "md", "lg")
ACCESSIBLE_LABEL_KEYS = ("label", "ariaLabel", "text")


def _properties_of(node: Mapping[str, Any]) -> Mapping[str, Any]:
    props = node.get("properties", node.get("props"))
    return props if isinstance(props, Mapping) else {}


def check_layout_properties(
    node: Mapping[str, Any],
) -> Iterator[tuple[WarningKind, str]]:
    """Soft checks for Row/Stack alignment and spacing values."""
    props = _properties_of(node)

    align = props.get("alignItems")
    if align and align not in ALIGN_ITEMS_VALUES:
        yield (
            WarningKind.DEPRECATED_VALUE,
            f"Invalid alignItems value: {align}. "
            f"Should be one of: {', '.join(ALIGN_ITEMS_VALUES)}",
        )

    justify = props.get("justifyContent")
    if justify and justify not in JUSTIFY_CONTENT_VALUES:
        yield (
            WarningKind.DEPRECATED_VALUE,
            f"Invalid justifyContent value: {justify}",
        )

    gap = props.get("gap")
    if gap and isinstance(gap, str) and gap not in GAP_TOKENS:
        yield (
            WarningKind.DEPRECATED_VALUE,
            f"Gap value '{gap}' should be one of: {', '.join(GAP_TOKENS)}",
        )


def check_button_properties(
    node: Mapping[str, Any],
) -> Iterator[tuple[WarningKind, str]]:
    """Soft checks for Button variant/size and accessible content."""
    props = _properties_of(node)

    variant = props.get("variant")
    if variant and not isinstance(variant, str):
        yield WarningKind.DEPRECATED_VALUE, f"Invalid button variant: {variant}"

    size = props.get("size")
    if size and not isinstance(size, str):
        yield WarningKind.DEPRECATED_VALUE, f"Invalid button size: {size}"

    slots = node.get("slots")
    has_slot_content = isinstance(slots, Mapping) and any(slots.values())
    has_label = any(props.get(key) for key in ACCESSIBLE_LABEL_KEYS)
    if not node.get("children") and not has_slot_content and not has_label:
        yield (
            WarningKind.ACCESSIBILITY_ISSUE,
            "Button has no content and no label, ariaLabel or text property",
        )


DEFAULT_PROPERTY_CHECKS: Mapping[str, tuple[PropertyCheck, ...]] = {
    DefaultType.ROW.value: (check_layout_properties,),
    DefaultType.STACK.value: (check_layout_properties,),
    DefaultType.BUTTON.value: (check_button_properties,),
}


def _is_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


class _Pending(NamedTuple):
    """A child or slot member waiting to be validated."""

    member: Any
    path: str
    parent_type: str | None
    slot_name: str | None


class IRValidator:
    """Validates component trees against a schema registry.

    Example:
        >>> validator = IRValidator(create_default_registry())
        >>> result = validator.validate(root)
        >>> if not result.is_valid:
        ...     for e in result.errors:
        ...         print(f"{e.path}: {e.message}")
    """

    def __init__(
        self,
        registry: SchemaRegistry | None = None,
        *,
        wide_node_threshold: int | None = None,
        property_checks: bool | None = None,
    ) -> None:
        self.registry = registry if registry is not None else create_default_registry()
        self.wide_node_threshold = get_wide_node_threshold(wide_node_threshold)
        self.property_checks_enabled = get_property_checks_enabled(property_checks)
        self._property_checks: dict[str, list[PropertyCheck]] = {
            type_name: list(checks)
            for type_name, checks in DEFAULT_PROPERTY_CHECKS.items()
        }

    def register_property_check(self, type_name: str, check: PropertyCheck) -> None:
        """Attach an advisory property check to a component type."""
        self._property_checks.setdefault(type_name, []).append(check)

    def validate(self, root: IRNode | Mapping[str, Any]) -> ValidationResult:
        """Validate a complete tree.

        Args:
            root: Root node, as a model or in wire form.

        Returns:
            ValidationResult with every error and warning in the tree.

        Raises:
            TreeContractError: If ``root`` is neither an IRNode nor a mapping.
        """
        if isinstance(root, IRNode):
            data: Mapping[str, Any] = root.to_wire()
        elif isinstance(root, Mapping):
            data = root
        else:
            raise TreeContractError(
                f"Expected an IRNode or mapping, got {type(root).__name__}"
            )

        result = ValidationResult()
        # Pre-order over an explicit stack; tree depth is not bounded by recursion.
        stack: list[_Pending] = [_Pending(data, "root", None, None)]
        while stack:
            item = stack.pop()
            node = self._validate_member(
                item.member, item.parent_type, item.slot_name, item.path, result
            )
            if node is not None:
                stack.extend(reversed(self._validate_node(node, item.path, result)))
        logger.debug(
            f"Validated tree '{data.get('id')}': "
            f"{len(result.errors)} errors, {len(result.warnings)} warnings"
        )
        return result

    def is_valid(self, root: IRNode | Mapping[str, Any]) -> bool:
        """Quick validation check - returns boolean only."""
        return self.validate(root).is_valid

    # --- walk ---------------------------------------------------------------

    def _validate_member(
        self,
        member: Any,
        parent_type: str | None,
        slot_name: str | None,
        path: str,
        result: ValidationResult,
    ) -> Mapping[str, Any] | None:
        """Containment-check one child or slot member.

        Returns the member in wire form, or None when it is not a node.
        """
        if isinstance(member, IRNode):
            member = member.to_wire()
        if not isinstance(member, Mapping):
            result.errors.append(
                ValidationError(
                    "unknown",
                    "Child must be a node object",
                    ErrorKind.MISSING_REQUIRED_FIELD,
                    path,
                )
            )
            return None

        child_id = member.get("id")
        child_type = member.get("type")
        if (
            parent_type is not None
            and _is_text(child_id)
            and not (
                _is_text(child_type)
                and self.registry.can_contain(parent_type, child_type)
            )
        ):
            where = f"slot '{slot_name}' of " if slot_name is not None else ""
            verb = "placed in" if slot_name is not None else "contained in"
            result.errors.append(
                ValidationError(
                    child_id,
                    f"Component '{child_type}' cannot be {verb} {where}'{parent_type}'",
                    ErrorKind.INVALID_NESTING,
                    path,
                )
            )
        return member

    def _validate_node(
        self, node: Mapping[str, Any], path: str, result: ValidationResult
    ) -> list[_Pending]:
        """Check one node and return its children and slot members, in order."""
        node_id = node.get("id")
        type_name = node.get("type")
        label = node_id if _is_text(node_id) else "unknown"

        if not _is_text(node_id):
            result.errors.append(
                ValidationError(
                    label,
                    "Node must have a valid string id",
                    ErrorKind.MISSING_REQUIRED_FIELD,
                    path,
                )
            )

        # Structural checks need a definition; without one only the walk continues.
        known = False
        if not _is_text(type_name):
            result.errors.append(
                ValidationError(
                    label,
                    "Node must have a valid string type",
                    ErrorKind.MISSING_REQUIRED_FIELD,
                    path,
                )
            )
        elif not self.registry.has_type(type_name):
            result.errors.append(
                ValidationError(
                    label,
                    f"Unknown component type: {type_name}",
                    ErrorKind.INVALID_TYPE,
                    path,
                )
            )
        else:
            known = True

        if known and self.property_checks_enabled:
            self._check_properties(node, label, type_name, path, result)

        parent_type = type_name if known else None
        return [
            *self._validate_children(node, label, parent_type, path, result),
            *self._validate_slots(node, label, parent_type, path, result),
        ]

    def _validate_children(
        self,
        node: Mapping[str, Any],
        label: str,
        parent_type: str | None,
        path: str,
        result: ValidationResult,
    ) -> list[_Pending]:
        children = node.get("children")
        if children is None:
            return []

        if not isinstance(children, list):
            result.errors.append(
                ValidationError(
                    label, "children must be a list", ErrorKind.INVALID_NESTING, path
                )
            )
            return []

        if parent_type is not None:
            self._check_capacity(children, label, parent_type, path, result)

        return [
            _Pending(child, f"{path}.children[{index}]", parent_type, None)
            for index, child in enumerate(children)
        ]

    def _check_capacity(
        self,
        children: list,
        label: str,
        parent_type: str,
        path: str,
        result: ValidationResult,
    ) -> None:
        count = len(children)
        if not self.registry.can_have_children(parent_type):
            result.errors.append(
                ValidationError(
                    label,
                    f"Component type '{parent_type}' cannot have children",
                    ErrorKind.INVALID_NESTING,
                    path,
                )
            )
        else:
            max_children = self.registry.max_children(parent_type)
            if max_children is not None and count > max_children:
                result.errors.append(
                    ValidationError(
                        label,
                        f"Component '{parent_type}' can have maximum "
                        f"{max_children} children, but has {count}",
                        ErrorKind.INVALID_NESTING,
                        path,
                    )
                )

        if count > self.wide_node_threshold:
            result.warnings.append(
                ValidationWarning(
                    label,
                    f"Component '{parent_type}' has {count} children "
                    f"(threshold {self.wide_node_threshold})",
                    WarningKind.PERFORMANCE_CONCERN,
                    path,
                )
            )

    def _validate_slots(
        self,
        node: Mapping[str, Any],
        label: str,
        parent_type: str | None,
        path: str,
        result: ValidationResult,
    ) -> list[_Pending]:
        slots = node.get("slots")
        if slots is None:
            return []

        if not isinstance(slots, Mapping):
            result.errors.append(
                ValidationError(
                    label,
                    "slots must map slot names to lists of nodes",
                    ErrorKind.INVALID_SLOT,
                    path,
                )
            )
            return []

        pending: list[_Pending] = []
        for slot_name, members in slots.items():
            slot_path = f"{path}.slots.{slot_name}"

            if parent_type is not None and not self.registry.is_slot_allowed(
                parent_type, slot_name
            ):
                allowed = ", ".join(self.registry.allowed_slots(parent_type))
                result.errors.append(
                    ValidationError(
                        label,
                        f"Slot '{slot_name}' is not allowed for component type "
                        f"'{parent_type}'. Allowed slots: {allowed}",
                        ErrorKind.INVALID_SLOT,
                        slot_path,
                    )
                )

            if not isinstance(members, list):
                result.errors.append(
                    ValidationError(
                        label,
                        f"Slot '{slot_name}' must hold a list of nodes",
                        ErrorKind.INVALID_SLOT,
                        slot_path,
                    )
                )
                continue

            pending.extend(
                _Pending(member, f"{slot_path}[{index}]", parent_type, slot_name)
                for index, member in enumerate(members)
            )
        return pending

    def _check_properties(
        self,
        node: Mapping[str, Any],
        label: str,
        type_name: str,
        path: str,
        result: ValidationResult,
    ) -> None:
        for check in self._property_checks.get(type_name, ()):
            for kind, message in check(node):
                result.warnings.append(ValidationWarning(label, message, kind, path))


def validate_tree(
    root: IRNode | Mapping[str, Any],
    registry: SchemaRegistry | None = None,
) -> ValidationResult:
    """Validate a tree with a one-off validator.

    Args:
        root: Root node, as a model or in wire form.
        registry: Schema to check against. A fresh default registry if omitted.

    Returns:
        ValidationResult with every error and warning in the tree.
    """
    return IRValidator(registry).validate(root)


def is_valid(
    root: IRNode | Mapping[str, Any],
    registry: SchemaRegistry | None = None,
) -> bool:
    """Check if a tree is valid.

    Example:
        >>> if is_valid(root):
        ...     renderer.render(root)
    """
    return validate_tree(root, registry).is_valid


__all__ = [
    "ErrorKind",
    "WarningKind",
    "ValidationError",
    "ValidationWarning",
    "ValidationResult",
    "PropertyCheck",
    "DEFAULT_PROPERTY_CHECKS",
    "check_layout_properties",
    "check_button_properties",
    "IRValidator",
    "validate_tree",
    "is_valid",
]
