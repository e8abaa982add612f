"""Tree validation against the schema registry."""

from irtree.validation.lib import (
    DEFAULT_PROPERTY_CHECKS,
    ErrorKind,
    IRValidator,
    PropertyCheck,
    ValidationError,
    ValidationResult,
    ValidationWarning,
    WarningKind,
    check_button_properties,
    check_layout_properties,
    is_valid,
    validate_tree,
)

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
