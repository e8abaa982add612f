"""Centralized environment configuration management for irtree.

Provides a unified interface for all environment variables with:
- Single `get_environment()` function for all configuration
- Type-safe enum with metadata (default, type, description)
- Consistent resolution: override > environment > default

Example:
    >>> from irtree.config import EnvVar, get_environment
    >>>
    >>> # Get values with automatic type conversion
    >>> threshold = get_environment(EnvVar.WIDE_NODE_THRESHOLD)  # Returns int
    >>> prefix = get_environment(EnvVar.ID_PREFIX)  # Returns str
    >>>
    >>> # Override at runtime
    >>> threshold = get_environment(EnvVar.WIDE_NODE_THRESHOLD, override=20)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, overload

# =============================================================================
# Environment Variable Configuration
# =============================================================================


@dataclass(frozen=True)
class EnvConfig:
    """Metadata for an environment variable.

    Attributes:
        name: Environment variable name (e.g., "IRTREE_MOVE_MODE").
        default: Default value if not set in environment.
        var_type: Python type for value conversion (str, int, bool).
        description: Human-readable description.
        category: Grouping category for documentation.
        choices: Accepted values for string variables. Empty means any.
    """

    name: str
    default: Any
    var_type: type
    description: str = ""
    category: str = "general"
    choices: tuple[str, ...] = ()


class EnvVar(Enum):
    """All environment variables used by irtree.

    Each member contains an EnvConfig with name, default, type, and description.
    Use with `get_environment()` for type-safe access.

    Categories:
        - mutation: Node factory and relocation behaviour
        - validation: Advisory check thresholds
        - logging: Log output configuration
    """

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------
    ID_PREFIX = EnvConfig(
        name="IRTREE_ID_PREFIX",
        default="component",
        var_type=str,
        description="Prefix for generated node ids",
        category="mutation",
    )
    MOVE_MODE = EnvConfig(
        name="IRTREE_MOVE_MODE",
        default="faithful",
        var_type=str,
        description="Default relocation mode: 'faithful' or 'transactional'",
        category="mutation",
        choices=("faithful", "transactional"),
    )

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------
    WIDE_NODE_THRESHOLD = EnvConfig(
        name="IRTREE_WIDE_NODE_THRESHOLD",
        default=100,
        var_type=int,
        description="Default-slot size above which a performance warning is raised",
        category="validation",
    )
    PROPERTY_CHECKS = EnvConfig(
        name="IRTREE_PROPERTY_CHECKS",
        default=True,
        var_type=bool,
        description="Run advisory property checks (alignment, labels) during validation",
        category="validation",
    )

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    LOG_LEVEL = EnvConfig(
        name="IRTREE_LOG_LEVEL",
        default="INFO",
        var_type=str,
        description="Log level used by the command line interface",
        category="logging",
        choices=("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"),
    )


# =============================================================================
# Type Conversion Helpers
# =============================================================================


def _parse_bool(value: str) -> bool | None:
    """Parse string to boolean.

    Recognizes: true/false, 1/0, yes/no (case-insensitive).
    Returns None for unrecognized values.
    """
    normalized = value.lower().strip()
    if normalized in ("true", "1", "yes"):
        return True
    if normalized in ("false", "0", "no"):
        return False
    return None


def _convert_value(value: str | None, config: EnvConfig) -> Any:
    """Convert string value to the variable's type.

    Args:
        value: Raw string value from environment (or None).
        config: Metadata describing the target type and accepted values.

    Returns:
        Converted value, or the default if conversion fails or value is None.
    """
    if value is None:
        return config.default

    if config.var_type is str:
        if config.choices:
            matches = [c for c in config.choices if c.lower() == value.strip().lower()]
            return matches[0] if matches else config.default
        return value

    if config.var_type is int:
        try:
            return int(value)
        except ValueError:
            return config.default

    if config.var_type is bool:
        result = _parse_bool(value)
        return result if result is not None else config.default

    # Unknown type, return as-is
    return value


# =============================================================================
# Main Interface
# =============================================================================


@overload
def get_environment(env_var: EnvVar, override: int) -> int: ...
@overload
def get_environment(env_var: EnvVar, override: str) -> str: ...
@overload
def get_environment(env_var: EnvVar, override: bool) -> bool: ...
@overload
def get_environment(env_var: EnvVar, override: None = None) -> Any: ...


def get_environment(env_var: EnvVar, override: Any = None) -> Any:
    """Get environment variable value with type conversion.

    Resolution priority:
        1. Explicit override parameter (highest)
        2. Environment variable value
        3. Default from EnvConfig (lowest)

    Args:
        env_var: Environment variable enum member.
        override: Optional override value (bypasses env lookup).

    Returns:
        Value converted to the appropriate type (str, int or bool).

    Example:
        >>> get_environment(EnvVar.ID_PREFIX)
        'component'
        >>> get_environment(EnvVar.ID_PREFIX, override="node")
        'node'
    """
    config: EnvConfig = env_var.value

    if override is not None:
        return override

    raw_value = os.environ.get(config.name)
    return _convert_value(raw_value, config)


def get_environment_info(env_var: EnvVar) -> EnvConfig:
    """Get metadata for an environment variable.

    Args:
        env_var: Environment variable enum member.

    Returns:
        EnvConfig with name, default, type, and description.
    """
    return env_var.value


# =============================================================================
# Convenience Functions
# =============================================================================


def get_id_prefix(override: str | None = None) -> str:
    """Get the prefix used for generated node ids."""
    return get_environment(EnvVar.ID_PREFIX, override) or "component"


def get_move_mode(override: str | None = None) -> str:
    """Get the default relocation mode name ('faithful' or 'transactional')."""
    return get_environment(EnvVar.MOVE_MODE, override)


def get_wide_node_threshold(override: int | None = None) -> int:
    """Get the child count above which a node is reported as too wide."""
    return get_environment(EnvVar.WIDE_NODE_THRESHOLD, override)


def get_property_checks_enabled(override: bool | None = None) -> bool:
    """Get whether the validator runs its advisory property checks."""
    return get_environment(EnvVar.PROPERTY_CHECKS, override)


def get_log_level(override: str | None = None) -> str:
    """Get the log level name for command line runs."""
    return get_environment(EnvVar.LOG_LEVEL, override)


def list_environment_variables(category: str | None = None) -> list[EnvVar]:
    """List all environment variables, optionally filtered by category.

    Args:
        category: Filter by category (mutation, validation, logging).
                 None returns all variables.

    Returns:
        List of EnvVar enum members.
    """
    if category is None:
        return list(EnvVar)

    return [var for var in EnvVar if var.value.category == category]


__all__ = [
    # Core types
    "EnvConfig",
    "EnvVar",
    # Main interface
    "get_environment",
    "get_environment_info",
    # Convenience functions
    "get_id_prefix",
    "get_move_mode",
    "get_wide_node_threshold",
    "get_property_checks_enabled",
    "get_log_level",
    # Introspection
    "list_environment_variables",
]
