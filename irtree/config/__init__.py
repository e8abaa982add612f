"""Centralized configuration management for irtree.

Provides unified access to all configuration via the `get_environment()` function.

Example:
    >>> from irtree.config import EnvVar, get_environment
    >>>
    >>> mode = get_environment(EnvVar.MOVE_MODE)  # Returns str: "faithful"
    >>> mode = get_environment(EnvVar.MOVE_MODE, override="transactional")

Environment Variable Categories:
    mutation: Id generation and default relocation mode
    validation: Thresholds for advisory warnings
    logging: Log level for command line runs
"""

from .lib import (
    # Core types
    EnvConfig,
    EnvVar,
    # Main interface
    get_environment,
    get_environment_info,
    get_id_prefix,
    get_log_level,
    get_move_mode,
    get_property_checks_enabled,
    get_wide_node_threshold,
    # Introspection
    list_environment_variables,
)

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
