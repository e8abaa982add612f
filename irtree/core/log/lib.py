"""Core logging implementation for irtree."""

import logging
import sys
from typing import Optional, TextIO

__all__ = ["LOG_FORMAT", "ROOT_LOGGER_NAME", "get_logger", "resolve_level", "setup_logging"]

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
ROOT_LOGGER_NAME = "irtree"


def resolve_level(level: int | str) -> int:
    """Turn a level number or name ("debug", "WARNING") into a level number.

    Unknown names resolve to INFO.
    """
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(
    level: int | str = logging.INFO,
    stream: Optional[TextIO] = None,
    *,
    force: bool = False,
) -> None:
    """Configure basic logging for command line runs.

    Args:
        level: Logging level, as a number or a level name.
        stream: Output stream. Defaults to the current ``sys.stderr``.
        force: Replace handlers already installed on the root logger.
    """
    logging.basicConfig(
        level=resolve_level(level),
        format=LOG_FORMAT,
        stream=stream if stream is not None else sys.stderr,
        force=force,
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger in the irtree namespace.

    Args:
        name: Logger name. Names outside the namespace are nested under it,
            so ``"cli"`` becomes ``"irtree.cli"``.

    Returns:
        Logger instance.
    """
    if not name or name == ROOT_LOGGER_NAME:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
