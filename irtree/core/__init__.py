"""Shared infrastructure for irtree."""

from .log import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
