"""Utility functions for quakeview."""

from .logging import configure_logging, get_logger, log_elapsed

__all__ = [
    "configure_logging",
    "get_logger",
    "log_elapsed",
]
