"""
Utilities for repograph core.

License: MIT
"""

from .logger_factory import configure_logging, get_logger

__all__ = [
    "get_logger",
    "configure_logging",
]
