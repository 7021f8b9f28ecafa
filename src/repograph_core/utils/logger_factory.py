"""
Logger Factory - Convenience wrapper for LoggingService.

License: MIT
"""

from typing import Optional

import structlog

from repograph_core.config import settings
from repograph_core.logging_service import LoggingService


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a module/component-specific logger.

    Args:
        name: Logger name (typically module path or __name__)

    Returns:
        Cached BoundLogger instance

    Raises:
        RuntimeError: If logging not configured yet (call configure_logging() first)
        ValueError: If name is empty or exceeds maximum length (200 chars)
    """
    return LoggingService.get_logger(name)


def configure_logging(level: Optional[str] = None, format: Optional[str] = None) -> None:
    """
    Configure structured logging infrastructure.

    Falls back to settings.log_level and settings.log_format when arguments
    are omitted. Should be called once at application startup.

    Raises:
        ValueError: If level or format is invalid
        RuntimeError: If called after logging already configured
    """
    if level is None:
        level = settings.log_level
    if format is None:
        format = settings.log_format

    LoggingService.configure_logging(level=level, format=format)
