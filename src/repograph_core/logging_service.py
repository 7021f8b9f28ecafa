"""
LoggingService - Centralized structured logging for repograph.

Provides consistent, machine-readable logging across all modules using structlog.

License: MIT
"""

import logging
import sys
from dataclasses import dataclass
from typing import Any, Dict, Optional

import structlog
from structlog.types import Processor


@dataclass
class LoggingConfig:
    """
    Configuration for LoggingService.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Output format ("json" or "console" for dev)
        output_stream: Output destination (default: sys.stderr)
    """

    level: str = "INFO"
    format: str = "json"
    output_stream: Any = sys.stderr


class LoggingService:
    """
    Centralized structured logging service using structlog.

    Outputs JSON (or colored console) logs to stderr so that stdout stays
    free for graph output.

    Example:
        LoggingService.configure_logging(level="INFO", format="json")

        logger = LoggingService.get_logger("repograph.cli")
        logger.info("graph_constructed", node_count=42, edge_count=97)
    """

    _configured: bool = False
    _log_level: str = "INFO"
    _config: Optional[LoggingConfig] = None
    _loggers: Dict[str, structlog.BoundLogger] = {}

    @classmethod
    def configure_logging(
        cls, level: str = "INFO", format: str = "json", config: Optional[LoggingConfig] = None
    ) -> None:
        """
        Configure global structured logging infrastructure.

        This should be called ONCE at application startup before any logging.

        Args:
            level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            format: Output format ("json" or "console")
            config: Optional LoggingConfig for advanced configuration

        Raises:
            ValueError: If level or format is invalid
            RuntimeError: If called after logging already configured
        """
        if cls._configured:
            raise RuntimeError("Logging already configured")

        if config is not None:
            cfg = config
        else:
            level_upper = level.upper()
            if level_upper not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
                raise ValueError(
                    f"Invalid log level: {level}. "
                    "Must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL"
                )

            format_lower = format.lower()
            if format_lower not in ["json", "console"]:
                raise ValueError(f"Invalid format: {format}. Must be 'json' or 'console'")

            cfg = LoggingConfig(level=level_upper, format=format_lower)

        cls._config = cfg
        cls._log_level = cfg.level

        structlog.configure(
            processors=cls._setup_processors(),
            wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, cfg.level)),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(file=cfg.output_stream),
            cache_logger_on_first_use=True,
        )

        cls._configured = True

    @classmethod
    def get_logger(cls, name: str) -> structlog.BoundLogger:
        """
        Get a module/component-specific logger.

        Args:
            name: Logger name (typically module path)

        Returns:
            Cached BoundLogger instance

        Raises:
            RuntimeError: If logging not configured yet
            ValueError: If name is empty or too long
        """
        if not cls._configured:
            raise RuntimeError("Logging not configured. Call configure_logging() first.")

        if not name:
            raise ValueError("Logger name cannot be empty")

        if len(name) > 200:
            raise ValueError("Logger name exceeds maximum length (200)")

        if name in cls._loggers:
            return cls._loggers[name]

        logger = structlog.get_logger(name)
        cls._loggers[name] = logger

        return logger

    @classmethod
    def log_performance(
        cls,
        operation: str,
        duration_ms: float,
        metadata: Optional[Dict[str, Any]] = None,
        logger_name: str = "repograph",
    ) -> None:
        """
        Log performance metrics for an operation.

        Args:
            operation: Operation name
            duration_ms: Duration in milliseconds
            metadata: Additional metrics (file counts, edge counts, etc.)
            logger_name: Which logger to use

        Raises:
            ValueError: If operation empty or duration_ms < 0
        """
        if not operation:
            raise ValueError("operation cannot be empty")

        if duration_ms < 0:
            raise ValueError("duration_ms cannot be negative")

        logger = cls.get_logger(logger_name)

        context: Dict[str, Any] = {
            "operation": operation,
            "duration_ms": round(duration_ms, 2),
        }
        if metadata:
            context.update(metadata)

        logger.info("performance_metric", **context)

    @classmethod
    def _setup_processors(cls) -> list[Processor]:
        """
        Setup structlog processors based on configuration.

        Processors (in order):
            1. add_log_level
            2. TimeStamper (ISO)
            3. StackInfoRenderer
            4. format_exc_info
            5. JSONRenderer or ConsoleRenderer
        """
        processors: list[Processor] = [
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
        ]

        if cls._config and cls._config.format == "console":
            processors.append(structlog.dev.ConsoleRenderer(colors=True))
        else:
            processors.append(structlog.processors.JSONRenderer())

        return processors
