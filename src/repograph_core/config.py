"""
Configuration Management for repograph.

Provides centralized, type-safe configuration loading using Pydantic Settings.
Supports environment variables, .env files, and sensible defaults for zero-config operation.

License: MIT
"""

from typing import Any, Dict

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class RepographSettings(BaseSettings):
    """
    Centralized configuration for archive analysis and graph construction.

    Configuration is loaded with the following priority (highest to lowest):
    1. System environment variables
    2. .env file in the working directory
    3. Hardcoded default values

    Example:
        ```python
        from repograph_core.config import settings

        print(settings.import_match_score)  # 5
        print(settings.max_block_scan_lines)  # 200
        ```
    """

    # ========================================
    # ARCHIVE LOADING
    # ========================================

    max_file_size: int = Field(
        default=10 * 1024 * 1024,
        ge=1,
        description="Archive entries larger than this many bytes are skipped",
    )

    # ========================================
    # PER-FILE ANALYSIS
    # ========================================

    max_block_scan_lines: int = Field(
        default=200,
        ge=1,
        le=100_000,
        description="Lines scanned for a closing brace before falling back to line_count=1",
    )

    brace_lookahead_lines: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Lines searched for an opening brace after a signature line",
    )

    analysis_workers: int = Field(
        default=4, ge=1, le=64, description="Thread pool size for per-file analysis"
    )

    # ========================================
    # DEPENDENCY RESOLUTION
    # ========================================

    import_match_score: int = Field(
        default=5, ge=1, description="Raw score added for a direct import match"
    )

    max_reference_scan_chars: int = Field(
        default=0,
        ge=0,
        description="Characters of each file scanned for name references (0 = whole file)",
    )

    resolver_workers: int = Field(
        default=1, ge=1, le=64, description="Thread pool size for dependency resolution rows"
    )

    # ========================================
    # CATEGORIZATION
    # ========================================

    default_category: str = Field(
        default="General", min_length=1, description="Category assigned before categorization"
    )

    categorizer_base_url: str = Field(
        default="http://localhost:11434", description="Ollama server base URL for categorization"
    )

    categorizer_model: str = Field(
        default="llama3.1:8b", description="Ollama model used to categorize file paths"
    )

    categorizer_timeout: int = Field(
        default=120, ge=1, le=600, description="Categorization request timeout in seconds"
    )

    categorizer_max_retries: int = Field(
        default=2, ge=0, le=10, description="Retries for transient categorization failures"
    )

    # ========================================
    # LOGGING CONFIGURATION
    # ========================================

    log_level: str = Field(
        default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_format: str = Field(default="json", description="Log format (json, console)")

    # ========================================
    # VALIDATORS
    # ========================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """
        Validate log level is one of allowed values.

        Args:
            v: Log level string (case-insensitive)

        Returns:
            Uppercase log level string

        Raises:
            ValueError: If log level not in allowed values
        """
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"log_level must be one of {allowed}, got '{v}'")
        return v_upper

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format is json or console (case-insensitive)."""
        allowed = ["json", "console"]
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"log_format must be one of {allowed}, got '{v}'")
        return v_lower

    @field_validator("categorizer_base_url")
    @classmethod
    def validate_categorizer_url(cls, v: str) -> str:
        """
        Validate categorizer base URL format.

        Returns:
            URL string with trailing slash removed

        Raises:
            ValueError: If URL doesn't start with http:// or https://
        """
        if not v.startswith(("http://", "https://")):
            raise ValueError(
                f"categorizer_base_url must start with http:// or https://, got '{v}'"
            )
        return v.rstrip("/")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "validate_assignment": True,
        "extra": "ignore",
    }


def get_config_summary(settings: RepographSettings) -> Dict[str, Any]:
    """
    Get configuration summary for logging/debugging.

    Args:
        settings: RepographSettings instance

    Returns:
        Configuration summary grouped by category
    """
    return {
        "archive": {
            "max_file_size": settings.max_file_size,
        },
        "analysis": {
            "max_block_scan_lines": settings.max_block_scan_lines,
            "brace_lookahead_lines": settings.brace_lookahead_lines,
            "analysis_workers": settings.analysis_workers,
        },
        "resolver": {
            "import_match_score": settings.import_match_score,
            "max_reference_scan_chars": settings.max_reference_scan_chars,
            "resolver_workers": settings.resolver_workers,
        },
        "categorization": {
            "default_category": settings.default_category,
            "base_url": settings.categorizer_base_url,
            "model": settings.categorizer_model,
            "timeout": settings.categorizer_timeout,
        },
        "logging": {
            "level": settings.log_level,
            "format": settings.log_format,
        },
    }


# Singleton instance - instantiated once at module import
settings = RepographSettings()
