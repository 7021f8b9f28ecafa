"""
Exception hierarchy for repograph.

Defines all exception types with error codes, transient flags, and correlation IDs.
Archive-level errors are fatal and propagate to the caller; analysis and
categorization errors are recovered at their component boundary.

License: MIT
"""

import uuid
from typing import Any, Dict, Optional


class RepographError(Exception):
    """
    Base exception for all repograph errors.

    Provides standard error attributes: message, error_code, details,
    correlation_id.

    Attributes:
        message: Human-readable error message
        error_code: Programmatic error code (e.g., "ARCH_001")
        details: Additional context (dict)
        correlation_id: UUID for tracing across layers
        original_exception: Wrapped exception (if any)
        is_transient: Whether error is transient (retryable)

    Example:
        raise RepographError(
            message="Operation failed",
            error_code="ERR_UNKNOWN",
            details={"param": "value"},
        )
    """

    def __init__(
        self,
        message: str,
        error_code: str = "ERR_UNKNOWN",
        details: Optional[Dict[str, Any]] = None,
        correlation_id: Optional[str] = None,
        original_exception: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.correlation_id = correlation_id or str(uuid.uuid4())
        self.original_exception = original_exception
        self.is_transient = False

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for logging/serialization.

        Returns:
            Dictionary with all error information
        """
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
            "correlation_id": self.correlation_id,
            "original_error": str(self.original_exception) if self.original_exception else None,
        }


class ValidationError(RepographError):
    """
    Raised when input validation fails.

    Error Codes:
        VAL_001: Missing required value
        VAL_002: Invalid value type
        VAL_003: Value out of range
        VAL_004: Invalid value format

    Not transient.
    """

    def __init__(self, message: str, error_code: str = "VAL_001", **kwargs):
        super().__init__(message=message, error_code=error_code, **kwargs)
        self.is_transient = False


# === Archive Exceptions ===


class ArchiveError(RepographError):
    """
    Base exception for archive-level failures.

    Archive errors are fatal: graph construction never returns a partial
    or empty graph when one is raised.
    """

    def __init__(self, message: str, error_code: str = "ARCH_000", **kwargs):
        super().__init__(message=message, error_code=error_code, **kwargs)
        self.is_transient = False


class InvalidArchiveError(ArchiveError):
    """
    Raised when the archive bytes cannot be unpacked.

    Error Code: ARCH_001
    """

    def __init__(self, message: str, **kwargs):
        super().__init__(message=message, error_code="ARCH_001", **kwargs)


class EmptyArchiveError(ArchiveError):
    """
    Raised when the archive holds zero admissible source files.

    Error Code: ARCH_002
    """

    def __init__(self, message: str, **kwargs):
        super().__init__(message=message, error_code="ARCH_002", **kwargs)


# === Analysis Exceptions ===


class AnalysisError(RepographError):
    """
    Raised when heuristic analysis of a single file fails.

    Error Codes:
        ANAL_001: Function/import extraction failed
        ANAL_002: Dependency resolution failed

    Never escapes the per-file boundary of the analyzer.
    """

    def __init__(self, message: str, error_code: str = "ANAL_001", **kwargs):
        super().__init__(message=message, error_code=error_code, **kwargs)
        self.is_transient = False


# === Categorization Exceptions ===


class CategorizationError(RepographError):
    """
    Raised when the categorization adapter fails or returns a malformed result.

    Error Codes:
        CAT_001: Adapter request failed
        CAT_002: Malformed adapter response
        CAT_003: Model not found

    Transient (adapter failures are usually network or model hiccups).
    """

    def __init__(self, message: str, error_code: str = "CAT_001", **kwargs):
        super().__init__(message=message, error_code=error_code, **kwargs)
        self.is_transient = True


class TimeoutError(RepographError):
    """
    Raised when an operation times out.

    Error Codes:
        TIMEOUT_001: Operation timeout
        TIMEOUT_002: Network timeout

    Transient (timeouts are retryable).
    """

    def __init__(self, message: str, error_code: str = "TIMEOUT_001", **kwargs):
        super().__init__(message=message, error_code=error_code, **kwargs)
        self.is_transient = True
