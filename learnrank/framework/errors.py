"""
Error taxonomy for ranking configuration resolution.

Every failure surfaced by learnrank is one of the typed exceptions below, so
callers (and the CLI boundary) can tell a bad client configuration from a
broken template or a storage outage without inspecting messages.

Key features:
- Error code enums (avoid typos)
- Severity levels (fatal, transient, user_error)
- Pydantic models for structured error details
- Boundary translation functions
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# ============================================================================
# Error Codes and Severity
# ============================================================================


class ErrorCode(str, Enum):
    """Enumeration of all error codes in the system."""

    # Client configuration errors
    INVALID_CONFIG = "INVALID_CONFIG"
    INCORRECT_CONFIG_TYPE = "INCORRECT_CONFIG_TYPE"
    INVALID_EXTRACTOR = "INVALID_EXTRACTOR"
    INVALID_QUERY = "INVALID_QUERY"

    # Templating errors
    TEMPLATE_RENDER_ERROR = "TEMPLATE_RENDER_ERROR"

    # Storage errors
    NOT_FOUND = "NOT_FOUND"
    STORAGE_ERROR = "STORAGE_ERROR"

    # Internal errors
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorSeverity(str, Enum):
    """Error severity for alerting and retry decisions made by callers."""

    FATAL = "fatal"  # Unrecoverable, requires intervention
    TRANSIENT = "transient"  # Temporary, retryable by the caller
    USER_ERROR = "user_error"  # User mistake, not retryable


# ============================================================================
# Pydantic Error Models
# ============================================================================


class ErrorDetails(BaseModel):
    """Structured error details for serialization."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    code: ErrorCode = Field(..., description="Error code enum")
    message: str = Field(..., description="Human-readable error message")
    context: dict[str, Any] = Field(default_factory=dict, description="Additional context")
    severity: ErrorSeverity = Field(default=ErrorSeverity.FATAL, description="Error severity")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return self.model_dump(mode="json")


# ============================================================================
# Base Exception Class
# ============================================================================


class LearnRankError(Exception):
    """Base class for all learnrank errors."""

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        details: dict[str, Any] | None = None,
        severity: ErrorSeverity = ErrorSeverity.FATAL,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.severity = severity

    def to_details(self) -> ErrorDetails:
        """Convert to structured ErrorDetails."""
        return ErrorDetails(
            code=self.code, message=self.message, context=self.details, severity=self.severity
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "error": self.code.value,
            "message": self.message,
            "details": self.details,
            "severity": self.severity.value,
        }


# ============================================================================
# Client Configuration Errors
# ============================================================================


class ClientConfigError(LearnRankError):
    """The stored or supplied configuration is unusable as given.

    Surfaced verbatim to the caller and never retried.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INVALID_CONFIG,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details, severity=ErrorSeverity.USER_ERROR)


class InvalidConfigError(ClientConfigError):
    """Configuration failed structural validation."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {}
        if field:
            details["field"] = field
        super().__init__(message, ErrorCode.INVALID_CONFIG, details)


class IncorrectConfigTypeError(ClientConfigError):
    """Model is configured for a different kind of inference."""

    def __init__(self, actual: str, expected: str, model_id: str | None = None) -> None:
        message = (
            f"Incorrect inference config type provided. Model configured for "
            f"[{actual}] but [{expected}] is required"
        )
        details = {"actual": actual, "expected": expected}
        if model_id:
            details["model_id"] = model_id
        super().__init__(message, ErrorCode.INCORRECT_CONFIG_TYPE, details)
        self.actual = actual
        self.expected = expected


class ExtractorValidationError(ClientConfigError):
    """A feature extractor rejected its own configuration."""

    def __init__(self, message: str, feature_name: str | None = None) -> None:
        details = {}
        if feature_name:
            details["feature_name"] = feature_name
        super().__init__(message, ErrorCode.INVALID_EXTRACTOR, details)
        self.feature_name = feature_name


class QueryParseError(LearnRankError):
    """Text could not be parsed into a query document."""

    def __init__(self, message: str, source: str | None = None) -> None:
        details = {}
        if source is not None:
            details["source"] = _truncate(source)
        super().__init__(
            message, ErrorCode.INVALID_QUERY, details, severity=ErrorSeverity.USER_ERROR
        )


# ============================================================================
# Templating Errors
# ============================================================================


class TemplateRenderError(LearnRankError):
    """Template could not be compiled, rendered, or turned back into a query.

    A missing parameter never raises this; it is reported through the render
    result and degrades the feature instead.
    """

    def __init__(
        self,
        message: str,
        template: str | None = None,
        feature_name: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if feature_name:
            details["feature_name"] = feature_name
        if template is not None:
            details["template"] = _truncate(template)
        if cause is not None:
            details["cause"] = str(cause)
            details["cause_type"] = type(cause).__name__
        super().__init__(message, ErrorCode.TEMPLATE_RENDER_ERROR, details)
        self.template = template
        self.feature_name = feature_name
        self.original_error = cause


# ============================================================================
# Storage Errors
# ============================================================================


class StorageError(LearnRankError):
    """Trained-model storage could not serve the request."""

    def __init__(
        self,
        message: str,
        model_id: str | None = None,
        cause: Exception | None = None,
        code: ErrorCode = ErrorCode.STORAGE_ERROR,
        severity: ErrorSeverity = ErrorSeverity.TRANSIENT,
    ) -> None:
        details = {}
        if model_id:
            details["model_id"] = model_id
        if cause is not None:
            details["cause"] = str(cause)
            details["cause_type"] = type(cause).__name__
        super().__init__(message, code, details, severity=severity)
        self.model_id = model_id


class ModelNotFoundError(StorageError):
    """No trained model is stored under the requested id."""

    def __init__(self, model_id: str) -> None:
        super().__init__(
            f"Could not find trained model [{model_id}]",
            model_id=model_id,
            code=ErrorCode.NOT_FOUND,
            severity=ErrorSeverity.USER_ERROR,
        )


# ============================================================================
# Internal Errors
# ============================================================================


class InternalError(LearnRankError):
    """Internal error (unexpected condition)."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        details = {}
        if cause:
            details["cause"] = str(cause)
            details["cause_type"] = type(cause).__name__
        super().__init__(message, ErrorCode.INTERNAL_ERROR, details, severity=ErrorSeverity.FATAL)


# ============================================================================
# Boundary Translation Functions
# ============================================================================


def to_learnrank_error(exc: Exception) -> LearnRankError:
    """
    Translate arbitrary exceptions to LearnRankError at boundaries.

    Args:
        exc: Any exception

    Returns:
        LearnRankError instance
    """
    if isinstance(exc, LearnRankError):
        return exc

    if isinstance(exc, ValueError):
        return InvalidConfigError(str(exc))
    if isinstance(exc, OSError):
        return StorageError(f"Storage failure: {exc}", cause=exc)
    return InternalError(message=f"Unexpected error: {exc}", cause=exc)


def _truncate(text: str, limit: int = 200) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "..."
