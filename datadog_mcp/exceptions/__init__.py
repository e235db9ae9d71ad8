"""Custom exception classes for Datadog MCP server."""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCategory(str, Enum):
    """Classification of a failed tool invocation."""
    AUTHORIZATION = "authorization"
    VALIDATION = "validation"
    UPSTREAM = "upstream"


class DatadogError(Exception):
    """Base exception for all Datadog operations.

    Every error that leaves a tool is a subclass of this class, so the outer
    dispatcher only has to look at ``category`` and ``message``.
    """

    category: ErrorCategory = ErrorCategory.UPSTREAM

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        """Initialize the exception with a message and optional context.

        Args:
            message: Human-readable error message
            context: Optional dictionary containing additional error context
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return string representation of the exception."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (Context: {context_str})"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "category": self.category.value,
            "message": self.message,
            "context": self.context
        }


class AuthorizationError(DatadogError):
    """Raised when Datadog rejects the credentials (HTTP 403).

    The message is always the fixed, caller-safe text; the upstream response
    body is never attached because it can contain sensitive diagnostics.
    """

    category = ErrorCategory.AUTHORIZATION

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, context)
        self.status_code = 403

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        result = super().to_dict()
        result["status_code"] = self.status_code
        return result


class UpstreamError(DatadogError):
    """Raised when a Datadog API call fails for any reason other than 403.

    This covers:
    - non-403 HTTP error statuses
    - network-level failures (DNS, connect, timeout)
    - malformed response bodies
    """

    category = ErrorCategory.UPSTREAM

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        """Initialize upstream error.

        Args:
            message: Error message describing the failure
            status_code: HTTP status code, if a response was received
            context: Additional context about the failure
        """
        super().__init__(message, context)
        self.status_code = status_code

    def __str__(self) -> str:
        """Return string representation including status code."""
        base_str = super().__str__()
        if self.status_code:
            return f"{base_str} (HTTP {self.status_code})"
        return base_str

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        result = super().to_dict()
        if self.status_code:
            result["status_code"] = self.status_code
        return result

    @property
    def is_client_error(self) -> bool:
        """Check if this is a client error (4xx status code)."""
        return self.status_code is not None and 400 <= self.status_code < 500


class ValidationError(DatadogError):
    """Raised when a precondition fails before any network call.

    This exception is raised when:
    - Tool parameters do not match the tool's parameter model
    - search-logs cannot resolve an API key and an application key
    """

    category = ErrorCategory.VALIDATION

    def __init__(
        self,
        message: str,
        field_name: Optional[str] = None,
        validation_errors: Optional[Dict[str, str]] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        """Initialize validation error.

        Args:
            message: Error message describing the validation failure
            field_name: Name of the field that failed validation
            validation_errors: Dictionary of field names to validation error messages
            context: Additional context about the validation failure
        """
        super().__init__(message, context)
        self.field_name = field_name
        self.validation_errors = validation_errors or {}

    def __str__(self) -> str:
        """Return string representation including field information."""
        base_str = super().__str__()
        if self.field_name:
            return f"{base_str} (Field: {self.field_name})"
        return base_str

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        result = super().to_dict()
        if self.field_name:
            result["field_name"] = self.field_name
        if self.validation_errors:
            result["validation_errors"] = self.validation_errors
        return result


class ConfigurationError(DatadogError):
    """Raised when server configuration cannot be loaded.

    This exception is raised when:
    - A configuration file is missing or is not a JSON object
    - An environment variable holds a value of the wrong type
    """

    category = ErrorCategory.VALIDATION

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, context)
        self.config_key = config_key

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        result = super().to_dict()
        if self.config_key:
            result["config_key"] = self.config_key
        return result


# Export all exception classes
__all__ = [
    'ErrorCategory',
    'DatadogError',
    'AuthorizationError',
    'UpstreamError',
    'ValidationError',
    'ConfigurationError'
]
