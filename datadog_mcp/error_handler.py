"""Error classification and centralized error logging for Datadog MCP server."""

import logging
import sys
import traceback
from typing import Dict, Any, Optional

import httpx
import structlog

from .exceptions import (
    DatadogError,
    AuthorizationError,
    UpstreamError,
    ValidationError,
    ConfigurationError
)

logger = structlog.get_logger(__name__)

AUTHORIZATION_FAILED_MESSAGE = (
    "Datadog API authorization failed. "
    "Please verify your API and Application keys have the correct permissions."
)


def _first_upstream_error(response: httpx.Response) -> Optional[str]:
    """Return the first entry of the upstream ``errors`` list, if any."""
    try:
        payload = response.json()
    except ValueError:
        return None

    if not isinstance(payload, dict):
        return None
    errors = payload.get("errors")
    if not isinstance(errors, list) or not errors:
        return None

    first = errors[0]
    if isinstance(first, dict):
        # v2 endpoints use JSON:API error objects
        first = first.get("detail") or first.get("title") or first
    return str(first) if first else None


def classify_error(error: Exception, operation: str) -> DatadogError:
    """Turn a failed tool call into a classified error.

    Args:
        error: Exception raised while calling Datadog
        operation: Short phrase naming the failed operation, e.g. ``"search logs"``

    Returns:
        ``AuthorizationError`` for HTTP 403, the error itself when it is
        already classified, ``UpstreamError`` otherwise
    """
    if isinstance(error, DatadogError):
        return error

    status_code = None
    detail = None
    if isinstance(error, httpx.HTTPStatusError):
        status_code = error.response.status_code
        if status_code == 403:
            return AuthorizationError(AUTHORIZATION_FAILED_MESSAGE, context={"operation": operation})
        detail = _first_upstream_error(error.response)

    message = detail or str(error) or f"Failed to {operation}"
    return UpstreamError(message, status_code=status_code)


class ErrorHandler:
    """Centralized error logging and MCP error formatting."""

    def __init__(self, server_name: str = "datadog-mcp-server"):
        """Initialize error handler.

        Args:
            server_name: Name of the MCP server for logging context
        """
        self.server_name = server_name
        self.logger = logger.bind(server_name=server_name)

    def handle_tool_error(
        self,
        error: Exception,
        tool_name: str,
        arguments: Optional[Dict[str, Any]],
        execution_time_ms: Optional[float] = None
    ) -> Dict[str, Any]:
        """Log a tool failure and build the MCP error payload.

        Args:
            error: Exception that occurred during tool execution
            tool_name: Name of the tool that failed
            arguments: Arguments passed to the tool
            execution_time_ms: Tool execution time in milliseconds

        Returns:
            Dict with ``content`` and ``isError`` keys
        """
        self._log_error(error, tool_name, arguments, execution_time_ms)

        return {
            "content": [
                {
                    "type": "text",
                    "text": self._format_error_response(error, tool_name)
                }
            ],
            "isError": True
        }

    def _log_error(
        self,
        error: Exception,
        tool_name: str,
        arguments: Optional[Dict[str, Any]],
        execution_time_ms: Optional[float] = None
    ) -> None:
        log_context: Dict[str, Any] = {
            "tool_name": tool_name,
            "error_type": type(error).__name__,
            "error_message": str(error)
        }

        if execution_time_ms is not None:
            log_context["execution_time_ms"] = round(execution_time_ms, 2)

        # Keys only; values may hold credentials
        if arguments:
            log_context["argument_keys"] = list(arguments.keys())

        if isinstance(error, DatadogError):
            log_context["category"] = error.category.value
            if error.context:
                log_context["error_context"] = error.context

        if isinstance(error, UpstreamError) and error.status_code:
            log_context["status_code"] = error.status_code

        if isinstance(error, ValidationError):
            if error.field_name:
                log_context["field_name"] = error.field_name
            if error.validation_errors:
                log_context["validation_errors"] = error.validation_errors

        if isinstance(error, (ValidationError, ConfigurationError)):
            self.logger.warning("Tool validation error", **log_context)
        elif isinstance(error, AuthorizationError):
            self.logger.error("Tool authorization error", **log_context)
        elif isinstance(error, UpstreamError):
            if error.is_client_error:
                self.logger.warning("Tool upstream client error", **log_context)
            else:
                self.logger.error("Tool upstream error", **log_context)
        elif isinstance(error, DatadogError):
            self.logger.error("Tool Datadog error", **log_context)
        else:
            log_context["traceback"] = traceback.format_exc()
            self.logger.error("Tool unexpected error", **log_context)

    def _format_error_response(self, error: Exception, tool_name: str) -> str:
        if isinstance(error, ValidationError):
            return self._format_validation_error(error, tool_name)
        elif isinstance(error, AuthorizationError):
            return f"Authorization Error in {tool_name}: {error.message}"
        elif isinstance(error, UpstreamError):
            return self._format_upstream_error(error, tool_name)
        elif isinstance(error, ConfigurationError):
            message = f"Configuration Error in {tool_name}: {error.message}"
            if error.config_key:
                message += f"\nConfiguration Key: {error.config_key}"
            return message
        elif isinstance(error, DatadogError):
            return f"Datadog Error in {tool_name}: {error.message}"
        else:
            message = f"Unexpected Error in {tool_name}: {str(error)}"
            message += f"\nError Type: {type(error).__name__}"
            return message

    def _format_validation_error(self, error: ValidationError, tool_name: str) -> str:
        message = f"Validation Error in {tool_name}: {error.message}"

        if error.field_name:
            message += f"\nField: {error.field_name}"

        if error.validation_errors:
            message += "\nValidation Details:"
            for field, field_error in error.validation_errors.items():
                message += f"\n  - {field}: {field_error}"

        return message

    def _format_upstream_error(self, error: UpstreamError, tool_name: str) -> str:
        message = f"API Error in {tool_name}: {error.message}"

        if error.status_code:
            message += f"\nHTTP Status: {error.status_code}"

        return message

    def log_tool_call(
        self,
        tool_name: str,
        arguments: Optional[Dict[str, Any]],
        success: bool,
        execution_time_ms: float,
        response_size: Optional[int] = None
    ) -> None:
        """Record one finished tool call. Argument values are never logged."""
        log = self.logger.bind(
            tool_name=tool_name,
            argument_keys=sorted(arguments) if arguments else [],
            execution_time_ms=round(execution_time_ms, 2)
        )
        if success:
            log.info("Tool call succeeded", response_size=response_size)
        else:
            log.warning("Tool call failed")

    @staticmethod
    def configure_logging(log_level: str = "INFO", log_format: str = "json") -> None:
        """Route structlog through stdlib logging on stderr.

        stdout is reserved for the MCP stdio protocol.
        """
        renderer = (
            structlog.processors.JSONRenderer()
            if log_format.lower() == "json"
            else structlog.dev.ConsoleRenderer(colors=False)
        )

        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.format_exc_info,
                renderer,
            ],
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

        logging.basicConfig(
            level=getattr(logging, log_level.upper()),
            format="%(message)s",
            stream=sys.stderr
        )
