"""
Shared tool contract for the Datadog MCP server.

Every tool follows the same pipeline: validate parameters, build the
request, call Datadog through the shared HTTP client, optionally trim the
result, and classify any failure.
"""

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, Iterable, Optional, Tuple, Type, Union
from urllib.parse import urlencode
import logging

from pydantic import ValidationError as PydanticValidationError

from ..api_client import DatadogHTTPClient, EndpointResolver
from ..error_handler import classify_error
from ..exceptions import AuthorizationError, ValidationError
from ..models.params import ToolParams

logger = logging.getLogger(__name__)


def limit_results(items: Any, limit: Optional[int]) -> Any:
    """Trim a result collection to at most ``limit`` entries.

    This is display truncation only. The whole upstream page has already
    been downloaded when it runs, so it saves neither bandwidth nor quota;
    use the upstream paging parameters for real pagination.

    Args:
        items: Collection returned by Datadog
        limit: Maximum number of entries; ``None`` or ``0`` keeps everything

    Returns:
        A new list holding the first ``limit`` entries, or ``items`` unchanged
    """
    if not limit or not isinstance(items, list) or len(items) <= limit:
        return items
    return items[:limit]


def format_query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_query_string(pairs: Iterable[Tuple[str, Any]]) -> str:
    """Encode query pairs, skipping those whose value is ``None``.

    Returns:
        ``"?k=v&..."`` or an empty string when nothing is left
    """
    encoded = urlencode([
        (key, format_query_value(value))
        for key, value in pairs
        if value is not None
    ])
    return f"?{encoded}" if encoded else ""


class DatadogTool(ABC):
    """Base class for a single Datadog tool.

    Subclasses declare ``name``, ``description``, ``params_model``,
    ``operation`` (used in fallback error messages) and ``resource`` (used
    in the authorization log line), and implement ``run``.
    """

    name: ClassVar[str]
    description: ClassVar[str]
    params_model: ClassVar[Type[ToolParams]]
    operation: ClassVar[str]
    resource: ClassVar[str]

    def __init__(self, api_client: DatadogHTTPClient, resolver: EndpointResolver):
        """Initialize the tool.

        Args:
            api_client: Shared Datadog HTTP client
            resolver: Endpoint resolver for versioned base URLs
        """
        self.api_client = api_client
        self.resolver = resolver

    def initialize(self) -> None:
        """Lifecycle hook; tools hold no state to set up."""

    def definition(self) -> Dict[str, Any]:
        """MCP tool definition with a JSON schema built from ``params_model``."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.params_model.model_json_schema(by_alias=True)
        }

    def parse_params(self, params: Union[ToolParams, Dict[str, Any], None]) -> ToolParams:
        """Validate raw parameters into this tool's model.

        Raises:
            ValidationError: If the parameters do not match the model
        """
        if isinstance(params, self.params_model):
            return params
        if isinstance(params, ToolParams):
            params = params.model_dump(by_alias=True, exclude_none=True)

        try:
            return self.params_model.model_validate(params or {})
        except PydanticValidationError as e:
            validation_errors = {
                ".".join(str(x) for x in error["loc"]) or "params": error["msg"]
                for error in e.errors()
            }
            raise ValidationError(
                f"Invalid parameters for {self.name}",
                validation_errors=validation_errors
            ) from e

    async def execute(self, params: Union[ToolParams, Dict[str, Any], None] = None) -> Any:
        """Run the tool.

        Args:
            params: Parameter model instance or its dict form

        Returns:
            JSON payload from Datadog, possibly truncated

        Raises:
            ValidationError: If parameters are invalid or a precondition fails
            AuthorizationError: If Datadog answers 403
            UpstreamError: For any other failure
        """
        parsed = self.parse_params(params)

        try:
            return await self.run(parsed)
        except ValidationError:
            raise
        except Exception as e:
            error = classify_error(e, self.operation)
            if isinstance(error, AuthorizationError):
                logger.error(
                    "Authorization failed (403 Forbidden): Check that your API key and Application key "
                    f"are valid and have sufficient permissions to access {self.resource}."
                )
            else:
                logger.error(f"Error trying to {self.operation}: {error.message}")
            if error is e:
                raise
            raise error from e

    @abstractmethod
    async def run(self, params: Any) -> Any:
        """Issue the request for validated parameters and shape the result."""
