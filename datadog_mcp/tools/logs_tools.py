"""
Log tools for Datadog MCP server.

This module implements the log analytics (aggregate) and log search tools,
both backed by POST endpoints of the v2 Logs API.
"""

from typing import Any, Dict
import logging

from pydantic import BaseModel

from .base import DatadogTool, limit_results
from ..exceptions import ValidationError
from ..models.params import AggregateLogsParams, SearchLogsParams

logger = logging.getLogger(__name__)


def _dump(value: Any) -> Any:
    """Serialize a parameter value with wire names and without unset fields."""
    if isinstance(value, list):
        return [_dump(item) for item in value]
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, exclude_none=True)
    return value


def _body(**fields: Any) -> Dict[str, Any]:
    return {key: _dump(value) for key, value in fields.items() if value is not None}


class AggregateLogsTool(DatadogTool):
    """Aggregate logs into buckets and metrics."""

    name = "aggregate-logs"
    description = (
        "Aggregate Datadog logs with the Log Analytics API: counts, sums or other "
        "computes over a filter, optionally grouped by facets."
    )
    params_model = AggregateLogsParams
    operation = "aggregate logs"
    resource = "log analytics"

    @staticmethod
    def build_body(params: AggregateLogsParams) -> Dict[str, Any]:
        return _body(
            filter=params.filter,
            compute=params.compute,
            group_by=params.group_by,
            options=params.options
        )

    async def run(self, params: AggregateLogsParams) -> Any:
        url = f"{self.resolver.resolve('v2')}/logs/analytics/aggregate"
        response = await self.api_client.post(url, self.build_body(params))
        return response.json()


class SearchLogsTool(DatadogTool):
    """Search individual log events.

    Credentials may be passed per call; they override the configured ones.
    """

    name = "search-logs"
    description = (
        "Search Datadog log events matching a filter. Use 'page' for upstream "
        "cursor pagination; 'limit' only truncates the returned list."
    )
    params_model = SearchLogsParams
    operation = "search logs"
    resource = "logs"

    @staticmethod
    def build_body(params: SearchLogsParams) -> Dict[str, Any]:
        return _body(filter=params.filter, sort=params.sort, page=params.page)

    def resolve_credentials(self, params: SearchLogsParams) -> Dict[str, str]:
        """Credential headers for this call.

        Raises:
            ValidationError: If either key cannot be resolved
        """
        api_key = params.api_key or self.api_client.config.api_key
        app_key = params.app_key or self.api_client.config.app_key

        if not api_key or not app_key:
            raise ValidationError(
                "API Key and App Key are required",
                field_name="apiKey" if not api_key else "appKey"
            )

        return {"DD-API-KEY": api_key, "DD-APPLICATION-KEY": app_key}

    async def run(self, params: SearchLogsParams) -> Any:
        headers = self.resolve_credentials(params)
        logger.info(f"Searching logs with query '{params.filter.query if params.filter else None}'")

        url = f"{self.resolver.resolve('v2')}/logs/events/search"
        response = await self.api_client.post(url, self.build_body(params), headers=headers)
        data = response.json()

        if isinstance(data, dict) and "data" in data:
            data = {**data, "data": limit_results(data["data"], params.limit)}
        return data
