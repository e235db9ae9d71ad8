"""
Monitor tools for Datadog MCP server.
"""

from typing import Any
import logging

from .base import DatadogTool, build_query_string, limit_results
from ..models.params import GetMonitorParams, GetMonitorsParams

logger = logging.getLogger(__name__)


class GetMonitorTool(DatadogTool):
    """Fetch one monitor by ID."""

    name = "get-monitor"
    description = "Get the configuration and state of a Datadog monitor by its ID."
    params_model = GetMonitorParams
    operation = "fetch monitor"
    resource = "monitors"

    async def run(self, params: GetMonitorParams) -> Any:
        logger.info(f"Getting monitor: {params.monitor_id}")
        url = f"{self.resolver.resolve('v1')}/monitor/{params.monitor_id}"
        response = await self.api_client.get(url)
        return response.json()


class GetMonitorsTool(DatadogTool):
    """List monitors, optionally filtered by group state and tags."""

    name = "get-monitors"
    description = (
        "List Datadog monitors filtered by group states, scope tags or monitor "
        "tags. 'limit' truncates the returned list."
    )
    params_model = GetMonitorsParams
    operation = "fetch monitors"
    resource = "monitors"

    @staticmethod
    def build_query(params: GetMonitorsParams) -> str:
        return build_query_string([
            ("group_states", ",".join(params.group_states) if params.group_states else None),
            ("tags", params.tags or None),
            ("monitor_tags", params.monitor_tags or None),
        ])

    async def run(self, params: GetMonitorsParams) -> Any:
        url = f"{self.resolver.resolve('v1')}/monitor{self.build_query(params)}"
        response = await self.api_client.get(url)
        return limit_results(response.json(), params.limit)
