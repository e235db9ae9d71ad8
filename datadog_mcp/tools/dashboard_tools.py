"""
Dashboard tools for Datadog MCP server.

Read-only access to dashboards through the v1 Dashboards API.
"""

from typing import Any
import logging

from .base import DatadogTool, limit_results
from ..models.params import GetDashboardParams, GetDashboardsParams

logger = logging.getLogger(__name__)


class GetDashboardTool(DatadogTool):
    """Fetch one dashboard definition by ID."""

    name = "get-dashboard"
    description = "Get the full definition of a Datadog dashboard by its ID."
    params_model = GetDashboardParams
    operation = "fetch dashboard"
    resource = "dashboards"

    async def run(self, params: GetDashboardParams) -> Any:
        logger.info(f"Getting dashboard: {params.dashboard_id}")
        url = f"{self.resolver.resolve('v1')}/dashboard/{params.dashboard_id}"
        response = await self.api_client.get(url)
        return response.json()


class GetDashboardsTool(DatadogTool):
    """List dashboard summaries.

    ``filterConfigured`` is part of the schema but is not applied; the
    upstream list is returned as-is apart from the optional truncation.
    """

    name = "get-dashboards"
    description = (
        "List Datadog dashboards. 'limit' truncates the returned list; it does "
        "not reduce what is fetched from Datadog."
    )
    params_model = GetDashboardsParams
    operation = "fetch dashboards"
    resource = "dashboards"

    async def run(self, params: GetDashboardsParams) -> Any:
        url = f"{self.resolver.resolve('v1')}/dashboard"
        response = await self.api_client.get(url)
        data = response.json()
        if not isinstance(data, dict):
            return data

        dashboards = data.get("dashboards") or []
        logger.debug(f"Fetched {len(dashboards)} dashboards")
        return {**data, "dashboards": limit_results(dashboards, params.limit)}
