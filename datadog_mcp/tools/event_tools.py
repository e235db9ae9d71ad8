"""
Event tools for Datadog MCP server.
"""

from typing import Any
import logging

from .base import DatadogTool, build_query_string, limit_results
from ..models.params import GetEventsParams

logger = logging.getLogger(__name__)


class GetEventsTool(DatadogTool):
    """Query the v1 event stream for a time window."""

    name = "get-events"
    description = (
        "Get Datadog events between two POSIX timestamps, optionally filtered by "
        "priority, sources and tags."
    )
    params_model = GetEventsParams
    operation = "fetch events"
    resource = "events"

    @staticmethod
    def build_query(params: GetEventsParams) -> str:
        return build_query_string([
            ("start", params.start),
            ("end", params.end),
            ("priority", params.priority or None),
            ("sources", params.sources or None),
            ("tags", params.tags or None),
            ("unaggregated", params.unaggregated),
            ("exclude_aggregate", params.exclude_aggregation),
        ])

    async def run(self, params: GetEventsParams) -> Any:
        logger.info(f"Fetching events from {params.start} to {params.end}")
        url = f"{self.resolver.resolve('v1')}/events{self.build_query(params)}"
        response = await self.api_client.get(url)
        data = response.json()

        if isinstance(data, dict) and data.get("events"):
            data = {**data, "events": limit_results(data["events"], params.limit)}
        return data
