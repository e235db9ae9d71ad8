"""
Incident tools for Datadog MCP server.
"""

from typing import Any

from .base import DatadogTool, build_query_string, limit_results
from ..models.params import GetIncidentsParams


class GetIncidentsTool(DatadogTool):
    """List incidents from the v2 Incidents API."""

    name = "get-incidents"
    description = (
        "List Datadog incidents. 'pageSize'/'pageOffset' page upstream; 'limit' "
        "only truncates the returned list."
    )
    params_model = GetIncidentsParams
    operation = "fetch incidents"
    resource = "incidents"

    @staticmethod
    def build_query(params: GetIncidentsParams) -> str:
        return build_query_string([
            ("include", "archived" if params.include_archived is not None else None),
            ("page[size]", params.page_size),
            ("page[offset]", params.page_offset),
            ("filter[query]", params.query or None),
        ])

    async def run(self, params: GetIncidentsParams) -> Any:
        url = f"{self.resolver.resolve('v2')}/incidents{self.build_query(params)}"
        response = await self.api_client.get(url)
        data = response.json()

        if isinstance(data, dict) and data.get("data"):
            data = {**data, "data": limit_results(data["data"], params.limit)}
        return data
