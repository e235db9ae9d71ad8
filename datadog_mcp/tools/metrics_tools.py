"""
Metrics tools for Datadog MCP server.

Metric discovery (search) and per-metric metadata, both on the v1 API.
"""

from typing import Any
from urllib.parse import quote
import logging

from .base import DatadogTool
from ..models.params import GetMetricMetadataParams, GetMetricsParams

logger = logging.getLogger(__name__)


class GetMetricMetadataTool(DatadogTool):
    """Fetch type, unit and description of one metric."""

    name = "get-metric-metadata"
    description = "Get metadata (type, unit, description) for a Datadog metric."
    params_model = GetMetricMetadataParams
    operation = "fetch metric metadata"
    resource = "metric metadata"

    @staticmethod
    def build_path(params: GetMetricMetadataParams) -> str:
        return f"/metrics/{quote(params.metric_name, safe='')}"

    async def run(self, params: GetMetricMetadataParams) -> Any:
        logger.info(f"Getting metadata for metric: {params.metric_name}")
        url = f"{self.resolver.resolve('v1')}{self.build_path(params)}"
        response = await self.api_client.get(url)
        return response.json()


class GetMetricsTool(DatadogTool):
    """Search metric names."""

    name = "get-metrics"
    description = "Search Datadog metric names. Without 'q' every metric is matched."
    params_model = GetMetricsParams
    operation = "fetch metrics"
    resource = "metrics"

    @staticmethod
    def build_query(params: GetMetricsParams) -> str:
        return f"?q={quote(params.q or '*', safe='*')}"

    async def run(self, params: GetMetricsParams) -> Any:
        url = f"{self.resolver.resolve('v1')}/search{self.build_query(params)}"
        response = await self.api_client.get(url)
        return response.json()
