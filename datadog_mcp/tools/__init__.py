"""MCP tool handlers for Datadog operations."""

from enum import Enum
from typing import Dict, Type

from ..api_client import DatadogHTTPClient, EndpointResolver
from .base import DatadogTool, limit_results
from .logs_tools import AggregateLogsTool, SearchLogsTool
from .dashboard_tools import GetDashboardTool, GetDashboardsTool
from .event_tools import GetEventsTool
from .incident_tools import GetIncidentsTool
from .metrics_tools import GetMetricMetadataTool, GetMetricsTool
from .monitor_tools import GetMonitorTool, GetMonitorsTool


class ToolName(str, Enum):
    """Closed set of tools exposed by the server."""
    AGGREGATE_LOGS = "aggregate-logs"
    SEARCH_LOGS = "search-logs"
    GET_DASHBOARD = "get-dashboard"
    GET_DASHBOARDS = "get-dashboards"
    GET_EVENTS = "get-events"
    GET_INCIDENTS = "get-incidents"
    GET_METRIC_METADATA = "get-metric-metadata"
    GET_METRICS = "get-metrics"
    GET_MONITOR = "get-monitor"
    GET_MONITORS = "get-monitors"


TOOL_CLASSES: Dict[ToolName, Type[DatadogTool]] = {
    ToolName.AGGREGATE_LOGS: AggregateLogsTool,
    ToolName.SEARCH_LOGS: SearchLogsTool,
    ToolName.GET_DASHBOARD: GetDashboardTool,
    ToolName.GET_DASHBOARDS: GetDashboardsTool,
    ToolName.GET_EVENTS: GetEventsTool,
    ToolName.GET_INCIDENTS: GetIncidentsTool,
    ToolName.GET_METRIC_METADATA: GetMetricMetadataTool,
    ToolName.GET_METRICS: GetMetricsTool,
    ToolName.GET_MONITOR: GetMonitorTool,
    ToolName.GET_MONITORS: GetMonitorsTool,
}


def build_tool_registry(
    api_client: DatadogHTTPClient,
    resolver: EndpointResolver
) -> Dict[ToolName, DatadogTool]:
    """Instantiate every tool against a shared client and resolver."""
    return {name: tool_class(api_client, resolver) for name, tool_class in TOOL_CLASSES.items()}


__all__ = [
    "ToolName",
    "TOOL_CLASSES",
    "build_tool_registry",
    "DatadogTool",
    "limit_results",
    "AggregateLogsTool",
    "SearchLogsTool",
    "GetDashboardTool",
    "GetDashboardsTool",
    "GetEventsTool",
    "GetIncidentsTool",
    "GetMetricMetadataTool",
    "GetMetricsTool",
    "GetMonitorTool",
    "GetMonitorsTool"
]
