"""Data models for Datadog MCP server."""

from .params import (
    ToolParams,
    LogsFilter,
    Compute,
    GroupBySort,
    GroupBy,
    AggregateOptions,
    Page,
    AggregateLogsParams,
    SearchLogsParams,
    GetDashboardParams,
    GetDashboardsParams,
    GetEventsParams,
    GetIncidentsParams,
    GetMetricMetadataParams,
    GetMetricsParams,
    GetMonitorParams,
    GetMonitorsParams
)

__all__ = [
    # Shared building blocks
    'ToolParams',
    'LogsFilter',
    'Compute',
    'GroupBySort',
    'GroupBy',
    'AggregateOptions',
    'Page',

    # Per-tool parameters
    'AggregateLogsParams',
    'SearchLogsParams',
    'GetDashboardParams',
    'GetDashboardsParams',
    'GetEventsParams',
    'GetIncidentsParams',
    'GetMetricMetadataParams',
    'GetMetricsParams',
    'GetMonitorParams',
    'GetMonitorsParams'
]
