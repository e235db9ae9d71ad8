"""Parameter models for the Datadog tools.

Wire names follow the MCP tool schemas (camelCase); Python callers may also
populate fields by attribute name. Every optional field defaults to ``None``
and is dropped from the outgoing request when unset.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ToolParams(BaseModel):
    """Base class for tool parameter models."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class LogsFilter(ToolParams):
    """Time-bounded, optionally index-scoped log search predicate."""

    query: Optional[str] = Field(None, description="Log search query, e.g. 'service:web status:error'")
    from_: Optional[str] = Field(None, alias="from", description="Start of the time range, e.g. 'now-1h'")
    to: Optional[str] = Field(None, description="End of the time range, e.g. 'now'")
    indexes: Optional[List[str]] = Field(None, description="Log indexes to search")


class Compute(ToolParams):
    """One aggregation in an analytics query."""

    aggregation: str = Field(..., description="Aggregation function, e.g. 'count', 'sum', 'avg'")
    metric: Optional[str] = Field(None, description="Measure to aggregate, e.g. '@duration'")
    type: Optional[str] = Field(None, description="Compute type, e.g. 'total' or 'timeseries'")


class GroupBySort(ToolParams):
    type: Optional[Literal["measure", "alphabetical", "time"]] = Field(None, description="Sort type")
    aggregation: Optional[str] = Field(None, description="Aggregation to sort by")
    order: Optional[str] = Field(None, description="Sort order, 'asc' or 'desc'")


class GroupBy(ToolParams):
    """Grouping dimension with an optional bucket cap and ordering."""

    facet: str = Field(..., description="Facet to group by, e.g. 'service'")
    limit: Optional[int] = Field(None, description="Maximum number of buckets")
    sort: Optional[GroupBySort] = Field(None, description="Bucket ordering")


class AggregateOptions(ToolParams):
    timezone: Optional[str] = Field(None, description="Timezone for time buckets, e.g. 'UTC'")


class Page(ToolParams):
    """Upstream cursor pagination controls."""

    limit: Optional[int] = Field(None, description="Maximum number of events per upstream page")
    cursor: Optional[str] = Field(None, description="Cursor returned by a previous page")


class AggregateLogsParams(ToolParams):
    filter: Optional[LogsFilter] = Field(None, description="Logs to aggregate")
    compute: Optional[List[Compute]] = Field(None, description="Aggregations to compute")
    group_by: Optional[List[GroupBy]] = Field(None, alias="groupBy", description="Grouping dimensions")
    options: Optional[AggregateOptions] = Field(None, description="Query options")


class SearchLogsParams(ToolParams):
    filter: Optional[LogsFilter] = Field(None, description="Logs to search")
    sort: Optional[str] = Field(None, description="Sort order, 'timestamp' or '-timestamp'")
    page: Optional[Page] = Field(None, description="Upstream pagination")
    limit: Optional[int] = Field(None, ge=0, description="Maximum number of logs returned to the caller (client-side truncation)")
    api_key: Optional[str] = Field(None, alias="apiKey", description="API key overriding the configured one")
    app_key: Optional[str] = Field(None, alias="appKey", description="Application key overriding the configured one")


class GetDashboardParams(ToolParams):
    dashboard_id: str = Field(..., alias="dashboardId", description="Dashboard ID")


class GetDashboardsParams(ToolParams):
    # Accepted for schema compatibility; not applied anywhere.
    filter_configured: Optional[bool] = Field(None, alias="filterConfigured", description="Accepted but currently has no effect")
    limit: Optional[int] = Field(None, ge=0, description="Maximum number of dashboards returned (client-side truncation)")


class GetEventsParams(ToolParams):
    start: int = Field(..., description="Start of the time range, POSIX seconds")
    end: int = Field(..., description="End of the time range, POSIX seconds")
    priority: Optional[Literal["normal", "low"]] = Field(None, description="Event priority")
    sources: Optional[str] = Field(None, description="Comma-separated event sources")
    tags: Optional[str] = Field(None, description="Comma-separated tags")
    unaggregated: Optional[bool] = Field(None, description="Return every event instead of aggregates")
    exclude_aggregation: Optional[bool] = Field(None, alias="excludeAggregation", description="Exclude aggregate events")
    limit: Optional[int] = Field(None, ge=0, description="Maximum number of events returned (client-side truncation)")


class GetIncidentsParams(ToolParams):
    include_archived: Optional[bool] = Field(None, alias="includeArchived", description="When present (true or false), request archived incidents with include=archived")
    page_size: Optional[int] = Field(None, alias="pageSize", description="Upstream page size")
    page_offset: Optional[int] = Field(None, alias="pageOffset", description="Upstream page offset")
    query: Optional[str] = Field(None, description="Incident search query")
    limit: Optional[int] = Field(None, ge=0, description="Maximum number of incidents returned (client-side truncation)")


class GetMetricMetadataParams(ToolParams):
    metric_name: str = Field(..., alias="metricName", description="Metric name, e.g. 'system.cpu.user'")


class GetMetricsParams(ToolParams):
    q: Optional[str] = Field(None, description="Metric search query; defaults to '*'")


class GetMonitorParams(ToolParams):
    monitor_id: int = Field(..., alias="monitorId", description="Monitor ID")


class GetMonitorsParams(ToolParams):
    group_states: Optional[List[str]] = Field(None, alias="groupStates", description="Group states, e.g. ['alert', 'warn']")
    tags: Optional[str] = Field(None, description="Comma-separated scope tags")
    monitor_tags: Optional[str] = Field(None, alias="monitorTags", description="Comma-separated monitor tags")
    limit: Optional[int] = Field(None, ge=0, description="Maximum number of monitors returned (client-side truncation)")
