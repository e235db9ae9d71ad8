import copy
import json

import httpx
import pytest

from datadog_mcp.config import DatadogConfig
from datadog_mcp.api_client import DatadogHTTPClient, EndpointResolver
from datadog_mcp.error_handler import AUTHORIZATION_FAILED_MESSAGE
from datadog_mcp.exceptions import AuthorizationError, UpstreamError, ValidationError
from datadog_mcp.models.params import AggregateLogsParams, LogsFilter, Compute
from datadog_mcp.tools.logs_tools import AggregateLogsTool, SearchLogsTool


ERROR_LOGS_FILTER = {"query": "status:error", "from": "now-1h", "to": "now"}


class TestAggregateLogsTool:

    @pytest.fixture
    def tool(self, api_client, resolver):
        return AggregateLogsTool(api_client, resolver)

    @pytest.mark.asyncio
    async def test_posts_body_without_absent_fields(self, tool, datadog):
        datadog.reply({"data": {"buckets": []}})

        result = await tool.execute({
            "filter": ERROR_LOGS_FILTER,
            "compute": [{"aggregation": "count"}]
        })

        assert result == {"data": {"buckets": []}}
        request = datadog.last_request
        assert request.method == "POST"
        assert str(request.url) == "https://api.datadoghq.com/api/v2/logs/analytics/aggregate"
        assert json.loads(request.content) == {
            "filter": ERROR_LOGS_FILTER,
            "compute": [{"aggregation": "count"}]
        }

    @pytest.mark.asyncio
    async def test_group_by_is_renamed(self, tool, datadog):
        await tool.execute({
            "filter": ERROR_LOGS_FILTER,
            "compute": [{"aggregation": "sum", "metric": "@duration", "type": "total"}],
            "groupBy": [{
                "facet": "service",
                "limit": 10,
                "sort": {"type": "measure", "aggregation": "count", "order": "desc"}
            }],
            "options": {"timezone": "UTC"}
        })

        body = json.loads(datadog.last_request.content)
        assert "groupBy" not in body
        assert body["group_by"] == [{
            "facet": "service",
            "limit": 10,
            "sort": {"type": "measure", "aggregation": "count", "order": "desc"}
        }]
        assert body["compute"] == [{"aggregation": "sum", "metric": "@duration", "type": "total"}]
        assert body["options"] == {"timezone": "UTC"}

    @pytest.mark.asyncio
    async def test_accepts_model_instances(self, tool, datadog):
        params = AggregateLogsParams(
            filter=LogsFilter(query="service:web", from_="now-15m"),
            compute=[Compute(aggregation="count")]
        )

        await tool.execute(params)

        assert json.loads(datadog.last_request.content) == {
            "filter": {"query": "service:web", "from": "now-15m"},
            "compute": [{"aggregation": "count"}]
        }

    @pytest.mark.asyncio
    async def test_forbidden_returns_fixed_message(self, tool, datadog):
        datadog.reply({"errors": ["Forbidden: application key 9f8e lacks scope"]}, status_code=403)

        with pytest.raises(AuthorizationError) as exc_info:
            await tool.execute({
                "filter": ERROR_LOGS_FILTER,
                "compute": [{"aggregation": "count"}]
            })

        assert exc_info.value.message == AUTHORIZATION_FAILED_MESSAGE
        assert "9f8e" not in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_upstream_error_detail(self, tool, datadog):
        datadog.reply({"errors": ["Invalid compute aggregation"]}, status_code=400)

        with pytest.raises(UpstreamError) as exc_info:
            await tool.execute({"compute": [{"aggregation": "bogus"}]})

        assert exc_info.value.message == "Invalid compute aggregation"
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_does_not_mutate_input(self, tool, datadog):
        params = {
            "filter": dict(ERROR_LOGS_FILTER, indexes=["main"]),
            "compute": [{"aggregation": "count"}],
            "groupBy": [{"facet": "service"}]
        }
        original = copy.deepcopy(params)

        await tool.execute(params)

        assert params == original


class TestSearchLogsTool:

    @pytest.fixture
    def tool(self, api_client, resolver):
        return SearchLogsTool(api_client, resolver)

    @pytest.mark.asyncio
    async def test_posts_search_body(self, tool, datadog):
        datadog.reply({"data": [], "meta": {}})

        await tool.execute({
            "filter": ERROR_LOGS_FILTER,
            "sort": "-timestamp",
            "page": {"limit": 3}
        })

        request = datadog.last_request
        assert str(request.url) == "https://api.datadoghq.com/api/v2/logs/events/search"
        assert json.loads(request.content) == {
            "filter": ERROR_LOGS_FILTER,
            "sort": "-timestamp",
            "page": {"limit": 3}
        }

    @pytest.mark.asyncio
    async def test_limit_truncates_data(self, tool, datadog):
        logs = [{"id": str(i), "attributes": {"service": "web"}} for i in range(5)]
        datadog.reply({"data": logs, "links": {"next": "cursor"}})

        result = await tool.execute({"limit": 2})

        assert result["data"] == logs[:2]
        assert result["links"] == {"next": "cursor"}
        # client-side only: no limit reaches the request body
        assert json.loads(datadog.last_request.content) == {}

    @pytest.mark.asyncio
    async def test_explicit_credentials_override_config(self, tool, datadog):
        await tool.execute({"apiKey": "param-api", "appKey": "param-app"})

        headers = datadog.last_request.headers
        assert headers["DD-API-KEY"] == "param-api"
        assert headers["DD-APPLICATION-KEY"] == "param-app"
        assert "apiKey" not in json.loads(datadog.last_request.content)

    @pytest.mark.asyncio
    async def test_falls_back_to_configured_credentials(self, tool, datadog):
        await tool.execute({})

        headers = datadog.last_request.headers
        assert headers["DD-API-KEY"] == "test-api-key"
        assert headers["DD-APPLICATION-KEY"] == "test-app-key"

    @pytest.mark.asyncio
    async def test_missing_credentials_fail_before_request(self, datadog):
        config = DatadogConfig()
        client = DatadogHTTPClient(config, transport=httpx.MockTransport(datadog.handler))
        tool = SearchLogsTool(client, EndpointResolver(config))

        with pytest.raises(ValidationError) as exc_info:
            await tool.execute({"filter": ERROR_LOGS_FILTER, "apiKey": "only-api"})

        assert exc_info.value.message == "API Key and App Key are required"
        assert datadog.requests == []

    @pytest.mark.asyncio
    async def test_forbidden_returns_fixed_message(self, tool, datadog):
        datadog.reply({"errors": ["Forbidden"]}, status_code=403)

        with pytest.raises(AuthorizationError):
            await tool.execute({"filter": ERROR_LOGS_FILTER})

    @pytest.mark.asyncio
    async def test_network_failure_is_upstream(self, tool, datadog):
        datadog.fail(httpx.ConnectTimeout("timed out"))

        with pytest.raises(UpstreamError) as exc_info:
            await tool.execute({})

        assert exc_info.value.message == "timed out"
