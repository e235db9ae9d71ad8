import json

import httpx
import pytest

from datadog_mcp.api_client import (
    DatadogHTTPClient,
    EndpointResolver,
    IPV4_LOCAL_ADDRESS,
    REQUEST_TIMEOUT_SECONDS,
)
from datadog_mcp.config import DatadogConfig


class TestEndpointResolver:

    def test_default_site(self):
        resolver = EndpointResolver(DatadogConfig())
        assert resolver.resolve("v1") == "https://api.datadoghq.com/api/v1"
        assert resolver.resolve("v2") == "https://api.datadoghq.com/api/v2"

    def test_site_setting(self):
        resolver = EndpointResolver(DatadogConfig(site="datadoghq.eu"))
        assert resolver.resolve("v2") == "https://api.datadoghq.eu/api/v2"

    def test_logs_site_wins_over_site(self):
        config = DatadogConfig(site="datadoghq.eu", logs_site="us5.datadoghq.com")
        assert EndpointResolver(config).resolve("v1") == "https://api.us5.datadoghq.com/api/v1"

    def test_reads_config_on_every_call(self):
        config = DatadogConfig()
        resolver = EndpointResolver(config)
        assert resolver.resolve("v1") == "https://api.datadoghq.com/api/v1"
        config.logs_site = "ap1.datadoghq.com"
        assert resolver.resolve("v1") == "https://api.ap1.datadoghq.com/api/v1"

    def test_unsupported_version(self):
        with pytest.raises(ValueError):
            EndpointResolver(DatadogConfig()).resolve("v3")


class TestDatadogHTTPClient:

    @pytest.mark.asyncio
    async def test_get_sends_default_headers(self, api_client, datadog):
        datadog.reply({"ok": True})

        response = await api_client.get("https://api.datadoghq.com/api/v1/monitor")

        assert response.json() == {"ok": True}
        request = datadog.last_request
        assert request.method == "GET"
        assert request.headers["Content-Type"] == "application/json"
        assert request.headers["DD-API-KEY"] == "test-api-key"
        assert request.headers["DD-APPLICATION-KEY"] == "test-app-key"

    @pytest.mark.asyncio
    async def test_post_sends_json_body(self, api_client, datadog):
        body = {"filter": {"query": "status:error"}}

        await api_client.post("https://api.datadoghq.com/api/v2/logs/events/search", body)

        request = datadog.last_request
        assert request.method == "POST"
        assert json.loads(request.content) == body

    @pytest.mark.asyncio
    async def test_header_overrides_take_precedence(self, api_client, datadog):
        await api_client.post(
            "https://api.datadoghq.com/api/v2/logs/events/search",
            {},
            headers={"DD-API-KEY": "other-key"}
        )

        request = datadog.last_request
        assert request.headers["DD-API-KEY"] == "other-key"
        assert request.headers["DD-APPLICATION-KEY"] == "test-app-key"
        assert request.headers["Content-Type"] == "application/json"

    @pytest.mark.asyncio
    async def test_override_matches_header_names_case_insensitively(self, api_client, datadog):
        await api_client.get(
            "https://api.datadoghq.com/api/v1/monitor",
            headers={"dd-api-key": "other-key", "dd-application-key": "other-app"}
        )

        request = datadog.last_request
        assert request.headers.get_list("DD-API-KEY") == ["other-key"]
        assert request.headers.get_list("DD-APPLICATION-KEY") == ["other-app"]

    @pytest.mark.asyncio
    async def test_missing_credentials_sent_empty(self, datadog):
        client = DatadogHTTPClient(DatadogConfig(), transport=httpx.MockTransport(datadog.handler))

        await client.get("https://api.datadoghq.com/api/v1/dashboard")

        assert datadog.last_request.headers["DD-API-KEY"] == ""
        assert datadog.last_request.headers["DD-APPLICATION-KEY"] == ""

    @pytest.mark.asyncio
    async def test_error_status_raises(self, api_client, datadog):
        datadog.reply({"errors": ["Not found"]}, status_code=404)

        with pytest.raises(httpx.HTTPStatusError) as exc_info:
            await api_client.get("https://api.datadoghq.com/api/v1/monitor/1")

        assert exc_info.value.response.status_code == 404
        assert len(datadog.requests) == 1

    @pytest.mark.asyncio
    async def test_network_error_is_not_retried(self, api_client, datadog):
        datadog.fail(httpx.ConnectError("connection refused"))

        with pytest.raises(httpx.ConnectError):
            await api_client.get("https://api.datadoghq.com/api/v1/monitor")

        assert len(datadog.requests) == 1

    def test_fixed_timeout(self, api_client):
        assert REQUEST_TIMEOUT_SECONDS == 30.0
        timeout = api_client.http_client.timeout
        assert (timeout.connect, timeout.read, timeout.write, timeout.pool) == (30.0, 30.0, 30.0, 30.0)

    @pytest.mark.asyncio
    async def test_default_transport_binds_ipv4(self, config, monkeypatch):
        created = []

        class RecordingTransport(httpx.AsyncHTTPTransport):
            def __init__(self, **kwargs):
                created.append(kwargs)
                super().__init__(**kwargs)

        monkeypatch.setattr(httpx, "AsyncHTTPTransport", RecordingTransport)
        client = DatadogHTTPClient(config)

        client.http_client

        assert created == [{"local_address": IPV4_LOCAL_ADDRESS}]
        assert IPV4_LOCAL_ADDRESS == "0.0.0.0"
        await client.aclose()

    @pytest.mark.asyncio
    async def test_aclose_releases_client(self, api_client):
        first = api_client.http_client
        await api_client.aclose()
        assert first.is_closed
        assert api_client.http_client is not first
