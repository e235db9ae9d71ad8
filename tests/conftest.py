"""Shared fixtures: a fake Datadog API behind ``httpx.MockTransport``."""

from typing import Any, List, Optional

import httpx
import pytest

from datadog_mcp.api_client import DatadogHTTPClient, EndpointResolver
from datadog_mcp.config import DatadogConfig


class FakeDatadog:
    """Records every request and answers with a canned response."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.status_code = 200
        self.payload: Any = {}
        self.error: Optional[Exception] = None

    def reply(self, payload: Any, status_code: int = 200) -> None:
        self.payload = payload
        self.status_code = status_code

    def fail(self, error: Exception) -> None:
        self.error = error

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def last_request(self) -> httpx.Request:
        assert self.requests, "no request was sent"
        return self.requests[-1]


@pytest.fixture
def config():
    return DatadogConfig(api_key="test-api-key", app_key="test-app-key")


@pytest.fixture
def datadog():
    return FakeDatadog()


@pytest.fixture
def api_client(config, datadog):
    return DatadogHTTPClient(config, transport=httpx.MockTransport(datadog.handler))


@pytest.fixture
def resolver(config):
    return EndpointResolver(config)
