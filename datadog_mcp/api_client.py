"""HTTP transport and endpoint resolution for the Datadog REST API."""

import logging
from typing import Any, Dict, Optional

import httpx

from .config import DatadogConfig


logger = logging.getLogger(__name__)

# Applied to each phase (connect, read, write, pool acquisition) separately,
# not to the request as a whole.
REQUEST_TIMEOUT_SECONDS = 30.0

# Binding the local side to the IPv4 wildcard restricts resolution to A
# records. Some hosts advertise AAAA records without working IPv6 routes,
# which otherwise shows up as connect timeouts.
IPV4_LOCAL_ADDRESS = "0.0.0.0"

SUPPORTED_API_VERSIONS = ("v1", "v2")


def build_ipv4_transport() -> httpx.AsyncHTTPTransport:
    """Connection pool whose sockets are bound to the IPv4 wildcard address."""
    return httpx.AsyncHTTPTransport(local_address=IPV4_LOCAL_ADDRESS)


class EndpointResolver:
    """Builds versioned Datadog API base URLs from configuration."""

    def __init__(self, config: DatadogConfig):
        self.config = config

    def resolve(self, version: str = "v1") -> str:
        """Return the base URL for an API version.

        Args:
            version: ``"v1"`` or ``"v2"``

        Returns:
            URL such as ``https://api.datadoghq.com/api/v2``

        Raises:
            ValueError: If the version is not supported
        """
        if version not in SUPPORTED_API_VERSIONS:
            raise ValueError(
                f"Unsupported API version '{version}', expected one of: {', '.join(SUPPORTED_API_VERSIONS)}"
            )
        return f"https://api.{self.config.resolved_site}/api/{version}"


class DatadogHTTPClient:
    """Low-level client for Datadog REST APIs.

    Wraps one pooled ``httpx.AsyncClient`` with a fixed timeout, IPv4-only
    connections and the Datadog credential headers. Failed requests are
    raised straight to the caller; nothing is retried.

    Attributes:
        config: Datadog configuration holding the credentials
        http_client: Underlying pooled HTTP client
    """

    def __init__(
        self,
        config: DatadogConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """Initialize the client.

        Args:
            config: Datadog configuration containing the credentials
            transport: Optional httpx transport replacing the IPv4 one
        """
        self.config = config
        self._transport = transport
        self._http_client: Optional[httpx.AsyncClient] = None

        logger.debug(
            "Initialized Datadog HTTP client",
            extra={
                "site": self.config.resolved_site,
                "timeout": REQUEST_TIMEOUT_SECONDS,
                "api_key_set": bool(self.config.api_key),
                "app_key_set": bool(self.config.app_key)
            }
        )

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client for API requests.

        Returns:
            Configured HTTP client instance
        """
        if self._http_client is None:
            transport = self._transport or build_ipv4_transport()
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(REQUEST_TIMEOUT_SECONDS),
                transport=transport,
                headers={
                    "User-Agent": f"{self.config.server_name}/{self.config.server_version}",
                    "Accept": "application/json"
                }
            )
        return self._http_client

    def default_headers(self) -> Dict[str, str]:
        """Headers sent with every request unless overridden."""
        return {
            "Content-Type": "application/json",
            "DD-API-KEY": self.config.api_key or "",
            "DD-APPLICATION-KEY": self.config.app_key or ""
        }

    def _merge_headers(self, headers: Optional[Dict[str, str]]) -> httpx.Headers:
        # header names are case-insensitive, so "dd-api-key" replaces "DD-API-KEY"
        request_headers = httpx.Headers(self.default_headers())
        if headers:
            request_headers.update(headers)
        return request_headers

    async def get(self, url: str, headers: Optional[Dict[str, str]] = None) -> httpx.Response:
        """Issue a GET request.

        Args:
            url: Fully-qualified URL, query string included
            headers: Header overrides applied on top of the defaults

        Returns:
            Successful HTTP response

        Raises:
            httpx.HTTPStatusError: If the response status is not 2xx
            httpx.RequestError: If the request could not be completed
        """
        return await self._request("GET", url, headers=headers)

    async def post(
        self,
        url: str,
        body: Any,
        headers: Optional[Dict[str, str]] = None
    ) -> httpx.Response:
        """Issue a POST request with a JSON body.

        Args:
            url: Fully-qualified URL
            body: JSON-serializable request body
            headers: Header overrides applied on top of the defaults

        Returns:
            Successful HTTP response

        Raises:
            httpx.HTTPStatusError: If the response status is not 2xx
            httpx.RequestError: If the request could not be completed
        """
        return await self._request("POST", url, json_data=body, headers=headers)

    async def _request(
        self,
        method: str,
        url: str,
        json_data: Any = None,
        headers: Optional[Dict[str, str]] = None
    ) -> httpx.Response:
        logger.debug(f"Making {method} request to {url}", extra={"has_json_data": json_data is not None})

        response = await self.http_client.request(
            method=method,
            url=url,
            json=json_data,
            headers=self._merge_headers(headers)
        )

        logger.debug(
            "Received response",
            extra={
                "status_code": response.status_code,
                "response_size": len(response.content) if response.content else 0,
                "url": url
            }
        )

        response.raise_for_status()
        return response

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> "DatadogHTTPClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
