"""Datadog MCP Server - Model Context Protocol tools for the Datadog REST API."""

__version__ = "0.2.0"
__description__ = "Model Context Protocol server for Datadog logs, metrics, monitors, dashboards, events and incidents"

from .config import DatadogConfig
from .api_client import DatadogHTTPClient, EndpointResolver
from .server import DatadogMCPServer

__all__ = ["DatadogMCPServer", "DatadogConfig", "DatadogHTTPClient", "EndpointResolver"]
