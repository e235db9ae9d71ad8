"""Main MCP server implementation for Datadog."""

import asyncio
import json
from typing import Any, Dict, List, Optional

import structlog
from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from .api_client import DatadogHTTPClient, EndpointResolver
from .config import DatadogConfig
from .error_handler import ErrorHandler
from .exceptions import DatadogError
from .tools import DatadogTool, ToolName, build_tool_registry

logger = structlog.get_logger(__name__)


class ToolCallFailed(Exception):
    """Carries a formatted tool error back through the MCP SDK.

    The SDK turns an exception raised from a ``call_tool`` handler into a
    result with ``isError`` set and the exception text as content.
    """


class DatadogMCPServer:
    """Main MCP server class for Datadog integration."""

    def __init__(self, config: DatadogConfig, api_client: Optional[DatadogHTTPClient] = None):
        """Initialize the MCP server with configuration.

        Args:
            config: DatadogConfig instance with server configuration
            api_client: Optional preconfigured HTTP client; one is built from
                ``config`` when omitted
        """
        self.config = config
        self.logger = logger.bind(server_name=config.server_name)

        self.mcp_server = Server(config.server_name)

        self.api_client = api_client or DatadogHTTPClient(config)
        self.resolver = EndpointResolver(config)

        # Tool registry
        self.tools: Dict[ToolName, DatadogTool] = {}

        self.error_handler = ErrorHandler(config.server_name)

    async def start(self) -> None:
        """Build and initialize the tool registry."""
        self.logger.info(
            "Starting Datadog MCP server",
            version=self.config.server_version,
            site=self.config.resolved_site,
            log_level=self.config.log_level
        )

        self.tools = build_tool_registry(self.api_client, self.resolver)
        for tool in self.tools.values():
            tool.initialize()

        self.register_tools()

        self.logger.info(
            "Datadog MCP server started successfully",
            tools_registered=len(self.tools)
        )

    def tool_definitions(self) -> List[Dict[str, Any]]:
        """MCP definitions of every registered tool."""
        return [tool.definition() for tool in self.tools.values()]

    async def handle_tool_call(self, tool_name: str, arguments: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Route a tool call to its tool.

        Args:
            tool_name: Name of the tool to execute
            arguments: Tool arguments

        Returns:
            Dict with ``content`` and ``isError`` keys
        """
        start_time = asyncio.get_running_loop().time()

        try:
            tool = self.tools[ToolName(tool_name)]
        except (ValueError, KeyError):
            available = [name.value for name in self.tools]
            self.logger.error(f"Unknown tool: {tool_name}", available_tools=available)
            return {
                "content": [
                    {
                        "type": "text",
                        "text": f"Error: Unknown tool: {tool_name}. Available tools: {', '.join(available)}"
                    }
                ],
                "isError": True
            }

        try:
            result = await tool.execute(arguments or {})
        except DatadogError as e:
            execution_time = (asyncio.get_running_loop().time() - start_time) * 1000
            self.error_handler.log_tool_call(tool_name, arguments, success=False, execution_time_ms=execution_time)
            return self.error_handler.handle_tool_error(
                error=e,
                tool_name=tool_name,
                arguments=arguments,
                execution_time_ms=execution_time
            )

        execution_time = (asyncio.get_running_loop().time() - start_time) * 1000
        response_text = self._format_tool_result(result)
        self.error_handler.log_tool_call(
            tool_name,
            arguments,
            success=True,
            execution_time_ms=execution_time,
            response_size=len(response_text)
        )

        return {
            "content": [
                {
                    "type": "text",
                    "text": response_text
                }
            ],
            "isError": False
        }

    def register_tools(self) -> None:
        """Register the list/call handlers with the MCP server."""
        definitions = self.tool_definitions()

        @self.mcp_server.list_tools()
        async def list_tools_handler():
            return [
                Tool(
                    name=tool_def["name"],
                    description=tool_def["description"],
                    inputSchema=tool_def["inputSchema"]
                )
                for tool_def in definitions
            ]

        @self.mcp_server.call_tool()
        async def call_tool_handler(name: str, arguments: dict):
            result = await self.handle_tool_call(name, arguments)
            text = result["content"][0]["text"]
            if result["isError"]:
                raise ToolCallFailed(text)
            return [TextContent(type="text", text=text)]

        self.logger.info("All MCP tools registered successfully", total_tools=len(definitions))

    def _format_tool_result(self, result: Any) -> str:
        return json.dumps(result, indent=2, default=str)

    async def run_stdio(self) -> None:
        """Run the MCP server using stdio transport."""
        self.logger.info("Starting MCP server with stdio transport")

        async with stdio_server() as (read_stream, write_stream):
            await self.mcp_server.run(
                read_stream,
                write_stream,
                self.mcp_server.create_initialization_options()
            )

    async def shutdown(self) -> None:
        """Shutdown the MCP server and clean up resources."""
        self.logger.info("Shutting down Datadog MCP server")
        await self.api_client.aclose()
        self.logger.info("MCP server shutdown completed")

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.shutdown()
