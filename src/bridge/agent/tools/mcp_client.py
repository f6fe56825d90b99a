"""
MCP Client for Remote Tools.

Connects to an MCP server over streamable HTTP (for example a browser
automation server) for tool discovery and execution.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from fastmcp import Client
from fastmcp.client.transports import StreamableHttpTransport

from ..domain.entities import ToolDefinition, ToolSource
from ..domain.errors import ToolExecutionError, UpstreamRequestFailure
from ..domain.ports import IMCPClient

logger = logging.getLogger(__name__)


class MCPConnectionError(UpstreamRequestFailure):
    """The MCP server could not be reached or refused the session."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.original_error = original_error


class MCPToolError(ToolExecutionError):
    """Error executing an MCP tool."""

    def __init__(
        self,
        message: str,
        tool_name: str,
        recoverable: bool = True,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message, tool_name=tool_name, cause=original_error)
        self.recoverable = recoverable
        self.original_error = original_error


@dataclass
class MCPClientConfig:
    """Configuration for MCP client."""

    # Server connection
    server_url: str = "http://127.0.0.1:12306/mcp"
    timeout: float = 30.0


class MCPClient(IMCPClient):
    """Client for MCP server operations.

    Usage:
        config = MCPClientConfig(server_url="http://127.0.0.1:12306/mcp")
        client = MCPClient(config)
        await client.connect()

        # List available tools
        tools = await client.list_tools()

        # Execute a tool
        result = await client.call_tool(
            "chrome_navigate",
            {"url": "https://www.google.com"},
        )

    Architecture:
        - One long-lived session per bridge session
        - Results are returned as JSON-compatible dicts in MCP wire shape
          (content, structuredContent, isError)
    """

    def __init__(self, config: MCPClientConfig):
        """Initialize the MCP client.

        Args:
            config: Client configuration
        """
        self.config = config
        self._client: Optional[Client] = None

    def _build_client(self) -> Client:
        transport = StreamableHttpTransport(url=self.config.server_url)
        return Client(transport, timeout=self.config.timeout)

    @property
    def is_connected(self) -> bool:
        return self._client is not None and self._client.is_connected()

    async def connect(self) -> None:
        """Open the MCP session (no-op when already connected).

        Raises:
            MCPConnectionError: If the server cannot be reached
        """
        if self.is_connected:
            return

        client = self._build_client()
        try:
            await client.__aenter__()
        except Exception as e:
            raise MCPConnectionError(
                f"Failed to connect to MCP server at {self.config.server_url}: {e}",
                original_error=e,
            ) from e

        self._client = client
        logger.info(f"Connected to MCP server at {self.config.server_url}")

    async def close(self) -> None:
        """Close the MCP session."""
        if self._client is None:
            return

        client, self._client = self._client, None
        await client.__aexit__(None, None, None)
        logger.info("MCP connection closed")

    def _require_client(self) -> Client:
        if self._client is None:
            raise MCPConnectionError("MCP client is not connected")
        return self._client

    async def list_tools(self) -> list[ToolDefinition]:
        """List available tools from the MCP server.

        Returns:
            List of tool definitions

        Raises:
            MCPConnectionError: If the listing request fails
        """
        client = self._require_client()

        try:
            mcp_tools = await client.list_tools()
        except Exception as e:
            raise MCPConnectionError(f"Failed to list MCP tools: {e}", original_error=e) from e

        tools = [
            ToolDefinition(
                name=tool.name,
                description=tool.description or "No description",
                parameters=dict(tool.inputSchema or {}),
                source=ToolSource.REMOTE,
            )
            for tool in mcp_tools
        ]

        logger.info(f"Discovered {len(tools)} MCP tools")
        return tools

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> dict[str, Any]:
        """Execute a tool on the MCP server.

        Args:
            name: Tool name
            arguments: Tool arguments

        Returns:
            The CallToolResult as a JSON-compatible dict. An explicit error
            result is returned as-is (``isError: true``), not raised.

        Raises:
            MCPToolError: If the call itself fails
        """
        client = self._require_client()

        try:
            result = await client.call_tool_mcp(name=name, arguments=arguments)
        except Exception as e:
            raise MCPToolError(
                f"Tool execution failed: {e}",
                tool_name=name,
                original_error=e,
            ) from e

        return result.model_dump(mode="json", by_alias=True, exclude_none=True)


def error_text(result: dict[str, Any]) -> str:
    """Extract a readable message from an MCP error result."""
    texts = [
        block.get("text", "")
        for block in result.get("content", [])
        if isinstance(block, dict) and block.get("type") == "text"
    ]
    message = "\n".join(t for t in texts if t)
    return message or "Tool returned an error result"
