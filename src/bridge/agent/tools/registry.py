"""
Tool Registry.

Provides a unified registry of all available tools (local and remote)
for the bridge. Handles tool discovery, argument validation and
execution routing.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from ..domain.entities import ToolDefinition
from ..domain.errors import ToolExecutionError, ToolNotFound
from ..domain.ports import IMCPClient
from .local import LocalToolExecutor
from .mcp_client import error_text
from .validation import validate_arguments

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Unified registry of all bridge tools.

    Combines:
    - Local tools executed in-process (LocalToolExecutor)
    - Remote tools discovered from the MCP server

    Usage:
        registry = ToolRegistry(mcp_client, local_tools)

        # Discover remote tools and merge with local ones
        tools = await registry.refresh()

        # Execute a tool
        result = await registry.dispatch("chrome_navigate", {"url": "..."})

    Architecture:
        - Local tools are fixed at construction time
        - Remote tools are fetched by refresh() and kept until clear()
        - On a name collision the local tool wins
    """

    def __init__(
        self,
        mcp_client: Optional[IMCPClient] = None,
        local_tools: Optional[LocalToolExecutor] = None,
    ):
        """Initialize the tool registry.

        Args:
            mcp_client: MCP client for remote tools
            local_tools: Executor for in-process tools
        """
        self.mcp_client = mcp_client
        self.local_tools = local_tools or LocalToolExecutor()
        self._remote_tools: dict[str, ToolDefinition] = {}

    async def refresh(self) -> list[ToolDefinition]:
        """Re-discover remote tools and rebuild the merged set.

        Returns:
            The merged tool definitions

        Raises:
            UpstreamRequestFailure: If the MCP server cannot list its tools
        """
        remote: dict[str, ToolDefinition] = {}

        if self.mcp_client:
            for tool in await self.mcp_client.list_tools():
                if self.local_tools.has_tool(tool.name):
                    logger.warning(
                        f"Remote tool '{tool.name}' is shadowed by a local tool"
                    )
                    continue
                remote[tool.name] = tool

        self._remote_tools = remote
        tools = self.describe()
        logger.info(
            f"Tool registry loaded {len(tools)} total tools: "
            f"{', '.join(t.name for t in tools)}"
        )
        return tools

    def describe(self) -> list[ToolDefinition]:
        """Get all tool definitions, local first.

        Returns:
            List of all tool definitions
        """
        return self.local_tools.get_tool_definitions() + list(self._remote_tools.values())

    def get(self, name: str) -> Optional[ToolDefinition]:
        """Find a tool definition by name."""
        if self.local_tools.has_tool(name):
            for tool in self.local_tools.get_tool_definitions():
                if tool.name == name:
                    return tool
        return self._remote_tools.get(name)

    def validate_arguments(self, name: str, arguments: Any) -> None:
        """Check arguments against the tool's parameter schema.

        Raises:
            ToolNotFound: If the tool is unknown
            InvalidToolArguments: If the arguments do not fit the schema
        """
        tool = self.get(name)
        if tool is None:
            raise ToolNotFound(name)
        validate_arguments(name, arguments, tool.parameters)

    async def dispatch(self, name: str, arguments: dict[str, Any]) -> Any:
        """Execute a tool by name.

        Local tools run in-process; everything else is delegated to the
        MCP server and its result is returned verbatim.

        Args:
            name: Tool name
            arguments: Tool arguments

        Returns:
            Tool result

        Raises:
            ToolNotFound: If neither local nor remote tools match
            ToolExecutionError: If the tool fails or returns an error result
        """
        if self.local_tools.has_tool(name):
            logger.debug(f"Dispatching local tool: {name}")
            return await self.local_tools.execute(name, arguments)

        if name not in self._remote_tools or not self.mcp_client:
            raise ToolNotFound(name)

        logger.debug(f"Dispatching MCP tool: {name}")
        try:
            result = await self.mcp_client.call_tool(name, arguments)
        except ToolExecutionError:
            raise
        except Exception as e:
            raise ToolExecutionError(
                f"Tool execution failed: {e}", tool_name=name, cause=e
            ) from e

        if isinstance(result, dict) and result.get("isError"):
            raise ToolExecutionError(error_text(result), tool_name=name)

        return result

    def clear(self) -> None:
        """Forget remote tools.

        Call this to force re-discovery of tools.
        """
        self._remote_tools = {}
