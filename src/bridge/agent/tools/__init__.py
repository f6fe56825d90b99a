"""Tool system for the bridge.

Provides:
- MCP client for remote tools
- Local in-process tools
- Argument validation against tool schemas
- Tool registry merging both sources
"""

from .local import LocalTool, LocalToolExecutor, default_local_tools, describe_image_tool
from .mcp_client import MCPClient, MCPClientConfig, MCPConnectionError, MCPToolError
from .registry import ToolRegistry
from .validation import validate_arguments

__all__ = [
    "LocalTool",
    "LocalToolExecutor",
    "default_local_tools",
    "describe_image_tool",
    "MCPClient",
    "MCPClientConfig",
    "MCPConnectionError",
    "MCPToolError",
    "ToolRegistry",
    "validate_arguments",
]
