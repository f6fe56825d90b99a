"""MCP Command Bridge: natural-language commands executed through MCP tools."""

__version__ = "1.0.0"
