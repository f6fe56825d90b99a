"""
Local (in-process) tools.

Statically declared capabilities executed inside the bridge process
instead of being delegated to the MCP server.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from ..domain.entities import ToolDefinition, ToolSource
from ..domain.errors import ToolExecutionError, ToolNotFound
from ..domain.ports import ILLMProvider

logger = logging.getLogger(__name__)

ToolHandler = Callable[..., Awaitable[Any]]


@dataclass(frozen=True)
class LocalTool:
    """A local tool: its definition plus the coroutine that runs it."""

    definition: ToolDefinition
    handler: ToolHandler

    @property
    def name(self) -> str:
        return self.definition.name


class LocalToolExecutor:
    """Executor for statically declared local tools.

    Usage:
        executor = LocalToolExecutor([describe_image_tool(provider)])

        if executor.has_tool("describe_image"):
            result = await executor.execute(
                "describe_image", {"image_url": "https://..."}
            )
    """

    def __init__(self, tools: Optional[list[LocalTool]] = None):
        self._tools: dict[str, LocalTool] = {}
        for tool in tools or []:
            self.register(tool)

    def register(self, tool: LocalTool) -> None:
        """Register a local tool. A later registration replaces an earlier one."""
        if tool.name in self._tools:
            logger.warning(f"Replacing local tool: {tool.name}")
        self._tools[tool.name] = tool

    def has_tool(self, name: str) -> bool:
        return name in self._tools

    def get_tool_definitions(self) -> list[ToolDefinition]:
        """Get tool definitions for local tools.

        Returns:
            List of tool definitions for LLM
        """
        return [tool.definition for tool in self._tools.values()]

    async def execute(self, name: str, arguments: dict[str, Any]) -> Any:
        """Run a local tool.

        Args:
            name: Tool name
            arguments: Validated tool arguments

        Returns:
            The handler's result

        Raises:
            ToolNotFound: If no local tool has this name
            ToolExecutionError: If the handler raises
        """
        tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFound(name)

        try:
            return await tool.handler(**arguments)
        except Exception as e:
            logger.error(f"Local tool {name} failed: {e}")
            raise ToolExecutionError(
                f"Tool execution failed: {e}", tool_name=name, cause=e
            ) from e


# ============================================
# Built-in local tools
# ============================================

DEFAULT_IMAGE_PROMPT = "Describe this image in a few natural sentences."


def describe_image_tool(provider: ILLMProvider) -> LocalTool:
    """Build the describe_image tool backed by a vision-capable provider."""

    async def describe_image(image_url: str, prompt: Optional[str] = None) -> dict[str, Any]:
        description = await provider.describe_image(image_url, prompt or DEFAULT_IMAGE_PROMPT)
        return {"image_url": image_url, "description": description}

    definition = ToolDefinition(
        name="describe_image",
        description=(
            "Describe the contents of an image given its URL "
            "(http, https or data URL)."
        ),
        parameters={
            "type": "object",
            "properties": {
                "image_url": {
                    "type": "string",
                    "description": "URL of the image to describe",
                },
                "prompt": {
                    "type": "string",
                    "description": "Optional question or focus for the description",
                },
            },
            "required": ["image_url"],
            "additionalProperties": False,
        },
        source=ToolSource.LOCAL,
    )
    return LocalTool(definition=definition, handler=describe_image)


def default_local_tools(provider: ILLMProvider) -> list[LocalTool]:
    """Local tools available for the given provider."""
    tools: list[LocalTool] = []
    if provider.supports_vision:
        tools.append(describe_image_tool(provider))
    return tools
