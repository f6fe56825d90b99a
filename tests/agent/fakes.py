"""
Test doubles for bridge agent tests.

A scripted LLM and an in-memory MCP client so the turn loop can be
exercised without network access.
"""

from typing import Any, Optional, Union

from bridge.agent.domain.entities import LLMResponse, Message, ToolCall, ToolDefinition
from bridge.agent.domain.ports import ILLMProvider, IMCPClient


class ScriptedLLM(ILLMProvider):
    """LLM that replays a fixed list of responses.

    The last response is repeated once the script runs out. Exceptions in
    the script are raised instead of returned.
    """

    def __init__(self, script: list[Union[LLMResponse, Exception]], vision: bool = False):
        self.script = list(script)
        self.vision = vision
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    @property
    def model_name(self) -> str:
        return "scripted-model"

    @property
    def supports_vision(self) -> bool:
        return self.vision

    async def chat(self, messages: list[Message], tools: Optional[list[ToolDefinition]] = None) -> LLMResponse:
        self.calls.append({"messages": list(messages), "tools": tools})
        index = min(len(self.calls) - 1, len(self.script) - 1)
        item = self.script[index]
        if isinstance(item, Exception):
            raise item
        return item

    async def describe_image(self, image_url: str, prompt: str) -> str:
        return f"An image at {image_url}"

    async def close(self) -> None:
        self.closed = True


class FakeMCPClient(IMCPClient):
    """In-memory MCP server.

    ``results`` maps a tool name to the CallToolResult dict it returns, or
    to an exception it raises.
    """

    def __init__(self, tools: Optional[list[ToolDefinition]] = None, results: Optional[dict[str, Any]] = None):
        self.tools = list(tools or [])
        self.results = dict(results or {})
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.connect_count = 0
        self.list_count = 0
        self.closed = False

    async def connect(self) -> None:
        self.connect_count += 1

    async def list_tools(self) -> list[ToolDefinition]:
        self.list_count += 1
        return list(self.tools)

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> dict[str, Any]:
        self.calls.append((name, arguments))
        result = self.results.get(
            name, {"content": [{"type": "text", "text": "ok"}], "isError": False}
        )
        if isinstance(result, Exception):
            raise result
        return result

    async def close(self) -> None:
        self.closed = True


def text_response(content: str) -> LLMResponse:
    return LLMResponse(content=content)


def tool_call_response(*calls: ToolCall, content: Optional[str] = None) -> LLMResponse:
    return LLMResponse(content=content, tool_calls=tuple(calls))


def remote_tool(name: str, required: Optional[list[str]] = None, **properties: str) -> ToolDefinition:
    """Remote tool definition with string-typed or custom-typed properties."""
    return ToolDefinition(
        name=name,
        description=f"{name} tool",
        parameters={
            "type": "object",
            "properties": {key: {"type": kind} for key, kind in properties.items()},
            "required": required or [],
        },
    )


