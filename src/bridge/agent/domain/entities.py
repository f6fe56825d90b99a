"""
Domain entities for the command bridge.

These are pure domain objects with no infrastructure dependencies.
They define the core data structures shared by the context store,
the tool registry, the LLM providers and the turn executor.
"""

from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

# ============================================
# Message Types
# ============================================


class MessageRole(str, Enum):
    """Role of a message in a conversation."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


@dataclass(frozen=True)
class Message:
    """A single turn in the conversation.

    Messages are never mutated once appended to the context store.

    Attributes:
        role: Message role (system, user, assistant, tool)
        content: Text content; None for a pure tool invocation
        tool_calls: Tool calls requested by an assistant turn
        tool_call_id: For tool results, the id of the call being answered.
            None under the free-text protocol, which has no call ids.
        tool_name: For tool results, the name of the tool that ran
    """

    role: MessageRole
    content: Optional[str] = None
    tool_calls: tuple[ToolCall, ...] = ()
    tool_call_id: Optional[str] = None
    tool_name: Optional[str] = None

    @property
    def size(self) -> int:
        """Length of the textual content (0 when absent)."""
        return len(self.content) if self.content else 0

    @classmethod
    def system(cls, content: str) -> Message:
        return cls(role=MessageRole.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> Message:
        return cls(role=MessageRole.USER, content=content)

    @classmethod
    def assistant(
        cls, content: Optional[str], tool_calls: Optional[list[ToolCall]] = None
    ) -> Message:
        return cls(
            role=MessageRole.ASSISTANT,
            content=content,
            tool_calls=tuple(tool_calls or ()),
        )

    @classmethod
    def tool_result(
        cls,
        content: str,
        tool_call_id: Optional[str] = None,
        tool_name: Optional[str] = None,
    ) -> Message:
        return cls(
            role=MessageRole.TOOL,
            content=content,
            tool_call_id=tool_call_id,
            tool_name=tool_name,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "role": self.role.value,
            "content": self.content,
        }
        if self.tool_calls:
            result["tool_calls"] = [tc.to_dict() for tc in self.tool_calls]
        if self.tool_call_id is not None:
            result["tool_call_id"] = self.tool_call_id
        if self.tool_name is not None:
            result["tool_name"] = self.tool_name
        return result


# ============================================
# Tool System
# ============================================


class ToolSource(str, Enum):
    """Where a tool is executed."""

    LOCAL = "local"  # In-process capability
    REMOTE = "remote"  # Delegated to the MCP server


@dataclass(frozen=True)
class ToolDefinition:
    """Definition of an available tool.

    Attributes:
        name: Tool name (unique across the merged registry)
        description: Human-readable description
        parameters: JSON Schema for parameters
        source: Local or remote provenance
    """

    name: str
    description: str
    parameters: dict[str, Any] = field(default_factory=dict)
    source: ToolSource = ToolSource.REMOTE

    def to_openai_format(self) -> dict[str, Any]:
        """Convert to OpenAI function calling format."""
        parameters = self.parameters or {"type": "object", "properties": {}}
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": parameters,
            },
        }


@dataclass(frozen=True)
class ToolCall:
    """A tool call requested by the LLM.

    Attributes:
        name: Tool name being called
        arguments: Parsed argument object
        id: Tool call identifier (for correlating results)
        raw_arguments: Argument string exactly as the LLM produced it
        parse_error: Set when raw_arguments is not a JSON object
    """

    name: str
    arguments: dict[str, Any] = field(default_factory=dict)
    id: str = field(default_factory=lambda: f"call_{uuid.uuid4().hex[:24]}")
    raw_arguments: Optional[str] = None
    parse_error: Optional[str] = None

    @classmethod
    def from_json_arguments(cls, id: str, name: str, raw: Optional[str]) -> ToolCall:
        """Build a tool call from a JSON-encoded argument string.

        Empty strings are treated as an empty object. Anything that is not
        a JSON object is recorded in parse_error rather than raised.
        """
        if not raw or not raw.strip():
            return cls(id=id, name=name, arguments={}, raw_arguments=raw)

        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as e:
            return cls(
                id=id,
                name=name,
                raw_arguments=raw,
                parse_error=f"Invalid JSON in tool arguments: {e}",
            )

        if not isinstance(parsed, dict):
            return cls(
                id=id,
                name=name,
                raw_arguments=raw,
                parse_error="Tool arguments must be a JSON object",
            )

        return cls(id=id, name=name, arguments=parsed, raw_arguments=raw)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "arguments": self.arguments}


@dataclass(frozen=True)
class ToolResult:
    """Result from a tool execution.

    Attributes:
        tool_call_id: ID of the tool call this is a result for
        tool_name: Name of the executed tool
        success: Whether execution succeeded
        data: Result data (if successful)
        error: Error message (if failed)
        error_type: Exception class name of the captured failure
        latency_ms: Execution time in milliseconds
    """

    tool_call_id: Optional[str]
    tool_name: str
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    latency_ms: Optional[int] = None

    def payload(self) -> Any:
        """The value handed back to the LLM."""
        if self.success:
            return self.data
        return {
            "error": self.error,
            "error_type": self.error_type,
            "recoverable": True,
        }

    def to_content(self, indent: Optional[int] = None) -> str:
        """Stringify the payload for the context store."""
        payload = self.payload()
        if isinstance(payload, str):
            return payload
        return json.dumps(payload, indent=indent, ensure_ascii=False, default=str)


# ============================================
# LLM Responses
# ============================================


@dataclass(frozen=True)
class LLMResponse:
    """A complete (non-streamed) response from the LLM capability.

    Attributes:
        content: Assistant text, if any
        tool_calls: Structured tool-call requests, in the order listed
        model: Model that produced the response
        finish_reason: Provider finish reason
        usage: Token usage reported by the provider
    """

    content: Optional[str] = None
    tool_calls: tuple[ToolCall, ...] = ()
    model: Optional[str] = None
    finish_reason: Optional[str] = None
    usage: dict[str, int] = field(default_factory=dict)

    @property
    def has_tool_calls(self) -> bool:
        return bool(self.tool_calls)

    @property
    def text(self) -> str:
        """Content stripped of surrounding whitespace ("" when absent)."""
        return (self.content or "").strip()
