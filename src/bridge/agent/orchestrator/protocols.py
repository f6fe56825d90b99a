"""
Response protocols.

The LLM can drive tools in one of two encodings, chosen once per session
from the configured backend:

- JsonDirectiveProtocol: the assistant text itself is a JSON directive,
  either ``{"tool": ..., "arguments": {...}}`` or
  ``{"done": true, "message": ...}``. Used with backends that are not
  given native tool declarations (Ollama).
- StructuredToolCallProtocol: tools are declared natively and the
  response carries explicit tool-call requests (OpenAI).

Each protocol interprets one LLM response, performs the tool calls it
asks for, appends everything to the context, and returns a StepOutcome.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Union

from ..domain.entities import LLMResponse, Message, ToolResult
from ..domain.errors import MalformedDirective
from .context_store import ContextStore
from .tool_executor import ToolExecutor

logger = logging.getLogger(__name__)

MALFORMED_DIRECTIVE_MESSAGE = (
    "Sorry, I could not understand how to continue with that request. "
    "Could you try asking again in a different way?"
)
EMPTY_RESPONSE_MESSAGE = (
    "Sorry, I did not get a response for that request. Could you try again?"
)


# ============================================
# Step outcomes
# ============================================


@dataclass(frozen=True)
class Continue:
    """Tools ran; request another LLM response."""

    tool_results: list[ToolResult] = field(default_factory=list)


@dataclass(frozen=True)
class Finish:
    """A final answer is available."""

    message: str


@dataclass(frozen=True)
class Abort:
    """The response could not be acted on; stop with a best-effort message."""

    reason: str
    message: str


StepOutcome = Union[Continue, Finish, Abort]


# ============================================
# Protocols
# ============================================


class ResponseProtocol(ABC):
    """How tool use and final answers are encoded in LLM responses."""

    name: str = "base"

    def __init__(self, max_iterations: int):
        self.max_iterations = max_iterations

    @property
    @abstractmethod
    def declares_tools(self) -> bool:
        """True if tools are passed to the LLM as native declarations."""
        pass

    @abstractmethod
    def response_contract(self) -> str:
        """Instructions for the system prompt describing the encoding."""
        pass

    @abstractmethod
    async def step(
        self,
        response: LLMResponse,
        context: ContextStore,
        tools: ToolExecutor,
    ) -> StepOutcome:
        """Interpret one response, run requested tools, record everything.

        The assistant response and every tool result are appended to the
        context before this returns.
        """
        pass


class JsonDirectiveProtocol(ResponseProtocol):
    """Free-text protocol: the assistant text is a single JSON directive."""

    name = "json_directive"
    DEFAULT_MAX_ITERATIONS = 10

    def __init__(self, max_iterations: int = DEFAULT_MAX_ITERATIONS):
        super().__init__(max_iterations)

    @property
    def declares_tools(self) -> bool:
        return False

    def response_contract(self) -> str:
        return """You can call the tools above by outputting a JSON object in this format:

{
  "tool": "<tool_name>",
  "arguments": { ... }
}

When you want to use a tool, output only the JSON object (no explanation or extra text).

You can use multiple tools in sequence to complete a task.
After each tool execution you will see the result and can decide to:
1. Use another tool by outputting another JSON object
2. Complete the task by outputting: {"done": true, "message": "your final response to the user"}
3. Call only one tool at a time. Do not output any text after the JSON object.

When you output {"done": true, "message": "..."}, the task ends and the user sees your final message."""

    @staticmethod
    def format_tool_result(result: ToolResult) -> str:
        return (
            "Tool execution result:\n"
            f"Tool: {result.tool_name}\n"
            f"Result: {result.to_content(indent=2)}"
        )

    async def step(
        self,
        response: LLMResponse,
        context: ContextStore,
        tools: ToolExecutor,
    ) -> StepOutcome:
        text = response.text
        logger.debug(f"AI: {text}")
        context.append(Message.assistant(text))

        try:
            directive = json.loads(text)
        except ValueError:
            # Plain conversational reply
            return Finish(text)

        if isinstance(directive, dict) and directive.get("done") is True:
            message = directive.get("message")
            logger.info("Task completed")
            return Finish("" if message is None else str(message))

        if (
            isinstance(directive, dict)
            and isinstance(directive.get("tool"), str)
            and directive["tool"]
            and "arguments" in directive
        ):
            result = await tools.execute(directive["tool"], directive["arguments"])
            context.append(
                Message.tool_result(
                    self.format_tool_result(result), tool_name=result.tool_name
                )
            )
            context.trim_to_budget()
            return Continue([result])

        error = MalformedDirective(f"Directive has neither a tool call nor completion: {text[:200]}")
        logger.warning(f"Invalid JSON directive, ending iteration: {error}")
        return Abort(reason=str(error), message=MALFORMED_DIRECTIVE_MESSAGE)


class StructuredToolCallProtocol(ResponseProtocol):
    """Native tool-calling protocol: responses carry explicit tool calls."""

    name = "structured"
    DEFAULT_MAX_ITERATIONS = 20

    def __init__(self, max_iterations: int = DEFAULT_MAX_ITERATIONS):
        super().__init__(max_iterations)

    @property
    def declares_tools(self) -> bool:
        return True

    def response_contract(self) -> str:
        return """Use the provided function tools to act. You may request several tool calls in one response; they run in the order you list them, so put dependent steps (for example navigate, then type) in order.
After each round you will see every tool result and can call more tools.
When the task is complete, reply with plain text only and no tool calls. That text is your final message to the user."""

    async def step(
        self,
        response: LLMResponse,
        context: ContextStore,
        tools: ToolExecutor,
    ) -> StepOutcome:
        tool_calls = list(response.tool_calls)
        logger.debug(f"AI: {response.content!r} ({len(tool_calls)} tool calls)")
        context.append(Message.assistant(response.content, tool_calls))

        if tool_calls:
            results = []
            for tool_call in tool_calls:
                result = await tools.execute_tool_call(tool_call)
                context.append(
                    Message.tool_result(
                        result.to_content(),
                        tool_call_id=tool_call.id,
                        tool_name=tool_call.name,
                    )
                )
                context.trim_to_budget()
                results.append(result)
            return Continue(results)

        if response.text:
            logger.info("Task completed")
            return Finish(response.text)

        logger.warning("Response had neither text nor tool calls")
        return Abort(reason="Empty response", message=EMPTY_RESPONSE_MESSAGE)
