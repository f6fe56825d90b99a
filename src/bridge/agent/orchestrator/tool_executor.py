"""
Tool Executor.

Handles execution of tool calls with error handling and result processing.
Coordinates with ToolRegistry to validate and route tool calls.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Optional

from ..domain.entities import ToolCall, ToolResult
from ..domain.errors import InvalidToolArguments
from ..tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


class ToolExecutor:
    """Executes tool calls with error handling.

    Provides a wrapper around ToolRegistry to execute tool calls with
    argument validation, logging, and result processing. Ensures that
    tool execution errors are caught and returned as error results
    rather than propagating exceptions.

    Usage:
        executor = ToolExecutor(tool_registry)

        result = await executor.execute_tool_call(tool_call)
        context.append(Message.tool_result(result.to_content(), tool_call.id))

    Architecture:
        - Delegates to ToolRegistry for validation and execution
        - Catches all exceptions and converts them to error results
        - Always returns a ToolResult (success or error)
    """

    def __init__(self, tool_registry: ToolRegistry):
        """Initialize the tool executor.

        Args:
            tool_registry: Registry for tool discovery and execution
        """
        self.tools = tool_registry

    async def execute(
        self, name: str, arguments: Any, tool_call_id: Optional[str] = None
    ) -> ToolResult:
        """Validate and execute one tool, capturing any failure.

        Args:
            name: Tool name requested by the LLM
            arguments: Arguments requested by the LLM
            tool_call_id: Identifier of the call, when the protocol has one

        Returns:
            ToolResult with either data or an error
        """
        logger.info(f"Using tool: {name}")
        started = time.monotonic()

        try:
            self.tools.validate_arguments(name, arguments)
            data = await self.tools.dispatch(name, arguments)

        except Exception as e:
            latency_ms = int((time.monotonic() - started) * 1000)
            logger.warning(f"Tool {name} failed ({type(e).__name__}): {e}")
            return ToolResult(
                tool_call_id=tool_call_id,
                tool_name=name,
                success=False,
                error=str(e),
                error_type=type(e).__name__,
                latency_ms=latency_ms,
            )

        latency_ms = int((time.monotonic() - started) * 1000)
        logger.debug(f"Tool {name} result ({latency_ms} ms): {data}")
        return ToolResult(
            tool_call_id=tool_call_id,
            tool_name=name,
            success=True,
            data=data,
            latency_ms=latency_ms,
        )

    async def execute_tool_call(self, tool_call: ToolCall) -> ToolResult:
        """Execute a structured tool call.

        Calls whose arguments could not be parsed are answered with an
        error result without touching the registry.
        """
        if tool_call.parse_error:
            logger.warning(f"Tool {tool_call.name} arguments rejected: {tool_call.parse_error}")
            return ToolResult(
                tool_call_id=tool_call.id,
                tool_name=tool_call.name,
                success=False,
                error=tool_call.parse_error,
                error_type=InvalidToolArguments.__name__,
            )

        return await self.execute(tool_call.name, tool_call.arguments, tool_call.id)
