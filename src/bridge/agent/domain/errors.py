"""
Error taxonomy for the command bridge.

Tool-level faults (ToolNotFound, ToolExecutionError, InvalidToolArguments)
are captured by the turn loop and handed back to the LLM as error tool
results. Connectivity and setup faults (UpstreamRequestFailure,
ConfigurationError) escalate to the command caller.
"""

from __future__ import annotations

from typing import Optional


class BridgeError(Exception):
    """Base exception for the bridge."""


class ConfigurationError(BridgeError):
    """Required configuration is missing or invalid. Fatal at startup."""


class ToolNotFound(BridgeError):
    """The LLM requested a tool that neither registry knows."""

    def __init__(self, tool_name: str):
        super().__init__(f"Tool not found: {tool_name}")
        self.tool_name = tool_name


class ToolExecutionError(BridgeError):
    """A tool ran and failed, or the provider returned an error payload."""

    def __init__(
        self,
        message: str,
        tool_name: str,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.tool_name = tool_name
        self.cause = cause


class MalformedDirective(BridgeError):
    """The LLM produced a directive that cannot be interpreted."""


class InvalidToolArguments(MalformedDirective):
    """Tool arguments do not match the tool's parameter schema."""

    def __init__(self, message: str, tool_name: str):
        super().__init__(message)
        self.tool_name = tool_name


class IterationExhausted(BridgeError):
    """The iteration cap was reached before a final answer.

    Not raised by the turn loop; it names the degraded outcome.
    """


class UpstreamRequestFailure(BridgeError):
    """The LLM backend or the tool provider could not be reached."""
