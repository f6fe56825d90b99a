"""Domain entities, errors and port interfaces for the agent module."""

from .entities import (
    LLMResponse,
    Message,
    MessageRole,
    ToolCall,
    ToolDefinition,
    ToolResult,
    ToolSource,
)
from .errors import (
    BridgeError,
    ConfigurationError,
    InvalidToolArguments,
    IterationExhausted,
    MalformedDirective,
    ToolExecutionError,
    ToolNotFound,
    UpstreamRequestFailure,
)
from .ports import ILLMProvider, IMCPClient

__all__ = [
    # Entities
    "LLMResponse",
    "Message",
    "MessageRole",
    "ToolCall",
    "ToolDefinition",
    "ToolResult",
    "ToolSource",
    # Errors
    "BridgeError",
    "ConfigurationError",
    "InvalidToolArguments",
    "IterationExhausted",
    "MalformedDirective",
    "ToolExecutionError",
    "ToolNotFound",
    "UpstreamRequestFailure",
    # Ports
    "ILLMProvider",
    "IMCPClient",
]
