"""
Port interfaces (abstract base classes) for the bridge.

These define the contracts that adapters must implement.
Following the Ports & Adapters (Hexagonal) architecture pattern.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from .entities import LLMResponse, Message, ToolDefinition


# ============================================
# LLM Provider Interface
# ============================================


class ILLMProvider(ABC):
    """Interface for LLM providers (GPT, Ollama, etc.).

    Implementations handle the specifics of each LLM API while
    providing a consistent request/response interface to the turn executor.
    """

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Return the model identifier (e.g., 'gpt-4', 'qwen3:4b')."""
        pass

    @property
    def supports_vision(self) -> bool:
        """Return True if describe_image() is available."""
        return False

    @abstractmethod
    async def chat(
        self,
        messages: list[Message],
        tools: Optional[list[ToolDefinition]] = None,
    ) -> LLMResponse:
        """Send the conversation and return the complete response.

        Args:
            messages: Conversation history, system instruction first
            tools: Tools to declare (tool choice is always automatic)

        Returns:
            The assistant's text and/or tool-call requests

        Raises:
            LLMProviderError: If the backend cannot be reached or fails
        """
        pass

    async def describe_image(self, image_url: str, prompt: str) -> str:
        """Describe an image. Only providers with vision support implement this."""
        raise NotImplementedError(f"{type(self).__name__} does not support images")

    async def close(self) -> None:
        """Release the underlying HTTP client."""
        pass


# ============================================
# MCP Client Interface
# ============================================


class IMCPClient(ABC):
    """Interface for the remote tool provider (MCP server)."""

    @abstractmethod
    async def connect(self) -> None:
        """Open the connection. Calling it again while connected is a no-op."""
        pass

    @abstractmethod
    async def list_tools(self) -> list[ToolDefinition]:
        """List the tools the server currently exposes."""
        pass

    @abstractmethod
    async def call_tool(self, name: str, arguments: dict[str, Any]) -> Any:
        """Execute a tool on the server and return its raw result."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close the connection."""
        pass
