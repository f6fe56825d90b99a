"""
Ollama LLM Provider.

Implements the ILLMProvider interface for Ollama's local LLM API.
Used with the free-text JSON directive protocol: the available tools are
described in the system prompt and the model answers with plain text.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import httpx

from ..domain.entities import (
    LLMResponse,
    Message,
    MessageRole,
    ToolDefinition,
)
from .base import BaseLLMProvider, ErrorType, LLMProviderConfig, LLMProviderError

logger = logging.getLogger(__name__)


def normalize_base_url(base_url: Optional[str], default: str) -> str:
    """Return the native Ollama server root.

    Accepts the OpenAI-compatible form (``http://host:11434/v1``) as well,
    since that is what most Ollama setups advertise.
    """
    url = (base_url or default).rstrip("/")
    if url.endswith("/v1"):
        url = url[: -len("/v1")]
    return url


class OllamaProvider(BaseLLMProvider):
    """Ollama local LLM provider implementation.

    Supports:
    - Locally-hosted models (qwen, llama, mistral, etc.)
    - JSON directive replies; tool results are sent back as user turns

    Usage:
        config = LLMProviderConfig(
            api_key="ollama",  # Ollama doesn't require auth
            model="qwen3:4b",
            base_url="http://localhost:11434",
        )
        provider = OllamaProvider(config)

        response = await provider.chat(messages)
        print(response.content)
    """

    # Default configuration
    DEFAULT_MODEL = "qwen3:4b"
    DEFAULT_BASE_URL = "http://localhost:11434"

    def __init__(self, config: LLMProviderConfig):
        """Initialize the Ollama provider.

        Args:
            config: Provider configuration
        """
        super().__init__(config)

        self.base_url = normalize_base_url(config.base_url, self.DEFAULT_BASE_URL)

        # Initialize HTTP client
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=config.timeout,
        )

    def _format_messages_for_api(
        self, messages: list[Message]
    ) -> list[dict[str, Any]]:
        """Convert messages to Ollama format.

        Tool results are sent as user messages; the directive protocol
        already labels them in their content.
        """
        api_messages = []

        for msg in messages:
            if msg.role == MessageRole.TOOL:
                api_messages.append({
                    "role": "user",
                    "content": msg.content or "",
                })
            else:
                api_messages.append({
                    "role": msg.role.value,
                    "content": msg.content or "",
                })

        return api_messages

    async def chat(
        self,
        messages: list[Message],
        tools: Optional[list[ToolDefinition]] = None,
    ) -> LLMResponse:
        """Generate a response using Ollama.

        Args:
            messages: Conversation history
            tools: Not sent; the directive protocol lists tools in the
                system prompt

        Returns:
            LLMResponse with the assistant text

        Raises:
            LLMProviderError: On HTTP, timeout or connection errors
        """
        payload: dict[str, Any] = {
            "model": self.config.model,
            "messages": self._format_messages_for_api(messages),
            "stream": False,
        }

        options: dict[str, Any] = {}
        if self.config.temperature is not None:
            options["temperature"] = self.config.temperature
        if self.config.max_tokens:
            options["num_predict"] = self.config.max_tokens
        if options:
            payload["options"] = options

        try:
            response = await self.client.post("/api/chat", json=payload)
            response.raise_for_status()
            data = response.json()

        except httpx.HTTPStatusError as e:
            error_msg = f"Ollama API error: {e.response.status_code} - {e.response.text}"
            logger.error(error_msg)
            raise LLMProviderError(error_msg, ErrorType.RECOVERABLE, original_error=e) from e

        except httpx.TimeoutException as e:
            error_msg = f"Ollama request timeout: {str(e)}"
            logger.error(error_msg)
            raise LLMProviderError(error_msg, ErrorType.TIMEOUT, original_error=e) from e

        except httpx.RequestError as e:
            error_msg = f"Ollama connection error: {str(e)}"
            logger.error(error_msg)
            raise LLMProviderError(error_msg, ErrorType.FATAL, original_error=e) from e

        except json.JSONDecodeError as e:
            error_msg = f"Failed to parse Ollama response: {e}"
            logger.error(error_msg)
            raise LLMProviderError(error_msg, ErrorType.RECOVERABLE, original_error=e) from e

        return self._parse_response(data)

    def _parse_response(self, data: dict[str, Any]) -> LLMResponse:
        """Convert an /api/chat body into an LLMResponse."""
        message = data.get("message") or {}

        return LLMResponse(
            content=message.get("content"),
            model=data.get("model", self.config.model),
            finish_reason=data.get("done_reason"),
            usage={
                "prompt_tokens": data.get("prompt_eval_count", 0) or 0,
                "completion_tokens": data.get("eval_count", 0) or 0,
            },
        )

    async def close(self) -> None:
        """Cleanup client."""
        await self.client.aclose()
