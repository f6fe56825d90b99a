"""
OpenAI GPT LLM Provider.

Implements the ILLMProvider interface for OpenAI's chat completions API.
Supports native tool calling and image description.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

import openai
from openai import AsyncOpenAI

from ..domain.entities import (
    LLMResponse,
    Message,
    MessageRole,
    ToolCall,
    ToolDefinition,
)
from .base import BaseLLMProvider, ErrorType, LLMProviderConfig, LLMProviderError

logger = logging.getLogger(__name__)


class OpenAIProvider(BaseLLMProvider):
    """OpenAI GPT provider implementation.

    Supports:
    - GPT-4, GPT-4 Turbo, GPT-4o
    - Tool/function calling (tool_choice="auto")
    - Image description through vision-capable models

    Usage:
        config = LLMProviderConfig(api_key="sk-...", model="gpt-4o")
        provider = OpenAIProvider(config)

        response = await provider.chat(messages, tools)
        for call in response.tool_calls:
            print(call.name, call.arguments)
    """

    DEFAULT_MODEL = "gpt-4"
    DEFAULT_VISION_MODEL = "gpt-4o-mini"

    def __init__(self, config: LLMProviderConfig):
        """Initialize the OpenAI provider.

        Args:
            config: Provider configuration
        """
        super().__init__(config)

        self.vision_model = config.extra.get("vision_model", self.DEFAULT_VISION_MODEL)

        self.client = AsyncOpenAI(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.timeout,
            max_retries=config.max_retries,
        )

    @property
    def supports_vision(self) -> bool:
        return True

    def _format_messages_for_api(
        self, messages: list[Message]
    ) -> list[dict[str, Any]]:
        """Convert messages to OpenAI format.

        Tool results must answer a tool call announced by an earlier
        assistant message. Results whose call was trimmed away, or that
        carry no call id, are sent as user messages instead.
        """
        api_messages = []
        announced: set[str] = set()

        for msg in messages:
            if msg.role == MessageRole.TOOL:
                if msg.tool_call_id and msg.tool_call_id in announced:
                    api_messages.append({
                        "role": "tool",
                        "tool_call_id": msg.tool_call_id,
                        "content": msg.content or "",
                    })
                else:
                    api_messages.append({
                        "role": "user",
                        "content": f"Tool result: {msg.content or ''}",
                    })
            elif msg.role == MessageRole.ASSISTANT and msg.tool_calls:
                announced.update(tc.id for tc in msg.tool_calls)
                api_messages.append({
                    "role": "assistant",
                    "content": msg.content or None,
                    "tool_calls": [
                        {
                            "id": tc.id,
                            "type": "function",
                            "function": {
                                "name": tc.name,
                                "arguments": (
                                    tc.raw_arguments
                                    if tc.raw_arguments is not None
                                    else json.dumps(tc.arguments)
                                ),
                            },
                        }
                        for tc in msg.tool_calls
                    ],
                })
            else:
                api_messages.append({
                    "role": msg.role.value,
                    "content": msg.content or "",
                })

        return api_messages

    def _request_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {}
        if self.config.temperature is not None:
            kwargs["temperature"] = self.config.temperature
        if self.config.max_tokens:
            kwargs["max_tokens"] = self.config.max_tokens
        return kwargs

    async def chat(
        self,
        messages: list[Message],
        tools: Optional[list[ToolDefinition]] = None,
    ) -> LLMResponse:
        """Generate a response using GPT.

        Args:
            messages: Conversation history
            tools: Available tools

        Returns:
            LLMResponse with text and any tool calls

        Raises:
            LLMProviderError: On API errors
        """
        kwargs: dict[str, Any] = {
            "model": self.config.model,
            "messages": self._format_messages_for_api(messages),
            **self._request_kwargs(),
        }

        if tools:
            kwargs["tools"] = self._format_tools_for_api(tools)
            kwargs["tool_choice"] = "auto"

        try:
            completion = await self.client.chat.completions.create(**kwargs)
        except openai.RateLimitError as e:
            logger.warning(f"Rate limited by OpenAI: {e}")
            raise LLMProviderError(
                f"Rate limited: {e}", ErrorType.RATE_LIMIT, original_error=e
            ) from e
        except openai.APITimeoutError as e:
            logger.error(f"OpenAI API timeout: {e}")
            raise LLMProviderError(
                f"Request timed out: {e}", ErrorType.TIMEOUT, original_error=e
            ) from e
        except openai.APIError as e:
            logger.error(f"OpenAI API error: {e}")
            raise LLMProviderError(
                f"API error: {e}", ErrorType.RECOVERABLE, original_error=e
            ) from e

        return self._parse_completion(completion)

    def _parse_completion(self, completion: Any) -> LLMResponse:
        """Convert a ChatCompletion into an LLMResponse."""
        choice = completion.choices[0] if completion.choices else None
        if choice is None:
            raise LLMProviderError("OpenAI returned no choices", ErrorType.RECOVERABLE)

        message = choice.message
        tool_calls = [
            ToolCall.from_json_arguments(
                id=tc.id,
                name=tc.function.name,
                raw=tc.function.arguments,
            )
            for tc in (message.tool_calls or [])
            if getattr(tc, "function", None) is not None
        ]

        usage = getattr(completion, "usage", None)
        return LLMResponse(
            content=message.content,
            tool_calls=tuple(tool_calls),
            model=getattr(completion, "model", self.config.model),
            finish_reason=choice.finish_reason,
            usage={
                "prompt_tokens": getattr(usage, "prompt_tokens", 0) or 0,
                "completion_tokens": getattr(usage, "completion_tokens", 0) or 0,
                "total_tokens": getattr(usage, "total_tokens", 0) or 0,
            },
        )

    async def describe_image(self, image_url: str, prompt: str) -> str:
        """Describe an image with a vision-capable model.

        Args:
            image_url: http(s) or data: URL of the image
            prompt: What to focus on

        Returns:
            The model's description

        Raises:
            LLMProviderError: On API errors
        """
        try:
            completion = await self.client.chat.completions.create(
                model=self.vision_model,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": prompt},
                            {"type": "image_url", "image_url": {"url": image_url}},
                        ],
                    }
                ],
            )
        except openai.APIError as e:
            logger.error(f"OpenAI vision error: {e}")
            raise LLMProviderError(
                f"Image description failed: {e}",
                error_type=ErrorType.RECOVERABLE,
                original_error=e,
            ) from e

        if not completion.choices:
            raise LLMProviderError("OpenAI returned no choices", ErrorType.RECOVERABLE)
        return (completion.choices[0].message.content or "").strip()

    async def close(self) -> None:
        """Close the client."""
        await self.client.close()
