"""
Base LLM Provider Implementation.

Provides common functionality for all LLM providers.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from ..domain.entities import LLMResponse, Message, ToolDefinition
from ..domain.errors import UpstreamRequestFailure
from ..domain.ports import ILLMProvider

logger = logging.getLogger(__name__)


class ErrorType(str, Enum):
    """Types of provider errors."""

    RECOVERABLE = "recoverable"  # Can retry
    FATAL = "fatal"  # Must abort
    TIMEOUT = "timeout"  # LLM timeout
    RATE_LIMIT = "rate_limit"  # Rate limited, back off


class LLMProviderError(UpstreamRequestFailure):
    """Base exception for LLM provider errors."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.RECOVERABLE,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.error_type = error_type
        self.original_error = original_error


@dataclass
class LLMProviderConfig:
    """Configuration for LLM providers.

    Attributes:
        api_key: API key for the provider
        model: Model name to use
        base_url: Optional custom base URL
        timeout: Request timeout in seconds
        max_retries: Maximum retry attempts
        temperature: Sampling temperature (None uses the model default)
        max_tokens: Maximum tokens per response (None uses the model default)
    """

    api_key: str
    model: str
    base_url: Optional[str] = None
    timeout: float = 60.0
    max_retries: int = 2
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    extra: dict[str, Any] = field(default_factory=dict)


class BaseLLMProvider(ILLMProvider, ABC):
    """Base class for LLM provider implementations.

    Subclasses must implement chat() for their specific API.
    """

    def __init__(self, config: LLMProviderConfig):
        """Initialize the provider.

        Args:
            config: Provider configuration
        """
        self.config = config

    @property
    def model_name(self) -> str:
        """Return the model name."""
        return self.config.model

    def _format_tools_for_api(
        self, tools: list[ToolDefinition]
    ) -> list[dict[str, Any]]:
        """Convert tool definitions to API format."""
        return [tool.to_openai_format() for tool in tools]

    @abstractmethod
    async def chat(
        self,
        messages: list[Message],
        tools: Optional[list[ToolDefinition]] = None,
    ) -> LLMResponse:
        """Generate a response. Must be implemented by subclasses."""
        pass
