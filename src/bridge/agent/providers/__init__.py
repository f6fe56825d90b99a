"""LLM provider implementations."""

from .base import BaseLLMProvider, ErrorType, LLMProviderConfig, LLMProviderError
from .openai import OpenAIProvider
from .ollama import OllamaProvider

__all__ = [
    "BaseLLMProvider",
    "ErrorType",
    "LLMProviderError",
    "LLMProviderConfig",
    "OpenAIProvider",
    "OllamaProvider",
]
