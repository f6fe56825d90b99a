"""Bridge configuration.

Settings are read from the environment once at startup. A ``.env`` file in
the working directory is loaded first, so local development does not need
exported variables.

Environment:
    MCP_SERVER_URL: Streamable HTTP endpoint of the MCP server
    MODEL: Model identifier passed to the LLM backend
    OPENAI_API_KEY: Required unless USE_OLLAMA is "true"
    USE_OLLAMA: "true" selects the local Ollama backend
    OLLAMA_BASE_URL: Ollama endpoint; a trailing /v1 is accepted
    MAX_CONTEXT_TOKENS: Token cap used for history trimming
    ESTIMATED_CHARS_PER_TOKEN: Characters per token estimate
    LLM_TIMEOUT: Seconds to wait for one LLM response
    MCP_TIMEOUT: Seconds to wait for one MCP request
    LOG_LEVEL: Root log level
    HOST / PORT: HTTP listen address
"""
import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .domain.errors import ConfigurationError
from .orchestrator.context_store import ContextBudget
from .providers.base import LLMProviderConfig
from .tools.mcp_client import MCPClientConfig

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_MCP_SERVER_URL = "http://127.0.0.1:12306/mcp"
DEFAULT_MODEL = "gpt-4"
DEFAULT_OLLAMA_BASE_URL = "http://localhost:11434/v1"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


@dataclass
class BridgeSettings:
    """Runtime settings for one bridge process.

    Attributes:
        mcp_server_url: MCP server endpoint
        model: LLM model identifier
        openai_api_key: OpenAI key, None when running on Ollama
        use_ollama: Select the Ollama backend and the JSON directive protocol
        ollama_base_url: Ollama endpoint as configured
        max_context_tokens: Token cap for history trimming
        chars_per_token: Characters per token estimate
        llm_timeout: Seconds per LLM request
        mcp_timeout: Seconds per MCP request
        log_level: Root log level name
        host: HTTP listen host
        port: HTTP listen port
    """
    mcp_server_url: str = DEFAULT_MCP_SERVER_URL
    model: str = DEFAULT_MODEL
    openai_api_key: Optional[str] = None
    use_ollama: bool = False
    ollama_base_url: str = DEFAULT_OLLAMA_BASE_URL
    max_context_tokens: int = 200_000
    chars_per_token: int = 4
    llm_timeout: float = 60.0
    mcp_timeout: float = 30.0
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000

    def __post_init__(self):
        if not self.use_ollama and not self.openai_api_key:
            raise ConfigurationError(
                "OPENAI_API_KEY environment variable is required unless USE_OLLAMA=true"
            )
        if self.max_context_tokens <= 0 or self.chars_per_token <= 0:
            raise ConfigurationError(
                "MAX_CONTEXT_TOKENS and ESTIMATED_CHARS_PER_TOKEN must be positive"
            )

    @classmethod
    def from_env(cls) -> "BridgeSettings":
        """Read settings from the environment.

        Raises:
            ConfigurationError: If required values are missing or malformed
        """
        use_ollama = os.getenv("USE_OLLAMA", "").strip().lower() == "true"
        settings = cls(
            mcp_server_url=os.getenv("MCP_SERVER_URL") or DEFAULT_MCP_SERVER_URL,
            model=os.getenv("MODEL") or DEFAULT_MODEL,
            openai_api_key=os.getenv("OPENAI_API_KEY") or None,
            use_ollama=use_ollama,
            ollama_base_url=os.getenv("OLLAMA_BASE_URL") or DEFAULT_OLLAMA_BASE_URL,
            max_context_tokens=_env_int("MAX_CONTEXT_TOKENS", 200_000),
            chars_per_token=_env_int("ESTIMATED_CHARS_PER_TOKEN", 4),
            llm_timeout=_env_float("LLM_TIMEOUT", 60.0),
            mcp_timeout=_env_float("MCP_TIMEOUT", 30.0),
            log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
            host=os.getenv("HOST") or "0.0.0.0",
            port=_env_int("PORT", 3000),
        )
        logger.info(
            f"Using {'Ollama' if settings.use_ollama else 'OpenAI'} backend "
            f"with model {settings.model}"
        )
        return settings

    @property
    def context_budget(self) -> ContextBudget:
        return ContextBudget(
            max_context_tokens=self.max_context_tokens,
            chars_per_token=self.chars_per_token,
        )

    @property
    def provider_config(self) -> LLMProviderConfig:
        if self.use_ollama:
            return LLMProviderConfig(
                api_key="",
                model=self.model,
                base_url=self.ollama_base_url,
                timeout=self.llm_timeout,
            )
        return LLMProviderConfig(
            api_key=self.openai_api_key or "",
            model=self.model,
            timeout=self.llm_timeout,
        )

    @property
    def mcp_config(self) -> MCPClientConfig:
        return MCPClientConfig(server_url=self.mcp_server_url, timeout=self.mcp_timeout)
