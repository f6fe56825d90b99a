"""
MCP Command Bridge Agent Module.

Turns natural-language commands into tool calls against a Model Context
Protocol server, looping between an LLM and the tools until the LLM
produces a final answer suitable for speech output.

Architecture:
- Domain: Core entities, errors and port interfaces
- Providers: LLM backends (OpenAI, Ollama)
- Tools: MCP client, local tools and the merged tool registry
- Orchestrator: Context store, response protocols, turn loop, session
- API: FastAPI router
"""

# Domain entities
from .domain.entities import (
    LLMResponse,
    Message,
    MessageRole,
    ToolCall,
    ToolDefinition,
    ToolResult,
    ToolSource,
)
from .domain.errors import (
    BridgeError,
    ConfigurationError,
    ToolExecutionError,
    ToolNotFound,
    UpstreamRequestFailure,
)

# Orchestrator
from .orchestrator import (
    AgentSession,
    ContextBudget,
    ContextStore,
    JsonDirectiveProtocol,
    StructuredToolCallProtocol,
    TurnExecutor,
    create_session,
)

# Configuration
from .config import BridgeSettings

# Tools
from .tools import (
    LocalToolExecutor,
    MCPClient,
    MCPClientConfig,
    ToolRegistry,
)

# Providers
from .providers import (
    BaseLLMProvider,
    LLMProviderConfig,
    OllamaProvider,
    OpenAIProvider,
)

__all__ = [
    # Domain
    "LLMResponse",
    "Message",
    "MessageRole",
    "ToolCall",
    "ToolDefinition",
    "ToolResult",
    "ToolSource",
    "BridgeError",
    "ConfigurationError",
    "ToolExecutionError",
    "ToolNotFound",
    "UpstreamRequestFailure",
    # Orchestrator
    "AgentSession",
    "ContextBudget",
    "ContextStore",
    "JsonDirectiveProtocol",
    "StructuredToolCallProtocol",
    "TurnExecutor",
    "create_session",
    # Configuration
    "BridgeSettings",
    # Tools
    "LocalToolExecutor",
    "MCPClient",
    "MCPClientConfig",
    "ToolRegistry",
    # Providers
    "BaseLLMProvider",
    "LLMProviderConfig",
    "OllamaProvider",
    "OpenAIProvider",
]
