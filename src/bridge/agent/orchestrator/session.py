"""
Agent Session.

One bridge session: an MCP connection, the merged tool registry, the
conversation context and the active response protocol. Commands on a
session run one at a time.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Optional

from ..domain.entities import Message
from ..domain.ports import ILLMProvider, IMCPClient
from ..providers.ollama import OllamaProvider
from ..providers.openai import OpenAIProvider
from ..tools.local import LocalToolExecutor, default_local_tools
from ..tools.mcp_client import MCPClient
from ..tools.registry import ToolRegistry
from .context_store import ContextStore
from .prompt_builder import PromptBuilder
from .protocols import JsonDirectiveProtocol, ResponseProtocol, StructuredToolCallProtocol
from .turn_executor import TurnExecutor, TurnOutcome

if TYPE_CHECKING:
    from ..config import BridgeSettings

logger = logging.getLogger(__name__)


class AgentSession:
    """Bridge session that turns natural-language commands into tool calls.

    Usage:
        session = create_session(BridgeSettings.from_env())

        reply = await session.execute_command("open google and search for cats")
        history = session.get_history()

        await session.reset()
        await session.shutdown()

    Setup (MCP connection, tool discovery, system prompt) happens lazily
    on the first command and again after reset().
    """

    def __init__(
        self,
        llm: ILLMProvider,
        mcp_client: IMCPClient,
        tool_registry: ToolRegistry,
        protocol: ResponseProtocol,
        context: Optional[ContextStore] = None,
        prompt_builder: Optional[PromptBuilder] = None,
    ):
        """Initialize the session.

        Args:
            llm: LLM provider
            mcp_client: MCP client used for remote tools
            tool_registry: Registry merging local and remote tools
            protocol: Response protocol matching the LLM backend
            context: Conversation history (a fresh store by default)
            prompt_builder: System prompt builder
        """
        self.llm = llm
        self.mcp_client = mcp_client
        self.tools = tool_registry
        self.protocol = protocol
        self.context = context if context is not None else ContextStore()
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.turn_executor = TurnExecutor(llm, tool_registry, protocol)

        self._lock = asyncio.Lock()
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def ensure_initialized(self) -> None:
        """Connect, discover tools and seed the system prompt if not done yet.

        Raises:
            UpstreamRequestFailure: If the MCP server cannot be reached
        """
        if self._initialized:
            return

        await self.mcp_client.connect()
        tools = await self.tools.refresh()

        system_prompt = self.prompt_builder.build(
            tools=tools,
            response_contract=self.protocol.response_contract(),
        )
        self.context.seed(Message.system(system_prompt))
        self._initialized = True
        logger.info(
            f"Session initialized with {len(tools)} tools "
            f"({self.protocol.name} protocol, model {self.llm.model_name})"
        )

    async def run_command(self, command: str) -> TurnOutcome:
        """Run one command and return the full turn outcome.

        Raises:
            ValueError: If the command is empty
            UpstreamRequestFailure: If the LLM or MCP server fails
        """
        if not command or not command.strip():
            raise ValueError("Command is required")

        async with self._lock:
            await self.ensure_initialized()

            logger.info(f"Command: {command}")
            self.context.append(Message.user(command))
            self.context.trim_to_budget()

            outcome = await self.turn_executor.run(self.context)
            logger.info(
                f"Turn {outcome.status.value} after {outcome.iterations} iterations "
                f"and {outcome.tool_calls} tool calls"
            )
            return outcome

    async def execute_command(self, command: str) -> str:
        """Run one command and return the final text for the user."""
        outcome = await self.run_command(command)
        return outcome.text

    def get_history(self) -> tuple[Message, ...]:
        """Read-only snapshot of the conversation."""
        return self.context.snapshot()

    async def reset(self) -> None:
        """Forget the conversation and discovered tools.

        Waits for an in-flight command to finish. The next command
        reconnects, rediscovers tools and reseeds the system prompt.
        """
        async with self._lock:
            self.context.reset()
            self.tools.clear()
            self._initialized = False
        logger.info("Conversation history cleared")

    clear_history = reset

    async def shutdown(self) -> None:
        """Close the MCP connection and the LLM client."""
        try:
            await self.mcp_client.close()
        finally:
            await self.llm.close()
        self._initialized = False
        logger.info("Session closed")

    close_connection = shutdown


def create_protocol(use_ollama: bool) -> ResponseProtocol:
    """Protocol matching the backend: JSON directives for Ollama."""
    if use_ollama:
        return JsonDirectiveProtocol()
    return StructuredToolCallProtocol()


def create_session(settings: BridgeSettings) -> AgentSession:
    """Build a session from settings.

    Args:
        settings: Bridge settings

    Returns:
        A session that initializes itself on its first command
    """
    if settings.use_ollama:
        llm: ILLMProvider = OllamaProvider(settings.provider_config)
    else:
        llm = OpenAIProvider(settings.provider_config)

    mcp_client = MCPClient(settings.mcp_config)
    registry = ToolRegistry(
        mcp_client=mcp_client,
        local_tools=LocalToolExecutor(default_local_tools(llm)),
    )

    return AgentSession(
        llm=llm,
        mcp_client=mcp_client,
        tool_registry=registry,
        protocol=create_protocol(settings.use_ollama),
        context=ContextStore(settings.context_budget),
    )
