"""Bridge Orchestrator.

Coordinates one session of the command bridge:
- Context store with size-budgeted history
- System prompt assembly
- Response protocols (JSON directives or structured tool calls)
- Bounded turn loop with tool execution
- Session setup, reset and shutdown
"""

from .context_store import ContextBudget, ContextStore
from .prompt_builder import PromptBuilder
from .protocols import (
    Abort,
    Continue,
    Finish,
    JsonDirectiveProtocol,
    ResponseProtocol,
    StepOutcome,
    StructuredToolCallProtocol,
)
from .session import AgentSession, create_protocol, create_session
from .tool_executor import ToolExecutor
from .turn_executor import (
    MAX_ITERATIONS_MESSAGE,
    TurnExecutor,
    TurnOutcome,
    TurnState,
    TurnStatus,
)

__all__ = [
    # Session
    "AgentSession",
    "create_protocol",
    "create_session",
    # Context
    "ContextBudget",
    "ContextStore",
    "PromptBuilder",
    # Protocols
    "Abort",
    "Continue",
    "Finish",
    "JsonDirectiveProtocol",
    "ResponseProtocol",
    "StepOutcome",
    "StructuredToolCallProtocol",
    # Turn loop
    "MAX_ITERATIONS_MESSAGE",
    "ToolExecutor",
    "TurnExecutor",
    "TurnOutcome",
    "TurnState",
    "TurnStatus",
]
