"""
Turn Executor.

Runs the bounded think/act loop for a single user command: ask the LLM,
let the active protocol interpret the response, execute requested tools,
and repeat until a final answer, an abort, or the iteration cap.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..domain.entities import ToolResult
from ..domain.ports import ILLMProvider
from ..tools.registry import ToolRegistry
from .context_store import ContextStore
from .protocols import Abort, Continue, Finish, ResponseProtocol
from .tool_executor import ToolExecutor

logger = logging.getLogger(__name__)

MAX_ITERATIONS_MESSAGE = "Maximum iterations reached. Task may be incomplete."


class TurnStatus(str, Enum):
    """How a turn ended."""

    FINISHED = "finished"
    ABORTED = "aborted"
    EXHAUSTED = "exhausted"


@dataclass
class TurnState:
    """Mutable state while a turn is running.

    Attributes:
        max_iterations: Hard cap on LLM round trips
        iteration: Round trips made so far
        final_answer: Text returned to the caller, once known
        status: Outcome, once known
        abort_reason: Why the turn was aborted
        tool_results: Every tool result produced during the turn
    """

    max_iterations: int
    iteration: int = 0
    final_answer: Optional[str] = None
    status: Optional[TurnStatus] = None
    abort_reason: Optional[str] = None
    tool_results: list[ToolResult] = field(default_factory=list)

    @property
    def done(self) -> bool:
        return self.status is not None

    @property
    def can_continue(self) -> bool:
        return not self.done and self.iteration < self.max_iterations


@dataclass(frozen=True)
class TurnOutcome:
    """Result of one command."""

    text: str
    status: TurnStatus
    iterations: int
    tool_results: tuple[ToolResult, ...] = ()
    abort_reason: Optional[str] = None

    @property
    def tool_calls(self) -> int:
        return len(self.tool_results)


class TurnExecutor:
    """Drives one command through the LLM and tools.

    Usage:
        executor = TurnExecutor(llm, registry, JsonDirectiveProtocol())

        context.append(Message.user(command))
        context.trim_to_budget()
        outcome = await executor.run(context)
        print(outcome.text)

    LLM provider errors are not caught here; they propagate to the caller
    and the context keeps whatever was appended before the failure.
    """

    def __init__(
        self,
        llm: ILLMProvider,
        tool_registry: ToolRegistry,
        protocol: ResponseProtocol,
    ):
        self.llm = llm
        self.tools = tool_registry
        self.protocol = protocol
        self.tool_executor = ToolExecutor(tool_registry)

    async def run(self, context: ContextStore) -> TurnOutcome:
        """Loop until the protocol finishes, aborts, or the cap is reached.

        Args:
            context: Session history; the user command must already be appended

        Returns:
            TurnOutcome with the final text
        """
        state = TurnState(max_iterations=self.protocol.max_iterations)
        declared = self.tools.describe() if self.protocol.declares_tools else None

        while state.can_continue:
            state.iteration += 1
            logger.info(f"Iteration {state.iteration}/{state.max_iterations}")

            response = await self.llm.chat(list(context.snapshot()), tools=declared)
            outcome = await self.protocol.step(response, context, self.tool_executor)

            if isinstance(outcome, Continue):
                state.tool_results.extend(outcome.tool_results)
            elif isinstance(outcome, Finish):
                state.final_answer = outcome.message
                state.status = TurnStatus.FINISHED
            elif isinstance(outcome, Abort):
                state.final_answer = outcome.message
                state.abort_reason = outcome.reason
                state.status = TurnStatus.ABORTED

        if not state.done:
            logger.warning(f"Reached maximum iterations ({state.max_iterations})")
            state.final_answer = MAX_ITERATIONS_MESSAGE
            state.status = TurnStatus.EXHAUSTED

        return TurnOutcome(
            text=state.final_answer or "",
            status=state.status,
            iterations=state.iteration,
            tool_results=tuple(state.tool_results),
            abort_reason=state.abort_reason,
        )
