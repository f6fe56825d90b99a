"""
Context Store.

Owns the ordered conversation history for one session and keeps it
within a character budget that approximates the LLM's context window.
The system instruction always occupies index 0 and is never evicted.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import Iterator, Optional

from ..domain.entities import Message, MessageRole

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContextBudget:
    """Context size limits in character-equivalent units.

    Attributes:
        max_context_tokens: Token cap of the model's context window
        chars_per_token: Average characters per token
        trim_threshold_ratio: Fraction of the maximum that triggers trimming
        trim_target_ratio: Fraction of the maximum kept after trimming
    """

    max_context_tokens: int = 200_000
    chars_per_token: int = 4
    trim_threshold_ratio: float = 0.8
    trim_target_ratio: float = 0.5

    @property
    def max_chars(self) -> int:
        return self.max_context_tokens * self.chars_per_token

    @property
    def trim_threshold(self) -> float:
        return self.max_chars * self.trim_threshold_ratio

    @property
    def trim_target(self) -> float:
        return self.max_chars * self.trim_target_ratio

    def estimate_tokens(self, chars: int) -> int:
        return round(chars / self.chars_per_token)


class ContextStore:
    """Ordered conversation history with a size budget.

    Usage:
        store = ContextStore(ContextBudget())
        store.seed(Message.system(prompt))

        store.append(Message.user("open google"))
        store.trim_to_budget()

        history = store.snapshot()
    """

    def __init__(self, budget: Optional[ContextBudget] = None):
        self.budget = budget or ContextBudget()
        self._messages: list[Message] = []
        self._initialized = False

    @property
    def initialized(self) -> bool:
        """True once a system instruction has been seeded."""
        return self._initialized

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(self.snapshot())

    def seed(self, system_message: Message) -> None:
        """Install the system instruction at index 0 and mark initialized."""
        if system_message.role != MessageRole.SYSTEM:
            raise ValueError("Context must be seeded with a system message")

        if self._messages and self._messages[0].role == MessageRole.SYSTEM:
            self._messages[0] = system_message
        else:
            self._messages.insert(0, system_message)
        self._initialized = True

    def append(self, message: Message) -> None:
        """Add a message to the end of the history."""
        self._messages.append(message)

    def total_size(self) -> int:
        """Sum of textual content lengths across all messages."""
        return sum(msg.size for msg in self._messages)

    def trim(self, max_budget: float, target_budget: float) -> None:
        """Drop the oldest messages once the history reaches max_budget.

        Keeps the system instruction plus the longest run of most recent
        messages whose combined size stays within target_budget.

        Args:
            max_budget: Size at which trimming starts
            target_budget: Size budget for the kept non-system messages
        """
        current = self.total_size()
        if current < max_budget:
            return

        logger.info(
            f"History length: {current} chars "
            f"({self.budget.estimate_tokens(current)} tokens), trimming old messages"
        )

        if not self._messages or self._messages[0].role != MessageRole.SYSTEM:
            logger.warning("System prompt not found, skipping trim")
            return

        system_message = self._messages[0]
        others = self._messages[1:]

        kept_from = len(others)
        accumulated = 0
        for index in range(len(others) - 1, -1, -1):
            size = others[index].size
            if accumulated + size > target_budget:
                break
            accumulated += size
            kept_from = index

        self._messages = [system_message, *others[kept_from:]]

        new_size = self.total_size()
        logger.info(
            f"Trimmed {kept_from} messages to {new_size} chars "
            f"({self.budget.estimate_tokens(new_size)} tokens)"
        )

    def trim_to_budget(self) -> None:
        """Trim with the configured threshold and target."""
        self.trim(self.budget.trim_threshold, self.budget.trim_target)

    def reset(self) -> None:
        """Clear all messages and mark the store not initialized."""
        self._messages = []
        self._initialized = False

    def snapshot(self) -> tuple[Message, ...]:
        """Detached copy of the full history, nested payloads included."""
        return copy.deepcopy(tuple(self._messages))
