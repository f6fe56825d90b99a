"""
Unit tests for the context store.

Covers seeding, trimming to the character budget, and reset.
"""

import logging

import pytest

from bridge.agent.domain.entities import Message, MessageRole, ToolCall
from bridge.agent.orchestrator.context_store import ContextBudget, ContextStore


@pytest.fixture
def store():
    """Store with a seeded system prompt of 10 characters."""
    s = ContextStore()
    s.seed(Message.system("x" * 10))
    return s


class TestContextBudget:
    """Tests for budget arithmetic."""

    def test_defaults(self):
        """Default budget is 200k tokens at 4 chars per token."""
        budget = ContextBudget()
        assert budget.max_chars == 800_000
        assert budget.trim_threshold == 640_000
        assert budget.trim_target == 400_000

    def test_custom_budget(self):
        budget = ContextBudget(max_context_tokens=100, chars_per_token=2)
        assert budget.max_chars == 200
        assert budget.trim_threshold == 160
        assert budget.trim_target == 100

    def test_estimate_tokens(self):
        assert ContextBudget().estimate_tokens(400) == 100


class TestSeed:
    """Tests for installing the system prompt."""

    def test_seed_marks_initialized(self):
        s = ContextStore()
        assert not s.initialized
        s.seed(Message.system("prompt"))
        assert s.initialized
        assert s.snapshot()[0].content == "prompt"

    def test_seed_replaces_existing_system(self, store):
        store.append(Message.user("hi"))
        store.seed(Message.system("new prompt"))

        history = store.snapshot()
        assert len(history) == 2
        assert history[0].content == "new prompt"
        assert history[1].content == "hi"

    def test_seed_rejects_non_system(self):
        with pytest.raises(ValueError):
            ContextStore().seed(Message.user("hi"))


class TestTrim:
    """Tests for trimming the history to the budget."""

    def test_below_threshold_is_unchanged(self, store):
        """Nothing is removed while the total is under max_budget."""
        for i in range(5):
            store.append(Message.user("a" * 10))

        before = store.snapshot()
        store.trim(max_budget=100, target_budget=20)
        assert store.snapshot() == before

    def test_keeps_newest_messages_within_target(self, store):
        """Oldest non-system messages are dropped first."""
        for letter in "abcdef":
            store.append(Message.user(letter * 10))

        # Total 70 chars >= 60 triggers; 25 char target keeps 2 messages
        store.trim(max_budget=60, target_budget=25)

        history = store.snapshot()
        assert [m.content for m in history] == ["x" * 10, "e" * 10, "f" * 10]

    def test_system_message_always_kept(self, store):
        """The system prompt survives even when its own size exceeds the target."""
        store.seed(Message.system("s" * 500))
        store.append(Message.user("u" * 10))

        store.trim(max_budget=100, target_budget=5)

        history = store.snapshot()
        assert len(history) == 1
        assert history[0].role == MessageRole.SYSTEM
        assert history[0].content == "s" * 500

    def test_newest_message_larger_than_target_is_dropped(self, store):
        """Only the contiguous newest run that fits is kept, possibly nothing."""
        store.append(Message.user("a" * 10))
        store.append(Message.user("b" * 100))

        store.trim(max_budget=50, target_budget=50)

        assert [m.role for m in store.snapshot()] == [MessageRole.SYSTEM]

    def test_stops_at_first_message_that_does_not_fit(self, store):
        """A small older message is not kept once a larger one was skipped."""
        store.append(Message.user("a" * 2))
        store.append(Message.user("b" * 40))
        store.append(Message.user("c" * 10))

        store.trim(max_budget=50, target_budget=30)

        assert [m.content for m in store.snapshot()[1:]] == ["c" * 10]

    def test_content_free_messages_count_as_zero(self, store):
        """Assistant turns with only tool calls have size 0."""
        store.append(Message.user("a" * 40))
        store.append(Message.assistant(None))
        store.append(Message.tool_result("b" * 10, tool_call_id="call_1"))

        store.trim(max_budget=50, target_budget=15)

        history = store.snapshot()
        assert history[1].content is None
        assert history[2].content == "b" * 10
        assert len(history) == 3

    def test_trim_is_idempotent(self, store):
        for i in range(20):
            store.append(Message.user(str(i) * 10))

        store.trim(max_budget=100, target_budget=50)
        once = store.snapshot()
        store.trim(max_budget=100, target_budget=50)
        assert store.snapshot() == once

    def test_trim_never_grows_history(self, store):
        for i in range(20):
            store.append(Message.user(str(i % 10) * (i + 1)))

        before_size = store.total_size()
        before_len = len(store)
        store.trim(max_budget=100, target_budget=60)

        assert store.total_size() <= before_size
        assert len(store) <= before_len
        # Remaining non-system content fits the target
        assert store.total_size() - store.snapshot()[0].size <= 60

    def test_kept_messages_preserve_order(self, store):
        for i in range(10):
            store.append(Message.user(f"m{i}" + "-" * 8))

        store.trim(max_budget=50, target_budget=30)

        kept = [m.content for m in store.snapshot()[1:]]
        assert kept == [f"m{i}" + "-" * 8 for i in range(7, 10)]

    def test_missing_system_message_skips_trim(self, caplog):
        """Without a system prompt at index 0 trimming is a logged no-op."""
        s = ContextStore()
        for i in range(5):
            s.append(Message.user("a" * 10))

        with caplog.at_level(logging.WARNING):
            s.trim(max_budget=10, target_budget=5)

        assert len(s) == 5
        assert "System prompt not found" in caplog.text

    def test_trim_to_budget_uses_configured_ratios(self):
        s = ContextStore(ContextBudget(max_context_tokens=25, chars_per_token=4))
        s.seed(Message.system("sys"))
        for letter in "abcdefghij":
            s.append(Message.user(letter * 10))

        # max 100 chars: threshold 80, target 50
        s.trim_to_budget()

        assert [m.content for m in s.snapshot()[1:]] == [
            letter * 10 for letter in "fghij"
        ]


class TestReset:
    """Tests for clearing the store."""

    def test_reset_clears_everything(self, store):
        store.append(Message.user("hi"))
        store.reset()

        assert len(store) == 0
        assert store.snapshot() == ()
        assert not store.initialized

    def test_snapshot_is_detached(self, store):
        snapshot = store.snapshot()
        store.append(Message.user("later"))
        assert len(snapshot) == 1

    def test_snapshot_does_not_share_tool_arguments(self, store):
        call = ToolCall(id="call_1", name="chrome_navigate", arguments={"url": "https://google.com"})
        store.append(Message.assistant(None, [call]))

        store.snapshot()[1].tool_calls[0].arguments["url"] = "https://example.com"

        assert store.snapshot()[1].tool_calls[0].arguments == {"url": "https://google.com"}
