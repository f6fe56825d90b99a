"""
Unit tests for the turn loop.

A scripted LLM replays fixed responses so every path through the loop
is deterministic.
"""

import pytest
import pytest_asyncio

from bridge.agent.domain.entities import Message, MessageRole, ToolCall
from bridge.agent.orchestrator.context_store import ContextStore
from bridge.agent.orchestrator.protocols import JsonDirectiveProtocol, StructuredToolCallProtocol
from bridge.agent.orchestrator.turn_executor import (
    MAX_ITERATIONS_MESSAGE,
    TurnExecutor,
    TurnState,
    TurnStatus,
)
from bridge.agent.providers.base import LLMProviderError
from bridge.agent.tools.registry import ToolRegistry

from fakes import ScriptedLLM, text_response, tool_call_response


@pytest.fixture
def context():
    c = ContextStore()
    c.seed(Message.system("system"))
    c.append(Message.user("find x"))
    return c


@pytest_asyncio.fixture
async def registry(fake_mcp):
    r = ToolRegistry(fake_mcp)
    await r.refresh()
    return r


class TestTurnState:
    """Tests for loop bookkeeping."""

    def test_initial_state(self):
        state = TurnState(max_iterations=3)
        assert state.can_continue
        assert not state.done

    def test_cap_stops_loop(self):
        state = TurnState(max_iterations=3, iteration=3)
        assert not state.can_continue

    def test_status_stops_loop(self):
        state = TurnState(max_iterations=3, status=TurnStatus.FINISHED)
        assert state.done
        assert not state.can_continue


class TestFreeTextTurns:
    """Turns driven by JSON directives."""

    @pytest.mark.asyncio
    async def test_immediate_done(self, context, registry, fake_mcp):
        llm = ScriptedLLM([text_response('{"done": true, "message": "hello"}')])

        outcome = await TurnExecutor(llm, registry, JsonDirectiveProtocol()).run(context)

        assert outcome.text == "hello"
        assert outcome.status == TurnStatus.FINISHED
        assert outcome.iterations == 1
        assert fake_mcp.calls == []

    @pytest.mark.asyncio
    async def test_tool_then_done(self, context, registry, fake_mcp):
        llm = ScriptedLLM([
            text_response('{"tool": "search", "arguments": {"q": "x"}}'),
            text_response('{"done": true, "message": "found it"}'),
        ])

        outcome = await TurnExecutor(llm, registry, JsonDirectiveProtocol()).run(context)

        assert outcome.text == "found it"
        assert outcome.iterations == 2
        assert outcome.tool_calls == 1
        assert fake_mcp.calls == [("search", {"q": "x"})]

    @pytest.mark.asyncio
    async def test_tools_not_declared(self, context, registry):
        llm = ScriptedLLM([text_response('{"done": true, "message": "ok"}')])

        await TurnExecutor(llm, registry, JsonDirectiveProtocol()).run(context)

        assert llm.calls[0]["tools"] is None

    @pytest.mark.asyncio
    async def test_second_request_sees_tool_result(self, context, registry):
        llm = ScriptedLLM([
            text_response('{"tool": "search", "arguments": {"q": "x"}}'),
            text_response('{"done": true, "message": "found it"}'),
        ])

        await TurnExecutor(llm, registry, JsonDirectiveProtocol()).run(context)

        second = llm.calls[1]["messages"]
        assert second[-1].role == MessageRole.TOOL
        assert second[-1].content.startswith("Tool execution result:")

    @pytest.mark.asyncio
    async def test_cap_reached(self, context, registry, fake_mcp):
        llm = ScriptedLLM([text_response('{"tool": "search", "arguments": {"q": "x"}}')])

        outcome = await TurnExecutor(llm, registry, JsonDirectiveProtocol(max_iterations=4)).run(context)

        assert outcome.text == MAX_ITERATIONS_MESSAGE
        assert outcome.status == TurnStatus.EXHAUSTED
        assert outcome.iterations == 4
        assert len(llm.calls) == 4
        assert len(fake_mcp.calls) == 4

    @pytest.mark.asyncio
    async def test_default_cap_is_ten(self, context, registry):
        llm = ScriptedLLM([text_response('{"tool": "search", "arguments": {"q": "x"}}')])

        outcome = await TurnExecutor(llm, registry, JsonDirectiveProtocol()).run(context)

        assert outcome.iterations == 10
        assert len(llm.calls) == 10

    @pytest.mark.asyncio
    async def test_malformed_directive_aborts(self, context, registry):
        llm = ScriptedLLM([text_response('{"thought": "hmm"}')])

        outcome = await TurnExecutor(llm, registry, JsonDirectiveProtocol()).run(context)

        assert outcome.status == TurnStatus.ABORTED
        assert outcome.abort_reason
        assert outcome.iterations == 1

    @pytest.mark.asyncio
    async def test_unknown_tool_does_not_escape_loop(self, context, registry):
        llm = ScriptedLLM([
            text_response('{"tool": "nonexistent", "arguments": {}}'),
            text_response('{"done": true, "message": "could not do it"}'),
        ])

        outcome = await TurnExecutor(llm, registry, JsonDirectiveProtocol()).run(context)

        assert outcome.text == "could not do it"
        assert not outcome.tool_results[0].success
        assert outcome.tool_results[0].error_type == "ToolNotFound"


class TestStructuredTurns:
    """Turns driven by native tool calls."""

    @pytest.mark.asyncio
    async def test_two_calls_then_answer(self, context, registry, fake_mcp):
        llm = ScriptedLLM([
            tool_call_response(
                ToolCall(id="call_a", name="chrome_navigate", arguments={"url": "https://google.com"}),
                ToolCall(id="call_b", name="chrome_fill", arguments={"selector": "q", "value": "cats"}),
            ),
            text_response("I searched for cats on Google."),
        ])

        outcome = await TurnExecutor(llm, registry, StructuredToolCallProtocol()).run(context)

        assert outcome.text == "I searched for cats on Google."
        assert outcome.iterations == 2
        assert [name for name, _ in fake_mcp.calls] == ["chrome_navigate", "chrome_fill"]

        second = llm.calls[1]["messages"]
        assert [m.tool_call_id for m in second[-2:]] == ["call_a", "call_b"]

    @pytest.mark.asyncio
    async def test_tools_declared(self, context, registry):
        llm = ScriptedLLM([text_response("done")])

        await TurnExecutor(llm, registry, StructuredToolCallProtocol()).run(context)

        declared = [t.name for t in llm.calls[0]["tools"]]
        assert "search" in declared

    @pytest.mark.asyncio
    async def test_default_cap_is_twenty(self, context, registry):
        llm = ScriptedLLM([tool_call_response(ToolCall(name="chrome_screenshot"))])

        outcome = await TurnExecutor(llm, registry, StructuredToolCallProtocol()).run(context)

        assert outcome.status == TurnStatus.EXHAUSTED
        assert outcome.iterations == 20

    @pytest.mark.asyncio
    async def test_llm_failure_propagates(self, context, registry):
        llm = ScriptedLLM([LLMProviderError("upstream down")])

        with pytest.raises(LLMProviderError):
            await TurnExecutor(llm, registry, StructuredToolCallProtocol()).run(context)

        # History keeps what was there before the failure
        assert context.snapshot()[-1].content == "find x"
