"""
Unit tests for ToolDispatcher and ServerContext.
"""

import asyncio

import pytest

from mcp_web_adapters.errors import (
    ErrorCategory,
    InvalidArgumentsError,
    UnknownToolError,
    UpstreamError,
)
from mcp_web_adapters.tools.dispatcher import ServerContext
from mcp_web_adapters.tools.registry import ToolRegistry
from mcp_web_adapters.tools.results import RawUpstreamResult
from tests.conftest import StubInvoker


class TestListTools:
    def test_lists_registered_tools(self, make_dispatcher, echo_tool):
        dispatcher = make_dispatcher([echo_tool])
        assert [t.name for t in dispatcher.list_tools()] == ["echo"]

    def test_listing_is_stable(self, make_dispatcher, echo_tool):
        dispatcher = make_dispatcher([echo_tool])
        assert dispatcher.list_tools() == dispatcher.list_tools()


class TestCallTool:
    @pytest.mark.asyncio
    async def test_success_passes_validated_args(self, make_dispatcher, echo_tool):
        invoker = StubInvoker(items=["a", "b"])
        dispatcher = make_dispatcher([echo_tool], {"echo": invoker})

        result = await dispatcher.call_tool("echo", {"text": "hi"})

        assert [b.text for b in result.content] == ["a", "b"]
        assert result.is_error is False
        assert invoker.call_count == 1
        assert dict(invoker.calls[0]) == {"text": "hi", "repeat": 1}

    @pytest.mark.asyncio
    async def test_unknown_tool(self, make_dispatcher, echo_tool):
        invoker = StubInvoker()
        dispatcher = make_dispatcher([echo_tool], {"echo": invoker})

        with pytest.raises(UnknownToolError) as exc_info:
            await dispatcher.call_tool("shout", {"text": "hi"})

        assert str(exc_info.value) == "Unknown tool: shout"
        assert invoker.call_count == 0

    @pytest.mark.asyncio
    async def test_invalid_arguments_never_reach_upstream(
        self, make_dispatcher, echo_tool
    ):
        invoker = StubInvoker()
        dispatcher = make_dispatcher([echo_tool], {"echo": invoker})

        with pytest.raises(InvalidArgumentsError) as exc_info:
            await dispatcher.call_tool("echo", {"text": "hi", "repeat": 4})

        assert exc_info.value.parameter == "repeat"
        assert invoker.call_count == 0

    @pytest.mark.asyncio
    async def test_upstream_error_becomes_error_result(
        self, make_dispatcher, echo_tool, transport_error
    ):
        invoker = StubInvoker(error=transport_error)
        dispatcher = make_dispatcher([echo_tool], {"echo": invoker})

        result = await dispatcher.call_tool("echo", {"text": "hi"})

        assert result.is_error is True
        assert len(result.content) == 1
        assert result.content[0].text == "Stub API error: connection refused"
        assert invoker.call_count == 1

    @pytest.mark.asyncio
    async def test_defect_propagates(self, make_dispatcher, echo_tool):
        invoker = StubInvoker(error=KeyError("boom"))
        dispatcher = make_dispatcher([echo_tool], {"echo": invoker})

        with pytest.raises(KeyError):
            await dispatcher.call_tool("echo", {"text": "hi"})

    @pytest.mark.asyncio
    async def test_wrong_return_type_is_a_defect(self, make_dispatcher, echo_tool):
        class BadInvoker:
            provider = "Bad"

            async def invoke(self, args):
                return "not a result"

        dispatcher = make_dispatcher([echo_tool], {"echo": BadInvoker()})

        with pytest.raises(TypeError, match="expected RawUpstreamResult"):
            await dispatcher.call_tool("echo", {"text": "hi"})

    @pytest.mark.asyncio
    async def test_calls_are_independent(self, make_dispatcher, echo_tool):
        failing = StubInvoker(
            error=UpstreamError(ErrorCategory.HTTP_STATUS, "rate limited", provider="Stub")
        )
        dispatcher = make_dispatcher([echo_tool], {"echo": failing})

        first = await dispatcher.call_tool("echo", {"text": "one"})
        failing.error = None
        second = await dispatcher.call_tool("echo", {"text": "two"})

        assert first.is_error is True
        assert second.is_error is False
        assert failing.call_count == 2


    @pytest.mark.asyncio
    async def test_calls_run_one_at_a_time(self, make_dispatcher, echo_tool):
        in_flight = 0
        peak = 0
        order = []

        class SlowInvoker:
            provider = "Slow"

            async def invoke(self, args):
                nonlocal in_flight, peak
                in_flight += 1
                peak = max(peak, in_flight)
                order.append(args["text"])
                await asyncio.sleep(0.05)
                in_flight -= 1
                return RawUpstreamResult.of(args["text"])

        dispatcher = make_dispatcher([echo_tool], {"echo": SlowInvoker()})

        results = await asyncio.gather(
            *(dispatcher.call_tool("echo", {"text": t}) for t in ("a", "b", "c"))
        )

        assert peak == 1
        assert order == ["a", "b", "c"]
        assert [r.content[0].text for r in results] == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_failed_call_releases_the_slot(self, make_dispatcher, echo_tool):
        invoker = StubInvoker(error=KeyError("boom"))
        dispatcher = make_dispatcher([echo_tool], {"echo": invoker})

        with pytest.raises(KeyError):
            await dispatcher.call_tool("echo", {"text": "hi"})
        invoker.error = None

        result = await asyncio.wait_for(dispatcher.call_tool("echo", {"text": "hi"}), 1)
        assert result.is_error is False


class TestServerContext:
    def test_every_tool_needs_an_invoker(self, echo_tool):
        with pytest.raises(ValueError, match="No invoker bound"):
            ServerContext(
                name="s",
                version="0",
                display_name="S",
                registry=ToolRegistry([echo_tool]),
                invokers={},
            )

    def test_orphan_invoker_rejected(self, echo_tool):
        with pytest.raises(ValueError, match="unregistered"):
            ServerContext(
                name="s",
                version="0",
                display_name="S",
                registry=ToolRegistry([echo_tool]),
                invokers={"echo": StubInvoker(), "other": StubInvoker()},
            )

    @pytest.mark.asyncio
    async def test_closers_run_once_in_reverse(self, echo_tool):
        order = []
        context = ServerContext(
            name="s",
            version="0",
            display_name="S",
            registry=ToolRegistry([echo_tool]),
            invokers={"echo": StubInvoker()},
        )

        async def close_first():
            order.append("first")

        async def close_second():
            order.append("second")

        context.add_closer(close_first)
        context.add_closer(close_second)

        await context.aclose()
        await context.aclose()

        assert order == ["second", "first"]

    @pytest.mark.asyncio
    async def test_failing_closer_does_not_stop_others(self, echo_tool):
        closed = []
        context = ServerContext(
            name="s",
            version="0",
            display_name="S",
            registry=ToolRegistry([echo_tool]),
            invokers={"echo": StubInvoker()},
        )

        async def good():
            closed.append(True)

        async def bad():
            raise RuntimeError("already closed")

        context.add_closer(good)
        context.add_closer(bad)
        await context.aclose()

        assert closed == [True]
