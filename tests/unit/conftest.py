"""Unit test specific configuration."""

import pytest

from mcp_web_adapters.tools.dispatcher import ServerContext, ToolDispatcher
from mcp_web_adapters.tools.registry import ToolRegistry
from mcp_web_adapters.tools.schema import (
    InputSchema,
    ParameterSpec,
    ParamKind,
    ToolDescriptor,
)


@pytest.fixture
def echo_tool():
    """A small tool exercising every parameter kind."""
    return ToolDescriptor(
        name="echo",
        description="Echo the arguments back",
        input_schema=InputSchema(
            (
                ParameterSpec("text", ParamKind.STRING, "Text to echo", required=True),
                ParameterSpec(
                    "repeat", ParamKind.NUMBER, "Times", minimum=1, maximum=3, default=1
                ),
                ParameterSpec("mode", ParamKind.ENUM, choices=("plain", "loud")),
                ParameterSpec("options", ParamKind.OBJECT, additional_properties=True),
            )
        ),
    )


@pytest.fixture
def make_dispatcher(stub_invoker_cls):
    """Factory: make_dispatcher(descriptors, invokers=None) -> ToolDispatcher."""

    def make(descriptors, invokers=None):
        registry = ToolRegistry(descriptors)
        if invokers is None:
            invokers = {name: stub_invoker_cls() for name in registry.names}
        context = ServerContext(
            name="test-server",
            version="0.0.0",
            display_name="Test",
            registry=registry,
            invokers=invokers,
        )
        return ToolDispatcher(context)

    return make
