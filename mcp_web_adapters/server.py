"""Reusable stdio server harness shared by all adapters.

Adapters supply a ``ServerContext`` (registry, invokers, cleanup); the harness
binds the dispatcher to the MCP request handlers and owns process lifecycle.
"""

import asyncio
import errno
import logging
import signal
import sys
from typing import Optional

from fastmcp import FastMCP
from mcp import types

from .errors import DispatchError
from .tools.dispatcher import ServerContext, ToolDispatcher
from .tools.results import ToolResult
from .tools.schema import ToolDescriptor

logger = logging.getLogger(__name__)


def to_mcp_tool(descriptor: ToolDescriptor) -> types.Tool:
    return types.Tool(
        name=descriptor.name,
        description=descriptor.description,
        inputSchema=descriptor.input_schema.to_json_schema(),
    )


def to_call_tool_result(result: ToolResult) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=b.text) for b in result.content],
        isError=result.is_error,
    )


class ToolServer:
    """One MCP server process: a dispatcher bound to a FastMCP host."""

    def __init__(
        self, context: ServerContext, dispatcher: Optional[ToolDispatcher] = None
    ):
        self.context = context
        self.dispatcher = dispatcher or ToolDispatcher(context)
        self.mcp = FastMCP(context.name, version=context.version)
        self._install_handlers()

    def _install_handlers(self) -> None:
        # Replace FastMCP's function-based tool handlers with the dispatcher.
        # Registering directly on the low-level server lets DispatchError reach
        # the client as a JSON-RPC error instead of an isError result.
        lowlevel = self.mcp._mcp_server
        lowlevel.request_handlers[types.ListToolsRequest] = self._handle_list_tools
        lowlevel.request_handlers[types.CallToolRequest] = self._handle_call_tool

    async def _handle_list_tools(self, req: types.ListToolsRequest) -> types.ServerResult:
        tools = [to_mcp_tool(d) for d in self.dispatcher.list_tools()]
        return types.ServerResult(types.ListToolsResult(tools=tools))

    async def _handle_call_tool(self, req: types.CallToolRequest) -> types.ServerResult:
        try:
            result = await self.dispatcher.call_tool(
                req.params.name, req.params.arguments
            )
        except DispatchError as e:
            raise e.to_mcp_error() from e
        return types.ServerResult(to_call_tool_result(result))

    async def run_async(self) -> None:
        """Serve stdio until the client disconnects or the task is cancelled."""
        if sys.platform != "win32":
            loop = asyncio.get_running_loop()
            current = asyncio.current_task()
            if current is not None:
                loop.add_signal_handler(signal.SIGTERM, current.cancel)

        try:
            logger.info(f"{self.context.display_name} MCP server running on stdio")
            await self.mcp.run_async(transport="stdio")
        finally:
            await self.context.aclose()
            logger.info(f"{self.context.display_name} MCP server stopped")

    def run(self) -> None:
        """Blocking entry point; treats disconnects and interrupts as clean exits."""
        # Ignore SIGPIPE to prevent crashes on broken pipes (Unix only)
        if sys.platform != "win32":
            signal.signal(signal.SIGPIPE, signal.SIG_IGN)

        try:
            asyncio.run(self.run_async())
            logger.info("MCP server exited normally")
        except KeyboardInterrupt:
            logger.info("MCP server interrupted by user")
        except asyncio.CancelledError:
            logger.info("MCP server terminated")
        except (EOFError, BrokenPipeError) as e:
            logger.info(f"Client disconnected: {type(e).__name__}")
        except OSError as e:
            if e.errno != errno.EPIPE:
                logger.error(f"MCP server crashed: {e}")
                raise
            logger.info("Detected broken pipe - client disconnected")
