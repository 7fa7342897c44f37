"""Server builders and console entry points for each adapter."""

import logging
import sys
from typing import Callable, Dict, List, Optional

import httpx

from . import __version__
from .adapters.brave import SEARCH_TOOL, BraveSearchInvoker, search_tool
from .adapters.brave.adapter import brave_headers
from .adapters.http import create_http_client
from .adapters.jina import PROCESS_TOOL, JinaReaderInvoker, process_tool
from .adapters.jina.adapter import jina_headers
from .config import Settings, get_settings
from .errors import ConfigurationError
from .logging.setup import setup_logging, shutdown_logging
from .server import ToolServer
from .tools.dispatcher import ServerContext
from .tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


def build_brave_server(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ToolServer:
    """Brave web search server. Raises ConfigurationError without BRAVE_API_KEY."""
    settings = settings or get_settings()
    api_key = settings.brave.require_api_key("BRAVE_API_KEY")

    client = create_http_client(
        base_url=settings.brave.base_url,
        headers=brave_headers(api_key),
        timeout=settings.brave.timeout,
        transport=transport,
    )
    context = ServerContext(
        name="brave-search-server",
        version=__version__,
        display_name="Brave Search",
        registry=ToolRegistry([search_tool(settings.server.default_search_count)]),
        invokers={SEARCH_TOOL: BraveSearchInvoker(client)},
    )
    context.add_closer(client.aclose)
    return ToolServer(context)


def build_jina_server(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ToolServer:
    """Jina AI reader server. Raises ConfigurationError without JINA_API_KEY."""
    settings = settings or get_settings()
    api_key = settings.jina.require_api_key("JINA_API_KEY")

    client = create_http_client(
        base_url=settings.jina.base_url,
        headers=jina_headers(api_key),
        timeout=settings.jina.timeout,
        transport=transport,
    )
    context = ServerContext(
        name="jina-ai-server",
        version=__version__,
        display_name="Jina AI",
        registry=ToolRegistry([process_tool()]),
        invokers={
            PROCESS_TOOL: JinaReaderInvoker(client, settings.jina.reader_url)
        },
    )
    context.add_closer(client.aclose)
    return ToolServer(context)


SERVER_BUILDERS: Dict[str, Callable[..., ToolServer]] = {
    "brave": build_brave_server,
    "jina": build_jina_server,
}


def main(adapter: str, argv: Optional[List[str]] = None) -> int:
    """Run one adapter's server on stdio. Returns the process exit code."""
    argv = sys.argv[1:] if argv is None else argv
    builder = SERVER_BUILDERS[adapter]

    if "--help" in argv or "-h" in argv:
        print(f"{adapter} MCP server")
        print(f"\nUsage: {_program_name(adapter)}")
        print("\nServes MCP tool calls over stdin/stdout.")
        print("\nOptions:")
        print("  -h, --help     Show this help message and exit")
        print("  -V, --version  Show version and exit")
        return 0

    if "--version" in argv or "-V" in argv:
        print(__version__)
        return 0

    settings = get_settings()
    setup_logging(settings.logging.level)

    try:
        server = builder(settings)
    except ConfigurationError as e:
        logger.error(f"Cannot start {adapter} server: {e}")
        return 1

    try:
        server.run()
    finally:
        shutdown_logging()
    return 0


def _program_name(adapter: str) -> str:
    return {"brave": "brave-search-server", "jina": "jina-ai-server"}[adapter]


def brave_main() -> None:
    sys.exit(main("brave"))


def jina_main() -> None:
    sys.exit(main("jina"))
