"""
Configuration for MCP integration tests.
These tests drive real server instances in memory, with HTTP mocked at the
transport level.
"""

import httpx
import pytest
import pytest_asyncio

from mcp_web_adapters.servers import build_brave_server, build_jina_server
from tests.conftest import RecordingTransport, brave_body


def _brave_handler(request: httpx.Request) -> httpx.Response:
    """Fake Brave API: returns as many results as requested, or fails on demand."""
    query = request.url.params["q"]
    if query == "trigger-500":
        return httpx.Response(500, json={"message": "Internal upstream failure"})
    count = int(request.url.params["count"])
    results = [
        {
            "title": f"{query} {i}",
            "url": f"https://example.com/{i}",
            "description": f"About {query} ({i})",
        }
        for i in range(1, count + 1)
    ]
    return httpx.Response(200, json=brave_body(results))


def _jina_handler(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"code": 200, "data": {"content": "Reader text"}})


@pytest.fixture
def brave_transport():
    return RecordingTransport(_brave_handler)


@pytest.fixture
def jina_transport():
    return RecordingTransport(_jina_handler)


@pytest_asyncio.fixture
async def brave_server(mock_env, brave_transport):
    """Brave server instance for testing."""
    server = build_brave_server(transport=brave_transport)
    yield server
    await server.context.aclose()


@pytest_asyncio.fixture
async def jina_server(mock_env, jina_transport):
    """Jina server instance for testing."""
    server = build_jina_server(transport=jina_transport)
    yield server
    await server.context.aclose()
