"""
Shared test fixtures and configuration for the web adapter server tests.
"""

import json
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from mcp_web_adapters.config import get_settings
from mcp_web_adapters.errors import ErrorCategory, UpstreamError
from mcp_web_adapters.tools.results import RawUpstreamResult


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Each test sees settings built from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def mock_env(monkeypatch):
    """Set up test environment variables."""
    test_env = {
        "BRAVE_API_KEY": "test-brave-key",
        "JINA_API_KEY": "test-jina-key",
        "LOG_LEVEL": "WARNING",  # Reduce noise in tests
    }
    for key, value in test_env.items():
        monkeypatch.setenv(key, value)

    get_settings.cache_clear()
    return test_env


@pytest.fixture
def no_api_keys(monkeypatch):
    """Remove every way a key could be configured from the environment."""
    for key in ("BRAVE_API_KEY", "JINA_API_KEY", "BRAVE__API_KEY", "JINA__API_KEY"):
        monkeypatch.delenv(key, raising=False)
        monkeypatch.delenv(key.lower(), raising=False)
    get_settings.cache_clear()


class StubInvoker:
    """Invoker double that records calls and returns or raises on demand."""

    provider = "Stub"

    def __init__(
        self,
        items: Optional[List[str]] = None,
        error: Optional[Exception] = None,
    ):
        self.items = items if items is not None else ["stub result"]
        self.error = error
        self.calls: List[Any] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def invoke(self, args):
        self.calls.append(args)
        if self.error is not None:
            raise self.error
        return RawUpstreamResult.of(*self.items)


@pytest.fixture
def stub_invoker_cls():
    return StubInvoker


@pytest.fixture
def transport_error():
    """A transport-style failure as an invoker would raise it."""
    return UpstreamError(
        ErrorCategory.TRANSPORT, "connection refused", provider="Stub"
    )


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: List[httpx.Request] = []

        def recording_handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(recording_handler)


@pytest.fixture
def recording_transport():
    """Factory: recording_transport(handler) -> RecordingTransport."""
    return RecordingTransport


@pytest.fixture
def json_response():
    """Factory for JSON responses."""

    def make(body: Any, status_code: int = 200) -> httpx.Response:
        return httpx.Response(status_code, json=body)

    return make


def brave_body(results: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"type": "search", "web": {"type": "search", "results": results}}


@pytest.fixture
def brave_results():
    """Three upstream results with extra fields the adapter must drop."""
    return [
        {
            "title": f"Result {i}",
            "url": f"https://example.com/{i}",
            "description": f"Description {i}",
            "age": "2 days ago",
            "language": "en",
        }
        for i in range(1, 4)
    ]


@pytest.fixture
def brave_response(brave_results):
    def make(results=None) -> httpx.Response:
        return httpx.Response(
            200, json=brave_body(brave_results if results is None else results)
        )

    return make


def text_of(result) -> str:
    """Concatenate text blocks of a ToolResult or an MCP CallToolResult."""
    return "".join(block.text for block in result.content)


def json_of(result) -> Any:
    return json.loads(text_of(result))
