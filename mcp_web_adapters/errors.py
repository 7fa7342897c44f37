"""Error hierarchy for the web adapter servers.

Three families with different propagation rules:

- ``DispatchError`` subclasses are protocol faults. They are raised before any
  upstream call is attempted and reach the caller as JSON-RPC errors.
- ``UpstreamError`` is a recovered fault. The dispatcher turns it into a
  normal tool result flagged ``isError`` so the conversation can continue.
- ``ConfigurationError`` is fatal at startup.

Anything else escaping an invoker is treated as a defect and re-raised.
"""

from enum import Enum, auto
from typing import Any, Optional

from mcp.shared.exceptions import McpError
from mcp.types import INVALID_PARAMS, METHOD_NOT_FOUND, ErrorData


class DispatchError(Exception):
    """Base class for faults surfaced at the protocol level."""

    code: int = 0

    def __init__(self, message: str, data: Any = None):
        super().__init__(message)
        self.message = message
        self.data = data

    def to_mcp_error(self) -> McpError:
        """Convert to the MCP SDK exception carrying a JSON-RPC error object."""
        return McpError(ErrorData(code=self.code, message=self.message, data=self.data))


class UnknownToolError(DispatchError):
    """The caller asked for a tool this server does not expose."""

    code = METHOD_NOT_FOUND

    def __init__(self, tool_name: str):
        super().__init__(f"Unknown tool: {tool_name}")
        self.tool_name = tool_name


class InvalidArgumentsError(DispatchError):
    """Caller-supplied arguments do not satisfy the tool's input schema."""

    code = INVALID_PARAMS

    def __init__(self, tool_name: str, parameter: str, reason: str):
        super().__init__(
            f"Invalid arguments for {tool_name}: {parameter}: {reason}",
            data={"parameter": parameter},
        )
        self.tool_name = tool_name
        self.parameter = parameter
        self.reason = reason


class ErrorCategory(Enum):
    """Categories of upstream failures, used for logging only."""

    TRANSPORT = auto()  # Connection refused, DNS, TLS, protocol errors
    TIMEOUT = auto()  # Invoker's own timeout expired
    HTTP_STATUS = auto()  # Upstream answered with a 4xx/5xx status
    RESPONSE_FORMAT = auto()  # Upstream answered 2xx with an unusable body
    LOCAL_RESOURCE = auto()  # Local input could not be read


class UpstreamError(Exception):
    """A failed upstream operation that should become an ``isError`` result."""

    def __init__(
        self,
        category: ErrorCategory,
        message: str,
        provider: Optional[str] = None,
        status_code: int = 0,
        detail: Any = None,
    ):
        if provider:
            super().__init__(f"[{provider}] [{category.name}] {message}")
        else:
            super().__init__(f"[{category.name}] {message}")
        self.category = category
        self.message = message
        self.provider = provider
        self.status_code = status_code
        self.detail = detail


class ConfigurationError(Exception):
    """Missing or invalid configuration; the server must not start."""
