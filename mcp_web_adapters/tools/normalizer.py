"""Conversion of upstream outcomes into the canonical tool result."""

from typing import Union

from ..errors import UpstreamError
from .results import RawUpstreamResult, ToolResult

GENERIC_ERROR_MESSAGE = "request failed"


class ResponseNormalizer:
    """Wraps a successful upstream result or a recovered failure."""

    def normalize(self, outcome: Union[RawUpstreamResult, UpstreamError]) -> ToolResult:
        if isinstance(outcome, UpstreamError):
            return ToolResult.error(self.error_text(outcome))
        if isinstance(outcome, RawUpstreamResult):
            return ToolResult.ok(*outcome.items)
        raise TypeError(f"Cannot normalize {type(outcome).__name__}")

    @staticmethod
    def error_text(error: UpstreamError) -> str:
        """Human-readable message: upstream's own text, else a generic one."""
        message = (error.message or "").strip() or GENERIC_ERROR_MESSAGE
        if error.provider:
            return f"{error.provider} API error: {message}"
        return message
