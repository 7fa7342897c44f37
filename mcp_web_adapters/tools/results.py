"""Result types flowing out of a tool call."""

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple, Union

from ..errors import UpstreamError


@dataclass(frozen=True)
class TextBlock:
    """A plain-text unit of response payload."""

    text: str

    @property
    def type(self) -> str:
        return "text"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "text", "text": self.text}


@dataclass(frozen=True)
class ToolResult:
    """The canonical envelope returned for every tool call."""

    content: Tuple[TextBlock, ...]
    is_error: bool = False

    @classmethod
    def ok(cls, *texts: str) -> "ToolResult":
        return cls(content=tuple(TextBlock(t) for t in texts))

    @classmethod
    def error(cls, text: str) -> "ToolResult":
        return cls(content=(TextBlock(text),), is_error=True)

    def to_dict(self) -> Dict[str, Any]:
        """Wire shape; ``isError`` is only present on failures."""
        result: Dict[str, Any] = {"content": [b.to_dict() for b in self.content]}
        if self.is_error:
            result["isError"] = True
        return result


@dataclass(frozen=True)
class RawUpstreamResult:
    """Text items produced by one upstream call, in upstream order."""

    items: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def of(cls, *items: str) -> "RawUpstreamResult":
        return cls(items=tuple(items))


# Tagged outcome of the invocation path. The dispatcher normalizes Ok and
# Recoverable into a ToolResult and re-raises Fatal.


@dataclass(frozen=True)
class Ok:
    result: RawUpstreamResult


@dataclass(frozen=True)
class Recoverable:
    error: UpstreamError


@dataclass(frozen=True)
class Fatal:
    error: Exception


Outcome = Union[Ok, Recoverable, Fatal]
