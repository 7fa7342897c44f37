"""Protocol-independent tool dispatch: schemas, validation, results."""

from .dispatcher import ServerContext, ToolDispatcher
from .registry import ToolRegistry
from .results import TextBlock, ToolResult
from .schema import InputSchema, ParameterSpec, ParamKind, ToolDescriptor

__all__ = [
    "InputSchema",
    "ParameterSpec",
    "ParamKind",
    "ServerContext",
    "TextBlock",
    "ToolDescriptor",
    "ToolDispatcher",
    "ToolRegistry",
    "ToolResult",
]
