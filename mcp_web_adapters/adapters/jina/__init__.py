"""Jina AI reader adapter."""

from .adapter import JinaReaderInvoker
from .definitions import PROCESS_TOOL, process_tool

__all__ = ["JinaReaderInvoker", "PROCESS_TOOL", "process_tool"]
