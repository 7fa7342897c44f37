"""Brave Search adapter."""

from .adapter import BraveSearchInvoker
from .definitions import SEARCH_TOOL, search_tool

__all__ = ["BraveSearchInvoker", "SEARCH_TOOL", "search_tool"]
