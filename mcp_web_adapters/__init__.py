"""MCP servers exposing web search and content reading as tools."""

__version__ = "0.1.0"
