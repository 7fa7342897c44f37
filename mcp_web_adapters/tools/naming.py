"""Validation of MCP tool names."""

import re

MCP_TOOL_NAME = re.compile(r"^[a-zA-Z0-9_-]{1,128}$")


def validate_tool_name(name: str) -> str:
    """
    Check that a name is usable as an MCP tool name.

    MCP tool names must match: ^[a-zA-Z0-9_-]{1,128}$

    Args:
        name: The tool name to check

    Returns:
        The name, unchanged

    Raises:
        ValueError: If the name is empty or contains disallowed characters

    Examples:
        >>> validate_tool_name("search")
        'search'
        >>> validate_tool_name("web search")
        Traceback (most recent call last):
        ...
        ValueError: Tool name 'web search' does not match MCP pattern
    """
    if not name:
        raise ValueError("Name cannot be empty")

    if not MCP_TOOL_NAME.match(name):
        raise ValueError(f"Tool name '{name}' does not match MCP pattern")

    return name
