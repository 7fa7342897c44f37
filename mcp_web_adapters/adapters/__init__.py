"""Upstream adapters, one per server.

Each adapter supplies a tool descriptor and an invoker; the server harness
in ``mcp_web_adapters.server`` does the rest.
"""

from .base import UpstreamInvoker

__all__ = ["UpstreamInvoker"]
