"""Static registry of the tools a server exposes."""

import logging
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple

from .naming import validate_tool_name
from .schema import ToolDescriptor

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Immutable, ordered set of tool descriptors.

    Built once at server start. Lookups and listings never change afterwards,
    so the registry can be shared freely across requests.
    """

    def __init__(self, descriptors: Iterable[ToolDescriptor] = ()):
        ordered = []
        by_name = {}
        for descriptor in descriptors:
            validate_tool_name(descriptor.name)
            if descriptor.name in by_name:
                raise ValueError(f"Tool '{descriptor.name}' registered twice")
            by_name[descriptor.name] = descriptor
            ordered.append(descriptor)
            logger.debug(f"Registered tool: {descriptor.name}")

        self._tools: Tuple[ToolDescriptor, ...] = tuple(ordered)
        self._by_name: Mapping[str, ToolDescriptor] = MappingProxyType(by_name)

    def list_tools(self) -> Tuple[ToolDescriptor, ...]:
        """All registered tools in registration order."""
        return self._tools

    def get_tool(self, name: str) -> Optional[ToolDescriptor]:
        """Get a descriptor by name, or None if the tool does not exist."""
        return self._by_name.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __len__(self) -> int:
        return len(self._tools)

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(t.name for t in self._tools)
