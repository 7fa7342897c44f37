"""Declarative tool input schemas.

Schemas are plain data. ``ParameterValidator`` interprets them and
``InputSchema.to_json_schema`` renders them for ``tools/list``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Tuple

# Sentinel value to distinguish "no default" from "default is None"
_NO_DEFAULT = object()

__all__ = [
    "ParamKind",
    "ParameterSpec",
    "InputSchema",
    "ToolDescriptor",
    "_NO_DEFAULT",
]


class ParamKind(Enum):
    STRING = "string"
    NUMBER = "number"
    OBJECT = "object"
    ENUM = "enum"


@dataclass(frozen=True)
class ParameterSpec:
    """One named parameter of a tool's input schema."""

    name: str
    kind: ParamKind
    description: Optional[str] = None
    required: bool = False
    default: Any = field(default=_NO_DEFAULT)
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    choices: Tuple[str, ...] = ()
    pattern: Optional[str] = None
    additional_properties: Optional[bool] = None

    @property
    def has_default(self) -> bool:
        return self.default is not _NO_DEFAULT

    def __post_init__(self):
        if self.required and self.has_default:
            raise ValueError(f"Parameter '{self.name}' is required and has a default")
        if isinstance(self.default, (list, dict, set)):
            raise ValueError(f"Parameter '{self.name}' has a mutable default")
        if self.kind is ParamKind.ENUM and not self.choices:
            raise ValueError(f"Enum parameter '{self.name}' declares no choices")
        if self.kind is not ParamKind.ENUM and self.choices:
            raise ValueError(f"Only enum parameters take choices ('{self.name}')")
        if (self.minimum is not None or self.maximum is not None) and (
            self.kind is not ParamKind.NUMBER
        ):
            raise ValueError(f"Only number parameters take bounds ('{self.name}')")
        if (
            self.minimum is not None
            and self.maximum is not None
            and self.minimum > self.maximum
        ):
            raise ValueError(f"Parameter '{self.name}': minimum exceeds maximum")
        if self.pattern is not None:
            if self.kind is not ParamKind.STRING:
                raise ValueError(f"Only string parameters take a pattern ('{self.name}')")
            re.compile(self.pattern)

    def to_json_schema(self) -> Dict[str, Any]:
        """Render this parameter as a JSON Schema property."""
        if self.kind is ParamKind.ENUM:
            prop: Dict[str, Any] = {"type": "string", "enum": list(self.choices)}
        else:
            prop = {"type": self.kind.value}
        if self.description:
            prop["description"] = self.description
        if self.minimum is not None:
            prop["minimum"] = self.minimum
        if self.maximum is not None:
            prop["maximum"] = self.maximum
        if self.pattern is not None:
            prop["pattern"] = self.pattern
        if self.additional_properties is not None:
            prop["additionalProperties"] = self.additional_properties
        if self.has_default:
            prop["default"] = self.default
        return prop


@dataclass(frozen=True)
class InputSchema:
    """Ordered set of parameters accepted by a tool."""

    parameters: Tuple[ParameterSpec, ...] = ()

    def __post_init__(self):
        seen = set()
        for param in self.parameters:
            if param.name in seen:
                raise ValueError(f"Duplicate parameter name: {param.name}")
            seen.add(param.name)

    def __iter__(self) -> Iterator[ParameterSpec]:
        return iter(self.parameters)

    def get(self, name: str) -> Optional[ParameterSpec]:
        for param in self.parameters:
            if param.name == name:
                return param
        return None

    @property
    def required(self) -> Tuple[str, ...]:
        return tuple(p.name for p in self.parameters if p.required)

    def to_json_schema(self) -> Dict[str, Any]:
        schema: Dict[str, Any] = {
            "type": "object",
            "properties": {p.name: p.to_json_schema() for p in self.parameters},
        }
        if self.required:
            schema["required"] = list(self.required)
        return schema


@dataclass(frozen=True)
class ToolDescriptor:
    """Name, description and input schema of one callable tool."""

    name: str
    description: str
    input_schema: InputSchema

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema.to_json_schema(),
        }
