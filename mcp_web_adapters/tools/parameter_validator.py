"""Parameter validation for tools."""

import logging
import math
import re
from typing import Any, Dict, Iterator, Mapping

from ..errors import InvalidArgumentsError
from .schema import InputSchema, ParamKind, ParameterSpec

logger = logging.getLogger(__name__)


class ValidatedArgs(Mapping[str, Any]):
    """Arguments that passed validation, with defaults applied.

    Read-only. Produced for exactly one upstream invocation.
    """

    def __init__(self, tool_name: str, values: Dict[str, Any]):
        self.tool_name = tool_name
        self._values = dict(values)

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ValidatedArgs({self.tool_name!r}, {self._values!r})"


class ParameterValidator:
    """Checks raw call arguments against a tool's declarative schema."""

    def __init__(self, strict_mode: bool = False):
        """Initialize validator.

        Args:
            strict_mode: If True, reject unknown top-level arguments.
                        If False (default), log and ignore them.
        """
        self.strict_mode = strict_mode

    def validate(
        self, tool_name: str, schema: InputSchema, raw_args: Any
    ) -> ValidatedArgs:
        """Validate raw arguments and return them narrowed and defaulted.

        Args:
            tool_name: Name of the tool, used in error messages
            schema: The tool's input schema
            raw_args: Untyped arguments as received from the caller

        Returns:
            ValidatedArgs holding every declared parameter that is present
            or has a default

        Raises:
            InvalidArgumentsError: On the first parameter that fails a check
        """
        if raw_args is None:
            raw_args = {}
        if not isinstance(raw_args, Mapping):
            raise InvalidArgumentsError(
                tool_name,
                "arguments",
                f"expected an object, got {_json_type(raw_args)}",
            )

        validated: Dict[str, Any] = {}

        for param in schema:
            value = raw_args.get(param.name)

            if value is None:
                if param.required:
                    raise InvalidArgumentsError(
                        tool_name, param.name, "missing required parameter"
                    )
                if param.has_default:
                    validated[param.name] = param.default
                continue

            validated[param.name] = self._check_value(tool_name, param, value)

        unknown = set(raw_args.keys()) - {p.name for p in schema}
        if unknown:
            if self.strict_mode:
                name = sorted(unknown)[0]
                raise InvalidArgumentsError(tool_name, name, "unknown parameter")
            logger.warning(f"Unknown parameters will be ignored: {sorted(unknown)}")

        return ValidatedArgs(tool_name, validated)

    def _check_value(self, tool_name: str, param: ParameterSpec, value: Any) -> Any:
        def reject(reason: str) -> InvalidArgumentsError:
            return InvalidArgumentsError(tool_name, param.name, reason)

        if param.kind is ParamKind.STRING:
            if not isinstance(value, str):
                raise reject(f"expected string, got {_json_type(value)}")
            if param.pattern is not None and not re.search(param.pattern, value):
                raise reject(f"value does not match pattern {param.pattern}")
            return value

        if param.kind is ParamKind.NUMBER:
            # bool is an int subclass but not a JSON number
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise reject(f"expected number, got {_json_type(value)}")
            # ints compare exactly against bounds; only floats can be inf or nan
            if isinstance(value, float) and not math.isfinite(value):
                raise reject("expected a finite number")
            if param.minimum is not None and value < param.minimum:
                raise reject(f"must be >= {_fmt(param.minimum)}, got {_fmt(value)}")
            if param.maximum is not None and value > param.maximum:
                raise reject(f"must be <= {_fmt(param.maximum)}, got {_fmt(value)}")
            return value

        if param.kind is ParamKind.ENUM:
            if not isinstance(value, str):
                raise reject(f"expected string, got {_json_type(value)}")
            if value not in param.choices:
                raise reject(f"must be one of {list(param.choices)}, got {value!r}")
            return value

        if param.kind is ParamKind.OBJECT:
            if not isinstance(value, Mapping):
                raise reject(f"expected object, got {_json_type(value)}")
            if param.additional_properties is False and value:
                raise reject(f"unexpected properties {sorted(value)}")
            return dict(value)

        raise TypeError(f"Unsupported parameter kind: {param.kind}")


def _json_type(value: Any) -> str:
    """Name of a Python value's JSON type, for error messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, (list, tuple)):
        return "array"
    return type(value).__name__


def _fmt(number: float) -> str:
    if isinstance(number, float) and number.is_integer():
        return str(int(number))
    return str(number)
