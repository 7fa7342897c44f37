"""Tool dispatch: list tools, or validate, invoke and normalize one call."""

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Awaitable, Callable, List, Mapping, Optional, Tuple

from ..errors import UnknownToolError, UpstreamError
from .normalizer import ResponseNormalizer
from .parameter_validator import ParameterValidator, ValidatedArgs
from .registry import ToolRegistry
from .results import Fatal, Ok, Outcome, RawUpstreamResult, Recoverable, ToolResult
from .schema import ToolDescriptor

if TYPE_CHECKING:
    from ..adapters.base import UpstreamInvoker

logger = logging.getLogger(__name__)


@dataclass
class ServerContext:
    """Everything one server process needs to answer requests.

    Constructed once at startup and never mutated while serving. Cleanup
    callbacks release shared resources such as HTTP connection pools.
    """

    name: str
    version: str
    display_name: str
    registry: ToolRegistry
    invokers: Mapping[str, "UpstreamInvoker"]
    _closers: List[Callable[[], Awaitable[None]]] = field(
        default_factory=list, repr=False
    )

    def __post_init__(self):
        missing = [n for n in self.registry.names if n not in self.invokers]
        if missing:
            raise ValueError(f"No invoker bound for tools: {missing}")
        orphans = [n for n in self.invokers if n not in self.registry]
        if orphans:
            raise ValueError(f"Invokers bound to unregistered tools: {orphans}")

    def add_closer(self, closer: Callable[[], Awaitable[None]]) -> None:
        self._closers.append(closer)

    async def aclose(self) -> None:
        """Run cleanup callbacks in reverse order, each at most once."""
        while self._closers:
            closer = self._closers.pop()
            try:
                await closer()
            except Exception as e:
                logger.warning(f"Error during shutdown cleanup: {e}")


class ToolDispatcher:
    """Answers the two request kinds a server supports.

    Each request runs validate -> invoke -> normalize to completion; no state
    carries over between requests.
    """

    def __init__(
        self,
        context: ServerContext,
        validator: Optional[ParameterValidator] = None,
        normalizer: Optional[ResponseNormalizer] = None,
    ):
        self.context = context
        self.validator = validator or ParameterValidator()
        self.normalizer = normalizer or ResponseNormalizer()
        # One call in flight per server; later calls queue here in arrival order
        self._lock = asyncio.Lock()

    def list_tools(self) -> Tuple[ToolDescriptor, ...]:
        return self.context.registry.list_tools()

    async def call_tool(self, name: str, raw_args: Any) -> ToolResult:
        """Execute one tool call.

        Raises:
            UnknownToolError: ``name`` is not registered
            InvalidArgumentsError: ``raw_args`` fail the tool's schema
            Exception: Any non-upstream failure raised by the invoker
        """
        async with self._lock:
            return await self._call_tool(name, raw_args)

    async def _call_tool(self, name: str, raw_args: Any) -> ToolResult:
        descriptor = self.context.registry.get_tool(name)
        if descriptor is None:
            logger.warning(
                f"Tool '{name}' not found. Available: {list(self.context.registry.names)}"
            )
            raise UnknownToolError(name)

        operation_id = f"{name}_{uuid.uuid4().hex[:8]}"
        logger.info(f"[{operation_id}] Starting {name}")

        try:
            args = self.validator.validate(name, descriptor.input_schema, raw_args)
        except Exception as e:
            logger.warning(f"[{operation_id}] Rejected arguments: {e}")
            raise

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"[{operation_id}] Input parameters: {dict(args)}")

        start_time = time.monotonic()
        outcome = await self._invoke(self.context.invokers[name], args)
        elapsed = time.monotonic() - start_time

        if isinstance(outcome, Fatal):
            logger.error(
                f"[{operation_id}] [CRITICAL] {name} failed unexpectedly after "
                f"{elapsed:.2f}s: {outcome.error!r}",
                exc_info=outcome.error,
            )
            raise outcome.error

        if isinstance(outcome, Recoverable):
            logger.warning(
                f"[{operation_id}] Upstream failure after {elapsed:.2f}s: {outcome.error}"
            )
            return self.normalizer.normalize(outcome.error)

        logger.info(
            f"[{operation_id}] Completed {name} in {elapsed:.2f}s "
            f"({len(outcome.result.items)} item(s))"
        )
        return self.normalizer.normalize(outcome.result)

    async def _invoke(self, invoker: "UpstreamInvoker", args: ValidatedArgs) -> Outcome:
        """Run the invoker and classify how it ended."""
        try:
            result = await invoker.invoke(args)
        except UpstreamError as e:
            return Recoverable(e)
        except Exception as e:
            return Fatal(e)

        if not isinstance(result, RawUpstreamResult):
            return Fatal(
                TypeError(
                    f"{type(invoker).__name__}.invoke returned "
                    f"{type(result).__name__}, expected RawUpstreamResult"
                )
            )
        return Ok(result)
