"""Protocol for upstream invokers.

An invoker performs exactly one external operation per call and returns the
result as plain-text items. Operational failures must be raised as
``UpstreamError``; any other exception is treated as a defect.
"""

from typing import Protocol

from ..tools.parameter_validator import ValidatedArgs
from ..tools.results import RawUpstreamResult


class UpstreamInvoker(Protocol):
    """Interface each adapter's invoker must satisfy."""

    provider: str

    async def invoke(self, args: ValidatedArgs) -> RawUpstreamResult:
        """Perform one upstream call.

        Args:
            args: Validated, defaulted arguments for this invoker's tool

        Returns:
            Text items in upstream order

        Raises:
            UpstreamError: On transport, timeout, status or format failures
        """
        ...
