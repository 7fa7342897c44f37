"""Shared HTTP plumbing for upstream invokers.

Invokers call ``send_request`` so that every transport failure surfaces as an
``UpstreamError`` carrying the upstream's own message when it sent one.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from ..errors import ErrorCategory, UpstreamError

logger = logging.getLogger(__name__)


def create_http_client(
    base_url: str = "",
    headers: Optional[Dict[str, str]] = None,
    timeout: float = 30.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Build the pooled client one server process uses for all its calls.

    No retries are configured: each tool call maps to exactly one request.
    """
    # keepalive_expiry discards idle connections before upstreams drop them
    limits = httpx.Limits(
        max_keepalive_connections=10,
        max_connections=20,
        keepalive_expiry=60.0,
    )
    return httpx.AsyncClient(
        base_url=base_url,
        headers=headers,
        timeout=httpx.Timeout(timeout),
        limits=limits,
        transport=transport,
    )


async def send_request(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    provider: str,
    **kwargs: Any,
) -> httpx.Response:
    """Send one request and raise ``UpstreamError`` on any failure.

    Args:
        client: Client to send with
        method: HTTP method
        url: Absolute URL or path relative to the client's base URL
        provider: Display name used in error messages
        **kwargs: Passed to ``httpx.AsyncClient.request``

    Returns:
        A response with a 2xx status
    """
    try:
        response = await client.request(method, url, **kwargs)
        response.raise_for_status()
    except httpx.TimeoutException as e:
        raise UpstreamError(
            ErrorCategory.TIMEOUT,
            _exception_text(e) or "request timed out",
            provider=provider,
        ) from e
    except httpx.HTTPStatusError as e:
        status = e.response.status_code
        message = extract_error_message(e.response) or _exception_text(e)
        raise UpstreamError(
            ErrorCategory.HTTP_STATUS,
            message or f"HTTP {status}",
            provider=provider,
            status_code=status,
        ) from e
    except httpx.RequestError as e:
        raise UpstreamError(
            ErrorCategory.TRANSPORT, _exception_text(e), provider=provider
        ) from e

    logger.debug(f"{provider}: {method} {response.request.url} -> {response.status_code}")
    return response


def parse_json(response: httpx.Response, provider: str) -> Any:
    """Decode a JSON body, treating malformed bodies as upstream failures."""
    try:
        return response.json()
    except ValueError as e:
        raise UpstreamError(
            ErrorCategory.RESPONSE_FORMAT,
            "Invalid API response format",
            provider=provider,
            status_code=response.status_code,
            detail={"error": str(e)},
        ) from e


def extract_error_message(response: httpx.Response) -> Optional[str]:
    """Pull the upstream's own error message out of an error body, if any."""
    try:
        body = response.json()
    except ValueError:
        return None

    if not isinstance(body, dict):
        return None

    message = body.get("message")
    if isinstance(message, str) and message:
        return message

    error = body.get("error")
    if isinstance(error, dict):
        for key in ("detail", "message"):
            value = error.get(key)
            if isinstance(value, str) and value:
                return value
    elif isinstance(error, str) and error:
        return error

    detail = body.get("detail")
    if isinstance(detail, str) and detail:
        return detail

    return None


def _exception_text(exc: Exception) -> str:
    """str(exc), or the exception class name when httpx left it empty."""
    return str(exc) or type(exc).__name__
