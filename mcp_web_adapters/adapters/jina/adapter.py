"""Jina AI reader invoker.

Input policy: a URL is handed to the reader, which fetches and extracts it;
a local path is read here and its bytes are sent for extraction. PDFs go in
the ``pdf`` field (base64), any other file in the ``html`` field.
"""

import asyncio
import base64
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import httpx

from ...errors import ErrorCategory, UpstreamError
from ...tools.parameter_validator import ValidatedArgs
from ...tools.results import RawUpstreamResult
from ..http import parse_json, send_request

logger = logging.getLogger(__name__)

PROVIDER = "Jina AI"
LOCAL_PDF_URL = "https://local-pdf-analysis"
RESERVED_BODY_KEYS = frozenset({"url", "pdf", "html"})


def jina_headers(api_key: str) -> Dict[str, str]:
    return {
        "Authorization": f"Bearer {api_key}",
        "Accept": "application/json",
    }


def is_url(value: str) -> bool:
    return value.startswith("http://") or value.startswith("https://")


class JinaReaderInvoker:
    """Extracts the textual content of a URL or local file."""

    provider = PROVIDER

    def __init__(self, client: httpx.AsyncClient, reader_url: str):
        self.client = client
        self.reader_url = reader_url

    async def invoke(self, args: ValidatedArgs) -> RawUpstreamResult:
        source = args["input"]
        extra = args.get("parameters") or {}

        if is_url(source):
            logger.info(f"Reading URL via Jina: {source}")
            payload: Dict[str, Any] = {"url": source}
        else:
            payload = await self._local_payload(source)

        response = await send_request(
            self.client,
            "POST",
            self.reader_url,
            provider=self.provider,
            json=merge_parameters(payload, extra),
        )
        body = parse_json(response, self.provider)
        content = extract_content(body)
        if content is None:
            raise UpstreamError(
                ErrorCategory.RESPONSE_FORMAT,
                "Invalid API response format",
                provider=self.provider,
                status_code=response.status_code,
                detail={
                    "receivedType": type(body).__name__,
                    "statusCode": response.status_code,
                },
            )
        return RawUpstreamResult.of(content)

    async def _local_payload(self, source: str) -> Dict[str, Any]:
        path = Path(source).expanduser().resolve()
        logger.info(f"Reading local file for Jina: {path}")
        try:
            data = await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError as e:
            raise UpstreamError(
                ErrorCategory.LOCAL_RESOURCE,
                f"File not found: {path}",
                provider=self.provider,
            ) from e
        except OSError as e:
            raise UpstreamError(
                ErrorCategory.LOCAL_RESOURCE,
                f"Cannot read file {path}: {e.strerror or e}",
                provider=self.provider,
            ) from e

        if path.suffix.lower() == ".pdf":
            return {
                "url": LOCAL_PDF_URL,
                "pdf": base64.b64encode(data).decode("ascii"),
            }
        return {
            "url": path.as_uri(),
            "html": data.decode("utf-8", errors="replace"),
        }


def merge_parameters(
    payload: Dict[str, Any], parameters: Mapping[str, Any]
) -> Dict[str, Any]:
    """Caller parameters extend the request body but never replace the input."""
    overridden = RESERVED_BODY_KEYS.intersection(parameters)
    if overridden:
        logger.warning(f"Ignoring reserved reader parameters: {sorted(overridden)}")
    body = {k: v for k, v in parameters.items() if k not in RESERVED_BODY_KEYS}
    body.update(payload)
    return body


def extract_content(body: Any) -> Optional[str]:
    """``data.content`` if present, else top-level ``content``."""
    if not isinstance(body, dict):
        return None
    data = body.get("data")
    if isinstance(data, dict):
        content = data.get("content")
        if isinstance(content, str) and content:
            return content
    content = body.get("content")
    if isinstance(content, str) and content:
        return content
    return None
