"""Brave Search invoker."""

import json
import logging
from typing import Any, Dict, List

import httpx

from ...errors import ErrorCategory, UpstreamError
from ...tools.parameter_validator import ValidatedArgs
from ...tools.results import RawUpstreamResult
from ..http import parse_json, send_request

logger = logging.getLogger(__name__)

PROVIDER = "Brave Search"
SEARCH_PATH = "/web/search"


def brave_headers(api_key: str) -> Dict[str, str]:
    return {
        "X-Subscription-Token": api_key,
        "Accept": "application/json",
    }


class BraveSearchInvoker:
    """Runs one web search per call and returns the results as a JSON array."""

    provider = PROVIDER

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def invoke(self, args: ValidatedArgs) -> RawUpstreamResult:
        query = args["query"]
        count = _as_count(args["count"])

        logger.info(f"Searching Brave for {query!r} (count={count})")
        response = await send_request(
            self.client,
            "GET",
            SEARCH_PATH,
            provider=self.provider,
            params={"q": query, "count": count},
        )
        body = parse_json(response, self.provider)
        results = extract_results(body, response.status_code)

        return RawUpstreamResult.of(json.dumps(results, indent=2, ensure_ascii=False))


def extract_results(body: Any, status_code: int = 200) -> List[Dict[str, str]]:
    """Reduce a Brave response to ordered title/url/description records."""
    if not isinstance(body, dict):
        raise UpstreamError(
            ErrorCategory.RESPONSE_FORMAT,
            "Invalid API response format",
            provider=PROVIDER,
            status_code=status_code,
            detail={"receivedType": type(body).__name__},
        )

    # Queries with no web hits come back without a "web" section
    web = body.get("web")
    raw_results = web.get("results") if isinstance(web, dict) else None
    if not isinstance(raw_results, list):
        raw_results = []

    results = []
    for item in raw_results:
        if not isinstance(item, dict):
            continue
        results.append(
            {
                "title": item.get("title") or "",
                "url": item.get("url") or "",
                "description": item.get("description") or "",
            }
        )
    return results


def _as_count(value: float) -> int:
    """The API takes an integer count; fractional counts round down."""
    return max(1, int(value))
