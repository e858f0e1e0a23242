"""Async client for the FireCrawl scrape endpoint."""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from firedocs.core.errors import ErrorKind, PageError, classify_status
from firedocs.core.models import ScrapeRequest, ScrapeResult

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.firecrawl.dev"


class FirecrawlClient:
    """
    Thin wrapper around ``httpx.AsyncClient`` for ``POST /v1/scrape``.

    Every call returns either a ScrapeResult or a PageError whose kind tells
    the caller whether a retry makes sense. Nothing is raised for HTTP or
    network failures.

    Usage:
        async with FirecrawlClient(api_key) as client:
            outcome = await client.scrape(ScrapeRequest(url="https://docs.example.com"))
    """

    def __init__(
        self,
        api_key: str,
        api_url: str = DEFAULT_API_URL,
        timeout_seconds: float = 60,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize client.

        Args:
            api_key: FireCrawl API key, sent as a bearer token
            api_url: API base URL
            timeout_seconds: Timeout for each HTTP call
            transport: Optional transport override (used by tests)
        """
        self.api_url = api_url.rstrip("/")
        self.endpoint = f"{self.api_url}/v1/scrape"
        self._client = httpx.AsyncClient(
            headers={"Authorization": f"Bearer {api_key}"},
            timeout=timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> "FirecrawlClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def scrape(self, request: ScrapeRequest) -> ScrapeResult | PageError:
        """
        Scrape one page. Makes exactly one HTTP call.

        Args:
            request: What to scrape and how

        Returns:
            The parsed result, or a PageError describing the failure
        """
        url = request.url
        try:
            response = await self._client.post(self.endpoint, json=request.to_payload())
        except httpx.TimeoutException as e:
            return PageError(ErrorKind.REQUEST, f"timed out: {e!r}", url=url)
        except httpx.RequestError as e:
            return PageError(ErrorKind.REQUEST, f"request failed: {e!r}", url=url)

        if not response.is_success:
            return PageError(
                classify_status(response.status_code),
                _error_message(response),
                url=url,
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError:
            return PageError(
                ErrorKind.RESPONSE,
                "response body is not valid JSON",
                url=url,
                status_code=response.status_code,
            )

        if not isinstance(body, dict):
            return PageError(ErrorKind.RESPONSE, "unexpected response structure", url=url)

        try:
            result = ScrapeResult.from_response(url, body)
        except ValidationError as e:
            return PageError(ErrorKind.RESPONSE, f"unexpected response fields: {e}", url=url)
        except ValueError as e:
            return PageError(ErrorKind.RESPONSE, f"unexpected response structure: {e}", url=url)

        if not result.success:
            return PageError(
                ErrorKind.RESPONSE,
                result.error or "API reported success=false",
                url=url,
                status_code=response.status_code,
            )

        logger.debug(f"Scraped {url} ({len(result.markdown or '')} chars, {len(result.links)} links)")
        return result


def _error_message(response: httpx.Response) -> str:
    """Pull the API's error text out of a failed response."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:500] or response.reason_phrase
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return response.text[:500]
