"""Bounded retry around a single scrape call."""

import asyncio
import logging
from typing import Protocol

from firedocs.core.errors import PageError
from firedocs.core.models import ScrapeRequest, ScrapeResult

logger = logging.getLogger(__name__)


class PageScraper(Protocol):
    """Anything that can scrape one page (FirecrawlClient, test fakes)."""

    async def scrape(self, request: ScrapeRequest) -> ScrapeResult | PageError: ...


async def scrape_with_retries(
    client: PageScraper,
    request: ScrapeRequest,
    max_retries: int = 3,
    backoff_seconds: float = 1.0,
) -> tuple[ScrapeResult | PageError, int]:
    """
    Scrape a page, retrying transient failures.

    Only retryable errors (network, rate limit, server) are retried. Auth,
    validation and response errors come back after the first attempt.

    Args:
        client: Scraper to call
        request: Page to scrape
        max_retries: Maximum number of attempts (at least one is made)
        backoff_seconds: Delay before the first retry, doubled each time

    Returns:
        Tuple of (final outcome, attempts made)
    """
    attempts = 0

    while True:
        attempts += 1
        outcome = await client.scrape(request)

        if not isinstance(outcome, PageError) or not outcome.retryable:
            return outcome, attempts

        if attempts >= max(max_retries, 1):
            logger.debug(f"Giving up on {request.url} after {attempts} attempts: {outcome}")
            return outcome, attempts

        delay = backoff_seconds * 2 ** (attempts - 1)
        logger.info(f"Retrying {request.url} in {delay:.1f}s (attempt {attempts} failed: {outcome})")
        await asyncio.sleep(delay)
