"""Command-line entry point: firedocs <url>."""

import argparse
import asyncio
import logging
import sys

from firedocs.config.settings import load_settings
from firedocs.core.client import FirecrawlClient
from firedocs.core.errors import ConfigError
from firedocs.core.scraper import DocScraper, validate_start_url
from firedocs.utils.logger import get_logger, log_event


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="firedocs",
        description=(
            "Scrape a documentation site to markdown files through the FireCrawl API. "
            "Configuration comes from the environment (FIRECRAWL_API_KEY, FIRECRAWL_API_URL, ...)."
        ),
    )
    parser.add_argument("url", help="Start URL, e.g. https://docs.example.com")
    return parser


async def main(argv: list[str] | None = None) -> int:
    """
    Run a scrape and print a summary.

    Returns:
        Process exit code: 0 once the queue is exhausted (page failures
        included), 1 on a configuration error
    """
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings()
    except ConfigError as e:
        # Nothing to log to yet
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logger = get_logger("firedocs", settings.log_file, settings.log_level)

    try:
        start_url = validate_start_url(args.url)
    except ConfigError as e:
        log_event(logger, "config_error", f"Error: {e}", level=logging.ERROR, url=args.url)
        return 1

    logger.debug(f"Using API endpoint {settings.scrape_endpoint}")

    async with FirecrawlClient(
        api_key=settings.firecrawl_api_key,
        api_url=settings.firecrawl_api_url,
        timeout_seconds=settings.timeout_seconds,
    ) as client:
        scraper = DocScraper(client, settings)
        stats = await scraper.run(start_url)

    print("\n✓ Scraping complete!")
    print(f"  • Pages written: {stats['pages_written']}")
    print(f"  • Failures: {stats['pages_failed']}")
    print(f"  • URLs discovered: {stats['urls_discovered']}")
    print(f"  • Output: {stats['output_dir']}")
    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(asyncio.run(main()))
