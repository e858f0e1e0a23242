"""Driver loop: breadth-first scrape of a documentation site."""

import asyncio
import csv
import logging
from collections import deque
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

from tqdm import tqdm

from firedocs.config.settings import Settings, get_settings
from firedocs.core.errors import ConfigError, ErrorKind, PageError
from firedocs.core.links import LinkFilter, discover_links, normalize_url, resolve_link
from firedocs.core.models import ScrapeResult
from firedocs.core.writer import PageWriter, domain_dir_name
from firedocs.utils.hash import compute_hash
from firedocs.utils.logger import log_event
from firedocs.utils.retry import PageScraper, scrape_with_retries

logger = logging.getLogger(__name__)

REPORT_FILENAME = "crawl_report.csv"
REPORT_FIELDS = [
    "url",
    "state",
    "filepath",
    "content_hash",
    "attempts",
    "error_kind",
    "error",
]


class PageState(str, Enum):
    """Lifecycle of a URL in the driver loop."""

    PENDING = "pending"
    IN_FLIGHT = "in_flight"
    WRITTEN = "written"
    FAILED = "failed"


def validate_start_url(url: str) -> str:
    """
    Check that the start URL is absolute http(s) and return it normalized.

    Raises:
        ConfigError: If the URL cannot be crawled
    """
    parts = urlsplit(url.strip())
    if parts.scheme not in ("http", "https") or not parts.hostname:
        raise ConfigError(f"Start URL must be an absolute http(s) URL, got {url!r}")
    return normalize_url(url)


class DocScraper:
    """
    Scrapes a documentation site one page at a time.

    Workflow:
    1. Queue the start URL
    2. Pop the next URL and scrape it through the API, retrying transient errors
    3. Write the page as markdown with frontmatter
    4. Queue newly discovered in-scope links
    5. Repeat until the queue is empty, then write a CSV report

    The visited set and pending queue live on the instance, so each step can
    be exercised on its own.
    """

    def __init__(
        self,
        client: PageScraper,
        settings: Settings | None = None,
        output_root: Path | None = None,
        show_progress: bool = True,
    ):
        """
        Initialize scraper.

        Args:
            client: API client used for every page
            settings: Settings (defaults to the cached environment settings)
            output_root: Directory the domain directory is created in
            show_progress: Show a tqdm progress bar
        """
        self.client = client
        self.settings = settings or get_settings()
        self.output_root = Path(output_root) if output_root is not None else self.settings.output_dir
        self.show_progress = show_progress

        self.visited: set[str] = set()
        self.pending: deque[str] = deque()
        self.states: dict[str, PageState] = {}
        self.records: dict[str, dict[str, Any]] = {}
        # normalized URL -> URL as discovered, used as the base for relative links
        self.link_bases: dict[str, str] = {}

        self.output_dir: Path | None = None
        self.writer: PageWriter | None = None
        self.link_filter: LinkFilter | None = None

        self.stats: dict[str, Any] = {}

    def _reset(self) -> None:
        self.visited.clear()
        self.pending.clear()
        self.states.clear()
        self.records.clear()
        self.link_bases.clear()
        self.stats = {
            "pages_written": 0,
            "pages_failed": 0,
            "urls_discovered": 0,
            "start_time": None,
            "end_time": None,
            "output_dir": None,
        }

    async def run(self, start_url: str) -> dict[str, Any]:
        """
        Scrape every reachable page starting from ``start_url``.

        Per-page failures are logged and counted; they never abort the run.

        Args:
            start_url: First page; also fixes the domain directory and link scope

        Returns:
            Statistics dictionary

        Raises:
            ConfigError: If the start URL is not an absolute http(s) URL
        """
        raw_start_url = start_url
        start_url = validate_start_url(start_url)
        self._reset()

        self.output_dir = self.output_root / domain_dir_name(start_url)
        self.writer = PageWriter(self.output_dir)
        self.link_filter = LinkFilter(
            start_url,
            scope=self.settings.link_scope,
            path_prefix=self.settings.link_path_prefix,
            skip_patterns=self.settings.skip_patterns,
        )

        self.stats["start_time"] = datetime.now().isoformat()
        self.stats["output_dir"] = str(self.output_dir)
        log_event(
            logger,
            "crawl_start",
            f"Scraping {start_url} into {self.output_dir}",
            url=start_url,
            scope=self.link_filter.scope.value,
        )

        self.enqueue(start_url, base=resolve_link(raw_start_url, start_url))
        attempted = 0

        with tqdm(total=1, desc=f"Scraping {self.link_filter.host}", unit="page", disable=not self.show_progress) as progress:
            while self.pending:
                if self.settings.max_pages and attempted >= self.settings.max_pages:
                    logger.info(f"Reached max_pages={self.settings.max_pages}, {len(self.pending)} URLs left unscraped")
                    break

                url = self.pending.popleft()
                await self.process(url)
                attempted += 1

                progress.total = len(self.visited)
                progress.update(1)

                if self.pending and self.settings.delay_between_requests:
                    await asyncio.sleep(self.settings.delay_between_requests)

        self.stats["urls_discovered"] = len(self.visited)
        self.stats["end_time"] = datetime.now().isoformat()
        self._generate_report()

        log_event(
            logger,
            "crawl_complete",
            f"Done: {self.stats['pages_written']} written, {self.stats['pages_failed']} failed",
            **{k: self.stats[k] for k in ("pages_written", "pages_failed", "urls_discovered")},
        )
        return self.stats

    def enqueue(self, url: str, base: str | None = None) -> bool:
        """
        Queue a URL unless it was seen before. Returns True if queued.

        ``base`` is the URL as it was found (trailing slash intact); relative
        links on the page are later resolved against it.
        """
        if url in self.visited:
            return False

        self.visited.add(url)
        self.link_bases[url] = base or url
        self.pending.append(url)
        self.states[url] = PageState.PENDING
        self.records[url] = {"url": url, "state": PageState.PENDING.value, "attempts": 0}
        return True

    async def process(self, url: str) -> PageState:
        """
        Scrape, write and harvest links from one URL.

        Returns:
            Final state of the URL (WRITTEN or FAILED)
        """
        self.states[url] = PageState.IN_FLIGHT
        request = self.settings.build_request(url)

        outcome, attempts = await scrape_with_retries(
            self.client,
            request,
            max_retries=self.settings.max_retries,
            backoff_seconds=self.settings.retry_backoff_seconds,
        )
        self.records[url]["attempts"] = attempts

        if isinstance(outcome, PageError):
            return self._mark_failed(url, outcome)

        if outcome.warning:
            log_event(logger, "page_warning", f"Warning for {url}: {outcome.warning}", level=logging.WARNING, url=url)

        if outcome.markdown:
            written = self.writer.write(outcome)
        else:
            written = PageError(ErrorKind.EMPTY, "no markdown content received", url=url)

        if isinstance(written, PageError):
            state = self._mark_failed(url, written)
        else:
            state = self._mark_written(url, written, outcome)

        # Links are harvested from any page the API returned, even if the
        # write failed
        found: dict[str, str] = {}
        links = discover_links(
            outcome,
            self.link_filter,
            self.visited,
            base=self.link_bases.get(url),
            resolved=found,
        )
        for link in links:
            self.enqueue(link, base=found.get(link))

        return state

    def _mark_written(self, url: str, filepath: Path, result: ScrapeResult) -> PageState:
        relative = filepath.relative_to(self.output_dir)
        self.states[url] = PageState.WRITTEN
        self.records[url].update(
            state=PageState.WRITTEN.value,
            filepath=str(relative),
            content_hash=compute_hash(result.markdown or ""),
        )
        self.stats["pages_written"] += 1

        log_event(
            logger,
            "page_written",
            f"✓ {url} → {relative}",
            url=url,
            path=str(relative),
            attempts=self.records[url]["attempts"],
        )
        return PageState.WRITTEN

    def _mark_failed(self, url: str, error: PageError) -> PageState:
        self.states[url] = PageState.FAILED
        self.records[url].update(
            state=PageState.FAILED.value,
            error_kind=error.kind.value,
            error=error.message,
        )
        self.stats["pages_failed"] += 1

        log_event(
            logger,
            "page_failed",
            f"✗ Failed {url}: {error}",
            level=logging.ERROR,
            url=url,
            error_kind=error.kind.value,
            status_code=error.status_code,
            attempts=self.records[url]["attempts"],
        )
        return PageState.FAILED

    def _generate_report(self) -> None:
        """Write one CSV row per URL seen during the run."""
        report_path = self.output_dir / REPORT_FILENAME

        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            with open(report_path, "w", newline="", encoding="utf-8") as f:
                writer = csv.DictWriter(f, fieldnames=REPORT_FIELDS)
                writer.writeheader()
                for record in self.records.values():
                    writer.writerow({field: record.get(field, "") for field in REPORT_FIELDS})
        except OSError as e:
            logger.error(f"Could not write report {report_path}: {e}")
            return

        logger.info(f"Report written to {report_path}")
