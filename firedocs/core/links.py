"""Link discovery: normalize, scope and deduplicate links found on a page."""

import logging
import re
from collections.abc import Iterable
from enum import Enum
from urllib.parse import urldefrag, urljoin, urlsplit, urlunsplit

from bs4 import BeautifulSoup

from firedocs.core.models import ScrapeResult

logger = logging.getLogger(__name__)

# [text](url) and [text](<url> "title")
MARKDOWN_LINK_PATTERN = re.compile(r"\]\(\s*<?([^)\s>]+)>?")

IGNORED_SCHEMES = ("mailto:", "javascript:", "tel:", "data:")

ASSET_EXTENSIONS = (
    ".pdf",
    ".zip",
    ".tar.gz",
    ".png",
    ".jpg",
    ".jpeg",
    ".gif",
    ".svg",
    ".webp",
    ".ico",
    ".css",
    ".js",
    ".mp4",
)


class LinkScope(str, Enum):
    """Which discovered links count as part of the documentation set."""

    DOMAIN = "domain"  # exact host of the start URL
    SUBDOMAINS = "subdomains"  # the host and any of its subdomains
    PREFIX = "prefix"  # exact host, path under a prefix


def normalize_url(url: str, base: str | None = None) -> str:
    """
    Normalize URL to absolute form for deduplication.

    Relative URLs are resolved against ``base``. The fragment and any
    trailing slash are removed; the query string is kept.

    Args:
        url: URL to normalize (can be relative)
        base: Page the link was found on

    Returns:
        Normalized absolute URL

    Examples:
        >>> normalize_url("https://docs.example.com/guide/#setup")
        'https://docs.example.com/guide'
        >>> normalize_url("../api", base="https://docs.example.com/guide/intro")
        'https://docs.example.com/api'
    """
    if base:
        url = urljoin(base, url)

    parts = urlsplit(url.strip())
    path = parts.path.rstrip("/")
    return urlunsplit((parts.scheme, parts.netloc, path, parts.query, ""))


class LinkFilter:
    """
    Decides whether a URL belongs to the crawl.

    The policy is fixed at construction from the start URL and an explicit
    LinkScope rather than guessed from the links themselves.
    """

    def __init__(
        self,
        start_url: str,
        scope: LinkScope = LinkScope.DOMAIN,
        path_prefix: str = "",
        skip_patterns: Iterable[str] = (),
    ):
        """
        Initialize filter.

        Args:
            start_url: URL the crawl starts from
            scope: Link scope policy
            path_prefix: Path prefix for LinkScope.PREFIX (defaults to the start path)
            skip_patterns: URLs containing any of these substrings are skipped
        """
        parts = urlsplit(normalize_url(start_url))
        self.host = (parts.hostname or "").lower()
        self.scope = LinkScope(scope)
        self.path_prefix = (path_prefix or parts.path).rstrip("/")
        self.skip_patterns = list(skip_patterns)

    def in_scope(self, url: str) -> bool:
        parts = urlsplit(url)
        if parts.scheme not in ("http", "https"):
            return False

        host = (parts.hostname or "").lower()

        if self.scope == LinkScope.SUBDOMAINS:
            return host == self.host or host.endswith(f".{self.host}")

        if host != self.host:
            return False

        if self.scope == LinkScope.PREFIX and self.path_prefix:
            path = parts.path.rstrip("/")
            return path == self.path_prefix or path.startswith(f"{self.path_prefix}/")

        return True

    def should_skip(self, url: str) -> bool:
        path = urlsplit(url).path.lower()
        if path.endswith(ASSET_EXTENSIONS):
            return True

        return any(pattern in url for pattern in self.skip_patterns)

    def accepts(self, url: str) -> bool:
        return self.in_scope(url) and not self.should_skip(url)


def links_from_html(html: str | None) -> list[str]:
    """Extract hrefs from anchor tags, in document order."""
    if not html:
        return []
    soup = BeautifulSoup(html, "lxml")
    return [a_tag["href"] for a_tag in soup.find_all("a", href=True)]


def links_from_markdown(markdown: str | None) -> list[str]:
    """Extract targets of inline markdown links, in document order."""
    if not markdown:
        return []
    return MARKDOWN_LINK_PATTERN.findall(markdown)


def candidate_links(result: ScrapeResult) -> list[str]:
    """
    Raw links for a page.

    Prefers the link list returned by the API; falls back to the page's HTML
    and then its markdown when the API sent no links.
    """
    if result.links:
        return result.links

    html_links = links_from_html(result.html)
    if html_links:
        return html_links

    return links_from_markdown(result.markdown)


def resolve_link(url: str, base: str) -> str:
    """
    Resolve a link against the page it was found on, dropping only the fragment.

    Unlike normalize_url the trailing slash is kept, so the result can itself
    serve as a base for the next page's relative links.

    Examples:
        >>> resolve_link("part1#usage", "https://docs.example.com/guide/")
        'https://docs.example.com/guide/part1'
    """
    absolute, _fragment = urldefrag(urljoin(base, url.strip()))
    return absolute


def page_base(result: ScrapeResult, fallback: str | None = None) -> str:
    """
    URL that relative links on a page are resolved against.

    The final URL after redirects wins, then ``fallback`` (the URL as it was
    discovered, trailing slash intact), then the API's ``sourceURL``, and only
    then the normalized request URL, which may have lost a trailing slash.
    """
    return result.final_url or fallback or result.source_url or result.url


def discover_links(
    result: ScrapeResult,
    link_filter: LinkFilter,
    visited: set[str],
    base: str | None = None,
    resolved: dict[str, str] | None = None,
) -> list[str]:
    """
    Find new URLs to enqueue from a scraped page.

    ``visited`` is only read; the caller marks URLs visited when it queues them.

    Args:
        result: Scraped page
        link_filter: Scope policy for the crawl
        visited: URLs already processed or queued
        base: Un-normalized URL of the page, if the caller knows it
        resolved: If given, filled with normalized URL -> resolved link as found

    Returns:
        Normalized, in-scope, unseen URLs in discovery order, without duplicates
    """
    base_url = page_base(result, base)
    new_links: list[str] = []
    seen: set[str] = set()

    for raw in candidate_links(result):
        raw = raw.strip()
        if not raw or raw.lower().startswith(IGNORED_SCHEMES):
            continue

        absolute = resolve_link(raw, base_url)
        url = normalize_url(absolute)

        if url in visited or url in seen:
            continue

        if not link_filter.accepts(url):
            continue

        seen.add(url)
        new_links.append(url)
        if resolved is not None:
            resolved.setdefault(url, absolute)

    logger.debug(f"Discovered {len(new_links)} new links on {result.url}")
    return new_links
