"""Page writer: maps URLs to files and writes markdown with frontmatter."""

import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath
from urllib.parse import unquote, urlsplit

from firedocs.core.errors import ConfigError, ErrorKind, PageError
from firedocs.core.models import ScrapeResult
from firedocs.utils.markdown import add_frontmatter, sanitize_name, slugify_segment

logger = logging.getLogger(__name__)

STRIPPED_SUFFIXES = (".html", ".htm", ".md", ".mdx")


def domain_dir_name(url: str) -> str:
    """
    Directory name for a site, derived from the URL's host.

    Raises:
        ConfigError: If the URL has no host
    """
    host = urlsplit(url).hostname
    if not host:
        raise ConfigError(f"URL has no host: {url!r}")
    return sanitize_name(host)


def url_to_relative_path(url: str) -> Path:
    """
    Map a page URL to a markdown path relative to the domain directory.

    Path segments become directories and the last segment becomes the file
    name. Page extensions (.html, .md, ...) are dropped from every segment.
    The site root maps to ``index.md``. A query string is slugified and
    appended to the file name so distinct queries get distinct files.

    Examples:
        >>> url_to_relative_path("https://docs.example.com/guide")
        PosixPath('guide.md')
        >>> url_to_relative_path("https://docs.example.com/guide/part1.html")
        PosixPath('guide/part1.md')
        >>> url_to_relative_path("https://docs.example.com/")
        PosixPath('index.md')
    """
    parts = urlsplit(url)
    segments = [_strip_suffix(slugify_segment(unquote(s))) for s in PurePosixPath(parts.path).parts if s != "/"]

    if not segments:
        segments = ["index"]

    stem = segments[-1]
    if parts.query:
        stem = f"{stem}__{slugify_segment(unquote(parts.query))}"

    return Path(*segments[:-1], f"{stem}.md")


def _strip_suffix(segment: str) -> str:
    """Drop a page extension so `/guide.html` and `/guide.md/x` share `guide`."""
    for suffix in STRIPPED_SUFFIXES:
        if segment.lower().endswith(suffix) and len(segment) > len(suffix):
            return segment[: -len(suffix)]
    return segment


def render_page(result: ScrapeResult, scraped_at: datetime | None = None) -> str:
    """
    Render frontmatter (title, url, scrapeDate) followed by the markdown body.

    The ``url`` field is the URL that was requested, not the one the API
    reports after redirects.
    """
    scraped_at = scraped_at or datetime.now(timezone.utc)
    metadata = {
        "title": result.title,
        "url": result.url,
        "scrapeDate": scraped_at.isoformat(),
    }
    return add_frontmatter(result.markdown or "", metadata)


class PageWriter:
    """Writes scraped pages under one domain directory."""

    def __init__(self, output_dir: Path):
        self.output_dir = Path(output_dir)

    def path_for(self, url: str) -> Path:
        return self.output_dir / url_to_relative_path(url)

    def write(self, result: ScrapeResult, scraped_at: datetime | None = None) -> Path | PageError:
        """
        Write one page, replacing any earlier copy.

        Content goes to a temporary file in the target directory first and is
        then renamed into place, so a failed write leaves nothing behind.

        Args:
            result: Scraped page
            scraped_at: Timestamp for the frontmatter (defaults to now, UTC)

        Returns:
            Path of the written file, or a FILESYSTEM PageError
        """
        filepath = self.path_for(result.url)
        content = render_page(result, scraped_at)
        tmp_path: str | None = None

        try:
            filepath.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=filepath.parent,
                prefix=f".{filepath.stem}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_path = f.name
                f.write(content)
            os.replace(tmp_path, filepath)
            tmp_path = None

        except OSError as e:
            logger.debug(f"Write failed for {filepath}: {e}")
            return PageError(ErrorKind.FILESYSTEM, f"cannot write {filepath}: {e}", url=result.url)

        finally:
            if tmp_path is not None:
                Path(tmp_path).unlink(missing_ok=True)

        return filepath
