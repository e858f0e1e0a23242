"""Core components: API client, link discovery, page writer.

The driver loop lives in ``firedocs.core.scraper``; it is not re-exported here
because it depends on the settings module, which depends on this package.
"""

from firedocs.core.client import FirecrawlClient
from firedocs.core.errors import ConfigError, ErrorKind, PageError
from firedocs.core.links import LinkFilter, LinkScope, discover_links, normalize_url
from firedocs.core.models import Action, Location, ScrapeRequest, ScrapeResult
from firedocs.core.writer import PageWriter, domain_dir_name, url_to_relative_path

__all__ = [
    "FirecrawlClient",
    "ConfigError",
    "ErrorKind",
    "PageError",
    "LinkFilter",
    "LinkScope",
    "discover_links",
    "normalize_url",
    "Action",
    "Location",
    "ScrapeRequest",
    "ScrapeResult",
    "PageWriter",
    "domain_dir_name",
    "url_to_relative_path",
]
