"""Pytest configuration and fixtures."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

from firedocs.config.settings import Settings, get_settings
from firedocs.core.client import FirecrawlClient
from firedocs.core.errors import PageError
from firedocs.core.models import ScrapeRequest, ScrapeResult

ENV_VARS = (
    "FIRECRAWL_API_KEY",
    "FIRECRAWL_API_URL",
    "OUTPUT_DIR",
    "LOG_FILE",
    "LOG_LEVEL",
    "MAX_RETRIES",
    "MAX_PAGES",
    "LINK_SCOPE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    """Keep the developer's environment and cached settings out of tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def test_data_dir(tmp_path: Path) -> Path:
    """Create a temporary data directory for tests."""
    data_dir = tmp_path / "test_data"
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    """Build Settings without reading .env, with instant retries."""

    def _make(**overrides: Any) -> Settings:
        values: dict[str, Any] = {
            "firecrawl_api_key": "test-key",
            "retry_backoff_seconds": 0,
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def settings(make_settings) -> Settings:
    return make_settings()


def api_body(
    title: str | None = None,
    markdown: str | None = None,
    links: list[str] | None = None,
    **data: Any,
) -> dict[str, Any]:
    """JSON body shaped like a successful /v1/scrape response."""
    metadata: dict[str, Any] = {"statusCode": 200}
    if title is not None:
        metadata["title"] = title
    payload: dict[str, Any] = {"metadata": metadata, **data}
    if markdown is not None:
        payload["markdown"] = markdown
    if links is not None:
        payload["links"] = links
    return {"success": True, "data": payload}


def make_result(url: str, title: str = "Page", markdown: str = "# Page\n", links=None, **fields) -> ScrapeResult:
    return ScrapeResult(url=url, title=title, markdown=markdown, links=links or [], **fields)


class FakeClient:
    """
    Scripted stand-in for FirecrawlClient.

    ``pages`` maps a URL to an outcome, or to a list of outcomes returned on
    successive calls (the last one repeats). Unknown URLs get a small page.
    """

    def __init__(self, pages: dict[str, Any] | None = None):
        self.pages = pages or {}
        self.calls: list[str] = []
        self.requests: list[ScrapeRequest] = []

    async def scrape(self, request: ScrapeRequest) -> ScrapeResult | PageError:
        self.calls.append(request.url)
        self.requests.append(request)
        outcome = self.pages.get(request.url)

        if outcome is None:
            return make_result(request.url)

        if isinstance(outcome, list):
            index = min(self.calls.count(request.url) - 1, len(outcome) - 1)
            outcome = outcome[index]

        if isinstance(outcome, ScrapeResult):
            # Results are always tied to the URL that was asked for
            return outcome.model_copy(update={"url": request.url})
        return outcome


@pytest.fixture
def mock_client() -> Callable[..., FirecrawlClient]:
    """FirecrawlClient whose HTTP calls are answered by ``handler``."""

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> FirecrawlClient:
        return FirecrawlClient(
            api_key="test-key",
            api_url="https://api.firecrawl.test",
            transport=httpx.MockTransport(handler),
        )

    return _make
