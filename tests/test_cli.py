"""CLI exit code tests."""

import json
import logging

import httpx
import pytest

from conftest import api_body
from firedocs import cli
from firedocs.core.client import FirecrawlClient

pytestmark = pytest.mark.asyncio


@pytest.fixture
def workdir(monkeypatch, tmp_path):
    """Run from an empty directory so no .env file is picked up."""
    monkeypatch.chdir(tmp_path)
    yield tmp_path
    logging.getLogger("firedocs").handlers.clear()


async def test_missing_api_key_exits_nonzero(workdir, capsys):
    code = await cli.main(["https://docs.example.com"])

    assert code == 1
    assert "FIRECRAWL_API_KEY" in capsys.readouterr().err


async def test_invalid_start_url_exits_nonzero(workdir, monkeypatch, capsys):
    monkeypatch.setenv("FIRECRAWL_API_KEY", "test-key")
    monkeypatch.setenv("LOG_FILE", str(workdir / "logs" / "firedocs.jsonl"))

    code = await cli.main(["not-a-url"])

    assert code == 1
    assert "Start URL" in capsys.readouterr().err

    entries = [json.loads(line) for line in (workdir / "logs" / "firedocs.jsonl").read_text().splitlines()]
    assert entries[-1]["event_type"] == "config_error"
    assert entries[-1]["level"] == "ERROR"
    assert entries[-1]["url"] == "not-a-url"
    assert "Start URL" in entries[-1]["message"]


async def test_run_exits_zero_even_with_page_failures(workdir, monkeypatch, capsys):
    monkeypatch.setenv("FIRECRAWL_API_KEY", "test-key")
    monkeypatch.setenv("OUTPUT_DIR", str(workdir / "out"))
    monkeypatch.setenv("RETRY_BACKOFF_SECONDS", "0")

    def handler(request: httpx.Request) -> httpx.Response:
        url = json.loads(request.content)["url"]
        if url.endswith("/broken"):
            return httpx.Response(500, json={"success": False, "error": "upstream"})
        return httpx.Response(
            200,
            json=api_body(title="Home", markdown="# Home", links=["https://docs.example.com/broken"]),
        )

    def client_factory(**kwargs) -> FirecrawlClient:
        assert kwargs["api_key"] == "test-key"
        return FirecrawlClient(**kwargs, transport=httpx.MockTransport(handler))

    monkeypatch.setattr(cli, "FirecrawlClient", client_factory)

    code = await cli.main(["https://docs.example.com/"])

    assert code == 0
    assert (workdir / "out" / "docs_example_com" / "index.md").exists()
    out = capsys.readouterr().out
    assert "Pages written: 1" in out
    assert "Failures: 1" in out
