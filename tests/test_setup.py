"""Test basic setup and configuration."""

from pathlib import Path

import pytest

from firedocs.config.settings import Settings, get_settings, load_settings
from firedocs.core.errors import ConfigError
from firedocs.core.links import LinkScope


def test_settings_creation():
    """Test that settings can be created with defaults."""
    settings = Settings(_env_file=None, firecrawl_api_key="test-key")

    assert settings.firecrawl_api_key == "test-key"
    assert settings.firecrawl_api_url == "https://api.firecrawl.dev"
    assert settings.scrape_endpoint == "https://api.firecrawl.dev/v1/scrape"
    assert settings.max_retries == 3
    assert settings.max_pages == 0
    assert settings.link_scope == LinkScope.DOMAIN
    assert settings.scrape_formats == ["markdown", "links"]
    assert settings.output_dir == Path(".")


def test_settings_from_environment(monkeypatch, tmp_path):
    """Test that environment variables are picked up."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("FIRECRAWL_API_KEY", "env-key")
    monkeypatch.setenv("FIRECRAWL_API_URL", "http://localhost:3002/")
    monkeypatch.setenv("LINK_SCOPE", "prefix")
    monkeypatch.setenv("SCRAPE_MOBILE", "true")
    monkeypatch.setenv("SKIP_PATTERNS", '["/blog", "/changelog"]')

    settings = load_settings()

    assert settings.firecrawl_api_key == "env-key"
    assert settings.firecrawl_api_url == "http://localhost:3002"
    assert settings.link_scope == LinkScope.PREFIX
    assert settings.scrape_mobile is True
    assert settings.skip_patterns == ["/blog", "/changelog"]


def test_missing_api_key_is_config_error(monkeypatch, tmp_path):
    """Missing FIRECRAWL_API_KEY fails fast with a ConfigError."""
    monkeypatch.chdir(tmp_path)

    with pytest.raises(ConfigError, match="FIRECRAWL_API_KEY"):
        load_settings()


def test_invalid_api_url_is_config_error(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("FIRECRAWL_API_KEY", "env-key")
    monkeypatch.setenv("FIRECRAWL_API_URL", "api.firecrawl.dev")

    with pytest.raises(ConfigError, match="FIRECRAWL_API_URL"):
        load_settings()


def test_settings_are_cached(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("FIRECRAWL_API_KEY", "env-key")

    assert get_settings() is get_settings()


def test_build_request_maps_scrape_options(make_settings):
    """Test that scrape options become a ScrapeRequest."""
    settings = make_settings(
        scrape_mobile=True,
        scrape_block_ads=True,
        scrape_remove_base64_images=True,
        scrape_timeout_ms=45000,
        scrape_headers={"User-Agent": "firedocs"},
        scrape_execute_js="document.querySelector('.popup')?.remove()",
        scrape_location_country="AU",
        scrape_location_languages=["en-AU"],
    )

    request = settings.build_request("https://docs.example.com/guide")
    payload = request.to_payload()

    assert payload["url"] == "https://docs.example.com/guide"
    assert payload["mobile"] is True
    assert payload["blockAds"] is True
    assert payload["removeBase64Images"] is True
    assert payload["timeout"] == 45000
    assert payload["headers"] == {"User-Agent": "firedocs"}
    assert payload["actions"] == [{"type": "execute", "script": "document.querySelector('.popup')?.remove()"}]
    assert payload["location"] == {"country": "AU", "languages": ["en-AU"]}


def test_build_request_omits_unset_options(settings):
    payload = settings.build_request("https://docs.example.com").to_payload()

    assert payload == {"url": "https://docs.example.com", "formats": ["markdown", "links"]}


def test_data_directory_creation(test_data_dir: Path):
    """Test that test data directory is created."""
    assert test_data_dir.exists()
    assert test_data_dir.is_dir()
