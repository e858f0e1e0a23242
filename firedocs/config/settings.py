"""Configuration settings using Pydantic."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from firedocs.core.errors import ConfigError
from firedocs.core.links import LinkScope
from firedocs.core.models import Action, Location, ScrapeRequest


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # FireCrawl
    firecrawl_api_key: str = Field(..., min_length=1, description="FireCrawl API key")
    firecrawl_api_url: str = Field(
        default="https://api.firecrawl.dev",
        description="FireCrawl API base URL",
    )

    # Paths
    output_dir: Path = Field(default=Path("."), description="Root for domain directories")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: Path | None = Field(default=None, description="Optional JSONL log file")

    # Crawling
    max_retries: int = Field(default=3, ge=1, description="Maximum attempts per page")
    retry_backoff_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Base delay before a retry, doubled on each attempt",
    )
    timeout_seconds: float = Field(default=60, gt=0, description="HTTP timeout in seconds")
    delay_between_requests: float = Field(
        default=0.0,
        ge=0,
        description="Delay between pages in seconds",
    )
    max_pages: int = Field(default=0, ge=0, description="Stop after N pages (0 = no limit)")
    link_scope: LinkScope = Field(
        default=LinkScope.DOMAIN,
        description="Which discovered links to follow: domain, subdomains or prefix",
    )
    link_path_prefix: str = Field(
        default="",
        description="Path prefix for the 'prefix' scope (defaults to the start path)",
    )
    skip_patterns: list[str] = Field(default_factory=list, description="Substrings to skip")

    # Scrape options forwarded to the API
    scrape_formats: list[str] = Field(default_factory=lambda: ["markdown", "links"])
    scrape_only_main_content: bool | None = None
    scrape_include_tags: list[str] | None = None
    scrape_exclude_tags: list[str] | None = None
    scrape_headers: dict[str, str] | None = None
    scrape_wait_for_ms: int | None = None
    scrape_execute_js: str | None = None
    scrape_mobile: bool | None = None
    scrape_skip_tls_verification: bool | None = None
    scrape_timeout_ms: int | None = None
    scrape_location_country: str | None = None
    scrape_location_languages: list[str] | None = None
    scrape_remove_base64_images: bool | None = None
    scrape_block_ads: bool | None = None

    @field_validator("firecrawl_api_url")
    @classmethod
    def _check_api_url(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value.startswith(("http://", "https://")):
            raise ValueError("FIRECRAWL_API_URL must be an http(s) URL")
        return value

    @property
    def scrape_endpoint(self) -> str:
        return f"{self.firecrawl_api_url}/v1/scrape"

    def build_request(self, url: str) -> ScrapeRequest:
        """Build the scrape request for one page from the configured options."""
        actions = None
        if self.scrape_execute_js:
            actions = [Action(type="execute", script=self.scrape_execute_js)]

        location = None
        if self.scrape_location_country or self.scrape_location_languages:
            location = Location(
                country=self.scrape_location_country,
                languages=self.scrape_location_languages,
            )

        return ScrapeRequest(
            url=url,
            formats=list(self.scrape_formats),
            only_main_content=self.scrape_only_main_content,
            include_tags=self.scrape_include_tags,
            exclude_tags=self.scrape_exclude_tags,
            headers=self.scrape_headers,
            wait_for=self.scrape_wait_for_ms,
            mobile=self.scrape_mobile,
            skip_tls_verification=self.scrape_skip_tls_verification,
            timeout=self.scrape_timeout_ms,
            actions=actions,
            location=location,
            remove_base64_images=self.scrape_remove_base64_images,
            block_ads=self.scrape_block_ads,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()  # type: ignore[call-arg]


def load_settings() -> Settings:
    """
    Load settings, turning validation failures into a ConfigError.

    Raises:
        ConfigError: If FIRECRAWL_API_KEY is missing or a value is invalid
    """
    try:
        return get_settings()
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']).upper()}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigError(f"Invalid configuration: {problems}") from e
