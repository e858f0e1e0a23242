"""Request and response models for the FireCrawl scrape endpoint."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

ActionType = Literal["wait", "screenshot", "click", "write", "press", "scroll", "scrape", "execute"]

# Fields each action type must carry
_REQUIRED_ACTION_FIELDS: dict[str, tuple[str, ...]] = {
    "click": ("selector",),
    "write": ("selector", "text"),
    "press": ("key",),
    "scroll": ("pixels",),
    "scrape": ("selector",),
    "execute": ("script",),
}


class Action(BaseModel):
    """
    A browser action the API performs before extracting content.

    Examples:
        Action(type="wait", milliseconds=2000)
        Action(type="click", selector="#accept-cookies")
        Action(type="execute", script="document.querySelector('.banner').remove()")
    """

    model_config = ConfigDict(frozen=True)

    type: ActionType
    milliseconds: int | None = None
    selector: str | None = None
    text: str | None = None
    key: str | None = None
    pixels: int | None = None
    script: str | None = None

    @model_validator(mode="after")
    def _check_fields(self) -> "Action":
        missing = [name for name in _REQUIRED_ACTION_FIELDS.get(self.type, ()) if getattr(self, name) is None]
        if missing:
            raise ValueError(f"'{self.type}' action requires {', '.join(missing)}")
        if self.type == "wait" and (self.milliseconds is None) == (self.selector is None):
            raise ValueError("'wait' action requires exactly one of milliseconds or selector")
        return self


class Location(BaseModel):
    """Country (ISO 3166-1 alpha-2) and preferred languages for the request."""

    model_config = ConfigDict(frozen=True)

    country: str | None = None
    languages: list[str] | None = None


class ScrapeRequest(BaseModel):
    """Immutable description of one scrape call."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    url: str
    formats: list[str] = Field(default_factory=lambda: ["markdown", "links"])
    only_main_content: bool | None = Field(default=None, alias="onlyMainContent")
    include_tags: list[str] | None = Field(default=None, alias="includeTags")
    exclude_tags: list[str] | None = Field(default=None, alias="excludeTags")
    headers: dict[str, str] | None = None
    wait_for: int | None = Field(default=None, alias="waitFor")
    mobile: bool | None = None
    skip_tls_verification: bool | None = Field(default=None, alias="skipTlsVerification")
    timeout: int | None = None
    actions: list[Action] | None = None
    location: Location | None = None
    remove_base64_images: bool | None = Field(default=None, alias="removeBase64Images")
    block_ads: bool | None = Field(default=None, alias="blockAds")

    def to_payload(self) -> dict[str, Any]:
        """JSON body for the API: camelCase keys, unset options omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ScrapeResult(BaseModel):
    """Markdown and metadata returned for one page."""

    url: str
    success: bool = True
    markdown: str | None = None
    title: str | None = None
    links: list[str] = Field(default_factory=list)
    html: str | None = None
    description: str | None = None
    language: str | None = None
    source_url: str | None = None
    final_url: str | None = None
    status_code: int | None = None
    warning: str | None = None
    error: str | None = None

    @classmethod
    def from_response(cls, url: str, body: dict[str, Any]) -> "ScrapeResult":
        """
        Build a result from the API's JSON body.

        The endpoint answers ``{"success": bool, "data": {...}}`` where ``data``
        holds the requested formats plus a ``metadata`` object. Metadata values
        may be a string or a list of strings; the first string is kept.

        Args:
            url: URL that was requested
            body: Decoded JSON response

        Returns:
            Parsed result

        Raises:
            ValueError: If ``data`` or ``metadata`` is not a JSON object
        """
        data = body.get("data") or {}
        if not isinstance(data, dict):
            raise ValueError(f"'data' must be an object, got {type(data).__name__}")

        metadata = data.get("metadata") or {}
        if not isinstance(metadata, dict):
            raise ValueError(f"'metadata' must be an object, got {type(metadata).__name__}")

        return cls(
            url=url,
            success=bool(body.get("success", False)),
            markdown=data.get("markdown"),
            title=_first_string(metadata.get("title")) or _first_string(data.get("title")),
            links=[link for link in _as_list(data.get("links")) if isinstance(link, str)],
            html=data.get("html") or data.get("rawHtml"),
            description=_first_string(metadata.get("description")),
            language=_first_string(metadata.get("language")),
            source_url=_first_string(metadata.get("sourceURL")),
            final_url=_first_string(metadata.get("url")),
            status_code=metadata.get("statusCode"),
            warning=data.get("warning"),
            error=body.get("error") or metadata.get("error"),
        )


def _first_string(value: Any) -> str | None:
    """Metadata fields come back as ``str`` or ``list[str]``."""
    if isinstance(value, list):
        value = next((item for item in value if isinstance(item, str)), None)
    return value if isinstance(value, str) else None


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []
