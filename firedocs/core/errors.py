"""Error types shared by the client, writer and driver loop."""

from dataclasses import dataclass
from enum import Enum


class ConfigError(Exception):
    """Fatal configuration problem (missing API key, invalid start URL)."""


class ErrorKind(str, Enum):
    """Why a single page could not be scraped or written."""

    REQUEST = "request"  # network error, timeout or HTTP 408
    RATE_LIMIT = "rate_limit"  # HTTP 429
    SERVER = "server"  # HTTP 5xx
    AUTH = "auth"  # HTTP 401/402/403
    VALIDATION = "validation"  # any other non-2xx
    RESPONSE = "response"  # unparseable body or success=false
    EMPTY = "empty"  # no markdown in the response
    FILESYSTEM = "filesystem"

    @property
    def retryable(self) -> bool:
        return self in RETRYABLE_KINDS


RETRYABLE_KINDS = frozenset({ErrorKind.REQUEST, ErrorKind.RATE_LIMIT, ErrorKind.SERVER})


@dataclass(frozen=True)
class PageError:
    """A per-page failure, returned as a value instead of raised."""

    kind: ErrorKind
    message: str
    url: str = ""
    status_code: int | None = None

    @property
    def retryable(self) -> bool:
        return self.kind.retryable

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.kind.value} ({self.status_code}): {self.message}"
        return f"{self.kind.value}: {self.message}"


def classify_status(status_code: int) -> ErrorKind:
    """Map a non-2xx HTTP status from the API to an error kind."""
    if status_code == 408:
        return ErrorKind.REQUEST
    if status_code == 429:
        return ErrorKind.RATE_LIMIT
    if status_code >= 500:
        return ErrorKind.SERVER
    if status_code in (401, 402, 403):
        return ErrorKind.AUTH
    return ErrorKind.VALIDATION
