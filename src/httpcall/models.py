"""
Request and outcome data models.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

from dataclasses import dataclass, field
from enum import Enum

from httpcall.exceptions import InvalidInputError, TransportError


DEFAULT_TIMEOUT = 10
DEFAULT_RETRIES = 0
DEFAULT_RETRY_DELAY = 1


class OutputFormat(str, Enum):
    """Response render formats."""

    PRETTY = "pretty"
    JSON = "json"
    HEADERS_ONLY = "headers-only"
    BODY_ONLY = "body-only"


# Body sources. Exactly one is attached to a RequestSpec.

@dataclass(frozen=True)
class NoBody:
    """No request payload."""


@dataclass(frozen=True)
class RawBody:
    """Body text sent verbatim."""
    text: str


@dataclass(frozen=True)
class FileBody:
    """Body read from a file at send time."""
    path: str


@dataclass(frozen=True)
class JSONFields:
    """key=value pairs encoded as a flat JSON object."""
    pairs: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True)
class FormFields:
    """key=value pairs encoded as application/x-www-form-urlencoded."""
    pairs: tuple[tuple[str, str], ...] = ()


BodySource = NoBody | RawBody | FileBody | JSONFields | FormFields


@dataclass(frozen=True)
class BasicAuth:
    """HTTP Basic credentials."""
    username: str
    password: str = ""


@dataclass(frozen=True)
class RequestSpec:
    """Validated description of the request to issue."""
    url: str
    method: str = "GET"
    headers: tuple[tuple[str, str], ...] = ()
    body: BodySource = field(default_factory=NoBody)
    basic_auth: BasicAuth | None = None
    timeout: int = DEFAULT_TIMEOUT
    follow_redirects: bool = True
    retries: int = DEFAULT_RETRIES
    retry_delay: int = DEFAULT_RETRY_DELAY
    output: OutputFormat = OutputFormat.PRETTY
    save_to: str | None = None
    verbose: bool = False

    def __post_init__(self) -> None:
        if not self.url or not self.url.strip():
            raise InvalidInputError("URL is required")
        if self.timeout <= 0:
            raise InvalidInputError(f"Timeout must be positive, got {self.timeout}")
        if self.retries < 0:
            raise InvalidInputError(f"Retries must not be negative, got {self.retries}")
        if self.retry_delay < 0:
            raise InvalidInputError(
                f"Retry delay must not be negative, got {self.retry_delay}"
            )
        object.__setattr__(self, "url", self.url.strip())
        object.__setattr__(self, "method", self.method.strip().upper())
        object.__setattr__(self, "output", OutputFormat(self.output))

    @property
    def has_explicit_headers(self) -> bool:
        return bool(self.headers)

    @property
    def has_content_type(self) -> bool:
        """True when the caller set an explicit Content-Type header."""
        return any(name.lower() == "content-type" for name, _ in self.headers)

    @property
    def max_attempts(self) -> int:
        return self.retries + 1


@dataclass(frozen=True)
class ResolvedBody:
    """Concrete payload bytes and the content type they imply."""
    content: bytes = b""
    content_type: str | None = None

    def __bool__(self) -> bool:
        return bool(self.content)


@dataclass(frozen=True)
class Success:
    """A response that was received and fully read."""
    status_code: int
    status_text: str
    headers: tuple[tuple[str, str], ...]
    body: bytes
    elapsed: float  # seconds, winning attempt only
    attempts: int
    url: str = ""

    @property
    def status(self) -> str:
        return f"{self.status_code} {self.status_text}".rstrip()

    @property
    def elapsed_ms(self) -> float:
        return self.elapsed * 1000

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def is_redirect(self) -> bool:
        return 300 <= self.status_code < 400

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500

    @property
    def is_server_error(self) -> bool:
        return self.status_code >= 500


@dataclass(frozen=True)
class Failure:
    """Every attempt failed; carries the last transport error."""
    error: TransportError
    attempts: int


Outcome = Success | Failure
