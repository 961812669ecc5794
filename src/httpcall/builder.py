"""
Request construction.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import httpx

from httpcall.exceptions import InvalidRequestError
from httpcall.models import RequestSpec, ResolvedBody
from httpcall.trace import Tracer


HTTP_METHODS = frozenset({
    "GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE", "CONNECT",
})

DEFAULT_CONTENT_TYPE = "application/json"


def parse_headers(text: str | None) -> tuple[tuple[str, str], ...]:
    """Parse 'Name:Value,Name2:Value2' into ordered pairs.

    Tokens without ':' or with an empty name are dropped.
    """
    if not text:
        return ()

    headers = []
    for token in text.split(","):
        if ":" not in token:
            continue
        name, value = token.split(":", 1)
        name = name.strip()
        if name:
            headers.append((name, value.strip()))
    return tuple(headers)


def validate_url(url: str) -> httpx.URL:
    """Parse an absolute http(s) URL."""
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as e:
        raise InvalidRequestError(f"Invalid URL {url!r}: {e}") from e

    if parsed.scheme not in ("http", "https"):
        raise InvalidRequestError(f"Invalid URL {url!r}: scheme must be http or https")
    if not parsed.host:
        raise InvalidRequestError(f"Invalid URL {url!r}: missing host")
    return parsed


def build_request(
    spec: RequestSpec,
    resolved: ResolvedBody,
    tracer: Tracer | None = None,
) -> httpx.Request:
    """Build a transport-ready request.

    Headers are set, not appended: a later header replaces an earlier one
    with the same name. With no headers at all, Content-Type defaults to
    application/json. A content type implied by the body applies only when
    no explicit Content-Type header was given.

    Raises:
        InvalidRequestError: If the method or URL is malformed
    """
    if spec.method not in HTTP_METHODS:
        raise InvalidRequestError(f"Invalid HTTP method: {spec.method!r}")

    url = validate_url(spec.url)

    headers = httpx.Headers()
    for name, value in spec.headers:
        headers[name] = value

    if not spec.has_explicit_headers:
        headers["Content-Type"] = DEFAULT_CONTENT_TYPE
    if resolved.content_type and not spec.has_content_type:
        headers["Content-Type"] = resolved.content_type

    try:
        request = httpx.Request(
            spec.method,
            url,
            headers=headers,
            content=resolved.content or None,
        )
    except (httpx.InvalidURL, UnicodeEncodeError) as e:
        raise InvalidRequestError(f"Cannot build request: {e}") from e

    if spec.basic_auth and spec.basic_auth.username:
        auth = httpx.BasicAuth(spec.basic_auth.username, spec.basic_auth.password)
        request = next(auth.auth_flow(request))

    if tracer is not None:
        tracer.request(request)

    return request
