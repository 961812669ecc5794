"""
Request body resolution.

Turns the configured body source into payload bytes plus a content type.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import json
import logging
from pathlib import Path
from urllib.parse import urlencode

from httpcall.exceptions import InvalidInputError
from httpcall.models import (
    BodySource,
    FileBody,
    FormFields,
    JSONFields,
    NoBody,
    RawBody,
    ResolvedBody,
)

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def parse_fields(text: str | None) -> tuple[tuple[str, str], ...]:
    """Parse 'key=value,key2=value2' into pairs.

    Tokens without '=' are dropped. Values may themselves contain '='.
    """
    if not text:
        return ()

    pairs = []
    for token in text.split(","):
        if "=" not in token:
            continue
        key, value = token.split("=", 1)
        pairs.append((key, value))
    return tuple(pairs)


def select_body_source(
    body: str | None = None,
    body_file: str | None = None,
    json_fields: str | None = None,
    form_fields: str | None = None,
) -> BodySource:
    """Pick the body source by precedence: file > json > form > raw > none.

    The first non-empty source wins; the others are ignored with a warning.
    """
    candidates = [
        ("body-file", body_file, lambda: FileBody(body_file)),
        ("json", json_fields, lambda: JSONFields(parse_fields(json_fields))),
        ("form", form_fields, lambda: FormFields(parse_fields(form_fields))),
        ("body", body, lambda: RawBody(body)),
    ]
    present = [(name, make) for name, value, make in candidates if value]
    if not present:
        return NoBody()

    chosen, make = present[0]
    ignored = [name for name, _ in present[1:]]
    if ignored:
        logger.warning(
            f"Multiple body sources given; using --{chosen}, ignoring "
            + ", ".join(f"--{name}" for name in ignored)
        )
    return make()


def resolve_body(source: BodySource, has_content_type: bool = False) -> ResolvedBody:
    """Resolve a body source into bytes and a content type hint.

    Args:
        source: The configured body source
        has_content_type: True when the caller set an explicit Content-Type,
            in which case no content type is inferred

    Raises:
        InvalidInputError: If a body file cannot be read
    """
    if isinstance(source, FileBody):
        try:
            return ResolvedBody(content=Path(source.path).read_bytes())
        except OSError as e:
            raise InvalidInputError(f"Cannot read body file {source.path}: {e}") from e

    if isinstance(source, JSONFields):
        content = json.dumps(dict(source.pairs)).encode("utf-8")
        return ResolvedBody(
            content=content,
            content_type=None if has_content_type else JSON_CONTENT_TYPE,
        )

    if isinstance(source, FormFields):
        content = urlencode(source.pairs).encode("utf-8")
        return ResolvedBody(
            content=content,
            content_type=None if has_content_type else FORM_CONTENT_TYPE,
        )

    if isinstance(source, RawBody):
        return ResolvedBody(content=source.text.encode("utf-8"))

    return ResolvedBody()
