"""
Response rendering.

Pure formatting of a successful outcome into text; printing is left to
the caller.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import io
import json

from rich.console import Console
from rich.text import Text

from httpcall.exceptions import RenderError
from httpcall.models import OutputFormat, Success
from httpcall.trace import format_duration


def status_color(status_code: int) -> str:
    """Return a rich style for an HTTP status bucket."""
    if status_code >= 500:
        return "bold red"
    elif status_code >= 400:
        return "red"
    elif status_code >= 300:
        return "yellow"
    elif status_code >= 200:
        return "green"
    return ""


def group_headers(headers: tuple[tuple[str, str], ...]) -> dict[str, list[str]]:
    """Group header values by name, case-insensitively.

    The first spelling seen for a name is kept.
    """
    grouped: dict[str, list[str]] = {}
    spelling: dict[str, str] = {}
    for name, value in headers:
        key = spelling.setdefault(name.lower(), name)
        grouped.setdefault(key, []).append(value)
    return grouped


def _header_lines(result: Success) -> list[str]:
    return [
        f"{name}: {', '.join(values)}"
        for name, values in group_headers(result.headers).items()
    ]


def _styled_status(result: Success, color: bool) -> str:
    """The status line, colored by bucket when color is on."""
    text = Text(f"Status: {result.status}", style=status_color(result.status_code) or "")
    if not color:
        return text.plain

    buffer = io.StringIO()
    console = Console(
        file=buffer,
        force_terminal=True,
        color_system="standard",
        highlight=False,
        emoji=False,
        soft_wrap=True,
        width=10_000,
    )
    console.print(text, end="")
    return buffer.getvalue()


def render_pretty(result: Success, color: bool = False) -> str:
    """Status line, headers, body and duration.

    Only the status line is styled; the body is passed through as-is.
    """
    lines = [_styled_status(result, color), "Headers:"]
    lines.extend(f"  {line}" for line in _header_lines(result))
    lines.append("Body:")
    lines.append(result.text)
    lines.append(f"Duration: {format_duration(result.elapsed)}")
    return "\n".join(lines)


def render_json(result: Success) -> str:
    """Single JSON object with status, headers, body and duration."""
    payload = {
        "status": result.status,
        "statusCode": result.status_code,
        "headers": group_headers(result.headers),
        "body": result.text,
        "duration": format_duration(result.elapsed),
    }
    try:
        return json.dumps(payload, indent=2, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise RenderError(f"Cannot encode response as JSON: {e}") from e


def render_headers(result: Success) -> str:
    return "\n".join(_header_lines(result))


def render_body(result: Success) -> bytes:
    """The raw body bytes, unchanged."""
    return result.body


def render(result: Success, output: OutputFormat | str, color: bool = False) -> str | bytes:
    """Render a successful outcome in the requested format.

    body-only returns the body bytes verbatim; every other format is text.

    Raises:
        RenderError: If the format is unknown or encoding fails
    """
    try:
        output = OutputFormat(output)
    except ValueError as e:
        raise RenderError(f"Unknown output format: {output!r}") from e

    if output is OutputFormat.JSON:
        return render_json(result)
    if output is OutputFormat.HEADERS_ONLY:
        return render_headers(result)
    if output is OutputFormat.BODY_ONLY:
        return render_body(result)
    return render_pretty(result, color=color)
