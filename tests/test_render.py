import json

import pytest

from httpcall.exceptions import RenderError
from httpcall.models import OutputFormat, Success
from httpcall.render import group_headers, render, status_color
from httpcall.trace import format_duration


def make_success(**overrides) -> Success:
    values = dict(
        status_code=200,
        status_text="OK",
        headers=(("X-Test", "1"),),
        body=b'{"a":1}',
        elapsed=0.123,
        attempts=1,
        url="http://example.test/ok",
    )
    values.update(overrides)
    return Success(**values)


def test_json_render() -> None:
    text = render(make_success(), OutputFormat.JSON)
    data = json.loads(text)

    assert data == {
        "status": "200 OK",
        "statusCode": 200,
        "headers": {"X-Test": ["1"]},
        "body": '{"a":1}',
        "duration": "123ms",
    }
    assert '"statusCode": 200' in text
    assert '"body": "{\\"a\\":1}"' in text


def test_json_render_accepts_string_format() -> None:
    assert json.loads(render(make_success(), "json"))["statusCode"] == 200


def test_group_headers_is_case_insensitive() -> None:
    grouped = group_headers((("Set-Cookie", "a=1"), ("set-cookie", "b=2"), ("Server", "x")))
    assert grouped == {"Set-Cookie": ["a=1", "b=2"], "Server": ["x"]}


def test_headers_only_render() -> None:
    result = make_success(headers=(("Server", "x"), ("Vary", "Accept"), ("Vary", "Origin")))
    assert render(result, OutputFormat.HEADERS_ONLY) == "Server: x\nVary: Accept, Origin"


def test_body_only_render() -> None:
    assert render(make_success(), OutputFormat.BODY_ONLY) == b'{"a":1}'


def test_body_only_keeps_binary_bytes() -> None:
    png = b"\x89PNG\r\n\x1a\n\xff\xfe\x00"
    assert render(make_success(body=png), OutputFormat.BODY_ONLY) == png


def test_pretty_render_keeps_body_verbatim() -> None:
    text = render(make_success(body=b"a\tb\r\nc :smile: [bold]x[/bold]"), OutputFormat.PRETTY)

    body = text.split("Body:\n", 1)[1].rsplit("\nDuration: ", 1)[0]
    assert body == "a\tb\r\nc :smile: [bold]x[/bold]"


def test_pretty_render_colored_keeps_body_verbatim() -> None:
    text = render(make_success(body=b"a\tb\r\nc"), OutputFormat.PRETTY, color=True)

    assert "Body:\na\tb\r\nc\nDuration: 123ms" in text


def test_pretty_render_plain() -> None:
    text = render(make_success(), OutputFormat.PRETTY)

    assert text.splitlines() == [
        "Status: 200 OK",
        "Headers:",
        "  X-Test: 1",
        "Body:",
        '{"a":1}',
        "Duration: 123ms",
    ]
    assert "\x1b[" not in text


def test_pretty_render_colors_status_line() -> None:
    text = render(make_success(), OutputFormat.PRETTY, color=True)

    assert "\x1b[" in text
    assert "Status: 200 OK" in text


@pytest.mark.parametrize(
    "status_code, expected",
    [
        (100, ""),
        (200, "green"),
        (299, "green"),
        (302, "yellow"),
        (404, "red"),
        (500, "bold red"),
        (503, "bold red"),
    ],
)
def test_status_color_buckets(status_code, expected) -> None:
    assert status_color(status_code) == expected


def test_unknown_format() -> None:
    with pytest.raises(RenderError):
        render(make_success(), "xml")


@pytest.mark.parametrize(
    "seconds, expected",
    [(0.0, "0ms"), (0.1234, "123ms"), (2.5, "2500ms")],
)
def test_format_duration(seconds, expected) -> None:
    assert format_duration(seconds) == expected
