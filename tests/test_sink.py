from httpcall.models import OutputFormat, Success
from httpcall.render import render
from httpcall.sink import save_body


def test_save_body_writes_bytes_verbatim(tmp_path) -> None:
    path = tmp_path / "out.bin"
    result = save_body(str(path), b"\x00raw\r\nbytes")

    assert result.success
    assert result.size == 11
    assert path.read_bytes() == b"\x00raw\r\nbytes"


def test_save_body_failure_is_returned(tmp_path) -> None:
    result = save_body(str(tmp_path), b"data")

    assert not result.success
    assert str(tmp_path) in result.error
    assert result.size == 0


def test_saved_bytes_match_body_only_render(tmp_path) -> None:
    outcome = Success(
        status_code=200,
        status_text="OK",
        headers=(),
        body="héllo wörld\n".encode("utf-8"),
        elapsed=0.01,
        attempts=1,
    )
    path = tmp_path / "body.txt"
    save_body(str(path), outcome.body)

    assert path.read_bytes() == render(outcome, OutputFormat.BODY_ONLY)


def test_saved_binary_bytes_match_body_only_render(tmp_path) -> None:
    outcome = Success(
        status_code=200,
        status_text="OK",
        headers=(("Content-Type", "image/png"),),
        body=b"\x89PNG\r\n\x1a\n\xff\xfe",
        elapsed=0.01,
        attempts=1,
    )
    path = tmp_path / "image.png"
    save_body(str(path), outcome.body)

    assert path.read_bytes() == render(outcome, OutputFormat.BODY_ONLY)
