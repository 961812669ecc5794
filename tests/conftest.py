import logging
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import httpx
import pytest

from httpcall import config


ENVIRONMENT_VARIABLES = {
    "HTTPCALL_TIMEOUT",
    "HTTPCALL_RETRIES",
    "HTTPCALL_RETRY_DELAY",
    "HTTPCALL_OUTPUT",
    "HTTPCALL_LOG_LEVEL",
}


@pytest.fixture(scope="function", autouse=True)
def clean_environ(monkeypatch):
    """Keeps HTTPCALL_* variables and .env files out of every test."""
    for name in ENVIRONMENT_VARIABLES:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config, "ENV_LOCATIONS", [])
    config.set_config(None)
    yield
    config.set_config(None)


@pytest.fixture(scope="function", autouse=True)
def reset_logging():
    """The CLI installs handlers and disables propagation; undo that."""
    yield
    logger = logging.getLogger("httpcall")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


class FakeClock:
    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sleeps():
    """Records requested sleeps instead of sleeping."""
    calls: list[float] = []
    return calls


class Recorder:
    """MockTransport handler wrapper that counts calls and keeps requests."""

    def __init__(self, handler):
        self.handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def calls(self) -> int:
        return len(self.requests)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def recorder():
    return Recorder


def always_timeout(request: httpx.Request) -> httpx.Response:
    raise httpx.ReadTimeout("timed out", request=request)


def always_refused(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("[Errno 111] Connection refused", request=request)


def ok_json(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, headers={"X-Test": "1"}, content=b'{"a":1}')


def redirecting(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/start":
        return httpx.Response(302, headers={"Location": "http://example.test/final"})
    return httpx.Response(200, content=b"final")


class DrippingHandler(BaseHTTPRequestHandler):
    """Sends headers and body each after a pause; /fast answers at once."""

    pause = 0.8

    def do_GET(self):
        body = b"late"
        if self.path != "/fast":
            time.sleep(self.pause)
        self.send_response(200)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.flush()
        if self.path != "/fast":
            time.sleep(self.pause)
        try:
            self.wfile.write(body)
        except OSError:
            pass

    def log_message(self, format, *args):
        pass


@pytest.fixture
def slow_server():
    """A local HTTP server on 127.0.0.1; yields its base URL."""
    server = ThreadingHTTPServer(("127.0.0.1", 0), DrippingHandler)
    server.daemon_threads = True
    server.block_on_close = False
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    host, port = server.server_address[:2]
    yield f"http://{host}:{port}"
    server.shutdown()
    server.server_close()
