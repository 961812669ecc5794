"""
Request tracing side channel.

The executor and builder report lifecycle events here instead of
printing. The base Tracer only logs; ConsoleTracer also writes a
wire-style dump for --verbose.
"""

import logging

import httpx
from rich.console import Console

from httpcall.exceptions import TransportError
from httpcall.models import Failure, Outcome, Success

logger = logging.getLogger(__name__)


def format_duration(seconds: float) -> str:
    """Format a duration as whole milliseconds, e.g. '123ms'."""
    return f"{round(seconds * 1000)}ms"


def _decode(value: bytes) -> str:
    return value.decode("latin-1")


class Tracer:
    """Receives request lifecycle events. Logs only."""

    def request(self, request: httpx.Request) -> None:
        logger.debug(f"Prepared {request.method} {request.url}")

    def attempt_started(self, attempt: int, max_attempts: int) -> None:
        logger.debug(f"Attempt {attempt}/{max_attempts}")

    def attempt_failed(
        self,
        attempt: int,
        max_attempts: int,
        error: TransportError,
        retry_in: float | None,
    ) -> None:
        if retry_in is None:
            logger.warning(f"Attempt {attempt}/{max_attempts} failed: {error}")
        else:
            logger.warning(
                f"Attempt {attempt}/{max_attempts} failed: {error}; "
                f"retrying in {retry_in:g}s"
            )

    def finished(self, outcome: Outcome) -> None:
        if isinstance(outcome, Success):
            logger.debug(
                f"{outcome.status} in {format_duration(outcome.elapsed)} "
                f"after {outcome.attempts} attempt(s)"
            )
        else:
            logger.debug(f"Gave up after {outcome.attempts} attempt(s)")


class ConsoleTracer(Tracer):
    """Tracer that also dumps the request and timing to a console."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console(
            highlight=False, markup=False, emoji=False, soft_wrap=True
        )

    def request(self, request: httpx.Request) -> None:
        super().request(request)
        self.console.print(f"> {request.method} {request.url}")
        for name, value in request.headers.raw:
            self.console.print(f"> {_decode(name)}: {_decode(value)}")
        self.console.print(">")
        if request.content:
            body = request.content.decode("utf-8", errors="replace")
            for line in body.splitlines():
                self.console.print(f"> {line}")
        self.console.print()

    def attempt_failed(
        self,
        attempt: int,
        max_attempts: int,
        error: TransportError,
        retry_in: float | None,
    ) -> None:
        super().attempt_failed(attempt, max_attempts, error, retry_in)
        line = f"* Attempt {attempt}/{max_attempts} failed: {error}"
        if retry_in is not None:
            line += f" (retrying in {retry_in:g}s)"
        self.console.print(line)

    def finished(self, outcome: Outcome) -> None:
        super().finished(outcome)
        if isinstance(outcome, Failure):
            return
        self.console.print(
            f"* Completed in {format_duration(outcome.elapsed)} "
            f"after {outcome.attempts} attempt(s)"
        )
        self.console.print()
