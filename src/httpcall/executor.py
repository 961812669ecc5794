"""
Request execution with timeout, redirect and retry policy.

Each attempt owns its response: it is opened in streaming mode, read
exactly once, and closed on every exit path. The retry loop carries no
state between attempts and returns the first Success or the last Failure.

The send-and-read of an attempt runs on a daemon worker thread so the
caller's wait is bounded by the attempt timeout as a whole, not per
socket operation. An abandoned worker stops at its next chunk.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import logging
import threading
import time
from contextlib import closing
from typing import Callable

import httpx

from httpcall.exceptions import InvalidInputError, TransportError
from httpcall.models import (
    DEFAULT_RETRIES,
    DEFAULT_RETRY_DELAY,
    DEFAULT_TIMEOUT,
    Failure,
    Outcome,
    RequestSpec,
    Success,
)
from httpcall.trace import Tracer

logger = logging.getLogger(__name__)


class _AttemptWorker(threading.Thread):
    """Runs one send-and-read cycle and keeps its result or error."""

    def __init__(self, work: Callable[[], Success]):
        super().__init__(name="httpcall-attempt", daemon=True)
        self._work = work
        self.result: Success | None = None
        self.error: Exception | None = None

    def run(self) -> None:
        try:
            self.result = self._work()
        except Exception as e:
            self.error = e


class Executor:
    """Runs one request up to retries + 1 times."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        follow_redirects: bool = True,
        retries: int = DEFAULT_RETRIES,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        *,
        transport: httpx.BaseTransport | None = None,
        tracer: Tracer | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        if timeout <= 0:
            raise InvalidInputError(f"Timeout must be positive, got {timeout}")
        if retries < 0:
            raise InvalidInputError(f"Retries must not be negative, got {retries}")
        if retry_delay < 0:
            raise InvalidInputError(f"Retry delay must not be negative, got {retry_delay}")

        self.timeout = timeout
        self.follow_redirects = follow_redirects
        self.retries = retries
        self.retry_delay = retry_delay
        self.transport = transport
        self.tracer = tracer or Tracer()
        self._sleep = sleep
        self._clock = clock

    @classmethod
    def from_spec(cls, spec: RequestSpec, **kwargs) -> "Executor":
        """Create an executor configured from a request spec."""
        return cls(
            timeout=spec.timeout,
            follow_redirects=spec.follow_redirects,
            retries=spec.retries,
            retry_delay=spec.retry_delay,
            **kwargs,
        )

    @property
    def max_attempts(self) -> int:
        return self.retries + 1

    def _make_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout),
            follow_redirects=self.follow_redirects,
            transport=self.transport,
        )

    def _timed_out(self) -> TransportError:
        return TransportError(f"Request timed out after {self.timeout}s")

    def execute(self, request: httpx.Request) -> Outcome:
        """Send the request, retrying transport failures.

        Never raises for network problems; they come back as a Failure.
        """
        outcome: Outcome | None = None

        with self._make_client() as client:
            for attempt in range(1, self.max_attempts + 1):
                self.tracer.attempt_started(attempt, self.max_attempts)
                outcome = self._attempt(client, request, attempt)
                if isinstance(outcome, Success):
                    break

                retry_in = self.retry_delay if attempt < self.max_attempts else None
                self.tracer.attempt_failed(attempt, self.max_attempts, outcome.error, retry_in)
                if retry_in is not None:
                    self._sleep(retry_in)

        self.tracer.finished(outcome)
        return outcome

    def _attempt(self, client: httpx.Client, request: httpx.Request, attempt: int) -> Outcome:
        """One send-and-read cycle, waited on for at most the timeout."""
        abandoned = threading.Event()
        worker = _AttemptWorker(
            lambda: self._send_and_read(client, request, attempt, abandoned)
        )
        worker.start()
        worker.join(self.timeout)

        if worker.is_alive():
            abandoned.set()
            logger.debug(f"Abandoned attempt {attempt} after {self.timeout}s")
            return Failure(error=self._timed_out(), attempts=attempt)
        if worker.error is not None:
            return Failure(error=self._transport_error(worker.error), attempts=attempt)
        return worker.result

    def _transport_error(self, e: Exception) -> TransportError:
        """Map an attempt exception to a TransportError; re-raise anything else."""
        if isinstance(e, TransportError):
            return e
        if isinstance(e, httpx.TimeoutException):
            error = self._timed_out()
        elif isinstance(e, httpx.ConnectError):
            error = TransportError(f"Connection failed: {e}")
        elif isinstance(e, httpx.HTTPError):
            error = TransportError(f"{type(e).__name__}: {e}")
        else:
            raise e
        error.__cause__ = e
        return error

    def _send_and_read(
        self,
        client: httpx.Client,
        request: httpx.Request,
        attempt: int,
        abandoned: threading.Event,
    ) -> Success:
        """Send, read the whole body once, and release the response."""
        started = self._clock()
        deadline = started + self.timeout

        response = client.send(request, stream=True)
        with closing(response):
            chunks = []
            for chunk in response.iter_bytes():
                if abandoned.is_set() or self._clock() > deadline:
                    raise self._timed_out()
                chunks.append(chunk)
            if self._clock() > deadline:
                raise self._timed_out()
            body = b"".join(chunks)
        elapsed = self._clock() - started

        return Success(
            status_code=response.status_code,
            status_text=response.reason_phrase,
            headers=tuple(
                (name.decode("latin-1"), value.decode("latin-1"))
                for name, value in response.headers.raw
            ),
            body=body,
            elapsed=elapsed,
            attempts=attempt,
            url=str(response.url),
        )
