"""
Best-effort persistence of the raw response body.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class SaveResult:
    """Result of writing a response body to disk."""
    path: str
    size: int = 0
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None


def save_body(path: str, body: bytes) -> SaveResult:
    """Write body bytes verbatim. Failures are returned, not raised."""
    result = SaveResult(path=path)
    try:
        with open(Path(path), "wb") as f:
            f.write(body)
        result.size = len(body)
        logger.debug(f"Saved {len(body)} bytes to {path}")
    except OSError as e:
        result.error = f"Could not save response to {path}: {e}"
        logger.warning(result.error)
    return result
