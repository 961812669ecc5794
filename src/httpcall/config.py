"""
Configuration management for httpcall.

Loads client defaults from environment variables or a .env file.
Explicit command-line flags always win over these values.
"""

import os
from pathlib import Path
from dataclasses import dataclass

from dotenv import load_dotenv

from httpcall.models import (
    DEFAULT_RETRIES,
    DEFAULT_RETRY_DELAY,
    DEFAULT_TIMEOUT,
    OutputFormat,
)


ENV_LOCATIONS = [
    Path.home() / ".httpcall" / ".env",
    Path.home() / ".config" / "httpcall" / ".env",
    Path.cwd() / ".env",
]


def load_env_file() -> Path | None:
    """Load the first .env file found in the common locations."""
    for env_path in ENV_LOCATIONS:
        if env_path.exists():
            load_dotenv(env_path)
            return env_path
    return None


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name, "")
    try:
        return int(value)
    except ValueError:
        return default


@dataclass
class ClientConfig:
    """Default request settings."""

    timeout: int = DEFAULT_TIMEOUT
    retries: int = DEFAULT_RETRIES
    retry_delay: int = DEFAULT_RETRY_DELAY
    output: OutputFormat = OutputFormat.PRETTY
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Load configuration from environment variables."""
        try:
            output = OutputFormat(os.getenv("HTTPCALL_OUTPUT", OutputFormat.PRETTY.value))
        except ValueError:
            output = OutputFormat.PRETTY

        return cls(
            timeout=_env_int("HTTPCALL_TIMEOUT", DEFAULT_TIMEOUT),
            retries=_env_int("HTTPCALL_RETRIES", DEFAULT_RETRIES),
            retry_delay=_env_int("HTTPCALL_RETRY_DELAY", DEFAULT_RETRY_DELAY),
            output=output,
            log_level=os.getenv("HTTPCALL_LOG_LEVEL", "WARNING").upper(),
        )


# Global config instance
_config: ClientConfig | None = None


def get_config() -> ClientConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        load_env_file()
        _config = ClientConfig.from_env()
    return _config


def set_config(config: ClientConfig | None) -> None:
    """Set (or with None, reset) the global configuration instance."""
    global _config
    _config = config
