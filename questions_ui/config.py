"""Environment-driven configuration for questions-ui."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

DEFAULT_PORT = 3847
PORT_RANGE_START = 3847
PORT_RANGE_END = 3947  # inclusive
DEFAULT_TIMEOUT_MS = 600_000  # 10 minutes
DEFAULT_POLL_INTERVAL = 0.5  # seconds
DEFAULT_HOST = "127.0.0.1"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the web server and the wait loop."""

    port: int = DEFAULT_PORT
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    no_open: bool = False
    poll_interval: float = DEFAULT_POLL_INTERVAL
    host: str = DEFAULT_HOST
    log_level: str = "INFO"


def load_settings(env: dict[str, str] | None = None) -> Settings:
    """Build Settings from QUESTIONS_UI_* environment variables.

    Args:
        env: Mapping to read from (defaults to os.environ)

    Returns:
        Settings instance
    """
    env = os.environ if env is None else env
    return Settings(
        port=int(env.get("QUESTIONS_UI_PORT", str(DEFAULT_PORT))),
        timeout_ms=int(env.get("QUESTIONS_UI_TIMEOUT", str(DEFAULT_TIMEOUT_MS))),
        no_open=env.get("QUESTIONS_UI_NO_OPEN") == "1",
        poll_interval=float(env.get("QUESTIONS_UI_POLL_INTERVAL", str(DEFAULT_POLL_INTERVAL))),
        log_level=env.get("QUESTIONS_UI_LOG_LEVEL", "INFO").upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging to stderr.

    stdout is reserved for the MCP stdio transport. Replaces any handlers
    installed earlier, e.g. by FastMCP at import time.
    """
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)
