"""Client configuration resolved from arguments, env vars and `.env`."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from .connection import DEFAULT_GAME_PATH
from .env_utils import getenv_any, getenv_bool, getenv_float

DEFAULT_HTTP_URL = "http://localhost:3030"


def http_to_ws_url(http_url: str) -> str:
    """Derive the websocket base URL from the HTTP one."""
    if http_url.startswith("https://"):
        return "wss://" + http_url[len("https://"):]
    if http_url.startswith("http://"):
        return "ws://" + http_url[len("http://"):]
    return http_url


@dataclass(frozen=True)
class ClientConfig:
    """Runtime configuration for sessions and swarms."""

    http_url: str = DEFAULT_HTTP_URL
    ws_url: str | None = None
    path_template: str = DEFAULT_GAME_PATH
    open_timeout_sec: float = 10.0
    http_timeout_sec: float = 15.0
    prime_on_open: bool = False
    event_log_dir: str | Path | None = None
    log_level: str = "INFO"

    @property
    def resolved_ws_url(self) -> str:
        return self.ws_url or http_to_ws_url(self.http_url)

    def with_overrides(self, **overrides: Any) -> "ClientConfig":
        """Return a copy with every non-None override applied."""
        return replace(self, **{key: value for key, value in overrides.items() if value is not None})

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Build a config from ``TRIVIA_*`` environment variables."""
        return cls(
            http_url=getenv_any("TRIVIA_HTTP_URL", default=DEFAULT_HTTP_URL) or DEFAULT_HTTP_URL,
            ws_url=getenv_any("TRIVIA_WS_URL"),
            path_template=getenv_any("TRIVIA_GAME_PATH", default=DEFAULT_GAME_PATH) or DEFAULT_GAME_PATH,
            open_timeout_sec=getenv_float("TRIVIA_OPEN_TIMEOUT", default=10.0),
            http_timeout_sec=getenv_float("TRIVIA_HTTP_TIMEOUT", default=15.0),
            prime_on_open=getenv_bool("TRIVIA_PRIME_ON_OPEN"),
            event_log_dir=getenv_any("TRIVIA_EVENT_LOG_DIR"),
            log_level=(getenv_any("TRIVIA_LOG_LEVEL", default="INFO") or "INFO").upper(),
        )
