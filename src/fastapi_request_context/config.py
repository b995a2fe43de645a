from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal

LogLevel = Literal["debug", "info", "warning", "error"]

_TRUTHY = ("1", "true", "yes", "on")
_FALSY = ("0", "false", "no", "off", "")


def _getenv(name: str, default: str) -> str:
    return os.environ.get(name, default).strip()


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, read once at startup and never mutated."""

    token_secret: str
    port: int = 8000
    token_header: str = "Authorization"
    token_scheme: str = "Bearer"
    log_level: LogLevel = "info"
    log_json: bool = False


def load_settings() -> Settings:
    token_secret = _getenv("TOKEN_SECRET", "")
    port_raw = _getenv("PORT", "8000")
    log_level_raw = _getenv("LOG_LEVEL", "info").lower()
    log_json_raw = _getenv("LOG_JSON", "false").lower()

    if not token_secret:
        raise ValueError("TOKEN_SECRET must be set to a non-empty value")

    try:
        port = int(port_raw)
    except ValueError:
        raise ValueError(f"PORT must be an integer (got {port_raw!r})") from None
    if not 1 <= port <= 65535:
        raise ValueError(f"PORT must be between 1 and 65535 (got {port})")

    if log_level_raw not in ("debug", "info", "warning", "error"):
        raise ValueError(
            f"LOG_LEVEL must be debug|info|warning|error (got {log_level_raw!r})"
        )

    if log_json_raw in _TRUTHY:
        log_json = True
    elif log_json_raw in _FALSY:
        log_json = False
    else:
        raise ValueError(f"LOG_JSON must be a boolean (got {log_json_raw!r})")

    return Settings(  # type: ignore[arg-type]
        token_secret=token_secret,
        port=port,
        token_header=_getenv("TOKEN_HEADER", "Authorization") or "Authorization",
        token_scheme=_getenv("TOKEN_SCHEME", "Bearer"),
        log_level=log_level_raw,
        log_json=log_json,
    )
