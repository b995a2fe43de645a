"""Logging configuration for services using the request context layer.

Two formatters:

  _ContainerFormatter: human-readable, single-line, for local dev.

  _JsonFormatter: one JSON object per line, for log aggregation. The
    request-log fields attached by RequestLogger (uid, query, response,
    method, uri, latency, ip, type) become top-level keys, so records can
    be filtered on them directly, e.g. ``type == "panic" AND uid == 42``.
"""

from __future__ import annotations

import json
import logging
import sys


_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"


class _MillisFormatter(logging.Formatter):
    """Formatter whose timestamps carry milliseconds before the offset."""

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        base = super().formatTime(record, datefmt)
        # .NNN goes before the timezone offset (last 5 chars: +0000)
        return f"{base[:-5]}.{int(record.msecs):03d}{base[-5:]}"


class _ContainerFormatter(logging.Formatter):
    """Single-line formatter tuned for container stdout.

    WARNING and above get a ``[filename:lineno]`` suffix. Both layouts are
    fixed at construction, so one instance can serve every thread.
    """

    _BASE_FMT = "%(asctime)s %(levelname)-8s %(name)s  %(message)s"
    _LOC_SUFFIX = "  [%(filename)s:%(lineno)d]"

    def __init__(self) -> None:
        super().__init__(datefmt=_DATEFMT)
        self._plain = _MillisFormatter(self._BASE_FMT, datefmt=_DATEFMT)
        self._located = _MillisFormatter(
            self._BASE_FMT + self._LOC_SUFFIX, datefmt=_DATEFMT
        )

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno >= logging.WARNING:
            return self._located.format(record)
        return self._plain.format(record)


class _JsonFormatter(logging.Formatter):
    """JSON Lines formatter carrying the request-log fields."""

    _CONTEXT_FIELDS = (
        "uid",
        "query",
        "response",
        "method",
        "uri",
        "latency",
        "ip",
        "type",
    )

    def __init__(self) -> None:
        super().__init__(datefmt=_DATEFMT)

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, object] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key in self._CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                log_entry[key] = value

        if record.exc_info and record.exc_info[0] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)

        # ensure_ascii off keeps URIs and payload text unescaped
        return json.dumps(log_entry, default=str, ensure_ascii=False)


def setup_logging(level_name: str, *, json_format: bool = False) -> None:
    """Configure the root logger to write to stdout.

    Args:
        level_name: debug/info/warning/error; unknown names fall back to info.
        json_format: emit JSON lines instead of the human-readable format.
    """
    level = getattr(logging, level_name.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_JsonFormatter() if json_format else _ContainerFormatter())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    for name in ("uvicorn", "uvicorn.access", "uvicorn.error", "httpcore", "httpx"):
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
