"""Tests for setup_logging and the two formatters."""

from __future__ import annotations

import json
import logging
import re
import sys

from fastapi_request_context.log_config import (
    _ContainerFormatter,
    _JsonFormatter,
    setup_logging,
)


def _record(level: int = logging.INFO, msg: str = "hello", **extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test.logger",
        level=level,
        pathname="test.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_setup_logging_sets_root_level() -> None:
    setup_logging("debug")
    assert logging.getLogger().level == logging.DEBUG
    setup_logging("warning")
    assert logging.getLogger().level == logging.WARNING


def test_setup_logging_defaults_to_info_for_unknown_level() -> None:
    setup_logging("nonexistent")
    assert logging.getLogger().level == logging.INFO


def test_setup_logging_selects_json_formatter() -> None:
    setup_logging("info", json_format=True)
    handler = logging.getLogger().handlers[0]
    assert isinstance(handler.formatter, _JsonFormatter)
    setup_logging("info")


def test_json_formatter_produces_valid_json() -> None:
    parsed = json.loads(_JsonFormatter().format(_record()))
    assert parsed["level"] == "INFO"
    assert parsed["logger"] == "test.logger"
    assert parsed["message"] == "hello"
    assert "timestamp" in parsed


def test_json_formatter_lifts_request_fields() -> None:
    record = _record(
        uid=42,
        query={"name": "a"},
        response={"ok": True},
        method="POST",
        uri="/items?x=1&y=2",
        latency="1.234ms",
        ip="127.0.0.1",
        type="api",
    )
    parsed = json.loads(_JsonFormatter().format(record))
    assert parsed["uid"] == 42
    assert parsed["query"] == {"name": "a"}
    assert parsed["response"] == {"ok": True}
    assert parsed["uri"] == "/items?x=1&y=2"
    assert parsed["type"] == "api"


def test_json_formatter_keeps_zero_uid() -> None:
    parsed = json.loads(_JsonFormatter().format(_record(uid=0)))
    assert parsed["uid"] == 0


def test_json_formatter_includes_exception_info() -> None:
    formatter = _JsonFormatter()
    try:
        raise ValueError("test error")
    except ValueError:
        record = _record(level=logging.ERROR)
        record.exc_info = sys.exc_info()
        output = formatter.format(record)
    assert "ValueError: test error" in json.loads(output)["exception"]


def test_container_formatter_location_only_for_warnings() -> None:
    fmt = _ContainerFormatter()
    assert "[test.py:" not in fmt.format(_record(logging.INFO))
    assert "[test.py:42]" in fmt.format(_record(logging.WARNING))


def test_container_formatter_layout_does_not_leak_between_levels() -> None:
    fmt = _ContainerFormatter()
    fmt.format(_record(logging.ERROR))
    assert "[test.py:" not in fmt.format(_record(logging.INFO))
    assert "[test.py:42]" in fmt.format(_record(logging.WARNING))


def test_container_formatter_timestamp_has_millis() -> None:
    record = _record()
    record.msecs = 7.9
    line = _ContainerFormatter().format(record)
    timestamp = line.split(" ", 1)[0]
    assert re.fullmatch(r"\d{4}-\d\d-\d\dT\d\d:\d\d:\d\d\.007[+-]\d{4}", timestamp)
