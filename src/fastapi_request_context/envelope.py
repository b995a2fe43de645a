"""Uniform JSON response envelope: ``{"code", "msg", "data"}``."""

from __future__ import annotations

from typing import Any

CODE_OK = 0
ERR_REQUEST_PARAM = 400
ERR_UNAUTHORIZED = 401
ERR_INTERNAL = 500


def success(data: Any = None, msg: str = "ok") -> dict[str, Any]:
    return {"code": CODE_OK, "msg": msg, "data": data if data is not None else {}}


def failure(code: int, msg: str, data: Any = None) -> dict[str, Any]:
    return {"code": code, "msg": msg, "data": data if data is not None else {}}
