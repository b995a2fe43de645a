"""Request logger: one structured record per API call, crashes included."""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Iterable
from typing import Any
from urllib.parse import parse_qsl

from starlette.requests import Request

from fastapi_request_context.binding import (
    QUERY_METHODS,
    content_type,
    multi_items_to_dict,
)
from fastapi_request_context.body import raw_body
from fastapi_request_context.context import RequestContext
from fastapi_request_context.exceptions import IdentityError
from fastapi_request_context.identity import IdentityResolver

ACCESS_LOGGER_NAME = "fastapi_request_context.access"

REDACTED = "***"
DEFAULT_REDACT_KEYS = frozenset(
    {
        "password",
        "passwd",
        "secret",
        "token",
        "access_token",
        "refresh_token",
        "authorization",
    }
)


def client_ip(request: Request) -> str:
    """Client address, preferring proxy headers over the socket peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    if request.client is not None:
        return request.client.host
    return ""


def request_uri(request: Request) -> str:
    """Path and query as sent by the client, percent-escapes kept."""
    raw_path = request.scope.get("raw_path")
    if raw_path:
        path = raw_path.split(b"?", 1)[0].decode("latin-1")
    else:
        path = request.url.path
    query = request.url.query
    return f"{path}?{query}" if query else path


def format_latency(seconds: float) -> str:
    return f"{seconds * 1000:.3f}ms"


class RequestLogger:
    """Builds and emits the per-request ``api``/``panic`` log records.

    The record fields are: uid, query (sanitized request payload),
    response, method, uri, latency, ip and type.
    """

    def __init__(
        self,
        resolver: IdentityResolver | None = None,
        *,
        logger: logging.Logger | None = None,
        redact_keys: Iterable[str] = DEFAULT_REDACT_KEYS,
    ) -> None:
        self._resolver = resolver
        self._logger = logger or logging.getLogger(ACCESS_LOGGER_NAME)
        self._redact_keys = frozenset(k.lower() for k in redact_keys)

    def log_completion(self, ctx: RequestContext) -> None:
        fields = self._fields(ctx, "api")
        self._logger.info(
            "api log: %s | %s |t=%s | %s",
            fields["method"],
            fields["uri"],
            fields["latency"],
            fields["ip"],
            extra=fields,
        )

    def log_panic(self, ctx: RequestContext, exc: BaseException) -> None:
        fields = self._fields(ctx, "panic")
        self._logger.error(
            "--panic: %s | %s %s",
            exc,
            fields["method"],
            fields["uri"],
            extra=fields,
            exc_info=exc,
        )

    def _fields(self, ctx: RequestContext, record_type: str) -> dict[str, Any]:
        request = ctx.request
        return {
            "uid": self._uid(ctx),
            "query": self._redact(self._request_payload(ctx)),
            "response": ctx.last_response if ctx.has_response else {},
            "method": request.method,
            "uri": request_uri(request),
            "latency": format_latency(time.perf_counter() - ctx.start_time),
            "ip": client_ip(request),
            "type": record_type,
        }

    def _uid(self, ctx: RequestContext) -> int:
        if self._resolver is None:
            return 0
        try:
            return self._resolver.identity_for(ctx).id
        except IdentityError:
            return 0

    def _request_payload(self, ctx: RequestContext) -> Any:
        request = ctx.request
        if request.method in QUERY_METHODS:
            return multi_items_to_dict(request.query_params.multi_items())

        body = raw_body(ctx)
        if not body:
            return {}

        ctype = content_type(ctx)
        try:
            if ctype == "application/x-www-form-urlencoded":
                return multi_items_to_dict(
                    parse_qsl(body.decode("utf-8"), keep_blank_values=True)
                )
            if ctype == "multipart/form-data":
                return {}
            parsed = json.loads(body)
        except ValueError:
            return {}
        return parsed if isinstance(parsed, dict) else {}

    def _redact(self, value: Any) -> Any:
        if isinstance(value, dict):
            return {
                k: REDACTED if str(k).lower() in self._redact_keys else self._redact(v)
                for k, v in value.items()
            }
        if isinstance(value, list):
            return [self._redact(v) for v in value]
        return value
