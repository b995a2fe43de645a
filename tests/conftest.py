"""Shared pytest fixtures for fastapi-request-context tests."""

from __future__ import annotations

import logging
from typing import Any

import jwt
import pytest
from starlette.requests import Request

from fastapi_request_context.identity import IdentityResolver
from fastapi_request_context.logger import RequestLogger

SECRET = "test-secret-key-with-at-least-32-bytes!"
TEST_LOGGER_NAME = "tests.requests"


def mint_token(uid: Any = 42, secret: str = SECRET, **claims: Any) -> str:
    """Create an HS256 JWT carrying ``uid``."""
    payload = {"uid": uid, **claims}
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture
def make_request() -> Any:
    """Factory for Starlette Request objects with an optional body.

    The receive channel yields the body once, then ``http.disconnect``,
    like a real single-read transport stream. ``request.receive.calls``
    counts how many times it was read.
    """

    def _make(
        method: str = "GET",
        path: str = "/",
        headers: dict[str, str] | None = None,
        query_string: str = "",
        body: bytes = b"",
        client: tuple[str, int] | None = ("127.0.0.1", 50000),
    ) -> Request:
        scope: dict[str, Any] = {
            "type": "http",
            "method": method,
            "path": path,
            "query_string": query_string.encode(),
            "headers": [
                (k.lower().encode(), v.encode()) for k, v in (headers or {}).items()
            ],
            "root_path": "",
            "client": client,
        }

        class _Receive:
            def __init__(self) -> None:
                self.calls = 0

            async def __call__(self) -> dict[str, Any]:
                self.calls += 1
                if self.calls == 1:
                    return {"type": "http.request", "body": body, "more_body": False}
                return {"type": "http.disconnect"}

        return Request(scope, receive=_Receive())

    return _make


@pytest.fixture
def token() -> str:
    return mint_token(uid=42)


@pytest.fixture
def resolver() -> IdentityResolver:
    return IdentityResolver(SECRET)


@pytest.fixture
def test_logger() -> logging.Logger:
    return logging.getLogger(TEST_LOGGER_NAME)


@pytest.fixture
def request_logger(
    resolver: IdentityResolver, test_logger: logging.Logger
) -> RequestLogger:
    return RequestLogger(resolver, logger=test_logger)


@pytest.fixture
def secret() -> str:
    return SECRET


@pytest.fixture
def mint() -> Any:
    """The ``mint_token`` helper, for tests needing custom claims."""
    return mint_token
