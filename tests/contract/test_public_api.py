"""Contract tests: verify all public symbols are importable from top-level."""

from __future__ import annotations

import fastapi_request_context

PUBLIC_SYMBOLS = [
    # Context
    "RequestContext",
    "LoginUser",
    "TokenPayload",
    # Body cache
    "BodyReplay",
    "capture_once",
    "ensure_readable",
    # Binding
    "Checkable",
    "bind",
    "bind_validated",
    # Pagination
    "Pager",
    "extract_pager",
    # Responses
    "write_success",
    "write_abort",
    "success",
    "failure",
    "ERR_REQUEST_PARAM",
    "ERR_UNAUTHORIZED",
    "ERR_INTERNAL",
    # Identity
    "IdentityResolver",
    "verify_jwt",
    "require_identity",
    # Logging
    "RequestLogger",
    "RequestContextMiddleware",
    "setup_logging",
    # Wiring and config
    "get_request_context",
    "install_request_context",
    "Settings",
    "load_settings",
    # Exceptions
    "ContextError",
    "IdentityError",
    "MissingToken",
    "InvalidToken",
    "InvalidIdentity",
    "BindError",
    "MalformedInput",
    "InvalidBindTarget",
    "RequestParamInvalid",
    "ResponseAborted",
]


class TestPublicAPIContract:
    def test_all_symbols_importable(self) -> None:
        for symbol in PUBLIC_SYMBOLS:
            assert hasattr(fastapi_request_context, symbol), (
                f"Symbol '{symbol}' not found in fastapi_request_context"
            )

    def test_all_symbols_in_all(self) -> None:
        for symbol in PUBLIC_SYMBOLS:
            assert symbol in fastapi_request_context.__all__, (
                f"Symbol '{symbol}' not in __all__"
            )

    def test_request_context_is_dataclass(self) -> None:
        from dataclasses import fields

        from fastapi_request_context import RequestContext

        field_names = [f.name for f in fields(RequestContext)]
        for name in ("request", "start_time", "cached_body", "user", "state"):
            assert name in field_names

    def test_exception_hierarchy(self) -> None:
        from fastapi_request_context import (
            BindError,
            ContextError,
            IdentityError,
            InvalidBindTarget,
            InvalidIdentity,
            InvalidToken,
            MalformedInput,
            MissingToken,
            RequestParamInvalid,
            ResponseAborted,
        )

        assert issubclass(IdentityError, ContextError)
        assert issubclass(BindError, ContextError)
        for cls in (MissingToken, InvalidToken, InvalidIdentity):
            assert issubclass(cls, IdentityError)
        for cls in (MalformedInput, InvalidBindTarget, RequestParamInvalid):
            assert issubclass(cls, BindError)
        assert not issubclass(ResponseAborted, ContextError)

    def test_require_identity_returns_callable(self) -> None:
        from fastapi_request_context import IdentityResolver, require_identity

        dep = require_identity(IdentityResolver("s3cret"))
        assert callable(dep)
