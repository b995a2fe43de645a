"""FastAPI wiring: context dependency, identity guard and app installation."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from fastapi import Depends, FastAPI
from starlette.requests import Request

from fastapi_request_context.body import capture_once
from fastapi_request_context.config import Settings
from fastapi_request_context.context import LoginUser, RequestContext
from fastapi_request_context.identity import IdentityResolver, VerifyCallback
from fastapi_request_context.logger import RequestLogger
from fastapi_request_context.middleware import STATE_KEY, RequestContextMiddleware


async def get_request_context(request: Request) -> RequestContext:
    """Return the request's RequestContext.

    The middleware normally creates it. Without the middleware one is built
    on first use, which still gives body replay but no request log.
    """
    ctx: RequestContext | None = getattr(request.state, STATE_KEY, None)
    if ctx is None:
        ctx = RequestContext(request=request)
        await capture_once(ctx)
        setattr(request.state, STATE_KEY, ctx)
    return ctx


def require_identity(
    resolver: IdentityResolver,
) -> Callable[..., Awaitable[LoginUser]]:
    """Dependency factory: abort with an unauthorized envelope before the
    handler runs when the caller has no valid token."""

    async def dependency(
        ctx: RequestContext = Depends(get_request_context),  # noqa: B008
    ) -> LoginUser:
        user = resolver.must_resolve_identity(ctx)
        ctx.user = user
        return user

    return dependency


def install_request_context(
    app: FastAPI,
    settings: Settings,
    *,
    verify: VerifyCallback | None = None,
    logger: logging.Logger | None = None,
) -> IdentityResolver:
    """Build the resolver and request logger from settings and add the middleware.

    Returns the resolver so routes can use it with ``require_identity``.
    """
    resolver = IdentityResolver(
        settings.token_secret,
        verify=verify,
        header=settings.token_header,
        scheme=settings.token_scheme,
    )
    request_logger = RequestLogger(resolver, logger=logger)
    app.add_middleware(RequestContextMiddleware, request_logger=request_logger)
    return resolver
