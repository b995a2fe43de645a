"""RequestContextMiddleware: context lifecycle and crash recovery boundary."""

from __future__ import annotations

import logging

from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from fastapi_request_context.body import capture_once
from fastapi_request_context.context import RequestContext
from fastapi_request_context.envelope import ERR_INTERNAL, failure
from fastapi_request_context.exceptions import ResponseAborted
from fastapi_request_context.logger import RequestLogger

logger = logging.getLogger(__name__)

STATE_KEY = "request_context"
INTERNAL_ERROR_MESSAGE = "internal server error"


class RequestContextMiddleware:
    """Pure ASGI middleware wrapping every HTTP request in a RequestContext.

    For each request:
    1. Creates the context and stores it in ``request.state``
    2. Captures the body once and hands the app a replaying receive channel
    3. Sends the response carried by ``ResponseAborted``
    4. On any other exception, logs a panic record and sends the generic
       error envelope instead of letting the exception escape
    5. Logs the completion record after the response has been sent
    """

    def __init__(self, app: ASGIApp, *, request_logger: RequestLogger) -> None:
        self.app = app
        self.request_logger = request_logger

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        ctx = RequestContext(request=Request(scope, receive=receive))
        scope.setdefault("state", {})[STATE_KEY] = ctx

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await capture_once(ctx)
            await self.app(scope, ctx.receive, send_wrapper)
        except ResponseAborted as exc:
            if response_started:
                logger.warning("Abort raised after response started; dropped")
            else:
                await exc.response(scope, ctx.receive, send_wrapper)
        except Exception as exc:
            self.request_logger.log_panic(ctx, exc)
            if not response_started:
                response = JSONResponse(failure(ERR_INTERNAL, INTERNAL_ERROR_MESSAGE))
                await response(scope, ctx.receive, send_wrapper)
            return

        self.request_logger.log_completion(ctx)
