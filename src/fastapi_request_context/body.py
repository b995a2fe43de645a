"""Body cache: read the transport body once, replay it on demand."""

from __future__ import annotations

import json
import logging

from fastapi.encoders import jsonable_encoder
from starlette.requests import Request
from starlette.types import Message, Receive

from fastapi_request_context.context import RequestContext

logger = logging.getLogger(__name__)


class BodyReplay:
    """ASGI receive channel serving a cached body.

    The first call after construction or ``rewind()`` yields the whole body
    as one ``http.request`` message. Later calls fall through to the
    transport so disconnects are still observed.
    """

    def __init__(self, body: bytes, receive: Receive) -> None:
        self._body = body
        self._receive = receive
        self._delivered = False

    @property
    def drained(self) -> bool:
        return self._delivered

    def rewind(self, body: bytes | None = None) -> None:
        if body is not None:
            self._body = body
        self._delivered = False

    async def __call__(self) -> Message:
        if not self._delivered:
            self._delivered = True
            return {"type": "http.request", "body": self._body, "more_body": False}
        return await self._receive()


def raw_body(ctx: RequestContext) -> bytes:
    """The cached body as bytes; empty when nothing was captured."""
    body = ctx.cached_body
    if body is None:
        return b""
    if not isinstance(body, bytes | bytearray):
        # a handler stashed a parsed value in place of the raw bytes
        return json.dumps(jsonable_encoder(body)).encode()
    return bytes(body)


async def capture_once(ctx: RequestContext) -> None:
    """Read the raw body into ``ctx.cached_body``. No-op once captured."""
    if ctx.cached_body is not None:
        return

    body = await ctx.request.body()
    ctx.cached_body = body
    ctx._replay = BodyReplay(body, ctx.request.receive)
    ctx.request = Request(ctx.request.scope, receive=ctx._replay)
    logger.debug("captured request body (%d bytes)", len(body))


async def ensure_readable(ctx: RequestContext) -> None:
    """Give ``ctx.request`` a readable stream backed by the cached body."""
    if ctx.cached_body is None:
        await capture_once(ctx)
        return

    replay = ctx._replay
    if replay is not None and not replay.drained:
        return

    body = raw_body(ctx)
    if replay is None:
        replay = BodyReplay(body, ctx.request.receive)
        ctx._replay = replay
    else:
        replay.rewind(body)
    ctx.request = Request(ctx.request.scope, receive=replay)
