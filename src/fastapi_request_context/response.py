"""Response recording: write JSON and remember what was sent for the log."""

from __future__ import annotations

from typing import Any, NoReturn

from fastapi.encoders import jsonable_encoder
from starlette.responses import JSONResponse

from fastapi_request_context.context import RequestContext
from fastapi_request_context.exceptions import ResponseAborted

# Envelopes, error envelopes included, always go out as 200.
STATUS_OK = 200


def _record(ctx: RequestContext, payload: Any) -> JSONResponse:
    content = jsonable_encoder(payload)
    ctx.record_response(content)
    return JSONResponse(content, status_code=STATUS_OK)


def write_success(ctx: RequestContext, payload: Any) -> JSONResponse:
    """Record ``payload`` as the response and return it for the handler to send."""
    return _record(ctx, payload)


def write_abort(ctx: RequestContext, payload: Any) -> NoReturn:
    """Record ``payload`` and stop the handler chain with it as the response."""
    raise ResponseAborted(_record(ctx, payload))
