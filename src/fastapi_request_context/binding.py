"""Input binding: decode the cached request payload into typed values."""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from functools import lru_cache
from typing import Any, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel, TypeAdapter, ValidationError
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException

from fastapi_request_context.body import ensure_readable, raw_body
from fastapi_request_context.context import RequestContext
from fastapi_request_context.exceptions import (
    InvalidBindTarget,
    MalformedInput,
    RequestParamInvalid,
)

T = TypeVar("T")

# Methods whose input always comes from the query string. Other methods
# read the body by content type and fall back to the query when it is empty.
QUERY_METHODS = frozenset({"GET", "HEAD"})
FORM_CONTENT_TYPES = frozenset(
    {"application/x-www-form-urlencoded", "multipart/form-data"}
)


@runtime_checkable
class Checkable(Protocol):
    """Bound values exposing ``check()`` are self-validated after decoding.

    ``check()`` rejects the value by raising; the exception message becomes
    the ``RequestParamInvalid`` message.
    """

    def check(self) -> None: ...


def content_type(ctx: RequestContext) -> str:
    raw = ctx.request.headers.get("content-type", "")
    return raw.split(";", 1)[0].strip().lower()


def multi_items_to_dict(items: Iterable[tuple[str, Any]]) -> dict[str, Any]:
    """Collapse repeated keys into lists, keep single keys scalar."""
    out: dict[str, Any] = {}
    for key, value in items:
        if key in out:
            existing = out[key]
            if isinstance(existing, list):
                existing.append(value)
            else:
                out[key] = [existing, value]
        else:
            out[key] = value
    return out


@lru_cache(maxsize=256)
def _adapter(target: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target)


def _describe(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "body"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


async def _decode(ctx: RequestContext, adapter: TypeAdapter[Any]) -> Any:
    request = ctx.request
    body = raw_body(ctx)

    if request.method in QUERY_METHODS or not body:
        return adapter.validate_python(
            multi_items_to_dict(request.query_params.multi_items())
        )

    if content_type(ctx) in FORM_CONTENT_TYPES:
        form = await request.form()
        return adapter.validate_python(multi_items_to_dict(form.multi_items()))

    return adapter.validate_json(body)


async def bind(ctx: RequestContext, target: type[T]) -> T:
    """Decode the request payload into a new ``target`` value.

    Safe to call any number of times per request: every call reads the
    cached body, never the exhausted transport stream.
    """
    await ensure_readable(ctx)
    try:
        return await _decode(ctx, _adapter(target))  # type: ignore[no-any-return]
    except ValidationError as exc:
        raise MalformedInput(_describe(exc)) from exc
    except (HTTPException, MultiPartException) as exc:
        detail = getattr(exc, "detail", None) or getattr(exc, "message", str(exc))
        raise MalformedInput(str(detail)) from exc


def is_bind_target(target: Any) -> bool:
    if not isinstance(target, type):
        return False
    return issubclass(target, BaseModel) or dataclasses.is_dataclass(target)


async def bind_validated(ctx: RequestContext, target: type[T]) -> T:
    """Bind into a record type, then run its ``check()`` if it has one."""
    if not is_bind_target(target):
        raise InvalidBindTarget()

    value = await bind(ctx, target)
    if isinstance(value, Checkable):
        try:
            value.check()
        except Exception as exc:
            raise RequestParamInvalid(str(exc)) from exc
    return value
