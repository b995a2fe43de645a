"""RequestContext: per-request state container."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from starlette.requests import Request
from starlette.types import Receive

if TYPE_CHECKING:
    from fastapi_request_context.body import BodyReplay


@dataclass(frozen=True)
class LoginUser:
    """Verified caller identity. Resolution never yields ``id == 0``."""

    id: int


@dataclass(frozen=True)
class TokenPayload:
    """Claims decoded from a verified token."""

    user_id: int


@dataclass
class RequestContext:
    """Per-request state shared by the body cache, binder, recorder and logger.

    Created once per request and dropped when the request finishes.
    """

    request: Request
    start_time: float = field(default_factory=time.perf_counter)
    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    cached_body: bytes | None = None
    user: LoginUser | None = None
    state: dict[str, Any] = field(default_factory=dict)
    _last_response: Any = field(default=None, init=False, repr=False)
    _has_response: bool = field(default=False, init=False, repr=False)
    _replay: BodyReplay | None = field(default=None, init=False, repr=False)

    @property
    def last_response(self) -> Any:
        return self._last_response

    @property
    def has_response(self) -> bool:
        return self._has_response

    @property
    def receive(self) -> Receive:
        """Receive channel downstream apps should read the body from."""
        if self._replay is not None:
            return self._replay
        return self.request.receive

    def record_response(self, payload: Any) -> None:
        self._last_response = payload
        self._has_response = True
