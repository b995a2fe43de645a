"""ContextError hierarchy for identity and binding failures."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fastapi_request_context.envelope import (
    ERR_REQUEST_PARAM,
    ERR_UNAUTHORIZED,
    failure,
)

if TYPE_CHECKING:
    from starlette.responses import Response


class ContextError(Exception):
    """Base for all recoverable request-context failures."""

    kind: str = "ContextError"
    code: int = ERR_REQUEST_PARAM

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_envelope(self) -> dict[str, Any]:
        return failure(self.code, self.message)


class IdentityError(ContextError):
    """Token could not be turned into a LoginUser."""

    code = ERR_UNAUTHORIZED


class MissingToken(IdentityError):
    kind = "MissingToken"

    def __init__(self, message: str = "empty token") -> None:
        super().__init__(message)


class InvalidToken(IdentityError):
    kind = "InvalidToken"

    def __init__(self, message: str = "invalid token") -> None:
        super().__init__(message)


class InvalidIdentity(IdentityError):
    kind = "InvalidIdentity"

    def __init__(self, message: str = "invalid login user") -> None:
        super().__init__(message)


class BindError(ContextError):
    """Request input could not be bound to the requested shape."""


class MalformedInput(BindError):
    kind = "MalformedInput"


class InvalidBindTarget(BindError):
    kind = "InvalidBindTarget"

    def __init__(
        self, message: str = "bind target must be a pydantic model or dataclass type"
    ) -> None:
        super().__init__(message)


class RequestParamInvalid(BindError):
    kind = "RequestParamInvalid"


class ResponseAborted(Exception):
    """Stops the handler chain; the middleware sends ``response`` as-is."""

    def __init__(self, response: Response) -> None:
        super().__init__("response aborted")
        self.response = response
