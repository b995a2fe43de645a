"""Token identity resolution: bearer token to LoginUser."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

import jwt

from fastapi_request_context.context import LoginUser, RequestContext, TokenPayload
from fastapi_request_context.exceptions import (
    IdentityError,
    InvalidIdentity,
    InvalidToken,
    MissingToken,
)
from fastapi_request_context.response import write_abort

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
USER_ID_CLAIM = "uid"

VerifyCallback = Callable[[str, str], Mapping[str, Any]]


def verify_jwt(token: str, secret: str) -> Mapping[str, Any]:
    """Verify an HS256 JWT signed with ``secret`` and return its claims.

    Pins the algorithm to prevent alg:none and alg-switching attacks.
    Raises jwt.InvalidTokenError (or a subclass) on failure.
    """
    claims: dict[str, Any] = jwt.decode(token, secret, algorithms=[ALGORITHM])
    return claims


def parse_token_payload(claims: Mapping[str, Any]) -> TokenPayload:
    uid = claims.get(USER_ID_CLAIM)
    if isinstance(uid, bool) or not isinstance(uid, int):
        raise ValueError(f"token claim {USER_ID_CLAIM!r} must be an integer")
    return TokenPayload(user_id=uid)


class IdentityResolver:
    """Turns the token header into a LoginUser.

    Holds only read-only configuration, so one instance is shared by all
    requests. Nothing is cached: the identity is re-derived on every call.
    """

    def __init__(
        self,
        secret: str,
        *,
        verify: VerifyCallback | None = None,
        header: str = "Authorization",
        scheme: str = "Bearer",
    ) -> None:
        self._secret = secret
        self._verify = verify or verify_jwt
        self._header = header
        self._scheme = scheme

    @property
    def header(self) -> str:
        return self._header

    def _extract_token(self, header_value: str | None) -> str:
        value = (header_value or "").strip()
        if not self._scheme:
            return value
        parts = value.split(None, 1)
        if parts and parts[0].lower() == self._scheme.lower():
            return parts[1].strip() if len(parts) == 2 else ""
        return value

    def resolve_identity(self, header_value: str | None) -> LoginUser:
        """Verify the token in ``header_value``.

        Raises MissingToken, InvalidToken or InvalidIdentity.
        """
        token = self._extract_token(header_value)
        if not token:
            raise MissingToken()

        try:
            payload = parse_token_payload(self._verify(token, self._secret))
        except IdentityError:
            raise
        except Exception as exc:
            raise InvalidToken(str(exc) or "invalid token") from exc

        if payload.user_id == 0:
            raise InvalidIdentity()
        return LoginUser(id=payload.user_id)

    def identity_for(self, ctx: RequestContext) -> LoginUser:
        return self.resolve_identity(ctx.request.headers.get(self._header))

    def must_resolve_identity(self, ctx: RequestContext) -> LoginUser:
        """Like identity_for, but aborts the request on failure.

        Prefer identity_for and handle IdentityError; this exists for routes
        that cannot proceed without a caller.
        """
        try:
            return self.identity_for(ctx)
        except IdentityError as exc:
            logger.warning("Identity required but not resolved: %s", exc.kind)
            write_abort(ctx, exc.to_envelope())
