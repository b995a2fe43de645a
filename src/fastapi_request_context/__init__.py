"""FastAPI Request Context - replayable bodies, token identity and request logs."""

from fastapi_request_context.binding import Checkable, bind, bind_validated
from fastapi_request_context.body import BodyReplay, capture_once, ensure_readable
from fastapi_request_context.config import Settings, load_settings
from fastapi_request_context.context import LoginUser, RequestContext, TokenPayload
from fastapi_request_context.dependency import (
    get_request_context,
    install_request_context,
    require_identity,
)
from fastapi_request_context.envelope import (
    ERR_INTERNAL,
    ERR_REQUEST_PARAM,
    ERR_UNAUTHORIZED,
    failure,
    success,
)
from fastapi_request_context.exceptions import (
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
from fastapi_request_context.identity import IdentityResolver, verify_jwt
from fastapi_request_context.log_config import setup_logging
from fastapi_request_context.logger import RequestLogger
from fastapi_request_context.middleware import RequestContextMiddleware
from fastapi_request_context.pagination import Pager, extract_pager
from fastapi_request_context.response import write_abort, write_success

__all__ = [
    "ERR_INTERNAL",
    "ERR_REQUEST_PARAM",
    "ERR_UNAUTHORIZED",
    "BindError",
    "BodyReplay",
    "Checkable",
    "ContextError",
    "IdentityError",
    "IdentityResolver",
    "InvalidBindTarget",
    "InvalidIdentity",
    "InvalidToken",
    "LoginUser",
    "MalformedInput",
    "MissingToken",
    "Pager",
    "RequestContext",
    "RequestContextMiddleware",
    "RequestLogger",
    "RequestParamInvalid",
    "ResponseAborted",
    "Settings",
    "TokenPayload",
    "bind",
    "bind_validated",
    "capture_once",
    "ensure_readable",
    "extract_pager",
    "failure",
    "get_request_context",
    "install_request_context",
    "load_settings",
    "require_identity",
    "setup_logging",
    "success",
    "verify_jwt",
    "write_abort",
    "write_success",
]
