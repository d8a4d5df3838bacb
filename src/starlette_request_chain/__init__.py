"""Starlette Request Chain - request contexts, middleware chains, response tracking."""

from starlette_request_chain._types import (
    ErrorHandler,
    Handler,
    Middleware,
    RequestIDGenerator,
)
from starlette_request_chain.app import App, translate_path
from starlette_request_chain.chain import Chain, compose
from starlette_request_chain.config import AppConfig
from starlette_request_chain.context import (
    CancelSignal,
    RequestContext,
    current_context,
)
from starlette_request_chain.errors import (
    classify_error,
    default_error_handler,
    html_not_found,
    plain_method_not_allowed,
    plain_not_found,
)
from starlette_request_chain.exceptions import (
    ChainException,
    HTTPError,
    InvalidRedirectCode,
    NoContextError,
    SerializationError,
    UnsupportedCapability,
)
from starlette_request_chain.log import (
    LogLevel,
    Logger,
    StandardLogger,
    logger_from,
    with_logger,
)
from starlette_request_chain.middleware import access_log, request_id_header
from starlette_request_chain.pool import ContextPool
from starlette_request_chain.render import (
    redirect,
    send_html,
    send_json,
    send_no_content,
    send_text,
)
from starlette_request_chain.request_id import (
    APP_ENGINE_REQUEST_ID_HEADER,
    DEFAULT_REQUEST_ID_HEADER,
    uuid_request_id,
)
from starlette_request_chain.response import ASGISink, ResponseSink, ResponseWriter

__all__ = [
    "APP_ENGINE_REQUEST_ID_HEADER",
    "ASGISink",
    "App",
    "AppConfig",
    "CancelSignal",
    "Chain",
    "ChainException",
    "ContextPool",
    "DEFAULT_REQUEST_ID_HEADER",
    "ErrorHandler",
    "HTTPError",
    "Handler",
    "InvalidRedirectCode",
    "LogLevel",
    "Logger",
    "Middleware",
    "NoContextError",
    "RequestContext",
    "RequestIDGenerator",
    "ResponseSink",
    "ResponseWriter",
    "SerializationError",
    "StandardLogger",
    "UnsupportedCapability",
    "access_log",
    "classify_error",
    "compose",
    "current_context",
    "default_error_handler",
    "html_not_found",
    "logger_from",
    "plain_method_not_allowed",
    "plain_not_found",
    "redirect",
    "request_id_header",
    "send_html",
    "send_json",
    "send_no_content",
    "send_text",
    "translate_path",
    "uuid_request_id",
    "with_logger",
]
