"""Built-in middleware."""

from __future__ import annotations

import time

from starlette_request_chain._types import Handler, Middleware
from starlette_request_chain.context import RequestContext
from starlette_request_chain.log import LogLevel, logger_from
from starlette_request_chain.request_id import DEFAULT_REQUEST_ID_HEADER


def access_log() -> Middleware:
    """Log one line per request: method, path, status, size and duration."""

    def middleware(next_handler: Handler) -> Handler:
        async def handler(ctx: RequestContext) -> None:
            start = time.perf_counter()
            try:
                await next_handler(ctx)
            finally:
                elapsed = (time.perf_counter() - start) * 1000
                logger_from(ctx).log(
                    ctx,
                    LogLevel.INFO,
                    "%s %s %d %d %.2fms",
                    ctx.request.method,
                    ctx.request.url.path,
                    ctx.response.status,
                    ctx.response.size,
                    elapsed,
                )

        return handler

    return middleware


def request_id_header(header: str = DEFAULT_REQUEST_ID_HEADER) -> Middleware:
    """Echo the request identifier in a response header."""

    def middleware(next_handler: Handler) -> Handler:
        async def handler(ctx: RequestContext) -> None:
            ctx.response.headers[header] = ctx.request_id
            await next_handler(ctx)

        return handler

    return middleware
