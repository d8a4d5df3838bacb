"""Error classification, default error handler and fallback responders."""

from __future__ import annotations

from starlette_request_chain.context import RequestContext
from starlette_request_chain.exceptions import HTTPError, status_text
from starlette_request_chain.log import LogLevel, logger_from
from starlette_request_chain.render import send_html, send_text

ALLOWED_METHODS_KEY = object()


def classify_error(exc: BaseException) -> tuple[int, str]:
    """Map a failure to ``(status_code, message)``.

    ``HTTPError`` carries its own status and message; anything else is a 500.
    """
    if isinstance(exc, HTTPError):
        return exc.status_code, exc.message
    return 500, status_text(500)


async def default_error_handler(ctx: RequestContext, exc: Exception) -> None:
    status_code, message = classify_error(exc)
    committed = ctx.response.committed
    if not committed:
        await send_text(ctx, status_code, message)
    logger = logger_from(ctx)
    if status_code >= 500:
        logger.log(
            ctx,
            LogLevel.ERROR,
            "%s %s failed with %d: %r",
            ctx.request.method,
            ctx.request.url.path,
            status_code,
            exc,
            exc_info=exc,
        )
    if committed:
        logger.log(
            ctx,
            LogLevel.DEBUG,
            "response already committed with %d, dropping %d",
            ctx.response.status,
            status_code,
        )


async def plain_not_found(ctx: RequestContext) -> None:
    await send_text(ctx, 404, status_text(404))


async def html_not_found(ctx: RequestContext) -> None:
    await send_html(
        ctx,
        404,
        "<!DOCTYPE html><html><head><title>404 Not Found</title></head>"
        "<body><h1>Not Found</h1></body></html>",
    )


async def plain_method_not_allowed(ctx: RequestContext) -> None:
    allowed = ctx.value(ALLOWED_METHODS_KEY)
    if allowed:
        ctx.response.headers["allow"] = ", ".join(allowed)
    await send_text(ctx, 405, status_text(405))
