"""
Configuration example.

Demonstrates:
- Custom error handler reusing classify_error()
- HTML not-found responder
- App Engine style request id header
- Ambient values visible from every request context
- Custom Logger implementation
"""

from typing import Any

from starlette_request_chain import (
    APP_ENGINE_REQUEST_ID_HEADER,
    App,
    AppConfig,
    LogLevel,
    RequestContext,
    classify_error,
    html_not_found,
    logger_from,
    send_json,
)


class PrintLogger:
    """Minimal Logger writing to stdout."""

    def log(
        self,
        ctx: RequestContext | None,
        level: LogLevel,
        msg: str,
        *args: Any,
        exc_info: BaseException | None = None,
    ) -> None:
        request_id = ctx.request_id if ctx is not None and ctx.active else "-"
        print(f"[{level}] {request_id} {msg % args}")


async def json_errors(ctx: RequestContext, exc: Exception) -> None:
    status_code, message = classify_error(exc)
    if ctx.response.committed:
        return
    await send_json(ctx, status_code, {"error": message, "request_id": ctx.request_id})


app = App(
    AppConfig(
        error_handler=json_errors,
        not_found=html_not_found,
        logger=PrintLogger(),
        request_id_header=APP_ENGINE_REQUEST_ID_HEADER,
        values={"service": "inventory"},
    )
)


async def item(ctx: RequestContext) -> None:
    logger_from(ctx).log(ctx, LogLevel.INFO, "looking up %s", ctx.param("sku"))
    if ctx.param("sku") == "missing":
        raise LookupError(ctx.param("sku"))
    payload = {"sku": ctx.param("sku"), "service": ctx.value("service")}
    await send_json(ctx, 200, payload)


app.get("/items/:sku", item)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)

    # Test with:
    # curl http://localhost:8000/items/abc
    # curl http://localhost:8000/items/missing
    # curl http://localhost:8000/nowhere
