"""
Middleware example.

Demonstrates:
- Global middleware via App.use() (runs first, wraps everything)
- Route middleware passed at registration (runs inside global middleware)
- Short-circuiting a chain from middleware
- Built-in access_log() and request_id_header() middleware
"""

import logging

from starlette_request_chain import (
    App,
    Handler,
    HTTPError,
    RequestContext,
    access_log,
    request_id_header,
    send_text,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)

API_KEYS = {"secret-key"}


def server_header(next_handler: Handler) -> Handler:
    async def handler(ctx: RequestContext) -> None:
        ctx.response.headers["Server"] = "starlette-request-chain"
        await next_handler(ctx)

    return handler


def require_api_key(next_handler: Handler) -> Handler:
    async def handler(ctx: RequestContext) -> None:
        if ctx.request.headers.get("X-API-Key") not in API_KEYS:
            # The handler below never runs.
            raise HTTPError(401, "Missing or invalid API key")
        await next_handler(ctx)

    return handler


app = App()
app.use(access_log(), request_id_header(), server_header)


async def public(ctx: RequestContext) -> None:
    await send_text(ctx, 200, "public")


async def private(ctx: RequestContext) -> None:
    await send_text(ctx, 200, "private")


app.get("/public", public)
app.get("/private", private, require_api_key)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)

    # Test with:
    # curl -i http://localhost:8000/public
    # curl -i http://localhost:8000/private
    # curl -i -H "X-API-Key: secret-key" http://localhost:8000/private
