"""
Basic usage example of starlette-request-chain.

Demonstrates:
- Registering routes with colon-style path parameters
- Sending text, JSON and redirects from handlers
- Serving the App with any ASGI server
"""

from starlette_request_chain import (
    App,
    RequestContext,
    redirect,
    send_json,
    send_text,
)

app = App()


async def index(ctx: RequestContext) -> None:
    await send_text(ctx, 200, "Hello, World!")


async def hello(ctx: RequestContext) -> None:
    await send_text(ctx, 200, f"Hello, {ctx.param('name')}")


async def user(ctx: RequestContext) -> None:
    payload = {"user": ctx.param("user_id"), "request_id": ctx.request_id}
    await send_json(ctx, 200, payload)


async def old_home(ctx: RequestContext) -> None:
    await redirect(ctx, 301, "/")


app.get("/", index)
app.get("/hello/:name", hello)
app.get("/users/{user_id:int}", user)
app.get("/home", old_home)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)

    # Test with:
    # curl http://localhost:8000/hello/gopher
    # curl -H "X-Request-Id: abc" http://localhost:8000/users/42
    # curl -i http://localhost:8000/home
