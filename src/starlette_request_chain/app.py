"""Route registration and per-request dispatch."""

from __future__ import annotations

from collections.abc import Sequence

from starlette.requests import Request
from starlette.routing import Route, Router
from starlette.types import Receive, Scope, Send
from starlette.websockets import WebSocketClose

from starlette_request_chain._types import Handler, Middleware
from starlette_request_chain.chain import Chain
from starlette_request_chain.config import AppConfig
from starlette_request_chain.context import RequestContext, activate
from starlette_request_chain.errors import ALLOWED_METHODS_KEY, classify_error
from starlette_request_chain.log import LogLevel, with_logger
from starlette_request_chain.pool import ContextPool
from starlette_request_chain.render import send_text
from starlette_request_chain.response import ASGISink


def translate_path(path: str) -> str:
    """Convert ``/:name`` and ``/*name`` segments to router patterns.

    Patterns already written as ``{name}`` pass through unchanged.
    """
    segments = []
    for segment in path.split("/"):
        if segment.startswith(":") and len(segment) > 1:
            segment = "{" + segment[1:] + "}"
        elif segment.startswith("*") and len(segment) > 1:
            segment = "{" + segment[1:] + ":path}"
        segments.append(segment)
    return "/".join(segments)


class _RouteEndpoint:
    """ASGI endpoint for one path, holding a chain per HTTP method."""

    def __init__(self, app: App, path: str) -> None:
        self._app = app
        self.path = path
        self.handlers: dict[str, tuple[Handler, tuple[Middleware, ...]]] = {}
        self.chains: dict[str, Chain] = {}

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        chain = self.chains.get(scope["method"])
        if chain is None:
            await self._app.dispatch(
                self._app._method_not_allowed_chain,
                scope,
                receive,
                send,
                allowed=sorted(self.chains),
            )
            return
        await self._app.dispatch(chain, scope, receive, send)


class App:
    """ASGI application: global middleware, routes and a context pool.

    Routes are matched by a Starlette ``Router``; everything after the match
    (context, middleware chain, error handling) happens in ``dispatch``.
    """

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or AppConfig()
        self._middleware: list[Middleware] = []
        self._endpoints: dict[str, _RouteEndpoint] = {}
        self._router = Router(
            redirect_slashes=self.config.redirect_slashes,
            default=self._not_found,
        )
        self._pool = ContextPool(self._new_context, max_size=self.config.pool_size)
        self._recompose()

    def _new_context(self) -> RequestContext:
        return RequestContext(
            request_id_header=self.config.request_id_header,
            request_id_generator=self.config.request_id_generator,
            parent=self.config.values,
        )

    @property
    def pool(self) -> ContextPool:
        return self._pool

    @property
    def router(self) -> Router:
        return self._router

    # -- registration --

    def use(self, *middleware: Middleware) -> App:
        """Append global middleware; it wraps every route, outermost first."""
        self._middleware.extend(middleware)
        self._recompose()
        return self

    def route(
        self, method: str, path: str, handler: Handler, *middleware: Middleware
    ) -> App:
        """Register ``handler`` for ``method`` and ``path`` with route middleware."""
        method = method.upper()
        endpoint = self._endpoints.get(path)
        if endpoint is None:
            endpoint = _RouteEndpoint(self, path)
            self._endpoints[path] = endpoint
            self._router.routes.append(Route(translate_path(path), endpoint))
        if method in endpoint.handlers:
            raise ValueError(f"handler already registered for {method} {path}")
        endpoint.handlers[method] = (handler, middleware)
        endpoint.chains[method] = Chain.build(handler, self._middleware, middleware)
        return self

    def get(self, path: str, handler: Handler, *middleware: Middleware) -> App:
        return self.route("GET", path, handler, *middleware)

    def post(self, path: str, handler: Handler, *middleware: Middleware) -> App:
        return self.route("POST", path, handler, *middleware)

    def put(self, path: str, handler: Handler, *middleware: Middleware) -> App:
        return self.route("PUT", path, handler, *middleware)

    def patch(self, path: str, handler: Handler, *middleware: Middleware) -> App:
        return self.route("PATCH", path, handler, *middleware)

    def delete(self, path: str, handler: Handler, *middleware: Middleware) -> App:
        return self.route("DELETE", path, handler, *middleware)

    def options(self, path: str, handler: Handler, *middleware: Middleware) -> App:
        return self.route("OPTIONS", path, handler, *middleware)

    def head(self, path: str, handler: Handler, *middleware: Middleware) -> App:
        return self.route("HEAD", path, handler, *middleware)

    def _recompose(self) -> None:
        for endpoint in self._endpoints.values():
            for method, (handler, middleware) in endpoint.handlers.items():
                endpoint.chains[method] = Chain.build(
                    handler, self._middleware, middleware
                )
        self._not_found_chain = Chain.build(self.config.not_found, self._middleware)
        self._method_not_allowed_chain = Chain.build(
            self.config.method_not_allowed, self._middleware
        )

    # -- serving --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self._router(scope, receive, send)

    async def _not_found(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "websocket":
            await WebSocketClose()(scope, receive, send)
            return
        await self.dispatch(self._not_found_chain, scope, receive, send)

    async def dispatch(
        self,
        chain: Chain,
        scope: Scope,
        receive: Receive,
        send: Send,
        *,
        allowed: Sequence[str] | None = None,
    ) -> None:
        """Serve one request through ``chain`` with a pooled context."""
        ctx = self._pool.acquire()
        ctx.reset(
            ASGISink(scope, receive, send),
            Request(scope, receive),
            scope.get("path_params"),
        )
        with_logger(ctx, self.config.logger)
        if allowed:
            ctx.set_value(ALLOWED_METHODS_KEY, tuple(allowed))
        try:
            with activate(ctx):
                try:
                    await chain(ctx)
                except Exception as exc:
                    await self._handle_error(ctx, exc)
                await ctx.response.finish()
        finally:
            ctx.cancel()
            self._pool.release(ctx)

    async def _handle_error(self, ctx: RequestContext, exc: Exception) -> None:
        try:
            await self.config.error_handler(ctx, exc)
        except Exception as handler_exc:
            # Respond before logging; the logger may be what failed.
            if not ctx.response.committed:
                status_code, message = classify_error(exc)
                await send_text(ctx, status_code, message)
            await ctx.response.finish()
            self.config.logger.log(
                ctx,
                LogLevel.ERROR,
                "error handler failed: %r while handling %r",
                handler_exc,
                exc,
                exc_info=handler_exc,
            )
