"""Tests for compose() and Chain."""

from __future__ import annotations

from typing import Any

import pytest

from starlette_request_chain._types import Handler, Middleware
from starlette_request_chain.chain import Chain, compose
from starlette_request_chain.context import RequestContext
from starlette_request_chain.exceptions import HTTPError


def _marker(name: str, order: list[str]) -> Middleware:
    def middleware(next_handler: Handler) -> Handler:
        async def handler(ctx: RequestContext) -> None:
            order.append(f"{name}-before")
            try:
                await next_handler(ctx)
            finally:
                order.append(f"{name}-after")

        return handler

    return middleware


def _terminal(order: list[str]) -> Handler:
    async def handler(ctx: RequestContext) -> None:
        order.append("handler")

    return handler


class TestCompose:
    def test_empty_middleware_returns_handler(self) -> None:
        handler = _terminal([])
        assert compose(handler, []) is handler

    async def test_nesting_order(self, make_context: Any) -> None:
        order: list[str] = []
        composed = compose(
            _terminal(order), [_marker("outer", order), _marker("inner", order)]
        )
        await composed(make_context())
        assert order == [
            "outer-before",
            "inner-before",
            "handler",
            "inner-after",
            "outer-after",
        ]

    @pytest.mark.parametrize("depth", [1, 3, 6])
    async def test_nesting_order_any_depth(self, make_context: Any, depth: int) -> None:
        order: list[str] = []
        names = [f"m{i}" for i in range(depth)]
        composed = compose(_terminal(order), [_marker(n, order) for n in names])
        await composed(make_context())
        expected = (
            [f"{n}-before" for n in names]
            + ["handler"]
            + [f"{n}-after" for n in reversed(names)]
        )
        assert order == expected

    def test_middleware_applied_once_at_compose_time(self) -> None:
        applied: list[str] = []

        def counting(next_handler: Handler) -> Handler:
            applied.append("wrap")
            return next_handler

        compose(_terminal([]), [counting, counting])
        assert applied == ["wrap", "wrap"]


class TestShortCircuit:
    async def test_middleware_error_skips_handler(self, make_context: Any) -> None:
        order: list[str] = []

        def deny(next_handler: Handler) -> Handler:
            async def handler(ctx: RequestContext) -> None:
                order.append("deny")
                raise HTTPError(403, "Forbidden")

            return handler

        composed = compose(_terminal(order), [_marker("outer", order), deny])
        with pytest.raises(HTTPError) as exc_info:
            await composed(make_context())
        assert exc_info.value.status_code == 403
        assert order == ["outer-before", "deny", "outer-after"]

    async def test_middleware_returning_early_skips_handler(
        self, make_context: Any
    ) -> None:
        order: list[str] = []

        def cached(next_handler: Handler) -> Handler:
            async def handler(ctx: RequestContext) -> None:
                order.append("cached")

            return handler

        composed = compose(_terminal(order), [cached, _marker("inner", order)])
        await composed(make_context())
        assert order == ["cached"]


class TestErrorPropagation:
    async def test_handler_error_reaches_caller(self, make_context: Any) -> None:
        async def failing(ctx: RequestContext) -> None:
            raise ValueError("boom")

        composed = compose(failing, [_marker("outer", [])])
        with pytest.raises(ValueError, match="boom"):
            await composed(make_context())

    async def test_middleware_can_transform_error(self, make_context: Any) -> None:
        async def failing(ctx: RequestContext) -> None:
            raise KeyError("missing")

        def translate(next_handler: Handler) -> Handler:
            async def handler(ctx: RequestContext) -> None:
                try:
                    await next_handler(ctx)
                except KeyError as exc:
                    raise HTTPError(404) from exc

            return handler

        with pytest.raises(HTTPError) as exc_info:
            await compose(failing, [translate])(make_context())
        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Not Found"

    async def test_middleware_can_suppress_error(self, make_context: Any) -> None:
        async def failing(ctx: RequestContext) -> None:
            raise RuntimeError("ignored")

        def suppress(next_handler: Handler) -> Handler:
            async def handler(ctx: RequestContext) -> None:
                try:
                    await next_handler(ctx)
                except RuntimeError:
                    ctx.set_value("suppressed", True)

            return handler

        ctx = make_context()
        await compose(failing, [suppress])(ctx)
        assert ctx.value("suppressed") is True


class TestChain:
    def test_build_orders_global_before_route(self) -> None:
        order: list[str] = []
        g = _marker("global", order)
        r = _marker("route", order)
        chain = Chain.build(_terminal(order), [g], [r])
        assert chain.middleware == (g, r)

    async def test_call_runs_composed(self, make_context: Any) -> None:
        order: list[str] = []
        chain = Chain.build(
            _terminal(order), [_marker("global", order)], [_marker("route", order)]
        )
        await chain(make_context())
        assert order == [
            "global-before",
            "route-before",
            "handler",
            "route-after",
            "global-after",
        ]

    def test_empty_chain_composed_is_handler(self) -> None:
        handler = _terminal([])
        assert Chain.build(handler).composed is handler

    def test_chain_is_frozen(self) -> None:
        chain = Chain.build(_terminal([]))
        with pytest.raises(AttributeError):
            chain.handler = _terminal([])  # type: ignore[misc]
