"""Middleware chains composed around a terminal handler."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from starlette_request_chain._types import Handler, Middleware
from starlette_request_chain.context import RequestContext


def compose(handler: Handler, middleware: Sequence[Middleware]) -> Handler:
    """Wrap ``handler`` so that ``middleware[0]`` is the outermost layer.

    ``compose(h, [m0, m1])`` is ``m0(m1(h))``. With no middleware the
    handler itself is returned.
    """
    composed = handler
    for mw in reversed(middleware):
        composed = mw(composed)
    return composed


@dataclass(frozen=True)
class Chain:
    """Immutable, pre-composed handler for one route."""

    handler: Handler
    middleware: tuple[Middleware, ...] = ()
    composed: Handler = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "composed", compose(self.handler, self.middleware))

    @classmethod
    def build(
        cls,
        handler: Handler,
        global_middleware: Sequence[Middleware] = (),
        route_middleware: Sequence[Middleware] = (),
    ) -> Chain:
        return cls(handler, tuple(global_middleware) + tuple(route_middleware))

    async def __call__(self, ctx: RequestContext) -> None:
        await self.composed(ctx)
