"""Shared type aliases."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from starlette_request_chain.context import RequestContext

# A handler serves one request and raises to signal failure
Handler = Callable[["RequestContext"], Awaitable[None]]

# A middleware wraps a handler and returns a handler
Middleware = Callable[[Handler], Handler]

# Turns a failure into a response
ErrorHandler = Callable[["RequestContext", Exception], Awaitable[None]]

RequestIDGenerator = Callable[["RequestContext"], str]
