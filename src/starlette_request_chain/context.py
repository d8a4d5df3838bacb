"""RequestContext — per-request state container, reused through a pool."""

from __future__ import annotations

import asyncio
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from types import MappingProxyType
from typing import Any

from starlette.requests import Request

from starlette_request_chain._types import RequestIDGenerator
from starlette_request_chain.exceptions import NoContextError
from starlette_request_chain.request_id import (
    DEFAULT_REQUEST_ID_HEADER,
    uuid_request_id,
)
from starlette_request_chain.response import ResponseSink, ResponseWriter

_EMPTY: Mapping[Any, Any] = MappingProxyType({})

_current: ContextVar[RequestContext | None] = ContextVar(
    "starlette_request_chain_context", default=None
)


def current_context() -> RequestContext:
    """Return the context of the request being served by this task.

    Raises ``NoContextError`` outside a request.
    """
    ctx = _current.get()
    if ctx is None or not ctx.active:
        raise NoContextError()
    return ctx


@contextmanager
def activate(ctx: RequestContext) -> Iterator[RequestContext]:
    """Make ``ctx`` the current context for the duration of the block."""
    token = _current.set(ctx)
    try:
        yield ctx
    finally:
        _current.reset(token)


class CancelSignal:
    """One-shot cancellation signal with a ``done`` notification."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> bool:
        """Trigger the signal. Returns False if it was already triggered."""
        if self._event.is_set():
            return False
        self._event.set()
        return True

    async def wait(self) -> None:
        await self._event.wait()


class RequestContext:
    """State for one request: response writer, request, path params and values.

    Instances are recycled: ``reset`` installs a new request and ``release``
    clears everything. Accessors raise ``NoContextError`` on a released context.
    """

    def __init__(
        self,
        *,
        request_id_header: str | None = DEFAULT_REQUEST_ID_HEADER,
        request_id_generator: RequestIDGenerator = uuid_request_id,
        parent: Mapping[Any, Any] | None = None,
    ) -> None:
        self._request_id_header = request_id_header
        self._request_id_generator = request_id_generator
        self._parent = parent if parent is not None else _EMPTY
        self._response = ResponseWriter()
        self._request: Request | None = None
        self._params: Mapping[str, Any] = _EMPTY
        self._request_id = ""
        self._values: dict[Any, Any] = {}
        self._signal = CancelSignal()
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def _ensure_active(self) -> None:
        if not self._active:
            raise NoContextError("Request context is not active")

    @property
    def request(self) -> Request:
        self._ensure_active()
        assert self._request is not None
        return self._request

    @property
    def response(self) -> ResponseWriter:
        self._ensure_active()
        return self._response

    @property
    def params(self) -> Mapping[str, Any]:
        self._ensure_active()
        return self._params

    def param(self, name: str, default: Any = None) -> Any:
        """Return the matched path parameter ``name``."""
        self._ensure_active()
        return self._params.get(name, default)

    @property
    def request_id(self) -> str:
        """Request identifier, computed once per request.

        Taken from the correlation header when the client sent one,
        otherwise produced by the configured generator.
        """
        self._ensure_active()
        if not self._request_id:
            request_id = ""
            if self._request_id_header:
                request_id = self.request.headers.get(self._request_id_header, "")
            if not request_id:
                request_id = self._request_id_generator(self)
            self._request_id = request_id
        return self._request_id

    # -- values --

    def set_value(self, key: Any, value: Any) -> None:
        self._ensure_active()
        self._values[key] = value

    def value(self, key: Any, default: Any = None) -> Any:
        """Look ``key`` up in this context's store, then the ambient parent."""
        if key in self._values:
            return self._values[key]
        return self._parent.get(key, default)

    # -- cancellation --

    @property
    def signal(self) -> CancelSignal:
        return self._signal

    @property
    def cancelled(self) -> bool:
        return self._signal.cancelled

    def cancel(self) -> None:
        self._signal.cancel()

    async def done(self) -> None:
        """Wait until the request is cancelled or completed."""
        await self._signal.wait()

    # -- lifecycle --

    def reset(
        self,
        sink: ResponseSink,
        request: Request,
        params: Mapping[str, Any] | None = None,
    ) -> None:
        self._response.reset(sink)
        self._request = request
        self._params = MappingProxyType(dict(params)) if params else _EMPTY
        self._request_id = ""
        self._values.clear()
        self._signal = CancelSignal()
        self._active = True

    def release(self) -> None:
        self._active = False
        self._response.reset(None)
        self._request = None
        self._params = _EMPTY
        self._request_id = ""
        self._values.clear()

    def __repr__(self) -> str:
        if not self._active:
            return "RequestContext(released)"
        assert self._request is not None
        return (
            f"RequestContext({self._request.method} {self._request.url.path}, "
            f"{self._response!r})"
        )
