"""ResponseWriter — status/size/commit tracking over a response sink."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from starlette.datastructures import MutableHeaders
from starlette.types import Receive, Scope, Send

from starlette_request_chain.exceptions import UnsupportedCapability


@runtime_checkable
class ResponseSink(Protocol):
    """Raw outgoing response transport.

    Sinks may also provide ``flush()``, ``hijack()`` and ``wait_closed()``;
    ``ResponseWriter`` exposes them when present.
    """

    @property
    def headers(self) -> MutableHeaders: ...

    async def write_header(self, status_code: int) -> None: ...
    async def write(self, data: bytes) -> int: ...
    async def finish(self) -> None: ...


class ASGISink:
    """Response sink writing ASGI ``http.response.*`` messages."""

    def __init__(self, scope: Scope, receive: Receive, send: Send) -> None:
        self._scope = scope
        self._receive = receive
        self._send = send
        self._headers = MutableHeaders()
        self._started = False
        self._finished = False

    @property
    def headers(self) -> MutableHeaders:
        return self._headers

    async def write_header(self, status_code: int) -> None:
        await self._send(
            {
                "type": "http.response.start",
                "status": status_code,
                "headers": self._headers.raw,
            }
        )
        self._started = True

    async def write(self, data: bytes) -> int:
        """Send a body chunk; HEAD responses accept and discard it."""
        if self._scope.get("method") != "HEAD":
            await self._send(
                {"type": "http.response.body", "body": data, "more_body": True}
            )
        return len(data)

    async def flush(self) -> None:
        # ASGI servers transmit each body message as it is sent.
        if self._started:
            await self._send(
                {"type": "http.response.body", "body": b"", "more_body": True}
            )

    async def wait_closed(self) -> None:
        """Block until the client disconnects."""
        while True:
            message = await self._receive()
            if message["type"] == "http.disconnect":
                return

    async def finish(self) -> None:
        if self._finished:
            return
        self._finished = True
        await self._send(
            {"type": "http.response.body", "body": b"", "more_body": False}
        )


class ResponseWriter:
    """Tracks the one outgoing response of a request context.

    The first ``write_header`` commits the response and freezes the status.
    A ``write`` before any header write commits status 200.
    """

    def __init__(self, sink: ResponseSink | None = None) -> None:
        self._sink = sink
        self._status = 0
        self._size = 0
        self._committed = False

    @property
    def status(self) -> int:
        return self._status

    @property
    def size(self) -> int:
        """Body bytes accepted from the handler, including discarded HEAD bodies."""
        return self._size

    @property
    def committed(self) -> bool:
        return self._committed

    @property
    def sink(self) -> ResponseSink:
        if self._sink is None:
            raise RuntimeError("ResponseWriter is not bound to a sink")
        return self._sink

    @property
    def headers(self) -> MutableHeaders:
        """Outgoing headers; a detached copy once the response is committed."""
        if self._committed:
            return MutableHeaders(raw=list(self.sink.headers.raw))
        return self.sink.headers

    async def write_header(self, status_code: int) -> None:
        if self._committed:
            return
        self._status = status_code
        self._committed = True
        await self.sink.write_header(status_code)

    async def write(self, data: bytes) -> int:
        if not self._committed:
            await self.write_header(200)
        n = await self.sink.write(data)
        self._size += n
        return n

    async def flush(self) -> None:
        flush = getattr(self.sink, "flush", None)
        if flush is None:
            raise UnsupportedCapability("flush")
        if not self._committed:
            await self.write_header(200)
        await flush()

    async def hijack(self) -> Any:
        hijack = getattr(self.sink, "hijack", None)
        if hijack is None:
            raise UnsupportedCapability("hijack")
        return await hijack()

    async def wait_closed(self) -> None:
        """Close notification: returns once the peer has gone away."""
        wait_closed = getattr(self.sink, "wait_closed", None)
        if wait_closed is None:
            raise UnsupportedCapability("close notification")
        await wait_closed()

    async def finish(self) -> None:
        """Complete the response, committing 200 if nothing was written."""
        if not self._committed:
            await self.write_header(200)
        await self.sink.finish()

    def reset(self, sink: ResponseSink | None) -> None:
        self._sink = sink
        self._status = 0
        self._size = 0
        self._committed = False

    def __repr__(self) -> str:
        return (
            f"ResponseWriter(status={self._status}, size={self._size}, "
            f"committed={self._committed})"
        )
