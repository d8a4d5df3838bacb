"""Shared pytest fixtures for starlette-request-chain tests."""

from __future__ import annotations

from typing import Any

import pytest
from starlette.datastructures import MutableHeaders
from starlette.requests import Request

from starlette_request_chain.context import RequestContext


class RecordingSink:
    """In-memory response sink that records everything written to it."""

    def __init__(self) -> None:
        self._headers = MutableHeaders()
        self.status_codes: list[int] = []
        self.sent_headers: list[dict[str, str]] = []
        self.body = bytearray()
        self.finished = False

    @property
    def headers(self) -> MutableHeaders:
        return self._headers

    async def write_header(self, status_code: int) -> None:
        self.status_codes.append(status_code)
        self.sent_headers.append(dict(self._headers))

    async def write(self, data: bytes) -> int:
        self.body += data
        return len(data)

    async def finish(self) -> None:
        self.finished = True


class CapableSink(RecordingSink):
    """Sink that also supports flush, hijack and close notification."""

    def __init__(self) -> None:
        super().__init__()
        self.flushes = 0
        self.hijacked = False
        self.closed = False

    async def flush(self) -> None:
        self.flushes += 1

    async def hijack(self) -> str:
        self.hijacked = True
        return "raw-connection"

    async def wait_closed(self) -> None:
        self.closed = True


@pytest.fixture
def make_request() -> Any:
    """Factory for creating Starlette Request objects from a bare scope."""

    def _make(
        method: str = "GET",
        path: str = "/",
        headers: dict[str, str] | None = None,
        query_string: str = "",
    ) -> Request:
        scope: dict[str, Any] = {
            "type": "http",
            "method": method,
            "path": path,
            "query_string": query_string.encode(),
            "headers": [
                (k.lower().encode(), v.encode()) for k, v in (headers or {}).items()
            ],
            "root_path": "",
        }
        return Request(scope)

    return _make


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def make_context(make_request: Any) -> Any:
    """Factory for active RequestContext objects bound to a RecordingSink."""

    def _make(
        sink: RecordingSink | None = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> RequestContext:
        ctx = RequestContext(**kwargs)
        ctx.reset(
            sink if sink is not None else RecordingSink(),
            make_request(headers=headers),
            params,
        )
        return ctx

    return _make


@pytest.fixture
def capable_sink() -> CapableSink:
    return CapableSink()
