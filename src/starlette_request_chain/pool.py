"""Free list of reusable request contexts."""

from __future__ import annotations

import threading
from collections import deque
from collections.abc import Callable

from starlette_request_chain.context import RequestContext


class ContextPool:
    """Thread-safe free list of ``RequestContext`` objects.

    A released context is cleared before it is stored, and callers must not
    keep references to it after ``release``.
    """

    def __init__(
        self, factory: Callable[[], RequestContext], *, max_size: int = 256
    ) -> None:
        self._factory = factory
        self._max_size = max_size
        self._free: deque[RequestContext] = deque()
        self._lock = threading.Lock()

    def acquire(self) -> RequestContext:
        with self._lock:
            if self._free:
                return self._free.pop()
        return self._factory()

    def release(self, ctx: RequestContext) -> None:
        ctx.release()
        with self._lock:
            if len(self._free) < self._max_size and ctx not in self._free:
                self._free.append(ctx)

    def __len__(self) -> int:
        with self._lock:
            return len(self._free)
