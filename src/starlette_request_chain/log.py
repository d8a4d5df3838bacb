"""Leveled, context-aware logging."""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from starlette_request_chain.context import RequestContext


class LogLevel(IntEnum):
    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3
    FATAL = 4

    def __str__(self) -> str:
        return self.name

    @property
    def logging_level(self) -> int:
        return _LEVELS[self]


_LEVELS = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.FATAL: logging.CRITICAL,
}


@runtime_checkable
class Logger(Protocol):
    """Writes a leveled log line for a request.

    ``exc_info`` carries the exception whose traceback belongs to the line.
    """

    def log(
        self,
        ctx: RequestContext | None,
        level: LogLevel,
        msg: str,
        *args: Any,
        exc_info: BaseException | None = None,
    ) -> None: ...


class StandardLogger:
    """``Logger`` backed by the ``logging`` module.

    Each record carries the request identifier as ``record.request_id``.
    """

    def __init__(self, name: str = "starlette_request_chain") -> None:
        self._logger = logging.getLogger(name)

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def log(
        self,
        ctx: RequestContext | None,
        level: LogLevel,
        msg: str,
        *args: Any,
        exc_info: BaseException | None = None,
    ) -> None:
        lvl = level.logging_level
        if not self._logger.isEnabledFor(lvl):
            return
        request_id = ctx.request_id if ctx is not None and ctx.active else "-"
        self._logger.log(
            lvl, msg, *args, exc_info=exc_info, extra={"request_id": request_id}
        )

    def debug(self, ctx: RequestContext | None, msg: str, *args: Any) -> None:
        self.log(ctx, LogLevel.DEBUG, msg, *args)

    def info(self, ctx: RequestContext | None, msg: str, *args: Any) -> None:
        self.log(ctx, LogLevel.INFO, msg, *args)

    def warn(self, ctx: RequestContext | None, msg: str, *args: Any) -> None:
        self.log(ctx, LogLevel.WARN, msg, *args)

    def error(self, ctx: RequestContext | None, msg: str, *args: Any) -> None:
        self.log(ctx, LogLevel.ERROR, msg, *args)

    def fatal(self, ctx: RequestContext | None, msg: str, *args: Any) -> None:
        self.log(ctx, LogLevel.FATAL, msg, *args)


LOGGER_KEY = object()

default_logger: Logger = StandardLogger()


def with_logger(ctx: RequestContext, logger: Logger) -> None:
    ctx.set_value(LOGGER_KEY, logger)


def logger_from(ctx: RequestContext) -> Logger:
    """Return the logger injected into ``ctx``, or the module default."""
    logger = ctx.value(LOGGER_KEY)
    if logger is None:
        return default_logger
    return logger  # type: ignore[no-any-return]
