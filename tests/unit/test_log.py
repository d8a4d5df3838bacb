"""Tests for LogLevel, StandardLogger and logger injection."""

from __future__ import annotations

import logging
from typing import Any

import pytest

from starlette_request_chain.context import RequestContext
from starlette_request_chain.log import (
    LOGGER_KEY,
    Logger,
    LogLevel,
    StandardLogger,
    default_logger,
    logger_from,
    with_logger,
)


class _ListLogger:
    def __init__(self) -> None:
        self.lines: list[tuple[LogLevel, str]] = []

    def log(
        self,
        ctx: RequestContext | None,
        level: LogLevel,
        msg: str,
        *args: Any,
        exc_info: BaseException | None = None,
    ) -> None:
        self.lines.append((level, msg % args))


class TestLogLevel:
    def test_str_is_name(self) -> None:
        assert str(LogLevel.WARN) == "WARN"

    def test_ordering(self) -> None:
        assert LogLevel.DEBUG < LogLevel.INFO < LogLevel.WARN < LogLevel.ERROR
        assert LogLevel.ERROR < LogLevel.FATAL

    @pytest.mark.parametrize(
        ("level", "expected"),
        [
            (LogLevel.DEBUG, logging.DEBUG),
            (LogLevel.INFO, logging.INFO),
            (LogLevel.WARN, logging.WARNING),
            (LogLevel.ERROR, logging.ERROR),
            (LogLevel.FATAL, logging.CRITICAL),
        ],
    )
    def test_logging_level(self, level: LogLevel, expected: int) -> None:
        assert level.logging_level == expected


class TestStandardLogger:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(StandardLogger(), Logger)

    def test_formats_and_tags_request_id(
        self, make_context: Any, caplog: pytest.LogCaptureFixture
    ) -> None:
        ctx = make_context(headers={"X-Request-Id": "rid-1"})
        logger = StandardLogger("test.chain")
        with caplog.at_level(logging.INFO, logger="test.chain"):
            logger.info(ctx, "hello %s", "world")
        record = caplog.records[0]
        assert record.getMessage() == "hello world"
        assert record.request_id == "rid-1"  # type: ignore[attr-defined]
        assert record.levelno == logging.INFO

    def test_without_context(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = StandardLogger("test.chain")
        with caplog.at_level(logging.WARNING, logger="test.chain"):
            logger.warn(None, "no request")
        assert caplog.records[0].request_id == "-"  # type: ignore[attr-defined]

    def test_level_helpers(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = StandardLogger("test.chain")
        with caplog.at_level(logging.DEBUG, logger="test.chain"):
            logger.debug(None, "d")
            logger.error(None, "e")
            logger.fatal(None, "f")
        assert [r.levelno for r in caplog.records] == [
            logging.DEBUG,
            logging.ERROR,
            logging.CRITICAL,
        ]

    def test_disabled_level_skips_request_id(
        self, make_context: Any, caplog: pytest.LogCaptureFixture
    ) -> None:
        calls: list[RequestContext] = []

        def generator(ctx: RequestContext) -> str:
            calls.append(ctx)
            return "generated"

        ctx = make_context(request_id_generator=generator)
        logger = StandardLogger("test.chain.quiet")
        with caplog.at_level(logging.ERROR, logger="test.chain.quiet"):
            logger.debug(ctx, "hidden")
        assert calls == []
        assert caplog.records == []


class TestInjection:
    def test_default_when_not_injected(self, make_context: Any) -> None:
        assert logger_from(make_context()) is default_logger

    def test_with_logger(self, make_context: Any) -> None:
        ctx = make_context()
        custom = _ListLogger()
        with_logger(ctx, custom)
        assert logger_from(ctx) is custom
        assert ctx.value(LOGGER_KEY) is custom

    def test_ambient_logger(self, make_context: Any) -> None:
        custom = _ListLogger()
        ctx = make_context(parent={LOGGER_KEY: custom})
        assert logger_from(ctx) is custom

    def test_custom_logger_receives_formatted_line(self, make_context: Any) -> None:
        ctx = make_context()
        custom = _ListLogger()
        with_logger(ctx, custom)
        logger_from(ctx).log(ctx, LogLevel.INFO, "%d items", 3)
        assert custom.lines == [(LogLevel.INFO, "3 items")]
