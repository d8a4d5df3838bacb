"""ChainException hierarchy for request handling failures."""

from __future__ import annotations

from http import HTTPStatus


def status_text(status_code: int) -> str:
    """Return the standard reason phrase for a status code, or ``""``."""
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return ""


class ChainException(Exception):
    """Base for all chain exceptions."""


class HTTPError(ChainException):
    """Typed HTTP error carrying an explicit status code and message."""

    def __init__(self, status_code: int, message: str | None = None) -> None:
        if message is None:
            message = status_text(status_code)
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    def __repr__(self) -> str:
        return f"HTTPError(status_code={self.status_code!r}, message={self.message!r})"


class NoContextError(ChainException):
    """A context-dependent accessor was used outside an active request."""

    def __init__(self, detail: str = "No active request context") -> None:
        super().__init__(detail)
        self.detail = detail


class InvalidRedirectCode(ChainException):
    """Redirect status code outside the 3xx redirect range."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"invalid redirect status code: {status_code}")
        self.status_code = status_code


class SerializationError(ChainException):
    """Response body could not be encoded; nothing was written."""

    def __init__(self, detail: str, *, cause: Exception | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.cause = cause


class UnsupportedCapability(ChainException):
    """The underlying response sink does not support a transport capability."""

    def __init__(self, capability: str) -> None:
        super().__init__(f"response sink does not support {capability}")
        self.capability = capability
