"""Per-instance App configuration with internal defaults."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from starlette_request_chain._types import ErrorHandler, Handler, RequestIDGenerator
from starlette_request_chain.errors import (
    default_error_handler,
    plain_method_not_allowed,
    plain_not_found,
)
from starlette_request_chain.log import Logger, StandardLogger
from starlette_request_chain.request_id import (
    DEFAULT_REQUEST_ID_HEADER,
    uuid_request_id,
)


@dataclass(frozen=True)
class AppConfig:
    """Collaborators and knobs for one ``App`` instance."""

    error_handler: ErrorHandler = default_error_handler
    logger: Logger = field(default_factory=StandardLogger)
    request_id_header: str | None = DEFAULT_REQUEST_ID_HEADER
    request_id_generator: RequestIDGenerator = uuid_request_id
    not_found: Handler = plain_not_found
    method_not_allowed: Handler = plain_method_not_allowed
    values: Mapping[Any, Any] = field(default_factory=lambda: MappingProxyType({}))
    pool_size: int = 256
    redirect_slashes: bool = False

    def __post_init__(self) -> None:
        if self.pool_size < 0:
            raise ValueError("pool_size must be >= 0")
