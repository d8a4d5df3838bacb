"""Request identifier sources."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from starlette_request_chain.context import RequestContext

DEFAULT_REQUEST_ID_HEADER = "X-Request-Id"

# Header set by the App Engine front end
APP_ENGINE_REQUEST_ID_HEADER = "X-AppEngine-Request-Log-Id"


def uuid_request_id(ctx: RequestContext) -> str:
    """Default generator: a random UUID4 in hex form."""
    return uuid.uuid4().hex
