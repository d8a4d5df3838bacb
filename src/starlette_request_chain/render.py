"""Response emission helpers used by handlers."""

from __future__ import annotations

import json
from typing import Any

from starlette_request_chain.context import RequestContext
from starlette_request_chain.exceptions import InvalidRedirectCode, SerializationError

REDIRECT_CODES = range(300, 309)


async def send_no_content(ctx: RequestContext, status_code: int) -> None:
    await ctx.response.write_header(status_code)


async def _send_body(
    ctx: RequestContext, status_code: int, media_type: str, body: bytes
) -> None:
    w = ctx.response
    w.headers["content-type"] = media_type
    await w.write_header(status_code)
    await w.write(body)


async def send_text(ctx: RequestContext, status_code: int, text: str) -> None:
    await _send_body(
        ctx, status_code, "text/plain; charset=utf-8", text.encode("utf-8")
    )


async def send_html(ctx: RequestContext, status_code: int, html: str) -> None:
    await _send_body(
        ctx, status_code, "text/html; charset=utf-8", html.encode("utf-8")
    )


def encode_json(value: Any) -> bytes:
    try:
        return json.dumps(
            value,
            ensure_ascii=False,
            allow_nan=False,
            indent=None,
            separators=(",", ":"),
        ).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise SerializationError("JSON encoding failed", cause=exc) from exc


async def send_json(ctx: RequestContext, status_code: int, value: Any) -> None:
    """Send ``value`` as JSON. Nothing is written if encoding fails."""
    body = encode_json(value)
    await _send_body(ctx, status_code, "application/json", body)


async def redirect(ctx: RequestContext, status_code: int, url: str) -> None:
    if status_code not in REDIRECT_CODES:
        raise InvalidRedirectCode(status_code)
    w = ctx.response
    w.headers["location"] = url
    await w.write_header(status_code)
