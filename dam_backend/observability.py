"""
Request correlation for the HTTP layer.

Each request gets an id (from `X-Request-ID` or a fresh uuid) that is bound to
`request_id_var` for the duration of the handler, so every log line emitted
while serving it carries the same correlation id.
"""
from __future__ import annotations

import logging
import time
from uuid import uuid4

from aiohttp import web

from .shared import get_logger, log_structured, request_id_var

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
_SLOW_REQUEST_MS = 1000.0


def _get_request_id(request: web.Request) -> str:
    rid = (request.headers.get(REQUEST_ID_HEADER) or "").strip()
    return rid or uuid4().hex


@web.middleware
async def request_context_middleware(request: web.Request, handler):
    """Add request-id correlation and lightweight request logging."""
    rid = _get_request_id(request)
    request["dam_request_id"] = rid
    token = request_id_var.set(rid)
    start = time.perf_counter()
    status: int | None = None
    try:
        response = await handler(request)
        status = response.status
        response.headers[REQUEST_ID_HEADER] = rid
        return response
    except web.HTTPException as exc:
        status = exc.status
        exc.headers[REQUEST_ID_HEADER] = rid
        raise
    except Exception:
        status = 500
        raise
    finally:
        duration_ms = (time.perf_counter() - start) * 1000.0
        level = logging.WARNING if (status or 500) >= 500 or duration_ms >= _SLOW_REQUEST_MS else logging.DEBUG
        log_structured(
            logger,
            level,
            "http_request",
            method=request.method,
            path=request.path,
            status=status,
            duration_ms=round(duration_ms, 2),
        )
        request_id_var.reset(token)
