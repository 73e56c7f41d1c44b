"""
Service lookup for route handlers.

Services live on the aiohttp application (see `create_app`), never in module
globals, so several apps can run side by side in one process.
"""
from __future__ import annotations

from typing import Any

from aiohttp import web

from ...shared import ErrorCode, Result

APP_KEY_SERVICES: web.AppKey[dict] = web.AppKey("dam_services", dict)


def _require_services(request: web.Request) -> tuple[dict[str, Any], Result | None]:
    svc = request.app.get(APP_KEY_SERVICES)
    if not isinstance(svc, dict) or not svc:
        return {}, Result.Err(ErrorCode.SERVICE_UNAVAILABLE, "Services not initialized")
    return svc, None
