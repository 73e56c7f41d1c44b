"""
Route registration.
Builds the aiohttp application that serves the bulk-action API.
"""
from __future__ import annotations

from typing import Any

from aiohttp import web

from ..observability import request_context_middleware
from ..shared import get_logger
from .core import APP_KEY_SERVICES
from .handlers import register_bulk_action_routes

logger = get_logger(__name__)


def register_all_routes() -> web.RouteTableDef:
    routes = web.RouteTableDef()
    register_bulk_action_routes(routes)
    return routes


def create_app(services: dict[str, Any]) -> web.Application:
    """Create an application bound to `services` (see `deps.build_services`)."""
    app = web.Application(middlewares=[request_context_middleware])
    app[APP_KEY_SERVICES] = services
    app.add_routes(register_all_routes())
    logger.debug("Registered %d bulk-action routes", len(app.router.routes()))
    return app
