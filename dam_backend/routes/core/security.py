"""
Security utilities: CSRF protection for state-changing endpoints.
"""
from __future__ import annotations

from urllib.parse import urlparse

from aiohttp import web

_STATE_CHANGING_METHODS = ("POST", "PUT", "DELETE", "PATCH")
_LOOPBACK_HOSTS = frozenset({"localhost", "127.0.0.1", "::1"})


def _csrf_error(request: web.Request) -> str | None:
    """
    CSRF protection for state-changing endpoints.

    Layers:
      1) Require an anti-CSRF header (X-Requested-With or X-CSRF-Token)
      2) If Origin is present, validate it against Host (with loopback allowance)
    """
    if request.method.upper() not in _STATE_CHANGING_METHODS:
        return None
    if not _has_csrf_header(request):
        return "Missing anti-CSRF header (X-Requested-With or X-CSRF-Token)"
    origin = request.headers.get("Origin")
    if not origin:
        return None
    if origin == "null":
        return "Cross-site request blocked (Origin=null)"
    host = request.headers.get("Host") or ""
    if not host:
        return "Missing Host header"
    parsed = urlparse(origin)
    if not parsed.scheme or not parsed.netloc:
        return "Cross-site request blocked (invalid Origin)"
    if parsed.netloc == host:
        return None
    if _is_loopback(parsed.hostname) and _is_loopback(host.rsplit(":", 1)[0].strip("[]")):
        return None
    return f"Cross-site request blocked ({parsed.netloc} != {host})"


def _has_csrf_header(request: web.Request) -> bool:
    return bool(request.headers.get("X-Requested-With")) or bool(request.headers.get("X-CSRF-Token"))


def _is_loopback(hostname: str | None) -> bool:
    return (hostname or "").lower() in _LOOPBACK_HOSTS
