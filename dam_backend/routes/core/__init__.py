"""
Core utilities for route handlers.
"""
from .request_json import _read_json
from .response import _json_response, safe_error_message
from .security import _csrf_error
from .services import APP_KEY_SERVICES, _require_services

__all__ = [
    "_json_response",
    "safe_error_message",
    "_csrf_error",
    "_read_json",
    "_require_services",
    "APP_KEY_SERVICES",
]
