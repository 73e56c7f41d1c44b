"""
Operator-facing error text for failed bulk actions and per-item errors.

Exception strings can carry storage paths or the service working directory;
both are masked before the text lands in a Failed state, a `BatchItemError`
or an API envelope.
"""
from __future__ import annotations

import os
import re
from typing import Any

from .log import get_logger

logger = get_logger(__name__)

_PATH_PATTERNS = (
    re.compile(r"[A-Za-z]:\\[^\s]+"),  # C:\...
    re.compile(r"\\\\[^\s\\]+\\[^\s]+"),  # \\host\share
    re.compile(r"(?<![A-Za-z0-9:/?&=#%])/(?!/)[^\s#?]+"),  # /srv/...; not URLs
)
_MAX_DETAIL_LEN = 200


def _debug_enabled() -> bool:
    return os.getenv("DAM_DEBUG", "").strip().lower() in ("1", "true", "yes", "on")


def _detail(exc: Any) -> str:
    raw = str(exc)
    if not raw and isinstance(exc, BaseException):
        # TimeoutError() and friends stringify to ""
        return type(exc).__name__
    return raw


def sanitize_error_message(exc: Any, fallback: str) -> str:
    """
    Single-line `"<fallback>: <detail>"` with paths replaced by `[path]`.

    Returns just `fallback` when there is no usable detail.
    """
    fallback = fallback or "An error occurred"
    if exc is None:
        return fallback

    detail = _detail(exc).replace(os.getcwd(), "[cwd]")
    for pattern in _PATH_PATTERNS:
        detail = pattern.sub("[path]", detail)
    detail = " ".join(detail.splitlines()).strip()

    if _debug_enabled():
        logger.debug("Sanitized error payload: %s", detail, exc_info=isinstance(exc, BaseException))

    if not detail:
        return fallback
    return f"{fallback}: {detail[:_MAX_DETAIL_LEN]}"
