"""
Configuration for the DAM bulk-action console.

Every knob is read from the environment once at import time. Invalid values
are logged and replaced by the default; out-of-range values are clamped.
"""
import os
import logging

from .utils import env_bool

logger = logging.getLogger(__name__)


def _env_raw(*names: str, default: str | None = None) -> str | None:
    for name in names:
        if not name:
            continue
        val = os.getenv(name)
        if val is not None and str(val).strip() != "":
            return str(val).strip()
    return default


def _env_int(default: int, *names: str, min_value: int | None = None, max_value: int | None = None) -> int:
    raw = _env_raw(*names)
    if raw is None:
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid integer for %s=%r, using default=%s", names[0] if names else "<unknown>", raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning("Value too small for %s=%s, clamped to %s", names[0] if names else "<unknown>", value, min_value)
        value = min_value
    if max_value is not None and value > max_value:
        logger.warning("Value too large for %s=%s, clamped to %s", names[0] if names else "<unknown>", value, max_value)
        value = max_value
    return value


def _env_float(default: float, *names: str, min_value: float | None = None, max_value: float | None = None) -> float:
    raw = _env_raw(*names)
    if raw is None:
        return default
    try:
        value = float(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid float for %s=%r, using default=%s", names[0] if names else "<unknown>", raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning("Value too small for %s=%s, clamped to %s", names[0] if names else "<unknown>", value, min_value)
        value = min_value
    if max_value is not None and value > max_value:
        logger.warning("Value too large for %s=%s, clamped to %s", names[0] if names else "<unknown>", value, max_value)
        value = max_value
    return value


def _env_bool(default: bool, *names: str) -> bool:
    for name in names:
        if name and name in os.environ:
            return env_bool(name, default)
    return default


# Selections strictly larger than this require an explicit confirmation.
DEFAULT_LARGE_SELECTION_THRESHOLD = 100
LARGE_SELECTION_THRESHOLD = _env_int(
    DEFAULT_LARGE_SELECTION_THRESHOLD, "DAM_LARGE_SELECTION_THRESHOLD", min_value=1
)

DEFAULT_REJECTION_REASON_MAX_LEN = 2000
REJECTION_REASON_MAX_LEN = _env_int(
    DEFAULT_REJECTION_REASON_MAX_LEN, "DAM_REJECTION_REASON_MAX_LEN", min_value=1, max_value=10_000
)

# Batch executor transport
API_BASE_URL = _env_raw("DAM_API_BASE_URL", default="http://127.0.0.1:8000") or "http://127.0.0.1:8000"
BULK_ACTION_URL = _env_raw("DAM_BULK_ACTION_URL", default="/app/assets/bulk-action") or "/app/assets/bulk-action"
HTTP_TIMEOUT_S = _env_float(30.0, "DAM_HTTP_TIMEOUT_S", min_value=1.0, max_value=600.0)

# Server-side processing
BULK_CHUNK_SIZE = _env_int(50, "DAM_BULK_CHUNK_SIZE", min_value=1, max_value=5000)
MAX_BULK_ITEMS = _env_int(10_000, "DAM_MAX_BULK_ITEMS", min_value=1)
MAX_JSON_BYTES = _env_int(2 * 1024 * 1024, "DAM_MAX_JSON_SIZE", min_value=1024)

DEBUG = _env_bool(False, "DAM_DEBUG")
