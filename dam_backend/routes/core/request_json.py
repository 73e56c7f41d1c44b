"""
Bounded JSON body reader for the bulk-action endpoints.

Selections can run to thousands of ids, so the body is streamed and cut off
at `DAM_MAX_JSON_SIZE` rather than trusting Content-Length alone.
"""

from __future__ import annotations

import json
from typing import Any, Optional

from aiohttp import web

from ...config import MAX_JSON_BYTES
from ...shared import ErrorCode, Result

_CHUNK_BYTES = 64 * 1024


def _too_large(limit: int, size: Optional[int] = None) -> Result[Any]:
    detail = f"{size} > {limit}" if size is not None else f"> {limit}"
    return Result.Err(ErrorCode.INVALID_INPUT, f"JSON body too large ({detail})", limit=limit, size=size)


async def _read_json(request: web.Request, *, max_bytes: Optional[int] = None) -> Result[dict]:
    """Decode the request body as a JSON object; never raises."""
    limit = int(max_bytes) if max_bytes is not None else MAX_JSON_BYTES

    declared = request.content_length
    if declared is not None and declared > limit:
        return _too_large(limit, declared)

    buf = bytearray()
    try:
        async for chunk in request.content.iter_chunked(_CHUNK_BYTES):
            buf.extend(chunk)
            if len(buf) > limit:
                return _too_large(limit)
    except Exception as exc:
        return Result.Err(ErrorCode.INVALID_JSON, f"Failed to read request body: {exc}")

    return _parse_object(bytes(buf))


def _parse_object(body: bytes) -> Result[dict]:
    try:
        parsed: Any = json.loads(body.decode("utf-8")) if body else {}
    except UnicodeDecodeError as exc:
        return Result.Err(ErrorCode.INVALID_JSON, f"Invalid UTF-8 JSON body: {exc}")
    except ValueError as exc:
        return Result.Err(ErrorCode.INVALID_JSON, f"Invalid JSON body: {exc}")
    if not isinstance(parsed, dict):
        return Result.Err(ErrorCode.INVALID_JSON, "JSON body must be an object")
    return Result.Ok(parsed)
