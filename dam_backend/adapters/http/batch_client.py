"""
Remote batch executor.

POSTs `{asset_ids, action, payload}` to the bulk-action endpoint and parses
`{processed, skipped, errors[], total_selected?, per_action_summary?}`, either
bare or wrapped in the `{ok, data, error, code}` envelope.
"""
from __future__ import annotations

import asyncio
from typing import Any, Mapping, Optional, Sequence

from aiohttp import ClientError, ClientSession, ClientTimeout

from ...config import API_BASE_URL, BULK_ACTION_URL, HTTP_TIMEOUT_S
from ...shared import ErrorCode, Result, get_logger, sanitize_error_message
from ...features.bulk_actions.catalog import ActionId
from ...features.bulk_actions.executor import BatchOutcome

logger = get_logger(__name__)


def _join_url(base_url: str, path: str) -> str:
    if path.startswith("http://") or path.startswith("https://"):
        return path
    return base_url.rstrip("/") + "/" + path.lstrip("/")


class HttpBatchExecutor:
    """`BatchExecutor` backed by the remote bulk-action endpoint."""

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        path: str = BULK_ACTION_URL,
        *,
        timeout_s: float = HTTP_TIMEOUT_S,
        session: Optional[ClientSession] = None,
        headers: Optional[Mapping[str, str]] = None,
    ):
        self._url = _join_url(base_url, path)
        self._timeout = ClientTimeout(total=float(timeout_s))
        self._session = session
        self._headers = {"Accept": "application/json", "X-Requested-With": "XMLHttpRequest"}
        if headers:
            self._headers.update(headers)

    @property
    def url(self) -> str:
        return self._url

    async def submit(
        self,
        action: ActionId,
        target_ids: Sequence[str],
        payload: Mapping[str, Any],
    ) -> Result[BatchOutcome]:
        body = {"asset_ids": list(target_ids), "action": action.value, "payload": dict(payload or {})}
        try:
            if self._session is not None:
                return await self._post(self._session, body)
            async with ClientSession() as session:
                return await self._post(session, body)
        except asyncio.TimeoutError:
            logger.warning("Timeout submitting bulk %s (%d items)", action.value, len(body["asset_ids"]))
            return Result.Err(ErrorCode.TIMEOUT, "Bulk action request timed out")
        except ClientError as exc:
            logger.warning("Bulk %s request failed: %s", action.value, exc)
            return Result.Err(ErrorCode.TRANSPORT_ERROR, sanitize_error_message(exc, "Bulk action request failed"))

    async def _post(self, session: ClientSession, body: dict[str, Any]) -> Result[BatchOutcome]:
        async with session.post(self._url, json=body, headers=self._headers, timeout=self._timeout) as resp:
            try:
                data: Any = await resp.json(content_type=None)
            except ValueError:
                data = None
            if resp.status < 200 or resp.status >= 300:
                message = _error_message(data) or f"Bulk action endpoint returned HTTP {resp.status}"
                return Result.Err(ErrorCode.TRANSPORT_ERROR, message, status=resp.status)
        return _parse_outcome(data)


def _error_message(data: Any) -> Optional[str]:
    if isinstance(data, Mapping):
        for key in ("error", "message"):
            value = data.get(key)
            if value:
                return str(value)
    return None


def _parse_outcome(data: Any) -> Result[BatchOutcome]:
    if not isinstance(data, Mapping):
        return Result.Err(ErrorCode.TRANSPORT_ERROR, "Bulk action endpoint returned an invalid response")
    if "ok" in data:
        if not data.get("ok"):
            return Result.Err(
                str(data.get("code") or ErrorCode.UPDATE_FAILED.value),
                _error_message(data) or "Bulk action failed",
            )
        data = data.get("data")
        if not isinstance(data, Mapping):
            return Result.Err(ErrorCode.TRANSPORT_ERROR, "Bulk action endpoint returned an invalid response")
    try:
        return Result.Ok(BatchOutcome.from_payload(data))
    except (TypeError, ValueError) as exc:
        return Result.Err(ErrorCode.TRANSPORT_ERROR, sanitize_error_message(exc, "Invalid bulk action response"))
