"""
Bulk action endpoints.

  GET  /dam/bulk-actions/catalog    full action catalog, grouped
  POST /dam/bulk-actions/eligible   eligible actions for a selection
  POST /dam/assets/bulk-action      run one bulk command through the executor
"""
from __future__ import annotations

from typing import Any, Mapping

from aiohttp import web

from ...features.bulk_actions import (
    ACTION_GROUPS,
    ActionId,
    EligibilityMode,
    eligible_actions,
    filter_groups,
)
from ...features.selection import LifecycleSnapshot, summarize
from ...shared import ErrorCode, Result, get_logger
from ...utils import normalize_ids, parse_bool
from ..core import _csrf_error, _json_response, _read_json, _require_services, safe_error_message

logger = get_logger(__name__)


def _parse_id_list(raw_value: object, field_name: str) -> Result[list[str]]:
    if not isinstance(raw_value, list):
        return Result.Err(ErrorCode.INVALID_INPUT, f"{field_name} must be a list", field=field_name)
    try:
        return Result.Ok(normalize_ids(raw_value))
    except ValueError as exc:
        return Result.Err(ErrorCode.INVALID_INPUT, f"{exc} in {field_name}", field=field_name)


def _parse_snapshots(raw_value: object) -> Result[list[LifecycleSnapshot]]:
    if raw_value is None:
        return Result.Ok([])
    if not isinstance(raw_value, list):
        return Result.Err(ErrorCode.INVALID_INPUT, "entities must be a list", field="entities")
    out: list[LifecycleSnapshot] = []
    for row in raw_value:
        if not isinstance(row, Mapping):
            return Result.Err(ErrorCode.INVALID_INPUT, "entities must contain objects", field="entities")
        try:
            out.append(LifecycleSnapshot.from_mapping(row))
        except ValueError as exc:
            return Result.Err(ErrorCode.INVALID_INPUT, str(exc), field="entities")
    return Result.Ok(out)


def _mode_from_body(body: Mapping[str, Any]) -> EligibilityMode:
    return EligibilityMode(
        is_trash_view=parse_bool(body.get("is_trash_view"), False),
        can_force_delete=parse_bool(body.get("can_force_delete"), False),
        can_edit_metadata=parse_bool(body.get("can_edit_metadata", True), True),
    )


def _eligibility_payload(body: Mapping[str, Any]) -> Result[dict[str, Any]]:
    ids_res = _parse_id_list(body.get("selected_ids"), "selected_ids")
    if not ids_res.ok:
        return ids_res.forward("Invalid selected_ids")
    snaps_res = _parse_snapshots(body.get("entities"))
    if not snaps_res.ok:
        return snaps_res.forward("Invalid entities")

    summary = summarize(ids_res.data or [], snaps_res.data or [])
    eligible = eligible_actions(summary, _mode_from_body(body))
    groups = filter_groups(ACTION_GROUPS, eligible)
    ordered = None
    if eligible is not None:
        ordered = [a.id.value for g in ACTION_GROUPS for a in g.actions if a.id in eligible]
    return Result.Ok(
        {
            "eligible": ordered,
            "groups": [g.to_dict() for g in groups],
            "summary": summary.to_dict() if summary is not None else None,
        }
    )


def register_bulk_action_routes(routes: web.RouteTableDef) -> None:
    @routes.get("/dam/bulk-actions/catalog")
    async def get_catalog(request: web.Request) -> web.Response:
        return _json_response(Result.Ok({"groups": [g.to_dict() for g in ACTION_GROUPS]}))

    @routes.post("/dam/bulk-actions/eligible")
    async def post_eligible(request: web.Request) -> web.Response:
        body_res = await _read_json(request)
        if not body_res.ok:
            return _json_response(body_res)
        return _json_response(_eligibility_payload(body_res.data or {}))

    @routes.post("/dam/assets/bulk-action")
    async def post_bulk_action(request: web.Request) -> web.Response:
        csrf = _csrf_error(request)
        if csrf:
            return _json_response(Result.Err(ErrorCode.CSRF, csrf))

        svc, error_result = _require_services(request)
        if error_result:
            return _json_response(error_result)
        executor = svc.get("executor")
        if executor is None:
            return _json_response(Result.Err(ErrorCode.SERVICE_UNAVAILABLE, "Batch executor unavailable"))

        body_res = await _read_json(request)
        if not body_res.ok:
            return _json_response(body_res)
        body = body_res.data or {}

        ids_res = _parse_id_list(body.get("asset_ids"), "asset_ids")
        if not ids_res.ok:
            return _json_response(ids_res)
        if not ids_res.data:
            return _json_response(Result.Err(ErrorCode.EMPTY_SELECTION, "No items selected", field="asset_ids"))

        action = ActionId.parse(body.get("action"))
        if action is None:
            return _json_response(
                Result.Err(ErrorCode.INVALID_INPUT, f"Unknown bulk action: {body.get('action')}", field="action")
            )
        payload = body.get("payload")
        if payload is None:
            payload = {}
        if not isinstance(payload, dict):
            return _json_response(Result.Err(ErrorCode.INVALID_INPUT, "payload must be an object", field="payload"))

        try:
            result = await executor.submit(action, ids_res.data, payload)
        except Exception as exc:
            logger.error("Bulk %s failed: %s", action.value, exc, exc_info=True)
            return _json_response(
                Result.Err(ErrorCode.UPDATE_FAILED, safe_error_message(exc, "Bulk action failed"))
            )
        return _json_response(result.map(lambda outcome: outcome.to_dict()))
