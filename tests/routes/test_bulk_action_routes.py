import json

import pytest
from aiohttp.test_utils import TestClient, TestServer

from dam_backend.routes import create_app

_HEADERS = {"Content-Type": "application/json", "X-Requested-With": "XMLHttpRequest"}


async def _client(services) -> TestClient:
    client = TestClient(TestServer(create_app(services)))
    await client.start_server()
    return client


@pytest.mark.asyncio
async def test_catalog_lists_every_group(services):
    client = await _client(services)
    try:
        resp = await client.get("/dam/bulk-actions/catalog")
        payload = await resp.json()
        assert resp.status == 200
        assert payload["ok"] is True
        assert [g["id"] for g in payload["data"]["groups"]] == [
            "publication",
            "archive",
            "approval",
            "metadata",
            "trash",
        ]
        assert resp.headers.get("X-Request-ID")
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_eligible_for_trashed_selection(services):
    client = await _client(services)
    try:
        body = {
            "selected_ids": ["a4"],
            "entities": [{"id": "a4", "deleted_at": "2024-01-04T00:00:00Z"}],
            "is_trash_view": True,
            "can_force_delete": "true",
        }
        resp = await client.post("/dam/bulk-actions/eligible", data=json.dumps(body), headers=_HEADERS)
        payload = await resp.json()
        assert payload["ok"] is True
        data = payload["data"]
        assert "FORCE_DELETE" in data["eligible"]
        assert "SOFT_DELETE" not in data["eligible"]
        assert data["summary"]["deleted_count"] == 1
        assert {a["id"] for g in data["groups"] for a in g["actions"]} == set(data["eligible"])
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_eligible_unknown_selection_returns_all_groups(services):
    client = await _client(services)
    try:
        body = {"selected_ids": ["zz"], "entities": []}
        resp = await client.post("/dam/bulk-actions/eligible", data=json.dumps(body), headers=_HEADERS)
        payload = await resp.json()
        assert payload["data"]["eligible"] is None
        assert payload["data"]["summary"] is None
        assert len(payload["data"]["groups"]) == 5
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_eligible_rejects_malformed_entities(services):
    client = await _client(services)
    try:
        body = {"selected_ids": ["a1"], "entities": [{"name": "no id"}]}
        resp = await client.post("/dam/bulk-actions/eligible", data=json.dumps(body), headers=_HEADERS)
        payload = await resp.json()
        assert payload["ok"] is False
        assert payload["code"] == "INVALID_INPUT"
        assert payload["meta"]["field"] == "entities"
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_bulk_action_requires_csrf_header(services, executor):
    client = await _client(services)
    try:
        resp = await client.post(
            "/dam/assets/bulk-action",
            data=json.dumps({"asset_ids": ["a1"], "action": "PUBLISH"}),
            headers={"Content-Type": "application/json"},
        )
        payload = await resp.json()
        assert payload["ok"] is False
        assert payload["code"] == "CSRF"
        assert executor.get("a1").published_at is None
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_bulk_action_runs_executor(services, executor):
    client = await _client(services)
    try:
        resp = await client.post(
            "/dam/assets/bulk-action",
            data=json.dumps({"asset_ids": ["a1", "a2", 3], "action": "publish", "payload": {}}),
            headers=_HEADERS,
        )
        payload = await resp.json()
        assert payload["ok"] is True
        assert payload["data"]["processed"] == 1
        assert payload["data"]["skipped"] == 2
        assert payload["data"]["errors"] == []
        assert executor.get("a1").published_at is not None
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_bulk_action_validation_errors(services):
    client = await _client(services)
    try:
        cases = [
            ({"asset_ids": [], "action": "PUBLISH"}, "EMPTY_SELECTION"),
            ({"asset_ids": "a1", "action": "PUBLISH"}, "INVALID_INPUT"),
            ({"asset_ids": ["a1", True], "action": "PUBLISH"}, "INVALID_INPUT"),
            ({"asset_ids": ["a1"], "action": "EXPLODE"}, "INVALID_INPUT"),
            ({"asset_ids": ["a1"], "action": "PUBLISH", "payload": []}, "INVALID_INPUT"),
            ({"asset_ids": ["a1"], "action": "REJECT", "payload": {}}, "INVALID_INPUT"),
        ]
        for body, code in cases:
            resp = await client.post("/dam/assets/bulk-action", data=json.dumps(body), headers=_HEADERS)
            payload = await resp.json()
            assert resp.status == 200
            assert payload["ok"] is False, body
            assert payload["code"] == code, body
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_bulk_action_invalid_json(services):
    client = await _client(services)
    try:
        resp = await client.post("/dam/assets/bulk-action", data="{not json", headers=_HEADERS)
        payload = await resp.json()
        assert payload["code"] == "INVALID_JSON"
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_bulk_action_rejects_oversized_body(services):
    client = await _client(services)
    try:
        body = json.dumps({"asset_ids": ["a1"], "action": "PUBLISH", "payload": {"pad": "x" * (2 * 1024 * 1024)}})
        resp = await client.post("/dam/assets/bulk-action", data=body, headers=_HEADERS)
        payload = await resp.json()
        assert payload["ok"] is False
        assert payload["code"] == "INVALID_INPUT"
        assert "too large" in payload["error"]
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_bulk_action_without_services():
    client = await _client({})
    try:
        resp = await client.post(
            "/dam/assets/bulk-action",
            data=json.dumps({"asset_ids": ["a1"], "action": "PUBLISH"}),
            headers=_HEADERS,
        )
        payload = await resp.json()
        assert payload["code"] == "SERVICE_UNAVAILABLE"
    finally:
        await client.close()
