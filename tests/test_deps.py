import pytest

from dam_backend.adapters.http import HttpBatchExecutor
from dam_backend.deps import build_services, build_session
from dam_backend.features.bulk_actions import ActionId, EligibilityMode, InMemoryBatchExecutor, Selecting
from dam_backend.features.selection import SelectedItem
from dam_backend.shared import ItemKind


@pytest.mark.asyncio
async def test_build_services_defaults_to_in_memory_executor():
    res = await build_services()
    assert res.ok
    assert isinstance(res.data["executor"], InMemoryBatchExecutor)


@pytest.mark.asyncio
async def test_build_services_remote_uses_http_executor():
    res = await build_services(remote=True)
    assert res.ok
    assert isinstance(res.data["executor"], HttpBatchExecutor)
    assert res.data["executor"].url.endswith("/app/assets/bulk-action")


def test_workflows_share_the_session_selection(executor):
    session = build_session(executor, mode=EligibilityMode(is_trash_view=True))
    session.store.select(SelectedItem("a1", ItemKind.ASSET))

    first = session.new_workflow()
    second = session.new_workflow()
    assert first.pick(ActionId.PUBLISH, ["a1"], executor.snapshots(["a1"])).ok
    assert isinstance(second.state, Selecting)
    assert second.pick(ActionId.PUBLISH, ["a1"], executor.snapshots(["a1"])).ok


def test_sessions_do_not_share_selection(executor):
    a = build_session(executor)
    b = build_session(executor)
    a.store.select(SelectedItem("a1", ItemKind.ASSET))
    assert len(b.store) == 0
