import sys

import pytest
import pytest_asyncio

from .repo_root import REPO_ROOT

if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


@pytest.fixture
def entities():
    from dam_backend.features.bulk_actions import EntityRecord

    return [
        EntityRecord("a1", approval_status="pending"),
        EntityRecord("a2", published_at="2024-01-02T00:00:00Z", approval_status="approved"),
        EntityRecord("a3", archived_at="2024-01-03T00:00:00Z", approval_status="rejected"),
        EntityRecord("a4", deleted_at="2024-01-04T00:00:00Z"),
    ]


@pytest.fixture
def executor(entities):
    from dam_backend.features.bulk_actions import InMemoryBatchExecutor

    return InMemoryBatchExecutor(entities)


@pytest_asyncio.fixture
async def services(executor):
    from dam_backend.deps import build_services

    svc_res = await build_services(executor)
    assert svc_res.ok, svc_res.error
    yield svc_res.data
