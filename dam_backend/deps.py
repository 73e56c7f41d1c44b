"""
Dependency injection - builds services and operator sessions.
Simple, debug-friendly DI without framework magic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .adapters.http import HttpBatchExecutor
from .config import API_BASE_URL, BULK_ACTION_URL, LARGE_SELECTION_THRESHOLD, REJECTION_REASON_MAX_LEN
from .features.bulk_actions import (
    BatchExecutor,
    BulkActionWorkflow,
    EligibilityMode,
    InMemoryBatchExecutor,
    MetadataEditor,
    WorkflowSettings,
)
from .features.selection import SelectionStore
from .shared import ErrorCode, Result, get_logger, log_success

logger = get_logger(__name__)


@dataclass
class Session:
    """Per-operator state: one selection store shared by every workflow it opens."""
    executor: BatchExecutor
    store: SelectionStore = field(default_factory=SelectionStore)
    mode: EligibilityMode = field(default_factory=EligibilityMode)
    metadata_editor: Optional[MetadataEditor] = None
    settings: WorkflowSettings = field(default_factory=WorkflowSettings)

    def new_workflow(self, *, mode: Optional[EligibilityMode] = None) -> BulkActionWorkflow:
        return BulkActionWorkflow(
            self.store,
            self.executor,
            mode=mode or self.mode,
            metadata_editor=self.metadata_editor,
            settings=self.settings,
        )


def build_session(
    executor: BatchExecutor,
    *,
    mode: Optional[EligibilityMode] = None,
    metadata_editor: Optional[MetadataEditor] = None,
) -> Session:
    return Session(
        executor=executor,
        mode=mode or EligibilityMode(),
        metadata_editor=metadata_editor,
        settings=WorkflowSettings(
            large_selection_threshold=LARGE_SELECTION_THRESHOLD,
            rejection_reason_max_len=REJECTION_REASON_MAX_LEN,
        ),
    )


async def build_services(executor: Optional[BatchExecutor] = None, *, remote: bool = False) -> Result[dict[str, Any]]:
    """
    Build the service dict used by the route layer.

    Args:
        executor: explicit executor (tests, embedding apps)
        remote: when no executor is given, forward to the remote bulk-action
            endpoint instead of the in-process repository
    """
    if executor is None:
        try:
            if remote:
                executor = HttpBatchExecutor(API_BASE_URL, BULK_ACTION_URL)
                logger.info("Bulk actions forwarded to %s", executor.url)
            else:
                executor = InMemoryBatchExecutor()
        except Exception as exc:
            logger.error("Failed to initialize batch executor: %s", exc)
            return Result.Err(ErrorCode.SERVICE_UNAVAILABLE, f"Failed to initialize batch executor: {exc}")

    services: dict[str, Any] = {"executor": executor}
    log_success(logger, f"Bulk action services ready ({type(executor).__name__})")
    return Result.Ok(services)
