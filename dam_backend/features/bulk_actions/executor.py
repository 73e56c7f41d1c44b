"""
Batch executor contract and outcome types.

The executor is the only write path of the bulk-action workflow. It may be a
remote API (`dam_backend.adapters.http.HttpBatchExecutor`) or the in-process
reference implementation (`InMemoryBatchExecutor`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Protocol, Sequence

from ...shared import MetadataOperation, Result
from .catalog import ActionId


@dataclass(frozen=True)
class BatchItemError:
    id: str
    message: str


@dataclass(frozen=True)
class BatchOutcome:
    """Per-batch result. Skips and per-item errors are a partial failure, not an error."""
    processed: int
    skipped: int = 0
    errors: tuple[BatchItemError, ...] = ()
    total_selected: Optional[int] = None
    per_action_summary: dict[str, Any] = field(default_factory=dict)

    @property
    def partial(self) -> bool:
        return self.skipped > 0 or bool(self.errors)

    @property
    def message(self) -> str:
        parts = [f"{self.processed} updated"]
        if self.skipped > 0:
            parts.append(f"{self.skipped} skipped")
        msg = ", ".join(parts) + "."
        if self.errors:
            msg += f" {len(self.errors)} failed."
        return msg

    def to_dict(self) -> dict[str, Any]:
        return {
            "processed": self.processed,
            "skipped": self.skipped,
            "errors": [{"asset_id": e.id, "reason": e.message} for e in self.errors],
            "total_selected": self.total_selected,
            "per_action_summary": dict(self.per_action_summary),
        }

    @staticmethod
    def from_payload(payload: Mapping[str, Any]) -> "BatchOutcome":
        """Parse the wire shape (`processed`, `skipped`, `errors[{asset_id|id, reason|message}]`)."""
        raw_errors = payload.get("errors") or []
        errors: list[BatchItemError] = []
        if isinstance(raw_errors, list):
            for item in raw_errors:
                if not isinstance(item, Mapping):
                    continue
                item_id = item.get("asset_id", item.get("id"))
                reason = item.get("reason", item.get("message")) or "Unknown error"
                errors.append(BatchItemError(str(item_id), str(reason)))
        total = payload.get("total_selected")
        summary = payload.get("per_action_summary")
        return BatchOutcome(
            processed=int(payload.get("processed") or 0),
            skipped=int(payload.get("skipped") or 0),
            errors=tuple(errors),
            total_selected=int(total) if total is not None else None,
            per_action_summary=dict(summary) if isinstance(summary, Mapping) else {},
        )


class BatchExecutor(Protocol):
    """Issues one batch command. Must be safe to call again on client retry."""

    async def submit(
        self,
        action: ActionId,
        target_ids: Sequence[str],
        payload: Mapping[str, Any],
    ) -> Result[BatchOutcome]: ...


class MetadataEditor(Protocol):
    """Opens the external metadata editor for the given targets."""

    def __call__(self, target_ids: Sequence[str], operation: MetadataOperation) -> None: ...
