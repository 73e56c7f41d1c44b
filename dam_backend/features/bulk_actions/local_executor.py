"""
In-process batch executor.

Applies bulk lifecycle commands to an in-memory entity repository with the
same per-item rules as the production bulk-action endpoint: items already in
the target state are skipped as no-ops, unauthorized items are skipped, and a
failure on one item is reported without aborting the batch.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from ...config import BULK_CHUNK_SIZE, MAX_BULK_ITEMS
from ...shared import ErrorCode, ItemKind, Result, get_logger, log_structured, sanitize_error_message
from ...utils import normalize_ids
from ..selection.summary import LifecycleSnapshot
from .catalog import METADATA_ACTIONS, ActionId, metadata_operation
from .executor import BatchItemError, BatchOutcome

logger = get_logger(__name__)

Authorizer = Callable[[ActionId, "EntityRecord"], bool]

_TRASH_ACTIONS = frozenset({ActionId.RESTORE_TRASH, ActionId.FORCE_DELETE})


def _now_iso() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())


@dataclass
class EntityRecord:
    """Mutable server-side state of one entity."""
    id: str
    kind: ItemKind = ItemKind.ASSET
    published_at: Optional[str] = None
    archived_at: Optional[str] = None
    deleted_at: Optional[str] = None
    approval_status: Optional[str] = None
    approved_at: Optional[str] = None
    rejected_at: Optional[str] = None
    rejection_reason: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def snapshot(self) -> LifecycleSnapshot:
        return LifecycleSnapshot(
            id=self.id,
            kind=self.kind,
            is_published=self.published_at is not None,
            published_at=self.published_at,
            archived_at=self.archived_at,
            deleted_at=self.deleted_at,
            approval_status=self.approval_status,
        )


class InMemoryBatchExecutor:
    """Reference `BatchExecutor` over a dict of `EntityRecord`."""

    def __init__(
        self,
        entities: Optional[Iterable[EntityRecord]] = None,
        *,
        authorize: Optional[Authorizer] = None,
        chunk_size: int = BULK_CHUNK_SIZE,
    ):
        self._entities: Dict[str, EntityRecord] = {e.id: e for e in (entities or [])}
        self._authorize = authorize
        self._chunk_size = max(1, int(chunk_size))
        self._lock = asyncio.Lock()
        self._handlers: Dict[ActionId, Callable[[EntityRecord, Mapping[str, Any]], bool]] = {
            ActionId.PUBLISH: self._publish,
            ActionId.UNPUBLISH: self._unpublish,
            ActionId.ARCHIVE: self._archive,
            ActionId.RESTORE_ARCHIVE: self._restore_archive,
            ActionId.APPROVE: self._approve,
            ActionId.MARK_PENDING: self._mark_pending,
            ActionId.REJECT: self._reject,
            ActionId.SOFT_DELETE: self._soft_delete,
            ActionId.RESTORE_TRASH: self._restore_trash,
            ActionId.FORCE_DELETE: self._force_delete,
        }
        missing = set(ActionId) - set(self._handlers) - METADATA_ACTIONS
        if missing:
            raise RuntimeError(f"No bulk handler for: {sorted(a.value for a in missing)}")

    # --- repository -------------------------------------------------------

    def add(self, entity: EntityRecord) -> None:
        self._entities[entity.id] = entity

    def get(self, entity_id: str) -> Optional[EntityRecord]:
        return self._entities.get(entity_id)

    def snapshots(self, ids: Optional[Iterable[str]] = None) -> List[LifecycleSnapshot]:
        """Snapshots for `ids` (all entities when None), skipping unknown ids."""
        if ids is None:
            return [e.snapshot() for e in self._entities.values()]
        out: List[LifecycleSnapshot] = []
        for entity_id in ids:
            entity = self._entities.get(entity_id)
            if entity is not None:
                out.append(entity.snapshot())
        return out

    # --- BatchExecutor ----------------------------------------------------

    async def submit(
        self,
        action: ActionId,
        target_ids: Sequence[str],
        payload: Mapping[str, Any],
    ) -> Result[BatchOutcome]:
        payload = payload or {}
        try:
            ids = normalize_ids(target_ids)
        except ValueError as exc:
            return Result.Err(ErrorCode.INVALID_INPUT, str(exc), field="asset_ids")
        if not ids:
            return Result.Err(ErrorCode.EMPTY_SELECTION, "No items selected")
        if len(ids) > MAX_BULK_ITEMS:
            return Result.Err(ErrorCode.INVALID_INPUT, f"Too many items ({len(ids)} > {MAX_BULK_ITEMS})")

        if action is ActionId.REJECT and not str(payload.get("rejection_reason") or "").strip():
            return Result.Err(ErrorCode.INVALID_INPUT, "Rejection reason is required", field="reason")

        if action in METADATA_ACTIONS:
            op = metadata_operation(action)
            metadata = payload.get("metadata") or {}
            if not isinstance(metadata, Mapping):
                return Result.Err(ErrorCode.INVALID_INPUT, "Metadata payload must be an object", field="metadata")
            if op != "clear" and not metadata:
                return Result.Err(ErrorCode.INVALID_INPUT, "Metadata payload is required", field="metadata")

        async with self._lock:
            outcome = self._run(action, ids, payload)

        log_structured(
            logger,
            logging.INFO,
            "bulk_action_executed",
            action=action.value,
            total=len(ids),
            processed=outcome.processed,
            skipped=outcome.skipped,
            errors=len(outcome.errors),
        )
        return Result.Ok(outcome)

    def _run(self, action: ActionId, ids: List[str], payload: Mapping[str, Any]) -> BatchOutcome:
        processed = 0
        skipped = 0
        errors: List[BatchItemError] = []
        summary: Dict[str, Any] = {}

        def _bump(key: str) -> None:
            summary[key] = int(summary.get(key, 0)) + 1

        for start in range(0, len(ids), self._chunk_size):
            for entity_id in ids[start:start + self._chunk_size]:
                entity = self._entities.get(entity_id)
                if entity is None or not self._in_scope(action, entity):
                    skipped += 1
                    _bump("skipped_missing")
                    continue
                try:
                    if self._authorize is not None and not self._authorize(action, entity):
                        skipped += 1
                        _bump("skipped_unauthorized")
                        continue
                    changed = self._apply(action, entity, payload)
                except Exception as exc:
                    logger.warning("Bulk %s failed for %s: %s", action.value, entity_id, exc)
                    errors.append(BatchItemError(entity_id, sanitize_error_message(exc, "Update failed")))
                    continue
                if not changed:
                    skipped += 1
                    _bump("skipped_no_op")
                    continue
                processed += 1

        if action in METADATA_ACTIONS:
            summary["metadata_operation"] = metadata_operation(action)

        return BatchOutcome(
            processed=processed,
            skipped=skipped,
            errors=tuple(errors),
            total_selected=len(ids),
            per_action_summary=summary,
        )

    @staticmethod
    def _in_scope(action: ActionId, entity: EntityRecord) -> bool:
        # Trash actions only see trashed items; the rest only live ones.
        if action in _TRASH_ACTIONS:
            return entity.deleted_at is not None
        if action is ActionId.SOFT_DELETE:
            return True
        return entity.deleted_at is None

    def _apply(self, action: ActionId, entity: EntityRecord, payload: Mapping[str, Any]) -> bool:
        if action in METADATA_ACTIONS:
            return self._apply_metadata(action, entity, payload)
        return self._handlers[action](entity, payload)

    # --- per-action rules (True = changed, False = no-op) -------------------

    def _publish(self, entity: EntityRecord, _payload: Mapping[str, Any]) -> bool:
        if entity.published_at is not None:
            return False
        entity.published_at = _now_iso()
        return True

    def _unpublish(self, entity: EntityRecord, _payload: Mapping[str, Any]) -> bool:
        if entity.published_at is None:
            return False
        entity.published_at = None
        return True

    def _archive(self, entity: EntityRecord, _payload: Mapping[str, Any]) -> bool:
        if entity.archived_at is not None:
            return False
        entity.archived_at = _now_iso()
        return True

    def _restore_archive(self, entity: EntityRecord, _payload: Mapping[str, Any]) -> bool:
        if entity.archived_at is None:
            return False
        entity.archived_at = None
        return True

    def _approve(self, entity: EntityRecord, _payload: Mapping[str, Any]) -> bool:
        entity.approval_status = "approved"
        entity.approved_at = _now_iso()
        entity.rejected_at = None
        entity.rejection_reason = None
        return True

    def _mark_pending(self, entity: EntityRecord, _payload: Mapping[str, Any]) -> bool:
        entity.approval_status = "pending"
        entity.approved_at = None
        entity.rejected_at = None
        entity.rejection_reason = None
        return True

    def _reject(self, entity: EntityRecord, payload: Mapping[str, Any]) -> bool:
        entity.approval_status = "rejected"
        entity.rejected_at = _now_iso()
        entity.rejection_reason = str(payload.get("rejection_reason") or "").strip()
        entity.approved_at = None
        return True

    def _soft_delete(self, entity: EntityRecord, _payload: Mapping[str, Any]) -> bool:
        if entity.deleted_at is not None:
            return False
        entity.deleted_at = _now_iso()
        return True

    def _restore_trash(self, entity: EntityRecord, _payload: Mapping[str, Any]) -> bool:
        if entity.deleted_at is None:
            return False
        entity.deleted_at = None
        return True

    def _force_delete(self, entity: EntityRecord, _payload: Mapping[str, Any]) -> bool:
        self._entities.pop(entity.id, None)
        return True

    @staticmethod
    def _apply_metadata(action: ActionId, entity: EntityRecord, payload: Mapping[str, Any]) -> bool:
        op = metadata_operation(action)
        fields: Mapping[str, Any] = payload.get("metadata") or {}
        before = dict(entity.metadata)
        if op == "add":
            for key, value in fields.items():
                current = entity.metadata.get(key)
                if isinstance(current, list) and isinstance(value, list):
                    entity.metadata[key] = current + [v for v in value if v not in current]
                else:
                    entity.metadata[key] = value
        elif op == "replace":
            entity.metadata.update(fields)
        elif fields:
            for key in fields:
                entity.metadata.pop(key, None)
        else:
            entity.metadata.clear()
        return entity.metadata != before
