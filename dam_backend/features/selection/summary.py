"""
Selection summarizer.

Folds the lifecycle state of the *currently known* selected entities into
aggregate counts. Selected ids with no snapshot (e.g. picked on a page that
is no longer loaded) are left out, so a summary is always a partial view.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from ...shared import ApprovalStatus, ItemKind


def _present(value: Any) -> bool:
    return value is not None and value != ""


@dataclass(frozen=True)
class LifecycleSnapshot:
    """Read-only lifecycle view of one entity as last seen by the client."""
    id: str
    kind: ItemKind = ItemKind.ASSET
    is_published: bool = False
    published_at: Optional[str] = None
    archived_at: Optional[str] = None
    deleted_at: Optional[str] = None
    approval_status: Optional[str] = None

    @property
    def published(self) -> bool:
        return self.is_published is True or _present(self.published_at)

    @property
    def archived(self) -> bool:
        return _present(self.archived_at)

    @property
    def deleted(self) -> bool:
        return _present(self.deleted_at)

    @property
    def approval_bucket(self) -> Optional[ApprovalStatus]:
        """approved/pending/rejected, or None for anything else (including "none")."""
        status = str(self.approval_status or "").strip().lower()
        if status == ApprovalStatus.APPROVED.value:
            return ApprovalStatus.APPROVED
        if status == ApprovalStatus.PENDING.value:
            return ApprovalStatus.PENDING
        if status == ApprovalStatus.REJECTED.value:
            return ApprovalStatus.REJECTED
        return None

    @staticmethod
    def from_mapping(raw: Mapping[str, Any]) -> "LifecycleSnapshot":
        """Parse the wire shape of an entity row."""
        item_id = str(raw.get("id") or "").strip()
        if not item_id:
            raise ValueError("Entity snapshot requires an id")

        def _ts(key: str) -> Optional[str]:
            value = raw.get(key)
            return str(value) if _present(value) else None

        approval = raw.get("approval_status")
        return LifecycleSnapshot(
            id=item_id,
            kind=ItemKind.parse(raw.get("kind") or raw.get("type"), default=ItemKind.ASSET),
            is_published=raw.get("is_published") is True,
            published_at=_ts("published_at"),
            archived_at=_ts("archived_at"),
            deleted_at=_ts("deleted_at"),
            approval_status=str(approval) if approval is not None else None,
        )


@dataclass(frozen=True)
class ApprovalCounts:
    approved: int = 0
    pending: int = 0
    rejected: int = 0


@dataclass(frozen=True)
class SelectionSummary:
    """Aggregate lifecycle counts over the known part of a selection."""
    published_count: int
    unpublished_count: int
    archived_count: int
    deleted_count: int
    approval: ApprovalCounts
    known_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "published_count": self.published_count,
            "unpublished_count": self.unpublished_count,
            "archived_count": self.archived_count,
            "deleted_count": self.deleted_count,
            "approval": {
                "approved": self.approval.approved,
                "pending": self.approval.pending,
                "rejected": self.approval.rejected,
            },
            "known_count": self.known_count,
        }


def summarize(
    selected_ids: Iterable[str],
    known_entities: Iterable[LifecycleSnapshot],
) -> Optional[SelectionSummary]:
    """
    Summarize the lifecycle state of the selected entities that are known.

    Returns None when no selected id has a snapshot; callers treat that as
    "eligibility cannot be evaluated".
    """
    wanted = set(selected_ids)
    if not wanted:
        return None

    published = unpublished = archived = deleted = 0
    approved = pending = rejected = 0
    seen: set[str] = set()

    for entity in known_entities:
        if entity.id not in wanted or entity.id in seen:
            continue
        seen.add(entity.id)

        if entity.published:
            published += 1
        else:
            unpublished += 1
        if entity.archived:
            archived += 1
        if entity.deleted:
            deleted += 1

        # Unrecognised approval values fall in no bucket.
        bucket = entity.approval_bucket
        if bucket is ApprovalStatus.APPROVED:
            approved += 1
        elif bucket is ApprovalStatus.PENDING:
            pending += 1
        elif bucket is ApprovalStatus.REJECTED:
            rejected += 1

    if not seen:
        return None

    return SelectionSummary(
        published_count=published,
        unpublished_count=unpublished,
        archived_count=archived,
        deleted_count=deleted,
        approval=ApprovalCounts(approved=approved, pending=pending, rejected=rejected),
        known_count=len(seen),
    )
