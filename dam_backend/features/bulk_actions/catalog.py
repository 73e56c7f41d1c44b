"""
Action catalog - the fixed taxonomy of bulk lifecycle commands.

Group and action order is hand-authored presentation order; filtering must
never reorder it.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Final, Iterable, Optional

from ...shared import MetadataOperation


class ActionId(str, Enum):
    """Closed set of bulk action identifiers (also the wire values)."""

    PUBLISH = "PUBLISH"
    UNPUBLISH = "UNPUBLISH"
    ARCHIVE = "ARCHIVE"
    RESTORE_ARCHIVE = "RESTORE_ARCHIVE"
    APPROVE = "APPROVE"
    MARK_PENDING = "MARK_PENDING"
    REJECT = "REJECT"
    METADATA_ADD = "METADATA_ADD"
    METADATA_REPLACE = "METADATA_REPLACE"
    METADATA_CLEAR = "METADATA_CLEAR"
    SOFT_DELETE = "SOFT_DELETE"
    RESTORE_TRASH = "RESTORE_TRASH"
    FORCE_DELETE = "FORCE_DELETE"

    @classmethod
    def parse(cls, value: Any) -> Optional["ActionId"]:
        if isinstance(value, ActionId):
            return value
        raw = str(value or "").strip().upper()
        try:
            return cls(raw)
        except ValueError:
            return None


class GroupId(str, Enum):
    PUBLICATION = "publication"
    ARCHIVE = "archive"
    APPROVAL = "approval"
    METADATA = "metadata"
    TRASH = "trash"


class Tint(str, Enum):
    WARNING = "warning"
    DANGER = "danger"


@dataclass(frozen=True)
class Action:
    id: ActionId
    group: GroupId
    label: str
    helper_text: str
    severity_tint: Optional[Tint] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id.value,
            "group": self.group.value,
            "label": self.label,
            "helper_text": self.helper_text,
            "severity_tint": self.severity_tint.value if self.severity_tint else None,
        }


@dataclass(frozen=True)
class ActionGroup:
    id: GroupId
    label: str
    description: str
    actions: tuple[Action, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id.value,
            "label": self.label,
            "description": self.description,
            "actions": [a.to_dict() for a in self.actions],
        }


def _group(gid: GroupId, label: str, description: str, *actions: tuple) -> ActionGroup:
    return ActionGroup(gid, label, description, tuple(Action(a[0], gid, *a[1:]) for a in actions))


ACTION_GROUPS: Final[tuple[ActionGroup, ...]] = (
    _group(
        GroupId.PUBLICATION, "Publication", "Control visibility of selected items.",
        (ActionId.PUBLISH, "Publish", "Make visible in the grid"),
        (ActionId.UNPUBLISH, "Unpublish", "Hide from the grid"),
    ),
    _group(
        GroupId.ARCHIVE, "Archive", "Archive or restore selected items.",
        (ActionId.ARCHIVE, "Archive", "Move to archive"),
        (ActionId.RESTORE_ARCHIVE, "Restore from Archive", "Make visible again"),
    ),
    _group(
        GroupId.APPROVAL, "Approval", "Change approval state.",
        (ActionId.APPROVE, "Mark Approved", "Approve selected items"),
        (ActionId.MARK_PENDING, "Mark Pending", "Set back to pending"),
        (ActionId.REJECT, "Mark Rejected", "Reject with a reason", Tint.WARNING),
    ),
    _group(
        GroupId.METADATA, "Metadata", "Add, replace, or clear metadata fields.",
        (ActionId.METADATA_ADD, "Add Metadata", "Add or merge field values"),
        (ActionId.METADATA_REPLACE, "Replace Metadata", "Overwrite field values"),
        (ActionId.METADATA_CLEAR, "Clear Metadata", "Remove field values"),
    ),
    _group(
        GroupId.TRASH, "Trash", "Move to trash or restore.",
        (ActionId.SOFT_DELETE, "Move to Trash", "Soft delete selected items", Tint.DANGER),
        (ActionId.RESTORE_TRASH, "Restore from Trash", "Restore deleted items"),
        (ActionId.FORCE_DELETE, "Permanently Delete", "Permanently remove from trash (cannot be undone)", Tint.DANGER),
    ),
)

_ACTIONS_BY_ID: Final[dict[ActionId, Action]] = {a.id: a for g in ACTION_GROUPS for a in g.actions}

if set(_ACTIONS_BY_ID) != set(ActionId):
    raise RuntimeError(f"Action catalog is missing: {sorted(set(ActionId) - set(_ACTIONS_BY_ID))}")

LIFECYCLE_ACTIONS: Final[frozenset[ActionId]] = frozenset({
    ActionId.PUBLISH,
    ActionId.UNPUBLISH,
    ActionId.ARCHIVE,
    ActionId.RESTORE_ARCHIVE,
    ActionId.APPROVE,
    ActionId.MARK_PENDING,
    ActionId.SOFT_DELETE,
    ActionId.RESTORE_TRASH,
    ActionId.FORCE_DELETE,
})

_METADATA_OPERATIONS: Final[dict[ActionId, MetadataOperation]] = {
    ActionId.METADATA_ADD: "add",
    ActionId.METADATA_REPLACE: "replace",
    ActionId.METADATA_CLEAR: "clear",
}

METADATA_ACTIONS: Final[frozenset[ActionId]] = frozenset(_METADATA_OPERATIONS)

# Verb used in "This will <verb> N selected items."
_CONFIRM_VERBS: Final[dict[ActionId, str]] = {
    ActionId.PUBLISH: "publish",
    ActionId.UNPUBLISH: "unpublish",
    ActionId.ARCHIVE: "archive",
    ActionId.RESTORE_ARCHIVE: "restore from archive",
    ActionId.APPROVE: "mark as approved",
    ActionId.MARK_PENDING: "mark as pending",
    ActionId.REJECT: "reject",
    ActionId.SOFT_DELETE: "move to trash",
    ActionId.RESTORE_TRASH: "restore from trash",
    ActionId.FORCE_DELETE: "permanently delete",
}


def get_action(action_id: ActionId) -> Action:
    return _ACTIONS_BY_ID[action_id]


def action_label(action_id: ActionId) -> str:
    return _ACTIONS_BY_ID[action_id].label


def is_metadata_action(action_id: ActionId) -> bool:
    return action_id in METADATA_ACTIONS


def metadata_operation(action_id: ActionId) -> MetadataOperation:
    """Operation name for a metadata action; raises KeyError for any other action."""
    return _METADATA_OPERATIONS[action_id]


def confirm_summary_text(action_id: ActionId, count: int) -> str:
    verb = _CONFIRM_VERBS.get(action_id, "update")
    return f"This will {verb} {count} selected item{'s' if count != 1 else ''}."


def filter_groups(
    groups: Iterable[ActionGroup],
    eligible: Optional[Iterable[ActionId]],
) -> list[ActionGroup]:
    """
    Restrict each group to eligible actions and drop groups left empty.

    `eligible=None` means eligibility is unknown: every group is returned as-is.
    """
    if eligible is None:
        return list(groups)
    allowed = frozenset(eligible)
    out: list[ActionGroup] = []
    for group in groups:
        kept = tuple(a for a in group.actions if a.id in allowed)
        if kept:
            out.append(replace(group, actions=kept))
    return out
