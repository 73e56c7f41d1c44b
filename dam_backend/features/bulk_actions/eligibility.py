"""
Action eligibility engine.

Maps a selection summary to the set of actions that may be offered. Each
action has exactly one rule; the table must cover every `ActionId`.

Conditions are a product decision, not derived: most actions are offered
when at least one known item would change, but ARCHIVE is offered only when
nothing in the selection is archived yet and SOFT_DELETE only when nothing is
deleted yet.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Final, Optional

from ..selection.summary import SelectionSummary
from .catalog import METADATA_ACTIONS, ActionId


@dataclass(frozen=True)
class EligibilityMode:
    """View mode and capability flags supplied by the caller."""
    is_trash_view: bool = False
    can_force_delete: bool = False
    can_edit_metadata: bool = True


_Rule = Callable[[SelectionSummary, EligibilityMode], bool]

_RULES: Final[dict[ActionId, _Rule]] = {
    ActionId.PUBLISH: lambda s, m: s.unpublished_count > 0,
    ActionId.UNPUBLISH: lambda s, m: s.published_count > 0,
    ActionId.ARCHIVE: lambda s, m: s.archived_count == 0,
    ActionId.RESTORE_ARCHIVE: lambda s, m: s.archived_count > 0,
    ActionId.APPROVE: lambda s, m: s.approval.pending > 0 or s.approval.rejected > 0,
    ActionId.MARK_PENDING: lambda s, m: s.approval.approved > 0 or s.approval.rejected > 0,
    ActionId.REJECT: lambda s, m: s.approval.pending > 0,
    ActionId.METADATA_ADD: lambda s, m: m.can_edit_metadata,
    ActionId.METADATA_REPLACE: lambda s, m: m.can_edit_metadata,
    ActionId.METADATA_CLEAR: lambda s, m: m.can_edit_metadata,
    ActionId.SOFT_DELETE: lambda s, m: s.deleted_count == 0,
    ActionId.RESTORE_TRASH: lambda s, m: s.deleted_count > 0,
    ActionId.FORCE_DELETE: lambda s, m: m.is_trash_view and s.deleted_count > 0 and m.can_force_delete,
}

# How many known items an action would actually change.
_AFFECTED: Final[dict[ActionId, Callable[[SelectionSummary], int]]] = {
    ActionId.PUBLISH: lambda s: s.unpublished_count,
    ActionId.UNPUBLISH: lambda s: s.published_count,
    ActionId.ARCHIVE: lambda s: s.known_count - s.archived_count,
    ActionId.RESTORE_ARCHIVE: lambda s: s.archived_count,
    ActionId.APPROVE: lambda s: s.approval.pending + s.approval.rejected,
    ActionId.MARK_PENDING: lambda s: s.approval.approved + s.approval.rejected,
    ActionId.REJECT: lambda s: s.approval.pending,
    ActionId.SOFT_DELETE: lambda s: s.known_count - s.deleted_count,
    ActionId.RESTORE_TRASH: lambda s: s.deleted_count,
    ActionId.FORCE_DELETE: lambda s: s.deleted_count,
}

_missing = set(ActionId) - set(_RULES)
if _missing:
    raise RuntimeError(f"No eligibility rule for: {sorted(a.value for a in _missing)}")
_missing = set(ActionId) - set(_AFFECTED) - METADATA_ACTIONS
if _missing:
    raise RuntimeError(f"No affected-count rule for: {sorted(a.value for a in _missing)}")
del _missing


def eligible_actions(
    summary: Optional[SelectionSummary],
    mode: EligibilityMode = EligibilityMode(),
) -> Optional[frozenset[ActionId]]:
    """
    Return the actions legal for `summary`, or None when there is no summary.

    None is fail-open for display only: the workflow refuses to submit
    without a concrete eligible set.
    """
    if summary is None:
        return None
    return frozenset(action for action, rule in _RULES.items() if rule(summary, mode))


def is_eligible(action: ActionId, summary: Optional[SelectionSummary], mode: EligibilityMode) -> bool:
    """Strict check used on the submission path: unknown eligibility is not eligible."""
    eligible = eligible_actions(summary, mode)
    return eligible is not None and action in eligible


def eligible_count(action: ActionId, summary: Optional[SelectionSummary]) -> Optional[int]:
    """Known items `action` would change, or None when it cannot be told (metadata, no summary)."""
    if summary is None:
        return None
    counter = _AFFECTED.get(action)
    if counter is None:
        return None
    return max(0, counter(summary))
