"""
Bulk action workflow - one operator interaction with the bulk actions dialog.

    Selecting --pick--> Configuring --apply--> [Confirming]* --> Submitting
        ^                    |                      |                |
        +------back----------+------decline---------+     Succeeded | Failed

Metadata actions short-circuit at `pick`: they are handed to the metadata
editor and the workflow stays in Selecting.

Every operation returns a `Result`; refusals never raise. Submission is
single-flight and always targets the selected items visible on the current
page, re-validated against the latest known lifecycle snapshots.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional, Sequence, Union

from ...config import LARGE_SELECTION_THRESHOLD, REJECTION_REASON_MAX_LEN
from ...shared import ErrorCode, Result, get_logger, log_structured, log_success, sanitize_error_message
from ..selection.store import SelectionStore
from ..selection.summary import LifecycleSnapshot, summarize
from .catalog import (
    ACTION_GROUPS,
    LIFECYCLE_ACTIONS,
    ActionGroup,
    ActionId,
    action_label,
    confirm_summary_text,
    filter_groups,
    is_metadata_action,
    metadata_operation,
)
from .eligibility import EligibilityMode, eligible_actions, eligible_count, is_eligible
from .executor import BatchExecutor, BatchOutcome, MetadataEditor

logger = get_logger(__name__)


class Gate(str, Enum):
    LARGE_SELECTION = "large_selection"
    PAGE_SCOPE = "page_scope"


@dataclass(frozen=True)
class Selecting:
    pass


@dataclass(frozen=True)
class Configuring:
    action: ActionId


@dataclass(frozen=True)
class Confirming:
    action: ActionId
    target_ids: tuple[str, ...]
    gate: Gate


@dataclass(frozen=True)
class Submitting:
    action: ActionId
    target_ids: tuple[str, ...]


@dataclass(frozen=True)
class Succeeded:
    action: ActionId
    outcome: BatchOutcome


@dataclass(frozen=True)
class Failed:
    action: ActionId
    error: str
    code: str


WorkflowState = Union[Selecting, Configuring, Confirming, Submitting, Succeeded, Failed]


@dataclass(frozen=True)
class WorkflowSettings:
    large_selection_threshold: int = LARGE_SELECTION_THRESHOLD
    rejection_reason_max_len: int = REJECTION_REASON_MAX_LEN


@dataclass(frozen=True)
class ConfirmationSummary:
    """Non-blocking summary shown while configuring a lifecycle action."""
    action: ActionId
    label: str
    text: str
    selected_count: int
    eligible_count: Optional[int]

    @property
    def skipped_count(self) -> Optional[int]:
        if self.eligible_count is None:
            return None
        return max(0, self.selected_count - self.eligible_count)

    @property
    def has_skips(self) -> bool:
        return self.skipped_count is None or self.skipped_count > 0

    @property
    def detail(self) -> str:
        if self.eligible_count is None:
            return (
                f"{self.selected_count} selected. Some may be skipped if already in the "
                "desired state or if you don't have permission."
            )
        return f"{self.eligible_count} will be updated, {self.skipped_count} will be skipped."


class BulkActionWorkflow:
    """State machine for a single bulk-action dialog instance."""

    def __init__(
        self,
        store: SelectionStore,
        executor: BatchExecutor,
        *,
        mode: EligibilityMode = EligibilityMode(),
        metadata_editor: Optional[MetadataEditor] = None,
        settings: Optional[WorkflowSettings] = None,
    ):
        self._store = store
        self._executor = executor
        self._mode = mode
        self._metadata_editor = metadata_editor
        self._settings = settings or WorkflowSettings()
        self._state: WorkflowState = Selecting()
        self._reason = ""

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def reason(self) -> str:
        return self._reason

    @property
    def is_busy(self) -> bool:
        """True while a submission is in flight (the Apply/Confirm control is disabled)."""
        return isinstance(self._state, Submitting)

    # --- read side -----------------------------------------------------------

    def available_groups(self, snapshots: Iterable[LifecycleSnapshot]) -> list[ActionGroup]:
        """Catalog groups to offer for the current selection (all of them when eligibility is unknown)."""
        summary = summarize(self._store.ids(), snapshots)
        return filter_groups(ACTION_GROUPS, eligible_actions(summary, self._mode))

    def confirmation_summary(
        self,
        page_ids: Sequence[str],
        snapshots: Iterable[LifecycleSnapshot],
    ) -> Optional[ConfirmationSummary]:
        """Counts over the on-page targets, the only items a submission would touch."""
        state = self._state
        if not isinstance(state, Configuring) or state.action not in LIFECYCLE_ACTIONS:
            return None
        targets = [item.id for item in self._store.on_page(page_ids)]
        selected = len(targets)
        summary = summarize(targets, snapshots)
        return ConfirmationSummary(
            action=state.action,
            label=action_label(state.action),
            text=confirm_summary_text(state.action, selected),
            selected_count=selected,
            eligible_count=eligible_count(state.action, summary),
        )

    def gate_message(self) -> Optional[str]:
        state = self._state
        if not isinstance(state, Confirming):
            return None
        if state.gate is Gate.LARGE_SELECTION:
            return f"You are about to update {len(self._store)} items. Continue?"
        return (
            "This action applies only to items on this page. "
            f"Continue with {len(state.target_ids)} items?"
        )

    # --- transitions ---------------------------------------------------------

    def pick(
        self,
        action: ActionId | str,
        page_ids: Sequence[str],
        snapshots: Iterable[LifecycleSnapshot] = (),
    ) -> Result[WorkflowState]:
        """Choose an action from the catalog."""
        if isinstance(self._state, (Configuring, Confirming, Submitting)):
            return self._refuse_in_flight("pick")
        if isinstance(self._state, (Succeeded, Failed)):
            self._reset()

        action_id = ActionId.parse(action)
        if action_id is None:
            return Result.Err(ErrorCode.INVALID_INPUT, f"Unknown bulk action: {action}", field="action")

        targets = [item.id for item in self._store.on_page(page_ids)]
        if not targets:
            return Result.Err(ErrorCode.EMPTY_SELECTION, "No selected items on this page")

        if self._store.is_mixed_kind():
            return Result.Err(
                ErrorCode.MIXED_SELECTION,
                "Bulk actions can only be applied to one type at a time. "
                f"You have selected: {self._store.describe_breakdown()}. Please refine your selection.",
                breakdown={k.value: v for k, v in self._store.breakdown_by_kind().items()},
            )

        # Display-time check: unknown eligibility does not block browsing.
        eligible = eligible_actions(summarize(self._store.ids(), snapshots), self._mode)
        if eligible is not None and action_id not in eligible:
            return Result.Err(ErrorCode.NOT_ELIGIBLE, f"{action_label(action_id)} is not available for this selection")

        if is_metadata_action(action_id):
            return self._delegate_metadata(action_id, targets)

        self._state = Configuring(action_id)
        self._reason = ""
        logger.debug("Configuring %s for %d selected items", action_id.value, len(self._store))
        return Result.Ok(self._state)

    def set_reason(self, text: str) -> Result[str]:
        state = self._state
        if not isinstance(state, Configuring):
            return Result.Err(ErrorCode.INVALID_STATE, "Nothing is being configured")
        value = str(text or "")
        limit = self._settings.rejection_reason_max_len
        if len(value) > limit:
            return Result.Err(
                ErrorCode.INVALID_INPUT,
                f"Rejection reason is too long ({len(value)} > {limit})",
                field="reason",
            )
        self._reason = value
        return Result.Ok(value)

    def back(self) -> Result[WorkflowState]:
        if not isinstance(self._state, Configuring):
            return Result.Err(ErrorCode.INVALID_STATE, "Back is only available while configuring")
        self._reset()
        return Result.Ok(self._state)

    async def apply(
        self,
        page_ids: Sequence[str],
        snapshots: Iterable[LifecycleSnapshot] = (),
    ) -> Result[WorkflowState]:
        """Validate configuration, then raise confirmation gates or submit."""
        state = self._state
        if isinstance(state, Submitting):
            return self._refuse_in_flight("apply")
        if not isinstance(state, Configuring):
            return Result.Err(ErrorCode.INVALID_STATE, "No action is being configured")

        if state.action is ActionId.REJECT and not self._reason.strip():
            return Result.Err(ErrorCode.INVALID_INPUT, "Rejection reason is required.", field="reason")

        targets = tuple(item.id for item in self._store.on_page(page_ids))
        if not targets:
            return Result.Err(ErrorCode.EMPTY_SELECTION, "No selected items on this page")

        total = len(self._store)
        if total > self._settings.large_selection_threshold:
            return self._enter_gate(state.action, targets, Gate.LARGE_SELECTION)
        if len(targets) < total:
            return self._enter_gate(state.action, targets, Gate.PAGE_SCOPE)
        return await self._submit(state.action, targets, snapshots)

    async def confirm(self, snapshots: Iterable[LifecycleSnapshot] = ()) -> Result[WorkflowState]:
        """Accept the current confirmation gate."""
        state = self._state
        if isinstance(state, Submitting):
            return self._refuse_in_flight("confirm")
        if not isinstance(state, Confirming):
            return Result.Err(ErrorCode.INVALID_STATE, "Nothing to confirm")
        if state.gate is Gate.LARGE_SELECTION and len(state.target_ids) < len(self._store):
            return self._enter_gate(state.action, state.target_ids, Gate.PAGE_SCOPE)
        return await self._submit(state.action, state.target_ids, snapshots)

    def decline(self) -> Result[WorkflowState]:
        """Reject the current confirmation gate; pending targets are discarded."""
        if not isinstance(self._state, Confirming):
            return Result.Err(ErrorCode.INVALID_STATE, "Nothing to decline")
        logger.debug("Declined %s gate", self._state.gate.value)
        self._reset()
        return Result.Ok(self._state)

    async def retry(
        self,
        page_ids: Sequence[str],
        snapshots: Iterable[LifecycleSnapshot] = (),
    ) -> Result[WorkflowState]:
        """Re-run a failed submission with a freshly computed target list."""
        state = self._state
        if not isinstance(state, Failed):
            return Result.Err(ErrorCode.INVALID_STATE, "Only a failed submission can be retried")
        self._state = Configuring(state.action)
        res = await self.apply(page_ids, snapshots)
        if not res.ok and isinstance(self._state, Configuring):
            self._state = state
        return res

    def close(self) -> Result[WorkflowState]:
        """Dismiss the dialog. Not allowed while a submission is in flight."""
        if isinstance(self._state, Submitting):
            return self._refuse_in_flight("close")
        self._reset()
        return Result.Ok(self._state)

    def reset(self) -> Result[WorkflowState]:
        """Acknowledge a finished submission and return to Selecting."""
        if not isinstance(self._state, (Succeeded, Failed, Selecting)):
            return Result.Err(ErrorCode.INVALID_STATE, "Nothing to reset", state=type(self._state).__name__)
        self._reset()
        return Result.Ok(self._state)

    # --- internals -----------------------------------------------------------

    def _reset(self) -> None:
        self._state = Selecting()
        self._reason = ""

    def _refuse_in_flight(self, operation: str) -> Result[Any]:
        if isinstance(self._state, Submitting):
            return Result.Err(ErrorCode.BUSY, "A bulk action is already being submitted")
        return Result.Err(
            ErrorCode.INVALID_STATE,
            f"Cannot {operation} while another action is in progress",
            state=type(self._state).__name__,
        )

    def _enter_gate(self, action: ActionId, targets: tuple[str, ...], gate: Gate) -> Result[WorkflowState]:
        self._state = Confirming(action, targets, gate)
        logger.debug(
            "Gate %s for %s: %d on page / %d selected",
            gate.value, action.value, len(targets), len(self._store),
        )
        return Result.Ok(self._state)

    def _delegate_metadata(self, action: ActionId, targets: list[str]) -> Result[WorkflowState]:
        if not self._mode.can_edit_metadata:
            return Result.Err(ErrorCode.NOT_ELIGIBLE, "Metadata editing is not allowed for this selection")
        if self._metadata_editor is None:
            return Result.Err(ErrorCode.SERVICE_UNAVAILABLE, "Metadata editing is not available")
        operation = metadata_operation(action)
        self._metadata_editor(list(targets), operation)
        logger.debug("Delegated %s to metadata editor (%d items)", operation, len(targets))
        return Result.Ok(self._state, delegated=True, operation=operation)

    async def _submit(
        self,
        action: ActionId,
        targets: Sequence[str],
        snapshots: Iterable[LifecycleSnapshot],
    ) -> Result[WorkflowState]:
        # Only ids still selected; the store may have changed since the gate opened.
        scoped = tuple(t for t in targets if self._store.is_selected(t))
        if not scoped:
            return Result.Err(ErrorCode.EMPTY_SELECTION, "No selected items on this page")

        # Fail closed: committing needs a concrete eligibility decision.
        summary = summarize(scoped, snapshots)
        if summary is None:
            return Result.Err(
                ErrorCode.ELIGIBILITY_UNKNOWN,
                "Current state of the selected items is unknown; reload the page and try again",
            )
        if not is_eligible(action, summary, self._mode):
            return Result.Err(ErrorCode.NOT_ELIGIBLE, f"{action_label(action)} is not available for this selection")

        payload: dict[str, Any] = {}
        if action is ActionId.REJECT:
            payload["rejection_reason"] = self._reason.strip()

        self._state = Submitting(action, scoped)
        try:
            res = await self._executor.submit(action, list(scoped), payload)
        except asyncio.CancelledError:
            # Outcome unknown; the dialog must stay closable and retryable.
            self._state = Failed(action, "Bulk action request was cancelled", ErrorCode.CANCELLED.value)
            logger.warning("Bulk %s cancelled for %d items", action.value, len(scoped))
            raise
        except Exception as exc:
            res = Result.Err(ErrorCode.TRANSPORT_ERROR, sanitize_error_message(exc, "Bulk action request failed"))

        if not res.ok or res.data is None:
            error = res.error or "Bulk action request failed"
            self._state = Failed(action, error, res.code or ErrorCode.TRANSPORT_ERROR.value)
            logger.warning("Bulk %s failed for %d items: %s", action.value, len(scoped), error)
            return Result.Err(self._state.code, error, **(res.meta or {}))

        outcome = res.data
        self._store.clear()
        self._state = Succeeded(action, outcome)
        self._reason = ""
        log_structured(
            logger,
            logging.INFO,
            "bulk_action_completed",
            action=action.value,
            targets=len(scoped),
            processed=outcome.processed,
            skipped=outcome.skipped,
            errors=len(outcome.errors),
        )
        if outcome.processed > 0:
            log_success(logger, f"{action_label(action)}: {outcome.message}")
        return Result.Ok(self._state, message=outcome.message)
