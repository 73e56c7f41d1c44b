"""Bulk actions feature: catalog, eligibility, executors and the dialog workflow."""
from .catalog import (
    ACTION_GROUPS,
    LIFECYCLE_ACTIONS,
    METADATA_ACTIONS,
    Action,
    ActionGroup,
    ActionId,
    GroupId,
    Tint,
    action_label,
    confirm_summary_text,
    filter_groups,
    get_action,
    is_metadata_action,
    metadata_operation,
)
from .eligibility import EligibilityMode, eligible_actions, eligible_count, is_eligible
from .executor import BatchExecutor, BatchItemError, BatchOutcome, MetadataEditor
from .local_executor import EntityRecord, InMemoryBatchExecutor
from .workflow import (
    BulkActionWorkflow,
    ConfirmationSummary,
    Configuring,
    Confirming,
    Failed,
    Gate,
    Selecting,
    Submitting,
    Succeeded,
    WorkflowSettings,
    WorkflowState,
)

__all__ = [
    "ACTION_GROUPS",
    "LIFECYCLE_ACTIONS",
    "METADATA_ACTIONS",
    "Action",
    "ActionGroup",
    "ActionId",
    "GroupId",
    "Tint",
    "action_label",
    "confirm_summary_text",
    "filter_groups",
    "get_action",
    "is_metadata_action",
    "metadata_operation",
    "EligibilityMode",
    "eligible_actions",
    "eligible_count",
    "is_eligible",
    "BatchExecutor",
    "BatchItemError",
    "BatchOutcome",
    "MetadataEditor",
    "EntityRecord",
    "InMemoryBatchExecutor",
    "BulkActionWorkflow",
    "ConfirmationSummary",
    "Configuring",
    "Confirming",
    "Failed",
    "Gate",
    "Selecting",
    "Submitting",
    "Succeeded",
    "WorkflowSettings",
    "WorkflowState",
]
