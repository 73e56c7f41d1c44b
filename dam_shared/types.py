"""
Shared types, enums, and constants.
"""
from enum import Enum
from typing import Final, Literal

# Metadata bulk operations understood by the metadata editor
MetadataOperation = Literal["add", "replace", "clear"]

# Error codes
class ErrorCode(str, Enum):
    """Standardized error codes (string enum)."""

    # Client / validation
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_JSON = "INVALID_JSON"
    NOT_FOUND = "NOT_FOUND"
    CSRF = "CSRF"

    # Selection / eligibility
    EMPTY_SELECTION = "EMPTY_SELECTION"
    MIXED_SELECTION = "MIXED_SELECTION"
    NOT_ELIGIBLE = "NOT_ELIGIBLE"
    ELIGIBILITY_UNKNOWN = "ELIGIBILITY_UNKNOWN"

    # Workflow
    INVALID_STATE = "INVALID_STATE"
    BUSY = "BUSY"

    # Feature / service availability
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"

    # Transport / server
    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    TIMEOUT = "TIMEOUT"
    UPDATE_FAILED = "UPDATE_FAILED"
    CANCELLED = "CANCELLED"


class ItemKind(str, Enum):
    """Kinds of domain objects that can be placed in a selection."""

    ASSET = "asset"
    EXECUTION = "execution"
    COLLECTION = "collection"
    GENERATIVE = "generative"

    @classmethod
    def parse(cls, value: object, default: "ItemKind | None" = None) -> "ItemKind":
        """Parse a loose wire value ("Asset", "asset", ItemKind.ASSET)."""
        if isinstance(value, ItemKind):
            return value
        raw = str(value or "").strip().lower()
        for kind in cls:
            if kind.value == raw:
                return kind
        if default is not None:
            return default
        raise ValueError(f"Unknown item kind: {value!r}")


# Plural labels used when reporting a selection breakdown
KIND_LABELS: Final[dict[ItemKind, str]] = {
    ItemKind.ASSET: "Assets",
    ItemKind.EXECUTION: "Executions",
    ItemKind.COLLECTION: "Collections",
    ItemKind.GENERATIVE: "Generative",
}


class ApprovalStatus(str, Enum):
    """Approval states recognised by the summarizer."""

    APPROVED = "approved"
    PENDING = "pending"
    REJECTED = "rejected"
    NONE = "none"
