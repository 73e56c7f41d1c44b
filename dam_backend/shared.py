"""Backend-facing alias for shared utilities."""

from __future__ import annotations

from dam_shared import (
    KIND_LABELS,
    ApprovalStatus,
    ErrorCode,
    ItemKind,
    MetadataOperation,
    Result,
    get_logger,
    log_structured,
    log_success,
    request_id_var,
    sanitize_error_message,
)

__all__ = [
    "Result",
    "ErrorCode",
    "ItemKind",
    "KIND_LABELS",
    "ApprovalStatus",
    "MetadataOperation",
    "get_logger",
    "log_success",
    "log_structured",
    "request_id_var",
    "sanitize_error_message",
]
