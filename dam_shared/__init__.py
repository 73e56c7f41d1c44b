"""Shared utilities for the DAM bulk-action console."""
from .errors import sanitize_error_message
from .log import get_logger, log_structured, log_success, request_id_var
from .result import Result
from .types import KIND_LABELS, ApprovalStatus, ErrorCode, ItemKind, MetadataOperation

__all__ = [
    "Result",
    "get_logger",
    "log_success",
    "log_structured",
    "request_id_var",
    "sanitize_error_message",
    "ErrorCode",
    "ItemKind",
    "KIND_LABELS",
    "ApprovalStatus",
    "MetadataOperation",
]
