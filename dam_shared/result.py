"""
Outcome values for selection, eligibility and bulk-action operations.

Refusals (empty selection, ineligible action, busy workflow, transport
failure) are ordinary values here, never exceptions, so the dialog can always
render what happened.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar, cast

from .types import ErrorCode

T = TypeVar("T")
U = TypeVar("U")


@dataclass
class Result(Generic[T]):
    """
    Either `ok` with `data`, or an error `code` + `error` message.

    `meta` carries extra context for the caller: the offending `field` of a
    validation error, an HTTP `status`, the outcome `message` of a batch.

        res = workflow.pick(ActionId.REJECT, page_ids, snapshots)
        if not res.ok and res.code == ErrorCode.MIXED_SELECTION.value:
            show(res.error, res.meta["breakdown"])
    """
    ok: bool
    data: Optional[T] = None
    error: Optional[str] = None
    code: str = "OK"  # OK, EMPTY_SELECTION, NOT_ELIGIBLE, BUSY, TRANSPORT_ERROR, ...
    meta: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def Ok(data: T, **meta: Any) -> "Result[T]":
        return Result(ok=True, data=data, code="OK", meta=meta)

    @staticmethod
    def Err(code: ErrorCode | str | Enum, error: str, **meta: Any) -> "Result[T]":
        code_value = code.value if isinstance(code, Enum) else code
        return Result(ok=False, error=error, code=str(code_value), meta=meta)

    def map(self, fn: Callable[[T], U]) -> "Result[U]":
        """Transform the data of a successful result; errors pass through untouched."""
        if self.ok and self.data is not None:
            return Result.Ok(fn(self.data), **self.meta)
        return cast(Result[U], self)

    def forward(self, fallback: str = "Operation failed") -> "Result[U]":
        """Re-type an error for the caller, keeping its code, message and meta."""
        if self.ok:
            raise ValueError("forward() called on a successful result")
        return Result(ok=False, error=self.error or fallback, code=self.code, meta=dict(self.meta))
