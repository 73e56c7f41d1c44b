"""Selection feature: cross-page selection store and lifecycle summarizer."""
from .store import SelectedItem, SelectionStore
from .summary import ApprovalCounts, LifecycleSnapshot, SelectionSummary, summarize

__all__ = [
    "SelectedItem",
    "SelectionStore",
    "LifecycleSnapshot",
    "ApprovalCounts",
    "SelectionSummary",
    "summarize",
]
