"""HTTP adapters."""
from .batch_client import HttpBatchExecutor

__all__ = ["HttpBatchExecutor"]
