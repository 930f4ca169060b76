"""Threading and persistence support for the interactive surface.

This package groups the owner-thread dispatcher, the background transfer
worker, and the JSON config helpers.
"""

from __future__ import annotations

from .dispatch import OwnerThreadDispatcher
from .transfer_worker import TransferJob, TransferResult, TransferWorker

__all__ = [
    "OwnerThreadDispatcher",
    "TransferJob",
    "TransferResult",
    "TransferWorker",
]
