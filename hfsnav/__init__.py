"""Public package surface for hfsnav.

Exports ``main`` for programmatic CLI invocation plus the core types most
callers need. Implementation lives in submodules under ``hfsnav``.
"""

from __future__ import annotations

from .controller import VolumeController, VolumeRegistry
from .errors import (
    HFSNavError,
    InvalidArgumentError,
    InvalidDropError,
    IOFailureError,
    NameConflict,
    NotFoundError,
    VolumeClosedError,
)
from .partitions import PartitionResolver
from .session import VolumeSession
from .transfer import TransferOrchestrator, TransferReport
from .tree import NodeCache, VisibleNode
from .volume_model import FileEntryInfo, PartitionCandidate, TransferMode


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = [
    "main",
    "FileEntryInfo",
    "PartitionCandidate",
    "TransferMode",
    "HFSNavError",
    "InvalidArgumentError",
    "InvalidDropError",
    "IOFailureError",
    "NameConflict",
    "NotFoundError",
    "VolumeClosedError",
    "NodeCache",
    "VisibleNode",
    "PartitionResolver",
    "VolumeSession",
    "TransferOrchestrator",
    "TransferReport",
    "VolumeController",
    "VolumeRegistry",
]
