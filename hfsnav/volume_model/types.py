"""Domain datatypes for volume entries, partitions, and transfer modes."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

# Dates before this carry no meaningful value on classic volumes.
DATE_FLOOR = datetime(1984, 1, 1)

HFS_PARTITION_TYPE = "Apple_HFS"


class TransferMode(str, Enum):
    """Encoding policy for content crossing the volume/host boundary."""

    AUTO = "auto"
    RAW = "raw"
    MACBINARY = "macbinary"
    BINHEX = "binhex"
    TEXT = "text"

    @classmethod
    def parse(cls, value: object, default: TransferMode | None = None) -> TransferMode:
        """Parse a case-insensitive mode name, falling back to ``default``."""
        if isinstance(value, TransferMode):
            return value
        if isinstance(value, str):
            lowered = value.strip().lower()
            for mode in cls:
                if mode.value == lowered:
                    return mode
        if default is not None:
            return default
        raise ValueError(f"unknown transfer mode: {value!r}")


@dataclass(frozen=True)
class FileEntryInfo:
    """One live entry as reported by the access engine."""

    name: str
    path: str
    is_directory: bool
    data_fork_size: int = 0
    resource_fork_size: int = 0
    created: datetime = DATE_FLOOR
    modified: datetime = DATE_FLOOR
    file_type: str = ""
    file_creator: str = ""

    @property
    def total_size(self) -> int:
        """Sum of both forks, never negative."""
        return max(0, self.data_fork_size + self.resource_fork_size)


@dataclass(frozen=True)
class PartitionMapEntry:
    """Raw partition-map row returned by the engine."""

    map_index: int
    name: str
    partition_type: str


@dataclass(frozen=True)
class PartitionCandidate:
    """An addressable sub-volume offered for opening.

    ``ordinal`` is the 1-based user-facing number; ``map_index`` is the
    engine's own index and may differ.
    """

    ordinal: int
    map_index: int
    name: str


@dataclass(frozen=True)
class VolumeInfo:
    """Volume-level summary shown next to the tree."""

    name: str
    total_bytes: int
    free_bytes: int
    file_count: int = 0
    directory_count: int = 0
    allocation_block_size: int = 0
    clump_size: int = 0
    modified: datetime = DATE_FLOOR
    backup: datetime = DATE_FLOOR
    flags: int = 0
    blessed_folder_id: int = 0

    @property
    def used_bytes(self) -> int:
        return max(0, self.total_bytes - self.free_bytes)


__all__ = [
    "DATE_FLOOR",
    "HFS_PARTITION_TYPE",
    "TransferMode",
    "FileEntryInfo",
    "PartitionMapEntry",
    "PartitionCandidate",
    "VolumeInfo",
]
