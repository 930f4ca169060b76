"""Domain model for classic hierarchical volumes.

Holds the entry/partition datatypes and the pure path helpers shared by the
session, cache, and transfer layers.
"""

from __future__ import annotations

from .paths import (
    MAX_NAME_LENGTH,
    PLACEHOLDER_NAME,
    ROOT_PATH,
    SEPARATOR,
    is_descendant_or_same,
    join_path,
    name_of,
    names_match,
    parent_path,
    paths_match,
    sanitize_name,
    host_name_for,
    validate_entry_name,
)
from .types import (
    DATE_FLOOR,
    HFS_PARTITION_TYPE,
    FileEntryInfo,
    PartitionCandidate,
    PartitionMapEntry,
    TransferMode,
    VolumeInfo,
)

__all__ = [
    "DATE_FLOOR",
    "HFS_PARTITION_TYPE",
    "FileEntryInfo",
    "PartitionCandidate",
    "PartitionMapEntry",
    "TransferMode",
    "VolumeInfo",
    "SEPARATOR",
    "ROOT_PATH",
    "PLACEHOLDER_NAME",
    "MAX_NAME_LENGTH",
    "join_path",
    "parent_path",
    "name_of",
    "names_match",
    "paths_match",
    "sanitize_name",
    "host_name_for",
    "is_descendant_or_same",
    "validate_entry_name",
]
