"""Text formatting for the detail pane, tree columns, and volume info panel."""

from __future__ import annotations

from datetime import datetime

from .volume_model.types import DATE_FLOOR, FileEntryInfo, VolumeInfo

PLACEHOLDER = "-"
UNSET_CODE = "????"


def format_bytes(count: int) -> str:
    """Human file size in decimal units, never below KB."""
    count = max(0, count)
    kilobytes = count / 1000.0
    if kilobytes < 1000.0:
        whole = round(kilobytes)
        if count > 0 and whole == 0:
            whole = 1
        return f"{whole} KB"
    megabytes = kilobytes / 1000.0
    if megabytes < 1000.0:
        return f"{megabytes:.1f} MB"
    gigabytes = megabytes / 1000.0
    if gigabytes < 1000.0:
        return f"{gigabytes:.2f} GB"
    return f"{gigabytes / 1000.0:.2f} TB"


def is_meaningful_date(value: datetime) -> bool:
    return value.replace(tzinfo=None) >= DATE_FLOOR


def format_date(value: datetime) -> str:
    """Medium date with short time, or ``-`` before the date floor."""
    if not is_meaningful_date(value):
        return PLACEHOLDER
    return f"{value:%b} {value.day}, {value.year} {value:%H:%M}"


def format_table_date(value: datetime) -> str:
    """Compact date for the tree's modified column."""
    if not is_meaningful_date(value):
        return PLACEHOLDER
    return f"{value:%m/%d/%y %H:%M}"


def size_label(info: FileEntryInfo) -> str:
    """Both forks summed for files; ``-`` for directories."""
    if info.is_directory:
        return PLACEHOLDER
    return format_bytes(info.total_size)


def type_creator_label(info: FileEntryInfo) -> str:
    if info.is_directory:
        return PLACEHOLDER
    file_type = info.file_type or UNSET_CODE
    creator = info.file_creator or UNSET_CODE
    return f"{file_type} / {creator}"


def describe_entry(info: FileEntryInfo | None) -> dict[str, str]:
    """Detail-pane fields for ``info``; every field is ``-`` without one."""
    if info is None:
        return {key: PLACEHOLDER for key in ("name", "path", "kind", "size", "created", "modified", "type_creator")}
    return {
        "name": info.name,
        "path": info.path,
        "kind": "Folder" if info.is_directory else "File",
        "size": size_label(info),
        "created": format_date(info.created),
        "modified": format_date(info.modified),
        "type_creator": type_creator_label(info),
    }


def describe_volume(info: VolumeInfo) -> dict[str, str]:
    """Info-panel fields for a volume summary."""
    return {
        "name": info.name,
        "total": format_bytes(info.total_bytes),
        "used": format_bytes(info.used_bytes),
        "free": format_bytes(info.free_bytes),
        "files": str(info.file_count),
        "folders": str(info.directory_count),
        "allocation_block_size": format_bytes(info.allocation_block_size),
        "clump_size": format_bytes(info.clump_size),
        "modified": format_date(info.modified),
        "backup": format_date(info.backup),
        "flags": f"0x{info.flags:08X}",
        "blessed_folder": str(info.blessed_folder_id),
    }


__all__ = [
    "PLACEHOLDER",
    "UNSET_CODE",
    "describe_entry",
    "describe_volume",
    "format_bytes",
    "format_date",
    "format_table_date",
    "is_meaningful_date",
    "size_label",
    "type_creator_label",
]
