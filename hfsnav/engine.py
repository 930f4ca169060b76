"""Contract for the volume access engine consumed by this package.

The engine parses the on-disk format and performs raw reads and writes; this
package only orchestrates it. Any object with these methods will do.
"""

from __future__ import annotations

import importlib
from pathlib import Path
from typing import Any, Literal, Protocol

from .errors import InvalidArgumentError
from .volume_model.types import FileEntryInfo, PartitionMapEntry, TransferMode, VolumeInfo

AUTO_PARTITION = "auto"

# ``int`` selects a partition number, ``"auto"`` asks the engine to detect
# one, ``None`` opens the container as a bare volume.
PartitionSelector = int | Literal["auto"] | None


class VolumeEngine(Protocol):
    """Narrow access-engine surface used by sessions and the resolver."""

    def open(self, path: Path, writable: bool, partition: PartitionSelector = None) -> Any: ...

    def list_partitions(self, path: Path) -> list[PartitionMapEntry]: ...

    def list(self, handle: Any, directory: str) -> list[FileEntryInfo]: ...

    def attributes(self, handle: Any, path: str) -> FileEntryInfo: ...

    def volume_info(self, handle: Any) -> VolumeInfo: ...

    def copy_in(self, handle: Any, host_path: Path, volume_path: str, mode: TransferMode) -> None: ...

    def copy_in_directory(self, handle: Any, host_path: Path, volume_path: str, mode: TransferMode) -> None: ...

    def copy_out(self, handle: Any, volume_path: str, host_path: Path, mode: TransferMode) -> None: ...

    def copy_out_directory(self, handle: Any, volume_path: str, host_path: Path, mode: TransferMode) -> None: ...

    def delete(self, handle: Any, entry: FileEntryInfo) -> None: ...

    def rename(self, handle: Any, path: str, new_name: str) -> None: ...

    def move(self, handle: Any, path: str, new_parent: str) -> None: ...

    def set_type_creator(self, handle: Any, path: str, file_type: str, creator: str) -> None: ...

    def close(self, handle: Any) -> None: ...


def load_engine(spec: str) -> VolumeEngine:
    """Import ``"package.module:factory"`` and call the factory.

    Raises ``InvalidArgumentError`` for malformed specs or missing targets.
    """
    module_name, sep, attr = spec.strip().partition(":")
    if not sep or not module_name or not attr:
        raise InvalidArgumentError(f"engine spec must look like 'module:factory', got {spec!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise InvalidArgumentError(f"cannot import engine module {module_name!r}: {exc}") from exc
    factory = module
    for part in attr.split("."):
        try:
            factory = getattr(factory, part)
        except AttributeError as exc:
            raise InvalidArgumentError(f"engine factory {attr!r} not found in {module_name!r}") from exc
    if not callable(factory):
        raise InvalidArgumentError(f"engine factory {spec!r} is not callable")
    return factory()


__all__ = [
    "AUTO_PARTITION",
    "PartitionSelector",
    "VolumeEngine",
    "load_engine",
]
