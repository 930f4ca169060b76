"""One open volume handle owned by a single window.

``VolumeSession`` is the only path to the engine for the cache and the
transfer layer. It translates engine failures into ``HFSNavError``s and
refuses work once closed. Sessions are not thread-safe; callers keep every
call on one thread at a time.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

from .engine import PartitionSelector, VolumeEngine
from .errors import HFSNavError, IOFailureError, NotFoundError, VolumeClosedError
from .volume_model.types import FileEntryInfo, TransferMode, VolumeInfo

logger = logging.getLogger(__name__)

T = TypeVar("T")


def translate_engine_error(action: str, exc: BaseException) -> HFSNavError:
    """Map an engine-native exception onto the package taxonomy."""
    if isinstance(exc, HFSNavError):
        return exc
    if isinstance(exc, (FileNotFoundError, KeyError)):
        return NotFoundError(f"{action}: {exc}")
    return IOFailureError(f"{action}: {exc}", cause=exc)


class VolumeSession:
    """Open -> Closed lifecycle around one engine handle."""

    def __init__(
        self,
        engine: VolumeEngine,
        handle: Any,
        source: Path,
        *,
        writable: bool,
        partition: PartitionSelector = None,
    ) -> None:
        self._engine = engine
        self._handle = handle
        self.source = source
        self.writable = writable
        self.partition = partition

    @classmethod
    def open(
        cls,
        engine: VolumeEngine,
        path: Path,
        *,
        writable: bool = True,
        partition: PartitionSelector = None,
    ) -> VolumeSession:
        """Open ``path`` through ``engine``; the only way into the Open state."""
        try:
            handle = engine.open(path, writable, partition)
        except Exception as exc:
            raise translate_engine_error(f"open {path}", exc) from exc
        logger.info("Opened volume %s (partition=%r, writable=%s)", path, partition, writable)
        return cls(engine, handle, path, writable=writable, partition=partition)

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    def close(self) -> None:
        """Release the handle; repeated calls are no-ops."""
        handle = self._handle
        if handle is None:
            return
        self._handle = None
        try:
            self._engine.close(handle)
        except Exception:
            logger.warning("Engine close failed for %s", self.source, exc_info=True)
        else:
            logger.info("Closed volume %s", self.source)

    def _call(self, action: str, fn: Callable[..., T], *args: Any) -> T:
        handle = self._handle
        if handle is None:
            raise VolumeClosedError(f"{action}: volume {self.source} is closed")
        try:
            return fn(handle, *args)
        except Exception as exc:
            raise translate_engine_error(action, exc) from exc

    def list(self, directory: str) -> list[FileEntryInfo]:
        return list(self._call(f"list {directory}", self._engine.list, directory))

    def attributes(self, path: str) -> FileEntryInfo:
        return self._call(f"attributes {path}", self._engine.attributes, path)

    def volume_info(self) -> VolumeInfo:
        return self._call("volume info", self._engine.volume_info)

    def copy_in(self, host_path: Path, volume_path: str, mode: TransferMode) -> None:
        self._call(f"copy in {host_path}", self._engine.copy_in, host_path, volume_path, mode)

    def copy_in_directory(self, host_path: Path, volume_path: str, mode: TransferMode) -> None:
        self._call(f"copy in {host_path}", self._engine.copy_in_directory, host_path, volume_path, mode)

    def copy_out(self, volume_path: str, host_path: Path, mode: TransferMode) -> None:
        self._call(f"copy out {volume_path}", self._engine.copy_out, volume_path, host_path, mode)

    def copy_out_directory(self, volume_path: str, host_path: Path, mode: TransferMode) -> None:
        self._call(f"copy out {volume_path}", self._engine.copy_out_directory, volume_path, host_path, mode)

    def delete(self, entry: FileEntryInfo) -> None:
        self._call(f"delete {entry.path}", self._engine.delete, entry)

    def rename(self, path: str, new_name: str) -> None:
        self._call(f"rename {path}", self._engine.rename, path, new_name)

    def move(self, path: str, new_parent: str) -> None:
        self._call(f"move {path}", self._engine.move, path, new_parent)

    def set_type_creator(self, path: str, file_type: str, creator: str) -> None:
        self._call(f"set type/creator {path}", self._engine.set_type_creator, path, file_type, creator)


__all__ = [
    "VolumeSession",
    "translate_engine_error",
]
