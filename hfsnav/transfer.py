"""Imports, exports, and same-volume moves/copies over one session.

Every write path reports the directories it touched to an ``invalidate``
sink, and does so even when the batch fails partway, because a partial
write can still have changed the volume. A batch stops at the first
unrecovered failure; nothing here is transactional.
"""

from __future__ import annotations

import logging
import tempfile
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path

from .errors import NameConflict
from .session import VolumeSession, translate_engine_error
from .tree.selection import ensure_valid_drop
from .volume_model.paths import host_name_for, join_path, names_match, parent_path, paths_match, sanitize_name
from .volume_model.types import FileEntryInfo, TransferMode

logger = logging.getLogger(__name__)

ConfirmReplace = Callable[[NameConflict], bool]
InvalidateSink = Callable[[str], object]

SCRATCH_PREFIX = "hfsnav-copy-"
DRAG_PREFIX = "hfsnav-drag-"


def decline_replace(_conflict: NameConflict) -> bool:
    """Conflict policy that keeps every existing entry."""
    return False


@contextmanager
def host_step(action: str) -> Iterator[None]:
    """Translate host filesystem ``OSError``s into package errors."""
    try:
        yield
    except OSError as exc:
        raise translate_engine_error(action, exc) from exc


@dataclass
class TransferReport:
    """Outcome of one batch, in processing order."""

    written: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    unchanged: list[str] = field(default_factory=list)
    invalidated: list[str] = field(default_factory=list)


class TransferOrchestrator:
    """Import/export/move/copy with conflict resolution for one session."""

    def __init__(
        self,
        session: VolumeSession,
        invalidate: InvalidateSink,
        *,
        scratch_root: Path | None = None,
    ) -> None:
        self._session = session
        self._invalidate = invalidate
        self._scratch_root = scratch_root

    def _flush(self, report: TransferReport, directories: Iterable[str]) -> None:
        for directory in directories:
            if directory in report.invalidated:
                continue
            report.invalidated.append(directory)
            self._invalidate(directory)

    def find_existing(self, directory: str, name: str) -> FileEntryInfo | None:
        """Return the entry in ``directory`` whose name matches ignoring case."""
        for entry in self._session.list(directory):
            if names_match(entry.name, name):
                return entry
        return None

    def _write_in(
        self,
        host_path: Path,
        destination_dir: str,
        name: str,
        mode: TransferMode,
        confirm_replace: ConfirmReplace,
        report: TransferReport,
        label: str,
    ) -> None:
        existing = self.find_existing(destination_dir, name)
        if existing is not None:
            conflict = NameConflict(
                directory=destination_dir,
                incoming_name=name,
                existing_name=existing.name,
                existing_is_directory=existing.is_directory,
            )
            if not confirm_replace(conflict):
                logger.debug("Kept existing %s; skipped %s", existing.path, label)
                report.skipped.append(label)
                return
            logger.debug("Replacing %s", existing.path)
            self._session.delete(existing)

        target = join_path(destination_dir, name)
        if host_path.is_dir():
            self._session.copy_in_directory(host_path, target, mode)
        else:
            self._session.copy_in(host_path, target, mode)
        logger.debug("Copied %s -> %s (%s)", host_path, target, mode.value)
        report.written.append(target)

    def import_items(
        self,
        host_paths: Iterable[Path],
        destination_dir: str,
        mode: TransferMode,
        confirm_replace: ConfirmReplace = decline_replace,
    ) -> TransferReport:
        """Copy host files/directories into ``destination_dir``.

        Missing host paths are skipped. A declined replace skips that item.
        The destination is invalidated once, after the batch.
        """
        report = TransferReport()
        try:
            for host_path in host_paths:
                host_path = Path(host_path)
                if not host_path.exists():
                    logger.warning("Import source %s does not exist; skipped", host_path)
                    report.skipped.append(str(host_path))
                    continue
                name = sanitize_name(host_path.name)
                self._write_in(host_path, destination_dir, name, mode, confirm_replace, report, str(host_path))
        finally:
            self._flush(report, [destination_dir])
        logger.info("Imported %d item(s) into %s", len(report.written), destination_dir)
        return report

    def export_item(self, info: FileEntryInfo, destination: Path, mode: TransferMode) -> Path:
        """Copy one volume entry to the host and return the written path.

        An existing host directory receives the entry under its own name;
        any other destination is used as the exact target path.
        """
        destination = Path(destination)
        target = destination / host_name_for(info.name) if destination.is_dir() else destination
        if info.is_directory:
            with host_step(f"create {target}"):
                target.mkdir(parents=True, exist_ok=True)
            self._session.copy_out_directory(info.path, target, mode)
        else:
            with host_step(f"create {target.parent}"):
                target.parent.mkdir(parents=True, exist_ok=True)
            self._session.copy_out(info.path, target, mode)
        logger.debug("Exported %s -> %s (%s)", info.path, target, mode.value)
        return target

    def export_for_drag(self, infos: Iterable[FileEntryInfo], mode: TransferMode) -> list[Path]:
        """Export entries into a fresh host directory for a drag pasteboard."""
        with host_step("create drag scratch directory"):
            base = Path(tempfile.mkdtemp(prefix=DRAG_PREFIX, dir=self._scratch_root))
        return [self.export_item(info, base, mode) for info in infos]

    def move_items(self, source_paths: Iterable[str], destination_dir: str) -> TransferReport:
        """Move entries into ``destination_dir`` using the engine's move.

        Entries already in ``destination_dir`` (in any letter case) are left
        alone. Both the old and the new parent directories are invalidated.
        """
        sources = ensure_valid_drop(source_paths, destination_dir)
        report = TransferReport()
        touched: list[str] = []
        try:
            for source in sources:
                current_parent = parent_path(source)
                if paths_match(current_parent, destination_dir):
                    report.unchanged.append(source)
                    continue
                touched.extend((current_parent, destination_dir))
                self._session.move(source, destination_dir)
                logger.debug("Moved %s into %s", source, destination_dir)
                report.written.append(source)
        finally:
            self._flush(report, touched)
        logger.info("Moved %d item(s) into %s", len(report.written), destination_dir)
        return report

    def copy_items(
        self,
        source_paths: Iterable[str],
        destination_dir: str,
        mode: TransferMode,
        confirm_replace: ConfirmReplace = decline_replace,
    ) -> TransferReport:
        """Copy entries within the volume by staging them on the host.

        The scratch directory is removed before returning, on success or
        failure.
        """
        sources = ensure_valid_drop(source_paths, destination_dir)
        report = TransferReport()
        try:
            with host_step(f"stage copy into {destination_dir}"):
                with tempfile.TemporaryDirectory(prefix=SCRATCH_PREFIX, dir=self._scratch_root) as scratch:
                    for index, source in enumerate(sources):
                        info = self._session.attributes(source)
                        staged = Path(scratch) / f"item-{index}"
                        if info.is_directory:
                            staged.mkdir()
                            self._session.copy_out_directory(info.path, staged, mode)
                        else:
                            self._session.copy_out(info.path, staged, mode)
                        self._write_in(staged, destination_dir, info.name, mode, confirm_replace, report, source)
        finally:
            self._flush(report, [destination_dir])
        logger.info("Copied %d item(s) into %s", len(report.written), destination_dir)
        return report


__all__ = [
    "ConfirmReplace",
    "InvalidateSink",
    "TransferOrchestrator",
    "TransferReport",
    "decline_replace",
    "host_step",
]
