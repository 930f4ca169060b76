"""Per-window composition of session, node cache, and transfers.

``VolumeController`` is what a window talks to: pull-based tree queries,
command enablement, and the user operations (import, export, rename,
delete, type/creator, move, copy, drag and drop). ``VolumeRegistry`` owns
the set of open windows.

All methods run on the owner thread. Batches handed to the background
worker report their invalidations back through ``pump``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path

from .engine import VolumeEngine
from .errors import InvalidArgumentError, InvalidDropError, NameConflict
from .partitions import PartitionChooser, PartitionResolver
from .runtime.dispatch import OwnerThreadDispatcher
from .runtime.transfer_worker import TransferResult, TransferWorker
from .session import VolumeSession
from .transfer import ConfirmReplace, TransferOrchestrator, TransferReport, decline_replace
from .tree.node_cache import ListingErrorHandler, NodeCache, VisibleNode
from .tree.rows import TreeRow, build_tree_rows
from .tree.selection import DragSession, DropKind, classify_drop, normalize_for_delete
from .volume_model.paths import ROOT_PATH, is_descendant_or_same, parent_path, validate_entry_name
from .volume_model.types import FileEntryInfo, TransferMode, VolumeInfo

logger = logging.getLogger(__name__)

ConfirmDelete = Callable[[list[VisibleNode]], bool]

TYPE_CREATOR_LENGTH = 4


def _confirm_all(_nodes: list[VisibleNode]) -> bool:
    return True


def validate_code(raw: str, label: str) -> str:
    """Return a four-character type/creator code, or ``""`` for unset."""
    if raw == "":
        return raw
    if len(raw) != TYPE_CREATOR_LENGTH:
        raise InvalidArgumentError(f"{label} must be exactly {TYPE_CREATOR_LENGTH} characters: {raw!r}")
    return raw


class VolumeController:
    """Owns one session and everything derived from it."""

    def __init__(
        self,
        session: VolumeSession,
        *,
        transfer_mode: TransferMode = TransferMode.AUTO,
        confirm_replace: ConfirmReplace = decline_replace,
        confirm_delete: ConfirmDelete = _confirm_all,
        on_listing_error: ListingErrorHandler | None = None,
        dispatcher: OwnerThreadDispatcher | None = None,
        worker: TransferWorker | None = None,
        scratch_root: Path | None = None,
        display_name: str | None = None,
    ) -> None:
        self.session = session
        self.transfer_mode = transfer_mode
        self.display_name = display_name or session.source.name
        self.cache = NodeCache(session, on_error=on_listing_error)
        self.orchestrator = TransferOrchestrator(session, self.cache.invalidate, scratch_root=scratch_root)
        self.expanded: set[str] = set()
        self._confirm_replace = confirm_replace
        self._confirm_delete = confirm_delete
        self._dispatcher = dispatcher or OwnerThreadDispatcher()
        self._worker = worker or TransferWorker()
        self._scratch_root = scratch_root
        self._drag: DragSession | None = None

    @property
    def tree_id(self) -> int:
        return id(self)

    @property
    def busy(self) -> bool:
        return self._worker.busy

    def _ensure_idle(self) -> None:
        if self._worker.busy:
            raise InvalidArgumentError("a background transfer is still running")

    # Tree queries

    def rows(self) -> list[TreeRow]:
        self._ensure_idle()
        return build_tree_rows(self.cache, self.expanded)

    def children_of(self, node: VisibleNode | None = None) -> list[VisibleNode]:
        self._ensure_idle()
        return self.cache.children_of(node)

    def is_expandable(self, node: VisibleNode) -> bool:
        return self.cache.is_expandable(node)

    def expand(self, node: VisibleNode) -> None:
        """Mark ``node`` expanded and re-list it from the volume."""
        if not node.info.is_directory:
            return
        self._ensure_idle()
        self.expanded.add(node.path)
        self.cache.refresh(node)

    def collapse(self, node: VisibleNode) -> None:
        self.expanded.discard(node.path)

    def _forget_expanded(self, path: str) -> None:
        """Drop ``path`` and everything beneath it from the expanded set."""
        self.expanded = {item for item in self.expanded if not is_descendant_or_same(item, path)}

    def reload(self) -> None:
        """Drop the cached tree and list the root again."""
        self._ensure_idle()
        self.cache.reset()
        self.cache.ensure_loaded(None)

    def volume_info(self) -> VolumeInfo:
        self._ensure_idle()
        return self.session.volume_info()

    # Command enablement

    def can_import(self) -> bool:
        return self.session.is_open and self.session.writable

    def can_export(self, selection: Sequence[VisibleNode]) -> bool:
        return bool(selection)

    def can_rename(self, selection: Sequence[VisibleNode]) -> bool:
        return bool(selection) and self.session.writable

    def can_delete(self, selection: Sequence[VisibleNode]) -> bool:
        return bool(selection) and self.session.writable

    def import_destination(self, selection: Sequence[VisibleNode]) -> str:
        """Selected directory, else the selected file's parent, else root."""
        if not selection:
            return ROOT_PATH
        selected = selection[0]
        if selected.info.is_directory:
            return selected.path
        return parent_path(selected.path)

    # Operations

    def import_items(self, host_paths: Iterable[Path], destination: str = ROOT_PATH) -> TransferReport:
        self._ensure_idle()
        return self.orchestrator.import_items(host_paths, destination, self.transfer_mode, self._confirm_replace)

    def export(self, node: VisibleNode, destination: Path) -> Path:
        self._ensure_idle()
        return self.orchestrator.export_item(node.info, destination, self.transfer_mode)

    def move(self, source_paths: Iterable[str], destination: str) -> TransferReport:
        self._ensure_idle()
        return self.orchestrator.move_items(source_paths, destination)

    def copy(self, source_paths: Iterable[str], destination: str) -> TransferReport:
        self._ensure_idle()
        return self.orchestrator.copy_items(source_paths, destination, self.transfer_mode, self._confirm_replace)

    def rename(self, node: VisibleNode, new_name: str) -> str:
        """Rename ``node`` and return the trimmed name that was applied."""
        name = validate_entry_name(new_name)
        self._ensure_idle()
        try:
            self.session.rename(node.path, name)
        finally:
            self.cache.invalidate(parent_path(node.path))
        self._forget_expanded(node.path)
        logger.info("Renamed %s to %s", node.path, name)
        return name

    def delete(self, selection: Iterable[VisibleNode]) -> list[FileEntryInfo]:
        """Delete the normalized selection deepest-first after confirmation.

        Returns the deleted entries; an empty list when declined.
        """
        nodes = normalize_for_delete(selection)
        if not nodes:
            raise InvalidArgumentError("nothing selected to delete")
        self._ensure_idle()
        if not self._confirm_delete(list(nodes)):
            return []
        deleted: list[FileEntryInfo] = []
        try:
            for node in nodes:
                self.session.delete(node.info)
                deleted.append(node.info)
        finally:
            self.cache.reset()
            for info in deleted:
                self._forget_expanded(info.path)
        logger.info("Deleted %d item(s)", len(deleted))
        return deleted

    def set_type_creator(self, node: VisibleNode, file_type: str, creator: str) -> None:
        if node.info.is_directory:
            raise InvalidArgumentError(f"{node.path} is a folder; type/creator apply to files only")
        file_type = validate_code(file_type, "type")
        creator = validate_code(creator, "creator")
        self._ensure_idle()
        try:
            self.session.set_type_creator(node.path, file_type, creator)
        finally:
            self.cache.invalidate(parent_path(node.path))

    # Drag and drop

    def begin_drag(self, nodes: Iterable[VisibleNode]) -> DragSession:
        """Start tracking an internal drag of ``nodes``."""
        self._drag = DragSession.start(self.tree_id, nodes)
        return self._drag

    def end_drag(self) -> None:
        """Forget the tracked drag; called whenever a drag ends."""
        self._drag = None

    def classify(self, session: DragSession | None) -> DropKind:
        if session is None or session is not self._drag:
            return DropKind.EXTERNAL
        return classify_drop(session, self.tree_id)

    def drop(
        self,
        destination: VisibleNode | None,
        *,
        session: DragSession | None = None,
        host_paths: Sequence[Path] = (),
        copy: bool = False,
    ) -> TransferReport:
        """Handle a drop onto ``destination`` (``None`` is the root).

        Internal drops move (or copy) volume entries; anything else imports
        ``host_paths``. The tracked drag is cleared either way.
        """
        try:
            if destination is not None and not destination.info.is_directory:
                raise InvalidDropError(f"{destination.path} is not a folder")
            target = destination.path if destination is not None else ROOT_PATH
            if self.classify(session) is DropKind.INTERNAL:
                assert session is not None
                if copy:
                    return self.copy(session.source_paths, target)
                return self.move(session.source_paths, target)
            if not host_paths:
                raise InvalidDropError("nothing to import from the drop")
            return self.import_items(host_paths, target)
        finally:
            self.end_drag()

    def export_for_drag(self, nodes: Iterable[VisibleNode]) -> list[Path]:
        """Write the drag-source form of ``nodes`` to a host scratch folder."""
        self._ensure_idle()
        infos = [node.info for node in normalize_for_delete(nodes)]
        return self.orchestrator.export_for_drag(infos, self.transfer_mode)

    # Background transfers

    def _confirm_on_owner(self, conflict: NameConflict) -> bool:
        return self._dispatcher.call_sync(self._confirm_replace, conflict)

    def submit_import(self, host_paths: Iterable[Path], destination: str = ROOT_PATH) -> int:
        """Run an import on the worker; results land via ``pump``."""
        paths = [Path(path) for path in host_paths]
        mode = self.transfer_mode

        def body(invalidate: Callable[[str], object]) -> TransferReport:
            orchestrator = TransferOrchestrator(self.session, invalidate, scratch_root=self._scratch_root)
            return orchestrator.import_items(paths, destination, mode, self._confirm_on_owner)

        return self._worker.submit(f"import into {destination}", body)

    def submit_copy(self, source_paths: Iterable[str], destination: str) -> int:
        """Run an internal copy on the worker; results land via ``pump``."""
        sources = list(source_paths)
        mode = self.transfer_mode

        def body(invalidate: Callable[[str], object]) -> TransferReport:
            orchestrator = TransferOrchestrator(self.session, invalidate, scratch_root=self._scratch_root)
            return orchestrator.copy_items(sources, destination, mode, self._confirm_on_owner)

        return self._worker.submit(f"copy into {destination}", body)

    def pump(self, timeout: float | None = None) -> list[TransferResult]:
        """Serve pending owner-thread calls, then apply finished batches."""
        self._dispatcher.pump(timeout)
        return self._worker.apply_results(self.cache.invalidate)

    def close(self) -> None:
        self._drag = None
        self.session.close()


class VolumeRegistry:
    """Tracks the controllers of every open volume window."""

    def __init__(
        self,
        engine: VolumeEngine,
        *,
        choose_partition: PartitionChooser | None = None,
        dispatcher: OwnerThreadDispatcher | None = None,
    ) -> None:
        self._engine = engine
        self._dispatcher = dispatcher or OwnerThreadDispatcher()
        self._resolver = PartitionResolver(engine, choose=choose_partition, dispatcher=self._dispatcher)
        self._controllers: list[VolumeController] = []

    @property
    def controllers(self) -> list[VolumeController]:
        return list(self._controllers)

    def open_file(self, path: Path, *, writable: bool = True, **options) -> VolumeController | None:
        """Resolve and open ``path``; ``None`` when partition choice was cancelled."""
        session = self._resolver.open(Path(path), writable=writable)
        if session is None:
            return None
        options.setdefault("dispatcher", self._dispatcher)
        try:
            controller = VolumeController(session, **options)
        except Exception:
            session.close()
            raise
        self._controllers.append(controller)
        return controller

    def close(self, controller: VolumeController) -> None:
        controller.close()
        self._controllers = [item for item in self._controllers if item is not controller]

    def close_all(self) -> None:
        for controller in list(self._controllers):
            self.close(controller)


__all__ = [
    "ConfirmDelete",
    "VolumeController",
    "VolumeRegistry",
    "validate_code",
]
