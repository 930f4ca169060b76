"""Lazily-populated mirror of the expanded part of a volume's namespace.

Directory children are either ``None`` (never listed, or invalidated) or a
complete, sorted snapshot from one listing call. Writes made through this
package invalidate the affected directories; changes made behind the
engine's back are not detected.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from ..errors import HFSNavError, NotFoundError
from ..session import VolumeSession
from ..volume_model.paths import ROOT_PATH, paths_match
from ..volume_model.types import FileEntryInfo

logger = logging.getLogger(__name__)

ListingErrorHandler = Callable[[str, HFSNavError], None]


@dataclass(eq=False)
class VisibleNode:
    """One tree row's entry plus its loaded children, if any."""

    info: FileEntryInfo
    children: list[VisibleNode] | None = field(default=None, repr=False)

    @property
    def path(self) -> str:
        return self.info.path

    @property
    def is_loaded(self) -> bool:
        return self.children is not None


def sort_entries(entries: list[FileEntryInfo]) -> list[FileEntryInfo]:
    """Directories first, then case-insensitive name order."""
    return sorted(entries, key=lambda item: (not item.is_directory, item.name.casefold()))


class NodeCache:
    """Path-addressed tree of ``VisibleNode``s backed by a ``VolumeSession``.

    Must be used from a single thread; it holds no lock.
    """

    def __init__(self, session: VolumeSession, on_error: ListingErrorHandler | None = None) -> None:
        self._session = session
        self._on_error = on_error
        self._roots: list[VisibleNode] | None = None

    @property
    def roots_loaded(self) -> bool:
        return self._roots is not None

    def _list(self, directory: str) -> list[VisibleNode]:
        entries = sort_entries(self._session.list(directory))
        logger.debug("Loaded %d entries for %s", len(entries), directory)
        return [VisibleNode(info=entry) for entry in entries]

    def ensure_loaded(self, node: VisibleNode | None = None) -> HFSNavError | None:
        """Load ``node``'s children (or the root's) when not yet loaded.

        Returns the listing error, if any; the target then stays unloaded.
        Files and already-loaded directories are left untouched.
        """
        if node is None:
            if self._roots is not None:
                return None
            directory = ROOT_PATH
        else:
            if not node.info.is_directory or node.children is not None:
                return None
            directory = node.path

        try:
            children = self._list(directory)
        except HFSNavError as exc:
            logger.warning("Listing %s failed: %s", directory, exc)
            if self._on_error is not None:
                self._on_error(directory, exc)
            return exc

        if node is None:
            self._roots = children
        else:
            node.children = children
        return None

    def children_of(self, node: VisibleNode | None = None) -> list[VisibleNode]:
        """Return loaded children, loading on demand; empty on failure."""
        self.ensure_loaded(node)
        if node is None:
            return list(self._roots or [])
        return list(node.children or [])

    def child_count(self, node: VisibleNode | None = None) -> int:
        return len(self.children_of(node))

    def child_at(self, node: VisibleNode | None, index: int) -> VisibleNode:
        """Return the ``index``-th child; ``NotFoundError`` when out of range.

        A directory whose listing failed has no children at all.
        """
        children = self.children_of(node)
        if not 0 <= index < len(children):
            directory = node.path if node is not None else ROOT_PATH
            raise NotFoundError(f"{directory} has no child at index {index} ({len(children)} loaded)")
        return children[index]

    def is_expandable(self, node: VisibleNode) -> bool:
        return node.info.is_directory

    def invalidate(self, path: str) -> bool:
        """Forget the children of the loaded directory at ``path``.

        The root drops the whole tree. Returns whether a loaded node was
        cleared; unknown paths are a no-op.
        """
        if path == ROOT_PATH:
            self._roots = None
            logger.debug("Invalidated whole tree")
            return True

        stack: list[list[VisibleNode]] = [self._roots] if self._roots is not None else []
        while stack:
            level = stack.pop()
            for node in level:
                if paths_match(node.path, path):
                    node.children = None
                    logger.debug("Invalidated %s", path)
                    return True
            for node in reversed(level):
                if node.children is not None:
                    stack.append(node.children)
        return False

    def refresh(self, node: VisibleNode) -> HFSNavError | None:
        """Re-list ``node`` from the volume, as done when a row is expanded."""
        if not node.info.is_directory:
            return None
        node.children = None
        return self.ensure_loaded(node)

    def reset(self) -> None:
        """Drop everything; the next access reloads the root listing."""
        self._roots = None

    def find(self, path: str) -> VisibleNode | None:
        """Return the loaded node at ``path`` without triggering any listing."""
        stack: list[VisibleNode] = list(self._roots or [])
        while stack:
            node = stack.pop()
            if paths_match(node.path, path):
                return node
            if node.children:
                stack.extend(node.children)
        return None


__all__ = [
    "ListingErrorHandler",
    "NodeCache",
    "VisibleNode",
    "sort_entries",
]
