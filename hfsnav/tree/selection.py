"""Selection normalization and drag-and-drop validity rules.

Multi-item operations act on the minimal set of selected entries whose
ancestors are not also selected, so a recursive operation never touches a
descendant twice.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from ..errors import InvalidDropError
from ..volume_model.paths import is_descendant_or_same, paths_match
from .node_cache import VisibleNode


def _under(path: str, ancestor: str) -> bool:
    return not paths_match(path, ancestor) and is_descendant_or_same(path, ancestor)


def normalize_for_delete(nodes: Iterable[VisibleNode]) -> list[VisibleNode]:
    """Collapse descendants of selected nodes; deepest paths first."""
    keep: list[VisibleNode] = []
    seen: set[str] = set()
    for node in sorted(nodes, key=lambda item: len(item.path)):
        folded = node.path.casefold()
        if folded in seen:
            continue
        if any(_under(node.path, kept.path) for kept in keep):
            continue
        keep.append(node)
        seen.add(folded)
    return sorted(keep, key=lambda item: len(item.path), reverse=True)


def collapse_paths(paths: Iterable[str]) -> list[str]:
    """Same ancestor-collapsing rule for bare paths, shortest first.

    Paths differing only in case name one entry; the first spelling wins.
    """
    keep: list[str] = []
    seen: set[str] = set()
    for path in sorted(paths, key=len):
        folded = path.casefold()
        if folded in seen:
            continue
        if any(_under(path, kept) for kept in keep):
            continue
        keep.append(path)
        seen.add(folded)
    return keep


def is_valid_drop(source_paths: Iterable[str], destination: str) -> bool:
    """Reject drops onto a source itself or anywhere inside its subtree."""
    return not any(is_descendant_or_same(destination, source) for source in collapse_paths(source_paths))


def ensure_valid_drop(source_paths: Iterable[str], destination: str) -> list[str]:
    """Return the collapsed sources or raise ``InvalidDropError``."""
    sources = collapse_paths(source_paths)
    for source in sources:
        if is_descendant_or_same(destination, source):
            raise InvalidDropError(f"cannot drop {source} into {destination}")
    return sources


class DropKind(str, Enum):
    INTERNAL = "internal"
    EXTERNAL = "external"


@dataclass(frozen=True)
class DragSession:
    """Source paths of one drag started in a given tree instance."""

    origin: int
    source_paths: frozenset[str]

    @classmethod
    def start(cls, origin: int, nodes: Iterable[VisibleNode]) -> DragSession:
        return cls(origin=origin, source_paths=frozenset(collapse_paths(node.path for node in nodes)))


def classify_drop(session: DragSession | None, tree_id: int) -> DropKind:
    """Internal only when the drag came from this tree and is still live."""
    if session is None or session.origin != tree_id or not session.source_paths:
        return DropKind.EXTERNAL
    return DropKind.INTERNAL


__all__ = [
    "DragSession",
    "DropKind",
    "classify_drop",
    "collapse_paths",
    "ensure_valid_drop",
    "is_valid_drop",
    "normalize_for_delete",
]
