"""Flatten the node cache into display rows for a set of expanded paths."""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass

from .node_cache import NodeCache, VisibleNode


@dataclass(frozen=True)
class TreeRow:
    """One rendered row in the volume tree."""

    node: VisibleNode
    depth: int
    expanded: bool = False

    @property
    def path(self) -> str:
        return self.node.path

    @property
    def is_dir(self) -> bool:
        return self.node.info.is_directory


def build_tree_rows(cache: NodeCache, expanded: Collection[str]) -> list[TreeRow]:
    """Return rows in display order, descending into expanded directories."""
    rows: list[TreeRow] = []

    def append_children(parent: VisibleNode | None, depth: int) -> None:
        for child in cache.children_of(parent):
            is_open = child.info.is_directory and child.path in expanded
            rows.append(TreeRow(node=child, depth=depth, expanded=is_open))
            if is_open:
                append_children(child, depth + 1)

    append_children(None, 0)
    return rows


__all__ = [
    "TreeRow",
    "build_tree_rows",
]
