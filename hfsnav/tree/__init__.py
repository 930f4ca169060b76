"""Tree-side state for the volume view.

- ``NodeCache``/``VisibleNode``: lazily loaded, path-addressed directory tree
- ``build_tree_rows``: pull-based projection into display rows
- selection normalization and drag-and-drop validity helpers
"""

from __future__ import annotations

from .node_cache import ListingErrorHandler, NodeCache, VisibleNode, sort_entries
from .rows import TreeRow, build_tree_rows
from .selection import (
    DragSession,
    DropKind,
    classify_drop,
    collapse_paths,
    ensure_valid_drop,
    is_valid_drop,
    normalize_for_delete,
)

__all__ = [
    "ListingErrorHandler",
    "NodeCache",
    "VisibleNode",
    "sort_entries",
    "TreeRow",
    "build_tree_rows",
    "DragSession",
    "DropKind",
    "classify_drop",
    "collapse_paths",
    "ensure_valid_drop",
    "is_valid_drop",
    "normalize_for_delete",
]
