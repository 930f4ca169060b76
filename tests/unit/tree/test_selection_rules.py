"""Tests for delete normalization, drop validity, and drag classification."""

from __future__ import annotations

import unittest

from hfsnav.errors import InvalidDropError
from hfsnav.tree.node_cache import VisibleNode
from hfsnav.tree.selection import (
    DragSession,
    DropKind,
    classify_drop,
    collapse_paths,
    ensure_valid_drop,
    is_valid_drop,
    normalize_for_delete,
)
from hfsnav.volume_model.paths import name_of
from hfsnav.volume_model.types import FileEntryInfo


def _node(path: str, is_directory: bool = True) -> VisibleNode:
    return VisibleNode(info=FileEntryInfo(name=name_of(path), path=path, is_directory=is_directory))


class NormalizeForDeleteTests(unittest.TestCase):
    def test_descendants_of_selected_nodes_are_dropped(self) -> None:
        result = normalize_for_delete([_node(":a"), _node(":a:b"), _node(":c", False)])
        self.assertEqual(sorted(node.path for node in result), [":a", ":c"])

    def test_result_is_deepest_first(self) -> None:
        result = normalize_for_delete([_node(":x"), _node(":long:deep"), _node(":mid")])
        lengths = [len(node.path) for node in result]
        self.assertEqual(lengths, sorted(lengths, reverse=True))

    def test_duplicates_collapse(self) -> None:
        result = normalize_for_delete([_node(":a"), _node(":a")])
        self.assertEqual([node.path for node in result], [":a"])

    def test_sibling_with_shared_prefix_is_kept(self) -> None:
        result = normalize_for_delete([_node(":a"), _node(":ab")])
        self.assertEqual(sorted(node.path for node in result), [":a", ":ab"])

    def test_empty_selection_normalizes_to_empty(self) -> None:
        self.assertEqual(normalize_for_delete([]), [])


class DropValidityTests(unittest.TestCase):
    def test_drop_into_own_subtree_is_rejected(self) -> None:
        self.assertFalse(is_valid_drop([":a"], ":a:sub"))
        with self.assertRaises(InvalidDropError):
            ensure_valid_drop([":a"], ":a:sub")

    def test_drop_onto_itself_is_rejected(self) -> None:
        self.assertFalse(is_valid_drop([":a"], ":a"))

    def test_drop_into_sibling_is_valid(self) -> None:
        self.assertTrue(is_valid_drop([":a", ":a:b"], ":c"))
        self.assertEqual(ensure_valid_drop([":a", ":a:b"], ":c"), [":a"])

    def test_drop_into_case_variant_of_own_subtree_is_rejected(self) -> None:
        self.assertFalse(is_valid_drop([":Apps"], ":apps:Sub"))
        self.assertFalse(is_valid_drop([":Apps"], ":APPS"))
        with self.assertRaises(InvalidDropError):
            ensure_valid_drop([":Apps"], ":apps:Sub")

    def test_case_variants_collapse_to_first_spelling(self) -> None:
        self.assertEqual(collapse_paths([":Apps", ":apps", ":APPS:Sub"]), [":Apps"])
        result = normalize_for_delete([_node(":Apps"), _node(":apps"), _node(":apps:Sub")])
        self.assertEqual([node.path for node in result], [":Apps"])

    def test_collapse_paths_shortest_first(self) -> None:
        self.assertEqual(collapse_paths([":b:c", ":a", ":b", ":a:z"]), [":a", ":b"])


class DragClassificationTests(unittest.TestCase):
    def test_drag_from_same_tree_is_internal(self) -> None:
        session = DragSession.start(7, [_node(":a"), _node(":a:b")])
        self.assertEqual(session.source_paths, frozenset({":a"}))
        self.assertIs(classify_drop(session, 7), DropKind.INTERNAL)

    def test_drag_from_other_tree_is_external(self) -> None:
        session = DragSession.start(7, [_node(":a")])
        self.assertIs(classify_drop(session, 8), DropKind.EXTERNAL)

    def test_missing_or_empty_drag_is_external(self) -> None:
        self.assertIs(classify_drop(None, 7), DropKind.EXTERNAL)
        self.assertIs(classify_drop(DragSession.start(7, []), 7), DropKind.EXTERNAL)


if __name__ == "__main__":
    unittest.main()
