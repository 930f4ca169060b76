"""Tests for flattening the node cache into display rows."""

from __future__ import annotations

import unittest
from pathlib import Path

from memory_engine import MemoryEngine

from hfsnav.session import VolumeSession
from hfsnav.tree.node_cache import NodeCache
from hfsnav.tree.rows import build_tree_rows


class BuildTreeRowsTests(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = MemoryEngine()
        self.engine.add_dir(":Apps")
        self.engine.add_file(":Apps:Editor")
        self.engine.add_dir(":Apps:Tools")
        self.engine.add_file(":Apps:Tools:Zap")
        self.engine.add_file(":notes")
        self.cache = NodeCache(VolumeSession.open(self.engine, Path("disk.img")))

    def test_collapsed_tree_shows_only_roots(self) -> None:
        rows = build_tree_rows(self.cache, set())
        self.assertEqual([(row.path, row.depth, row.expanded) for row in rows], [(":Apps", 0, False), (":notes", 0, False)])

    def test_expanded_directories_contribute_nested_rows(self) -> None:
        rows = build_tree_rows(self.cache, {":Apps", ":Apps:Tools"})
        self.assertEqual(
            [(row.path, row.depth) for row in rows],
            [(":Apps", 0), (":Apps:Tools", 1), (":Apps:Tools:Zap", 2), (":Apps:Editor", 1), (":notes", 0)],
        )
        self.assertTrue(rows[0].expanded)
        self.assertTrue(rows[0].is_dir)
        self.assertFalse(rows[-1].is_dir)

    def test_expanded_set_entries_for_files_are_ignored(self) -> None:
        rows = build_tree_rows(self.cache, {":notes"})
        self.assertFalse(rows[-1].expanded)
        self.assertEqual(len(rows), 2)


if __name__ == "__main__":
    unittest.main()
