"""Tests for import/export/move/copy conflict handling and invalidation."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from memory_engine import MemoryEngine

from hfsnav.errors import InvalidDropError, IOFailureError, NameConflict, NotFoundError
from hfsnav.session import VolumeSession
from hfsnav.transfer import DRAG_PREFIX, TransferOrchestrator
from hfsnav.volume_model.types import TransferMode


class OrchestratorTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.host = Path(self._tmp.name)
        self.scratch = self.host / "scratch"
        self.scratch.mkdir()
        self.engine = MemoryEngine()
        self.engine.add_dir(":Docs")
        self.engine.add_file(":Docs:X", b"original")
        self.engine.add_dir(":Apps")
        self.engine.add_dir(":Apps:Sub")
        self.session = VolumeSession.open(self.engine, Path("disk.img"))
        self.invalidated: list[str] = []
        self.orchestrator = TransferOrchestrator(self.session, self.invalidated.append, scratch_root=self.scratch)

    def host_file(self, name: str, data: bytes = b"new") -> Path:
        path = self.host / name
        path.write_bytes(data)
        return path


class ImportTests(OrchestratorTestCase):
    def test_import_writes_into_destination_and_invalidates_once(self) -> None:
        first = self.host_file("one.txt")
        second = self.host_file("two.txt")
        report = self.orchestrator.import_items([first, second], ":Docs", TransferMode.RAW)
        self.assertEqual(report.written, [":Docs:one.txt", ":Docs:two.txt"])
        self.assertEqual(self.invalidated, [":Docs"])
        self.assertEqual(self.engine.read(":Docs:two.txt"), b"new")

    def test_declined_conflict_leaves_existing_untouched(self) -> None:
        incoming = self.host_file("x")
        conflicts: list[NameConflict] = []

        def decline(conflict: NameConflict) -> bool:
            conflicts.append(conflict)
            return False

        report = self.orchestrator.import_items([incoming], ":Docs", TransferMode.AUTO, decline)

        self.assertEqual(conflicts, [NameConflict(":Docs", "x", "X", False)])
        self.assertEqual(report.skipped, [str(incoming)])
        self.assertEqual(self.engine.read(":Docs:X"), b"original")
        self.assertNotIn("copy_in", self.engine.call_names())
        self.assertNotIn("delete", self.engine.call_names())

    def test_accepted_conflict_deletes_then_writes(self) -> None:
        incoming = self.host_file("X", b"replacement")
        report = self.orchestrator.import_items([incoming], ":Docs", TransferMode.AUTO, lambda _c: True)
        self.assertEqual(report.written, [":Docs:X"])
        self.assertEqual(self.engine.read(":Docs:X"), b"replacement")
        names = self.engine.call_names()
        self.assertLess(names.index("delete"), names.index("copy_in"))

    def test_conflict_with_existing_folder_reports_folder(self) -> None:
        incoming = self.host_file("APPS")
        conflicts: list[NameConflict] = []
        report = self.orchestrator.import_items([incoming], ":", TransferMode.RAW, conflicts.append)
        self.assertEqual(conflicts, [NameConflict(":", "APPS", "Apps", True)])
        self.assertEqual(report.skipped, [str(incoming)])
        self.assertTrue(self.engine.exists(":Apps:Sub"))

    def test_host_name_separator_is_sanitized(self) -> None:
        incoming = self.host_file("a:b")
        report = self.orchestrator.import_items([incoming], ":", TransferMode.RAW)
        self.assertEqual(report.written, [":a-b"])

    def test_missing_host_path_is_skipped(self) -> None:
        missing = self.host / "gone.txt"
        report = self.orchestrator.import_items([missing], ":Docs", TransferMode.RAW)
        self.assertEqual(report.skipped, [str(missing)])
        self.assertEqual(report.written, [])
        self.assertEqual(self.invalidated, [":Docs"])

    def test_directory_import_uses_directory_copy(self) -> None:
        folder = self.host / "Folder"
        folder.mkdir()
        (folder / "inner.txt").write_bytes(b"in")
        self.orchestrator.import_items([folder], ":", TransferMode.MACBINARY)
        self.assertTrue(self.engine.exists(":Folder:inner.txt"))
        self.assertEqual(self.engine.calls[-2][0], "copy_in_directory")

    def test_partial_failure_still_invalidates_destination(self) -> None:
        good = self.host_file("good")
        bad = self.host_file("bad")
        self.engine.failing_copy_ins.add(":Docs:bad")
        with self.assertRaises(IOFailureError):
            self.orchestrator.import_items([good, bad, self.host_file("never")], ":Docs", TransferMode.RAW)
        self.assertEqual(self.invalidated, [":Docs"])
        self.assertTrue(self.engine.exists(":Docs:good"))
        self.assertFalse(self.engine.exists(":Docs:never"))

    def test_mode_is_passed_through(self) -> None:
        incoming = self.host_file("doc.hqx")
        self.orchestrator.import_items([incoming], ":", TransferMode.BINHEX)
        call = [c for c in self.engine.calls if c[0] == "copy_in"][0]
        self.assertIs(call[3], TransferMode.BINHEX)


class ExportTests(OrchestratorTestCase):
    def test_export_into_existing_directory_uses_entry_name(self) -> None:
        info = self.session.attributes(":Docs:X")
        written = self.orchestrator.export_item(info, self.host, TransferMode.RAW)
        self.assertEqual(written, self.host / "X")
        self.assertEqual(written.read_bytes(), b"original")

    def test_export_to_explicit_file_path(self) -> None:
        info = self.session.attributes(":Docs:X")
        target = self.host / "out" / "renamed.bin"
        self.assertEqual(self.orchestrator.export_item(info, target, TransferMode.RAW), target)
        self.assertTrue(target.exists())

    def test_export_directory_recurses(self) -> None:
        info = self.session.attributes(":Docs")
        written = self.orchestrator.export_item(info, self.host, TransferMode.RAW)
        self.assertTrue((written / "X").exists())

    def test_export_for_drag_uses_fresh_scratch_directory(self) -> None:
        info = self.session.attributes(":Docs:X")
        paths = self.orchestrator.export_for_drag([info], TransferMode.RAW)
        self.assertEqual(len(paths), 1)
        self.assertTrue(paths[0].parent.name.startswith(DRAG_PREFIX))
        self.assertEqual(paths[0].parent.parent, self.scratch)

    def test_export_folder_onto_existing_host_file_is_typed_failure(self) -> None:
        taken = self.host_file("taken")
        with self.assertRaises(IOFailureError) as caught:
            self.orchestrator.export_item(self.session.attributes(":Docs"), taken, TransferMode.RAW)
        self.assertIsInstance(caught.exception.cause, FileExistsError)
        self.assertNotIn("copy_out_directory", self.engine.call_names())

    def test_export_for_drag_with_missing_scratch_root_is_typed_failure(self) -> None:
        orchestrator = TransferOrchestrator(self.session, self.invalidated.append, scratch_root=self.host / "gone")
        with self.assertRaises(NotFoundError):
            orchestrator.export_for_drag([self.session.attributes(":Docs:X")], TransferMode.RAW)

    def test_export_does_not_invalidate(self) -> None:
        self.orchestrator.export_item(self.session.attributes(":Docs:X"), self.host, TransferMode.RAW)
        self.assertEqual(self.invalidated, [])


class MoveTests(OrchestratorTestCase):
    def test_move_invalidates_old_and_new_parent(self) -> None:
        report = self.orchestrator.move_items([":Docs:X"], ":Apps")
        self.assertEqual(report.written, [":Docs:X"])
        self.assertEqual(self.invalidated, [":Docs", ":Apps"])
        self.assertTrue(self.engine.exists(":Apps:X"))

    def test_move_into_current_parent_is_noop(self) -> None:
        report = self.orchestrator.move_items([":Docs:X"], ":Docs")
        self.assertEqual(report.unchanged, [":Docs:X"])
        self.assertNotIn("move", self.engine.call_names())
        self.assertEqual(self.invalidated, [])

    def test_move_into_own_subtree_is_rejected_before_io(self) -> None:
        with self.assertRaises(InvalidDropError):
            self.orchestrator.move_items([":Apps"], ":Apps:Sub")
        self.assertNotIn("move", self.engine.call_names())

    def test_move_into_case_variant_of_current_parent_is_noop(self) -> None:
        report = self.orchestrator.move_items([":Docs:X"], ":docs")
        self.assertEqual(report.unchanged, [":Docs:X"])
        self.assertEqual(report.written, [])
        self.assertNotIn("move", self.engine.call_names())

    def test_move_collapses_descendants(self) -> None:
        self.orchestrator.move_items([":Apps", ":Apps:Sub"], ":Docs")
        moves = [call for call in self.engine.calls if call[0] == "move"]
        self.assertEqual(moves, [("move", ":Apps", ":Docs")])


class CopyTests(OrchestratorTestCase):
    def test_copy_stages_and_writes_under_original_name(self) -> None:
        report = self.orchestrator.copy_items([":Docs:X"], ":Apps", TransferMode.RAW)
        self.assertEqual(report.written, [":Apps:X"])
        self.assertEqual(self.engine.read(":Apps:X"), b"original")
        self.assertEqual(self.invalidated, [":Apps"])
        self.assertEqual(list(self.scratch.iterdir()), [])

    def test_copy_directory(self) -> None:
        self.orchestrator.copy_items([":Docs"], ":Apps", TransferMode.RAW)
        self.assertTrue(self.engine.exists(":Apps:Docs:X"))
        self.assertTrue(self.engine.exists(":Docs:X"))

    def test_copy_onto_existing_name_asks_and_declines(self) -> None:
        self.engine.add_file(":Apps:x", b"keep")
        report = self.orchestrator.copy_items([":Docs:X"], ":Apps", TransferMode.RAW)
        self.assertEqual(report.skipped, [":Docs:X"])
        self.assertEqual(self.engine.read(":Apps:x"), b"keep")

    def test_copy_failure_cleans_scratch_and_invalidates(self) -> None:
        self.engine.failing_copy_ins.add(":Apps:X")
        with self.assertRaises(IOFailureError):
            self.orchestrator.copy_items([":Docs:X"], ":Apps", TransferMode.RAW)
        self.assertEqual(list(self.scratch.iterdir()), [])
        self.assertEqual(self.invalidated, [":Apps"])

    def test_copy_into_itself_is_rejected(self) -> None:
        with self.assertRaises(InvalidDropError):
            self.orchestrator.copy_items([":Apps"], ":Apps", TransferMode.RAW)

    def test_copy_into_case_variant_subtree_is_rejected_before_io(self) -> None:
        calls_before = len(self.engine.calls)
        with self.assertRaises(InvalidDropError):
            self.orchestrator.copy_items([":Apps"], ":apps:Sub", TransferMode.RAW)
        self.assertEqual(len(self.engine.calls), calls_before)
        self.assertFalse(self.engine.exists(":Apps:Sub:Apps"))


if __name__ == "__main__":
    unittest.main()
