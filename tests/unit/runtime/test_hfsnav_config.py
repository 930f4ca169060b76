"""Tests for config persistence and sanitization of stored values."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from hfsnav.runtime import config
from hfsnav.volume_model.types import TransferMode


class ConfigBehaviorTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.config_path = Path(self._tmp.name) / "nested" / "config.json"
        patcher = mock.patch("hfsnav.runtime.config.CONFIG_PATH", self.config_path)
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_missing_config_uses_defaults(self) -> None:
        self.assertEqual(config.load_config(), {})
        self.assertIs(config.load_transfer_mode(), TransferMode.AUTO)
        self.assertIsNone(config.load_engine_spec())
        self.assertFalse(config.load_open_read_only())
        self.assertIsNone(config.load_last_export_dir())

    def test_transfer_mode_round_trip(self) -> None:
        config.save_transfer_mode(TransferMode.BINHEX)
        self.assertEqual(config.load_config().get("transfer_mode"), "binhex")
        self.assertIs(config.load_transfer_mode(), TransferMode.BINHEX)

    def test_unknown_transfer_mode_falls_back_to_auto(self) -> None:
        config.save_config({"transfer_mode": "zip"})
        self.assertIs(config.load_transfer_mode(), TransferMode.AUTO)

    def test_keys_are_preserved_across_saves(self) -> None:
        config.save_engine_spec("  vendor.engine:make  ")
        config.save_open_read_only(True)
        config.save_last_export_dir(Path("/tmp/exports"))

        self.assertEqual(config.load_engine_spec(), "vendor.engine:make")
        self.assertTrue(config.load_open_read_only())
        self.assertEqual(config.load_last_export_dir(), Path("/tmp/exports"))

    def test_blank_engine_spec_is_not_saved(self) -> None:
        config.save_engine_spec("   ")
        self.assertNotIn("engine", config.load_config())

    def test_malformed_values_are_ignored(self) -> None:
        config.save_config({"engine": 42, "open_read_only": "yes", "last_export_dir": ""})
        self.assertIsNone(config.load_engine_spec())
        self.assertFalse(config.load_open_read_only())
        self.assertIsNone(config.load_last_export_dir())

    def test_non_object_json_loads_empty(self) -> None:
        self.config_path.parent.mkdir(parents=True)
        self.config_path.write_text("[1, 2]\n", encoding="utf-8")
        self.assertEqual(config.load_config(), {})
        self.config_path.write_text("{not json", encoding="utf-8")
        self.assertEqual(config.load_config(), {})


if __name__ == "__main__":
    unittest.main()
