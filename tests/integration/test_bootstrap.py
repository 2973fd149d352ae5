import asyncio
import json
import os
import sys
import tempfile
from pathlib import Path
import unittest
from unittest import mock

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from statblocks import bootstrap
from statblocks.infrastructure.inmemory.inmemory_document_reader import InMemoryDocumentReader
from statblocks.infrastructure.inmemory.inmemory_layout_repo import DEFAULT_LAYOUT_NAME
from statblocks.infrastructure.yaml_link_transform import WikiLinkTransformer


def _write_bestiary(root: Path) -> None:
    (root / "goblins.json").write_text(
        json.dumps(
            [
                {
                    "name": "Goblin",
                    "stats": [8, 14, 10, 10, 8, 8],
                    "cr": "1/4",
                    "traits": [{"name": "Nimble Escape", "desc": "Hides behind the [[Goblin Boss]]."}],
                },
                {"name": "Goblin Boss", "extends": "Goblin", "hp": 21},
            ]
        ),
        encoding="utf-8",
    )


class BootstrapTests(unittest.TestCase):
    def test_registry_reads_configured_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            _write_bestiary(Path(tmp))
            with mock.patch.dict(os.environ, {"STATBLOCKS_BESTIARY_DIR": tmp}, clear=False):
                registry = bootstrap.create_registry()

        self.assertTrue(registry.has_creature("Goblin Boss"))

    def test_missing_bestiary_directory_gives_empty_registry(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            registry = bootstrap.create_registry(Path(tmp) / "absent")
        self.assertEqual([], registry.list_names())

    def test_default_layout_follows_environment(self) -> None:
        with mock.patch.dict(os.environ, {"STATBLOCKS_DEFAULT_LAYOUT": "Unknown Layout"}, clear=False):
            layouts = bootstrap.create_layout_repository()
        self.assertEqual(DEFAULT_LAYOUT_NAME, layouts.get_default().name)

    def test_link_transform_toggle(self) -> None:
        self.assertIsInstance(bootstrap.create_link_transformer(), WikiLinkTransformer)
        with mock.patch.dict(os.environ, {"STATBLOCKS_LINK_TRANSFORM_ENABLED": "0"}, clear=False):
            self.assertIsNone(bootstrap.create_link_transformer())
        with mock.patch.dict(os.environ, {"STATBLOCKS_LINK_TRANSFORM_ENABLED": "Yes"}, clear=False):
            self.assertIsNotNone(bootstrap.create_link_transformer())

    def test_creature_builder_end_to_end(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            _write_bestiary(Path(tmp))
            builder = bootstrap.create_creature_builder(
                {"monster": "Goblin Boss", "name": "Snik", "note": "Snik"},
                registry=bootstrap.create_registry(tmp),
                documents=InMemoryDocumentReader({"Party/Snik.md": {"ac": 15, "hp": 25, "saves": ["dex"]}}),
            )
            result = asyncio.run(builder.build_result())

        record = result.record
        self.assertEqual("Snik", record["name"])
        self.assertEqual(15, record["ac"])
        self.assertEqual(21, record["hp"])
        self.assertEqual([{"dexterity": 4}], record["saves"])
        self.assertEqual("Hides behind the [Goblin Boss](<Goblin Boss>).", record["traits"][0]["desc"])
        self.assertEqual([], result.diagnostics)
        self.assertTrue(builder.can_save)


if __name__ == "__main__":
    unittest.main()
