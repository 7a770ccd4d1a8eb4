"""Tests for page files and the in-memory block store."""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from blockpress.block_engine import StoredBlock
from blockpress.storage import MemoryBlockStore, load_page_file


class PageFileTests(unittest.TestCase):
    def _write(self, tmp_dir: str, payload: object) -> Path:
        path = Path(tmp_dir) / "home.json"
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    def test_load_page_file_reads_blocks_in_order(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = self._write(
                tmp_dir,
                {
                    "blocks": [
                        {"id": "1", "type": "rss", "name": "news", "options": {"url": "http://x"}},
                        {"id": "2", "type": "text", "enabled": False},
                    ]
                },
            )
            page = load_page_file(path)

        self.assertEqual(page.name, "home")
        self.assertEqual(
            page.blocks,
            (
                StoredBlock(id="1", type="rss", options={"url": "http://x"}, name="news"),
                StoredBlock(id="2", type="text", enabled=False),
            ),
        )

    def test_load_page_file_requires_type(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = self._write(tmp_dir, {"blocks": [{"id": "1"}]})
            with self.assertRaisesRegex(ValueError, "non-empty string 'type'"):
                load_page_file(path)

    def test_load_page_file_rejects_unknown_block_key(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = self._write(tmp_dir, {"blocks": [{"id": "1", "type": "rss", "settings": {}}]})
            with self.assertRaisesRegex(ValueError, "unknown key\\(s\\) for block #1"):
                load_page_file(path)

    def test_load_page_file_requires_blocks_list(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = self._write(tmp_dir, {"blocks": {}})
            with self.assertRaisesRegex(ValueError, "'blocks' list"):
                load_page_file(path)


class MemoryBlockStoreTests(unittest.TestCase):
    def test_blocks_are_addressed_by_name_then_id(self) -> None:
        named = StoredBlock(id="1", type="rss", name="news")
        unnamed = StoredBlock(id="2", type="text")
        store = MemoryBlockStore.from_blocks([named, unnamed])
        self.assertIs(store.get("news"), named)
        self.assertIs(store.get("2"), unnamed)
        self.assertIsNone(store.get("1"))

    def test_duplicate_names_are_rejected(self) -> None:
        with self.assertRaises(ValueError):
            MemoryBlockStore.from_blocks(
                [StoredBlock(id="1", type="rss", name="a"), StoredBlock(id="2", type="rss", name="a")]
            )
