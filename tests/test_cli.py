"""CLI-level tests."""

from __future__ import annotations

import io
import json
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest import mock

from blockpress.main import main as blockpress_main

PAGE = {
    "name": "home",
    "blocks": [
        {"id": "1", "type": "text", "name": "intro", "options": {"title": "Welcome", "body": "Hi."}},
        {"id": "2", "type": "blockpress.block.rss", "name": "news"},
        {"id": "3", "type": "text", "enabled": False},
        {"id": "4", "type": "acme.block.missing"},
    ],
}


class BlockTypeCliTests(unittest.TestCase):
    def test_types_list_command(self) -> None:
        output = io.StringIO()
        with redirect_stdout(output):
            status = blockpress_main(["types", "list"])
        self.assertEqual(status, 0)
        text = output.getvalue()
        self.assertIn("blockpress.block.text\tText", text)
        self.assertIn("blockpress.block.rss\tRSS feed", text)

    def test_types_show_command(self) -> None:
        output = io.StringIO()
        with redirect_stdout(output):
            status = blockpress_main(["types", "show", "rss"])
        self.assertEqual(status, 0)
        text = output.getvalue()
        self.assertIn("id: blockpress.block.rss", text)
        self.assertIn("aliases: rss", text)
        self.assertIn("  url: False", text)
        self.assertIn("  title: 'Feed items'", text)

    def test_types_show_unknown_type_exits_with_cli_error(self) -> None:
        stderr = io.StringIO()
        with redirect_stderr(stderr):
            with self.assertRaises(SystemExit) as context:
                blockpress_main(["types", "show", "unknown"])

        self.assertEqual(context.exception.code, 2)
        self.assertIn("error: unknown block type 'unknown'", stderr.getvalue())


class RenderCliTests(unittest.TestCase):
    def setUp(self) -> None:
        tmp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(tmp_dir.cleanup)
        self.tmp_path = Path(tmp_dir.name)
        self.page_path = self.tmp_path / "home.json"
        self.page_path.write_text(json.dumps(PAGE), encoding="utf-8")

    def _run(self, argv: list[str]) -> tuple[int, str, str]:
        stdout, stderr = io.StringIO(), io.StringIO()
        with redirect_stdout(stdout), redirect_stderr(stderr):
            status = blockpress_main(argv)
        return status, stdout.getvalue(), stderr.getvalue()

    def test_render_prints_blocks_and_contains_failures(self) -> None:
        with self.assertLogs("blockpress.block_engine.dispatcher", level="WARNING"):
            status, stdout, _ = self._run(["render", str(self.page_path), "--error-strategy", "inline"])

        self.assertEqual(status, 1)
        self.assertIn("== 1 (blockpress.block.text)\nWelcome\n\nHi.", stdout)
        self.assertIn("== 2 (blockpress.block.rss)\nFeed items", stdout)
        self.assertNotIn("== 3", stdout)
        self.assertIn("[block 4 failed: unknown block type 'acme.block.missing'", stdout)

    def test_render_named_block_with_params(self) -> None:
        status, stdout, _ = self._run(
            [str(self.page_path), "--block", "news", "--param", "title=My News"]
        )
        self.assertEqual(status, 0)
        self.assertEqual(stdout, "== 2 (blockpress.block.rss)\nMy News\n")

    def test_render_applies_deployment_config(self) -> None:
        config_path = self.tmp_path / "deploy.json"
        config_path.write_text(
            json.dumps({"blocks": {"blockpress.block.rss": {"title": "Site feed"}, "nope": {}}}),
            encoding="utf-8",
        )
        status, stdout, stderr = self._run(
            [str(self.page_path), "--block", "news", "--config", str(config_path)]
        )
        self.assertEqual(status, 0)
        self.assertIn("Site feed", stdout)
        self.assertIn("warning: config names unknown block type 'nope'.", stderr)

    def test_render_invalid_param_exits_with_cli_error(self) -> None:
        stderr = io.StringIO()
        with redirect_stderr(stderr):
            with self.assertRaises(SystemExit) as context:
                blockpress_main([str(self.page_path), "--param", "title"])
        self.assertEqual(context.exception.code, 2)
        self.assertIn("error: invalid --param 'title'", stderr.getvalue())

    def test_render_writes_pdf_preview(self) -> None:
        output_path = self.tmp_path / "home.pdf"
        with mock.patch("blockpress.blocks.rss.requests.get") as get:
            status, stdout, _ = self._run(
                [str(self.page_path), "--block", "intro", "--output", str(output_path)]
            )
        get.assert_not_called()
        self.assertEqual(status, 0)
        self.assertIn(f"Generated preview at: {output_path}", stdout)
        self.assertTrue(output_path.read_bytes().startswith(b"%PDF"))
