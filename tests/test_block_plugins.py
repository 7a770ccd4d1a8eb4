"""Tests for block plugin loading."""

from __future__ import annotations

import sys
import tempfile
import unittest
from pathlib import Path

from blockpress.block_engine import BlockTypeRegistry
from blockpress.block_engine.plugins import load_block_plugins
from blockpress.blocks import build_block_registry


class BlockPluginLoadingTests(unittest.TestCase):
    def _with_plugin(self, name: str, source: str) -> Path:
        tmp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(tmp_dir.cleanup)
        plugin_dir = Path(tmp_dir.name)
        (plugin_dir / f"{name}.py").write_text(source)
        sys.path.insert(0, str(plugin_dir))
        self.addCleanup(sys.path.remove, str(plugin_dir))
        self.addCleanup(sys.modules.pop, name, None)
        return plugin_dir

    def test_load_block_plugin_module(self) -> None:
        self._with_plugin(
            "demo_block_plugin",
            """
from blockpress.block_engine import RendererDescriptor

def _execute(instance, settings):
    return settings["greeting"]

def register_blocks(registry):
    registry.register(
        RendererDescriptor(
            block_type="acme_main.block.hello",
            title="Hello",
            description="Demo plugin block.",
            execute=_execute,
            defaults={"greeting": "hi"},
        )
    )
""",
        )
        registry = BlockTypeRegistry()
        warnings = load_block_plugins(registry=registry, module_paths=("demo_block_plugin",))
        self.assertEqual(warnings, ())
        self.assertEqual(registry.lookup("acme_main.block.hello").defaults, {"greeting": "hi"})

    def test_load_block_plugin_reports_warning_for_bad_module(self) -> None:
        self._with_plugin("bad_block_plugin", "x = 1\n")
        registry = BlockTypeRegistry()
        with self.assertLogs("blockpress.block_engine.plugins", level="WARNING"):
            warnings = load_block_plugins(registry=registry, module_paths=("bad_block_plugin",))
        self.assertEqual(len(warnings), 1)
        self.assertIn("failed to load block plugin", warnings[0])

    def test_plugin_api_version_mismatch_is_reported(self) -> None:
        self._with_plugin(
            "future_block_plugin",
            "PLUGIN_API_VERSION = 99\n\ndef register_blocks(registry):\n    pass\n",
        )
        warnings = load_block_plugins(
            registry=BlockTypeRegistry(), module_paths=("future_block_plugin",)
        )
        self.assertIn("plugin API version 99", warnings[0])

    def test_plugin_duplicating_builtin_type_is_a_warning(self) -> None:
        self._with_plugin(
            "clash_block_plugin",
            """
from blockpress.block_engine import RendererDescriptor

def register_blocks(registry):
    registry.register(
        RendererDescriptor("blockpress.block.rss", "RSS", "Clash.", lambda instance, settings: "")
    )
""",
        )
        registry, warnings = build_block_registry(plugin_modules=("clash_block_plugin",))
        self.assertEqual(len(warnings), 1)
        self.assertIn("'blockpress.block.rss' is already registered", warnings[0])
        self.assertIn("clash_block_plugin", warnings[0])
        self.assertEqual(registry.lookup("blockpress.block.rss").title, "RSS feed")

    def test_plugin_failing_halfway_leaves_no_partial_types(self) -> None:
        self._with_plugin(
            "half_block_plugin",
            """
from blockpress.block_engine import RendererDescriptor

def register_blocks(registry):
    registry.register(
        RendererDescriptor(
            "acme.block.first", "First", "Registered before the crash.",
            lambda instance, settings: "", aliases=("first",),
        )
    )
    raise RuntimeError("settings table missing")
""",
        )
        registry = BlockTypeRegistry()
        with self.assertLogs("blockpress.block_engine.plugins", level="WARNING"):
            warnings = load_block_plugins(registry=registry, module_paths=("half_block_plugin",))
        self.assertEqual(len(warnings), 1)
        self.assertIn("settings table missing", warnings[0])
        self.assertNotIn("acme.block.first", registry)
        self.assertNotIn("first", registry)
        self.assertEqual(registry.block_types(), ())

    def test_clashing_plugin_rolls_back_its_earlier_types(self) -> None:
        self._with_plugin(
            "partial_clash_block_plugin",
            """
from blockpress.block_engine import RendererDescriptor

def register_blocks(registry):
    registry.register(
        RendererDescriptor("acme.block.weather", "Weather", "Fresh.", lambda instance, settings: "")
    )
    registry.register(
        RendererDescriptor("acme.block.weather_alias", "Clash", "Uses a taken alias.",
                           lambda instance, settings: "", aliases=("text",))
    )
""",
        )
        registry, warnings = build_block_registry(plugin_modules=("partial_clash_block_plugin",))
        self.assertEqual(len(warnings), 1)
        self.assertIn("'text' is already registered", warnings[0])
        self.assertNotIn("acme.block.weather", registry)
        self.assertNotIn("acme.block.weather_alias", registry)
        self.assertEqual(registry.resolve_id("text"), "blockpress.block.text")
