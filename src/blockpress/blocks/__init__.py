"""Built-in block renderers and registry helpers."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from blockpress.block_engine import BlockTypeRegistry, RendererDescriptor, load_block_plugins
from blockpress.templating import JinjaTemplateEngine

from .rss import (
    RSS_BLOCK_TYPE,
    RSS_TEMPLATE,
    RSS_TEMPLATE_SOURCE,
    fetch_feed,
    rss_block_descriptor,
)
from .text import TEXT_BLOCK_TYPE, TEXT_TEMPLATE, TEXT_TEMPLATE_SOURCE, text_block_descriptor

__all__ = [
    "RSS_BLOCK_TYPE",
    "TEXT_BLOCK_TYPE",
    "build_block_registry",
    "default_template_engine",
]


def default_template_engine() -> JinjaTemplateEngine:
    """Return an engine preloaded with the built-in block templates."""
    engine = JinjaTemplateEngine()
    engine.register(TEXT_TEMPLATE, TEXT_TEMPLATE_SOURCE)
    engine.register(RSS_TEMPLATE, RSS_TEMPLATE_SOURCE)
    return engine


def _builtin_descriptors(
    engine: JinjaTemplateEngine,
    *,
    fetch: Callable[[str, float], str],
) -> tuple[RendererDescriptor, ...]:
    return (
        text_block_descriptor(engine),
        rss_block_descriptor(engine, fetch=fetch),
    )


def build_block_registry(
    *,
    plugin_modules: Sequence[str] = (),
    engine: JinjaTemplateEngine | None = None,
    fetch: Callable[[str, float], str] = fetch_feed,
) -> tuple[BlockTypeRegistry, tuple[str, ...]]:
    """Return a frozen registry with built-ins and optional plugin blocks."""
    registry = BlockTypeRegistry()
    registry.register_many(_builtin_descriptors(engine or default_template_engine(), fetch=fetch))
    warnings = load_block_plugins(registry=registry, module_paths=plugin_modules)
    registry.freeze()
    return registry, warnings
