"""Startup discovery of third-party block renderers.

A plugin is a module exposing ``register_blocks(registry)`` (optionally pinning
``PLUGIN_API_VERSION``) or a bare callable published under the
``blockpress.blocks`` entry point group. Each plugin registers inside a staged
registry scope, so a plugin that fails halfway leaves no partial block types
behind. Failures become warning strings; they never abort startup.
"""

from __future__ import annotations

import importlib
import importlib.metadata
import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from types import ModuleType
from typing import Any

from .errors import DuplicateTypeError
from .registry import BlockTypeRegistry

logger = logging.getLogger(__name__)

PLUGIN_API_VERSION = 1
ENTRY_POINT_GROUP = "blockpress.blocks"

RegisterBlocks = Callable[[BlockTypeRegistry], None]


@dataclass(frozen=True)
class PluginSource:
    """Where a plugin comes from and how to import it."""

    label: str
    load: Callable[[], Any]


def _plugin_sources(module_paths: Iterable[str], entry_point_group: str) -> Iterator[PluginSource]:
    for module_path in module_paths:
        yield PluginSource(
            label=module_path,
            load=lambda module_path=module_path: importlib.import_module(module_path),
        )
    for entry_point in importlib.metadata.entry_points().select(group=entry_point_group):
        yield PluginSource(label=f"{entry_point.name} ({entry_point.value})", load=entry_point.load)


def _register_hook(plugin: Any) -> RegisterBlocks:
    if not isinstance(plugin, ModuleType):
        if callable(plugin):
            return plugin
        msg = "plugin entry point must resolve to a module or callable."
        raise ValueError(msg)

    version = getattr(plugin, "PLUGIN_API_VERSION", PLUGIN_API_VERSION)
    if version != PLUGIN_API_VERSION:
        msg = (
            f"module '{plugin.__name__}' targets plugin API version {version}, "
            f"expected {PLUGIN_API_VERSION}."
        )
        raise ValueError(msg)

    hook = getattr(plugin, "register_blocks", None)
    if not callable(hook):
        msg = f"module '{plugin.__name__}' does not define register_blocks(registry)."
        raise ValueError(msg)
    return hook


def _install(registry: BlockTypeRegistry, source: PluginSource) -> str | None:
    """Register one plugin's block types, returning a warning on failure."""
    before = set(registry.block_types())
    try:
        hook = _register_hook(source.load())
        with registry.staged():
            hook(registry)
    except DuplicateTypeError as exc:
        logger.warning("block plugin '%s' redeclares '%s'; skipped", source.label, exc.block_type)
        return (
            f"warning: block plugin '{source.label}' skipped: "
            f"'{exc.block_type}' is already registered."
        )
    except Exception as exc:  # noqa: BLE001
        logger.warning("failed to load block plugin '%s': %s", source.label, exc)
        return f"warning: failed to load block plugin '{source.label}': {exc}"

    added = sorted(set(registry.block_types()) - before)
    logger.debug("block plugin '%s' registered %s", source.label, ", ".join(added) or "nothing")
    return None


def load_block_plugins(
    *,
    registry: BlockTypeRegistry,
    module_paths: Iterable[str] = (),
    entry_point_group: str = ENTRY_POINT_GROUP,
) -> tuple[str, ...]:
    """Register blocks from plugin modules and entry points, collecting warnings."""
    warnings = (
        _install(registry, source) for source in _plugin_sources(module_paths, entry_point_group)
    )
    return tuple(warning for warning in warnings if warning)
