"""Page rendering facade and public API."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from .block_engine import BlockStore, MemoryRenderCache, RenderCache, RenderDispatcher, RenderResult
from .blocks import build_block_registry
from .config import DeploymentConfig, load_deployment_config
from .storage import MemoryBlockStore, PageDescription, load_page_file


def build_dispatcher(
    *,
    plugin_modules: Sequence[str] = (),
    config_path: str | Path | None = None,
    store: BlockStore | None = None,
    cache: RenderCache | None = None,
) -> tuple[RenderDispatcher, tuple[str, ...]]:
    """Wire the registry, deployment config and store into a dispatcher.

    Returns the dispatcher plus warnings from plugin loading and from config
    entries that name no registered block type.
    """
    registry, plugin_warnings = build_block_registry(plugin_modules=plugin_modules)
    warnings = list(plugin_warnings)

    deployment = DeploymentConfig()
    if config_path is not None:
        deployment = load_deployment_config(config_path)
    for block_type in deployment.block_types():
        if block_type not in registry:
            warnings.append(f"warning: config names unknown block type '{block_type}'.")
        elif registry.resolve_id(block_type) != block_type:
            warnings.append(
                f"warning: config key '{block_type}' is an alias; "
                f"use '{registry.resolve_id(block_type)}'."
            )

    dispatcher = RenderDispatcher(registry, deployment=deployment, store=store, cache=cache)
    return dispatcher, tuple(warnings)


def render_page_file(
    page_path: str | Path,
    *,
    block_names: Sequence[str] = (),
    overrides: Mapping[str, Any] | None = None,
    config_path: str | Path | None = None,
    plugin_modules: Sequence[str] = (),
    error_strategy: str = "ignore",
    max_workers: int | None = None,
) -> tuple[PageDescription, tuple[RenderResult, ...], tuple[str, ...]]:
    """Render all blocks of a page file, or only the named ones."""
    page = load_page_file(page_path)
    store = MemoryBlockStore.from_blocks(page.blocks)
    dispatcher, warnings = build_dispatcher(
        plugin_modules=plugin_modules,
        config_path=config_path,
        store=store,
        cache=MemoryRenderCache(),
    )
    selectors: Sequence[Any] = tuple(block_names) if block_names else page.blocks
    results = dispatcher.render_page(
        selectors,
        overrides,
        max_workers=max_workers,
        error_strategy=error_strategy,
    )
    return page, results, warnings
