"""Render dispatch for single blocks and whole pages."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Union

from .cache import cache_key, cache_ttl
from .contracts import (
    BlockInstance,
    BlockStore,
    DeploymentSource,
    RenderCache,
    RenderResult,
    RenderState,
    SettingsOverride,
)
from .errors import BlockLookupError, LoadError, RenderError
from .registry import BlockTypeRegistry
from .settings import resolve_settings

logger = logging.getLogger(__name__)

ERROR_STRATEGIES = ("ignore", "inline")

BlockSelector = Union[BlockInstance, str]

_CACHE_MISS = object()


def _log_transition(
    block_id: str,
    block_type: str,
    source: RenderState,
    target: RenderState,
    *,
    note: str = "",
) -> None:
    suffix = f" ({note})" if note else ""
    logger.debug("block %s (%s): %s -> %s%s", block_id, block_type, source.value, target.value, suffix)


class RenderDispatcher:
    """Resolve settings for a block and hand it to its registered renderer."""

    def __init__(
        self,
        registry: BlockTypeRegistry,
        *,
        deployment: DeploymentSource | None = None,
        store: BlockStore | None = None,
        cache: RenderCache | None = None,
    ) -> None:
        self._registry = registry
        self._deployment = deployment
        self._store = store
        self._cache = cache

    @property
    def registry(self) -> BlockTypeRegistry:
        return self._registry

    def render(
        self,
        instance: BlockInstance,
        overrides: SettingsOverride | None = None,
    ) -> RenderResult:
        """Render one block instance.

        Disabled blocks are skipped before any lookup or hook runs. Unknown
        types raise ``UnknownTypeError``; failures in the renderer's ``load``
        and ``execute`` hooks are raised as ``LoadError`` and ``RenderError``.
        """
        block_id = str(instance.id)
        if not instance.enabled:
            _log_transition(block_id, instance.type, RenderState.IDLE, RenderState.SKIPPED)
            return RenderResult(block_id=block_id, block_type=instance.type, state=RenderState.SKIPPED)

        descriptor = self._registry.lookup(instance.type)
        block_type = descriptor.block_type

        if descriptor.load is not None:
            try:
                descriptor.load(instance)
            except Exception as exc:  # noqa: BLE001
                raise LoadError(block_type, block_id, exc) from exc
        _log_transition(block_id, block_type, RenderState.IDLE, RenderState.LOADED)

        deployment = self._deployment.for_type(block_type) if self._deployment is not None else None
        settings = resolve_settings(descriptor.defaults, deployment, overrides, instance.options)

        ttl = cache_ttl(settings) if self._cache is not None else 0.0
        key = cache_key(block_type, block_id, settings) if ttl else ""
        if ttl:
            cached = self._cache.get(key, _CACHE_MISS)
            if cached is not _CACHE_MISS:
                _log_transition(block_id, block_type, RenderState.LOADED, RenderState.DONE, note="cache hit")
                return RenderResult(
                    block_id=block_id,
                    block_type=block_type,
                    state=RenderState.DONE,
                    content=cached,
                    settings=settings,
                    cached=True,
                )

        try:
            content = descriptor.execute(instance, settings)
        except Exception as exc:  # noqa: BLE001
            raise RenderError(block_type, block_id, exc) from exc
        _log_transition(block_id, block_type, RenderState.LOADED, RenderState.EXECUTED)

        if ttl:
            self._cache.set(key, content, ttl)

        _log_transition(block_id, block_type, RenderState.EXECUTED, RenderState.DONE)
        return RenderResult(
            block_id=block_id,
            block_type=block_type,
            state=RenderState.DONE,
            content=content,
            settings=settings,
        )

    def resolve_block(self, selector: BlockSelector) -> BlockInstance:
        """Return the block instance a selector refers to."""
        if not isinstance(selector, str):
            return selector
        block = self._store.get(selector) if self._store is not None else None
        if block is None:
            raise BlockLookupError(selector)
        return block

    def render_block(
        self,
        selector: BlockSelector,
        overrides: SettingsOverride | None = None,
    ) -> RenderResult:
        """Render a block given by instance or by name."""
        return self.render(self.resolve_block(selector), overrides)

    def render_page(
        self,
        blocks: Sequence[BlockSelector],
        overrides: SettingsOverride | None = None,
        *,
        max_workers: int | None = None,
        error_strategy: str = "ignore",
    ) -> tuple[RenderResult, ...]:
        """Render several blocks, containing each block's failure to its own result."""
        if error_strategy not in ERROR_STRATEGIES:
            msg = (
                f"unknown error strategy '{error_strategy}'. "
                f"Valid strategies: {', '.join(ERROR_STRATEGIES)}."
            )
            raise ValueError(msg)
        if not blocks:
            return ()

        def render_one(selector: BlockSelector) -> RenderResult:
            try:
                return self.render_block(selector, overrides)
            except Exception as exc:  # noqa: BLE001
                # Also covers store, deployment and cache backends, which fail outside the hooks.
                return self._failed_result(selector, exc, error_strategy=error_strategy)

        workers = max_workers or min(len(blocks), 8)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="blockpress-render") as pool:
            return tuple(pool.map(render_one, blocks))

    def _failed_result(
        self,
        selector: BlockSelector,
        exc: Exception,
        *,
        error_strategy: str,
    ) -> RenderResult:
        if isinstance(selector, str):
            block_id, block_type = selector, ""
        else:
            block_id, block_type = str(selector.id), selector.type
        # Hook errors carry the canonical type and the record id behind a name.
        block_type = getattr(exc, "block_type", None) or block_type
        block_id = getattr(exc, "block_id", None) or block_id
        logger.warning("block %s (%s) failed: %s", block_id, block_type or "?", exc)

        content: Any = ""
        if error_strategy == "inline":
            content = f"[block {block_id} failed: {exc}]"
        return RenderResult(
            block_id=block_id,
            block_type=block_type,
            state=RenderState.FAILED,
            content=content,
            error=exc,
        )
