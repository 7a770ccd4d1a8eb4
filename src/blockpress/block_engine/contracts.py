"""Core contracts for block registration and rendering."""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Protocol

BlockType = str
SettingsOverride = Mapping[str, Any]
ResolvedSettings = Mapping[str, Any]

EMPTY_SETTINGS: ResolvedSettings = MappingProxyType({})


class BlockInstance(Protocol):
    """Read-only view of a stored block record."""

    @property
    def id(self) -> str: ...

    @property
    def type(self) -> BlockType: ...

    @property
    def enabled(self) -> bool: ...

    @property
    def options(self) -> Mapping[str, Any]: ...


@dataclass(frozen=True)
class StoredBlock:
    """Plain block record as handed over by a block store."""

    id: str
    type: BlockType
    enabled: bool = True
    options: Mapping[str, Any] = field(default_factory=dict)
    name: str | None = None


@dataclass(frozen=True)
class RendererDescriptor:
    """Registry metadata, default settings and hooks for one block type."""

    block_type: BlockType
    title: str
    description: str
    execute: Callable[[BlockInstance, ResolvedSettings], Any]
    defaults: Mapping[str, Any] = field(default_factory=dict)
    load: Callable[[BlockInstance], None] | None = None
    aliases: tuple[str, ...] = ()


class RenderState(enum.Enum):
    """Lifecycle of one render call."""

    IDLE = "idle"
    LOADED = "loaded"
    EXECUTED = "executed"
    DONE = "done"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class RenderResult:
    """Outcome of rendering one block instance."""

    block_id: str
    block_type: BlockType
    state: RenderState
    content: Any = ""
    settings: ResolvedSettings = field(default_factory=lambda: EMPTY_SETTINGS)
    error: Exception | None = None
    cached: bool = False

    @property
    def ok(self) -> bool:
        return self.state is not RenderState.FAILED


class BlockStore(Protocol):
    """Read-only source of block records addressed by name."""

    def get(self, name: str) -> BlockInstance | None:
        """Return the block stored under name, or None."""


class DeploymentSource(Protocol):
    """Per-type setting overrides configured for a deployment."""

    def for_type(self, block_type: BlockType) -> Mapping[str, Any]:
        """Return overrides for block_type, empty when none are configured."""


class RenderCache(Protocol):
    """Storage backend consulted around the execute step."""

    def get(self, key: str, default: Any = None) -> Any:
        """Return a cached payload, or default on a miss."""

    def set(self, key: str, payload: Any, ttl: float) -> None:
        """Store a payload for ttl seconds."""
