"""Block engine package."""

from .cache import MemoryRenderCache, cache_key
from .contracts import (
    BlockInstance,
    BlockStore,
    BlockType,
    DeploymentSource,
    RenderCache,
    RendererDescriptor,
    RenderResult,
    RenderState,
    ResolvedSettings,
    SettingsOverride,
    StoredBlock,
)
from .dispatcher import ERROR_STRATEGIES, RenderDispatcher
from .errors import (
    BlockError,
    BlockLookupError,
    DuplicateTypeError,
    LoadError,
    RenderError,
    UnknownTypeError,
)
from .plugins import PLUGIN_API_VERSION, load_block_plugins
from .registry import BlockTypeRegistry
from .settings import (
    coerce_setting_value,
    coerce_setting_values,
    parse_setting_pairs,
    resolve_settings,
)

__all__ = [
    "ERROR_STRATEGIES",
    "PLUGIN_API_VERSION",
    "BlockError",
    "BlockInstance",
    "BlockLookupError",
    "BlockStore",
    "BlockType",
    "BlockTypeRegistry",
    "DeploymentSource",
    "DuplicateTypeError",
    "LoadError",
    "MemoryRenderCache",
    "RenderCache",
    "RenderDispatcher",
    "RenderError",
    "RenderResult",
    "RenderState",
    "RendererDescriptor",
    "ResolvedSettings",
    "SettingsOverride",
    "StoredBlock",
    "UnknownTypeError",
    "cache_key",
    "coerce_setting_value",
    "coerce_setting_values",
    "load_block_plugins",
    "parse_setting_pairs",
    "resolve_settings",
]
