"""Block records loaded from page description files."""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from .block_engine import BlockInstance, StoredBlock

_BLOCK_KEYS = ("id", "type", "name", "enabled", "options")


@dataclass
class MemoryBlockStore:
    """Blocks addressed by name."""

    _blocks: dict[str, BlockInstance] = field(default_factory=dict)

    @classmethod
    def from_blocks(cls, blocks: Iterable[StoredBlock]) -> MemoryBlockStore:
        store = cls()
        for block in blocks:
            store.add(block.name or block.id, block)
        return store

    def add(self, name: str, block: BlockInstance) -> None:
        if name in self._blocks:
            msg = f"block name '{name}' is already used."
            raise ValueError(msg)
        self._blocks[name] = block

    def get(self, name: str) -> BlockInstance | None:
        return self._blocks.get(name)

    def names(self) -> tuple[str, ...]:
        return tuple(self._blocks)


@dataclass(frozen=True)
class PageDescription:
    """Ordered blocks of one page."""

    name: str
    blocks: tuple[StoredBlock, ...]


def _parse_block(raw: object, *, index: int, source: Path) -> StoredBlock:
    if not isinstance(raw, dict):
        msg = f"block #{index} in '{source}' must be a JSON object."
        raise ValueError(msg)

    unknown = sorted(key for key in raw if key not in _BLOCK_KEYS)
    if unknown:
        msg = f"unknown key(s) for block #{index} in '{source}': {', '.join(unknown)}."
        raise ValueError(msg)

    for key in ("id", "type"):
        value = raw.get(key)
        if not isinstance(value, str) or not value.strip():
            msg = f"block #{index} in '{source}' needs a non-empty string '{key}'."
            raise ValueError(msg)

    name = raw.get("name")
    if name is not None and not isinstance(name, str):
        msg = f"block #{index} in '{source}' has a non-string 'name'."
        raise ValueError(msg)

    enabled = raw.get("enabled", True)
    if not isinstance(enabled, bool):
        msg = f"block #{index} in '{source}' has a non-boolean 'enabled'."
        raise ValueError(msg)

    options = raw.get("options", {})
    if not isinstance(options, dict):
        msg = f"block #{index} in '{source}' has non-object 'options'."
        raise ValueError(msg)

    return StoredBlock(
        id=raw["id"],
        type=raw["type"].strip(),
        enabled=enabled,
        options=options,
        name=name,
    )


def load_page_file(path: str | Path) -> PageDescription:
    """Read a page description JSON file into block records."""
    page_path = Path(path)
    if not page_path.exists():
        msg = f"page file '{page_path}' does not exist."
        raise ValueError(msg)

    try:
        payload = json.loads(page_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        msg = f"page file '{page_path}' is not valid JSON: {exc}."
        raise ValueError(msg) from exc

    if not isinstance(payload, dict) or not isinstance(payload.get("blocks"), list):
        msg = "page file content must be a JSON object with a 'blocks' list."
        raise ValueError(msg)

    blocks = tuple(
        _parse_block(raw, index=index, source=page_path)
        for index, raw in enumerate(payload["blocks"], start=1)
    )
    return PageDescription(name=str(payload.get("name") or page_path.stem), blocks=blocks)
