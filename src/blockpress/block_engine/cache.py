"""Render cache key derivation and a process-local cache."""

from __future__ import annotations

import hashlib
import threading
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any


def cache_key(block_type: str, block_id: str, settings: Mapping[str, Any]) -> str:
    """Return a stable key for one block rendered with one set of settings."""
    material = repr((block_type, block_id, sorted(settings.items(), key=lambda item: item[0])))
    return hashlib.sha1(material.encode("utf-8")).hexdigest()


def cache_ttl(settings: Mapping[str, Any]) -> float:
    """Return the ttl setting as seconds, 0 when caching is off."""
    ttl = settings.get("ttl", 0)
    if isinstance(ttl, bool) or not isinstance(ttl, (int, float)):
        return 0.0
    return float(ttl) if ttl > 0 else 0.0


@dataclass
class MemoryRenderCache:
    """Dict-backed cache with per-entry expiry."""

    clock: Callable[[], float] = time.monotonic
    _entries: dict[str, tuple[float, Any]] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return default
            expires_at, payload = entry
            if expires_at <= self.clock():
                del self._entries[key]
                return default
            return payload

    def set(self, key: str, payload: Any, ttl: float) -> None:
        with self._lock:
            self._entries[key] = (self.clock() + ttl, payload)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
