"""Settings cascade and CLI setting parsing."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Any

from .contracts import ResolvedSettings

BOOL_TRUE = {"true", "yes", "on"}
BOOL_FALSE = {"false", "no", "off"}
_INT_LITERAL = re.compile(r"[+-]?[0-9]+")
_FLOAT_LITERAL = re.compile(r"[+-]?(?:[0-9]+\.[0-9]*|\.[0-9]+)")


def resolve_settings(
    defaults: Mapping[str, Any],
    deployment: Mapping[str, Any] | None = None,
    overrides: Mapping[str, Any] | None = None,
    options: Mapping[str, Any] | None = None,
) -> ResolvedSettings:
    """Merge the settings layers, later layers overwriting earlier keys.

    The order is fixed: renderer defaults, deployment config for the type,
    caller overrides, then the options stored on the block instance. Stored
    options therefore win over per-call overrides. Missing layers are skipped
    and keys are never validated here.
    """
    resolved: dict[str, Any] = {}
    for layer in (defaults, deployment, overrides, options):
        if layer:
            resolved.update(layer)
    return MappingProxyType(resolved)


def parse_setting_pairs(pairs: Sequence[str] | None) -> dict[str, str]:
    """Parse repeatable key=value CLI pairs into a dict."""
    parsed: dict[str, str] = {}
    for raw_pair in pairs or ():
        if "=" not in raw_pair:
            msg = f"invalid --param '{raw_pair}'. Expected key=value."
            raise ValueError(msg)
        raw_key, raw_value = raw_pair.split("=", 1)
        key = raw_key.strip()
        value = raw_value.strip()
        if not key:
            msg = f"invalid --param '{raw_pair}'. Key cannot be empty."
            raise ValueError(msg)
        parsed[key] = value
    return parsed


def coerce_setting_value(raw_value: str) -> Any:
    """Interpret one CLI string as a bool, or a plain decimal int or float."""
    normalized = raw_value.strip().lower()
    if normalized in BOOL_TRUE:
        return True
    if normalized in BOOL_FALSE:
        return False
    text = raw_value.strip()
    if _INT_LITERAL.fullmatch(text):
        return int(text)
    if _FLOAT_LITERAL.fullmatch(text):
        return float(text)
    return raw_value


def coerce_setting_values(raw_values: Mapping[str, str]) -> dict[str, Any]:
    """Coerce every value of a parsed --param mapping."""
    return {key: coerce_setting_value(raw_value) for key, raw_value in raw_values.items()}
