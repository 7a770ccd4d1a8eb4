"""Configuration constants and deployment settings loading."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4

# PDF preview page
PAGE_SIZE = A4
MARGIN = 48
SECTION_GAP = 18
TITLE_FONT_SIZE = 16
BODY_FONT_SIZE = 10
BODY_LEADING = 13

# File output
DEFAULT_PREVIEW_FILENAME_TEMPLATE = "page_{page}.pdf"

# Deployment config
DEPLOYMENT_TOP_LEVEL_KEYS = ("blocks",)


class Theme:
    """Color and font choices for the PDF preview."""

    TEXT_PRIMARY = colors.HexColor("#2C3E50")
    TEXT_SECONDARY = colors.HexColor("#7F8C8D")
    ACCENT = colors.HexColor("#E67E22")
    RULE = colors.HexColor("#BDC3C7")

    FONT_HEADER = "Helvetica-Bold"
    FONT_REGULAR = "Helvetica"
    FONT_ITALIC = "Helvetica-Oblique"


@dataclass(frozen=True)
class DeploymentConfig:
    """Per-block-type setting overrides configured for one deployment."""

    blocks: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        frozen = {
            block_type: MappingProxyType(dict(overrides))
            for block_type, overrides in self.blocks.items()
        }
        object.__setattr__(self, "blocks", MappingProxyType(frozen))

    def for_type(self, block_type: str) -> Mapping[str, Any]:
        """Return the overrides configured for a block type, or an empty mapping."""
        return self.blocks.get(block_type, MappingProxyType({}))

    def block_types(self) -> tuple[str, ...]:
        return tuple(self.blocks)


def load_deployment_config(path: str | Path) -> DeploymentConfig:
    """Read a deployment config JSON file."""
    config_path = Path(path)
    if not config_path.exists():
        msg = f"config file '{config_path}' does not exist."
        raise ValueError(msg)

    try:
        payload = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        msg = f"config file '{config_path}' is not valid JSON: {exc}."
        raise ValueError(msg) from exc

    if not isinstance(payload, dict):
        msg = "config file content must be a JSON object."
        raise ValueError(msg)

    unknown = sorted(key for key in payload if key not in DEPLOYMENT_TOP_LEVEL_KEYS)
    if unknown:
        msg = f"unknown config key(s): {', '.join(unknown)}."
        raise ValueError(msg)

    blocks = payload.get("blocks", {})
    if not isinstance(blocks, dict):
        msg = "config key 'blocks' must be a JSON object."
        raise ValueError(msg)
    for block_type, overrides in blocks.items():
        if not isinstance(overrides, dict):
            msg = f"config for block type '{block_type}' must be a JSON object."
            raise ValueError(msg)

    return DeploymentConfig(blocks=blocks)
