"""
Render configuration.

Page geometry and stroke style travel as an explicit value so that renders
with different geometries can run side by side.

Example ``render.toml``::

    [page]
    width = 1404
    height = 1872

    [stroke]
    line_cap = "round"
    line_join = "round"
    width_scale = 1.0
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path

import tomli

from .constants import DEVICE_HEIGHT, DEVICE_WIDTH

# PDF line cap / join operands
LINE_CAPS = {"butt": 0, "round": 1, "square": 2}
LINE_JOINS = {"miter": 0, "round": 1, "bevel": 2}


@dataclass(frozen=True)
class ExportConfig:
    """Canvas geometry and stroke style for the single-page renderer."""
    page_width: float = DEVICE_WIDTH
    page_height: float = DEVICE_HEIGHT
    line_cap: str = "round"
    line_join: str = "round"
    # Multiplier applied to point width. Pressure is not used.
    width_scale: float = 1.0

    def __post_init__(self):
        if self.line_cap not in LINE_CAPS:
            raise ValueError(f"Unknown line cap: {self.line_cap!r}")
        if self.line_join not in LINE_JOINS:
            raise ValueError(f"Unknown line join: {self.line_join!r}")
        if self.page_width <= 0 or self.page_height <= 0:
            raise ValueError(
                f"Page size must be positive, got {self.page_width}x{self.page_height}"
            )


DEFAULT_CONFIG = ExportConfig()


def load_config(config_path: Path, base: ExportConfig = DEFAULT_CONFIG) -> ExportConfig:
    """Read ``[page]`` and ``[stroke]`` tables from a TOML file over ``base``."""
    with open(config_path, "rb") as f:
        data = tomli.load(f)

    page = data.get("page", {})
    stroke = data.get("stroke", {})
    overrides = {}
    if "width" in page:
        overrides["page_width"] = float(page["width"])
    if "height" in page:
        overrides["page_height"] = float(page["height"])
    if "line_cap" in stroke:
        overrides["line_cap"] = stroke["line_cap"]
    if "line_join" in stroke:
        overrides["line_join"] = stroke["line_join"]
    if "width_scale" in stroke:
        overrides["width_scale"] = float(stroke["width_scale"])
    return replace(base, **overrides)
