"""
Stroke composition: map decoded lines onto a canvas as straight segments.
"""

from __future__ import annotations

import logging
from typing import Iterable

from .config import DEFAULT_CONFIG, ExportConfig
from .errors import CanvasWriteFailed
from .parser import Layer

logger = logging.getLogger(__name__)


def to_device(x: float, y: float, page_width: float) -> tuple[float, float]:
    """Shift x so the native origin at mid-page lands on the page centre."""
    return x + page_width / 2, y


def from_device(x: float, y: float, page_width: float) -> tuple[float, float]:
    """Inverse of to_device."""
    return x - page_width / 2, y


def compose(layers: Iterable[Layer], canvas, config: ExportConfig = DEFAULT_CONFIG) -> int:
    """
    Draw every line of every layer, in order, as one segment per point pair.

    Each segment takes its width from its leading point times
    ``config.width_scale``. Pressure is ignored. Lines with fewer than two
    points draw nothing.

    Args:
        layers: Layers in paint order
        canvas: Drawing surface with set_line_cap/set_line_join/
            set_line_width/line
        config: Page geometry and stroke style

    Returns:
        Number of segments drawn

    Raises:
        CanvasWriteFailed: the canvas rejected a call
    """
    segments = 0
    try:
        canvas.set_line_cap(config.line_cap)
        canvas.set_line_join(config.line_join)

        for layer in layers:
            for line in layer.lines:
                prev = None
                for point in line.points:
                    if prev is not None:
                        canvas.set_line_width(prev.width * config.width_scale)
                        x1, y1 = to_device(prev.x, prev.y, config.page_width)
                        x2, y2 = to_device(point.x, point.y, config.page_width)
                        canvas.line(x1, y1, x2, y2)
                        segments += 1
                    prev = point
    except (RuntimeError, ValueError, MemoryError) as e:
        raise CanvasWriteFailed(f"Canvas rejected segment {segments}: {e}") from e

    logger.debug("Composed %d segments", segments)
    return segments
