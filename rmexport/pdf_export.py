"""
Full-document PDF export.

Renders every page of a notebook with pen colors, highlighter
transparency and eraser removal. Output is PDF-point sized pages.
"""

from __future__ import annotations

import logging
from typing import BinaryIO

import fitz  # PyMuPDF

from .constants import (
    COLOR_MAP_RGB,
    DEVICE_HEIGHT,
    DEVICE_WIDTH,
    ERASER_PENS,
    HIGHLIGHTER_OPACITY,
    MIN_STROKE_WIDTH,
    RM_TO_PDF_SCALE,
    TRANSPARENT_PENS,
)
from .container import NotebookArchive
from .errors import ExportError
from .ingest import ingest
from .parser import Line, Pen, PenColor

logger = logging.getLogger(__name__)

PAGE_WIDTH = DEVICE_WIDTH / RM_TO_PDF_SCALE    # ~445
PAGE_HEIGHT = DEVICE_HEIGHT / RM_TO_PDF_SCALE  # ~594


def get_color(line: Line) -> tuple[float, float, float]:
    """Get RGB color (0-1 range) for a line."""
    if isinstance(line.color, PenColor):
        rgb = COLOR_MAP_RGB.get(line.color, (0, 0, 0))
    else:
        rgb = (0, 0, 0)
    return (rgb[0] / 255, rgb[1] / 255, rgb[2] / 255)


def is_eraser(line: Line) -> bool:
    return isinstance(line.pen, Pen) and line.pen in ERASER_PENS


def is_highlighter(line: Line) -> bool:
    return isinstance(line.pen, Pen) and line.pen in TRANSPARENT_PENS


def draw_line_on_page(shape: fitz.Shape, line: Line, page_width: float) -> bool:
    """Draw a line using Shape for batched rendering. Returns False if skipped."""
    if is_eraser(line) or len(line.points) < 2:
        return False

    avg_width = sum(p.width for p in line.points) / len(line.points)
    width = max(MIN_STROKE_WIDTH, avg_width / RM_TO_PDF_SCALE / 4.0)

    x_offset = (page_width / 2) * RM_TO_PDF_SCALE
    pdf_points = [fitz.Point((p.x + x_offset) / RM_TO_PDF_SCALE, p.y / RM_TO_PDF_SCALE)
                  for p in line.points]

    # Segments drawn individually; a polyline would join across gaps
    for start, end in zip(pdf_points, pdf_points[1:]):
        shape.draw_line(start, end)

    opacity = HIGHLIGHTER_OPACITY if is_highlighter(line) else 1.0
    shape.finish(color=get_color(line), width=width, lineCap=1, lineJoin=1,
                 stroke_opacity=opacity, closePath=False)
    return True


class NotebookPdfRenderer:
    """Multi-page renderer used by the full-document strategy."""

    def __init__(self, page_width: float = PAGE_WIDTH, page_height: float = PAGE_HEIGHT):
        self.page_width = page_width
        self.page_height = page_height

    def render(self, archive: NotebookArchive, sink: BinaryIO, all_pages: bool = True) -> int:
        """
        Write the notebook as PDF to ``sink``.

        Pages whose record fails to decode are left blank and logged.

        Returns:
            Number of lines drawn
        """
        page_count = len(archive) if all_pages else min(1, len(archive))
        pdf = fitz.open()
        drawn = 0
        try:
            for index in range(page_count):
                page = pdf.new_page(width=self.page_width, height=self.page_height)
                raw = archive.read_page(index)
                if raw is None:
                    continue

                try:
                    layers = ingest(raw)
                except ExportError as e:
                    logger.warning("Page %d left blank: %s", index + 1, e)
                    continue

                shape = page.new_shape()
                for layer in layers:
                    for line in layer.lines:
                        if draw_line_on_page(shape, line, self.page_width):
                            drawn += 1
                shape.commit()

            sink.write(pdf.tobytes(garbage=3, deflate=True))
        finally:
            pdf.close()

        logger.info("Rendered %d lines on %d pages", drawn, page_count)
        return drawn
