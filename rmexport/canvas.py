"""
Single-page PDF canvas backed by PyMuPDF.

Holds line style state the way a PDF content stream does: style is set
first, then each line is stroked with whatever style is current.
"""

from __future__ import annotations

import fitz  # PyMuPDF

from .config import LINE_CAPS, LINE_JOINS
from .errors import CanvasWriteFailed

STROKE_COLOR = (0.0, 0.0, 0.0)


class PdfCanvas:
    """One page of a fresh PDF document, finalized exactly once."""

    def __init__(self, width: float, height: float):
        self.width = width
        self.height = height
        self.line_cap = LINE_CAPS["butt"]
        self.line_join = LINE_JOINS["miter"]
        self.line_width = 1.0
        self.segment_count = 0

        self._doc = fitz.open()
        self._page = self._doc.new_page(width=width, height=height)
        self._shape = self._page.new_shape()
        self._finalized = False

    def _check_open(self) -> None:
        if self._finalized:
            raise CanvasWriteFailed("Canvas already finalized")

    def set_line_cap(self, style: str) -> None:
        try:
            self.line_cap = LINE_CAPS[style]
        except KeyError:
            raise ValueError(f"Unknown line cap: {style!r}") from None

    def set_line_join(self, style: str) -> None:
        try:
            self.line_join = LINE_JOINS[style]
        except KeyError:
            raise ValueError(f"Unknown line join: {style!r}") from None

    def set_line_width(self, width: float) -> None:
        if width < 0:
            raise ValueError(f"Negative line width: {width}")
        self.line_width = width

    def line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        """Stroke one open segment with the current style."""
        self._check_open()
        self._shape.draw_line(fitz.Point(x1, y1), fitz.Point(x2, y2))
        self._shape.finish(
            color=STROKE_COLOR,
            width=self.line_width,
            lineCap=self.line_cap,
            lineJoin=self.line_join,
            closePath=False,
        )
        self.segment_count += 1

    def finalize(self) -> bytes:
        """Commit drawing and return the PDF bytes. The canvas is unusable after."""
        self._check_open()
        self._finalized = True
        try:
            self._shape.commit()
            return self._doc.tobytes(garbage=3, deflate=True)
        finally:
            self.close()

    def close(self) -> None:
        """Release the underlying document. Safe to call more than once."""
        self._finalized = True
        if not self._doc.is_closed:
            self._doc.close()
