"""Tests for the PyMuPDF canvas."""

from __future__ import annotations

import fitz
import pytest

from rmexport.canvas import PdfCanvas
from rmexport.errors import CanvasWriteFailed


def _open(data: bytes) -> fitz.Document:
    return fitz.open(stream=data, filetype="pdf")


class TestPdfCanvas:
    def test_blank_page(self) -> None:
        data = PdfCanvas(300, 400).finalize()
        assert data.startswith(b"%PDF")
        with _open(data) as doc:
            assert len(doc) == 1
            assert doc[0].rect.width == pytest.approx(300)
            assert doc[0].rect.height == pytest.approx(400)
            assert doc[0].get_drawings() == []

    def test_segments_keep_their_width(self) -> None:
        canvas = PdfCanvas(200, 200)
        canvas.set_line_cap("round")
        canvas.set_line_join("round")
        canvas.set_line_width(2)
        canvas.line(10, 10, 50, 10)
        canvas.set_line_width(6)
        canvas.line(50, 10, 50, 80)
        assert canvas.segment_count == 2

        with _open(canvas.finalize()) as doc:
            drawings = doc[0].get_drawings()
        assert [d["width"] for d in drawings] == pytest.approx([2, 6])

    def test_unknown_style(self) -> None:
        canvas = PdfCanvas(100, 100)
        with pytest.raises(ValueError):
            canvas.set_line_cap("pointy")
        with pytest.raises(ValueError):
            canvas.set_line_join("pointy")

    def test_single_finalize(self) -> None:
        canvas = PdfCanvas(100, 100)
        canvas.finalize()
        with pytest.raises(CanvasWriteFailed):
            canvas.finalize()
        with pytest.raises(CanvasWriteFailed):
            canvas.line(0, 0, 1, 1)

    def test_close_releases_document(self) -> None:
        canvas = PdfCanvas(100, 100)
        canvas.close()
        canvas.close()
        with pytest.raises(CanvasWriteFailed):
            canvas.finalize()
