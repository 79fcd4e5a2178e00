"""
Render entry points.

Two strategies produce a PDF from a notebook:

- FULL_DOCUMENT hands the whole archive to a multi-page renderer and
  returns the output file rewound to its start.
- CUSTOM_SINGLE_PAGE decodes one page record and strokes it onto a
  device-sized canvas, building the PDF in memory.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Optional, Union

from .canvas import PdfCanvas
from .composer import compose
from .config import DEFAULT_CONFIG, ExportConfig
from .container import NotebookArchive
from .errors import (
    CanvasWriteFailed,
    InvalidArguments,
    OutputIOFailed,
    RenderBackendFailed,
)
from .ingest import ingest
from .parser import Layer
from .pdf_export import NotebookPdfRenderer
from .stream import SeekCloser

logger = logging.getLogger(__name__)


class Strategy(Enum):
    FULL_DOCUMENT = "full"
    CUSTOM_SINGLE_PAGE = "custom"


class RenderState(Enum):
    """Progress of a custom single-page render."""
    INGESTING = "ingesting"
    COMPOSING = "composing"
    FINALIZING = "finalizing"
    DONE = "done"


# =============================================================================
# Full document
# =============================================================================

def render_full_document(input_path: Path, output_path: Path, renderer=None) -> BinaryIO:
    """
    Render every page of a notebook to a PDF file.

    Args:
        input_path: Zipped notebook
        output_path: PDF file to create (truncated if present)
        renderer: Object with ``render(archive, sink, all_pages)``;
            defaults to NotebookPdfRenderer

    Returns:
        The output file, open for reading and positioned at offset 0.
        The caller owns it and must close it.

    Raises:
        InputUnavailable, OutputIOFailed, RenderBackendFailed
    """
    renderer = renderer or NotebookPdfRenderer()

    with NotebookArchive(input_path) as archive:
        try:
            writer = open(output_path, "w+b")
        except OSError as e:
            raise OutputIOFailed(f"Can't create output file {output_path}: {e}") from e

        try:
            try:
                renderer.render(archive, writer, all_pages=True)
            except Exception as e:
                raise RenderBackendFailed(f"Can't render {input_path}: {e}") from e

            try:
                writer.seek(0)
            except (OSError, ValueError) as e:
                raise OutputIOFailed(f"Can't rewind {output_path}: {e}") from e
        except BaseException:
            writer.close()
            raise

    logger.info("Rendered %s to %s", input_path, output_path)
    return writer


# =============================================================================
# Custom single page
# =============================================================================

def _compose_to(layers: list[Layer], output, config: ExportConfig) -> int:
    logger.debug("Render state: %s", RenderState.COMPOSING.value)
    canvas = PdfCanvas(config.page_width, config.page_height)
    try:
        segments = compose(layers, canvas, config)

        logger.debug("Render state: %s", RenderState.FINALIZING.value)
        try:
            data = canvas.finalize()
        except (RuntimeError, ValueError, MemoryError) as e:
            raise CanvasWriteFailed(f"Can't finalize canvas: {e}") from e
    finally:
        canvas.close()

    try:
        output.write(data)
    except (OSError, ValueError) as e:
        raise OutputIOFailed(f"Can't write output: {e}") from e
    return segments


def render_custom(reader: Optional[BinaryIO], output: Optional[BinaryIO],
                  config: Optional[ExportConfig] = None) -> int:
    """
    Render one page record to PDF with the minimal stroke renderer.

    The PDF is built in memory and written to ``output`` in one call, so a
    failure before that point leaves ``output`` untouched.

    Args:
        reader: Readable stream or bytes of one .rm page record
        output: Writable sink for the PDF bytes
        config: Page geometry and stroke style

    Returns:
        Number of segments drawn

    Raises:
        InvalidArguments: reader or output is None
        TruncatedInput, MalformedScene: from ingestion
        CanvasWriteFailed: from composition or finalization
        OutputIOFailed: writing to output failed
    """
    if reader is None or output is None:
        raise InvalidArguments("reader or output was None")
    config = config or DEFAULT_CONFIG

    logger.debug("Render state: %s", RenderState.INGESTING.value)
    layers = ingest(reader)
    segments = _compose_to(layers, output, config)
    logger.debug("Render state: %s (%d segments)", RenderState.DONE.value, segments)
    return segments


def render_page(notebook_path: Path, page: int = 0,
                config: Optional[ExportConfig] = None) -> SeekCloser:
    """
    Render one page of a zipped notebook with the custom renderer.

    A page without an ink record renders blank.

    Returns:
        The PDF as an in-memory stream at offset 0
    """
    config = config or DEFAULT_CONFIG
    with NotebookArchive(notebook_path) as archive:
        raw = archive.read_page(page)

    result = SeekCloser()
    if raw is None:
        _compose_to([], result, config)
    else:
        render_custom(raw, result, config)
    result.seek(0)
    return result


# =============================================================================
# Dispatch
# =============================================================================

def render(strategy: Strategy, input: Union[str, Path, BinaryIO, bytes, None], output,
           config: Optional[ExportConfig] = None, renderer=None) -> Optional[BinaryIO]:
    """
    Run one of the two strategies.

    FULL_DOCUMENT takes paths and returns the rewound output file.
    CUSTOM_SINGLE_PAGE takes a page record and a writable sink and returns
    None; the PDF is in ``output``.
    """
    if strategy is Strategy.FULL_DOCUMENT:
        if input is None or output is None:
            raise InvalidArguments("input or output was None")
        if not isinstance(input, (str, Path)) or not isinstance(output, (str, Path)):
            raise InvalidArguments("full document render needs input and output paths")
        return render_full_document(Path(input), Path(output), renderer=renderer)
    if strategy is Strategy.CUSTOM_SINGLE_PAGE:
        render_custom(input, output, config)
        return None
    raise InvalidArguments(f"Unknown strategy: {strategy!r}")
