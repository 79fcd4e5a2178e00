"""
reMarkable Notebook Export

Export reMarkable v6 notebooks to PDF.

Usage:
    from rmexport import render_full_document, render_page

    with render_full_document("notebook.zip", "notebook.pdf") as pdf:
        data = pdf.read()

    page = render_page("notebook.zip", page=0)

CLI:
    python -m rmexport <notebook.zip> -o <output.pdf> [--page N]
"""

from .config import ExportConfig, load_config
from .errors import (
    CanvasWriteFailed,
    ExportError,
    InputUnavailable,
    InvalidArguments,
    MalformedScene,
    OutputIOFailed,
    RenderBackendFailed,
    TruncatedInput,
)
from .orchestrator import (
    Strategy,
    render,
    render_custom,
    render_full_document,
    render_page,
)
from .parser import Layer, Line, Point, Scene
from .stream import SeekCloser

__all__ = [
    "ExportConfig",
    "load_config",
    "ExportError",
    "InvalidArguments",
    "InputUnavailable",
    "TruncatedInput",
    "MalformedScene",
    "CanvasWriteFailed",
    "RenderBackendFailed",
    "OutputIOFailed",
    "Strategy",
    "render",
    "render_custom",
    "render_full_document",
    "render_page",
    "Layer",
    "Line",
    "Point",
    "Scene",
    "SeekCloser",
]

__version__ = "0.1.0"
