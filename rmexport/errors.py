"""
Exceptions raised by the export pipeline.

Every error carries its originating cause as ``__cause__``.
"""


class ExportError(Exception):
    """Base class for all export failures."""


class InvalidArguments(ExportError):
    """A required input or output was not supplied."""


class InputUnavailable(ExportError):
    """The notebook container or one of its pages could not be opened."""


class TruncatedInput(ExportError):
    """A page record is shorter than its fixed preamble."""


class MalformedScene(ExportError):
    """The scene decoder rejected the page body."""


class CanvasWriteFailed(ExportError):
    """The drawing surface rejected a command."""


class RenderBackendFailed(ExportError):
    """The full-document renderer failed."""


class OutputIOFailed(ExportError):
    """Creating, writing or rewinding the destination failed."""
