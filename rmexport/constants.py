"""
Shared constants for reMarkable export tools.
"""

from .parser import Pen, PenColor

# Device screen in native units
DEVICE_WIDTH = 1404
DEVICE_HEIGHT = 1872

# Fixed header in front of every v6 page record
PREAMBLE_LENGTH = 0x2b

# DPI-based scaling
RM_DPI = 227
PDF_DPI = 72.0
RM_TO_PDF_SCALE = RM_DPI / PDF_DPI  # ~3.1528

# Color mapping - RGB tuples (0-255)
COLOR_MAP_RGB = {
    PenColor.BLACK: (0, 0, 0),
    PenColor.GRAY: (125, 125, 125),
    PenColor.WHITE: (255, 255, 255),
    PenColor.YELLOW: (255, 235, 59),
    PenColor.GREEN: (76, 175, 80),
    PenColor.PINK: (233, 30, 99),
    PenColor.BLUE: (48, 74, 224),
    PenColor.RED: (244, 67, 54),
    PenColor.GRAY_OVERLAP: (158, 158, 158),
    PenColor.HIGHLIGHT: (255, 235, 59),
    PenColor.GREEN_2: (139, 195, 74),
    PenColor.CYAN: (0, 188, 212),
    PenColor.MAGENTA: (156, 39, 176),
    PenColor.YELLOW_2: (255, 193, 7),
}

# Pens drawn semi-transparent by the full-document renderer
TRANSPARENT_PENS = {Pen.HIGHLIGHTER, Pen.HIGHLIGHTER_2, Pen.SHADER}
HIGHLIGHTER_OPACITY = 0.4

# Eraser pens
ERASER_PENS = {Pen.ERASER, Pen.ERASER_AREA}

# Thinnest stroke the full-document renderer will draw, in points
MIN_STROKE_WIDTH = 0.5
