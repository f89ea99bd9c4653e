"""
Fixed classification policy, file extension constants and shared console/logger.
"""

import logging
from typing import Optional

from rich.console import Console

PROGRAM = "aspectsort"

# File extension constants (matched case-insensitively)
JPG_EXTENSIONS = (".jpg", ".jpeg")
IMAGE_EXTENSIONS = JPG_EXTENSIONS + (".png", ".bmp", ".tiff", ".tif")

# Minimum resolution gate (4K UHD)
MIN_WIDTH = 3840
MIN_HEIGHT = 2160

# Aspect-ratio buckets in priority order; first match within tolerance wins
ASPECT_RATIOS = (
    ("16:9", 16.0 / 9.0),
    ("4:3", 4.0 / 3.0),
    ("3:2", 3.0 / 2.0),
    ("1:1", 1.0),
    ("21:9", 21.0 / 9.0),
)
ASPECT_TOLERANCE = 0.01
CUSTOM_BUCKET = "Custom"

# EXIF orientation tag and the label used when it is absent
ORIENTATION_TAG = 0x0112
UNKNOWN_ORIENTATION = "Unknown"

DEST_PREFIX = "img-"
DEST_SUFFIX = ".jpg"

_console: Optional[Console] = None


def get_console() -> Console:
    """Shared rich console for progress bars, tables and log output."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def get_logger() -> logging.Logger:
    """Program-wide logger."""
    return logging.getLogger(PROGRAM)
