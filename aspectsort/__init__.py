"""
aspectsort - Copy 4K+ photos into orientation and aspect-ratio folders.

Scans an arbitrarily nested photo library, keeps images of at least
3840x2160 pixels that carry an EXIF orientation, and copies them into
<dest>/<orientation>/<aspect ratio>/ for use as wallpapers.

MIT License.
"""

__version__ = "1.0.0"
__copyright__ = "Copyright (c) 2025 aspectsort contributors"


# Public API
from .classifier import ClassificationVerdict, classify, evaluate, qualifies
from .cli import main
from .config import Config
from .core import PipelineRunner, RunOutcome, RunState, validate_paths
from .errors import AspectSortError, DecodeError, TransferError, ValidationError
from .file_operations import FileOperations, find_image_files
from .metadata import ImageMetadata, probe_image
from .progress import ProgressFeed, RunProgress

__all__ = [
    "main", "Config", "PipelineRunner", "RunOutcome", "RunState", "validate_paths",
    "ClassificationVerdict", "classify", "evaluate", "qualifies",
    "AspectSortError", "DecodeError", "TransferError", "ValidationError",
    "FileOperations", "find_image_files", "ImageMetadata", "probe_image",
    "ProgressFeed", "RunProgress",
]
