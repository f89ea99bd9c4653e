"""
Image header probing: pixel dimensions and EXIF orientation.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional, Tuple

from PIL import Image, UnidentifiedImageError

from .constants import ORIENTATION_TAG, UNKNOWN_ORIENTATION, get_logger
from .errors import DecodeError

logger = get_logger()


@dataclass(frozen=True)
class ImageMetadata:
    """Dimensions and orientation decoded from one image file.

    has_exif is False when the file carries no EXIF profile at all;
    orientation is None when the profile lacks a usable orientation tag.
    """
    path: Path
    width: int
    height: int
    orientation: Optional[int] = None
    format: Optional[str] = None
    has_exif: bool = False

    @property
    def orientation_label(self) -> str:
        """Directory label for the orientation, 'Unknown' when absent."""
        if self.orientation is None:
            return UNKNOWN_ORIENTATION
        return str(self.orientation)

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


@contextmanager
def _pixel_limit_lifted() -> Iterator[None]:
    """Disable Pillow's decompression-bomb check while only headers are read."""
    limit = Image.MAX_IMAGE_PIXELS
    Image.MAX_IMAGE_PIXELS = None
    try:
        yield
    finally:
        Image.MAX_IMAGE_PIXELS = limit


def _read_exif(img: Image.Image) -> Tuple[bool, Optional[int]]:
    """Return (has_exif, orientation) without loading pixel data."""
    # PngImageFile.getexif() decodes the image to look for a trailing eXIf chunk
    if img.format == "PNG" and "exif" not in img.info:
        return False, None

    exif = img.getexif()
    if not exif:
        return False, None

    value = exif.get(ORIENTATION_TAG)
    if value is None:
        return True, None
    try:
        return True, int(value)
    except (TypeError, ValueError):
        logger.debug(f"Ignoring malformed orientation value {value!r}")
        return True, None


def probe_image(path: Path) -> ImageMetadata:
    """Read width, height and orientation from an image header.

    Only the header is parsed; the pixel data is never loaded, so images
    above Pillow's pixel limit are probed like any other. Raises
    DecodeError if the file is unreadable, truncated, or not an image.
    """
    path = Path(path)
    try:
        with _pixel_limit_lifted(), Image.open(path) as img:
            width, height = img.size
            has_exif, orientation = _read_exif(img)
            fmt = img.format
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
        raise DecodeError(path, str(e)) from e

    if width <= 0 or height <= 0:
        raise DecodeError(path, f"invalid dimensions {width}x{height}")

    logger.debug(f"{path.name}: {width}x{height} exif={has_exif} "
                 f"orientation={orientation} format={fmt}")
    return ImageMetadata(path=path, width=width, height=height,
                         orientation=orientation, format=fmt, has_exif=has_exif)
