"""
Resolution gate and aspect-ratio bucketing.
"""

from dataclasses import dataclass
from typing import Optional

from .constants import (ASPECT_RATIOS, ASPECT_TOLERANCE, CUSTOM_BUCKET, MIN_HEIGHT,
                        MIN_WIDTH)
from .metadata import ImageMetadata

QUALIFIED = "qualified"
BELOW_RESOLUTION = "below_resolution"
NO_EXIF = "no_exif"


@dataclass(frozen=True)
class ClassificationVerdict:
    """Outcome of classifying one image. bucket is None unless qualifies."""
    qualifies: bool
    bucket: Optional[str] = None
    reason: str = QUALIFIED


def qualifies(width: int, height: int) -> bool:
    """True if both dimensions meet the 4K minimum."""
    return width >= MIN_WIDTH and height >= MIN_HEIGHT


def classify(width: int, height: int) -> str:
    """Return the first aspect bucket within tolerance, else the Custom bucket."""
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions must be positive, got {width}x{height}")

    ratio = width / height
    for label, target in ASPECT_RATIOS:
        if abs(ratio - target) < ASPECT_TOLERANCE:
            return label
    return CUSTOM_BUCKET


def evaluate(metadata: ImageMetadata) -> ClassificationVerdict:
    """Decide whether an image is copied and into which bucket.

    Images without any EXIF profile are never copied, whatever their
    resolution. A profile lacking the orientation tag still qualifies and
    is filed under the Unknown orientation.
    """
    if not qualifies(metadata.width, metadata.height):
        return ClassificationVerdict(qualifies=False, reason=BELOW_RESOLUTION)
    if not metadata.has_exif:
        return ClassificationVerdict(qualifies=False, reason=NO_EXIF)
    return ClassificationVerdict(qualifies=True,
                                 bucket=classify(metadata.width, metadata.height))
