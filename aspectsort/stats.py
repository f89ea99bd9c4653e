"""
Statistics tracking for image triage runs.
"""

from collections import Counter
from typing import Dict

from .constants import ASPECT_RATIOS, CUSTOM_BUCKET


class StatsManager:
    """Encapsulates per-outcome and per-bucket counters for one run."""

    def __init__(self):
        self._stats = {
            'processed': 0,
            'copied': 0,
            'below_resolution': 0,
            'no_exif': 0,
            'decode_errors': 0,
            'copy_errors': 0,
        }
        self._buckets: Counter = Counter()

    def increment_processed(self) -> None:
        self._stats['processed'] += 1

    def record_copy(self, bucket: str) -> None:
        """Record a qualifying image copied into bucket."""
        self._stats['copied'] += 1
        self._buckets[bucket] += 1

    def record_skip(self, reason: str) -> None:
        """Record an image that did not qualify (below_resolution or no_exif)."""
        if reason not in ('below_resolution', 'no_exif'):
            raise ValueError(f"Unknown skip reason: {reason}")
        self._stats[reason] += 1

    def increment_decode_errors(self) -> None:
        self._stats['decode_errors'] += 1

    def increment_copy_errors(self) -> None:
        self._stats['copy_errors'] += 1

    def get_stats(self) -> Dict[str, int]:
        """Get a copy of current statistics."""
        return self._stats.copy()

    def get_bucket_counts(self) -> Dict[str, int]:
        """Copied-file counts per bucket, in bucket priority order."""
        labels = [label for label, _ in ASPECT_RATIOS] + [CUSTOM_BUCKET]
        return {label: self._buckets[label] for label in labels if self._buckets[label]}

    def get_processed(self) -> int:
        return self._stats['processed']

    def get_copied(self) -> int:
        return self._stats['copied']

    def get_errors(self) -> int:
        return self._stats['decode_errors'] + self._stats['copy_errors']
