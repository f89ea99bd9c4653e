"""
Destination naming, directory creation and file copying.
"""

import shutil
import uuid
from pathlib import Path
from typing import List

from .constants import DEST_PREFIX, DEST_SUFFIX, IMAGE_EXTENSIONS, get_logger
from .errors import TransferError


def find_image_files(source: Path) -> List[Path]:
    """Recursively list supported image files under source, sorted.

    OSError from the walk (e.g. the source disappearing) propagates.
    """
    if not source.is_dir():
        raise FileNotFoundError(f"Source directory not found: {source}")

    return sorted(
        file_path for file_path in source.rglob("*")
        if file_path.is_file() and file_path.suffix.lower() in IMAGE_EXTENSIONS
    )


class FileOperations:
    """Utility class for destination path synthesis and collision-safe copies."""

    def __init__(self, dest: Path, dry_run: bool = False):
        self.dest = dest
        self.dry_run = dry_run
        self.logger = get_logger()

    def ensure_directory(self, directory: Path) -> None:
        """Create directory and parents if needed, with dry-run support."""
        if not self.dry_run:
            directory.mkdir(parents=True, exist_ok=True)

    def synthesize_destination(self, orientation_label: str, bucket: str) -> Path:
        """Build dest/<orientation>/<bucket>/img-<uuid>.jpg and create its parents."""
        dest_dir = self.dest / orientation_label / bucket
        dest_path = dest_dir / f"{DEST_PREFIX}{uuid.uuid4()}{DEST_SUFFIX}"
        self.ensure_directory(dest_dir)
        return dest_path

    def copy_file(self, source: Path, dest: Path) -> None:
        """Copy file contents to dest, overwriting any existing file.

        Raises TransferError on any I/O failure.
        """
        if self.dry_run:
            self.logger.info(f"[dry-run] {source} -> {dest}")
            return

        try:
            shutil.copyfile(source, dest)
        except OSError as e:
            raise TransferError(source, dest, str(e)) from e

        self.logger.info(f"{source} -> {dest}")
