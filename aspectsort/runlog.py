"""
Per-run log files for aspectsort.
"""

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Optional


class RunLog:
    """Manages the log file that records every action of one run."""

    def __init__(self, dest_path: Path, root_dir: Path, dry_run: bool = False):
        self.dest_path = dest_path
        self.root_dir = root_dir
        self.dry_run = dry_run
        self.logs_dir = self.root_dir / "logs"
        self.log_path = self._unique_log_path()
        self._handler: Optional[logging.FileHandler] = None

    def _unique_log_path(self) -> Path:
        """Timestamped log path, with a counter if a log of the same name exists."""
        timestamp = datetime.now().strftime("%Y-%m-%d_%H%M%S")
        base_name = f"{timestamp}+{self._sanitize_dest_name(self.dest_path)}"
        log_path = self.logs_dir / f"{base_name}.log"
        counter = 1
        while log_path.exists():
            log_path = self.logs_dir / f"{base_name}-{counter:02d}.log"
            counter += 1
        return log_path

    @staticmethod
    def _sanitize_dest_name(dest_path: Path) -> str:
        """Convert destination path to safe file name component."""
        sanitized = re.sub(r'[^\w\-_]', '-', dest_path.name)
        sanitized = re.sub(r'-+', '-', sanitized)
        return sanitized.strip('-') or "dest"

    def attach(self, logger: logging.Logger) -> None:
        """Configure logger to also write to this run's log file."""
        if self.dry_run or self._handler is not None:
            return

        self.logs_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(self.log_path, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s [%(name)s] %(levelname)s: %(message)s'
        ))
        logger.addHandler(file_handler)

        # Ensure logger level allows DEBUG messages to reach the file handler
        logger.setLevel(logging.DEBUG)
        self._handler = file_handler

    def detach(self, logger: logging.Logger) -> None:
        """Remove and close the file handler added by attach()."""
        if self._handler is None:
            return
        logger.removeHandler(self._handler)
        self._handler.close()
        self._handler = None
