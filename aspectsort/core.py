"""
Core triage pipeline: discover, probe, classify, and copy qualifying images.
"""

import threading
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

from rich.table import Table

from .classifier import evaluate
from .constants import get_console, get_logger
from .errors import DecodeError, TransferError, ValidationError
from .file_operations import FileOperations, find_image_files
from .metadata import ImageMetadata, probe_image
from .progress import ProgressFeed
from .stats import StatsManager

PathLike = Union[str, Path]


class RunState(Enum):
    IDLE = "idle"
    DISCOVERING = "discovering"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (RunState.COMPLETED, RunState.CANCELLED, RunState.FAILED)


@dataclass(frozen=True)
class RunOutcome:
    """Terminal summary of one run."""
    state: RunState
    discovered: int
    processed: int
    copied: int
    error: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self.state is RunState.CANCELLED

    @property
    def summary(self) -> str:
        """Human-readable terminal status line."""
        if self.state is RunState.FAILED:
            return f"Run failed: {self.error}"
        counts = f"Processed {self.processed} images, copied {self.copied} images."
        if self.cancelled:
            return f"Processing cancelled by user. {counts}"
        return counts


def validate_paths(source: Optional[PathLike], dest: Optional[PathLike]) -> Tuple[Path, Path]:
    """Check run paths before anything is touched. Raises ValidationError."""
    if not source or not dest:
        raise ValidationError("Please select both source and destination folders.")

    source = Path(source).expanduser().resolve()
    dest = Path(dest).expanduser().resolve()

    if not source.exists():
        raise ValidationError(f"Source directory does not exist: {source}")
    if not source.is_dir():
        raise ValidationError(f"Source is not a directory: {source}")
    if dest.exists() and not dest.is_dir():
        raise ValidationError(f"Destination is not a directory: {dest}")
    if source == dest or source in dest.parents:
        raise ValidationError(f"Destination must not be the source or inside it: {source}, {dest}")

    return source, dest


class PipelineRunner:
    """Drives every image under a source tree through probe, classify and copy.

    run() processes synchronously. start() runs the same loop on a background
    thread and returns immediately; cancel() asks the loop to stop before the
    next file.
    """

    def __init__(self, dry_run: bool = False, feed: Optional[ProgressFeed] = None,
                 probe: Callable[[Path], ImageMetadata] = probe_image):
        self.dry_run = dry_run
        self.feed = feed or ProgressFeed()
        self.probe = probe
        self.logger = get_logger()
        self.console = get_console()
        self.stats_manager = StatsManager()
        self.state = RunState.IDLE
        self._cancel_event = threading.Event()
        self._state_lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._outcome: Optional[RunOutcome] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self, source: Optional[PathLike], dest: Optional[PathLike]) -> None:
        """Validate paths and begin a run in the background."""
        source_path, dest_path = validate_paths(source, dest)
        if self.is_running:
            raise RuntimeError("A run is already in progress")

        self._thread = threading.Thread(
            target=self._run_validated, args=(source_path, dest_path),
            name="aspectsort-pipeline", daemon=True
        )
        self._prepare()
        self._thread.start()

    def cancel(self) -> None:
        """Request cooperative cancellation. No-op once the run has finished."""
        with self._state_lock:
            if self.state.is_terminal:
                return
            self._cancel_event.set()
        self.logger.info("Cancellation requested")

    def wait(self, timeout: Optional[float] = None) -> Optional[RunOutcome]:
        """Block until a background run finishes; returns its outcome."""
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                return None
        return self._outcome

    def run(self, source: Optional[PathLike], dest: Optional[PathLike]) -> RunOutcome:
        """Validate paths and run the pipeline in the calling thread."""
        source_path, dest_path = validate_paths(source, dest)
        if self.is_running:
            raise RuntimeError("A run is already in progress")

        self._prepare()
        return self._run_validated(source_path, dest_path)

    def _prepare(self) -> None:
        self._cancel_event.clear()
        self._outcome = None
        self.stats_manager = StatsManager()
        self.feed.reset()
        self._set_state(RunState.IDLE)

    def _set_state(self, state: RunState) -> None:
        with self._state_lock:
            self.state = state

    def _finish(self, state: RunState, discovered: int, error: Optional[str] = None) -> RunOutcome:
        self._set_state(state)
        outcome = RunOutcome(state=state, discovered=discovered,
                             processed=self.stats_manager.get_processed(),
                             copied=self.stats_manager.get_copied(), error=error)
        self._outcome = outcome
        self.feed.update(status=outcome.summary, current_file_name="")
        if state is RunState.FAILED:
            self.logger.error(outcome.summary)
        else:
            self.logger.info(outcome.summary)
        return outcome

    def _run_validated(self, source: Path, dest: Path) -> RunOutcome:
        self.logger.info(f"Starting run: {source} -> {dest}")
        self.logger.info(f"Mode: {'DRY RUN' if self.dry_run else 'COPY'}")
        file_ops = FileOperations(dest=dest, dry_run=self.dry_run)

        self._set_state(RunState.DISCOVERING)
        self.feed.update(status="Discovering images...")
        try:
            files = find_image_files(source)
        except OSError as e:
            return self._finish(RunState.FAILED, 0, error=f"Cannot read source directory: {e}")

        discovered = len(files)
        self.logger.info(f"Found {discovered} images to process")
        self.feed.update(files_discovered=discovered,
                         status=f"Found {discovered} images to process. Starting...")

        self._set_state(RunState.PROCESSING)
        try:
            cancelled = self._process_files(files, file_ops)
        except Exception as e:
            self.logger.exception(f"Unrecoverable error during processing: {e}")
            return self._finish(RunState.FAILED, discovered, error=str(e))

        return self._finish(RunState.CANCELLED if cancelled else RunState.COMPLETED, discovered)

    def _process_files(self, files: List[Path], file_ops: FileOperations) -> bool:
        """Process files in order. Returns True if stopped by cancellation."""
        for file_path in files:
            if self._cancel_event.is_set():
                return True

            self.feed.update(current_file_name=file_path.name,
                             current_metadata=None, current_bucket=None)
            try:
                self._process_single_file(file_path, file_ops)
            except DecodeError as e:
                self.logger.error(str(e))
                self.stats_manager.increment_decode_errors()
                self.feed.update(status=f"Error processing {file_path.name}: {e}")
            except TransferError as e:
                self.logger.error(str(e))
                self.stats_manager.increment_copy_errors()
                self.feed.update(status=f"Error processing {file_path.name}: {e}")
                if not self.dry_run and not file_ops.dest.is_dir():
                    raise RuntimeError(f"Destination is no longer accessible: {file_ops.dest}") from e

            self.stats_manager.increment_processed()
            self.feed.update(files_processed=self.stats_manager.get_processed(),
                             files_copied=self.stats_manager.get_copied())
        return False

    def _process_single_file(self, file_path: Path, file_ops: FileOperations) -> None:
        """Probe, classify and, if qualifying, copy one image."""
        metadata = self.probe(file_path)
        verdict = evaluate(metadata)
        self.feed.update(current_metadata=metadata, current_bucket=verdict.bucket)

        if not verdict.qualifies:
            self.logger.debug(f"Skipping {file_path.name}: {verdict.reason}")
            self.stats_manager.record_skip(verdict.reason)
            return

        try:
            dest_path = file_ops.synthesize_destination(metadata.orientation_label, verdict.bucket)
        except OSError as e:
            raise TransferError(file_path, file_ops.dest, str(e)) from e

        file_ops.copy_file(file_path, dest_path)
        self.stats_manager.record_copy(verdict.bucket)
        self.logger.debug(f"{file_path.name}: {verdict.bucket}")

    def print_summary(self) -> None:
        """Print processing summary."""
        table = Table(title="Processing Summary")
        table.add_column("Category", style="cyan")
        table.add_column("Count", style="green")

        stats = self.stats_manager.get_stats()
        table.add_row("Processed", str(stats['processed']))
        table.add_row("Copied", str(stats['copied']))
        for bucket, count in self.stats_manager.get_bucket_counts().items():
            table.add_row(f"  {bucket}", str(count))
        table.add_row("Below 4K", str(stats['below_resolution']))
        table.add_row("No EXIF", str(stats['no_exif']))
        table.add_row("Decode Errors", str(stats['decode_errors']))
        table.add_row("Copy Errors", str(stats['copy_errors']))

        self.console.print(table)
