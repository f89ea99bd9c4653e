"""Progress state for a run and its rich progress-bar observer."""

import threading
from dataclasses import dataclass, replace
from typing import Callable, List, Optional

from rich.progress import Progress, TaskID

from .metadata import ImageMetadata


@dataclass
class RunProgress:
    """Live counters for one run. Written only by the pipeline runner."""
    files_discovered: int = 0
    files_processed: int = 0
    files_copied: int = 0
    current_file_name: str = ""
    status: str = ""
    current_metadata: Optional[ImageMetadata] = None
    current_bucket: Optional[str] = None

    @property
    def fraction(self) -> float:
        if self.files_discovered == 0:
            return 0.0
        return self.files_processed / self.files_discovered


ProgressListener = Callable[[RunProgress], None]


class ProgressFeed:
    """Owns a RunProgress and pushes snapshots to subscribers after each change."""

    def __init__(self):
        self._progress = RunProgress()
        self._listeners: List[ProgressListener] = []
        self._lock = threading.Lock()

    def subscribe(self, listener: ProgressListener) -> None:
        self._listeners.append(listener)

    def snapshot(self) -> RunProgress:
        """Copy of the current progress, safe to read from any thread."""
        with self._lock:
            return replace(self._progress)

    def reset(self) -> None:
        with self._lock:
            self._progress = RunProgress()

    def update(self, **changes) -> None:
        """Apply field changes and notify subscribers."""
        with self._lock:
            for name, value in changes.items():
                if not hasattr(self._progress, name):
                    raise AttributeError(f"RunProgress has no field {name!r}")
                setattr(self._progress, name, value)
            snapshot = replace(self._progress)
        for listener in self._listeners:
            listener(snapshot)


class ProgressContext:
    """Mirrors RunProgress snapshots onto a rich progress bar."""

    def __init__(self, progress: Optional[Progress] = None, task: Optional[TaskID] = None):
        self.progress = progress
        self.task = task

    @property
    def is_active(self) -> bool:
        """Check if progress tracking is active."""
        return self.progress is not None and self.task is not None

    def __call__(self, snapshot: RunProgress) -> None:
        if not self.is_active:
            return
        if snapshot.current_file_name:
            description = (f"[{snapshot.files_copied} copied] "
                           f"{snapshot.current_file_name}")
        else:
            description = snapshot.status or "Processing images..."
        self.progress.update(self.task, total=snapshot.files_discovered or None,
                             completed=snapshot.files_processed,
                             description=description)
