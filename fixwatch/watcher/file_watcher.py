"""
fixwatch File Watcher.

Cross-platform file system monitoring using watchdog.
Requires Python 3.11+.
"""

import os
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from watchdog.events import (
    DirCreatedEvent,
    DirDeletedEvent,
    DirModifiedEvent,
    DirMovedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from fixwatch.exceptions import WatchSetupError
from fixwatch.utils.logger import LoggerMixin
from fixwatch.watcher.models import ChangeEvent, ChangeKind, WatchTarget

EventSink = Callable[[ChangeEvent], Any]
Clock = Callable[[], float]


class ChangeEventHandler(FileSystemEventHandler, LoggerMixin):
    """
    Translates watchdog events into ChangeEvents.

    Drops directory events and paths the watch target does not accept.
    Runs on the observer thread, so the sink must be thread-safe.
    """

    def __init__(
        self,
        target: WatchTarget,
        sink: EventSink,
        clock: Clock | None = None,
    ) -> None:
        """
        Initialize the handler.

        Args:
            target: Watch target used to filter paths
            sink: Receives each accepted ChangeEvent
            clock: Timestamp source, must match the pipeline's clock
        """
        super().__init__()
        self._target = target
        self._sink = sink
        self._clock = clock or time.monotonic

    def _emit(self, raw_path: str | bytes, kind: ChangeKind) -> None:
        path = Path(os.fsdecode(raw_path)).absolute()

        if not self._target.accepts(path):
            return

        self.log.debug("raw_change", path=str(path), kind=kind.value)
        self._sink(ChangeEvent(path=path, kind=kind, timestamp=self._clock()))

    def on_created(self, event: FileCreatedEvent | DirCreatedEvent) -> None:
        """Handle file creation."""
        if event.is_directory:
            return
        self._emit(event.src_path, ChangeKind.CREATED)

    def on_modified(self, event: FileModifiedEvent | DirModifiedEvent) -> None:
        """Handle file modification."""
        if event.is_directory:
            return
        self._emit(event.src_path, ChangeKind.MODIFIED)

    def on_deleted(self, event: FileDeletedEvent | DirDeletedEvent) -> None:
        """Handle file deletion."""
        if event.is_directory:
            return
        self._emit(event.src_path, ChangeKind.DELETED)

    def on_moved(self, event: FileMovedEvent | DirMovedEvent) -> None:
        """Handle rename; editors save by renaming a temp file over the target."""
        if event.is_directory:
            return
        self._emit(event.dest_path, ChangeKind.RENAMED)


class FileWatcher(LoggerMixin):
    """
    Watches a directory tree and feeds ChangeEvents to a sink.

    Thin adapter over a watchdog Observer; all debouncing happens
    downstream in the pipeline.
    """

    def __init__(
        self,
        target: WatchTarget,
        sink: EventSink,
        clock: Clock | None = None,
    ) -> None:
        """
        Initialize the file watcher.

        Args:
            target: What to watch
            sink: Callable receiving ChangeEvents from the observer thread
            clock: Timestamp source for events
        """
        self._target = target
        self._handler = ChangeEventHandler(target, sink, clock=clock)
        self._observer: Observer | None = None
        self._running = False

    @property
    def target(self) -> WatchTarget:
        return self._target

    def start(self) -> None:
        """
        Start watching for file changes.

        Raises:
            WatchSetupError: If the root cannot be watched
        """
        if self._running:
            return

        root = self._target.root
        if not root.exists():
            raise WatchSetupError(f"Path does not exist: {root}")
        if not root.is_dir():
            raise WatchSetupError(f"Path is not a directory: {root}")

        observer = Observer()
        try:
            observer.schedule(
                self._handler,
                str(root),
                recursive=self._target.recursive,
            )
            observer.start()
        except OSError as e:
            raise WatchSetupError(f"Cannot watch {root}: {e}") from e

        self._observer = observer
        self._running = True

        self.log.info(
            "file_watcher_started",
            path=str(root),
            recursive=self._target.recursive,
            patterns=list(self._target.patterns),
        )

    def stop(self) -> None:
        """Stop watching and release the observer."""
        if not self._running:
            return

        if self._observer is not None:
            self._observer.unschedule_all()
            self._observer.stop()
            self._observer.join(timeout=5.0)
            self._observer = None

        self._running = False
        self.log.info("file_watcher_stopped")

    @property
    def is_running(self) -> bool:
        """Check if the watcher is running."""
        return self._running

    def __enter__(self) -> "FileWatcher":
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.stop()
