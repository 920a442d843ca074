"""
fixwatch Debounce and Cooldown Ledgers.

Per-path timestamp maps that gate the dispatch pipeline.
Requires Python 3.11+.
"""

import threading
from pathlib import Path


class DebounceLedger:
    """
    Suppresses reprocessing of a path within a debounce window.

    Collapses a burst of raw notifications for one logical edit into a
    single formatter run. Entries are never removed; the key space is the
    set of watched files.
    """

    def __init__(self, window_seconds: float) -> None:
        """
        Initialize the ledger.

        Args:
            window_seconds: Minimum spacing between accepted events per path
        """
        self._window = window_seconds
        self._last_processed: dict[Path, float] = {}
        self._lock = threading.Lock()

    @property
    def window(self) -> float:
        return self._window

    def should_process(self, path: Path, now: float) -> bool:
        """Return False iff the path was marked less than ``window`` seconds ago."""
        with self._lock:
            last = self._last_processed.get(path)
        if last is None:
            return True
        return now - last >= self._window

    def mark_processed(self, path: Path, now: float) -> None:
        """Record ``now`` as the last accepted processing time for the path."""
        with self._lock:
            self._last_processed[path] = now

    def try_mark(self, path: Path, now: float) -> bool:
        """
        Check and record in one step.

        Returns:
            True if the event is accepted (and now recorded), False if debounced
        """
        with self._lock:
            last = self._last_processed.get(path)
            if last is not None and now - last < self._window:
                return False
            self._last_processed[path] = now
            return True

    def __len__(self) -> int:
        return len(self._last_processed)


class CooldownLedger:
    """
    Per-path "ignore until" timestamps.

    Set right after a formatter run so the formatter's own write-back
    event is absorbed. Checked before anything else; an active cooldown
    wins over the debounce ledger.
    """

    def __init__(self, duration_seconds: float) -> None:
        """
        Initialize the ledger.

        Args:
            duration_seconds: Length of the window started by start_cooldown
        """
        self._duration = duration_seconds
        self._until: dict[Path, float] = {}
        self._lock = threading.Lock()

    @property
    def duration(self) -> float:
        return self._duration

    def is_cooling_down(self, path: Path, now: float) -> bool:
        with self._lock:
            until = self._until.get(path)
        return until is not None and now < until

    def set_cooldown(self, path: Path, until: float) -> None:
        with self._lock:
            self._until[path] = until

    def start_cooldown(self, path: Path, now: float) -> float:
        """Suppress the path until ``now + duration`` and return that deadline."""
        until = now + self._duration
        self.set_cooldown(path, until)
        return until

    def cooling_until(self, path: Path) -> float | None:
        with self._lock:
            return self._until.get(path)
