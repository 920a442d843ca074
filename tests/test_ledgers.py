"""
Tests for the Debounce and Cooldown Ledgers.

Requires Python 3.11+.
"""

import threading
from pathlib import Path

import pytest

from fixwatch.watcher.ledgers import CooldownLedger, DebounceLedger

PATH = Path("/project/a.php")
OTHER = Path("/project/b.php")


class TestDebounceLedger:
    """Test cases for DebounceLedger."""

    @pytest.fixture
    def ledger(self) -> DebounceLedger:
        """A ledger with a one-second window."""
        return DebounceLedger(window_seconds=1.0)

    def test_unknown_path_is_processed(self, ledger: DebounceLedger):
        """Test that a path never marked is always accepted."""
        assert ledger.should_process(PATH, 0.0)

    def test_within_window_is_suppressed(self, ledger: DebounceLedger):
        """Test suppression inside the window."""
        ledger.mark_processed(PATH, 10.0)

        assert not ledger.should_process(PATH, 10.0)
        assert not ledger.should_process(PATH, 10.5)
        assert not ledger.should_process(PATH, 10.999)

    def test_past_window_is_processed(self, ledger: DebounceLedger):
        """Test that the window boundary and later are accepted."""
        ledger.mark_processed(PATH, 10.0)

        assert ledger.should_process(PATH, 11.0)
        assert ledger.should_process(PATH, 25.0)

    def test_paths_are_independent(self, ledger: DebounceLedger):
        """Test that marking one path does not throttle another."""
        ledger.mark_processed(PATH, 0.0)

        assert ledger.should_process(OTHER, 0.1)

    def test_mark_updates_timestamp(self, ledger: DebounceLedger):
        """Test that re-marking moves the window forward."""
        ledger.mark_processed(PATH, 0.0)
        ledger.mark_processed(PATH, 2.0)

        assert not ledger.should_process(PATH, 2.5)
        assert len(ledger) == 1

    def test_try_mark_accepts_then_debounces(self, ledger: DebounceLedger):
        """Test the combined check-and-record."""
        assert ledger.try_mark(PATH, 0.0)
        assert not ledger.try_mark(PATH, 0.5)
        assert ledger.try_mark(PATH, 1.0)
        assert not ledger.should_process(PATH, 1.5)

    def test_try_mark_is_atomic_across_threads(self, ledger: DebounceLedger):
        """Test that concurrent handlers for one save accept exactly one event."""
        start = threading.Barrier(16)
        accepted: list[bool] = []
        lock = threading.Lock()

        def handler() -> None:
            start.wait()
            result = ledger.try_mark(PATH, 0.0)
            with lock:
                accepted.append(result)

        threads = [threading.Thread(target=handler) for _ in range(16)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert accepted.count(True) == 1


class TestCooldownLedger:
    """Test cases for CooldownLedger."""

    @pytest.fixture
    def ledger(self) -> CooldownLedger:
        """A ledger with a one-second cooldown."""
        return CooldownLedger(duration_seconds=1.0)

    def test_no_cooldown_by_default(self, ledger: CooldownLedger):
        """Test that unknown paths are not cooling down."""
        assert not ledger.is_cooling_down(PATH, 0.0)
        assert ledger.cooling_until(PATH) is None

    def test_set_cooldown(self, ledger: CooldownLedger):
        """Test an explicit deadline."""
        ledger.set_cooldown(PATH, 5.0)

        assert ledger.is_cooling_down(PATH, 4.99)
        assert not ledger.is_cooling_down(PATH, 5.0)
        assert not ledger.is_cooling_down(OTHER, 4.0)

    def test_start_cooldown_uses_duration(self, ledger: CooldownLedger):
        """Test that start_cooldown sets now + duration."""
        until = ledger.start_cooldown(PATH, 3.0)

        assert until == pytest.approx(4.0)
        assert ledger.cooling_until(PATH) == pytest.approx(4.0)
        assert ledger.is_cooling_down(PATH, 3.05)
        assert not ledger.is_cooling_down(PATH, 4.1)

    def test_independent_of_debounce(self, ledger: CooldownLedger):
        """Test that a path may sit in both ledgers with separate timestamps."""
        debounce = DebounceLedger(window_seconds=10.0)
        debounce.mark_processed(PATH, 0.0)
        ledger.start_cooldown(PATH, 0.5)

        # Cooldown has expired, debounce still throttles
        assert not ledger.is_cooling_down(PATH, 2.0)
        assert not debounce.should_process(PATH, 2.0)
