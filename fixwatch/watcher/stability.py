"""
fixwatch File Stability Detector.

Waits until a file's size and mtime stop changing, so formatters only
ever see a fully written file.
Requires Python 3.11+.
"""

import asyncio
import os
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from fixwatch.utils.logger import LoggerMixin


@dataclass(frozen=True)
class StatSnapshot:
    """Size and modification time of a file at one sample."""

    size: int
    mtime_ns: int


StatProvider = Callable[[Path], StatSnapshot]
Sleeper = Callable[[float], Awaitable[None]]


def default_stat_provider(path: Path) -> StatSnapshot:
    st = os.stat(path)
    return StatSnapshot(size=st.st_size, mtime_ns=st.st_mtime_ns)


class StabilityDetector(LoggerMixin):
    """
    Polls a path until its (size, mtime) pair settles.

    Two consecutive equal samples start a quiet period; if the pair is
    still equal after it, the file is stable. A missing path is polled
    like any other (editors briefly remove the target while renaming a
    temp file over it). There is no timeout: wrap the call in
    ``asyncio.wait_for`` if one is needed.
    """

    def __init__(
        self,
        poll_interval: float = 0.1,
        quiet_period: float = 0.5,
        stat_provider: StatProvider | None = None,
        sleep: Sleeper | None = None,
    ) -> None:
        """
        Initialize the detector.

        Args:
            poll_interval: Seconds between samples
            quiet_period: Seconds the pair must stay unchanged once it matches
            stat_provider: Returns the StatSnapshot of a path, raises OSError if missing
            sleep: Awaitable sleep, injectable for tests
        """
        self._poll_interval = poll_interval
        self._quiet_period = quiet_period
        self._stat = stat_provider or default_stat_provider
        self._sleep = sleep or asyncio.sleep

    def _sample(self, path: Path) -> StatSnapshot | None:
        try:
            return self._stat(path)
        except FileNotFoundError:
            return None
        except OSError as e:
            # Locked by the writer on some platforms; retry on the next poll
            self.log.debug("stat_failed", path=str(path), error=str(e))
            return None

    async def wait_stable(self, path: Path) -> bool:
        """
        Block until the file at ``path`` is stable.

        Args:
            path: File to watch; may not exist yet

        Returns:
            True once the file has settled
        """
        previous: StatSnapshot | None = None
        missing_logged = False

        while True:
            current = self._sample(path)

            if current is None:
                if not missing_logged:
                    self.log.debug("stability_path_missing", path=str(path))
                    missing_logged = True
                previous = None
                await self._sleep(self._poll_interval)
                continue

            missing_logged = False

            if previous is not None and current == previous:
                await self._sleep(self._quiet_period)
                confirm = self._sample(path)
                if confirm == current:
                    self.log.debug("file_stable", path=str(path), size=current.size)
                    return True
                previous = confirm
            else:
                previous = current

            await self._sleep(self._poll_interval)
