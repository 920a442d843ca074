"""
fixwatch Watch Service.

Bridges the watchdog observer thread to a single asyncio consumer that
runs the dispatch pipeline one event at a time.
Requires Python 3.11+.
"""

import asyncio
from collections import Counter
from collections.abc import Callable

from fixwatch.utils.logger import LoggerMixin
from fixwatch.watcher.file_watcher import EventSink, FileWatcher
from fixwatch.watcher.models import ChangeEvent, WatchTarget
from fixwatch.watcher.pipeline import FormatPipeline, PipelineOutcome

WatcherFactory = Callable[[WatchTarget, EventSink], FileWatcher]


class WatchService(LoggerMixin):
    """
    Runs until cancelled.

    Events are queued by the observer thread and handled strictly in
    order by one consumer, so a path never has two formatter runs in
    flight at once.
    """

    def __init__(
        self,
        target: WatchTarget,
        pipeline: FormatPipeline,
        watcher_factory: WatcherFactory | None = None,
    ) -> None:
        self._target = target
        self._pipeline = pipeline
        self._watcher_factory = watcher_factory or FileWatcher
        self._queue: asyncio.Queue[ChangeEvent] = asyncio.Queue()
        self._loop: asyncio.AbstractEventLoop | None = None
        self.outcomes: Counter[PipelineOutcome] = Counter()

    @property
    def queue(self) -> asyncio.Queue[ChangeEvent]:
        return self._queue

    def submit(self, event: ChangeEvent) -> None:
        """Queue an event; safe to call from the observer thread."""
        if self._loop is None:
            raise RuntimeError("WatchService is not running")
        self._loop.call_soon_threadsafe(self._queue.put_nowait, event)

    async def consume(self) -> None:
        """Handle queued events forever; per-event errors never end the loop."""
        while True:
            event = await self._queue.get()
            try:
                outcome = await self._pipeline.handle(event)
                self.outcomes[outcome] += 1
            except Exception:
                self.log.exception("event_handling_failed", path=str(event.path))
            finally:
                self._queue.task_done()

    async def run(self) -> None:
        """
        Start the watcher and consume events until cancelled.

        Raises:
            WatchSetupError: If the watch source cannot be created
        """
        self._loop = asyncio.get_running_loop()
        watcher = self._watcher_factory(self._target, self.submit)
        watcher.start()

        try:
            await self.consume()
        finally:
            watcher.stop()
            self._loop = None
            self.log.info(
                "watch_summary",
                **{outcome.value: count for outcome, count in self.outcomes.items()},
            )
