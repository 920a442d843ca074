"""
fixwatch Dispatch Pipeline.

Turns one raw change event into at most one formatter run:
cooldown check, debounce check, classification, stability wait,
dispatch, cooldown update.
Requires Python 3.11+.
"""

import time
from collections.abc import Callable
from enum import Enum

from fixwatch.formatter.dispatcher import FormatterDispatcher, ProcessRunner
from fixwatch.utils.config import Settings, get_settings
from fixwatch.utils.logger import LoggerMixin
from fixwatch.watcher.ledgers import CooldownLedger, DebounceLedger
from fixwatch.watcher.models import ChangeEvent, ChangeKind
from fixwatch.watcher.stability import StabilityDetector

Clock = Callable[[], float]


class PipelineOutcome(str, Enum):
    """What happened to a single change event."""

    COOLING_DOWN = "cooling_down"
    DELETED = "deleted"
    DEBOUNCED = "debounced"
    UNSUPPORTED = "unsupported"
    FORMATTED = "formatted"
    FAILED = "failed"


class FormatPipeline(LoggerMixin):
    """
    Owns the debounce and cooldown ledgers and applies them per event.

    Event timestamps and the clock must share a time base
    (``time.monotonic`` by default).
    """

    def __init__(
        self,
        dispatcher: FormatterDispatcher,
        stability: StabilityDetector,
        debounce: DebounceLedger,
        cooldown: CooldownLedger,
        clock: Clock | None = None,
    ) -> None:
        self.dispatcher = dispatcher
        self.stability = stability
        self.debounce = debounce
        self.cooldown = cooldown
        self._clock = clock or time.monotonic

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        runner: ProcessRunner | None = None,
    ) -> "FormatPipeline":
        """Build a pipeline from application settings."""
        settings = settings or get_settings()
        watcher = settings.watcher
        return cls(
            dispatcher=FormatterDispatcher(settings.formatter, runner=runner),
            stability=StabilityDetector(
                poll_interval=watcher.poll_interval_ms / 1000.0,
                quiet_period=watcher.quiet_period_ms / 1000.0,
            ),
            debounce=DebounceLedger(watcher.debounce_window_ms / 1000.0),
            cooldown=CooldownLedger(watcher.cooldown_ms / 1000.0),
        )

    async def handle(self, event: ChangeEvent) -> PipelineOutcome:
        """
        Process one change event.

        Formatter failures are logged and contained; the cooldown is set
        after every run, failed or not.

        Args:
            event: Raw change event

        Returns:
            The outcome for this event
        """
        path = event.path
        now = event.timestamp

        if self.cooldown.is_cooling_down(path, now):
            self.log.debug("event_in_cooldown", path=str(path), kind=event.kind.value)
            return PipelineOutcome.COOLING_DOWN

        if event.kind is ChangeKind.DELETED:
            self.log.debug("file_deleted", path=str(path))
            return PipelineOutcome.DELETED

        if not self.debounce.try_mark(path, now):
            self.log.debug("event_debounced", path=str(path), kind=event.kind.value)
            return PipelineOutcome.DEBOUNCED

        if self.dispatcher.classify(path) is None:
            self.log.debug("unsupported_file_type", path=str(path))
            return PipelineOutcome.UNSUPPORTED

        self.log.info("change_detected", path=str(path), kind=event.kind.value)
        await self.stability.wait_stable(path)

        result = await self.dispatcher.dispatch(path)
        until = self.cooldown.start_cooldown(path, self._clock())

        if result.error is not None:
            self.log.error(
                "formatter_failed",
                path=str(path),
                error=result.error,
                returncode=result.returncode,
            )
            return PipelineOutcome.FAILED

        self.log.info(
            "formatter_finished",
            path=str(path),
            returncode=result.returncode,
            cooldown_seconds=round(until - self._clock(), 3),
        )
        return PipelineOutcome.FORMATTED
