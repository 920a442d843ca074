"""
fixwatch Watcher Package.

File system monitoring, change debouncing and stability detection.
Requires Python 3.11+.
"""

from fixwatch.watcher.file_watcher import ChangeEventHandler, FileWatcher
from fixwatch.watcher.ledgers import CooldownLedger, DebounceLedger
from fixwatch.watcher.models import ChangeEvent, ChangeKind, WatchTarget
from fixwatch.watcher.pipeline import FormatPipeline, PipelineOutcome
from fixwatch.watcher.service import WatchService
from fixwatch.watcher.stability import StabilityDetector, StatSnapshot

__all__ = [
    "ChangeEventHandler",
    "FileWatcher",
    "CooldownLedger",
    "DebounceLedger",
    "ChangeEvent",
    "ChangeKind",
    "WatchTarget",
    "FormatPipeline",
    "PipelineOutcome",
    "WatchService",
    "StabilityDetector",
    "StatSnapshot",
]
