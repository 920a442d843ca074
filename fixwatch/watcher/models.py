"""
fixwatch Watcher Data Models.

Watch target and change events flowing through the dispatch pipeline.
Requires Python 3.11+.
"""

import fnmatch
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class ChangeKind(str, Enum):
    """Kinds of raw filesystem changes."""

    CREATED = "created"
    MODIFIED = "modified"
    RENAMED = "renamed"
    DELETED = "deleted"


@dataclass(frozen=True)
class ChangeEvent:
    """A raw change notification, consumed once by the pipeline."""

    path: Path
    kind: ChangeKind
    timestamp: float  # monotonic seconds


@dataclass(frozen=True)
class WatchTarget:
    """
    What to watch. Immutable after startup.

    An empty ``extensions`` set means every extension is allowed.
    """

    root: Path
    recursive: bool = True
    extensions: frozenset[str] = field(default_factory=frozenset)
    patterns: tuple[str, ...] = ("*",)
    ignore_patterns: tuple[str, ...] = ()

    def accepts(self, path: Path) -> bool:
        """Check whether a file path passes the allow-list, filters and ignores."""
        if self.extensions and path.suffix.lower() not in self.extensions:
            return False

        if self.patterns and not any(fnmatch.fnmatch(path.name, p) for p in self.patterns):
            return False

        return not self._is_ignored(path)

    def _is_ignored(self, path: Path) -> bool:
        try:
            parts = path.relative_to(self.root).parts
        except ValueError:
            parts = path.parts

        for pattern in self.ignore_patterns:
            for part in parts:
                if part == pattern or fnmatch.fnmatch(part, pattern):
                    return True
        return False
