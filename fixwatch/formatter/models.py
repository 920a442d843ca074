"""
fixwatch Formatter Data Models.

Requires Python 3.11+.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class FormatterKind(str, Enum):
    """Formatter families a file can be routed to."""

    PHP = "php"
    JAVASCRIPT = "javascript"


@dataclass(frozen=True)
class FormatterCommand:
    """A resolved external formatter invocation."""

    kind: FormatterKind
    args: tuple[str, ...]
    cwd: Path | None = None

    @property
    def executable(self) -> str:
        return self.args[0]


@dataclass(frozen=True)
class DispatchResult:
    """
    Outcome of a dispatch.

    ``ran`` is False only for unsupported files. A launch failure or a
    non-zero exit still counts as a run, with ``error`` set.
    """

    ran: bool
    error: str | None = None
    returncode: int | None = None
    command: FormatterCommand | None = None

    @property
    def ok(self) -> bool:
        return self.ran and self.error is None
