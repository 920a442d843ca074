"""
fixwatch Formatter Package.

Extension routing and external formatter execution.
Requires Python 3.11+.
"""

from fixwatch.formatter.dispatcher import FormatterDispatcher, run_process
from fixwatch.formatter.models import DispatchResult, FormatterCommand, FormatterKind

__all__ = [
    "FormatterDispatcher",
    "run_process",
    "DispatchResult",
    "FormatterCommand",
    "FormatterKind",
]
