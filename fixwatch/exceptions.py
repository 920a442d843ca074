"""
fixwatch Exceptions.

Requires Python 3.11+.
"""


class FixwatchError(Exception):
    """Base class for fixwatch errors."""


class WatchSetupError(FixwatchError):
    """The watch source could not be created (missing or unreadable root)."""
