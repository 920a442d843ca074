"""
fixwatch Utilities Package.

Configuration and logging shared across all modules.
Requires Python 3.11+.
"""

from fixwatch.utils.config import Settings, get_settings
from fixwatch.utils.logger import configure_logging, get_logger, logger, LoggerMixin

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "logger",
    "LoggerMixin",
]
