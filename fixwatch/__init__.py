"""
fixwatch.

Watches a directory tree and runs PHP/JavaScript formatters on
stable, completed edits.
Requires Python 3.11+.
"""

__version__ = "0.1.0"
