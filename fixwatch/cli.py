"""
fixwatch Command Line Interface.

Watches a directory tree and runs the matching formatter whenever a
PHP or JavaScript file is saved.
Requires Python 3.11+.

Usage:
    fixwatch /path/to/project --filter "*.php"
"""

import argparse
import asyncio
import sys
from pathlib import Path

from pydantic import ValidationError

from fixwatch.exceptions import WatchSetupError
from fixwatch.utils.config import Settings, WatcherSettings, get_settings
from fixwatch.utils.logger import configure_logging, get_logger
from fixwatch.watcher.models import WatchTarget
from fixwatch.watcher.pipeline import FormatPipeline
from fixwatch.watcher.service import WatchService

logger = get_logger("fixwatch.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fixwatch",
        description="Auto-format PHP and JavaScript files as they are saved",
    )
    parser.add_argument(
        "path",
        type=Path,
        nargs="?",
        default=None,
        help="Directory to watch (default: current directory)",
    )
    parser.add_argument(
        "--filter",
        dest="patterns",
        action="append",
        default=None,
        metavar="GLOB",
        help="File name glob to watch, may be repeated (default: *)",
    )
    parser.add_argument(
        "--no-recursive",
        dest="recursive",
        action="store_false",
        default=None,
        help="Only watch the top-level directory",
    )
    parser.add_argument("--debounce-ms", type=int, default=None, help="Debounce window per file")
    parser.add_argument("--cooldown-ms", type=int, default=None, help="Ignore window after a formatter run")
    parser.add_argument("--quiet-ms", type=int, default=None, help="Time a file must stay unchanged")
    parser.add_argument("--poll-ms", type=int, default=None, help="Stability sampling interval")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["console", "json"],
        help="Log output format",
    )
    return parser


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """
    Return settings with command line values layered on top.

    Raises:
        ValidationError: If an override is outside the allowed range
    """
    overrides = {
        "recursive": args.recursive,
        "patterns": args.patterns,
        "debounce_window_ms": args.debounce_ms,
        "cooldown_ms": args.cooldown_ms,
        "quiet_period_ms": args.quiet_ms,
        "poll_interval_ms": args.poll_ms,
    }
    watcher = WatcherSettings.model_validate(
        {
            **settings.watcher.model_dump(),
            **{k: v for k, v in overrides.items() if v is not None},
        }
    )
    return settings.model_copy(update={"watcher": watcher})


def build_target(root: Path, settings: Settings, extensions: frozenset[str]) -> WatchTarget:
    return WatchTarget(
        root=root.resolve(),
        recursive=settings.watcher.recursive,
        extensions=extensions,
        patterns=tuple(settings.watcher.patterns),
        ignore_patterns=tuple(settings.watcher.ignore_patterns),
    )


async def watch(root: Path, settings: Settings) -> None:
    """Watch ``root`` until cancelled."""
    pipeline = FormatPipeline.from_settings(settings)
    target = build_target(root, settings, pipeline.dispatcher.supported_extensions)
    await WatchService(target, pipeline).run()


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    configure_logging(level=args.log_level, fmt=args.log_format)
    try:
        settings = apply_overrides(get_settings(), args)
    except ValidationError as e:
        print(f"Error: invalid option: {e}", file=sys.stderr)
        return 1
    root = args.path or Path.cwd()

    try:
        asyncio.run(watch(root, settings))
    except WatchSetupError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        logger.info("interrupted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
