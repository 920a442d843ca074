"""
fixwatch Formatter Dispatcher.

Routes a file to its external formatter and runs it to completion.
Requires Python 3.11+.
"""

import asyncio
import os
import shutil
import sys
from collections.abc import Awaitable, Callable, Sequence
from pathlib import Path

from fixwatch.formatter.models import DispatchResult, FormatterCommand, FormatterKind
from fixwatch.utils.config import FormatterSettings, get_settings
from fixwatch.utils.logger import LoggerMixin

ProcessRunner = Callable[[Sequence[str], Path | None], Awaitable[int]]


async def run_process(args: Sequence[str], cwd: Path | None) -> int:
    """
    Run a child process with the inherited console and wait for it.

    If the awaiting task is cancelled the child is terminated first.
    Raises OSError when the executable cannot be launched.
    """
    proc = await asyncio.create_subprocess_exec(
        *args,
        cwd=str(cwd) if cwd is not None else None,
    )
    try:
        return await proc.wait()
    except asyncio.CancelledError:
        if proc.returncode is None:
            proc.terminate()
            await proc.wait()
        raise


class FormatterDispatcher(LoggerMixin):
    """
    Maps file extensions to external formatters.

    PHP-family files go to the PHP fixer; JavaScript files go to the
    JavaScript fixer, preferring a project-local install over a global one.
    """

    def __init__(
        self,
        settings: FormatterSettings | None = None,
        runner: ProcessRunner | None = None,
    ) -> None:
        """
        Initialize the dispatcher.

        Args:
            settings: Formatter settings, defaults to the application settings
            runner: Async callable (args, cwd) -> returncode
        """
        self._settings = settings or get_settings().formatter
        self._runner = runner or run_process
        self._php_extensions = frozenset(self._settings.php_extensions)
        self._js_extensions = frozenset(self._settings.js_extensions)

    @property
    def supported_extensions(self) -> frozenset[str]:
        return self._php_extensions | self._js_extensions

    def classify(self, path: Path) -> FormatterKind | None:
        """Return the formatter kind for a path, or None if unsupported."""
        ext = path.suffix.lower()
        if ext in self._php_extensions:
            return FormatterKind.PHP
        if ext in self._js_extensions:
            return FormatterKind.JAVASCRIPT
        return None

    def resolve_command(self, path: Path) -> FormatterCommand | None:
        """Build the formatter invocation for a path, or None if unsupported."""
        kind = self.classify(path)
        if kind is FormatterKind.PHP:
            return FormatterCommand(
                kind=kind,
                args=(self._settings.php_tool, *self._settings.php_args, str(path)),
            )
        if kind is FormatterKind.JAVASCRIPT:
            return FormatterCommand(
                kind=kind,
                args=(self.resolve_js_binary(path), *self._settings.js_args, str(path)),
                cwd=path.parent,
            )
        return None

    def _local_binary_names(self) -> list[str]:
        tool = self._settings.js_tool
        if sys.platform == "win32":
            return [f"{tool}.cmd", tool]
        return [tool]

    def find_local_binary(self, path: Path) -> Path | None:
        """
        Find a project-local JavaScript fixer.

        Looks in node_modules/.bin of the file's directory and then of each
        ancestor directory.
        """
        names = self._local_binary_names()
        for directory in (path.parent, *path.parent.parents):
            bin_dir = directory / "node_modules" / ".bin"
            for name in names:
                candidate = bin_dir / name
                if candidate.is_file():
                    return candidate
        return None

    def find_global_binary(self) -> str | None:
        """Locate a global JavaScript fixer install."""
        configured = self._settings.js_global_path
        if configured:
            configured_path = Path(configured).expanduser()
            if configured_path.is_file():
                return str(configured_path)
            self.log.warning("js_global_path_missing", path=str(configured_path))

        appdata = os.environ.get("APPDATA")
        if sys.platform == "win32" and appdata:
            candidate = Path(appdata) / "npm" / f"{self._settings.js_tool}.cmd"
            if candidate.is_file():
                return str(candidate)

        return shutil.which(self._settings.js_tool)

    def resolve_js_binary(self, path: Path) -> str:
        local = self.find_local_binary(path)
        if local is not None:
            return str(local)

        global_binary = self.find_global_binary()
        if global_binary is not None:
            return global_binary

        # Launching the bare name fails and is reported as a normal dispatch error
        return self._settings.js_tool

    async def dispatch(self, path: Path) -> DispatchResult:
        """
        Run the formatter for a file and wait for it to exit.

        Args:
            path: File to fix in place

        Returns:
            DispatchResult; never raises for launch failures or non-zero exits
        """
        command = self.resolve_command(path)
        if command is None:
            self.log.debug("unsupported_file_type", path=str(path), extension=path.suffix)
            return DispatchResult(ran=False)

        self.log.info(
            "formatter_started",
            path=str(path),
            formatter=command.kind.value,
            executable=command.executable,
        )

        try:
            returncode = await self._runner(command.args, command.cwd)
        except OSError as e:
            return DispatchResult(
                ran=True,
                error=f"failed to launch {command.executable}: {e}",
                command=command,
            )

        if returncode != 0:
            return DispatchResult(
                ran=True,
                error=f"{command.executable} exited with status {returncode}",
                returncode=returncode,
                command=command,
            )

        return DispatchResult(ran=True, returncode=returncode, command=command)
