"""
fixwatch Test Configuration.

Pytest fixtures and configuration.
Requires Python 3.11+.
"""

from pathlib import Path

import pytest
import structlog

from fakes import FakeClock, RecordingRunner
from fixwatch.utils.config import FormatterSettings


@pytest.fixture
def clock() -> FakeClock:
    """Fake clock starting at t=0."""
    return FakeClock()


@pytest.fixture
def runner() -> RecordingRunner:
    """Runner that always succeeds."""
    return RecordingRunner()


@pytest.fixture
def formatter_settings() -> FormatterSettings:
    """Formatter settings with defaults, isolated from the environment."""
    return FormatterSettings(
        php_tool="phpcbf",
        php_args=["-s"],
        php_extensions=[".php", ".phtml", ".inc", ".module", ".install"],
        js_tool="eslint",
        js_args=["--fix"],
        js_extensions=[".js"],
        js_global_path=None,
    )


@pytest.fixture
def php_file(tmp_path: Path) -> Path:
    """An existing PHP file."""
    path = tmp_path / "a.php"
    path.write_text("<?php echo 'hi';\n")
    return path


@pytest.fixture(autouse=True)
def reset_structlog():
    """Drop logging configuration applied by the CLI between tests."""
    yield
    structlog.reset_defaults()
