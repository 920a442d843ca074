"""
Tests for the command line interface.

Requires Python 3.11+.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from fixwatch import cli
from fixwatch.utils.config import Settings, WatcherSettings


class TestArguments:
    """Test cases for argument parsing and overrides."""

    def test_defaults(self):
        """Test that no arguments leaves settings untouched."""
        args = cli.build_parser().parse_args([])
        settings = Settings(watcher=WatcherSettings(cooldown_ms=1000))

        merged = cli.apply_overrides(settings, args)

        assert args.path is None
        assert merged.watcher.cooldown_ms == 1000
        assert merged.watcher.recursive == settings.watcher.recursive

    def test_overrides(self):
        """Test that flags override settings."""
        args = cli.build_parser().parse_args(
            [
                "/srv/site",
                "--filter", "*.php",
                "--filter", "*.inc",
                "--no-recursive",
                "--debounce-ms", "300",
                "--cooldown-ms", "1500",
                "--quiet-ms", "800",
                "--poll-ms", "50",
            ]
        )

        merged = cli.apply_overrides(Settings(), args)

        assert args.path == Path("/srv/site")
        assert merged.watcher.patterns == ["*.php", "*.inc"]
        assert merged.watcher.recursive is False
        assert merged.watcher.debounce_window_ms == 300
        assert merged.watcher.cooldown_ms == 1500
        assert merged.watcher.quiet_period_ms == 800
        assert merged.watcher.poll_interval_ms == 50

    @pytest.mark.parametrize(
        "flags",
        [
            ["--poll-ms", "0"],
            ["--debounce-ms", "-5"],
            ["--cooldown-ms", "-1"],
            ["--quiet-ms", "-100"],
        ],
    )
    def test_out_of_range_overrides_rejected(self, flags: list[str]):
        """Test that command line values are held to the settings bounds."""
        args = cli.build_parser().parse_args(flags)

        with pytest.raises(ValidationError):
            cli.apply_overrides(Settings(), args)

    def test_build_target(self, tmp_path: Path):
        """Test that the watch target carries the filters."""
        settings = Settings(watcher=WatcherSettings(patterns=["*.php"], ignore_patterns=["vendor"]))

        target = cli.build_target(tmp_path, settings, frozenset({".php"}))

        assert target.root == tmp_path.resolve()
        assert target.patterns == ("*.php",)
        assert target.ignore_patterns == ("vendor",)
        assert target.extensions == {".php"}


class TestMain:
    """Test cases for the entry point."""

    def test_missing_path_exits_nonzero(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]):
        """Test that a watch setup failure exits with status 1 and a diagnostic."""
        code = cli.main([str(tmp_path / "missing")])

        assert code == 1
        assert "does not exist" in capsys.readouterr().err

    def test_interrupt_exits_zero(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        """Test that an interrupt is a clean stop."""

        async def interrupted(root: Path, settings: Settings) -> None:
            raise KeyboardInterrupt

        monkeypatch.setattr(cli, "watch", interrupted)

        assert cli.main([str(tmp_path)]) == 0

    def test_negative_cooldown_exits_nonzero(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]):
        """Test that an invalid timing is reported before watching starts."""
        code = cli.main([str(tmp_path), "--cooldown-ms", "-1"])

        assert code == 1
        assert "invalid option" in capsys.readouterr().err
