"""
fixwatch Configuration Module.

Centralizes all configuration settings using Pydantic Settings.
Requires Python 3.11+.
"""

from functools import lru_cache
from typing import Annotated

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# Load .env into os.environ so the nested BaseSettings classes see it
load_dotenv()


def _split_csv(v: str | list[str]) -> list[str]:
    if isinstance(v, str):
        return [p.strip() for p in v.split(",") if p.strip()]
    return v


def _normalize_extensions(values: list[str]) -> list[str]:
    normalized = []
    for ext in values:
        ext = ext.strip().lower()
        if not ext:
            continue
        if not ext.startswith("."):
            ext = "." + ext
        normalized.append(ext)
    return normalized


class WatcherSettings(BaseSettings):
    """File watcher and change-debouncing settings."""

    model_config = SettingsConfigDict(env_prefix="WATCHER_")

    recursive: bool = Field(default=True)
    poll_interval_ms: int = Field(default=100, ge=10, le=5000, description="Stability sampling interval")
    quiet_period_ms: int = Field(default=500, ge=0, le=60000, description="Time a file must stay unchanged")
    debounce_window_ms: int = Field(default=2000, ge=0, le=600000)
    cooldown_ms: int = Field(default=1000, ge=0, le=600000, description="Ignore window after a formatter run")

    patterns: Annotated[list[str], NoDecode] = Field(
        default=["*"],
        description="Glob patterns matched against the file name",
    )
    ignore_patterns: Annotated[list[str], NoDecode] = Field(
        default=[
            "node_modules",
            "vendor",
            ".git",
            ".idea",
            ".vscode",
            "*.swp",
            "*.tmp",
            "*~",
        ],
        description="Path parts or globs that never produce events",
    )

    @field_validator("patterns", "ignore_patterns", mode="before")
    @classmethod
    def parse_patterns(cls, v: str | list[str]) -> list[str]:
        """Parse patterns from comma-separated string or list."""
        return _split_csv(v)


class FormatterSettings(BaseSettings):
    """External formatter settings."""

    model_config = SettingsConfigDict(env_prefix="FORMATTER_")

    php_tool: str = Field(default="phpcbf", description="PHP fixer executable")
    php_args: Annotated[list[str], NoDecode] = Field(default=["-s"])
    php_extensions: Annotated[list[str], NoDecode] = Field(
        default=[".php", ".phtml", ".inc", ".module", ".install"],
    )

    js_tool: str = Field(default="eslint", description="JavaScript linter/fixer executable name")
    js_args: Annotated[list[str], NoDecode] = Field(default=["--fix"])
    js_extensions: Annotated[list[str], NoDecode] = Field(default=[".js"])
    js_global_path: str | None = Field(
        default=None,
        description="Fallback JavaScript fixer used when no project-local install is found",
    )

    @field_validator("php_args", "js_args", mode="before")
    @classmethod
    def parse_args(cls, v: str | list[str]) -> list[str]:
        """Parse tool arguments from comma-separated string or list."""
        return _split_csv(v)

    @field_validator("php_extensions", "js_extensions", mode="before")
    @classmethod
    def parse_extensions(cls, v: str | list[str]) -> list[str]:
        """Parse extensions and normalize them to lowercase with a leading dot."""
        return _normalize_extensions(_split_csv(v))


class LoggingSettings(BaseSettings):
    """Logging configuration settings."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = Field(default="INFO")
    format: str = Field(default="console")  # "json" or "console"


class Settings(BaseSettings):
    """Main application settings aggregating all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="fixwatch")
    app_version: str = Field(default="0.1.0")

    watcher: WatcherSettings = Field(default_factory=WatcherSettings)
    formatter: FormatterSettings = Field(default_factory=FormatterSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns singleton instance of Settings.
    """
    return Settings()
