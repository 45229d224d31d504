"""
CLI Context Management Module

Holds the global options parsed by the Typer callback (cache root override,
configuration file, log level, JSON output) and builds the CacheStore the
commands operate on.
"""

from __future__ import annotations

import contextvars
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from kaocache.config.loader import load_settings
from kaocache.config.models.cache_settings import CacheSettings
from kaocache.config.models.settings import Settings
from kaocache.services.cache_store import CacheStore


class LogLevel(str, Enum):
    """Log level enumeration for type safety."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class CliContext(BaseModel):
    """
    Global CLI state shared by every command.

    Attributes:
        root: Cache root overriding the configured one
        config_path: Explicit TOML configuration file
        log_level: Logging level
        json_output: Whether to output in JSON format
        settings: Settings loaded by the callback, reused by commands
    """

    root: Path | None = Field(default=None, description="Cache root override")
    config_path: Path | None = Field(default=None, description="TOML configuration file")
    log_level: LogLevel = Field(default=LogLevel.WARNING, description="Logging level")
    json_output: bool = Field(default=False, description="Whether to output in JSON format")
    settings: Settings | None = Field(default=None, description="Loaded configuration")

    def load(self) -> Settings:
        """Load configuration once; later calls return the same value."""
        if self.settings is None:
            self.settings = load_settings(self.config_path)
        return self.settings

    def cache_settings(self) -> CacheSettings:
        """Resolve cache settings from configuration and the root override."""
        settings = self.load().cache
        if self.root is None:
            return settings
        return CacheSettings(**{**settings.model_dump(), "root_dir": self.root})

    def build_store(self) -> CacheStore:
        return CacheStore(self.cache_settings())


_cli_context: contextvars.ContextVar[CliContext | None] = contextvars.ContextVar(
    "kaocache_cli_context",
    default=None,
)


def set_cli_context(context: CliContext) -> None:
    _cli_context.set(context)


def get_cli_context() -> CliContext:
    """Return the current CLI context, or defaults if none was set."""
    return _cli_context.get() or CliContext()
