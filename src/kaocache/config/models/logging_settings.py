"""Logging configuration model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from kaocache.shared.constants import Logging


class LoggingSettings(BaseModel):
    """Logging behavior of the CLI and of setup_structured_logger()."""

    model_config = ConfigDict(frozen=True)

    level: str = Field(default=Logging.DEFAULT_LEVEL, description="Logging level")
    file: str | None = Field(default=None, description="Optional JSON log file path")
    rich_console: bool = Field(default=True, description="Use Rich console output")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate the level name."""
        level = v.strip().upper()
        if level not in Logging.LEVELS:
            msg = f"Invalid log level {v!r}. Must be one of: {', '.join(Logging.LEVELS)}"
            raise ValueError(msg)
        return level


__all__ = ["LoggingSettings"]
