"""KaoCache Settings Configuration Model.

Main Settings class that consolidates the cache and logging configuration
domains and reads overrides from ``KAOCACHE_*`` environment variables.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import toml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from kaocache.config.models.cache_settings import CacheSettings
from kaocache.config.models.logging_settings import LoggingSettings
from kaocache.shared.constants import Cache


class Settings(BaseSettings):
    """Unified configuration access.

    Nested values can be overridden from the environment, e.g.
    ``KAOCACHE_CACHE__ROOT_DIR=/var/cache/kao``.
    """

    model_config = SettingsConfigDict(
        env_prefix=Cache.ENV_PREFIX,
        env_nested_delimiter="__",
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
    )

    cache: CacheSettings = Field(default_factory=CacheSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def from_toml_file(cls, file_path: str | Path) -> Settings:
        """Load settings from a TOML file.

        Raises:
            FileNotFoundError: If the file does not exist
            toml.TomlDecodeError: If the file is not valid TOML
        """
        file_path = Path(file_path)
        if not file_path.exists():
            msg = f"Configuration file not found: {file_path}"
            raise FileNotFoundError(msg)

        raw_config: dict[str, Any] = toml.load(file_path)
        return cls(**raw_config)

    def to_toml_file(self, file_path: str | Path) -> None:
        """Save settings to a TOML file."""
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        config_dict = self.model_dump(mode="json", exclude_none=True)

        with open(file_path, "w", encoding="utf-8") as f:
            toml.dump(config_dict, f)


__all__ = ["Settings"]
