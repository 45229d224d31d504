"""Settings loader.

Settings come from, in order of precedence: an explicit TOML file, the
first default TOML file that exists, and finally environment variables and
built-in defaults.
"""

from __future__ import annotations

import logging
from pathlib import Path

import toml
from pydantic import ValidationError

from kaocache.config.models.settings import Settings
from kaocache.shared.errors import (
    ConfigInvalidError,
    ErrorCode,
    ErrorContext,
    create_config_error,
)
from kaocache.shared.logging import log_operation_error

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATHS: tuple[Path, ...] = (
    Path("kaocache.toml"),
    Path("config/kaocache.toml"),
    Path.home() / ".config" / "kaocache" / "config.toml",
)


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from a TOML configuration file or the environment.

    Args:
        config_path: Optional path to a TOML file. When omitted the default
            locations are searched; if none exists, environment variables
            and defaults are used.

    Returns:
        Settings instance

    Raises:
        ConfigInvalidError: If the explicit file is missing, is not valid
            TOML, or holds values that fail validation
    """
    if config_path is not None:
        return _load_from_file(Path(config_path))

    for candidate in DEFAULT_CONFIG_PATHS:
        if candidate.is_file():
            logger.debug("Loading configuration from %s", candidate)
            return _load_from_file(candidate)

    try:
        return Settings()
    except ValidationError as e:
        error = create_config_error(
            f"Invalid configuration in environment: {e}",
            operation="load_settings",
            original_error=e,
        )
        log_operation_error(logger=logger, error=error)
        raise error from e


def _load_from_file(path: Path) -> Settings:
    try:
        return Settings.from_toml_file(path)
    except FileNotFoundError as e:
        error = ConfigInvalidError(
            ErrorCode.CONFIG_MISSING,
            f"Configuration file not found: {path}",
            ErrorContext(file_path=str(path), operation="load_settings"),
            original_error=e,
        )
        log_operation_error(logger=logger, error=error)
        raise error from e
    except (toml.TomlDecodeError, ValidationError) as e:
        error = create_config_error(
            f"Invalid configuration file {path}: {e}",
            config_key="config_path",
            operation="load_settings",
            original_error=e,
        )
        log_operation_error(logger=logger, error=error)
        raise error from e
