"""Configuration loading for KaoCache."""

from __future__ import annotations

from .loader import DEFAULT_CONFIG_PATHS, load_settings
from .models import CacheSettings, LoggingSettings, Settings

__all__ = [
    "DEFAULT_CONFIG_PATHS",
    "CacheSettings",
    "LoggingSettings",
    "Settings",
    "load_settings",
]
