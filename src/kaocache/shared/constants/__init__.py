"""
KaoCache Constants Module

This module provides centralized constants for KaoCache. All magic values
and configuration defaults are defined here so the on-disk layout and the
configuration surface have a single source of truth.
"""

from .cache import Cache, CacheLayout, CacheValidation
from .cli import CLIDefaults, CLIHelp
from .logging import Logging

__all__ = [
    "CLIDefaults",
    "CLIHelp",
    "Cache",
    "CacheLayout",
    "CacheValidation",
    "Logging",
]
