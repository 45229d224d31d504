"""
Pytest configuration and shared fixtures for KaoCache tests.

This module provides common fixtures that can be used across all test
modules in the project.
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from kaocache.config import CacheSettings
from kaocache.services import CacheStore
from kaocache.shared.constants import Logging


class FakeClock:
    """Manually advanced local-time source for generation names."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2024, 1, 1, 12, 0, 0)

    def __call__(self) -> datetime:
        return self.current

    def advance(self, seconds: float = 1) -> datetime:
        self.current += timedelta(seconds=seconds)
        return self.current


@pytest.fixture(autouse=True)
def reset_package_logger() -> Generator[None, None, None]:
    """Undo handler changes made by setup_structured_logger()."""
    yield
    logger = logging.getLogger(Logging.ROOT_LOGGER)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def cache_root(tmp_path: Path) -> Path:
    """Cache root inside the pytest temporary directory."""
    return tmp_path / "cache"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings(cache_root: Path) -> CacheSettings:
    return CacheSettings(root_dir=cache_root)


@pytest.fixture
def store(settings: CacheSettings, clock: FakeClock) -> CacheStore:
    """CacheStore with an absolute-path root and a controllable clock."""
    return CacheStore(settings, clock=clock)


@pytest.fixture
def relative_store(cache_root: Path, clock: FakeClock) -> CacheStore:
    """CacheStore that returns paths relative to its root."""
    return CacheStore(
        CacheSettings(root_dir=cache_root, return_path_type="relative"),
        clock=clock,
    )
