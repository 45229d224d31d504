"""Cache store facade.

``CacheStore`` validates a cache root once and hands out ``CacheHandle``
objects; every operation of the generation store, the retention sweeper
and the eraser is reachable from it.

Example:
    store = CacheStore(CacheSettings(root_dir="/tmp/kao"))
    handle = store.handle("https://example.com/feed", DataKind.STRUCTURED_JSON)
    store.write(handle, {"items": [1, 2, 3]})
    store.read_latest(handle)  # {"items": [1, 2, 3]}
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Callable

from kaocache.config.models.cache_settings import CacheSettings
from kaocache.core.handle import CacheHandle
from kaocache.core.hasher import IdentifierHasher
from kaocache.core.pointer import CurrentPointer, read_pointer
from kaocache.services.eraser import IdentifierEraser
from kaocache.services.generation_store import Clock, GenerationStore
from kaocache.services.retention import MaxAge, RetentionSweeper
from kaocache.shared.errors import (
    ErrorContext,
    create_config_error,
)
from kaocache.shared.logging import log_operation_error, log_operation_success
from kaocache.shared.types import DataKind, FilterStep

logger = logging.getLogger(__name__)


class CacheStore:
    """Generational file cache rooted at one directory.

    Args:
        settings: Cache configuration; defaults are used when omitted
        clock: Local-time source for generation names (tests)
        now: Unix-time source for pruning cutoffs (tests)

    Raises:
        ConfigInvalidError: If the root cannot be used as a directory
    """

    def __init__(
        self,
        settings: CacheSettings | None = None,
        *,
        clock: Clock | None = None,
        now: Callable[[], float] | None = None,
    ) -> None:
        started = time.perf_counter()
        self.settings = settings or CacheSettings()
        self.root_dir = self.settings.root_dir
        self._ensure_root()

        self.hasher = IdentifierHasher(self.settings.hash_algorithm)
        self.generations = GenerationStore(self.settings, clock=clock)
        self.sweeper = RetentionSweeper(self.settings, now=now)
        self.eraser = IdentifierEraser(self.settings)

        log_operation_success(
            logger=logger,
            operation="initialize_store",
            duration_ms=(time.perf_counter() - started) * 1000,
            context={
                "root_dir": str(self.root_dir),
                "hash_algorithm": self.settings.hash_algorithm,
                "return_path_type": self.settings.return_path_type,
            },
        )

    def _ensure_root(self) -> None:
        root = self.root_dir
        if root.exists() and not root.is_dir():
            error = create_config_error(
                f"Cache root exists but is not a directory: {root}",
                config_key="root_dir",
                operation="initialize_store",
            )
            log_operation_error(logger=logger, error=error)
            raise error
        try:
            root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            error = create_config_error(
                f"Cache root cannot be created: {root} ({e!s})",
                config_key="root_dir",
                operation="initialize_store",
                original_error=e,
            )
            log_operation_error(logger=logger, error=error)
            raise error from e

    def hash(self, identifier: str) -> str:
        """Directory name the identifier maps to in this store."""
        return self.hasher.hash(identifier)

    def handle(self, identifier: str, data_kind: DataKind | str) -> CacheHandle:
        """Bind ``identifier`` to a data kind in this store.

        Raises:
            DataKindInvalidError: If data_kind is not supported
        """
        return CacheHandle.create(identifier, data_kind, self.root_dir, self.hasher)

    def write(
        self,
        handle: CacheHandle,
        content: Any,
        filter: Sequence[FilterStep] | None = None,  # noqa: A002
    ) -> Path:
        """See GenerationStore.write."""
        return self.generations.write(handle, content, filter)

    def write_from_file(
        self,
        handle: CacheHandle,
        source: str | Path,
        filter: Sequence[FilterStep] | None = None,  # noqa: A002
    ) -> Path:
        """See GenerationStore.write_from_file."""
        return self.generations.write_from_file(handle, source, filter)

    def read_pointer(self, handle: CacheHandle) -> CurrentPointer:
        return read_pointer(handle)

    def read_latest(self, handle: CacheHandle) -> Any:
        return self.generations.read_latest(handle)

    def list_generations(self, handle: CacheHandle) -> list[str]:
        return self.generations.list_generations(handle)

    def prune_older_than(self, handle: CacheHandle, max_age: MaxAge) -> list[Path]:
        """See RetentionSweeper.prune_older_than."""
        return self.sweeper.prune_older_than(handle, max_age)

    def erase_all(self, handle: CacheHandle) -> list[Path]:
        """See IdentifierEraser.erase_all."""
        return self.eraser.erase_all(handle)

    def get_cache_info(self, handle: CacheHandle) -> dict[str, Any]:
        """Summarize the on-disk state of an identifier.

        Returns:
            Dictionary with the generation count, their total size, the
            oldest and newest generation names, the pointer's file (or
            None) and whether the pointer names a missing generation
        """
        started = time.perf_counter()
        names = self.list_generations(handle)
        total_size = sum(handle.generation_path(name).stat().st_size for name in names)

        pointer_file: str | None = None
        stale = False
        if handle.pointer_path.is_file():
            pointer = read_pointer(handle)
            pointer_file = pointer.file
            stale = not handle.generation_path(pointer.file).is_file()

        info = {
            "identifier_hash": handle.identifier_hash,
            "data_kind": handle.data_kind.value,
            "generation_dir": str(handle.generation_dir),
            "generation_count": len(names),
            "total_size_bytes": total_size,
            "oldest": names[0] if names else None,
            "newest": names[-1] if names else None,
            "current": pointer_file,
            "pointer_stale": stale,
        }
        log_operation_success(
            logger=logger,
            operation="get_cache_info",
            duration_ms=(time.perf_counter() - started) * 1000,
            result_info={"generation_count": len(names)},
            context=ErrorContext(
                operation="get_cache_info",
                identifier_hash=handle.identifier_hash,
            ),
        )
        return info

    def __repr__(self) -> str:
        return (
            f"CacheStore(root_dir={str(self.root_dir)!r}, "
            f"hash_algorithm={self.settings.hash_algorithm!r})"
        )


__all__ = ["CacheStore"]
