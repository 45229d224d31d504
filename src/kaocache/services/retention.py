"""Age-based pruning of generations.

The sweeper never touches the current pointer. If the newest generation
is old enough to be pruned, the pointer keeps naming it and later reads
fail with CacheNotFoundError until the identifier is written again.
"""

from __future__ import annotations

import logging
import os
import time
from datetime import timedelta
from pathlib import Path
from typing import Callable, Union

from kaocache.config.models.cache_settings import CacheSettings
from kaocache.core.handle import CacheHandle
from kaocache.shared.errors import (
    ErrorCode,
    ErrorContext,
    create_io_error,
    create_not_found_error,
)
from kaocache.shared.logging import (
    log_file_operation,
    log_operation_error,
    log_operation_success,
)

logger = logging.getLogger(__name__)

MaxAge = Union[timedelta, int, float]


def _as_seconds(max_age: MaxAge) -> float:
    if isinstance(max_age, timedelta):
        return max_age.total_seconds()
    return float(max_age)


class RetentionSweeper:
    """Removes generations older than a given age.

    Args:
        settings: Cache configuration (path form)
        now: Returns the current time in Unix seconds
    """

    def __init__(
        self,
        settings: CacheSettings,
        now: Callable[[], float] | None = None,
    ) -> None:
        self.settings = settings
        self._now = now or time.time

    def prune_older_than(self, handle: CacheHandle, max_age: MaxAge) -> list[Path]:
        """Delete generations whose modification time is before now - max_age.

        Only regular files directly inside the generation directory are
        considered; subdirectories are left alone.

        Args:
            handle: Identifier to prune
            max_age: Age threshold as timedelta or seconds

        Returns:
            Removed generation paths, sorted by file name, relative to the
            cache root or absolute depending on configuration

        Raises:
            CacheNotFoundError: If the generation directory does not exist
            CacheIOError: If the directory cannot be listed or a file cannot
                be deleted
        """
        operation = "prune_older_than"
        started = time.perf_counter()
        generation_dir = handle.generation_dir
        cutoff = self._now() - _as_seconds(max_age)

        if not generation_dir.is_dir():
            error = create_not_found_error(
                f"Generation directory does not exist: {generation_dir}",
                generation_dir,
                operation=operation,
                identifier_hash=handle.identifier_hash,
            )
            log_operation_error(logger=logger, error=error)
            raise error

        try:
            with os.scandir(generation_dir) as entries:
                expired = sorted(
                    (
                        Path(entry.path)
                        for entry in entries
                        if entry.is_file(follow_symlinks=False)
                        and entry.stat(follow_symlinks=False).st_mtime < cutoff
                    ),
                    key=lambda path: path.name,
                )
        except OSError as e:
            error = create_io_error(
                f"Failed to list generation directory: {e!s}",
                generation_dir,
                code=ErrorCode.DIRECTORY_LIST_ERROR,
                operation=operation,
                identifier_hash=handle.identifier_hash,
                original_error=e,
            )
            log_operation_error(logger=logger, error=error)
            raise error from e

        removed: list[Path] = []
        for path in expired:
            try:
                path.unlink()
            except OSError as e:
                error = create_io_error(
                    f"Failed to delete generation {path.name}: {e!s}",
                    path,
                    code=ErrorCode.FILE_DELETE_ERROR,
                    operation=operation,
                    identifier_hash=handle.identifier_hash,
                    original_error=e,
                )
                log_operation_error(logger=logger, error=error)
                raise error from e
            log_file_operation(logger, "delete", str(path))
            removed.append(handle.reference(path, relative=self.settings.relative_paths))

        log_operation_success(
            logger=logger,
            operation=operation,
            duration_ms=(time.perf_counter() - started) * 1000,
            result_info={"removed": len(removed)},
            context=ErrorContext(
                operation=operation,
                identifier_hash=handle.identifier_hash,
                additional_data={"cutoff": cutoff},
            ),
        )
        if removed:
            logger.info(
                "Pruned %d generation(s) of %s",
                len(removed),
                handle.identifier_hash,
            )
        return removed
