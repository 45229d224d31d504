"""Full teardown of an identifier.

Erasing collects the whole tree first (files and directories in two
separate lists), then deletes every file and finally the directories,
deepest first. A failure partway leaves a partially erased tree behind.
"""

from __future__ import annotations

import logging
import os
import time
from pathlib import Path

from kaocache.config.models.cache_settings import CacheSettings
from kaocache.core.handle import CacheHandle
from kaocache.shared.errors import (
    ErrorCode,
    ErrorContext,
    PathInvalidError,
    create_io_error,
)
from kaocache.shared.logging import (
    log_file_operation,
    log_operation_error,
    log_operation_success,
)

logger = logging.getLogger(__name__)


class IdentifierEraser:
    """Removes every generation of an identifier and its pointer."""

    def __init__(self, settings: CacheSettings) -> None:
        self.settings = settings

    def erase_all(self, handle: CacheHandle) -> list[Path]:
        """Delete the identifier's generation tree and current pointer.

        Returns:
            Removed file paths, the pointer file first, relative to the
            cache root or absolute depending on configuration

        Raises:
            PathInvalidError: If the generation directory is missing, is a
                symlink or is not a directory; nothing is deleted in that case
            CacheIOError: If the tree cannot be walked or an entry cannot
                be deleted
        """
        operation = "erase_all"
        started = time.perf_counter()
        generation_dir = handle.generation_dir

        # A symlink would lead the walk outside the cache root
        if generation_dir.is_symlink() or not generation_dir.is_dir():
            error = PathInvalidError(
                ErrorCode.INVALID_PATH,
                f"Generation path is not a real directory: {generation_dir}",
                ErrorContext(
                    file_path=str(generation_dir),
                    operation=operation,
                    identifier_hash=handle.identifier_hash,
                    additional_data={
                        "exists": generation_dir.exists(),
                        "is_symlink": generation_dir.is_symlink(),
                    },
                ),
            )
            log_operation_error(logger=logger, error=error)
            raise error

        files, directories = self._collect(handle)

        for path in files:
            try:
                path.unlink()
            except OSError as e:
                self._raise_delete_error(handle, path, e)
            log_file_operation(logger, "delete", str(path))

        # Deepest first so every directory is empty when removed
        for directory in sorted(directories, key=lambda d: len(d.parts), reverse=True):
            try:
                directory.rmdir()
            except OSError as e:
                self._raise_delete_error(handle, directory, e)
            log_file_operation(logger, "rmdir", str(directory))

        log_operation_success(
            logger=logger,
            operation=operation,
            duration_ms=(time.perf_counter() - started) * 1000,
            result_info={"files": len(files), "directories": len(directories)},
            context=ErrorContext(operation=operation, identifier_hash=handle.identifier_hash),
        )
        logger.info(
            "Erased %s (%d file(s), %d director(ies))",
            handle.identifier_hash,
            len(files),
            len(directories),
        )
        relative = self.settings.relative_paths
        return [handle.reference(path, relative=relative) for path in files]

    def _collect(self, handle: CacheHandle) -> tuple[list[Path], list[Path]]:
        files: list[Path] = []
        if handle.pointer_path.is_file():
            files.append(handle.pointer_path)
        directories: list[Path] = [handle.generation_dir]

        def _on_error(e: OSError) -> None:
            error = create_io_error(
                f"Failed to walk generation directory: {e!s}",
                e.filename or handle.generation_dir,
                code=ErrorCode.DIRECTORY_LIST_ERROR,
                operation="erase_all",
                identifier_hash=handle.identifier_hash,
                original_error=e,
            )
            log_operation_error(logger=logger, error=error)
            raise error from e

        for dirpath, dirnames, filenames in os.walk(handle.generation_dir, onerror=_on_error):
            current = Path(dirpath)
            for name in sorted(filenames):
                files.append(current / name)
            for name in sorted(dirnames):
                subdir = current / name
                # Symlinked directories are unlinked, not descended into
                if subdir.is_symlink():
                    files.append(subdir)
                else:
                    directories.append(subdir)
        return files, directories

    def _raise_delete_error(self, handle: CacheHandle, path: Path, e: OSError) -> None:
        error = create_io_error(
            f"Failed to delete {path}: {e!s}",
            path,
            code=ErrorCode.FILE_DELETE_ERROR,
            operation="erase_all",
            identifier_hash=handle.identifier_hash,
            original_error=e,
        )
        log_operation_error(logger=logger, error=error)
        raise error from e
