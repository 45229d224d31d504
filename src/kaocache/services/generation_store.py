"""Generation store.

Writes successive generations of an identifier's content as timestamped
files and keeps the identifier's current pointer on the newest one.

Generation file names have one-second resolution
(``YYYYMMDD-HHMMSS.<extension>``): two writes for the same identifier within
the same second produce the same name, and the second write replaces the
first one's file.
"""

from __future__ import annotations

import logging
import time
import warnings
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import Any, Callable

import orjson

from kaocache.config.models.cache_settings import CacheSettings
from kaocache.core import json_codec
from kaocache.core.filters import apply_filter
from kaocache.core.handle import CacheHandle
from kaocache.core.pointer import CurrentPointer, read_pointer, write_pointer
from kaocache.shared.constants import CacheLayout
from kaocache.shared.errors import (
    CacheCorruptedError,
    CacheSerializationError,
    ErrorCode,
    ErrorContext,
    KaoCacheWarning,
    create_io_error,
    create_not_found_error,
)
from kaocache.shared.logging import (
    log_file_operation,
    log_operation_error,
    log_operation_start,
    log_operation_success,
)
from kaocache.shared.types import DataKind, FilterStep

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class GenerationStore:
    """Writes and reads generations for cache handles.

    Args:
        settings: Cache configuration (path form, directory mode)
        clock: Returns the current local time; used for file names and
            pointer timestamps
    """

    def __init__(self, settings: CacheSettings, clock: Clock | None = None) -> None:
        self.settings = settings
        self._clock: Clock = clock or datetime.now

    def write(
        self,
        handle: CacheHandle,
        content: Any,
        filter: Sequence[FilterStep] | None = None,  # noqa: A002
    ) -> Path:
        """Store ``content`` as a new generation and point the pointer at it.

        Args:
            handle: Target identifier
            content: Bytes or text for plain kinds, a JSON-serializable value
                for STRUCTURED_JSON, JSON text for STRUCTURED_FROM_JSON_STRING
            filter: Keys and indices selecting a sub-value of structured
                content before storage

        Returns:
            Path of the written generation, relative to the cache root or
            absolute depending on ``settings.return_path_type``

        Raises:
            CacheSerializationError: If content does not fit the data kind
            CacheIOError: If the directory, generation or pointer cannot be
                written. A failed generation write leaves the pointer as is.
        """
        operation = "write_generation"
        context = ErrorContext(
            operation=operation,
            identifier_hash=handle.identifier_hash,
            additional_data={"data_kind": handle.data_kind},
        )
        log_operation_start(logger, operation, context)
        started = time.perf_counter()

        payload = self._serialize(handle, content, filter)

        now = self._clock()
        file_name = f"{now.strftime(CacheLayout.TIMESTAMP_FORMAT)}.{handle.data_kind.extension}"
        generation_path = handle.generation_path(file_name)

        self._ensure_generation_dir(handle)

        try:
            generation_path.write_bytes(payload)
        except OSError as e:
            error = create_io_error(
                f"Failed to write generation {file_name}: {e!s}",
                generation_path,
                code=ErrorCode.FILE_WRITE_ERROR,
                operation=operation,
                identifier_hash=handle.identifier_hash,
                original_error=e,
            )
            log_operation_error(logger=logger, error=error)
            raise error from e
        log_file_operation(logger, "write", str(generation_path))

        write_pointer(
            handle,
            CurrentPointer.for_generation(handle, file_name, int(now.timestamp())),
        )

        log_operation_success(
            logger=logger,
            operation=operation,
            duration_ms=(time.perf_counter() - started) * 1000,
            result_info={"file": file_name, "size": len(payload)},
            context=context,
        )
        return handle.reference(generation_path, relative=self.settings.relative_paths)

    def write_from_file(
        self,
        handle: CacheHandle,
        source: str | Path,
        filter: Sequence[FilterStep] | None = None,  # noqa: A002
    ) -> Path:
        """Store the contents of a local file as a new generation.

        For STRUCTURED_JSON the file must hold JSON text; it is decoded and
        stored like an in-memory value.

        Raises:
            CacheNotFoundError: If ``source`` does not exist
            CacheIOError: If ``source`` cannot be read
            CacheSerializationError: If the file is not valid JSON for a
                structured kind
        """
        source_path = Path(source)
        try:
            raw = source_path.read_bytes()
        except FileNotFoundError as e:
            error = create_not_found_error(
                f"Source file not found: {source_path}",
                source_path,
                operation="write_from_file",
                identifier_hash=handle.identifier_hash,
                original_error=e,
            )
            log_operation_error(logger=logger, error=error)
            raise error from e
        except OSError as e:
            error = create_io_error(
                f"Failed to read source file: {e!s}",
                source_path,
                code=ErrorCode.FILE_READ_ERROR,
                operation="write_from_file",
                identifier_hash=handle.identifier_hash,
                original_error=e,
            )
            log_operation_error(logger=logger, error=error)
            raise error from e

        content: Any = raw
        if handle.data_kind is DataKind.STRUCTURED_JSON:
            content = self._decode_json(handle, raw, "write_from_file")
        return self.write(handle, content, filter)

    def read_latest(self, handle: CacheHandle) -> Any:
        """Load and decode the generation named by the current pointer.

        Returns:
            ``bytes`` for RAW_BYTES, ``str`` for TEXT, the decoded JSON value
            for structured kinds

        Raises:
            CacheNotFoundError: If there is no pointer, or the generation it
                names no longer exists
            CacheCorruptedError: If the pointer or the generation cannot be
                decoded
            CacheIOError: If the generation cannot be read
        """
        operation = "read_latest"
        pointer = read_pointer(handle)
        generation_path = handle.generation_path(pointer.file)

        if pointer.data_type is not handle.data_kind:
            logger.warning(
                "Generation %s was written as %s but is read as %s",
                pointer.file,
                pointer.data_type.value,
                handle.data_kind.value,
            )

        if not generation_path.is_file():
            error = create_not_found_error(
                f"Current pointer names missing generation {pointer.file}",
                generation_path,
                operation=operation,
                identifier_hash=handle.identifier_hash,
            )
            log_operation_error(logger=logger, error=error)
            raise error

        try:
            raw = generation_path.read_bytes()
        except OSError as e:
            error = create_io_error(
                f"Failed to read generation {pointer.file}: {e!s}",
                generation_path,
                code=ErrorCode.FILE_READ_ERROR,
                operation=operation,
                identifier_hash=handle.identifier_hash,
                original_error=e,
            )
            log_operation_error(logger=logger, error=error)
            raise error from e

        return self._deserialize(handle, raw, generation_path)

    def list_generations(self, handle: CacheHandle) -> list[str]:
        """Return the generation file names of ``handle``, oldest first.

        An identifier without a generation directory has no generations.
        """
        generation_dir = handle.generation_dir
        if not generation_dir.is_dir():
            return []
        return sorted(entry.name for entry in generation_dir.iterdir() if entry.is_file())

    def _ensure_generation_dir(self, handle: CacheHandle) -> None:
        try:
            handle.generation_dir.mkdir(
                mode=self.settings.dir_mode,
                parents=True,
                exist_ok=True,
            )
        except OSError as e:
            error = create_io_error(
                f"Failed to create generation directory: {e!s}",
                handle.generation_dir,
                code=ErrorCode.DIRECTORY_CREATION_FAILED,
                operation="write_generation",
                identifier_hash=handle.identifier_hash,
                original_error=e,
            )
            log_operation_error(logger=logger, error=error)
            raise error from e

    def _serialize(
        self,
        handle: CacheHandle,
        content: Any,
        steps: Sequence[FilterStep] | None,
    ) -> bytes:
        kind = handle.data_kind

        if not kind.is_structured:
            if steps:
                message = f"Filter ignored for non-structured data kind {kind.value}"
                logger.warning(message)
                warnings.warn(message, KaoCacheWarning, stacklevel=3)
            return self._encode_plain(handle, content)

        if kind is DataKind.STRUCTURED_FROM_JSON_STRING:
            if not isinstance(content, (str, bytes, bytearray, memoryview)):
                raise self._serialization_error(
                    handle,
                    f"Expected JSON text, got {type(content).__name__}",
                )
            content = self._decode_json(handle, content, "write_generation")

        value = apply_filter(content, steps)
        try:
            return json_codec.dumps(value)
        except orjson.JSONEncodeError as e:
            raise self._serialization_error(
                handle,
                f"Content is not JSON-serializable: {e!s}",
                e,
            ) from e

    def _encode_plain(self, handle: CacheHandle, content: Any) -> bytes:
        if handle.data_kind is DataKind.RAW_BYTES:
            if isinstance(content, (bytes, bytearray, memoryview)):
                return bytes(content)
            if isinstance(content, str):
                return content.encode("utf-8")
            raise self._serialization_error(
                handle,
                f"Expected bytes or str, got {type(content).__name__}",
            )

        if isinstance(content, (bytes, bytearray, memoryview)):
            try:
                content = bytes(content).decode("utf-8")
            except UnicodeDecodeError as e:
                raise self._serialization_error(
                    handle,
                    f"Text content is not valid UTF-8: {e!s}",
                    e,
                ) from e
        return str(content).encode("utf-8")

    def _decode_json(self, handle: CacheHandle, raw: Any, operation: str) -> Any:
        if isinstance(raw, memoryview):
            raw = bytes(raw)
        try:
            return json_codec.loads(raw)
        except (orjson.JSONDecodeError, json_codec.IntegerRangeError) as e:
            raise self._serialization_error(
                handle,
                f"Content is not valid JSON: {e!s}",
                e,
                operation=operation,
            ) from e

    def _deserialize(self, handle: CacheHandle, raw: bytes, path: Path) -> Any:
        kind = handle.data_kind
        try:
            if kind.is_structured:
                return json_codec.loads(raw)
            if kind is DataKind.TEXT:
                return raw.decode("utf-8")
        except (orjson.JSONDecodeError, json_codec.IntegerRangeError, UnicodeDecodeError) as e:
            error = CacheCorruptedError(
                ErrorCode.CACHE_CORRUPTED,
                f"Generation {path.name} cannot be decoded as {kind.value}: {e!s}",
                ErrorContext(
                    file_path=str(path),
                    operation="read_latest",
                    identifier_hash=handle.identifier_hash,
                    additional_data={"data_kind": kind, "file_size": len(raw)},
                ),
                original_error=e,
            )
            log_operation_error(logger=logger, error=error)
            raise error from e
        return raw

    def _serialization_error(
        self,
        handle: CacheHandle,
        message: str,
        original_error: Exception | None = None,
        operation: str = "write_generation",
    ) -> CacheSerializationError:
        error = CacheSerializationError(
            ErrorCode.CACHE_SERIALIZATION_ERROR,
            message,
            ErrorContext(
                operation=operation,
                identifier_hash=handle.identifier_hash,
                additional_data={"data_kind": handle.data_kind},
            ),
            original_error=original_error,
        )
        log_operation_error(logger=logger, error=error)
        return error
