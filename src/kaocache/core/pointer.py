"""Current-pointer metadata.

Each identifier has one ``<hash>_current.json`` file in the cache root that
names its most recently written generation. The file is replaced by
rename, so readers see either the previous or the new pointer, never a
partially written one.
"""

from __future__ import annotations

import contextlib
import logging
import os

import orjson
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from kaocache.core.handle import CacheHandle
from kaocache.shared.constants import CacheLayout
from kaocache.shared.errors import (
    CacheCorruptedError,
    ErrorCode,
    ErrorContext,
    create_io_error,
    create_not_found_error,
)
from kaocache.shared.logging import log_operation_error
from kaocache.shared.types import DataKind, Timestamp

logger = logging.getLogger(__name__)


class CurrentPointer(BaseModel):
    """Metadata record naming the latest generation of an identifier.

    Attributes:
        file: Generation file name, e.g. ``20240101-120000.json.cache``
        path: ``<identifier_hash>/<file>``, relative to ``<root>/files``
        data_type: Data kind the generation was written with
        extension: Generation file extension
        timestamp: Unix seconds at which the generation was written
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "file": "20240101-120000.json.cache",
                "path": "0cc175b9c0f1b6a831c399e269772661/20240101-120000.json.cache",
                "dataType": "structured_json",
                "extension": "json.cache",
                "timestamp": 1704110400,
            },
        },
    )

    file: str = Field(..., description="Generation file name")
    path: str = Field(..., description="Generation path relative to the files directory")
    data_type: DataKind = Field(..., alias="dataType", description="Data kind")
    extension: str = Field(..., description="Generation file extension")
    timestamp: Timestamp = Field(..., ge=0, description="Creation time in Unix seconds")

    @classmethod
    def for_generation(
        cls,
        handle: CacheHandle,
        file_name: str,
        timestamp: int,
    ) -> CurrentPointer:
        """Build the pointer for a generation just written under ``handle``."""
        return cls(
            file=file_name,
            path=f"{handle.identifier_hash}/{file_name}",
            data_type=handle.data_kind,
            extension=handle.data_kind.extension,
            timestamp=timestamp,
        )

    def to_json(self) -> bytes:
        """Serialize with the on-disk key names."""
        return orjson.dumps(self.model_dump(mode="json", by_alias=True))


def read_pointer(handle: CacheHandle) -> CurrentPointer:
    """Load the current pointer of ``handle``.

    Raises:
        CacheNotFoundError: If the identifier was never written or was erased
        CacheCorruptedError: If the file is not a valid pointer document or
            names a file outside the generation directory
        CacheIOError: If the file cannot be read
    """
    pointer_path = handle.pointer_path
    operation = "read_pointer"

    if not pointer_path.is_file():
        error = create_not_found_error(
            f"No current pointer for identifier hash {handle.identifier_hash}",
            pointer_path,
            operation=operation,
            identifier_hash=handle.identifier_hash,
        )
        log_operation_error(logger=logger, error=error)
        raise error

    try:
        raw = pointer_path.read_bytes()
    except OSError as e:
        error = create_io_error(
            f"Failed to read pointer file: {e!s}",
            pointer_path,
            code=ErrorCode.FILE_READ_ERROR,
            operation=operation,
            identifier_hash=handle.identifier_hash,
            original_error=e,
        )
        log_operation_error(logger=logger, error=error)
        raise error from e

    try:
        pointer = CurrentPointer.model_validate(orjson.loads(raw))
    except (orjson.JSONDecodeError, ValidationError) as e:
        error = CacheCorruptedError(
            ErrorCode.CACHE_CORRUPTED,
            f"Pointer file is corrupted: {e!s}",
            ErrorContext(
                file_path=str(pointer_path),
                operation=operation,
                identifier_hash=handle.identifier_hash,
                additional_data={"file_size": len(raw)},
            ),
            original_error=e,
        )
        log_operation_error(logger=logger, error=error)
        raise error from e

    if not _names_own_generation(handle, pointer):
        error = CacheCorruptedError(
            ErrorCode.CACHE_CORRUPTED,
            f"Pointer names a file outside its generation directory: {pointer.path!r}",
            ErrorContext(
                file_path=str(pointer_path),
                operation=operation,
                identifier_hash=handle.identifier_hash,
                additional_data={"pointer_file": pointer.file, "pointer_path": pointer.path},
            ),
        )
        log_operation_error(logger=logger, error=error)
        raise error
    return pointer


def _names_own_generation(handle: CacheHandle, pointer: CurrentPointer) -> bool:
    """Whether the pointer names a plain file inside the handle's generation directory."""
    name = pointer.file
    if name in ("", ".", "..") or "/" in name or "\\" in name:
        return False
    return pointer.path == f"{handle.identifier_hash}/{name}"


def write_pointer(handle: CacheHandle, pointer: CurrentPointer) -> None:
    """Atomically replace the current pointer of ``handle``.

    Raises:
        CacheIOError: If the pointer cannot be written
    """
    pointer_path = handle.pointer_path
    temp_path = pointer_path.with_name(pointer_path.name + CacheLayout.TEMP_SUFFIX)

    try:
        temp_path.write_bytes(pointer.to_json())
        os.replace(temp_path, pointer_path)
    except OSError as e:
        with contextlib.suppress(OSError):
            temp_path.unlink(missing_ok=True)
        error = create_io_error(
            f"Failed to write pointer file: {e!s}",
            pointer_path,
            code=ErrorCode.FILE_WRITE_ERROR,
            operation="write_pointer",
            identifier_hash=handle.identifier_hash,
            original_error=e,
        )
        log_operation_error(logger=logger, error=error)
        raise error from e

    logger.debug(
        "Pointer for %s now names %s",
        handle.identifier_hash,
        pointer.file,
    )
