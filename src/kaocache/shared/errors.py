"""KaoCache Error Handling Module

This module defines the error handling system for KaoCache, providing
structured error classes with context information and user-friendly messages.

The error hierarchy follows these principles:
- One Source of Truth: All error codes are defined in ErrorCode enum
- Structured Context: ErrorContext provides additional information
- Typed Failures: Each failure kind of the store has its own class
- Proper Exception Chaining: Original exceptions are preserved
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Union

# Type alias for primitive context values (str, int, float, bool only)
PrimitiveContextValue = Union[str, int, float, bool]

# Default keys to mask in safe_dict
SAFE_DICT_MASK_KEYS: tuple[str, ...] = ("identifier",)


class ErrorCode(str, Enum):
    """Error codes for KaoCache.

    This enum serves as the single source of truth for all error codes
    used throughout the package.
    """

    # File System Errors
    INVALID_PATH = "INVALID_PATH"
    DIRECTORY_CREATION_FAILED = "DIRECTORY_CREATION_FAILED"
    FILE_READ_ERROR = "FILE_READ_ERROR"
    FILE_WRITE_ERROR = "FILE_WRITE_ERROR"
    FILE_DELETE_ERROR = "FILE_DELETE_ERROR"
    DIRECTORY_LIST_ERROR = "DIRECTORY_LIST_ERROR"

    # Cache Errors
    CACHE_NOT_FOUND = "CACHE_NOT_FOUND"
    CACHE_CORRUPTED = "CACHE_CORRUPTED"
    CACHE_SERIALIZATION_ERROR = "CACHE_SERIALIZATION_ERROR"

    # Validation Errors
    DATA_KIND_INVALID = "DATA_KIND_INVALID"

    # Configuration Errors
    CONFIG_INVALID = "CONFIG_INVALID"
    CONFIG_MISSING = "CONFIG_MISSING"

    # CLI Errors
    CLI_INVALID_ARGUMENTS = "CLI_INVALID_ARGUMENTS"
    CLI_UNEXPECTED_ERROR = "CLI_UNEXPECTED_ERROR"


def _coerce_primitives(value: Any | None) -> dict[str, PrimitiveContextValue] | None:
    """Coerce additional_data values to primitives.

    Converts Path, Enum, Decimal to primitive types.

    Args:
        value: Input dictionary or None

    Returns:
        Dictionary with primitive values only, or None

    Raises:
        TypeError: If value is not a dict or contains unconvertible types
    """
    if value is None:
        return None

    if not isinstance(value, dict):
        error_msg = f"additional_data must be dict, got {type(value).__name__}"
        raise TypeError(error_msg)

    coerced: dict[str, PrimitiveContextValue] = {}
    for key, val in value.items():
        if isinstance(val, (str, int, float, bool)):
            coerced[key] = val
        elif isinstance(val, Path):
            coerced[key] = str(val)
        elif isinstance(val, Enum):
            coerced[key] = val.value
        elif isinstance(val, Decimal):
            coerced[key] = float(val)
        else:
            error_msg = (
                f"Cannot coerce {type(val).__name__} to primitive type. "
                f"Only str, int, float, bool, Path, Enum, Decimal are allowed."
            )
            raise TypeError(error_msg)

    return coerced


@dataclass(frozen=True)
class ErrorContextModel:
    """Context information for errors.

    Only primitive types (str, int, float, bool) are allowed in
    additional_data so that contexts can always be logged as JSON.

    Attributes:
        file_path: Optional file path associated with the error
        operation: Optional operation name that caused the error
        identifier_hash: Optional hash of the identifier being operated on
        additional_data: Optional dict with primitive values only
    """

    file_path: str | None = None
    operation: str | None = None
    identifier_hash: str | None = None
    additional_data: dict[str, PrimitiveContextValue] | None = None

    def __post_init__(self) -> None:
        """Post-initialization validation and coercion."""
        if self.file_path is not None and not isinstance(self.file_path, str):
            object.__setattr__(self, "file_path", str(self.file_path))
        if self.additional_data is not None:
            coerced = _coerce_primitives(self.additional_data)
            object.__setattr__(self, "additional_data", coerced)

    def safe_dict(self, *, mask_keys: tuple[str, ...] | None = None) -> dict[str, Any]:
        """Export context as dict, dropping masked keys from additional_data.

        Raw identifiers may carry URLs with credentials, so they are masked
        by default; the identifier hash is always safe to log.

        Args:
            mask_keys: Keys to exclude from output. Defaults to SAFE_DICT_MASK_KEYS.

        Returns:
            Dictionary with a guaranteed additional_data key.

        Example:
            >>> context = ErrorContextModel(operation="write", additional_data={"identifier": "x"})
            >>> context.safe_dict()
            {'operation': 'write', 'additional_data': {}}
        """
        if mask_keys is None:
            mask_keys = SAFE_DICT_MASK_KEYS

        data: dict[str, Any] = {}
        if self.file_path is not None and "file_path" not in mask_keys:
            data["file_path"] = self.file_path
        if self.operation is not None and "operation" not in mask_keys:
            data["operation"] = self.operation
        if self.identifier_hash is not None and "identifier_hash" not in mask_keys:
            data["identifier_hash"] = self.identifier_hash

        if self.additional_data is not None:
            data["additional_data"] = {
                key: val for key, val in self.additional_data.items() if key not in mask_keys
            }
        else:
            data["additional_data"] = {}

        return data


ErrorContext = ErrorContextModel


class KaoCacheWarning(UserWarning):
    """Warning category for recoverable misconfiguration and lossy writes."""


class KaoCacheError(Exception):
    """Base exception class for all KaoCache errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize KaoCacheError.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            context: Additional context information
            original_error: Original exception that caused this error
        """
        self.code = code
        self.message = message
        self.context = context or ErrorContext()
        self.original_error = original_error

        formatted_message = f"{code.value}: {message}"
        super().__init__(formatted_message)

    def __str__(self) -> str:
        """Return string representation of the error."""
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging.

        Returns:
            Dictionary representation of the error with code, message,
            masked context, and original_error (if present)
        """
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context.safe_dict(),
            "original_error": str(self.original_error) if self.original_error else None,
        }


class DomainError(KaoCacheError):
    """Domain-specific errors.

    Raised when cache rules are violated, e.g. an unsupported data kind
    or content that cannot be serialized for its kind.
    """


class InfrastructureError(KaoCacheError):
    """Infrastructure-related errors.

    Raised when interacting with the file system fails or the on-disk
    state does not match what an operation needs.
    """


class ApplicationError(KaoCacheError):
    """Application-level errors (configuration, command handling)."""


class ConfigInvalidError(ApplicationError):
    """Configuration that has no safe fallback, e.g. an unusable cache root."""


class DataKindInvalidError(DomainError):
    """Unsupported data kind requested for a cache handle."""


class CacheSerializationError(DomainError):
    """Content could not be encoded or decoded for its data kind."""


class CacheNotFoundError(InfrastructureError):
    """Pointer, generation file or generation directory is missing."""


class PathInvalidError(InfrastructureError):
    """Path exists with the wrong type (file where a directory is expected)."""


class CacheIOError(InfrastructureError):
    """Underlying read, write, listdir or delete failure."""


class CacheCorruptedError(CacheIOError):
    """Pointer file exists but does not hold a valid pointer document."""


def create_not_found_error(
    message: str,
    file_path: str | Path,
    operation: str | None = None,
    identifier_hash: str | None = None,
    original_error: Exception | None = None,
) -> CacheNotFoundError:
    """Create a not found error with context."""
    context = ErrorContext(
        file_path=str(file_path),
        operation=operation,
        identifier_hash=identifier_hash,
    )
    return CacheNotFoundError(
        ErrorCode.CACHE_NOT_FOUND,
        message,
        context,
        original_error,
    )


def create_io_error(
    message: str,
    file_path: str | Path,
    code: ErrorCode = ErrorCode.FILE_WRITE_ERROR,
    operation: str | None = None,
    identifier_hash: str | None = None,
    original_error: Exception | None = None,
) -> CacheIOError:
    """Create an I/O error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"io_error": str(original_error)} if original_error else None
    )
    context = ErrorContext(
        file_path=str(file_path),
        operation=operation,
        identifier_hash=identifier_hash,
        additional_data=additional_data,
    )
    return CacheIOError(
        code,
        message,
        context,
        original_error,
    )


def create_config_error(
    message: str,
    config_key: str | None = None,
    operation: str | None = None,
    original_error: Exception | None = None,
) -> ConfigInvalidError:
    """Create a configuration error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"config_key": config_key} if config_key else None
    )
    context = ErrorContext(
        operation=operation,
        additional_data=additional_data,
    )
    return ConfigInvalidError(
        ErrorCode.CONFIG_INVALID,
        message,
        context,
        original_error,
    )


class CliError(ApplicationError):
    """CLI-specific error with an exit code for command-line operations."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
        command: str | None = None,
        exit_code: int = 1,
    ):
        super().__init__(code, message, context, original_error)
        self.command = command
        self.exit_code = exit_code


def create_cli_error(
    message: str,
    command: str | None = None,
    code: ErrorCode = ErrorCode.CLI_UNEXPECTED_ERROR,
    original_error: Exception | None = None,
    exit_code: int = 1,
) -> CliError:
    """Create a CLI error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"command": command} if command else None
    )
    context = ErrorContext(
        operation="cli",
        additional_data=additional_data,
    )
    return CliError(
        code,
        message,
        context,
        original_error,
        command,
        exit_code,
    )
