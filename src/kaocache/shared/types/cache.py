"""
Cache-related Type Definitions

The closed set of data kinds a cache handle can be bound to, and the
aliases used by filters and pointers.
"""

from __future__ import annotations

from enum import Enum
from typing import Union

from kaocache.shared.constants import CacheLayout
from kaocache.shared.errors import DataKindInvalidError, ErrorCode, ErrorContext

FilterStep = Union[str, int]
Timestamp = int  # Unix seconds


class DataKind(str, Enum):
    """Logical shape of cached content.

    The kind decides how content is serialized on write, how it is decoded
    on read, and which file extension its generations use.
    """

    RAW_BYTES = "raw_bytes"
    TEXT = "text"
    STRUCTURED_JSON = "structured_json"
    STRUCTURED_FROM_JSON_STRING = "structured_from_json_string"

    @property
    def is_structured(self) -> bool:
        """True for kinds stored as JSON documents."""
        return self in (DataKind.STRUCTURED_JSON, DataKind.STRUCTURED_FROM_JSON_STRING)

    @property
    def extension(self) -> str:
        """Generation file extension for this kind."""
        if self.is_structured:
            return CacheLayout.EXTENSION_JSON
        return CacheLayout.EXTENSION_PLAIN

    @classmethod
    def parse(cls, value: DataKind | str) -> DataKind:
        """Resolve an enum member or its string value.

        Args:
            value: A DataKind or one of its values (case-insensitive)

        Returns:
            The matching DataKind

        Raises:
            DataKindInvalidError: If value does not name a supported kind
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        supported = ", ".join(kind.value for kind in cls)
        raise DataKindInvalidError(
            ErrorCode.DATA_KIND_INVALID,
            f"Unsupported data kind {value!r}. Must be one of: {supported}",
            ErrorContext(
                operation="parse_data_kind",
                additional_data={"data_kind": str(value)},
            ),
        )
