"""
KaoCache - per-identifier generational file cache

Stores successive generations of content for string identifiers as
timestamped files and tracks the newest one through a small pointer file.
"""

__version__ = "1.0.0"

from .config import CacheSettings, Settings, load_settings
from .core import CacheHandle, CurrentPointer, IdentifierHasher, hash_identifier
from .services import CacheStore
from .shared.errors import (
    CacheCorruptedError,
    CacheIOError,
    CacheNotFoundError,
    CacheSerializationError,
    ConfigInvalidError,
    DataKindInvalidError,
    KaoCacheError,
    KaoCacheWarning,
    PathInvalidError,
)
from .shared.types import DataKind

__all__ = [
    "CacheCorruptedError",
    "CacheHandle",
    "CacheIOError",
    "CacheNotFoundError",
    "CacheSerializationError",
    "CacheSettings",
    "CacheStore",
    "ConfigInvalidError",
    "CurrentPointer",
    "DataKind",
    "DataKindInvalidError",
    "IdentifierHasher",
    "KaoCacheError",
    "KaoCacheWarning",
    "PathInvalidError",
    "Settings",
    "hash_identifier",
    "load_settings",
]
