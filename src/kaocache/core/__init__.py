"""Core cache primitives: hashing, handles, filters and pointers."""

from .filters import apply_filter
from .handle import CacheHandle
from .hasher import IdentifierHasher, hash_identifier
from .pointer import CurrentPointer, read_pointer, write_pointer

__all__ = [
    "CacheHandle",
    "CurrentPointer",
    "IdentifierHasher",
    "apply_filter",
    "hash_identifier",
    "read_pointer",
    "write_pointer",
]
