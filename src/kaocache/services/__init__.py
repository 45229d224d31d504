"""Cache services: generation store, retention sweeper, eraser and facade."""

from .cache_store import CacheStore
from .eraser import IdentifierEraser
from .generation_store import GenerationStore
from .retention import RetentionSweeper

__all__ = [
    "CacheStore",
    "GenerationStore",
    "IdentifierEraser",
    "RetentionSweeper",
]
