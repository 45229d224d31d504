"""Cache configuration model.

This module contains the configuration of a cache root: where it lives,
how identifiers are hashed, how paths are returned and which permission
mode new directories get. Recoverable mistakes fall back to a safe value
with a KaoCacheWarning instead of failing.
"""

from __future__ import annotations

import logging
import warnings
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from kaocache.core.hasher import resolve_algorithm
from kaocache.shared.constants import Cache, CacheValidation
from kaocache.shared.errors import KaoCacheWarning

logger = logging.getLogger(__name__)


def _warn(message: str) -> None:
    logger.warning(message)
    warnings.warn(message, KaoCacheWarning, stacklevel=4)


class CacheSettings(BaseModel):
    """Cache root configuration.

    Instances are immutable; a store keeps the value it was built with.
    """

    model_config = ConfigDict(frozen=True)

    root_dir: Path = Field(
        default=Path(Cache.DEFAULT_ROOT_DIR),
        validate_default=True,
        description="Cache root directory (absolute after validation)",
    )
    hash_algorithm: str = Field(
        default=Cache.DEFAULT_HASH_ALGORITHM,
        description="hashlib algorithm used to hash identifiers",
    )
    return_path_type: Literal["absolute", "relative"] = Field(
        default=Cache.RETURN_PATH_ABSOLUTE,
        description="Form of paths returned by write, prune and erase",
    )
    dir_mode: int = Field(
        default=Cache.DEFAULT_DIR_MODE,
        description="Permission mode for created generation directories",
    )

    @field_validator("root_dir", mode="before")
    @classmethod
    def validate_root_dir(cls, v: Any) -> Path:
        """Expand and absolutize the root path."""
        if v is None or (isinstance(v, str) and not v.strip()):
            v = Cache.DEFAULT_ROOT_DIR
        return Path(v).expanduser().resolve()

    @field_validator("hash_algorithm", mode="before")
    @classmethod
    def validate_hash_algorithm(cls, v: Any) -> str:
        """Fall back to the default digest for empty or unknown names."""
        return resolve_algorithm(v if isinstance(v, str) else None)

    @field_validator("return_path_type", mode="before")
    @classmethod
    def validate_return_path_type(cls, v: Any) -> str:
        """Fall back to absolute paths for unknown values."""
        normalized = v.strip().lower() if isinstance(v, str) else v
        if normalized in Cache.RETURN_PATH_TYPES:
            return normalized
        _warn(
            f"return_path_type {v!r} is invalid, "
            f"using {Cache.RETURN_PATH_ABSOLUTE!r} paths",
        )
        return Cache.RETURN_PATH_ABSOLUTE

    @field_validator("dir_mode", mode="before")
    @classmethod
    def validate_dir_mode(cls, v: Any) -> int:
        """Accept octal strings; warn (but keep) modes outside the sane range."""
        if isinstance(v, str):
            text = v.strip().lower().removeprefix("0o")
            try:
                v = int(text, 8)
            except ValueError as e:
                msg = f"dir_mode {v!r} is not an octal permission mode"
                raise ValueError(msg) from e
        if isinstance(v, bool) or not isinstance(v, int):
            msg = f"dir_mode must be an integer, got {type(v).__name__}"
            raise ValueError(msg)
        if not CacheValidation.MIN_DIR_MODE <= v <= CacheValidation.MAX_DIR_MODE:
            _warn(
                f"dir_mode {oct(v)} is outside "
                f"{oct(CacheValidation.MIN_DIR_MODE)}-{oct(CacheValidation.MAX_DIR_MODE)}",
            )
        return v

    @property
    def relative_paths(self) -> bool:
        """True when returned paths are relative to the cache root."""
        return self.return_path_type == Cache.RETURN_PATH_RELATIVE


__all__ = ["CacheSettings"]
