"""Identifier hashing.

Turns arbitrary identifier strings (URLs, file paths, free text) into
fixed-alphabet directory names. The identifier is base64-encoded before
hashing so existing cache roots keep the same directory names.
"""

from __future__ import annotations

import base64
import hashlib
import logging
import warnings

from kaocache.shared.constants import Cache, CacheValidation
from kaocache.shared.errors import KaoCacheWarning

logger = logging.getLogger(__name__)

_VARIABLE_LENGTH_ALGORITHMS = frozenset({"shake_128", "shake_256"})


def is_supported_algorithm(algorithm: str | None) -> bool:
    """Return True if hashlib can build a digest for ``algorithm``."""
    if not algorithm or not algorithm.strip():
        return False
    try:
        hashlib.new(algorithm.strip().lower())
    except (ValueError, TypeError):
        return False
    return True


def resolve_algorithm(algorithm: str | None) -> str:
    """Normalize an algorithm name, falling back to the default digest.

    An empty or unknown name is not fatal: the default algorithm is used
    and a KaoCacheWarning is emitted.

    Args:
        algorithm: hashlib algorithm name, e.g. "md5" or "sha256"

    Returns:
        Lower-cased algorithm name that hashlib accepts
    """
    if is_supported_algorithm(algorithm):
        return algorithm.strip().lower()  # type: ignore[union-attr]

    if not algorithm or not algorithm.strip():
        message = (
            f"Hash algorithm is empty, using {Cache.DEFAULT_HASH_ALGORITHM!r}"
        )
    else:
        message = (
            f"Hash algorithm {algorithm!r} is not available, "
            f"using {Cache.DEFAULT_HASH_ALGORITHM!r}"
        )
    logger.warning(message)
    warnings.warn(message, KaoCacheWarning, stacklevel=3)
    return Cache.DEFAULT_HASH_ALGORITHM


def hash_identifier(identifier: str, algorithm: str | None = Cache.DEFAULT_HASH_ALGORITHM) -> str:
    """Hash an identifier into a directory-safe hex string.

    An empty or unknown algorithm falls back to the default digest with a
    KaoCacheWarning, as in resolve_algorithm().

    Args:
        identifier: Caller-supplied identifier
        algorithm: hashlib algorithm name

    Returns:
        Lowercase hexadecimal digest of the base64-encoded identifier

    Example:
        >>> len(hash_identifier("https://example.com", "md5"))
        32
    """
    encoded = base64.b64encode(identifier.encode("utf-8"))
    digest = hashlib.new(resolve_algorithm(algorithm), encoded)
    if digest.name in _VARIABLE_LENGTH_ALGORITHMS:
        return digest.hexdigest(CacheValidation.SHAKE_DIGEST_BYTES)  # type: ignore[call-arg]
    return digest.hexdigest()


class IdentifierHasher:
    """Hashes identifiers with one algorithm, resolved once at construction."""

    def __init__(self, algorithm: str | None = Cache.DEFAULT_HASH_ALGORITHM) -> None:
        self.algorithm = resolve_algorithm(algorithm)

    def hash(self, identifier: str) -> str:
        """Hash ``identifier`` with the configured algorithm."""
        return hash_identifier(identifier, self.algorithm)

    def __repr__(self) -> str:
        return f"IdentifierHasher(algorithm={self.algorithm!r})"
