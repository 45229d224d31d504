"""
Cache Configuration Constants

On-disk layout and configuration defaults of the generation store.
Changing any of the layout values breaks compatibility with existing
cache directories.
"""

# Base time units
BASE_SECOND = 1
BASE_MINUTE = 60 * BASE_SECOND
BASE_HOUR = 60 * BASE_MINUTE
BASE_DAY = 24 * BASE_HOUR


class Cache:
    """Configuration defaults."""

    DEFAULT_ROOT_DIR = "cache"
    DEFAULT_HASH_ALGORITHM = "md5"
    DEFAULT_DIR_MODE = 0o750
    DEFAULT_PRUNE_AGE = BASE_DAY

    RETURN_PATH_ABSOLUTE = "absolute"
    RETURN_PATH_RELATIVE = "relative"
    RETURN_PATH_TYPES = (RETURN_PATH_ABSOLUTE, RETURN_PATH_RELATIVE)

    ENV_PREFIX = "KAOCACHE_"


class CacheLayout:
    """File and directory naming of a cache root."""

    FILES_DIR = "files"
    POINTER_SUFFIX = "_current.json"
    TEMP_SUFFIX = ".tmp"

    # One-second resolution: same-second writes share a file name
    TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"

    EXTENSION_PLAIN = "cache"
    EXTENSION_JSON = "json.cache"


class CacheValidation:
    """Validation thresholds."""

    MIN_DIR_MODE = 0o700
    MAX_DIR_MODE = 0o777

    # Digest length for variable-length algorithms (shake_128, shake_256)
    SHAKE_DIGEST_BYTES = 32
