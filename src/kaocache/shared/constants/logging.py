"""Logging constants."""


class Logging:
    """Logging configuration constants."""

    ROOT_LOGGER = "kaocache"
    DEFAULT_LEVEL = "WARNING"
    CONSOLE_TIME_FORMAT = "[%H:%M:%S]"
    LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


__all__ = ["Logging"]
