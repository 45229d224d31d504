"""Type definitions shared across KaoCache."""

from .cache import DataKind, FilterStep, Timestamp

__all__ = ["DataKind", "FilterStep", "Timestamp"]
