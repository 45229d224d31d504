"""Navigation into structured values before they are cached."""

from __future__ import annotations

import logging
import warnings
from collections.abc import Mapping, Sequence
from typing import Any

from kaocache.shared.errors import KaoCacheWarning
from kaocache.shared.types import FilterStep

logger = logging.getLogger(__name__)


class _Missing:
    pass


MISSING = _Missing()


def _step_into(value: Any, step: FilterStep) -> Any:
    if isinstance(value, Mapping):
        if step in value:
            return value[step]
        # JSON object keys are always strings
        if isinstance(step, int) and str(step) in value:
            return value[str(step)]
        return MISSING

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        if isinstance(step, bool):
            return MISSING
        index = step
        if isinstance(step, str):
            if not step.isdigit():
                return MISSING
            index = int(step)
        if 0 <= index < len(value):
            return value[index]
        return MISSING

    return MISSING


def apply_filter(value: Any, steps: Sequence[FilterStep] | None) -> Any:
    """Resolve ``steps`` against a structured value.

    Each step is a mapping key or a sequence index, applied in order. When
    a step cannot be resolved the result is empty (``None``) and a
    KaoCacheWarning is emitted; the caller still stores the empty result.

    Args:
        value: Decoded JSON value
        steps: Keys and indices to descend through

    Returns:
        The selected sub-value, or None if any step is missing

    Example:
        >>> apply_filter({"items": [{"a": 1}]}, ["items", 0, "a"])
        1
    """
    if not steps:
        return value

    current = value
    for position, step in enumerate(steps):
        current = _step_into(current, step)
        if current is MISSING:
            message = (
                f"Filter step {step!r} (position {position}) not found, "
                "storing an empty result"
            )
            logger.warning(message, extra={"operation": "apply_filter"})
            warnings.warn(message, KaoCacheWarning, stacklevel=2)
            return None
    return current
