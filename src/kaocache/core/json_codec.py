"""JSON encoding of structured generations.

Structured content is stored with orjson. Integers are limited to the range
orjson can represent (signed 64-bit up to unsigned 64-bit); values outside
it are rejected rather than stored as lossy floats. Non-string mapping keys
are written as strings, so ``{1: "a"}`` is read back as ``{"1": "a"}``.
"""

from __future__ import annotations

import json
from typing import Any

import orjson

INT_MIN = -(2**63)
INT_MAX = 2**64 - 1

# orjson turns out-of-range integer literals into floats of at least this size
_LOSSY_FLOAT_THRESHOLD = float(2**63)


class IntegerRangeError(ValueError):
    """JSON integer literal outside the 64-bit range."""


def _checked_int(literal: str) -> int:
    value = int(literal)
    if not INT_MIN <= value <= INT_MAX:
        msg = f"Integer {literal} exceeds the 64-bit range"
        raise IntegerRangeError(msg)
    return value


def _has_large_float(value: Any) -> bool:
    pending = [value]
    while pending:
        current = pending.pop()
        if isinstance(current, float):
            if abs(current) >= _LOSSY_FLOAT_THRESHOLD:
                return True
        elif isinstance(current, dict):
            pending.extend(current.values())
        elif isinstance(current, list):
            pending.extend(current)
    return False


def loads(raw: str | bytes | bytearray) -> Any:
    """Decode JSON text.

    Raises:
        orjson.JSONDecodeError: If the text is not valid JSON
        IntegerRangeError: If an integer literal exceeds the 64-bit range
    """
    value = orjson.loads(raw)
    if _has_large_float(value):
        # Large floats may be genuine float literals; only integers are rejected
        json.loads(raw, parse_int=_checked_int)
    return value


def dumps(value: Any) -> bytes:
    """Encode a structured value.

    Raises:
        orjson.JSONEncodeError: If the value is not JSON-serializable or
            holds an integer outside the 64-bit range
    """
    return orjson.dumps(value, option=orjson.OPT_NON_STR_KEYS)
