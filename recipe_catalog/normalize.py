import math
import re
from typing import Any, Dict, Optional

# Marker the source dataset uses for unknown values
NAN_MARKER = "NaN"

_DIGITS = re.compile(r"\d+")

# Integer columns are 32-bit on PostgreSQL
INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1


def is_nan(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == NAN_MARKER.lower()
    return isinstance(value, float) and math.isnan(value)


def to_float(value: Any) -> Optional[float]:
    """Parse a number, returning None for NaN markers and garbage.

    Booleans are rejected even though Python treats them as ints, and
    infinities count as unparseable so nothing non-finite reaches the table.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _int32(number: int) -> Optional[int]:
    if INT32_MIN <= number <= INT32_MAX:
        return number
    return None


def to_int(value: Any) -> Optional[int]:
    # fractional values truncate: "15.7" -> 15; out of column range -> None
    number = to_float(value)
    if number is None:
        return None
    return _int32(int(number))


def first_number(value: Any) -> Optional[int]:
    """Return the first run of digits in value, e.g. "389 kcal" -> 389."""
    if value is None or isinstance(value, bool):
        return None
    match = _DIGITS.search(str(value))
    if not match:
        return None
    return _int32(int(match.group()))


def clean_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)
    if not value.strip():
        return None
    return value


def clean_nutrients(value: Any) -> Optional[Dict[str, Any]]:
    """Drop NaN entries from a nutrients mapping.

    Only the literal marker (or a float NaN) is removed; descriptive values
    such as "389 kcal" are kept as-is.
    """
    if not isinstance(value, dict):
        return None
    return {key: v for key, v in value.items() if not is_nan(v)}
