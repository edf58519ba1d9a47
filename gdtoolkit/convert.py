"""Lenient conversions between strings, numbers and sequences."""

from __future__ import annotations

import math
import re
from collections.abc import Sequence
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

INT64_MAX = 2**63 - 1
INT64_MIN = -(2**63)

_INT_RE = re.compile(r"[+-]?[0-9]+")


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _parse_int(text: str) -> int:
    if not _INT_RE.fullmatch(text):
        raise ValueError(f"invalid syntax: {text!r}")
    result = int(text)
    if not INT64_MIN <= result <= INT64_MAX:
        raise ValueError(f"value out of range: {text!r}")
    return result


def _parse_float(text: str) -> float:
    if not text or "_" in text or text != text.strip():
        raise ValueError(f"invalid syntax: {text!r}")
    result = float(text)
    if math.isinf(result) and "inf" not in text.lower():
        raise ValueError(f"value out of range: {text!r}")
    return result


def try_string(value: Any) -> str | None:
    """Return value as a string, or None when its type has no string form."""
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, Decimal):
        return str(value)
    return None


def must_string(value: Any, default: str) -> str:
    """Return value as a string, or default."""
    result = try_string(value)
    return default if result is None else result


def convert_to_int64(value: Any) -> int:
    """Convert value to a 64-bit integer; raise when that is not possible."""
    if value is None:
        raise ValueError("input is nil")
    if isinstance(value, (bytes, bytearray)):
        return _parse_int(bytes(value).decode("utf-8", errors="replace"))
    if isinstance(value, str):
        return _parse_int(value)
    if isinstance(value, Decimal):
        return _parse_int(str(value))
    if isinstance(value, bool):
        raise TypeError(f"input number type err type={type(value).__name__}")
    if isinstance(value, int):
        if not INT64_MIN <= value <= INT64_MAX:
            raise ValueError("input number out of range")
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise ValueError("input number out of range")
        result = int(value)
        if not INT64_MIN <= result <= INT64_MAX:
            raise ValueError("input number out of range")
        return result
    raise TypeError(f"input number type err type={type(value).__name__}")


def must_int64(value: Any, default: int) -> int:
    """Return value as a 64-bit integer, or default."""
    try:
        return convert_to_int64(value)
    except (ValueError, TypeError):
        return default


def must_float64(value: Any, default: float) -> float:
    """Return value as a float, or default."""
    try:
        if isinstance(value, (bytes, bytearray)):
            return _parse_float(bytes(value).decode("utf-8", errors="replace"))
        if isinstance(value, str):
            return _parse_float(value)
        if isinstance(value, Decimal):
            return _parse_float(str(value))
    except (ValueError, InvalidOperation):
        return default
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value)
    return default


def string_map_to_any(mapping: Mapping[str, str]) -> dict[str, Any]:
    """Copy a string-to-string mapping into a plain dict."""
    return dict(mapping)


def slice_cutter(value: Any, maxsize: int) -> list[Any]:
    """Cut a sequence into consecutive parts of at most maxsize items."""
    if not isinstance(value, Sequence):
        raise TypeError(f"not slice types, kind is {type(value).__name__}")
    if maxsize <= 0:
        raise ValueError(f"invalid maxsize {maxsize}")
    return [value[start:start + maxsize] for start in range(0, len(value), maxsize)]


def _array_items(value: Any) -> Sequence[Any] | None:
    if isinstance(value, (str, bytes, bytearray)) or not isinstance(value, Sequence):
        return None
    return value


def must_string_array(value: Any, default: list[str]) -> list[str]:
    """Convert every element to a string, or return default if any fails."""
    items = _array_items(value)
    if items is None:
        return default
    result = []
    for item in items:
        text = None if item is None else try_string(item)
        if text is None:
            return default
        result.append(text)
    return result


def must_int64_array(value: Any, default: list[int]) -> list[int]:
    """Convert every element to an integer, or return default if any fails."""
    items = _array_items(value)
    if items is None:
        return default
    result = []
    for item in items:
        if item is None:
            return default
        number = must_int64(item, INT64_MAX)
        if number == INT64_MAX:
            return default
        result.append(number)
    return result