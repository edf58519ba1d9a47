"""Helpers for slicing and joining lists."""

from __future__ import annotations

from typing import Any, Iterable, Sequence


def array_slice(array: Sequence[Any], offset: int, length: int) -> list[Any]:
    """Return up to length items starting at offset; empty if offset is past the end."""
    if offset < 0 or length < 0:
        raise ValueError(f"invalid offset {offset} or length {length}")
    count = len(array)
    if count == 0 or offset >= count:
        return []
    return list(array[offset:offset + length])


def cut_by_step(array: Sequence[Any], step: int) -> tuple[int, list[list[Any]]]:
    """Split array into chunks of step items; return the chunk count and chunks."""
    if step >= len(array):
        return 1, [list(array)]
    if step <= 0:
        raise ValueError(f"invalid step {step}")
    chunks = [list(array[start:start + step]) for start in range(0, len(array), step)]
    return len(chunks), chunks


def int64_array_to_string(values: Iterable[int], sep: str) -> str:
    """Join integers with sep."""
    return sep.join(str(value) for value in values)


def string_in_slice(array: Iterable[str] | None, value: str) -> bool:
    """Return True when value occurs in array."""
    return bool(array) and value in array