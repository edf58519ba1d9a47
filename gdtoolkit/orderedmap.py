"""Insertion-ordered map and a simple ordered value list."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Hashable, Iterable, Iterator


class LinkList:
    """An append-only list of values kept in insertion order."""

    def __init__(self) -> None:
        self._values: list[Any] = []

    def add(self, value: Any) -> None:
        """Append a value at the end of the list."""
        self._values.append(value)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __str__(self) -> str:
        body = "".join(f"{value}, " for value in self._values)
        return f"LinkList[{body}]"


@dataclass
class KVPair:
    """A key and the value stored under it."""

    key: Any
    value: Any

    def compare(self, other: "KVPair") -> bool:
        """Return True when both key and value are equal."""
        return self.key == other.key and self.value == other.value

    def __str__(self) -> str:
        return f"{self.key}:{self.value}"


class OrderedMap:
    """A mapping that remembers the order in which keys were first set."""

    def __init__(self, pairs: Iterable[KVPair | tuple[Hashable, Any]] | None = None) -> None:
        self._store: dict[Hashable, Any] = {}
        for pair in pairs or ():
            if isinstance(pair, KVPair):
                self.set(pair.key, pair.value)
            else:
                key, value = pair
                self.set(key, value)

    def set(self, key: Hashable, value: Any) -> None:
        """Store a value; an existing key keeps its position."""
        self._store[key] = value

    def get(self, key: Hashable) -> Any:
        """Return the value for key, or None when it is absent."""
        return self._store.get(key)

    def delete(self, key: Hashable) -> None:
        """Remove key if present."""
        self._store.pop(key, None)

    def items(self) -> Iterator[KVPair]:
        """Yield the pairs in insertion order."""
        for key, value in list(self._store.items()):
            yield KVPair(key, value)

    def reversed_items(self) -> Iterator[KVPair]:
        """Yield the pairs from the most recently inserted to the oldest."""
        for key, value in reversed(list(self._store.items())):
            yield KVPair(key, value)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(list(self._store))

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        return key in self._store

    def __str__(self) -> str:
        body = " ".join(f"{pair.key}:{pair.value}, " for pair in self.items())
        return f"OrderedMap[{body}]"