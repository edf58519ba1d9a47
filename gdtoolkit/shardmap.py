"""A thread-safe string-keyed map split into independently locked shards."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any

DEFAULT_SHARD_COUNT = 32

_FNV_OFFSET = 2166136261
_FNV_PRIME = 16777619
_MASK32 = 0xFFFFFFFF


def fnv32(key: str) -> int:
    """32-bit FNV-1 hash of the UTF-8 bytes of key."""
    value = _FNV_OFFSET
    for byte in key.encode("utf-8"):
        value = (value * _FNV_PRIME) & _MASK32
        value ^= byte
    return value


@dataclass
class _Shard:
    data: dict[str, Any] = field(default_factory=dict)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


class ConcurrentMap:
    """A map whose keys are spread over shards by their FNV hash."""

    def __init__(self, shard_count: int = DEFAULT_SHARD_COUNT) -> None:
        if shard_count <= 0:
            shard_count = DEFAULT_SHARD_COUNT
        self._shards = tuple(_Shard() for _ in range(shard_count))

    @property
    def shard_count(self) -> int:
        """Number of shards."""
        return len(self._shards)

    def get_shard(self, key: str) -> _Shard:
        """Return the shard that holds key."""
        return self._shards[fnv32(key) % len(self._shards)]

    def set(self, key: str, value: Any) -> None:
        """Store value under key."""
        shard = self.get_shard(key)
        with shard.lock:
            shard.data[key] = value

    def get(self, key: str) -> Any:
        """Return the value under key, or None when it is absent."""
        shard = self.get_shard(key)
        with shard.lock:
            return shard.data.get(key)

    def remove(self, key: str) -> None:
        """Remove key if present."""
        shard = self.get_shard(key)
        with shard.lock:
            shard.data.pop(key, None)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        shard = self.get_shard(key)
        with shard.lock:
            return key in shard.data

    def __len__(self) -> int:
        total = 0
        for shard in self._shards:
            with shard.lock:
                total += len(shard.data)
        return total