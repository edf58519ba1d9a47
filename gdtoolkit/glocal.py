"""Per-thread context storage keyed by the current thread's identifier."""

from __future__ import annotations

import sys
import threading
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal
from typing import Any, Hashable, Iterable, Mapping, Protocol

from gdtoolkit.shardmap import ConcurrentMap

SHARD_COUNT = 1024

_PLAIN_TYPES = (str, int, float, bool, bytes, list, tuple, dict, Decimal)


class Logger(Protocol):
    """The logging methods this module uses."""

    def debug(self, msg: Any, *args: Any) -> Any: ...

    def info(self, msg: Any, *args: Any) -> Any: ...

    def error(self, msg: Any, *args: Any) -> Any: ...


@dataclass
class _Settings:
    log: Logger | None = None


_locals = ConcurrentMap(SHARD_COUNT)
_settings = _Settings()


def set_logger(logger: Logger | None) -> None:
    """Use logger for diagnostics; None turns logging off."""
    _settings.log = logger


def _thread_id() -> str:
    return str(threading.get_ident())


def _current() -> dict[Hashable, Any] | None:
    value = _locals.get(_thread_id())
    return value if isinstance(value, dict) else None


def init() -> None:
    """Give the current thread a fresh, empty context."""
    tid = _thread_id()
    existing = _locals.get(tid)
    _locals.set(tid, {})
    log = _settings.log
    if existing is None:
        if log is not None:
            log.debug("init gl goId: %s", tid)
        return
    if log is not None:
        log.error("double INIT!init replace gl for goId: %s", tid)
    else:
        sys.stderr.write(f"double INIT!init replace gl for goId: {tid}")


def close() -> None:
    """Drop the current thread's context."""
    context = _current()
    if context is None:
        return
    tid = _thread_id()
    context.clear()
    _locals.remove(tid)
    if _settings.log is not None:
        _settings.log.debug("clear gl goId:%s", tid)


def exist() -> bool:
    """Return True when the current thread has a context."""
    return _current() is not None


def delete(key: Hashable) -> None:
    """Remove key from the current context."""
    context = _current()
    if context is not None:
        context.pop(key, None)


def get(key: Hashable) -> Any:
    """Return the value under key, or None when absent or without a context."""
    context = _current()
    if context is None:
        return None
    return context.get(key)


def batch_get(keys: Iterable[Hashable]) -> dict[Hashable, Any] | None:
    """Return the present keys and their values; None without a context."""
    context = _current()
    if context is None:
        return None
    return {key: context[key] for key in keys if key in context}


def set(key: Hashable, value: Any) -> None:  # noqa: A001
    """Store value under key in the current context, if there is one."""
    context = _current()
    if context is not None:
        context[key] = value


def _is_reference(value: Any) -> bool:
    return value is None or not isinstance(value, _PLAIN_TYPES)


def get_gl_data() -> dict[str, Any]:
    """A snapshot of the current context with string keys; objects show as '@#'."""
    context = _current()
    if context is None:
        return {"_info": "no gl"}
    if _settings.log is not None:
        _settings.log.debug("json gl %s:%s", _thread_id(), context)
    return {
        str(key): "@#" if _is_reference(value) else value
        for key, value in list(context.items())
    }


def copy_gl_data(data: Mapping[str, Any]) -> None:
    """Merge data into the current context; integer '*cost*' values are added."""
    for key, value in data.items():
        if "cost" in key and isinstance(value, int) and not isinstance(value, bool):
            incr(key, value)
        else:
            set(key, value)


def _to_milliseconds(cost: timedelta) -> int:
    micros = (cost.days * 86400 + cost.seconds) * 1_000_000 + cost.microseconds
    millis = abs(micros) // 1000
    return millis if micros >= 0 else -millis


def incr_cost(key: Hashable, cost: timedelta) -> int:
    """Add cost, in whole milliseconds, to key."""
    return incr(key, _to_milliseconds(cost))


def incr_cost_key(key: str, cost: timedelta) -> int:
    """Add cost, in whole milliseconds, to '<key>_cost'."""
    return incr(key + "_cost", _to_milliseconds(cost))


def incr_count_key(key: str, value: int) -> int:
    """Add value to '<key>_count'."""
    return incr(key + "_count", value)


def incr_fail_key(key: str, value: int) -> int:
    """Add value to '<key>_fail'."""
    return incr(key + "_fail", value)


def _add(key: Hashable, delta: int) -> int:
    context = _current()
    if context is None:
        return -1
    previous = context.get(key)
    if not isinstance(previous, int) or isinstance(previous, bool):
        context[key] = delta
        return 0
    context[key] = previous + delta
    return previous


def incr(key: Hashable, count: int) -> int:
    """Add count to key; return the previous value, 0 if there was none, -1 without a context."""
    return _add(key, count)


def decr(key: Hashable, count: int) -> int:
    """Subtract count from key; return the previous value, 0 if there was none, -1 without a context."""
    return _add(key, -count)