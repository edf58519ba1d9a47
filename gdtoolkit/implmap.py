"""A registry of implementation classes that can satisfy a named dependency."""

from __future__ import annotations

import inspect
import logging
import threading
from typing import Any

_log = logging.getLogger(__name__)

_registry: dict[str, list[type]] = {}
_lock = threading.RLock()


def _is_struct_type(cls: Any) -> bool:
    """Return True for a concrete, user-defined class."""
    return (
        isinstance(cls, type)
        and cls.__module__ != "builtins"
        and not getattr(cls, "_is_protocol", False)
        and not inspect.isabstract(cls)
    )


def add(name: str, cls: type) -> None:
    """Record cls as a candidate implementation for name; non-concrete classes are ignored."""
    if cls is None or not name or not _is_struct_type(cls):
        return
    with _lock:
        known = _registry.setdefault(name, [])
        if known:
            _log.info(
                "implmap append new type(%s) impl to name(%s) at index(%d), old array=%s",
                cls,
                name,
                len(known),
                known,
            )
        known.append(cls)


def get(name: str) -> list[type]:
    """Return the implementations recorded for name, in the order they were added."""
    if not name:
        return []
    with _lock:
        return [cls for cls in _registry.get(name, ()) if cls is not None]