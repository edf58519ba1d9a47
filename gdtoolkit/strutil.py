"""printf-style formatting that never fails on too many arguments."""

from __future__ import annotations

import re
from typing import Any, Sequence

_VERB_RE = re.compile(r"%([-+# 0]*)(\d*)(?:\.(\d*))?(.?)", re.S)

_TYPE_NAMES = {str: "string", int: "int", float: "float64", bool: "bool", bytes: "[]uint8"}


def _type_name(arg: Any) -> str:
    return _TYPE_NAMES.get(type(arg), type(arg).__name__)


def _plain(arg: Any) -> str:
    if isinstance(arg, bool):
        return "true" if arg else "false"
    if isinstance(arg, (bytes, bytearray)):
        return bytes(arg).decode("utf-8", errors="replace")
    if arg is None:
        return "<nil>"
    return str(arg)


def _bad_verb(verb: str, arg: Any) -> str:
    return f"%!{verb}({_type_name(arg)}={_plain(arg)})"


def _is_int(arg: Any) -> bool:
    return isinstance(arg, int) and not isinstance(arg, bool)


def _format_one(flags: str, width: str, prec: str | None, verb: str, arg: Any) -> str:
    spec = "%" + flags + width + ("" if prec is None else "." + prec)
    if verb in ("v", "s"):
        if verb == "s" and (isinstance(arg, (bool, int, float)) or arg is None):
            return _bad_verb(verb, arg)
        return (spec + "s") % _plain(arg)
    if verb == "t":
        return (spec + "s") % _plain(arg) if isinstance(arg, bool) else _bad_verb(verb, arg)
    if verb in ("d", "o", "x", "X"):
        if _is_int(arg):
            return (spec + verb) % arg
        if verb in ("x", "X") and isinstance(arg, (str, bytes, bytearray)):
            raw = arg.encode("utf-8") if isinstance(arg, str) else bytes(arg)
            text = raw.hex()
            return (spec + "s") % (text.upper() if verb == "X" else text)
        return _bad_verb(verb, arg)
    if verb in ("f", "F", "e", "E"):
        if isinstance(arg, float):
            return (spec + verb) % arg
        return _bad_verb(verb, arg)
    if verb == "c":
        return (spec + "s") % chr(arg) if _is_int(arg) else _bad_verb(verb, arg)
    return _bad_verb(verb, arg)


def _go_format(fmt: str, args: Sequence[Any]) -> str:
    remaining = iter(args)
    used = 0

    def replace(match: re.Match[str]) -> str:
        nonlocal used
        flags, width, prec, verb = match.groups()
        if verb == "":
            return "%!(NOVERB)"
        if verb == "%":
            return "%"
        try:
            arg = next(remaining)
        except StopIteration:
            return f"%!{verb}(MISSING)"
        used += 1
        return _format_one(flags, width, prec, verb, arg)

    result = _VERB_RE.sub(replace, fmt)
    extra = list(args[used:])
    if extra:
        parts = ", ".join(f"{_type_name(arg)}={_plain(arg)}" for arg in extra)
        result += f"%!(EXTRA {parts})"
    return result


def safe_sprintf(fmt: str, *args: Any) -> str:
    """Format like printf, dropping arguments beyond the %s, %d and %f verbs."""
    count = fmt.count("%s") + fmt.count("%d") + fmt.count("%f")
    return _go_format(fmt, args[:count])