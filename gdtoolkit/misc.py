"""Assorted helpers: sizes, JSON, light obfuscation and identifiers."""

from __future__ import annotations

import base64
import binascii
import dataclasses
import hashlib
import json
import random
import sys
import time
from typing import Any, Callable

from gdtoolkit.convert import convert_to_int64

LETTERS = "0123456789abcdefghipqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"

_KB = 1024
_MB = 1024 * _KB
_GB = 1024 * _MB

_SUFFIX_FACTORS = {"k": _KB, "K": _KB, "m": _MB, "M": _MB, "g": _GB, "G": _GB}


def func_name(skip: int) -> str:
    """Name of the function skip frames up the stack; 0 is func_name itself."""
    try:
        frame = sys._getframe(skip)
    except ValueError:
        return ""
    return frame.f_code.co_name


def human_size(size: int) -> str:
    """Format a byte count with a B, KB, MB or GB suffix."""
    if size < 0:
        raise ValueError(f"size must not be negative: {size}")
    if size // _GB > 0:
        return f"{size / _GB:.1f}GB"
    if size // _MB > 0:
        return f"{size / _MB:.1f}MB"
    if size // _KB > 0:
        return f"{size / _KB:.1f}KB"
    return f"{size}B"


def parse_memory_size(size: str) -> int:
    """Parse sizes such as '10k', '2M' or '1g' into bytes; an unparsable number gives 0."""
    if not size:
        raise ValueError("empty memory size")
    suffix = size[-1]
    try:
        number = convert_to_int64(size[:-1])
    except ValueError:
        return 0
    factor = _SUFFIX_FACTORS.get(suffix)
    if factor is None:
        raise ValueError(f"unsupport suffix:{suffix}")
    if number < 0:
        raise ValueError(f"negative memory size: {size}")
    return number * factor


def _json_default(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    raise TypeError(f"unsupported type: {type(value).__name__}")


def marshal(value: Any) -> bytes:
    """Encode value as compact JSON without escaping HTML characters."""
    text = json.dumps(
        value,
        ensure_ascii=False,
        separators=(",", ":"),
        sort_keys=True,
        allow_nan=False,
        default=_json_default,
    )
    text = text.replace("\u2028", "\\u2028").replace("\u2029", "\\u2029")
    return text.encode("utf-8")


def with_recover(
    fn: Callable[[], Any], err_handler: Callable[[BaseException], Any] | None = None
) -> BaseException | None:
    """Run fn; on an exception report it, pass it to err_handler and return it."""
    try:
        fn()
    except Exception as exc:
        print("panic_recovered", file=sys.stderr)
        if err_handler is not None:
            err_handler(exc)
        return exc
    return None


def _xor(data: bytes, key: bytes) -> bytes:
    if not data:
        return b""
    if not key:
        raise ValueError("key must not be empty")
    return bytes(byte ^ key[i % len(key)] for i, byte in enumerate(data))


def gd_encode(data: bytes, key: str) -> str:
    """XOR data with key and encode the result as base64."""
    return base64.b64encode(_xor(bytes(data), key.encode("utf-8"))).decode("ascii")


def gd_decode(text: str, key: str) -> bytes:
    """Reverse gd_encode."""
    try:
        raw = base64.b64decode(text, validate=True)
    except binascii.Error as exc:
        raise ValueError(f"illegal base64 data: {exc}") from exc
    return _xor(raw, key.encode("utf-8"))


def rand_string(n: int) -> str:
    """A random string of n characters."""
    rng = random.Random(time.time_ns())
    return "".join(rng.choice(LETTERS) for _ in range(n))


def trace_id() -> str:
    """A random identifier: hex of 'gd' followed by an MD5 digest."""
    rng = random.Random(time.time_ns())
    digest = hashlib.md5()
    digest.update(str(rng.getrandbits(63)).encode())
    digest.update(b"-")
    digest.update(str(time.time_ns()).encode())
    digest.update(b"-")
    digest.update(str(rng.getrandbits(31)).encode())
    return (b"gd" + digest.digest()).hex()


def fatal_with_sms_alert(message: str) -> None:
    """Report a fatal condition on stderr."""
    print("fatal", message, file=sys.stderr)