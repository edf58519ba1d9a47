"""Client IP extraction from request headers, and the host's own address."""

from __future__ import annotations

import ipaddress
import socket
import sys
from typing import Any, Mapping


def _header(headers: Mapping[str, Any] | None, name: str) -> str:
    if not headers:
        return ""
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() != wanted:
            continue
        if isinstance(value, (list, tuple)):
            return str(value[0]) if value else ""
        return str(value)
    return ""


def _valid_ip(text: str) -> bool:
    try:
        ipaddress.ip_address(text)
    except ValueError:
        return False
    return True


def _from_real_ip(headers: Mapping[str, Any] | None) -> str:
    value = _header(headers, "X-Real-IP")
    return value if value and _valid_ip(value) else ""


def _from_forwarded_for(headers: Mapping[str, Any] | None) -> str:
    value = _header(headers, "X-Forwarded-For")
    if not value:
        return ""
    first = value.split(", ")[0]
    return first if _valid_ip(first) else ""


def _from_remote_addr(remote_addr: str) -> str:
    if not remote_addr:
        return ""
    parts = remote_addr.split(":")
    if len(parts) == 2 and _valid_ip(parts[0]):
        return parts[0]
    return ""


def _error(headers: Mapping[str, Any] | None, remote_addr: str) -> ValueError:
    return ValueError(
        f"cannot get real ip from request headers={dict(headers or {})!r} "
        f"remote_addr={remote_addr!r}"
    )


def get_real_ip(headers: Mapping[str, Any] | None, remote_addr: str = "") -> str:
    """Client IP, preferring X-Real-IP, then X-Forwarded-For, then the peer address."""
    ip = _from_real_ip(headers) or _from_forwarded_for(headers) or _from_remote_addr(remote_addr)
    if not ip:
        raise _error(headers, remote_addr)
    return ip


def get_xff_real_ip(headers: Mapping[str, Any] | None, remote_addr: str = "") -> str:
    """Client IP, preferring X-Forwarded-For, then X-Real-IP, then the peer address."""
    ip = _from_forwarded_for(headers) or _from_real_ip(headers) or _from_remote_addr(remote_addr)
    if not ip:
        raise _error(headers, remote_addr)
    return ip


def is_local_ip(headers: Mapping[str, Any] | None, remote_addr: str = "") -> bool:
    """Return True when the client IP is 127.0.0.1."""
    return get_real_ip(headers, remote_addr) == "127.0.0.1"


def _usable(text: str) -> bool:
    try:
        address = ipaddress.ip_address(text)
    except ValueError:
        return False
    return address.version == 4 and not address.is_loopback and not address.is_unspecified


def get_local_ip() -> str:
    """First non-loopback IPv4 address of this host, or an empty string."""
    try:
        infos = socket.getaddrinfo(socket.gethostname(), None, socket.AF_INET)
    except OSError as exc:
        sys.stderr.write(f"Oops: {exc}\n")
        infos = []
    for info in infos:
        address = info[4][0]
        if _usable(address):
            return address
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(("10.255.255.255", 1))
            address = sock.getsockname()[0]
    except OSError:
        return ""
    return address if _usable(address) else ""