"""Description of one service node as stored in a registry."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from typing import Any

_UINT64_MAX = 2**64 - 1
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class NodeInfo:
    """Address, weight and state of a service node."""

    ip: str = ""
    port: int = 0
    offline: bool = False
    weight: int = 0

    def to_json(self) -> str:
        """Encode the node as compact JSON."""
        return json.dumps(asdict(self), separators=(",", ":"), ensure_ascii=False)

    @classmethod
    def from_json(cls, data: str | bytes) -> "NodeInfo":
        """Decode a node from JSON; field names match case-insensitively."""
        try:
            obj = json.loads(data)
        except (ValueError, UnicodeDecodeError) as exc:
            raise ValueError(f"invalid node info json: {exc}") from exc
        if obj is None:
            return cls()
        if not isinstance(obj, dict):
            raise ValueError(f"node info must be a json object, got {type(obj).__name__}")

        node = cls()
        for key, value in obj.items():
            name = key.lower()
            if value is None or name not in ("ip", "port", "offline", "weight"):
                continue
            if name == "ip":
                if not isinstance(value, str):
                    raise ValueError(f"field ip must be a string, got {value!r}")
                node.ip = value
            elif name == "port":
                if not _is_int(value) or not _INT64_MIN <= value <= _INT64_MAX:
                    raise ValueError(f"field port must be an integer, got {value!r}")
                node.port = value
            elif name == "offline":
                if not isinstance(value, bool):
                    raise ValueError(f"field offline must be a boolean, got {value!r}")
                node.offline = value
            else:
                if not _is_int(value) or not 0 <= value <= _UINT64_MAX:
                    raise ValueError(f"field weight must be an unsigned integer, got {value!r}")
                node.weight = value
        return node