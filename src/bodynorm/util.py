from __future__ import annotations

from typing import Any


def canonicalize_headers(headers: dict[str, Any] | None) -> dict[str, list[str]]:
    if not headers:
        return {}
    out: dict[str, list[str]] = {}
    for key in sorted(headers.keys()):
        lower = str(key).strip().lower()
        if not lower:
            continue
        value = headers[key]
        values = value if isinstance(value, list) else [value]
        out.setdefault(lower, []).extend([str(v) for v in values])
    return out


def flatten_query(query: dict[str, Any] | None) -> dict[str, str]:
    """Reduce a multi-valued query mapping to the first value of each key."""

    if not query:
        return {}
    out: dict[str, str] = {}
    for key, value in query.items():
        if isinstance(value, (list, tuple)):
            if not value:
                continue
            out[str(key)] = str(value[0])
        else:
            out[str(key)] = str(value)
    return out


def to_bytes(value: Any) -> bytes | None:
    if value is None:
        return None
    if isinstance(value, bytes):
        return bytes(value)
    if isinstance(value, bytearray):
        return bytes(value)
    if isinstance(value, memoryview):
        return value.tobytes()
    if isinstance(value, str):
        return value.encode("utf-8")
    raise TypeError("body must be bytes-like, str or None")


def decode_text(data: bytes) -> str:
    # Invalid sequences survive as surrogates and fail later at serialization.
    return data.decode("utf-8", errors="surrogateescape")
