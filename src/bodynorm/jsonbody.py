from __future__ import annotations

import json as jsonlib
import math
from dataclasses import dataclass
from typing import Any

from bodynorm.errors import new_error, wrap_error
from bodynorm.util import decode_text


@dataclass(frozen=True, slots=True)
class JSONObject:
    value: dict[str, Any]

    def payload(self) -> dict[str, Any]:
        return self.value


@dataclass(frozen=True, slots=True)
class JSONObjectList:
    items: list[dict[str, Any]]

    def payload(self) -> list[dict[str, Any]]:
        return self.items


JSONPayload = JSONObject | JSONObjectList


def normalize_json(body: bytes) -> JSONPayload:
    """Parse a JSON body and classify its top-level shape.

    Only an object or an array whose every element is an object is accepted;
    anything else raises a BodyError.
    """

    try:
        value = jsonlib.loads(
            decode_text(bytes(body)),
            parse_constant=_reject_constant,
            parse_float=_parse_finite_float,
        )
    except (ValueError, RecursionError) as exc:
        raise wrap_error(exc, "syntax_error", "failed to parse body") from exc

    if isinstance(value, dict):
        return JSONObject(value)
    if isinstance(value, list):
        for i, item in enumerate(value):
            if not isinstance(item, dict):
                raise new_error("shape_error", f"invalid JSON array item at index {i}")
        return JSONObjectList(value)
    raise new_error("shape_error", f"unsupported JSON structure: {json_shape(value)}")


def json_shape(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def encode_canonical(value: Any) -> bytes:
    """Serialize ``value`` as compact, key-sorted UTF-8 JSON."""

    try:
        return jsonlib.dumps(
            value,
            separators=(",", ":"),
            ensure_ascii=False,
            sort_keys=True,
            allow_nan=False,
        ).encode("utf-8")
    except (TypeError, ValueError, RecursionError) as exc:
        raise wrap_error(exc, "serialization_error", "failed to encode body") from exc


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON constant {name}")


def _parse_finite_float(raw: str) -> float:
    value = float(raw)
    if not math.isfinite(value):
        raise ValueError(f"number {raw} out of range")
    return value
