from __future__ import annotations

import re
import urllib.parse

from bodynorm.context import FieldValue
from bodynorm.util import decode_text

_BAD_ESCAPE_RE = re.compile(rb"%(?![0-9A-Fa-f]{2})")


def decode_form(body: bytes) -> dict[str, FieldValue]:
    """Decode an ``application/x-www-form-urlencoded`` body.

    Keys keep first-seen order. A key seen once maps to its string value, a
    repeated key maps to the list of its values in body order.

    Raises ValueError for a pair containing ``;`` or for an invalid percent
    escape; the first offending pair is reported.
    """

    collected: dict[str, list[str]] = {}
    for pair in bytes(body).split(b"&"):
        if b";" in pair:
            raise ValueError("invalid semicolon separator in query")
        if not pair:
            continue
        key, _, value = pair.partition(b"=")
        collected.setdefault(_unescape(key), []).append(_unescape(value))

    out: dict[str, FieldValue] = {}
    for key, values in collected.items():
        out[key] = values[0] if len(values) == 1 else values
    return out


def _unescape(raw: bytes) -> str:
    bad = _BAD_ESCAPE_RE.search(raw)
    if bad is not None:
        escape = raw[bad.start() : bad.start() + 3].decode("latin-1")
        raise ValueError(f"invalid URL escape {escape!r}")
    return decode_text(urllib.parse.unquote_to_bytes(raw.replace(b"+", b" ")))
