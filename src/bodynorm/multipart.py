from __future__ import annotations

from dataclasses import dataclass, field

from python_multipart import MultipartParser
from python_multipart.exceptions import MultipartParseError
from python_multipart.multipart import parse_options_header

from bodynorm.context import FieldValue
from bodynorm.errors import BodyError, new_error, wrap_error
from bodynorm.util import decode_text

# Bytes that may follow "--boundary" on a boundary line.
_BOUNDARY_LINE_END = (b"\r", b"\n", b" ", b"\t")


@dataclass(slots=True)
class _Part:
    headers: dict[str, str] = field(default_factory=dict)
    data: bytearray = field(default_factory=bytearray)
    name: str = ""
    is_file: bool = False
    closed: bool = False

    def resolve_disposition(self) -> None:
        disposition, options = parse_options_header(self.headers.get("content-disposition", ""))
        if disposition.strip().lower() != b"form-data":
            return
        self.name = decode_text(options.get(b"name", b""))
        self.is_file = any(k == b"filename" or k.startswith(b"filename*") for k in options)

    def write(self, chunk: bytes) -> None:
        # Unnamed and file parts are drained without buffering.
        if self.closed or not self.name or self.is_file:
            return
        self.data.extend(chunk)

    def value(self) -> str:
        return decode_text(bytes(self.data))

    def close(self) -> None:
        self.closed = True
        self.data.clear()


class _FieldCollector:
    def __init__(self, *, max_parts: int = 0) -> None:
        self.fields: dict[str, FieldValue] = {}
        self.max_parts = max_parts
        self.part_count = 0
        self.part: _Part | None = None
        self.ended = False
        self._header_field = bytearray()
        self._header_value = bytearray()

    def callbacks(self) -> dict[str, object]:
        return {
            "on_part_begin": self.on_part_begin,
            "on_part_data": self.on_part_data,
            "on_part_end": self.on_part_end,
            "on_header_field": self.on_header_field,
            "on_header_value": self.on_header_value,
            "on_header_end": self.on_header_end,
            "on_headers_finished": self.on_headers_finished,
            "on_end": self.on_end,
        }

    def on_part_begin(self) -> None:
        self.part_count += 1
        if self.max_parts > 0 and self.part_count > self.max_parts:
            raise new_error("too_large", f"multipart body has more than {self.max_parts} parts")
        self.close_part()
        self.part = _Part()

    def on_part_data(self, data: bytes, start: int, end: int) -> None:
        if self.part is not None:
            self.part.write(data[start:end])

    def on_part_end(self) -> None:
        part = self.part
        if part is None:
            return
        try:
            if part.name and not part.is_file:
                self.add(part.name, part.value())
        finally:
            self.close_part()

    def on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_field.extend(data[start:end])

    def on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value.extend(data[start:end])

    def on_header_end(self) -> None:
        if self.part is not None and self._header_field:
            key = self._header_field.decode("latin-1").strip().lower()
            self.part.headers[key] = self._header_value.decode("latin-1").strip()
        self._header_field.clear()
        self._header_value.clear()

    def on_headers_finished(self) -> None:
        if self.part is not None:
            self.part.resolve_disposition()

    def on_end(self) -> None:
        self.ended = True

    def add(self, name: str, value: str) -> None:
        existing = self.fields.get(name)
        if existing is None:
            self.fields[name] = value
        elif isinstance(existing, list):
            existing.append(value)
        else:
            self.fields[name] = [existing, value]

    def close_part(self) -> None:
        if self.part is not None:
            self.part.close()
            self.part = None


def decode_multipart(body: bytes, boundary: str, *, max_parts: int = 0) -> dict[str, FieldValue]:
    """Decode the named, non-file fields of a ``multipart/form-data`` body.

    Parts are read strictly in order. A field seen once maps to its string
    value, a repeated field to the list of its values in part order. Parts
    without a form-data name and file parts are skipped.
    """

    collector = _FieldCollector(max_parts=max_parts)
    try:
        parser = MultipartParser(boundary.encode("latin-1"), collector.callbacks())
        data = bytes(body)
        parser.write(data[_first_delimiter(data, boundary) :])
        parser.finalize()
        if not collector.ended:
            raise MultipartParseError("unexpected end of multipart body")
    except BodyError:
        raise
    except (MultipartParseError, UnicodeError, ValueError) as exc:
        raise wrap_error(exc, "syntax_error", "failed to read multipart part") from exc
    finally:
        collector.close_part()
    return collector.fields


def _first_delimiter(data: bytes, boundary: str) -> int:
    """Offset of the first boundary line; anything before it is preamble.

    Returns 0 when no boundary line exists so the parser reports the framing
    error.
    """

    delimiter = b"--" + boundary.encode("latin-1")
    start = 0
    while True:
        pos = data.find(delimiter, start)
        if pos < 0:
            return 0
        line_start = pos == 0 or data[pos - 1 : pos] == b"\n"
        rest = data[pos + len(delimiter) : pos + len(delimiter) + 2]
        if line_start and (rest == b"--" or rest[:1] in _BOUNDARY_LINE_END):
            return pos
        start = pos + 1

