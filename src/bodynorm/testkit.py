from __future__ import annotations

import urllib.parse
import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class FileField:
    name: str
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


def encode_multipart(
    fields: Iterable[tuple[str, str]],
    files: Iterable[FileField] = (),
    *,
    boundary: str | None = None,
) -> tuple[str, bytes]:
    """Build a ``multipart/form-data`` body and its content-type header.

    Fields are written in the given order, followed by the files.
    """

    boundary = boundary or uuid.uuid4().hex
    chunks: list[bytes] = []
    for name, value in fields:
        chunks.append(f"--{boundary}\r\n".encode("latin-1"))
        chunks.append(f'Content-Disposition: form-data; name="{_quote(name)}"\r\n\r\n'.encode("utf-8"))
        chunks.append(str(value).encode("utf-8"))
        chunks.append(b"\r\n")
    for f in files:
        chunks.append(f"--{boundary}\r\n".encode("latin-1"))
        chunks.append(
            (
                f'Content-Disposition: form-data; name="{_quote(f.name)}"; filename="{_quote(f.filename)}"\r\n'
                f"Content-Type: {f.content_type}\r\n\r\n"
            ).encode("utf-8")
        )
        chunks.append(bytes(f.content))
        chunks.append(b"\r\n")
    chunks.append(f"--{boundary}--\r\n".encode("latin-1"))
    return f"multipart/form-data; boundary={boundary}", b"".join(chunks)


def encode_form(pairs: Iterable[tuple[str, str]]) -> bytes:
    return urllib.parse.urlencode(list(pairs)).encode("ascii")


def _quote(value: str) -> str:
    return str(value).replace("\\", "\\\\").replace('"', '\\"')


@dataclass(slots=True)
class LogEntry:
    level: str
    message: str
    fields: dict[str, Any]


@dataclass(slots=True)
class RecordingLogger:
    entries: list[LogEntry] = field(default_factory=list)

    def _record(self, level: str, message: str, fields: tuple[dict[str, Any], ...]) -> None:
        merged: dict[str, Any] = {}
        for f in fields:
            merged.update(f or {})
        self.entries.append(LogEntry(level=level, message=str(message), fields=merged))

    def debug(self, message: str, *fields: dict[str, Any]) -> None:
        self._record("debug", message, fields)

    def warn(self, message: str, *fields: dict[str, Any]) -> None:
        self._record("warn", message, fields)

    def messages(self, level: str | None = None) -> list[str]:
        return [e.message for e in self.entries if level is None or e.level == level]
