from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from bodynorm.processor import BodyProcessor, ProcessResult
from bodynorm.util import canonicalize_headers, flatten_query


@dataclass(slots=True)
class Request:
    method: str = "POST"
    path: str = "/"
    headers: dict[str, Any] = field(default_factory=dict)
    query: dict[str, Any] = field(default_factory=dict)
    body: object = None


def content_type_of(request: Request) -> str:
    values = canonicalize_headers(request.headers).get("content-type", [])
    return values[0] if values else ""


def process_request(
    request: Request,
    scope: Mapping[str, Any] | None = None,
    processor: BodyProcessor | None = None,
) -> ProcessResult:
    proc = processor or BodyProcessor()
    return proc.process(scope, content_type_of(request), request.body, flatten_query(request.query))
