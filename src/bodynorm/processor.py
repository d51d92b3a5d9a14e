from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from bodynorm.context import USER_CONTEXT_KEY, Context, new_context
from bodynorm.errors import BodyError, new_error, wrap_error
from bodynorm.form import decode_form
from bodynorm.jsonbody import encode_canonical, normalize_json
from bodynorm.logger import StructuredLogger, get_logger
from bodynorm.mime import (
    MIME_APPLICATION_FORM,
    MIME_APPLICATION_JSON,
    MIME_MULTIPART_FORM,
    MIME_TEXT_PLAIN,
    match_content_type,
    multipart_boundary,
)
from bodynorm.multipart import decode_multipart
from bodynorm.util import decode_text, to_bytes

_BRANCHES = {
    MIME_APPLICATION_JSON: "json",
    MIME_APPLICATION_FORM: "form",
    MIME_MULTIPART_FORM: "multipart",
    MIME_TEXT_PLAIN: "text",
}


@dataclass(slots=True)
class Limits:
    max_body_bytes: int = 0
    max_parts: int = 0


@dataclass(slots=True)
class ProcessResult:
    """Outcome of one request body.

    ``body`` is canonical JSON for the decoding branches, ``None`` for an empty
    JSON or text body, and the untouched input for unrecognized content types.
    """

    scope: dict[str, Any]
    context: Context
    body: bytes | None


@dataclass(slots=True)
class BodyProcessor:
    _limits: Limits
    _logger: StructuredLogger | None
    _context_key: str

    def __init__(
        self,
        *,
        limits: Limits | None = None,
        logger: StructuredLogger | None = None,
        context_key: str = USER_CONTEXT_KEY,
    ) -> None:
        self._limits = _normalize_limits(limits or Limits())
        self._logger = logger
        self._context_key = str(context_key or "").strip() or USER_CONTEXT_KEY

    @property
    def context_key(self) -> str:
        return self._context_key

    def process(
        self,
        scope: Mapping[str, Any] | None,
        content_type: str | None,
        body: Any,
        query_params: Mapping[str, Any] | None = None,
    ) -> ProcessResult:
        """Normalize ``body`` into canonical JSON bytes.

        The returned scope is a copy of ``scope`` carrying the request Context
        under the processor's context key. Any failure raises BodyError and
        leaves the caller's scope untouched.
        """

        ctx = new_context(query_params)
        scope_out = dict(scope or {})
        scope_out[self._context_key] = ctx

        logger = self._logger or get_logger()
        raw = to_bytes(body)
        token = match_content_type(content_type)
        if not token:
            logger.debug("request body passed through", {"content_type": str(content_type or "")})
            return ProcessResult(scope=scope_out, context=ctx, body=raw)

        branch = _BRANCHES[token]
        try:
            self._check_size(raw)
            out = self._decode(branch, str(content_type), raw, ctx)
        except BodyError as exc:
            logger.warn(
                "request body rejected",
                {"branch": branch, "error_type": exc.type, "error": str(exc)},
            )
            raise

        logger.debug("request body decoded", {"branch": branch, "bytes": len(out) if out is not None else 0})
        return ProcessResult(scope=scope_out, context=ctx, body=out)

    def _check_size(self, raw: bytes | None) -> None:
        limit = self._limits.max_body_bytes
        if raw is not None and limit > 0 and len(raw) > limit:
            raise new_error("too_large", "request body too large")

    def _decode(self, branch: str, content_type: str, raw: bytes | None, ctx: Context) -> bytes | None:
        match branch:
            case "json":
                if not raw:
                    return None
                return encode_canonical(normalize_json(raw).payload())
            case "form":
                if raw is None:
                    raise new_error("precondition_failed", "empty form body")
                try:
                    fields = decode_form(raw)
                except ValueError as exc:
                    raise wrap_error(exc, "syntax_error", "failed to parse form data") from exc
                ctx._merge(fields)
                return encode_canonical(ctx.as_dict())
            case "multipart":
                if raw is None:
                    raise new_error("precondition_failed", "empty multipart body")
                boundary = multipart_boundary(content_type)
                ctx._merge(decode_multipart(raw, boundary, max_parts=self._limits.max_parts))
                return encode_canonical(ctx.as_dict())
            case "text":
                if not raw:
                    return None
                return encode_canonical(decode_text(raw))
            case _:
                raise ValueError(f"unknown body branch {branch!r}")


def process_body(
    scope: Mapping[str, Any] | None,
    content_type: str | None,
    body: Any,
    query_params: Mapping[str, Any] | None = None,
    *,
    limits: Limits | None = None,
) -> ProcessResult:
    return BodyProcessor(limits=limits).process(scope, content_type, body, query_params)


def _normalize_limits(limits: Limits) -> Limits:
    def _non_negative(value: Any) -> int:
        try:
            number = int(value or 0)
        except (TypeError, ValueError):
            return 0
        return number if number > 0 else 0

    return Limits(
        max_body_bytes=_non_negative(getattr(limits, "max_body_bytes", 0)),
        max_parts=_non_negative(getattr(limits, "max_parts", 0)),
    )
