from __future__ import annotations

import re

from python_multipart.multipart import parse_options_header

from bodynorm.errors import new_error, wrap_error

MIME_APPLICATION_JSON = "application/json"
MIME_APPLICATION_FORM = "application/x-www-form-urlencoded"
MIME_MULTIPART_FORM = "multipart/form-data"
MIME_TEXT_PLAIN = "text/plain"

# Checked in this order; the first token contained in the header wins.
RECOGNIZED_TYPES: tuple[str, ...] = (
    MIME_APPLICATION_JSON,
    MIME_APPLICATION_FORM,
    MIME_MULTIPART_FORM,
    MIME_TEXT_PLAIN,
)

_TOKEN = r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+"
_MEDIA_TYPE_RE = re.compile(rf"^{_TOKEN}/{_TOKEN}$")


def match_content_type(content_type: str | None) -> str:
    """Return the recognized MIME token contained in ``content_type``, or ""."""

    value = str(content_type or "")
    for token in RECOGNIZED_TYPES:
        if token in value:
            return token
    return ""


def parse_media_type(content_type: str) -> tuple[str, dict[str, str]]:
    value = str(content_type or "").strip()
    try:
        ctype, options = parse_options_header(value)
        media_type = ctype.decode("latin-1").strip().lower()
        params = {k.decode("latin-1").lower(): v.decode("latin-1") for k, v in options.items()}
    except (AssertionError, UnicodeError, ValueError) as exc:
        raise wrap_error(exc, "syntax_error", "failed to parse content type") from exc

    if not _MEDIA_TYPE_RE.match(media_type):
        raise wrap_error(
            ValueError(f"invalid media type {media_type!r}"),
            "syntax_error",
            "failed to parse content type",
        )
    return media_type, params


def multipart_boundary(content_type: str) -> str:
    _, params = parse_media_type(content_type)
    boundary = params.get("boundary", "")
    if not boundary:
        raise new_error("precondition_failed", "no boundary in multipart content type")
    return boundary
