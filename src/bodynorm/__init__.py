"""Request body normalization: any supported content type in, canonical JSON out."""

from __future__ import annotations

from bodynorm.context import USER_CONTEXT_KEY, Context, FieldValue, new_context, user_context
from bodynorm.errors import BodyError, ErrorType, app_error_code, error_body, new_error, status_for_error, wrap_error
from bodynorm.form import decode_form
from bodynorm.jsonbody import JSONObject, JSONObjectList, JSONPayload, encode_canonical, normalize_json
from bodynorm.logger import NoOpLogger, StructuredLogger, get_logger, set_logger
from bodynorm.mime import (
    MIME_APPLICATION_FORM,
    MIME_APPLICATION_JSON,
    MIME_MULTIPART_FORM,
    MIME_TEXT_PLAIN,
    match_content_type,
    multipart_boundary,
    parse_media_type,
)
from bodynorm.multipart import decode_multipart
from bodynorm.processor import BodyProcessor, Limits, ProcessResult, process_body
from bodynorm.request import Request, content_type_of, process_request
from bodynorm.testkit import FileField, RecordingLogger, encode_form, encode_multipart

__all__ = [
    "BodyError",
    "BodyProcessor",
    "Context",
    "ErrorType",
    "FieldValue",
    "FileField",
    "JSONObject",
    "JSONObjectList",
    "JSONPayload",
    "Limits",
    "MIME_APPLICATION_FORM",
    "MIME_APPLICATION_JSON",
    "MIME_MULTIPART_FORM",
    "MIME_TEXT_PLAIN",
    "NoOpLogger",
    "ProcessResult",
    "RecordingLogger",
    "Request",
    "StructuredLogger",
    "USER_CONTEXT_KEY",
    "app_error_code",
    "content_type_of",
    "decode_form",
    "decode_multipart",
    "encode_canonical",
    "encode_form",
    "encode_multipart",
    "error_body",
    "get_logger",
    "match_content_type",
    "multipart_boundary",
    "new_context",
    "new_error",
    "normalize_json",
    "parse_media_type",
    "process_body",
    "process_request",
    "set_logger",
    "status_for_error",
    "user_context",
    "wrap_error",
]
