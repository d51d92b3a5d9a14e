from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Literal

ErrorType = Literal[
    "precondition_failed",
    "syntax_error",
    "shape_error",
    "serialization_error",
    "too_large",
]


@dataclass(slots=True)
class BodyError(Exception):
    type: ErrorType
    message: str
    cause: Exception | None = None

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


def new_error(error_type: ErrorType, message: str) -> BodyError:
    return BodyError(type=error_type, message=str(message))


def wrap_error(cause: Exception, error_type: ErrorType, message: str) -> BodyError:
    err = BodyError(type=error_type, message=str(message), cause=cause)
    err.__cause__ = cause
    return err


def app_error_code(exc: Exception) -> str:
    if not isinstance(exc, BodyError):
        return "app.internal"
    match exc.type:
        case "too_large":
            return "app.too_large"
        case _:
            return "app.bad_request"


def status_for_error(exc: Exception) -> int:
    match app_error_code(exc):
        case "app.bad_request":
            return 400
        case "app.too_large":
            return 413
        case _:
            return 500


def error_body(exc: Exception) -> bytes:
    """Render an error as the JSON envelope hosts return to clients."""

    error: dict[str, str] = {"code": app_error_code(exc)}
    if isinstance(exc, BodyError):
        error["message"] = str(exc)
        error["type"] = exc.type
    else:
        error["message"] = "internal error"

    return json.dumps(
        {"error": error},
        separators=(",", ":"),
        ensure_ascii=False,
        sort_keys=True,
    ).encode("utf-8", errors="replace")
