from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

FieldValue = str | list[str]

USER_CONTEXT_KEY = "UserContext"


@dataclass(slots=True)
class Context:
    """Request-scoped key/value store of query parameters and decoded fields.

    A value is either a single string or, for fields repeated in the body, the
    ordered list of every occurrence.
    """

    query: dict[str, FieldValue] = field(default_factory=dict)

    def get(self, key: str) -> str:
        """Return the scalar value for ``key``.

        Missing keys yield ``""``, and multi-valued keys yield their first
        value, so absence and an empty value look the same to callers.
        """

        value = self.query.get(key)
        if isinstance(value, list):
            return value[0] if value else ""
        if isinstance(value, str):
            return value
        return ""

    def values(self, key: str) -> list[str]:
        value = self.query.get(key)
        if isinstance(value, list):
            return list(value)
        if isinstance(value, str):
            return [value]
        return []

    # Mutation is reserved for the processor while a body is being decoded;
    # downstream readers only use the accessors.
    def _set(self, key: str, value: FieldValue) -> None:
        self.query[str(key)] = list(value) if isinstance(value, list) else str(value)

    def _merge(self, fields: Mapping[str, FieldValue]) -> None:
        for key, value in fields.items():
            self._set(key, value)

    def as_dict(self) -> dict[str, FieldValue]:
        return {k: (list(v) if isinstance(v, list) else v) for k, v in self.query.items()}

    def __contains__(self, key: object) -> bool:
        return key in self.query

    def __len__(self) -> int:
        return len(self.query)


def new_context(query_params: Mapping[str, Any] | None = None) -> Context:
    ctx = Context()
    for key, value in (query_params or {}).items():
        ctx.query[str(key)] = str(value)
    return ctx


def user_context(scope: Any, key: str = USER_CONTEXT_KEY) -> Context:
    """Look up the Context stored in a request scope.

    Returns a fresh empty Context when the scope has none or holds something
    else under ``key``.
    """

    if isinstance(scope, Mapping):
        value = scope.get(key)
        if isinstance(value, Context):
            return value
    return Context()
