"""Turn heterogeneous backend failures into one human-readable string.

Failures reach the view in several shapes: `BackendError` with a decoded
body, plain exceptions, raw mappings coming straight off a JSON payload.
`normalize_error` reads all of them the same way, through `_field`.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

UNKNOWN_ERROR = "Unknown error"

_MISSING = object()


def _field(obj: Any, name: str) -> Any:
    """Read `name` as a mapping key or an attribute; `_MISSING` when absent."""

    if isinstance(obj, Mapping):
        return obj.get(name, _MISSING)
    return getattr(obj, name, _MISSING)


def _present(value: Any) -> bool:
    return value is not _MISSING and value is not None and value != ""


def _message_of(obj: Any) -> str | None:
    message = _field(obj, "message")
    if _present(message):
        return str(message)
    if isinstance(obj, BaseException):
        text = str(obj)
        return text or None
    return None


def _sub_message(item: Any) -> str:
    message = _field(item, "message")
    return str(message) if _present(message) else ""


def normalize_error(err: Any) -> str:
    """Map `err` to a display string. Never raises.

    First match wins:
    1. `err.body` is a list/tuple: sub-error messages joined with ", ".
    2. `err.body.message`.
    3. `err.message` (or the text of an exception).
    4. JSON serialization of `err`.
    5. "Unknown error".
    """

    try:
        if err is None:
            return UNKNOWN_ERROR
        if isinstance(err, (Mapping, list, tuple, str)) and not err:
            return UNKNOWN_ERROR

        body = _field(err, "body")
        if isinstance(body, (list, tuple)):
            return ", ".join(_sub_message(item) for item in body)
        if _present(body) and not isinstance(body, str):
            body_message = _field(body, "message")
            if _present(body_message):
                return str(body_message)

        message = _message_of(err)
        if message:
            return message

        return json.dumps(err, ensure_ascii=False)
    except Exception:
        return UNKNOWN_ERROR
