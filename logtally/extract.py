"""Extraction of the grouping key from a single JSON log record."""

from __future__ import annotations

import json
from typing import Union

DEFAULT_GROUP_KEY = "type"


class MalformedLine(ValueError):
    """Raised when a line cannot yield a usable group value."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


def _reject_constant(name: str) -> float:
    # json accepts NaN and Infinity, which are not part of JSON.
    raise MalformedLine(f"invalid JSON: {name} is not a valid value")


def extract_type(text: Union[str, bytes], key: str = DEFAULT_GROUP_KEY) -> str:
    """Return the string bound to the top-level ``key`` of a JSON object.

    Every other member of the object is ignored, whatever its type or
    position. Raises ``MalformedLine`` when the record is not valid UTF-8, not
    valid JSON, not an object, or lacks a non-empty string under ``key``.
    """

    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedLine(f"invalid UTF-8 at byte {exc.start}") from exc

    try:
        record = json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as exc:
        raise MalformedLine(f"invalid JSON: {exc.msg} (column {exc.colno})") from exc
    except RecursionError as exc:
        raise MalformedLine("invalid JSON: nesting too deep") from exc

    if not isinstance(record, dict):
        raise MalformedLine(f"expected a JSON object, got {type(record).__name__}")
    if key not in record:
        raise MalformedLine(f"missing '{key}' field")

    value = record[key]
    if not isinstance(value, str):
        raise MalformedLine(f"'{key}' field must be a string, got {type(value).__name__}")
    if not value:
        raise MalformedLine(f"'{key}' field is empty")
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise MalformedLine(f"'{key}' field contains an unpaired surrogate escape") from exc
    return value


__all__ = ["DEFAULT_GROUP_KEY", "MalformedLine", "extract_type"]
