"""Serialize API values into scalars a Grist cell can hold.

- lists: elements joined with ";"
- dicts: compact JSON text
- dates: ISO-8601 strings
- str / int / float / bool / None: unchanged
"""
import json
from datetime import date, datetime, timezone
from typing import Any

LIST_SEPARATOR = ";"


def _isoformat(value: date) -> str:
    """ISO-8601 text; aware datetimes are rendered in UTC with a Z suffix."""
    if isinstance(value, datetime) and value.tzinfo is not None:
        utc = value.astimezone(timezone.utc)
        return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"
    return value.isoformat()


def _json_default(value: Any) -> Any:
    if isinstance(value, date):
        return _isoformat(value)
    if isinstance(value, (set, frozenset)):
        return list(value)
    return str(value)


def to_json(value: Any) -> str:
    """Compact JSON text, same shape JavaScript's JSON.stringify produces."""
    try:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=_json_default)
    except (TypeError, ValueError, RecursionError):
        # non-string keys or circular references
        return str(value)


def _serialize_item(item: Any) -> str:
    if isinstance(item, (dict, list, tuple)):
        return to_json(item)
    if isinstance(item, date):
        return _isoformat(item)
    if isinstance(item, bool):
        return "true" if item else "false"
    if item is None:
        return "null"
    return str(item)


def serialize_value(value: Any) -> Any:
    """
    Serialize a value for insertion into Grist.

    Args:
        value: Any value read from a source record

    Returns:
        A transport-safe scalar (str, int, float, bool or None)

    Examples:
        serialize_value(["a", "b", "c"])  # "a;b;c"
        serialize_value({"x": 1, "y": 2})  # '{"x":1,"y":2}'
        serialize_value(date(2024, 1, 15))  # "2024-01-15"
    """
    if value is None:
        return None

    if isinstance(value, date):
        return _isoformat(value)

    if isinstance(value, (list, tuple)):
        if not value:
            return ""
        return LIST_SEPARATOR.join(_serialize_item(item) for item in value)

    if isinstance(value, dict):
        return to_json(value)

    if isinstance(value, (str, int, float, bool)):
        return value

    # Anything else (sets, decimals, custom objects) gets its text form
    if isinstance(value, (set, frozenset)):
        return LIST_SEPARATOR.join(_serialize_item(item) for item in value) if value else ""
    return str(value)
