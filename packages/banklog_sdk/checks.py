"""Input normalization for entity timestamps and query filter values."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, datetime, time
from typing import Any

from packages.banklog_sdk.errors import validation_error


def parse_datetime(value: object, *, field_name: str = "created") -> datetime:
    """Parse an API date or datetime value into a ``datetime``.

    Accepts ``datetime`` (returned unchanged), ``date`` (midnight) and ISO-8601
    strings such as ``2020-03-10``, ``2020-03-10 10:30:00.000`` or
    ``2020-03-10T10:30:00.000000+00:00``.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if not isinstance(value, str):
        raise validation_error(
            "parse", f"{field_name} must be a date or datetime string, got {value!r}"
        )

    text = value.strip()
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise validation_error(
            "parse", f"{field_name} is not a valid date or datetime: {value!r}"
        ) from None


def check_date(value: object, *, field_name: str) -> date | None:
    """Normalize one optional filter date; ``None`` stays ``None``."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.strip()).date()
        except ValueError:
            pass
    raise validation_error("filter", f"{field_name} must be a date, got {value!r}")


def check_limit(value: object) -> int | None:
    """Normalize one optional result limit."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise validation_error("filter", f"limit must be an integer, got {value!r}")
    if value < 0:
        raise validation_error("filter", f"limit must not be negative, got {value}")
    return value


def check_string_set(value: object, *, field_name: str) -> frozenset[str] | None:
    """Normalize one optional string collection; empty collections become ``None``."""
    if value is None:
        return None
    if isinstance(value, str):
        items: Iterable[object] = (value,)
    elif isinstance(value, Iterable) and not isinstance(value, (bytes, dict)):
        items = value
    else:
        raise validation_error(
            "filter", f"{field_name} must be a collection of strings, got {value!r}"
        )

    normalized: set[str] = set()
    for item in items:
        if not isinstance(item, str) or item.strip() == "":
            raise validation_error(
                "filter", f"{field_name} must contain non-empty strings, got {item!r}"
            )
        normalized.add(item.strip())
    return frozenset(normalized) if normalized else None


def require_text(data: Mapping[str, Any], key: str) -> str:
    """Return one required string field of an API record."""
    value = data.get(key)
    if not isinstance(value, str) or value == "":
        raise validation_error("parse", f"{key} must be a non-empty string, got {value!r}")
    return value


def check_id(value: object, *, operation: str) -> str:
    """Require one non-empty entity identifier."""
    if not isinstance(value, str) or value.strip() == "":
        raise validation_error(operation, f"id must be a non-empty string, got {value!r}")
    return value.strip()
