"""Helpers to normalise timestamps coming from stores and external APIs."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional, Union

TimestampLike = Union[datetime, str, int, float, None]

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class InvalidTimestamp(ValueError):
    """Raised when a timestamp string cannot be parsed."""


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    """Interpret naive datetimes as UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def parse_timestamp(value: TimestampLike) -> Optional[datetime]:
    """Return an aware datetime, or ``None`` when the value is absent.

    ISO-8601 strings are accepted, including the trailing ``Z`` produced by
    JavaScript's ``toISOString``. Numbers are epoch milliseconds. Anything else
    that cannot be read raises ``InvalidTimestamp``.
    """

    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_aware(value)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return _EPOCH + timedelta(milliseconds=value)
        except (OverflowError, ValueError) as exc:
            raise InvalidTimestamp(f"Epoch milliseconds out of range: {value!r}") from exc
    if not isinstance(value, str):
        raise InvalidTimestamp(f"Unsupported timestamp type: {type(value).__name__}")

    text = value.strip()
    if not text:
        return None
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise InvalidTimestamp(f"Unrecognised timestamp: {value!r}") from exc
    return ensure_aware(parsed)


def format_timestamp(value: datetime) -> str:
    """Serialise as ISO-8601 in UTC with millisecond precision."""

    aware = ensure_aware(value).astimezone(timezone.utc)
    return aware.isoformat(timespec="milliseconds").replace("+00:00", "Z")


__all__ = [
    "InvalidTimestamp",
    "TimestampLike",
    "ensure_aware",
    "format_timestamp",
    "parse_timestamp",
    "utc_now",
]
