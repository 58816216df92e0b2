"""Parsing and formatting helpers for request values.

Every helper raises InvalidArgument on malformed input so normalization can
fail before any persistence collaborator is called.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, TypeVar
from urllib.parse import urlsplit
from uuid import UUID

from metacat.core.errors import InvalidArgument

E = TypeVar("E", bound=Enum)


def parse_enum(enum_cls: type[E], raw: Any) -> E:
    """Return the member of `enum_cls` named `raw` (case-sensitive)."""
    if isinstance(raw, enum_cls):
        return raw
    if not isinstance(raw, str):
        raise InvalidArgument(f"{enum_cls.__name__} must be a string, got {raw!r}.")
    try:
        return enum_cls[raw.strip()]
    except KeyError as exc:
        allowed = ", ".join(m.name for m in enum_cls)
        raise InvalidArgument(
            f"Unknown {enum_cls.__name__} '{raw}' (expected one of: {allowed})."
        ) from exc


def parse_uri(raw: Any, *, label: str = "URI") -> str:
    """
    Validate an absolute URI and return it stripped of surrounding whitespace.

    A URI is accepted when it has a scheme and either a network location or a
    path (`jdbc:postgresql://host/db`, `file:///tmp/x`, `kafka://broker:9092`).
    """
    if not isinstance(raw, str) or not raw.strip():
        raise InvalidArgument(f"{label} must be a non-empty string, got {raw!r}.")
    value = raw.strip()
    if any(ch.isspace() for ch in value):
        raise InvalidArgument(f"{label} '{value}' must not contain whitespace.")
    try:
        parts = urlsplit(value)
    except ValueError as exc:
        raise InvalidArgument(f"Malformed {label} '{value}': {exc}") from exc
    if not parts.scheme or not (parts.netloc or parts.path):
        raise InvalidArgument(f"{label} '{value}' must be absolute.")
    return value


def parse_uuid(raw: Any) -> UUID:
    """Parse a canonical UUID string."""
    if isinstance(raw, UUID):
        return raw
    if not isinstance(raw, str):
        raise InvalidArgument(f"Run id must be a string, got {raw!r}.")
    try:
        return UUID(raw.strip())
    except ValueError as exc:
        raise InvalidArgument(f"Malformed run id '{raw}'.") from exc


def parse_instant(raw: Any) -> datetime:
    """
    Parse an ISO-8601 instant into an aware UTC datetime.

    The offset is mandatory (`Z` or `+hh:mm`); local date-times without an
    offset are rejected because they do not denote an instant.
    """
    if isinstance(raw, datetime):
        value = raw
    elif isinstance(raw, str):
        text = raw.strip()
        if text.endswith(("Z", "z")):
            text = f"{text[:-1]}+00:00"
        try:
            value = datetime.fromisoformat(text)
        except ValueError as exc:
            raise InvalidArgument(f"Malformed instant '{raw}'.") from exc
    else:
        raise InvalidArgument(f"Instant must be a string, got {raw!r}.")
    if value.tzinfo is None or value.utcoffset() is None:
        raise InvalidArgument(f"Instant '{raw}' must carry a UTC offset.")
    return value.astimezone(timezone.utc)


def format_instant(value: datetime) -> str:
    """
    Render an aware datetime as an ISO-8601 instant in UTC.

    Fractional seconds are printed only when present: `...:05Z`,
    `...:05.250Z` or `...:05.250001Z`.
    """
    utc = value.astimezone(timezone.utc)
    text = utc.strftime("%Y-%m-%dT%H:%M:%S")
    if utc.microsecond:
        if utc.microsecond % 1000 == 0:
            text += f".{utc.microsecond // 1000:03d}"
        else:
            text += f".{utc.microsecond:06d}"
    return f"{text}Z"


def format_optional_instant(value: datetime | None) -> str | None:
    return None if value is None else format_instant(value)


def millis_between(start: datetime, end: datetime) -> int:
    """Whole milliseconds from `start` to `end`, truncated toward zero."""
    delta: timedelta = end - start
    micros = (delta.days * 86_400 + delta.seconds) * 1_000_000 + delta.microseconds
    millis = abs(micros) // 1000
    return millis if micros >= 0 else -millis


def parse_string_map(raw: Any, *, label: str) -> dict[str, str]:
    """Validate an opaque string-to-string mapping (job context, run args)."""
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise InvalidArgument(f"{label} must be an object, got {raw!r}.")
    out: dict[str, str] = {}
    for key, value in raw.items():
        if not isinstance(key, str) or not isinstance(value, str):
            raise InvalidArgument(f"{label} must map strings to strings.")
        out[key] = value
    return out
